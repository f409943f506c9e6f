"""
Cancelable deferred tasks.

A scheduled callback is represented by a ``ScheduledTask`` handle so the
owner can cancel it on dispose. ``AsyncioScheduler`` runs callbacks on the
current event loop; ``ManualScheduler`` keeps a virtual clock that only
moves when ``advance()`` is called.
"""

import asyncio
import itertools
import logging
from abc import ABC, abstractmethod
from typing import Callable, List, Optional


logger = logging.getLogger(__name__)


class ScheduledTask:
    """Handle for a callback registered with a scheduler."""
    
    def __init__(self, callback: Callable[[], None], delay_seconds: float, name: str = ""):
        self.callback = callback
        self.delay_seconds = delay_seconds
        self.name = name or getattr(callback, "__name__", "task")
        self._cancelled = False
        self._done = False
        self._on_cancel: Optional[Callable[[], None]] = None
    
    @property
    def cancelled(self) -> bool:
        return self._cancelled
    
    @property
    def done(self) -> bool:
        return self._done
    
    @property
    def pending(self) -> bool:
        return not (self._cancelled or self._done)
    
    def cancel(self) -> bool:
        """Cancel the task. Returns False if it already ran or was cancelled."""
        if not self.pending:
            return False
        self._cancelled = True
        if self._on_cancel is not None:
            self._on_cancel()
        logger.debug(f"Cancelled scheduled task '{self.name}'")
        return True
    
    def run(self) -> None:
        if not self.pending:
            return
        self._done = True
        try:
            self.callback()
        except Exception as e:
            logger.error(f"Scheduled task '{self.name}' failed: {e}", exc_info=True)


class SchedulerUnavailableError(RuntimeError):
    """Raised when a task is scheduled with no event loop to run it on."""


class TaskScheduler(ABC):
    """Interface shared by the schedulers."""
    
    def __init__(self):
        self._tasks: List[ScheduledTask] = []
    
    @property
    def ready(self) -> bool:
        """Whether ``schedule`` can accept a task right now"""
        return True
    
    @abstractmethod
    def schedule(self, delay_seconds: float, callback: Callable[[], None], name: str = "") -> ScheduledTask:
        """Run ``callback`` once after ``delay_seconds``."""
        pass
    
    def _track(self, task: ScheduledTask) -> None:
        self._tasks = [t for t in self._tasks if t.pending]
        self._tasks.append(task)
    
    def pending_tasks(self) -> List[ScheduledTask]:
        self._tasks = [t for t in self._tasks if t.pending]
        return list(self._tasks)
    
    def cancel_all(self) -> int:
        """Cancel every pending task and return how many were cancelled."""
        count = sum(1 for task in self.pending_tasks() if task.cancel())
        self._tasks = []
        return count


class AsyncioScheduler(TaskScheduler):
    """Schedules callbacks with ``loop.call_later`` on the running loop."""
    
    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None):
        super().__init__()
        self._loop = loop
    
    def _resolve_loop(self) -> Optional[asyncio.AbstractEventLoop]:
        if self._loop is not None:
            return None if self._loop.is_closed() else self._loop
        try:
            return asyncio.get_running_loop()
        except RuntimeError:
            return None
    
    @property
    def ready(self) -> bool:
        return self._resolve_loop() is not None
    
    def schedule(self, delay_seconds: float, callback: Callable[[], None], name: str = "") -> ScheduledTask:
        loop = self._resolve_loop()
        if loop is None:
            raise SchedulerUnavailableError("No event loop available to schedule on")
        task = ScheduledTask(callback, delay_seconds, name)
        handle = loop.call_later(max(0.0, delay_seconds), task.run)
        task._on_cancel = handle.cancel
        self._track(task)
        logger.debug(f"Scheduled task '{task.name}' in {delay_seconds}s")
        return task


class ManualScheduler(TaskScheduler):
    """Virtual-clock scheduler; tasks run only from ``advance()``."""
    
    def __init__(self):
        super().__init__()
        self.now = 0.0
        self._due: dict = {}
        self._sequence = itertools.count()
    
    def schedule(self, delay_seconds: float, callback: Callable[[], None], name: str = "") -> ScheduledTask:
        task = ScheduledTask(callback, delay_seconds, name)
        self._due[id(task)] = (self.now + max(0.0, delay_seconds), next(self._sequence), task)
        task._on_cancel = lambda: self._due.pop(id(task), None)
        self._track(task)
        return task
    
    def advance(self, seconds: float) -> int:
        """Move the clock forward and run every task that became due, in order."""
        self.now += seconds
        ran = 0
        while True:
            due = sorted(
                (entry for entry in self._due.values() if entry[0] <= self.now),
                key=lambda entry: (entry[0], entry[1])
            )
            if not due:
                return ran
            _, _, task = due[0]
            self._due.pop(id(task), None)
            task.run()
            ran += 1


def default_scheduler() -> TaskScheduler:
    """
    Scheduler for code that did not pass one in.
    
    Inside a running event loop this is an ``AsyncioScheduler``; elsewhere
    a ``ManualScheduler`` whose tasks run when the caller advances it.
    """
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        logger.debug("No running event loop; using a manual scheduler")
        return ManualScheduler()
    return AsyncioScheduler()
