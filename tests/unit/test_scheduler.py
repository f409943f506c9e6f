"""
Unit tests for cancelable scheduling
"""
import asyncio

import pytest

from accessmenu.core.scheduler import (
    AsyncioScheduler,
    ManualScheduler,
    SchedulerUnavailableError,
    default_scheduler,
)


def test_manual_scheduler_runs_due_tasks_in_order():
    scheduler = ManualScheduler()
    calls = []
    scheduler.schedule(2.0, lambda: calls.append("late"))
    scheduler.schedule(1.0, lambda: calls.append("early"))
    scheduler.schedule(1.0, lambda: calls.append("early-second"))

    assert scheduler.advance(0.5) == 0
    assert scheduler.advance(0.5) == 2
    assert calls == ["early", "early-second"]
    assert scheduler.advance(5) == 1
    assert calls[-1] == "late"


def test_cancelled_task_never_runs():
    scheduler = ManualScheduler()
    calls = []
    task = scheduler.schedule(1.0, lambda: calls.append("x"))

    assert task.cancel()
    assert not task.cancel()
    scheduler.advance(10)

    assert calls == []
    assert task.cancelled
    assert not task.done


def test_cancel_all():
    scheduler = ManualScheduler()
    tasks = [scheduler.schedule(i, lambda: None) for i in (1, 2, 3)]
    scheduler.advance(1)

    assert scheduler.cancel_all() == 2
    assert tasks[0].done
    assert all(t.cancelled for t in tasks[1:])
    assert scheduler.pending_tasks() == []


def test_failing_callback_does_not_break_clock():
    scheduler = ManualScheduler()
    calls = []

    def boom():
        raise RuntimeError("boom")

    scheduler.schedule(1, boom)
    scheduler.schedule(1, lambda: calls.append("after"))
    assert scheduler.advance(1) == 2
    assert calls == ["after"]


@pytest.mark.asyncio
async def test_asyncio_scheduler_fires_after_delay():
    scheduler = AsyncioScheduler()
    fired = asyncio.Event()
    task = scheduler.schedule(0.01, fired.set)

    await asyncio.wait_for(fired.wait(), timeout=1.0)
    assert task.done


@pytest.mark.asyncio
async def test_asyncio_scheduler_cancel():
    scheduler = AsyncioScheduler()
    calls = []
    task = scheduler.schedule(0.01, lambda: calls.append(1))
    assert task.cancel()

    await asyncio.sleep(0.05)
    assert calls == []
    assert scheduler.pending_tasks() == []


def test_asyncio_scheduler_outside_a_loop():
    scheduler = AsyncioScheduler()

    assert not scheduler.ready
    with pytest.raises(SchedulerUnavailableError):
        scheduler.schedule(1.0, lambda: None)
    assert scheduler.pending_tasks() == []


def test_default_scheduler_without_loop_is_manual():
    assert isinstance(default_scheduler(), ManualScheduler)


@pytest.mark.asyncio
async def test_default_scheduler_inside_loop_uses_asyncio():
    scheduler = default_scheduler()
    assert isinstance(scheduler, AsyncioScheduler)
    assert scheduler.ready
