"""
Screen-level workflow: browsing the menu, device handed to staff, final order.

Transitions are guarded; a move that is not allowed returns a no-op
result. The automatic return to browsing after the last answer is a
cancelable scheduled task so nothing fires after the session is disposed.
"""
import logging
from enum import Enum
from typing import Callable, Optional

from accessmenu.core.scheduler import ScheduledTask, TaskScheduler
from accessmenu.models.results import OperationResult
from accessmenu.services.order_ledger import OrderLedger
from accessmenu.services.question_protocol import all_answered, unanswered_count

logger = logging.getLogger(__name__)


class WorkflowState(str, Enum):
    BROWSING = "browsing"
    AWAITING_STAFF = "awaiting_staff"
    FINALIZED = "finalized"


class WorkflowStateMachine:
    """Top-level state of one ordering session"""

    def __init__(
        self,
        ledger: OrderLedger,
        scheduler: TaskScheduler,
        auto_return_delay_seconds: float = 1.0,
        on_transition: Optional[Callable[[WorkflowState, WorkflowState], None]] = None,
    ):
        self.ledger = ledger
        self.scheduler = scheduler
        self.auto_return_delay_seconds = auto_return_delay_seconds
        self._on_transition = on_transition
        self._state = WorkflowState.BROWSING
        self._was_all_answered = all_answered(ledger)
        self._auto_return: Optional[ScheduledTask] = None
        self._disposed = False
        self.auto_return_count = 0

    @property
    def state(self) -> WorkflowState:
        return self._state

    @property
    def auto_return_pending(self) -> bool:
        return self._auto_return is not None and self._auto_return.pending

    def _move(self, target: WorkflowState, trigger: str) -> OperationResult:
        source = self._state
        self._state = target
        logger.info(
            f"Workflow {source.value} -> {target.value} ({trigger})",
            extra={"from_state": source.value, "to_state": target.value, "trigger": trigger}
        )
        if self._on_transition is not None:
            self._on_transition(source, target)
        return OperationResult.ok(message=f"{source.value}->{target.value}")

    def _reject(self, action: str, why: str) -> OperationResult:
        logger.debug(f"Ignored '{action}' in state {self._state.value}: {why}")
        return OperationResult.invalid_transition(
            f"'{action}' not allowed in state {self._state.value}: {why}"
        )

    def _cancel_auto_return(self) -> None:
        if self._auto_return is not None:
            self._auto_return.cancel()
            self._auto_return = None

    def show_to_staff(self) -> OperationResult:
        """Browsing -> AwaitingStaff; needs at least one open question."""
        if self._disposed:
            return self._reject("show_to_staff", "session disposed")
        if self._state != WorkflowState.BROWSING:
            return self._reject("show_to_staff", "not browsing")
        if unanswered_count(self.ledger) == 0:
            return self._reject("show_to_staff", "no open questions")
        self._was_all_answered = False
        return self._move(WorkflowState.AWAITING_STAFF, "show_to_staff")

    def continue_browsing(self) -> OperationResult:
        """Manual AwaitingStaff -> Browsing, without the display delay."""
        if self._disposed:
            return self._reject("continue", "session disposed")
        if self._state != WorkflowState.AWAITING_STAFF:
            return self._reject("continue", "not awaiting staff")
        self._cancel_auto_return()
        return self._move(WorkflowState.BROWSING, "continue")

    def finalize(self) -> OperationResult:
        """Browsing -> Finalized; every question must be answered."""
        if self._disposed:
            return self._reject("finalize", "session disposed")
        if self._state != WorkflowState.BROWSING:
            return self._reject("finalize", "not browsing")
        if not all_answered(self.ledger):
            return self._reject("finalize", "questions still open")
        return self._move(WorkflowState.FINALIZED, "finalize")

    def start_new_order(self) -> OperationResult:
        """Finalized -> Browsing; clears the ledger."""
        if self._disposed:
            return self._reject("new_order", "session disposed")
        if self._state != WorkflowState.FINALIZED:
            return self._reject("new_order", "order not finalized")
        self.ledger.clear()
        self._was_all_answered = True
        return self._move(WorkflowState.BROWSING, "new_order")

    def evaluate(self) -> bool:
        """
        Re-check the ledger after a staff response.
        
        Schedules the automatic return to browsing on the false -> true edge
        of all-answered while awaiting staff. Returns True when a return was
        scheduled by this call.
        """
        if self._disposed:
            return False
        if not self.scheduler.ready:
            logger.warning("Scheduler unavailable; auto-return not evaluated")
            return False
        answered = all_answered(self.ledger)
        edge = answered and not self._was_all_answered
        self._was_all_answered = answered
        if not edge or self._state != WorkflowState.AWAITING_STAFF or self.auto_return_pending:
            return False
        self._auto_return = self.scheduler.schedule(
            self.auto_return_delay_seconds, self._auto_return_to_browsing, name="auto_return"
        )
        logger.info(f"All questions answered; returning to menu in {self.auto_return_delay_seconds}s")
        return True

    def _auto_return_to_browsing(self) -> None:
        self._auto_return = None
        if self._disposed or self._state != WorkflowState.AWAITING_STAFF:
            return
        self.auto_return_count += 1
        self._move(WorkflowState.BROWSING, "auto_return")

    def dispose(self) -> None:
        """Cancel pending work; later calls are no-ops."""
        self._cancel_auto_return()
        self._disposed = True
