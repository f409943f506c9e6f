"""
Order session - one diner's menu, ledger, question handshake and workflow.

The session is the boundary the presentation layer talks to: it checks
preconditions (known dish, note length, workflow state) before touching the
ledger, and returns a typed result for every action.
"""
import logging
import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Dict, List, Optional, Tuple

from accessmenu.config.settings import OrderSettings
from accessmenu.core.exceptions import ErrorCode
from accessmenu.core.scheduler import ScheduledTask, TaskScheduler, default_scheduler
from accessmenu.core.validation import ValidationError, validate_note, validate_quantity
from accessmenu.models.dish import Menu
from accessmenu.models.language import Language
from accessmenu.models.order import LineItemKey, ProtocolState
from accessmenu.models.results import OperationResult
from accessmenu.services.order_ledger import OrderLedger
from accessmenu.services.question_protocol import QuestionAnswerProtocol
from accessmenu.services.workflow import WorkflowState, WorkflowStateMachine

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LineItemView:
    key: LineItemKey
    dish_name: str
    variant_name: Optional[str]
    quantity: int
    note: str
    response_state: ProtocolState
    responded_at: Optional[datetime]
    unit_price: float
    line_total: float


@dataclass(frozen=True)
class SessionSnapshot:
    """Read-only view of a session for rendering"""
    session_id: str
    menu_id: str
    language: Language
    state: WorkflowState
    items: Tuple[LineItemView, ...]
    subtotal: float
    item_count: int
    question_count: int
    unanswered_count: int
    all_answered: bool
    auto_return_pending: bool
    disposed: bool


class OrderSession:
    """Composition of ledger, question protocol and workflow for one diner"""

    def __init__(
        self,
        menu: Menu,
        scheduler: Optional[TaskScheduler] = None,
        order_settings: Optional[OrderSettings] = None,
        language: Language = Language.BASE,
        session_id: Optional[str] = None,
        on_expire: Optional[Callable[["OrderSession"], None]] = None,
    ):
        self.session_id = session_id or uuid.uuid4().hex
        self.menu = menu
        self.language = Language.parse(language)
        self.settings = order_settings or OrderSettings()
        self.scheduler = scheduler or default_scheduler()
        self.ledger = OrderLedger()
        self.protocol = QuestionAnswerProtocol(self.ledger)
        self.workflow = WorkflowStateMachine(
            self.ledger,
            self.scheduler,
            auto_return_delay_seconds=self.settings.auto_return_delay_seconds,
        )
        self._disposed = False
        self._expired = False
        self._on_expire = on_expire
        self._idle_task: Optional[ScheduledTask] = None
        self.last_activity = datetime.utcnow()
        self._schedule_idle_expiry()

    @property
    def state(self) -> WorkflowState:
        return self.workflow.state

    @property
    def disposed(self) -> bool:
        return self._disposed

    @property
    def expired(self) -> bool:
        return self._expired

    def _schedule_idle_expiry(self) -> None:
        if self._idle_task is not None:
            self._idle_task.cancel()
            self._idle_task = None
        timeout = self.settings.idle_timeout_seconds
        if timeout <= 0 or self._disposed or not self.scheduler.ready:
            return
        self._idle_task = self.scheduler.schedule(timeout, self._expire, name="idle_expiry")

    def touch(self) -> None:
        """Record activity and restart the idle timer"""
        self.last_activity = datetime.utcnow()
        self._schedule_idle_expiry()

    def _expire(self) -> None:
        self._idle_task = None
        if self._disposed:
            return
        self._expired = True
        logger.info(
            f"Session {self.session_id} expired after {self.settings.idle_timeout_seconds}s idle",
            extra={"session_id": self.session_id}
        )
        if self._on_expire is not None:
            self._on_expire(self)
        else:
            self.dispose()

    def _guard(self, require: Optional[WorkflowState] = None) -> Optional[OperationResult]:
        if self._disposed:
            return OperationResult.no_op(ErrorCode.SESSION_DISPOSED, "Session has been disposed")
        self.touch()
        if require is not None and self.workflow.state != require:
            return OperationResult.invalid_transition(
                f"Action needs state {require.value}, session is {self.workflow.state.value}"
            )
        return None

    def _log_result(self, action: str, result: OperationResult) -> OperationResult:
        if not result.applied:
            logger.info(
                f"{action} -> {result.outcome.value}: {result.message}",
                extra={
                    "session_id": self.session_id,
                    "action": action,
                    "outcome": result.outcome.value,
                    "reason": result.reason.value if result.reason else None,
                }
            )
        return result

    def set_language(self, language) -> None:
        self.language = Language.parse(language)

    # Ledger actions (browsing only)

    def add_item(self, dish_id, variant_id: Optional[str] = None, note: Optional[str] = None) -> OperationResult:
        blocked = self._guard(WorkflowState.BROWSING)
        if blocked:
            return self._log_result("add_item", blocked)
        dish = self.menu.get_dish(dish_id)
        if dish is None:
            return self._log_result(
                "add_item", OperationResult.reject(ErrorCode.UNKNOWN_DISH, f"Unknown dish '{dish_id}'")
            )
        try:
            note = validate_note(note, self.settings.max_note_length)
        except ValidationError as e:
            return self._log_result("add_item", OperationResult.reject(ErrorCode.NOTE_TOO_LONG, str(e)))
        return self._log_result("add_item", self.ledger.add_item(dish, variant_id, note))

    def update_quantity(self, key: LineItemKey, new_quantity: int) -> OperationResult:
        blocked = self._guard(WorkflowState.BROWSING)
        if blocked:
            return self._log_result("update_quantity", blocked)
        try:
            validate_quantity(new_quantity)
        except ValidationError as e:
            return self._log_result(
                "update_quantity", OperationResult.reject(ErrorCode.INVALID_QUANTITY, str(e), key)
            )
        return self._log_result("update_quantity", self.ledger.update_quantity(key, new_quantity))

    def remove_item(self, key: LineItemKey) -> OperationResult:
        blocked = self._guard(WorkflowState.BROWSING)
        if blocked:
            return self._log_result("remove_item", blocked)
        return self._log_result("remove_item", self.ledger.remove_item(key))

    def attach_note(self, key: LineItemKey, note: str) -> OperationResult:
        blocked = self._guard(WorkflowState.BROWSING)
        if blocked:
            return self._log_result("attach_note", blocked)
        try:
            note = validate_note(note, self.settings.max_note_length)
        except ValidationError as e:
            return self._log_result("attach_note", OperationResult.reject(ErrorCode.NOTE_TOO_LONG, str(e), key))
        return self._log_result("attach_note", self.ledger.attach_note(key, note))

    def update_variant(self, key: LineItemKey, variant_id: str) -> OperationResult:
        blocked = self._guard(WorkflowState.BROWSING)
        if blocked:
            return self._log_result("update_variant", blocked)
        return self._log_result("update_variant", self.ledger.update_variant(key, variant_id))

    # Staff handshake

    def respond(self, key: LineItemKey, response) -> OperationResult:
        blocked = self._guard(WorkflowState.AWAITING_STAFF)
        if blocked:
            return self._log_result("respond", blocked)
        if not self.scheduler.ready:
            return self._log_result("respond", OperationResult.no_op(
                ErrorCode.SCHEDULER_UNAVAILABLE, "No scheduler available for the return to the menu"
            ))
        result = self.protocol.respond(key, response)
        if result.applied:
            self.workflow.evaluate()
        return self._log_result("respond", result)

    # Workflow

    def show_to_staff(self) -> OperationResult:
        return self._workflow_action("show_to_staff", self.workflow.show_to_staff)

    def continue_browsing(self) -> OperationResult:
        return self._workflow_action("continue", self.workflow.continue_browsing)

    def finalize(self) -> OperationResult:
        return self._workflow_action("finalize", self.workflow.finalize)

    def start_new_order(self) -> OperationResult:
        return self._workflow_action("new_order", self.workflow.start_new_order)

    def _workflow_action(self, action: str, transition: Callable[[], OperationResult]) -> OperationResult:
        blocked = self._guard()
        if blocked:
            return self._log_result(action, blocked)
        return self._log_result(action, transition())

    def snapshot(self) -> SessionSnapshot:
        views: List[LineItemView] = []
        for item in self.ledger:
            dish = self.ledger.dish_for(item)
            variant = dish.find_variant(item.variant_id) if dish else None
            views.append(LineItemView(
                key=item.key,
                dish_name=dish.display_name(self.language) if dish else item.dish_id,
                variant_name=variant.name if variant else None,
                quantity=item.quantity,
                note=item.note,
                response_state=item.response_state,
                responded_at=item.responded_at,
                unit_price=self.ledger.unit_price(item),
                line_total=self.ledger.line_total(item),
            ))
        return SessionSnapshot(
            session_id=self.session_id,
            menu_id=self.menu.id,
            language=self.language,
            state=self.workflow.state,
            items=tuple(views),
            subtotal=self.ledger.subtotal(),
            item_count=self.ledger.item_count(),
            question_count=self.protocol.question_count(),
            unanswered_count=self.protocol.unanswered_count(),
            all_answered=self.protocol.all_answered(),
            auto_return_pending=self.workflow.auto_return_pending,
            disposed=self._disposed,
        )

    def dispose(self) -> None:
        """Tear down: cancel every scheduled task. Safe to call twice."""
        if self._disposed:
            return
        self.workflow.dispose()
        cancelled = self.scheduler.cancel_all()
        self._disposed = True
        logger.info(
            f"Disposed session {self.session_id} ({cancelled} pending tasks cancelled)",
            extra={"session_id": self.session_id}
        )


class SessionRegistry:
    """In-memory table of live sessions for the HTTP surface"""

    def __init__(
        self,
        order_settings: Optional[OrderSettings] = None,
        scheduler_factory: Callable[[], TaskScheduler] = default_scheduler,
    ):
        self.order_settings = order_settings or OrderSettings()
        self._scheduler_factory = scheduler_factory
        self._sessions: Dict[str, OrderSession] = {}

    def __len__(self) -> int:
        return len(self._sessions)

    def create(self, menu: Menu, language: Language = Language.BASE) -> OrderSession:
        session = OrderSession(
            menu,
            scheduler=self._scheduler_factory(),
            order_settings=self.order_settings,
            language=language,
            on_expire=self._expire,
        )
        self._sessions[session.session_id] = session
        logger.info(f"Created session {session.session_id} for menu {menu.id}")
        return session

    def get(self, session_id: str) -> Optional[OrderSession]:
        return self._sessions.get(session_id)

    def dispose(self, session_id: str) -> bool:
        session = self._sessions.pop(session_id, None)
        if session is None:
            return False
        session.dispose()
        return True

    def _expire(self, session: OrderSession) -> None:
        if self._sessions.get(session.session_id) is session:
            self.dispose(session.session_id)
        else:
            session.dispose()

    def dispose_all(self) -> int:
        count = 0
        for session_id in list(self._sessions):
            if self.dispose(session_id):
                count += 1
        return count
