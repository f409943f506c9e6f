"""
Unit tests for the order session and registry
"""
import pytest

from accessmenu.config.settings import OrderSettings
from accessmenu.core.exceptions import ErrorCode
from accessmenu.core.scheduler import AsyncioScheduler, ManualScheduler
from accessmenu.models.language import Language
from accessmenu.models.order import ProtocolState
from accessmenu.services.order_session import OrderSession, SessionRegistry
from accessmenu.services.workflow import WorkflowState


def test_unknown_dish_is_rejected(order_session):
    result = order_session.add_item("mango-sticky-rice")
    assert result.rejected
    assert result.reason == ErrorCode.UNKNOWN_DISH
    assert order_session.snapshot().item_count == 0


def test_note_length_limit(order_session):
    ok = order_session.add_item("pad-thai", note="x" * 200)
    too_long = order_session.add_item("pad-thai", note="y" * 201)

    assert ok.applied
    assert too_long.rejected
    assert too_long.reason == ErrorCode.NOTE_TOO_LONG
    assert len(order_session.ledger) == 1


def test_note_limit_is_configurable(menu):
    session = OrderSession(menu, scheduler=ManualScheduler(), order_settings=OrderSettings(max_note_length=5))
    assert session.add_item("pad-thai", note="123456").reason == ErrorCode.NOTE_TOO_LONG
    assert session.add_item("pad-thai", note="  12345  ").applied


def test_non_integer_quantity_is_rejected(order_session):
    key = order_session.add_item("pad-thai").key
    result = order_session.update_quantity(key, 2.5)
    assert result.reason == ErrorCode.INVALID_QUANTITY
    assert order_session.ledger.get(key).quantity == 1


def test_full_staff_round_trip(order_session, scheduler):
    """Question shown to staff, answered, and the menu comes back on its own"""
    key = order_session.add_item("pad-thai", note="Can you make it without egg?").key
    order_session.add_item("spring-rolls")

    assert order_session.show_to_staff().applied
    assert order_session.state == WorkflowState.AWAITING_STAFF

    assert order_session.respond(key, "checking").applied
    assert not order_session.snapshot().auto_return_pending
    assert order_session.respond(key, "yes").applied

    snapshot = order_session.snapshot()
    assert snapshot.all_answered
    assert snapshot.auto_return_pending

    scheduler.advance(1.0)
    assert order_session.state == WorkflowState.BROWSING

    assert order_session.finalize().applied
    assert order_session.state == WorkflowState.FINALIZED


def test_ledger_is_locked_while_awaiting_staff(order_session):
    key = order_session.add_item("pad-thai", note="spicy?").key
    order_session.show_to_staff()

    assert order_session.add_item("green-curry").reason == ErrorCode.INVALID_TRANSITION
    assert order_session.update_quantity(key, 0).reason == ErrorCode.INVALID_TRANSITION
    assert order_session.remove_item(key).reason == ErrorCode.INVALID_TRANSITION
    assert len(order_session.ledger) == 1


def test_respond_only_while_awaiting_staff(order_session):
    key = order_session.add_item("pad-thai", note="spicy?").key
    result = order_session.respond(key, "yes")
    assert result.is_no_op
    assert result.reason == ErrorCode.INVALID_TRANSITION
    assert order_session.ledger.get(key).response_state == ProtocolState.PENDING


def test_attach_note_then_show_to_staff(order_session):
    key = order_session.add_item("green-curry").key
    assert order_session.show_to_staff().is_no_op

    noted = order_session.attach_note(key, "Is it very spicy?").key
    assert order_session.show_to_staff().applied
    assert order_session.snapshot().unanswered_count == 1
    assert order_session.respond(noted, "no").applied


def test_snapshot_contents(order_session):
    order_session.add_item("iced-coffee", variant_id="large")
    order_session.add_item("iced-coffee", variant_id="large")
    order_session.add_item("pad-thai", note="no shrimp?")
    order_session.set_language("zh")

    snapshot = order_session.snapshot()

    assert snapshot.menu_id == "menu-1"
    assert snapshot.language == Language.CHINESE
    assert snapshot.item_count == 3
    assert snapshot.subtotal == pytest.approx(4.5 * 2 + 12.5)
    assert snapshot.question_count == 1
    assert snapshot.unanswered_count == 1
    coffee, pad_thai = snapshot.items
    assert coffee.variant_name == "Large"
    assert coffee.line_total == pytest.approx(9.0)
    assert coffee.dish_name == "Iced Coffee"
    assert pad_thai.dish_name == "泰式炒河粉"
    assert pad_thai.response_state == ProtocolState.PENDING


def test_new_order_after_finalize(order_session):
    order_session.add_item("pad-thai")
    order_session.finalize()
    assert order_session.add_item("green-curry").is_no_op

    assert order_session.start_new_order().applied
    assert order_session.snapshot().item_count == 0
    assert order_session.add_item("green-curry").applied


def test_dispose_cancels_pending_return(order_session, scheduler):
    key = order_session.add_item("pad-thai", note="?").key
    order_session.show_to_staff()
    order_session.respond(key, "yes")
    assert scheduler.pending_tasks()

    order_session.dispose()
    scheduler.advance(5)

    assert scheduler.pending_tasks() == []
    assert order_session.state == WorkflowState.AWAITING_STAFF
    assert order_session.disposed


def test_operations_after_dispose_are_no_ops(order_session):
    order_session.dispose()
    order_session.dispose()

    for result in (
        order_session.add_item("pad-thai"),
        order_session.show_to_staff(),
        order_session.finalize(),
    ):
        assert result.is_no_op
        assert result.reason == ErrorCode.SESSION_DISPOSED


def test_registry_lifecycle(menu):
    registry = SessionRegistry(scheduler_factory=ManualScheduler)
    first = registry.create(menu, Language.SPANISH)
    second = registry.create(menu)

    assert len(registry) == 2
    assert registry.get(first.session_id) is first
    assert first.session_id != second.session_id
    assert first.language == Language.SPANISH

    assert registry.dispose(first.session_id)
    assert not registry.dispose(first.session_id)
    assert first.disposed
    assert registry.get(first.session_id) is None

    assert registry.dispose_all() == 1
    assert second.disposed
    assert len(registry) == 0


def test_default_session_answers_without_event_loop(menu):
    session = OrderSession(menu)
    key = session.add_item("pad-thai", note="no nuts").key
    session.show_to_staff()

    result = session.respond(key, "yes")

    assert result.applied
    assert session.ledger.get(key).response_state == ProtocolState.ANSWERED_YES
    assert session.snapshot().auto_return_pending
    assert isinstance(session.scheduler, ManualScheduler)

    session.scheduler.advance(1.0)
    assert session.state == WorkflowState.BROWSING
    session.dispose()


def test_respond_without_usable_scheduler_changes_nothing(menu):
    session = OrderSession(menu, scheduler=AsyncioScheduler())
    key = session.add_item("pad-thai", note="no nuts").key
    session.show_to_staff()

    result = session.respond(key, "yes")

    assert result.is_no_op
    assert result.reason == ErrorCode.SCHEDULER_UNAVAILABLE
    assert session.ledger.get(key).response_state == ProtocolState.PENDING
    assert session.state == WorkflowState.AWAITING_STAFF
    assert session.continue_browsing().applied


def test_idle_session_expires_and_activity_extends_it(menu):
    scheduler = ManualScheduler()
    session = OrderSession(menu, scheduler=scheduler, order_settings=OrderSettings(idle_timeout_seconds=60))

    scheduler.advance(59)
    assert session.add_item("pad-thai").applied
    scheduler.advance(59)
    assert not session.expired

    scheduler.advance(1)
    assert session.expired
    assert session.disposed
    assert scheduler.pending_tasks() == []
    assert session.add_item("pad-thai").reason == ErrorCode.SESSION_DISPOSED


def test_zero_idle_timeout_never_expires(menu):
    scheduler = ManualScheduler()
    session = OrderSession(menu, scheduler=scheduler, order_settings=OrderSettings(idle_timeout_seconds=0))

    scheduler.advance(86400)

    assert not session.expired
    assert scheduler.pending_tasks() == []
    assert session.add_item("pad-thai").applied


def test_registry_drops_expired_sessions(menu):
    schedulers = []

    def factory():
        schedulers.append(ManualScheduler())
        return schedulers[-1]

    registry = SessionRegistry(order_settings=OrderSettings(idle_timeout_seconds=30), scheduler_factory=factory)
    idle = registry.create(menu)
    busy = registry.create(menu)

    schedulers[0].advance(30)
    schedulers[1].advance(20)
    busy.add_item("green-curry")
    schedulers[1].advance(20)

    assert registry.get(idle.session_id) is None
    assert idle.expired and idle.disposed
    assert registry.get(busy.session_id) is busy
    assert len(registry) == 1
