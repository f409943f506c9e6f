"""
Customer question / staff response handshake.

Each line item with a note carries a small state machine. Staff can answer
Yes or No directly, or tap "let me check" first; an answer is final.
"""
import logging
from datetime import datetime
from typing import Callable, Dict, Optional, Tuple

from accessmenu.core.exceptions import ErrorCode
from accessmenu.models.order import LineItemKey, ProtocolState, StaffResponse
from accessmenu.models.results import OperationResult
from accessmenu.services.order_ledger import OrderLedger

logger = logging.getLogger(__name__)


NOTE_ATTACHED = "note_attached"

TRANSITIONS: Dict[Tuple[ProtocolState, str], ProtocolState] = {
    (ProtocolState.NO_QUESTION, NOTE_ATTACHED): ProtocolState.PENDING,
    (ProtocolState.PENDING, StaffResponse.YES.value): ProtocolState.ANSWERED_YES,
    (ProtocolState.PENDING, StaffResponse.NO.value): ProtocolState.ANSWERED_NO,
    (ProtocolState.PENDING, StaffResponse.CHECKING.value): ProtocolState.CHECKING,
    (ProtocolState.CHECKING, StaffResponse.YES.value): ProtocolState.ANSWERED_YES,
    (ProtocolState.CHECKING, StaffResponse.NO.value): ProtocolState.ANSWERED_NO,
}


def next_state(state: ProtocolState, event: str) -> Optional[ProtocolState]:
    """Target state for ``event``, or None when the table has no such move."""
    return TRANSITIONS.get((state, event))


def question_count(ledger: OrderLedger) -> int:
    return sum(1 for item in ledger if item.has_question)


def answered_count(ledger: OrderLedger) -> int:
    return sum(1 for item in ledger if item.has_question and item.response_state.is_answered)


def unanswered_count(ledger: OrderLedger) -> int:
    """Lines still waiting for staff (Pending or Checking)"""
    return sum(1 for item in ledger if item.response_state.is_open)


def all_answered(ledger: OrderLedger) -> bool:
    """True when every line with a note is answered; vacuously true without notes"""
    return all(item.response_state.is_answered for item in ledger if item.has_question)


class QuestionAnswerProtocol:
    """Applies staff responses to the lines of one ledger"""

    def __init__(self, ledger: OrderLedger, clock: Callable[[], datetime] = datetime.utcnow):
        self.ledger = ledger
        self._clock = clock

    def respond(self, key: LineItemKey, response) -> OperationResult:
        """
        Apply a staff response to a line.
        
        Args:
            key: Line item key
            response: StaffResponse or its string value (yes, no, checking)
            
        Returns:
            applied with the new state recorded, rejected for an unknown
            line or response, no-op for a move not in the transition table
        """
        try:
            response = StaffResponse(response)
        except ValueError:
            return OperationResult.reject(
                ErrorCode.VALIDATION_ERROR, f"Unknown staff response '{response}'", key
            )

        item = self.ledger.get(key)
        if item is None:
            return OperationResult.reject(ErrorCode.INVALID_LINE_ITEM, f"No line item {key}", key)

        target = next_state(item.response_state, response.value)
        if target is None:
            logger.info(
                f"Ignored staff response '{response.value}' for line in state {item.response_state.value}",
                extra={"dish_id": key.dish_id, "state": item.response_state.value}
            )
            return OperationResult.invalid_transition(
                f"Cannot apply '{response.value}' to a line in state {item.response_state.value}", key
            )

        item.response_state = target
        item.responded_at = self._clock()
        logger.info(
            f"Line {key.dish_id} moved to {target.value}",
            extra={"dish_id": key.dish_id, "state": target.value}
        )
        return OperationResult.ok(key)

    def unanswered_count(self) -> int:
        return unanswered_count(self.ledger)

    def all_answered(self) -> bool:
        return all_answered(self.ledger)

    def question_count(self) -> int:
        return question_count(self.ledger)

    def answered_count(self) -> int:
        return answered_count(self.ledger)
