"""
Order line items and the per-item question/answer state.
"""

from dataclasses import dataclass, replace
from datetime import datetime
from enum import Enum
from typing import Optional


class ProtocolState(str, Enum):
    """Question/answer state of one line item"""
    NO_QUESTION = "no_question"
    PENDING = "pending"
    CHECKING = "checking"
    ANSWERED_YES = "answered_yes"
    ANSWERED_NO = "answered_no"
    
    @property
    def is_answered(self) -> bool:
        return self in (ProtocolState.ANSWERED_YES, ProtocolState.ANSWERED_NO)
    
    @property
    def is_open(self) -> bool:
        """Waiting for staff"""
        return self in (ProtocolState.PENDING, ProtocolState.CHECKING)


class StaffResponse(str, Enum):
    """Buttons offered to staff"""
    YES = "yes"
    NO = "no"
    CHECKING = "checking"


@dataclass(frozen=True)
class LineItemKey:
    """Identity deciding whether an add merges into an existing line"""
    dish_id: str
    variant_id: Optional[str] = None
    note: str = ""
    
    @classmethod
    def of(cls, dish_id, variant_id: Optional[str] = None, note: Optional[str] = None) -> "LineItemKey":
        return cls(
            dish_id=str(dish_id),
            variant_id=str(variant_id) if variant_id is not None else None,
            note=(note or "").strip(),
        )
    
    def with_note(self, note: str) -> "LineItemKey":
        return replace(self, note=note)
    
    def with_variant(self, variant_id: Optional[str]) -> "LineItemKey":
        return replace(self, variant_id=variant_id)


@dataclass
class OrderLineItem:
    """One row of the order"""
    dish_id: str
    quantity: int = 1
    variant_id: Optional[str] = None
    note: str = ""
    response_state: ProtocolState = ProtocolState.NO_QUESTION
    responded_at: Optional[datetime] = None
    
    @property
    def key(self) -> LineItemKey:
        return LineItemKey(self.dish_id, self.variant_id, self.note)
    
    @property
    def has_question(self) -> bool:
        return bool(self.note)
