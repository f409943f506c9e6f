"""
Typed results returned by every mutating operation of the core.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from ..core.exceptions import ErrorCode
from .order import LineItemKey


class Outcome(str, Enum):
    APPLIED = "applied"
    NO_OP = "no_op"
    REJECTED = "rejected"


@dataclass(frozen=True)
class OperationResult:
    """Outcome of a ledger, protocol, workflow or session operation"""
    outcome: Outcome
    reason: Optional[ErrorCode] = None
    message: Optional[str] = None
    key: Optional[LineItemKey] = None
    
    @property
    def applied(self) -> bool:
        return self.outcome == Outcome.APPLIED
    
    @property
    def rejected(self) -> bool:
        return self.outcome == Outcome.REJECTED
    
    @property
    def is_no_op(self) -> bool:
        return self.outcome == Outcome.NO_OP
    
    @classmethod
    def ok(cls, key: Optional[LineItemKey] = None, message: Optional[str] = None) -> "OperationResult":
        return cls(Outcome.APPLIED, key=key, message=message)
    
    @classmethod
    def no_op(
        cls,
        reason: Optional[ErrorCode] = None,
        message: Optional[str] = None,
        key: Optional[LineItemKey] = None
    ) -> "OperationResult":
        return cls(Outcome.NO_OP, reason=reason, message=message, key=key)
    
    @classmethod
    def reject(
        cls,
        reason: ErrorCode,
        message: Optional[str] = None,
        key: Optional[LineItemKey] = None
    ) -> "OperationResult":
        return cls(Outcome.REJECTED, reason=reason, message=message, key=key)
    
    @classmethod
    def invalid_transition(cls, message: str, key: Optional[LineItemKey] = None) -> "OperationResult":
        return cls(Outcome.NO_OP, reason=ErrorCode.INVALID_TRANSITION, message=message, key=key)
