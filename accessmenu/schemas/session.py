"""
Request and response bodies for the order session endpoints.
"""
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from accessmenu.models.order import LineItemKey, ProtocolState, StaffResponse
from accessmenu.models.results import OperationResult
from accessmenu.services.order_session import LineItemView, SessionSnapshot


class LineItemKeyModel(BaseModel):
    dish_id: str
    variant_id: Optional[str] = None
    note: str = ""

    def to_key(self) -> LineItemKey:
        return LineItemKey.of(self.dish_id, self.variant_id, self.note)

    @classmethod
    def from_key(cls, key: LineItemKey) -> "LineItemKeyModel":
        return cls(dish_id=key.dish_id, variant_id=key.variant_id, note=key.note)


class CreateSessionRequest(BaseModel):
    menu_id: str
    language: str = "en"


class AddItemRequest(BaseModel):
    dish_id: str
    variant_id: Optional[str] = None
    note: Optional[str] = None


class UpdateQuantityRequest(BaseModel):
    key: LineItemKeyModel
    quantity: int


class RemoveItemRequest(BaseModel):
    key: LineItemKeyModel


class AttachNoteRequest(BaseModel):
    key: LineItemKeyModel
    note: str


class UpdateVariantRequest(BaseModel):
    key: LineItemKeyModel
    variant_id: str


class StaffResponseRequest(BaseModel):
    key: LineItemKeyModel
    response: StaffResponse


class LineItemOut(BaseModel):
    key: LineItemKeyModel
    dish_name: str
    variant_name: Optional[str] = None
    quantity: int
    note: str
    response_state: ProtocolState
    responded_at: Optional[datetime] = None
    unit_price: float
    line_total: float

    @classmethod
    def from_view(cls, view: LineItemView) -> "LineItemOut":
        return cls(
            key=LineItemKeyModel.from_key(view.key),
            dish_name=view.dish_name,
            variant_name=view.variant_name,
            quantity=view.quantity,
            note=view.note,
            response_state=view.response_state,
            responded_at=view.responded_at,
            unit_price=view.unit_price,
            line_total=view.line_total,
        )


class SessionOut(BaseModel):
    session_id: str
    menu_id: str
    language: str
    state: str
    items: List[LineItemOut] = Field(default_factory=list)
    subtotal: float
    item_count: int
    question_count: int
    unanswered_count: int
    all_answered: bool
    auto_return_pending: bool

    @classmethod
    def from_snapshot(cls, snapshot: SessionSnapshot) -> "SessionOut":
        return cls(
            session_id=snapshot.session_id,
            menu_id=snapshot.menu_id,
            language=snapshot.language.value,
            state=snapshot.state.value,
            items=[LineItemOut.from_view(v) for v in snapshot.items],
            subtotal=round(snapshot.subtotal, 2),
            item_count=snapshot.item_count,
            question_count=snapshot.question_count,
            unanswered_count=snapshot.unanswered_count,
            all_answered=snapshot.all_answered,
            auto_return_pending=snapshot.auto_return_pending,
        )


class ActionResultOut(BaseModel):
    """Outcome of one session action plus the session after it"""
    outcome: str
    reason: Optional[str] = None
    message: Optional[str] = None
    key: Optional[LineItemKeyModel] = None
    session: SessionOut

    @classmethod
    def build(cls, result: OperationResult, snapshot: SessionSnapshot) -> "ActionResultOut":
        return cls(
            outcome=result.outcome.value,
            reason=result.reason.value if result.reason else None,
            message=result.message,
            key=LineItemKeyModel.from_key(result.key) if result.key else None,
            session=SessionOut.from_snapshot(snapshot),
        )
