"""
Order session endpoints.

A session holds one diner's order, the questions they want to show to
staff and the ordering workflow. Action endpoints answer with the
outcome and the session after it:

- applied   -> status "ok"
- no-op     -> status "no_op", reason in ``error``
- rejected  -> HTTP 422 with a StandardErrorResponse body
"""

from fastapi import APIRouter, Depends
import logging

from accessmenu.core.dependencies import (
    get_menu_service,
    get_order_session,
    get_session_registry,
    resolve_language
)
from accessmenu.core.exceptions import (
    CatalogUnavailableError,
    SessionNotFoundError,
    ValidationRejectedError
)
from accessmenu.models.results import OperationResult
from accessmenu.schemas.base import Envelope, Message, StandardErrorResponse
from accessmenu.schemas.session import (
    ActionResultOut,
    AddItemRequest,
    AttachNoteRequest,
    CreateSessionRequest,
    RemoveItemRequest,
    SessionOut,
    StaffResponseRequest,
    UpdateQuantityRequest,
    UpdateVariantRequest
)
from accessmenu.services.menu_service import MenuService
from accessmenu.services.order_session import OrderSession, SessionRegistry

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1", tags=["sessions"])

_ERRORS = {
    404: {"model": StandardErrorResponse, "description": "Unknown session"},
    422: {"model": StandardErrorResponse, "description": "Action rejected"}
}

WORKFLOW_ACTIONS = {
    "show-to-staff": OrderSession.show_to_staff,
    "continue": OrderSession.continue_browsing,
    "finalize": OrderSession.finalize,
    "new-order": OrderSession.start_new_order,
}


def _action_response(session: OrderSession, result: OperationResult) -> Envelope[ActionResultOut]:
    if result.rejected:
        raise ValidationRejectedError(
            result.message or "Action rejected",
            error_code=result.reason,
            details={
                'session_id': session.session_id,
                'outcome': result.outcome.value
            }
        )
    body = ActionResultOut.build(result, session.snapshot())
    if result.is_no_op:
        return Envelope(
            status="no_op",
            data=body,
            error=result.reason.value if result.reason else None
        )
    return Envelope(status="ok", data=body)


@router.post("/sessions", response_model=Envelope[SessionOut], status_code=201, responses={
    400: {"model": StandardErrorResponse, "description": "Unsupported language"},
    503: {"model": StandardErrorResponse, "description": "Catalog unavailable"}
})
async def create_session(
    body: CreateSessionRequest,
    registry: SessionRegistry = Depends(get_session_registry),
    menu_service: MenuService = Depends(get_menu_service)
) -> Envelope[SessionOut]:
    """Start ordering from a menu."""
    language = resolve_language(body.language)
    menu = await menu_service.get_menu(body.menu_id)
    if menu is None:
        raise CatalogUnavailableError(body.menu_id)
    session = registry.create(menu, language)
    return Envelope(status="ok", data=SessionOut.from_snapshot(session.snapshot()))


@router.get("/sessions/{session_id}", response_model=Envelope[SessionOut], responses=_ERRORS)
async def get_session(session: OrderSession = Depends(get_order_session)) -> Envelope[SessionOut]:
    return Envelope(status="ok", data=SessionOut.from_snapshot(session.snapshot()))


@router.delete("/sessions/{session_id}", response_model=Envelope[Message], responses=_ERRORS)
async def delete_session(
    session_id: str,
    registry: SessionRegistry = Depends(get_session_registry)
) -> Envelope[Message]:
    """Dispose a session; its pending timers are cancelled."""
    if not registry.dispose(session_id):
        raise SessionNotFoundError(session_id)
    return Envelope(status="ok", data=Message(message=f"Session {session_id} disposed"))


@router.post("/sessions/{session_id}/items", response_model=Envelope[ActionResultOut], responses=_ERRORS)
async def add_item(
    body: AddItemRequest,
    session: OrderSession = Depends(get_order_session)
) -> Envelope[ActionResultOut]:
    """Add one unit of a dish, merging with an identical line."""
    return _action_response(session, session.add_item(body.dish_id, body.variant_id, body.note))


@router.post("/sessions/{session_id}/items/quantity", response_model=Envelope[ActionResultOut], responses=_ERRORS)
async def update_quantity(
    body: UpdateQuantityRequest,
    session: OrderSession = Depends(get_order_session)
) -> Envelope[ActionResultOut]:
    """Set a line's quantity; zero or less removes the line."""
    return _action_response(session, session.update_quantity(body.key.to_key(), body.quantity))


@router.post("/sessions/{session_id}/items/remove", response_model=Envelope[ActionResultOut], responses=_ERRORS)
async def remove_item(
    body: RemoveItemRequest,
    session: OrderSession = Depends(get_order_session)
) -> Envelope[ActionResultOut]:
    return _action_response(session, session.remove_item(body.key.to_key()))


@router.post("/sessions/{session_id}/items/note", response_model=Envelope[ActionResultOut], responses=_ERRORS)
async def attach_note(
    body: AttachNoteRequest,
    session: OrderSession = Depends(get_order_session)
) -> Envelope[ActionResultOut]:
    """Attach a question for staff to a line that has none."""
    return _action_response(session, session.attach_note(body.key.to_key(), body.note))


@router.post("/sessions/{session_id}/items/variant", response_model=Envelope[ActionResultOut], responses=_ERRORS)
async def update_variant(
    body: UpdateVariantRequest,
    session: OrderSession = Depends(get_order_session)
) -> Envelope[ActionResultOut]:
    return _action_response(session, session.update_variant(body.key.to_key(), body.variant_id))


@router.post("/sessions/{session_id}/responses", response_model=Envelope[ActionResultOut], responses=_ERRORS)
async def respond(
    body: StaffResponseRequest,
    session: OrderSession = Depends(get_order_session)
) -> Envelope[ActionResultOut]:
    """Record a staff answer (yes / no / checking) to a line's question."""
    return _action_response(session, session.respond(body.key.to_key(), body.response))


@router.post("/sessions/{session_id}/workflow/{action}", response_model=Envelope[ActionResultOut], responses={
    **_ERRORS,
    422: {"model": StandardErrorResponse, "description": "Action rejected or unknown action"}
})
async def workflow_action(
    action: str,
    session: OrderSession = Depends(get_order_session)
) -> Envelope[ActionResultOut]:
    """Move the ordering workflow: show-to-staff, continue, finalize or new-order."""
    transition = WORKFLOW_ACTIONS.get(action)
    if transition is None:
        raise ValidationRejectedError(
            f"Unknown workflow action '{action}'",
            details={'allowed_actions': list(WORKFLOW_ACTIONS)}
        )
    return _action_response(session, transition(session))
