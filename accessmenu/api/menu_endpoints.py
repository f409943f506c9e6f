"""
Menu browsing endpoints.

- GET /api/v1/menus/{menu_id}: localized, filtered, section-grouped menu
"""

from fastapi import APIRouter, Depends, Query
from typing import List, Optional
import logging

from accessmenu.core.dependencies import get_menu_service, get_request_id, resolve_language
from accessmenu.core.exceptions import CatalogUnavailableError
from accessmenu.schemas.base import Envelope, StandardErrorResponse
from accessmenu.schemas.menu import MenuViewOut
from accessmenu.services.menu_service import MenuService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1", tags=["menus"])


@router.get(
    "/menus/{menu_id}",
    response_model=Envelope[MenuViewOut],
    responses={
        400: {"model": StandardErrorResponse, "description": "Unsupported language"},
        503: {"model": StandardErrorResponse, "description": "Catalog unavailable"}
    }
)
async def get_menu(
    menu_id: str,
    language: str = Query("en", description="Display language"),
    exclude_allergens: Optional[List[str]] = Query(None, description="Hide dishes containing any of these"),
    require_tags: Optional[List[str]] = Query(None, description="Show only dishes carrying all of these"),
    q: Optional[str] = Query(None, max_length=200, description="Search text"),
    menu_service: MenuService = Depends(get_menu_service),
    request_id: str = Depends(get_request_id)
) -> Envelope[MenuViewOut]:
    """
    Load a menu for browsing.
    
    Allergen exclusion hides a dish carrying any excluded allergen; tag
    requirement keeps only dishes carrying every required tag.
    """
    display_language = resolve_language(language)
    view = await menu_service.load_menu(
        menu_id,
        language=display_language,
        excluded_allergens=exclude_allergens,
        required_dietary_tags=require_tags,
        query=q
    )
    
    if not view.available:
        raise CatalogUnavailableError(menu_id, details={'request_id': request_id})
    
    logger.info(
        f"Served menu {menu_id}: {view.visible_dishes}/{view.total_dishes} dishes",
        extra={'request_id': request_id, 'language': display_language.value}
    )
    return Envelope(status="ok", data=MenuViewOut.from_view(view))
