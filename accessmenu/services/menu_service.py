"""
Menu service - fetches a menu and prepares it for browsing.
"""
import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional

from accessmenu.core.exceptions import ErrorCode
from accessmenu.models.dish import Dish, Menu
from accessmenu.models.language import Language
from accessmenu.services.catalog_provider import CatalogProvider
from accessmenu.services.menu_filter import (
    ActiveFilter,
    active_filters,
    available_labels,
    filter_dishes,
    group_by_section,
    search_dishes,
)

logger = logging.getLogger(__name__)


@dataclass
class MenuView:
    """Filtered, grouped menu for one language"""
    menu_id: str
    language: Language
    menu: Optional[Menu] = None
    sections: Dict[str, List[Dish]] = field(default_factory=dict)
    total_dishes: int = 0
    visible_dishes: int = 0
    allergens: List[str] = field(default_factory=list)
    dietary_tags: List[str] = field(default_factory=list)
    filters: List[ActiveFilter] = field(default_factory=list)
    error: Optional[ErrorCode] = None

    @property
    def available(self) -> bool:
        return self.error is None


class MenuService:
    def __init__(self, provider: CatalogProvider):
        self.provider = provider

    async def get_menu(self, menu_id: str) -> Optional[Menu]:
        return await self.provider.fetch_menu(menu_id)

    async def load_menu(
        self,
        menu_id: str,
        language=Language.BASE,
        excluded_allergens: Optional[Iterable[str]] = None,
        required_dietary_tags: Optional[Iterable[str]] = None,
        query: Optional[str] = None,
    ) -> MenuView:
        """
        Fetch a menu and apply search, filters and section grouping.
        
        A provider failure is not retried; the view comes back empty with
        ``error = CATALOG_UNAVAILABLE``.
        """
        language = Language.parse(language)
        excluded_allergens = list(excluded_allergens or [])
        required_dietary_tags = list(required_dietary_tags or [])

        menu = await self.provider.fetch_menu(menu_id)
        if menu is None:
            logger.warning(f"Catalog unavailable for menu {menu_id}")
            return MenuView(menu_id=str(menu_id), language=language, error=ErrorCode.CATALOG_UNAVAILABLE)

        allergens, tags = available_labels(menu.dishes)
        visible = filter_dishes(
            search_dishes(menu.dishes, query, language),
            excluded_allergens,
            required_dietary_tags,
        )
        return MenuView(
            menu_id=menu.id,
            language=language,
            menu=menu,
            sections=group_by_section(visible, language),
            total_dishes=len(menu.dishes),
            visible_dishes=len(visible),
            allergens=allergens,
            dietary_tags=tags,
            filters=active_filters(excluded_allergens, required_dietary_tags),
        )
