"""
Unit tests for menu loading
"""
from typing import Optional

import pytest

from accessmenu.core.exceptions import ErrorCode
from accessmenu.models.dish import Menu
from accessmenu.services.catalog_provider import CatalogProvider
from accessmenu.services.menu_service import MenuService


class StaticProvider(CatalogProvider):
    def __init__(self, menu: Optional[Menu]):
        self.menu = menu
        self.calls = 0

    async def fetch_menu(self, menu_id):
        self.calls += 1
        return self.menu


@pytest.mark.asyncio
async def test_load_menu_groups_and_filters(menu):
    service = MenuService(StaticProvider(menu))

    view = await service.load_menu("menu-1", language="zh", excluded_allergens=["peanuts"])

    assert view.available
    assert view.total_dishes == 4
    assert view.visible_dishes == 3
    assert list(view.sections) == ["主菜", "前菜", "Drinks"]
    assert [f.value for f in view.filters] == ["peanuts"]
    assert "peanuts" in view.allergens


@pytest.mark.asyncio
async def test_load_menu_with_search(menu):
    view = await MenuService(StaticProvider(menu)).load_menu("menu-1", query="coffee")
    assert view.visible_dishes == 1
    assert list(view.sections) == ["Drinks"]


@pytest.mark.asyncio
async def test_unavailable_catalog_is_not_retried():
    provider = StaticProvider(None)
    view = await MenuService(provider).load_menu("menu-1")

    assert not view.available
    assert view.error == ErrorCode.CATALOG_UNAVAILABLE
    assert view.sections == {}
    assert provider.calls == 1
