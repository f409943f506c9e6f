"""
Catalog providers: where menus come from.

A provider returns the menu for an id, or None when the menu cannot be
obtained for any reason. Callers treat None as "catalog unavailable".
"""
import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Optional

import httpx
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from accessmenu.models.catalog import MenuDishRecord, MenuRecord
from accessmenu.models.dish import Dish, Menu, Variant

logger = logging.getLogger(__name__)


class CatalogProvider(ABC):
    """Read-only source of restaurant menus"""

    @abstractmethod
    async def fetch_menu(self, menu_id: str) -> Optional[Menu]:
        """Return the menu, or None if it does not exist or cannot be read"""


class HttpCatalogProvider(CatalogProvider):
    """
    Remote catalog served over HTTP.
    
    Expects ``GET {base_url}/menus/{menu_id}`` to return the menu as JSON,
    either bare or wrapped in a ``{"status", "data"}`` envelope.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    async def fetch_menu(self, menu_id: str) -> Optional[Menu]:
        url = f"{self.base_url}/menus/{menu_id}"
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.get(url)

                if response.status_code == 404:
                    logger.info(f"Menu {menu_id} not found at catalog provider")
                    return None

                if response.status_code != 200:
                    logger.warning(f"Catalog provider returned {response.status_code} for menu {menu_id}")
                    return None

                payload = response.json()
                if isinstance(payload, dict) and "data" in payload and "status" in payload:
                    payload = payload["data"]
                if payload is None:
                    return None
                return Menu.model_validate(payload)

        except httpx.TimeoutException:
            logger.warning(f"Timeout fetching menu {menu_id}")
            return None
        except (httpx.HTTPError, ValueError, PydanticValidationError) as e:
            logger.error(f"Error fetching menu {menu_id}: {e}")
            return None


class SqlCatalogProvider(CatalogProvider):
    """Menus stored in the local database"""

    def __init__(self, session_factory: sessionmaker):
        self._session_factory = session_factory

    async def fetch_menu(self, menu_id: str) -> Optional[Menu]:
        try:
            record_id = int(menu_id)
        except (TypeError, ValueError):
            return None

        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self._load_menu, menu_id, record_id)

    def _load_menu(self, menu_id: str, record_id: int) -> Optional[Menu]:
        try:
            with self._session_factory() as db:
                record = db.get(MenuRecord, record_id)
                if record is None or not record.is_active:
                    return None
                return Menu(
                    id=record.id,
                    name=record.name,
                    dishes=[_dish_from_record(d) for d in record.dishes],
                )
        except (SQLAlchemyError, PydanticValidationError) as e:
            logger.error(f"Error reading menu {menu_id}: {e}")
            return None


def _dish_from_record(record: MenuDishRecord) -> Dish:
    return Dish(
        id=record.id,
        name=record.name,
        description=record.description or {},
        explanation=record.explanation,
        price=record.price,
        allergens=record.allergens or [],
        dietary_tags=record.dietary_tags or [],
        section=record.section or {},
        variants=[Variant.model_validate(v) for v in (record.variants or [])],
    )
