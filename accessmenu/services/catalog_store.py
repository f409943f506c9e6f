"""
Writable side of the shared dish catalog used by ingestion.
"""
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from accessmenu.models.catalog import CatalogDishRecord

logger = logging.getLogger(__name__)


@dataclass
class CatalogEntry:
    name: str
    language: str
    menu_language: str
    explanation: str
    tags: List[str] = field(default_factory=list)
    allergens: List[str] = field(default_factory=list)
    cuisine: Optional[str] = None
    source: Optional[str] = None


class CatalogStore(ABC):
    """Name listing and insertion for the dish catalog"""

    @abstractmethod
    def list_names(self, language: str) -> List[str]:
        """Names of every dish whose explanation is in ``language``"""

    @abstractmethod
    def insert_dish(self, entry: CatalogEntry) -> bool:
        """Persist an entry; False when the write failed"""


class SqlCatalogStore(CatalogStore):
    def __init__(self, session_factory: sessionmaker):
        self._session_factory = session_factory

    def list_names(self, language: str) -> List[str]:
        try:
            with self._session_factory() as db:
                rows = db.execute(
                    select(CatalogDishRecord.name)
                    .where(CatalogDishRecord.language == language)
                    .order_by(CatalogDishRecord.id)
                )
                return [name for (name,) in rows]
        except SQLAlchemyError as e:
            logger.error(f"Error listing catalog names for '{language}': {e}")
            return []

    def insert_dish(self, entry: CatalogEntry) -> bool:
        with self._session_factory() as db:
            record = CatalogDishRecord(
                name=entry.name,
                language=entry.language,
                menu_language=entry.menu_language,
                explanation=entry.explanation,
                tags=list(entry.tags),
                allergens=list(entry.allergens),
                cuisine=entry.cuisine,
                source=entry.source,
            )
            try:
                db.add(record)
                db.commit()
            except SQLAlchemyError as e:
                db.rollback()
                logger.error(f"Error saving catalog dish '{entry.name}': {e}")
                return False
            logger.info(f"Saved catalog dish '{entry.name}' (id {record.id})")
            return True
