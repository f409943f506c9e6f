"""
Dish ingestion: add a dish to the shared catalog unless a close enough
name is already there.
"""
import logging
from dataclasses import dataclass, field
from typing import List, Optional

from accessmenu.config.settings import CatalogSettings
from accessmenu.core.exceptions import ErrorCode
from accessmenu.core.validation import ValidationError, validate_dish_name
from accessmenu.services.catalog_store import CatalogEntry, CatalogStore
from accessmenu.services.dish_matcher import DishMatcher
from accessmenu.services.lang_detect import detect_menu_language

logger = logging.getLogger(__name__)


@dataclass
class DishSubmission:
    name: str
    explanation: str
    language: Optional[str] = None
    tags: List[str] = field(default_factory=list)
    allergens: List[str] = field(default_factory=list)
    cuisine: Optional[str] = None
    source: Optional[str] = None


@dataclass(frozen=True)
class IngestionResult:
    dish_exists: bool = False
    saved: bool = False
    matched_name: Optional[str] = None
    similarity: Optional[float] = None
    menu_language: Optional[str] = None
    error: Optional[ErrorCode] = None
    message: Optional[str] = None


class DishIngestionService:
    """Fuzzy-deduplicated insertion into a CatalogStore"""

    def __init__(
        self,
        store: CatalogStore,
        matcher: Optional[DishMatcher] = None,
        catalog_settings: Optional[CatalogSettings] = None
    ):
        self.store = store
        self.matcher = matcher or DishMatcher()
        self.settings = catalog_settings or CatalogSettings()

    def ingest(self, submission: DishSubmission) -> IngestionResult:
        """
        Save a dish unless the catalog already has it.
        
        Args:
            submission: Proposed dish; ``language`` is the language of the
                explanation and defaults to the configured ingestion language
        
        Returns:
            IngestionResult, never raises for store failures
        """
        try:
            name = validate_dish_name(submission.name)
        except ValidationError as e:
            return IngestionResult(error=ErrorCode.VALIDATION_ERROR, message=str(e))
        explanation = (submission.explanation or "").strip()
        if not explanation:
            return IngestionResult(error=ErrorCode.VALIDATION_ERROR, message="Explanation is required")

        language = (submission.language or self.settings.ingestion_language).strip().lower()
        menu_language = detect_menu_language(name)

        try:
            existing_names = self.store.list_names(language)
        except Exception as e:
            logger.error(f"Could not read catalog names, continuing with an empty catalog: {e}")
            existing_names = []

        match = self.matcher.find_duplicate(name, existing_names)
        if match is not None:
            logger.info(
                f"Dish '{name}' already in catalog as '{match.existing}'",
                extra={"similarity": round(match.score, 3), "language": language}
            )
            return IngestionResult(
                dish_exists=True,
                matched_name=match.existing,
                similarity=match.score,
                menu_language=menu_language,
            )

        entry = CatalogEntry(
            name=name,
            language=language,
            menu_language=menu_language,
            explanation=explanation,
            tags=list(submission.tags),
            allergens=list(submission.allergens),
            cuisine=submission.cuisine,
            source=submission.source,
        )
        if not self.store.insert_dish(entry):
            return IngestionResult(
                menu_language=menu_language,
                error=ErrorCode.CATALOG_WRITE_FAILED,
                message=f"Could not save '{name}'",
            )

        logger.info(f"Ingested dish '{name}'", extra={"language": language, "menu_language": menu_language})
        return IngestionResult(saved=True, menu_language=menu_language)
