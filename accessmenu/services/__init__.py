"""
Services of the ordering core and the catalog
"""

from .order_ledger import OrderLedger
from .question_protocol import QuestionAnswerProtocol, all_answered, unanswered_count
from .workflow import WorkflowState, WorkflowStateMachine
from .order_session import OrderSession, SessionRegistry, SessionSnapshot
from .menu_filter import filter_dishes, group_by_section, search_dishes
from .dish_matcher import DishMatcher, similarity
from .lang_detect import detect_menu_language
from .catalog_provider import CatalogProvider, HttpCatalogProvider, SqlCatalogProvider
from .catalog_store import CatalogEntry, CatalogStore, SqlCatalogStore
from .ingestion_service import DishIngestionService, DishSubmission, IngestionResult
from .menu_service import MenuService, MenuView

__all__ = [
    "OrderLedger",
    "QuestionAnswerProtocol",
    "all_answered",
    "unanswered_count",
    "WorkflowState",
    "WorkflowStateMachine",
    "OrderSession",
    "SessionRegistry",
    "SessionSnapshot",
    "filter_dishes",
    "group_by_section",
    "search_dishes",
    "DishMatcher",
    "similarity",
    "detect_menu_language",
    "CatalogProvider",
    "HttpCatalogProvider",
    "SqlCatalogProvider",
    "CatalogEntry",
    "CatalogStore",
    "SqlCatalogStore",
    "DishIngestionService",
    "DishSubmission",
    "IngestionResult",
    "MenuService",
    "MenuView",
]
