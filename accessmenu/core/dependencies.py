"""
Dependency injection setup for FastAPI.
Provides dependency providers for the session registry and catalog services.
"""

from fastapi import Depends, Request, HTTPException
from typing import Callable, Optional
import asyncio
import logging

from sqlalchemy.orm import sessionmaker

from accessmenu.config.settings import Settings, settings as default_settings
from accessmenu.core.db import get_session_factory, init_db
from accessmenu.core.exceptions import SessionNotFoundError, UnsupportedLanguageError
from accessmenu.core.scheduler import TaskScheduler, default_scheduler
from accessmenu.core.validation import ValidationError, validate_language_code
from accessmenu.models.language import Language
from accessmenu.services.catalog_provider import CatalogProvider, HttpCatalogProvider, SqlCatalogProvider
from accessmenu.services.catalog_store import CatalogStore, SqlCatalogStore
from accessmenu.services.dish_matcher import DishMatcher
from accessmenu.services.ingestion_service import DishIngestionService
from accessmenu.services.menu_service import MenuService
from accessmenu.services.order_session import OrderSession, SessionRegistry


logger = logging.getLogger(__name__)


class ServiceContainer:
    """
    Container for the application services with lifecycle management.
    
    Collaborators can be passed in (tests use an in-memory database and a
    manual scheduler); anything left out is built from settings.
    """
    
    def __init__(
        self,
        settings: Optional[Settings] = None,
        session_factory: Optional[sessionmaker] = None,
        provider: Optional[CatalogProvider] = None,
        store: Optional[CatalogStore] = None,
        scheduler_factory: Callable[[], TaskScheduler] = default_scheduler
    ):
        self.settings = settings or default_settings
        self._session_factory = session_factory
        self._provider = provider
        self._store = store
        self._scheduler_factory = scheduler_factory
        self._registry: Optional[SessionRegistry] = None
        self._menu_service: Optional[MenuService] = None
        self._ingestion_service: Optional[DishIngestionService] = None
        self._initialized = False
        self._initialization_lock = asyncio.Lock()
    
    @property
    def initialized(self) -> bool:
        return self._initialized
    
    @property
    def session_factory(self) -> Optional[sessionmaker]:
        return self._session_factory
    
    async def initialize_services(self) -> None:
        """Build every service once, in dependency order."""
        async with self._initialization_lock:
            if self._initialized:
                return
            self.initialize()
    
    def initialize(self) -> None:
        if self._initialized:
            return
        
        logger.info("Initializing service container")
        
        try:
            if self._session_factory is None:
                init_db()
                self._session_factory = get_session_factory()
            
            if self._provider is None:
                if self.settings.catalog.provider_url:
                    self._provider = HttpCatalogProvider(
                        self.settings.catalog.provider_url,
                        timeout=self.settings.catalog.request_timeout_seconds
                    )
                else:
                    self._provider = SqlCatalogProvider(self._session_factory)
            
            if self._store is None:
                self._store = SqlCatalogStore(self._session_factory)
            
            self._registry = SessionRegistry(
                order_settings=self.settings.order,
                scheduler_factory=self._scheduler_factory
            )
            self._menu_service = MenuService(self._provider)
            self._ingestion_service = DishIngestionService(
                self._store,
                matcher=DishMatcher(self.settings.matcher),
                catalog_settings=self.settings.catalog
            )
            
            self._initialized = True
            logger.info(
                "Service container initialization completed",
                extra={'provider': type(self._provider).__name__}
            )
        
        except Exception as e:
            logger.error(f"Service container initialization failed: {e}", exc_info=True)
            raise
    
    async def cleanup_services(self) -> None:
        """Dispose every live session so no timer outlives the app."""
        logger.info("Cleaning up service container")
        
        if self._registry is not None:
            disposed = self._registry.dispose_all()
            logger.info(f"Disposed {disposed} live sessions")
        
        self._registry = None
        self._menu_service = None
        self._ingestion_service = None
        self._initialized = False
    
    def _require(self, service, name: str):
        if not self._initialized or service is None:
            raise RuntimeError(f"{name} not initialized")
        return service
    
    def get_registry(self) -> SessionRegistry:
        return self._require(self._registry, "Session registry")
    
    def get_menu_service(self) -> MenuService:
        return self._require(self._menu_service, "Menu service")
    
    def get_ingestion_service(self) -> DishIngestionService:
        return self._require(self._ingestion_service, "Ingestion service")


# Global service container instance
service_container = ServiceContainer()


def get_service_container(request: Request) -> ServiceContainer:
    """
    Get the service container from application state.
    
    Raises:
        HTTPException: If service container is not available
    """
    container = getattr(request.app.state, 'service_container', None)
    if container is None:
        logger.error("Service container not initialized")
        raise HTTPException(
            status_code=500,
            detail="Service container not available"
        )
    
    return container


def get_session_registry(
    container: ServiceContainer = Depends(get_service_container)
) -> SessionRegistry:
    try:
        return container.get_registry()
    except RuntimeError as e:
        logger.error(f"Session registry not available: {e}")
        raise HTTPException(status_code=500, detail="Session registry not available")


def get_menu_service(
    container: ServiceContainer = Depends(get_service_container)
) -> MenuService:
    try:
        return container.get_menu_service()
    except RuntimeError as e:
        logger.error(f"Menu service not available: {e}")
        raise HTTPException(status_code=500, detail="Menu service not available")


def get_ingestion_service(
    container: ServiceContainer = Depends(get_service_container)
) -> DishIngestionService:
    try:
        return container.get_ingestion_service()
    except RuntimeError as e:
        logger.error(f"Ingestion service not available: {e}")
        raise HTTPException(status_code=500, detail="Ingestion service not available")


def get_order_session(
    session_id: str,
    registry: SessionRegistry = Depends(get_session_registry)
) -> OrderSession:
    """
    Resolve the session named in the path.
    
    Raises:
        SessionNotFoundError: If no live session has this id
    """
    session = registry.get(session_id)
    if session is None:
        raise SessionNotFoundError(session_id)
    return session


def get_request_id(request: Request) -> str:
    """Request id assigned by the logging middleware."""
    return getattr(request.state, 'request_id', 'unknown')


def resolve_language(code: Optional[str]) -> Language:
    """
    Strict language lookup for request parameters.
    
    Raises:
        UnsupportedLanguageError: If the code is malformed or not offered
    """
    if code is None:
        return Language.BASE
    try:
        code = validate_language_code(code)
    except ValidationError:
        raise UnsupportedLanguageError(str(code), [lang.value for lang in Language])
    if not Language.is_supported(code):
        raise UnsupportedLanguageError(code, [lang.value for lang in Language])
    return Language(code)
