"""
FastAPI application setup with dependency injection.
"""

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
import logging
import time
import uuid
from datetime import datetime
from contextlib import asynccontextmanager
from typing import Optional

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from accessmenu.config.settings import get_settings
from accessmenu.core.dependencies import ServiceContainer, service_container
from accessmenu.core.error_handlers import error_handler, setup_error_handlers
from accessmenu.core.logging import configure_logging

# Get application settings
settings = get_settings()

configure_logging(
    level=settings.log_level.value,
    fmt=settings.log_format,
    log_file=settings.log_file
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan management with service container.
    Live sessions are disposed on shutdown so no auto-return timer survives.
    """
    logger.info(f"Starting {settings.app_name} v{settings.app_version}")
    
    container: ServiceContainer = getattr(app.state, 'service_container', None) or service_container
    try:
        await container.initialize_services()
        app.state.service_container = container
        
        logger.info("Application startup complete")
        
        yield
        
    except Exception as e:
        logger.error(f"Application startup failed: {e}", exc_info=True)
        raise
    
    finally:
        logger.info("Shutting down application")
        
        try:
            await container.cleanup_services()
            logger.info("Application shutdown complete")
        except Exception as e:
            logger.error(f"Application shutdown failed: {e}", exc_info=True)


def create_app(container: Optional[ServiceContainer] = None) -> FastAPI:
    """
    Create and configure FastAPI application.
    
    Args:
        container: Pre-built service container; the global one is used when omitted
    
    Returns:
        FastAPI: Configured application instance
    """
    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        debug=settings.debug,
        lifespan=lifespan
    )
    if container is not None:
        app.state.service_container = container
    
    app.add_middleware(
        CORSMiddleware,
        **settings.get_cors_config()
    )
    
    setup_error_handlers(app)
    
    @app.middleware("http")
    async def logging_middleware(request: Request, call_next):
        """Log requests and responses with timing information."""
        request_id = str(uuid.uuid4())
        request.state.request_id = request_id
        
        start_time = time.time()
        
        logger.info(
            f"Request {request_id} started: {request.method} {request.url.path}",
            extra={
                'request_id': request_id,
                'method': request.method,
                'path': request.url.path,
                'client_ip': request.client.host if request.client else 'unknown'
            }
        )
        
        response = await call_next(request)
        
        processing_time = (time.time() - start_time) * 1000
        
        logger.info(
            f"Request {request_id} completed: {response.status_code} ({processing_time:.2f}ms)",
            extra={
                'request_id': request_id,
                'status_code': response.status_code,
                'processing_time_ms': processing_time
            }
        )
        
        response.headers["X-Request-ID"] = request_id
        return response
    
    from accessmenu.api.menu_endpoints import router as menu_router
    from accessmenu.api.session_endpoints import router as session_router
    from accessmenu.api.catalog_endpoints import router as catalog_router
    app.include_router(menu_router)
    app.include_router(session_router)
    app.include_router(catalog_router)
    
    @app.get("/")
    async def root():
        """Root endpoint for basic health check."""
        return {
            "message": f"Welcome to {settings.app_name}",
            "version": settings.app_version,
            "status": "running"
        }
    
    @app.get("/health")
    async def health_check(request: Request):
        """Health check with database and session status."""
        details = {"database": {"status": "unknown"}, "sessions": {}}
        
        container = getattr(request.app.state, 'service_container', None)
        if container is None or not container.initialized:
            return {
                "status": "unhealthy",
                "message": "Service container not initialized",
                "version": settings.app_version,
                "timestamp": datetime.utcnow().isoformat(),
                "details": details
            }
        
        try:
            with container.session_factory() as db:
                db.execute(text("SELECT 1"))
            details["database"] = {"status": "healthy", "connection": "ok"}
        except SQLAlchemyError as e:
            logger.error(f"Database health check failed: {e}")
            details["database"] = {"status": "unhealthy", "error": str(e)}
        
        details["sessions"] = {"live": len(container.get_registry())}
        
        return {
            "status": "healthy" if details["database"]["status"] == "healthy" else "degraded",
            "version": settings.app_version,
            "timestamp": datetime.utcnow().isoformat(),
            "details": details,
            "error_statistics": error_handler.get_error_statistics()
        }
    
    return app


# Create application instance
app = create_app()
