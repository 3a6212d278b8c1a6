"""
FastAPI application factory for pagecraft.

Creates and configures the FastAPI application with:
- Middleware stack (request ID, error handler)
- Exception handlers (application, validation, HTTP)
- Route registration (health, rate-limit status, cache, generation)
- Lifespan management (startup/shutdown)

Usage:
    from pagecraft.api.app import create_app
    app = create_app()
"""
from fastapi import FastAPI

from pagecraft.api.lifespan import lifespan
from pagecraft.api.middleware import (
    ErrorHandlerMiddleware,
    RequestIDMiddleware,
    register_exception_handlers,
)
from pagecraft.api.routes import cache, generate, health, rate_limit
from pagecraft.core.config.settings import settings
from pagecraft.core.constants import APP_DESCRIPTION
from pagecraft.core.logging import get_logger

logger = get_logger(__name__)


def create_app() -> FastAPI:
    """
    Application factory for FastAPI.

    Returns:
        Configured FastAPI application instance

    Example:
        >>> app = create_app()
        >>> # uvicorn pagecraft.main:app --host 0.0.0.0 --port 8000
    """
    app = FastAPI(
        title=settings.APP_NAME,
        description=APP_DESCRIPTION,
        version=settings.APP_VERSION,
        docs_url="/docs" if settings.ENABLE_DOCS else None,
        redoc_url="/redoc" if settings.ENABLE_DOCS else None,
        openapi_url="/openapi.json" if settings.ENABLE_DOCS else None,
        lifespan=lifespan,
    )

    # =========================================================================
    # Middleware Stack (LIFO: last added runs first)
    # =========================================================================
    app.add_middleware(ErrorHandlerMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # =========================================================================
    # Exception Handlers
    # =========================================================================
    register_exception_handlers(app)

    # =========================================================================
    # Routes
    # =========================================================================
    app.include_router(health.router)
    app.include_router(rate_limit.router)
    app.include_router(cache.router)
    app.include_router(generate.router)

    logger.debug(
        "FastAPI application created",
        app_name=settings.APP_NAME,
        version=settings.APP_VERSION,
        environment=settings.ENVIRONMENT,
    )

    return app


__all__ = ["create_app"]
