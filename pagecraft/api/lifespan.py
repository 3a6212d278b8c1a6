"""
Lifespan management for pagecraft.

Startup:
1. Logging configuration
2. Shared Redis store (connect with bounded retry; a failed connect does
   not abort startup, the app runs degraded)
3. Shared components on app.state: cache facade, rate limiter, status
   reporter, AI completion client, content generator

Shutdown:
1. AI completion client
2. Redis store
"""
import time
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI

from pagecraft.core.cache.redis import RedisCache
from pagecraft.core.config.logging import configure_logging
from pagecraft.core.config.redis import RedisStore, init_store, shutdown_store
from pagecraft.core.config.settings import settings
from pagecraft.core.logging import get_logger
from pagecraft.core.ratelimit.limiter import FixedWindowRateLimiter
from pagecraft.core.ratelimit.status import RateLimitStatusReporter
from pagecraft.services.completion import CompletionClient, OpenAICompletionClient
from pagecraft.services.content_generation import ContentGenerator

logger = get_logger(__name__)


def build_services(
    app: FastAPI,
    store: RedisStore,
    completion: CompletionClient,
    rate_limiter: FixedWindowRateLimiter | None = None,
) -> None:
    """
    Wire the shared components onto app.state.

    Args:
        app: FastAPI application
        store: Connected (or degraded) RedisStore
        completion: AI completion client
        rate_limiter: Pre-built limiter (tests inject one with a fake clock)
    """
    cache = RedisCache(store)
    limiter = rate_limiter or FixedWindowRateLimiter(store)

    app.state.store = store
    app.state.cache = cache
    app.state.rate_limiter = limiter
    app.state.status_reporter = RateLimitStatusReporter(limiter)
    app.state.completion = completion
    app.state.content_generator = ContentGenerator(cache, completion)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan context manager.

    Args:
        app: FastAPI application instance

    Yields:
        None: Application runs during this context
    """
    startup_start_time = time.time()
    configure_logging()

    logger.info(
        "Starting pagecraft",
        version=settings.APP_VERSION,
        environment=settings.ENVIRONMENT,
        debug=settings.DEBUG,
    )

    # =========================================================================
    # STARTUP PHASE
    # =========================================================================

    store = await init_store()
    if not store.is_available():
        logger.warning(
            "Redis unavailable at startup, running without cache",
            redis_url=settings.redis_url_safe,
            on_backend_error=settings.RATE_LIMIT_ON_BACKEND_ERROR,
        )

    completion = OpenAICompletionClient()
    if not completion.is_configured:
        logger.warning("OPENAI_API_KEY is not set, AI generation will fail or fall back")

    build_services(app, store, completion)

    logger.info(
        "pagecraft started",
        startup_duration_seconds=round(time.time() - startup_start_time, 2),
        rate_limiting=settings.RATE_LIMIT_ENABLED,
    )

    # =========================================================================
    # APPLICATION RUNNING
    # =========================================================================
    yield

    # =========================================================================
    # SHUTDOWN PHASE
    # =========================================================================
    logger.info("Shutting down pagecraft")

    await completion.close()
    await shutdown_store()

    logger.info("pagecraft stopped")


__all__ = ["lifespan", "build_services"]
