"""
Service dependencies for pagecraft.

The lifespan builds one instance of each shared component and stores it on
app.state. These getters hand them to routes, and tests swap them through
app.state or app.dependency_overrides.

Usage:
    >>> @router.get("/api/cache/stats")
    ... async def cache_stats(cache: RedisCache = Depends(get_cache)):
    ...     return (await cache.stats()).to_dict()
"""

from fastapi import Request

from pagecraft.core.cache.redis import RedisCache
from pagecraft.core.config.redis import RedisStore
from pagecraft.core.exceptions import ConfigurationException
from pagecraft.core.ratelimit.limiter import FixedWindowRateLimiter
from pagecraft.core.ratelimit.status import RateLimitStatusReporter
from pagecraft.services.content_generation import ContentGenerator


def _state(request: Request, name: str):
    component = getattr(request.app.state, name, None)
    if component is None:
        raise ConfigurationException(
            f"{name} is not initialised; is the application lifespan running?",
            details={"component": name},
        )
    return component


def get_redis_store(request: Request) -> RedisStore:
    return _state(request, "store")


def get_cache(request: Request) -> RedisCache:
    return _state(request, "cache")


def get_rate_limiter(request: Request) -> FixedWindowRateLimiter:
    return _state(request, "rate_limiter")


def get_status_reporter(request: Request) -> RateLimitStatusReporter:
    return _state(request, "status_reporter")


def get_content_generator(request: Request) -> ContentGenerator:
    return _state(request, "content_generator")


__all__ = [
    "get_redis_store",
    "get_cache",
    "get_rate_limiter",
    "get_status_reporter",
    "get_content_generator",
]
