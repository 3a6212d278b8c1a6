"""
Cache maintenance endpoints.

- GET /api/cache/stats  Key count and memory usage (best effort)
- DELETE /api/cache     Flush the whole namespace, rate-limit counters included

Both are guarded by the general-api policy; clearing is a user action and
also counts against the user-action policy.
"""
from fastapi import APIRouter, Depends

from pagecraft.api.dependencies.rate_limit import RateLimitGuard
from pagecraft.api.dependencies.services import get_cache
from pagecraft.api.schemas.rate_limit import CacheClearResponse, CacheStatsResponse
from pagecraft.core.cache.redis import RedisCache
from pagecraft.core.config.rate_limits import RateLimitPolicy
from pagecraft.core.logging import get_logger
from pagecraft.core.version import API_PREFIX

logger = get_logger(__name__)

router = APIRouter(
    prefix=f"{API_PREFIX}/cache",
    tags=["Cache"],
    dependencies=[Depends(RateLimitGuard(RateLimitPolicy.GENERAL_API))],
)


@router.get("/stats", response_model=CacheStatsResponse, summary="Cache statistics")
async def cache_stats(cache: RedisCache = Depends(get_cache)) -> CacheStatsResponse:
    stats = await cache.stats()
    return CacheStatsResponse(key_count=stats.key_count, memory_usage=stats.memory_usage)


@router.delete(
    "",
    response_model=CacheClearResponse,
    summary="Clear the cache",
    dependencies=[Depends(RateLimitGuard(RateLimitPolicy.USER_ACTION))],
)
async def clear_cache(cache: RedisCache = Depends(get_cache)) -> CacheClearResponse:
    cleared = await cache.clear()
    logger.warning("Cache clear requested", cleared=cleared)
    return CacheClearResponse(cleared=cleared)


__all__ = ["router"]
