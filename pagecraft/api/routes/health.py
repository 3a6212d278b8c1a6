"""
Health check endpoints for pagecraft.

- /health        Liveness: the process answers
- /health/ready  Readiness: reports Redis availability

The application keeps serving when Redis is down (cache misses, and the
configured backend-error policy for rate limits), so readiness reports
"degraded" with HTTP 200 rather than failing the probe.
"""
from typing import Any

from fastapi import APIRouter, Depends

from pagecraft.api.dependencies.services import get_redis_store
from pagecraft.core.config.redis import RedisStore
from pagecraft.core.config.settings import settings

router = APIRouter(prefix="/health", tags=["Health"])


@router.get("", summary="Liveness probe")
async def health_check() -> dict[str, Any]:
    return {
        "status": "healthy",
        "service": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "environment": settings.ENVIRONMENT,
    }


@router.get("/ready", summary="Readiness probe")
async def readiness_check(store: RedisStore = Depends(get_redis_store)) -> dict[str, Any]:
    """Ping Redis and report the store state."""
    redis_ok = await store.ping()
    return {
        "status": "ready" if redis_ok else "degraded",
        "checks": {
            "redis": {
                "available": redis_ok,
                "state": store.state.value,
            },
        },
    }


__all__ = ["router"]
