"""
Cache module for pagecraft.

This module provides caching utilities:
- Redis cache facade (JSON payloads, fail-soft operations)
- Cache key builders per category
- TTL management per category

Cache Strategy:
- Single shared Redis store (cache entries and rate-limit counters)
- Cache-aside pattern for AI generation results
- A backend outage degrades to misses, never to errors

Usage:
    >>> from pagecraft.core.cache import CacheCategory, RedisCache, key_for, ttl_for
    >>>
    >>> key = key_for(CacheCategory.META_GENERATION, "ring sizes")
    >>> await cache.set(key, description, ttl=ttl_for(CacheCategory.META_GENERATION))
    >>> description = await cache.get(key)
"""

# =============================================================================
# KEY REGISTRY
# =============================================================================

from pagecraft.core.cache.keys import (
    CACHE_TTL,
    CacheCategory,
    CacheKeys,
    FaqKeyStrategy,
    key_for,
    ttl_for,
)

# =============================================================================
# REDIS CACHE
# =============================================================================

from pagecraft.core.cache.redis import (
    CacheStats,
    JSONValue,
    RedisCache,
)

__all__ = [
    # Keys
    "CACHE_TTL",
    "CacheCategory",
    "CacheKeys",
    "FaqKeyStrategy",
    "key_for",
    "ttl_for",
    # Cache
    "CacheStats",
    "JSONValue",
    "RedisCache",
]
