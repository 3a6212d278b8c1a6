"""
Redis cache facade for pagecraft.

This module provides the typed cache interface used by request handlers:
- JSON serialization/deserialization
- TTL management (per-category TTLs come from pagecraft.core.cache.keys)
- Cache-aside helper (get_or_set)
- Best-effort statistics

Every operation is fail-soft. A backend outage or a malformed stored value
degrades to a safe default (miss, no-op, False, unknown stats) and is logged;
nothing here raises into a request. The cache is an optimization only: all
callers must stay correct, just slower, when Redis is gone.

Usage:
    >>> from pagecraft.core.cache.redis import RedisCache
    >>>
    >>> cache = RedisCache(store)
    >>> await cache.set("meta:ring", {"description": "Ring sizes"}, ttl=7200)
    >>> await cache.get("meta:ring")
    {'description': 'Ring sizes'}
"""
import json
from dataclasses import asdict, dataclass
from typing import Any, Awaitable, Callable, TypeAlias, TypeVar

from pagecraft.core.config.logging import get_logger
from pagecraft.core.config.redis import RedisStore
from pagecraft.core.config.settings import settings
from pagecraft.core.exceptions import CacheException

logger = get_logger(__name__)

JSONValue: TypeAlias = (
    dict[str, "JSONValue"] | list["JSONValue"] | str | int | float | bool | None
)
"""Payloads that survive a JSON round trip without losing structure."""

T = TypeVar("T")

UNKNOWN_MEMORY = "Unknown"


@dataclass(frozen=True)
class CacheStats:
    """Best-effort cache introspection."""

    key_count: int
    memory_usage: str

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


class RedisCache:
    """
    High-level cache interface over the shared RedisStore.

    Args:
        store: Connected RedisStore
        default_ttl: TTL used when set() is called without one
    """

    def __init__(
        self,
        store: RedisStore,
        default_ttl: int | None = None,
    ) -> None:
        self._store = store
        self._default_ttl = default_ttl or settings.CACHE_DEFAULT_TTL

    @property
    def store(self) -> RedisStore:
        return self._store

    # =========================================================================
    # BASIC OPERATIONS
    # =========================================================================

    async def get(self, key: str) -> Any:
        """
        Get a value from cache.

        Returns:
            The deserialized value, or None on miss, backend error or a
            stored value that is not valid JSON.

        Example:
            >>> content = await cache.get("content:ring,size")
            >>> if content is None:
            ...     content = await generate()
        """
        try:
            raw = await self._store.get_raw(key)
        except CacheException as e:
            logger.warning("Cache get failed", key=key, error=e.message)
            return None

        if raw is None:
            return None

        try:
            return json.loads(raw)
        except (TypeError, ValueError) as e:
            logger.warning("Discarding malformed cache entry", key=key, error=str(e))
            return None

    async def set(
        self,
        key: str,
        value: JSONValue,
        ttl: int | None = None,
    ) -> bool:
        """
        Set a value in cache.

        Args:
            key: Cache key
            value: JSON-serializable value
            ttl: Time to live in seconds (default TTL if None)

        Returns:
            bool: True if stored. False means the write was lost; callers
            never need to act on it.
        """
        try:
            payload = json.dumps(value)
        except (TypeError, ValueError) as e:
            logger.error("Cache value is not JSON serializable", key=key, error=str(e))
            return False

        try:
            return await self._store.set_raw(key, payload, ttl or self._default_ttl)
        except CacheException as e:
            logger.warning("Cache set failed", key=key, error=e.message)
            return False

    async def delete(self, key: str) -> bool:
        """Delete a key. Returns True if the backend accepted the command."""
        try:
            await self._store.del_raw(key)
            return True
        except CacheException as e:
            logger.warning("Cache delete failed", key=key, error=e.message)
            return False

    async def exists(self, key: str) -> bool:
        try:
            return await self._store.exists_raw(key)
        except CacheException as e:
            logger.warning("Cache exists failed", key=key, error=e.message)
            return False

    async def clear(self) -> bool:
        """
        Clear the whole cache namespace.

        WARNING: removes rate-limit counters too. Maintenance use only.
        """
        try:
            await self._store.flush_all()
        except CacheException as e:
            logger.error("Cache clear failed", error=e.message)
            return False

        logger.info("Cache cleared")
        return True

    # =========================================================================
    # CACHE-ASIDE
    # =========================================================================

    async def get_or_set(
        self,
        key: str,
        factory: Callable[[], Awaitable[T]],
        ttl: int | None = None,
    ) -> tuple[T, bool]:
        """
        Return the cached value or compute, store and return it.

        Factory errors propagate; cache errors never do.

        Returns:
            tuple: (value, hit) where hit tells whether the cache answered
        """
        cached = await self.get(key)
        if cached is not None:
            logger.debug("Cache hit", key=key)
            return cached, True

        value = await factory()
        await self.set(key, value, ttl=ttl)
        return value, False

    # =========================================================================
    # STATISTICS
    # =========================================================================

    async def stats(self) -> CacheStats:
        """
        Get key count and memory usage.

        Returns CacheStats(0, "Unknown") when the backend cannot answer.
        """
        try:
            key_count = await self._store.dbsize()
        except CacheException as e:
            logger.warning("Cache stats failed", error=e.message)
            return CacheStats(key_count=0, memory_usage=UNKNOWN_MEMORY)

        try:
            info = await self._store.info("memory")
        except CacheException as e:
            logger.debug("Cache memory info unavailable", error=e.message)
            info = {}

        return CacheStats(
            key_count=int(key_count),
            memory_usage=str(info.get("used_memory_human", UNKNOWN_MEMORY)),
        )


__all__ = [
    "JSONValue",
    "CacheStats",
    "RedisCache",
]
