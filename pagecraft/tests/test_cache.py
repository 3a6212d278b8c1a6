"""
Cache facade tests: JSON round trip, TTL expiry, fail-soft behaviour.
"""
import pytest

from pagecraft.core.cache.keys import CacheCategory, key_for, ttl_for
from pagecraft.core.cache.redis import CacheStats, RedisCache
from pagecraft.core.config.redis import RedisStore


class StatsRedis:
    async def dbsize(self) -> int:
        return 3

    async def info(self, section=None) -> dict:
        return {"used_memory_human": "1.02M"}


@pytest.mark.asyncio
class TestRedisCache:
    async def test_round_trip_preserves_structure(self, cache):
        value = {
            "title": "Ring Size Guide",
            "views": 12,
            "score": 4.5,
            "published": True,
            "parent": None,
            "sections": [{"h2": "Measuring", "words": 180}, "appendix"],
        }

        assert await cache.set("page:ring-size-guide", value, ttl=60) is True
        assert await cache.get("page:ring-size-guide") == value

    async def test_missing_key_is_none(self, cache):
        assert await cache.get("meta:never-set") is None

    async def test_value_expires_after_ttl(self, cache, fake_redis):
        await cache.set("meta:short", "gone soon", ttl=60)
        assert await cache.get("meta:short") == "gone soon"
        assert 0 < await fake_redis.pttl("meta:short") <= 60_000

        # Deadline in the past: the key is already expired.
        await fake_redis.pexpireat("meta:short", 1)

        assert await cache.get("meta:short") is None
        assert await cache.exists("meta:short") is False

    async def test_category_ttl_is_applied(self, cache, fake_redis):
        key = key_for(CacheCategory.META_GENERATION, "ring")
        await cache.set(key, {"metaTitle": "Rings"}, ttl=ttl_for(CacheCategory.META_GENERATION))

        assert 7100 < await fake_redis.ttl(key) <= 7200

    async def test_later_set_overwrites(self, cache):
        await cache.set("meta:ring", "first")
        await cache.set("meta:ring", "second")

        assert await cache.get("meta:ring") == "second"

    async def test_delete_and_exists(self, cache):
        await cache.set("page:ring", {"a": 1})
        assert await cache.exists("page:ring") is True

        assert await cache.delete("page:ring") is True
        assert await cache.exists("page:ring") is False

    async def test_delete_of_missing_key(self, cache):
        await cache.delete("page:never-set")

        assert await cache.exists("page:never-set") is False
        assert await cache.get("page:never-set") is None

    async def test_clear_removes_everything(self, cache):
        await cache.set("page:a", 1)
        await cache.set("page:b", 2)

        assert await cache.clear() is True
        assert await cache.get("page:a") is None
        assert await cache.get("page:b") is None

    async def test_malformed_entry_is_a_miss(self, cache, fake_redis):
        await fake_redis.set("page:broken", "{not json")

        assert await cache.get("page:broken") is None

    async def test_unserializable_value_is_not_stored(self, cache):
        assert await cache.set("page:bad", {"when": object()}) is False
        assert await cache.get("page:bad") is None

    async def test_get_or_set_computes_once(self, cache):
        calls = []

        async def factory():
            calls.append(1)
            return {"faq": "<h2>FAQ</h2>"}

        first, first_hit = await cache.get_or_set("faq:rings", factory, ttl=60)
        second, second_hit = await cache.get_or_set("faq:rings", factory, ttl=60)

        assert first == second == {"faq": "<h2>FAQ</h2>"}
        assert (first_hit, second_hit) == (False, True)
        assert len(calls) == 1

    async def test_stats(self):
        cache = RedisCache(RedisStore(client=StatsRedis()))

        assert await cache.stats() == CacheStats(key_count=3, memory_usage="1.02M")


@pytest.mark.asyncio
class TestBackendUnavailable:
    async def test_every_operation_degrades_to_a_safe_default(self, broken_store):
        cache = RedisCache(broken_store)

        assert await cache.set("meta:ring", "x", ttl=60) is False
        assert await cache.get("meta:ring") is None
        assert await cache.exists("meta:ring") is False
        assert await cache.delete("meta:ring") is False
        assert await cache.clear() is False
        assert await cache.stats() == CacheStats(key_count=0, memory_usage="Unknown")

    async def test_get_or_set_still_returns_factory_value(self, broken_store):
        cache = RedisCache(broken_store)

        async def factory():
            return "fresh"

        assert await cache.get_or_set("meta:ring", factory) == ("fresh", False)
