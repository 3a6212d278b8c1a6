"""
Shared pytest fixtures for pagecraft.

Redis is replaced by fakeredis (with Lua support, so the rate-limit script
runs for real). Time is replaced by FakeClock so window arithmetic is
deterministic.
"""
import fakeredis
import pytest
import pytest_asyncio

from pagecraft.core.cache.redis import RedisCache
from pagecraft.core.config.redis import RedisStore
from pagecraft.core.exceptions import LLMConnectionException
from pagecraft.core.ratelimit.limiter import FixedWindowRateLimiter
from pagecraft.tests.doubles import BrokenRedis, FakeClock, FakeCompletion


# =============================================================================
# PYTEST FIXTURES
# =============================================================================


@pytest_asyncio.fixture
async def fake_redis():
    """Fresh in-process Redis per test."""
    client = fakeredis.FakeAsyncRedis(server=fakeredis.FakeServer(), decode_responses=True)
    yield client
    await client.aclose()


@pytest_asyncio.fixture
async def store(fake_redis) -> RedisStore:
    """Connected store over fakeredis."""
    redis_store = RedisStore(client=fake_redis)
    assert await redis_store.connect()
    return redis_store


@pytest.fixture
def broken_store() -> RedisStore:
    """Store whose backend refuses every command."""
    return RedisStore(client=BrokenRedis(), max_retries=0, retry_step_ms=0, retry_max_delay_ms=0)


@pytest.fixture
def cache(store: RedisStore) -> RedisCache:
    return RedisCache(store)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def limiter(store: RedisStore, clock: FakeClock) -> FixedWindowRateLimiter:
    return FixedWindowRateLimiter(store, on_backend_error="deny", clock=clock)


@pytest.fixture
def completion() -> FakeCompletion:
    return FakeCompletion()


@pytest.fixture
def failing_completion() -> FakeCompletion:
    return FakeCompletion(error=LLMConnectionException())
