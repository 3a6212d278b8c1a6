"""
Fixed-window rate limiter tests.

The Lua script runs inside fakeredis; FakeClock drives the window.
"""
import asyncio

import pytest

from pagecraft.core.config.rate_limits import (
    RATE_LIMIT_POLICIES,
    PolicyConfig,
    RateLimitPolicy,
    get_policy,
)
from pagecraft.core.exceptions import InvalidPolicyException
from pagecraft.core.ratelimit.limiter import FixedWindowRateLimiter, retry_after_seconds
from pagecraft.tests.doubles import START_MS, FakeClock

CLIENT = "203.0.113.5"


class TestPolicies:
    def test_policy_table(self):
        assert get_policy("ai-resource") == PolicyConfig(window_ms=60_000, max_requests=20)
        assert get_policy("user-action") == PolicyConfig(window_ms=60_000, max_requests=50)
        assert get_policy("general-api") == PolicyConfig(window_ms=60_000, max_requests=200)

    def test_policies_are_immutable(self):
        with pytest.raises(AttributeError):
            RATE_LIMIT_POLICIES[RateLimitPolicy.AI_RESOURCE].max_requests = 1000
        with pytest.raises(TypeError):
            RATE_LIMIT_POLICIES[RateLimitPolicy.AI_RESOURCE] = PolicyConfig(1, 1)

    def test_unknown_policy(self):
        with pytest.raises(InvalidPolicyException):
            get_policy("unlimited")

    def test_invalid_backend_error_policy(self, broken_store):
        with pytest.raises(ValueError):
            FixedWindowRateLimiter(broken_store, on_backend_error="maybe")

    @pytest.mark.parametrize(
        "reset_time, now, seconds",
        [(START_MS + 60_000, START_MS, 60), (START_MS + 1, START_MS, 1), (START_MS, START_MS + 5, 0)],
    )
    def test_retry_after_rounds_up(self, reset_time, now, seconds):
        assert retry_after_seconds(reset_time, now) == seconds


@pytest.mark.asyncio
class TestCheckAndIncrement:
    async def test_first_request_opens_a_window(self, limiter):
        result = await limiter.check_and_increment(CLIENT, RateLimitPolicy.AI_RESOURCE)

        assert result.allowed is True
        assert result.remaining == 19
        assert result.limit == 20
        assert result.reset_time == START_MS + 60_000
        assert result.backend_error is False

    async def test_twenty_allowed_then_denied(self, limiter, clock):
        results = []
        for _ in range(20):
            results.append(await limiter.check_and_increment(CLIENT, "ai-resource"))
            clock.advance(100)

        assert all(r.allowed for r in results)
        assert [r.remaining for r in results] == list(range(19, -1, -1))

        denied = await limiter.check_and_increment(CLIENT, "ai-resource")
        assert denied.allowed is False
        assert denied.remaining == 0
        assert denied.reset_time == START_MS + 60_000

    async def test_denied_requests_do_not_increment(self, limiter, fake_redis):
        for _ in range(25):
            await limiter.check_and_increment(CLIENT, "ai-resource")

        counter = await fake_redis.hgetall(f"rate_limit:{CLIENT}:ai-resource")
        assert int(counter["count"]) == 20

    async def test_window_rollover(self, limiter, clock):
        for _ in range(20):
            await limiter.check_and_increment(CLIENT, "ai-resource")
        assert not (await limiter.check_and_increment(CLIENT, "ai-resource")).allowed

        clock.advance(60_001)
        result = await limiter.check_and_increment(CLIENT, "ai-resource")

        assert result.allowed is True
        assert result.remaining == 19
        assert result.reset_time == START_MS + 60_001 + 60_000

    async def test_rollover_exactly_at_reset_time(self, limiter, clock):
        for _ in range(20):
            await limiter.check_and_increment(CLIENT, "ai-resource")

        clock.advance(60_000)

        assert (await limiter.check_and_increment(CLIENT, "ai-resource")).allowed

    async def test_identities_and_policies_are_independent(self, limiter):
        for _ in range(20):
            await limiter.check_and_increment(CLIENT, "ai-resource")

        other_client = await limiter.check_and_increment("198.51.100.7", "ai-resource")
        other_policy = await limiter.check_and_increment(CLIENT, "general-api")

        assert other_client.allowed and other_client.remaining == 19
        assert other_policy.allowed and other_policy.remaining == 199

    async def test_concurrent_requests_never_over_admit(self, limiter):
        results = await asyncio.gather(
            *(limiter.check_and_increment(CLIENT, "ai-resource") for _ in range(50))
        )

        assert sum(r.allowed for r in results) == 20
        assert sorted(r.remaining for r in results if r.allowed) == list(range(20))

    async def test_counter_key_carries_store_ttl(self, limiter, fake_redis):
        await limiter.check_and_increment(CLIENT, "ai-resource")

        pttl = await fake_redis.pttl(f"rate_limit:{CLIENT}:ai-resource")
        assert 0 < pttl <= 60_000

    async def test_unknown_policy_raises(self, limiter):
        with pytest.raises(InvalidPolicyException):
            await limiter.check_and_increment(CLIENT, "unlimited")


@pytest.mark.asyncio
class TestBackendFailurePolicy:
    async def test_deny_on_backend_error(self, broken_store, clock):
        limiter = FixedWindowRateLimiter(broken_store, on_backend_error="deny", clock=clock)

        result = await limiter.check_and_increment(CLIENT, "ai-resource")

        assert result.allowed is False
        assert result.backend_error is True
        assert result.remaining == 0

    async def test_allow_on_backend_error(self, broken_store, clock):
        limiter = FixedWindowRateLimiter(broken_store, on_backend_error="allow", clock=clock)

        result = await limiter.check_and_increment(CLIENT, "ai-resource")

        assert result.allowed is True
        assert result.backend_error is True
        assert result.remaining == 20


@pytest.mark.asyncio
class TestStatus:
    async def test_absent_counter_is_a_fresh_window(self, limiter):
        status = await limiter.status(CLIENT, "ai-resource")

        assert status.count == 0
        assert status.remaining == 20
        assert status.limit == 20
        assert status.window_ms == 60_000
        assert status.reset_time == START_MS + 60_000
        assert status.backend_available is True

    async def test_status_reflects_counter_without_mutating_it(self, limiter):
        for _ in range(3):
            await limiter.check_and_increment(CLIENT, "ai-resource")

        first = await limiter.status(CLIENT, "ai-resource")
        second = await limiter.status(CLIENT, "ai-resource")

        assert first == second
        assert first.count == 3
        assert first.remaining == 17

        after = await limiter.check_and_increment(CLIENT, "ai-resource")
        assert after.remaining == 16

    async def test_expired_window_reported_fresh(self, limiter, clock):
        for _ in range(5):
            await limiter.check_and_increment(CLIENT, "ai-resource")

        clock.advance(60_000)
        status = await limiter.status(CLIENT, "ai-resource")

        assert status.count == 0
        assert status.remaining == 20
        assert status.reset_time == clock.now + 60_000

    async def test_backend_error_reports_fresh_window(self, broken_store):
        limiter = FixedWindowRateLimiter(broken_store, clock=FakeClock())

        status = await limiter.status(CLIENT, "user-action")

        assert status.count == 0
        assert status.remaining == 50
        assert status.backend_available is False
