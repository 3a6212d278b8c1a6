"""
Fixed-window rate limiter for pagecraft.

Counts requests per (identity, policy) in the shared Redis store so every
worker process sees the same quota. Each counter is a Redis hash:

    rate_limit:<identity>:<policy>  ->  {count: <int>, reset_time: <epoch ms>}

Window semantics:
- A counter that is absent, or whose reset_time has passed, is a fresh
  window: count 0, reset_time = now + window_ms.
- A request is admitted while count < max_requests; admission increments
  count by one. A denied request never increments.
- Load, rollover, compare and increment run as one Lua script, so
  concurrent requests for the same key cannot lose updates.

Backend failures are not quota decisions. When the store cannot answer,
the configured on_backend_error policy ("allow" or "deny") decides and the
result is flagged backend_error=True so the HTTP layer can answer 503
instead of 429.

Usage:
    >>> limiter = FixedWindowRateLimiter(store)
    >>> result = await limiter.check_and_increment("203.0.113.5", "ai-resource")
    >>> result.allowed, result.remaining
    (True, 19)
"""
import math
import time
from dataclasses import asdict, dataclass
from typing import Any, Callable, Literal

from pagecraft.core.cache.keys import CacheKeys
from pagecraft.core.config.logging import get_logger
from pagecraft.core.config.rate_limits import (
    PolicyConfig,
    RateLimitPolicy,
    get_policy,
    get_remaining_requests,
    resolve_policy,
)
from pagecraft.core.config.redis import RedisStore
from pagecraft.core.config.settings import settings
from pagecraft.core.constants import CACHE_TTL_RATE_LIMIT
from pagecraft.core.exceptions import CacheException

logger = get_logger(__name__)

BackendErrorPolicy = Literal["allow", "deny"]
Clock = Callable[[], int]


def epoch_ms() -> int:
    """Wall-clock time in epoch milliseconds."""
    return int(time.time() * 1000)


# KEYS[1] counter hash
# ARGV[1] now (ms), ARGV[2] max requests, ARGV[3] key ttl (ms),
# ARGV[4] reset_time of a window starting now (ms, preformatted)
# Returns {allowed, count, reset_time}
FIXED_WINDOW_SCRIPT = """
local key = KEYS[1]
local now = tonumber(ARGV[1])
local limit = tonumber(ARGV[2])
local ttl_ms = tonumber(ARGV[3])

local count = redis.call('HGET', key, 'count')
local reset = redis.call('HGET', key, 'reset_time')

if (not count) or (not reset) or now >= tonumber(reset) then
    count = 0
    reset = ARGV[4]
    redis.call('HSET', key, 'count', 0, 'reset_time', reset)
    redis.call('PEXPIRE', key, ttl_ms)
else
    count = tonumber(count)
end

if count >= limit then
    return {0, count, reset}
end

count = redis.call('HINCRBY', key, 'count', 1)
return {1, count, reset}
"""


# =============================================================================
# RESULTS
# =============================================================================

@dataclass(frozen=True)
class RateLimitResult:
    """
    Outcome of one admission check.

    Attributes:
        allowed: Whether the request may proceed
        remaining: Requests left in the current window
        reset_time: Epoch ms when the current window rolls over
        limit: Policy ceiling
        backend_error: True when the decision came from the backend-error
            policy rather than from the counter
    """

    allowed: bool
    remaining: int
    reset_time: int
    limit: int
    backend_error: bool = False

    def retry_after_seconds(self, now_ms: int) -> int:
        return retry_after_seconds(self.reset_time, now_ms)


@dataclass(frozen=True)
class RateLimitStatus:
    """Read-only view of one counter."""

    count: int
    remaining: int
    limit: int
    reset_time: int
    window_ms: int
    backend_available: bool = True

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def retry_after_seconds(reset_time_ms: int, now_ms: int) -> int:
    """Whole seconds until reset_time, rounded up, never negative."""
    return max(0, math.ceil((reset_time_ms - now_ms) / 1000))


# =============================================================================
# LIMITER
# =============================================================================

class FixedWindowRateLimiter:
    """
    Distributed fixed-window limiter backed by RedisStore.

    Args:
        store: Shared RedisStore
        on_backend_error: "allow" admits requests while the store is down,
            "deny" rejects them (default from RATE_LIMIT_ON_BACKEND_ERROR)
        clock: Returns the current time in epoch ms (injectable for tests)
    """

    def __init__(
        self,
        store: RedisStore,
        on_backend_error: BackendErrorPolicy | None = None,
        clock: Clock | None = None,
    ) -> None:
        self._store = store
        self._on_backend_error = on_backend_error or settings.RATE_LIMIT_ON_BACKEND_ERROR
        if self._on_backend_error not in ("allow", "deny"):
            raise ValueError(
                f"on_backend_error must be 'allow' or 'deny', got {self._on_backend_error!r}"
            )
        self._clock = clock or epoch_ms

    @property
    def on_backend_error(self) -> BackendErrorPolicy:
        return self._on_backend_error

    def now(self) -> int:
        return self._clock()

    @staticmethod
    def counter_key(identity: str, policy: RateLimitPolicy) -> str:
        return CacheKeys.rate_limit(identity, policy.value)

    @staticmethod
    def key_ttl_ms(config: PolicyConfig) -> int:
        """Store TTL of a counter: at least one window, at least the bookkeeping TTL."""
        return max(config.window_ms, CACHE_TTL_RATE_LIMIT * 1000)

    # =========================================================================
    # ADMISSION
    # =========================================================================

    async def check_and_increment(
        self,
        identity: str,
        policy: RateLimitPolicy | str,
    ) -> RateLimitResult:
        """
        Decide whether a request is admitted and count it if so.

        Args:
            identity: Caller identity (client address or user id)
            policy: Policy name

        Returns:
            RateLimitResult. A quota denial is a normal result, not an error.

        Raises:
            InvalidPolicyException: Unknown policy name
        """
        resolved = resolve_policy(policy)
        config = get_policy(resolved)
        key = self.counter_key(identity, resolved)
        now = self._clock()

        try:
            raw = await self._store.eval_script(
                FIXED_WINDOW_SCRIPT,
                keys=[key],
                args=[
                    now,
                    config.max_requests,
                    self.key_ttl_ms(config),
                    str(now + config.window_ms),
                ],
            )
        except CacheException as e:
            return self._backend_failure(identity, resolved, config, now, e)

        try:
            allowed, count, reset_time = (int(value) for value in raw)
        except (TypeError, ValueError) as e:
            logger.error("Unexpected rate-limit script reply", key=key, reply=repr(raw))
            return self._backend_failure(identity, resolved, config, now, e)

        if not allowed:
            logger.info(
                "Rate limit exceeded",
                identity=identity,
                policy=resolved.value,
                count=count,
                limit=config.max_requests,
            )

        return RateLimitResult(
            allowed=bool(allowed),
            remaining=get_remaining_requests(count, config.max_requests),
            reset_time=reset_time,
            limit=config.max_requests,
        )

    def _backend_failure(
        self,
        identity: str,
        policy: RateLimitPolicy,
        config: PolicyConfig,
        now: int,
        error: Exception,
    ) -> RateLimitResult:
        allowed = self._on_backend_error == "allow"
        logger.warning(
            "Rate limiter backend unavailable",
            identity=identity,
            policy=policy.value,
            on_backend_error=self._on_backend_error,
            error=str(error),
        )
        return RateLimitResult(
            allowed=allowed,
            remaining=config.max_requests if allowed else 0,
            reset_time=now + config.window_ms,
            limit=config.max_requests,
            backend_error=True,
        )

    # =========================================================================
    # INSPECTION
    # =========================================================================

    async def status(
        self,
        identity: str,
        policy: RateLimitPolicy | str,
    ) -> RateLimitStatus:
        """
        Report a counter without changing it.

        An absent or expired window is reported as a fresh one. When the
        store cannot answer, a fresh window flagged backend_available=False
        is reported.

        Raises:
            InvalidPolicyException: Unknown policy name
        """
        resolved = resolve_policy(policy)
        config = get_policy(resolved)
        now = self._clock()
        fresh = RateLimitStatus(
            count=0,
            remaining=config.max_requests,
            limit=config.max_requests,
            reset_time=now + config.window_ms,
            window_ms=config.window_ms,
        )

        try:
            counter = await self._store.hgetall_raw(self.counter_key(identity, resolved))
        except CacheException as e:
            logger.warning(
                "Rate limit status unavailable",
                identity=identity,
                policy=resolved.value,
                error=e.message,
            )
            return RateLimitStatus(**{**fresh.to_dict(), "backend_available": False})

        try:
            count = int(counter["count"])
            reset_time = int(counter["reset_time"])
        except (KeyError, TypeError, ValueError):
            return fresh

        if now >= reset_time:
            return fresh

        return RateLimitStatus(
            count=count,
            remaining=get_remaining_requests(count, config.max_requests),
            limit=config.max_requests,
            reset_time=reset_time,
            window_ms=config.window_ms,
        )


__all__ = [
    "BackendErrorPolicy",
    "Clock",
    "epoch_ms",
    "FIXED_WINDOW_SCRIPT",
    "RateLimitResult",
    "RateLimitStatus",
    "retry_after_seconds",
    "FixedWindowRateLimiter",
]
