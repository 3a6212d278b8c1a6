"""
Rate limiting for pagecraft.

Usage:
    >>> from pagecraft.core.ratelimit import FixedWindowRateLimiter, RateLimitPolicy
    >>> limiter = FixedWindowRateLimiter(store)
    >>> result = await limiter.check_and_increment(ip, RateLimitPolicy.AI_RESOURCE)
"""

from pagecraft.core.config.rate_limits import (
    RATE_LIMIT_POLICIES,
    PolicyConfig,
    RateLimitPolicy,
    get_policy,
)
from pagecraft.core.ratelimit.limiter import (
    FixedWindowRateLimiter,
    RateLimitResult,
    RateLimitStatus,
    epoch_ms,
    retry_after_seconds,
)
from pagecraft.core.ratelimit.status import RateLimitStatusReporter

__all__ = [
    "RATE_LIMIT_POLICIES",
    "PolicyConfig",
    "RateLimitPolicy",
    "get_policy",
    "FixedWindowRateLimiter",
    "RateLimitResult",
    "RateLimitStatus",
    "epoch_ms",
    "retry_after_seconds",
    "RateLimitStatusReporter",
]
