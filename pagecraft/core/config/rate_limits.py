"""
Rate-limit policies for pagecraft.

Three named fixed-window policies protect the application:

    ai-resource:  20 requests / 60 s  (calls that reach the AI completion API)
    user-action:  50 requests / 60 s  (per-user actions)
    general-api: 200 requests / 60 s  (everything else)

The table is static and process-wide; policies are frozen dataclasses and
cannot be changed at runtime.

Usage:
    >>> from pagecraft.core.config.rate_limits import RateLimitPolicy, get_policy
    >>> get_policy(RateLimitPolicy.AI_RESOURCE).max_requests
    20
"""
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Final, Mapping

from pagecraft.core.constants import (
    AI_RESOURCE_MAX_REQUESTS,
    GENERAL_API_MAX_REQUESTS,
    RATE_LIMIT_WINDOW_MS,
    USER_ACTION_MAX_REQUESTS,
)
from pagecraft.core.exceptions import InvalidPolicyException


class RateLimitPolicy(str, Enum):
    """Named rate-limit policies."""

    AI_RESOURCE = "ai-resource"
    USER_ACTION = "user-action"
    GENERAL_API = "general-api"


@dataclass(frozen=True)
class PolicyConfig:
    """Window length and request ceiling of one policy."""

    window_ms: int
    max_requests: int

    def __post_init__(self) -> None:
        if self.window_ms <= 0:
            raise ValueError("window_ms must be positive")
        if self.max_requests <= 0:
            raise ValueError("max_requests must be positive")


RATE_LIMIT_POLICIES: Final[Mapping[RateLimitPolicy, PolicyConfig]] = MappingProxyType({
    RateLimitPolicy.AI_RESOURCE: PolicyConfig(
        window_ms=RATE_LIMIT_WINDOW_MS,
        max_requests=AI_RESOURCE_MAX_REQUESTS,
    ),
    RateLimitPolicy.USER_ACTION: PolicyConfig(
        window_ms=RATE_LIMIT_WINDOW_MS,
        max_requests=USER_ACTION_MAX_REQUESTS,
    ),
    RateLimitPolicy.GENERAL_API: PolicyConfig(
        window_ms=RATE_LIMIT_WINDOW_MS,
        max_requests=GENERAL_API_MAX_REQUESTS,
    ),
})


def resolve_policy(policy: RateLimitPolicy | str) -> RateLimitPolicy:
    """
    Normalize a policy name.

    Raises:
        InvalidPolicyException: If the name is not a known policy
    """
    try:
        return RateLimitPolicy(policy)
    except ValueError:
        raise InvalidPolicyException(policy) from None


def get_policy(policy: RateLimitPolicy | str) -> PolicyConfig:
    """Get the configuration of a named policy."""
    return RATE_LIMIT_POLICIES[resolve_policy(policy)]


def get_remaining_requests(count: int, limit: int) -> int:
    return max(0, limit - count)


__all__ = [
    "RateLimitPolicy",
    "PolicyConfig",
    "RATE_LIMIT_POLICIES",
    "resolve_policy",
    "get_policy",
    "get_remaining_requests",
]
