"""
Rate-limit status reporting.

Aggregates the read-only status of the three named policies for one caller,
in the shape the dashboard widget consumes:

    {
        "openAI": {"count": 3, "remaining": 17, "limit": 20,
                   "resetTime": 1760870460000, "windowMs": 60000},
        "user":   {...},
        "api":    {...},
    }

Reporting never increments a counter. The payload is recomputed per call.
"""
import asyncio
from typing import Any, Final

from pagecraft.core.config.rate_limits import RateLimitPolicy
from pagecraft.core.ratelimit.limiter import FixedWindowRateLimiter, RateLimitStatus

STATUS_SECTIONS: Final[dict[str, RateLimitPolicy]] = {
    "openAI": RateLimitPolicy.AI_RESOURCE,
    "user": RateLimitPolicy.USER_ACTION,
    "api": RateLimitPolicy.GENERAL_API,
}


def status_to_payload(status: RateLimitStatus) -> dict[str, int]:
    return {
        "count": status.count,
        "remaining": status.remaining,
        "limit": status.limit,
        "resetTime": status.reset_time,
        "windowMs": status.window_ms,
    }


class RateLimitStatusReporter:
    """
    Status of every named policy for one caller.

    The user section is read under the user identity (X-User-Id when sent),
    the other sections under the client address, matching RateLimitGuard.
    """

    def __init__(self, limiter: FixedWindowRateLimiter) -> None:
        self._limiter = limiter

    async def collect(
        self,
        identity: str,
        user_identity: str | None = None,
    ) -> dict[str, RateLimitStatus]:
        """Raw RateLimitStatus per dashboard section."""
        user_identity = user_identity or identity
        statuses = await asyncio.gather(
            *(
                self._limiter.status(
                    user_identity if policy is RateLimitPolicy.USER_ACTION else identity,
                    policy,
                )
                for policy in STATUS_SECTIONS.values()
            )
        )
        return dict(zip(STATUS_SECTIONS, statuses))

    async def report(self, identity: str, user_identity: str | None = None) -> dict[str, Any]:
        """
        Build the dashboard payload for one caller.

        Example:
            >>> payload = await reporter.report("203.0.113.5", user_identity="user-42")
            >>> payload["openAI"]["limit"]
            20
        """
        statuses = await self.collect(identity, user_identity)
        return {section: status_to_payload(status) for section, status in statuses.items()}


__all__ = [
    "STATUS_SECTIONS",
    "status_to_payload",
    "RateLimitStatusReporter",
]
