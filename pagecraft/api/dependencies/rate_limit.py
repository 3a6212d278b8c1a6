"""
Rate limiting dependency for pagecraft routes.

Usage:
    >>> @router.post(
    ...     "/generate-faq",
    ...     dependencies=[Depends(RateLimitGuard(RateLimitPolicy.AI_RESOURCE))],
    ... )
    ... async def generate_faq(...): ...

Admitted responses carry X-RateLimit-Limit, X-RateLimit-Remaining and
X-RateLimit-Reset (epoch ms). A quota denial raises 429 with the same
headers plus Retry-After (seconds). A denial caused by an unavailable
backend raises 503.
"""

from fastapi import Depends, Request, Response

from pagecraft.api.dependencies.services import get_rate_limiter
from pagecraft.core.config.rate_limits import RateLimitPolicy, resolve_policy
from pagecraft.core.config.settings import settings
from pagecraft.core.constants import (
    HEADER_FORWARDED_FOR,
    HEADER_RATE_LIMIT_LIMIT,
    HEADER_RATE_LIMIT_REMAINING,
    HEADER_RATE_LIMIT_RESET,
    HEADER_REAL_IP,
    HEADER_RETRY_AFTER,
    HEADER_USER_ID,
    UNKNOWN_IDENTITY,
)
from pagecraft.core.exceptions import ServiceUnavailableException, TooManyRequestsException
from pagecraft.core.logging import get_logger
from pagecraft.core.ratelimit.limiter import FixedWindowRateLimiter, RateLimitResult

logger = get_logger(__name__)


def get_client_identity(request: Request) -> str:
    """
    Client address used as rate-limit identity.

    Order: first X-Forwarded-For hop, X-Real-IP, socket peer, "unknown".
    """
    forwarded = request.headers.get(HEADER_FORWARDED_FOR)
    if forwarded:
        first_hop = forwarded.split(",")[0].strip()
        if first_hop:
            return first_hop

    real_ip = request.headers.get(HEADER_REAL_IP, "").strip()
    if real_ip:
        return real_ip

    if request.client and request.client.host:
        return request.client.host

    return UNKNOWN_IDENTITY


def get_user_identity(request: Request) -> str:
    """X-User-Id when present, otherwise the client address."""
    user_id = request.headers.get(HEADER_USER_ID, "").strip()
    return user_id or get_client_identity(request)


def rate_limit_headers(result: RateLimitResult) -> dict[str, str]:
    return {
        HEADER_RATE_LIMIT_LIMIT: str(result.limit),
        HEADER_RATE_LIMIT_REMAINING: str(result.remaining),
        HEADER_RATE_LIMIT_RESET: str(result.reset_time),
    }


class RateLimitGuard:
    """
    FastAPI dependency enforcing one named policy.

    Args:
        policy: Policy to enforce; unknown names fail at construction
    """

    def __init__(self, policy: RateLimitPolicy | str) -> None:
        self.policy = resolve_policy(policy)

    def identity(self, request: Request) -> str:
        if self.policy is RateLimitPolicy.USER_ACTION:
            return get_user_identity(request)
        return get_client_identity(request)

    async def __call__(
        self,
        request: Request,
        response: Response,
        limiter: FixedWindowRateLimiter = Depends(get_rate_limiter),
    ) -> RateLimitResult | None:
        if not settings.RATE_LIMIT_ENABLED:
            return None

        identity = self.identity(request)
        result = await limiter.check_and_increment(identity, self.policy)
        headers = rate_limit_headers(result)

        if result.allowed:
            response.headers.update(headers)
            return result

        retry_after = result.retry_after_seconds(limiter.now())
        headers[HEADER_RETRY_AFTER] = str(retry_after)

        if result.backend_error:
            raise ServiceUnavailableException(
                message="Rate limiting is temporarily unavailable. Please try again later.",
                details={"policy": self.policy.value},
                headers=headers,
            )

        raise TooManyRequestsException(
            details={
                "policy": self.policy.value,
                "limit": result.limit,
                "retryAfter": retry_after,
            },
            headers=headers,
        )


__all__ = [
    "RateLimitGuard",
    "get_client_identity",
    "get_user_identity",
    "rate_limit_headers",
]
