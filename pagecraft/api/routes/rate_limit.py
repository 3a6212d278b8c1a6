"""
Rate-limit status endpoint.

GET /api/rate-limit-status reports the caller's counters for every named
policy. Reading the status never consumes quota. The user section follows
X-User-Id when the caller sends it, as the user-action guard does.
"""
from fastapi import APIRouter, Depends, Request

from pagecraft.api.dependencies.rate_limit import get_client_identity, get_user_identity
from pagecraft.api.dependencies.services import get_status_reporter
from pagecraft.api.schemas.rate_limit import RateLimitStatusResponse
from pagecraft.core.ratelimit.status import RateLimitStatusReporter
from pagecraft.core.version import API_PREFIX

router = APIRouter(prefix=API_PREFIX, tags=["Rate Limits"])


@router.get(
    "/rate-limit-status",
    response_model=RateLimitStatusResponse,
    summary="Current rate-limit usage for the caller",
)
async def rate_limit_status(
    request: Request,
    reporter: RateLimitStatusReporter = Depends(get_status_reporter),
) -> RateLimitStatusResponse:
    payload = await reporter.report(
        get_client_identity(request),
        user_identity=get_user_identity(request),
    )
    return RateLimitStatusResponse.model_validate(payload)


__all__ = ["router"]
