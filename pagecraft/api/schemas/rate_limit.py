"""
Schemas for the rate-limit status and cache maintenance endpoints.
"""
from pydantic import Field

from pagecraft.api.schemas.base import ResponseSchema


class PolicyStatus(ResponseSchema):
    """One policy's counter as seen by the dashboard."""

    count: int
    remaining: int
    limit: int
    reset_time: int
    window_ms: int


class RateLimitStatusResponse(ResponseSchema):
    open_ai: PolicyStatus = Field(..., alias="openAI")
    user: PolicyStatus
    api: PolicyStatus


class CacheStatsResponse(ResponseSchema):
    key_count: int
    memory_usage: str


class CacheClearResponse(ResponseSchema):
    cleared: bool


__all__ = [
    "PolicyStatus",
    "RateLimitStatusResponse",
    "CacheStatsResponse",
    "CacheClearResponse",
]
