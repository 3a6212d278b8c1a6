"""
Global constants for pagecraft.

Application-wide immutable values used across modules:
- Application metadata
- HTTP status codes and error codes
- Cache TTLs per cache category
- Rate-limit policy table values
- Rate-limit response headers
"""
from typing import Final

from pagecraft.core.version import API_PREFIX, __version__

# =============================================================================
# APPLICATION METADATA
# =============================================================================

APP_NAME: Final[str] = "pagecraft"
"""Application display name."""

APP_DESCRIPTION: Final[str] = (
    "SEO content page generator backed by an AI completion service"
)
"""Short application description."""

APP_VERSION: Final[str] = __version__

API_STR: Final[str] = API_PREFIX

# =============================================================================
# HTTP STATUS CODES
# =============================================================================

HTTP_OK: Final[int] = 200
HTTP_BAD_REQUEST: Final[int] = 400
HTTP_NOT_FOUND: Final[int] = 404
HTTP_UNPROCESSABLE_ENTITY: Final[int] = 422
HTTP_TOO_MANY_REQUESTS: Final[int] = 429
HTTP_INTERNAL_SERVER_ERROR: Final[int] = 500
HTTP_BAD_GATEWAY: Final[int] = 502
HTTP_SERVICE_UNAVAILABLE: Final[int] = 503
HTTP_GATEWAY_TIMEOUT: Final[int] = 504

# =============================================================================
# ERROR CODES
# =============================================================================

ERR_INVALID_INPUT: Final[str] = "INVALID_INPUT"
ERR_VALIDATION: Final[str] = "VALIDATION_ERROR"
ERR_RATE_LIMIT: Final[str] = "RATE_LIMIT_EXCEEDED"
ERR_INTERNAL: Final[str] = "INTERNAL_ERROR"
ERR_SERVICE_UNAVAILABLE: Final[str] = "SERVICE_UNAVAILABLE"
ERR_CONFIGURATION: Final[str] = "CONFIGURATION_ERROR"
ERR_INVALID_POLICY: Final[str] = "INVALID_RATE_LIMIT_POLICY"
ERR_INVALID_CACHE_CATEGORY: Final[str] = "INVALID_CACHE_CATEGORY"
ERR_CACHE: Final[str] = "CACHE_ERROR"
ERR_CACHE_CONNECTION: Final[str] = "CACHE_CONNECTION_ERROR"
ERR_CACHE_OPERATION: Final[str] = "CACHE_OPERATION_ERROR"
ERR_LLM_TIMEOUT: Final[str] = "LLM_TIMEOUT"
ERR_LLM_CONNECTION: Final[str] = "LLM_CONNECTION_ERROR"
ERR_LLM_RATE_LIMIT: Final[str] = "LLM_RATE_LIMIT"
ERR_LLM_INVALID_RESPONSE: Final[str] = "LLM_INVALID_RESPONSE"

# =============================================================================
# CACHE CONFIGURATION
# =============================================================================

CACHE_TTL_CONTENT: Final[int] = 3600
"""Generated page content: 1 hour."""

CACHE_TTL_FAQ: Final[int] = 3600
"""Generated FAQ blocks: 1 hour."""

CACHE_TTL_META: Final[int] = 7200
"""Generated meta descriptions: 2 hours."""

CACHE_TTL_PAGE_DATA: Final[int] = 1800
"""Single page payload: 30 minutes."""

CACHE_TTL_PAGE_LIST: Final[int] = 900
"""Filtered page listings: 15 minutes."""

CACHE_TTL_RATE_LIMIT: Final[int] = 60
"""Rate-limit bookkeeping: 1 minute."""

CACHE_TTL_SECURITY: Final[int] = 300
"""Security events and threat scores: 5 minutes."""

CACHE_TTL_ANALYTICS: Final[int] = 3600
"""Analytics aggregates: 1 hour."""

CACHE_DEFAULT_TTL: Final[int] = 3600

FAQ_KEY_PREFIX_LENGTH: Final[int] = 50
"""Characters of content used by the approximate FAQ cache key."""

# =============================================================================
# RATE LIMITING
# =============================================================================

RATE_LIMIT_WINDOW_MS: Final[int] = 60 * 1000
"""All named policies use a one-minute fixed window."""

AI_RESOURCE_MAX_REQUESTS: Final[int] = 20
USER_ACTION_MAX_REQUESTS: Final[int] = 50
GENERAL_API_MAX_REQUESTS: Final[int] = 200

HEADER_RATE_LIMIT_LIMIT: Final[str] = "X-RateLimit-Limit"
HEADER_RATE_LIMIT_REMAINING: Final[str] = "X-RateLimit-Remaining"
HEADER_RATE_LIMIT_RESET: Final[str] = "X-RateLimit-Reset"
HEADER_RETRY_AFTER: Final[str] = "Retry-After"
HEADER_FORWARDED_FOR: Final[str] = "X-Forwarded-For"
HEADER_REAL_IP: Final[str] = "X-Real-IP"
HEADER_USER_ID: Final[str] = "X-User-Id"

UNKNOWN_IDENTITY: Final[str] = "unknown"

# =============================================================================
# LOGGING
# =============================================================================

LOG_LEVEL_DEBUG: Final[str] = "DEBUG"
LOG_LEVEL_INFO: Final[str] = "INFO"
LOG_LEVEL_WARNING: Final[str] = "WARNING"
LOG_LEVEL_ERROR: Final[str] = "ERROR"
LOG_LEVEL_CRITICAL: Final[str] = "CRITICAL"


__all__ = [
    "APP_NAME",
    "APP_DESCRIPTION",
    "APP_VERSION",
    "API_STR",
    "HTTP_OK",
    "HTTP_BAD_REQUEST",
    "HTTP_NOT_FOUND",
    "HTTP_UNPROCESSABLE_ENTITY",
    "HTTP_TOO_MANY_REQUESTS",
    "HTTP_INTERNAL_SERVER_ERROR",
    "HTTP_BAD_GATEWAY",
    "HTTP_SERVICE_UNAVAILABLE",
    "HTTP_GATEWAY_TIMEOUT",
    "ERR_INVALID_INPUT",
    "ERR_VALIDATION",
    "ERR_RATE_LIMIT",
    "ERR_INTERNAL",
    "ERR_SERVICE_UNAVAILABLE",
    "ERR_CONFIGURATION",
    "ERR_INVALID_POLICY",
    "ERR_INVALID_CACHE_CATEGORY",
    "ERR_CACHE",
    "ERR_CACHE_CONNECTION",
    "ERR_CACHE_OPERATION",
    "ERR_LLM_TIMEOUT",
    "ERR_LLM_CONNECTION",
    "ERR_LLM_RATE_LIMIT",
    "ERR_LLM_INVALID_RESPONSE",
    "CACHE_TTL_CONTENT",
    "CACHE_TTL_FAQ",
    "CACHE_TTL_META",
    "CACHE_TTL_PAGE_DATA",
    "CACHE_TTL_PAGE_LIST",
    "CACHE_TTL_RATE_LIMIT",
    "CACHE_TTL_SECURITY",
    "CACHE_TTL_ANALYTICS",
    "CACHE_DEFAULT_TTL",
    "FAQ_KEY_PREFIX_LENGTH",
    "RATE_LIMIT_WINDOW_MS",
    "AI_RESOURCE_MAX_REQUESTS",
    "USER_ACTION_MAX_REQUESTS",
    "GENERAL_API_MAX_REQUESTS",
    "HEADER_RATE_LIMIT_LIMIT",
    "HEADER_RATE_LIMIT_REMAINING",
    "HEADER_RATE_LIMIT_RESET",
    "HEADER_RETRY_AFTER",
    "HEADER_FORWARDED_FOR",
    "HEADER_REAL_IP",
    "HEADER_USER_ID",
    "UNKNOWN_IDENTITY",
    "LOG_LEVEL_DEBUG",
    "LOG_LEVEL_INFO",
    "LOG_LEVEL_WARNING",
    "LOG_LEVEL_ERROR",
    "LOG_LEVEL_CRITICAL",
]
