"""
Core module for the pagecraft backend.

This module provides foundational components:
- Configuration management
- Logging configuration
- Shared Redis store
- Cache management
- Rate limiting
- Exception handling

All core functionality should be imported from here for consistency.

Usage:
    >>> from pagecraft.core import settings, get_logger
    >>> from pagecraft.core import RedisCache, FixedWindowRateLimiter
    >>> from pagecraft.core import TooManyRequestsException
    >>>
    >>> logger = get_logger(__name__)
    >>> logger.info("Application started", version=settings.APP_VERSION)
"""

# =============================================================================
# VERSION INFO
# =============================================================================

from pagecraft.core.version import (
    __version__,
    __version_info__,
)

# =============================================================================
# CONSTANTS
# =============================================================================

from pagecraft.core.constants import *  # noqa: F403

# =============================================================================
# CONFIGURATION
# =============================================================================

from pagecraft.core.config import (
    RATE_LIMIT_POLICIES,
    PolicyConfig,
    RateLimitPolicy,
    RedisStore,
    Settings,
    StoreState,
    configure_logging,
    get_logger,
    get_policy,
    get_settings,
    get_store,
    init_store,
    settings,
    shutdown_store,
)

# =============================================================================
# CACHE
# =============================================================================

from pagecraft.core.cache import (
    CacheCategory,
    CacheKeys,
    CacheStats,
    JSONValue,
    RedisCache,
    key_for,
    ttl_for,
)

# =============================================================================
# RATE LIMITING
# =============================================================================

from pagecraft.core.ratelimit import (
    FixedWindowRateLimiter,
    RateLimitResult,
    RateLimitStatus,
    RateLimitStatusReporter,
)

# =============================================================================
# EXCEPTIONS
# =============================================================================

from pagecraft.core.exceptions import (
    BadRequestException,
    BaseAppException,
    CacheConnectionException,
    CacheException,
    CacheOperationException,
    ConfigurationException,
    HTTPException,
    InternalServerException,
    InvalidCacheCategoryException,
    InvalidPolicyException,
    LLMConnectionException,
    LLMException,
    LLMInvalidResponseException,
    LLMRateLimitException,
    LLMTimeoutException,
    ServiceUnavailableException,
    TooManyRequestsException,
)

__all__ = [
    # Version
    "__version__",
    "__version_info__",
    # Configuration
    "Settings",
    "get_settings",
    "settings",
    "configure_logging",
    "get_logger",
    "RedisStore",
    "StoreState",
    "init_store",
    "shutdown_store",
    "get_store",
    "RATE_LIMIT_POLICIES",
    "PolicyConfig",
    "RateLimitPolicy",
    "get_policy",
    # Cache
    "CacheCategory",
    "CacheKeys",
    "CacheStats",
    "JSONValue",
    "RedisCache",
    "key_for",
    "ttl_for",
    # Rate limiting
    "FixedWindowRateLimiter",
    "RateLimitResult",
    "RateLimitStatus",
    "RateLimitStatusReporter",
    # Exceptions
    "BaseAppException",
    "HTTPException",
    "BadRequestException",
    "TooManyRequestsException",
    "InternalServerException",
    "ServiceUnavailableException",
    "CacheException",
    "CacheConnectionException",
    "CacheOperationException",
    "ConfigurationException",
    "InvalidPolicyException",
    "InvalidCacheCategoryException",
    "LLMException",
    "LLMTimeoutException",
    "LLMConnectionException",
    "LLMRateLimitException",
    "LLMInvalidResponseException",
]
