"""
Configuration management for pagecraft.

This module provides centralized configuration management using Pydantic Settings.
Configuration is loaded from:
1. Environment variables (.env file)
2. System environment
3. Default values (fallback)

Available configurations:
- settings: Main application settings
- logging: structlog configuration
- redis: Shared Redis store and its lifecycle
- rate_limits: Named rate-limit policies

Usage:
    >>> from pagecraft.core.config import settings, init_store
    >>> print(settings.APP_NAME)
    pagecraft
    >>> store = await init_store()
"""

# =============================================================================
# MAIN SETTINGS
# =============================================================================

from pagecraft.core.config.settings import (
    Settings,
    get_settings,
    settings,
)

# =============================================================================
# LOGGING CONFIGURATION
# =============================================================================

from pagecraft.core.config.logging import (
    LoggingConfig,
    configure_logging,
    get_logger,
    logging_config,
)

# =============================================================================
# REDIS CONFIGURATION
# =============================================================================

from pagecraft.core.config.redis import (
    RedisStore,
    StoreState,
    get_store,
    init_store,
    shutdown_store,
)

# =============================================================================
# RATE LIMIT POLICIES
# =============================================================================

from pagecraft.core.config.rate_limits import (
    RATE_LIMIT_POLICIES,
    PolicyConfig,
    RateLimitPolicy,
    get_policy,
)

__all__ = [
    # Settings
    "Settings",
    "get_settings",
    "settings",
    # Logging
    "LoggingConfig",
    "configure_logging",
    "get_logger",
    "logging_config",
    # Redis
    "RedisStore",
    "StoreState",
    "get_store",
    "init_store",
    "shutdown_store",
    # Rate limits
    "RATE_LIMIT_POLICIES",
    "PolicyConfig",
    "RateLimitPolicy",
    "get_policy",
]
