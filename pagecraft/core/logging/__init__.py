"""
Logging utilities for pagecraft.

Re-exports the structlog helpers configured in pagecraft.core.config.logging
so application modules import them from one place.

Usage:
    >>> from pagecraft.core.logging import get_logger
    >>> logger = get_logger(__name__)
"""

from pagecraft.core.config.logging import (
    clear_log_context,
    configure_logging,
    get_logger,
    logging_config,
    set_log_context,
)

__all__ = [
    "configure_logging",
    "get_logger",
    "set_log_context",
    "clear_log_context",
    "logging_config",
]
