"""
Logging configuration for pagecraft.

This module provides the logging setup shared by every module:
- Structured logging with structlog on top of the stdlib logging module
- JSON output (python-json-logger) or human-readable text output
- Context injection (request_id, client identity) via contextvars
- Sensitive data masking (API keys, tokens, authorization headers)

Log Structure (json format):
    {
        "timestamp": "2026-10-19T12:00:00Z",
        "level": "info",
        "logger": "pagecraft.core.config.redis",
        "message": "Redis client ready",
        "url": "redis://localhost:6379",
        "request_id": "abc-123"
    }
"""
import logging
import sys
from typing import Any

import structlog
from pythonjsonlogger import jsonlogger

from pagecraft.core.config.settings import settings
from pagecraft.core.constants import (
    LOG_LEVEL_CRITICAL,
    LOG_LEVEL_DEBUG,
    LOG_LEVEL_ERROR,
    LOG_LEVEL_INFO,
    LOG_LEVEL_WARNING,
)


class LoggingConfig:
    """
    Logging configuration and setup.

    Configures the root logger once and exposes structlog loggers bound to
    the same handlers.
    """

    def __init__(self) -> None:
        self._configured = False
        self._sensitive_fields = {
            "password",
            "token",
            "api_key",
            "secret",
            "authorization",
            "access_token",
        }

    # =========================================================================
    # SETUP
    # =========================================================================

    def configure(self) -> None:
        """
        Configure application logging.

        Idempotent: repeated calls are ignored.

        Example:
            >>> from pagecraft.core.config.logging import logging_config
            >>> logging_config.configure()
        """
        if self._configured:
            return

        self._configure_standard_logging()
        self._configure_structlog()

        self._configured = True

    def _configure_standard_logging(self) -> None:
        root_logger = logging.getLogger()
        root_logger.setLevel(self._get_log_level())

        root_logger.handlers.clear()
        root_logger.addHandler(self._create_console_handler())

        self._configure_third_party_loggers()

    def _configure_structlog(self) -> None:
        processors: list[Any] = [
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            self._mask_sensitive_processor,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
        ]

        if settings.LOG_FORMAT == "json":
            # Hand event keys to the stdlib record so JsonFormatter emits them.
            processors.append(structlog.stdlib.render_to_log_kwargs)
        else:
            processors.append(structlog.processors.KeyValueRenderer(
                key_order=["event"],
                drop_missing=True,
            ))

        structlog.configure(
            processors=processors,
            wrapper_class=structlog.stdlib.BoundLogger,
            context_class=dict,
            logger_factory=structlog.stdlib.LoggerFactory(),
            cache_logger_on_first_use=True,
        )

    # =========================================================================
    # HANDLERS
    # =========================================================================

    def _create_console_handler(self) -> logging.StreamHandler:
        handler = logging.StreamHandler(sys.stdout)
        handler.setLevel(self._get_log_level())

        if settings.LOG_FORMAT == "json":
            handler.setFormatter(self._create_json_formatter())
        else:
            handler.setFormatter(self._create_text_formatter())

        return handler

    # =========================================================================
    # FORMATTERS
    # =========================================================================

    def _create_json_formatter(self) -> jsonlogger.JsonFormatter:
        return jsonlogger.JsonFormatter(
            fmt="%(asctime)s %(levelname)s %(name)s %(message)s",
            rename_fields={
                "levelname": "level",
                "name": "logger",
                "asctime": "timestamp",
            },
        )

    def _create_text_formatter(self) -> logging.Formatter:
        return logging.Formatter(
            fmt="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

    # =========================================================================
    # PROCESSORS
    # =========================================================================

    def _mask_sensitive_processor(
        self,
        logger: Any,
        method_name: str,
        event_dict: dict[str, Any],
    ) -> dict[str, Any]:
        """
        Structlog processor to mask sensitive data.

        Args:
            logger: Logger instance
            method_name: Log method name
            event_dict: Event dictionary

        Returns:
            dict: Event dict with masked sensitive fields
        """
        for key in list(event_dict.keys()):
            if self._is_sensitive(key):
                event_dict[key] = "***MASKED***"
            elif isinstance(event_dict[key], dict):
                event_dict[key] = self._mask_dict(event_dict[key])

        return event_dict

    def _mask_dict(self, data: dict[str, Any]) -> dict[str, Any]:
        masked = {}

        for key, value in data.items():
            if self._is_sensitive(str(key)):
                masked[key] = "***MASKED***"
            elif isinstance(value, dict):
                masked[key] = self._mask_dict(value)
            else:
                masked[key] = value

        return masked

    def _is_sensitive(self, key: str) -> bool:
        lowered = key.lower()
        return any(sensitive in lowered for sensitive in self._sensitive_fields)

    # =========================================================================
    # THIRD-PARTY LOGGERS
    # =========================================================================

    def _configure_third_party_loggers(self) -> None:
        noisy_loggers = {
            "asyncio": logging.WARNING,
            "redis": logging.WARNING,
            "httpx": logging.WARNING,
            "httpcore": logging.WARNING,
            "uvicorn.access": logging.INFO,
        }

        for logger_name, level in noisy_loggers.items():
            logging.getLogger(logger_name).setLevel(level)

    # =========================================================================
    # UTILITIES
    # =========================================================================

    def _get_log_level(self) -> int:
        level_map = {
            LOG_LEVEL_DEBUG: logging.DEBUG,
            LOG_LEVEL_INFO: logging.INFO,
            LOG_LEVEL_WARNING: logging.WARNING,
            LOG_LEVEL_ERROR: logging.ERROR,
            LOG_LEVEL_CRITICAL: logging.CRITICAL,
        }

        return level_map.get(settings.LOG_LEVEL, logging.INFO)

    def get_logger(self, name: str) -> structlog.stdlib.BoundLogger:
        """
        Get a structured logger.

        Example:
            >>> logger = logging_config.get_logger(__name__)
            >>> logger.info("Cache hit", key="meta:ring")
        """
        if not self._configured:
            self.configure()

        return structlog.get_logger(name)

    def set_context(self, **kwargs: Any) -> None:
        """Bind context variables for all subsequent logs in this task."""
        structlog.contextvars.bind_contextvars(**kwargs)

    def clear_context(self) -> None:
        structlog.contextvars.clear_contextvars()


# =============================================================================
# GLOBAL LOGGING CONFIG INSTANCE
# =============================================================================

logging_config = LoggingConfig()


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================

def configure_logging() -> None:
    """Configure application logging. Called once at startup."""
    logging_config.configure()


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """
    Get a configured logger.

    Example:
        >>> from pagecraft.core.config.logging import get_logger
        >>> logger = get_logger(__name__)
        >>> logger.info("Rate limit exceeded", identity="203.0.113.5")
    """
    return logging_config.get_logger(name)


def set_log_context(**kwargs: Any) -> None:
    logging_config.set_context(**kwargs)


def clear_log_context() -> None:
    logging_config.clear_context()


__all__ = [
    "LoggingConfig",
    "logging_config",
    "configure_logging",
    "get_logger",
    "set_log_context",
    "clear_log_context",
]
