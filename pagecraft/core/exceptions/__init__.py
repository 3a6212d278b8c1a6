"""
Custom exceptions for pagecraft.

This module provides the application exception hierarchy:
- Base exception class
- HTTP exceptions (400, 429, 500, 503)
- Cache exceptions (backend unavailable / operation failed)
- Configuration exceptions (programmer errors: unknown policy or category)
- LLM exceptions (AI completion failures)

All exceptions include:
- Error code
- Status code
- Human-readable message
- Additional context (details dict)
- Serialization support

Cache exceptions never leave the cache / rate-limit layer: the cache facade
and the rate limiter convert them into sentinel results. Configuration
exceptions always propagate because they indicate a bug.

Usage:
    >>> from pagecraft.core.exceptions import TooManyRequestsException
    >>>
    >>> if not result.allowed:
    ...     raise TooManyRequestsException(
    ...         details={"limit": 20, "retry_after": 12},
    ...         headers={"Retry-After": "12"},
    ...     )
"""
from typing import Any

from pagecraft.core.constants import (
    ERR_CACHE,
    ERR_CACHE_CONNECTION,
    ERR_CACHE_OPERATION,
    ERR_CONFIGURATION,
    ERR_INTERNAL,
    ERR_INVALID_CACHE_CATEGORY,
    ERR_INVALID_INPUT,
    ERR_INVALID_POLICY,
    ERR_LLM_CONNECTION,
    ERR_LLM_INVALID_RESPONSE,
    ERR_LLM_RATE_LIMIT,
    ERR_LLM_TIMEOUT,
    ERR_RATE_LIMIT,
    ERR_SERVICE_UNAVAILABLE,
    HTTP_BAD_GATEWAY,
    HTTP_BAD_REQUEST,
    HTTP_GATEWAY_TIMEOUT,
    HTTP_INTERNAL_SERVER_ERROR,
    HTTP_SERVICE_UNAVAILABLE,
    HTTP_TOO_MANY_REQUESTS,
)


# =============================================================================
# BASE EXCEPTION
# =============================================================================

class BaseAppException(Exception):
    """
    Base exception for all application exceptions.

    Attributes:
        message: Human-readable error message
        code: Machine-readable error code
        details: Additional error context
        status_code: HTTP status code (if applicable)
        headers: Extra response headers (e.g. Retry-After)
    """

    def __init__(
        self,
        message: str,
        code: str | None = None,
        details: dict[str, Any] | None = None,
        status_code: int | None = None,
        headers: dict[str, str] | None = None,
    ) -> None:
        self.message = message
        self.code = code or "UNKNOWN_ERROR"
        self.details = details or {}
        self.status_code = status_code
        self.headers = headers or {}

        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """
        Convert exception to dictionary for serialization.

        Example:
            >>> exc = TooManyRequestsException()
            >>> exc.to_dict()
            {'error': 'Too many requests', 'code': 'RATE_LIMIT_EXCEEDED', 'details': {}}
        """
        return {
            "error": self.message,
            "code": self.code,
            "details": self.details,
        }

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} (code: {self.code}, details: {self.details})"
        return f"{self.message} (code: {self.code})"

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"code={self.code!r}, "
            f"details={self.details!r}, "
            f"status_code={self.status_code})"
        )


# =============================================================================
# HTTP EXCEPTIONS
# =============================================================================

class HTTPException(BaseAppException):
    """Base HTTP exception. All HTTP-facing exceptions inherit from this."""

    def __init__(
        self,
        message: str,
        code: str,
        status_code: int,
        details: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code=code,
            details=details,
            status_code=status_code,
            headers=headers,
        )


class BadRequestException(HTTPException):
    """400 Bad Request."""

    def __init__(
        self,
        message: str = "Invalid request",
        code: str = ERR_INVALID_INPUT,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code=code,
            details=details,
            status_code=HTTP_BAD_REQUEST,
        )


class TooManyRequestsException(HTTPException):
    """
    429 Too Many Requests.

    Raised by the HTTP layer when a rate-limit policy denies a request.
    The limiter itself never raises this; denial is a normal result.

    Example:
        >>> raise TooManyRequestsException(
        ...     details={"limit": 20, "retry_after": 41},
        ...     headers={"Retry-After": "41"},
        ... )
    """

    def __init__(
        self,
        message: str = "Too many requests. Please try again later.",
        code: str = ERR_RATE_LIMIT,
        details: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code=code,
            details=details,
            status_code=HTTP_TOO_MANY_REQUESTS,
            headers=headers,
        )


class InternalServerException(HTTPException):
    """500 Internal Server Error."""

    def __init__(
        self,
        message: str = "Internal server error",
        code: str = ERR_INTERNAL,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code=code,
            details=details,
            status_code=HTTP_INTERNAL_SERVER_ERROR,
        )


class ServiceUnavailableException(HTTPException):
    """
    503 Service Unavailable.

    Used when the rate limiter denies a request because its backing store
    is down and the configured backend-error policy is "deny".
    """

    def __init__(
        self,
        message: str = "Service temporarily unavailable",
        code: str = ERR_SERVICE_UNAVAILABLE,
        details: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code=code,
            details=details,
            status_code=HTTP_SERVICE_UNAVAILABLE,
            headers=headers,
        )


# =============================================================================
# CACHE EXCEPTIONS
# =============================================================================

class CacheException(BaseAppException):
    """
    Base cache exception.

    Raised by the store adapter; converted to safe defaults by the layer
    above and never surfaced to HTTP callers.
    """

    def __init__(
        self,
        message: str,
        code: str = ERR_CACHE,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code=code,
            details=details,
        )


class CacheConnectionException(CacheException):
    """Cache backend unreachable (refused, timed out, retries exhausted)."""

    def __init__(
        self,
        message: str = "Cache backend unavailable",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code=ERR_CACHE_CONNECTION,
            details=details,
        )


class CacheOperationException(CacheException):
    """Cache command failed on a reachable backend."""

    def __init__(
        self,
        message: str = "Cache operation failed",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code=ERR_CACHE_OPERATION,
            details=details,
        )


# =============================================================================
# CONFIGURATION EXCEPTIONS (programmer errors)
# =============================================================================

class ConfigurationException(BaseAppException):
    """Invalid static configuration or API misuse. Always propagates."""

    def __init__(
        self,
        message: str,
        code: str = ERR_CONFIGURATION,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code=code,
            details=details,
            status_code=HTTP_INTERNAL_SERVER_ERROR,
        )


class InvalidPolicyException(ConfigurationException):
    """Unknown rate-limit policy name."""

    def __init__(self, policy: Any) -> None:
        super().__init__(
            message=f"Unknown rate-limit policy: {policy!r}",
            code=ERR_INVALID_POLICY,
            details={"policy": str(policy)},
        )


class InvalidCacheCategoryException(ConfigurationException):
    """Unknown cache category or malformed key parameters."""

    def __init__(self, category: Any, reason: str | None = None) -> None:
        message = f"Unknown cache category: {category!r}"
        if reason:
            message = f"Invalid key parameters for {category!r}: {reason}"
        super().__init__(
            message=message,
            code=ERR_INVALID_CACHE_CATEGORY,
            details={"category": str(category)},
        )


# =============================================================================
# LLM EXCEPTIONS
# =============================================================================

class LLMException(BaseAppException):
    """Base exception for AI completion failures."""

    def __init__(
        self,
        message: str,
        code: str,
        details: dict[str, Any] | None = None,
        status_code: int = HTTP_BAD_GATEWAY,
    ) -> None:
        super().__init__(
            message=message,
            code=code,
            details=details,
            status_code=status_code,
        )


class LLMTimeoutException(LLMException):
    """AI completion request timed out."""

    def __init__(
        self,
        message: str = "AI completion request timed out",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code=ERR_LLM_TIMEOUT,
            details=details,
            status_code=HTTP_GATEWAY_TIMEOUT,
        )


class LLMConnectionException(LLMException):
    """AI completion service unreachable."""

    def __init__(
        self,
        message: str = "Could not reach the AI completion service",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code=ERR_LLM_CONNECTION,
            details=details,
        )


class LLMRateLimitException(LLMException):
    """Upstream AI provider rejected the call with its own rate limit."""

    def __init__(
        self,
        message: str = "AI provider rate limit reached",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code=ERR_LLM_RATE_LIMIT,
            details=details,
            status_code=HTTP_TOO_MANY_REQUESTS,
        )


class LLMInvalidResponseException(LLMException):
    """AI provider answered with an unusable body."""

    def __init__(
        self,
        message: str = "Invalid AI completion response",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code=ERR_LLM_INVALID_RESPONSE,
            details=details,
        )


# =============================================================================
# MODULE EXPORTS
# =============================================================================

__all__ = [
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
