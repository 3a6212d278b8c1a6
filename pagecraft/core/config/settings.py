"""
Main application settings for pagecraft.

Settings are loaded from environment variables (and a local .env file) with
pydantic-settings. Static values that must never change at runtime (TTLs,
policy table) live in pagecraft.core.constants instead.
"""
from functools import lru_cache
from typing import Any, Literal

from pydantic import Field, SecretStr, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from pagecraft.core.constants import APP_NAME, CACHE_DEFAULT_TTL
from pagecraft.core.version import __version__


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.
    """

    # =========================================================================
    # ENVIRONMENT
    # =========================================================================

    ENVIRONMENT: Literal["development", "staging", "production", "test"] = Field(
        default="development",
        description="Application environment",
    )

    DEBUG: bool = Field(
        default=False,
        description="Enable debug mode (error details in responses)",
    )

    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level",
    )

    LOG_FORMAT: Literal["json", "text"] = Field(
        default="text",
        description="Console log format",
    )

    # =========================================================================
    # APPLICATION
    # =========================================================================

    APP_NAME: str = Field(default=APP_NAME)

    APP_VERSION: str = Field(default=__version__)

    ENABLE_DOCS: bool = Field(
        default=True,
        description="Serve OpenAPI docs at /docs",
    )

    API_HOST: str = Field(default="0.0.0.0")

    API_PORT: int = Field(default=8000, ge=1, le=65535)

    # =========================================================================
    # REDIS - shared store for cache entries and rate-limit counters
    # =========================================================================

    REDIS_URL: str = Field(
        default="redis://localhost:6379",
        description="Redis connection URL",
    )

    REDIS_MAX_CONNECTIONS: int = Field(
        default=50,
        description="Maximum connections in the Redis pool",
        ge=1,
        le=1000,
    )

    REDIS_SOCKET_TIMEOUT: float = Field(
        default=5.0,
        description="Socket and connect timeout in seconds",
        gt=0,
    )

    REDIS_CONNECT_MAX_RETRIES: int = Field(
        default=10,
        description="Connect attempts before the store is declared unavailable",
        ge=1,
        le=100,
    )

    REDIS_RETRY_STEP_MS: int = Field(
        default=100,
        description="Backoff growth per failed connect attempt (ms)",
        ge=0,
    )

    REDIS_RETRY_MAX_DELAY_MS: int = Field(
        default=3000,
        description="Backoff ceiling between connect attempts (ms)",
        ge=0,
    )

    # =========================================================================
    # CACHE
    # =========================================================================

    CACHE_DEFAULT_TTL: int = Field(
        default=CACHE_DEFAULT_TTL,
        description="TTL used by cache.set when none is given (seconds)",
        ge=1,
    )

    FAQ_CACHE_KEY_STRATEGY: Literal["prefix", "hash"] = Field(
        default="prefix",
        description="FAQ cache key: content prefix (approximate) or full hash",
    )

    # =========================================================================
    # RATE LIMITING
    # =========================================================================

    RATE_LIMIT_ENABLED: bool = Field(
        default=True,
        description="Enforce rate-limit policies on protected routes",
    )

    RATE_LIMIT_ON_BACKEND_ERROR: Literal["allow", "deny"] = Field(
        default="deny",
        description="Decision when the counter store is unreachable",
    )

    # =========================================================================
    # AI COMPLETION (OpenAI-compatible)
    # =========================================================================

    OPENAI_API_KEY: SecretStr = Field(
        default=SecretStr(""),
        description="API key for the completion provider",
    )

    OPENAI_BASE_URL: str = Field(
        default="https://api.openai.com/v1",
        description="Base URL of the chat-completions API",
    )

    OPENAI_MODEL: str = Field(
        default="gpt-3.5-turbo",
        description="Completion model",
    )

    OPENAI_TIMEOUT: float = Field(
        default=60.0,
        description="Completion request timeout in seconds",
        gt=0,
    )

    OPENAI_MAX_TOKENS: int = Field(
        default=1500,
        ge=1,
        le=32000,
    )

    OPENAI_TEMPERATURE: float = Field(
        default=0.7,
        ge=0.0,
        le=2.0,
    )

    # =========================================================================
    # PYDANTIC SETTINGS CONFIGURATION
    # =========================================================================

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
        validate_default=True,
    )

    # =========================================================================
    # VALIDATORS
    # =========================================================================

    @field_validator("REDIS_URL")
    @classmethod
    def validate_redis_url(cls, v: str) -> str:
        """Validate Redis URL scheme."""
        if not v.startswith(("redis://", "rediss://", "unix://")):
            raise ValueError("REDIS_URL must start with redis://, rediss:// or unix://")
        return v

    @field_validator("OPENAI_BASE_URL")
    @classmethod
    def strip_trailing_slash(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.rstrip("/")
        return v

    @model_validator(mode="after")
    def validate_environment_config(self) -> "Settings":
        """Validate environment-specific configuration."""
        if self.ENVIRONMENT == "production":
            if self.DEBUG:
                raise ValueError("DEBUG must be False in production")
            if self.LOG_LEVEL == "DEBUG":
                raise ValueError("LOG_LEVEL should not be DEBUG in production")

        if self.REDIS_RETRY_STEP_MS > self.REDIS_RETRY_MAX_DELAY_MS:
            raise ValueError(
                "REDIS_RETRY_STEP_MS must not exceed REDIS_RETRY_MAX_DELAY_MS"
            )

        return self

    # =========================================================================
    # COMPUTED PROPERTIES
    # =========================================================================

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT == "production"

    @property
    def redis_url_safe(self) -> str:
        """Redis URL without credentials, for logs."""
        url = self.REDIS_URL
        if "@" in url:
            scheme, rest = url.split("://", 1)
            return f"{scheme}://***@{rest.split('@', 1)[1]}"
        return url


# =============================================================================
# SETTINGS INSTANCE (Singleton)
# =============================================================================

@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Returns:
        Settings: Validated settings instance
    """
    return Settings()


settings = get_settings()


__all__ = [
    "Settings",
    "settings",
    "get_settings",
]
