"""
Semantic versioning for pagecraft.

The version here is the single source of truth for the application and
must be kept in sync with pyproject.toml.

Usage:
    >>> from pagecraft.core.version import __version__, get_full_version
    >>> __version__
    '0.4.0'
"""
import sys
from typing import Final

# =============================================================================
# VERSION - SINGLE SOURCE OF TRUTH
# =============================================================================

__version__: Final[str] = "0.4.0"
"""Application version in semantic versioning format."""

__version_info__: Final[tuple[int, int, int]] = (0, 4, 0)
"""Version as a tuple of integers (major, minor, patch)."""

API_PREFIX: Final[str] = "/api"
"""Prefix shared by all JSON routes."""


def get_version() -> str:
    """Return the bare version string."""
    return __version__


def get_full_version() -> str:
    """
    Get version string with interpreter metadata.

    Used in health responses and startup logs.

    Example:
        >>> get_full_version()
        '0.4.0 | python=3.12.4'
    """
    py_version = f"{sys.version_info.major}.{sys.version_info.minor}.{sys.version_info.micro}"
    return f"{__version__} | python={py_version}"


__all__ = [
    "__version__",
    "__version_info__",
    "API_PREFIX",
    "get_version",
    "get_full_version",
]
