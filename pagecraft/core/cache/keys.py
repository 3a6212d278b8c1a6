"""
Cache key and TTL registry for pagecraft.

Every cached value belongs to a category. Each category has one key builder
(a pure, deterministic function of its semantic parameters) and one fixed
TTL. Callers never format cache keys by hand.

FAQ keys are approximate on purpose: the default strategy keys on the first
50 characters of the content, so two long contents sharing a prefix share a
cache entry. The "hash" strategy keys on a SHA-256 of the full content and
has no such collision.

Usage:
    >>> from pagecraft.core.cache.keys import CacheCategory, key_for, ttl_for
    >>> key_for(CacheCategory.CONTENT_GENERATION, ["ring", "size", "guide"])
    'content:ring,size,guide'
    >>> ttl_for(CacheCategory.META_GENERATION)
    7200
"""
import hashlib
from collections.abc import Mapping, Sequence
from enum import Enum
from typing import Any, Callable, Final, Literal

from pagecraft.core.constants import (
    CACHE_TTL_ANALYTICS,
    CACHE_TTL_CONTENT,
    CACHE_TTL_FAQ,
    CACHE_TTL_META,
    CACHE_TTL_PAGE_DATA,
    CACHE_TTL_PAGE_LIST,
    CACHE_TTL_RATE_LIMIT,
    CACHE_TTL_SECURITY,
    FAQ_KEY_PREFIX_LENGTH,
)
from pagecraft.core.exceptions import InvalidCacheCategoryException

FaqKeyStrategy = Literal["prefix", "hash"]


class CacheCategory(str, Enum):
    """Semantic cache categories."""

    CONTENT_GENERATION = "content-generation"
    FAQ_GENERATION = "faq-generation"
    META_GENERATION = "meta-generation"
    RATE_LIMIT = "rate-limit"
    PAGE_DATA = "page-data"
    PAGE_LIST = "page-list"
    SECURITY_EVENTS = "security-events"
    THREAT_SCORE = "threat-score"
    ANALYTICS = "analytics"


CACHE_TTL: Final[dict[CacheCategory, int]] = {
    CacheCategory.CONTENT_GENERATION: CACHE_TTL_CONTENT,
    CacheCategory.FAQ_GENERATION: CACHE_TTL_FAQ,
    CacheCategory.META_GENERATION: CACHE_TTL_META,
    CacheCategory.RATE_LIMIT: CACHE_TTL_RATE_LIMIT,
    CacheCategory.PAGE_DATA: CACHE_TTL_PAGE_DATA,
    CacheCategory.PAGE_LIST: CACHE_TTL_PAGE_LIST,
    CacheCategory.SECURITY_EVENTS: CACHE_TTL_SECURITY,
    CacheCategory.THREAT_SCORE: CACHE_TTL_SECURITY,
    CacheCategory.ANALYTICS: CACHE_TTL_ANALYTICS,
}


# =============================================================================
# KEY BUILDERS
# =============================================================================

class CacheKeys:
    """Pure key builders, one per category."""

    @staticmethod
    def content_generation(keywords: str | Sequence[str]) -> str:
        """
        Key for generated page content.

        A keyword list is joined in order; ordering is part of the signature.

        Example:
            >>> CacheKeys.content_generation(["ring", "size", "guide"])
            'content:ring,size,guide'
        """
        return f"content:{_signature(keywords)}"

    @staticmethod
    def faq_generation(content: str, strategy: FaqKeyStrategy = "prefix") -> str:
        """
        Key for a generated FAQ block.

        Args:
            content: Page content the FAQ is generated from
            strategy: "prefix" keys on the first 50 characters (approximate,
                distinct contents with a common prefix collide); "hash" keys
                on a SHA-256 digest of the full content

        Example:
            >>> CacheKeys.faq_generation("Ring sizing explained")
            'faq:Ring sizing explained'
        """
        if strategy == "hash":
            digest = hashlib.sha256(content.encode("utf-8")).hexdigest()
            return f"faq:sha256:{digest}"
        if strategy != "prefix":
            raise InvalidCacheCategoryException(
                CacheCategory.FAQ_GENERATION.value,
                reason=f"unknown FAQ key strategy {strategy!r}",
            )
        return f"faq:{content[:FAQ_KEY_PREFIX_LENGTH]}"

    @staticmethod
    def meta_generation(keyword: str) -> str:
        return f"meta:{keyword}"

    @staticmethod
    def rate_limit(identity: str, endpoint: str) -> str:
        return f"rate_limit:{identity}:{endpoint}"

    @staticmethod
    def page_data(handle: str) -> str:
        return f"page:{handle}"

    @staticmethod
    def page_list(filters: str | Mapping[str, Any]) -> str:
        """Key for a filtered page listing; mapping filters are sorted."""
        if isinstance(filters, Mapping):
            filters = "&".join(f"{k}={filters[k]}" for k in sorted(filters))
        return f"pages:{filters}"

    @staticmethod
    def security_events(identity: str) -> str:
        return f"security:{identity}"

    @staticmethod
    def threat_score(identity: str) -> str:
        return f"threat:{identity}"

    @staticmethod
    def analytics(type_: str, date: str) -> str:
        return f"analytics:{type_}:{date}"


_BUILDERS: Final[dict[CacheCategory, Callable[..., str]]] = {
    CacheCategory.CONTENT_GENERATION: CacheKeys.content_generation,
    CacheCategory.FAQ_GENERATION: CacheKeys.faq_generation,
    CacheCategory.META_GENERATION: CacheKeys.meta_generation,
    CacheCategory.RATE_LIMIT: CacheKeys.rate_limit,
    CacheCategory.PAGE_DATA: CacheKeys.page_data,
    CacheCategory.PAGE_LIST: CacheKeys.page_list,
    CacheCategory.SECURITY_EVENTS: CacheKeys.security_events,
    CacheCategory.THREAT_SCORE: CacheKeys.threat_score,
    CacheCategory.ANALYTICS: CacheKeys.analytics,
}


# =============================================================================
# GENERIC DISPATCH
# =============================================================================

def _signature(parts: str | Sequence[str]) -> str:
    if isinstance(parts, str):
        return parts
    return ",".join(str(part) for part in parts)


def _resolve(category: CacheCategory | str) -> CacheCategory:
    try:
        return CacheCategory(category)
    except ValueError:
        raise InvalidCacheCategoryException(category) from None


def key_for(category: CacheCategory | str, params: Any) -> str:
    """
    Build the cache key for a category.

    Args:
        category: CacheCategory member or its string value
        params: Builder parameters. Content generation takes the keyword list
            itself; other categories take a single value or a sequence of
            positional parameters.

    Raises:
        InvalidCacheCategoryException: Unknown category or wrong arity

    Example:
        >>> key_for("content-generation", ["ring", "size", "guide"])
        'content:ring,size,guide'
        >>> key_for(CacheCategory.ANALYTICS, ("views", "2026-10-19"))
        'analytics:views:2026-10-19'
    """
    resolved = _resolve(category)
    builder = _BUILDERS[resolved]

    if resolved is CacheCategory.CONTENT_GENERATION:
        return builder(params)

    if isinstance(params, (list, tuple)):
        args = tuple(params)
    else:
        args = (params,)

    try:
        return builder(*args)
    except TypeError as e:
        raise InvalidCacheCategoryException(resolved.value, reason=str(e)) from e


def ttl_for(category: CacheCategory | str) -> int:
    """Fixed TTL in seconds for a category."""
    return CACHE_TTL[_resolve(category)]


__all__ = [
    "CacheCategory",
    "CacheKeys",
    "CACHE_TTL",
    "FaqKeyStrategy",
    "key_for",
    "ttl_for",
]
