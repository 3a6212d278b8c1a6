"""
Cache key and TTL registry tests.
"""
import pytest

from pagecraft.core.cache.keys import CACHE_TTL, CacheCategory, CacheKeys, key_for, ttl_for
from pagecraft.core.exceptions import InvalidCacheCategoryException


class TestKeyBuilders:
    def test_content_key_joins_keywords_in_order(self):
        assert key_for(CacheCategory.CONTENT_GENERATION, ["ring", "size", "guide"]) == (
            "content:ring,size,guide"
        )
        assert key_for("content-generation", ["guide", "ring"]) != key_for(
            "content-generation", ["ring", "guide"]
        )

    def test_faq_prefix_key_uses_first_50_characters(self):
        base = "x" * 50
        first = CacheKeys.faq_generation(base + " about rings")
        second = CacheKeys.faq_generation(base + " about necklaces")

        assert first == f"faq:{base}"
        # Approximate key: a shared 50-character prefix collides
        assert first == second

    def test_faq_short_content_is_used_whole(self):
        assert key_for(CacheCategory.FAQ_GENERATION, "Ring sizing") == "faq:Ring sizing"

    def test_faq_hash_key_distinguishes_shared_prefix(self):
        base = "x" * 50
        first = CacheKeys.faq_generation(base + " about rings", strategy="hash")
        second = CacheKeys.faq_generation(base + " about necklaces", strategy="hash")

        assert first.startswith("faq:sha256:")
        assert len(first) == len("faq:sha256:") + 64
        assert first != second

    def test_faq_unknown_strategy_rejected(self):
        with pytest.raises(InvalidCacheCategoryException):
            CacheKeys.faq_generation("content", strategy="md5")

    @pytest.mark.parametrize(
        "category, params, expected",
        [
            (CacheCategory.META_GENERATION, "ring sizes", "meta:ring sizes"),
            (CacheCategory.RATE_LIMIT, ("203.0.113.5", "ai-resource"), "rate_limit:203.0.113.5:ai-resource"),
            (CacheCategory.PAGE_DATA, "ring-size-guide", "page:ring-size-guide"),
            (CacheCategory.PAGE_LIST, "published", "pages:published"),
            (CacheCategory.SECURITY_EVENTS, "203.0.113.5", "security:203.0.113.5"),
            (CacheCategory.THREAT_SCORE, "203.0.113.5", "threat:203.0.113.5"),
            (CacheCategory.ANALYTICS, ["views", "2026-10-19"], "analytics:views:2026-10-19"),
        ],
    )
    def test_key_formats(self, category, params, expected):
        assert key_for(category, params) == expected

    def test_keys_are_deterministic(self):
        assert key_for("meta-generation", "ring") == key_for(CacheCategory.META_GENERATION, "ring")

    def test_page_list_mapping_is_sorted(self):
        assert CacheKeys.page_list({"status": "live", "parent": "rings"}) == (
            "pages:parent=rings&status=live"
        )

    def test_unknown_category_rejected(self):
        with pytest.raises(InvalidCacheCategoryException):
            key_for("recipes", "cake")

    def test_wrong_arity_rejected(self):
        with pytest.raises(InvalidCacheCategoryException):
            key_for(CacheCategory.ANALYTICS, "views")


class TestTTLs:
    @pytest.mark.parametrize(
        "category, ttl",
        [
            (CacheCategory.CONTENT_GENERATION, 3600),
            (CacheCategory.FAQ_GENERATION, 3600),
            (CacheCategory.META_GENERATION, 7200),
            (CacheCategory.RATE_LIMIT, 60),
            (CacheCategory.PAGE_DATA, 1800),
            (CacheCategory.PAGE_LIST, 900),
            (CacheCategory.SECURITY_EVENTS, 300),
            (CacheCategory.THREAT_SCORE, 300),
            (CacheCategory.ANALYTICS, 3600),
        ],
    )
    def test_fixed_ttl_per_category(self, category, ttl):
        assert ttl_for(category) == ttl

    def test_every_category_has_a_positive_ttl(self):
        assert set(CACHE_TTL) == set(CacheCategory)
        assert all(ttl > 0 for ttl in CACHE_TTL.values())

    def test_unknown_category_rejected(self):
        with pytest.raises(InvalidCacheCategoryException):
            ttl_for("recipes")
