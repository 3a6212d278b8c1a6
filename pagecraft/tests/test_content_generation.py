"""
Content generation service tests: cache-aside behaviour and fallbacks.
"""
import json

import pytest

from pagecraft.core.cache.keys import CacheKeys
from pagecraft.core.cache.redis import RedisCache
from pagecraft.core.exceptions import LLMTimeoutException
from pagecraft.services.content_generation import (
    ContentGenerator,
    ContentType,
    KeywordSpec,
    build_content_prompt,
    content_signature,
    detect_content_type,
    fallback_meta,
    parse_meta,
    truncate,
)
from pagecraft.tests.doubles import FakeCompletion

CONTENT = "Chocolate cake needs cocoa, butter and patience. " * 5


class TestHelpers:
    @pytest.mark.parametrize(
        "text, expected",
        [
            ("bakery near me", ContentType.LOCAL_BUSINESS),
            ("best stand mixer", ContentType.PRODUCT_REVIEW),
            ("how to bake bread", ContentType.HOW_TO_GUIDE),
            ("catering service", ContentType.SERVICE_GUIDE),
            ("chocolate", ContentType.GENERAL_INFORMATIVE),
        ],
    )
    def test_detect_content_type(self, text, expected):
        assert detect_content_type(text) is expected

    def test_truncate(self):
        assert truncate("short", 60) == "short"
        assert truncate("x" * 70, 60) == "x" * 57 + "..."

    def test_fallback_meta_respects_limits(self):
        meta = fallback_meta("x" * 200)

        assert meta.fallback is True
        assert len(meta.meta_title) == 60
        assert len(meta.meta_description) == 160

    def test_parse_meta_truncates(self):
        raw = json.dumps({"metaTitle": "T" * 80, "metaDescription": "D" * 200})
        meta = parse_meta(raw, "chocolate")

        assert meta.meta_title == "T" * 57 + "..."
        assert meta.meta_description == "D" * 157 + "..."
        assert meta.fallback is False

    def test_parse_meta_non_json_uses_templates(self):
        meta = parse_meta("Here are your tags!", "chocolate")

        assert meta.fallback is True
        assert "chocolate" in meta.meta_title

    def test_content_prompt_lists_keywords_and_instructions(self):
        prompt = build_content_prompt(
            "chocolate",
            [KeywordSpec("cocoa"), KeywordSpec("ganache", custom_prompt="Mention temperatures")],
        )

        assert "1. cocoa\n2. ganache" in prompt
        assert 'Keyword: "ganache"\nInstruction: Mention temperatures' in prompt

    def test_content_signature_covers_prompt_inputs(self):
        signature = content_signature(
            "chocolate",
            [KeywordSpec("cocoa"), KeywordSpec("ganache", custom_prompt="Mention temperatures")],
        )

        assert signature == ["chocolate", "cocoa", "ganache|Mention temperatures"]


@pytest.mark.asyncio
class TestContentGenerator:
    async def test_content_is_cached_by_keyword_list(self, cache, completion, fake_redis):
        generator = ContentGenerator(cache, completion)
        keywords = [KeywordSpec("cocoa"), KeywordSpec("ganache")]

        first = await generator.generate_content("chocolate", keywords)
        second = await generator.generate_content("chocolate", keywords)

        assert first.text == second.text == "<p>generated</p>"
        assert (first.cached, second.cached) == (False, True)
        assert len(completion.calls) == 1
        assert 0 < await fake_redis.ttl("content:chocolate,cocoa,ganache") <= 3600

    async def test_pages_sharing_h2_keywords_do_not_share_content(self, cache):
        completion = FakeCompletion(reply="<p>rings</p>")
        generator = ContentGenerator(cache, completion)

        await generator.generate_content("wedding rings", [KeywordSpec("sizing")])
        completion.reply = "<p>shoes</p>"
        other_topic = await generator.generate_content("running shoes", [KeywordSpec("sizing")])
        other_prompt = await generator.generate_content(
            "wedding rings", [KeywordSpec("sizing", custom_prompt="Talk about resizing")]
        )

        assert other_topic.text == "<p>shoes</p>"
        assert other_topic.cached is False
        assert other_prompt.cached is False
        assert len(completion.calls) == 3

    async def test_content_errors_propagate(self, cache):
        generator = ContentGenerator(cache, FakeCompletion(error=LLMTimeoutException()))

        with pytest.raises(LLMTimeoutException):
            await generator.generate_content("chocolate", [KeywordSpec("cocoa")])

    async def test_content_served_when_cache_is_down(self, broken_store, completion):
        generator = ContentGenerator(RedisCache(broken_store), completion)

        result = await generator.generate_content("chocolate", [KeywordSpec("cocoa")])

        assert result.text == "<p>generated</p>"
        assert result.cached is False

    async def test_faq_is_cached(self, cache, completion):
        generator = ContentGenerator(cache, completion, faq_key_strategy="prefix")

        first = await generator.generate_faq(CONTENT, "chocolate")
        second = await generator.generate_faq(CONTENT, "chocolate")

        assert (first.cached, second.cached) == (False, True)
        assert len(completion.calls) == 1
        assert await cache.get(CacheKeys.faq_generation(CONTENT)) == "<p>generated</p>"

    async def test_faq_hash_strategy(self, cache, completion):
        generator = ContentGenerator(cache, completion, faq_key_strategy="hash")

        await generator.generate_faq(CONTENT, "chocolate")

        assert await cache.exists(CacheKeys.faq_generation(CONTENT, strategy="hash"))
        assert not await cache.exists(CacheKeys.faq_generation(CONTENT))

    async def test_faq_fallback_is_not_cached(self, cache, failing_completion):
        generator = ContentGenerator(cache, failing_completion, faq_key_strategy="prefix")

        result = await generator.generate_faq(CONTENT, "chocolate")

        assert result.fallback is True
        assert "What is chocolate and why is it important?" in result.text
        assert await cache.get(CacheKeys.faq_generation(CONTENT)) is None

    async def test_meta_is_cached(self, cache):
        reply = json.dumps({"metaTitle": "Chocolate Guide", "metaDescription": "All about chocolate."})
        completion = FakeCompletion(reply=reply)
        generator = ContentGenerator(cache, completion)

        first = await generator.generate_meta("chocolate", content=CONTENT)
        second = await generator.generate_meta("chocolate")

        assert first.to_payload() == second.to_payload() == {
            "metaTitle": "Chocolate Guide",
            "metaDescription": "All about chocolate.",
        }
        assert second.cached is True
        assert len(completion.calls) == 1

    async def test_meta_fallback_is_not_cached(self, cache, failing_completion):
        generator = ContentGenerator(cache, failing_completion)

        result = await generator.generate_meta("chocolate")

        assert result.fallback is True
        assert result.meta_title == "chocolate - Complete Guide & Expert Tips"
        assert await cache.get("meta:chocolate") is None
