"""
Content generation service for pagecraft.

Generates the three AI-written parts of a page, each behind the cache:

- Body content: one HTML section per H2 keyword, keyed by the main keyword,
  the H2 keywords and their custom instructions
- FAQ block: two question/answer pairs, keyed by the page content
- Meta tags: title (<= 60 chars) and description (<= 160 chars), keyed by
  the main keyword

Only AI output is cached. Fallback output (FAQ template, meta templates) is
returned to the caller but never stored, so the next request tries the AI
again.

Usage:
    >>> generator = ContentGenerator(cache, completion)
    >>> result = await generator.generate_faq(content, "ring sizes")
    >>> result.cached, result.fallback
    (False, False)
"""
import json
from dataclasses import dataclass
from enum import Enum
from typing import Sequence

from pagecraft.core.cache.keys import CacheCategory, CacheKeys, FaqKeyStrategy, key_for, ttl_for
from pagecraft.core.cache.redis import RedisCache
from pagecraft.core.config.settings import settings
from pagecraft.core.exceptions import LLMException
from pagecraft.core.logging import get_logger
from pagecraft.services.completion import CompletionClient

logger = get_logger(__name__)

META_TITLE_MAX_LENGTH = 60
META_DESCRIPTION_MAX_LENGTH = 160
META_MAX_TOKENS = 200


class ContentType(str, Enum):
    """Page type guessed from keyword wording; steers prompt tone."""

    LOCAL_BUSINESS = "LOCAL_BUSINESS"
    PRODUCT_REVIEW = "PRODUCT_REVIEW"
    HOW_TO_GUIDE = "HOW_TO_GUIDE"
    SERVICE_GUIDE = "SERVICE_GUIDE"
    GENERAL_INFORMATIVE = "GENERAL_INFORMATIVE"


CONTENT_TYPE_FOCUS: dict[ContentType, str] = {
    ContentType.LOCAL_BUSINESS: (
        "Focus on local business information, services, locations, and customer benefits. "
        "Include practical details about what customers can expect."
    ),
    ContentType.PRODUCT_REVIEW: (
        "Provide detailed product analysis, features, pros and cons, and recommendations. "
        "Include specific details and comparisons."
    ),
    ContentType.HOW_TO_GUIDE: (
        "Create step-by-step instructions, tips, and practical advice. "
        "Make it actionable and easy to follow."
    ),
    ContentType.SERVICE_GUIDE: (
        "Explain services, benefits, processes, and what to expect. "
        "Include professional insights and industry knowledge."
    ),
    ContentType.GENERAL_INFORMATIVE: (
        "Provide comprehensive, informative content with practical insights and valuable information."
    ),
}

META_TITLE_TEMPLATES: dict[ContentType, str] = {
    ContentType.LOCAL_BUSINESS: "{keyword} Near Me - Local Services",
    ContentType.PRODUCT_REVIEW: "{keyword} - Expert Review & Guide",
    ContentType.HOW_TO_GUIDE: "{keyword} - Complete Guide & Tips",
    ContentType.SERVICE_GUIDE: "{keyword} - Professional Services",
    ContentType.GENERAL_INFORMATIVE: "{keyword} - Complete Guide & Expert Tips",
}

META_DESCRIPTION_TEMPLATES: dict[ContentType, str] = {
    ContentType.LOCAL_BUSINESS: (
        "Find the best {keyword} near you. Local services, convenient locations, "
        "and expert quality. Book your appointment today."
    ),
    ContentType.PRODUCT_REVIEW: (
        "Expert review of {keyword} with detailed analysis, pros and cons, "
        "and recommendations. Make informed decisions."
    ),
    ContentType.HOW_TO_GUIDE: (
        "Complete guide to {keyword} with step-by-step instructions, expert tips, "
        "and professional advice."
    ),
    ContentType.SERVICE_GUIDE: (
        "Professional {keyword} services with expert guidance, quality assurance, "
        "and comprehensive solutions."
    ),
    ContentType.GENERAL_INFORMATIVE: (
        "Comprehensive guide to {keyword} with expert insights, practical tips, "
        "and professional recommendations."
    ),
}

CONTENT_SYSTEM_PROMPT = """You are a professional content writer specializing in creating detailed, informative content for web pages. Your task is to write specific content for each H2 keyword provided.

IMPORTANT REQUIREMENTS:
- Write detailed, informative content for each keyword
- Focus on providing value and practical information
- Use natural, engaging language
- Include specific details, tips, and insights
- Avoid generic or placeholder content
- Each paragraph should be substantial (150-300 words)
- Write in a professional but accessible tone"""

FAQ_SYSTEM_PROMPT = """You are an expert content writer. Generate exactly 2 FAQ questions and answers based on the provided content. Format the response as HTML with the following structure:

1. Start with: <h2 class="h2-faq-title">Frequently Asked Questions</h2>
2. Then: <hr class="mb-5">
3. Then create FAQ pairs in a grid layout:
   <div class="row mb-4">
     <div class="col-lg-6 mb-4">
       <h2 class="h2-faq">[Question]</h2>
       <p>[Answer]</p>
     </div>
     <div class="col-lg-6 mb-4">
       <h2 class="h2-faq">[Question]</h2>
       <p>[Answer]</p>
     </div>
   </div>

Focus on the main keyword: {main_keyword}."""

META_SYSTEM_PROMPT = """You are a content expert specializing in SEO meta titles and descriptions.

CRITICAL REQUIREMENTS:
- Meta Title: MAXIMUM 60 CHARACTERS (including spaces)
- Meta Description: MAXIMUM 160 CHARACTERS (including spaces)
- ALWAYS include the main keyword in both
- Analyze the provided content and FAQ to understand the page topic

Return only a JSON object with "metaTitle" and "metaDescription" fields."""

FAQ_FALLBACK_TEMPLATE = """<h2 class="h2-faq-title">Frequently Asked Questions</h2>
<hr class="mb-5">

<div class="row mb-4">
    <div class="col-lg-6 mb-4">
        <h2 class="h2-faq">What is {keyword} and why is it important?</h2>
        <p>{keyword} is a valuable topic that provides essential insights and knowledge for various applications and purposes.</p>
    </div>
    <div class="col-lg-6 mb-4">
        <h2 class="h2-faq">How can I learn more about {keyword}?</h2>
        <p>Explore resources, consult experts, and conduct research. This article provides a comprehensive starting point for understanding {keyword}.</p>
    </div>
</div>"""


# =============================================================================
# DATA CLASSES
# =============================================================================

@dataclass(frozen=True)
class KeywordSpec:
    """One H2 keyword, optionally with its own writing instruction."""

    keyword: str
    custom_prompt: str | None = None


@dataclass
class GenerationResult:
    """Generated text plus where it came from."""

    text: str
    cached: bool = False
    fallback: bool = False


@dataclass
class MetaResult:
    meta_title: str
    meta_description: str
    cached: bool = False
    fallback: bool = False

    def to_payload(self) -> dict[str, str]:
        return {"metaTitle": self.meta_title, "metaDescription": self.meta_description}


# =============================================================================
# HELPERS
# =============================================================================

def detect_content_type(*texts: str) -> ContentType:
    """Guess the page type from keyword wording."""
    text = " ".join(texts).lower()
    if "near me" in text or "in " in text or "near " in text:
        return ContentType.LOCAL_BUSINESS
    if "review" in text or "best " in text or "top " in text:
        return ContentType.PRODUCT_REVIEW
    if "guide" in text or "how to" in text or "tips" in text:
        return ContentType.HOW_TO_GUIDE
    if "service" in text or "professional" in text:
        return ContentType.SERVICE_GUIDE
    return ContentType.GENERAL_INFORMATIVE


def truncate(text: str, limit: int) -> str:
    """Cut to limit characters, ending with an ellipsis when cut."""
    if len(text) <= limit:
        return text
    return text[: limit - 3] + "..."


def fallback_faq(main_keyword: str) -> str:
    return FAQ_FALLBACK_TEMPLATE.format(keyword=main_keyword)


def fallback_meta(main_keyword: str) -> MetaResult:
    keyword = main_keyword.strip()
    content_type = detect_content_type(keyword)
    return MetaResult(
        meta_title=truncate(
            META_TITLE_TEMPLATES[content_type].format(keyword=keyword),
            META_TITLE_MAX_LENGTH,
        ),
        meta_description=truncate(
            META_DESCRIPTION_TEMPLATES[content_type].format(keyword=keyword),
            META_DESCRIPTION_MAX_LENGTH,
        ),
        fallback=True,
    )


def content_signature(main_keyword: str, keywords: Sequence[KeywordSpec]) -> list[str]:
    """
    Everything that shapes the content prompt, in order.

    Example:
        >>> content_signature("rings", [KeywordSpec("sizing", custom_prompt="Use mm")])
        ['rings', 'sizing|Use mm']
    """
    return [main_keyword] + [
        f"{k.keyword}|{k.custom_prompt}" if k.custom_prompt else k.keyword for k in keywords
    ]


def build_content_prompt(main_keyword: str, keywords: Sequence[KeywordSpec]) -> str:
    content_type = detect_content_type(main_keyword, *(k.keyword for k in keywords))
    keyword_list = "\n".join(f"{i}. {k.keyword}" for i, k in enumerate(keywords, start=1))
    instructions = "\n\n".join(
        f'({i}) Keyword: "{k.keyword}"\nInstruction: {k.custom_prompt}'
        for i, k in enumerate((k for k in keywords if k.custom_prompt), start=1)
    )

    parts = [
        f"MAIN TOPIC: {main_keyword}",
        f"CONTENT TYPE: {content_type.value}",
        f"CONTENT FOCUS: {CONTENT_TYPE_FOCUS[content_type]}",
        "",
        "H2 KEYWORDS TO WRITE ABOUT:",
        keyword_list,
    ]
    if instructions:
        parts += ["", "SPECIFIC INSTRUCTIONS:", instructions]
    parts += [
        "",
        "Write detailed, specific content for each keyword in the same order. Do not skip any.",
        "Format each section as:",
        '<div class="row mb-4"><div class="col-lg-4 mb-4"></div>'
        '<div class="col-lg-8 mb-4"><h2 class="h2-body-content">[KEYWORD]</h2>'
        '<p class="p-body-content">[CONTENT]</p></div></div>',
    ]
    return "\n".join(parts)


def parse_meta(raw: str, main_keyword: str) -> MetaResult:
    """
    Parse the model's JSON answer, filling gaps from the templates and
    enforcing the length limits.
    """
    defaults = fallback_meta(main_keyword)
    try:
        data = json.loads(raw)
    except ValueError:
        logger.warning("AI meta answer is not JSON, using templates", keyword=main_keyword)
        return defaults

    if not isinstance(data, dict):
        return defaults

    title = data.get("metaTitle") or defaults.meta_title
    description = data.get("metaDescription") or defaults.meta_description
    return MetaResult(
        meta_title=truncate(str(title), META_TITLE_MAX_LENGTH),
        meta_description=truncate(str(description), META_DESCRIPTION_MAX_LENGTH),
    )


# =============================================================================
# SERVICE
# =============================================================================

class ContentGenerator:
    """
    Cache-aside AI generation.

    Args:
        cache: Cache facade
        completion: AI completion client
        faq_key_strategy: "prefix" or "hash" (defaults to FAQ_CACHE_KEY_STRATEGY)
    """

    def __init__(
        self,
        cache: RedisCache,
        completion: CompletionClient,
        faq_key_strategy: FaqKeyStrategy | None = None,
    ) -> None:
        self.cache = cache
        self.completion = completion
        self.faq_key_strategy = faq_key_strategy or settings.FAQ_CACHE_KEY_STRATEGY

    async def generate_content(
        self,
        main_keyword: str,
        keywords: Sequence[KeywordSpec],
    ) -> GenerationResult:
        """
        Generate body content for the H2 keywords.

        AI failures propagate as LLMException; there is no fallback body.
        """
        key = key_for(CacheCategory.CONTENT_GENERATION, content_signature(main_keyword, keywords))

        async def produce() -> str:
            logger.info(
                "Generating content",
                main_keyword=main_keyword,
                keyword_count=len(keywords),
            )
            return await self.completion.complete(
                CONTENT_SYSTEM_PROMPT,
                build_content_prompt(main_keyword, keywords),
            )

        text, hit = await self.cache.get_or_set(
            key, produce, ttl=ttl_for(CacheCategory.CONTENT_GENERATION)
        )
        return GenerationResult(text=text, cached=hit)

    async def generate_faq(self, content: str, main_keyword: str) -> GenerationResult:
        """
        Generate an FAQ block for the content.

        Falls back to a keyword template when the AI call fails; the
        template is returned but not cached.
        """
        key = CacheKeys.faq_generation(content, strategy=self.faq_key_strategy)

        cached = await self.cache.get(key)
        if isinstance(cached, str):
            return GenerationResult(text=cached, cached=True)

        try:
            faq = await self.completion.complete(
                FAQ_SYSTEM_PROMPT.format(main_keyword=main_keyword),
                f"Generate 2 FAQ questions and answers for this content:\n\n{content}",
            )
        except LLMException as e:
            logger.warning(
                "AI FAQ generation failed, using fallback template",
                main_keyword=main_keyword,
                error=e.message,
            )
            return GenerationResult(text=fallback_faq(main_keyword), fallback=True)

        await self.cache.set(key, faq, ttl=ttl_for(CacheCategory.FAQ_GENERATION))
        return GenerationResult(text=faq)

    async def generate_meta(
        self,
        main_keyword: str,
        content: str | None = None,
        faq: str | None = None,
    ) -> MetaResult:
        """
        Generate a meta title and description for the main keyword.

        Falls back to per-content-type templates when the AI call fails;
        template output is not cached.
        """
        key = key_for(CacheCategory.META_GENERATION, main_keyword)

        cached = await self.cache.get(key)
        if isinstance(cached, dict) and "metaTitle" in cached and "metaDescription" in cached:
            return MetaResult(
                meta_title=cached["metaTitle"],
                meta_description=cached["metaDescription"],
                cached=True,
            )

        prompt = (
            "Generate the best meta title and meta description for this webpage.\n\n"
            f"Main keyword to include: {main_keyword}\n\n"
            f"Main content:\n{content or 'Content not provided'}\n\n"
            f"FAQ section:\n{faq or 'FAQ not provided'}"
        )

        try:
            raw = await self.completion.complete(
                META_SYSTEM_PROMPT, prompt, max_tokens=META_MAX_TOKENS
            )
        except LLMException as e:
            logger.warning(
                "AI meta generation failed, using templates",
                main_keyword=main_keyword,
                error=e.message,
            )
            return fallback_meta(main_keyword)

        result = parse_meta(raw, main_keyword)
        if not result.fallback:
            await self.cache.set(
                key, result.to_payload(), ttl=ttl_for(CacheCategory.META_GENERATION)
            )
        return result


__all__ = [
    "ContentType",
    "KeywordSpec",
    "GenerationResult",
    "MetaResult",
    "ContentGenerator",
    "detect_content_type",
    "truncate",
    "fallback_faq",
    "fallback_meta",
    "content_signature",
    "build_content_prompt",
    "parse_meta",
]
