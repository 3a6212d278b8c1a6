"""
AI generation endpoints.

All three are guarded by the ai-resource policy and answer from the cache
when they can:

- POST /api/generate-content  Body sections for H2 keywords
- POST /api/generate-faq      FAQ block (template fallback on AI failure)
- POST /api/generate-meta     Meta title and description (template fallback)
"""
from fastapi import APIRouter, Depends

from pagecraft.api.dependencies.rate_limit import RateLimitGuard
from pagecraft.api.dependencies.services import get_content_generator
from pagecraft.api.schemas.generation import (
    ContentGenerationRequest,
    ContentGenerationResponse,
    FaqGenerationRequest,
    FaqGenerationResponse,
    MetaGenerationRequest,
    MetaGenerationResponse,
)
from pagecraft.core.config.rate_limits import RateLimitPolicy
from pagecraft.core.version import API_PREFIX
from pagecraft.services.content_generation import ContentGenerator, KeywordSpec

router = APIRouter(
    prefix=API_PREFIX,
    tags=["Generation"],
    dependencies=[Depends(RateLimitGuard(RateLimitPolicy.AI_RESOURCE))],
)


@router.post(
    "/generate-content",
    response_model=ContentGenerationResponse,
    summary="Generate page body content",
)
async def generate_content(
    body: ContentGenerationRequest,
    generator: ContentGenerator = Depends(get_content_generator),
) -> ContentGenerationResponse:
    result = await generator.generate_content(
        body.main_keyword,
        [KeywordSpec(keyword=k.keyword, custom_prompt=k.custom_prompt) for k in body.keywords],
    )
    return ContentGenerationResponse(content=result.text, cached=result.cached)


@router.post(
    "/generate-faq",
    response_model=FaqGenerationResponse,
    summary="Generate an FAQ block",
)
async def generate_faq(
    body: FaqGenerationRequest,
    generator: ContentGenerator = Depends(get_content_generator),
) -> FaqGenerationResponse:
    result = await generator.generate_faq(body.content, body.main_keyword)
    return FaqGenerationResponse(faq=result.text, cached=result.cached, fallback=result.fallback)


@router.post(
    "/generate-meta",
    response_model=MetaGenerationResponse,
    summary="Generate meta title and description",
)
async def generate_meta(
    body: MetaGenerationRequest,
    generator: ContentGenerator = Depends(get_content_generator),
) -> MetaGenerationResponse:
    result = await generator.generate_meta(body.main_keyword, body.content, body.faq)
    return MetaGenerationResponse(
        meta_title=result.meta_title,
        meta_description=result.meta_description,
        cached=result.cached,
        fallback=result.fallback,
    )


__all__ = ["router"]
