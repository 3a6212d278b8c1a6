"""
Request and response schemas for the AI generation endpoints.
"""
from pydantic import Field

from pagecraft.api.schemas.base import RequestSchema, ResponseSchema

MAX_KEYWORDS = 20
MAX_KEYWORD_LENGTH = 200
MAX_CONTENT_LENGTH = 50_000


class KeywordItem(RequestSchema):
    keyword: str = Field(..., min_length=1, max_length=MAX_KEYWORD_LENGTH)
    custom_prompt: str | None = Field(default=None, max_length=2_000)


class ContentGenerationRequest(RequestSchema):
    """Body of POST /api/generate-content."""

    main_keyword: str = Field(..., min_length=1, max_length=MAX_KEYWORD_LENGTH)
    keywords: list[KeywordItem] = Field(..., min_length=1, max_length=MAX_KEYWORDS)


class FaqGenerationRequest(RequestSchema):
    """Body of POST /api/generate-faq."""

    content: str = Field(..., min_length=1, max_length=MAX_CONTENT_LENGTH)
    main_keyword: str = Field(..., min_length=1, max_length=MAX_KEYWORD_LENGTH)


class MetaGenerationRequest(RequestSchema):
    """Body of POST /api/generate-meta."""

    main_keyword: str = Field(..., min_length=1, max_length=MAX_KEYWORD_LENGTH)
    content: str | None = Field(default=None, max_length=MAX_CONTENT_LENGTH)
    faq: str | None = Field(default=None, max_length=MAX_CONTENT_LENGTH)


class ContentGenerationResponse(ResponseSchema):
    content: str
    success: bool = True
    cached: bool = False


class FaqGenerationResponse(ResponseSchema):
    faq: str
    success: bool = True
    cached: bool = False
    fallback: bool = False


class MetaGenerationResponse(ResponseSchema):
    meta_title: str
    meta_description: str
    success: bool = True
    cached: bool = False
    fallback: bool = False


__all__ = [
    "KeywordItem",
    "ContentGenerationRequest",
    "FaqGenerationRequest",
    "MetaGenerationRequest",
    "ContentGenerationResponse",
    "FaqGenerationResponse",
    "MetaGenerationResponse",
]
