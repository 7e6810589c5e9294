"""Generation Schemas — article, keyword-research and content-analysis requests.

Invariants:
    - Article generation needs a topic (3-200 chars) and 1-20 keywords
    - Content analysis needs content or a URL (model_validator)
    - Every generation response carries the caller's remaining credits
"""

from uuid import UUID

from pydantic import BaseModel, Field, field_validator, model_validator

from lamontai.core.domain_types import ArticleLength
from lamontai.schemas.common import HttpUrlStr


def _clean_keywords(v: list[str]) -> list[str]:
    return [k.strip() for k in v if k and k.strip()]


class ArticleGenerationRequest(BaseModel):
    topic: str = Field(min_length=3, max_length=200)
    keywords: list[str] = Field(min_length=1, max_length=20)
    tone: str = Field("professional", min_length=1, max_length=50)
    style: str = Field("informative", min_length=1, max_length=50)
    length: ArticleLength = ArticleLength.MEDIUM
    include_internal_links: bool = True
    save: bool = False

    @field_validator("topic")
    @classmethod
    def strip_topic(cls, v: str) -> str:
        v = v.strip()
        if len(v) < 3:
            raise ValueError("topic must be at least 3 characters")
        return v

    @field_validator("keywords")
    @classmethod
    def clean_keywords(cls, v: list[str]) -> list[str]:
        cleaned = _clean_keywords(v)
        if not cleaned:
            raise ValueError("at least one keyword is required")
        return cleaned


class KeywordResearchRequest(BaseModel):
    query: str = Field(min_length=2, max_length=200)
    limit: int = Field(10, ge=1, le=50)
    country: str = Field("us", min_length=2, max_length=5)
    language: str = Field("en", min_length=2, max_length=5)

    @field_validator("query")
    @classmethod
    def strip_query(cls, v: str) -> str:
        v = v.strip()
        if len(v) < 2:
            raise ValueError("query must be at least 2 characters")
        return v


class ContentAnalysisRequest(BaseModel):
    content: str | None = Field(None, max_length=100_000)
    keywords: list[str] = Field(default_factory=list, max_length=20)
    url: HttpUrlStr | None = None

    @field_validator("keywords")
    @classmethod
    def clean_keywords(cls, v: list[str]) -> list[str]:
        return _clean_keywords(v)

    @model_validator(mode="after")
    def require_content_or_url(self):
        if not (self.content and self.content.strip()) and not self.url:
            raise ValueError("content or url is required")
        return self


class GenerationResponse(BaseModel):
    success: bool = True
    data: dict
    credits: int
    article_id: UUID | None = None
