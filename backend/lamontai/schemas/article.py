"""Article Schemas — create/update payloads and the public article view.

Invariants:
    - title 1-200 chars (stripped), content at least 50 chars, snippet at most 300 chars
    - keywords: at least one non-blank keyword whenever keywords are given
    - scores are 0-100
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from lamontai.core.domain_types import ArticleStatus


def _clean_keywords(v: list[str] | None) -> list[str] | None:
    if v is None:
        return v
    cleaned = [k.strip() for k in v if k and k.strip()]
    if not cleaned:
        raise ValueError("at least one keyword is required")
    return cleaned


def _strip_title(v: str | None) -> str | None:
    if v is None:
        return v
    v = v.strip()
    if not v:
        raise ValueError("title cannot be empty or whitespace")
    return v


class ArticleCreate(BaseModel):
    title: str = Field(min_length=1, max_length=200)
    content: str = Field(min_length=50)
    keywords: list[str] = Field(min_length=1, max_length=50)
    snippet: str | None = Field(None, max_length=300)
    status: ArticleStatus = ArticleStatus.DRAFT
    tags: list[str] = Field(default_factory=list, max_length=50)
    category: str = Field("General", min_length=1, max_length=100)
    seo_score: int = Field(0, ge=0, le=100)

    @field_validator("title")
    @classmethod
    def strip_title(cls, v):
        return _strip_title(v)

    @field_validator("keywords")
    @classmethod
    def clean_keywords(cls, v):
        return _clean_keywords(v)


class ArticleUpdate(BaseModel):
    title: str | None = Field(None, min_length=1, max_length=200)
    content: str | None = Field(None, min_length=50)
    keywords: list[str] | None = Field(None, min_length=1, max_length=50)
    snippet: str | None = Field(None, max_length=300)
    status: ArticleStatus | None = None
    tags: list[str] | None = Field(None, max_length=50)
    category: str | None = Field(None, min_length=1, max_length=100)
    seo_score: int | None = Field(None, ge=0, le=100)

    @field_validator("title")
    @classmethod
    def strip_title(cls, v):
        return _strip_title(v)

    @field_validator("keywords")
    @classmethod
    def clean_keywords(cls, v):
        return _clean_keywords(v)


class ArticleOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    user_id: UUID
    title: str
    snippet: str
    content: str
    keywords: list[str]
    status: str
    word_count: int
    seo_score: int
    readability_score: int
    tags: list[str]
    category: str
    slug: str
    published_at: datetime | None = None
    created_at: datetime
    updated_at: datetime


class ArticleListResponse(BaseModel):
    success: bool = True
    count: int
    data: list[ArticleOut]
