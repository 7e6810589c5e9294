"""Content Plan Schemas — title 3-100 chars, optional description, lifecycle status."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from lamontai.core.domain_types import ContentPlanStatus


def _strip_title(v: str | None) -> str | None:
    if v is None:
        return v
    v = v.strip()
    if len(v) < 3:
        raise ValueError("title must be at least 3 characters")
    return v


class ContentPlanCreate(BaseModel):
    title: str = Field(min_length=3, max_length=100)
    description: str | None = Field(None, max_length=5000)
    status: ContentPlanStatus = ContentPlanStatus.DRAFT

    @field_validator("title")
    @classmethod
    def strip_title(cls, v):
        return _strip_title(v)


class ContentPlanUpdate(BaseModel):
    title: str | None = Field(None, min_length=3, max_length=100)
    description: str | None = Field(None, max_length=5000)
    status: ContentPlanStatus | None = None

    @field_validator("title")
    @classmethod
    def strip_title(cls, v):
        return _strip_title(v)


class ContentPlanOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    title: str
    description: str | None = None
    status: str
    created_at: datetime
    updated_at: datetime
