"""Onboarding Schemas — one payload per onboarding step plus the status view.

Invariants:
    - URLs are http(s); the sitemap URL may be the empty string (step skipped)
    - At most 10 competitors
    - Target audience needs at least one language and an audience size
"""

from pydantic import BaseModel, Field, field_validator

from lamontai.schemas.common import HttpUrlStr

MAX_COMPETITORS = 10


class WebsiteUrlRequest(BaseModel):
    website_url: HttpUrlStr


class BusinessDescriptionRequest(BaseModel):
    business_description: str = Field(min_length=1, max_length=5000)

    @field_validator("business_description")
    @classmethod
    def strip_description(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("business_description cannot be empty or whitespace")
        return v


class Competitor(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    website: HttpUrlStr


class CompetitorsRequest(BaseModel):
    competitors: list[Competitor] = Field(max_length=MAX_COMPETITORS)


class SitemapRequest(BaseModel):
    sitemap_url: HttpUrlStr | None = None

    @field_validator("sitemap_url", mode="before")
    @classmethod
    def blank_to_none(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v


class TargetAudienceRequest(BaseModel):
    target_languages: list[str] = Field(min_length=1, max_length=20)
    audience_size: str = Field(min_length=1, max_length=50)
    target_audiences: list[str] = Field(default_factory=list, max_length=20)


class OnboardingStatus(BaseModel):
    onboarded: bool
    completed_steps: list[str]
    next_step: str | None = None


class OnboardingStepResponse(BaseModel):
    success: bool = True
    message: str
    onboarding: OnboardingStatus


class CompetitorsResponse(BaseModel):
    success: bool = True
    competitors: list[Competitor]
