"""Onboarding Routes — the five-step setup flow under /user.

Invariants:
    - Each step upserts the caller's UserSettings row and returns the new status
    - An empty sitemap URL clears the sitemap (step skipped); a non-empty one
      schedules background initialisation after the response is sent
    - At most 10 competitors are stored; a POST replaces the whole list
"""

import logging

from fastapi import APIRouter, BackgroundTasks, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from lamontai.api.deps import get_current_user
from lamontai.core.onboarding import onboarding_status
from lamontai.infrastructure.cache import CacheBackend, get_cache
from lamontai.infrastructure.database import get_db
from lamontai.models.user import User
from lamontai.models.user_settings import UserSettings
from lamontai.schemas.onboarding import (
    BusinessDescriptionRequest,
    CompetitorsRequest,
    CompetitorsResponse,
    OnboardingStepResponse,
    SitemapRequest,
    TargetAudienceRequest,
    WebsiteUrlRequest,
)
from lamontai.services import site_intelligence

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/user", tags=["onboarding"])


def settings_for(user: User) -> UserSettings:
    """Caller's settings row, attached to the user if it did not exist yet."""
    if user.settings is None:
        user.settings = UserSettings()
    return user.settings


async def _save_step(db: AsyncSession, user: User, message: str) -> OnboardingStepResponse:
    await db.commit()
    await db.refresh(user)
    logger.info(message, extra={"user_id": str(user.id)})
    return OnboardingStepResponse(
        message=message, onboarding=onboarding_status(user.settings),
    )


@router.post("/website-url", response_model=OnboardingStepResponse)
async def save_website_url(
    body: WebsiteUrlRequest,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    settings_for(user).website_url = body.website_url
    return await _save_step(db, user, "Website URL saved")


@router.post("/business-description", response_model=OnboardingStepResponse)
async def save_business_description(
    body: BusinessDescriptionRequest,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    settings_for(user).business_description = body.business_description
    return await _save_step(db, user, "Business description saved")


@router.get("/competitors", response_model=CompetitorsResponse)
async def get_competitors(user: User = Depends(get_current_user)):
    competitors = user.settings.competitors if user.settings else []
    return CompetitorsResponse(competitors=competitors)


@router.post("/competitors", response_model=OnboardingStepResponse)
async def save_competitors(
    body: CompetitorsRequest,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    settings_for(user).competitors = [c.model_dump() for c in body.competitors]
    return await _save_step(db, user, "Competitors saved")


@router.post("/sitemap", response_model=OnboardingStepResponse)
async def save_sitemap(
    body: SitemapRequest,
    background_tasks: BackgroundTasks,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    cache: CacheBackend = Depends(get_cache),
):
    settings = settings_for(user)
    settings.sitemap_url = body.sitemap_url
    settings.sitemap_url_count = None
    response = await _save_step(db, user, "Sitemap saved")
    if body.sitemap_url:
        background_tasks.add_task(
            site_intelligence.initialize_user_sitemap,
            cache, user.id, body.sitemap_url,
        )
    return response


@router.post("/target-audience", response_model=OnboardingStepResponse)
async def save_target_audience(
    body: TargetAudienceRequest,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    settings = settings_for(user)
    settings.target_languages = body.target_languages
    settings.audience_size = body.audience_size
    settings.target_audiences = body.target_audiences
    return await _save_step(db, user, "Target audience saved")
