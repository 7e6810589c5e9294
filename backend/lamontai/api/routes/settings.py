"""Settings Routes — interface preferences plus a read view of onboarding answers.

Invariants:
    - GET returns defaults (light, english, notifications on) when no row exists
    - PUT and PATCH upsert; PATCH with no fields answers 400
"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from lamontai.api.deps import get_current_user
from lamontai.api.routes.onboarding import settings_for
from lamontai.core.errors import RequestValidationFailed
from lamontai.infrastructure.database import get_db
from lamontai.models.user import User
from lamontai.schemas.settings import SettingsOut, SettingsUpdate

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/settings", tags=["settings"])


async def _upsert(db: AsyncSession, user: User, changes: dict) -> SettingsOut:
    settings = settings_for(user)
    for name, value in changes.items():
        setattr(settings, name, value)
    await db.commit()
    await db.refresh(user)
    logger.info("Settings updated", extra={"user_id": str(user.id)})
    return SettingsOut.model_validate(user.settings)


@router.get("", response_model=SettingsOut)
async def get_settings_view(user: User = Depends(get_current_user)):
    if user.settings is None:
        return SettingsOut()
    return SettingsOut.model_validate(user.settings)


@router.put("", response_model=SettingsOut)
async def replace_settings(
    body: SettingsUpdate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    changes = {
        k: v for k, v in body.model_dump(mode="json").items() if v is not None
    }
    return await _upsert(db, user, changes)


@router.patch("", response_model=SettingsOut)
async def patch_settings(
    body: SettingsUpdate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    changes = {
        k: v for k, v in body.model_dump(mode="json", exclude_unset=True).items()
        if v is not None
    }
    if not changes:
        raise RequestValidationFailed("No settings provided")
    return await _upsert(db, user, changes)
