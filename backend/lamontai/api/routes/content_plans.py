"""Content Plan Routes — owner-scoped CRUD for editorial plans.

Invariants:
    - A plan is only visible to its owner; other users get 404
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from lamontai.api.deps import get_current_user
from lamontai.core.errors import ResourceNotFoundError
from lamontai.infrastructure.database import get_db
from lamontai.models.content_plan import ContentPlan
from lamontai.models.user import User
from lamontai.schemas.common import MessageResponse
from lamontai.schemas.content_plan import ContentPlanCreate, ContentPlanOut, ContentPlanUpdate

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/content-plans", tags=["content-plans"])


async def _get_plan_or_404(
    db: AsyncSession, plan_id: UUID, user: User,
) -> ContentPlan:
    result = await db.execute(
        select(ContentPlan).where(
            ContentPlan.id == plan_id, ContentPlan.user_id == user.id,
        ),
    )
    plan = result.scalar_one_or_none()
    if plan is None:
        raise ResourceNotFoundError("Content plan", str(plan_id))
    return plan


@router.get("", response_model=list[ContentPlanOut])
async def list_plans(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    result = await db.execute(
        select(ContentPlan)
        .where(ContentPlan.user_id == user.id)
        .order_by(ContentPlan.created_at.desc()),
    )
    return result.scalars().all()


@router.post(
    "", response_model=ContentPlanOut, status_code=status.HTTP_201_CREATED,
)
async def create_plan(
    body: ContentPlanCreate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    plan = ContentPlan(user_id=user.id, **body.model_dump(mode="json"))
    db.add(plan)
    await db.commit()
    await db.refresh(plan)
    return plan


@router.get("/{plan_id}", response_model=ContentPlanOut)
async def get_plan(
    plan_id: UUID,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await _get_plan_or_404(db, plan_id, user)


@router.put("/{plan_id}", response_model=ContentPlanOut)
async def update_plan(
    plan_id: UUID,
    body: ContentPlanUpdate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    plan = await _get_plan_or_404(db, plan_id, user)
    for name, value in body.model_dump(mode="json", exclude_unset=True).items():
        if value is not None or name == "description":
            setattr(plan, name, value)
    await db.commit()
    await db.refresh(plan)
    return plan


@router.delete("/{plan_id}", response_model=MessageResponse)
async def delete_plan(
    plan_id: UUID,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    plan = await _get_plan_or_404(db, plan_id, user)
    await db.delete(plan)
    await db.commit()
    return MessageResponse(message="Content plan removed")
