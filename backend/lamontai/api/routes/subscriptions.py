"""Subscription Routes — public plan catalogue, editor-managed plans, user subscriptions.

Invariants:
    - The catalogue (list, single plan) is public; listing hides inactive plans
    - Creating or changing catalogue plans requires the editor role (admins pass)
    - /me answers data=null when the user has no current subscription
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from lamontai.api.deps import get_current_user, require_editor
from lamontai.infrastructure.database import get_db
from lamontai.models.user import User
from lamontai.schemas.subscription import (
    SubscribeRequest,
    SubscriptionPlanCreate,
    SubscriptionPlanListResponse,
    SubscriptionPlanOut,
    SubscriptionPlanResponse,
    SubscriptionPlanUpdate,
    UserSubscriptionOut,
    UserSubscriptionResponse,
)
from lamontai.services import billing

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/subscriptions", tags=["subscriptions"])


@router.get("", response_model=SubscriptionPlanListResponse)
async def list_plans(db: AsyncSession = Depends(get_db)):
    return SubscriptionPlanListResponse(
        data=[SubscriptionPlanOut.model_validate(p) for p in await billing.list_plans(db)],
    )


@router.post(
    "", response_model=SubscriptionPlanResponse, status_code=status.HTTP_201_CREATED,
)
async def create_plan(
    body: SubscriptionPlanCreate,
    _: User = Depends(require_editor),
    db: AsyncSession = Depends(get_db),
):
    plan = await billing.create_plan(db, body.model_dump(mode="python"))
    return SubscriptionPlanResponse(data=SubscriptionPlanOut.model_validate(plan))


@router.get("/me", response_model=UserSubscriptionResponse)
async def my_subscription(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    subscription = await billing.current_subscription(db, user)
    await db.commit()
    if subscription is None:
        return UserSubscriptionResponse(data=None, message="No active subscription found")
    return UserSubscriptionResponse(data=UserSubscriptionOut.model_validate(subscription))


@router.put("/cancel", response_model=UserSubscriptionResponse)
async def cancel_subscription(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    subscription = await billing.cancel(db, user)
    return UserSubscriptionResponse(
        data=UserSubscriptionOut.model_validate(subscription),
        message="Subscription canceled successfully",
    )


@router.get("/{plan_id}", response_model=SubscriptionPlanResponse)
async def get_plan(plan_id: UUID, db: AsyncSession = Depends(get_db)):
    return SubscriptionPlanResponse(
        data=SubscriptionPlanOut.model_validate(await billing.get_plan(db, plan_id)),
    )


@router.put("/{plan_id}", response_model=SubscriptionPlanResponse)
async def update_plan(
    plan_id: UUID,
    body: SubscriptionPlanUpdate,
    _: User = Depends(require_editor),
    db: AsyncSession = Depends(get_db),
):
    changes = {
        name: value
        for name, value in body.model_dump(mode="python", exclude_unset=True).items()
        if value is not None
    }
    plan = await billing.update_plan(db, plan_id, changes)
    return SubscriptionPlanResponse(data=SubscriptionPlanOut.model_validate(plan))


@router.post(
    "/{plan_id}/subscribe",
    response_model=UserSubscriptionResponse,
    status_code=status.HTTP_201_CREATED,
)
async def subscribe(
    plan_id: UUID,
    body: SubscribeRequest,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    subscription = await billing.subscribe(
        db, user, plan_id, body.billing_cycle, body.payment_method,
    )
    return UserSubscriptionResponse(
        data=UserSubscriptionOut.model_validate(subscription),
        message="Successfully subscribed to plan",
    )
