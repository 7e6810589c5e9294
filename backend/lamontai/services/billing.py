"""Billing Service — plan catalogue, subscribing and cancelling.

Invariants:
    - A user holds at most one current subscription; subscribing while one is
      current raises BusinessRuleError
    - Subscribing sets User.plan to the plan's tier; cancelling or lapsing resets it
      to free
    - A lapsed ACTIVE subscription is marked EXPIRED the next time it is looked up
    - Only active catalogue plans can be subscribed to

Design Decisions:
    - No payment processor: subscriptions are recorded as paid with a generated
      payment reference (ADR: billing state only, collection happens elsewhere)
    - Services commit their own transactions, as in auth_service
"""

import logging
import uuid
from datetime import datetime, timezone

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from lamontai.core.billing import is_current, period_end
from lamontai.core.domain_types import (
    BillingCycle, PaymentStatus, Plan, SubscriptionStatus,
)
from lamontai.core.errors import BusinessRuleError, ResourceNotFoundError
from lamontai.models.subscription import SubscriptionPlan, UserSubscription
from lamontai.models.user import User

logger = logging.getLogger(__name__)


async def list_plans(db: AsyncSession) -> list[SubscriptionPlan]:
    result = await db.execute(
        select(SubscriptionPlan)
        .where(SubscriptionPlan.is_active.is_(True))
        .order_by(SubscriptionPlan.price.asc()),
    )
    return list(result.scalars().all())


async def get_plan(db: AsyncSession, plan_id: uuid.UUID) -> SubscriptionPlan:
    plan = await db.get(SubscriptionPlan, plan_id)
    if plan is None:
        raise ResourceNotFoundError("Subscription plan", str(plan_id))
    return plan


async def create_plan(db: AsyncSession, data: dict) -> SubscriptionPlan:
    plan = SubscriptionPlan(**data)
    db.add(plan)
    await db.commit()
    await db.refresh(plan)
    logger.info(f"Subscription plan {plan.name} created", extra={"resource_id": str(plan.id)})
    return plan


async def update_plan(
    db: AsyncSession, plan_id: uuid.UUID, changes: dict,
) -> SubscriptionPlan:
    plan = await get_plan(db, plan_id)
    for name, value in changes.items():
        setattr(plan, name, value)
    await db.commit()
    await db.refresh(plan)
    return plan


async def current_subscription(
    db: AsyncSession, user: User,
) -> UserSubscription | None:
    """The user's current subscription, expiring a lapsed one on the way. Does not commit."""
    result = await db.execute(
        select(UserSubscription)
        .where(
            UserSubscription.user_id == user.id,
            UserSubscription.status == SubscriptionStatus.ACTIVE.value,
        )
        .order_by(UserSubscription.end_date.desc()),
    )
    now = datetime.now(timezone.utc)
    current = None
    lapsed = False
    for subscription in result.scalars().all():
        if current is None and is_current(subscription.status, subscription.end_date, now):
            current = subscription
            continue
        subscription.status = SubscriptionStatus.EXPIRED.value
        subscription.next_billing_date = None
        lapsed = True
        logger.info(
            "Subscription lapsed",
            extra={"user_id": str(user.id), "resource_id": str(subscription.id)},
        )
    if lapsed and current is None:
        user.plan = Plan.FREE.value
    if lapsed:
        await db.flush()
    return current


async def subscribe(
    db: AsyncSession,
    user: User,
    plan_id: uuid.UUID,
    billing_cycle: BillingCycle,
    payment_method: str,
) -> UserSubscription:
    plan = await get_plan(db, plan_id)
    if not plan.is_active:
        raise ResourceNotFoundError("Subscription plan", str(plan_id))
    if await current_subscription(db, user) is not None:
        raise BusinessRuleError(
            "You already have an active subscription. Please cancel it first.",
            "SUBSCRIPTION_ACTIVE",
        )

    start = datetime.now(timezone.utc)
    end = period_end(start, billing_cycle)
    subscription = UserSubscription(
        user_id=user.id,
        plan_id=plan.id,
        billing_cycle=billing_cycle.value,
        start_date=start,
        end_date=end,
        status=SubscriptionStatus.ACTIVE.value,
        payment_status=PaymentStatus.PAID.value,
        payment_method=payment_method,
        payment_id=f"payment_{uuid.uuid4().hex}",
        auto_renew=True,
        next_billing_date=end,
    )
    subscription.plan = plan
    db.add(subscription)
    user.plan = plan.tier
    await db.commit()
    logger.info(
        f"Subscribed to {plan.name}",
        extra={"user_id": str(user.id), "resource_id": str(subscription.id)},
    )
    return subscription


async def cancel(db: AsyncSession, user: User) -> UserSubscription:
    subscription = await current_subscription(db, user)
    if subscription is None:
        await db.commit()
        raise ResourceNotFoundError("Active subscription", str(user.id))
    subscription.status = SubscriptionStatus.CANCELED.value
    subscription.auto_renew = False
    subscription.next_billing_date = None
    user.plan = Plan.FREE.value
    await db.commit()
    logger.info(
        "Subscription canceled",
        extra={"user_id": str(user.id), "resource_id": str(subscription.id)},
    )
    return subscription
