"""Subscription Schemas — plan catalogue entries and a user's subscription."""

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from lamontai.core.domain_types import BillingCycle, Plan


class SubscriptionPlanCreate(BaseModel):
    model_config = ConfigDict(use_enum_values=True)

    name: str = Field(min_length=1, max_length=100)
    description: str = Field("", max_length=2000)
    tier: Plan
    price: Decimal = Field(ge=0, max_digits=10, decimal_places=2)
    billing_cycle: BillingCycle = BillingCycle.MONTHLY
    features: list[str] = Field(default_factory=list, max_length=20)
    article_limit: int = Field(0, ge=0)


class SubscriptionPlanUpdate(BaseModel):
    model_config = ConfigDict(use_enum_values=True)

    name: str | None = Field(None, min_length=1, max_length=100)
    description: str | None = Field(None, max_length=2000)
    price: Decimal | None = Field(None, ge=0, max_digits=10, decimal_places=2)
    features: list[str] | None = Field(None, max_length=20)
    is_active: bool | None = None
    article_limit: int | None = Field(None, ge=0)


class SubscriptionPlanOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    description: str
    tier: str
    price: float
    billing_cycle: str
    features: list[str]
    is_active: bool
    article_limit: int


class SubscribeRequest(BaseModel):
    billing_cycle: BillingCycle = BillingCycle.MONTHLY
    payment_method: str = Field("credit_card", min_length=1, max_length=50)


class UserSubscriptionOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    plan: SubscriptionPlanOut
    billing_cycle: str
    start_date: datetime
    end_date: datetime
    status: str
    payment_status: str
    payment_method: str | None = None
    auto_renew: bool
    next_billing_date: datetime | None = None


class SubscriptionPlanListResponse(BaseModel):
    success: bool = True
    data: list[SubscriptionPlanOut]


class SubscriptionPlanResponse(BaseModel):
    success: bool = True
    data: SubscriptionPlanOut


class UserSubscriptionResponse(BaseModel):
    success: bool = True
    data: UserSubscriptionOut | None
    message: str | None = None
