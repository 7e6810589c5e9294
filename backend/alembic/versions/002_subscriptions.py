"""Subscriptions — plan catalogue and user subscriptions, seeded with the default plans.

Revision ID: 002_subscriptions
Revises: 001_initial
Create Date: 2026-10-17

"""
import uuid
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import UUID

revision: str = "002_subscriptions"
down_revision: Union[str, None] = "001_initial"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

DEFAULT_PLANS = [
    {
        "name": "Free Plan",
        "description": "Basic plan with limited features",
        "tier": "free",
        "price": 0,
        "features": ["5 articles", "Basic SEO optimization", "Standard support"],
        "article_limit": 5,
    },
    {
        "name": "Starter Plan",
        "description": "For bloggers publishing every week",
        "tier": "starter",
        "price": 19.99,
        "features": ["25 articles", "Keyword research", "Standard support"],
        "article_limit": 25,
    },
    {
        "name": "Pro Plan",
        "description": "Advanced features for serious content creators",
        "tier": "professional",
        "price": 49.99,
        "features": [
            "100 articles", "Advanced SEO optimization", "Priority support",
            "Keyword research", "Content analytics",
        ],
        "article_limit": 100,
    },
    {
        "name": "Enterprise Plan",
        "description": "Full-featured plan for businesses",
        "tier": "enterprise",
        "price": 99.99,
        "features": [
            "Unlimited articles", "Premium SEO optimization", "Dedicated support",
            "Comprehensive analytics", "Team collaboration",
        ],
        "article_limit": 9999,
    },
]


def upgrade() -> None:
    plans = op.create_table(
        "subscription_plans",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("description", sa.Text, nullable=False, server_default=""),
        sa.Column("tier", sa.String(20), nullable=False),
        sa.Column("price", sa.Numeric(10, 2), nullable=False),
        sa.Column("billing_cycle", sa.String(10), nullable=False, server_default="monthly"),
        sa.Column("features", sa.JSON, nullable=False),
        sa.Column("is_active", sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column("article_limit", sa.Integer, nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )

    op.create_table(
        "user_subscriptions",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column(
            "user_id", UUID(as_uuid=True),
            sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False,
        ),
        sa.Column(
            "plan_id", UUID(as_uuid=True),
            sa.ForeignKey("subscription_plans.id"), nullable=False,
        ),
        sa.Column("billing_cycle", sa.String(10), nullable=False, server_default="monthly"),
        sa.Column("start_date", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("end_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="pending"),
        sa.Column("payment_status", sa.String(20), nullable=False, server_default="pending"),
        sa.Column("payment_method", sa.String(50), nullable=True),
        sa.Column("payment_id", sa.String(100), nullable=True),
        sa.Column("auto_renew", sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column("next_billing_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_user_subscriptions_user_id", "user_subscriptions", ["user_id"])

    op.bulk_insert(plans, [
        {"id": uuid.uuid4(), "billing_cycle": "monthly", "is_active": True, **plan}
        for plan in DEFAULT_PLANS
    ])


def downgrade() -> None:
    op.drop_index("ix_user_subscriptions_user_id", table_name="user_subscriptions")
    op.drop_table("user_subscriptions")
    op.drop_table("subscription_plans")
