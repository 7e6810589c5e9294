"""User ORM — account, plan and usage counters; aggregate root for everything a user owns.

Invariants:
    - email is unique and stored lower-cased
    - credits defaults to DEFAULT_CREDITS and is only decremented by usage_quota.consume
    - password_hash is a bcrypt hash; the plain password is never stored
    - reset_password_token holds the sha256 of the reset token, never the token itself

Design Decisions:
    - preferences as JSON column: small, schemaless, always read together with the user
    - settings 1:1 relationship eagerly loaded (selectin): onboarding checks read it on
      almost every request
    - Owned rows (articles, plans, generations, subscriptions) reference users with
      ON DELETE CASCADE
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import String, Integer, DateTime, JSON
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.dialects.postgresql import UUID

from lamontai.core.domain_types import DEFAULT_CREDITS
from lamontai.db.base import Base


def default_preferences() -> dict:
    return {"theme": "light", "email_notifications": True, "content_type": "blog"}


class User(Base):
    """User entity — owns settings, articles, content plans and generation records."""
    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    name: Mapped[str] = mapped_column(String(50), nullable=False)
    email: Mapped[str] = mapped_column(
        String(255), nullable=False, unique=True, index=True,
    )
    password_hash: Mapped[str] = mapped_column(String(128), nullable=False)
    role: Mapped[str] = mapped_column(String(20), nullable=False, default="user")
    plan: Mapped[str] = mapped_column(String(20), nullable=False, default="free")
    credits: Mapped[int] = mapped_column(
        Integer, nullable=False, default=DEFAULT_CREDITS,
    )
    articles_generated: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0,
    )
    keywords_researched: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0,
    )
    preferences: Mapped[dict] = mapped_column(
        JSON, nullable=False, default=default_preferences,
    )
    last_login: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True,
    )
    reset_password_token: Mapped[str | None] = mapped_column(
        String(64), nullable=True, index=True,
    )
    reset_password_expire: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    # Relationships
    settings: Mapped["UserSettings | None"] = relationship(
        "UserSettings", back_populates="user", uselist=False,
        cascade="all, delete-orphan", lazy="selectin",
    )
