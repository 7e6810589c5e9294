"""UserSettings ORM — interface preferences plus the onboarding answers of one user.

Invariants:
    - Exactly zero or one row per user (user_id unique)
    - competitors is a list of {name, website}; at most 10 entries (enforced by schema)
    - sitemap_url_count is written only by the background sitemap initialisation

Design Decisions:
    - Interface settings and onboarding data share a row: both are read on dashboard load
    - JSON columns for the list-valued answers: never queried by content
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import String, Text, Integer, Boolean, DateTime, JSON, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.dialects.postgresql import UUID

from lamontai.db.base import Base


class UserSettings(Base):
    """Settings entity — one per user, created lazily by the first write."""
    __tablename__ = "user_settings"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    user_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False, unique=True,
    )
    theme: Mapped[str] = mapped_column(String(10), nullable=False, default="light")
    language: Mapped[str] = mapped_column(
        String(20), nullable=False, default="english",
    )
    notifications: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True,
    )
    website_url: Mapped[str | None] = mapped_column(String(2000), nullable=True)
    business_description: Mapped[str | None] = mapped_column(Text, nullable=True)
    target_audiences: Mapped[list] = mapped_column(
        JSON, nullable=False, default=list,
    )
    competitors: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    sitemap_url: Mapped[str | None] = mapped_column(String(2000), nullable=True)
    target_languages: Mapped[list] = mapped_column(
        JSON, nullable=False, default=list,
    )
    audience_size: Mapped[str | None] = mapped_column(String(50), nullable=True)
    sitemap_url_count: Mapped[int | None] = mapped_column(Integer, nullable=True)
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
    user: Mapped["User"] = relationship("User", back_populates="settings")
