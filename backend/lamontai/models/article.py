"""Article ORM — a generated or hand-written SEO article owned by one user.

Invariants:
    - slug is unique across all articles
    - keywords has at least one entry (enforced by schema)
    - word_count always reflects the current content
    - published_at is stamped once, on the first transition to "published"

Design Decisions:
    - content stored as HTML text: the generator returns HTML and the editor round-trips it
    - keywords/tags as JSON lists: filtered in Python, never by SQL
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import String, Text, Integer, DateTime, JSON, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.dialects.postgresql import UUID

from lamontai.db.base import Base


class Article(Base):
    """Article entity — title, HTML body and SEO metadata."""
    __tablename__ = "articles"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    user_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False, index=True,
    )
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    snippet: Mapped[str] = mapped_column(String(300), nullable=False, default="")
    content: Mapped[str] = mapped_column(Text, nullable=False)
    keywords: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default="draft",
    )
    word_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    seo_score: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    readability_score: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0,
    )
    tags: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    category: Mapped[str] = mapped_column(
        String(100), nullable=False, default="General",
    )
    slug: Mapped[str] = mapped_column(
        String(255), nullable=False, unique=True, index=True,
    )
    published_at: Mapped[datetime | None] = mapped_column(
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
