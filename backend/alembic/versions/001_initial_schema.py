"""Initial schema — users, user_settings, articles, content_plans, content_generations.

Revision ID: 001_initial
Revises: None
Create Date: 2026-10-17

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import UUID

revision: str = "001_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    ]


def _owner() -> sa.Column:
    return sa.Column(
        "user_id", UUID(as_uuid=True),
        sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False,
    )


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("name", sa.String(50), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("password_hash", sa.String(128), nullable=False),
        sa.Column("role", sa.String(20), nullable=False, server_default="user"),
        sa.Column("plan", sa.String(20), nullable=False, server_default="free"),
        sa.Column("credits", sa.Integer, nullable=False, server_default="100"),
        sa.Column("articles_generated", sa.Integer, nullable=False, server_default="0"),
        sa.Column("keywords_researched", sa.Integer, nullable=False, server_default="0"),
        sa.Column("preferences", sa.JSON, nullable=False),
        sa.Column("last_login", sa.DateTime(timezone=True), nullable=True),
        sa.Column("reset_password_token", sa.String(64), nullable=True),
        sa.Column("reset_password_expire", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)
    op.create_index("ix_users_reset_password_token", "users", ["reset_password_token"])

    op.create_table(
        "user_settings",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column(
            "user_id", UUID(as_uuid=True),
            sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False, unique=True,
        ),
        sa.Column("theme", sa.String(10), nullable=False, server_default="light"),
        sa.Column("language", sa.String(20), nullable=False, server_default="english"),
        sa.Column("notifications", sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column("website_url", sa.String(2000), nullable=True),
        sa.Column("business_description", sa.Text, nullable=True),
        sa.Column("target_audiences", sa.JSON, nullable=False),
        sa.Column("competitors", sa.JSON, nullable=False),
        sa.Column("sitemap_url", sa.String(2000), nullable=True),
        sa.Column("target_languages", sa.JSON, nullable=False),
        sa.Column("audience_size", sa.String(50), nullable=True),
        sa.Column("sitemap_url_count", sa.Integer, nullable=True),
        *_timestamps(),
    )

    op.create_table(
        "articles",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        _owner(),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("snippet", sa.String(300), nullable=False, server_default=""),
        sa.Column("content", sa.Text, nullable=False),
        sa.Column("keywords", sa.JSON, nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="draft"),
        sa.Column("word_count", sa.Integer, nullable=False, server_default="0"),
        sa.Column("seo_score", sa.Integer, nullable=False, server_default="0"),
        sa.Column("readability_score", sa.Integer, nullable=False, server_default="0"),
        sa.Column("tags", sa.JSON, nullable=False),
        sa.Column("category", sa.String(100), nullable=False, server_default="General"),
        sa.Column("slug", sa.String(255), nullable=False),
        sa.Column("published_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_articles_slug", "articles", ["slug"], unique=True)

    op.create_table(
        "content_plans",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        _owner(),
        sa.Column("title", sa.String(100), nullable=False),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("status", sa.String(20), nullable=False, server_default="draft"),
        *_timestamps(),
    )

    op.create_table(
        "content_generations",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        _owner(),
        sa.Column("kind", sa.String(20), nullable=False),
        sa.Column("topic", sa.String(500), nullable=False),
        sa.Column("keywords", sa.JSON, nullable=False),
        sa.Column("input_tokens", sa.Integer, nullable=False, server_default="0"),
        sa.Column("output_tokens", sa.Integer, nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    for table in ("articles", "content_plans", "content_generations"):
        op.create_index(f"ix_{table}_user_id", table, ["user_id"])


def downgrade() -> None:
    for table in ("articles", "content_plans", "content_generations"):
        op.drop_index(f"ix_{table}_user_id", table_name=table)
    op.drop_table("content_generations")
    op.drop_table("content_plans")
    op.drop_index("ix_articles_slug", table_name="articles")
    op.drop_table("articles")
    op.drop_table("user_settings")
    op.drop_index("ix_users_reset_password_token", table_name="users")
    op.drop_index("ix_users_email", table_name="users")
    op.drop_table("users")
