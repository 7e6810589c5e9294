"""Article Store — creation and update rules shared by the article and generation routes.

Invariants:
    - slug is derived from the title and unique; collisions get a random 6-hex suffix
    - word_count and readability_score are recomputed whenever content changes
    - snippet defaults to a plain-text preview of the content
    - published_at is stamped on the first transition to "published" and never cleared
    - Functions add/flush but never commit: the caller owns the transaction
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from lamontai.core.domain_types import ArticleStatus
from lamontai.core.errors import AuthenticationError, ResourceNotFoundError
from lamontai.core.text_metrics import (
    count_words, make_snippet, readability_score, slugify, strip_html,
)
from lamontai.models.article import Article

SLUG_FALLBACK = "article"


async def unique_slug(
    db: AsyncSession, title: str, exclude_id: uuid.UUID | None = None,
) -> str:
    base = slugify(title)[:240] or SLUG_FALLBACK
    candidate = base
    while True:
        query = select(Article.id).where(Article.slug == candidate)
        if exclude_id is not None:
            query = query.where(Article.id != exclude_id)
        if (await db.execute(query)).first() is None:
            return candidate
        candidate = f"{base}-{uuid.uuid4().hex[:6]}"


def _apply_content(article: Article, content: str) -> None:
    plain = strip_html(content)
    article.content = content
    article.word_count = count_words(plain)
    article.readability_score = readability_score(plain)


def _apply_status(article: Article, status: str) -> None:
    article.status = status
    if status == ArticleStatus.PUBLISHED.value and article.published_at is None:
        article.published_at = datetime.now(timezone.utc)


async def create_article(
    db: AsyncSession,
    user_id: uuid.UUID,
    *,
    title: str,
    content: str,
    keywords: list[str],
    snippet: str | None = None,
    status: str = ArticleStatus.DRAFT.value,
    tags: list[str] | None = None,
    category: str = "General",
    seo_score: int = 0,
) -> Article:
    article = Article(
        user_id=user_id,
        title=title,
        keywords=keywords,
        snippet=snippet or make_snippet(content),
        tags=tags or [],
        category=category,
        seo_score=seo_score,
        slug=await unique_slug(db, title),
    )
    _apply_content(article, content)
    _apply_status(article, status)
    db.add(article)
    await db.flush()
    return article


async def update_article(db: AsyncSession, article: Article, changes: dict) -> Article:
    """Apply a partial update (already validated) to article."""
    if "title" in changes and changes["title"] != article.title:
        article.title = changes["title"]
        article.slug = await unique_slug(db, article.title, exclude_id=article.id)
    if "content" in changes:
        _apply_content(article, changes["content"])
        if "snippet" not in changes:
            article.snippet = make_snippet(article.content)
    if "status" in changes:
        _apply_status(article, changes["status"])
    for name in ("snippet", "keywords", "tags", "category", "seo_score"):
        if name in changes:
            setattr(article, name, changes[name])
    await db.flush()
    return article


async def get_owned_article(
    db: AsyncSession, article_id: uuid.UUID, user_id: uuid.UUID,
) -> Article:
    """Article by id, if it belongs to user_id."""
    article = await db.get(Article, article_id)
    if article is None:
        raise ResourceNotFoundError("Article", str(article_id))
    if article.user_id != user_id:
        raise AuthenticationError("Not authorized to access this article")
    return article
