"""Article Routes — owner-scoped CRUD for a user's articles.

Invariants:
    - Listing only ever returns the caller's articles
    - Reading, updating or deleting another user's article answers 401
    - Slug, word count, readability and published_at follow services/article_store.py
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from lamontai.api.deps import get_current_user
from lamontai.core.domain_types import ArticleStatus
from lamontai.infrastructure.database import get_db
from lamontai.models.article import Article
from lamontai.models.user import User
from lamontai.schemas.article import ArticleCreate, ArticleListResponse, ArticleOut, ArticleUpdate
from lamontai.schemas.common import MessageResponse
from lamontai.services import article_store

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/articles", tags=["articles"])


@router.get("", response_model=ArticleListResponse)
async def list_articles(
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
    status_filter: ArticleStatus | None = Query(None, alias="status"),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Caller's articles, newest first."""
    query = (
        select(Article)
        .where(Article.user_id == user.id)
        .order_by(Article.created_at.desc())
    )
    if status_filter:
        query = query.where(Article.status == status_filter.value)
    result = await db.execute(query.limit(limit).offset(offset))
    articles = result.scalars().all()
    return ArticleListResponse(
        count=len(articles),
        data=[ArticleOut.model_validate(a) for a in articles],
    )


@router.post(
    "", response_model=ArticleOut, status_code=status.HTTP_201_CREATED,
)
async def create_article(
    body: ArticleCreate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    fields = body.model_dump(mode="json")
    article = await article_store.create_article(db, user.id, **fields)
    await db.commit()
    await db.refresh(article)
    logger.info("Article created", extra={"user_id": str(user.id)})
    return article


@router.get("/{article_id}", response_model=ArticleOut)
async def get_article(
    article_id: UUID,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await article_store.get_owned_article(db, article_id, user.id)


@router.put("/{article_id}", response_model=ArticleOut)
async def update_article(
    article_id: UUID,
    body: ArticleUpdate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    article = await article_store.get_owned_article(db, article_id, user.id)
    changes = {
        k: v for k, v in body.model_dump(mode="json", exclude_unset=True).items()
        if v is not None
    }
    await article_store.update_article(db, article, changes)
    await db.commit()
    await db.refresh(article)
    return article


@router.delete("/{article_id}", response_model=MessageResponse)
async def delete_article(
    article_id: UUID,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    article = await article_store.get_owned_article(db, article_id, user.id)
    await db.delete(article)
    await db.commit()
    logger.info("Article deleted", extra={"user_id": str(user.id)})
    return MessageResponse(message="Article removed")
