"""Usage Quota — credit and plan-allowance checks plus the atomic credit spend.

Invariants:
    - Every paid action costs exactly one credit
    - credits never goes below zero: consume() only updates rows with credits > 0
    - Article generation is additionally capped by the plan's article allowance, both in
      the pre-check and in the conditional UPDATE of consume(article_limit=...)

Design Decisions:
    - Pre-checks (ensure_*) run before the LLM call so a broke user costs no tokens;
      consume() re-checks atomically after it (ADR: two concurrent requests cannot
      both spend the last credit)
"""

import logging
import uuid

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from lamontai.core.domain_types import plan_article_limit
from lamontai.core.errors import InsufficientCreditsError, PlanLimitExceededError
from lamontai.models.user import User

logger = logging.getLogger(__name__)

USAGE_COUNTERS = ("articles_generated", "keywords_researched")


def ensure_has_credits(user: User, action: str) -> None:
    if user.credits <= 0:
        raise InsufficientCreditsError(action)


def ensure_can_generate_article(user: User) -> None:
    ensure_has_credits(user, "generate content")
    limit = plan_article_limit(user.plan)
    if user.articles_generated >= limit:
        raise PlanLimitExceededError(limit, user.plan)


async def consume(
    db: AsyncSession,
    user_id: uuid.UUID,
    counter: str | None = None,
    action: str = "perform this action",
    article_limit: int | None = None,
) -> int:
    """Spend one credit (and bump counter). Returns remaining credits. Does not commit.

    With article_limit, the row is only updated while articles_generated is below it.
    """
    values = {"credits": User.credits - 1}
    if counter is not None:
        if counter not in USAGE_COUNTERS:
            raise ValueError(f"Unknown usage counter: {counter}")
        values[counter] = getattr(User, counter) + 1

    conditions = [User.id == user_id, User.credits > 0]
    if article_limit is not None:
        conditions.append(User.articles_generated < article_limit)

    result = await db.execute(
        update(User)
        .where(*conditions)
        .values(**values)
        .execution_options(synchronize_session=False),
    )
    if result.rowcount == 0:
        row = (await db.execute(
            select(User.credits, User.plan).where(User.id == user_id),
        )).one_or_none()
        if article_limit is not None and row is not None and row.credits > 0:
            raise PlanLimitExceededError(article_limit, row.plan)
        raise InsufficientCreditsError(action)

    remaining = await db.scalar(
        select(User.credits).where(User.id == user_id),
    )
    logger.info(
        f"Credit consumed, {remaining} left",
        extra={"user_id": str(user_id)},
    )
    return remaining
