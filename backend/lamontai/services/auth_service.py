"""Auth Service — registration, login, logout and password lifecycle.

Invariants:
    - Emails are looked up lower-cased (schemas lower-case on input)
    - A new user always gets a UserSettings row in the same transaction
    - Unknown email and wrong password produce the same "Invalid credentials" error
    - Reset tokens are single-use: a successful reset clears token and expiry
    - Logout revokes the token's jti in the cache until the token's own expiry

Design Decisions:
    - Services commit their own transactions: each operation is one unit of work
    - Revocation list in the cache, not the DB: entries self-expire with the token
      (ADR: best-effort, a cache flush re-validates logged-out tokens until exp)
"""

import logging
from datetime import datetime, timedelta, timezone

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from lamontai.config import get_settings
from lamontai.core.errors import (
    AuthenticationError, BusinessRuleError, ConflictError, ResourceNotFoundError,
)
from lamontai.infrastructure.cache import CacheBackend
from lamontai.infrastructure.security import (
    create_access_token,
    generate_reset_token,
    hash_password,
    hash_reset_token,
    seconds_until,
    verify_password,
)
from lamontai.models.article import Article
from lamontai.models.content_generation import ContentGeneration
from lamontai.models.content_plan import ContentPlan
from lamontai.models.subscription import UserSubscription
from lamontai.models.user import User
from lamontai.models.user_settings import UserSettings

logger = logging.getLogger(__name__)

REVOKED_TOKEN_PREFIX = "revoked_token:"


def _as_utc(value: datetime) -> datetime:
    """SQLite hands back naive datetimes; treat them as UTC."""
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


def issue_token(user: User) -> str:
    settings = get_settings()
    return create_access_token(
        str(user.id),
        settings.jwt_secret,
        settings.jwt_algorithm,
        settings.jwt_expire_minutes,
    )


async def find_user_by_email(db: AsyncSession, email: str) -> User | None:
    result = await db.execute(select(User).where(User.email == email.lower()))
    return result.scalar_one_or_none()


async def register(
    db: AsyncSession, name: str, email: str, password: str,
) -> tuple[User, str]:
    """Create a user with default settings. Returns (user, access token)."""
    if await find_user_by_email(db, email):
        raise ConflictError("User already exists")

    user = User(
        name=name,
        email=email.lower(),
        password_hash=hash_password(password, get_settings().bcrypt_rounds),
        last_login=datetime.now(timezone.utc),
    )
    user.settings = UserSettings()
    db.add(user)
    await db.commit()
    await db.refresh(user)
    logger.info("User registered", extra={"user_id": str(user.id)})
    return user, issue_token(user)


async def login(db: AsyncSession, email: str, password: str) -> tuple[User, str]:
    user = await find_user_by_email(db, email)
    if user is None or not verify_password(password, user.password_hash):
        raise AuthenticationError("Invalid credentials")
    user.last_login = datetime.now(timezone.utc)
    await db.commit()
    await db.refresh(user)
    logger.info("User logged in", extra={"user_id": str(user.id)})
    return user, issue_token(user)


async def logout(cache: CacheBackend, claims: dict) -> None:
    """Revoke the presented token until it would have expired anyway."""
    ttl = seconds_until(claims["exp"])
    if ttl <= 0:
        return
    await cache.set(f"{REVOKED_TOKEN_PREFIX}{claims['jti']}", True, ttl=ttl)
    logger.info("Token revoked", extra={"user_id": claims.get("sub")})


async def is_token_revoked(cache: CacheBackend, jti: str) -> bool:
    return await cache.exists(f"{REVOKED_TOKEN_PREFIX}{jti}")


async def forgot_password(db: AsyncSession, email: str) -> str:
    """Store a hashed reset token on the user and return the plain token."""
    user = await find_user_by_email(db, email)
    if user is None:
        raise ResourceNotFoundError("User", email)
    plain, hashed = generate_reset_token()
    user.reset_password_token = hashed
    user.reset_password_expire = datetime.now(timezone.utc) + timedelta(
        minutes=get_settings().password_reset_expire_minutes,
    )
    await db.commit()
    logger.info("Password reset requested", extra={"user_id": str(user.id)})
    return plain


async def reset_password(
    db: AsyncSession, token: str, new_password: str,
) -> tuple[User, str]:
    result = await db.execute(
        select(User).where(User.reset_password_token == hash_reset_token(token)),
    )
    user = result.scalar_one_or_none()
    now = datetime.now(timezone.utc)
    if (
        user is None
        or user.reset_password_expire is None
        or _as_utc(user.reset_password_expire) <= now
    ):
        raise BusinessRuleError("Invalid or expired token", "INVALID_RESET_TOKEN")

    user.password_hash = hash_password(new_password, get_settings().bcrypt_rounds)
    user.reset_password_token = None
    user.reset_password_expire = None
    await db.commit()
    await db.refresh(user)
    logger.info("Password reset", extra={"user_id": str(user.id)})
    return user, issue_token(user)


async def change_password(
    db: AsyncSession, user: User, current_password: str, new_password: str,
) -> str:
    if not verify_password(current_password, user.password_hash):
        raise AuthenticationError("Current password is incorrect")
    user.password_hash = hash_password(new_password, get_settings().bcrypt_rounds)
    await db.commit()
    logger.info("Password changed", extra={"user_id": str(user.id)})
    return issue_token(user)


async def delete_user(db: AsyncSession, user: User) -> None:
    """Delete user and every row it owns. Does not commit."""
    for model in (Article, ContentPlan, ContentGeneration, UserSubscription):
        await db.execute(delete(model).where(model.user_id == user.id))
    await db.delete(user)
    await db.flush()
