"""Request Dependencies — bearer-token authentication and role guards.

Invariants:
    - get_current_user raises AuthenticationError (401) for a missing, invalid,
      expired or revoked token, and for a token whose user no longer exists
    - Role guards raise AuthorizationError (403) and run after authentication
    - Admins pass every role guard

Design Decisions:
    - HTTPBearer(auto_error=False): missing credentials surface as our own 401
      envelope instead of FastAPI's default 403
    - Claims resolved separately from the user so logout can revoke without a DB read
"""

import uuid

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from lamontai.config import get_settings
from lamontai.core.domain_types import UserRole
from lamontai.core.errors import AuthenticationError, AuthorizationError
from lamontai.infrastructure.cache import CacheBackend, get_cache
from lamontai.infrastructure.database import get_db
from lamontai.infrastructure.security import decode_access_token
from lamontai.models.user import User
from lamontai.services import auth_service

bearer_scheme = HTTPBearer(auto_error=False)


async def get_token_claims(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    cache: CacheBackend = Depends(get_cache),
) -> dict:
    if credentials is None:
        raise AuthenticationError("Not authorized, no token")
    settings = get_settings()
    claims = decode_access_token(
        credentials.credentials, settings.jwt_secret, settings.jwt_algorithm,
    )
    if await auth_service.is_token_revoked(cache, claims["jti"]):
        raise AuthenticationError("Not authorized, token revoked")
    return claims


async def get_current_user(
    claims: dict = Depends(get_token_claims),
    db: AsyncSession = Depends(get_db),
) -> User:
    try:
        user_id = uuid.UUID(claims["sub"])
    except ValueError:
        raise AuthenticationError("Not authorized, token failed")
    user = await db.get(User, user_id)
    if user is None:
        raise AuthenticationError("Not authorized, user not found")
    return user


def require_role(*roles: UserRole):
    """Dependency factory: current user must hold one of roles (admin always passes)."""
    allowed = {r.value for r in roles} | {UserRole.ADMIN.value}

    async def guard(user: User = Depends(get_current_user)) -> User:
        if user.role not in allowed:
            raise AuthorizationError(
                f"User role {user.role} is not authorized to access this route",
            )
        return user

    return guard


require_admin = require_role(UserRole.ADMIN)
require_editor = require_role(UserRole.EDITOR)
