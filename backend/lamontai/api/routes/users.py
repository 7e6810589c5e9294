"""User Routes — self-service profile and password, admin user management.

Invariants:
    - /users (list) and /users/{id} require the admin role
    - Password changes only through PUT /users/password, which returns a fresh token
    - Email changes must stay unique (409 otherwise)
    - /users/profile and /users/password are declared before /users/{id}
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from lamontai.api.deps import get_current_user, require_admin
from lamontai.core.errors import ConflictError, ResourceNotFoundError
from lamontai.infrastructure.database import get_db
from lamontai.models.user import User
from lamontai.schemas.auth import ChangePasswordRequest
from lamontai.schemas.common import MessageResponse
from lamontai.schemas.user import AdminUserUpdate, ProfileUpdate, UserListResponse, UserOut
from lamontai.services import auth_service

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/users", tags=["users"])


async def _apply_user_changes(db: AsyncSession, user: User, changes: dict) -> None:
    email = changes.pop("email", None)
    if email and email != user.email:
        if await auth_service.find_user_by_email(db, email):
            raise ConflictError("Email already in use")
        user.email = email
    preferences = changes.pop("preferences", None)
    if preferences:
        user.preferences = {**user.preferences, **preferences}
    for name, value in changes.items():
        setattr(user, name, value)


def _changes(body) -> dict:
    changes = {
        k: v for k, v in body.model_dump(mode="json", exclude_unset=True).items()
        if v is not None
    }
    if "preferences" in changes:
        changes["preferences"] = {
            k: v for k, v in changes["preferences"].items() if v is not None
        }
    return changes


@router.put("/profile", response_model=UserOut)
async def update_profile(
    body: ProfileUpdate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    changes = _changes(body)
    await _apply_user_changes(db, user, changes)
    await db.commit()
    await db.refresh(user)
    return user


@router.put("/password")
async def change_password(
    body: ChangePasswordRequest,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    token = await auth_service.change_password(
        db, user, body.current_password, body.new_password,
    )
    return {"success": True, "message": "Password updated", "token": token}


@router.get("", response_model=UserListResponse)
async def list_users(
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
    _: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    result = await db.execute(
        select(User).order_by(User.created_at.desc()).limit(limit).offset(offset),
    )
    users = result.scalars().all()
    return UserListResponse(
        count=len(users), data=[UserOut.model_validate(u) for u in users],
    )


async def _get_user_or_404(db: AsyncSession, user_id: UUID) -> User:
    user = await db.get(User, user_id)
    if user is None:
        raise ResourceNotFoundError("User", str(user_id))
    return user


@router.get("/{user_id}", response_model=UserOut)
async def get_user(
    user_id: UUID,
    _: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    return await _get_user_or_404(db, user_id)


@router.put("/{user_id}", response_model=UserOut)
async def update_user(
    user_id: UUID,
    body: AdminUserUpdate,
    _: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    user = await _get_user_or_404(db, user_id)
    changes = _changes(body)
    await _apply_user_changes(db, user, changes)
    await db.commit()
    await db.refresh(user)
    logger.info("User updated by admin", extra={"user_id": str(user.id)})
    return user


@router.delete("/{user_id}", response_model=MessageResponse)
async def delete_user(
    user_id: UUID,
    _: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    user = await _get_user_or_404(db, user_id)
    await auth_service.delete_user(db, user)
    await db.commit()
    logger.info("User deleted", extra={"user_id": str(user_id)})
    return MessageResponse(message="User removed")
