"""Auth Routes — register, login, current user, logout and password reset.

Invariants:
    - Register answers 201 with the public user fields and a token
    - Logout revokes the presented token; later use of it answers 401
    - forgot-password returns the reset token in the body (no mail transport configured)
"""

import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from lamontai.api.deps import get_current_user, get_token_claims
from lamontai.config import get_settings
from lamontai.core.onboarding import onboarding_status
from lamontai.infrastructure.cache import CacheBackend, get_cache
from lamontai.infrastructure.database import get_db
from lamontai.models.user import User
from lamontai.schemas.auth import (
    AuthResponse,
    ForgotPasswordRequest,
    ForgotPasswordResponse,
    LoginRequest,
    RegisterRequest,
    ResetPasswordRequest,
)
from lamontai.schemas.common import MessageResponse
from lamontai.schemas.onboarding import OnboardingStatus
from lamontai.schemas.user import UserOut
from lamontai.services import auth_service

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/auth", tags=["auth"])


def _auth_response(user: User, token: str) -> AuthResponse:
    return AuthResponse(
        id=user.id,
        name=user.name,
        email=user.email,
        role=user.role,
        plan=user.plan,
        credits=user.credits,
        token=token,
    )


@router.post(
    "/register", response_model=AuthResponse,
    status_code=status.HTTP_201_CREATED,
)
async def register(body: RegisterRequest, db: AsyncSession = Depends(get_db)):
    user, token = await auth_service.register(
        db, body.name, body.email, body.password,
    )
    return _auth_response(user, token)


@router.post("/login", response_model=AuthResponse)
async def login(body: LoginRequest, db: AsyncSession = Depends(get_db)):
    user, token = await auth_service.login(db, body.email, body.password)
    return _auth_response(user, token)


@router.get("/me", response_model=UserOut)
async def me(user: User = Depends(get_current_user)):
    return user


@router.post("/logout", response_model=MessageResponse)
async def logout(
    claims: dict = Depends(get_token_claims),
    cache: CacheBackend = Depends(get_cache),
):
    await auth_service.logout(cache, claims)
    return MessageResponse(message="Logged out")


@router.post("/forgot-password", response_model=ForgotPasswordResponse)
async def forgot_password(
    body: ForgotPasswordRequest, db: AsyncSession = Depends(get_db),
):
    token = await auth_service.forgot_password(db, body.email)
    return ForgotPasswordResponse(
        message="Password reset token generated",
        reset_token=token,
        expires_in_minutes=get_settings().password_reset_expire_minutes,
    )


@router.put("/reset-password/{token}", response_model=AuthResponse)
async def reset_password(
    token: str, body: ResetPasswordRequest, db: AsyncSession = Depends(get_db),
):
    user, access_token = await auth_service.reset_password(db, token, body.password)
    return _auth_response(user, access_token)


@router.get("/check-onboarding", response_model=OnboardingStatus)
async def check_onboarding(user: User = Depends(get_current_user)):
    return onboarding_status(user.settings)
