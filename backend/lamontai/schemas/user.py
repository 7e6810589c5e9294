"""User Schemas — public user view, self-service profile updates and admin edits.

Invariants:
    - Password changes only via PUT /users/password (profile and admin updates reject it)
    - Role changes only via the admin update
    - UserOut never exposes password_hash or reset-token fields
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator, model_validator

from lamontai.core.domain_types import ContentType, Plan, Theme, UserRole
from lamontai.schemas.common import reject_fields

_PASSWORD_ROUTE_MESSAGE = (
    "This route is not for password updates. Please use /api/v1/users/password"
)


class UserOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    email: str
    role: str
    plan: str
    credits: int
    articles_generated: int
    keywords_researched: int
    preferences: dict
    last_login: datetime | None = None
    created_at: datetime


class PreferencesUpdate(BaseModel):
    theme: Theme | None = None
    email_notifications: bool | None = None
    content_type: ContentType | None = None


class _UserFieldsUpdate(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=50)
    email: EmailStr | None = None
    preferences: PreferencesUpdate | None = None

    @field_validator("email")
    @classmethod
    def lower_email(cls, v: str | None) -> str | None:
        return v.lower() if v else v

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("name cannot be empty or whitespace")
        return v


class ProfileUpdate(_UserFieldsUpdate):
    """Self-service profile edit."""

    @model_validator(mode="before")
    @classmethod
    def reject_privileged_fields(cls, data):
        data = reject_fields(data, ("password",), _PASSWORD_ROUTE_MESSAGE)
        return reject_fields(data, ("role",), "You cannot change your own role")


class AdminUserUpdate(_UserFieldsUpdate):
    """Admin edit of any user."""
    role: UserRole | None = None
    plan: Plan | None = None
    credits: int | None = Field(None, ge=0)

    @model_validator(mode="before")
    @classmethod
    def reject_password(cls, data):
        return reject_fields(data, ("password",), _PASSWORD_ROUTE_MESSAGE)


class UserListResponse(BaseModel):
    success: bool = True
    count: int
    data: list[UserOut]
