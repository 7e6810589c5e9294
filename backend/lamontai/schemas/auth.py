"""Auth Schemas — registration, login and password-reset payloads.

Invariants:
    - Emails are validated (email-validator) and lower-cased before reaching services
    - Passwords are at least 6 characters on every write path
    - Names are stripped and 1-50 characters

Design Decisions:
    - AuthResponse flattens the public user fields next to the token: one round trip
      gives the client everything the dashboard header needs
"""

from uuid import UUID

from pydantic import BaseModel, EmailStr, Field, field_validator

PASSWORD_MIN_LENGTH = 6


class _EmailMixin(BaseModel):
    email: EmailStr

    @field_validator("email")
    @classmethod
    def lower_email(cls, v: str) -> str:
        return v.lower()


class RegisterRequest(_EmailMixin):
    name: str = Field(min_length=1, max_length=50)
    password: str = Field(min_length=PASSWORD_MIN_LENGTH, max_length=128)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("name cannot be empty or whitespace")
        return v


class LoginRequest(_EmailMixin):
    password: str = Field(min_length=1, max_length=128)


class ForgotPasswordRequest(_EmailMixin):
    pass


class ResetPasswordRequest(BaseModel):
    password: str = Field(min_length=PASSWORD_MIN_LENGTH, max_length=128)


class ChangePasswordRequest(BaseModel):
    current_password: str = Field(min_length=1, max_length=128)
    new_password: str = Field(min_length=PASSWORD_MIN_LENGTH, max_length=128)


class AuthResponse(BaseModel):
    """Public user fields plus a fresh access token."""
    id: UUID
    name: str
    email: str
    role: str
    plan: str
    credits: int
    token: str


class ForgotPasswordResponse(BaseModel):
    success: bool = True
    message: str
    reset_token: str
    expires_in_minutes: int
