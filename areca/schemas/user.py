"""Authentication and user profile schemas."""

from __future__ import annotations

from datetime import datetime

from pydantic import EmailStr, Field

from areca.db.models import UserRole
from areca.schemas.common import ApiModel


class RegisterRequest(ApiModel):
    email: EmailStr
    username: str = Field(..., min_length=3, max_length=20)
    password: str = Field(..., min_length=8, max_length=128)
    first_name: str | None = Field(default=None, max_length=100)
    last_name: str | None = Field(default=None, max_length=100)


class LoginRequest(ApiModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class UserOut(ApiModel):
    """Public view of a user; never carries the password hash."""

    id: str
    email: str
    username: str
    first_name: str | None = None
    last_name: str | None = None
    bio: str | None = None
    avatar: str | None = None
    role: UserRole
    is_active: bool
    created_at: datetime
    updated_at: datetime


class UserResponse(ApiModel):
    user: UserOut


class UserMessageResponse(ApiModel):
    message: str
    user: UserOut


class AuthResponse(ApiModel):
    message: str
    user: UserOut
    token: str = Field(..., description="Bearer token for the Authorization header.")


class AvatarResponse(ApiModel):
    message: str
    user: UserOut
    avatar: str


class ProfileUpdate(ApiModel):
    first_name: str | None = Field(default=None, max_length=100)
    last_name: str | None = Field(default=None, max_length=100)
    bio: str | None = Field(default=None, max_length=500)


class ChangePasswordRequest(ApiModel):
    current_password: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=8, max_length=128)


class DeleteAccountRequest(ApiModel):
    password: str = Field(..., min_length=1)
