"""Pydantic schemas for User, Auth and Profile."""

from datetime import datetime
from typing import Optional

from pydantic import EmailStr, Field, field_validator

from app.domain.schemas.base import CamelModel

PHONE_PATTERN = r"^\+?[0-9]{10,15}$"


class UserRead(CamelModel):
    id: str
    role: str
    email: str
    first_name: str
    last_name: str
    phone: Optional[str] = None
    is_active: bool
    manager_id: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class LoginRequest(CamelModel):
    email: EmailStr
    password: str = Field(min_length=1)


class AuthResponse(CamelModel):
    user: UserRead
    token: str


class RegisterRequest(CamelModel):
    """Body of POST /auth/register/{token}."""

    password: str = Field(min_length=8)
    first_name: str = Field(min_length=1, max_length=100)
    last_name: str = Field(min_length=1, max_length=100)
    phone: Optional[str] = Field(default=None, pattern=PHONE_PATTERN)


class FirstAdminRequest(CamelModel):
    email: EmailStr
    password: str = Field(min_length=8)
    first_name: str = Field(default="Admin", min_length=1, max_length=100)
    last_name: str = Field(default="User", min_length=1, max_length=100)
    phone: Optional[str] = Field(default=None, pattern=PHONE_PATTERN)


class ProfileUpdate(CamelModel):
    first_name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    last_name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    phone: Optional[str] = Field(default=None, pattern=PHONE_PATTERN)

    @field_validator("first_name", "last_name")
    @classmethod
    def names_not_null(cls, value):
        # phone may be cleared with null, names may not
        if value is None:
            raise ValueError("must not be null")
        return value


class ChangePasswordRequest(CamelModel):
    current_password: str = Field(min_length=1)
    new_password: str = Field(min_length=8)


class StatusToggle(CamelModel):
    is_active: bool


class MessageResponse(CamelModel):
    message: str
