"""Authentication and user management schemas"""

import re
from datetime import datetime
from typing import Optional
from uuid import UUID
from pydantic import BaseModel, EmailStr, Field, field_validator

from app.models.user import UserRole
from app.schemas.base import CamelModel

NAME_PATTERN = re.compile(r"^[A-Za-z][A-Za-z\s\-'.]*$")


class Token(BaseModel):
    """JWT token response"""
    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    expires_in: int


class RefreshRequest(BaseModel):
    """Token refresh request"""
    refresh_token: str


def _check_name(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    if not value:
        return None
    if not NAME_PATTERN.match(value):
        raise ValueError("Name can only contain letters, spaces, hyphens, apostrophes and periods")
    return value


class UserCreate(CamelModel):
    """Create user request"""
    email: EmailStr
    password: str = Field(min_length=8, max_length=128)
    full_name: Optional[str] = Field(default=None, max_length=255)
    role: UserRole = UserRole.STAFF

    @field_validator("full_name")
    @classmethod
    def check_name(cls, value):
        return _check_name(value)


class UserUpdate(CamelModel):
    full_name: Optional[str] = Field(default=None, max_length=255)
    role: Optional[UserRole] = None
    password: Optional[str] = Field(default=None, min_length=8, max_length=128)
    is_active: Optional[bool] = None
    disabled_reason: Optional[str] = None

    @field_validator("full_name")
    @classmethod
    def check_name(cls, value):
        return _check_name(value)


class UserResponse(CamelModel):
    """User response"""
    id: UUID
    email: str
    full_name: Optional[str]
    role: UserRole
    tenant_id: Optional[UUID]
    is_active: bool
    disabled_at: Optional[datetime]
    disabled_reason: Optional[str]
    created_at: datetime
    last_login: Optional[datetime]
