"""
User Schemas

Pydantic models for user request/response validation.
"""

import uuid
from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, EmailStr, Field, field_validator

from app.models.enums import UserRole, UserStatus


# bcrypt only hashes the first 72 bytes and refuses longer input
MAX_PASSWORD_BYTES = 72


def check_password_length(value: str) -> str:
    if len(value.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise ValueError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes")
    return value


class UserCreate(BaseModel):
    """Schema for registering a new user."""

    name: str = Field(..., min_length=1, max_length=255, description="User's display name")
    email: EmailStr = Field(..., description="User's email address")
    password: str = Field(..., min_length=6, description="Password (min 6 characters)")
    role: UserRole = Field(default=UserRole.STUDENT, description="User role")

    @field_validator("password")
    @classmethod
    def password_fits_bcrypt(cls, value: str) -> str:
        return check_password_length(value)


class UserLogin(BaseModel):
    """Schema for user login request."""

    email: EmailStr = Field(..., description="User's email address")
    password: str = Field(..., description="User's password")


class UserResponse(BaseModel):
    """Schema for user response (excludes password)."""

    id: uuid.UUID
    name: str
    email: str
    role: UserRole
    status: UserStatus
    bio: Optional[str] = None
    created_at: datetime

    model_config = {"from_attributes": True}


class UserUpdate(BaseModel):
    """Schema for updating the caller's profile."""

    name: Optional[str] = Field(None, min_length=1, max_length=255, description="New display name")
    email: Optional[EmailStr] = Field(None, description="New email address")
    bio: Optional[str] = Field(None, description="Short biography")


class UserStatusUpdate(BaseModel):
    """Admin request to activate or block an account."""

    status: UserStatus


class UserRoleUpdate(BaseModel):
    """Admin request to move a user one step along the role ladder."""

    action: Literal["promote", "demote"]
