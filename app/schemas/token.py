"""
Token Schemas

Pydantic models for JWT token handling.
"""

from pydantic import BaseModel

from app.schemas.user import UserResponse


class TokenUser(BaseModel):
    """The ``user`` claim embedded in every access token."""

    id: str
    role: str
    name: str | None = None


class TokenPayload(BaseModel):
    """Schema for decoded token payload."""

    user: TokenUser
    exp: int  # Expiration timestamp


class AuthResponse(BaseModel):
    """Schema returned by register and login."""

    token: str
    token_type: str = "bearer"
    user: UserResponse
