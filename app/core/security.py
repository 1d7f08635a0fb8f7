"""
Security Utilities

Password hashing and JWT token management.
"""

import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

import bcrypt
from jose import JWTError, jwt

from app.core.config import settings
from app.models.enums import UserRole


@dataclass(frozen=True)
class Identity:
    """
    Canonical identity of an authenticated caller.

    Built from the freshly loaded user row, so the role reflects any
    change made after the token was issued.
    """

    id: uuid.UUID
    role: UserRole

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN


def hash_password(password: str) -> str:
    """
    Hash a plain text password using bcrypt.

    Args:
        password: Plain text password to hash.

    Returns:
        str: Hashed password.
    """
    password_bytes = password.encode("utf-8")
    salt = bcrypt.gensalt(rounds=settings.BCRYPT_ROUNDS)
    hashed = bcrypt.hashpw(password_bytes, salt)
    return hashed.decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    Verify a plain text password against a hashed password.

    Malformed hashes count as a mismatch.
    """
    try:
        password_bytes = plain_password.encode("utf-8")
        hashed_bytes = hashed_password.encode("utf-8")
        return bcrypt.checkpw(password_bytes, hashed_bytes)
    except ValueError:
        return False


def create_access_token(
    user_id: uuid.UUID | str,
    role: UserRole | str,
    name: Optional[str] = None,
    expires_delta: timedelta | None = None,
) -> str:
    """
    Create a JWT access token.

    The payload carries ``{"user": {"id", "role"[, "name"]}, "exp", "iat"}``.

    Args:
        user_id: ID of the user the token is issued to.
        role: Role of the user at issue time.
        name: Optional display name (embedded on login).
        expires_delta: Optional custom expiration time.

    Returns:
        str: Encoded JWT token.
    """
    now = datetime.now(timezone.utc)
    if expires_delta:
        expire = now + expires_delta
    else:
        expire = now + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)

    user_claim = {
        "id": str(user_id),
        "role": role.value if isinstance(role, UserRole) else str(role),
    }
    if name is not None:
        user_claim["name"] = name

    to_encode = {
        "user": user_claim,
        "exp": expire,
        "iat": now,
    }

    return jwt.encode(
        to_encode,
        settings.SECRET_KEY,
        algorithm=settings.ALGORITHM,
    )


def decode_access_token(token: str) -> dict | None:
    """
    Decode and validate a JWT access token.

    Returns:
        dict: Decoded token payload if valid (signature and expiry), None otherwise.
    """
    try:
        return jwt.decode(
            token,
            settings.SECRET_KEY,
            algorithms=[settings.ALGORITHM],
        )
    except JWTError:
        return None


def extract_token(raw: str | None) -> str | None:
    """Accept either a raw token or a ``Bearer <token>`` header value."""
    if not raw:
        return None
    raw = raw.strip()
    scheme, _, value = raw.partition(" ")
    if scheme.lower() == "bearer":
        raw = value.strip()
    return raw or None


def user_id_from_payload(payload: dict) -> uuid.UUID | None:
    """Pull the user id out of a decoded payload, or None when malformed."""
    user_claim = payload.get("user")
    if not isinstance(user_claim, dict):
        return None
    try:
        return uuid.UUID(str(user_claim.get("id")))
    except ValueError:
        return None
