"""
API Dependencies

Reusable dependencies for API routes including authentication and
role-based authorization.
"""

import logging
import uuid
from typing import Annotated, Callable, Coroutine, Any

from fastapi import Depends, Header, HTTPException, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.security import (
    Identity,
    decode_access_token,
    extract_token,
    user_id_from_payload,
)
from app.models.enums import UserRole
from app.models.user import User


logger = logging.getLogger(__name__)


async def get_token(
    authorization: Annotated[str | None, Header()] = None,
    x_auth_token: Annotated[str | None, Header()] = None,
) -> str | None:
    """
    Read the bearer token from the request headers.

    ``Authorization`` may carry either ``Bearer <token>`` or the raw token;
    ``x-auth-token`` is accepted as a fallback for older clients.
    """
    return extract_token(authorization) or extract_token(x_auth_token)


async def _load_user(token: str | None, db: AsyncSession) -> User | None:
    if not token:
        return None

    payload = decode_access_token(token)
    if payload is None:
        return None

    user_id = user_id_from_payload(payload)
    if user_id is None:
        return None

    result = await db.execute(
        select(User).where(User.id == user_id)
    )
    return result.scalar_one_or_none()


async def get_current_user(
    token: Annotated[str | None, Depends(get_token)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> User:
    """
    Dependency to get the current authenticated user.

    This dependency:
    1. Extracts the JWT token from the request headers
    2. Decodes and validates the token (signature and expiry)
    3. Re-fetches the user so role/status changes apply immediately
    4. Raises 401 if the token is missing/invalid or the user is gone

    Raises:
        HTTPException: 401 if authentication fails, 403 if the account is blocked.
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="No token, authorization denied",
            headers={"WWW-Authenticate": "Bearer"},
        )

    user = await _load_user(token, db)
    if user is None:
        logger.warning("Rejected request with invalid or stale token")
        raise credentials_exception

    if user.is_blocked:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Account is blocked",
        )

    return user


async def get_current_identity(
    current_user: Annotated[User, Depends(get_current_user)],
) -> Identity:
    """Canonical identity of the caller, used by every service."""
    return Identity(id=current_user.id, role=current_user.role)


async def get_optional_identity(
    token: Annotated[str | None, Depends(get_token)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> Identity | None:
    """
    Dependency to optionally identify the caller.

    Similar to get_current_identity but returns None instead of raising
    when the token is absent, invalid or belongs to a blocked/missing user.
    """
    user = await _load_user(token, db)
    if user is None or user.is_blocked:
        return None
    return Identity(id=user.id, role=user.role)


def require_roles(
    *roles: UserRole,
) -> Callable[..., Coroutine[Any, Any, Identity]]:
    """
    Dependency factory restricting a route to the given roles.

    Usage:
        identity: Annotated[Identity, Depends(require_roles(UserRole.ADMIN))]
    """
    allowed = frozenset(roles)

    async def checker(
        identity: Annotated[Identity, Depends(get_current_identity)],
    ) -> Identity:
        if identity.role not in allowed:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Forbidden",
            )
        return identity

    return checker


def ensure_self_or_admin(identity: Identity, user_id: uuid.UUID) -> None:
    """Raise 403 unless the caller is the given user or an admin."""
    if identity.id != user_id and not identity.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="User not authorized",
        )
