"""
User Service

Registration, login, profile editing and admin user management.
"""

import logging
import uuid
from typing import Tuple

from fastapi import HTTPException, status
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.security import (
    Identity,
    create_access_token,
    hash_password,
    verify_password,
)
from app.models.enums import ROLE_LADDER, UserRole, UserStatus
from app.models.instructor_profile import InstructorProfile
from app.models.student_profile import StudentProfile
from app.models.user import User
from app.schemas.user import UserCreate, UserLogin, UserUpdate


logger = logging.getLogger(__name__)


def normalize_email(email: str) -> str:
    return email.strip().lower()


async def get_user_by_email(email: str, db: AsyncSession) -> User | None:
    result = await db.execute(
        select(User).where(User.email == normalize_email(email))
    )
    return result.scalar_one_or_none()


async def get_user(user_id: uuid.UUID, db: AsyncSession) -> User:
    """
    Get a user by ID.

    Raises:
        HTTPException: 404 if not found.
    """
    result = await db.execute(
        select(User).where(User.id == user_id)
    )
    user = result.scalar_one_or_none()

    if not user:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="User not found",
        )

    return user


# ============== Authentication ==============

async def register(
    data: UserCreate,
    db: AsyncSession,
) -> Tuple[User, str]:
    """
    Create a new account and sign it in.

    **Flow:**
    1. Refuse admin self-registration unless explicitly allowed
    2. Check the email is not taken
    3. Hash the password with bcrypt
    4. Create the user plus the profile record for its role
    5. Issue an access token

    Returns:
        Tuple of (user, access_token).

    Raises:
        HTTPException: 403 for admin self-registration, 409 if the
            email is already registered.
    """
    if data.role == UserRole.ADMIN and not settings.ALLOW_ADMIN_REGISTRATION:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin accounts cannot be self-registered",
        )

    email = normalize_email(data.email)
    if await get_user_by_email(email, db):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="User already exists",
        )

    name = data.name.strip()
    user = User(
        name=name,
        email=email,
        password_hash=hash_password(data.password),
        role=data.role,
        status=UserStatus.ACTIVE,
        student_profile=StudentProfile(name=name) if data.role == UserRole.STUDENT else None,
        instructor_profile=InstructorProfile(name=name) if data.role == UserRole.INSTRUCTOR else None,
    )
    db.add(user)
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="User already exists",
        )

    logger.info("Registered %s account %s", user.role.value, user.id)
    token = create_access_token(user.id, user.role)
    return user, token


async def login(
    data: UserLogin,
    db: AsyncSession,
) -> Tuple[User, str]:
    """
    Check credentials and issue a token that also carries the user's name.

    Raises:
        HTTPException: 401 for unknown email or wrong password (same
            message for both), 403 for a blocked account.
    """
    user = await get_user_by_email(data.email, db)

    if not user or not verify_password(data.password, user.password_hash):
        logger.warning("Failed login attempt for %s", normalize_email(data.email))
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )

    if user.is_blocked:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Account is blocked",
        )

    token = create_access_token(user.id, user.role, name=user.name)
    return user, token


# ============== Profile ==============

async def update_profile(
    user: User,
    data: UserUpdate,
    db: AsyncSession,
) -> User:
    """
    Update the caller's name, email and bio.

    Raises:
        HTTPException: 409 if the new email belongs to another account.
    """
    updates = data.model_dump(exclude_unset=True, exclude_none=True)

    if "email" in updates:
        email = normalize_email(updates["email"])
        other = await get_user_by_email(email, db)
        if other is not None and other.id != user.id:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="Email already in use",
            )
        user.email = email

    if "name" in updates:
        user.name = updates["name"].strip()
        profile = user.student_profile or user.instructor_profile
        if profile is not None:
            profile.name = user.name

    if "bio" in updates:
        user.bio = updates["bio"]
        if user.instructor_profile is not None:
            user.instructor_profile.bio = user.bio

    await db.commit()
    return user


# ============== Admin ==============

async def list_users(db: AsyncSession) -> list[User]:
    result = await db.execute(
        select(User).order_by(User.created_at.desc())
    )
    return list(result.scalars().all())


async def set_user_status(
    user_id: uuid.UUID,
    new_status: UserStatus,
    identity: Identity,
    db: AsyncSession,
) -> User:
    """
    Activate or block an account. Admins cannot block themselves.
    """
    user = await get_user(user_id, db)

    if user.id == identity.id and new_status == UserStatus.BLOCKED:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="You cannot block your own account",
        )

    user.status = new_status
    await db.commit()
    logger.info("User %s status set to %s", user.id, new_status.value)
    return user


def shift_role(role: UserRole, action: str) -> UserRole:
    """
    Move one step along student -> instructor -> admin.

    Raises:
        HTTPException: 400 when already at the end of the ladder.
    """
    index = ROLE_LADDER.index(role)
    target = index + 1 if action == "promote" else index - 1

    if target < 0 or target >= len(ROLE_LADDER):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Cannot {action} a user with role {role.value}",
        )
    return ROLE_LADDER[target]


async def change_role(
    user_id: uuid.UUID,
    action: str,
    db: AsyncSession,
) -> User:
    """Promote or demote a user, creating the matching profile if missing."""
    user = await get_user(user_id, db)
    user.role = shift_role(user.role, action)

    if user.role == UserRole.INSTRUCTOR and user.instructor_profile is None:
        user.instructor_profile = InstructorProfile(name=user.name, bio=user.bio)
    if user.role == UserRole.STUDENT and user.student_profile is None:
        user.student_profile = StudentProfile(name=user.name)

    await db.commit()
    logger.info("User %s role changed to %s", user.id, user.role.value)
    return user
