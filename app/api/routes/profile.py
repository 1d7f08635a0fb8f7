"""
Profile Routes

Endpoints for the current user's own profile.
"""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_current_user
from app.core.database import get_db
from app.models.user import User
from app.schemas.user import UserResponse, UserUpdate
from app.services import user_service


router = APIRouter(prefix="/profile", tags=["Profile"])


@router.get(
    "",
    response_model=UserResponse,
    summary="Get current user profile",
)
async def get_profile(
    current_user: Annotated[User, Depends(get_current_user)],
) -> User:
    return current_user


@router.put(
    "",
    response_model=UserResponse,
    summary="Update current user profile",
)
async def update_profile(
    user_update: UserUpdate,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> User:
    """
    Update the logged-in user's name, email or bio.

    Only provided fields will be updated.

    Raises:
        HTTPException: 409 if the email is used by another account.
    """
    return await user_service.update_profile(current_user, user_update, db)
