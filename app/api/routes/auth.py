"""
Authentication Routes

Handles user registration, login and the current-user lookup.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_current_user
from app.core.database import get_db
from app.models.user import User
from app.schemas.token import AuthResponse
from app.schemas.user import UserCreate, UserLogin, UserResponse
from app.services import user_service


router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post(
    "/register",
    response_model=AuthResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a new user account",
)
async def register(
    user_data: UserCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> AuthResponse:
    """
    Create a new account and return an access token.

    **Flow:**
    1. Check the email is not already registered
    2. Hash the password using bcrypt
    3. Create the user and its student/instructor profile
    4. Return a JWT valid for one hour

    Raises:
        HTTPException: 409 if the email already exists.
        HTTPException: 403 when registering as admin is disabled.
    """
    user, token = await user_service.register(user_data, db)
    return AuthResponse(token=token, user=UserResponse.model_validate(user))


@router.post(
    "/login",
    response_model=AuthResponse,
    summary="Login with email and password",
)
async def login(
    credentials: UserLogin,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> AuthResponse:
    """
    Authenticate a user and return a JWT access token.

    Raises:
        HTTPException: 401 if the email or password is wrong.
        HTTPException: 403 if the account is blocked.
    """
    user, token = await user_service.login(credentials, db)
    return AuthResponse(token=token, user=UserResponse.model_validate(user))


@router.get(
    "/me",
    response_model=UserResponse,
    summary="Get the authenticated user",
)
async def get_me(
    current_user: Annotated[User, Depends(get_current_user)],
) -> User:
    return current_user
