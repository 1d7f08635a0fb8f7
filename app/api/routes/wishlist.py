"""
Wishlist Routes
"""

import uuid
from typing import Annotated, List

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_current_identity
from app.core.database import get_db
from app.core.security import Identity
from app.models.wishlist import WishlistItem
from app.schemas.wishlist import WishlistCreate, WishlistItemResponse
from app.services import wishlist_service


router = APIRouter(prefix="/wishlist", tags=["Wishlist"])


@router.get(
    "/{user_id}",
    response_model=List[WishlistItemResponse],
    summary="Get a user's wishlist",
)
async def get_wishlist(
    user_id: uuid.UUID,
    identity: Annotated[Identity, Depends(get_current_identity)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> List[WishlistItem]:
    wishlist_service.ensure_wishlist_owner(identity, user_id)
    return await wishlist_service.list_wishlist(user_id, db)


@router.post(
    "",
    response_model=WishlistItemResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Add a course to a wishlist",
)
async def add_to_wishlist(
    item: WishlistCreate,
    identity: Annotated[Identity, Depends(get_current_identity)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> WishlistItem:
    """
    Save a course for later.

    Raises:
        HTTPException: 403 for someone else's wishlist.
        HTTPException: 404 for an unknown course, 409 if already saved.
    """
    wishlist_service.ensure_wishlist_owner(identity, item.user_id)
    return await wishlist_service.add_to_wishlist(item.user_id, item.course_id, db)


@router.delete(
    "/{user_id}/{course_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Remove a course from a wishlist",
)
async def remove_from_wishlist(
    user_id: uuid.UUID,
    course_id: int,
    identity: Annotated[Identity, Depends(get_current_identity)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> None:
    wishlist_service.ensure_wishlist_owner(identity, user_id)
    await wishlist_service.remove_from_wishlist(user_id, course_id, db)
