"""
Wishlist Service

Per-user list of saved courses.
"""

import logging
import uuid

from fastapi import HTTPException, status
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.security import Identity
from app.models.wishlist import WishlistItem
from app.services import course_service


logger = logging.getLogger(__name__)


async def _find_item(
    user_id: uuid.UUID,
    course_id: int,
    db: AsyncSession,
) -> WishlistItem | None:
    result = await db.execute(
        select(WishlistItem).where(
            WishlistItem.user_id == user_id,
            WishlistItem.course_id == course_id,
        )
    )
    return result.scalar_one_or_none()


async def list_wishlist(
    user_id: uuid.UUID,
    db: AsyncSession,
) -> list[WishlistItem]:
    result = await db.execute(
        select(WishlistItem)
        .where(WishlistItem.user_id == user_id)
        .order_by(WishlistItem.added_date.desc(), WishlistItem.id.desc())
    )
    return list(result.scalars().all())


async def add_to_wishlist(
    user_id: uuid.UUID,
    course_id: int,
    db: AsyncSession,
) -> WishlistItem:
    """
    Save a course to a user's wishlist.

    Raises:
        HTTPException: 404 for an unknown course, 409 if already saved.
    """
    course = await course_service.get_course(course_id, db)

    if await _find_item(user_id, course.id, db):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Course already in wishlist",
        )

    item = WishlistItem(user_id=user_id, course=course)
    db.add(item)
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Course already in wishlist",
        )

    logger.info("Course %s added to wishlist of %s", course.id, user_id)
    return item


async def remove_from_wishlist(
    user_id: uuid.UUID,
    course_id: int,
    db: AsyncSession,
) -> None:
    item = await _find_item(user_id, course_id, db)
    if not item:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Course not in wishlist",
        )

    await db.delete(item)
    await db.commit()


def ensure_wishlist_owner(identity: Identity, user_id: uuid.UUID) -> None:
    """Only the owner may read or change a wishlist."""
    if identity.id != user_id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="User not authorized",
        )
