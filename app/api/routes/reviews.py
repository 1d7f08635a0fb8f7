"""
Review Routes

Voting on and reporting existing reviews. Listing and posting live
under the course routes.
"""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_current_identity
from app.core.database import get_db
from app.core.security import Identity
from app.models.review import Review
from app.schemas.review import ReviewResponse
from app.services import review_service


router = APIRouter(prefix="/reviews", tags=["Reviews"])


@router.post(
    "/{review_id}/helpful",
    response_model=ReviewResponse,
    summary="Mark a review as helpful",
)
async def mark_helpful(
    review_id: int,
    _: Annotated[Identity, Depends(get_current_identity)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> Review:
    return await review_service.mark_helpful(review_id, db)


@router.post(
    "/{review_id}/report",
    response_model=ReviewResponse,
    summary="Report a review",
)
async def report_review(
    review_id: int,
    _: Annotated[Identity, Depends(get_current_identity)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> Review:
    """Flag a review for moderation."""
    return await review_service.report_review(review_id, db)
