"""
Review Service

Course ratings and comments, with helpful votes and reporting.
"""

import logging

from fastapi import HTTPException, status
from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.security import Identity
from app.models.review import Review
from app.schemas.review import CourseReviewsResponse, ReviewCreate, ReviewResponse
from app.services import course_service, enrollment_service


logger = logging.getLogger(__name__)


async def list_course_reviews(
    course_id: int,
    db: AsyncSession,
) -> CourseReviewsResponse:
    """
    Reviews of a public course, newest first, with the rating summary.

    The average is rounded to one decimal; the distribution always
    carries the five star buckets.
    """
    course = await course_service.get_approved_course(course_id, db)

    result = await db.execute(
        select(Review)
        .where(Review.course_id == course.id)
        .order_by(Review.created_at.desc(), Review.id.desc())
    )
    reviews = list(result.scalars().all())

    distribution = {stars: 0 for stars in range(1, 6)}
    for review in reviews:
        distribution[review.rating] += 1

    average = 0.0
    if reviews:
        average = round(sum(r.rating for r in reviews) / len(reviews), 1)

    return CourseReviewsResponse(
        course_id=course.id,
        average_rating=average,
        total_reviews=len(reviews),
        distribution=distribution,
        reviews=[ReviewResponse.model_validate(r) for r in reviews],
    )


async def create_review(
    course_id: int,
    data: ReviewCreate,
    identity: Identity,
    db: AsyncSession,
) -> Review:
    """
    Post a review for a course the caller is enrolled in.

    Raises:
        HTTPException: 404 for an unknown course, 403 when not enrolled,
            409 for a second review by the same user.
    """
    course = await course_service.get_approved_course(course_id, db)

    if not await enrollment_service.find_enrollment(identity.id, course.id, db):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Only enrolled students can review this course",
        )

    existing = await db.execute(
        select(Review.id).where(
            Review.user_id == identity.id,
            Review.course_id == course.id,
        )
    )
    if existing.first() is not None:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="You have already reviewed this course",
        )

    review = Review(
        user_id=identity.id,
        course_id=course.id,
        rating=data.rating,
        comment=data.comment.strip(),
        helpful_count=0,
        reported=False,
    )
    db.add(review)
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="You have already reviewed this course",
        )
    await db.refresh(review, ["user"])

    logger.info("Review %s posted on course %s", review.id, course.id)
    return review


async def get_review(review_id: int, db: AsyncSession) -> Review:
    result = await db.execute(
        select(Review).where(Review.id == review_id)
    )
    review = result.scalar_one_or_none()
    if not review:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Review not found",
        )
    return review


async def mark_helpful(review_id: int, db: AsyncSession) -> Review:
    """Add one helpful vote; the increment happens in the database."""
    review = await get_review(review_id, db)
    await db.execute(
        update(Review)
        .where(Review.id == review.id)
        .values(helpful_count=Review.helpful_count + 1)
        .execution_options(synchronize_session=False)
    )
    await db.commit()
    await db.refresh(review, ["helpful_count"])
    return review


async def report_review(review_id: int, db: AsyncSession) -> Review:
    review = await get_review(review_id, db)
    review.reported = True
    await db.commit()
    logger.info("Review %s reported", review.id)
    return review
