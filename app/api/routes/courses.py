"""
Course Routes

Public catalog endpoints plus enrolling and reviewing a course.
"""

from typing import Annotated, List, Optional

from fastapi import APIRouter, Body, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_current_identity
from app.core.database import get_db
from app.core.security import Identity
from app.models.course import Course
from app.models.enrollment import Enrollment
from app.models.review import Review
from app.schemas.course import CourseResponse, CourseSummary
from app.schemas.enrollment import EnrollmentResponse, EnrollRequest
from app.schemas.review import CourseReviewsResponse, ReviewCreate, ReviewResponse
from app.services import course_service, enrollment_service, review_service


router = APIRouter(prefix="/courses", tags=["Courses"])


@router.get(
    "",
    response_model=List[CourseSummary],
    summary="List approved courses",
)
async def list_courses(
    db: Annotated[AsyncSession, Depends(get_db)],
    category: Optional[str] = Query(None, description="Filter by category"),
    search: Optional[str] = Query(None, description="Search in title or description"),
) -> List[Course]:
    """
    Get all courses visible in the public catalog.

    Only approved courses are listed; pending and archived courses are
    hidden from everyone except their instructor and admins.
    """
    return await course_service.list_public_courses(db, category=category, search=search)


@router.get(
    "/{course_id}",
    response_model=CourseResponse,
    summary="Get course details",
)
async def get_course(
    course_id: int,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> Course:
    """
    Get an approved course with its module outline.

    Module content and quiz answers are not exposed here.
    """
    return await course_service.get_approved_course(course_id, db)


@router.post(
    "/{course_id}/enroll",
    response_model=EnrollmentResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Enroll in a course",
)
async def enroll(
    course_id: int,
    identity: Annotated[Identity, Depends(get_current_identity)],
    db: Annotated[AsyncSession, Depends(get_db)],
    body: Annotated[Optional[EnrollRequest], Body()] = None,
) -> Enrollment:
    """
    Enroll the authenticated user in an approved course.

    **Flow:**
    1. Free courses grant access immediately
    2. Priced courses record a completed (simulated) payment first,
       unless the user already paid
    3. Payment and enrollment are saved together

    Raises:
        HTTPException: 404 if the course is not approved.
        HTTPException: 409 if already enrolled.
    """
    return await enrollment_service.enroll(
        course_id,
        identity,
        db,
        transaction_id=body.transaction_id if body else None,
    )


@router.get(
    "/{course_id}/reviews",
    response_model=CourseReviewsResponse,
    summary="List reviews of a course",
)
async def list_reviews(
    course_id: int,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> CourseReviewsResponse:
    return await review_service.list_course_reviews(course_id, db)


@router.post(
    "/{course_id}/reviews",
    response_model=ReviewResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Review a course",
)
async def create_review(
    course_id: int,
    review: ReviewCreate,
    identity: Annotated[Identity, Depends(get_current_identity)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> Review:
    """
    Post a rating and comment. Only enrolled users may review, once
    per course.
    """
    return await review_service.create_review(course_id, review, identity, db)
