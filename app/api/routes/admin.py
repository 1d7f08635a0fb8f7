"""
Admin Routes

Platform statistics, user management and course moderation.
"""

import uuid
from typing import Annotated, List

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import require_roles
from app.core.database import get_db
from app.core.security import Identity
from app.models.course import Course
from app.models.enums import UserRole
from app.models.payment import Payment
from app.models.user import User
from app.schemas.analytics import PlatformStats
from app.schemas.course import AdminCourseRow, CourseStatusUpdate, InstructorCourseResponse
from app.schemas.payment import PaymentResponse
from app.schemas.user import UserResponse, UserRoleUpdate, UserStatusUpdate
from app.services import analytics_service, course_service, payment_service, user_service


router = APIRouter(prefix="/admin", tags=["Admin"])

AdminIdentity = Annotated[Identity, Depends(require_roles(UserRole.ADMIN))]


@router.get(
    "/stats",
    response_model=PlatformStats,
    summary="Platform statistics",
)
async def get_stats(
    _: AdminIdentity,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> PlatformStats:
    """
    Aggregate counts for the admin dashboard.

    **Includes:**
    - Users, courses, enrollments and pending courses
    - Total revenue from all payments
    - Top 5 categories by course count
    - Completion rate (0 when there are no enrollments)
    - Role breakdown and the recent activity feed
    """
    return await analytics_service.platform_stats(db)


# ============== Users ==============

@router.get(
    "/users",
    response_model=List[UserResponse],
    summary="List all users",
)
async def list_users(
    _: AdminIdentity,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> List[User]:
    return await user_service.list_users(db)


@router.put(
    "/users/{user_id}/status",
    response_model=UserResponse,
    summary="Activate or block a user",
)
async def set_user_status(
    user_id: uuid.UUID,
    body: UserStatusUpdate,
    identity: AdminIdentity,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> User:
    """Blocked users can no longer log in or use their tokens."""
    return await user_service.set_user_status(user_id, body.status, identity, db)


@router.put(
    "/users/{user_id}/role",
    response_model=UserResponse,
    summary="Promote or demote a user",
)
async def change_user_role(
    user_id: uuid.UUID,
    body: UserRoleUpdate,
    _: AdminIdentity,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> User:
    """
    Move a user one step along student -> instructor -> admin.

    Raises:
        HTTPException: 400 when already at the top or bottom.
    """
    return await user_service.change_role(user_id, body.action, db)


# ============== Courses ==============

@router.get(
    "/courses",
    response_model=List[AdminCourseRow],
    summary="List all courses with counts",
)
async def list_courses(
    _: AdminIdentity,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> List[AdminCourseRow]:
    return await course_service.list_admin_courses(db)


@router.put(
    "/courses/{course_id}/status",
    response_model=InstructorCourseResponse,
    summary="Moderate a course",
)
async def set_course_status(
    course_id: int,
    body: CourseStatusUpdate,
    _: AdminIdentity,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> Course:
    """
    Approve or archive a course and leave a review note.

    **Allowed moves:**
    - pending -> approved or archived
    - approved -> archived
    - archived -> approved

    Raises:
        HTTPException: 400 for any other transition.
    """
    return await course_service.set_course_status(course_id, body.status, body.note, db)


# ============== Payments ==============

@router.get(
    "/payments",
    response_model=List[PaymentResponse],
    summary="List all payments",
)
async def list_payments(
    _: AdminIdentity,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> List[Payment]:
    return await payment_service.list_payments(db)
