"""
Analytics Service

Business logic for the admin dashboard and instructor reporting.
"""

import uuid
from datetime import datetime
from typing import List

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.security import Identity
from app.models.course import Course
from app.models.enrollment import Enrollment
from app.models.enums import CompletionStatus, CourseStatus, UserRole, UserStatus
from app.models.payment import Payment
from app.models.user import User
from app.schemas.analytics import (
    ActivityItem,
    CategoryCount,
    InstructorEnrollmentRow,
    PlatformStats,
)
from app.services import course_service
from app.services.enrollment_service import percent


TOP_CATEGORY_LIMIT = 5
RECENT_ACTIVITY_LIMIT = 10


async def _count(db: AsyncSession, query) -> int:
    result = await db.execute(query)
    return int(result.scalar() or 0)


async def top_categories(db: AsyncSession, limit: int = TOP_CATEGORY_LIMIT) -> List[CategoryCount]:
    """
    Categories ranked by number of courses.

    Ties keep the order in which the categories first appeared.
    """
    result = await db.execute(
        select(Course.category, func.count(Course.id).label("n"))
        .group_by(Course.category)
        .order_by(func.count(Course.id).desc(), func.min(Course.id).asc())
        .limit(limit)
    )
    return [CategoryCount(category=category, count=n) for category, n in result.all()]


def _sort_key(item: ActivityItem) -> datetime:
    # SQLite hands back naive datetimes, Postgres aware ones
    return item.date.replace(tzinfo=None)


async def recent_activity(db: AsyncSession, limit: int = RECENT_ACTIVITY_LIMIT) -> List[ActivityItem]:
    """Latest enrollments and payments merged into one feed, newest first."""
    enrollments = await db.execute(
        select(Enrollment)
        .order_by(Enrollment.enrollment_date.desc(), Enrollment.id.desc())
        .limit(limit)
    )
    payments = await db.execute(
        select(Payment)
        .order_by(Payment.created_at.desc(), Payment.id.desc())
        .limit(limit)
    )

    items = [
        ActivityItem(
            type="enrollment",
            message=f"{e.user.name} enrolled in {e.course.title}",
            date=e.enrollment_date,
        )
        for e in enrollments.scalars().all()
    ]
    items.extend(
        ActivityItem(
            type="payment",
            message=f"{p.user.name} paid {p.amount:.2f} for {p.course.title}",
            date=p.created_at,
        )
        for p in payments.scalars().all()
    )

    items.sort(key=_sort_key, reverse=True)
    return items[:limit]


async def platform_stats(db: AsyncSession) -> PlatformStats:
    """
    Aggregate platform-wide statistics for the admin dashboard.

    Returns:
        PlatformStats with totals, revenue, category ranking, completion
        rate, role breakdown and the recent activity feed.
    """
    total_users = await _count(db, select(func.count(User.id)))
    total_courses = await _count(db, select(func.count(Course.id)))
    total_enrollments = await _count(db, select(func.count(Enrollment.id)))
    pending_courses = await _count(
        db,
        select(func.count(Course.id)).where(Course.status == CourseStatus.PENDING),
    )
    active_users = await _count(
        db,
        select(func.count(User.id)).where(User.status == UserStatus.ACTIVE),
    )
    completed_enrollments = await _count(
        db,
        select(func.count(Enrollment.id)).where(
            Enrollment.completion_status == CompletionStatus.COMPLETED
        ),
    )

    revenue_result = await db.execute(
        select(func.coalesce(func.sum(Payment.amount), 0.0))
    )
    total_revenue = float(revenue_result.scalar() or 0.0)

    role_result = await db.execute(
        select(User.role, func.count(User.id)).group_by(User.role)
    )
    role_counts = {role: int(n) for role, n in role_result.all()}
    student_count = role_counts.get(UserRole.STUDENT, 0)
    instructor_count = role_counts.get(UserRole.INSTRUCTOR, 0)
    admin_count = role_counts.get(UserRole.ADMIN, 0)

    return PlatformStats(
        total_users=total_users,
        total_courses=total_courses,
        total_enrollments=total_enrollments,
        pending_courses=pending_courses,
        active_users=active_users,
        total_revenue=total_revenue,
        top_categories=await top_categories(db),
        completion_rate=percent(completed_enrollments, total_enrollments),
        student_count=student_count,
        instructor_count=instructor_count,
        admin_count=admin_count,
        student_percentage=percent(student_count, total_users),
        instructor_percentage=percent(instructor_count, total_users),
        admin_percentage=percent(admin_count, total_users),
        recent_activity=await recent_activity(db),
    )


def _enrollment_row(enrollment: Enrollment) -> InstructorEnrollmentRow:
    return InstructorEnrollmentRow(
        enrollment_id=enrollment.id,
        course_id=enrollment.course_id,
        course_title=enrollment.course.title,
        student_id=enrollment.user_id,
        student_name=enrollment.user.name,
        student_email=enrollment.user.email,
        progress=enrollment.progress,
        completion_status=enrollment.completion_status,
        enrollment_date=enrollment.enrollment_date,
    )


async def get_instructor_enrollments(
    instructor_id: uuid.UUID,
    db: AsyncSession,
) -> List[InstructorEnrollmentRow]:
    """
    Enrollments across every course an instructor owns.

    Args:
        instructor_id: Owning instructor.
        db: Database session.

    Returns:
        One row per enrollment with student and course details, newest first.
    """
    result = await db.execute(
        select(Enrollment)
        .join(Course, Course.id == Enrollment.course_id)
        .where(Course.instructor_id == instructor_id)
        .order_by(Enrollment.enrollment_date.desc(), Enrollment.id.desc())
    )
    return [_enrollment_row(e) for e in result.scalars().all()]


async def get_course_students(
    course_id: int,
    identity: Identity,
    db: AsyncSession,
) -> List[InstructorEnrollmentRow]:
    """Students enrolled in one owned course."""
    course = await course_service.get_course(course_id, db)
    course_service.ensure_course_owner(course, identity)

    result = await db.execute(
        select(Enrollment)
        .where(Enrollment.course_id == course.id)
        .order_by(Enrollment.enrollment_date.desc(), Enrollment.id.desc())
    )
    return [_enrollment_row(e) for e in result.scalars().all()]
