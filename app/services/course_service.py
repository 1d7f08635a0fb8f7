"""
Course Service

Business logic for the course catalog, instructor authoring and
admin moderation.
"""

import logging
import uuid
from typing import Optional

from fastapi import HTTPException, status
from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import utcnow
from app.core.security import Identity
from app.models.course import Course
from app.models.enrollment import Enrollment
from app.models.enums import COURSE_STATUS_TRANSITIONS, CourseStatus
from app.models.module import Module
from app.models.payment import Payment
from app.schemas.course import (
    AdminCourseRow,
    CourseCreate,
    CourseUpdate,
    ModuleCreate,
    ModuleUpdate,
)


logger = logging.getLogger(__name__)


# ============== Lookups ==============

async def get_course(
    course_id: int,
    db: AsyncSession,
) -> Course:
    """
    Get a course by ID regardless of its status.

    Raises:
        HTTPException: 404 if the course does not exist.
    """
    result = await db.execute(
        select(Course).where(Course.id == course_id)
    )
    course = result.scalar_one_or_none()

    if not course:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Course with ID {course_id} not found",
        )

    return course


async def get_approved_course(
    course_id: int,
    db: AsyncSession,
) -> Course:
    """
    Get a course that is visible in the public catalog.

    Pending and archived courses are reported as missing.
    """
    course = await get_course(course_id, db)
    if course.status != CourseStatus.APPROVED:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Course with ID {course_id} not found",
        )
    return course


def ensure_course_owner(course: Course, identity: Identity) -> None:
    """Raise 403 unless the caller owns the course (admins always pass)."""
    if identity.is_admin:
        return
    if course.instructor_id != identity.id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You can only manage your own courses",
        )


# ============== Public Catalog ==============

async def list_public_courses(
    db: AsyncSession,
    category: Optional[str] = None,
    search: Optional[str] = None,
) -> list[Course]:
    """
    List approved courses, newest first.

    Args:
        db: Database session.
        category: Optional exact category filter (case-insensitive).
        search: Optional substring matched against title and description.

    Returns:
        List of approved Course objects.
    """
    query = select(Course).where(Course.status == CourseStatus.APPROVED)

    if category:
        query = query.where(func.lower(Course.category) == category.strip().lower())

    if search:
        pattern = f"%{search.strip()}%"
        query = query.where(
            or_(
                Course.title.ilike(pattern),
                Course.description.ilike(pattern),
            )
        )

    query = query.order_by(Course.created_at.desc(), Course.id.desc())
    result = await db.execute(query)
    return list(result.scalars().all())


# ============== Instructor Authoring ==============

async def list_instructor_courses(
    instructor_id: uuid.UUID,
    db: AsyncSession,
) -> list[Course]:
    """List every course owned by an instructor, in any status."""
    result = await db.execute(
        select(Course)
        .where(Course.instructor_id == instructor_id)
        .order_by(Course.created_at.desc(), Course.id.desc())
    )
    return list(result.scalars().all())


async def create_course(
    data: CourseCreate,
    identity: Identity,
    db: AsyncSession,
) -> Course:
    """
    Create a course owned by the caller.

    New courses start as ``pending`` and stay out of the public catalog
    until an admin approves them.
    """
    course = Course(
        instructor_id=identity.id,
        title=data.title.strip(),
        description=data.description.strip(),
        category=data.category.strip(),
        price=data.price,
        status=CourseStatus.PENDING,
        modules=[],
    )
    db.add(course)
    await db.commit()
    await db.refresh(course, ["instructor"])

    logger.info("Course %s created by instructor %s", course.id, identity.id)
    return course


async def update_course(
    course_id: int,
    data: CourseUpdate,
    identity: Identity,
    db: AsyncSession,
) -> Course:
    """Apply a partial update to an owned course."""
    course = await get_course(course_id, db)
    ensure_course_owner(course, identity)

    updates = data.model_dump(exclude_unset=True, exclude_none=True)
    for field, value in updates.items():
        setattr(course, field, value.strip() if isinstance(value, str) else value)

    await db.commit()
    logger.info("Course %s updated (%s)", course.id, ", ".join(sorted(updates)) or "no changes")
    return course


async def delete_course(
    course_id: int,
    identity: Identity,
    db: AsyncSession,
) -> None:
    """
    Delete an owned course with its modules.

    Courses with enrollments or payments cannot be deleted; archive
    them instead.

    Raises:
        HTTPException: 404 if not found, 403 if not the owner,
            409 if enrollments or payments reference the course.
    """
    course = await get_course(course_id, db)
    ensure_course_owner(course, identity)

    enrollments = await db.scalar(
        select(func.count(Enrollment.id)).where(Enrollment.course_id == course.id)
    )
    payments = await db.scalar(
        select(func.count(Payment.id)).where(Payment.course_id == course.id)
    )
    if enrollments or payments:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Course has enrollments or payments; archive it instead",
        )

    await db.delete(course)
    await db.commit()
    logger.info("Course %s deleted by %s", course_id, identity.id)


def _next_order_sequence(course: Course) -> int:
    if not course.modules:
        return 0
    return max(m.order_sequence for m in course.modules) + 1


async def add_module(
    course_id: int,
    data: ModuleCreate,
    identity: Identity,
    db: AsyncSession,
) -> Module:
    """
    Append a module to an owned course.

    When ``order_sequence`` is omitted the module goes to the end.
    """
    course = await get_course(course_id, db)
    ensure_course_owner(course, identity)

    order_sequence = data.order_sequence
    if order_sequence is None:
        order_sequence = _next_order_sequence(course)

    module = Module(
        title=data.title.strip(),
        type=data.type,
        content_url=data.content_url,
        order_sequence=order_sequence,
        duration=data.duration,
        quiz_data=data.quiz_data.model_dump() if data.quiz_data else None,
    )
    course.modules.append(module)
    course.modules.sort(key=lambda m: m.order_sequence)
    course.updated_at = utcnow()

    await db.commit()
    logger.info("Module %s added to course %s", module.id, course.id)
    return module


def _get_course_module(course: Course, module_id: int) -> Module:
    for module in course.modules:
        if module.id == module_id:
            return module
    raise HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail=f"Module with ID {module_id} not found in course {course.id}",
    )


async def update_module(
    course_id: int,
    module_id: int,
    data: ModuleUpdate,
    identity: Identity,
    db: AsyncSession,
) -> Module:
    course = await get_course(course_id, db)
    ensure_course_owner(course, identity)
    module = _get_course_module(course, module_id)

    updates = data.model_dump(exclude_unset=True, exclude_none=True)
    for field, value in updates.items():
        setattr(module, field, value)

    course.modules.sort(key=lambda m: m.order_sequence)
    course.updated_at = utcnow()

    await db.commit()
    return module


async def delete_module(
    course_id: int,
    module_id: int,
    identity: Identity,
    db: AsyncSession,
) -> None:
    course = await get_course(course_id, db)
    ensure_course_owner(course, identity)
    module = _get_course_module(course, module_id)

    course.modules.remove(module)
    course.updated_at = utcnow()

    await db.commit()
    logger.info("Module %s removed from course %s", module_id, course_id)


# ============== Moderation ==============

def validate_status_transition(current: CourseStatus, new: CourseStatus) -> None:
    """
    Check a moderation move against the allowed transitions.

    Writing the current status again is accepted (note-only update).

    Raises:
        HTTPException: 400 for a transition that is not allowed.
    """
    if current == new:
        return
    if new not in COURSE_STATUS_TRANSITIONS.get(current, frozenset()):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Cannot change course status from {current.value} to {new.value}",
        )


async def set_course_status(
    course_id: int,
    new_status: CourseStatus,
    note: Optional[str],
    db: AsyncSession,
) -> Course:
    """
    Moderate a course: record the new status and the reviewer's note.

    Raises:
        HTTPException: 404 if missing, 400 for a disallowed transition.
    """
    course = await get_course(course_id, db)
    validate_status_transition(course.status, new_status)

    previous = course.status
    course.status = new_status
    if note is not None:
        course.review_note = note
    course.updated_at = utcnow()

    await db.commit()
    logger.info(
        "Course %s status changed %s -> %s",
        course.id,
        previous.value,
        new_status.value,
    )
    return course


async def list_admin_courses(db: AsyncSession) -> list[AdminCourseRow]:
    """All courses with module and enrollment counts, newest first."""
    enrollment_counts = (
        select(Enrollment.course_id, func.count(Enrollment.id).label("n"))
        .group_by(Enrollment.course_id)
        .subquery()
    )
    result = await db.execute(
        select(Course, func.coalesce(enrollment_counts.c.n, 0))
        .outerjoin(enrollment_counts, enrollment_counts.c.course_id == Course.id)
        .order_by(Course.created_at.desc(), Course.id.desc())
    )

    rows = []
    for course, enrollment_count in result.all():
        row = AdminCourseRow.model_validate(course)
        row.module_count = len(course.modules)
        row.enrollment_count = int(enrollment_count)
        rows.append(row)
    return rows
