"""
Instructor Routes

Endpoints for authoring courses and modules and following enrollments.
"""

import uuid
from typing import Annotated, List

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import ensure_self_or_admin, require_roles
from app.core.database import get_db
from app.core.security import Identity
from app.models.course import Course
from app.models.enums import UserRole
from app.models.module import Module
from app.schemas.analytics import InstructorEnrollmentRow
from app.schemas.course import (
    CourseCreate,
    CourseUpdate,
    InstructorCourseResponse,
    ModuleCreate,
    ModuleResponse,
    ModuleUpdate,
)
from app.services import analytics_service, course_service


router = APIRouter(prefix="/instructor", tags=["Instructor"])

InstructorIdentity = Annotated[
    Identity,
    Depends(require_roles(UserRole.INSTRUCTOR, UserRole.ADMIN)),
]


# ============== Courses ==============

@router.post(
    "/courses",
    response_model=InstructorCourseResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a new course",
)
async def create_course(
    course_data: CourseCreate,
    identity: Annotated[Identity, Depends(require_roles(UserRole.INSTRUCTOR))],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> Course:
    """
    Create a course owned by the current instructor.

    The course starts as ``pending`` and appears in the catalog once an
    admin approves it.
    """
    return await course_service.create_course(course_data, identity, db)


@router.get(
    "/courses/{course_id}",
    response_model=InstructorCourseResponse,
    summary="Get one of my courses with full module content",
)
async def get_own_course(
    course_id: int,
    identity: InstructorIdentity,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> Course:
    course = await course_service.get_course(course_id, db)
    course_service.ensure_course_owner(course, identity)
    return course


@router.put(
    "/courses/{course_id}",
    response_model=InstructorCourseResponse,
    summary="Update a course",
)
async def update_course(
    course_id: int,
    course_data: CourseUpdate,
    identity: InstructorIdentity,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> Course:
    """
    Update title, description, category or price of an owned course.

    Raises:
        HTTPException: 403 if the course belongs to another instructor.
    """
    return await course_service.update_course(course_id, course_data, identity, db)


@router.delete(
    "/courses/{course_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a course",
)
async def delete_course(
    course_id: int,
    identity: InstructorIdentity,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> None:
    await course_service.delete_course(course_id, identity, db)


# ============== Modules ==============

@router.post(
    "/courses/{course_id}/modules",
    response_model=ModuleResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Add a module to a course",
)
async def add_module(
    course_id: int,
    module_data: ModuleCreate,
    identity: InstructorIdentity,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> Module:
    """
    Add a video, PDF or quiz module. Without an explicit
    ``order_sequence`` the module is appended after the last one.
    """
    return await course_service.add_module(course_id, module_data, identity, db)


@router.put(
    "/courses/{course_id}/modules/{module_id}",
    response_model=ModuleResponse,
    summary="Update a module",
)
async def update_module(
    course_id: int,
    module_id: int,
    module_data: ModuleUpdate,
    identity: InstructorIdentity,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> Module:
    return await course_service.update_module(course_id, module_id, module_data, identity, db)


@router.delete(
    "/courses/{course_id}/modules/{module_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Remove a module",
)
async def delete_module(
    course_id: int,
    module_id: int,
    identity: InstructorIdentity,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> None:
    await course_service.delete_module(course_id, module_id, identity, db)


@router.get(
    "/courses/{course_id}/students",
    response_model=List[InstructorEnrollmentRow],
    summary="List students of a course",
)
async def course_students(
    course_id: int,
    identity: InstructorIdentity,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> List[InstructorEnrollmentRow]:
    return await analytics_service.get_course_students(course_id, identity, db)


# ============== Per-instructor listings ==============

@router.get(
    "/{instructor_id}/courses",
    response_model=List[InstructorCourseResponse],
    summary="List an instructor's courses",
)
async def list_instructor_courses(
    instructor_id: uuid.UUID,
    identity: InstructorIdentity,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> List[Course]:
    """
    Get every course of an instructor in any status.

    Raises:
        HTTPException: 403 unless you are that instructor or an admin.
    """
    ensure_self_or_admin(identity, instructor_id)
    return await course_service.list_instructor_courses(instructor_id, db)


@router.get(
    "/{instructor_id}/enrollments",
    response_model=List[InstructorEnrollmentRow],
    summary="List enrollments across an instructor's courses",
)
async def list_instructor_enrollments(
    instructor_id: uuid.UUID,
    identity: InstructorIdentity,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> List[InstructorEnrollmentRow]:
    ensure_self_or_admin(identity, instructor_id)
    return await analytics_service.get_instructor_enrollments(instructor_id, db)
