"""
Enrollment Service

Business logic for enrolling in courses, payment gating, module
completion, quiz grading and certificate hand-off.
"""

import logging
import math
import uuid
from typing import Iterable, Mapping, Optional, Sequence, Tuple

from fastapi import HTTPException, status
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.security import Identity
from app.models.course import Course
from app.models.enrollment import Enrollment
from app.models.enums import CompletionStatus, ModuleType
from app.models.module import Module
from app.models.module_progress import ModuleProgress
from app.schemas.course import CourseSummary, ModuleContent
from app.schemas.enrollment import (
    AccessResponse,
    CourseLearningResponse,
    EnrollmentResponse,
    QuizResult,
    QuizSubmission,
)
from app.services import certificate_service, course_service, payment_service


logger = logging.getLogger(__name__)


# ============== Pure Rules ==============

def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero for positives."""
    return int(math.floor(value + 0.5))


def percent(part: int, whole: int) -> int:
    """Integer percentage of ``part`` over ``whole``; 0 when whole is 0."""
    if whole <= 0:
        return 0
    return round_half_up(100 * part / whole)


def calculate_progress(completed_ids: Iterable[int], module_ids: Iterable[int]) -> int:
    """
    Progress percentage of a course.

    Only completions of modules that still belong to the course count.
    A course without modules has progress 0.
    """
    modules = set(module_ids)
    done = set(completed_ids) & modules
    return percent(len(done), len(modules))


def score_quiz(
    questions: Sequence[Mapping],
    answers: Mapping[str, str],
) -> Tuple[int, int, int]:
    """
    Grade quiz answers.

    Answers are keyed by question index (as a string). Comparison ignores
    case and surrounding whitespace.

    Returns:
        Tuple of (correct_count, total_questions, score_percentage).
    """
    total = len(questions)
    correct = 0

    for i, question in enumerate(questions):
        given = answers.get(str(i))
        if given is None:
            continue
        expected = str(question.get("answer", ""))
        if str(given).strip().lower() == expected.strip().lower():
            correct += 1

    return correct, total, percent(correct, total)


def quiz_passed(score: int) -> bool:
    return score >= settings.QUIZ_PASSING_SCORE


def next_module_index(modules: Sequence[Module], completed_ids: Iterable[int]) -> int:
    """Index of the first module not yet completed, 0 when all are done."""
    done = set(completed_ids)
    for index, module in enumerate(modules):
        if module.id not in done:
            return index
    return 0


# ============== Lookups ==============

async def find_enrollment(
    user_id: uuid.UUID,
    course_id: int,
    db: AsyncSession,
) -> Optional[Enrollment]:
    result = await db.execute(
        select(Enrollment).where(
            Enrollment.user_id == user_id,
            Enrollment.course_id == course_id,
        )
    )
    return result.scalar_one_or_none()


async def get_enrollment(
    enrollment_id: int,
    db: AsyncSession,
) -> Enrollment:
    """
    Get an enrollment by ID.

    Raises:
        HTTPException: 404 if not found.
    """
    result = await db.execute(
        select(Enrollment).where(Enrollment.id == enrollment_id)
    )
    enrollment = result.scalar_one_or_none()

    if not enrollment:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Enrollment with ID {enrollment_id} not found",
        )

    return enrollment


async def has_access(
    user_id: uuid.UUID,
    course: Course,
    db: AsyncSession,
) -> bool:
    """A user may consume a course if it is free or they hold a completed payment."""
    if course.is_free:
        return True
    payment = await payment_service.find_completed_payment(user_id, course.id, db)
    return payment is not None


# ============== Enrollment ==============

async def enroll(
    course_id: int,
    identity: Identity,
    db: AsyncSession,
    transaction_id: Optional[str] = None,
) -> Enrollment:
    """
    Enroll the caller in an approved course.

    **Flow:**
    1. Resolve the course (must be approved)
    2. Reject a second enrollment for the same pair
    3. For a priced course, reuse a completed payment or record a new one
    4. Create the enrollment; payment and enrollment commit together

    Raises:
        HTTPException: 404 if the course is not in the catalog,
            409 if already enrolled.
    """
    course = await course_service.get_approved_course(course_id, db)

    if await find_enrollment(identity.id, course.id, db):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Already enrolled in this course",
        )

    if not course.is_free:
        payment = await payment_service.find_completed_payment(identity.id, course.id, db)
        if payment is None:
            await payment_service.record_payment(
                identity.id,
                course,
                db,
                transaction_id=transaction_id,
            )

    enrollment = Enrollment(
        user_id=identity.id,
        course=course,
        progress=0,
        completion_status=CompletionStatus.IN_PROGRESS,
        module_progress=[],
    )
    db.add(enrollment)

    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Already enrolled in this course",
        )

    logger.info("User %s enrolled in course %s", identity.id, course.id)
    return enrollment


async def get_my_enrollments(
    identity: Identity,
    db: AsyncSession,
) -> list[Enrollment]:
    """All enrollments of the caller with their course populated, newest first."""
    result = await db.execute(
        select(Enrollment)
        .where(Enrollment.user_id == identity.id)
        .order_by(Enrollment.enrollment_date.desc(), Enrollment.id.desc())
    )
    return list(result.scalars().all())


async def get_enrollment_for_course(
    course_id: int,
    identity: Identity,
    db: AsyncSession,
) -> Enrollment:
    enrollment = await find_enrollment(identity.id, course_id, db)
    if not enrollment:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Not enrolled in this course",
        )
    return enrollment


async def check_access(
    course_id: int,
    identity: Identity,
    db: AsyncSession,
) -> AccessResponse:
    course = await course_service.get_course(course_id, db)
    enrollment = await find_enrollment(identity.id, course.id, db)
    return AccessResponse(
        course_id=course.id,
        has_access=await has_access(identity.id, course, db),
        is_enrolled=enrollment is not None,
    )


# ============== Progress ==============

async def _resolve_module(
    enrollment_id: int,
    module_id: int,
    identity: Identity,
    db: AsyncSession,
) -> Tuple[Enrollment, Module]:
    """
    Load an enrollment and one of its course's modules for the caller.

    Raises:
        HTTPException: 404 if either is missing, 403 if the enrollment
            is someone else's or the course has not been paid for.
    """
    enrollment = await get_enrollment(enrollment_id, db)

    if enrollment.user_id != identity.id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Not your enrollment",
        )

    course = enrollment.course
    module = next((m for m in course.modules if m.id == module_id), None)
    if module is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Module with ID {module_id} not found in course {course.id}",
        )

    if not await has_access(identity.id, course, db):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Payment required to access this course",
        )

    return enrollment, module


async def _apply_completion(
    enrollment: Enrollment,
    module: Module,
    db: AsyncSession,
    quiz_score: Optional[int] = None,
) -> Enrollment:
    """
    Mark a module done and recompute progress.

    Completing a module twice is a no-op apart from keeping the best quiz
    score. Progress never decreases and ``completed`` is terminal; the
    transition into it issues the certificate in the same commit.
    """
    record = next(
        (p for p in enrollment.module_progress if p.module_id == module.id),
        None,
    )
    if record is None:
        enrollment.module_progress.append(
            ModuleProgress(module_id=module.id, quiz_score=quiz_score)
        )
    elif quiz_score is not None and (record.quiz_score or 0) < quiz_score:
        record.quiz_score = quiz_score

    course = enrollment.course
    progress = calculate_progress(
        enrollment.completed_module_ids,
        (m.id for m in course.modules),
    )
    enrollment.progress = max(enrollment.progress, progress)

    if enrollment.progress == 100 and not enrollment.is_completed:
        enrollment.completion_status = CompletionStatus.COMPLETED
        await certificate_service.issue_certificate(enrollment.user_id, course, db)
        logger.info("Enrollment %s completed", enrollment.id)

    await db.commit()
    return enrollment


async def complete_module(
    enrollment_id: int,
    module_id: int,
    identity: Identity,
    db: AsyncSession,
) -> Enrollment:
    """
    Record that the caller finished a module.

    Args:
        enrollment_id: The caller's enrollment.
        module_id: A module of the enrolled course.
        identity: Authenticated caller.
        db: Database session.

    Returns:
        Updated Enrollment.
    """
    enrollment, module = await _resolve_module(enrollment_id, module_id, identity, db)
    enrollment = await _apply_completion(enrollment, module, db)
    logger.info(
        "Module %s completed on enrollment %s (progress %s%%)",
        module.id,
        enrollment.id,
        enrollment.progress,
    )
    return enrollment


async def submit_quiz(
    enrollment_id: int,
    module_id: int,
    submission: QuizSubmission,
    identity: Identity,
    db: AsyncSession,
) -> QuizResult:
    """
    Grade a quiz module and complete it on a pass.

    A failed attempt leaves the enrollment untouched and may be retried.

    Raises:
        HTTPException: 400 if the module is not a quiz.
    """
    enrollment, module = await _resolve_module(enrollment_id, module_id, identity, db)

    if module.type != ModuleType.QUIZ or not module.questions:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="This module has no quiz",
        )

    correct, total, score = score_quiz(module.questions, submission.answers)
    passed = quiz_passed(score)

    if passed:
        enrollment = await _apply_completion(enrollment, module, db, quiz_score=score)
        message = f"Quiz passed with {score}%"
    else:
        message = f"Score {score}% is below the passing score of {settings.QUIZ_PASSING_SCORE}%. Try again."

    logger.info(
        "Quiz on module %s graded for enrollment %s: %s/%s (%s%%)",
        module.id,
        enrollment.id,
        correct,
        total,
        score,
    )

    return QuizResult(
        module_id=module.id,
        score=score,
        passed=passed,
        correct_count=correct,
        total_questions=total,
        passing_score=settings.QUIZ_PASSING_SCORE,
        retry_allowed=not passed,
        message=message,
        enrollment=EnrollmentResponse.model_validate(enrollment),
    )


async def get_learning_view(
    course_id: int,
    identity: Identity,
    db: AsyncSession,
) -> CourseLearningResponse:
    """
    Everything needed to take a course: ordered module content, the
    enrollment, and the index of the next module to study.

    Raises:
        HTTPException: 404 if the course is missing, 403 without an
            enrollment or without access.
    """
    course = await course_service.get_course(course_id, db)

    enrollment = await find_enrollment(identity.id, course.id, db)
    if enrollment is None:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Enroll in this course to access its content",
        )

    if not await has_access(identity.id, course, db):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Payment required to access this course",
        )

    modules = course.ordered_modules
    return CourseLearningResponse(
        course=CourseSummary.model_validate(course),
        modules=[ModuleContent.model_validate(m) for m in modules],
        enrollment=EnrollmentResponse.model_validate(enrollment),
        has_access=True,
        next_module_index=next_module_index(modules, enrollment.completed_module_ids),
    )
