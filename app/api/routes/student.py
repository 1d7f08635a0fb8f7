"""
Student Routes

Endpoints for taking courses: enrollments, content access, module
completion, quizzes, payments and certificates.
"""

import uuid
from typing import Annotated, List, Optional

from fastapi import APIRouter, Body, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_current_identity, require_roles
from app.core.database import get_db
from app.core.security import Identity
from app.models.certificate import Certificate
from app.models.enrollment import Enrollment
from app.models.enums import UserRole
from app.models.payment import Payment
from app.schemas.certificate import CertificateResponse
from app.schemas.enrollment import (
    AccessResponse,
    CourseLearningResponse,
    EnrollmentResponse,
    QuizResult,
    QuizSubmission,
)
from app.schemas.payment import PaymentCreate, PaymentResponse
from app.services import certificate_service, enrollment_service, payment_service


router = APIRouter(prefix="/student", tags=["Student"])


# ============== Enrollments ==============

@router.get(
    "/my-courses",
    response_model=List[EnrollmentResponse],
    summary="List my enrollments",
)
async def my_courses(
    identity: Annotated[Identity, Depends(require_roles(UserRole.STUDENT))],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> List[Enrollment]:
    """
    Get all enrollments of the current student with course details,
    progress and completed modules.
    """
    return await enrollment_service.get_my_enrollments(identity, db)


@router.get(
    "/enrollments/{course_id}",
    response_model=EnrollmentResponse,
    summary="Get my enrollment in a course",
)
async def get_enrollment(
    course_id: int,
    identity: Annotated[Identity, Depends(get_current_identity)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> Enrollment:
    return await enrollment_service.get_enrollment_for_course(course_id, identity, db)


@router.get(
    "/courses/{course_id}/access",
    response_model=AccessResponse,
    summary="Check access to a course",
)
async def check_access(
    course_id: int,
    identity: Annotated[Identity, Depends(get_current_identity)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> AccessResponse:
    """Free courses are always accessible; priced ones need a completed payment."""
    return await enrollment_service.check_access(course_id, identity, db)


@router.get(
    "/courses/{course_id}/learn",
    response_model=CourseLearningResponse,
    summary="Get course content for learning",
)
async def learn(
    course_id: int,
    identity: Annotated[Identity, Depends(get_current_identity)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> CourseLearningResponse:
    """
    Get the ordered module content of an enrolled course together with
    the enrollment and the index of the next module to study.

    Raises:
        HTTPException: 403 if not enrolled or not paid.
    """
    return await enrollment_service.get_learning_view(course_id, identity, db)


# ============== Progress ==============

@router.post(
    "/enrollments/{enrollment_id}/modules/{module_id}/complete",
    response_model=EnrollmentResponse,
    summary="Mark a module as completed",
)
async def complete_module(
    enrollment_id: int,
    module_id: int,
    identity: Annotated[Identity, Depends(get_current_identity)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> Enrollment:
    """
    Record a finished module and recompute progress.

    Completing the last module marks the enrollment completed and issues
    the certificate. Repeating a completion changes nothing.

    Raises:
        HTTPException: 404 if the enrollment or module is not found.
        HTTPException: 403 if the enrollment is not yours or unpaid.
    """
    return await enrollment_service.complete_module(enrollment_id, module_id, identity, db)


@router.post(
    "/enrollments/{enrollment_id}/modules/{module_id}/quiz",
    response_model=QuizResult,
    summary="Submit answers for a quiz module",
)
async def submit_quiz(
    enrollment_id: int,
    module_id: int,
    submission: QuizSubmission,
    identity: Annotated[Identity, Depends(get_current_identity)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> QuizResult:
    """
    Grade a quiz server-side.

    **Rules:**
    - Score is the rounded percentage of correct answers
    - A score at or above the passing score completes the module
    - A failed attempt changes nothing and can be retried
    """
    return await enrollment_service.submit_quiz(
        enrollment_id,
        module_id,
        submission,
        identity,
        db,
    )


# ============== Payments ==============

@router.post(
    "/payments/{course_id}",
    response_model=PaymentResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Pay for a course",
)
async def pay_for_course(
    course_id: int,
    identity: Annotated[Identity, Depends(get_current_identity)],
    db: Annotated[AsyncSession, Depends(get_db)],
    body: Annotated[Optional[PaymentCreate], Body()] = None,
) -> Payment:
    """
    Record a simulated payment for a priced course.

    Raises:
        HTTPException: 400 for a free course.
        HTTPException: 409 if already paid.
    """
    return await payment_service.pay_for_course(
        course_id,
        identity,
        db,
        transaction_id=body.transaction_id if body else None,
    )


@router.get(
    "/payments/{course_id}",
    response_model=PaymentResponse,
    summary="Get my payment for a course",
)
async def get_payment(
    course_id: int,
    identity: Annotated[Identity, Depends(get_current_identity)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> Payment:
    return await payment_service.get_payment_for_course(course_id, identity, db)


# ============== Certificates ==============

@router.get(
    "/certificates",
    response_model=List[CertificateResponse],
    summary="List my certificates",
)
async def list_certificates(
    identity: Annotated[Identity, Depends(get_current_identity)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> List[Certificate]:
    return await certificate_service.list_certificates(identity, db)


@router.get(
    "/certificates/{certificate_id}/download",
    summary="Download a certificate as PDF",
    response_class=Response,
)
async def download_certificate(
    certificate_id: uuid.UUID,
    identity: Annotated[Identity, Depends(get_current_identity)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> Response:
    """
    Render one of your certificates as a PDF document.

    Raises:
        HTTPException: 404 if not found, 403 if it belongs to someone else.
    """
    certificate = await certificate_service.get_own_certificate(certificate_id, identity, db)
    pdf = certificate_service.render_certificate_pdf(certificate, certificate.user.name)

    filename = f"cert-{certificate.course_id}-{certificate.user_id}.pdf"
    return Response(
        content=pdf,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
