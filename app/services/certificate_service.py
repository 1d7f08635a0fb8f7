"""
Certificate Service

Issues completion certificates and renders them as PDF documents.
"""

import io
import logging
import uuid

from fastapi import HTTPException, status
from reportlab.lib.pagesizes import landscape, letter
from reportlab.lib.units import inch
from reportlab.pdfgen import canvas
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.security import Identity
from app.models.certificate import Certificate
from app.models.course import Course
from app.schemas.certificate import CertificateVerification


logger = logging.getLogger(__name__)


def certificate_url(course_id: int, user_id: uuid.UUID) -> str:
    """Stable document location for a (course, user) certificate."""
    base = settings.CERTIFICATE_BASE_URL.rstrip("/")
    return f"{base}/cert-{course_id}-{user_id}.pdf"


async def find_certificate(
    user_id: uuid.UUID,
    course_id: int,
    db: AsyncSession,
) -> Certificate | None:
    result = await db.execute(
        select(Certificate).where(
            Certificate.user_id == user_id,
            Certificate.course_id == course_id,
        )
    )
    return result.scalar_one_or_none()


async def issue_certificate(
    user_id: uuid.UUID,
    course: Course,
    db: AsyncSession,
) -> Certificate:
    """
    Issue a certificate to a user for a course.

    Idempotent: an existing certificate for the pair is returned as-is.
    The new row is only flushed so it commits together with the
    enrollment update that triggered it.

    Args:
        user_id: Student user ID.
        course: The completed course.
        db: Database session.

    Returns:
        Certificate object.
    """
    existing = await find_certificate(user_id, course.id, db)
    if existing:
        return existing

    certificate = Certificate(
        id=uuid.uuid4(),
        user_id=user_id,
        course_id=course.id,
        course_title=course.title,
        certificate_url=certificate_url(course.id, user_id),
    )
    db.add(certificate)
    await db.flush()

    logger.info("Certificate %s issued: user=%s course=%s", certificate.id, user_id, course.id)
    return certificate


async def list_certificates(
    identity: Identity,
    db: AsyncSession,
) -> list[Certificate]:
    result = await db.execute(
        select(Certificate)
        .where(Certificate.user_id == identity.id)
        .order_by(Certificate.issued_at.desc())
    )
    return list(result.scalars().all())


async def get_certificate(
    certificate_id: uuid.UUID,
    db: AsyncSession,
) -> Certificate:
    """
    Get certificate by ID.

    Raises:
        HTTPException: 404 if not found.
    """
    result = await db.execute(
        select(Certificate).where(Certificate.id == certificate_id)
    )
    certificate = result.scalar_one_or_none()

    if not certificate:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Certificate not found",
        )

    return certificate


async def get_own_certificate(
    certificate_id: uuid.UUID,
    identity: Identity,
    db: AsyncSession,
) -> Certificate:
    """Certificate lookup restricted to its holder (admins may read any)."""
    certificate = await get_certificate(certificate_id, db)
    if certificate.user_id != identity.id and not identity.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Not your certificate",
        )
    return certificate


async def verify_certificate(
    certificate_id: uuid.UUID,
    db: AsyncSession,
) -> CertificateVerification:
    """Public verification of a certificate by its ID."""
    certificate = await get_certificate(certificate_id, db)
    return CertificateVerification(
        valid=True,
        certificate_id=certificate.verification_id,
        student_name=certificate.user.name,
        course_id=certificate.course_id,
        course_title=certificate.course_title,
        issued_at=certificate.issued_at,
    )


def render_certificate_pdf(certificate: Certificate, user_name: str) -> bytes:
    """
    Render a certificate as a landscape PDF using ReportLab.

    Args:
        certificate: Certificate model instance.
        user_name: Name of the student.

    Returns:
        The PDF document bytes.
    """
    buffer = io.BytesIO()
    c = canvas.Canvas(buffer, pagesize=landscape(letter))
    width, height = landscape(letter)

    c.setTitle(f"Certificate - {certificate.course_title}")

    # Border
    c.setStrokeColorRGB(0.2, 0.2, 0.8)
    c.setLineWidth(5)
    c.rect(0.5 * inch, 0.5 * inch, width - 1 * inch, height - 1 * inch)

    c.setFont("Helvetica-Bold", 40)
    c.drawCentredString(width / 2, height - 2.5 * inch, "Certificate of Completion")

    c.setFont("Helvetica", 20)
    c.drawCentredString(width / 2, height - 3.2 * inch, "This is to certify that")

    c.setFont("Helvetica-Bold", 30)
    c.drawCentredString(width / 2, height - 4 * inch, user_name)

    c.setFont("Helvetica", 20)
    c.drawCentredString(width / 2, height - 4.8 * inch, "has successfully completed the course")

    c.setFont("Helvetica-Bold", 25)
    c.drawCentredString(width / 2, height - 5.5 * inch, certificate.course_title)

    # Footer: issue date and verification id
    c.setFont("Helvetica", 12)
    date_str = certificate.issued_at.strftime("%B %d, %Y")
    c.drawString(1 * inch, 1 * inch, f"Date: {date_str}")
    c.drawRightString(width - 1 * inch, 1 * inch, f"Verification ID: {certificate.verification_id}")

    c.showPage()
    c.save()

    return buffer.getvalue()
