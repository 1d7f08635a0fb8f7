"""
Certificate Routes

Public verification of issued certificates.
"""

import uuid
from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.schemas.certificate import CertificateVerification
from app.services import certificate_service


router = APIRouter(prefix="/certificates", tags=["Certificates"])


@router.get(
    "/{certificate_id}/verify",
    response_model=CertificateVerification,
    summary="Verify a certificate",
)
async def verify_certificate(
    certificate_id: uuid.UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> CertificateVerification:
    """
    Confirm that a certificate was issued by this platform.

    No authentication is required; the certificate ID is the
    verification code printed on the PDF.

    Raises:
        HTTPException: 404 if the certificate does not exist.
    """
    return await certificate_service.verify_certificate(certificate_id, db)
