"""
Certificate Schemas

Pydantic models for issued certificates and public verification.
"""

import uuid
from datetime import datetime

from pydantic import BaseModel


class CertificateResponse(BaseModel):
    """Schema for certificate response."""

    id: uuid.UUID
    verification_id: str
    user_id: uuid.UUID
    course_id: int
    course_title: str
    certificate_url: str
    issued_at: datetime

    model_config = {"from_attributes": True}


class CertificateVerification(BaseModel):
    """Public answer to "is this certificate genuine?"."""

    valid: bool
    certificate_id: str
    student_name: str
    course_id: int
    course_title: str
    issued_at: datetime
