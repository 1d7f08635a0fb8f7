"""
Payment Schemas

Pydantic models for simulated payments.
"""

import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from app.models.enums import PaymentStatus


class PaymentCreate(BaseModel):
    """Schema for paying for a course ahead of enrollment."""

    transaction_id: Optional[str] = Field(None, max_length=100, description="Processor reference")


class PaymentResponse(BaseModel):
    """Schema for payment response."""

    id: int
    user_id: uuid.UUID
    course_id: int
    amount: float
    status: PaymentStatus
    transaction_id: str
    created_at: datetime

    model_config = {"from_attributes": True}
