"""
Enrollment Schemas

Pydantic models for enrollment, module progress and quiz submissions.
"""

import uuid
from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from app.models.enums import CompletionStatus
from app.schemas.course import CourseSummary, ModuleContent


class EnrollRequest(BaseModel):
    """Optional body for enrolling; priced courses may pass a processor reference."""

    transaction_id: Optional[str] = Field(None, max_length=100)


class EnrollmentResponse(BaseModel):
    """Schema for enrollment response."""

    id: int
    user_id: uuid.UUID
    course_id: int
    progress: int
    completion_status: CompletionStatus
    completed_module_ids: List[int] = []
    enrollment_date: datetime
    course: Optional[CourseSummary] = None

    model_config = {"from_attributes": True}


class QuizSubmission(BaseModel):
    """Schema for quiz answer submission."""

    answers: Dict[str, str] = Field(
        ...,
        description="Question index to selected answer mapping (e.g., {'0': 'Option A'})",
    )


class QuizResult(BaseModel):
    """Schema for quiz submission result."""

    module_id: int
    score: int  # Percentage
    passed: bool
    correct_count: int
    total_questions: int
    passing_score: int
    retry_allowed: bool
    message: str
    enrollment: EnrollmentResponse


class AccessResponse(BaseModel):
    """Content-gating answer for one course."""

    course_id: int
    has_access: bool
    is_enrolled: bool


class CourseLearningResponse(BaseModel):
    """Everything the learning view needs in one call."""

    course: CourseSummary
    modules: List[ModuleContent]
    enrollment: EnrollmentResponse
    has_access: bool
    next_module_index: int
