"""
Course Schemas

Pydantic models for course and module request/response validation.
"""

import uuid
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, model_validator

from app.models.enums import CourseStatus, ModuleType


# ============== Quiz Schemas ==============

class QuizQuestion(BaseModel):
    """A single multiple-choice question with its correct answer."""

    question: str = Field(..., min_length=1)
    options: List[str] = Field(..., min_length=2)
    answer: str = Field(..., min_length=1)

    @model_validator(mode="after")
    def answer_is_an_option(self) -> "QuizQuestion":
        if self.answer not in self.options:
            raise ValueError("answer must be one of the options")
        return self


class QuizData(BaseModel):
    questions: List[QuizQuestion] = Field(..., min_length=1)


class QuizQuestionPublic(BaseModel):
    """Question as shown to learners (no answer)."""

    question: str
    options: List[str]


# ============== Module Schemas ==============

class ModuleCreate(BaseModel):
    """Schema for adding a module to a course."""

    title: str = Field(..., min_length=1, max_length=255)
    type: ModuleType
    content_url: Optional[str] = Field(None, max_length=1024)
    order_sequence: Optional[int] = Field(None, ge=0, description="Defaults to the end of the course")
    duration: Optional[int] = Field(None, ge=0, description="Duration in minutes")
    quiz_data: Optional[QuizData] = None

    @model_validator(mode="after")
    def check_content(self) -> "ModuleCreate":
        if self.type == ModuleType.QUIZ:
            if self.quiz_data is None:
                raise ValueError("quiz modules require quiz_data")
        elif not self.content_url:
            raise ValueError(f"{self.type.value} modules require content_url")
        return self


class ModuleUpdate(BaseModel):
    """Partial module update; only provided fields change."""

    title: Optional[str] = Field(None, min_length=1, max_length=255)
    content_url: Optional[str] = Field(None, max_length=1024)
    order_sequence: Optional[int] = Field(None, ge=0)
    duration: Optional[int] = Field(None, ge=0)
    quiz_data: Optional[QuizData] = None


class ModuleSummary(BaseModel):
    """Public module listing (content is gated)."""

    id: int
    title: str
    type: ModuleType
    order_sequence: int
    duration: Optional[int] = None

    model_config = {"from_attributes": True}


class ModuleContent(ModuleSummary):
    """Module as delivered to a learner with access."""

    content_url: Optional[str] = None
    quiz_questions: List[QuizQuestionPublic] = []


class ModuleResponse(ModuleSummary):
    """Module as seen by its instructor."""

    course_id: int
    content_url: Optional[str] = None
    quiz_data: Optional[dict] = None


# ============== Course Schemas ==============

class CourseCreate(BaseModel):
    """Schema for creating a new course."""

    title: str = Field(..., min_length=1, max_length=255)
    description: str = Field(..., min_length=1)
    category: str = Field(..., min_length=1, max_length=100)
    price: float = Field(default=0.0, ge=0, description="0 means free")


class CourseUpdate(BaseModel):
    """Partial course update; only provided fields change."""

    title: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = Field(None, min_length=1)
    category: Optional[str] = Field(None, min_length=1, max_length=100)
    price: Optional[float] = Field(None, ge=0)


class CourseSummary(BaseModel):
    """Course fields shared by every listing."""

    id: int
    title: str
    description: str
    category: str
    price: float
    status: CourseStatus
    instructor_id: uuid.UUID
    instructor_name: Optional[str] = None
    created_at: datetime

    model_config = {"from_attributes": True}


class CourseResponse(CourseSummary):
    """Public course detail with module outline."""

    modules: List[ModuleSummary] = []


class InstructorCourseResponse(CourseSummary):
    """Course detail for its owner, including module content."""

    review_note: Optional[str] = None
    updated_at: datetime
    modules: List[ModuleResponse] = []


class CourseStatusUpdate(BaseModel):
    """Admin moderation request."""

    status: CourseStatus
    note: Optional[str] = Field(None, description="Review note shown to the instructor")


class AdminCourseRow(CourseSummary):
    """Course row in the admin course table."""

    review_note: Optional[str] = None
    updated_at: datetime
    module_count: int = 0
    enrollment_count: int = 0
