"""
Analytics Schemas

Pydantic models for admin dashboards and instructor reporting.
"""

import uuid
from datetime import datetime
from typing import List

from pydantic import BaseModel, Field

from app.models.enums import CompletionStatus


class CategoryCount(BaseModel):
    """Number of courses in one category."""

    category: str
    count: int


class ActivityItem(BaseModel):
    """One entry of the recent-activity feed."""

    type: str = Field(..., description="enrollment or payment")
    message: str
    date: datetime


class PlatformStats(BaseModel):
    """Schema for the admin platform statistics."""

    total_users: int
    total_courses: int
    total_enrollments: int
    pending_courses: int
    active_users: int
    total_revenue: float
    top_categories: List[CategoryCount]
    completion_rate: int = Field(..., description="Percentage of enrollments completed")
    student_count: int
    instructor_count: int
    admin_count: int
    student_percentage: int
    instructor_percentage: int
    admin_percentage: int
    recent_activity: List[ActivityItem]


class InstructorEnrollmentRow(BaseModel):
    """Schema for a single row in the instructor enrollment table."""

    enrollment_id: int
    course_id: int
    course_title: str
    student_id: uuid.UUID
    student_name: str
    student_email: str
    progress: int
    completion_status: CompletionStatus
    enrollment_date: datetime
