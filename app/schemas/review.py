"""
Review Schemas

Pydantic models for course reviews.
"""

import uuid
from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, Field


class ReviewCreate(BaseModel):
    """Schema for submitting a review."""

    rating: int = Field(..., ge=1, le=5, description="1 to 5 stars")
    comment: str = Field(..., min_length=1, description="Review text")


class ReviewResponse(BaseModel):
    """Schema for review response."""

    id: int
    user_id: uuid.UUID
    user_name: Optional[str] = None
    course_id: int
    rating: int
    comment: str
    helpful_count: int
    reported: bool
    created_at: datetime

    model_config = {"from_attributes": True}


class CourseReviewsResponse(BaseModel):
    """Reviews of a course with the rating summary."""

    course_id: int
    average_rating: float
    total_reviews: int
    distribution: Dict[int, int]
    reviews: List[ReviewResponse]
