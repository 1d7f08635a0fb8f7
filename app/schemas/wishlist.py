"""
Wishlist Schemas
"""

import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from app.schemas.course import CourseSummary


class WishlistCreate(BaseModel):
    user_id: uuid.UUID
    course_id: int


class WishlistItemResponse(BaseModel):
    id: int
    user_id: uuid.UUID
    course_id: int
    added_date: datetime
    course: Optional[CourseSummary] = None

    model_config = {"from_attributes": True}
