"""
Review Model

Course ratings left by enrolled learners.
"""

import uuid
from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, Text, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.core.database import Base, utcnow

if TYPE_CHECKING:
    from app.models.user import User


class Review(Base):
    """
    Review model, one per user per course.

    Attributes:
        id: Integer primary key.
        user_id: Reviewer.
        course_id: Reviewed course.
        rating: 1 to 5 stars.
        comment: Review text.
        helpful_count: Number of "helpful" votes.
        reported: Whether the review was flagged for moderation.
    """

    __tablename__ = "reviews"

    __table_args__ = (
        UniqueConstraint("user_id", "course_id", name="uq_review_user_course"),
    )

    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
    )
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    course_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("courses.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    )
    rating: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
    )
    comment: Mapped[str] = mapped_column(
        Text,
        nullable=False,
    )
    helpful_count: Mapped[int] = mapped_column(
        Integer,
        default=0,
        nullable=False,
    )
    reported: Mapped[bool] = mapped_column(
        Boolean,
        default=False,
        nullable=False,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        nullable=False,
    )

    user: Mapped["User"] = relationship(
        "User",
        lazy="selectin",
    )

    @property
    def user_name(self) -> str | None:
        return self.user.name if self.user else None

    def __repr__(self) -> str:
        return f"<Review(id={self.id}, course_id={self.course_id}, rating={self.rating})>"
