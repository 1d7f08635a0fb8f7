"""
Wishlist Model

Courses a user has saved for later.
"""

import uuid
from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, ForeignKey, Integer, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.core.database import Base, utcnow

if TYPE_CHECKING:
    from app.models.course import Course


class WishlistItem(Base):
    """Wishlist entry, unique per (user, course)."""

    __tablename__ = "wishlist_items"

    __table_args__ = (
        UniqueConstraint("user_id", "course_id", name="uq_wishlist_user_course"),
    )

    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
    )
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    )
    course_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("courses.id", ondelete="CASCADE"),
        nullable=False,
    )
    added_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        nullable=False,
    )

    course: Mapped["Course"] = relationship(
        "Course",
        lazy="selectin",
    )

    def __repr__(self) -> str:
        return f"<WishlistItem(user_id={self.user_id}, course_id={self.course_id})>"
