"""
Course Model

Course container owned by an instructor and moderated by admins.
"""

import uuid
from datetime import datetime
from typing import TYPE_CHECKING, Optional

from sqlalchemy import DateTime, Enum, Float, ForeignKey, Integer, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.core.database import Base, utcnow
from app.models.enums import CourseStatus

if TYPE_CHECKING:
    from app.models.module import Module
    from app.models.user import User


class Course(Base):
    """
    Course model.

    Only ``approved`` courses are visible in the public catalog.

    Attributes:
        id: Integer primary key.
        instructor_id: Foreign key to the owning instructor.
        title: Course title.
        description: Course description.
        category: Free-form category used for browsing and stats.
        price: Price in the platform currency (0 means free).
        status: Moderation status (pending, approved, archived).
        review_note: Last note left by the moderating admin.
    """

    __tablename__ = "courses"

    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
    )
    instructor_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    )
    title: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )
    description: Mapped[str] = mapped_column(
        Text,
        nullable=False,
    )
    category: Mapped[str] = mapped_column(
        String(100),
        index=True,
        nullable=False,
    )
    price: Mapped[float] = mapped_column(
        Float,
        default=0.0,
        nullable=False,
    )
    status: Mapped[CourseStatus] = mapped_column(
        Enum(CourseStatus, name="course_status", create_constraint=True),
        default=CourseStatus.PENDING,
        index=True,
        nullable=False,
    )
    review_note: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        onupdate=utcnow,
        nullable=False,
    )

    # Relationships
    instructor: Mapped["User"] = relationship(
        "User",
        foreign_keys=[instructor_id],
        lazy="selectin",
    )
    modules: Mapped[list["Module"]] = relationship(
        "Module",
        back_populates="course",
        lazy="selectin",
        order_by="Module.order_sequence",
        cascade="all, delete-orphan",
    )

    @property
    def is_free(self) -> bool:
        return self.price <= 0

    @property
    def ordered_modules(self) -> list["Module"]:
        """Modules in traversal order (ascending order_sequence, then id)."""
        return sorted(self.modules, key=lambda m: (m.order_sequence, m.id or 0))

    @property
    def instructor_name(self) -> Optional[str]:
        return self.instructor.name if self.instructor else None

    def __repr__(self) -> str:
        return f"<Course(id={self.id}, title={self.title[:30]}, status={self.status})>"
