"""
Enrollment Model

User-course enrollment with progress and completion tracking.
"""

import uuid
from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, Enum, ForeignKey, Integer, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.core.database import Base, utcnow
from app.models.enums import CompletionStatus

if TYPE_CHECKING:
    from app.models.course import Course
    from app.models.module_progress import ModuleProgress
    from app.models.user import User


class Enrollment(Base):
    """
    Enrollment model representing a user taking a course.

    Unique constraint ensures a user can only enroll once per course.

    Attributes:
        id: Integer primary key.
        user_id: Foreign key to users table.
        course_id: Foreign key to courses table.
        progress: Integer percentage (0-100) of completed modules.
        completion_status: in-progress or completed (terminal).
        enrollment_date: When the enrollment was created.
        module_progress: One row per completed module.
    """

    __tablename__ = "enrollments"

    __table_args__ = (
        UniqueConstraint("user_id", "course_id", name="uq_enrollment_user_course"),
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
        index=True,
        nullable=False,
    )
    progress: Mapped[int] = mapped_column(
        Integer,
        default=0,
        nullable=False,
    )
    completion_status: Mapped[CompletionStatus] = mapped_column(
        Enum(CompletionStatus, name="completion_status", create_constraint=True),
        default=CompletionStatus.IN_PROGRESS,
        nullable=False,
    )
    enrollment_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        nullable=False,
    )
    last_active_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        onupdate=utcnow,
        nullable=False,
    )

    # Relationships
    user: Mapped["User"] = relationship(
        "User",
        lazy="selectin",
    )
    course: Mapped["Course"] = relationship(
        "Course",
        lazy="selectin",
    )
    module_progress: Mapped[list["ModuleProgress"]] = relationship(
        "ModuleProgress",
        back_populates="enrollment",
        lazy="selectin",
        cascade="all, delete-orphan",
    )

    @property
    def completed_module_ids(self) -> list[int]:
        return sorted({p.module_id for p in self.module_progress})

    @property
    def is_completed(self) -> bool:
        return self.completion_status == CompletionStatus.COMPLETED

    def __repr__(self) -> str:
        return f"<Enrollment(id={self.id}, user_id={self.user_id}, course_id={self.course_id})>"
