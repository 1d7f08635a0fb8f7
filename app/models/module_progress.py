"""
Module Progress Model

Completed-module set of an enrollment, one row per module.
"""

from datetime import datetime
from typing import TYPE_CHECKING, Optional

from sqlalchemy import DateTime, ForeignKey, Integer, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.core.database import Base, utcnow

if TYPE_CHECKING:
    from app.models.enrollment import Enrollment


class ModuleProgress(Base):
    """
    Module progress model.

    Links a completed module to a specific enrollment (user taking a course).

    Attributes:
        id: Integer primary key.
        enrollment_id: Foreign key to enrollments table.
        module_id: Foreign key to modules table.
        quiz_score: Passing score for quiz modules (nullable).
        completed_at: When the module was first completed.
    """

    __tablename__ = "module_progress"

    __table_args__ = (
        UniqueConstraint("enrollment_id", "module_id", name="uq_progress_enrollment_module"),
    )

    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
    )
    enrollment_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("enrollments.id", ondelete="CASCADE"),
        nullable=False,
    )
    module_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("modules.id", ondelete="CASCADE"),
        nullable=False,
    )
    quiz_score: Mapped[Optional[int]] = mapped_column(
        Integer,
        nullable=True,
    )
    completed_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        nullable=False,
    )

    # Relationships
    enrollment: Mapped["Enrollment"] = relationship(
        "Enrollment",
        back_populates="module_progress",
    )

    def __repr__(self) -> str:
        return f"<ModuleProgress(enrollment_id={self.enrollment_id}, module_id={self.module_id})>"
