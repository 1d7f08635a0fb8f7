"""
Module Model

Ordered unit of course content: a video, a PDF or a quiz.
"""

from typing import TYPE_CHECKING, Any, Dict, Optional

from sqlalchemy import JSON, Enum, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.core.database import Base
from app.models.enums import ModuleType

if TYPE_CHECKING:
    from app.models.course import Course


class Module(Base):
    """
    Module model representing one step of a course.

    Attributes:
        id: Integer primary key.
        course_id: Foreign key to courses table.
        title: Module title.
        type: video, pdf or quiz.
        content_url: Location of the video/PDF (unused for quizzes).
        order_sequence: Position of the module inside the course.
        duration: Optional duration in minutes.
        quiz_data: JSON with ``{"questions": [{"question", "options", "answer"}]}``.
    """

    __tablename__ = "modules"

    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
    )
    course_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("courses.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    )
    title: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )
    type: Mapped[ModuleType] = mapped_column(
        Enum(ModuleType, name="module_type", create_constraint=True),
        nullable=False,
    )
    content_url: Mapped[Optional[str]] = mapped_column(
        String(1024),
        nullable=True,
    )
    order_sequence: Mapped[int] = mapped_column(
        Integer,
        default=0,
        nullable=False,
    )
    duration: Mapped[Optional[int]] = mapped_column(
        Integer,
        nullable=True,
    )
    quiz_data: Mapped[Optional[Dict[str, Any]]] = mapped_column(
        JSON,
        nullable=True,
    )

    # Relationships
    course: Mapped["Course"] = relationship(
        "Course",
        back_populates="modules",
    )

    @property
    def questions(self) -> list[dict]:
        if not self.quiz_data:
            return []
        return list(self.quiz_data.get("questions", []))

    @property
    def quiz_questions(self) -> list[dict]:
        """Questions as shown to learners (answers removed)."""
        return [
            {"question": q.get("question", ""), "options": list(q.get("options", []))}
            for q in self.questions
        ]

    def __repr__(self) -> str:
        return f"<Module(id={self.id}, type={self.type}, order={self.order_sequence})>"
