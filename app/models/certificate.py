"""
Certificate Model

Course completion certificates with UUID for verification.
"""

import uuid
from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, ForeignKey, Integer, String, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.core.database import Base, utcnow

if TYPE_CHECKING:
    from app.models.user import User


class Certificate(Base):
    """
    Certificate model for course completion.

    UUID primary key is used for public verification links. A user holds
    at most one certificate per course.

    Attributes:
        id: UUID primary key (verification id).
        user_id: Foreign key to users table.
        course_id: Foreign key to courses table.
        course_title: Course title at the time of issuance.
        certificate_url: Stable URL of the certificate document.
        issued_at: Timestamp when certificate was issued.
    """

    __tablename__ = "certificates"

    __table_args__ = (
        UniqueConstraint("user_id", "course_id", name="uq_certificate_user_course"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
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
    course_title: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )
    certificate_url: Mapped[str] = mapped_column(
        String(500),
        nullable=False,
    )
    issued_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        nullable=False,
    )

    # Relationships
    user: Mapped["User"] = relationship(
        "User",
        lazy="selectin",
    )

    @property
    def verification_id(self) -> str:
        return str(self.id)

    def __repr__(self) -> str:
        return f"<Certificate(id={self.id}, user_id={self.user_id})>"
