"""
Instructor Profile Model

Companion record created when an instructor registers.
"""

import uuid
from typing import TYPE_CHECKING, Optional

from sqlalchemy import ForeignKey, Integer, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.core.database import Base

if TYPE_CHECKING:
    from app.models.user import User


class InstructorProfile(Base):
    """
    Instructor profile model for users with the instructor role.

    One-to-one relationship with User model.

    Attributes:
        id: Integer primary key.
        user_id: Foreign key to users table.
        name: Display name captured at registration.
        bio: Instructor biography/description.
    """

    __tablename__ = "instructor_profiles"

    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
    )
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="CASCADE"),
        unique=True,
        nullable=False,
    )
    name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )
    bio: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
    )

    # Relationships
    user: Mapped["User"] = relationship(
        "User",
        back_populates="instructor_profile",
    )

    def __repr__(self) -> str:
        return f"<InstructorProfile(id={self.id}, user_id={self.user_id})>"
