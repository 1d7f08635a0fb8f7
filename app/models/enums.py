"""
Database Enums

Python Enums that map to database ENUM types.
"""

import enum


class UserRole(str, enum.Enum):
    """User role enumeration."""
    STUDENT = "student"
    INSTRUCTOR = "instructor"
    ADMIN = "admin"


class UserStatus(str, enum.Enum):
    """Account status enumeration."""
    ACTIVE = "active"
    BLOCKED = "blocked"


class CourseStatus(str, enum.Enum):
    """Course moderation status enumeration."""
    PENDING = "pending"
    APPROVED = "approved"
    ARCHIVED = "archived"


class ModuleType(str, enum.Enum):
    """Module content type enumeration."""
    VIDEO = "video"
    PDF = "pdf"
    QUIZ = "quiz"


class CompletionStatus(str, enum.Enum):
    """Enrollment completion status enumeration."""
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"


class PaymentStatus(str, enum.Enum):
    """Payment status enumeration."""
    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"


# Allowed moderation moves. Re-submitting the current status is handled
# by the caller as a note-only update.
COURSE_STATUS_TRANSITIONS: dict[CourseStatus, frozenset[CourseStatus]] = {
    CourseStatus.PENDING: frozenset({CourseStatus.APPROVED, CourseStatus.ARCHIVED}),
    CourseStatus.APPROVED: frozenset({CourseStatus.ARCHIVED}),
    CourseStatus.ARCHIVED: frozenset({CourseStatus.APPROVED}),
}

# Promotion ladder used by the admin role endpoint.
ROLE_LADDER: tuple[UserRole, ...] = (
    UserRole.STUDENT,
    UserRole.INSTRUCTOR,
    UserRole.ADMIN,
)
