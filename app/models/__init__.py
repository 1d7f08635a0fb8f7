"""
Course Marketplace Backend - Models Module

This module exports all SQLAlchemy models for the application.
Import Base for Alembic migrations.
"""

from app.core.database import Base

# Enums
from app.models.enums import (
    UserRole,
    UserStatus,
    CourseStatus,
    ModuleType,
    CompletionStatus,
    PaymentStatus,
)

# Models
from app.models.user import User
from app.models.student_profile import StudentProfile
from app.models.instructor_profile import InstructorProfile
from app.models.course import Course
from app.models.module import Module
from app.models.enrollment import Enrollment
from app.models.module_progress import ModuleProgress
from app.models.payment import Payment
from app.models.certificate import Certificate
from app.models.review import Review
from app.models.wishlist import WishlistItem

__all__ = [
    # Base
    "Base",
    # Enums
    "UserRole",
    "UserStatus",
    "CourseStatus",
    "ModuleType",
    "CompletionStatus",
    "PaymentStatus",
    # Models
    "User",
    "StudentProfile",
    "InstructorProfile",
    "Course",
    "Module",
    "Enrollment",
    "ModuleProgress",
    "Payment",
    "Certificate",
    "Review",
    "WishlistItem",
]
