"""
Course Marketplace Backend - Schemas Module

Pydantic models for request/response validation.
"""

from app.schemas.user import (
    UserCreate,
    UserLogin,
    UserResponse,
    UserUpdate,
    UserStatusUpdate,
    UserRoleUpdate,
)
from app.schemas.token import AuthResponse, TokenPayload
from app.schemas.course import (
    ModuleCreate,
    ModuleUpdate,
    ModuleSummary,
    ModuleContent,
    ModuleResponse,
    CourseCreate,
    CourseUpdate,
    CourseSummary,
    CourseResponse,
    InstructorCourseResponse,
    CourseStatusUpdate,
    AdminCourseRow,
)
from app.schemas.enrollment import (
    EnrollRequest,
    EnrollmentResponse,
    QuizSubmission,
    QuizResult,
    AccessResponse,
    CourseLearningResponse,
)
from app.schemas.payment import PaymentCreate, PaymentResponse
from app.schemas.certificate import CertificateResponse, CertificateVerification
from app.schemas.review import ReviewCreate, ReviewResponse, CourseReviewsResponse
from app.schemas.wishlist import WishlistCreate, WishlistItemResponse
from app.schemas.analytics import PlatformStats, InstructorEnrollmentRow

__all__ = [
    # User
    "UserCreate",
    "UserLogin",
    "UserResponse",
    "UserUpdate",
    "UserStatusUpdate",
    "UserRoleUpdate",
    # Token
    "AuthResponse",
    "TokenPayload",
    # Course
    "ModuleCreate",
    "ModuleUpdate",
    "ModuleSummary",
    "ModuleContent",
    "ModuleResponse",
    "CourseCreate",
    "CourseUpdate",
    "CourseSummary",
    "CourseResponse",
    "InstructorCourseResponse",
    "CourseStatusUpdate",
    "AdminCourseRow",
    # Enrollment
    "EnrollRequest",
    "EnrollmentResponse",
    "QuizSubmission",
    "QuizResult",
    "AccessResponse",
    "CourseLearningResponse",
    # Payment
    "PaymentCreate",
    "PaymentResponse",
    # Certificate
    "CertificateResponse",
    "CertificateVerification",
    # Review
    "ReviewCreate",
    "ReviewResponse",
    "CourseReviewsResponse",
    # Wishlist
    "WishlistCreate",
    "WishlistItemResponse",
    # Analytics
    "PlatformStats",
    "InstructorEnrollmentRow",
]
