"""
Course Marketplace Backend - Services Module

Business logic layer.
"""

from app.services import user_service
from app.services import course_service
from app.services import payment_service
from app.services import certificate_service
from app.services import enrollment_service
from app.services import analytics_service
from app.services import wishlist_service
from app.services import review_service

__all__ = [
    "user_service",
    "course_service",
    "payment_service",
    "certificate_service",
    "enrollment_service",
    "analytics_service",
    "wishlist_service",
    "review_service",
]
