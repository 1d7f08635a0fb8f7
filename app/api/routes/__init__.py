"""
API Router

Aggregates all endpoint routers.
"""

from fastapi import APIRouter

from app.api.routes import (
    admin,
    auth,
    certificates,
    courses,
    instructor,
    profile,
    reviews,
    student,
    wishlist,
)

router = APIRouter()

# Authentication and profile
router.include_router(auth.router)
router.include_router(profile.router)

# Public catalog
router.include_router(courses.router)
router.include_router(reviews.router)
router.include_router(certificates.router)

# Role areas
router.include_router(student.router)
router.include_router(instructor.router)
router.include_router(admin.router)

router.include_router(wishlist.router)
