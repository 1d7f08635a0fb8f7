"""
Course Catalog API Tests

Tests for instructor authoring, admin moderation and the public catalog.
"""

import pytest
from sqlalchemy import text

from app.models import CourseStatus, ModuleType, UserRole


pytestmark = pytest.mark.asyncio


COURSE_BODY = {
    "title": "Async Python",
    "description": "asyncio from the ground up",
    "category": "Programming",
    "price": 19.99,
}


class TestAuthoring:
    """Tests for /api/instructor/courses."""

    async def test_new_course_is_pending_and_hidden(self, client, make_user, auth_headers):
        instructor = await make_user(UserRole.INSTRUCTOR)

        response = await client.post(
            "/api/instructor/courses",
            json=COURSE_BODY,
            headers=auth_headers(instructor),
        )

        assert response.status_code == 201
        course = response.json()
        assert course["status"] == "pending"
        assert course["instructor_id"] == str(instructor.id)
        assert course["instructor_name"] == instructor.name

        catalog = await client.get("/api/courses")
        assert catalog.json() == []

        detail = await client.get(f"/api/courses/{course['id']}")
        assert detail.status_code == 404

    async def test_negative_price_is_invalid(self, client, make_user, auth_headers):
        instructor = await make_user(UserRole.INSTRUCTOR)

        response = await client.post(
            "/api/instructor/courses",
            json={**COURSE_BODY, "price": -1},
            headers=auth_headers(instructor),
        )

        assert response.status_code == 422

    async def test_only_owner_can_update(self, client, make_user, make_course, auth_headers):
        owner = await make_user(UserRole.INSTRUCTOR)
        other = await make_user(UserRole.INSTRUCTOR)
        course = await make_course(owner)

        forbidden = await client.put(
            f"/api/instructor/courses/{course.id}",
            json={"title": "Hijacked"},
            headers=auth_headers(other),
        )
        allowed = await client.put(
            f"/api/instructor/courses/{course.id}",
            json={"title": "Python Basics, 2nd edition"},
            headers=auth_headers(owner),
        )

        assert forbidden.status_code == 403
        assert allowed.status_code == 200
        assert allowed.json()["title"] == "Python Basics, 2nd edition"

    async def test_modules_append_in_order(self, client, make_user, make_course, auth_headers, sample_quiz_data):
        instructor = await make_user(UserRole.INSTRUCTOR)
        course = await make_course(instructor, modules=[])
        headers = auth_headers(instructor)

        first = await client.post(
            f"/api/instructor/courses/{course.id}/modules",
            json={"title": "Intro", "type": "video", "content_url": "https://cdn.mail.com/intro.mp4"},
            headers=headers,
        )
        second = await client.post(
            f"/api/instructor/courses/{course.id}/modules",
            json={"title": "Check", "type": "quiz", "quiz_data": sample_quiz_data},
            headers=headers,
        )

        assert first.status_code == 201
        assert second.status_code == 201
        assert first.json()["order_sequence"] == 0
        assert second.json()["order_sequence"] == 1

        detail = await client.get(f"/api/instructor/courses/{course.id}", headers=headers)
        assert [m["title"] for m in detail.json()["modules"]] == ["Intro", "Check"]

    async def test_module_requires_content(self, client, make_user, make_course, auth_headers):
        instructor = await make_user(UserRole.INSTRUCTOR)
        course = await make_course(instructor, modules=[])
        headers = auth_headers(instructor)

        no_url = await client.post(
            f"/api/instructor/courses/{course.id}/modules",
            json={"title": "Intro", "type": "video"},
            headers=headers,
        )
        bad_answer = await client.post(
            f"/api/instructor/courses/{course.id}/modules",
            json={
                "title": "Quiz",
                "type": "quiz",
                "quiz_data": {"questions": [{"question": "?", "options": ["a", "b"], "answer": "c"}]},
            },
            headers=headers,
        )

        assert no_url.status_code == 422
        assert bad_answer.status_code == 422

    async def test_delete_module(self, client, make_user, make_course, auth_headers):
        instructor = await make_user(UserRole.INSTRUCTOR)
        course = await make_course(instructor)
        headers = auth_headers(instructor)
        module_id = course.modules[0].id

        response = await client.delete(
            f"/api/instructor/courses/{course.id}/modules/{module_id}",
            headers=headers,
        )
        missing = await client.delete(
            f"/api/instructor/courses/{course.id}/modules/{module_id}",
            headers=headers,
        )

        assert response.status_code == 204
        assert missing.status_code == 404

        detail = await client.get(f"/api/courses/{course.id}")
        assert len(detail.json()["modules"]) == 2

    async def test_delete_unused_course(self, client, make_user, make_course, auth_headers):
        instructor = await make_user(UserRole.INSTRUCTOR)
        other = await make_user(UserRole.INSTRUCTOR)
        student = await make_user(UserRole.STUDENT)
        course = await make_course(instructor)
        await client.post(
            "/api/wishlist",
            json={"user_id": str(student.id), "course_id": course.id},
            headers=auth_headers(student),
        )

        forbidden = await client.delete(
            f"/api/instructor/courses/{course.id}",
            headers=auth_headers(other),
        )
        response = await client.delete(
            f"/api/instructor/courses/{course.id}",
            headers=auth_headers(instructor),
        )

        assert forbidden.status_code == 403
        assert response.status_code == 204
        assert (await client.get(f"/api/courses/{course.id}")).status_code == 404

        wishlist = await client.get(f"/api/wishlist/{student.id}", headers=auth_headers(student))
        assert wishlist.json() == []

    async def test_delete_course_with_enrollments_conflicts(
        self, client, make_user, make_course, auth_headers
    ):
        instructor = await make_user(UserRole.INSTRUCTOR)
        admin = await make_user(UserRole.ADMIN)
        student = await make_user(UserRole.STUDENT)
        course = await make_course(instructor, price=20)
        await client.post(f"/api/courses/{course.id}/enroll", headers=auth_headers(student))

        response = await client.delete(
            f"/api/instructor/courses/{course.id}",
            headers=auth_headers(instructor),
        )

        assert response.status_code == 409

        stats = await client.get("/api/admin/stats", headers=auth_headers(admin))
        assert stats.status_code == 200
        assert stats.json()["total_revenue"] == pytest.approx(20)

        my_courses = await client.get("/api/student/my-courses", headers=auth_headers(student))
        assert [e["course"]["title"] for e in my_courses.json()] == ["Python Basics"]

    async def test_delete_course_with_payment_only_conflicts(
        self, client, make_user, make_course, auth_headers
    ):
        instructor = await make_user(UserRole.INSTRUCTOR)
        student = await make_user(UserRole.STUDENT)
        course = await make_course(instructor, price=20)
        await client.post(f"/api/student/payments/{course.id}", headers=auth_headers(student))

        response = await client.delete(
            f"/api/instructor/courses/{course.id}",
            headers=auth_headers(instructor),
        )

        assert response.status_code == 409

    async def test_sqlite_enforces_foreign_keys(self, session_maker):
        async with session_maker() as session:
            enabled = await session.scalar(text("PRAGMA foreign_keys"))

        assert enabled == 1

    async def test_list_instructor_courses(self, client, make_user, make_course, auth_headers):
        instructor = await make_user(UserRole.INSTRUCTOR)
        other = await make_user(UserRole.INSTRUCTOR)
        await make_course(instructor, status=CourseStatus.PENDING)
        await make_course(instructor, title="Second")

        own = await client.get(
            f"/api/instructor/{instructor.id}/courses",
            headers=auth_headers(instructor),
        )
        foreign = await client.get(
            f"/api/instructor/{instructor.id}/courses",
            headers=auth_headers(other),
        )

        assert own.status_code == 200
        assert len(own.json()) == 2
        assert foreign.status_code == 403

    async def test_students_cannot_use_instructor_listings(self, client, make_user, auth_headers):
        student = await make_user(UserRole.STUDENT)
        headers = auth_headers(student)

        courses = await client.get(f"/api/instructor/{student.id}/courses", headers=headers)
        enrollments = await client.get(f"/api/instructor/{student.id}/enrollments", headers=headers)

        assert courses.status_code == 403
        assert enrollments.status_code == 403


class TestModeration:
    """Tests for PUT /api/admin/courses/{id}/status."""

    async def test_approve_publishes_course(self, client, make_user, make_course, auth_headers):
        instructor = await make_user(UserRole.INSTRUCTOR)
        admin = await make_user(UserRole.ADMIN)
        course = await make_course(instructor, status=CourseStatus.PENDING)

        response = await client.put(
            f"/api/admin/courses/{course.id}/status",
            json={"status": "approved", "note": "Looks good"},
            headers=auth_headers(admin),
        )

        assert response.status_code == 200
        assert response.json()["status"] == "approved"
        assert response.json()["review_note"] == "Looks good"

        catalog = await client.get("/api/courses")
        assert [c["id"] for c in catalog.json()] == [course.id]

    async def test_invalid_transition(self, client, make_user, make_course, auth_headers):
        instructor = await make_user(UserRole.INSTRUCTOR)
        admin = await make_user(UserRole.ADMIN)
        course = await make_course(instructor, status=CourseStatus.APPROVED)

        response = await client.put(
            f"/api/admin/courses/{course.id}/status",
            json={"status": "pending"},
            headers=auth_headers(admin),
        )

        assert response.status_code == 400

    async def test_unknown_status_is_invalid(self, client, make_user, make_course, auth_headers):
        instructor = await make_user(UserRole.INSTRUCTOR)
        admin = await make_user(UserRole.ADMIN)
        course = await make_course(instructor, status=CourseStatus.PENDING)

        response = await client.put(
            f"/api/admin/courses/{course.id}/status",
            json={"status": "published"},
            headers=auth_headers(admin),
        )

        assert response.status_code == 422

    async def test_same_status_updates_note(self, client, make_user, make_course, auth_headers):
        instructor = await make_user(UserRole.INSTRUCTOR)
        admin = await make_user(UserRole.ADMIN)
        course = await make_course(instructor, status=CourseStatus.APPROVED)

        response = await client.put(
            f"/api/admin/courses/{course.id}/status",
            json={"status": "approved", "note": "Re-checked"},
            headers=auth_headers(admin),
        )

        assert response.status_code == 200
        assert response.json()["review_note"] == "Re-checked"


class TestPublicCatalog:
    """Tests for GET /api/courses."""

    async def test_only_approved_courses_are_listed(self, client, make_user, make_course):
        instructor = await make_user(UserRole.INSTRUCTOR)
        approved = await make_course(instructor, title="Approved")
        await make_course(instructor, title="Pending", status=CourseStatus.PENDING)
        await make_course(instructor, title="Archived", status=CourseStatus.ARCHIVED)

        response = await client.get("/api/courses")

        assert response.status_code == 200
        assert [c["id"] for c in response.json()] == [approved.id]

    async def test_filters(self, client, make_user, make_course):
        instructor = await make_user(UserRole.INSTRUCTOR)
        await make_course(instructor, title="SQL Joins", category="Databases")
        await make_course(instructor, title="Watercolor", category="Art")

        by_category = await client.get("/api/courses", params={"category": "databases"})
        by_search = await client.get("/api/courses", params={"search": "water"})

        assert [c["title"] for c in by_category.json()] == ["SQL Joins"]
        assert [c["title"] for c in by_search.json()] == ["Watercolor"]

    async def test_detail_hides_module_content(self, client, make_user, make_course, sample_quiz_data):
        instructor = await make_user(UserRole.INSTRUCTOR)
        course = await make_course(
            instructor,
            modules=[
                {"title": "Video", "type": ModuleType.VIDEO, "content_url": "https://cdn.mail.com/secret.mp4"},
                {"title": "Quiz", "type": ModuleType.QUIZ, "quiz_data": sample_quiz_data},
            ],
        )

        response = await client.get(f"/api/courses/{course.id}")

        assert response.status_code == 200
        modules = response.json()["modules"]
        assert [m["title"] for m in modules] == ["Video", "Quiz"]
        assert "secret.mp4" not in response.text
        assert "quiz_data" not in modules[1]
