"""
Wishlist and Review API Tests
"""

import pytest

from app.models import UserRole


pytestmark = pytest.mark.asyncio


class TestWishlist:
    """Tests for /api/wishlist."""

    async def test_add_list_remove(self, client, make_user, make_course, auth_headers):
        instructor = await make_user(UserRole.INSTRUCTOR)
        student = await make_user(UserRole.STUDENT)
        course = await make_course(instructor)
        headers = auth_headers(student)

        added = await client.post(
            "/api/wishlist",
            json={"user_id": str(student.id), "course_id": course.id},
            headers=headers,
        )
        listed = await client.get(f"/api/wishlist/{student.id}", headers=headers)
        removed = await client.delete(f"/api/wishlist/{student.id}/{course.id}", headers=headers)
        removed_again = await client.delete(f"/api/wishlist/{student.id}/{course.id}", headers=headers)

        assert added.status_code == 201
        assert [item["course_id"] for item in listed.json()] == [course.id]
        assert listed.json()[0]["course"]["title"] == "Python Basics"
        assert removed.status_code == 204
        assert removed_again.status_code == 404

    async def test_duplicate_conflicts(self, client, make_user, make_course, auth_headers):
        instructor = await make_user(UserRole.INSTRUCTOR)
        student = await make_user(UserRole.STUDENT)
        course = await make_course(instructor)
        headers = auth_headers(student)
        body = {"user_id": str(student.id), "course_id": course.id}

        await client.post("/api/wishlist", json=body, headers=headers)
        response = await client.post("/api/wishlist", json=body, headers=headers)

        assert response.status_code == 409

    async def test_unknown_course(self, client, make_user, auth_headers):
        student = await make_user(UserRole.STUDENT)

        response = await client.post(
            "/api/wishlist",
            json={"user_id": str(student.id), "course_id": 424242},
            headers=auth_headers(student),
        )

        assert response.status_code == 404

    async def test_other_users_wishlist(self, client, make_user, make_course, auth_headers):
        instructor = await make_user(UserRole.INSTRUCTOR)
        owner = await make_user(UserRole.STUDENT)
        intruder = await make_user(UserRole.STUDENT)
        course = await make_course(instructor)

        read = await client.get(f"/api/wishlist/{owner.id}", headers=auth_headers(intruder))
        write = await client.post(
            "/api/wishlist",
            json={"user_id": str(owner.id), "course_id": course.id},
            headers=auth_headers(intruder),
        )

        assert read.status_code == 403
        assert write.status_code == 403


class TestReviews:
    """Tests for course reviews."""

    async def test_only_enrolled_users_review(self, client, make_user, make_course, auth_headers):
        instructor = await make_user(UserRole.INSTRUCTOR)
        student = await make_user(UserRole.STUDENT)
        course = await make_course(instructor)

        response = await client.post(
            f"/api/courses/{course.id}/reviews",
            json={"rating": 5, "comment": "Great"},
            headers=auth_headers(student),
        )

        assert response.status_code == 403

    async def test_one_review_per_user(self, client, make_user, make_course, auth_headers):
        instructor = await make_user(UserRole.INSTRUCTOR)
        student = await make_user(UserRole.STUDENT, name="Linus")
        course = await make_course(instructor)
        headers = auth_headers(student)
        await client.post(f"/api/courses/{course.id}/enroll", headers=headers)

        first = await client.post(
            f"/api/courses/{course.id}/reviews",
            json={"rating": 4, "comment": "Solid intro"},
            headers=headers,
        )
        second = await client.post(
            f"/api/courses/{course.id}/reviews",
            json={"rating": 1, "comment": "Changed my mind"},
            headers=headers,
        )

        assert first.status_code == 201
        assert first.json()["user_name"] == "Linus"
        assert second.status_code == 409

    async def test_rating_summary(self, client, make_user, make_course, auth_headers):
        instructor = await make_user(UserRole.INSTRUCTOR)
        course = await make_course(instructor)

        for rating in (5, 4, 4):
            student = await make_user(UserRole.STUDENT)
            headers = auth_headers(student)
            await client.post(f"/api/courses/{course.id}/enroll", headers=headers)
            await client.post(
                f"/api/courses/{course.id}/reviews",
                json={"rating": rating, "comment": "ok"},
                headers=headers,
            )

        response = await client.get(f"/api/courses/{course.id}/reviews")

        data = response.json()
        assert data["total_reviews"] == 3
        assert data["average_rating"] == pytest.approx(4.3)
        assert data["distribution"] == {"1": 0, "2": 0, "3": 0, "4": 2, "5": 1}

    async def test_rating_out_of_range(self, client, make_user, make_course, auth_headers):
        instructor = await make_user(UserRole.INSTRUCTOR)
        student = await make_user(UserRole.STUDENT)
        course = await make_course(instructor)
        headers = auth_headers(student)
        await client.post(f"/api/courses/{course.id}/enroll", headers=headers)

        response = await client.post(
            f"/api/courses/{course.id}/reviews",
            json={"rating": 6, "comment": "Too good"},
            headers=headers,
        )

        assert response.status_code == 422

    async def test_helpful_and_report(self, client, make_user, make_course, auth_headers):
        instructor = await make_user(UserRole.INSTRUCTOR)
        student = await make_user(UserRole.STUDENT)
        reader = await make_user(UserRole.STUDENT)
        course = await make_course(instructor)
        headers = auth_headers(student)
        await client.post(f"/api/courses/{course.id}/enroll", headers=headers)
        review = (
            await client.post(
                f"/api/courses/{course.id}/reviews",
                json={"rating": 3, "comment": "Average"},
                headers=headers,
            )
        ).json()

        await client.post(f"/api/reviews/{review['id']}/helpful", headers=auth_headers(reader))
        helpful = await client.post(f"/api/reviews/{review['id']}/helpful", headers=auth_headers(reader))
        reported = await client.post(f"/api/reviews/{review['id']}/report", headers=auth_headers(reader))

        assert helpful.json()["helpful_count"] == 2
        assert reported.json()["reported"] is True

    async def test_helpful_vote_is_not_lost_on_stale_read(self, make_user, make_course, session_maker):
        from app.models import Review
        from app.services import review_service

        instructor = await make_user(UserRole.INSTRUCTOR)
        student = await make_user(UserRole.STUDENT)
        course = await make_course(instructor)
        async with session_maker() as session:
            review = Review(user_id=student.id, course_id=course.id, rating=5, comment="Great")
            session.add(review)
            await session.commit()
            review_id = review.id

        async with session_maker() as first:
            stale = await review_service.get_review(review_id, first)
            await first.commit()
            assert stale.helpful_count == 0

            # Another request votes while this one still holds the old count
            async with session_maker() as second:
                await review_service.mark_helpful(review_id, second)

            updated = await review_service.mark_helpful(review_id, first)

        assert updated.helpful_count == 2
