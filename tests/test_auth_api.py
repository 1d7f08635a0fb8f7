"""
Authentication API Tests

Tests for registration, login and the authentication dependencies.
"""

import uuid

import pytest
from sqlalchemy import select

from app.core.security import create_access_token, decode_access_token
from app.models import InstructorProfile, StudentProfile, UserRole, UserStatus


pytestmark = pytest.mark.asyncio


async def _register(client, **overrides):
    body = {
        "name": "Ada Lovelace",
        "email": "ada@mail.com",
        "password": "analytical",
        "role": "student",
    }
    body.update(overrides)
    return await client.post("/api/auth/register", json=body)


class TestRegister:
    """Tests for POST /api/auth/register."""

    async def test_register_returns_token_and_user(self, client):
        response = await _register(client)

        assert response.status_code == 201
        data = response.json()
        assert data["user"]["email"] == "ada@mail.com"
        assert data["user"]["role"] == "student"
        assert "password_hash" not in data["user"]

        payload = decode_access_token(data["token"])
        assert payload["user"] == {"id": data["user"]["id"], "role": "student"}

    async def test_email_is_stored_lower_case(self, client):
        response = await _register(client, email="Ada.L@Mail.com")

        assert response.status_code == 201
        assert response.json()["user"]["email"] == "ada.l@mail.com"

    async def test_duplicate_email_conflicts(self, client):
        await _register(client)

        response = await _register(client, name="Someone Else")

        assert response.status_code == 409

    async def test_profile_is_created_for_role(self, client, session_maker):
        await _register(client, email="teach@mail.com", role="instructor")
        await _register(client, email="learn@mail.com", role="student")

        async with session_maker() as session:
            instructors = (await session.execute(select(InstructorProfile))).scalars().all()
            students = (await session.execute(select(StudentProfile))).scalars().all()

        assert len(instructors) == 1
        assert len(students) == 1

    async def test_admin_self_registration_is_refused(self, client):
        response = await _register(client, role="admin")

        assert response.status_code == 403

    async def test_short_password_is_invalid(self, client):
        response = await _register(client, password="123")

        assert response.status_code == 422

    async def test_password_over_72_bytes_is_invalid(self, client):
        too_long = await _register(client, password="x" * 80)
        multibyte = await _register(client, email="ada2@mail.com", password="é" * 37)
        at_limit = await _register(client, email="ada3@mail.com", password="x" * 72)

        assert too_long.status_code == 422
        assert multibyte.status_code == 422
        assert at_limit.status_code == 201


class TestLogin:
    """Tests for POST /api/auth/login."""

    async def test_login_embeds_name(self, client, make_user):
        user = await make_user(UserRole.STUDENT, name="Grace", email="grace@mail.com")

        response = await client.post(
            "/api/auth/login",
            json={"email": "grace@mail.com", "password": "password123"},
        )

        assert response.status_code == 200
        payload = decode_access_token(response.json()["token"])
        assert payload["user"]["id"] == str(user.id)
        assert payload["user"]["name"] == "Grace"

    async def test_wrong_password_and_unknown_email_look_the_same(self, client, make_user):
        await make_user(email="grace@mail.com")

        wrong_password = await client.post(
            "/api/auth/login",
            json={"email": "grace@mail.com", "password": "nope-nope"},
        )
        unknown_email = await client.post(
            "/api/auth/login",
            json={"email": "nobody@mail.com", "password": "nope-nope"},
        )

        assert wrong_password.status_code == 401
        assert unknown_email.status_code == 401
        assert wrong_password.json() == unknown_email.json()

    async def test_blocked_user_cannot_login(self, client, make_user):
        await make_user(email="blocked@mail.com", status=UserStatus.BLOCKED)

        response = await client.post(
            "/api/auth/login",
            json={"email": "blocked@mail.com", "password": "password123"},
        )

        assert response.status_code == 403


class TestAuthenticate:
    """Tests for token handling on protected routes."""

    async def test_bearer_header(self, client, make_user, auth_headers):
        user = await make_user()

        response = await client.get("/api/auth/me", headers=auth_headers(user))

        assert response.status_code == 200
        assert response.json()["id"] == str(user.id)

    async def test_x_auth_token_header(self, client, make_user):
        user = await make_user()
        token = create_access_token(user.id, user.role)

        response = await client.get("/api/auth/me", headers={"x-auth-token": token})

        assert response.status_code == 200

    async def test_missing_token(self, client):
        response = await client.get("/api/auth/me")

        assert response.status_code == 401

    async def test_garbage_token(self, client):
        response = await client.get("/api/auth/me", headers={"Authorization": "Bearer garbage"})

        assert response.status_code == 401

    async def test_token_for_deleted_user(self, client):
        token = create_access_token(uuid.uuid4(), UserRole.STUDENT)

        response = await client.get("/api/auth/me", headers={"Authorization": token})

        assert response.status_code == 401

    async def test_blocked_user_token_is_refused(self, client, make_user, auth_headers):
        user = await make_user(status=UserStatus.BLOCKED)

        response = await client.get("/api/auth/me", headers=auth_headers(user))

        assert response.status_code == 403

    async def test_role_is_read_from_database(self, client, make_user):
        """A stale role claim in the token does not grant admin rights."""
        user = await make_user(UserRole.STUDENT)
        token = create_access_token(user.id, UserRole.ADMIN)

        response = await client.get("/api/admin/stats", headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == 403

    async def test_wrong_role_is_forbidden(self, client, make_user, auth_headers):
        student = await make_user(UserRole.STUDENT)

        response = await client.post(
            "/api/instructor/courses",
            json={"title": "X", "description": "Y", "category": "Z", "price": 0},
            headers=auth_headers(student),
        )

        assert response.status_code == 403


class TestProfile:
    """Tests for /api/profile."""

    async def test_update_profile(self, client, make_user, auth_headers, session_maker):
        user = await make_user(UserRole.INSTRUCTOR, name="Old Name")

        response = await client.put(
            "/api/profile",
            json={"name": "New Name", "bio": "Teaches databases"},
            headers=auth_headers(user),
        )

        assert response.status_code == 200
        assert response.json()["name"] == "New Name"
        assert response.json()["bio"] == "Teaches databases"

        async with session_maker() as session:
            profile = (
                await session.execute(
                    select(InstructorProfile).where(InstructorProfile.user_id == user.id)
                )
            ).scalar_one()
        assert profile.name == "New Name"

    async def test_email_taken_by_someone_else(self, client, make_user, auth_headers):
        await make_user(email="taken@mail.com")
        user = await make_user()

        response = await client.put(
            "/api/profile",
            json={"email": "taken@mail.com"},
            headers=auth_headers(user),
        )

        assert response.status_code == 409

    async def test_get_profile(self, client, make_user, auth_headers):
        user = await make_user()

        response = await client.get("/api/profile", headers=auth_headers(user))

        assert response.status_code == 200
        assert response.json()["email"] == user.email


async def test_healthz(client):
    response = await client.get("/api/healthz")

    assert response.status_code == 200
    assert response.json()["database"] == "connected"
