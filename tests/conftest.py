"""
Pytest Configuration and Fixtures

Provides an in-memory database, an HTTP client bound to the app and
factories for users and courses.
"""

import os
import uuid
from typing import AsyncGenerator, Optional

# Test settings must be in place before the app (and its settings) is imported
os.environ.update({
    "DATABASE_URL": "sqlite+aiosqlite://",
    "SECRET_KEY": "test-secret-key",
    "ENVIRONMENT": "test",
    "BCRYPT_ROUNDS": "4",
    "LOG_LEVEL": "WARNING",
})

import httpx
import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from app.core.database import Base, enable_sqlite_foreign_keys, get_db
from app.core.security import create_access_token, hash_password
from app.main import app as fastapi_app
from app.models import (
    Course,
    CourseStatus,
    InstructorProfile,
    Module,
    ModuleType,
    StudentProfile,
    User,
    UserRole,
    UserStatus,
)


# ==================== Database Fixtures ====================

@pytest_asyncio.fixture
async def engine():
    """Fresh in-memory SQLite database per test."""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    enable_sqlite_foreign_keys(engine)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_maker(engine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


# ==================== HTTP Client Fixtures ====================

@pytest_asyncio.fixture
async def client(session_maker) -> AsyncGenerator[httpx.AsyncClient, None]:
    """
    httpx client talking to the app in-process.

    The ``get_db`` dependency is redirected to the test database.
    """
    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        async with session_maker() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    fastapi_app.dependency_overrides[get_db] = override_get_db

    transport = httpx.ASGITransport(app=fastapi_app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    fastapi_app.dependency_overrides.clear()


@pytest.fixture
def auth_headers():
    """
    Factory for Authorization headers.

    Usage:
        headers = auth_headers(user)
    """
    def _headers(user: User) -> dict:
        token = create_access_token(user.id, user.role)
        return {"Authorization": f"Bearer {token}"}
    return _headers


# ==================== Data Factories ====================

@pytest.fixture
def make_user(session_maker):
    """
    Factory that inserts a user directly into the database.

    Usage:
        admin = await make_user(UserRole.ADMIN)
    """
    async def _make(
        role: UserRole = UserRole.STUDENT,
        name: Optional[str] = None,
        email: Optional[str] = None,
        password: str = "password123",
        status: UserStatus = UserStatus.ACTIVE,
    ) -> User:
        name = name or f"{role.value.title()} {uuid.uuid4().hex[:4]}"
        async with session_maker() as session:
            user = User(
                name=name,
                email=email or f"{role.value}-{uuid.uuid4().hex[:8]}@mail.com",
                password_hash=hash_password(password),
                role=role,
                status=status,
                student_profile=StudentProfile(name=name) if role == UserRole.STUDENT else None,
                instructor_profile=InstructorProfile(name=name) if role == UserRole.INSTRUCTOR else None,
            )
            session.add(user)
            await session.commit()
            return user
    return _make


@pytest.fixture
def make_course(session_maker):
    """
    Factory that inserts a course with modules.

    ``modules`` is a list of dicts with Module fields; by default the
    course gets three video modules.
    """
    async def _make(
        instructor: User,
        price: float = 0.0,
        status: CourseStatus = CourseStatus.APPROVED,
        title: str = "Python Basics",
        category: str = "Programming",
        modules: Optional[list[dict]] = None,
    ) -> Course:
        if modules is None:
            modules = [
                {"title": f"Lesson {i + 1}", "type": ModuleType.VIDEO, "content_url": f"https://cdn.mail.com/v{i + 1}.mp4"}
                for i in range(3)
            ]

        async with session_maker() as session:
            course = Course(
                instructor_id=instructor.id,
                title=title,
                description=f"Learn {title}",
                category=category,
                price=price,
                status=status,
                modules=[
                    Module(order_sequence=index, **data)
                    for index, data in enumerate(modules)
                ],
            )
            session.add(course)
            await session.commit()
            return course
    return _make


@pytest.fixture
def sample_quiz_data() -> dict:
    """Three-question quiz used across enrollment tests."""
    return {
        "questions": [
            {
                "question": "What keyword defines a function in Python?",
                "options": ["func", "def", "lambda", "fn"],
                "answer": "def",
            },
            {
                "question": "Which type is immutable?",
                "options": ["list", "dict", "tuple", "set"],
                "answer": "tuple",
            },
            {
                "question": "What does len([1, 2, 3]) return?",
                "options": ["2", "3", "4", "None"],
                "answer": "3",
            },
        ]
    }
