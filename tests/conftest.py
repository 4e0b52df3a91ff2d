# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Pytest configuration and shared fixtures.

This module provides fixtures used across all test types:
- Unit tests
- Integration tests (real SQLAlchemy engine, SQLite by default)
"""

import os
from collections.abc import AsyncGenerator, Awaitable, Callable
from uuid import uuid4

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from learnhub.api.middleware.auth import CurrentUser
from learnhub.infrastructure.database.connection import build_engine
from learnhub.infrastructure.database.models import Base, Course, User

# =============================================================================
# Marker Configuration
# =============================================================================


def pytest_configure(config: pytest.Config) -> None:
    """Configure custom pytest markers."""
    config.addinivalue_line(
        "markers", "unit: mark test as a unit test"
    )
    config.addinivalue_line(
        "markers", "integration: mark test as an integration test (uses a database)"
    )


# =============================================================================
# Database Fixtures
# =============================================================================


@pytest.fixture(scope="session")
def test_db_url() -> str:
    """Get database URL for tests.

    Defaults to an in-memory SQLite database so constraint behaviour is
    exercised without external services.
    """
    return os.environ.get("TEST_DATABASE_URL", "sqlite+aiosqlite:///:memory:")


@pytest_asyncio.fixture(scope="function")
async def db_engine(test_db_url: str) -> AsyncGenerator[AsyncEngine, None]:
    """Create async engine with a fresh schema."""
    engine = build_engine(test_db_url)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture
def db_sessionmaker(db_engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Create sessionmaker configured like the application's."""
    return async_sessionmaker(
        db_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


@pytest_asyncio.fixture(scope="function")
async def db_session(
    db_sessionmaker: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession, None]:
    """Create async session for tests."""
    async with db_sessionmaker() as session:
        yield session


# =============================================================================
# Data Factories
# =============================================================================


@pytest.fixture
def make_user(db_session: AsyncSession) -> Callable[..., Awaitable[CurrentUser]]:
    """Factory creating a user row and returning it as a caller."""

    async def _make(role: str = "student", is_active: bool = True) -> CurrentUser:
        suffix = uuid4().hex[:8]
        user = User(
            name=f"{role} {suffix}",
            email=f"{role}.{suffix}@example.com",
            role=role,
            is_active=is_active,
        )
        db_session.add(user)
        await db_session.commit()
        return CurrentUser.from_user(user)

    return _make


@pytest.fixture
def make_course(db_session: AsyncSession) -> Callable[..., Awaitable[str]]:
    """Factory creating a course row and returning its ID."""

    async def _make(instructor_id: str, title: str = "Intro to Testing") -> str:
        course = Course(title=title, instructor_id=instructor_id, status="published")
        db_session.add(course)
        await db_session.commit()
        return course.id

    return _make


@pytest_asyncio.fixture
async def student(make_user) -> CurrentUser:
    """Provide an active student."""
    return await make_user("student")


@pytest_asyncio.fixture
async def teacher(make_user) -> CurrentUser:
    """Provide an active teacher."""
    return await make_user("teacher")


@pytest_asyncio.fixture
async def other_teacher(make_user) -> CurrentUser:
    """Provide a second teacher who owns nothing."""
    return await make_user("teacher")


@pytest_asyncio.fixture
async def admin(make_user) -> CurrentUser:
    """Provide an active admin."""
    return await make_user("admin")


@pytest_asyncio.fixture
async def course_id(make_course, teacher: CurrentUser) -> str:
    """Provide a course taught by the teacher fixture."""
    return await make_course(teacher.id)
