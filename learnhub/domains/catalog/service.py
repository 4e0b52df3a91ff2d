# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Read access to the course catalog and user accounts.

Courses and users are owned by external services. This module exposes the
few facts the learning core depends on (existence, instructor, role, active
flag) and the one write it is allowed to make: the atomic increment of a
course's enrollment_count.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from learnhub.core.errors import NotFoundError
from learnhub.infrastructure.database.models import Course, User

logger = logging.getLogger(__name__)


class CatalogError(Exception):
    """Base exception for catalog lookups."""

    pass


class CourseNotFoundError(CatalogError, NotFoundError):
    """Raised when a course is not found."""

    pass


class CourseCatalog:
    """Facade over the courses and users tables.

    Attributes:
        db: Async database session.
    """

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def get_course(self, course_id: str) -> Course:
        """Get a course by ID.

        Args:
            course_id: Course identifier.

        Returns:
            Course row.

        Raises:
            CourseNotFoundError: If the course does not exist.
        """
        result = await self.db.execute(select(Course).where(Course.id == str(course_id)))
        course = result.scalar_one_or_none()
        if not course:
            raise CourseNotFoundError(f"Course {course_id} not found")
        return course

    async def find_course(self, course_id: str) -> Course | None:
        """Get a course by ID, or None."""
        result = await self.db.execute(select(Course).where(Course.id == str(course_id)))
        return result.scalar_one_or_none()

    async def get_user(self, user_id: str) -> User | None:
        """Get a user account by ID."""
        result = await self.db.execute(select(User).where(User.id == str(user_id)))
        return result.scalar_one_or_none()

    async def get_users(self, user_ids: Iterable[str]) -> dict[str, User]:
        """Get user accounts keyed by ID. Unknown IDs are skipped."""
        ids = {str(user_id) for user_id in user_ids}
        if not ids:
            return {}
        result = await self.db.execute(select(User).where(User.id.in_(ids)))
        return {user.id: user for user in result.scalars().all()}

    async def get_courses(self, course_ids: Iterable[str]) -> dict[str, Course]:
        """Get courses keyed by ID. Unknown IDs are skipped."""
        ids = {str(course_id) for course_id in course_ids}
        if not ids:
            return {}
        result = await self.db.execute(select(Course).where(Course.id.in_(ids)))
        return {course.id: course for course in result.scalars().all()}

    async def increment_enrollment_count(self, course_id: str) -> None:
        """Add one to a course's enrollment_count.

        Issued as a single UPDATE so concurrent enrollments never lose an
        increment. Does not commit; the caller owns the transaction.

        Args:
            course_id: Course identifier.
        """
        await self.db.execute(
            update(Course)
            .where(Course.id == str(course_id))
            .values(enrollment_count=Course.enrollment_count + 1)
            .execution_options(synchronize_session=False)
        )
        logger.debug("Incremented enrollment count: course=%s", course_id)
