# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""User and course tables.

Both tables belong to the catalog and account services. LearnHub reads them
for existence, ownership and role facts, and only ever writes
Course.enrollment_count (atomic increment on enrollment).
"""

from sqlalchemy import Boolean, CheckConstraint, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from learnhub.infrastructure.database.models.base import (
    Base,
    TimestampMixin,
    UUIDPrimaryKeyMixin,
)


class User(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """Platform account.

    Attributes:
        name: Display name.
        email: Unique login email.
        role: One of student, teacher, admin.
        is_active: Inactive accounts cannot call the API.
    """

    __tablename__ = "users"
    __table_args__ = (
        CheckConstraint("role IN ('student', 'teacher', 'admin')", name="role"),
    )

    name: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    role: Mapped[str] = mapped_column(String(20), nullable=False, default="student")
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    def __repr__(self) -> str:
        return f"<User(id={self.id}, role={self.role})>"


class Course(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """Catalog course.

    Attributes:
        title: Course title.
        instructor_id: Owning teacher.
        status: Publication status.
        enrollment_count: Number of enrollments, incremented atomically.
    """

    __tablename__ = "courses"
    __table_args__ = (
        CheckConstraint(
            "status IN ('draft', 'pending', 'published', 'rejected')",
            name="status",
        ),
    )

    title: Mapped[str] = mapped_column(String(200), nullable=False)
    instructor_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("users.id"),
        nullable=False,
        index=True,
    )
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="draft")
    enrollment_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    def __repr__(self) -> str:
        return f"<Course(id={self.id}, instructor_id={self.instructor_id})>"
