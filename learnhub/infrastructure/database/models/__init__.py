# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""SQLAlchemy ORM models.

Importing this package registers every table on Base.metadata, which is what
Alembic autogeneration and create_all() rely on.
"""

from learnhub.infrastructure.database.models.assignment import (
    Assignment,
    AssignmentSubmission,
)
from learnhub.infrastructure.database.models.attendance import (
    ATTENDANCE_STATUSES,
    AttendanceRecord,
    AttendanceSession,
)
from learnhub.infrastructure.database.models.base import (
    Base,
    TimestampMixin,
    UUIDPrimaryKeyMixin,
    new_uuid,
)
from learnhub.infrastructure.database.models.catalog import Course, User
from learnhub.infrastructure.database.models.enrollment import Enrollment, EnrollmentVideo

__all__ = [
    "Base",
    "TimestampMixin",
    "UUIDPrimaryKeyMixin",
    "new_uuid",
    # Catalog
    "User",
    "Course",
    # Enrollment
    "Enrollment",
    "EnrollmentVideo",
    # Assignment
    "Assignment",
    "AssignmentSubmission",
    # Attendance
    "ATTENDANCE_STATUSES",
    "AttendanceSession",
    "AttendanceRecord",
]
