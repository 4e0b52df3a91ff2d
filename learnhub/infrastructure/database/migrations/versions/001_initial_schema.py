# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Initial schema: catalog facts, enrollment ledger, assignments, attendance.

The unique constraints on enrollments (student_id, course_id),
assignment_submissions (assignment_id, student_id) and attendance_records
(session_id, student_id) are what make duplicate inserts fail atomically.

Revision ID: 001_initial_schema
Revises:
Create Date: 2025-02-03
"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

revision: str = "001_initial_schema"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    ]


def upgrade() -> None:
    """Create all tables."""

    op.create_table(
        "users",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("role", sa.String(20), nullable=False),
        sa.Column("is_active", sa.Boolean, nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name="pk_users"),
        sa.UniqueConstraint("email", name="uq_users_email"),
        sa.CheckConstraint("role IN ('student', 'teacher', 'admin')", name="ck_users_role"),
    )

    op.create_table(
        "courses",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("instructor_id", sa.String(36), nullable=False),
        sa.Column("status", sa.String(20), nullable=False),
        sa.Column("enrollment_count", sa.Integer, nullable=False, server_default="0"),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name="pk_courses"),
        sa.ForeignKeyConstraint(
            ["instructor_id"], ["users.id"], name="fk_courses_instructor_id_users"
        ),
        sa.CheckConstraint(
            "status IN ('draft', 'pending', 'published', 'rejected')",
            name="ck_courses_status",
        ),
    )
    op.create_index("ix_courses_instructor_id", "courses", ["instructor_id"])

    op.create_table(
        "enrollments",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("student_id", sa.String(36), nullable=False),
        sa.Column("course_id", sa.String(36), nullable=False),
        sa.Column("progress", sa.Integer, nullable=False, server_default="0"),
        sa.Column("last_accessed_video_id", sa.String(64), nullable=True),
        sa.Column("enrolled_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("certificate_issued", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.PrimaryKeyConstraint("id", name="pk_enrollments"),
        sa.ForeignKeyConstraint(
            ["student_id"], ["users.id"], name="fk_enrollments_student_id_users"
        ),
        sa.ForeignKeyConstraint(
            ["course_id"], ["courses.id"], name="fk_enrollments_course_id_courses"
        ),
        sa.UniqueConstraint("student_id", "course_id", name="uq_enrollments_student_course"),
        sa.CheckConstraint(
            "progress >= 0 AND progress <= 100",
            name="ck_enrollments_progress_range",
        ),
        sa.CheckConstraint(
            "(completed_at IS NULL AND certificate_issued = false) "
            "OR (completed_at IS NOT NULL AND certificate_issued = true)",
            name="ck_enrollments_certificate_matches_completion",
        ),
    )
    op.create_index("ix_enrollments_student_id", "enrollments", ["student_id"])
    op.create_index("ix_enrollments_course_id", "enrollments", ["course_id"])

    op.create_table(
        "enrollment_videos",
        sa.Column("enrollment_id", sa.String(36), nullable=False),
        sa.Column("video_id", sa.String(64), nullable=False),
        sa.Column("position", sa.Integer, nullable=False),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("enrollment_id", "video_id", name="pk_enrollment_videos"),
        sa.ForeignKeyConstraint(
            ["enrollment_id"],
            ["enrollments.id"],
            name="fk_enrollment_videos_enrollment_id_enrollments",
            ondelete="CASCADE",
        ),
    )

    op.create_table(
        "assignments",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("course_id", sa.String(36), nullable=False),
        sa.Column("instructor_id", sa.String(36), nullable=False),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("description", sa.Text, nullable=False),
        sa.Column("due_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("max_score", sa.Integer, nullable=False, server_default="100"),
        sa.Column("resource_url", sa.String(500), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name="pk_assignments"),
        sa.ForeignKeyConstraint(
            ["course_id"], ["courses.id"], name="fk_assignments_course_id_courses"
        ),
        sa.ForeignKeyConstraint(
            ["instructor_id"], ["users.id"], name="fk_assignments_instructor_id_users"
        ),
    )
    op.create_index("ix_assignments_course_id", "assignments", ["course_id"])
    op.create_index("ix_assignments_instructor_id", "assignments", ["instructor_id"])

    op.create_table(
        "assignment_submissions",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("assignment_id", sa.String(36), nullable=False),
        sa.Column("student_id", sa.String(36), nullable=False),
        sa.Column("submitted_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("text", sa.Text, nullable=True),
        sa.Column("resource_url", sa.String(500), nullable=True),
        sa.Column("score", sa.Float, nullable=True),
        sa.Column("feedback", sa.Text, nullable=True),
        sa.Column("graded_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id", name="pk_assignment_submissions"),
        sa.ForeignKeyConstraint(
            ["assignment_id"],
            ["assignments.id"],
            name="fk_assignment_submissions_assignment_id_assignments",
            ondelete="CASCADE",
        ),
        sa.ForeignKeyConstraint(
            ["student_id"], ["users.id"], name="fk_assignment_submissions_student_id_users"
        ),
        sa.UniqueConstraint(
            "assignment_id",
            "student_id",
            name="uq_assignment_submissions_assignment_student",
        ),
    )
    op.create_index(
        "ix_assignment_submissions_assignment_id", "assignment_submissions", ["assignment_id"]
    )
    op.create_index(
        "ix_assignment_submissions_student_id", "assignment_submissions", ["student_id"]
    )

    op.create_table(
        "attendance_sessions",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("course_id", sa.String(36), nullable=False),
        sa.Column("instructor_id", sa.String(36), nullable=False),
        sa.Column("date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("topic", sa.String(255), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name="pk_attendance_sessions"),
        sa.ForeignKeyConstraint(
            ["course_id"], ["courses.id"], name="fk_attendance_sessions_course_id_courses"
        ),
        sa.ForeignKeyConstraint(
            ["instructor_id"], ["users.id"], name="fk_attendance_sessions_instructor_id_users"
        ),
    )
    op.create_index("ix_attendance_sessions_course_id", "attendance_sessions", ["course_id"])
    op.create_index(
        "ix_attendance_sessions_instructor_id", "attendance_sessions", ["instructor_id"]
    )

    op.create_table(
        "attendance_records",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("session_id", sa.String(36), nullable=False),
        sa.Column("student_id", sa.String(36), nullable=False),
        sa.Column("status", sa.String(10), nullable=False, server_default="present"),
        sa.Column("remarks", sa.Text, nullable=True),
        sa.Column("position", sa.Integer, nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_attendance_records"),
        sa.ForeignKeyConstraint(
            ["session_id"],
            ["attendance_sessions.id"],
            name="fk_attendance_records_session_id_attendance_sessions",
            ondelete="CASCADE",
        ),
        sa.ForeignKeyConstraint(
            ["student_id"], ["users.id"], name="fk_attendance_records_student_id_users"
        ),
        sa.UniqueConstraint(
            "session_id",
            "student_id",
            name="uq_attendance_records_session_student",
        ),
        sa.CheckConstraint(
            "status IN ('present', 'absent', 'late')",
            name="ck_attendance_records_status",
        ),
    )
    op.create_index("ix_attendance_records_session_id", "attendance_records", ["session_id"])
    op.create_index("ix_attendance_records_student_id", "attendance_records", ["student_id"])


def downgrade() -> None:
    """Drop all tables."""
    op.drop_table("attendance_records")
    op.drop_table("attendance_sessions")
    op.drop_table("assignment_submissions")
    op.drop_table("assignments")
    op.drop_table("enrollment_videos")
    op.drop_table("enrollments")
    op.drop_table("courses")
    op.drop_table("users")
