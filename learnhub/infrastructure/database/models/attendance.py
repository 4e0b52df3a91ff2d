# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Attendance register tables."""

from datetime import datetime
from typing import Optional

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from learnhub.infrastructure.database.models.base import (
    Base,
    TimestampMixin,
    UUIDPrimaryKeyMixin,
)

ATTENDANCE_STATUSES = ("present", "absent", "late")


class AttendanceSession(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """One recorded class meeting for one course.

    Attributes:
        course_id: Course the meeting belongs to.
        instructor_id: Owning teacher.
        date: When the meeting took place.
        topic: What was taught.
        records: At most one entry per student.
    """

    __tablename__ = "attendance_sessions"

    course_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("courses.id"),
        nullable=False,
        index=True,
    )
    instructor_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("users.id"),
        nullable=False,
        index=True,
    )
    date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    topic: Mapped[str] = mapped_column(String(255), nullable=False)

    records: Mapped[list["AttendanceRecord"]] = relationship(
        "AttendanceRecord",
        back_populates="session",
        cascade="all, delete-orphan",
        order_by="AttendanceRecord.position",
        lazy="selectin",
    )

    def __repr__(self) -> str:
        return f"<AttendanceSession(id={self.id}, course_id={self.course_id})>"


class AttendanceRecord(UUIDPrimaryKeyMixin, Base):
    """Presence status of one student in one session."""

    __tablename__ = "attendance_records"
    __table_args__ = (
        UniqueConstraint(
            "session_id",
            "student_id",
            name="uq_attendance_records_session_student",
        ),
        CheckConstraint(
            "status IN ('present', 'absent', 'late')",
            name="status",
        ),
    )

    session_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("attendance_sessions.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    student_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("users.id"),
        nullable=False,
        index=True,
    )
    status: Mapped[str] = mapped_column(String(10), nullable=False, default="present")
    remarks: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    session: Mapped["AttendanceSession"] = relationship(
        "AttendanceSession",
        back_populates="records",
    )
