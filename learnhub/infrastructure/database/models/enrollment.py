# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Enrollment ledger tables."""

from datetime import datetime
from typing import Optional

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Integer,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from learnhub.infrastructure.database.models.base import Base, UUIDPrimaryKeyMixin
from learnhub.utils.datetime import utc_now


class Enrollment(UUIDPrimaryKeyMixin, Base):
    """One student's relationship to one course.

    The (student_id, course_id) pair is unique at the storage layer; it is
    the guard against two concurrent enroll requests both succeeding.

    Attributes:
        student_id: Enrolled student.
        course_id: Course enrolled in.
        progress: Percentage 0..100 reported by the client.
        last_accessed_video_id: Most recent video reported.
        enrolled_at: Enrollment time.
        completed_at: Set once when progress first reaches 100.
        certificate_issued: True iff completed_at is set.
        videos: Completed videos, in the order they were reported.
    """

    __tablename__ = "enrollments"
    __table_args__ = (
        UniqueConstraint("student_id", "course_id", name="uq_enrollments_student_course"),
        CheckConstraint("progress >= 0 AND progress <= 100", name="progress_range"),
        CheckConstraint(
            "(completed_at IS NULL AND certificate_issued = false) "
            "OR (completed_at IS NOT NULL AND certificate_issued = true)",
            name="certificate_matches_completion",
        ),
    )

    student_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("users.id"),
        nullable=False,
        index=True,
    )
    course_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("courses.id"),
        nullable=False,
        index=True,
    )
    progress: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    last_accessed_video_id: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    enrolled_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utc_now,
        nullable=False,
    )
    completed_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )
    certificate_issued: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    videos: Mapped[list["EnrollmentVideo"]] = relationship(
        "EnrollmentVideo",
        back_populates="enrollment",
        cascade="all, delete-orphan",
        order_by="EnrollmentVideo.position",
        lazy="selectin",
    )

    @property
    def completed_video_ids(self) -> list[str]:
        """Completed video identifiers in reporting order."""
        return [video.video_id for video in self.videos]

    def __repr__(self) -> str:
        return f"<Enrollment(id={self.id}, student_id={self.student_id}, course_id={self.course_id})>"


class EnrollmentVideo(Base):
    """Membership of one video in an enrollment's completed set.

    The composite primary key makes the set idempotent at the storage layer.
    """

    __tablename__ = "enrollment_videos"

    enrollment_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("enrollments.id", ondelete="CASCADE"),
        primary_key=True,
    )
    video_id: Mapped[str] = mapped_column(String(64), primary_key=True)
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    completed_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utc_now,
        nullable=False,
    )

    enrollment: Mapped["Enrollment"] = relationship("Enrollment", back_populates="videos")
