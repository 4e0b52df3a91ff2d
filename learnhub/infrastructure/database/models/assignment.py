# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Assignment and submission tables."""

from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, Float, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from learnhub.infrastructure.database.models.base import (
    Base,
    TimestampMixin,
    UUIDPrimaryKeyMixin,
)
from learnhub.utils.datetime import utc_now


class Assignment(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """A graded task belonging to one course, owned by its instructor.

    Attributes:
        course_id: Course the assignment belongs to.
        instructor_id: Owning teacher.
        title: Assignment title.
        description: Instructions.
        due_date: Submission deadline.
        max_score: Highest attainable score.
        resource_url: Optional attachment.
        submissions: One row per submitting student.
    """

    __tablename__ = "assignments"

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
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    due_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    max_score: Mapped[int] = mapped_column(Integer, nullable=False, default=100)
    resource_url: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)

    submissions: Mapped[list["AssignmentSubmission"]] = relationship(
        "AssignmentSubmission",
        back_populates="assignment",
        cascade="all, delete-orphan",
        order_by="AssignmentSubmission.submitted_at",
        lazy="selectin",
    )

    def submission_for(self, student_id: str) -> Optional["AssignmentSubmission"]:
        """Return the given student's submission, if any."""
        for submission in self.submissions:
            if submission.student_id == student_id:
                return submission
        return None

    def __repr__(self) -> str:
        return f"<Assignment(id={self.id}, course_id={self.course_id})>"


class AssignmentSubmission(UUIDPrimaryKeyMixin, Base):
    """One student's single attempt at an assignment.

    (assignment_id, student_id) is unique at the storage layer so two
    simultaneous submit calls cannot both append.

    Attributes:
        assignment_id: Parent assignment.
        student_id: Submitting student.
        submitted_at: Submission time.
        text: Free-text answer.
        resource_url: Link to an uploaded answer.
        score: Set by grading.
        feedback: Set by grading.
        graded_at: Time of the latest grading.
    """

    __tablename__ = "assignment_submissions"
    __table_args__ = (
        UniqueConstraint(
            "assignment_id",
            "student_id",
            name="uq_assignment_submissions_assignment_student",
        ),
    )

    assignment_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("assignments.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    student_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("users.id"),
        nullable=False,
        index=True,
    )
    submitted_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utc_now,
        nullable=False,
    )
    text: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    resource_url: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    score: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    feedback: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    graded_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)

    assignment: Mapped["Assignment"] = relationship("Assignment", back_populates="submissions")

    def __repr__(self) -> str:
        return f"<AssignmentSubmission(id={self.id}, student_id={self.student_id})>"
