# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Enrollment request and response models."""

from datetime import datetime

from pydantic import BaseModel, Field

from learnhub.models.common import CourseSummary


class EnrollRequest(BaseModel):
    """Request to enroll the calling student in a course."""

    course_id: str = Field(min_length=1, description="Course to enroll in")


class ProgressUpdateRequest(BaseModel):
    """Partial progress update.

    Each field is applied only when present: video_id joins the completed
    set and becomes the last accessed video; progress replaces the stored
    percentage.
    """

    video_id: str | None = Field(default=None, min_length=1, max_length=64)
    progress: int | None = Field(default=None, ge=0, le=100)


class EnrollmentResponse(BaseModel):
    """Enrollment details."""

    id: str
    student_id: str
    course_id: str
    progress: int
    completed_video_ids: list[str]
    last_accessed_video_id: str | None = None
    enrolled_at: datetime
    completed_at: datetime | None = None
    certificate_issued: bool
    course: CourseSummary | None = None
