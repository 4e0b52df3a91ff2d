# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Assignment, submission and grading models."""

from datetime import datetime
from typing import Self

from pydantic import BaseModel, Field, model_validator

from learnhub.models.common import CourseSummary


class AssignmentCreateRequest(BaseModel):
    """Request to create an assignment for a course."""

    course_id: str = Field(min_length=1)
    title: str = Field(min_length=1, max_length=200)
    description: str = Field(min_length=1)
    due_date: datetime
    max_score: int = Field(default=100, gt=0)
    resource_url: str | None = Field(default=None, max_length=500)


class SubmissionRequest(BaseModel):
    """A student's answer: free text, a link, or both."""

    text: str | None = None
    resource_url: str | None = Field(default=None, max_length=500)

    @model_validator(mode="after")
    def require_content(self) -> Self:
        """Reject empty submissions."""
        if not (self.text and self.text.strip()) and not self.resource_url:
            raise ValueError("A submission needs text or a resource_url")
        return self


class GradeRequest(BaseModel):
    """Score and feedback for one submission."""

    score: float = Field(ge=0)
    feedback: str | None = None


class SubmissionResponse(BaseModel):
    """Submission details."""

    id: str
    student_id: str
    submitted_at: datetime
    text: str | None = None
    resource_url: str | None = None
    score: float | None = None
    feedback: str | None = None
    graded_at: datetime | None = None


class AssignmentResponse(BaseModel):
    """Assignment details with its submissions."""

    id: str
    course_id: str
    instructor_id: str
    title: str
    description: str
    due_date: datetime
    max_score: int
    resource_url: str | None = None
    created_at: datetime
    submissions: list[SubmissionResponse] = Field(default_factory=list)


class AssignmentSummary(BaseModel):
    """Assignment details without other students' submissions."""

    id: str
    title: str
    description: str
    due_date: datetime
    max_score: int
    resource_url: str | None = None
    instructor_id: str
    course: CourseSummary | None = None


class MySubmissionItem(BaseModel):
    """One assignment of an enrolled course with the caller's submission."""

    assignment: AssignmentSummary
    submission: SubmissionResponse | None = None
