# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Assignment domain: submission and grading workflow."""

from learnhub.domains.assignment.service import (
    AlreadySubmittedError,
    AssignmentNotFoundError,
    AssignmentService,
    AssignmentServiceError,
    NotEnrolledError,
    ScoreOutOfRangeError,
    SubmissionNotFoundError,
)

__all__ = [
    "AlreadySubmittedError",
    "AssignmentNotFoundError",
    "AssignmentService",
    "AssignmentServiceError",
    "NotEnrolledError",
    "ScoreOutOfRangeError",
    "SubmissionNotFoundError",
]
