# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Enrollment domain: ledger, progress and completion."""

from learnhub.domains.enrollment.completion import (
    CompletionOutcome,
    CompletionState,
    completion_state,
    evaluate_completion,
)
from learnhub.domains.enrollment.service import (
    AlreadyEnrolledError,
    EnrollmentNotFoundError,
    EnrollmentService,
    EnrollmentServiceError,
)

__all__ = [
    "CompletionOutcome",
    "CompletionState",
    "completion_state",
    "evaluate_completion",
    "AlreadyEnrolledError",
    "EnrollmentNotFoundError",
    "EnrollmentService",
    "EnrollmentServiceError",
]
