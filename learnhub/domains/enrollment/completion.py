# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Course completion evaluation.

An enrollment moves IN_PROGRESS -> COMPLETED the first time its progress
reaches 100. Completion stamps completed_at and issues the certificate in
the same step; neither is ever undone, even if progress later drops.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

COMPLETION_THRESHOLD = 100


class CompletionState(str, Enum):
    """Lifecycle of an enrollment's completion flags."""

    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


@dataclass(frozen=True)
class CompletionOutcome:
    """Completion fields to store after a progress change.

    Attributes:
        completed_at: Completion time, or None while in progress.
        certificate_issued: Always equal to completed_at is not None.
        newly_completed: True only on the call that completed the course.
    """

    completed_at: datetime | None
    certificate_issued: bool
    newly_completed: bool = False


def evaluate_completion(
    progress: int,
    completed_at: datetime | None,
    now: datetime,
) -> CompletionOutcome:
    """Evaluate completion for the given progress.

    Args:
        progress: Current progress percentage.
        completed_at: Stored completion time, if any.
        now: Timestamp to stamp on first completion.

    Returns:
        CompletionOutcome with the values to persist.
    """
    if completed_at is not None:
        return CompletionOutcome(completed_at=completed_at, certificate_issued=True)

    if progress >= COMPLETION_THRESHOLD:
        return CompletionOutcome(
            completed_at=now,
            certificate_issued=True,
            newly_completed=True,
        )

    return CompletionOutcome(completed_at=None, certificate_issued=False)


def completion_state(completed_at: datetime | None) -> CompletionState:
    """Report the lifecycle state for a stored completed_at."""
    if completed_at is None:
        return CompletionState.IN_PROGRESS
    return CompletionState.COMPLETED
