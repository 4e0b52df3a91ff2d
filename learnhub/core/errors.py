# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Error taxonomy shared by every LearnHub domain.

Each domain service declares its own exception hierarchy and mixes in one of
the kinds below. The API layer renders any LearnHubError in the standard
failure envelope using the kind's status code and error code, so the mapping
lives in one place.

Example:
    >>> class CourseNotFoundError(CatalogError, NotFoundError):
    ...     pass
    >>> CourseNotFoundError("Course not found").status_code
    404
"""

from __future__ import annotations


class LearnHubError(Exception):
    """Base exception for all domain failures.

    Attributes:
        message: Human-readable error description.
        reason: Optional machine-checkable sub-cause (e.g. "ownership").
        status_code: HTTP status the API layer answers with.
        error_code: Stable error kind exposed to clients.
    """

    status_code: int = 500
    error_code: str = "INTERNAL"
    default_reason: str | None = None

    def __init__(self, message: str, reason: str | None = None) -> None:
        """Initialize the error.

        Args:
            message: Human-readable error description.
            reason: Optional sub-cause, defaults to the class default.
        """
        super().__init__(message)
        self.message = message
        self.reason = reason or self.default_reason


class UnauthenticatedError(LearnHubError):
    """Raised when no valid caller identity is attached to the request."""

    status_code = 401
    error_code = "UNAUTHENTICATED"


class ForbiddenError(LearnHubError):
    """Raised on a role mismatch or an ownership mismatch."""

    status_code = 403
    error_code = "FORBIDDEN"


class NotFoundError(LearnHubError):
    """Raised when a referenced entity does not exist."""

    status_code = 404
    error_code = "NOT_FOUND"


class ConflictError(LearnHubError):
    """Raised when a uniqueness invariant would be violated."""

    status_code = 409
    error_code = "CONFLICT"


class ValidationError(LearnHubError):
    """Raised for malformed input that passed schema validation."""

    status_code = 400
    error_code = "VALIDATION"


class InternalError(LearnHubError):
    """Raised for unexpected failures, e.g. storage errors."""

    status_code = 500
    error_code = "INTERNAL"
