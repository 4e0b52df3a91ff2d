# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""FastAPI dependency injection definitions.

This module provides dependency functions for FastAPI endpoints.
Dependencies are used to:
- Get database sessions
- Get authenticated users
- Get service instances

Example:
    @router.get("/my-courses")
    async def my_courses(
        db: DB,
        current_user: StudentUser,
    ):
        ...
"""

import logging
from typing import Annotated, AsyncGenerator

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from learnhub.api.middleware.auth import CurrentUser, get_token_payload
from learnhub.core.config import get_settings
from learnhub.core.config.settings import LearningPolicySettings
from learnhub.core.errors import UnauthenticatedError
from learnhub.domains.assignment.service import AssignmentService
from learnhub.domains.attendance.service import AttendanceService
from learnhub.domains.auth.guard import ADMIN_ROLE, OwnershipGuard
from learnhub.domains.catalog.service import CourseCatalog
from learnhub.domains.enrollment.service import EnrollmentService
from learnhub.infrastructure.database.connection import get_session
from learnhub.models.common import RoleEnum

logger = logging.getLogger(__name__)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Get database session.

    Yields:
        AsyncSession bound to the application engine.
    """
    async with get_session() as session:
        yield session


# =========================================================================
# Policy Dependencies
# =========================================================================


def get_policy() -> LearningPolicySettings:
    """Get coursework policy switches."""
    return get_settings().policy


def get_guard(
    policy: LearningPolicySettings = Depends(get_policy),
) -> OwnershipGuard:
    """Get the ownership guard configured by policy."""
    return OwnershipGuard(admin_override=policy.admin_manages_coursework)


# =========================================================================
# Authentication Dependencies
# =========================================================================


async def require_auth(
    request: Request,
    db: AsyncSession = Depends(get_db),
) -> CurrentUser:
    """Require authenticated user.

    The token only names the user; role and active flag are read from the
    users table on every request.

    Args:
        request: HTTP request.
        db: Database session.

    Returns:
        CurrentUser.

    Raises:
        UnauthenticatedError: If no valid token, or the account is unknown
            or inactive.
    """
    payload = get_token_payload(request)
    if payload is None:
        raise UnauthenticatedError("Not authenticated")

    user = await CourseCatalog(db).get_user(payload.sub)
    if user is None or not user.is_active:
        logger.info("Rejected token for unknown or inactive user: %s", payload.sub)
        raise UnauthenticatedError("Not authenticated")

    return CurrentUser.from_user(user)


class RequireRole:
    """Dependency for requiring specific roles.

    Example:
        @router.post("")
        async def create(
            user: CurrentUser = Depends(RequireRole("teacher")),
        ):
            ...
    """

    def __init__(self, *roles: str) -> None:
        """Initialize role requirement.

        Args:
            roles: Required role codes (any of these).
        """
        self.roles = roles

    def __call__(
        self,
        user: CurrentUser = Depends(require_auth),
        guard: OwnershipGuard = Depends(get_guard),
    ) -> CurrentUser:
        """Check roles and return user.

        Raises:
            ForbiddenError: If missing required roles.
        """
        guard.authorize(user, self.roles)
        return user


def require_coursework_manager(
    user: CurrentUser = Depends(require_auth),
    guard: OwnershipGuard = Depends(get_guard),
    policy: LearningPolicySettings = Depends(get_policy),
) -> CurrentUser:
    """Require a teacher, or an admin when admins manage coursework.

    Raises:
        ForbiddenError: If missing required roles.
    """
    roles = [RoleEnum.TEACHER.value]
    if policy.admin_manages_coursework:
        roles.append(ADMIN_ROLE)
    guard.authorize(user, roles)
    return user


# =========================================================================
# Service Dependencies
# =========================================================================


def get_enrollment_service(
    db: AsyncSession = Depends(get_db),
    guard: OwnershipGuard = Depends(get_guard),
) -> EnrollmentService:
    """Get EnrollmentService instance."""
    return EnrollmentService(db, guard)


def get_assignment_service(
    db: AsyncSession = Depends(get_db),
    guard: OwnershipGuard = Depends(get_guard),
    policy: LearningPolicySettings = Depends(get_policy),
) -> AssignmentService:
    """Get AssignmentService instance."""
    return AssignmentService(db, guard, policy)


def get_attendance_service(
    db: AsyncSession = Depends(get_db),
    guard: OwnershipGuard = Depends(get_guard),
    policy: LearningPolicySettings = Depends(get_policy),
) -> AttendanceService:
    """Get AttendanceService instance."""
    return AttendanceService(db, guard, policy)


# =========================================================================
# Type Aliases for Cleaner Endpoint Signatures
# =========================================================================

DB = Annotated[AsyncSession, Depends(get_db)]
AuthenticatedUser = Annotated[CurrentUser, Depends(require_auth)]
StudentUser = Annotated[CurrentUser, Depends(RequireRole(RoleEnum.STUDENT.value))]
TeacherUser = Annotated[CurrentUser, Depends(RequireRole(RoleEnum.TEACHER.value))]
CourseworkManager = Annotated[CurrentUser, Depends(require_coursework_manager)]
Enrollments = Annotated[EnrollmentService, Depends(get_enrollment_service)]
Assignments = Annotated[AssignmentService, Depends(get_assignment_service)]
Attendance = Annotated[AttendanceService, Depends(get_attendance_service)]
