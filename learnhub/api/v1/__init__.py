# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""API v1 routes package.

This package contains all v1 API endpoint definitions.
Each module provides a FastAPI router for a specific domain.

Modules:
    enrollments: Enrollment, progress and roster endpoints.
    assignments: Assignment submission and grading endpoints.
    attendance: Attendance register endpoints.
"""

from fastapi import APIRouter

from learnhub.api.v1 import assignments, attendance, enrollments

# Create the main v1 router
router = APIRouter(prefix="/api/v1")

# Include domain routers
router.include_router(enrollments.router, prefix="/enrollments", tags=["Enrollments"])
router.include_router(assignments.router, prefix="/assignments", tags=["Assignments"])
router.include_router(attendance.router, prefix="/attendance", tags=["Attendance"])

__all__ = ["router"]
