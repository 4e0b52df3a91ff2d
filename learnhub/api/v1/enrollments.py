# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Enrollment API endpoints.

This module provides endpoints for course enrollment and progress:
- POST / - Enroll the calling student in a course
- GET /my-courses - List the caller's enrollments
- GET /course/{course_id} - Get the caller's enrollment in a course
- PUT /{enrollment_id}/progress - Report video completion and progress
- GET /course/{course_id}/students - List a course's students (instructor)
"""

import logging

from fastapi import APIRouter, status

from learnhub.api.dependencies import Enrollments, StudentUser, TeacherUser
from learnhub.models.common import StudentSummary, SuccessResponse
from learnhub.models.enrollment import (
    EnrollmentResponse,
    EnrollRequest,
    ProgressUpdateRequest,
)

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "",
    response_model=SuccessResponse[EnrollmentResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Enroll in course",
    description="Enroll the calling student in a course.",
)
async def enroll(
    data: EnrollRequest,
    current_user: StudentUser,
    service: Enrollments,
) -> SuccessResponse[EnrollmentResponse]:
    """Enroll in a course.

    Args:
        data: Enrollment request.
        current_user: Authenticated student.
        service: Enrollment service.

    Returns:
        Created enrollment.
    """
    logger.info("Enrolling: student=%s, course=%s", current_user.id, data.course_id)

    enrollment = await service.enroll(current_user, data)
    return SuccessResponse(message="Enrolled successfully", data=enrollment)


@router.get(
    "/my-courses",
    response_model=SuccessResponse[list[EnrollmentResponse]],
    summary="List my enrollments",
)
async def my_courses(
    current_user: StudentUser,
    service: Enrollments,
) -> SuccessResponse[list[EnrollmentResponse]]:
    """List the caller's enrollments, newest first."""
    enrollments = await service.list_my_enrollments(current_user)
    return SuccessResponse(data=enrollments)


@router.get(
    "/course/{course_id}",
    response_model=SuccessResponse[EnrollmentResponse],
    summary="Get my enrollment in a course",
)
async def get_course_enrollment(
    course_id: str,
    current_user: StudentUser,
    service: Enrollments,
) -> SuccessResponse[EnrollmentResponse]:
    """Get the caller's enrollment in one course."""
    enrollment = await service.get_course_enrollment(current_user, course_id)
    return SuccessResponse(data=enrollment)


@router.put(
    "/{enrollment_id}/progress",
    response_model=SuccessResponse[EnrollmentResponse],
    summary="Update progress",
    description="Record a completed video and/or a new progress percentage. "
    "Reaching 100 completes the course and issues the certificate.",
)
async def update_progress(
    enrollment_id: str,
    data: ProgressUpdateRequest,
    current_user: StudentUser,
    service: Enrollments,
) -> SuccessResponse[EnrollmentResponse]:
    """Update progress on one of the caller's enrollments.

    Args:
        enrollment_id: Enrollment identifier.
        data: Progress update.
        current_user: Authenticated student.
        service: Enrollment service.

    Returns:
        Updated enrollment.
    """
    enrollment = await service.update_progress(enrollment_id, current_user, data)
    return SuccessResponse(message="Progress updated", data=enrollment)


@router.get(
    "/course/{course_id}/students",
    response_model=SuccessResponse[list[StudentSummary]],
    summary="List course students",
    description="List students enrolled in a course. Course instructor only.",
)
async def list_course_students(
    course_id: str,
    current_user: TeacherUser,
    service: Enrollments,
) -> SuccessResponse[list[StudentSummary]]:
    """List students enrolled in a course the caller teaches."""
    students = await service.list_course_students(current_user, course_id)
    return SuccessResponse(data=students)
