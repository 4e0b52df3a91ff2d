# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Attendance API endpoints.

This module provides endpoints for the attendance register:
- POST / - Record a session (course instructor)
- GET /course/{course_id} - List a course's sessions
- GET /my-attendance - List the caller's attendance
- GET /{session_id} - Get one session
- PUT /{session_id} - Replace roster and/or topic (instructor)
- DELETE /{session_id} - Delete a session (instructor)
"""

import logging

from fastapi import APIRouter, status

from learnhub.api.dependencies import (
    Attendance,
    AuthenticatedUser,
    CourseworkManager,
    StudentUser,
)
from learnhub.models.attendance import (
    AttendanceCreateRequest,
    AttendancePatch,
    AttendanceSessionResponse,
    MyAttendanceItem,
)
from learnhub.models.common import MessageResponse, SuccessResponse

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "",
    response_model=SuccessResponse[AttendanceSessionResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Record attendance",
    description="Record a class meeting and its roster. Course instructor only.",
)
async def create_session(
    data: AttendanceCreateRequest,
    current_user: CourseworkManager,
    service: Attendance,
) -> SuccessResponse[AttendanceSessionResponse]:
    """Record a class meeting.

    Args:
        data: Session data and roster.
        current_user: Authenticated instructor.
        service: Attendance service.

    Returns:
        Created session.
    """
    logger.info(
        "Recording attendance: course=%s, records=%d, by=%s",
        data.course_id,
        len(data.records),
        current_user.id,
    )

    session = await service.create_session(current_user, data)
    return SuccessResponse(message="Attendance recorded", data=session)


@router.get(
    "/course/{course_id}",
    response_model=SuccessResponse[list[AttendanceSessionResponse]],
    summary="List course attendance",
)
async def list_course_sessions(
    course_id: str,
    current_user: AuthenticatedUser,
    service: Attendance,
) -> SuccessResponse[list[AttendanceSessionResponse]]:
    """List a course's sessions, newest first."""
    sessions = await service.list_course_sessions(course_id)
    return SuccessResponse(data=sessions)


@router.get(
    "/my-attendance",
    response_model=SuccessResponse[list[MyAttendanceItem]],
    summary="List my attendance",
)
async def my_attendance(
    current_user: StudentUser,
    service: Attendance,
) -> SuccessResponse[list[MyAttendanceItem]]:
    """List the caller's status per session."""
    items = await service.list_my_attendance(current_user)
    return SuccessResponse(data=items)


@router.get(
    "/{session_id}",
    response_model=SuccessResponse[AttendanceSessionResponse],
    summary="Get attendance session",
)
async def get_session(
    session_id: str,
    current_user: AuthenticatedUser,
    service: Attendance,
) -> SuccessResponse[AttendanceSessionResponse]:
    """Get one session with its roster."""
    session = await service.get_session(session_id)
    return SuccessResponse(data=session)


@router.put(
    "/{session_id}",
    response_model=SuccessResponse[AttendanceSessionResponse],
    summary="Update attendance",
    description="A supplied roster replaces the stored one wholesale.",
)
async def update_session(
    session_id: str,
    data: AttendancePatch,
    current_user: CourseworkManager,
    service: Attendance,
) -> SuccessResponse[AttendanceSessionResponse]:
    """Replace a session's roster and/or topic."""
    session = await service.update_session(session_id, current_user, data)
    return SuccessResponse(message="Attendance updated successfully", data=session)


@router.delete(
    "/{session_id}",
    response_model=MessageResponse,
    summary="Delete attendance",
)
async def delete_session(
    session_id: str,
    current_user: CourseworkManager,
    service: Attendance,
) -> MessageResponse:
    """Delete a session and its records."""
    await service.delete_session(session_id, current_user)
    return MessageResponse(message="Attendance record deleted successfully")
