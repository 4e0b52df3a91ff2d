# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Assignment API endpoints.

This module provides endpoints for the assignment workflow:
- POST / - Create an assignment (course instructor)
- GET /course/{course_id} - List a course's assignments
- GET /my-submissions - List the caller's assignments and submissions
- POST /{assignment_id}/submit - Submit an answer (student)
- PUT /{assignment_id}/grade/{submission_id} - Grade a submission (instructor)
- DELETE /{assignment_id} - Delete an assignment (instructor)
"""

import logging

from fastapi import APIRouter, status

from learnhub.api.dependencies import (
    Assignments,
    AuthenticatedUser,
    CourseworkManager,
    StudentUser,
)
from learnhub.models.assignment import (
    AssignmentCreateRequest,
    AssignmentResponse,
    GradeRequest,
    MySubmissionItem,
    SubmissionRequest,
    SubmissionResponse,
)
from learnhub.models.common import MessageResponse, SuccessResponse

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "",
    response_model=SuccessResponse[AssignmentResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Create assignment",
    description="Create an assignment for a course. Course instructor only.",
)
async def create_assignment(
    data: AssignmentCreateRequest,
    current_user: CourseworkManager,
    service: Assignments,
) -> SuccessResponse[AssignmentResponse]:
    """Create an assignment.

    Args:
        data: Assignment creation request.
        current_user: Authenticated instructor.
        service: Assignment service.

    Returns:
        Created assignment.
    """
    logger.info("Creating assignment: course=%s, by=%s", data.course_id, current_user.id)

    assignment = await service.create_assignment(current_user, data)
    return SuccessResponse(message="Assignment created", data=assignment)


@router.get(
    "/course/{course_id}",
    response_model=SuccessResponse[list[AssignmentResponse]],
    summary="List course assignments",
)
async def list_course_assignments(
    course_id: str,
    current_user: AuthenticatedUser,
    service: Assignments,
) -> SuccessResponse[list[AssignmentResponse]]:
    """List a course's assignments, latest due date first."""
    assignments = await service.list_course_assignments(current_user, course_id)
    return SuccessResponse(data=assignments)


@router.get(
    "/my-submissions",
    response_model=SuccessResponse[list[MySubmissionItem]],
    summary="List my submissions",
    description="Assignments of every enrolled course with the caller's submission, if any.",
)
async def my_submissions(
    current_user: StudentUser,
    service: Assignments,
) -> SuccessResponse[list[MySubmissionItem]]:
    """List the caller's assignments and submissions."""
    items = await service.list_my_submissions(current_user)
    return SuccessResponse(data=items)


@router.post(
    "/{assignment_id}/submit",
    response_model=SuccessResponse[SubmissionResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Submit assignment",
)
async def submit_assignment(
    assignment_id: str,
    data: SubmissionRequest,
    current_user: StudentUser,
    service: Assignments,
) -> SuccessResponse[SubmissionResponse]:
    """Submit the caller's answer. One submission per student."""
    submission = await service.submit(assignment_id, current_user, data)
    return SuccessResponse(message="Assignment submitted successfully", data=submission)


@router.put(
    "/{assignment_id}/grade/{submission_id}",
    response_model=SuccessResponse[AssignmentResponse],
    summary="Grade submission",
    description="Set score and feedback on a submission. Repeatable.",
)
async def grade_submission(
    assignment_id: str,
    submission_id: str,
    data: GradeRequest,
    current_user: CourseworkManager,
    service: Assignments,
) -> SuccessResponse[AssignmentResponse]:
    """Grade a submission.

    Args:
        assignment_id: Assignment identifier.
        submission_id: Submission identifier.
        data: Score and feedback.
        current_user: Authenticated instructor.
        service: Assignment service.

    Returns:
        The assignment with its submissions.
    """
    assignment = await service.grade(assignment_id, submission_id, current_user, data)
    return SuccessResponse(message="Assignment graded successfully", data=assignment)


@router.delete(
    "/{assignment_id}",
    response_model=MessageResponse,
    summary="Delete assignment",
)
async def delete_assignment(
    assignment_id: str,
    current_user: CourseworkManager,
    service: Assignments,
) -> MessageResponse:
    """Delete an assignment and its submissions."""
    await service.delete_assignment(assignment_id, current_user)
    return MessageResponse(message="Assignment deleted successfully")
