# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Assignment service for coursework submission and grading.

This module provides the AssignmentService class for:
- Creating and deleting assignments (course instructor only)
- Student submissions, one per student and assignment
- Grading and re-grading submissions
- Assignment listings for courses and students
"""

from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from learnhub.core.config.settings import LearningPolicySettings
from learnhub.core.errors import (
    ConflictError,
    ForbiddenError,
    NotFoundError,
    ValidationError,
)
from learnhub.domains.auth.guard import ADMIN_ROLE, Caller, OwnershipGuard
from learnhub.domains.catalog.service import CourseCatalog
from learnhub.domains.enrollment.service import EnrollmentService
from learnhub.infrastructure.database.models import (
    Assignment,
    AssignmentSubmission,
    Course,
    Enrollment,
)
from learnhub.models.assignment import (
    AssignmentCreateRequest,
    AssignmentResponse,
    AssignmentSummary,
    GradeRequest,
    MySubmissionItem,
    SubmissionRequest,
    SubmissionResponse,
)
from learnhub.models.common import CourseSummary, RoleEnum
from learnhub.utils.datetime import ensure_utc, utc_now

logger = logging.getLogger(__name__)


class AssignmentServiceError(Exception):
    """Base exception for assignment service errors."""

    pass


class AssignmentNotFoundError(AssignmentServiceError, NotFoundError):
    """Raised when assignment is not found."""

    pass


class SubmissionNotFoundError(AssignmentServiceError, NotFoundError):
    """Raised when submission is not found."""

    pass


class AlreadySubmittedError(AssignmentServiceError, ConflictError):
    """Raised when the student already submitted this assignment."""

    default_reason = "already_submitted"


class NotEnrolledError(AssignmentServiceError, ForbiddenError):
    """Raised when a student submits to a course they are not enrolled in."""

    default_reason = "not_enrolled"


class ScoreOutOfRangeError(AssignmentServiceError, ValidationError):
    """Raised when a score exceeds the assignment's max_score."""

    default_reason = "score_out_of_range"


class AssignmentService:
    """Service for the assignment submit-and-grade workflow.

    Assignments are owned by their instructor_id. Admins only act on them
    when the admin_manages_coursework policy is on.

    Attributes:
        db: Async database session.
        policy: Coursework policy switches.
        guard: Role and ownership checks.
        catalog: Course lookups.
    """

    def __init__(
        self,
        db: AsyncSession,
        guard: OwnershipGuard | None = None,
        policy: LearningPolicySettings | None = None,
    ) -> None:
        """Initialize assignment service.

        Args:
            db: Async database session.
            guard: Ownership guard, built from the policy when omitted.
            policy: Coursework policy switches, read from the environment
                when omitted.
        """
        self.db = db
        self.policy = policy or LearningPolicySettings()
        self.guard = guard or OwnershipGuard(admin_override=self.policy.admin_manages_coursework)
        self.catalog = CourseCatalog(db)

    @property
    def manager_roles(self) -> tuple[str, ...]:
        """Roles allowed to create, grade and delete assignments."""
        if self.policy.admin_manages_coursework:
            return (RoleEnum.TEACHER.value, ADMIN_ROLE)
        return (RoleEnum.TEACHER.value,)

    async def create_assignment(
        self,
        caller: Caller,
        request: AssignmentCreateRequest,
    ) -> AssignmentResponse:
        """Create an assignment for a course the caller teaches.

        Args:
            caller: Authenticated teacher.
            request: Assignment data.

        Returns:
            Created assignment.

        Raises:
            ForbiddenError: On role mismatch or if the caller does not own
                the course.
            CourseNotFoundError: If course not found.
        """
        self.guard.authorize(caller, self.manager_roles)

        course = await self.catalog.get_course(request.course_id)
        self.guard.authorize(
            caller,
            self.manager_roles,
            resource=course,
            owner_field="instructor_id",
            message="Not authorized to create assignments for this course",
        )

        assignment = Assignment(
            course_id=course.id,
            instructor_id=course.instructor_id,
            title=request.title,
            description=request.description,
            due_date=request.due_date,
            max_score=request.max_score,
            resource_url=request.resource_url,
            submissions=[],
        )
        self.db.add(assignment)
        await self.db.commit()

        logger.info(
            "Created assignment: id=%s, course=%s, by=%s",
            assignment.id,
            course.id,
            caller.id,
        )

        return self._to_response(assignment)

    async def submit(
        self,
        assignment_id: str,
        caller: Caller,
        request: SubmissionRequest,
    ) -> SubmissionResponse:
        """Submit the caller's answer to an assignment.

        Args:
            assignment_id: Assignment identifier.
            caller: Authenticated student.
            request: Text and/or resource link.

        Returns:
            The stored submission.

        Raises:
            ForbiddenError: If the caller is not a student.
            AssignmentNotFoundError: If assignment not found.
            NotEnrolledError: If enrollment is required and missing.
            AlreadySubmittedError: If the caller already submitted.
        """
        self.guard.authorize(caller, (RoleEnum.STUDENT.value,))
        student_id = caller.id

        assignment = await self._get_assignment(assignment_id)

        if self.policy.submission_requires_enrollment:
            enrollments = EnrollmentService(self.db, self.guard)
            if not await enrollments.is_enrolled(student_id, assignment.course_id):
                raise NotEnrolledError("Not enrolled in this course")

        existing = await self._get_submission(assignment.id, student_id)
        if existing:
            raise AlreadySubmittedError("Already submitted")

        submission = AssignmentSubmission(
            assignment_id=assignment.id,
            student_id=student_id,
            submitted_at=utc_now(),
            text=request.text,
            resource_url=request.resource_url,
        )
        assignment.submissions.append(submission)

        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            logger.info(
                "Rejected duplicate submission: assignment=%s, student=%s",
                assignment_id,
                student_id,
            )
            raise AlreadySubmittedError("Already submitted")

        logger.info(
            "Submitted assignment: assignment=%s, student=%s",
            assignment_id,
            student_id,
        )

        return self._submission_to_response(submission)

    async def grade(
        self,
        assignment_id: str,
        submission_id: str,
        caller: Caller,
        request: GradeRequest,
    ) -> AssignmentResponse:
        """Grade (or re-grade) one submission.

        Args:
            assignment_id: Assignment identifier.
            submission_id: Submission identifier.
            caller: Authenticated teacher owning the assignment.
            request: Score and optional feedback.

        Returns:
            The assignment with all its submissions.

        Raises:
            AssignmentNotFoundError: If assignment not found.
            ForbiddenError: On role mismatch or if the caller does not own
                the assignment.
            SubmissionNotFoundError: If the submission is not part of the
                assignment.
            ScoreOutOfRangeError: If the score exceeds max_score.
        """
        self.guard.authorize(caller, self.manager_roles)

        assignment = await self._get_assignment(assignment_id, for_update=True)
        self.guard.authorize(
            caller,
            self.manager_roles,
            resource=assignment,
            owner_field="instructor_id",
        )

        submission = next(
            (s for s in assignment.submissions if s.id == str(submission_id)),
            None,
        )
        if not submission:
            raise SubmissionNotFoundError("Submission not found")

        if request.score > assignment.max_score:
            raise ScoreOutOfRangeError(
                f"Score must be between 0 and {assignment.max_score}"
            )

        submission.score = request.score
        submission.feedback = request.feedback
        submission.graded_at = utc_now()

        await self.db.commit()

        logger.info(
            "Graded submission: assignment=%s, submission=%s, score=%s, by=%s",
            assignment.id,
            submission.id,
            request.score,
            caller.id,
        )

        return self._to_response(assignment)

    async def delete_assignment(self, assignment_id: str, caller: Caller) -> None:
        """Delete an assignment and its submissions.

        Raises:
            AssignmentNotFoundError: If assignment not found.
            ForbiddenError: On role mismatch or if the caller does not own
                the assignment.
        """
        self.guard.authorize(caller, self.manager_roles)

        assignment = await self._get_assignment(assignment_id, for_update=True)
        self.guard.authorize(
            caller,
            self.manager_roles,
            resource=assignment,
            owner_field="instructor_id",
        )

        await self.db.delete(assignment)
        await self.db.commit()

        logger.info("Deleted assignment: id=%s, by=%s", assignment_id, caller.id)

    async def list_course_assignments(
        self,
        caller: Caller,
        course_id: str,
    ) -> list[AssignmentResponse]:
        """List a course's assignments, latest due date first.

        The owning instructor sees every submission; other callers only see
        their own.

        Args:
            caller: Any authenticated user.
            course_id: Course identifier.

        Returns:
            List of assignments.
        """
        self.guard.authorize(caller, ())

        result = await self.db.execute(
            select(Assignment)
            .where(Assignment.course_id == str(course_id))
            .order_by(Assignment.due_date.desc())
        )
        assignments = result.scalars().all()

        responses = []
        for assignment in assignments:
            visible_to = None if self._manages(caller, assignment) else caller.id
            responses.append(self._to_response(assignment, only_student=visible_to))
        return responses

    async def list_my_submissions(self, caller: Caller) -> list[MySubmissionItem]:
        """List assignments of the caller's courses with their own submission.

        Args:
            caller: Authenticated student.

        Returns:
            One item per assignment, latest due date first. submission is
            None where the caller has not submitted yet.
        """
        self.guard.authorize(caller, (RoleEnum.STUDENT.value,))

        enrolled_courses = select(Enrollment.course_id).where(Enrollment.student_id == caller.id)
        result = await self.db.execute(
            select(Assignment)
            .where(Assignment.course_id.in_(enrolled_courses))
            .order_by(Assignment.due_date.desc())
        )
        assignments = result.scalars().all()
        courses = await self.catalog.get_courses(a.course_id for a in assignments)

        items = []
        for assignment in assignments:
            submission = assignment.submission_for(caller.id)
            items.append(
                MySubmissionItem(
                    assignment=self._to_summary(assignment, courses.get(assignment.course_id)),
                    submission=self._submission_to_response(submission) if submission else None,
                )
            )
        return items

    # =========================================================================
    # Helper Methods
    # =========================================================================

    async def _get_assignment(self, assignment_id: str, for_update: bool = False) -> Assignment:
        """Get assignment by ID, optionally locking the row."""
        query = select(Assignment).where(Assignment.id == str(assignment_id)).execution_options(
            populate_existing=True
        )
        if for_update:
            query = query.with_for_update()
        result = await self.db.execute(query)
        assignment = result.scalar_one_or_none()

        if not assignment:
            raise AssignmentNotFoundError("Assignment not found")

        return assignment

    async def _get_submission(
        self,
        assignment_id: str,
        student_id: str,
    ) -> AssignmentSubmission | None:
        """Get a student's submission for an assignment."""
        result = await self.db.execute(
            select(AssignmentSubmission).where(
                AssignmentSubmission.assignment_id == assignment_id,
                AssignmentSubmission.student_id == student_id,
            )
        )
        return result.scalar_one_or_none()

    def _manages(self, caller: Caller, assignment: Assignment) -> bool:
        """Check whether the caller may see all submissions of an assignment."""
        return self.guard.check(
            caller,
            self.manager_roles,
            resource=assignment,
            owner_field="instructor_id",
        ).allowed

    def _to_response(
        self,
        assignment: Assignment,
        only_student: str | None = None,
    ) -> AssignmentResponse:
        """Convert assignment model to response."""
        submissions = assignment.submissions
        if only_student is not None:
            submissions = [s for s in submissions if s.student_id == only_student]

        return AssignmentResponse(
            id=assignment.id,
            course_id=assignment.course_id,
            instructor_id=assignment.instructor_id,
            title=assignment.title,
            description=assignment.description,
            due_date=ensure_utc(assignment.due_date),
            max_score=assignment.max_score,
            resource_url=assignment.resource_url,
            created_at=ensure_utc(assignment.created_at),
            submissions=[self._submission_to_response(s) for s in submissions],
        )

    def _to_summary(self, assignment: Assignment, course: Course | None) -> AssignmentSummary:
        """Convert assignment model to a summary without submissions."""
        return AssignmentSummary(
            id=assignment.id,
            title=assignment.title,
            description=assignment.description,
            due_date=ensure_utc(assignment.due_date),
            max_score=assignment.max_score,
            resource_url=assignment.resource_url,
            instructor_id=assignment.instructor_id,
            course=(
                CourseSummary(
                    id=course.id,
                    title=course.title,
                    instructor_id=course.instructor_id,
                )
                if course
                else None
            ),
        )

    def _submission_to_response(self, submission: AssignmentSubmission) -> SubmissionResponse:
        """Convert submission model to response."""
        return SubmissionResponse(
            id=submission.id,
            student_id=submission.student_id,
            submitted_at=ensure_utc(submission.submitted_at),
            text=submission.text,
            resource_url=submission.resource_url,
            score=submission.score,
            feedback=submission.feedback,
            graded_at=ensure_utc(submission.graded_at),
        )
