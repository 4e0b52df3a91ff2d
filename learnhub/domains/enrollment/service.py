# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Enrollment service for managing student course enrollments.

This module provides the EnrollmentService class for:
- Student enrollment in courses
- Video and percentage progress tracking
- Completion and certificate issuance
- Enrollment and roster listings
"""

from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from learnhub.core.errors import ConflictError, NotFoundError
from learnhub.domains.auth.guard import Caller, OwnershipGuard
from learnhub.domains.catalog.service import CourseCatalog
from learnhub.domains.enrollment.completion import evaluate_completion
from learnhub.infrastructure.database.models import Course, Enrollment, EnrollmentVideo
from learnhub.models.common import CourseSummary, RoleEnum, StudentSummary
from learnhub.models.enrollment import (
    EnrollmentResponse,
    EnrollRequest,
    ProgressUpdateRequest,
)
from learnhub.utils.datetime import ensure_utc, utc_now

logger = logging.getLogger(__name__)

STUDENT_ONLY = (RoleEnum.STUDENT.value,)
TEACHER_ONLY = (RoleEnum.TEACHER.value,)


class EnrollmentServiceError(Exception):
    """Base exception for enrollment service errors."""

    pass


class AlreadyEnrolledError(EnrollmentServiceError, ConflictError):
    """Raised when student is already enrolled in the course."""

    default_reason = "already_enrolled"


class EnrollmentNotFoundError(EnrollmentServiceError, NotFoundError):
    """Raised when enrollment is not found."""

    pass


class EnrollmentService:
    """Service for managing student enrollments.

    This service handles enrolling, progress updates and the completion
    transition. Every read-modify-write runs in the caller's transaction
    under a row lock.

    Attributes:
        db: Async database session.
        guard: Role and ownership checks.
        catalog: Course and user lookups.
    """

    def __init__(self, db: AsyncSession, guard: OwnershipGuard | None = None) -> None:
        """Initialize enrollment service.

        Args:
            db: Async database session.
            guard: Ownership guard, a default one is created when omitted.
        """
        self.db = db
        self.guard = guard or OwnershipGuard()
        self.catalog = CourseCatalog(db)

    async def enroll(self, caller: Caller, request: EnrollRequest) -> EnrollmentResponse:
        """Enroll the calling student in a course.

        The enrollment row and the course's enrollment_count increment are
        committed together. The unique (student_id, course_id) constraint
        decides concurrent attempts; the loser gets AlreadyEnrolledError and
        leaves the count untouched.

        Args:
            caller: Authenticated student.
            request: Enrollment request data.

        Returns:
            Enrollment response.

        Raises:
            ForbiddenError: If the caller is not a student.
            CourseNotFoundError: If course not found.
            AlreadyEnrolledError: If student already enrolled.
        """
        self.guard.authorize(caller, STUDENT_ONLY)

        course = await self.catalog.get_course(request.course_id)
        course_id = course.id
        student_id = caller.id

        existing = await self._get_enrollment(student_id, course_id)
        if existing:
            raise AlreadyEnrolledError("Already enrolled in this course")

        enrollment = Enrollment(
            student_id=student_id,
            course_id=course_id,
            progress=0,
            enrolled_at=utc_now(),
            certificate_issued=False,
            videos=[],
        )
        self.db.add(enrollment)

        try:
            await self.db.flush()
            await self.catalog.increment_enrollment_count(course_id)
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            logger.info(
                "Rejected duplicate enrollment: student=%s, course=%s",
                student_id,
                course_id,
            )
            raise AlreadyEnrolledError("Already enrolled in this course")

        logger.info(
            "Enrolled student: student=%s, course=%s",
            student_id,
            course_id,
        )

        return self._to_response(enrollment, course)

    async def update_progress(
        self,
        enrollment_id: str,
        caller: Caller,
        request: ProgressUpdateRequest,
    ) -> EnrollmentResponse:
        """Record video completion and/or a new progress percentage.

        Args:
            enrollment_id: Enrollment identifier.
            caller: Authenticated student owning the enrollment.
            request: Fields to merge; absent fields are left untouched.

        Returns:
            Updated enrollment response.

        Raises:
            ForbiddenError: If the caller is not a student.
            EnrollmentNotFoundError: If the caller has no such enrollment.
        """
        self.guard.authorize(caller, STUDENT_ONLY)

        result = await self.db.execute(
            select(Enrollment)
            .where(
                Enrollment.id == str(enrollment_id),
                Enrollment.student_id == caller.id,
            )
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        enrollment = result.scalar_one_or_none()
        if not enrollment:
            raise EnrollmentNotFoundError("Enrollment not found")

        now = utc_now()

        if request.video_id is not None:
            if request.video_id not in enrollment.completed_video_ids:
                enrollment.videos.append(
                    EnrollmentVideo(
                        video_id=request.video_id,
                        position=len(enrollment.videos),
                        completed_at=now,
                    )
                )
            enrollment.last_accessed_video_id = request.video_id

        if request.progress is not None:
            enrollment.progress = request.progress

        outcome = evaluate_completion(
            enrollment.progress,
            ensure_utc(enrollment.completed_at),
            now,
        )
        enrollment.completed_at = outcome.completed_at
        enrollment.certificate_issued = outcome.certificate_issued

        await self.db.commit()

        if outcome.newly_completed:
            logger.info(
                "Course completed, certificate issued: enrollment=%s, student=%s, course=%s",
                enrollment.id,
                caller.id,
                enrollment.course_id,
            )
        else:
            logger.debug(
                "Updated progress: enrollment=%s, progress=%s",
                enrollment.id,
                enrollment.progress,
            )

        return self._to_response(enrollment)

    async def list_my_enrollments(self, caller: Caller) -> list[EnrollmentResponse]:
        """List the caller's enrollments, newest first.

        Args:
            caller: Authenticated student.

        Returns:
            List of enrollment responses with course summaries.
        """
        self.guard.authorize(caller, STUDENT_ONLY)

        result = await self.db.execute(
            select(Enrollment)
            .where(Enrollment.student_id == caller.id)
            .order_by(Enrollment.enrolled_at.desc())
        )
        enrollments = result.scalars().all()
        courses = await self.catalog.get_courses(e.course_id for e in enrollments)

        return [self._to_response(e, courses.get(e.course_id)) for e in enrollments]

    async def get_course_enrollment(self, caller: Caller, course_id: str) -> EnrollmentResponse:
        """Get the caller's enrollment in one course.

        Raises:
            EnrollmentNotFoundError: If the caller is not enrolled.
        """
        self.guard.authorize(caller, STUDENT_ONLY)

        enrollment = await self._get_enrollment(caller.id, str(course_id))
        if not enrollment:
            raise EnrollmentNotFoundError("Enrollment not found")

        course = await self.catalog.find_course(enrollment.course_id)
        return self._to_response(enrollment, course)

    async def list_course_students(self, caller: Caller, course_id: str) -> list[StudentSummary]:
        """List the students enrolled in a course the caller teaches.

        Args:
            caller: Authenticated teacher.
            course_id: Course identifier.

        Returns:
            Students in enrollment order.

        Raises:
            CourseNotFoundError: If course not found.
            ForbiddenError: If the caller does not own the course.
        """
        self.guard.authorize(caller, TEACHER_ONLY)

        course = await self.catalog.get_course(course_id)
        self.guard.authorize(
            caller,
            TEACHER_ONLY,
            resource=course,
            owner_field="instructor_id",
            message="Not authorized to access this course students",
        )

        result = await self.db.execute(
            select(Enrollment.student_id)
            .where(Enrollment.course_id == course.id)
            .order_by(Enrollment.enrolled_at)
        )
        student_ids = list(result.scalars().all())
        users = await self.catalog.get_users(student_ids)

        return [
            StudentSummary(id=user.id, name=user.name, email=user.email)
            for user in (users.get(student_id) for student_id in student_ids)
            if user is not None
        ]

    async def is_enrolled(self, student_id: str, course_id: str) -> bool:
        """Check whether a student is enrolled in a course."""
        return await self._get_enrollment(str(student_id), str(course_id)) is not None

    # =========================================================================
    # Helper Methods
    # =========================================================================

    async def _get_enrollment(self, student_id: str, course_id: str) -> Enrollment | None:
        """Get enrollment record by student and course."""
        result = await self.db.execute(
            select(Enrollment)
            .options(selectinload(Enrollment.videos))
            .where(
                Enrollment.student_id == student_id,
                Enrollment.course_id == course_id,
            )
        )
        return result.scalar_one_or_none()

    def _to_response(
        self,
        enrollment: Enrollment,
        course: Course | None = None,
    ) -> EnrollmentResponse:
        """Convert enrollment model to response."""
        return EnrollmentResponse(
            id=enrollment.id,
            student_id=enrollment.student_id,
            course_id=enrollment.course_id,
            progress=enrollment.progress,
            completed_video_ids=enrollment.completed_video_ids,
            last_accessed_video_id=enrollment.last_accessed_video_id,
            enrolled_at=ensure_utc(enrollment.enrolled_at),
            completed_at=ensure_utc(enrollment.completed_at),
            certificate_issued=enrollment.certificate_issued,
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
