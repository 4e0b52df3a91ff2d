# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Attendance service for recording class meetings.

This module provides the AttendanceService class for:
- Recording a session with its roster (course instructor only)
- Replacing a session's roster and topic
- Deleting sessions
- Session listings for courses and students
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from learnhub.core.config.settings import LearningPolicySettings
from learnhub.core.errors import NotFoundError, ValidationError
from learnhub.domains.auth.guard import ADMIN_ROLE, Caller, OwnershipGuard
from learnhub.domains.catalog.service import CourseCatalog
from learnhub.infrastructure.database.models import (
    ATTENDANCE_STATUSES,
    AttendanceRecord,
    AttendanceSession,
    Course,
)
from learnhub.models.attendance import (
    AttendanceCreateRequest,
    AttendancePatch,
    AttendanceRecordInput,
    AttendanceRecordResponse,
    AttendanceSessionResponse,
    MyAttendanceItem,
)
from learnhub.models.common import CourseSummary, RoleEnum
from learnhub.utils.datetime import ensure_utc, utc_now

logger = logging.getLogger(__name__)


class AttendanceServiceError(Exception):
    """Base exception for attendance service errors."""

    pass


class AttendanceSessionNotFoundError(AttendanceServiceError, NotFoundError):
    """Raised when attendance session is not found."""

    pass


class InvalidRosterError(AttendanceServiceError, ValidationError):
    """Raised when a roster is malformed."""

    pass


class AttendanceService:
    """Service for the attendance register.

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
        """Initialize attendance service.

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
        """Roles allowed to record, edit and delete sessions."""
        if self.policy.admin_manages_coursework:
            return (RoleEnum.TEACHER.value, ADMIN_ROLE)
        return (RoleEnum.TEACHER.value,)

    async def create_session(
        self,
        caller: Caller,
        request: AttendanceCreateRequest,
    ) -> AttendanceSessionResponse:
        """Record a class meeting for a course the caller teaches.

        Args:
            caller: Authenticated teacher.
            request: Session data and initial roster.

        Returns:
            Created session.

        Raises:
            ForbiddenError: On role mismatch or if the caller does not own
                the course.
            CourseNotFoundError: If course not found.
            InvalidRosterError: If the roster names a student twice, uses an
                unknown status, or names a student with no account.
        """
        self.guard.authorize(caller, self.manager_roles)

        course = await self.catalog.get_course(request.course_id)
        self.guard.authorize(
            caller,
            self.manager_roles,
            resource=course,
            owner_field="instructor_id",
            message="Not authorized to manage attendance for this course",
        )

        records = await self._build_records(request.records)
        course_id = course.id

        session = AttendanceSession(
            course_id=course_id,
            instructor_id=course.instructor_id,
            date=request.date,
            topic=request.topic,
            records=records,
        )
        self.db.add(session)

        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            logger.info("Rejected attendance roster: course=%s", course_id)
            raise InvalidRosterError(
                "Roster references an unknown student",
                reason="unknown_student",
            )

        logger.info(
            "Recorded attendance: session=%s, course=%s, records=%d, by=%s",
            session.id,
            course_id,
            len(records),
            caller.id,
        )

        return self._to_response(session)

    async def update_session(
        self,
        session_id: str,
        caller: Caller,
        patch: AttendancePatch,
    ) -> AttendanceSessionResponse:
        """Replace a session's roster and/or topic.

        A supplied roster replaces the stored one wholesale: after the call
        the session holds exactly the supplied records.

        Args:
            session_id: Session identifier.
            caller: Authenticated teacher owning the session.
            patch: Fields to replace; absent fields are left untouched.

        Returns:
            Updated session.

        Raises:
            AttendanceSessionNotFoundError: If session not found.
            ForbiddenError: On role mismatch or if the caller does not own
                the session.
            InvalidRosterError: If the roster is malformed.
        """
        self.guard.authorize(caller, self.manager_roles)

        session = await self._get_session(session_id, for_update=True)
        self.guard.authorize(
            caller,
            self.manager_roles,
            resource=session,
            owner_field="instructor_id",
        )

        records = None
        if patch.records is not None:
            records = await self._build_records(patch.records)

        try:
            if records is not None:
                # Old rows must be gone before the new ones hit the unique index.
                session.records.clear()
                await self.db.flush()
                session.records.extend(records)

            if patch.topic is not None:
                session.topic = patch.topic

            if records is not None or patch.topic is not None:
                # onupdate does not fire for a roster-only change.
                session.updated_at = utc_now()

            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            logger.info("Rejected attendance roster: session=%s", session_id)
            raise InvalidRosterError(
                "Roster references an unknown student",
                reason="unknown_student",
            )

        logger.info(
            "Updated attendance: session=%s, records=%d, by=%s",
            session.id,
            len(session.records),
            caller.id,
        )

        return self._to_response(session)

    async def delete_session(self, session_id: str, caller: Caller) -> None:
        """Delete a session and its records.

        Raises:
            AttendanceSessionNotFoundError: If session not found.
            ForbiddenError: On role mismatch or if the caller does not own
                the session.
        """
        self.guard.authorize(caller, self.manager_roles)

        session = await self._get_session(session_id, for_update=True)
        self.guard.authorize(
            caller,
            self.manager_roles,
            resource=session,
            owner_field="instructor_id",
        )

        await self.db.delete(session)
        await self.db.commit()

        logger.info("Deleted attendance: session=%s, by=%s", session_id, caller.id)

    async def get_session(self, session_id: str) -> AttendanceSessionResponse:
        """Get one session with its roster."""
        session = await self._get_session(session_id)
        return self._to_response(session)

    async def list_course_sessions(self, course_id: str) -> list[AttendanceSessionResponse]:
        """List a course's sessions, newest first."""
        result = await self.db.execute(
            select(AttendanceSession)
            .where(AttendanceSession.course_id == str(course_id))
            .order_by(AttendanceSession.date.desc())
        )
        return [self._to_response(s) for s in result.scalars().all()]

    async def list_my_attendance(self, caller: Caller) -> list[MyAttendanceItem]:
        """List the caller's status in every session they appear in.

        Args:
            caller: Authenticated student.

        Returns:
            One item per session, newest first.
        """
        self.guard.authorize(caller, (RoleEnum.STUDENT.value,))

        result = await self.db.execute(
            select(AttendanceSession, AttendanceRecord)
            .join(AttendanceRecord, AttendanceRecord.session_id == AttendanceSession.id)
            .where(AttendanceRecord.student_id == caller.id)
            .order_by(AttendanceSession.date.desc())
        )
        rows = result.all()
        courses = await self.catalog.get_courses(session.course_id for session, _ in rows)

        return [
            MyAttendanceItem(
                session_id=session.id,
                course=self._course_summary(courses.get(session.course_id)),
                date=ensure_utc(session.date),
                topic=session.topic,
                status=record.status,
                remarks=record.remarks,
            )
            for session, record in rows
        ]

    # =========================================================================
    # Helper Methods
    # =========================================================================

    async def _get_session(self, session_id: str, for_update: bool = False) -> AttendanceSession:
        """Get session by ID, optionally locking the row."""
        query = (
            select(AttendanceSession)
            .where(AttendanceSession.id == str(session_id))
            .execution_options(populate_existing=True)
        )
        if for_update:
            query = query.with_for_update()
        result = await self.db.execute(query)
        session = result.scalar_one_or_none()

        if not session:
            raise AttendanceSessionNotFoundError("Attendance record not found")

        return session

    async def _build_records(
        self,
        inputs: Sequence[AttendanceRecordInput],
    ) -> list[AttendanceRecord]:
        """Validate a roster and build its rows.

        Raises:
            InvalidRosterError: On a repeated student, an unknown status, or
                a student_id with no user account.
        """
        seen: set[str] = set()
        records = []
        for position, item in enumerate(inputs):
            if item.student_id in seen:
                raise InvalidRosterError(
                    f"Student {item.student_id} appears more than once",
                    reason="duplicate_student",
                )
            seen.add(item.student_id)

            status = getattr(item.status, "value", item.status)
            if status not in ATTENDANCE_STATUSES:
                raise InvalidRosterError(
                    f"Invalid attendance status: {status}",
                    reason="invalid_status",
                )

            records.append(
                AttendanceRecord(
                    student_id=item.student_id,
                    status=status,
                    remarks=item.remarks,
                    position=position,
                )
            )

        users = await self.catalog.get_users(seen)
        unknown = [item.student_id for item in inputs if item.student_id not in users]
        if unknown:
            raise InvalidRosterError(
                f"Unknown student: {', '.join(unknown)}",
                reason="unknown_student",
            )
        return records

    def _course_summary(self, course: Course | None) -> CourseSummary | None:
        if course is None:
            return None
        return CourseSummary(id=course.id, title=course.title, instructor_id=course.instructor_id)

    def _to_response(self, session: AttendanceSession) -> AttendanceSessionResponse:
        """Convert session model to response."""
        return AttendanceSessionResponse(
            id=session.id,
            course_id=session.course_id,
            instructor_id=session.instructor_id,
            date=ensure_utc(session.date),
            topic=session.topic,
            records=[
                AttendanceRecordResponse(
                    student_id=r.student_id,
                    status=r.status,
                    remarks=r.remarks,
                )
                for r in session.records
            ],
            created_at=ensure_utc(session.created_at),
        )
