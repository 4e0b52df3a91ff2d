# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for Enrollment service."""

from datetime import datetime, timezone
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest
from sqlalchemy.exc import IntegrityError

from learnhub.core.errors import ForbiddenError
from learnhub.domains.catalog.service import CourseNotFoundError
from learnhub.domains.enrollment.service import (
    AlreadyEnrolledError,
    EnrollmentNotFoundError,
    EnrollmentService,
)
from learnhub.infrastructure.database.models import Course, Enrollment
from learnhub.models.enrollment import EnrollRequest, ProgressUpdateRequest


def result_of(value):
    """Wrap a value the way AsyncSession.execute returns it."""
    result = MagicMock()
    result.scalar_one_or_none.return_value = value
    return result


@pytest.fixture
def mock_db():
    """Create mock database session."""
    db = AsyncMock()
    db.add = MagicMock()
    db.flush = AsyncMock()
    db.commit = AsyncMock()
    db.rollback = AsyncMock()
    db.execute = AsyncMock()
    return db


@pytest.fixture
def enrollment_service(mock_db):
    """Create enrollment service with mock database."""
    return EnrollmentService(db=mock_db)


@pytest.fixture
def student():
    """Create a student caller."""
    return SimpleNamespace(id=str(uuid4()), role="student", is_active=True)


@pytest.fixture
def sample_course():
    """Create a sample course model."""
    return Course(id=str(uuid4()), title="Algebra", instructor_id=str(uuid4()), status="published")


@pytest.fixture
def sample_enrollment(student, sample_course):
    """Create a sample enrollment model."""
    return Enrollment(
        id=str(uuid4()),
        student_id=student.id,
        course_id=sample_course.id,
        progress=0,
        enrolled_at=datetime.now(timezone.utc),
        certificate_issued=False,
        videos=[],
    )


class TestEnrollmentServiceEnroll:
    """Tests for student enrollment."""

    @pytest.mark.asyncio
    async def test_enroll_success(self, enrollment_service, mock_db, student, sample_course):
        """Test enrollment inserts the row and bumps the course counter."""
        mock_db.execute.side_effect = [result_of(sample_course), result_of(None), MagicMock()]
        mock_db.add.side_effect = lambda obj: setattr(obj, "id", str(uuid4()))

        result = await enrollment_service.enroll(student, EnrollRequest(course_id=sample_course.id))

        assert result.student_id == student.id
        assert result.course_id == sample_course.id
        assert result.progress == 0
        assert result.certificate_issued is False
        assert result.completed_video_ids == []
        assert result.course.title == "Algebra"
        mock_db.add.assert_called_once()
        mock_db.commit.assert_awaited_once()
        # course lookup, pre-check, counter increment
        assert mock_db.execute.await_count == 3

    @pytest.mark.asyncio
    async def test_enroll_requires_student_role(self, enrollment_service, mock_db):
        """Test teachers cannot enroll."""
        teacher = SimpleNamespace(id=str(uuid4()), role="teacher", is_active=True)

        with pytest.raises(ForbiddenError) as exc_info:
            await enrollment_service.enroll(teacher, EnrollRequest(course_id=str(uuid4())))

        assert exc_info.value.reason == "role"
        mock_db.execute.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_enroll_course_not_found(self, enrollment_service, mock_db, student):
        """Test enrollment fails when course not found."""
        mock_db.execute.return_value = result_of(None)

        with pytest.raises(CourseNotFoundError):
            await enrollment_service.enroll(student, EnrollRequest(course_id=str(uuid4())))

        mock_db.add.assert_not_called()

    @pytest.mark.asyncio
    async def test_enroll_already_enrolled(
        self, enrollment_service, mock_db, student, sample_course, sample_enrollment
    ):
        """Test enrollment fails when student already enrolled."""
        mock_db.execute.side_effect = [result_of(sample_course), result_of(sample_enrollment)]

        with pytest.raises(AlreadyEnrolledError) as exc_info:
            await enrollment_service.enroll(student, EnrollRequest(course_id=sample_course.id))

        assert exc_info.value.reason == "already_enrolled"
        mock_db.add.assert_not_called()
        mock_db.commit.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_enroll_unique_violation_maps_to_conflict(
        self, enrollment_service, mock_db, student, sample_course
    ):
        """Test a lost race is rolled back and reported as a conflict."""
        mock_db.execute.side_effect = [result_of(sample_course), result_of(None)]
        mock_db.flush.side_effect = IntegrityError("INSERT", {}, Exception("unique"))

        with pytest.raises(AlreadyEnrolledError):
            await enrollment_service.enroll(student, EnrollRequest(course_id=sample_course.id))

        mock_db.rollback.assert_awaited_once()
        mock_db.commit.assert_not_awaited()
        # counter increment never issued
        assert mock_db.execute.await_count == 2


class TestEnrollmentServiceProgress:
    """Tests for progress updates."""

    @pytest.mark.asyncio
    async def test_update_progress_not_found(self, enrollment_service, mock_db, student):
        """Test update fails for an enrollment the caller does not own."""
        mock_db.execute.return_value = result_of(None)

        with pytest.raises(EnrollmentNotFoundError):
            await enrollment_service.update_progress(
                str(uuid4()), student, ProgressUpdateRequest(progress=10)
            )

        mock_db.commit.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_video_is_added_once(
        self, enrollment_service, mock_db, student, sample_enrollment
    ):
        """Test reporting the same video twice keeps one entry."""
        mock_db.execute.return_value = result_of(sample_enrollment)
        request = ProgressUpdateRequest(video_id="v1")

        await enrollment_service.update_progress(sample_enrollment.id, student, request)
        result = await enrollment_service.update_progress(sample_enrollment.id, student, request)

        assert result.completed_video_ids == ["v1"]
        assert result.last_accessed_video_id == "v1"
        assert result.progress == 0

    @pytest.mark.asyncio
    async def test_progress_only_leaves_videos_untouched(
        self, enrollment_service, mock_db, student, sample_enrollment
    ):
        """Test absent fields are not modified."""
        mock_db.execute.return_value = result_of(sample_enrollment)
        await enrollment_service.update_progress(
            sample_enrollment.id, student, ProgressUpdateRequest(video_id="v1")
        )

        result = await enrollment_service.update_progress(
            sample_enrollment.id, student, ProgressUpdateRequest(progress=55)
        )

        assert result.progress == 55
        assert result.completed_video_ids == ["v1"]
        assert result.last_accessed_video_id == "v1"

    @pytest.mark.asyncio
    async def test_completion_sets_certificate_once(
        self, enrollment_service, mock_db, student, sample_enrollment
    ):
        """Test 100 then 40 leaves completion untouched."""
        mock_db.execute.return_value = result_of(sample_enrollment)

        completed = await enrollment_service.update_progress(
            sample_enrollment.id, student, ProgressUpdateRequest(progress=100)
        )
        dropped = await enrollment_service.update_progress(
            sample_enrollment.id, student, ProgressUpdateRequest(progress=40)
        )

        assert completed.certificate_issued is True
        assert completed.completed_at is not None
        assert dropped.progress == 40
        assert dropped.certificate_issued is True
        assert dropped.completed_at == completed.completed_at
