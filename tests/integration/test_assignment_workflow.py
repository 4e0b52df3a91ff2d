# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Integration tests for the assignment workflow against a real database."""

from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy import func, select

from learnhub.core.config.settings import LearningPolicySettings
from learnhub.core.errors import ForbiddenError
from learnhub.domains.assignment.service import (
    AlreadySubmittedError,
    AssignmentNotFoundError,
    AssignmentService,
    NotEnrolledError,
    ScoreOutOfRangeError,
    SubmissionNotFoundError,
)
from learnhub.domains.enrollment.service import EnrollmentService
from learnhub.infrastructure.database.models import AssignmentSubmission
from learnhub.models.assignment import (
    AssignmentCreateRequest,
    GradeRequest,
    SubmissionRequest,
)
from learnhub.models.enrollment import EnrollRequest

pytestmark = pytest.mark.integration


def default_policy(**overrides) -> LearningPolicySettings:
    values = {"submission_requires_enrollment": False, "admin_manages_coursework": False}
    values.update(overrides)
    return LearningPolicySettings(**values)


def assignment_request(course_id: str, title: str = "Essay", days: int = 7) -> AssignmentCreateRequest:
    return AssignmentCreateRequest(
        course_id=course_id,
        title=title,
        description="Write 500 words",
        due_date=datetime.now(timezone.utc) + timedelta(days=days),
        max_score=100,
    )


async def count_submissions(db_session, assignment_id: str) -> int:
    return await db_session.scalar(
        select(func.count())
        .select_from(AssignmentSubmission)
        .where(AssignmentSubmission.assignment_id == assignment_id)
    )


@pytest.fixture
def service(db_session) -> AssignmentService:
    return AssignmentService(db_session, policy=default_policy())


class TestCreate:
    """Tests for creating assignments."""

    @pytest.mark.asyncio
    async def test_owner_creates_assignment(self, service, teacher, course_id):
        created = await service.create_assignment(teacher, assignment_request(course_id))

        assert created.course_id == course_id
        assert created.instructor_id == teacher.id
        assert created.submissions == []

    @pytest.mark.asyncio
    async def test_other_teacher_cannot_create(self, service, other_teacher, course_id):
        with pytest.raises(ForbiddenError) as exc_info:
            await service.create_assignment(other_teacher, assignment_request(course_id))

        assert exc_info.value.reason == "ownership"


class TestSubmit:
    """Tests for submitting."""

    @pytest.mark.asyncio
    async def test_double_submit_conflicts(self, db_session, service, teacher, student, course_id):
        assignment = await service.create_assignment(teacher, assignment_request(course_id))

        first = await service.submit(assignment.id, student, SubmissionRequest(text="draft"))
        with pytest.raises(AlreadySubmittedError):
            await service.submit(assignment.id, student, SubmissionRequest(text="second"))

        assert first.text == "draft"
        assert await count_submissions(db_session, assignment.id) == 1

    @pytest.mark.asyncio
    async def test_race_loser_rejected_by_unique_constraint(
        self, db_session, service, teacher, student, course_id, monkeypatch
    ):
        """The pre-check is skipped to simulate two requests passing it at once."""
        assignment = await service.create_assignment(teacher, assignment_request(course_id))
        await service.submit(assignment.id, student, SubmissionRequest(text="first"))

        async def stale_precheck(*args, **kwargs):
            return None

        monkeypatch.setattr(service, "_get_submission", stale_precheck)

        with pytest.raises(AlreadySubmittedError):
            await service.submit(assignment.id, student, SubmissionRequest(text="second"))

        assert await count_submissions(db_session, assignment.id) == 1

    @pytest.mark.asyncio
    async def test_unknown_assignment(self, service, student):
        with pytest.raises(AssignmentNotFoundError):
            await service.submit("missing", student, SubmissionRequest(text="hello"))

    @pytest.mark.asyncio
    async def test_enrollment_required_by_policy(self, db_session, teacher, student, course_id):
        service = AssignmentService(
            db_session,
            policy=default_policy(submission_requires_enrollment=True),
        )
        assignment = await service.create_assignment(teacher, assignment_request(course_id))

        with pytest.raises(NotEnrolledError):
            await service.submit(assignment.id, student, SubmissionRequest(text="hi"))

        await EnrollmentService(db_session).enroll(student, EnrollRequest(course_id=course_id))
        submission = await service.submit(assignment.id, student, SubmissionRequest(text="hi"))

        assert submission.student_id == student.id


class TestGrade:
    """Tests for grading."""

    @pytest.mark.asyncio
    async def test_owner_grades_and_regrades(self, service, teacher, student, course_id):
        assignment = await service.create_assignment(teacher, assignment_request(course_id))
        submission = await service.submit(assignment.id, student, SubmissionRequest(text="a"))

        await service.grade(assignment.id, submission.id, teacher, GradeRequest(score=70))
        result = await service.grade(
            assignment.id, submission.id, teacher, GradeRequest(score=85, feedback="Better")
        )

        graded = next(s for s in result.submissions if s.id == submission.id)
        assert graded.score == 85
        assert graded.feedback == "Better"
        assert graded.graded_at is not None

    @pytest.mark.asyncio
    async def test_other_teacher_cannot_grade(
        self, db_session, service, teacher, other_teacher, student, course_id
    ):
        assignment = await service.create_assignment(teacher, assignment_request(course_id))
        submission = await service.submit(assignment.id, student, SubmissionRequest(text="a"))

        with pytest.raises(ForbiddenError) as exc_info:
            await service.grade(assignment.id, submission.id, other_teacher, GradeRequest(score=90))

        assert exc_info.value.reason == "ownership"
        stored = await db_session.scalar(
            select(AssignmentSubmission.score).where(AssignmentSubmission.id == submission.id)
        )
        assert stored is None

    @pytest.mark.asyncio
    async def test_score_above_max_rejected(self, service, teacher, student, course_id):
        assignment = await service.create_assignment(teacher, assignment_request(course_id))
        submission = await service.submit(assignment.id, student, SubmissionRequest(text="a"))

        with pytest.raises(ScoreOutOfRangeError):
            await service.grade(assignment.id, submission.id, teacher, GradeRequest(score=101))

    @pytest.mark.asyncio
    async def test_submission_from_other_assignment(self, service, teacher, student, course_id):
        essay = await service.create_assignment(teacher, assignment_request(course_id))
        quiz = await service.create_assignment(teacher, assignment_request(course_id, "Quiz"))
        submission = await service.submit(essay.id, student, SubmissionRequest(text="a"))

        with pytest.raises(SubmissionNotFoundError):
            await service.grade(quiz.id, submission.id, teacher, GradeRequest(score=50))

    @pytest.mark.asyncio
    async def test_admin_grades_when_policy_allows(
        self, db_session, teacher, admin, student, course_id
    ):
        service = AssignmentService(db_session, policy=default_policy(admin_manages_coursework=True))
        assignment = await service.create_assignment(teacher, assignment_request(course_id))
        submission = await service.submit(assignment.id, student, SubmissionRequest(text="a"))

        result = await service.grade(assignment.id, submission.id, admin, GradeRequest(score=60))

        assert result.submissions[0].score == 60


class TestDelete:
    """Tests for deleting assignments."""

    @pytest.mark.asyncio
    async def test_delete_removes_submissions(
        self, db_session, service, teacher, student, course_id
    ):
        assignment = await service.create_assignment(teacher, assignment_request(course_id))
        await service.submit(assignment.id, student, SubmissionRequest(text="a"))

        await service.delete_assignment(assignment.id, teacher)

        assert await count_submissions(db_session, assignment.id) == 0
        with pytest.raises(AssignmentNotFoundError):
            await service.submit(assignment.id, student, SubmissionRequest(text="b"))

    @pytest.mark.asyncio
    async def test_other_teacher_cannot_delete(self, service, teacher, other_teacher, course_id):
        assignment = await service.create_assignment(teacher, assignment_request(course_id))

        with pytest.raises(ForbiddenError):
            await service.delete_assignment(assignment.id, other_teacher)


class TestListings:
    """Tests for assignment listings."""

    @pytest.mark.asyncio
    async def test_course_listing_hides_other_students_submissions(
        self, service, teacher, student, make_user, course_id
    ):
        classmate = await make_user("student")
        assignment = await service.create_assignment(teacher, assignment_request(course_id))
        await service.submit(assignment.id, student, SubmissionRequest(text="mine"))
        await service.submit(assignment.id, classmate, SubmissionRequest(text="theirs"))

        as_owner = await service.list_course_assignments(teacher, course_id)
        as_student = await service.list_course_assignments(student, course_id)

        assert len(as_owner[0].submissions) == 2
        assert [s.student_id for s in as_student[0].submissions] == [student.id]

    @pytest.mark.asyncio
    async def test_course_listing_latest_due_first(self, service, teacher, course_id):
        await service.create_assignment(teacher, assignment_request(course_id, "Soon", days=1))
        await service.create_assignment(teacher, assignment_request(course_id, "Later", days=30))

        listing = await service.list_course_assignments(teacher, course_id)

        assert [a.title for a in listing] == ["Later", "Soon"]

    @pytest.mark.asyncio
    async def test_my_submissions_covers_enrolled_courses(
        self, db_session, service, teacher, student, course_id, make_course
    ):
        other_course = await make_course(teacher.id, title="Not enrolled")
        essay = await service.create_assignment(teacher, assignment_request(course_id, "Essay"))
        await service.create_assignment(teacher, assignment_request(course_id, "Quiz", days=3))
        await service.create_assignment(teacher, assignment_request(other_course, "Hidden"))
        await EnrollmentService(db_session).enroll(student, EnrollRequest(course_id=course_id))
        await service.submit(essay.id, student, SubmissionRequest(text="done"))

        items = await service.list_my_submissions(student)

        by_title = {item.assignment.title: item for item in items}
        assert set(by_title) == {"Essay", "Quiz"}
        assert by_title["Essay"].submission.text == "done"
        assert by_title["Quiz"].submission is None
        assert by_title["Essay"].assignment.course.id == course_id
