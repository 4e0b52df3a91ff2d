# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Attendance session and record models."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field

from learnhub.models.common import CourseSummary


class AttendanceStatusEnum(str, Enum):
    """Closed set of presence statuses."""

    PRESENT = "present"
    ABSENT = "absent"
    LATE = "late"


class AttendanceRecordInput(BaseModel):
    """One roster line supplied by the instructor."""

    student_id: str = Field(min_length=1)
    status: AttendanceStatusEnum = AttendanceStatusEnum.PRESENT
    remarks: str | None = None


class AttendanceCreateRequest(BaseModel):
    """Request to record a class meeting."""

    course_id: str = Field(min_length=1)
    date: datetime
    topic: str = Field(min_length=1, max_length=255)
    records: list[AttendanceRecordInput] = Field(default_factory=list)


class AttendancePatch(BaseModel):
    """Partial update of a session.

    records, when present, replaces the whole roster. topic, when present,
    replaces the topic. Absent fields are left untouched.
    """

    records: list[AttendanceRecordInput] | None = None
    topic: str | None = Field(default=None, min_length=1, max_length=255)


class AttendanceRecordResponse(BaseModel):
    """Stored roster line."""

    student_id: str
    status: AttendanceStatusEnum
    remarks: str | None = None


class AttendanceSessionResponse(BaseModel):
    """Session details with its roster."""

    id: str
    course_id: str
    instructor_id: str
    date: datetime
    topic: str
    records: list[AttendanceRecordResponse]
    created_at: datetime


class MyAttendanceItem(BaseModel):
    """The caller's status in one session."""

    session_id: str
    course: CourseSummary | None = None
    date: datetime
    topic: str
    status: AttendanceStatusEnum
    remarks: str | None = None
