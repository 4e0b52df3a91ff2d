# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Shared API models: roles, response envelopes and summaries."""

from enum import Enum
from typing import Generic, Literal, TypeVar

from pydantic import BaseModel, ConfigDict, Field

T = TypeVar("T")


class RoleEnum(str, Enum):
    """Platform roles."""

    STUDENT = "student"
    TEACHER = "teacher"
    ADMIN = "admin"


class SuccessResponse(BaseModel, Generic[T]):
    """Envelope for successful responses."""

    success: Literal[True] = True
    message: str | None = None
    data: T


class ErrorResponse(BaseModel):
    """Envelope for failed responses.

    Serialized with aliases, so the wire format is
    {"success": false, "message": ..., "errorCode": ..., "reason": ...}.
    """

    model_config = ConfigDict(populate_by_name=True)

    success: Literal[False] = False
    message: str
    error_code: str = Field(serialization_alias="errorCode")
    reason: str | None = None


class MessageResponse(BaseModel):
    """Envelope for operations that return no payload."""

    success: Literal[True] = True
    message: str


class StudentSummary(BaseModel):
    """Minimal public view of a student."""

    id: str
    name: str
    email: str


class CourseSummary(BaseModel):
    """Minimal public view of a course."""

    id: str
    title: str
    instructor_id: str
