# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Attendance domain: per-session rosters."""

from learnhub.domains.attendance.service import (
    AttendanceService,
    AttendanceServiceError,
    AttendanceSessionNotFoundError,
    InvalidRosterError,
)

__all__ = [
    "AttendanceService",
    "AttendanceServiceError",
    "AttendanceSessionNotFoundError",
    "InvalidRosterError",
]
