# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Database infrastructure.

This package provides SQLAlchemy async database connections and the ORM
models for enrollments, assignments and attendance.

Example:
    from learnhub.infrastructure.database import get_session

    async with get_session() as session:
        result = await session.execute(select(Enrollment))
"""

from learnhub.infrastructure.database.connection import (
    DatabaseError,
    build_engine,
    check_database_connection,
    close_database,
    create_schema,
    get_engine,
    get_session,
    get_sessionmaker,
    init_database,
)

__all__ = [
    "DatabaseError",
    "build_engine",
    "check_database_connection",
    "close_database",
    "create_schema",
    "get_engine",
    "get_session",
    "get_sessionmaker",
    "init_database",
]
