# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Authentication and authorization domain.

- jwt: access token verification
- guard: role and resource-ownership checks
"""

from learnhub.domains.auth.guard import (
    ADMIN_ROLE,
    AccessDecision,
    Caller,
    DenyReason,
    OwnershipGuard,
)
from learnhub.domains.auth.jwt import (
    InvalidTokenError,
    JWTError,
    JWTManager,
    TokenExpiredError,
    TokenPayload,
)

__all__ = [
    "ADMIN_ROLE",
    "AccessDecision",
    "Caller",
    "DenyReason",
    "OwnershipGuard",
    "InvalidTokenError",
    "JWTError",
    "JWTManager",
    "TokenExpiredError",
    "TokenPayload",
]
