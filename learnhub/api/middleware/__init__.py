# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""API middleware components."""

from learnhub.api.middleware.auth import AuthMiddleware, CurrentUser, get_token_payload

__all__ = [
    "AuthMiddleware",
    "CurrentUser",
    "get_token_payload",
]
