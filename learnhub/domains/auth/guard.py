# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Ownership guard: the single role and resource-owner check.

Every mutating workflow asks the guard before touching the store. The guard
answers with a tagged AccessDecision (check) or raises the matching domain
error (authorize). It never has side effects.

Admin is not a blanket override. A call must pass allow_admin_override=True
for an admin to act on a resource owned by someone else.

Example:
    >>> guard = OwnershipGuard()
    >>> guard.authorize(caller, ("teacher",), resource=assignment, owner_field="instructor_id")
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any, Protocol

from learnhub.core.errors import ForbiddenError, UnauthenticatedError

ADMIN_ROLE = "admin"


class Caller(Protocol):
    """Anything that identifies the requesting user."""

    id: str
    role: str


class DenyReason(str, Enum):
    """Why access was refused."""

    UNAUTHENTICATED = "unauthenticated"
    ROLE = "role"
    OWNERSHIP = "ownership"


@dataclass(frozen=True)
class AccessDecision:
    """Outcome of an access check.

    Attributes:
        allowed: True when the caller may proceed.
        reason: Populated when access is denied.
        message: Human-readable explanation for denials.
    """

    allowed: bool
    reason: DenyReason | None = None
    message: str = ""

    @classmethod
    def allow(cls) -> AccessDecision:
        return cls(allowed=True)

    @classmethod
    def deny(cls, reason: DenyReason, message: str) -> AccessDecision:
        return cls(allowed=False, reason=reason, message=message)

    def __bool__(self) -> bool:
        return self.allowed


class OwnershipGuard:
    """Role and ownership checks shared by all workflows.

    Attributes:
        admin_override: Default for calls that do not say whether an admin
            may act on resources owned by someone else.
    """

    def __init__(self, admin_override: bool = False) -> None:
        """Initialize the guard.

        Args:
            admin_override: Default admin override for ownership checks.
        """
        self.admin_override = admin_override

    def check(
        self,
        caller: Caller | None,
        required_roles: Iterable[str],
        resource: Any = None,
        owner_field: str | None = None,
        allow_admin_override: bool | None = None,
    ) -> AccessDecision:
        """Decide whether the caller may act on the resource.

        Args:
            caller: Authenticated user, or None.
            required_roles: Roles allowed to perform the action.
            resource: Object or mapping to check ownership on.
            owner_field: Attribute or key holding the owner's id. Ownership
                is only checked when both resource and owner_field are given.
            allow_admin_override: Let admins skip the ownership check.
                Falls back to the guard default when None.

        Returns:
            AccessDecision.
        """
        if caller is None or not getattr(caller, "is_active", True):
            return AccessDecision.deny(DenyReason.UNAUTHENTICATED, "Not authenticated")

        roles = tuple(str(role) for role in required_roles)
        if roles and caller.role not in roles:
            return AccessDecision.deny(
                DenyReason.ROLE,
                f"Requires role: {', '.join(roles)}",
            )

        if resource is None or owner_field is None:
            return AccessDecision.allow()

        if allow_admin_override is None:
            allow_admin_override = self.admin_override
        if allow_admin_override and caller.role == ADMIN_ROLE:
            return AccessDecision.allow()

        if str(self.owner_of(resource, owner_field)) != str(caller.id):
            return AccessDecision.deny(
                DenyReason.OWNERSHIP,
                "Not authorized to manage this resource",
            )

        return AccessDecision.allow()

    def authorize(
        self,
        caller: Caller | None,
        required_roles: Iterable[str],
        resource: Any = None,
        owner_field: str | None = None,
        allow_admin_override: bool | None = None,
        message: str | None = None,
    ) -> None:
        """Check access and raise when it is denied.

        Args:
            caller: Authenticated user, or None.
            required_roles: Roles allowed to perform the action.
            resource: Object or mapping to check ownership on.
            owner_field: Attribute or key holding the owner's id.
            allow_admin_override: Let admins skip the ownership check.
            message: Replaces the default message of an ownership denial.

        Raises:
            UnauthenticatedError: If there is no active caller.
            ForbiddenError: On role or ownership mismatch; reason tells which.
        """
        decision = self.check(
            caller,
            required_roles,
            resource=resource,
            owner_field=owner_field,
            allow_admin_override=allow_admin_override,
        )
        if decision.allowed:
            return

        if decision.reason is DenyReason.UNAUTHENTICATED:
            raise UnauthenticatedError(decision.message, reason=decision.reason.value)
        if decision.reason is DenyReason.OWNERSHIP and message:
            raise ForbiddenError(message, reason=decision.reason.value)
        raise ForbiddenError(decision.message, reason=decision.reason.value)

    @staticmethod
    def owner_of(resource: Any, owner_field: str) -> Any:
        """Read the owner id from an object or a mapping."""
        if isinstance(resource, Mapping):
            return resource.get(owner_field)
        return getattr(resource, owner_field, None)
