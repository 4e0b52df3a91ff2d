# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for the ownership guard."""

from types import SimpleNamespace

import pytest

from learnhub.core.errors import ForbiddenError, UnauthenticatedError
from learnhub.domains.auth.guard import AccessDecision, DenyReason, OwnershipGuard


def make_caller(user_id: str = "t1", role: str = "teacher", is_active: bool = True) -> SimpleNamespace:
    """Build a caller stand-in."""
    return SimpleNamespace(id=user_id, role=role, is_active=is_active)


@pytest.fixture
def guard() -> OwnershipGuard:
    """Create a guard without admin override."""
    return OwnershipGuard()


class TestCheck:
    """Tests for OwnershipGuard.check."""

    def test_missing_caller_is_unauthenticated(self, guard: OwnershipGuard) -> None:
        decision = guard.check(None, ("teacher",))

        assert decision.allowed is False
        assert decision.reason is DenyReason.UNAUTHENTICATED

    def test_inactive_caller_is_unauthenticated(self, guard: OwnershipGuard) -> None:
        decision = guard.check(make_caller(is_active=False), ("teacher",))

        assert decision.reason is DenyReason.UNAUTHENTICATED

    def test_role_mismatch_denied(self, guard: OwnershipGuard) -> None:
        decision = guard.check(make_caller(role="student"), ("teacher",))

        assert not decision
        assert decision.reason is DenyReason.ROLE

    def test_empty_roles_admits_any_authenticated_caller(self, guard: OwnershipGuard) -> None:
        assert guard.check(make_caller(role="student"), ()).allowed is True

    def test_owner_allowed(self, guard: OwnershipGuard) -> None:
        resource = SimpleNamespace(instructor_id="t1")

        decision = guard.check(
            make_caller("t1"),
            ("teacher",),
            resource=resource,
            owner_field="instructor_id",
        )

        assert decision == AccessDecision.allow()

    def test_non_owner_denied(self, guard: OwnershipGuard) -> None:
        resource = SimpleNamespace(instructor_id="t1")

        decision = guard.check(
            make_caller("t2"),
            ("teacher",),
            resource=resource,
            owner_field="instructor_id",
        )

        assert decision.reason is DenyReason.OWNERSHIP

    def test_mapping_resource_uses_key_lookup(self, guard: OwnershipGuard) -> None:
        decision = guard.check(
            make_caller("t2"),
            ("teacher",),
            resource={"instructor_id": "t1"},
            owner_field="instructor_id",
        )

        assert decision.reason is DenyReason.OWNERSHIP

    def test_role_is_checked_before_ownership(self, guard: OwnershipGuard) -> None:
        decision = guard.check(
            make_caller("t1", role="student"),
            ("teacher",),
            resource={"instructor_id": "t1"},
            owner_field="instructor_id",
        )

        assert decision.reason is DenyReason.ROLE

    def test_admin_is_not_an_implicit_override(self, guard: OwnershipGuard) -> None:
        decision = guard.check(
            make_caller("a1", role="admin"),
            ("teacher", "admin"),
            resource={"instructor_id": "t1"},
            owner_field="instructor_id",
        )

        assert decision.reason is DenyReason.OWNERSHIP

    def test_admin_override_when_allowed_per_call(self, guard: OwnershipGuard) -> None:
        decision = guard.check(
            make_caller("a1", role="admin"),
            ("teacher", "admin"),
            resource={"instructor_id": "t1"},
            owner_field="instructor_id",
            allow_admin_override=True,
        )

        assert decision.allowed is True

    def test_guard_default_override_applies_to_admins_only(self) -> None:
        guard = OwnershipGuard(admin_override=True)
        resource = {"instructor_id": "t1"}

        admin = guard.check(make_caller("a1", "admin"), ("teacher", "admin"), resource, "instructor_id")
        teacher = guard.check(make_caller("t2"), ("teacher", "admin"), resource, "instructor_id")

        assert admin.allowed is True
        assert teacher.reason is DenyReason.OWNERSHIP


class TestAuthorize:
    """Tests for OwnershipGuard.authorize."""

    def test_raises_unauthenticated(self, guard: OwnershipGuard) -> None:
        with pytest.raises(UnauthenticatedError) as exc_info:
            guard.authorize(None, ("student",))

        assert exc_info.value.status_code == 401

    def test_raises_forbidden_with_role_reason(self, guard: OwnershipGuard) -> None:
        with pytest.raises(ForbiddenError) as exc_info:
            guard.authorize(make_caller(role="student"), ("teacher",))

        assert exc_info.value.reason == "role"

    def test_raises_forbidden_with_ownership_reason_and_custom_message(
        self,
        guard: OwnershipGuard,
    ) -> None:
        with pytest.raises(ForbiddenError) as exc_info:
            guard.authorize(
                make_caller("t2"),
                ("teacher",),
                resource={"instructor_id": "t1"},
                owner_field="instructor_id",
                message="Not authorized to manage attendance for this course",
            )

        assert exc_info.value.reason == "ownership"
        assert exc_info.value.message == "Not authorized to manage attendance for this course"

    def test_returns_none_when_allowed(self, guard: OwnershipGuard) -> None:
        assert guard.authorize(make_caller(), ("teacher",)) is None
