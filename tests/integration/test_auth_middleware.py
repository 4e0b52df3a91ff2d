# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Integration tests for the authentication middleware.

Tests the middleware in isolation from the database.
"""

from unittest.mock import MagicMock, patch
from uuid import uuid4

import pytest
from fastapi import FastAPI, Request
from fastapi.testclient import TestClient
from pydantic import SecretStr

from learnhub.api.middleware.auth import AuthMiddleware, CurrentUser, get_token_payload
from learnhub.domains.auth.jwt import JWTManager
from learnhub.infrastructure.database.models import User


@pytest.fixture
def jwt_settings() -> MagicMock:
    """Create mock JWT settings."""
    settings = MagicMock()
    settings.secret_key = SecretStr("test-secret-key-for-jwt-testing")
    settings.algorithm = "HS256"
    settings.access_token_expire_minutes = 30
    return settings


@pytest.fixture
def jwt_manager(jwt_settings: MagicMock) -> JWTManager:
    """Create JWT manager with test settings."""
    return JWTManager(jwt_settings)


def build_app() -> FastAPI:
    app = FastAPI()
    app.add_middleware(AuthMiddleware)

    @app.get("/health")
    async def health() -> dict:
        return {"status": "ok"}

    @app.get("/api/v1/test")
    async def test_endpoint(request: Request) -> dict:
        payload = get_token_payload(request)
        return {
            "user_id": payload.sub if payload else None,
            "role": payload.role if payload else None,
        }

    return app


class TestAuthMiddleware:
    """Tests for AuthMiddleware."""

    @patch("learnhub.api.middleware.auth.get_settings")
    def test_public_path_bypasses_auth(
        self,
        mock_settings: MagicMock,
        jwt_settings: MagicMock,
    ) -> None:
        """Test that public paths don't require authentication."""
        mock_settings.return_value.jwt = jwt_settings

        client = TestClient(build_app())
        response = client.get("/health")

        assert response.status_code == 200

    @patch("learnhub.api.middleware.auth.get_settings")
    def test_valid_token_sets_payload(
        self,
        mock_settings: MagicMock,
        jwt_settings: MagicMock,
        jwt_manager: JWTManager,
    ) -> None:
        """Test that a valid token populates request.state.token_payload."""
        mock_settings.return_value.jwt = jwt_settings

        user_id = str(uuid4())
        token = jwt_manager.create_access_token(user_id=user_id, role="student")

        client = TestClient(build_app())
        response = client.get(
            "/api/v1/test",
            headers={"Authorization": f"Bearer {token}"},
        )

        assert response.status_code == 200
        assert response.json() == {"user_id": user_id, "role": "student"}

    @patch("learnhub.api.middleware.auth.get_settings")
    def test_no_token_sets_payload_none(
        self,
        mock_settings: MagicMock,
        jwt_settings: MagicMock,
    ) -> None:
        """Test that a missing token leaves the payload empty."""
        mock_settings.return_value.jwt = jwt_settings

        client = TestClient(build_app())
        response = client.get("/api/v1/test")

        assert response.status_code == 200
        assert response.json()["user_id"] is None

    @patch("learnhub.api.middleware.auth.get_settings")
    def test_invalid_token_sets_payload_none(
        self,
        mock_settings: MagicMock,
        jwt_settings: MagicMock,
    ) -> None:
        """Test that an invalid token leaves the payload empty."""
        mock_settings.return_value.jwt = jwt_settings

        client = TestClient(build_app())
        response = client.get(
            "/api/v1/test",
            headers={"Authorization": "Bearer invalid-token"},
        )

        assert response.status_code == 200
        assert response.json()["user_id"] is None

    @patch("learnhub.api.middleware.auth.get_settings")
    def test_expired_token_sets_payload_none(
        self,
        mock_settings: MagicMock,
        jwt_settings: MagicMock,
        jwt_manager: JWTManager,
    ) -> None:
        """Test that an expired token leaves the payload empty."""
        mock_settings.return_value.jwt = jwt_settings

        token = jwt_manager.create_access_token(user_id="u-1", expires_minutes=-1)

        client = TestClient(build_app())
        response = client.get(
            "/api/v1/test",
            headers={"Authorization": f"Bearer {token}"},
        )

        assert response.json()["user_id"] is None

    @patch("learnhub.api.middleware.auth.get_settings")
    def test_non_bearer_scheme_ignored(
        self,
        mock_settings: MagicMock,
        jwt_settings: MagicMock,
        jwt_manager: JWTManager,
    ) -> None:
        """Test that only Bearer credentials are read."""
        mock_settings.return_value.jwt = jwt_settings

        token = jwt_manager.create_access_token(user_id="u-1")

        client = TestClient(build_app())
        response = client.get(
            "/api/v1/test",
            headers={"Authorization": f"Basic {token}"},
        )

        assert response.json()["user_id"] is None

    @patch("learnhub.api.middleware.auth.get_settings")
    def test_request_id_echoed(
        self,
        mock_settings: MagicMock,
        jwt_settings: MagicMock,
    ) -> None:
        """Test that the request ID is returned to the client."""
        mock_settings.return_value.jwt = jwt_settings

        client = TestClient(build_app())
        echoed = client.get("/health", headers={"X-Request-ID": "req-42"})
        generated = client.get("/health")

        assert echoed.headers["X-Request-ID"] == "req-42"
        assert generated.headers["X-Request-ID"]


class TestCurrentUser:
    """Tests for CurrentUser class."""

    def test_from_user_copies_account_row(self) -> None:
        """Test that role and active flag come from the users row."""
        row = User(
            id="u-1",
            name="Ada",
            email="ada@example.com",
            role="teacher",
            is_active=False,
        )

        user = CurrentUser.from_user(row)

        assert (user.id, user.role, user.name, user.email) == (
            "u-1",
            "teacher",
            "Ada",
            "ada@example.com",
        )
        assert user.is_active is False
