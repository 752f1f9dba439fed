"""Tests for the authenticated user endpoints."""

import pytest
from fastapi.testclient import TestClient
from urllib.parse import parse_qs, urlparse

from api.app import create_app
from modules.notifications.models import NotificationKind


@pytest.fixture
def client(container):
    return TestClient(create_app())


@pytest.fixture
def auth_headers(client, notifier) -> dict[str, str]:
    """Register, verify and log in a@x.com; return bearer headers."""
    client.post("/api/auth/register", json={"email": "a@x.com", "name": "Ann", "password": "pw1"})
    url = notifier.last(NotificationKind.VERIFICATION, "a@x.com").payload["url"]
    client.get("/api/auth/verify_email", params={"token": parse_qs(urlparse(url).query)["token"][0]})
    token = client.post(
        "/api/auth/login", json={"email": "a@x.com", "password": "pw1"}
    ).json()["access_token"]
    return {"Authorization": f"Bearer {token}"}


class TestMe:
    def test_missing_auth_header(self, client):
        """Request without auth header should return 401."""
        response = client.get("/api/users/me")
        assert response.status_code == 401
        assert response.json()["error"] == "MISSING_SESSION"

    def test_invalid_token(self, client):
        response = client.get("/api/users/me", headers={"Authorization": "Bearer garbage"})
        assert response.status_code == 401
        assert response.json()["error"] == "INVALID_SESSION"

    def test_profile(self, client, auth_headers):
        response = client.get("/api/users/me", headers=auth_headers)
        assert response.status_code == 200
        data = response.json()
        assert data["email"] == "a@x.com"
        assert data["name"] == "Ann"
        assert data["email_verified"] is True
        assert data["two_factor_enabled"] is False
        assert "password_hash" not in data

    def test_expired_session(self, client, auth_headers, clock):
        clock.advance(minutes=30)
        response = client.get("/api/users/me", headers=auth_headers)
        assert response.status_code == 401
        assert response.json()["error"] == "SESSION_EXPIRED"


class TestToggleTwoFactor:
    def test_toggle(self, client, auth_headers, notifier):
        response = client.post("/api/users/toggle_2fa", headers=auth_headers)
        assert response.status_code == 200
        assert response.json() == {"two_factor_enabled": True, "message": "2FA enabled"}
        assert notifier.last(NotificationKind.TWO_FACTOR_TOGGLED, "a@x.com").payload == {
            "enabled": True
        }

        response = client.post("/api/users/toggle_2fa", headers=auth_headers)
        assert response.json() == {"two_factor_enabled": False, "message": "2FA disabled"}

    def test_requires_auth(self, client):
        assert client.post("/api/users/toggle_2fa").status_code == 401
