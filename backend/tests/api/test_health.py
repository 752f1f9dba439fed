"""Tests for health check endpoints."""

import pytest
from fastapi.testclient import TestClient

from api import app


client = TestClient(app)


class TestHealthEndpoints:
    """Tests for health check endpoints."""

    def test_health_check(self):
        """Health endpoint should return 200 with status."""
        response = client.get("/api/health")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["version"] == "0.1.0"

    def test_health_response_structure(self):
        """Health response should have correct structure."""
        response = client.get("/api/health")
        assert set(response.json().keys()) == {"status", "version"}

    def test_health_does_not_need_signing_key(self):
        """Health checks must not build the auth service."""
        assert client.get("/api/health").status_code == 200
