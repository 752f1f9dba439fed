"""Tests for shared/database.py."""

import pytest
from unittest.mock import patch, MagicMock

from shared.config import Settings
from shared.database import get_supabase_client, reset_client_cache


@pytest.fixture(autouse=True)
def clear_client_cache():
    reset_client_cache()
    yield
    reset_client_cache()


class TestGetSupabaseClient:
    def test_missing_configuration(self):
        """Should refuse to build a client without URL and service key."""
        with pytest.raises(RuntimeError) as exc_info:
            get_supabase_client(Settings(supabase_url="", supabase_service_role_key=""))
        assert "SUPABASE_URL" in str(exc_info.value)

    @patch("shared.database.create_client")
    def test_creates_service_role_client(self, mock_create):
        settings = Settings(
            supabase_url="https://test.supabase.co",
            supabase_service_role_key="service-key",
        )
        mock_create.return_value = MagicMock()

        client = get_supabase_client(settings)

        assert client is mock_create.return_value
        mock_create.assert_called_once_with("https://test.supabase.co", "service-key")

    @patch("shared.database.create_client")
    def test_client_is_cached(self, mock_create):
        settings = Settings(
            supabase_url="https://test.supabase.co",
            supabase_service_role_key="service-key",
        )
        first = get_supabase_client(settings)
        second = get_supabase_client(settings)
        assert first is second
        mock_create.assert_called_once()
