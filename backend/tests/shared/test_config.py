"""Tests for shared/config.py."""

import pytest
from unittest.mock import patch
import os

from shared.config import Settings, get_settings


class TestSettings:
    def test_default_values(self):
        """Settings should have sensible defaults."""
        with patch.dict(os.environ, {}, clear=True):
            settings = Settings(_env_file=None)
        assert settings.app_name == "VeilMail Auth API"
        assert settings.debug is False
        assert settings.port == 8000
        assert settings.host == "0.0.0.0"
        assert settings.app_version == "0.1.0"
        assert settings.app_url == "http://localhost:3000"
        assert settings.mail_from == "noreply@veilmail.xyz"
        assert settings.storage_backend == "memory"
        assert settings.secret_key == ""

    def test_loads_from_env(self):
        """Settings should load from environment variables."""
        with patch.dict(os.environ, {"DEBUG": "true", "PORT": "9000"}):
            settings = Settings()
            assert settings.debug is True
            assert settings.port == 9000

    def test_loads_mail_config_from_env(self):
        """Settings should load VeilMail configuration from environment variables."""
        with patch.dict(os.environ, {
            "VEILMAIL_API_KEY": "veil_test_key",
            "MAIL_FROM": "auth@example.com",
            "APP_URL": "https://app.example.com",
        }):
            settings = Settings()
            assert settings.veilmail_api_key == "veil_test_key"
            assert settings.mail_from == "auth@example.com"
            assert settings.app_url == "https://app.example.com"

    def test_loads_secret_key_from_env(self):
        """SECRET_KEY should populate the session signing key."""
        with patch.dict(os.environ, {"SECRET_KEY": "s3cr3t"}):
            assert Settings().secret_key == "s3cr3t"

    def test_rejects_unknown_storage_backend(self):
        """Only memory and supabase storage backends are accepted."""
        with patch.dict(os.environ, {"STORAGE_BACKEND": "redis"}):
            with pytest.raises(Exception):
                Settings()


class TestGetSettings:
    def test_get_settings_returns_settings_instance(self):
        """get_settings should return a Settings instance."""
        # Clear the cache first
        get_settings.cache_clear()
        settings = get_settings()
        assert isinstance(settings, Settings)

    def test_get_settings_caches(self):
        """get_settings should return cached instance."""
        # Clear the cache first
        get_settings.cache_clear()
        settings1 = get_settings()
        settings2 = get_settings()
        assert settings1 is settings2
