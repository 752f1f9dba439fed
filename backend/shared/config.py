"""
Centralized configuration for the VeilMail Auth backend.

All settings are loaded from environment variables with sensible defaults.
The Settings instance is built once at startup and handed to the services
that need it; business logic never reads the environment directly.
"""

from functools import lru_cache
from typing import Literal
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "VeilMail Auth API"
    app_version: str = "0.1.0"
    debug: bool = False
    log_level: str = "INFO"

    # Server
    host: str = "0.0.0.0"
    port: int = 8000
    reload: bool = False

    # CORS settings
    cors_origins: list[str] = ["http://localhost:3000"]
    cors_allow_credentials: bool = True
    cors_allow_methods: list[str] = ["*"]
    cors_allow_headers: list[str] = ["*"]

    # Session signing
    secret_key: str = ""

    # Links embedded in outgoing mail
    app_url: str = "http://localhost:3000"

    # VeilMail delivery
    mail_from: str = "noreply@veilmail.xyz"
    veilmail_api_key: str = ""
    veilmail_api_url: str = "https://api.veilmail.xyz"

    # Persistence
    storage_backend: Literal["memory", "supabase"] = "memory"
    supabase_url: str = ""
    supabase_service_role_key: str = ""
    supabase_db_url: str = ""


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return Settings()
