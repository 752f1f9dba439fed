"""
Shared test fixtures and utilities.

This module provides common test infrastructure used across all test modules.
Every fixture shares one ManualClock so expiry can be simulated without sleeping.
"""

import pytest

from api.dependencies import ServiceContainer, reset_container, set_container
from modules.auth.repository import InMemoryCredentialStore, InMemoryTokenStore
from modules.auth.service import AuthService
from modules.auth.session import SessionIssuer
from modules.auth.tokens import TokenIssuer
from modules.notifications.service import InMemoryNotifier
from shared.clock import ManualClock
from shared.config import Settings


# Session signing secret (only for testing)
TEST_SECRET_KEY = "test-secret-key-for-testing-only"
TEST_APP_URL = "https://app.example.com"


@pytest.fixture
def clock() -> ManualClock:
    """A clock frozen at 2025-01-01T00:00:00Z."""
    return ManualClock()


@pytest.fixture
def settings() -> Settings:
    """Settings with a known signing key and no mail provider."""
    return Settings(
        secret_key=TEST_SECRET_KEY,
        app_url=TEST_APP_URL,
        mail_from="auth@example.com",
        veilmail_api_key="",
        storage_backend="memory",
    )


@pytest.fixture
def notifier() -> InMemoryNotifier:
    return InMemoryNotifier()


@pytest.fixture
def credential_store(clock) -> InMemoryCredentialStore:
    return InMemoryCredentialStore(clock)


@pytest.fixture
def token_store(clock) -> InMemoryTokenStore:
    return InMemoryTokenStore(clock)


@pytest.fixture
def token_issuer(token_store, clock) -> TokenIssuer:
    return TokenIssuer(token_store, clock)


@pytest.fixture
def session_issuer(settings, clock) -> SessionIssuer:
    return SessionIssuer(settings, clock)


@pytest.fixture
def auth_service(
    credential_store, token_issuer, session_issuer, notifier, settings
) -> AuthService:
    """Auth service wired to in-memory stores and notifier."""
    return AuthService(
        credentials=credential_store,
        tokens=token_issuer,
        sessions=session_issuer,
        notifier=notifier,
        settings=settings,
    )


@pytest.fixture
def container(settings, clock, notifier):
    """Install a test service container for API tests."""
    test_container = ServiceContainer(settings=settings, clock=clock, notifier=notifier)
    set_container(test_container)
    yield test_container
    reset_container()


@pytest.fixture(autouse=True)
def reset_container_singleton():
    """Reset the service container before and after each test."""
    reset_container()
    yield
    reset_container()
