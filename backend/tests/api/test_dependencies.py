"""Tests for the service container."""

from unittest.mock import patch, MagicMock

from api.dependencies import ServiceContainer, get_container, reset_container
from modules.auth.repository import (
    InMemoryCredentialStore,
    InMemoryTokenStore,
    SupabaseCredentialStore,
    SupabaseTokenStore,
)
from modules.auth.service import AuthService
from modules.notifications.service import LoggingNotifier, VeilMailNotifier
from shared.config import Settings


class TestServiceContainer:
    def test_memory_backend(self, settings, clock):
        container = ServiceContainer(settings=settings, clock=clock)
        assert isinstance(container.credential_store, InMemoryCredentialStore)
        assert isinstance(container.token_store, InMemoryTokenStore)
        assert isinstance(container.auth, AuthService)

    def test_services_are_cached(self, settings):
        container = ServiceContainer(settings=settings)
        assert container.auth is container.auth
        assert container.credential_store is container.credential_store

    @patch("shared.database.create_client")
    def test_supabase_backend(self, mock_create, clock):
        mock_create.return_value = MagicMock()
        settings = Settings(
            secret_key="k",
            storage_backend="supabase",
            supabase_url="https://test.supabase.co",
            supabase_service_role_key="service-key",
        )
        from shared.database import reset_client_cache
        reset_client_cache()
        try:
            container = ServiceContainer(settings=settings, clock=clock)
            assert isinstance(container.credential_store, SupabaseCredentialStore)
            assert isinstance(container.token_store, SupabaseTokenStore)
        finally:
            reset_client_cache()

    def test_notifier_follows_settings(self):
        assert isinstance(
            ServiceContainer(settings=Settings(veilmail_api_key="")).notifier,
            LoggingNotifier,
        )
        assert isinstance(
            ServiceContainer(settings=Settings(veilmail_api_key="veil_key")).notifier,
            VeilMailNotifier,
        )

    def test_reset_clears_services(self, settings):
        container = ServiceContainer(settings=settings)
        first = container.auth
        container.reset()
        assert container.auth is not first


class TestContainerSingleton:
    def test_get_container_is_singleton(self):
        assert get_container() is get_container()

    def test_reset_container(self):
        first = get_container()
        reset_container()
        assert get_container() is not first
