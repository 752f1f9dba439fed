"""
Dependency injection setup for FastAPI.

This module provides the "container" that wires together all module
implementations from one Settings instance and one clock. Route handlers
only ever see interfaces.
"""

from typing import TYPE_CHECKING, Optional

from shared.clock import Clock, SystemClock
from shared.config import Settings, get_settings

# Type checking imports for interfaces (avoids circular imports)
if TYPE_CHECKING:
    from modules.auth.interfaces import IAuthService, ICredentialStore, ITokenStore
    from modules.notifications.interfaces import INotifier


class ServiceContainer:
    """
    Container for all service instances.

    Services are created lazily on first access and cached as singletons
    within the container. Tests can pre-seed any collaborator through
    the constructor or call reset() to start over.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        clock: Optional[Clock] = None,
        notifier: "INotifier | None" = None,
    ) -> None:
        self._settings = settings
        self._clock = clock
        self._notifier = notifier
        self._credential_store: "ICredentialStore | None" = None
        self._token_store: "ITokenStore | None" = None
        self._auth_service: "IAuthService | None" = None

    @property
    def settings(self) -> Settings:
        if self._settings is None:
            self._settings = get_settings()
        return self._settings

    @property
    def clock(self) -> Clock:
        if self._clock is None:
            self._clock = SystemClock()
        return self._clock

    @property
    def notifier(self) -> "INotifier":
        """Get the notifier instance."""
        if self._notifier is None:
            from modules.notifications.service import create_notifier
            self._notifier = create_notifier(self.settings)
        return self._notifier

    @property
    def credential_store(self) -> "ICredentialStore":
        """Get the credential store for the configured backend."""
        if self._credential_store is None:
            if self.settings.storage_backend == "supabase":
                from modules.auth.repository import SupabaseCredentialStore
                from shared.database import get_supabase_client
                self._credential_store = SupabaseCredentialStore(
                    get_supabase_client(self.settings), self.clock
                )
            else:
                from modules.auth.repository import InMemoryCredentialStore
                self._credential_store = InMemoryCredentialStore(self.clock)
        return self._credential_store

    @property
    def token_store(self) -> "ITokenStore":
        """Get the token store for the configured backend."""
        if self._token_store is None:
            if self.settings.storage_backend == "supabase":
                from modules.auth.repository import SupabaseTokenStore
                from shared.database import get_supabase_client
                self._token_store = SupabaseTokenStore(
                    get_supabase_client(self.settings), self.clock
                )
            else:
                from modules.auth.repository import InMemoryTokenStore
                self._token_store = InMemoryTokenStore(self.clock)
        return self._token_store

    @property
    def auth(self) -> "IAuthService":
        """Get the auth service instance."""
        if self._auth_service is None:
            from modules.auth.service import AuthService
            from modules.auth.session import SessionIssuer
            from modules.auth.tokens import TokenIssuer
            self._auth_service = AuthService(
                credentials=self.credential_store,
                tokens=TokenIssuer(self.token_store, self.clock),
                sessions=SessionIssuer(self.settings, self.clock),
                notifier=self.notifier,
                settings=self.settings,
            )
        return self._auth_service

    def reset(self) -> None:
        """
        Reset all cached services.

        This is primarily for testing - allows tests to get fresh
        service instances with different mock dependencies.
        """
        self._credential_store = None
        self._token_store = None
        self._auth_service = None


# Module-level container singleton
_container: ServiceContainer | None = None


def get_container() -> ServiceContainer:
    """Get the singleton service container."""
    global _container
    if _container is None:
        _container = ServiceContainer()
    return _container


def set_container(container: ServiceContainer) -> None:
    """Install a preconfigured container (used by tests)."""
    global _container
    _container = container


def reset_container() -> None:
    """
    Reset the service container.

    This clears the cached container, so the next call to get_container()
    will create a fresh container with new service instances.

    Primarily used for testing.
    """
    global _container
    _container = None


# FastAPI dependency functions
# These are the functions that should be used in route Depends() calls


def get_auth_service() -> "IAuthService":
    """FastAPI dependency for auth service."""
    return get_container().auth
