"""
Authentication module.

Handles registration, email verification, password and two-factor login,
password reset, and signed session issuance.

Public API:
- IAuthService: Interface for auth operations
- ICredentialStore, ITokenStore: Storage interfaces
- AuthService: The auth flow orchestrator
- TokenIssuer, SessionIssuer: Token and session lifecycles
- Auth exceptions: InvalidCredentialsError, InvalidTokenError, etc.
"""

from .interfaces import IAuthService, ICredentialStore, ITokenStore
from .models import (
    User,
    Token,
    TokenKind,
    TOKEN_TTLS,
    SESSION_TTL,
    SessionClaims,
    UserProfile,
)
from .exceptions import (
    FieldValidationError,
    DuplicateEmailError,
    InvalidCredentialsError,
    EmailNotVerifiedError,
    TokenNotFoundError,
    TokenExpiredError,
    InvalidTokenError,
    InvalidSessionError,
    ExpiredSessionError,
    MissingSessionError,
    UserNotFoundError,
)
from .repository import (
    InMemoryCredentialStore,
    InMemoryTokenStore,
    SupabaseCredentialStore,
    SupabaseTokenStore,
)
from .tokens import TokenIssuer
from .session import SessionIssuer
from .service import AuthService

__all__ = [
    # Interfaces
    "IAuthService",
    "ICredentialStore",
    "ITokenStore",
    # Models
    "User",
    "Token",
    "TokenKind",
    "TOKEN_TTLS",
    "SESSION_TTL",
    "SessionClaims",
    "UserProfile",
    # Exceptions
    "FieldValidationError",
    "DuplicateEmailError",
    "InvalidCredentialsError",
    "EmailNotVerifiedError",
    "TokenNotFoundError",
    "TokenExpiredError",
    "InvalidTokenError",
    "InvalidSessionError",
    "ExpiredSessionError",
    "MissingSessionError",
    "UserNotFoundError",
    # Stores
    "InMemoryCredentialStore",
    "InMemoryTokenStore",
    "SupabaseCredentialStore",
    "SupabaseTokenStore",
    # Services
    "TokenIssuer",
    "SessionIssuer",
    "AuthService",
]
