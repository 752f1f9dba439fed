"""
Authentication module interfaces.

The orchestrator depends on these protocols, not on concrete stores.
This lets the same flows run against in-memory stores in tests and
Supabase tables in production.
"""

from datetime import datetime
from typing import Protocol, Optional, runtime_checkable

from shared.models import AuthenticatedUser

from .models import (
    LoginRequest,
    MessageResponse,
    RegisterRequest,
    ResetPasswordRequest,
    SessionResponse,
    Token,
    TokenKind,
    TwoFactorChallenge,
    TwoFactorStatus,
    User,
    UserProfile,
    VerifyTwoFactorRequest,
)


@runtime_checkable
class ICredentialStore(Protocol):
    """
    Storage for user identity records.

    All mutations are atomic single-record updates.
    """

    def find_by_email(self, email: str) -> Optional[User]:
        """Return the user with exactly this email, or None."""
        ...

    def find_by_id(self, user_id: str) -> Optional[User]:
        """Return the user with this ID, or None."""
        ...

    def create(self, email: str, display_name: str, password_hash: str) -> User:
        """
        Create an unverified user without 2FA.

        Raises:
            DuplicateEmailError: If the email is already registered
        """
        ...

    def verify_password(self, user: User, plaintext: str) -> bool:
        """Constant-time check of plaintext against the stored hash."""
        ...

    def mark_email_verified(self, user: User) -> User:
        ...

    def set_password_hash(self, user: User, new_hash: str) -> User:
        ...

    def set_two_factor_enabled(self, user: User, enabled: bool) -> User:
        ...


@runtime_checkable
class ITokenStore(Protocol):
    """
    Storage for single-use tokens.

    Implementations guarantee at most one token per (kind, email) and
    at-most-once deletion of a given token row.
    """

    def replace(
        self,
        kind: TokenKind,
        email: str,
        secret: str,
        expires_at: datetime,
    ) -> Token:
        """Atomically drop any token of this kind for this email and store a new one."""
        ...

    def find_by_secret(self, kind: TokenKind, secret: str) -> Optional[Token]:
        ...

    def find_by_email_and_secret(
        self, kind: TokenKind, email: str, secret: str
    ) -> Optional[Token]:
        ...

    def delete(self, token: Token) -> bool:
        """
        Delete exactly this token row.

        Returns:
            True if this call removed the row, False if it was already gone
        """
        ...


@runtime_checkable
class IAuthService(Protocol):
    """
    Interface for the public auth operations.

    Failures are raised as AuthAppError subclasses carrying the status
    the caller should see.
    """

    async def register(self, request: RegisterRequest) -> MessageResponse:
        ...

    async def verify_email(self, token: str) -> MessageResponse:
        ...

    async def login(
        self, request: LoginRequest
    ) -> SessionResponse | TwoFactorChallenge:
        ...

    async def verify_two_factor(
        self, request: VerifyTwoFactorRequest
    ) -> SessionResponse:
        ...

    async def forgot_password(self, email: str) -> MessageResponse:
        ...

    async def reset_password(self, request: ResetPasswordRequest) -> MessageResponse:
        ...

    async def authenticate(self, session_token: Optional[str]) -> AuthenticatedUser:
        ...

    async def get_profile(self, user_id: str) -> UserProfile:
        ...

    async def toggle_two_factor(self, user_id: str) -> TwoFactorStatus:
        ...
