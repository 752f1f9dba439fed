"""
Authentication service implementation.

Orchestrates registration, email verification, login with optional
emailed two-factor codes, password reset and session issuance on top
of the credential store, token issuer, session issuer and notifier.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Optional

from email_validator import EmailNotValidError, validate_email

from shared.config import Settings
from shared.models import AuthenticatedUser
from modules.notifications import INotifier, Notification, NotificationKind

from .exceptions import (
    DuplicateEmailError,
    EmailNotVerifiedError,
    FieldValidationError,
    InvalidCredentialsError,
    InvalidSessionError,
    InvalidTokenError,
    TokenRedemptionError,
    UserNotFoundError,
)
from .interfaces import IAuthService, ICredentialStore
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
from .passwords import dummy_verify, hash_password
from .session import SessionIssuer
from .tokens import TokenIssuer

logger = logging.getLogger(__name__)

REGISTERED_MESSAGE = "Verification email sent"
EMAIL_VERIFIED_MESSAGE = "Email verified"
FORGOT_PASSWORD_MESSAGE = "If an account exists, a reset email has been sent"
PASSWORD_UPDATED_MESSAGE = "Password updated"

BLANK = "can't be blank"


class AuthService(IAuthService):
    """
    Implementation of the auth flows.

    Every operation is a short, independent unit of work. Persistent
    changes happen before notifications are sent, and a failed
    notification never changes the outcome of the operation.
    """

    def __init__(
        self,
        credentials: ICredentialStore,
        tokens: TokenIssuer,
        sessions: SessionIssuer,
        notifier: INotifier,
        settings: Settings,
    ):
        self._credentials = credentials
        self._tokens = tokens
        self._sessions = sessions
        self._notifier = notifier
        self._app_url = settings.app_url.rstrip("/")

    # -------------------------------------------------------------------------
    # Public operations
    # -------------------------------------------------------------------------

    async def register(self, request: RegisterRequest) -> MessageResponse:
        """
        Create an unverified account and email a verification link.

        Raises:
            FieldValidationError: If a field is blank, the email is malformed,
                                  or the email is already registered
        """
        errors = self._validate_registration(request)
        if errors:
            raise FieldValidationError(errors)

        try:
            user = self._credentials.create(
                email=request.email,
                display_name=request.name,
                password_hash=hash_password(request.password),
            )
        except DuplicateEmailError:
            # Lost a race with a concurrent registration for the same email
            raise FieldValidationError({"email": ["has already been taken"]})

        logger.info(f"Registered user {user.id}")
        await self._send_verification(user)
        return MessageResponse(message=REGISTERED_MESSAGE)

    async def verify_email(self, token: str) -> MessageResponse:
        """
        Redeem an email verification token.

        Raises:
            InvalidTokenError: If the token is unknown, expired or already used
        """
        record = self._redeem(TokenKind.EMAIL_VERIFICATION, token)
        user = self._user_for_token(record)
        self._consume(record)

        user = self._credentials.mark_email_verified(user)
        logger.info(f"Verified email for user {user.id}")

        await self._notify(NotificationKind.WELCOME, user, {"name": user.display_name})
        return MessageResponse(message=EMAIL_VERIFIED_MESSAGE)

    async def login(
        self, request: LoginRequest
    ) -> SessionResponse | TwoFactorChallenge:
        """
        Check a password and either start a session or a 2FA challenge.

        Raises:
            InvalidCredentialsError: If the email is unknown or the password wrong
            EmailNotVerifiedError: If the credentials are right but the email is
                                   unverified; a fresh verification email is sent
        """
        user = self._check_credentials(request.email, request.password)

        if not user.email_verified:
            logger.info(f"Login blocked for unverified user {user.id}, resending verification")
            await self._send_verification(user)
            raise EmailNotVerifiedError()

        if user.two_factor_enabled:
            code = self._tokens.issue(TokenKind.TWO_FACTOR_CODE, user.email)
            await self._notify(NotificationKind.TWO_FACTOR_CODE, user, {"code": code})
            logger.info(f"Two-factor code sent for user {user.id}")
            return TwoFactorChallenge()

        logger.info(f"User {user.id} logged in")
        return self._start_session(user)

    async def verify_two_factor(
        self, request: VerifyTwoFactorRequest
    ) -> SessionResponse:
        """
        Complete a two-factor login.

        The password is checked again so a leaked code alone is useless.

        Raises:
            InvalidCredentialsError: If the email/password pair is wrong
            InvalidTokenError: If the code is wrong, expired or already used
        """
        user = self._check_credentials(request.email, request.password)

        record = self._redeem(TokenKind.TWO_FACTOR_CODE, request.code, email=user.email)
        self._consume(record)

        logger.info(f"User {user.id} logged in with two-factor code")
        return self._start_session(user)

    async def forgot_password(self, email: str) -> MessageResponse:
        """
        Email a password reset link if the account exists.

        The response is the same whether or not it does.
        """
        user = self._credentials.find_by_email(email) if email else None

        if user is not None:
            secret = self._tokens.issue(TokenKind.PASSWORD_RESET, user.email)
            url = f"{self._app_url}/auth/reset_password?token={secret}"
            await self._notify(NotificationKind.PASSWORD_RESET, user, {"url": url})
        else:
            logger.debug("Password reset requested for unknown email")

        return MessageResponse(message=FORGOT_PASSWORD_MESSAGE)

    async def reset_password(self, request: ResetPasswordRequest) -> MessageResponse:
        """
        Redeem a password reset token and set the new password.

        Raises:
            FieldValidationError: If the new password is blank
            InvalidTokenError: If the token is unknown, expired or already used
        """
        if not request.password:
            raise FieldValidationError({"password": [BLANK]})

        record = self._redeem(TokenKind.PASSWORD_RESET, request.token)
        user = self._user_for_token(record)
        self._consume(record)

        user = self._credentials.set_password_hash(user, hash_password(request.password))
        logger.info(f"Password reset for user {user.id}")

        await self._notify(NotificationKind.PASSWORD_CHANGED, user, {})
        return MessageResponse(message=PASSWORD_UPDATED_MESSAGE)

    async def authenticate(self, session_token: Optional[str]) -> AuthenticatedUser:
        """
        Resolve a bearer session token to the user it was issued to.

        Raises:
            MissingSessionError, InvalidSessionError, ExpiredSessionError
        """
        claims = self._sessions.verify(session_token or "")
        user = self._credentials.find_by_id(claims.sub)
        if user is None:
            raise InvalidSessionError("Session subject no longer exists")
        return AuthenticatedUser(
            id=user.id,
            email=user.email,
            session_expires_at=datetime.fromtimestamp(claims.exp, tz=timezone.utc),
        )

    async def get_profile(self, user_id: str) -> UserProfile:
        return UserProfile.from_user(self._get_user(user_id))

    async def toggle_two_factor(self, user_id: str) -> TwoFactorStatus:
        """Flip two-factor login for an authenticated user and tell them."""
        user = self._get_user(user_id)
        user = self._credentials.set_two_factor_enabled(user, not user.two_factor_enabled)

        status = "enabled" if user.two_factor_enabled else "disabled"
        logger.info(f"Two-factor {status} for user {user.id}")

        await self._notify(
            NotificationKind.TWO_FACTOR_TOGGLED,
            user,
            {"enabled": user.two_factor_enabled},
        )
        return TwoFactorStatus(
            two_factor_enabled=user.two_factor_enabled,
            message=f"2FA {status}",
        )

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _validate_registration(self, request: RegisterRequest) -> dict[str, list[str]]:
        errors: dict[str, list[str]] = {}

        if not request.email:
            errors["email"] = [BLANK]
        else:
            try:
                validate_email(request.email, check_deliverability=False)
            except EmailNotValidError:
                errors["email"] = ["is invalid"]
            else:
                if self._credentials.find_by_email(request.email) is not None:
                    errors["email"] = ["has already been taken"]

        if not request.name or not request.name.strip():
            errors["name"] = [BLANK]

        if not request.password:
            errors["password"] = [BLANK]

        return errors

    def _check_credentials(self, email: str, password: str) -> User:
        user = self._credentials.find_by_email(email) if email else None
        if user is None:
            dummy_verify()
        if user is None or not self._credentials.verify_password(user, password):
            logger.info("Rejected login with invalid credentials")
            raise InvalidCredentialsError()
        return user

    def _get_user(self, user_id: str) -> User:
        user = self._credentials.find_by_id(user_id)
        if user is None:
            raise UserNotFoundError(user_id)
        return user

    def _redeem(
        self,
        kind: TokenKind,
        secret: str,
        email: Optional[str] = None,
    ) -> Token:
        try:
            return self._tokens.redeem(kind, secret, email=email)
        except TokenRedemptionError as e:
            logger.info(f"Rejected {kind.value} token: {e.reason}")
            raise self._invalid_token(kind, e.reason) from e

    def _consume(self, record: Token) -> None:
        try:
            self._tokens.consume(record)
        except TokenRedemptionError as e:
            logger.info(f"Lost race consuming {record.kind.value} token for {record.email}")
            raise self._invalid_token(record.kind, e.reason) from e

    def _user_for_token(self, record: Token) -> User:
        user = self._credentials.find_by_email(record.email)
        if user is None:
            logger.warning(f"{record.kind.value} token references unknown email {record.email}")
            raise self._invalid_token(record.kind, "orphaned")
        return user

    @staticmethod
    def _invalid_token(kind: TokenKind, reason: str) -> InvalidTokenError:
        if kind == TokenKind.TWO_FACTOR_CODE:
            return InvalidTokenError(reason, message="Invalid or expired code")
        return InvalidTokenError(reason)

    def _start_session(self, user: User) -> SessionResponse:
        return SessionResponse(access_token=self._sessions.issue(user))

    async def _send_verification(self, user: User) -> None:
        secret = self._tokens.issue(TokenKind.EMAIL_VERIFICATION, user.email)
        url = f"{self._app_url}/auth/verify_email?token={secret}"
        await self._notify(
            NotificationKind.VERIFICATION,
            user,
            {"name": user.display_name, "url": url},
        )

    async def _notify(
        self,
        kind: NotificationKind,
        user: User,
        payload: dict[str, Any],
    ) -> None:
        """Send a notification; failures are logged, never raised."""
        notification = Notification(kind=kind, recipient=user.email, payload=payload)
        try:
            delivered = await self._notifier.send(notification)
        except Exception:
            logger.exception(f"Notifier raised while sending {kind.value} to {user.email}")
            return
        if not delivered:
            logger.warning(f"Notification {kind.value} to {user.email} was not delivered")
