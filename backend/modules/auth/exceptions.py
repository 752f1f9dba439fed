"""
Authentication module exceptions.

These exceptions are raised by the auth module and caught by the API
error handler, which renders them with their status code.
"""

from typing import Optional

from shared.exceptions import (
    AuthAppError,
    AuthenticationError,
    AuthorizationError,
    BadRequestError,
    NotFoundError,
    ValidationError,
)


class FieldValidationError(ValidationError):
    """Raised when request fields are missing, malformed or already taken."""

    def __init__(self, field_errors: dict[str, list[str]]):
        messages = [
            f"{field.capitalize()} {error}"
            for field, errors in field_errors.items()
            for error in errors
        ]
        super().__init__(
            "; ".join(messages),
            code="VALIDATION_FAILED",
            details={"fields": field_errors},
        )
        self.field_errors = field_errors


class DuplicateEmailError(AuthAppError):
    """Raised by a credential store when the email is already registered."""

    status_code = 422

    def __init__(self, email: str):
        super().__init__(
            f"Email already registered: {email}",
            code="DUPLICATE_EMAIL",
        )
        self.email = email


class InvalidCredentialsError(AuthenticationError):
    """Raised for any bad email/password pair, whichever half was wrong."""

    def __init__(self):
        super().__init__("Invalid credentials", code="INVALID_CREDENTIALS")


class EmailNotVerifiedError(AuthorizationError):
    """Raised on login when the password is right but the email is unverified."""

    def __init__(self):
        super().__init__(
            "Email not verified. Verification email resent.",
            code="EMAIL_NOT_VERIFIED",
        )


class TokenRedemptionError(AuthAppError):
    """Base for token store lookup failures."""

    reason = "invalid"

    def __init__(self, message: str, kind: Optional[str] = None):
        super().__init__(message, details={"kind": kind} if kind else {})
        self.kind = kind


class TokenNotFoundError(TokenRedemptionError):
    """No live token matches the presented secret."""

    reason = "not_found"

    def __init__(self, kind: Optional[str] = None):
        super().__init__("Token not found", kind)


class TokenExpiredError(TokenRedemptionError):
    """The token exists but its expiry has passed. The row is left in place."""

    reason = "expired"

    def __init__(self, kind: Optional[str] = None):
        super().__init__("Token expired", kind)


class InvalidTokenError(BadRequestError):
    """
    Caller-facing redemption failure.

    Not-found and expired look the same from outside; `reason` keeps
    the distinction for logs.
    """

    def __init__(self, reason: str, message: str = "Invalid or expired token"):
        super().__init__(message, code="INVALID_TOKEN")
        self.reason = reason


class InvalidSessionError(AuthenticationError):
    """Raised when a session token is malformed or its signature is wrong."""

    def __init__(self, message: str = "Invalid session token"):
        super().__init__(message, code="INVALID_SESSION")


class ExpiredSessionError(AuthenticationError):
    """Raised when a session token is past its expiry."""

    def __init__(self, message: str = "Session has expired"):
        super().__init__(message, code="SESSION_EXPIRED")


class MissingSessionError(AuthenticationError):
    """Raised when no session token is provided."""

    def __init__(self, message: str = "Authentication required"):
        super().__init__(message, code="MISSING_SESSION")


class UserNotFoundError(NotFoundError):
    """Raised when a user referenced by a token or session doesn't exist."""

    def __init__(self, user_ref: str):
        super().__init__(
            f"User not found: {user_ref}",
            code="USER_NOT_FOUND",
            details={"user": user_ref},
        )
