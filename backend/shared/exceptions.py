"""
Base exception classes for the VeilMail Auth backend.

Each module should define its own exceptions that inherit from these bases.
Every exception carries the HTTP status it maps to, so the API layer can
render any of them with a single handler.
"""

from typing import Optional, Any


class AuthAppError(Exception):
    """
    Base exception for all application errors.

    All custom exceptions should inherit from this class.
    """

    status_code: int = 500

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to a dictionary for API responses."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }


class BadRequestError(AuthAppError):
    """The request could not be honoured as sent."""

    status_code = 400


class NotFoundError(AuthAppError):
    """Resource not found."""

    status_code = 404


class ValidationError(AuthAppError):
    """Input validation failed."""

    status_code = 422


class AuthenticationError(AuthAppError):
    """Authentication failed (invalid or missing credentials)."""

    status_code = 401


class AuthorizationError(AuthAppError):
    """Authorization failed (credentials valid but access refused)."""

    status_code = 403


class ExternalServiceError(AuthAppError):
    """Error communicating with an external service."""

    status_code = 502

    def __init__(
        self,
        message: str,
        service: str,
        code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message, code, details)
        self.service = service
        self.details["service"] = service
