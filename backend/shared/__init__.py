"""
Shared infrastructure for the VeilMail Auth backend.

This package contains cross-cutting concerns that are used by multiple modules:
- config: Centralized settings management
- database: Supabase client factory
- exceptions: Base exception classes
- clock: Injectable time source

Note: Business logic should NOT go here. This is for infrastructure only.
"""

from .config import Settings, get_settings
from .clock import Clock, SystemClock, ManualClock
from .database import get_supabase_client, reset_client_cache
from .exceptions import (
    AuthAppError,
    BadRequestError,
    NotFoundError,
    ValidationError,
    AuthenticationError,
    AuthorizationError,
    ExternalServiceError,
)
from .models import AuthenticatedUser

__all__ = [
    "Settings",
    "get_settings",
    "Clock",
    "SystemClock",
    "ManualClock",
    "get_supabase_client",
    "reset_client_cache",
    "AuthAppError",
    "BadRequestError",
    "NotFoundError",
    "ValidationError",
    "AuthenticationError",
    "AuthorizationError",
    "ExternalServiceError",
    "AuthenticatedUser",
]
