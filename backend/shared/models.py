"""
Shared data models used across modules.

These models are shared infrastructure, not business logic.
Module-specific models should stay in their respective module directories.
"""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field


class AuthenticatedUser(BaseModel):
    """
    Represents an authenticated user in the system.

    This model is populated from session claims and made available
    to route handlers via dependency injection.
    """

    id: str = Field(..., description="User ID")
    email: str = Field(..., description="User's email address")
    session_expires_at: Optional[datetime] = Field(
        None, description="When the presented session stops being valid"
    )

    model_config = {
        "frozen": True,  # Make immutable for safety
        "extra": "ignore",
    }
