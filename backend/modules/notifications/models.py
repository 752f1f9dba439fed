"""
Notification module data models.

A Notification is a message intent: what kind of message, who it goes to,
and the values the message needs. Rendering turns it into an email.
"""

from enum import Enum
from typing import Any
from pydantic import BaseModel, Field


class NotificationKind(str, Enum):
    """Kinds of message the auth flows send."""

    VERIFICATION = "verification"
    PASSWORD_RESET = "password_reset"
    TWO_FACTOR_CODE = "two_factor_code"
    WELCOME = "welcome"
    PASSWORD_CHANGED = "password_changed"
    TWO_FACTOR_TOGGLED = "two_factor_toggled"


class Notification(BaseModel):
    """A message intent handed to a notifier."""

    kind: NotificationKind
    recipient: str = Field(..., description="Recipient email address")
    payload: dict[str, Any] = Field(default_factory=dict)

    model_config = {"frozen": True}


class EmailMessage(BaseModel):
    """A rendered transactional email."""

    subject: str
    html: str
    tags: list[str] = Field(default_factory=list)
