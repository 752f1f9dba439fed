"""
Notifications module.

Renders auth message intents into transactional emails and delivers them.

Public API:
- INotifier: Interface for delivering notifications
- Notification, NotificationKind: Message intents
- VeilMailNotifier, InMemoryNotifier, LoggingNotifier: Implementations
"""

from .interfaces import INotifier
from .models import Notification, NotificationKind, EmailMessage
from .exceptions import NotificationDeliveryError, MissingPayloadError
from .templates import render_message
from .service import (
    VeilMailNotifier,
    InMemoryNotifier,
    LoggingNotifier,
    create_notifier,
)

__all__ = [
    # Interface
    "INotifier",
    # Models
    "Notification",
    "NotificationKind",
    "EmailMessage",
    # Exceptions
    "NotificationDeliveryError",
    "MissingPayloadError",
    # Rendering
    "render_message",
    # Implementations
    "VeilMailNotifier",
    "InMemoryNotifier",
    "LoggingNotifier",
    "create_notifier",
]
