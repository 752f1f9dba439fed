"""
Notification module interface.

The auth module depends on INotifier, not on VeilMail. Delivery is
fire-and-forget from the caller's point of view: send() reports success
or failure and callers decide whether to log it.
"""

from typing import Protocol, runtime_checkable

from .models import Notification


@runtime_checkable
class INotifier(Protocol):
    """Interface for delivering message intents."""

    async def send(self, notification: Notification) -> bool:
        """
        Deliver a notification.

        Args:
            notification: Kind, recipient and payload of the message

        Returns:
            True if the provider accepted the message, False otherwise
        """
        ...
