"""
Notifier implementations.

VeilMailNotifier delivers through the VeilMail transactional email API.
InMemoryNotifier keeps sent messages for tests and local development.
LoggingNotifier is the fallback when no API key is configured.
"""

import logging
from typing import Optional

import httpx

from shared.config import Settings

from .exceptions import NotificationDeliveryError
from .interfaces import INotifier
from .models import EmailMessage, Notification
from .templates import render_message

logger = logging.getLogger(__name__)


class VeilMailNotifier(INotifier):
    """
    Notifier backed by the VeilMail HTTP API.

    Every message is sent as a single transactional email. Failures are
    logged and reported as False; nothing is retried.
    """

    EMAILS_PATH = "/v1/emails"
    TIMEOUT_SECONDS = 10.0

    def __init__(
        self,
        settings: Settings,
        client: Optional[httpx.AsyncClient] = None,
    ):
        """
        Initialize the notifier.

        Args:
            settings: Settings carrying API key, API URL and sender address
            client: Optional preconfigured httpx client (tests inject a
                    client with a mock transport)
        """
        self._api_key = settings.veilmail_api_key
        self._api_url = settings.veilmail_api_url.rstrip("/")
        self._from = settings.mail_from
        self._client = client

    def build_request_body(self, notification: Notification) -> dict:
        """Build the VeilMail send-email body for a notification."""
        message = render_message(notification)
        return {
            "from": self._from,
            "to": [notification.recipient],
            "subject": message.subject,
            "html": message.html,
            "tags": message.tags,
            "type": "transactional",
        }

    async def _post(self, body: dict) -> httpx.Response:
        headers = {
            "Authorization": f"Bearer {self._api_key}",
            "Content-Type": "application/json",
        }
        url = f"{self._api_url}{self.EMAILS_PATH}"
        if self._client is not None:
            return await self._client.post(
                url, json=body, headers=headers, timeout=self.TIMEOUT_SECONDS
            )
        async with httpx.AsyncClient() as client:
            return await client.post(
                url, json=body, headers=headers, timeout=self.TIMEOUT_SECONDS
            )

    async def deliver(self, notification: Notification) -> None:
        """
        Send a notification, raising on failure.

        Raises:
            NotificationDeliveryError: If the request fails or VeilMail
                                       answers with a non-2xx status
        """
        body = self.build_request_body(notification)
        try:
            response = await self._post(body)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise NotificationDeliveryError(
                f"VeilMail rejected {notification.kind.value} email",
                status_code=e.response.status_code,
            ) from e
        except httpx.HTTPError as e:
            raise NotificationDeliveryError(
                f"VeilMail request failed: {e}"
            ) from e

    async def send(self, notification: Notification) -> bool:
        try:
            await self.deliver(notification)
        except NotificationDeliveryError as e:
            logger.warning(
                f"Failed to deliver {notification.kind.value} email "
                f"to {notification.recipient}: {e.message}"
            )
            return False
        logger.debug(
            f"Delivered {notification.kind.value} email to {notification.recipient}"
        )
        return True


class InMemoryNotifier(INotifier):
    """
    Notifier that records messages instead of sending them.

    Rendering still runs, so template errors surface in tests.
    """

    def __init__(self, fail: bool = False):
        self.sent: list[Notification] = []
        self.rendered: list[EmailMessage] = []
        self.fail = fail

    async def send(self, notification: Notification) -> bool:
        if self.fail:
            return False
        self.rendered.append(render_message(notification))
        self.sent.append(notification)
        return True

    def last(self, kind=None, recipient: Optional[str] = None) -> Optional[Notification]:
        """Most recent notification matching kind and recipient, if any."""
        for notification in reversed(self.sent):
            if kind is not None and notification.kind != kind:
                continue
            if recipient is not None and notification.recipient != recipient:
                continue
            return notification
        return None


class LoggingNotifier(INotifier):
    """Notifier that only logs the subject line; used when mail is not configured."""

    async def send(self, notification: Notification) -> bool:
        message = render_message(notification)
        logger.info(
            f"Mail delivery not configured; dropping '{message.subject}' "
            f"for {notification.recipient}"
        )
        return True


def create_notifier(settings: Settings) -> INotifier:
    """Pick a notifier for the given settings."""
    if settings.veilmail_api_key:
        return VeilMailNotifier(settings)
    logger.warning("VEILMAIL_API_KEY not set, outgoing mail will only be logged")
    return LoggingNotifier()
