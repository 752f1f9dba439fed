"""
Email rendering for auth notifications.

Each kind has a subject, an HTML body and a set of tags used by
VeilMail for filtering and analytics.
"""

from html import escape
from typing import Any

from .exceptions import MissingPayloadError
from .models import EmailMessage, Notification, NotificationKind


def _require(notification: Notification, field: str) -> Any:
    if field not in notification.payload:
        raise MissingPayloadError(notification.kind.value, field)
    return notification.payload[field]


def render_message(notification: Notification) -> EmailMessage:
    """
    Render a notification into a transactional email.

    Args:
        notification: The message intent to render

    Returns:
        EmailMessage with subject, HTML body and tags

    Raises:
        MissingPayloadError: If the payload lacks a field the template uses
    """
    kind = notification.kind

    if kind == NotificationKind.VERIFICATION:
        name = escape(str(_require(notification, "name")))
        url = escape(str(_require(notification, "url")), quote=True)
        return EmailMessage(
            subject="Verify your email address",
            html=(
                f"<p>Hi {name},</p>"
                f'<p>Click <a href="{url}">here</a> to verify your email. '
                "This link expires in 1 hour.</p>"
            ),
            tags=["auth", "verification"],
        )

    if kind == NotificationKind.PASSWORD_RESET:
        url = escape(str(_require(notification, "url")), quote=True)
        return EmailMessage(
            subject="Reset your password",
            html=(
                f'<p>Click <a href="{url}">here</a> to reset your password. '
                "This link expires in 1 hour.</p>"
            ),
            tags=["auth", "password-reset"],
        )

    if kind == NotificationKind.TWO_FACTOR_CODE:
        code = escape(str(_require(notification, "code")))
        return EmailMessage(
            subject=f"{code} is your verification code",
            html=f"<p>Your code: <strong>{code}</strong></p><p>Expires in 5 minutes.</p>",
            tags=["auth", "2fa"],
        )

    if kind == NotificationKind.WELCOME:
        name = escape(str(_require(notification, "name")))
        return EmailMessage(
            subject="Welcome!",
            html=f"<p>Welcome, {name}! Your account is active.</p>",
            tags=["auth", "welcome"],
        )

    if kind == NotificationKind.PASSWORD_CHANGED:
        return EmailMessage(
            subject="Your password was changed",
            html=(
                "<p>Your password was changed. "
                "If you didn't do this, reset it immediately.</p>"
            ),
            tags=["auth", "security"],
        )

    # TWO_FACTOR_TOGGLED
    status = "enabled" if _require(notification, "enabled") else "disabled"
    return EmailMessage(
        subject=f"Two-factor authentication {status}",
        html=f"<p>2FA has been {status} on your account.</p>",
        tags=["auth", "2fa", "security"],
    )
