"""
Notification module exceptions.

Delivery failures never reach auth callers; notifiers raise these
internally and the dispatch path logs them.
"""

from typing import Optional

from shared.exceptions import AuthAppError, ExternalServiceError


class NotificationDeliveryError(ExternalServiceError):
    """Raised when the mail provider rejects or fails a send."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(
            message,
            service="veilmail",
            code="NOTIFICATION_DELIVERY_FAILED",
            details={"provider_status": status_code} if status_code else {},
        )


class MissingPayloadError(AuthAppError):
    """Raised when a notification lacks a value its template needs."""

    def __init__(self, kind: str, field: str):
        super().__init__(
            f"Notification '{kind}' requires payload field '{field}'",
            code="MISSING_PAYLOAD",
            details={"kind": kind, "field": field},
        )
