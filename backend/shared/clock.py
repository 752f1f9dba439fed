"""
Clock abstraction.

Expiry checks ask an injected clock for the current time instead of
calling datetime.now() themselves, so tests can move time forward
deterministically.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional, Protocol, runtime_checkable


@runtime_checkable
class Clock(Protocol):
    """Anything that can tell the current UTC time."""

    def now(self) -> datetime:
        ...


class SystemClock:
    """Wall clock in UTC."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)


class ManualClock:
    """
    Clock that only moves when told to.

    Used by tests to simulate token and session expiry without sleeping.
    """

    def __init__(self, start: Optional[datetime] = None):
        self._now = start or datetime(2025, 1, 1, tzinfo=timezone.utc)

    def now(self) -> datetime:
        return self._now

    def advance(self, **kwargs) -> datetime:
        """Move the clock forward by a timedelta built from kwargs."""
        self._now = self._now + timedelta(**kwargs)
        return self._now

    def set(self, moment: datetime) -> None:
        self._now = moment
