# PropDesk Clock Module
"""
Clock protocol for "today" resolution in the risk engine.
"""

from datetime import datetime, timedelta, timezone
from typing import Protocol


class IClock(Protocol):
    """
    Protocol for time management.

    Implementations provide current time from various sources:
    - Live: System clock
    - Tests/replay: a pinned instant
    """

    def now(self) -> datetime:
        """
        Get the current time.

        Returns:
            Current timezone-aware datetime (UTC).
        """
        ...


class SystemClock:
    """Wall clock in UTC."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)


class FixedClock:
    """
    Clock pinned to a single instant. Naive datetimes are treated as UTC.
    """

    def __init__(self, instant: datetime) -> None:
        self._instant = to_utc(instant)

    def now(self) -> datetime:
        return self._instant

    def advance(self, **delta_kwargs) -> None:
        """Move the pinned instant forward, e.g. ``advance(seconds=30)``."""
        self._instant = self._instant + timedelta(**delta_kwargs)


def to_utc(dt: datetime) -> datetime:
    """Converts a datetime to UTC, assuming UTC if naive."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)
