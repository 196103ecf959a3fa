"""Time utilities for consistent timestamp handling.

Code that needs "now" or "today" takes a Clock instead of calling
datetime.now() directly, so tests can pin the current date.
"""

from datetime import date, datetime, timezone


def utc_now() -> datetime:
    """Return current UTC timestamp (timezone-aware)."""
    return datetime.now(timezone.utc)


class Clock:
    """Wall clock backed by the system time."""

    def now(self) -> datetime:
        return utc_now()

    def today(self) -> date:
        return self.now().date()


class FixedClock(Clock):
    """Clock frozen at a given instant."""

    def __init__(self, at: datetime) -> None:
        if at.tzinfo is None:
            at = at.replace(tzinfo=timezone.utc)
        self._at = at

    def now(self) -> datetime:
        return self._at


_system_clock = Clock()


def get_clock() -> Clock:
    """Return the process clock (FastAPI dependency; override in tests)."""
    return _system_clock
