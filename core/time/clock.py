"""
Salon Core — Injectable Clock
===============================
Validity windows, arrival timestamps and wait times all read "now"
from a Clock passed into the service, never from datetime.now()
scattered through engine logic.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Protocol


class Clock(Protocol):
    """Injectable time source."""

    def now_utc(self) -> datetime:
        """Return current UTC time."""
        ...  # pragma: no cover


class SystemClock:
    """Production clock — real system time."""

    def now_utc(self) -> datetime:
        return datetime.now(timezone.utc)


class FixedClock:
    """
    Test clock — returns a settable timestamp.

    Usage:
        clock = FixedClock(datetime(2026, 3, 1, 9, 0, tzinfo=timezone.utc))
        clock.advance(minutes=15)
    """

    def __init__(self, fixed_dt: datetime) -> None:
        if fixed_dt.tzinfo is None:
            raise ValueError("FixedClock requires timezone-aware datetime.")
        self._fixed_dt = fixed_dt

    def now_utc(self) -> datetime:
        return self._fixed_dt

    def advance(self, seconds: float = 0, *, minutes: float = 0) -> None:
        self._fixed_dt = self._fixed_dt + timedelta(seconds=seconds, minutes=minutes)

    def set(self, dt: datetime) -> None:
        if dt.tzinfo is None:
            raise ValueError("FixedClock requires timezone-aware datetime.")
        self._fixed_dt = dt


_default_clock: Clock = SystemClock()


def set_default_clock(clock: Clock) -> None:
    """Override the default clock (testing only)."""
    global _default_clock
    _default_clock = clock


def get_default_clock() -> Clock:
    return _default_clock


def now_utc() -> datetime:
    return _default_clock.now_utc()
