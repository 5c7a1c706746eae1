"""
Salon Core — Temporal Helpers
===============================
Pure functions for time interval logic.
All functions take explicit datetime arguments; no hidden clock access.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta


# ══════════════════════════════════════════════════════════════
# TIME WINDOW: Closed interval [start, end]
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class TimeWindow:
    """
    A closed time interval [start, end].

    Invariant: start <= end (enforced at construction).
    """

    start: datetime
    end: datetime

    def __post_init__(self) -> None:
        if self.start > self.end:
            raise ValueError(
                f"TimeWindow start ({self.start}) must be <= end ({self.end})."
            )

    def contains(self, dt: datetime) -> bool:
        """Inclusive on both ends."""
        return self.start <= dt <= self.end

    def is_before_start(self, dt: datetime) -> bool:
        return dt < self.start

    def is_after_end(self, dt: datetime) -> bool:
        return dt > self.end


def elapsed_since(since: datetime, now: datetime) -> timedelta:
    """Elapsed time, floored at zero when clocks disagree."""
    delta = now - since
    if delta < timedelta(0):
        return timedelta(0)
    return delta
