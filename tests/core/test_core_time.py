"""
Tests for core.time — Clock protocol and temporal helpers.
"""

import pytest
from datetime import datetime, timezone, timedelta

from core.time.clock import (
    FixedClock,
    SystemClock,
    set_default_clock,
    get_default_clock,
    now_utc,
)
from core.time.temporal import TimeWindow, elapsed_since


# ── Clock Tests ──────────────────────────────────────────────

class TestSystemClock:
    def test_returns_aware_datetime(self):
        dt = SystemClock().now_utc()
        assert dt.tzinfo is not None
        assert dt.utcoffset() == timedelta(0)

    def test_time_advances(self):
        clock = SystemClock()
        t1 = clock.now_utc()
        t2 = clock.now_utc()
        assert t2 >= t1


class TestFixedClock:
    def test_returns_fixed_time(self):
        fixed = datetime(2026, 3, 1, 9, 0, tzinfo=timezone.utc)
        clock = FixedClock(fixed)
        assert clock.now_utc() == fixed
        assert clock.now_utc() == fixed

    def test_rejects_naive_datetime(self):
        with pytest.raises(ValueError, match="timezone-aware"):
            FixedClock(datetime(2026, 1, 1))

    def test_advance_seconds_and_minutes(self):
        fixed = datetime(2026, 3, 1, 9, 0, tzinfo=timezone.utc)
        clock = FixedClock(fixed)
        clock.advance(30)
        clock.advance(minutes=15)
        assert clock.now_utc() == fixed + timedelta(minutes=15, seconds=30)

    def test_set_rejects_naive(self):
        clock = FixedClock(datetime(2026, 3, 1, tzinfo=timezone.utc))
        with pytest.raises(ValueError):
            clock.set(datetime(2026, 3, 2))


class TestDefaultClock:
    def test_set_and_get_default(self):
        original = get_default_clock()
        fixed = FixedClock(datetime(2026, 1, 1, tzinfo=timezone.utc))
        set_default_clock(fixed)
        try:
            assert now_utc() == datetime(2026, 1, 1, tzinfo=timezone.utc)
        finally:
            set_default_clock(original)


# ── TimeWindow Tests ─────────────────────────────────────────

class TestTimeWindow:
    START = datetime(2026, 1, 1, tzinfo=timezone.utc)
    END = datetime(2026, 1, 31, 23, 59, tzinfo=timezone.utc)

    def test_contains_is_inclusive(self):
        window = TimeWindow(start=self.START, end=self.END)
        assert window.contains(self.START)
        assert window.contains(self.END)
        assert window.contains(datetime(2026, 1, 15, tzinfo=timezone.utc))

    def test_before_and_after(self):
        window = TimeWindow(start=self.START, end=self.END)
        assert window.is_before_start(self.START - timedelta(seconds=1))
        assert window.is_after_end(self.END + timedelta(seconds=1))
        assert not window.contains(self.END + timedelta(seconds=1))

    def test_start_after_end_rejected(self):
        with pytest.raises(ValueError):
            TimeWindow(start=self.END, end=self.START)


class TestElapsedSince:
    def test_elapsed(self):
        since = datetime(2026, 3, 1, 9, 0, tzinfo=timezone.utc)
        now = since + timedelta(minutes=12)
        assert elapsed_since(since, now) == timedelta(minutes=12)

    def test_floored_at_zero(self):
        since = datetime(2026, 3, 1, 9, 0, tzinfo=timezone.utc)
        assert elapsed_since(since, since - timedelta(minutes=1)) == timedelta(0)
