"""
Tests for core.time — Clock protocol and calendar helpers.
"""

from datetime import date, datetime, timezone

import pytest

from core.time.clock import FixedClock, SystemClock
from core.time.temporal import (
    days_until,
    is_expiring_soon,
    is_past_expiry,
    parse_date,
)

TODAY = date(2026, 10, 18)


# ── Clock Tests ──────────────────────────────────────────────

class TestSystemClock:
    def test_returns_aware_datetime(self):
        assert SystemClock().now().tzinfo is not None

    def test_today_matches_now(self):
        clock = SystemClock()
        assert clock.today() in (clock.now().date(), date.today())


class TestFixedClock:
    def test_returns_fixed_time(self):
        fixed = datetime(2026, 10, 18, 9, 30, tzinfo=timezone.utc)
        clock = FixedClock(fixed)
        assert clock.now() == fixed
        assert clock.today() == TODAY

    def test_rejects_naive_datetime(self):
        with pytest.raises(ValueError, match="timezone-aware"):
            FixedClock(datetime(2026, 10, 18))

    def test_advance_rolls_date(self):
        clock = FixedClock(datetime(2026, 10, 18, 23, 59, 59, tzinfo=timezone.utc))
        clock.advance(2)
        assert clock.today() == date(2026, 10, 19)


# ── Calendar helpers ─────────────────────────────────────────

class TestDaysUntil:
    def test_future(self):
        assert days_until(date(2026, 10, 28), TODAY) == 10

    def test_expiry_day_is_zero(self):
        assert days_until(TODAY, TODAY) == 0

    def test_past_is_negative(self):
        assert days_until(date(2026, 10, 17), TODAY) == -1

    def test_no_expiry(self):
        assert days_until(None, TODAY) is None


class TestIsPastExpiry:
    def test_yesterday_is_expired(self):
        assert is_past_expiry(date(2026, 10, 17), TODAY)

    def test_expiry_day_not_expired(self):
        assert not is_past_expiry(TODAY, TODAY)

    def test_no_expiry_never_expires(self):
        assert not is_past_expiry(None, TODAY)


class TestIsExpiringSoon:
    def test_inside_window(self):
        assert is_expiring_soon(date(2026, 11, 1), TODAY, 30)

    def test_window_boundary_inclusive(self):
        assert is_expiring_soon(date(2026, 11, 17), TODAY, 30)
        assert not is_expiring_soon(date(2026, 11, 18), TODAY, 30)

    def test_expired_is_not_expiring_soon(self):
        assert not is_expiring_soon(date(2026, 10, 1), TODAY, 30)

    def test_no_expiry(self):
        assert not is_expiring_soon(None, TODAY, 30)


class TestParseDate:
    def test_iso_string(self):
        assert parse_date("2026-12-31") == date(2026, 12, 31)

    def test_empty_means_none(self):
        assert parse_date("") is None
        assert parse_date(None) is None

    def test_datetime_truncates(self):
        assert parse_date(datetime(2026, 1, 2, 3, 4)) == date(2026, 1, 2)

    def test_invalid_raises(self):
        with pytest.raises(ValueError):
            parse_date("not-a-date")
