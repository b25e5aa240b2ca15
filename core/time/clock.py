"""
POS Core Time — Explicit Clock Protocol
=========================================
Engine logic never calls datetime.now() or date.today() directly.
The operator session owns a Clock and passes dates/times into the
catalog, cart and checkout functions explicitly.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone
from typing import Protocol


# ══════════════════════════════════════════════════════════════
# CLOCK PROTOCOL
# ══════════════════════════════════════════════════════════════

class Clock(Protocol):
    """Injectable time source."""

    def now(self) -> datetime:
        """Return the current timezone-aware local time."""
        ...  # pragma: no cover

    def today(self) -> date:
        """Return the current calendar date (used for expiry checks)."""
        ...  # pragma: no cover


# ══════════════════════════════════════════════════════════════
# IMPLEMENTATIONS
# ══════════════════════════════════════════════════════════════

class SystemClock:
    """Production clock — real system time in the local timezone."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc).astimezone()

    def today(self) -> date:
        return self.now().date()


class FixedClock:
    """
    Test clock — returns a fixed timestamp.

    Usage:
        clock = FixedClock(datetime(2026, 10, 18, 9, 0, tzinfo=timezone.utc))
        assert clock.today() == date(2026, 10, 18)
    """

    def __init__(self, fixed_dt: datetime) -> None:
        if fixed_dt.tzinfo is None:
            raise ValueError("FixedClock requires timezone-aware datetime.")
        self._fixed_dt = fixed_dt

    def now(self) -> datetime:
        return self._fixed_dt

    def today(self) -> date:
        return self._fixed_dt.date()

    def advance(self, seconds: float) -> None:
        """Advance the fixed time (useful for multi-step test scenarios)."""
        self._fixed_dt = self._fixed_dt + timedelta(seconds=seconds)
