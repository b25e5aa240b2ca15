"""
POS Core Time — Calendar Helpers
==================================
Pure functions for expiry-date logic.
All functions take the reference date explicitly — no hidden clock access.

A missing expiry date (None) means the item never expires.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Optional


def days_until(expiry: Optional[date], today: date) -> Optional[int]:
    """
    Whole days from `today` to `expiry`.

    0 on the expiry day itself, negative once it has passed,
    None when there is no expiry date.
    """
    if expiry is None:
        return None
    return (expiry - today).days


def is_past_expiry(expiry: Optional[date], today: date) -> bool:
    """True once `today` is strictly after the expiry date."""
    if expiry is None:
        return False
    return today > expiry


def is_expiring_soon(
    expiry: Optional[date], today: date, within_days: int
) -> bool:
    """True when 0 <= days_until(expiry) <= within_days."""
    remaining = days_until(expiry, today)
    if remaining is None:
        return False
    return 0 <= remaining <= within_days


def parse_date(value) -> Optional[date]:
    """
    Parse an ISO date ("2026-12-31") coming from storage or an input form.

    Empty values mean "no expiry"; a datetime is truncated to its date.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value).strip()[:10])
