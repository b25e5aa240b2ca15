"""
POS Core Time — Public API
============================
Explicit clock protocol and calendar helpers.
"""

from core.time.clock import Clock, FixedClock, SystemClock
from core.time.temporal import (
    days_until,
    is_expiring_soon,
    is_past_expiry,
    parse_date,
)

__all__ = [
    "Clock",
    "FixedClock",
    "SystemClock",
    "days_until",
    "is_past_expiry",
    "is_expiring_soon",
    "parse_date",
]
