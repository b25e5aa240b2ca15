"""
POS Money Primitive — Decimal Amount Helpers
=============================================
Amounts are Decimal end to end. Floats never enter arithmetic.

RULES:
- Free-text and numeric input is coerced through coerce_decimal();
  anything non-numeric, non-finite or out of range becomes the default
  (zero).
- Rounding to 2 decimal places (half-up) happens only at display or
  receipt time, through round_money().
- Currency is a display label only. No conversion is ever performed.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, Optional

ZERO = Decimal("0")
CENT = Decimal("0.01")

# Largest accepted magnitude is below 10**(MAX_ADJUSTED_EXPONENT + 1).
MAX_ADJUSTED_EXPONENT = 15


def coerce_decimal(value: Any, default: Optional[Decimal] = ZERO) -> Optional[Decimal]:
    """
    Coerce operator input to Decimal.

    Accepts Decimal, int, float (via str, to avoid binary noise) and
    numeric strings with surrounding whitespace. Everything else,
    including bools, NaN, infinities and magnitudes of 10**16 or more,
    yields `default`.
    """
    if value is None or isinstance(value, bool):
        return default
    if isinstance(value, Decimal):
        result = value
    else:
        text = str(value).strip().replace(",", "")
        if not text:
            return default
        try:
            result = Decimal(text)
        except (InvalidOperation, ValueError):
            return default
    if not result.is_finite():
        return default
    if result and result.adjusted() > MAX_ADJUSTED_EXPONENT:
        return default
    return result


def coerce_int(value: Any, default: int = 0) -> int:
    """Coerce operator input to a whole number (fractions truncate)."""
    amount = coerce_decimal(value, Decimal(default))
    return int(amount)


def round_money(amount: Decimal) -> Decimal:
    """Round to 2 decimal places, half-up."""
    return Decimal(amount).quantize(CENT, rounding=ROUND_HALF_UP)


def format_money(amount: Any, currency: str = "PHP") -> str:
    """
    Render an amount for display, e.g. format_money(1234.5, "PHP")
    → "PHP 1,234.50". Negative amounts keep their sign.
    """
    rounded = round_money(coerce_decimal(amount))
    return f"{currency} {rounded:,.2f}"
