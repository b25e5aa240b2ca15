"""
POS Engine — Pricing
======================
Pure mapping (cart lines, discount %, tax %) → totals.

    subtotal       = Σ unit_price × quantity
    discount       = subtotal × discount% / 100
    taxable        = max(0, subtotal − discount)
    tax            = taxable × tax% / 100
    total          = taxable + tax

No rounding happens here. Amounts are rounded to 2 dp only when
displayed or frozen into a receipt, so there is no compounding
drift across subtotal → discount → tax.

Missing or non-numeric percentages count as zero. No failure modes.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Iterable

from core.primitives.money import ZERO, coerce_decimal, round_money
from engines.pos.cart import CartLine

HUNDRED = Decimal("100")


@dataclass(frozen=True)
class PricingResult:
    subtotal: Decimal
    discount_amount: Decimal
    tax_amount: Decimal
    total: Decimal

    @property
    def taxable_amount(self) -> Decimal:
        return max(ZERO, self.subtotal - self.discount_amount)

    def rounded(self) -> PricingResult:
        """Copy with every amount rounded to 2 dp (display only)."""
        return PricingResult(
            subtotal=round_money(self.subtotal),
            discount_amount=round_money(self.discount_amount),
            tax_amount=round_money(self.tax_amount),
            total=round_money(self.total),
        )

    def to_dict(self) -> dict:
        return {
            "subtotal": str(self.subtotal),
            "discount_amount": str(self.discount_amount),
            "tax_amount": str(self.tax_amount),
            "total": str(self.total),
        }


def compute_totals(
    lines: Iterable[CartLine],
    discount_pct: Any = 0,
    tax_pct: Any = 0,
) -> PricingResult:
    subtotal = sum((line.unit_price * line.quantity for line in lines), ZERO)
    discount_amount = subtotal * (coerce_decimal(discount_pct) / HUNDRED)
    taxable = max(ZERO, subtotal - discount_amount)
    tax_amount = taxable * (coerce_decimal(tax_pct) / HUNDRED)
    return PricingResult(
        subtotal=subtotal,
        discount_amount=discount_amount,
        tax_amount=tax_amount,
        total=taxable + tax_amount,
    )
