"""
POS Engine — Receipt
======================
Immutable snapshot of one completed sale.

A Receipt is created exactly once, by the sale committer, and never
mutated afterwards. It is self-contained: everything a printing or
display collaborator needs is on the value, already rounded to 2 dp.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Iterable, Optional, Tuple

from core.primitives.money import round_money
from engines.pos.cart import CartLine
from engines.pos.pricing import PricingResult

RECEIPT_ID_PREFIX = "OR-"
UNKNOWN_CASHIER = "—"


def receipt_id_for(issued_at: datetime) -> str:
    """Time-based transaction id: OR-<epoch milliseconds>."""
    return f"{RECEIPT_ID_PREFIX}{int(issued_at.timestamp() * 1000)}"


def format_timestamp(issued_at: datetime) -> str:
    """e.g. 10/18/2026, 3:04:05 PM"""
    hour = issued_at.hour % 12 or 12
    return (
        f"{issued_at.month}/{issued_at.day}/{issued_at.year}, "
        f"{hour}:{issued_at:%M:%S} {'AM' if issued_at.hour < 12 else 'PM'}"
    )


@dataclass(frozen=True)
class ReceiptLine:
    product_id: str
    name: str
    unit_price: Decimal
    quantity: int
    line_total: Decimal

    @classmethod
    def from_cart_line(cls, line: CartLine) -> ReceiptLine:
        return cls(
            product_id=line.product_id,
            name=line.name,
            unit_price=round_money(line.unit_price),
            quantity=line.quantity,
            line_total=round_money(line.line_total),
        )

    def to_dict(self) -> dict:
        return {
            "id": self.product_id,
            "name": self.name,
            "price": str(self.unit_price),
            "qty": self.quantity,
            "line_total": str(self.line_total),
        }


@dataclass(frozen=True)
class Receipt:
    receipt_id: str
    issued_at: datetime
    timestamp: str
    lines: Tuple[ReceiptLine, ...]
    subtotal: Decimal
    discount_pct: Decimal
    discount_amount: Decimal
    tax_pct: Decimal
    tax_amount: Decimal
    total: Decimal
    payment_method: str
    cash_given: Optional[Decimal]
    change: Optional[Decimal]
    currency: str
    cashier: str = UNKNOWN_CASHIER

    def __post_init__(self):
        if not self.receipt_id:
            raise ValueError("receipt_id must be non-empty.")
        if not isinstance(self.lines, tuple) or not self.lines:
            raise ValueError("lines must be a non-empty tuple.")

    @property
    def item_count(self) -> int:
        return sum(line.quantity for line in self.lines)

    def to_dict(self) -> dict:
        def _amount(value: Optional[Decimal]) -> Optional[str]:
            return None if value is None else str(value)

        return {
            "id": self.receipt_id,
            "issued_at": self.issued_at.isoformat(),
            "time": self.timestamp,
            "items": [line.to_dict() for line in self.lines],
            "subtotal": str(self.subtotal),
            "discount_pct": str(self.discount_pct),
            "discount_amount": str(self.discount_amount),
            "tax_pct": str(self.tax_pct),
            "tax_amount": str(self.tax_amount),
            "total": str(self.total),
            "payment_method": self.payment_method,
            "cash_given": _amount(self.cash_given),
            "change": _amount(self.change),
            "currency": self.currency,
            "cashier": self.cashier,
        }


def build_receipt(
    *,
    receipt_id: str,
    issued_at: datetime,
    lines: Iterable[CartLine],
    pricing: PricingResult,
    discount_pct: Decimal,
    tax_pct: Decimal,
    payment_method: str,
    cash_given: Optional[Decimal],
    change: Optional[Decimal],
    currency: str,
    cashier: Optional[str] = None,
) -> Receipt:
    rounded = pricing.rounded()
    return Receipt(
        receipt_id=receipt_id,
        issued_at=issued_at,
        timestamp=format_timestamp(issued_at),
        lines=tuple(ReceiptLine.from_cart_line(line) for line in lines),
        subtotal=rounded.subtotal,
        discount_pct=discount_pct,
        discount_amount=rounded.discount_amount,
        tax_pct=tax_pct,
        tax_amount=rounded.tax_amount,
        total=rounded.total,
        payment_method=payment_method,
        cash_given=None if cash_given is None else round_money(cash_given),
        change=change,
        currency=currency,
        cashier=cashier or UNKNOWN_CASHIER,
    )
