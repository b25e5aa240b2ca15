"""
POS Engine — Checkout Validator and Sale Committer
====================================================
Validator: pure predicate deciding whether cart + payment is sellable.
Committer: deducts stock and produces the Receipt, all-or-nothing.

The committer re-runs the validator itself. If the sale is not
eligible it raises CheckoutNotEligible and touches nothing. Stock is
deducted through CatalogStore.apply_stock_deltas(), which validates
every line before replacing any product, so a stock race surfaces as
InvalidState with the catalog unchanged (never a silent clamp).

Clearing the cart and resetting the pending cash amount after a
successful sale is the caller's job, not the committer's.
"""

from __future__ import annotations

import logging
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Iterable, Optional

from core.commands.rejection import ReasonCode, RejectionReason
from core.primitives.money import ZERO, coerce_decimal, round_money
from engines.pos.cart import Cart, CartLine
from engines.pos.catalog import CatalogStore
from engines.pos.errors import CheckoutNotEligible
from engines.pos.policies import reservation_policy
from engines.pos.pricing import PricingResult
from engines.pos.receipt import Receipt, build_receipt, receipt_id_for

logger = logging.getLogger("pos.checkout")

PAYMENT_CASH = "Cash"
PAYMENT_CARD = "Card"
PAYMENT_EWALLET = "E-Wallet"

VALID_PAYMENT_METHODS = (PAYMENT_CASH, PAYMENT_CARD, PAYMENT_EWALLET)


def normalize_payment_method(method: Any) -> Optional[str]:
    """Case-insensitive match against the known methods; None if unknown."""
    if not isinstance(method, str):
        return None
    lowered = method.strip().lower()
    for known in VALID_PAYMENT_METHODS:
        if known.lower() == lowered:
            return known
    return None


def compute_change(cash_given: Any, total: Decimal) -> Decimal:
    """max(0, round(cash_given − total, 2))"""
    return max(ZERO, round_money(coerce_decimal(cash_given) - total))


# ══════════════════════════════════════════════════════════════
# CHECKOUT VALIDATOR
# ══════════════════════════════════════════════════════════════

def checkout_rejection(
    lines: Iterable[CartLine],
    catalog: CatalogStore,
    payment_method: Any,
    cash_given: Any,
    total: Decimal,
    today: date,
) -> Optional[RejectionReason]:
    """
    First reason the sale is not eligible, or None.

    - cart non-empty
    - every line: product exists, not expired, quantity <= live stock
    - payment method known
    - cash payments: cash_given (free text, non-numeric → 0) covers
      the unrounded total
    """
    lines = tuple(lines)
    if not lines:
        return RejectionReason(
            code=ReasonCode.EMPTY_CART,
            message="Cart is empty.",
            policy_name="checkout_validator",
        )

    for line in lines:
        reason = reservation_policy(
            catalog.find_by_id(line.product_id),
            line.quantity,
            today,
            product_id=line.product_id,
        )
        if reason is not None:
            return reason

    method = normalize_payment_method(payment_method)
    if method is None:
        return RejectionReason(
            code=ReasonCode.INVALID_PAYMENT_METHOD,
            message=(
                f"Payment method '{payment_method}' not valid. "
                f"Must be one of: {', '.join(VALID_PAYMENT_METHODS)}."
            ),
            policy_name="checkout_validator",
        )

    if method == PAYMENT_CASH:
        cash = coerce_decimal(cash_given)
        if cash < total:
            return RejectionReason(
                code=ReasonCode.INSUFFICIENT_CASH,
                message=(
                    f"Cash given ({cash}) is less than the total "
                    f"({round_money(total)})."
                ),
                policy_name="checkout_validator",
            )

    return None


def can_checkout(
    lines: Iterable[CartLine],
    catalog: CatalogStore,
    payment_method: Any,
    cash_given: Any,
    total: Decimal,
    today: date,
) -> bool:
    return checkout_rejection(
        lines, catalog, payment_method, cash_given, total, today,
    ) is None


# ══════════════════════════════════════════════════════════════
# SALE COMMITTER
# ══════════════════════════════════════════════════════════════

def complete_sale(
    cart: Cart,
    catalog: CatalogStore,
    pricing: PricingResult,
    payment_method: Any,
    cash_given: Any,
    *,
    discount_pct: Decimal,
    tax_pct: Decimal,
    currency: str,
    now: datetime,
    cashier: Optional[str] = None,
    receipt_id: Optional[str] = None,
) -> Receipt:
    """
    Deduct stock for every cart line and return the sale's Receipt.

    Raises CheckoutNotEligible (no mutation) when the validator
    refuses, and InvalidState (no mutation) if a stock delta would
    drive any product negative.
    """
    lines = cart.snapshot()
    reason = checkout_rejection(
        lines, catalog, payment_method, cash_given, pricing.total, now.date(),
    )
    if reason is not None:
        logger.info("Checkout refused: %s (%s).", reason.code, reason.message)
        raise CheckoutNotEligible(reason, policy_name="sale_committer")

    method = normalize_payment_method(payment_method)
    deltas = {line.product_id: -line.quantity for line in lines}
    catalog.apply_stock_deltas(deltas)

    is_cash = method == PAYMENT_CASH
    receipt = build_receipt(
        receipt_id=receipt_id or receipt_id_for(now),
        issued_at=now,
        lines=lines,
        pricing=pricing,
        discount_pct=coerce_decimal(discount_pct),
        tax_pct=coerce_decimal(tax_pct),
        payment_method=method,
        cash_given=coerce_decimal(cash_given) if is_cash else None,
        change=compute_change(cash_given, pricing.total) if is_cash else None,
        currency=currency,
        cashier=cashier,
    )
    logger.info(
        "Sale %s completed: %s item(s), total %s %s via %s.",
        receipt.receipt_id, receipt.item_count, receipt.currency,
        receipt.total, method,
    )
    return receipt
