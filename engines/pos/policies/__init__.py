"""
POS Engine — Policies
=======================
The single "can this quantity be reserved against this product" rule.

Cart.add, Cart.update_quantity and the checkout validator all call
reservation_error() so the stock and expiry invariants are enforced
identically at every call site.
"""

from __future__ import annotations

from datetime import date
from typing import Optional

from core.commands.rejection import RejectionReason
from engines.pos.catalog import Product
from engines.pos.errors import (
    ExpiredProduct,
    InsufficientStock,
    NotFound,
    PosError,
)


def reservation_error(
    product: Optional[Product],
    quantity: int,
    today: date,
    *,
    product_id: str = "",
    policy_name: str = "reservation_policy",
) -> Optional[PosError]:
    """
    Return the error that forbids reserving `quantity` units, or None.

    Checks, in order: product exists, product not expired,
    quantity <= current stock. Always reads the live product, never
    a denormalized cart copy.
    """
    if product is None:
        return NotFound(product_id, policy_name=policy_name)

    if product.is_expired(today):
        return ExpiredProduct(
            product.product_id, product.name, policy_name=policy_name,
        )

    if quantity > product.stock:
        return InsufficientStock(
            product.product_id,
            product.name,
            requested=quantity,
            available=product.stock,
            policy_name=policy_name,
        )

    return None


def reservation_policy(
    product: Optional[Product],
    quantity: int,
    today: date,
    *,
    product_id: str = "",
) -> Optional[RejectionReason]:
    """Rejection-value form of reservation_error()."""
    error = reservation_error(product, quantity, today, product_id=product_id)
    if error is None:
        return None
    return error.to_rejection()


def can_reserve(product: Optional[Product], quantity: int, today: date) -> bool:
    return reservation_error(product, quantity, today) is None
