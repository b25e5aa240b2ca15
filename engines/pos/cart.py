"""
POS Engine — Cart
===================
Ordered collection of cart lines keyed by product_id.

RULES:
- One CartLine per distinct product_id
- quantity >= 1 on every line
- name and unit_price are copied from the product when the line is
  created; later catalog price edits do not reprice existing lines
- Stock and expiry are checked at mutation time against the LIVE
  product, through the shared reservation policy
- A refused mutation leaves the cart exactly as it was
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from datetime import date
from decimal import Decimal
from typing import Dict, Iterator, Optional, Tuple

from core.primitives.money import coerce_int
from engines.pos.catalog import CatalogStore, Product
from engines.pos.errors import NotFound
from engines.pos.policies import reservation_error

logger = logging.getLogger("pos.cart")


@dataclass(frozen=True)
class CartLine:
    product_id: str
    name: str
    unit_price: Decimal
    quantity: int

    def __post_init__(self):
        if not self.product_id:
            raise ValueError("product_id must be non-empty.")
        if isinstance(self.quantity, bool) or not isinstance(self.quantity, int):
            raise ValueError("quantity must be an integer.")
        if self.quantity < 1:
            raise ValueError("quantity must be >= 1.")
        if not isinstance(self.unit_price, Decimal):
            raise ValueError("unit_price must be Decimal.")

    @property
    def line_total(self) -> Decimal:
        return self.unit_price * self.quantity

    def to_dict(self) -> dict:
        return {
            "id": self.product_id,
            "name": self.name,
            "price": str(self.unit_price),
            "qty": self.quantity,
        }


class Cart:
    """The active transaction's lines, in insertion order."""

    def __init__(self):
        # product_id → CartLine
        self._lines: Dict[str, CartLine] = {}

    def __len__(self) -> int:
        return len(self._lines)

    def __iter__(self) -> Iterator[CartLine]:
        return iter(tuple(self._lines.values()))

    @property
    def lines(self) -> Tuple[CartLine, ...]:
        return tuple(self._lines.values())

    @property
    def is_empty(self) -> bool:
        return not self._lines

    def get_line(self, product_id: str) -> Optional[CartLine]:
        return self._lines.get(product_id)

    def quantity_of(self, product_id: str) -> int:
        line = self._lines.get(product_id)
        return line.quantity if line else 0

    def total_item_count(self) -> int:
        return sum(line.quantity for line in self._lines.values())

    # ── Mutations ─────────────────────────────────────────────

    def add(self, product: Product, today: date) -> CartLine:
        """
        Add one unit of `product`.

        Raises ExpiredProduct, or InsufficientStock when the quantity
        already in the cart plus one exceeds the product's stock.
        """
        requested = self.quantity_of(product.product_id) + 1
        error = reservation_error(
            product, requested, today,
            product_id=product.product_id, policy_name="cart.add",
        )
        if error is not None:
            logger.info(
                "Refused add of %s: %s.", product.product_id, error.code,
            )
            raise error

        existing = self._lines.get(product.product_id)
        if existing is not None:
            line = replace(existing, quantity=requested)
        else:
            line = CartLine(
                product_id=product.product_id,
                name=product.name,
                unit_price=product.price,
                quantity=1,
            )
        self._lines[product.product_id] = line
        return line

    def update_quantity(
        self,
        product_id: str,
        new_quantity,
        catalog: CatalogStore,
        today: date,
    ) -> CartLine:
        """
        Set a line's quantity. Values below 1 (or non-numeric) clamp to 1.

        Raises NotFound when the line or product is missing and
        InsufficientStock when the quantity exceeds current stock.
        """
        existing = self._lines.get(product_id)
        if existing is None:
            raise NotFound(product_id, policy_name="cart.update_quantity")

        quantity = max(1, coerce_int(new_quantity, default=1))
        error = reservation_error(
            catalog.find_by_id(product_id), quantity, today,
            product_id=product_id, policy_name="cart.update_quantity",
        )
        if error is not None:
            logger.info(
                "Refused quantity %s for %s: %s.",
                quantity, product_id, error.code,
            )
            raise error

        line = replace(existing, quantity=quantity)
        self._lines[product_id] = line
        return line

    def remove(self, product_id: str) -> None:
        self._lines.pop(product_id, None)

    def clear(self) -> None:
        self._lines.clear()

    def snapshot(self) -> Tuple[CartLine, ...]:
        """Immutable copy of the lines (CartLine is frozen)."""
        return self.lines
