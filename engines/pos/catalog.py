"""
POS Engine — Catalog Store
============================
Product records with price, stock and expiry attributes.

RULES (NON-NEGOTIABLE):
- Products are immutable snapshots; every change swaps in a new one
- stock >= 0 and price >= 0 always
- product_id is unique; sku is unique across products
- Stock deltas never clamp: a delta that would go negative is refused
- A product with no expiry date never expires

The catalog is the one piece of shared mutable state. It assumes a
single writer; each mutation completes before the next begins.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from datetime import date, datetime
from decimal import Decimal
from typing import Dict, Iterable, Iterator, List, Mapping, Optional, Tuple

from core.primitives.money import coerce_decimal, coerce_int
from core.time.temporal import (
    days_until,
    is_expiring_soon,
    is_past_expiry,
    parse_date,
)
from engines.pos.errors import InvalidState, NotFound

logger = logging.getLogger("pos.catalog")

INVENTORY_KEY = "pos_inventory"

ALL_CATEGORIES = "All"
DEFAULT_CATEGORY = "General"
DEFAULT_ID_PREFIX = "GEN"

STATUS_EXPIRED = "Expired"
STATUS_LOW = "Low"
STATUS_OK = "OK"


# ══════════════════════════════════════════════════════════════
# PRODUCT
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class Product:
    """
    Sellable catalog item.

    Fields:
        product_id: Unique identifier (e.g. "GRC-002")
        sku:        Barcode / stock keeping unit
        name:       Display name
        category:   Free-text category used for filtering
        price:      Unit price (Decimal, >= 0)
        stock:      Sellable units on hand (int, >= 0)
        expiry:     Last sellable date, or None
    """
    product_id: str
    sku: str
    name: str
    category: str
    price: Decimal
    stock: int
    expiry: Optional[date] = None

    def __post_init__(self):
        if not self.product_id or not isinstance(self.product_id, str):
            raise ValueError("product_id must be non-empty string.")
        if not isinstance(self.sku, str):
            raise ValueError("sku must be a string.")
        if not self.name or not isinstance(self.name, str) or not self.name.strip():
            raise ValueError("name must be non-empty string.")
        if not isinstance(self.price, Decimal):
            object.__setattr__(self, "price", coerce_decimal(self.price))
        if self.price < 0:
            raise ValueError("price cannot be negative.")
        if isinstance(self.stock, bool) or not isinstance(self.stock, int):
            raise ValueError("stock must be an integer.")
        if self.stock < 0:
            raise ValueError("stock cannot be negative.")
        if self.expiry is not None and not isinstance(self.expiry, date):
            raise ValueError("expiry must be a date or None.")

    def is_expired(self, today: date) -> bool:
        return is_past_expiry(self.expiry, today)

    def days_until_expiry(self, today: date) -> Optional[int]:
        return days_until(self.expiry, today)

    def is_expiring_soon(self, today: date, within_days: int) -> bool:
        return (
            not self.is_expired(today)
            and is_expiring_soon(self.expiry, today, within_days)
        )

    def matches_text(self, query: str) -> bool:
        """Case-insensitive substring match on name, id or sku."""
        needle = (query or "").strip().lower()
        if not needle:
            return True
        return (
            needle in self.name.lower()
            or needle in self.product_id.lower()
            or (bool(self.sku) and needle in self.sku.lower())
        )

    def to_dict(self) -> dict:
        return {
            "id": self.product_id,
            "sku": self.sku,
            "name": self.name,
            "category": self.category,
            "price": str(self.price),
            "stock": self.stock,
            "expiry": self.expiry.isoformat() if self.expiry else None,
        }

    @classmethod
    def from_dict(cls, data: dict) -> Product:
        return cls(
            product_id=str(data["id"]),
            sku=str(data.get("sku") or ""),
            name=str(data["name"]),
            category=str(data.get("category") or DEFAULT_CATEGORY),
            price=coerce_decimal(data.get("price")),
            stock=coerce_int(data.get("stock")),
            expiry=parse_date(data.get("expiry")),
        )


# ══════════════════════════════════════════════════════════════
# IDENTIFIER GENERATION
# ══════════════════════════════════════════════════════════════

def category_prefix(category: str) -> str:
    """First three letters of the category, upper-cased ("GEN" if blank)."""
    cleaned = (category or "").strip()
    if not cleaned:
        return DEFAULT_ID_PREFIX
    return cleaned[:3].upper()


def generate_product_id(category: str, existing_ids: Iterable[str]) -> str:
    """
    Sequential id: PREFIX-NNN, starting at (catalog size + 1) and
    incrementing past any id already taken.
    """
    taken = set(existing_ids)
    prefix = category_prefix(category)
    seq = len(taken) + 1
    while f"{prefix}-{seq:03d}" in taken:
        seq += 1
    return f"{prefix}-{seq:03d}"


def generate_sku(now: datetime, existing_skus: Iterable[str]) -> str:
    """Last 12 digits of the epoch milliseconds, bumped past collisions."""
    taken = set(existing_skus)
    millis = int(now.timestamp() * 1000)
    candidate = str(millis)[-12:]
    while candidate in taken:
        millis += 1
        candidate = str(millis)[-12:]
    return candidate


# ══════════════════════════════════════════════════════════════
# CATALOG STORE
# ══════════════════════════════════════════════════════════════

class CatalogStore:
    """
    In-memory catalog of products, in insertion order.

    Provides lookup by product_id, sku and free text, stock deltas
    for the sale committer, and the admin editing operations.
    """

    def __init__(self, products: Iterable[Product] = ()):
        # product_id → Product
        self._products: Dict[str, Product] = {}
        for product in products:
            if product.product_id in self._products:
                raise ValueError(
                    f"Duplicate product_id '{product.product_id}'."
                )
            self._assert_sku_free(product)
            self._products[product.product_id] = product

    # ── Read side ─────────────────────────────────────────────

    def __len__(self) -> int:
        return len(self._products)

    def __iter__(self) -> Iterator[Product]:
        return iter(tuple(self._products.values()))

    def __contains__(self, product_id: object) -> bool:
        return product_id in self._products

    @property
    def products(self) -> Tuple[Product, ...]:
        return tuple(self._products.values())

    def find_by_id(self, product_id: str) -> Optional[Product]:
        return self._products.get(product_id)

    def get(self, product_id: str) -> Product:
        product = self._products.get(product_id)
        if product is None:
            raise NotFound(product_id, policy_name="catalog")
        return product

    def find_by_sku_or_id(self, token: str) -> Optional[Product]:
        """
        Resolve a scanner / manual-entry token.

        Exact match against sku first, then case-insensitive match
        against product_id.
        """
        cleaned = (token or "").strip()
        if not cleaned:
            return None
        for product in self._products.values():
            if product.sku and product.sku == cleaned:
                return product
        lowered = cleaned.lower()
        for product in self._products.values():
            if product.product_id.lower() == lowered:
                return product
        return None

    def filter(
        self, category: str = ALL_CATEGORIES, query: str = "",
    ) -> List[Product]:
        """Category (exact, or "All") AND text query (substring)."""
        match_all = not category or category.lower() == ALL_CATEGORIES.lower()
        return [
            p for p in self._products.values()
            if (match_all or p.category == category) and p.matches_text(query)
        ]

    def list_categories(self) -> Tuple[str, ...]:
        """The "All" sentinel followed by each category, first-seen order."""
        seen: Dict[str, None] = {}
        for product in self._products.values():
            seen.setdefault(product.category, None)
        return (ALL_CATEGORIES, *seen)

    # ── Derived views ─────────────────────────────────────────

    def low_stock(self, threshold: int) -> List[Product]:
        return [p for p in self._products.values() if p.stock <= threshold]

    def expiring_soon(self, today: date, within_days: int) -> List[Product]:
        return [
            p for p in self._products.values()
            if p.is_expiring_soon(today, within_days)
        ]

    def expired(self, today: date) -> List[Product]:
        return [p for p in self._products.values() if p.is_expired(today)]

    def status_label(
        self,
        product: Product,
        today: date,
        *,
        low_stock_threshold: int,
        expiry_warning_days: int,
    ) -> str:
        """Expired → Exp (Nd) → Low → OK, first match wins."""
        if product.is_expired(today):
            return STATUS_EXPIRED
        if product.is_expiring_soon(today, expiry_warning_days):
            return f"Exp ({product.days_until_expiry(today)}d)"
        if product.stock <= low_stock_threshold:
            return STATUS_LOW
        return STATUS_OK

    # ── Stock movements (committer path) ──────────────────────

    def apply_stock_delta(self, product_id: str, delta: int) -> Product:
        """Apply one signed stock delta. Never clamps below zero."""
        return self.apply_stock_deltas({product_id: delta})[0]

    def apply_stock_deltas(self, deltas: Mapping[str, int]) -> Tuple[Product, ...]:
        """
        Apply several stock deltas as one step.

        Every delta is validated before any product is replaced, so a
        failure leaves the catalog untouched.
        """
        updated: List[Product] = []
        for product_id, delta in deltas.items():
            product = self.get(product_id)
            new_stock = product.stock + delta
            if new_stock < 0:
                logger.error(
                    "Refused stock delta %s for %s: stock %s would go negative.",
                    delta, product_id, product.stock,
                )
                raise InvalidState(
                    (
                        f"Stock for '{product_id}' would become {new_stock} "
                        f"(current {product.stock}, delta {delta})."
                    ),
                    policy_name="catalog",
                )
            updated.append(replace(product, stock=new_stock))

        for product in updated:
            self._products[product.product_id] = product
        return tuple(updated)

    # ── Admin path ────────────────────────────────────────────

    def upsert(
        self,
        *,
        name: str,
        category: str = "",
        price=0,
        stock=0,
        expiry=None,
        product_id: str = "",
        sku: str = "",
        now: datetime,
    ) -> Product:
        """
        Insert a new product or replace an existing one by product_id.

        A blank product_id is generated. A blank sku keeps the existing
        product's sku, or is generated for a new product. A blank
        category becomes "General"; non-numeric price / stock coerce to 0.
        """
        cleaned_name = (name or "").strip()
        if not cleaned_name:
            raise ValueError("Name is required.")

        cleaned_category = (category or "").strip()
        product_id = (product_id or "").strip() or generate_product_id(
            cleaned_category, self._products,
        )
        existing = self._products.get(product_id)
        sku = (sku or "").strip() or (existing.sku if existing else "")
        if not sku:
            sku = generate_sku(now, (p.sku for p in self._products.values()))

        product = Product(
            product_id=product_id,
            sku=sku,
            name=cleaned_name,
            category=cleaned_category or DEFAULT_CATEGORY,
            price=coerce_decimal(price),
            stock=coerce_int(stock),
            expiry=parse_date(expiry),
        )
        self._assert_sku_free(product)

        is_update = existing is not None
        self._products[product_id] = product
        logger.info(
            "%s product %s (%s).",
            "Updated" if is_update else "Added", product_id, cleaned_name,
        )
        return product

    def remove(self, product_id: str) -> Product:
        product = self.get(product_id)
        del self._products[product_id]
        logger.info("Removed product %s.", product_id)
        return product

    def set_price(self, product_id: str, price) -> Product:
        """Admin price edit. Invalid or negative input clamps to 0."""
        amount = max(Decimal("0"), coerce_decimal(price))
        return self._replace(self.get(product_id), price=amount)

    def set_stock(self, product_id: str, stock) -> Product:
        """Admin stock edit. Invalid or negative input clamps to 0."""
        count = max(0, coerce_int(stock))
        return self._replace(self.get(product_id), stock=count)

    def set_expiry(self, product_id: str, expiry) -> Product:
        """Admin expiry edit. An empty value clears the expiry date."""
        return self._replace(self.get(product_id), expiry=parse_date(expiry))

    def _replace(self, product: Product, **changes) -> Product:
        updated = replace(product, **changes)
        self._products[product.product_id] = updated
        logger.info("Edited product %s: %s.", product.product_id, sorted(changes))
        return updated

    def _assert_sku_free(self, product: Product) -> None:
        if not product.sku:
            return
        for other in self._products.values():
            if other.sku == product.sku and other.product_id != product.product_id:
                raise InvalidState(
                    (
                        f"SKU '{product.sku}' already assigned to product "
                        f"'{other.product_id}'."
                    ),
                    policy_name="catalog",
                )

    # ── Persistence documents ─────────────────────────────────

    def to_list(self) -> List[dict]:
        return [p.to_dict() for p in self._products.values()]

    @classmethod
    def from_list(cls, rows: Iterable[dict]) -> CatalogStore:
        return cls(Product.from_dict(row) for row in rows)
