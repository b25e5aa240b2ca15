"""
POS Engine — Starter Catalog
==============================
Products loaded the first time a terminal starts with no stored
inventory. Once anything is saved, the stored catalog wins.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Tuple

from engines.pos.catalog import CatalogStore, Product

STARTER_PRODUCTS: Tuple[Product, ...] = (
    Product("BVG-001", "480000000001", "Bottled Water 500ml", "Beverages", Decimal("20"), 120, date(2026, 12, 31)),
    Product("BVG-002", "480000000002", "Iced Tea 330ml", "Beverages", Decimal("35"), 80, date(2026, 12, 31)),
    Product("SNK-001", "480000000101", "Potato Chips 60g", "Snacks", Decimal("55"), 60, date(2025, 12, 31)),
    Product("SNK-002", "480000000102", "Chocolate Bar", "Snacks", Decimal("45"), 65, date(2025, 11, 30)),
    Product("PRC-001", "480000000201", "Toothpaste 100g", "Personal Care", Decimal("89"), 50, date(2026, 6, 30)),
    Product("GRC-001", "480000000301", "Rice 1kg", "Grocery", Decimal("68"), 200, date(2026, 3, 31)),
    Product("GRC-002", "480000000302", "Eggs (dozen)", "Grocery", Decimal("120"), 30, date(2025, 10, 20)),
    Product("GRC-003", "480000000303", "Cooking Oil 1L", "Grocery", Decimal("175"), 40, date(2026, 9, 30)),
)


def starter_catalog() -> CatalogStore:
    return CatalogStore(STARTER_PRODUCTS)
