"""
POS Permissions - Action to Permission Registry
===============================================
"""

from __future__ import annotations

from core.permissions.constants import (
    PERMISSION_CATALOG_MANAGE,
    PERMISSION_POS_SELL,
    PERMISSION_SETTINGS_CONFIGURE,
)

ACTION_PERMISSION_MAP = {
    "catalog.upsert": PERMISSION_CATALOG_MANAGE,
    "catalog.remove": PERMISSION_CATALOG_MANAGE,
    "catalog.set_price": PERMISSION_CATALOG_MANAGE,
    "catalog.set_stock": PERMISSION_CATALOG_MANAGE,
    "catalog.set_expiry": PERMISSION_CATALOG_MANAGE,
    "cart.add": PERMISSION_POS_SELL,
    "cart.scan": PERMISSION_POS_SELL,
    "cart.update_quantity": PERMISSION_POS_SELL,
    "cart.remove": PERMISSION_POS_SELL,
    "cart.clear": PERMISSION_POS_SELL,
    "sale.checkout": PERMISSION_POS_SELL,
    "settings.update": PERMISSION_SETTINGS_CONFIGURE,
}


def resolve_required_permission(action: str) -> str | None:
    """Resolve required permission for an action name."""
    return ACTION_PERMISSION_MAP.get(action)
