"""
POS Permissions - Constants
===========================
"""

from __future__ import annotations

PERMISSION_POS_SELL = "pos.sell"
PERMISSION_CATALOG_MANAGE = "catalog.manage"
PERMISSION_SETTINGS_CONFIGURE = "settings.configure"

VALID_PERMISSIONS = frozenset({
    PERMISSION_POS_SELL,
    PERMISSION_CATALOG_MANAGE,
    PERMISSION_SETTINGS_CONFIGURE,
})

ROLE_ADMIN = "admin"
ROLE_CASHIER = "cashier"

DEFAULT_ROLE_PERMISSIONS: dict[str, tuple[str, ...]] = {
    ROLE_ADMIN: tuple(
        sorted({
            PERMISSION_CATALOG_MANAGE,
            PERMISSION_POS_SELL,
            PERMISSION_SETTINGS_CONFIGURE,
        })
    ),
    ROLE_CASHIER: tuple(
        sorted({
            PERMISSION_POS_SELL,
            PERMISSION_SETTINGS_CONFIGURE,
        })
    ),
}
