"""
POS Permissions - Public API
============================
"""

from core.permissions.constants import (
    DEFAULT_ROLE_PERMISSIONS,
    PERMISSION_CATALOG_MANAGE,
    PERMISSION_POS_SELL,
    PERMISSION_SETTINGS_CONFIGURE,
    ROLE_ADMIN,
    ROLE_CASHIER,
)
from core.permissions.evaluator import (
    PermissionEvaluationResult,
    PermissionEvaluator,
)
from core.permissions.models import Role
from core.permissions.provider import (
    InMemoryPermissionProvider,
    PermissionProvider,
)
from core.permissions.registry import resolve_required_permission

__all__ = [
    "PERMISSION_POS_SELL",
    "PERMISSION_CATALOG_MANAGE",
    "PERMISSION_SETTINGS_CONFIGURE",
    "ROLE_ADMIN",
    "ROLE_CASHIER",
    "DEFAULT_ROLE_PERMISSIONS",
    "Role",
    "PermissionProvider",
    "InMemoryPermissionProvider",
    "PermissionEvaluator",
    "PermissionEvaluationResult",
    "resolve_required_permission",
]
