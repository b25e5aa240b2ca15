"""
POS Permissions - Immutable Role Model
======================================
"""

from __future__ import annotations

from dataclasses import dataclass

from core.permissions.constants import VALID_PERMISSIONS


@dataclass(frozen=True)
class Role:
    role_id: str
    permissions: tuple[str, ...]

    def __post_init__(self):
        if not self.role_id or not isinstance(self.role_id, str):
            raise ValueError("role_id must be a non-empty string.")

        if not isinstance(self.permissions, tuple):
            raise ValueError("permissions must be a tuple.")

        normalized = tuple(sorted(set(self.permissions)))
        if not normalized:
            raise ValueError("permissions must contain at least one value.")

        for permission in normalized:
            if not isinstance(permission, str) or not permission:
                raise ValueError("permission values must be non-empty strings.")
            if permission not in VALID_PERMISSIONS:
                raise ValueError(
                    f"permission '{permission}' not valid. "
                    f"Must be one of: {sorted(VALID_PERMISSIONS)}"
                )

        object.__setattr__(self, "permissions", normalized)

    def allows(self, permission: str) -> bool:
        return permission in self.permissions
