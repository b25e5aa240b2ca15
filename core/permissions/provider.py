"""
POS Permissions - Provider Protocol and In-Memory Provider
==========================================================
The login/session collaborator hands the core a role name; the
provider turns that name into a Role with concrete permissions.
"""

from __future__ import annotations

from typing import Iterable, Protocol

from core.permissions.constants import DEFAULT_ROLE_PERMISSIONS
from core.permissions.models import Role


class PermissionProvider(Protocol):
    def get_role(self, role_id: str) -> Role | None:
        ...


class InMemoryPermissionProvider:
    """
    Deterministic in-memory provider. Role names are case-insensitive.
    """

    def __init__(self, roles: Iterable[Role] | None = None):
        self._roles: dict[str, Role] = {}

        for role in roles or ():
            key = role.role_id.strip().lower()
            if key in self._roles:
                raise ValueError(f"Duplicate role_id '{role.role_id}'.")
            self._roles[key] = role

    @classmethod
    def with_default_roles(cls) -> InMemoryPermissionProvider:
        return cls(
            Role(role_id=role_id, permissions=permissions)
            for role_id, permissions in sorted(DEFAULT_ROLE_PERMISSIONS.items())
        )

    def get_role(self, role_id: str) -> Role | None:
        if not isinstance(role_id, str):
            return None
        return self._roles.get(role_id.strip().lower())
