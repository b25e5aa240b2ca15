"""
POS Permissions - Deterministic Permission Evaluator
====================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from core.commands.rejection import ReasonCode
from core.permissions.provider import PermissionProvider
from core.permissions.registry import resolve_required_permission


@dataclass(frozen=True)
class PermissionEvaluationResult:
    allowed: bool
    rejection_code: Optional[str] = None
    message: str = ""


class PermissionEvaluator:
    @staticmethod
    def _allow() -> PermissionEvaluationResult:
        return PermissionEvaluationResult(allowed=True)

    @staticmethod
    def _deny(code: str, message: str) -> PermissionEvaluationResult:
        return PermissionEvaluationResult(
            allowed=False,
            rejection_code=code,
            message=message,
        )

    @staticmethod
    def evaluate(
        action: str,
        role_id: Optional[str],
        provider: PermissionProvider | None,
    ) -> PermissionEvaluationResult:
        """
        Evaluate whether `role_id` may perform `action`.

        Unknown actions are denied: every gated action must be mapped.
        """
        required_permission = resolve_required_permission(action)
        if required_permission is None:
            return PermissionEvaluator._deny(
                ReasonCode.PERMISSION_MAPPING_MISSING,
                f"No permission mapping for action '{action}'.",
            )

        if provider is None:
            return PermissionEvaluator._deny(
                ReasonCode.PERMISSION_DENIED,
                "Permission provider is not configured.",
            )

        if not role_id:
            return PermissionEvaluator._deny(
                ReasonCode.PERMISSION_DENIED,
                "No operator role is active.",
            )

        role = provider.get_role(role_id)
        if role is None:
            return PermissionEvaluator._deny(
                ReasonCode.PERMISSION_DENIED,
                f"Role '{role_id}' is not recognised.",
            )

        if not role.allows(required_permission):
            return PermissionEvaluator._deny(
                ReasonCode.PERMISSION_DENIED,
                (
                    f"Role '{role.role_id}' lacks permission "
                    f"'{required_permission}' for action '{action}'."
                ),
            )

        return PermissionEvaluator._allow()
