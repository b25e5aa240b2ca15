"""
POS Command Layer — Rejection Model
======================================
Structured rejection reasons for refused operator actions.

A rejection is a value, not a crash. The presentation layer decides
whether it becomes a dialog, a toast or a log line.

Every rejection is:
- Deterministic (same input → same rejection)
- Machine-readable (code)
- Human-readable (message)
- Attributable (policy_name names the rule that refused)
"""

from __future__ import annotations

from dataclasses import dataclass


# ══════════════════════════════════════════════════════════════
# REJECTION REASON (frozen explanation structure)
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class RejectionReason:
    """
    Structured reason for an action rejection.

    Fields:
        code:        Machine-readable rejection code (e.g. 'INSUFFICIENT_STOCK').
        message:     Human-readable explanation for the operator.
        policy_name: Name of the policy or operation that refused.
    """

    code: str
    message: str
    policy_name: str

    def __post_init__(self):
        if not self.code or not isinstance(self.code, str):
            raise ValueError("code must be a non-empty string.")

        if not self.message or not isinstance(self.message, str):
            raise ValueError("message must be a non-empty string.")

        if not self.policy_name or not isinstance(self.policy_name, str):
            raise ValueError("policy_name must be a non-empty string.")

    def to_dict(self) -> dict:
        return {
            "code": self.code,
            "message": self.message,
            "policy_name": self.policy_name,
        }


# ══════════════════════════════════════════════════════════════
# STANDARD REJECTION CODES
# ══════════════════════════════════════════════════════════════

class ReasonCode:
    """
    Known rejection codes.

    Convention: SCREAMING_SNAKE_CASE.
    """

    # ── Catalog ───────────────────────────────────────────────
    NOT_FOUND = "NOT_FOUND"
    INVALID_PRODUCT = "INVALID_PRODUCT"

    # ── Sale eligibility ──────────────────────────────────────
    EXPIRED_PRODUCT = "EXPIRED_PRODUCT"
    INSUFFICIENT_STOCK = "INSUFFICIENT_STOCK"
    CHECKOUT_NOT_ELIGIBLE = "CHECKOUT_NOT_ELIGIBLE"
    EMPTY_CART = "EMPTY_CART"
    INSUFFICIENT_CASH = "INSUFFICIENT_CASH"
    INVALID_PAYMENT_METHOD = "INVALID_PAYMENT_METHOD"

    # ── Invariants ────────────────────────────────────────────
    INVALID_STATE = "INVALID_STATE"

    # ── Authorization ─────────────────────────────────────────
    PERMISSION_DENIED = "PERMISSION_DENIED"
    PERMISSION_MAPPING_MISSING = "PERMISSION_MAPPING_MISSING"

    # ── Settings ──────────────────────────────────────────────
    INVALID_SETTINGS = "INVALID_SETTINGS"
