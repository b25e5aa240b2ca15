"""
POS Command Layer — Action Outcome Contract
==============================================
Every operator action produces exactly one Outcome.

ACCEPTED → the action ran; `value` carries its result (may be None).
REJECTED → nothing changed; `reason` explains why.

Rules:
- Outcome is immutable (frozen dataclass)
- REJECTED must contain reason (RejectionReason)
- ACCEPTED must NOT contain reason
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from core.commands.rejection import RejectionReason


# ══════════════════════════════════════════════════════════════
# ACTION STATUS
# ══════════════════════════════════════════════════════════════

class ActionStatus(Enum):
    """Binary decision. No middle ground."""
    ACCEPTED = "ACCEPTED"
    REJECTED = "REJECTED"


# ══════════════════════════════════════════════════════════════
# ACTION OUTCOME
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class ActionOutcome:
    """
    Result of one operator action.

    Fields:
        action: Name of the action (e.g. 'cart.add').
        status: ACCEPTED or REJECTED.
        value:  Action result when ACCEPTED (product, receipt, ...).
        reason: RejectionReason when REJECTED.
    """

    action: str
    status: ActionStatus
    value: Any = None
    reason: Optional[RejectionReason] = None

    def __post_init__(self):
        if not self.action or not isinstance(self.action, str):
            raise ValueError("action must be a non-empty string.")

        if not isinstance(self.status, ActionStatus):
            raise ValueError(
                f"status must be ActionStatus, got {type(self.status).__name__}."
            )

        if self.status == ActionStatus.REJECTED and self.reason is None:
            raise ValueError(
                "REJECTED outcome must include a RejectionReason. "
                "No silent rejections allowed."
            )

        if self.status == ActionStatus.ACCEPTED and self.reason is not None:
            raise ValueError(
                "ACCEPTED outcome must NOT include a RejectionReason."
            )

    @classmethod
    def accepted(cls, action: str, value: Any = None) -> ActionOutcome:
        return cls(action=action, status=ActionStatus.ACCEPTED, value=value)

    @classmethod
    def rejected(cls, action: str, reason: RejectionReason) -> ActionOutcome:
        return cls(action=action, status=ActionStatus.REJECTED, reason=reason)

    @property
    def is_accepted(self) -> bool:
        return self.status == ActionStatus.ACCEPTED

    @property
    def is_rejected(self) -> bool:
        return self.status == ActionStatus.REJECTED

    @property
    def code(self) -> Optional[str]:
        return self.reason.code if self.reason else None
