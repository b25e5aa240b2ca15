"""
POS Command Layer — Outcomes and Rejections
=============================================
Every operator action produces exactly one ActionOutcome.
Rejected actions are first-class values, never silent.
"""

from core.commands.outcomes import (
    ActionOutcome,
    ActionStatus,
)
from core.commands.rejection import (
    ReasonCode,
    RejectionReason,
)

__all__ = [
    "ActionOutcome",
    "ActionStatus",
    "ReasonCode",
    "RejectionReason",
]
