"""
POS Engine — Errors
=====================
Typed domain errors raised by catalog, cart and checkout operations.

Every error is recoverable at the boundary where the triggering
action originated. None of them leaves the cart or catalog modified.
"""

from __future__ import annotations

from core.commands.rejection import ReasonCode, RejectionReason


class PosError(Exception):
    """Base error for POS engine operations."""

    code = ReasonCode.INVALID_STATE

    def __init__(self, message: str, *, policy_name: str = "pos"):
        self.message = message
        self.policy_name = policy_name
        super().__init__(message)

    def to_rejection(self) -> RejectionReason:
        return RejectionReason(
            code=self.code,
            message=self.message,
            policy_name=self.policy_name,
        )


class NotFound(PosError):
    """Referenced product does not exist in the catalog."""

    code = ReasonCode.NOT_FOUND

    def __init__(self, product_id: str, **kwargs):
        self.product_id = product_id
        super().__init__(f"Product '{product_id}' not found.", **kwargs)


class ExpiredProduct(PosError):
    """Product is past its expiry date and cannot be sold."""

    code = ReasonCode.EXPIRED_PRODUCT

    def __init__(self, product_id: str, name: str, **kwargs):
        self.product_id = product_id
        super().__init__(f'"{name}" is expired.', **kwargs)


class InsufficientStock(PosError):
    """Requested quantity exceeds the stock currently available."""

    code = ReasonCode.INSUFFICIENT_STOCK

    def __init__(
        self, product_id: str, name: str, requested: int, available: int,
        **kwargs,
    ):
        self.product_id = product_id
        self.requested = requested
        self.available = available
        super().__init__(
            f"Insufficient stock ({available}) for {name}.", **kwargs,
        )


class InvalidState(PosError):
    """An operation would break an invariant (e.g. negative stock)."""

    code = ReasonCode.INVALID_STATE


class CheckoutNotEligible(PosError):
    """The checkout validator refused the sale at commit time."""

    code = ReasonCode.CHECKOUT_NOT_ELIGIBLE

    def __init__(self, reason: RejectionReason, **kwargs):
        self.reason = reason
        super().__init__(reason.message, **kwargs)

    def to_rejection(self) -> RejectionReason:
        return RejectionReason(
            code=self.code,
            message=self.reason.message,
            policy_name=self.reason.policy_name,
        )


class Unauthorized(PosError):
    """The operator's role lacks permission for the action."""

    code = ReasonCode.PERMISSION_DENIED

    def __init__(self, message: str, *, code: str | None = None, **kwargs):
        if code:
            self.code = code
        super().__init__(message, **kwargs)
