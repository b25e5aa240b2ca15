"""
Tests for engines.pos.checkout — Validator, committer and receipts.
"""

from datetime import date, datetime, timezone
from decimal import Decimal

import pytest

from core.commands.rejection import ReasonCode
from engines.pos.cart import Cart
from engines.pos.catalog import CatalogStore, Product
from engines.pos.checkout import (
    PAYMENT_CARD,
    PAYMENT_CASH,
    can_checkout,
    checkout_rejection,
    complete_sale,
    compute_change,
    normalize_payment_method,
)
from engines.pos.errors import CheckoutNotEligible, InvalidState
from engines.pos.pricing import compute_totals
from engines.pos.receipt import format_timestamp, receipt_id_for

NOW = datetime(2026, 10, 18, 15, 4, 5, tzinfo=timezone.utc)
TODAY = NOW.date()


def _eggs(stock=30, expiry=date(2026, 12, 31)) -> Product:
    return Product(
        product_id="GRC-002",
        sku="480000000302",
        name="Eggs (dozen)",
        category="Grocery",
        price=Decimal("120"),
        stock=stock,
        expiry=expiry,
    )


def _setup(quantity=5, stock=30):
    catalog = CatalogStore([_eggs(stock=stock)])
    cart = Cart()
    cart.add(catalog.get("GRC-002"), TODAY)
    if quantity > 1:
        cart.update_quantity("GRC-002", quantity, catalog, TODAY)
    return catalog, cart


def _sale(catalog, cart, method=PAYMENT_CASH, cash="700", **kwargs):
    pricing = compute_totals(cart.lines, discount_pct=10, tax_pct=12)
    return complete_sale(
        cart,
        catalog,
        pricing,
        method,
        cash,
        discount_pct=Decimal("10"),
        tax_pct=Decimal("12"),
        currency="PHP",
        now=NOW,
        **kwargs,
    )


# ── Helpers ──────────────────────────────────────────────────

class TestPaymentHelpers:
    def test_normalize_payment_method(self):
        assert normalize_payment_method("cash") == PAYMENT_CASH
        assert normalize_payment_method(" e-wallet ") == "E-Wallet"
        assert normalize_payment_method("Cheque") is None
        assert normalize_payment_method(None) is None

    def test_change(self):
        assert compute_change("700", Decimal("604.8")) == Decimal("95.20")

    def test_change_never_negative(self):
        assert compute_change("100", Decimal("604.8")) == Decimal("0")

    def test_change_with_free_text(self):
        assert compute_change("abc", Decimal("10")) == Decimal("0")


# ── Validator ────────────────────────────────────────────────

class TestCheckoutValidator:
    def test_eligible_cash_sale(self):
        catalog, cart = _setup()
        assert can_checkout(cart.lines, catalog, "Cash", "700", Decimal("604.8"), TODAY)

    def test_empty_cart(self):
        reason = checkout_rejection((), CatalogStore(), "Card", "", Decimal("0"), TODAY)
        assert reason.code == ReasonCode.EMPTY_CART

    def test_insufficient_cash(self):
        catalog, cart = _setup()
        reason = checkout_rejection(
            cart.lines, catalog, "Cash", "600", Decimal("604.8"), TODAY,
        )
        assert reason.code == ReasonCode.INSUFFICIENT_CASH

    def test_cash_below_unrounded_total(self):
        catalog = CatalogStore([
            Product("GUM-001", "480000000901", "Gum", "Snacks",
                    Decimal("10.03"), 10, None),
        ])
        cart = Cart()
        cart.add(catalog.get("GUM-001"), TODAY)
        total = compute_totals(cart.lines, tax_pct=12).total
        assert total == Decimal("11.2336")

        reason = checkout_rejection(cart.lines, catalog, "Cash", "11.23", total, TODAY)
        assert reason.code == ReasonCode.INSUFFICIENT_CASH
        assert "11.23" in reason.message
        assert can_checkout(cart.lines, catalog, "Cash", "11.24", total, TODAY)

    def test_exact_cash(self):
        catalog, cart = _setup()
        assert can_checkout(
            cart.lines, catalog, "Cash", "604.8", Decimal("604.8"), TODAY,
        )

    def test_non_numeric_cash_is_zero(self):
        catalog, cart = _setup()
        reason = checkout_rejection(
            cart.lines, catalog, "Cash", "lots", Decimal("604.8"), TODAY,
        )
        assert reason.code == ReasonCode.INSUFFICIENT_CASH

    def test_card_ignores_cash(self):
        catalog, cart = _setup()
        assert can_checkout(cart.lines, catalog, "Card", "", Decimal("604.8"), TODAY)

    def test_unknown_payment_method(self):
        catalog, cart = _setup()
        reason = checkout_rejection(
            cart.lines, catalog, "Cheque", "", Decimal("604.8"), TODAY,
        )
        assert reason.code == ReasonCode.INVALID_PAYMENT_METHOD

    def test_stock_dropped_after_add(self):
        catalog, cart = _setup(quantity=5)
        catalog.set_stock("GRC-002", 4)
        reason = checkout_rejection(
            cart.lines, catalog, "Card", "", Decimal("604.8"), TODAY,
        )
        assert reason.code == ReasonCode.INSUFFICIENT_STOCK

    def test_product_expired_after_add(self):
        catalog, cart = _setup(quantity=1)
        catalog.set_expiry("GRC-002", "2026-10-17")
        reason = checkout_rejection(
            cart.lines, catalog, "Card", "", Decimal("134.4"), TODAY,
        )
        assert reason.code == ReasonCode.EXPIRED_PRODUCT

    def test_product_removed_after_add(self):
        catalog, cart = _setup(quantity=1)
        catalog.remove("GRC-002")
        reason = checkout_rejection(
            cart.lines, catalog, "Card", "", Decimal("134.4"), TODAY,
        )
        assert reason.code == ReasonCode.NOT_FOUND


# ── Committer ────────────────────────────────────────────────

class TestCompleteSale:
    def test_cash_sale(self):
        catalog, cart = _setup()
        receipt = _sale(catalog, cart, cashier="Ana")

        assert catalog.get("GRC-002").stock == 25
        assert receipt.subtotal == Decimal("600.00")
        assert receipt.discount_amount == Decimal("60.00")
        assert receipt.tax_amount == Decimal("64.80")
        assert receipt.total == Decimal("604.80")
        assert receipt.cash_given == Decimal("700.00")
        assert receipt.change == Decimal("95.20")
        assert receipt.payment_method == "Cash"
        assert receipt.currency == "PHP"
        assert receipt.cashier == "Ana"
        assert receipt.item_count == 5
        assert receipt.lines[0].line_total == Decimal("600.00")

    def test_cart_is_left_for_the_caller(self):
        catalog, cart = _setup()
        _sale(catalog, cart)
        assert cart.quantity_of("GRC-002") == 5

    def test_card_sale_has_no_cash_fields(self):
        catalog, cart = _setup()
        receipt = _sale(catalog, cart, method="card", cash="")
        assert receipt.payment_method == PAYMENT_CARD
        assert receipt.cash_given is None
        assert receipt.change is None

    def test_receipt_identity_and_timestamp(self):
        catalog, cart = _setup()
        receipt = _sale(catalog, cart)
        assert receipt.receipt_id == receipt_id_for(NOW)
        assert receipt.receipt_id.startswith("OR-")
        assert receipt.timestamp == "10/18/2026, 3:04:05 PM"
        assert receipt.cashier == "—"

    def test_explicit_receipt_id(self):
        catalog, cart = _setup()
        assert _sale(catalog, cart, receipt_id="OR-1").receipt_id == "OR-1"

    def test_ineligible_sale_changes_nothing(self):
        catalog, cart = _setup()
        with pytest.raises(CheckoutNotEligible) as exc_info:
            _sale(catalog, cart, cash="100")
        assert exc_info.value.reason.code == ReasonCode.INSUFFICIENT_CASH
        assert exc_info.value.to_rejection().code == ReasonCode.CHECKOUT_NOT_ELIGIBLE
        assert catalog.get("GRC-002").stock == 30
        assert cart.quantity_of("GRC-002") == 5

    def test_empty_cart_refused(self):
        with pytest.raises(CheckoutNotEligible):
            _sale(CatalogStore([_eggs()]), Cart())

    def test_multi_line_sale_is_all_or_nothing(self, monkeypatch):
        catalog = CatalogStore([
            _eggs(),
            Product("BVG-001", "480000000001", "Water", "Beverages",
                    Decimal("20"), 3, None),
        ])
        cart = Cart()
        cart.add(catalog.get("GRC-002"), TODAY)
        cart.add(catalog.get("BVG-001"), TODAY)

        original = catalog.apply_stock_deltas

        def _racing_deltas(deltas):
            catalog.set_stock("BVG-001", 0)
            return original(deltas)

        monkeypatch.setattr(catalog, "apply_stock_deltas", _racing_deltas)
        with pytest.raises(InvalidState):
            _sale(catalog, cart, method="Card", cash="")
        assert catalog.get("GRC-002").stock == 30


class TestReceiptFormatting:
    def test_midnight_is_twelve_am(self):
        stamp = format_timestamp(datetime(2026, 1, 5, 0, 7, 9, tzinfo=timezone.utc))
        assert stamp == "1/5/2026, 12:07:09 AM"

    def test_noon_is_twelve_pm(self):
        stamp = format_timestamp(datetime(2026, 1, 5, 12, 0, 0, tzinfo=timezone.utc))
        assert stamp == "1/5/2026, 12:00:00 PM"
