"""
POS Engine — Application Service
==================================
One operator session at one terminal: catalog, cart, settings,
pending payment, last receipt.

The session is an explicitly owned context object. Persistence comes
in through an injected key-value store, authorization through the
operator's role, and time through an injected Clock. Nothing here is
module-global.

Every operator action returns an ActionOutcome. Domain errors never
escape this boundary; they become REJECTED outcomes carrying a
RejectionReason for the presentation layer to show.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from decimal import Decimal
from typing import Any, Callable, List, Optional, Tuple

from core.commands.outcomes import ActionOutcome
from core.commands.rejection import ReasonCode, RejectionReason
from core.config.rules import PosSettings, load_settings, save_settings
from core.permissions.evaluator import PermissionEvaluator
from core.permissions.provider import (
    InMemoryPermissionProvider,
    PermissionProvider,
)
from core.time.clock import Clock, SystemClock
from engines.pos.cart import Cart
from engines.pos.catalog import (
    ALL_CATEGORIES,
    INVENTORY_KEY,
    CatalogStore,
    Product,
)
from engines.pos.checkout import (
    PAYMENT_CASH,
    checkout_rejection,
    complete_sale,
    compute_change,
    normalize_payment_method,
)
from engines.pos.errors import NotFound, PosError, Unauthorized
from engines.pos.pricing import PricingResult, compute_totals
from engines.pos.receipt import RECEIPT_ID_PREFIX, Receipt
from engines.pos.seed import starter_catalog

logger = logging.getLogger("pos.service")


@dataclass(frozen=True)
class InventoryWarnings:
    low_stock: Tuple[Product, ...]
    expiring_soon: Tuple[Product, ...]
    expired: Tuple[Product, ...]

    @property
    def has_warnings(self) -> bool:
        return bool(self.low_stock or self.expiring_soon or self.expired)


class PosService:
    """Point-of-sale session for a single active operator."""

    def __init__(
        self,
        *,
        store,
        role: str,
        cashier_name: Optional[str] = None,
        clock: Clock | None = None,
        permission_provider: PermissionProvider | None = None,
    ):
        self._store = store
        self._role = role
        self._cashier_name = cashier_name
        self._clock = clock or SystemClock()
        self._permissions = (
            permission_provider or InMemoryPermissionProvider.with_default_roles()
        )

        self._catalog = self._load_catalog()
        self._settings = load_settings(self._store)
        self._cart = Cart()
        self._payment_method = PAYMENT_CASH
        self._cash_given: Any = ""
        self._last_receipt: Optional[Receipt] = None
        self._last_receipt_millis = 0

    # ══════════════════════════════════════════════════════════
    # STATE ACCESS
    # ══════════════════════════════════════════════════════════

    @property
    def role(self) -> str:
        return self._role

    @property
    def catalog(self) -> CatalogStore:
        return self._catalog

    @property
    def cart(self) -> Cart:
        return self._cart

    @property
    def settings(self) -> PosSettings:
        return self._settings

    @property
    def payment_method(self) -> str:
        return self._payment_method

    @property
    def cash_given(self) -> Any:
        return self._cash_given

    @property
    def last_receipt(self) -> Optional[Receipt]:
        return self._last_receipt

    def totals(self) -> PricingResult:
        return compute_totals(
            self._cart.lines,
            self._settings.discount_pct,
            self._settings.tax_pct,
        )

    def change_due(self) -> Decimal:
        if self._payment_method != PAYMENT_CASH:
            return Decimal("0")
        return compute_change(self._cash_given, self.totals().total)

    def search(self, category: str = ALL_CATEGORIES, query: str = "") -> List[Product]:
        return self._catalog.filter(category, query)

    def categories(self) -> Tuple[str, ...]:
        return self._catalog.list_categories()

    def warnings(self) -> InventoryWarnings:
        today = self._clock.today()
        return InventoryWarnings(
            low_stock=tuple(
                self._catalog.low_stock(self._settings.low_stock_threshold)
            ),
            expiring_soon=tuple(
                self._catalog.expiring_soon(
                    today, self._settings.expiry_warning_days,
                )
            ),
            expired=tuple(self._catalog.expired(today)),
        )

    def inventory_status(self, product_id: str) -> Optional[str]:
        product = self._catalog.find_by_id(product_id)
        if product is None:
            return None
        return self._catalog.status_label(
            product,
            self._clock.today(),
            low_stock_threshold=self._settings.low_stock_threshold,
            expiry_warning_days=self._settings.expiry_warning_days,
        )

    # ══════════════════════════════════════════════════════════
    # CART ACTIONS
    # ══════════════════════════════════════════════════════════

    def scan(self, token: str) -> ActionOutcome:
        """Resolve a scanner / manual-entry token and add it to the cart."""
        def _scan():
            product = self._catalog.find_by_sku_or_id(token)
            if product is None:
                raise NotFound((token or "").strip(), policy_name="scanner")
            return self._cart.add(product, self._clock.today())

        return self._execute("cart.scan", _scan)

    def add_to_cart(self, product_id: str) -> ActionOutcome:
        return self._execute(
            "cart.add",
            lambda: self._cart.add(
                self._catalog.get(product_id), self._clock.today(),
            ),
        )

    def update_quantity(self, product_id: str, quantity: Any) -> ActionOutcome:
        return self._execute(
            "cart.update_quantity",
            lambda: self._cart.update_quantity(
                product_id, quantity, self._catalog, self._clock.today(),
            ),
        )

    def remove_from_cart(self, product_id: str) -> ActionOutcome:
        return self._execute(
            "cart.remove", lambda: self._cart.remove(product_id),
        )

    def clear_cart(self) -> ActionOutcome:
        return self._execute("cart.clear", self._cart.clear)

    # ══════════════════════════════════════════════════════════
    # PAYMENT AND CHECKOUT
    # ══════════════════════════════════════════════════════════

    def set_payment_method(self, method: str) -> ActionOutcome:
        normalized = normalize_payment_method(method)
        if normalized is None:
            return self._reject(
                "payment.set_method",
                ReasonCode.INVALID_PAYMENT_METHOD,
                f"Payment method '{method}' not valid.",
            )
        self._payment_method = normalized
        return ActionOutcome.accepted("payment.set_method", normalized)

    def set_cash_given(self, amount: Any) -> ActionOutcome:
        """Store the cash tendered as entered; it is coerced when used."""
        self._cash_given = amount
        return ActionOutcome.accepted("payment.set_cash", amount)

    def checkout_blocker(self) -> Optional[RejectionReason]:
        return checkout_rejection(
            self._cart.lines,
            self._catalog,
            self._payment_method,
            self._cash_given,
            self.totals().total,
            self._clock.today(),
        )

    def can_checkout(self) -> bool:
        return self.checkout_blocker() is None

    def checkout(self) -> ActionOutcome:
        """
        Commit the sale, then reset the cart and pending cash.

        The reset and the catalog save happen only after the committer
        succeeded; a refused checkout changes nothing.
        """
        def _checkout() -> Receipt:
            now = self._clock.now()
            receipt = complete_sale(
                self._cart,
                self._catalog,
                self.totals(),
                self._payment_method,
                self._cash_given,
                discount_pct=self._settings.discount_pct,
                tax_pct=self._settings.tax_pct,
                currency=self._settings.currency,
                now=now,
                cashier=self._cashier_name,
                receipt_id=self._next_receipt_id(now),
            )
            self._last_receipt = receipt
            self._cart.clear()
            self._cash_given = ""
            self._save_catalog()
            return receipt

        return self._execute("sale.checkout", _checkout)

    def _next_receipt_id(self, now) -> str:
        millis = int(now.timestamp() * 1000)
        if millis <= self._last_receipt_millis:
            millis = self._last_receipt_millis + 1
        self._last_receipt_millis = millis
        return f"{RECEIPT_ID_PREFIX}{millis}"

    # ══════════════════════════════════════════════════════════
    # SETTINGS
    # ══════════════════════════════════════════════════════════

    def update_settings(self, **changes: Any) -> ActionOutcome:
        """Change tax %, discount %, currency or thresholds, then save."""
        def _update() -> PosSettings:
            try:
                updated = replace(self._settings, **changes)
            except TypeError as exc:
                raise ValueError(str(exc)) from exc
            self._settings = updated
            save_settings(self._store, updated)
            return updated

        return self._execute(
            "settings.update", _update, invalid_code=ReasonCode.INVALID_SETTINGS,
        )

    # ══════════════════════════════════════════════════════════
    # ADMIN CATALOG ACTIONS
    # ══════════════════════════════════════════════════════════

    def add_product(self, **fields: Any) -> ActionOutcome:
        """Insert (or replace by product_id) a catalog product."""
        return self._admin(
            "catalog.upsert",
            lambda: self._catalog.upsert(now=self._clock.now(), **fields),
        )

    def remove_product(self, product_id: str) -> ActionOutcome:
        return self._admin(
            "catalog.remove", lambda: self._catalog.remove(product_id),
        )

    def set_price(self, product_id: str, price: Any) -> ActionOutcome:
        return self._admin(
            "catalog.set_price",
            lambda: self._catalog.set_price(product_id, price),
        )

    def set_stock(self, product_id: str, stock: Any) -> ActionOutcome:
        return self._admin(
            "catalog.set_stock",
            lambda: self._catalog.set_stock(product_id, stock),
        )

    def set_expiry(self, product_id: str, expiry: Any) -> ActionOutcome:
        return self._admin(
            "catalog.set_expiry",
            lambda: self._catalog.set_expiry(product_id, expiry),
        )

    def _admin(self, action: str, operation: Callable[[], Any]) -> ActionOutcome:
        def _mutate_and_save():
            result = operation()
            self._save_catalog()
            return result

        return self._execute(
            action, _mutate_and_save, invalid_code=ReasonCode.INVALID_PRODUCT,
        )

    # ══════════════════════════════════════════════════════════
    # EXECUTION
    # ══════════════════════════════════════════════════════════

    def _execute(
        self,
        action: str,
        operation: Callable[[], Any],
        *,
        invalid_code: Optional[str] = None,
    ) -> ActionOutcome:
        permission = PermissionEvaluator.evaluate(
            action, self._role, self._permissions,
        )
        if not permission.allowed:
            logger.info(
                "Action %s denied for role %r: %s.",
                action, self._role, permission.rejection_code,
            )
            denial = Unauthorized(
                permission.message,
                code=permission.rejection_code,
                policy_name=action,
            )
            return ActionOutcome.rejected(action, denial.to_rejection())

        try:
            value = operation()
        except PosError as exc:
            logger.info("Action %s rejected: %s.", action, exc.code)
            return ActionOutcome.rejected(action, exc.to_rejection())
        except ValueError as exc:
            if invalid_code is None:
                raise
            logger.info("Action %s rejected: %s.", action, exc)
            return self._reject(action, invalid_code, str(exc) or action)

        return ActionOutcome.accepted(action, value)

    @staticmethod
    def _reject(action: str, code: str, message: str) -> ActionOutcome:
        return ActionOutcome.rejected(
            action,
            RejectionReason(code=code, message=message, policy_name=action),
        )

    # ══════════════════════════════════════════════════════════
    # PERSISTENCE
    # ══════════════════════════════════════════════════════════

    def _load_catalog(self) -> CatalogStore:
        try:
            rows = self._store.load(INVENTORY_KEY)
        except Exception:
            logger.warning(
                "Inventory could not be loaded; using starter catalog.",
                exc_info=True,
            )
            return starter_catalog()

        if rows is None:
            return starter_catalog()

        try:
            return CatalogStore.from_list(rows)
        except (KeyError, TypeError, ValueError, PosError):
            logger.warning(
                "Stored inventory is unreadable; using starter catalog.",
                exc_info=True,
            )
            return starter_catalog()

    def _save_catalog(self) -> bool:
        try:
            self._store.save(INVENTORY_KEY, self._catalog.to_list())
        except Exception:
            logger.warning("Inventory could not be saved.", exc_info=True)
            return False
        return True

    def reload(self) -> None:
        """Re-read catalog and settings from the store (cart untouched)."""
        self._catalog = self._load_catalog()
        self._settings = load_settings(self._store)
