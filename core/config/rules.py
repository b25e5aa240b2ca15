"""
POS Core Config — Operator-Configurable Settings
==================================================
Tax %, discount %, currency label and warning thresholds.

Settings are read and written through the key-value persistence
port. Anything missing, unreadable or invalid falls back to the
default value for that field. Loading settings never raises.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, fields, replace
from decimal import Decimal
from typing import Any, Dict

from core.primitives.money import coerce_decimal

logger = logging.getLogger("pos.config")

SETTINGS_KEY = "pos_settings"

DEFAULT_TAX_PCT = Decimal("12")
DEFAULT_DISCOUNT_PCT = Decimal("0")
DEFAULT_CURRENCY = "PHP"
DEFAULT_LOW_STOCK_THRESHOLD = 5
DEFAULT_EXPIRY_WARNING_DAYS = 30

SUPPORTED_CURRENCIES = ("PHP", "USD", "EUR", "JPY")


# ══════════════════════════════════════════════════════════════
# POS SETTINGS
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class PosSettings:
    """
    Operator settings for one terminal.

    tax_pct and discount_pct are percentages (12 means 12%).
    """

    tax_pct: Decimal = DEFAULT_TAX_PCT
    discount_pct: Decimal = DEFAULT_DISCOUNT_PCT
    currency: str = DEFAULT_CURRENCY
    low_stock_threshold: int = DEFAULT_LOW_STOCK_THRESHOLD
    expiry_warning_days: int = DEFAULT_EXPIRY_WARNING_DAYS

    def __post_init__(self) -> None:
        for name in ("tax_pct", "discount_pct"):
            amount = coerce_decimal(getattr(self, name), default=None)
            if amount is None:
                raise ValueError(f"{name} must be a number.")
            object.__setattr__(self, name, amount)

        if not Decimal("0") <= self.tax_pct <= Decimal("100"):
            raise ValueError(
                f"tax_pct must be between 0 and 100, got {self.tax_pct}."
            )
        if not Decimal("0") <= self.discount_pct <= Decimal("100"):
            raise ValueError(
                f"discount_pct must be between 0 and 100, got {self.discount_pct}."
            )
        if self.currency not in SUPPORTED_CURRENCIES:
            raise ValueError(
                f"currency '{self.currency}' not supported. "
                f"Must be one of: {', '.join(SUPPORTED_CURRENCIES)}."
            )
        if not isinstance(self.low_stock_threshold, int) or self.low_stock_threshold < 0:
            raise ValueError("low_stock_threshold must be a non-negative integer.")
        if not isinstance(self.expiry_warning_days, int) or self.expiry_warning_days < 0:
            raise ValueError("expiry_warning_days must be a non-negative integer.")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "tax_pct": str(self.tax_pct),
            "discount_pct": str(self.discount_pct),
            "currency": self.currency,
            "low_stock_threshold": self.low_stock_threshold,
            "expiry_warning_days": self.expiry_warning_days,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> PosSettings:
        """
        Build settings from a stored document, field by field.

        A field that is missing or fails validation keeps its default.
        """
        settings = cls()
        if not isinstance(data, dict):
            return settings

        for f in fields(cls):
            if f.name not in data:
                continue
            raw = data[f.name]
            if f.name in ("tax_pct", "discount_pct"):
                raw = coerce_decimal(raw, default=None)
            elif f.name in ("low_stock_threshold", "expiry_warning_days"):
                if isinstance(raw, bool) or not isinstance(raw, int):
                    raw = None
            if raw is None:
                logger.warning(
                    "Ignoring invalid setting %s=%r; keeping default.",
                    f.name, data[f.name],
                )
                continue
            try:
                settings = replace(settings, **{f.name: raw})
            except (TypeError, ValueError):
                logger.warning(
                    "Ignoring invalid setting %s=%r; keeping default.",
                    f.name, raw,
                )
        return settings


# ══════════════════════════════════════════════════════════════
# LOAD / SAVE THROUGH THE PERSISTENCE PORT
# ══════════════════════════════════════════════════════════════

def load_settings(store) -> PosSettings:
    """Load settings; any storage failure yields defaults."""
    try:
        data = store.load(SETTINGS_KEY)
    except Exception:
        logger.warning(
            "Settings could not be loaded; using defaults.", exc_info=True,
        )
        return PosSettings()

    if data is None:
        return PosSettings()
    return PosSettings.from_dict(data)


def save_settings(store, settings: PosSettings) -> bool:
    """Persist settings. Returns False (and logs) if the store fails."""
    try:
        store.save(SETTINGS_KEY, settings.to_dict())
    except Exception:
        logger.warning("Settings could not be saved.", exc_info=True)
        return False
    return True
