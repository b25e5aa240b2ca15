"""
POS Core Config — Public API
===============================
Operator-configurable settings (tax, discount, currency, thresholds).
"""

from core.config.rules import (
    SETTINGS_KEY,
    SUPPORTED_CURRENCIES,
    PosSettings,
    load_settings,
    save_settings,
)

__all__ = [
    "PosSettings",
    "SETTINGS_KEY",
    "SUPPORTED_CURRENCIES",
    "load_settings",
    "save_settings",
]
