"""
POS Core Primitives — Shared Value Helpers
============================================
Pure Python building blocks consumed by the core and the POS engine.

Primitives:
    money — Decimal coercion, 2 dp rounding, currency display
"""
