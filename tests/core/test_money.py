"""
Tests for core.primitives.money — Decimal coercion, rounding, display.
"""

from decimal import Decimal

import pytest

from core.primitives.money import (
    coerce_decimal,
    coerce_int,
    format_money,
    round_money,
)


class TestCoerceDecimal:
    @pytest.mark.parametrize("value,expected", [
        ("700", Decimal("700")),
        (" 12.5 ", Decimal("12.5")),
        ("1,250.75", Decimal("1250.75")),
        (3, Decimal("3")),
        (0.1, Decimal("0.1")),
        (Decimal("9.99"), Decimal("9.99")),
    ])
    def test_numeric_input(self, value, expected):
        assert coerce_decimal(value) == expected

    @pytest.mark.parametrize("value", [None, "", "abc", "NaN", "inf", True, [1]])
    def test_non_numeric_is_zero(self, value):
        assert coerce_decimal(value) == Decimal("0")

    def test_custom_default(self):
        assert coerce_decimal("abc", default=None) is None

    @pytest.mark.parametrize("value", ["1e9000000", "-1e9000000", Decimal("1e999999999"), 10 ** 20])
    def test_out_of_range_magnitude_is_default(self, value):
        assert coerce_decimal(value) == Decimal("0")

    def test_largest_accepted_magnitude(self):
        assert coerce_decimal("9999999999999999") == Decimal("9999999999999999")


class TestCoerceInt:
    def test_truncates(self):
        assert coerce_int("5.9") == 5

    def test_default(self):
        assert coerce_int("x", default=1) == 1

    def test_huge_exponent_is_default(self):
        assert coerce_int("1e9000000", default=1) == 1


class TestRoundMoney:
    def test_half_up(self):
        assert round_money(Decimal("0.125")) == Decimal("0.13")
        assert round_money(Decimal("64.8")) == Decimal("64.80")


class TestFormatMoney:
    def test_thousands_and_two_places(self):
        assert format_money(Decimal("1234.5"), "PHP") == "PHP 1,234.50"

    def test_free_text_input(self):
        assert format_money("abc", "USD") == "USD 0.00"
