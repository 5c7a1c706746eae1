"""
Tests for core.primitives.money.
"""

from decimal import Decimal

import pytest

from core.primitives.money import ZERO, money_sum, quantize_money, to_decimal


class TestToDecimal:
    def test_accepts_str_int_decimal(self):
        assert to_decimal("12.50") == Decimal("12.50")
        assert to_decimal(3) == Decimal("3")
        assert to_decimal(Decimal("1.1")) == Decimal("1.1")

    @pytest.mark.parametrize("value", [1.5, True, "abc", "NaN", None])
    def test_rejects_bad_input(self, value):
        with pytest.raises(ValueError):
            to_decimal(value)


class TestRounding:
    def test_half_up(self):
        assert quantize_money(Decimal("0.125")) == Decimal("0.13")
        assert quantize_money(Decimal("0.124")) == Decimal("0.12")

    def test_money_sum(self):
        assert money_sum([Decimal("600.00"), Decimal("400.00")]) == Decimal("1000.00")
        assert money_sum([]) == ZERO
