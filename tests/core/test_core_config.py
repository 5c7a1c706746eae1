"""
Tests for core.config — commission rate table.
"""

from decimal import Decimal

import pytest

from core.config import (
    DEFAULT_PRODUCT_RATE,
    DEFAULT_SERVICE_RATE,
    LINE_TYPE_PRODUCT,
    LINE_TYPE_SERVICE,
    InMemoryRateTable,
    RateRule,
    rate_table_from_mapping,
)


class TestRateRule:
    def test_valid_rule(self):
        rule = RateRule(line_type=LINE_TYPE_SERVICE, rate=Decimal("0.55"), client_type="X")
        assert rule.rate == Decimal("0.55")

    def test_rate_above_one_rejected(self):
        with pytest.raises(ValueError, match="between 0 and 1"):
            RateRule(line_type=LINE_TYPE_SERVICE, rate=Decimal("60"))

    def test_unknown_line_type_rejected(self):
        with pytest.raises(ValueError):
            RateRule(line_type="voucher", rate=Decimal("0.1"))

    def test_float_rate_rejected(self):
        with pytest.raises(ValueError):
            RateRule(line_type=LINE_TYPE_PRODUCT, rate=0.1)


class TestInMemoryRateTable:
    def test_defaults(self):
        table = InMemoryRateTable()
        assert table.rate_for(LINE_TYPE_SERVICE) == DEFAULT_SERVICE_RATE == Decimal("0.60")
        assert table.rate_for(LINE_TYPE_PRODUCT) == DEFAULT_PRODUCT_RATE == Decimal("0.10")

    def test_client_type_rule_wins(self):
        table = InMemoryRateTable()
        table.add_rule(RateRule(line_type=LINE_TYPE_SERVICE, rate=Decimal("0.50"), client_type="TR"))
        assert table.rate_for(LINE_TYPE_SERVICE, "TR") == Decimal("0.50")
        assert table.rate_for(LINE_TYPE_SERVICE, "R") == Decimal("0.60")

    def test_unknown_line_type(self):
        with pytest.raises(ValueError):
            InMemoryRateTable().rate_for("voucher")


class TestRateTableFromMapping:
    def test_builds_from_settings_shape(self):
        table = rate_table_from_mapping({
            "service": "0.55",
            "product": "0.05",
            "service:X": "0.40",
        })
        assert table.rate_for(LINE_TYPE_SERVICE) == Decimal("0.55")
        assert table.rate_for(LINE_TYPE_PRODUCT) == Decimal("0.05")
        assert table.rate_for(LINE_TYPE_SERVICE, "X") == Decimal("0.40")

    def test_empty_mapping_uses_defaults(self):
        table = rate_table_from_mapping({})
        assert table.rate_for(LINE_TYPE_SERVICE) == DEFAULT_SERVICE_RATE
