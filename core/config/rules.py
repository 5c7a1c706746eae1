"""
Salon Core Config — Commission Rate Table
===========================================
Commission percentages are configuration, not engine logic.
The settlement engine asks a CommissionRateTable for a rate by
line type and, for services, by client-type code.

Lookup order:
1. (line_type, client_type) rule
2. (line_type, None) rule: the line-type default
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Dict, Mapping, Optional, Protocol, Tuple

from core.primitives.money import to_decimal

LINE_TYPE_SERVICE = "service"
LINE_TYPE_PRODUCT = "product"
VALID_LINE_TYPES = frozenset({LINE_TYPE_SERVICE, LINE_TYPE_PRODUCT})

DEFAULT_SERVICE_RATE = Decimal("0.60")
DEFAULT_PRODUCT_RATE = Decimal("0.10")


# ══════════════════════════════════════════════════════════════
# RATE RULE
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class RateRule:
    """
    One commission rate.

    rate is a fraction: Decimal("0.60") means 60%.
    client_type None means "any client type" for that line type.
    """

    line_type: str
    rate: Decimal
    client_type: Optional[str] = None

    def __post_init__(self) -> None:
        if self.line_type not in VALID_LINE_TYPES:
            raise ValueError(f"line_type '{self.line_type}' not valid.")
        if not isinstance(self.rate, Decimal):
            raise ValueError("rate must be Decimal.")
        if not Decimal("0") <= self.rate <= Decimal("1"):
            raise ValueError(f"Commission rate must be between 0 and 1, got {self.rate}.")


# ══════════════════════════════════════════════════════════════
# RATE TABLE PROTOCOL
# ══════════════════════════════════════════════════════════════

class CommissionRateTable(Protocol):
    """Provider of commission rates (external configuration)."""

    def rate_for(self, line_type: str, client_type: Optional[str] = None) -> Decimal:
        ...  # pragma: no cover


class InMemoryRateTable:
    """Rate table held in memory; defaults cover both line types."""

    def __init__(
        self,
        service_rate: Decimal = DEFAULT_SERVICE_RATE,
        product_rate: Decimal = DEFAULT_PRODUCT_RATE,
    ) -> None:
        self._rules: Dict[Tuple[str, Optional[str]], RateRule] = {}
        self.add_rule(RateRule(line_type=LINE_TYPE_SERVICE, rate=service_rate))
        self.add_rule(RateRule(line_type=LINE_TYPE_PRODUCT, rate=product_rate))

    def add_rule(self, rule: RateRule) -> None:
        self._rules[(rule.line_type, rule.client_type)] = rule

    def rate_for(self, line_type: str, client_type: Optional[str] = None) -> Decimal:
        if line_type not in VALID_LINE_TYPES:
            raise ValueError(f"line_type '{line_type}' not valid.")
        rule = self._rules.get((line_type, client_type))
        if rule is None:
            rule = self._rules[(line_type, None)]
        return rule.rate


def rate_table_from_mapping(rates: Mapping[str, object]) -> InMemoryRateTable:
    """
    Build a table from settings-style data.

    Keys are "service", "product" or "service:<client_type>";
    values are fractions in any form to_decimal accepts ("0.60").
    """
    table = InMemoryRateTable(
        service_rate=to_decimal(rates.get(LINE_TYPE_SERVICE, DEFAULT_SERVICE_RATE), field_name="service rate"),
        product_rate=to_decimal(rates.get(LINE_TYPE_PRODUCT, DEFAULT_PRODUCT_RATE), field_name="product rate"),
    )
    for key, value in rates.items():
        if ":" not in key:
            continue
        line_type, client_type = key.split(":", 1)
        table.add_rule(RateRule(
            line_type=line_type,
            client_type=client_type,
            rate=to_decimal(value, field_name=f"{key} rate"),
        ))
    return table
