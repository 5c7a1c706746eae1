"""
Salon Settlement — Discount Calculator
========================================
Discount terms are stored on a booking as rates and references, never
as a pre-computed amount. The amount is derived on every read.

Scope resolution:
- all       every line
- services  service lines only
- products  product lines only
- specific  lines whose item id is listed, across both kinds

percentage: applicable_subtotal * value / 100
fixed:      min(value, applicable_subtotal)
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Dict, Iterable, Optional, Sequence

from core.primitives.money import ZERO, money_sum, quantize_money, to_decimal
from engines.settlement.lines import Priceable, ProductLine, ServiceLine

DISCOUNT_FIXED = "fixed"
DISCOUNT_PERCENTAGE = "percentage"
VALID_DISCOUNT_KINDS = frozenset({DISCOUNT_FIXED, DISCOUNT_PERCENTAGE})

SCOPE_ALL = "all"
SCOPE_SERVICES = "services"
SCOPE_PRODUCTS = "products"
SCOPE_SPECIFIC = "specific"
VALID_SCOPES = frozenset({SCOPE_ALL, SCOPE_SERVICES, SCOPE_PRODUCTS, SCOPE_SPECIFIC})

HUNDRED = Decimal("100")


@dataclass(frozen=True)
class DiscountTerms:
    """
    How a discount applies. Either entered manually at the counter or
    copied from a validated promotion (promotion_id and code set).
    """

    kind: str
    value: Decimal
    applicable_to: str = SCOPE_ALL
    item_ids: frozenset = frozenset()
    promotion_id: Optional[str] = None
    code: Optional[str] = None

    def __post_init__(self):
        if self.kind not in VALID_DISCOUNT_KINDS:
            raise ValueError(f"discount kind '{self.kind}' not valid.")
        if self.applicable_to not in VALID_SCOPES:
            raise ValueError(f"applicable_to '{self.applicable_to}' not valid.")
        value = to_decimal(self.value, field_name="discount value")
        if value < 0:
            raise ValueError("discount value must not be negative.")
        if self.kind == DISCOUNT_PERCENTAGE and value > HUNDRED:
            raise ValueError("percentage discount must be within 0..100.")
        object.__setattr__(self, "value", value)
        object.__setattr__(self, "item_ids", frozenset(self.item_ids))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind,
            "value": str(self.value),
            "applicable_to": self.applicable_to,
            "item_ids": sorted(self.item_ids),
            "promotion_id": self.promotion_id,
            "code": self.code,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DiscountTerms":
        return cls(
            kind=data["kind"],
            value=data["value"],
            applicable_to=data.get("applicable_to", SCOPE_ALL),
            item_ids=frozenset(data.get("item_ids", [])),
            promotion_id=data.get("promotion_id"),
            code=data.get("code"),
        )


def _applicable_lines(
    terms: DiscountTerms,
    service_lines: Sequence[ServiceLine],
    product_lines: Sequence[ProductLine],
) -> Iterable[Priceable]:
    if terms.applicable_to == SCOPE_SERVICES:
        return list(service_lines)
    if terms.applicable_to == SCOPE_PRODUCTS:
        return list(product_lines)
    if terms.applicable_to == SCOPE_SPECIFIC:
        return [
            line for line in [*service_lines, *product_lines]
            if line.item_id in terms.item_ids
        ]
    return [*service_lines, *product_lines]


def applicable_subtotal(
    terms: DiscountTerms,
    service_lines: Sequence[ServiceLine],
    product_lines: Sequence[ProductLine],
) -> Decimal:
    return money_sum(
        line.amount for line in _applicable_lines(terms, service_lines, product_lines)
    )


def calculate_discount(
    terms: Optional[DiscountTerms],
    service_lines: Sequence[ServiceLine],
    product_lines: Sequence[ProductLine],
) -> Decimal:
    """Discount amount for the given lines. Never exceeds the applicable subtotal."""
    if terms is None:
        return ZERO
    base = applicable_subtotal(terms, service_lines, product_lines)
    if terms.kind == DISCOUNT_PERCENTAGE:
        return quantize_money(base * terms.value / HUNDRED)
    return quantize_money(min(terms.value, base))
