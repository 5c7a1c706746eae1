"""
Salon Settlement — Totals
===========================
    subtotal = sum(service adjusted prices) + sum(product totals)
    discount = calculate_discount(...)
    taxable  = subtotal - discount
    tax      = taxable x tax_rate
    total    = taxable + tax

tax_rate is a fraction (Decimal("0.12") for 12%).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Dict, Optional, Sequence

from core.primitives.money import money_sum, quantize_money, to_decimal
from engines.settlement.discount import DiscountTerms, calculate_discount
from engines.settlement.lines import ProductLine, ServiceLine

logger = logging.getLogger("salon.settlement")


def validate_tax_rate(value: Any) -> Decimal:
    rate = to_decimal(value, field_name="tax_rate")
    if not Decimal("0") <= rate <= Decimal("1"):
        raise ValueError(f"tax_rate must be a fraction between 0 and 1, got {rate}.")
    return rate


@dataclass(frozen=True)
class SettlementTotals:
    subtotal: Decimal
    discount: Decimal
    taxable: Decimal
    tax: Decimal
    total: Decimal

    def to_dict(self) -> Dict[str, str]:
        return {
            "subtotal": str(self.subtotal),
            "discount": str(self.discount),
            "taxable": str(self.taxable),
            "tax": str(self.tax),
            "total": str(self.total),
        }


def calculate_totals(
    service_lines: Sequence[ServiceLine],
    product_lines: Sequence[ProductLine],
    discount: Optional[DiscountTerms],
    tax_rate: Decimal,
) -> SettlementTotals:
    rate = validate_tax_rate(tax_rate)
    subtotal = money_sum(
        [line.adjusted_price for line in service_lines]
        + [line.total for line in product_lines]
    )
    discount_amount = calculate_discount(discount, service_lines, product_lines)
    taxable = quantize_money(subtotal - discount_amount)
    tax = quantize_money(taxable * rate)
    totals = SettlementTotals(
        subtotal=subtotal,
        discount=discount_amount,
        taxable=taxable,
        tax=tax,
        total=quantize_money(taxable + tax),
    )
    logger.debug("Settlement computed: %s", totals.to_dict())
    return totals
