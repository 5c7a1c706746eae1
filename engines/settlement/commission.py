"""
Salon Settlement — Commission Calculator
==========================================
A commission already stored on a line is returned unchanged, so a
rate table edit never rewrites history. Otherwise:

    commission = line amount x rate(line_type, client_type)

Product lines earn commission only when a commissioner is recorded.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Dict, List, Optional, Sequence, Tuple

from core.config.rules import LINE_TYPE_PRODUCT, LINE_TYPE_SERVICE, CommissionRateTable
from core.primitives.money import money_sum, quantize_money
from engines.settlement.lines import ProductLine, ServiceLine


@dataclass(frozen=True)
class CommissionRecord:
    line_type: str
    item_id: str
    earner_id: Optional[str]
    base_amount: Decimal
    amount: Decimal
    rate: Optional[Decimal] = None

    @property
    def was_stored(self) -> bool:
        """True when the amount came from the line rather than the rate table."""
        return self.rate is None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "line_type": self.line_type,
            "item_id": self.item_id,
            "earner_id": self.earner_id,
            "amount": str(self.amount),
            "rate": str(self.rate) if self.rate is not None else None,
            "stored": self.was_stored,
        }


def service_commission(line: ServiceLine, rates: CommissionRateTable) -> CommissionRecord:
    if line.commission is not None:
        return CommissionRecord(
            line_type=LINE_TYPE_SERVICE,
            item_id=line.service_id,
            earner_id=line.stylist_id,
            base_amount=line.adjusted_price,
            amount=line.commission,
        )
    rate = rates.rate_for(LINE_TYPE_SERVICE, line.client_type.value)
    return CommissionRecord(
        line_type=LINE_TYPE_SERVICE,
        item_id=line.service_id,
        earner_id=line.stylist_id,
        base_amount=line.adjusted_price,
        amount=quantize_money(line.adjusted_price * rate),
        rate=rate,
    )


def product_commission(
    line: ProductLine, rates: CommissionRateTable,
) -> Optional[CommissionRecord]:
    if line.commissioner_id is None:
        return None
    if line.commission is not None:
        return CommissionRecord(
            line_type=LINE_TYPE_PRODUCT,
            item_id=line.product_id,
            earner_id=line.commissioner_id,
            base_amount=line.total,
            amount=line.commission,
        )
    rate = rates.rate_for(LINE_TYPE_PRODUCT)
    return CommissionRecord(
        line_type=LINE_TYPE_PRODUCT,
        item_id=line.product_id,
        earner_id=line.commissioner_id,
        base_amount=line.total,
        amount=quantize_money(line.total * rate),
        rate=rate,
    )


def calculate_commissions(
    service_lines: Sequence[ServiceLine],
    product_lines: Sequence[ProductLine],
    rates: CommissionRateTable,
) -> List[CommissionRecord]:
    records = [service_commission(line, rates) for line in service_lines]
    for line in product_lines:
        record = product_commission(line, rates)
        if record is not None:
            records.append(record)
    return records


def apply_commissions(
    service_lines: Sequence[ServiceLine],
    product_lines: Sequence[ProductLine],
    rates: CommissionRateTable,
) -> Tuple[Tuple[ServiceLine, ...], Tuple[ProductLine, ...]]:
    """Return copies of the lines with the commission stored on each."""
    services = tuple(
        line.with_commission(service_commission(line, rates).amount)
        for line in service_lines
    )
    products = []
    for line in product_lines:
        record = product_commission(line, rates)
        products.append(line if record is None else line.with_commission(record.amount))
    return services, tuple(products)


def total_commission(records: Sequence[CommissionRecord]) -> Decimal:
    return money_sum(r.amount for r in records)
