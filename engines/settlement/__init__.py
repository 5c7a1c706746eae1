"""
Salon Settlement Engine
=========================
Pure calculations over a booking's settlement draft: line items,
discounts, commissions and totals. Nothing here touches storage.
"""

from engines.settlement.commission import (
    CommissionRecord,
    apply_commissions,
    calculate_commissions,
    product_commission,
    service_commission,
    total_commission,
)
from engines.settlement.discount import (
    DISCOUNT_FIXED,
    DISCOUNT_PERCENTAGE,
    SCOPE_ALL,
    SCOPE_PRODUCTS,
    SCOPE_SERVICES,
    SCOPE_SPECIFIC,
    VALID_DISCOUNT_KINDS,
    VALID_SCOPES,
    DiscountTerms,
    applicable_subtotal,
    calculate_discount,
)
from engines.settlement.lines import (
    ClientType,
    LineItem,
    Priceable,
    ProductLine,
    ProductUsage,
    ServiceLine,
    line_from_dict,
)
from engines.settlement.totals import SettlementTotals, calculate_totals, validate_tax_rate

__all__ = [
    "ClientType",
    "CommissionRecord",
    "DiscountTerms",
    "LineItem",
    "Priceable",
    "ProductLine",
    "ProductUsage",
    "ServiceLine",
    "SettlementTotals",
    "DISCOUNT_FIXED",
    "DISCOUNT_PERCENTAGE",
    "SCOPE_ALL",
    "SCOPE_PRODUCTS",
    "SCOPE_SERVICES",
    "SCOPE_SPECIFIC",
    "VALID_DISCOUNT_KINDS",
    "VALID_SCOPES",
    "applicable_subtotal",
    "apply_commissions",
    "calculate_commissions",
    "calculate_discount",
    "calculate_totals",
    "line_from_dict",
    "product_commission",
    "service_commission",
    "total_commission",
    "validate_tax_rate",
]
