"""
Salon Core Config — Public API
================================
Admin-configurable commission rates.
"""

from core.config.rules import (
    DEFAULT_PRODUCT_RATE,
    DEFAULT_SERVICE_RATE,
    LINE_TYPE_PRODUCT,
    LINE_TYPE_SERVICE,
    CommissionRateTable,
    InMemoryRateTable,
    RateRule,
    rate_table_from_mapping,
)

__all__ = [
    "DEFAULT_PRODUCT_RATE",
    "DEFAULT_SERVICE_RATE",
    "LINE_TYPE_PRODUCT",
    "LINE_TYPE_SERVICE",
    "CommissionRateTable",
    "InMemoryRateTable",
    "RateRule",
    "rate_table_from_mapping",
]
