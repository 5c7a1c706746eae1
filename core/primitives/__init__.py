"""
Salon Core Primitives
=======================
Pure Python building blocks shared by all engines.

Primitives:
    money — Decimal coercion and minor-unit rounding
"""

from core.primitives.money import (
    MINOR_UNIT,
    ZERO,
    money_sum,
    quantize_money,
    to_decimal,
)

__all__ = [
    "MINOR_UNIT",
    "ZERO",
    "money_sum",
    "quantize_money",
    "to_decimal",
]
