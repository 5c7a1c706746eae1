"""
Salon Money Helpers
=====================
All settlement arithmetic is Decimal. Floats never enter a total.

Amounts are rounded to the currency minor unit (2 places) with
ROUND_HALF_UP, the rounding staff expect on a printed receipt.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Iterable, Union

MINOR_UNIT = Decimal("0.01")
ZERO = Decimal("0.00")

Numeric = Union[Decimal, int, str]


def to_decimal(value: Numeric, *, field_name: str = "amount") -> Decimal:
    """Coerce int/str/Decimal to Decimal. Floats are refused."""
    if isinstance(value, bool) or isinstance(value, float):
        raise ValueError(f"{field_name} must be Decimal, int or str, not {type(value).__name__}.")
    try:
        result = Decimal(value)
    except (InvalidOperation, TypeError) as exc:
        raise ValueError(f"{field_name} is not a valid number: {value!r}.") from exc
    if not result.is_finite():
        raise ValueError(f"{field_name} must be finite.")
    return result


def quantize_money(value: Decimal) -> Decimal:
    return value.quantize(MINOR_UNIT, rounding=ROUND_HALF_UP)


def money_sum(values: Iterable[Decimal]) -> Decimal:
    return quantize_money(sum(values, ZERO))
