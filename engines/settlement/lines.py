"""
Salon Settlement — Line Items
===============================
A settlement is made of two kinds of line: ServiceLine and ProductLine.
Both expose the Priceable capability (line_type, item_id, amount) so
discount and commission code never inspects field presence.

Money fields are Decimal. Constructors accept Decimal, int or str
and normalize through core.primitives.money.to_decimal.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from decimal import Decimal
from enum import Enum
from typing import Any, ClassVar, Dict, Optional, Protocol, Tuple, Union

from core.config.rules import LINE_TYPE_PRODUCT, LINE_TYPE_SERVICE
from core.primitives.money import ZERO, quantize_money, to_decimal


class ClientType(str, Enum):
    """Client relationship code on a service line. Selects the commission rate."""
    NEW = "X"
    REGULAR = "R"
    TRANSFER = "TR"


class Priceable(Protocol):
    line_type: str

    @property
    def item_id(self) -> str: ...

    @property
    def amount(self) -> Decimal: ...


def _optional_money(value: Any, field_name: str) -> Optional[Decimal]:
    if value is None:
        return None
    return quantize_money(to_decimal(value, field_name=field_name))


def _money_str(value: Optional[Decimal]) -> Optional[str]:
    return None if value is None else str(value)


# ══════════════════════════════════════════════════════════════
# SERVICE LINE
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class ProductUsage:
    """A salon-use product consumed while performing a service."""
    product_id: str
    quantity: int = 1

    def __post_init__(self):
        if not self.product_id:
            raise ValueError("product_id must be non-empty.")
        if not isinstance(self.quantity, int) or self.quantity <= 0:
            raise ValueError("quantity must be positive integer.")


@dataclass(frozen=True)
class ServiceLine:
    service_id: str
    service_name: str
    base_price: Decimal
    stylist_id: Optional[str] = None
    stylist_name: str = ""
    adjustment: Decimal = ZERO
    adjustment_reason: str = ""
    client_type: ClientType = ClientType.REGULAR
    commission: Optional[Decimal] = None
    product_usage: Tuple[ProductUsage, ...] = ()

    line_type: ClassVar[str] = LINE_TYPE_SERVICE

    def __post_init__(self):
        if not self.service_id:
            raise ValueError("service_id must be non-empty.")
        base = quantize_money(to_decimal(self.base_price, field_name="base_price"))
        adjustment = quantize_money(to_decimal(self.adjustment, field_name="adjustment"))
        if base < 0:
            raise ValueError("base_price must not be negative.")
        if base + adjustment < 0:
            raise ValueError(
                f"Adjusted price for service {self.service_id} would be negative "
                f"({base} + {adjustment})."
            )
        object.__setattr__(self, "base_price", base)
        object.__setattr__(self, "adjustment", adjustment)
        object.__setattr__(self, "client_type", ClientType(self.client_type))
        object.__setattr__(
            self, "commission", _optional_money(self.commission, "commission"),
        )
        object.__setattr__(self, "product_usage", tuple(self.product_usage))

    @property
    def adjusted_price(self) -> Decimal:
        return quantize_money(self.base_price + self.adjustment)

    @property
    def item_id(self) -> str:
        return self.service_id

    @property
    def amount(self) -> Decimal:
        return self.adjusted_price

    @property
    def has_stylist(self) -> bool:
        return bool(self.stylist_id)

    def with_commission(self, commission: Decimal) -> "ServiceLine":
        return replace(self, commission=commission)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "line_type": self.line_type,
            "service_id": self.service_id,
            "service_name": self.service_name,
            "stylist_id": self.stylist_id,
            "stylist_name": self.stylist_name,
            "base_price": str(self.base_price),
            "adjustment": str(self.adjustment),
            "adjustment_reason": self.adjustment_reason,
            "adjusted_price": str(self.adjusted_price),
            "client_type": self.client_type.value,
            "commission": _money_str(self.commission),
            "product_usage": [
                {"product_id": u.product_id, "quantity": u.quantity}
                for u in self.product_usage
            ],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ServiceLine":
        return cls(
            service_id=data["service_id"],
            service_name=data.get("service_name", ""),
            stylist_id=data.get("stylist_id"),
            stylist_name=data.get("stylist_name", ""),
            base_price=data["base_price"],
            adjustment=data.get("adjustment", "0"),
            adjustment_reason=data.get("adjustment_reason", ""),
            client_type=ClientType(data.get("client_type", ClientType.REGULAR.value)),
            commission=data.get("commission"),
            product_usage=tuple(
                ProductUsage(product_id=u["product_id"], quantity=u["quantity"])
                for u in data.get("product_usage", [])
            ),
        )


# ══════════════════════════════════════════════════════════════
# PRODUCT LINE
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class ProductLine:
    product_id: str
    product_name: str
    unit_price: Decimal
    quantity: int = 1
    commissioner_id: Optional[str] = None
    commission: Optional[Decimal] = None

    line_type: ClassVar[str] = LINE_TYPE_PRODUCT

    def __post_init__(self):
        if not self.product_id:
            raise ValueError("product_id must be non-empty.")
        if not isinstance(self.quantity, int) or self.quantity < 1:
            raise ValueError("quantity must be a positive integer.")
        unit_price = quantize_money(to_decimal(self.unit_price, field_name="unit_price"))
        if unit_price < 0:
            raise ValueError("unit_price must not be negative.")
        object.__setattr__(self, "unit_price", unit_price)
        object.__setattr__(
            self, "commission", _optional_money(self.commission, "commission"),
        )

    @property
    def total(self) -> Decimal:
        return quantize_money(self.unit_price * self.quantity)

    @property
    def item_id(self) -> str:
        return self.product_id

    @property
    def amount(self) -> Decimal:
        return self.total

    def with_commission(self, commission: Decimal) -> "ProductLine":
        return replace(self, commission=commission)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "line_type": self.line_type,
            "product_id": self.product_id,
            "product_name": self.product_name,
            "unit_price": str(self.unit_price),
            "quantity": self.quantity,
            "total": str(self.total),
            "commissioner_id": self.commissioner_id,
            "commission": _money_str(self.commission),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ProductLine":
        return cls(
            product_id=data["product_id"],
            product_name=data.get("product_name", ""),
            unit_price=data["unit_price"],
            quantity=data.get("quantity", 1),
            commissioner_id=data.get("commissioner_id"),
            commission=data.get("commission"),
        )


LineItem = Union[ServiceLine, ProductLine]


def line_from_dict(data: Dict[str, Any]) -> LineItem:
    if data.get("line_type") == LINE_TYPE_PRODUCT:
        return ProductLine.from_dict(data)
    return ServiceLine.from_dict(data)
