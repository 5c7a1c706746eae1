"""
Salon Booking Engine — Booking Record
=======================================
PENDING → CONFIRMED → IN_SERVICE → COMPLETED
PENDING | CONFIRMED | IN_SERVICE → CANCELLED
CONFIRMED → NO_SHOW

Once terminal, only `history` may change. Bookings are never deleted.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, Optional, Tuple

from core.primitives.money import ZERO
from engines.settlement.discount import DiscountTerms
from engines.settlement.lines import ProductLine, ServiceLine


class BookingStatus(str, Enum):
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    IN_SERVICE = "IN_SERVICE"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"
    NO_SHOW = "NO_SHOW"


TERMINAL_BOOKING_STATUSES = frozenset({
    BookingStatus.COMPLETED, BookingStatus.CANCELLED, BookingStatus.NO_SHOW,
})

# bookings that still hold their time slot
ACTIVE_BOOKING_STATUSES = frozenset({
    BookingStatus.PENDING, BookingStatus.CONFIRMED, BookingStatus.IN_SERVICE,
})

DEFAULT_DURATION_MINUTES = 60
MAX_DURATION_MINUTES = 12 * 60


def _parse_dt(value: Optional[str]) -> Optional[datetime]:
    return datetime.fromisoformat(value) if value else None


@dataclass(frozen=True)
class HistoryEntry:
    """Audit metadata: who moved the booking, when, and why."""
    action: str
    to_status: BookingStatus
    at: datetime
    actor_id: Optional[str] = None
    from_status: Optional[BookingStatus] = None
    reason: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "action": self.action,
            "from_status": self.from_status.value if self.from_status else None,
            "to_status": self.to_status.value,
            "actor_id": self.actor_id,
            "at": self.at.isoformat(),
            "reason": self.reason,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "HistoryEntry":
        return cls(
            action=data["action"],
            from_status=BookingStatus(data["from_status"]) if data.get("from_status") else None,
            to_status=BookingStatus(data["to_status"]),
            actor_id=data.get("actor_id"),
            at=datetime.fromisoformat(data["at"]),
            reason=data.get("reason"),
        )


@dataclass(frozen=True)
class Booking:
    booking_id: str
    branch_id: str
    scheduled_at: datetime
    service_lines: Tuple[ServiceLine, ...]
    status: BookingStatus = BookingStatus.PENDING
    client_id: Optional[str] = None
    client_name: str = ""
    product_lines: Tuple[ProductLine, ...] = ()
    discount: Optional[DiscountTerms] = None
    tax_rate: Decimal = ZERO
    cancellation_reason: Optional[str] = None
    history: Tuple[HistoryEntry, ...] = ()
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    duration_minutes: int = DEFAULT_DURATION_MINUTES

    @property
    def is_guest(self) -> bool:
        return self.client_id is None

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_BOOKING_STATUSES

    @property
    def promotion_id(self) -> Optional[str]:
        return self.discount.promotion_id if self.discount is not None else None

    @property
    def ends_at(self) -> datetime:
        return self.scheduled_at + timedelta(minutes=self.duration_minutes)

    @property
    def stylist_ids(self) -> frozenset:
        return frozenset(line.stylist_id for line in self.service_lines if line.has_stylist)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "booking_id": self.booking_id,
            "branch_id": self.branch_id,
            "client_id": self.client_id,
            "client_name": self.client_name,
            "status": self.status.value,
            "scheduled_at": self.scheduled_at.isoformat(),
            "duration_minutes": self.duration_minutes,
            "service_lines": [line.to_dict() for line in self.service_lines],
            "product_lines": [line.to_dict() for line in self.product_lines],
            "discount": self.discount.to_dict() if self.discount is not None else None,
            "tax_rate": str(self.tax_rate),
            "cancellation_reason": self.cancellation_reason,
            "history": [entry.to_dict() for entry in self.history],
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Booking":
        discount = data.get("discount")
        return cls(
            booking_id=data["booking_id"],
            branch_id=data["branch_id"],
            client_id=data.get("client_id"),
            client_name=data.get("client_name", ""),
            status=BookingStatus(data["status"]),
            scheduled_at=datetime.fromisoformat(data["scheduled_at"]),
            duration_minutes=int(data.get("duration_minutes", DEFAULT_DURATION_MINUTES)),
            service_lines=tuple(ServiceLine.from_dict(d) for d in data.get("service_lines", [])),
            product_lines=tuple(ProductLine.from_dict(d) for d in data.get("product_lines", [])),
            discount=DiscountTerms.from_dict(discount) if discount else None,
            tax_rate=Decimal(data.get("tax_rate", "0")),
            cancellation_reason=data.get("cancellation_reason"),
            history=tuple(HistoryEntry.from_dict(h) for h in data.get("history", [])),
            created_at=_parse_dt(data.get("created_at")),
            updated_at=_parse_dt(data.get("updated_at")),
        )
