"""
Salon Booking Engine — Request Commands
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Optional, Tuple

from core.primitives.money import ZERO
from engines.booking.models import DEFAULT_DURATION_MINUTES, MAX_DURATION_MINUTES
from engines.promotion.commands import normalize_code
from engines.settlement.discount import DiscountTerms
from engines.settlement.lines import ProductLine, ServiceLine
from engines.settlement.totals import validate_tax_rate


def _require_stylist(service_lines: Tuple[ServiceLine, ...]) -> None:
    if not service_lines:
        raise ValueError("At least one service line is required.")
    if not any(line.has_stylist for line in service_lines):
        raise ValueError("At least one service line must have an assigned stylist.")


@dataclass(frozen=True)
class BookingCreateRequest:
    branch_id: str
    scheduled_at: datetime
    service_lines: Tuple[ServiceLine, ...]
    client_id: Optional[str] = None
    client_name: str = ""
    product_lines: Tuple[ProductLine, ...] = ()
    duration_minutes: int = DEFAULT_DURATION_MINUTES

    def __post_init__(self):
        if not self.branch_id:
            raise ValueError("branch_id is required.")
        if not isinstance(self.scheduled_at, datetime):
            raise ValueError("scheduled_at is required.")
        if self.scheduled_at.tzinfo is None:
            raise ValueError("scheduled_at must be timezone-aware.")
        duration = self.duration_minutes
        if not isinstance(duration, int) or not 0 < duration <= MAX_DURATION_MINUTES:
            raise ValueError(
                f"duration_minutes must be an integer within 1..{MAX_DURATION_MINUTES}."
            )
        object.__setattr__(self, "service_lines", tuple(self.service_lines or ()))
        object.__setattr__(self, "product_lines", tuple(self.product_lines or ()))
        _require_stylist(self.service_lines)
        object.__setattr__(self, "client_name", (self.client_name or "").strip())
        if self.client_id is None and not self.client_name:
            raise ValueError("Guest bookings require a client name.")


@dataclass(frozen=True)
class SettlementDraft:
    """
    What start_service binds to the booking: line selection, discount
    terms or a promotion code, and a tax rate fraction. Empty
    service_lines keeps the lines chosen at booking time.
    """

    service_lines: Tuple[ServiceLine, ...] = ()
    product_lines: Tuple[ProductLine, ...] = ()
    discount: Optional[DiscountTerms] = None
    promotion_code: Optional[str] = None
    tax_rate: Decimal = ZERO

    def __post_init__(self):
        object.__setattr__(self, "service_lines", tuple(self.service_lines or ()))
        object.__setattr__(self, "product_lines", tuple(self.product_lines or ()))
        if self.service_lines:
            _require_stylist(self.service_lines)
        object.__setattr__(self, "tax_rate", validate_tax_rate(self.tax_rate))
        if self.promotion_code is not None:
            code = normalize_code(self.promotion_code)
            object.__setattr__(self, "promotion_code", code or None)
        if self.discount is not None and self.promotion_code:
            raise ValueError("Use either a manual discount or a promotion code, not both.")
