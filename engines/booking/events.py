"""
Salon Booking Engine — Event Types and Payload Builders
"""

from __future__ import annotations

from typing import Optional

from engines.booking.models import Booking

BOOKING_CREATED_V1 = "booking.status.created.v1"
BOOKING_CONFIRMED_V1 = "booking.status.confirmed.v1"
BOOKING_SERVICE_STARTED_V1 = "booking.status.service_started.v1"
BOOKING_COMPLETED_V1 = "booking.status.completed.v1"
BOOKING_CANCELLED_V1 = "booking.status.cancelled.v1"
BOOKING_NO_SHOW_V1 = "booking.status.no_show.v1"

BOOKING_EVENT_TYPES = (
    BOOKING_CREATED_V1,
    BOOKING_CONFIRMED_V1,
    BOOKING_SERVICE_STARTED_V1,
    BOOKING_COMPLETED_V1,
    BOOKING_CANCELLED_V1,
    BOOKING_NO_SHOW_V1,
)


def build_status_payload(booking: Booking, reason: Optional[str] = None) -> dict:
    payload = {
        "booking_id": booking.booking_id,
        "branch_id": booking.branch_id,
        "client_id": booking.client_id,
        "status": booking.status.value,
        "scheduled_at": booking.scheduled_at.isoformat(),
    }
    if reason is not None:
        payload["reason"] = reason
    return payload


def build_completed_payload(booking: Booking, totals: dict, commissions: list) -> dict:
    payload = build_status_payload(booking)
    payload["totals"] = totals
    payload["commissions"] = commissions
    payload["promotion_id"] = booking.promotion_id
    return payload
