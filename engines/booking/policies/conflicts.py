"""
Salon Booking Engine — Slot Conflict Policies
===============================================
Checked when a booking is created, against every booking that still
holds its slot (PENDING, CONFIRMED, IN_SERVICE) in any branch.

- same client, same service with the same stylist, overlapping → CONFLICT
- any service line's stylist already booked in an overlapping slot → CONFLICT

Two slots overlap when each starts before the other ends, so
back-to-back bookings never conflict.
"""

from __future__ import annotations

from typing import Iterable, Optional

from core.commands.rejection import ReasonCode, RejectionReason
from engines.booking.models import ACTIVE_BOOKING_STATUSES, Booking


def slots_overlap(a: Booking, b: Booking) -> bool:
    return a.scheduled_at < b.ends_at and b.scheduled_at < a.ends_at


def _service_pairs(booking: Booking) -> set:
    return {(line.service_id, line.stylist_id or None) for line in booking.service_lines}


def _holding_slot(candidate: Booking, existing: Iterable[Booking]):
    for other in existing:
        if other.booking_id == candidate.booking_id:
            continue
        if other.status not in ACTIVE_BOOKING_STATUSES:
            continue
        if slots_overlap(candidate, other):
            yield other


def duplicate_booking_policy(
    candidate: Booking, existing: Iterable[Booking],
) -> Optional[RejectionReason]:
    if candidate.client_id is None:
        return None
    wanted = _service_pairs(candidate)
    for other in _holding_slot(candidate, existing):
        if other.client_id != candidate.client_id:
            continue
        if wanted & _service_pairs(other):
            return RejectionReason(
                code=ReasonCode.CONFLICT,
                message=(
                    f"Client '{candidate.client_id}' already has booking "
                    f"'{other.booking_id}' for the same service and stylist "
                    f"at {other.scheduled_at.isoformat()}."
                ),
                policy_name="duplicate_booking_policy")
    return None


def stylist_availability_policy(
    candidate: Booking, existing: Iterable[Booking],
) -> Optional[RejectionReason]:
    stylists = candidate.stylist_ids
    if not stylists:
        return None
    for other in _holding_slot(candidate, existing):
        busy = stylists & other.stylist_ids
        if busy:
            return RejectionReason(
                code=ReasonCode.CONFLICT,
                message=(
                    f"Stylist {', '.join(sorted(busy))} is already booked from "
                    f"{other.scheduled_at.isoformat()} to {other.ends_at.isoformat()}."
                ),
                policy_name="stylist_availability_policy")
    return None


def booking_conflict_policy(
    candidate: Booking, existing: Iterable[Booking],
) -> Optional[RejectionReason]:
    """Duplicate check first; it names the clash more precisely."""
    existing = list(existing)
    return (
        duplicate_booking_policy(candidate, existing)
        or stylist_availability_policy(candidate, existing)
    )
