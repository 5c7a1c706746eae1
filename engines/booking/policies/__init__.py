"""
Salon Booking Engine — Transition Policy
==========================================
Failure mapping for a requested transition:

- stored status differs from the caller's expected_status → CONFLICT
- stored status is terminal                               → CONFLICT
- stored status is live but not a legal pre-state         → INVALID_TRANSITION

Slot conflicts checked at creation live in policies.conflicts.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional

from core.commands.rejection import ReasonCode, RejectionReason
from engines.booking.models import TERMINAL_BOOKING_STATUSES, Booking, BookingStatus
from engines.booking.policies.conflicts import (
    booking_conflict_policy,
    duplicate_booking_policy,
    slots_overlap,
    stylist_availability_policy,
)


@dataclass(frozen=True)
class Transition:
    allowed_from: frozenset
    to_status: Optional[BookingStatus]


ACTION_CONFIRM = "confirm"
ACTION_START_SERVICE = "start_service"
ACTION_COMPLETE = "complete"
ACTION_CANCEL = "cancel"
ACTION_NO_SHOW = "mark_no_show"
ACTION_CHECK_IN = "check_in"

BOOKING_TRANSITIONS: Dict[str, Transition] = {
    ACTION_CONFIRM: Transition(
        frozenset({BookingStatus.PENDING}), BookingStatus.CONFIRMED),
    ACTION_START_SERVICE: Transition(
        frozenset({BookingStatus.CONFIRMED}), BookingStatus.IN_SERVICE),
    ACTION_COMPLETE: Transition(
        frozenset({BookingStatus.IN_SERVICE}), BookingStatus.COMPLETED),
    ACTION_CANCEL: Transition(
        frozenset({BookingStatus.PENDING, BookingStatus.CONFIRMED, BookingStatus.IN_SERVICE}),
        BookingStatus.CANCELLED),
    ACTION_NO_SHOW: Transition(
        frozenset({BookingStatus.CONFIRMED}), BookingStatus.NO_SHOW),
    # check-in records an arrival; the booking status does not move
    ACTION_CHECK_IN: Transition(
        frozenset({BookingStatus.CONFIRMED}), None),
}


def booking_transition_policy(
    booking: Booking,
    action: str,
    expected_status: Optional[BookingStatus] = None,
) -> Optional[RejectionReason]:
    transition = BOOKING_TRANSITIONS[action]
    if expected_status is not None and booking.status != BookingStatus(expected_status):
        return RejectionReason(
            code=ReasonCode.CONFLICT,
            message=(
                f"Booking '{booking.booking_id}' is {booking.status.value}, "
                f"caller expected {BookingStatus(expected_status).value}; refetch and retry."
            ),
            policy_name="booking_transition_policy")
    if booking.status in transition.allowed_from:
        return None
    if booking.status in TERMINAL_BOOKING_STATUSES:
        return RejectionReason(
            code=ReasonCode.CONFLICT,
            message=(
                f"Booking '{booking.booking_id}' is already "
                f"{booking.status.value} (terminal state)."
            ),
            policy_name="booking_transition_policy")
    allowed = ", ".join(sorted(s.value for s in transition.allowed_from))
    return RejectionReason(
        code=ReasonCode.INVALID_TRANSITION,
        message=(
            f"Cannot {action} booking '{booking.booking_id}' from "
            f"{booking.status.value}; allowed from {allowed}."
        ),
        policy_name="booking_transition_policy")
