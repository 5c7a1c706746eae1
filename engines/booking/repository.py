"""
Salon Booking Engine — Booking Store

add_unless_conflicting runs the conflict check and the insert as one
step, so two bookings racing for the same stylist slot cannot both land.
"""

from __future__ import annotations

import threading
from typing import Callable, Dict, Iterable, List, Optional, Protocol

from core.commands.rejection import RejectionReason
from engines.booking.models import ACTIVE_BOOKING_STATUSES, Booking, BookingStatus

ConflictCheck = Callable[[Booking, Iterable[Booking]], Optional[RejectionReason]]


class BookingRepository(Protocol):
    def add(self, booking: Booking) -> None: ...

    def add_unless_conflicting(
        self, booking: Booking, check: ConflictCheck,
    ) -> Optional[RejectionReason]: ...

    def get(self, booking_id: str) -> Optional[Booking]: ...

    def compare_and_set(
        self, booking_id: str, expected: BookingStatus, updated: Booking,
    ) -> bool: ...

    def list_for_branch(
        self, branch_id: str, status: Optional[BookingStatus] = None,
    ) -> List[Booking]: ...


class InMemoryBookingRepository:
    def __init__(self):
        self._bookings: Dict[str, Booking] = {}
        self._lock = threading.Lock()

    def add(self, booking: Booking) -> None:
        with self._lock:
            if booking.booking_id in self._bookings:
                raise ValueError(f"Booking '{booking.booking_id}' already exists.")
            self._bookings[booking.booking_id] = booking

    def add_unless_conflicting(
        self, booking: Booking, check: ConflictCheck,
    ) -> Optional[RejectionReason]:
        """Insert unless `check` objects against the active bookings."""
        with self._lock:
            if booking.booking_id in self._bookings:
                raise ValueError(f"Booking '{booking.booking_id}' already exists.")
            active = [
                b for b in self._bookings.values() if b.status in ACTIVE_BOOKING_STATUSES
            ]
            rejection = check(booking, active)
            if rejection is not None:
                return rejection
            self._bookings[booking.booking_id] = booking
            return None

    def get(self, booking_id: str) -> Optional[Booking]:
        with self._lock:
            return self._bookings.get(booking_id)

    def compare_and_set(
        self, booking_id: str, expected: BookingStatus, updated: Booking,
    ) -> bool:
        """Replace the booking only if its stored status is still `expected`."""
        with self._lock:
            current = self._bookings.get(booking_id)
            if current is None or current.status != expected:
                return False
            self._bookings[booking_id] = updated
            return True

    def list_for_branch(
        self, branch_id: str, status: Optional[BookingStatus] = None,
    ) -> List[Booking]:
        with self._lock:
            return [
                b for b in self._bookings.values()
                if b.branch_id == branch_id and (status is None or b.status == status)
            ]
