"""
Salon Arrival Tracker — Arrival Store
"""

from __future__ import annotations

import threading
from typing import Dict, Iterable, List, Optional, Protocol

from engines.arrival.models import Arrival, ArrivalStatus


class ArrivalRepository(Protocol):
    def add_unless_open(self, arrival: Arrival) -> Arrival: ...

    def get(self, arrival_id: str) -> Optional[Arrival]: ...

    def find_open_for_booking(self, booking_id: str) -> Optional[Arrival]: ...

    def compare_and_set(
        self, arrival_id: str, expected: ArrivalStatus, updated: Arrival,
    ) -> bool: ...

    def list_for_branch(
        self, branch_id: str, statuses: Iterable[ArrivalStatus],
    ) -> List[Arrival]: ...


class InMemoryArrivalRepository:
    def __init__(self):
        self._arrivals: Dict[str, Arrival] = {}
        self._lock = threading.Lock()

    def _open_for_booking(self, booking_id: str) -> Optional[Arrival]:
        for arrival in self._arrivals.values():
            if arrival.booking_id == booking_id and arrival.is_open:
                return arrival
        return None

    def add_unless_open(self, arrival: Arrival) -> Arrival:
        """
        Store `arrival`, unless its booking already has an open arrival,
        in which case that one is returned and nothing is stored.
        """
        with self._lock:
            if arrival.booking_id is not None:
                existing = self._open_for_booking(arrival.booking_id)
                if existing is not None:
                    return existing
            self._arrivals[arrival.arrival_id] = arrival
            return arrival

    def get(self, arrival_id: str) -> Optional[Arrival]:
        with self._lock:
            return self._arrivals.get(arrival_id)

    def find_open_for_booking(self, booking_id: str) -> Optional[Arrival]:
        with self._lock:
            return self._open_for_booking(booking_id)

    def compare_and_set(
        self, arrival_id: str, expected: ArrivalStatus, updated: Arrival,
    ) -> bool:
        with self._lock:
            current = self._arrivals.get(arrival_id)
            if current is None or current.status != expected:
                return False
            self._arrivals[arrival_id] = updated
            return True

    def list_for_branch(
        self, branch_id: str, statuses: Iterable[ArrivalStatus],
    ) -> List[Arrival]:
        wanted = frozenset(statuses)
        with self._lock:
            return [
                a for a in self._arrivals.values()
                if a.branch_id == branch_id and a.status in wanted
            ]
