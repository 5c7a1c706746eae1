"""
Salon Arrival Tracker — Arrival Record
========================================
An Arrival records a client physically present at a branch. It may
reference a booking or be a walk-in (booking_id None).

ARRIVED → IN_SERVICE → COMPLETED
ARRIVED | IN_SERVICE → CANCELLED

At most one open (ARRIVED or IN_SERVICE) arrival exists per booking.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum
from typing import Any, Dict, Optional

from core.time.temporal import elapsed_since


class ArrivalStatus(str, Enum):
    ARRIVED = "ARRIVED"
    IN_SERVICE = "IN_SERVICE"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


OPEN_ARRIVAL_STATUSES = frozenset({ArrivalStatus.ARRIVED, ArrivalStatus.IN_SERVICE})
TERMINAL_ARRIVAL_STATUSES = frozenset({ArrivalStatus.COMPLETED, ArrivalStatus.CANCELLED})


@dataclass(frozen=True)
class Arrival:
    arrival_id: str
    branch_id: str
    client_name: str
    arrived_at: datetime
    booking_id: Optional[str] = None
    status: ArrivalStatus = ArrivalStatus.ARRIVED
    started_at: Optional[datetime] = None
    finished_at: Optional[datetime] = None

    @property
    def is_walk_in(self) -> bool:
        return self.booking_id is None

    @property
    def is_open(self) -> bool:
        return self.status in OPEN_ARRIVAL_STATUSES

    def to_dict(self) -> Dict[str, Any]:
        return {
            "arrival_id": self.arrival_id,
            "branch_id": self.branch_id,
            "booking_id": self.booking_id,
            "client_name": self.client_name,
            "status": self.status.value,
            "arrived_at": self.arrived_at.isoformat(),
            "started_at": self.started_at.isoformat() if self.started_at else None,
            "finished_at": self.finished_at.isoformat() if self.finished_at else None,
        }


@dataclass(frozen=True)
class QueueEntry:
    """An arrival as shown in a queue. wait_time is derived, never stored."""
    arrival: Arrival
    wait_time: timedelta

    @classmethod
    def at(cls, arrival: Arrival, now: datetime) -> "QueueEntry":
        return cls(arrival=arrival, wait_time=elapsed_since(arrival.arrived_at, now))

    @property
    def arrival_id(self) -> str:
        return self.arrival.arrival_id

    @property
    def arrived_at(self) -> datetime:
        return self.arrival.arrived_at
