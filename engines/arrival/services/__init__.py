"""
Salon Arrival Tracker — Application Service
=============================================
Records who is physically at a branch and where they are in the
queue. The tracker never drives the booking state machine; the
operator moves the arrival and the booking separately, so a walk-in
with no booking can be served to completion.

Status writes are compare-and-set against the status read just
before the write.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import replace
from datetime import datetime
from typing import Callable, List, Optional

from core.commands.outcomes import Outcome
from core.commands.rejection import ReasonCode
from core.events.dispatcher import EventBus
from core.time.clock import Clock, SystemClock
from engines.arrival.events import (
    ARRIVAL_CLIENT_ARRIVED_V1,
    ARRIVAL_CLIENT_CANCELLED_V1,
    ARRIVAL_SERVICE_FINISHED_V1,
    ARRIVAL_SERVICE_STARTED_V1,
    build_arrival_payload,
)
from engines.arrival.models import (
    OPEN_ARRIVAL_STATUSES,
    Arrival,
    ArrivalStatus,
    QueueEntry,
)
from engines.arrival.policies import (
    BEGIN_FROM,
    CANCEL_FROM,
    FINISH_FROM,
    arrival_must_be_status_policy,
)
from engines.arrival.repository import ArrivalRepository, InMemoryArrivalRepository

logger = logging.getLogger("salon.arrivals")


def order_queue(entries) -> list:
    """Queue display order: earliest arrival first, arrival id as tie-break."""
    return sorted(entries, key=lambda e: (e.arrived_at, e.arrival_id))


class ArrivalTracker:
    def __init__(
        self,
        repository: Optional[ArrivalRepository] = None,
        *,
        clock: Optional[Clock] = None,
        event_bus: Optional[EventBus] = None,
    ):
        self._repository = repository or InMemoryArrivalRepository()
        self._clock = clock or SystemClock()
        self._event_bus = event_bus

    @property
    def repository(self) -> ArrivalRepository:
        return self._repository

    def _publish(self, event_type: str, arrival: Arrival, actor_id: Optional[str]) -> None:
        if self._event_bus is None:
            return
        self._event_bus.publish(
            event_type, build_arrival_payload(arrival),
            branch_id=arrival.branch_id, actor_id=actor_id,
            occurred_at=self._clock.now_utc(),
        )

    # ── commands ─────────────────────────────────────────────

    def record_arrival(
        self,
        branch_id: str,
        booking_id: Optional[str],
        client_name: str,
        *,
        actor_id: Optional[str] = None,
    ) -> Outcome[Arrival]:
        """
        Create an ARRIVED record. If the booking already has an open
        arrival, that arrival is returned unchanged.
        """
        if not branch_id:
            return Outcome.rejected(
                ReasonCode.VALIDATION, "branch_id is required.", "record_arrival")
        if not client_name or not client_name.strip():
            return Outcome.rejected(
                ReasonCode.VALIDATION, "client_name is required.", "record_arrival")

        candidate = Arrival(
            arrival_id=str(uuid.uuid4()),
            branch_id=branch_id,
            booking_id=booking_id or None,
            client_name=client_name.strip(),
            arrived_at=self._clock.now_utc(),
        )
        stored = self._repository.add_unless_open(candidate)
        if stored.arrival_id != candidate.arrival_id:
            logger.debug(
                "Booking %s already has open arrival %s", booking_id, stored.arrival_id,
            )
            return Outcome.accepted(stored)

        logger.info(
            "Client arrived: %s at branch %s (booking %s) recorded by %s",
            stored.client_name, branch_id, booking_id or "walk-in", actor_id,
        )
        self._publish(ARRIVAL_CLIENT_ARRIVED_V1, stored, actor_id)
        return Outcome.accepted(stored)

    def _transition(
        self,
        arrival_id: str,
        allowed: frozenset,
        action: str,
        apply: Callable[[Arrival, datetime], Arrival],
        event_type: str,
        actor_id: Optional[str],
    ) -> Outcome[Arrival]:
        current = self._repository.get(arrival_id)
        if current is None:
            return Outcome.rejected(
                ReasonCode.NOT_FOUND, f"Arrival '{arrival_id}' not found.", action)
        rejection = arrival_must_be_status_policy(current, allowed, action)
        if rejection is not None:
            logger.info("Arrival %s %s rejected: %s", arrival_id, action, rejection.code)
            return Outcome.from_reason(rejection)

        updated = apply(current, self._clock.now_utc())
        if not self._repository.compare_and_set(arrival_id, current.status, updated):
            logger.info("Arrival %s %s lost a concurrent update", arrival_id, action)
            return Outcome.rejected(
                ReasonCode.CONFLICT,
                f"Arrival '{arrival_id}' changed while {action} was in progress; refetch and retry.",
                action)

        logger.info(
            "Arrival %s: %s -> %s by %s",
            arrival_id, current.status.value, updated.status.value, actor_id,
        )
        self._publish(event_type, updated, actor_id)
        return Outcome.accepted(updated)

    def begin_service(self, arrival_id: str, *, actor_id: Optional[str] = None) -> Outcome[Arrival]:
        return self._transition(
            arrival_id, BEGIN_FROM, "begin_service",
            lambda a, now: replace(a, status=ArrivalStatus.IN_SERVICE, started_at=now),
            ARRIVAL_SERVICE_STARTED_V1, actor_id,
        )

    def finish(self, arrival_id: str, *, actor_id: Optional[str] = None) -> Outcome[Arrival]:
        return self._transition(
            arrival_id, FINISH_FROM, "finish",
            lambda a, now: replace(a, status=ArrivalStatus.COMPLETED, finished_at=now),
            ARRIVAL_SERVICE_FINISHED_V1, actor_id,
        )

    def cancel_arrival(self, arrival_id: str, *, actor_id: Optional[str] = None) -> Outcome[Arrival]:
        return self._transition(
            arrival_id, CANCEL_FROM, "cancel_arrival",
            lambda a, now: replace(a, status=ArrivalStatus.CANCELLED, finished_at=now),
            ARRIVAL_CLIENT_CANCELLED_V1, actor_id,
        )

    # ── queries ──────────────────────────────────────────────

    def get_arrival(self, arrival_id: str) -> Optional[Arrival]:
        return self._repository.get(arrival_id)

    def queue_entries(self, branch_id: str, statuses=OPEN_ARRIVAL_STATUSES) -> List[QueueEntry]:
        """Entries in storage order, wait times taken now."""
        now = self._clock.now_utc()
        return [
            QueueEntry.at(a, now)
            for a in self._repository.list_for_branch(branch_id, statuses)
        ]

    def waiting_queue(self, branch_id: str) -> List[QueueEntry]:
        """Clients waiting to be served, earliest arrival first."""
        return order_queue(self.queue_entries(branch_id, {ArrivalStatus.ARRIVED}))

    def active_queue(self, branch_id: str) -> List[QueueEntry]:
        """Waiting and in-service clients, earliest arrival first."""
        return order_queue(self.queue_entries(branch_id, OPEN_ARRIVAL_STATUSES))
