"""
Salon Arrival Tracker — Live Queue Feed
=========================================
Push-based queue updates for reception screens.

subscribe(branch_id) returns a QueueSubscription: a blocking stream
of QueueSnapshot values plus cancel(). The feed listens to arrival
events on the event bus and pushes a fresh snapshot of the branch's
open arrivals after every change.

Snapshot entries come in storage order, and snapshots produced on
different threads may be delivered out of wall-clock order.
Consumers re-sort each delivery with order_queue().
"""

from __future__ import annotations

import logging
import queue
import threading
from dataclasses import dataclass
from datetime import datetime
from typing import Dict, Iterator, List, Optional, Tuple

from core.events.errors import QueueFeedClosedError
from core.events.models import DomainEvent
from core.events.registry import SubscriberRegistry
from engines.arrival.events import ARRIVAL_EVENT_TYPES
from engines.arrival.models import QueueEntry
from engines.arrival.services import ArrivalTracker, order_queue

logger = logging.getLogger("salon.arrivals")

_CLOSED = object()


@dataclass(frozen=True)
class QueueSnapshot:
    branch_id: str
    entries: Tuple[QueueEntry, ...]
    taken_at: datetime

    def ordered(self) -> List[QueueEntry]:
        return order_queue(self.entries)


class QueueSubscription:
    """One consumer's channel. Cancel to stop the stream."""

    def __init__(self, branch_id: str, feed: "QueueFeed"):
        self.branch_id = branch_id
        self._feed = feed
        self._queue: "queue.Queue" = queue.Queue()
        self._cancelled = threading.Event()

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    def _deliver(self, snapshot: QueueSnapshot) -> None:
        if not self._cancelled.is_set():
            self._queue.put(snapshot)

    def get(self, timeout: Optional[float] = None) -> Optional[QueueSnapshot]:
        """
        Next snapshot. None once cancelled. Raises queue.Empty when
        `timeout` elapses first.
        """
        item = self._queue.get(timeout=timeout)
        if item is _CLOSED:
            self._queue.put(_CLOSED)
            return None
        return item

    def stream(self, timeout: Optional[float] = None) -> Iterator[QueueSnapshot]:
        """Yield snapshots until cancelled or until `timeout` passes idle."""
        while True:
            try:
                snapshot = self.get(timeout=timeout)
            except queue.Empty:
                return
            if snapshot is None:
                return
            yield snapshot

    def cancel(self) -> None:
        if self._cancelled.is_set():
            return
        self._cancelled.set()
        self._queue.put(_CLOSED)
        self._feed._remove(self)


class QueueFeed:
    SUBSCRIBER_ENGINE = "arrival"

    def __init__(self, tracker: ArrivalTracker, registry: SubscriberRegistry, clock=None):
        self._tracker = tracker
        self._registry = registry
        self._clock = clock or tracker._clock
        self._subscriptions: Dict[str, List[QueueSubscription]] = {}
        self._lock = threading.Lock()
        self._closed = False
        for event_type in ARRIVAL_EVENT_TYPES:
            registry.register_subscriber(event_type, self._on_event, self.SUBSCRIBER_ENGINE)

    def subscribe(self, branch_id: str) -> QueueSubscription:
        """Open a channel; the current queue is delivered immediately.

        Raises QueueFeedClosedError after close().
        """
        subscription = QueueSubscription(branch_id, self)
        with self._lock:
            if self._closed:
                raise QueueFeedClosedError(branch_id)
            self._subscriptions.setdefault(branch_id, []).append(subscription)
        subscription._deliver(self._snapshot(branch_id))
        logger.debug("Queue feed subscriber added for branch %s", branch_id)
        return subscription

    def subscriber_count(self, branch_id: str) -> int:
        with self._lock:
            return len(self._subscriptions.get(branch_id, []))

    def close(self) -> None:
        """Cancel every subscription and stop listening to the bus."""
        with self._lock:
            self._closed = True
            subscriptions = [s for subs in self._subscriptions.values() for s in subs]
        for subscription in subscriptions:
            subscription.cancel()
        for event_type in ARRIVAL_EVENT_TYPES:
            self._registry.unregister_subscriber(event_type, self._on_event)

    def _remove(self, subscription: QueueSubscription) -> None:
        with self._lock:
            subs = self._subscriptions.get(subscription.branch_id, [])
            if subscription in subs:
                subs.remove(subscription)

    def _snapshot(self, branch_id: str) -> QueueSnapshot:
        return QueueSnapshot(
            branch_id=branch_id,
            entries=tuple(self._tracker.queue_entries(branch_id)),
            taken_at=self._clock.now_utc(),
        )

    def _on_event(self, event: DomainEvent) -> None:
        branch_id = event.branch_id
        if branch_id is None:
            return
        with self._lock:
            subscribers = list(self._subscriptions.get(branch_id, []))
        if not subscribers:
            return
        snapshot = self._snapshot(branch_id)
        for subscription in subscribers:
            subscription._deliver(snapshot)
