from engines.arrival.models import (
    OPEN_ARRIVAL_STATUSES,
    TERMINAL_ARRIVAL_STATUSES,
    Arrival,
    ArrivalStatus,
    QueueEntry,
)
from engines.arrival.repository import ArrivalRepository, InMemoryArrivalRepository
from engines.arrival.services import ArrivalTracker, order_queue
from engines.arrival.subscriptions import QueueFeed, QueueSnapshot, QueueSubscription

__all__ = [
    "Arrival",
    "ArrivalRepository",
    "ArrivalStatus",
    "ArrivalTracker",
    "InMemoryArrivalRepository",
    "OPEN_ARRIVAL_STATUSES",
    "QueueEntry",
    "QueueFeed",
    "QueueSnapshot",
    "QueueSubscription",
    "TERMINAL_ARRIVAL_STATUSES",
    "order_queue",
]
