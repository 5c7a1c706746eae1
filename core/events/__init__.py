"""
Salon Event Bus — Public API
==============================
State write first, then the notice. Subscribers (live queue feeds,
notifiers) hear about changes that already happened.
"""

from core.events.dispatcher import EventBus, dispatch
from core.events.errors import (
    DuplicateSubscriberError,
    EventBusError,
    InvalidEventTypeFormat,
    QueueFeedClosedError,
)
from core.events.models import DomainEvent
from core.events.registry import SubscriberRegistry

__all__ = [
    "dispatch",
    "DomainEvent",
    "EventBus",
    "SubscriberRegistry",
    "EventBusError",
    "InvalidEventTypeFormat",
    "DuplicateSubscriberError",
    "QueueFeedClosedError",
]
