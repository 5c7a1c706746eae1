"""
Salon Event Bus — Subscriber Registry
=======================================
Maps versioned event names to the handlers that listen to them.

Rules:
- Event names read <engine>.<domain>.<action>.v<N>
- Any number of handlers per event name, each at most once
- In-memory only, thread-safe
"""

import logging
import re
from threading import Lock
from typing import Callable

from core.events.errors import (
    DuplicateSubscriberError,
    EventBusError,
    InvalidEventTypeFormat,
)

logger = logging.getLogger("salon.events")

_EVENT_TYPE = re.compile(r"^[a-z_]+(\.[a-z_]+){2,}\.v[0-9]+$")


class SubscriberRegistry:
    """
    In-memory registry of event subscribers.

    Each entry maps an event_type to a list of
    (handler, subscriber_engine) tuples. subscriber_engine is kept
    for failure reports.
    """

    def __init__(self):
        self._subscribers: dict[str, list[tuple[Callable, str]]] = {}
        self._lock = Lock()

    @staticmethod
    def _validate_event_type_format(event_type: str) -> None:
        if not isinstance(event_type, str) or not _EVENT_TYPE.match(event_type):
            raise InvalidEventTypeFormat(event_type or "")

    def register_subscriber(
        self,
        event_type: str,
        handler: Callable,
        subscriber_engine: str,
    ) -> None:
        """
        Raises:
            InvalidEventTypeFormat:   unversioned or malformed name
            DuplicateSubscriberError: handler already listening
        """
        self._validate_event_type_format(event_type)

        if not callable(handler):
            raise EventBusError(
                f"Handler must be callable, got {type(handler)}."
            )

        handler_name = getattr(handler, "__qualname__", str(handler))

        with self._lock:
            handlers = self._subscribers.setdefault(event_type, [])
            for existing_handler, _ in handlers:
                if existing_handler == handler:
                    raise DuplicateSubscriberError(event_type, handler_name)
            handlers.append((handler, subscriber_engine))

        logger.info(
            "Subscriber registered: %s on %s (%s)",
            handler_name, event_type, subscriber_engine,
        )

    def unregister_subscriber(self, event_type: str, handler: Callable) -> bool:
        with self._lock:
            handlers = self._subscribers.get(event_type, [])
            for index, (existing_handler, _) in enumerate(handlers):
                if existing_handler == handler:
                    del handlers[index]
                    return True
        return False

    def get_subscribers(self, event_type: str) -> list[tuple[Callable, str]]:
        """Empty list when nobody listens (not an error)."""
        with self._lock:
            return list(self._subscribers.get(event_type, []))

    def has_subscribers(self, event_type: str) -> bool:
        with self._lock:
            return bool(self._subscribers.get(event_type))

    def subscriber_count(self, event_type: str) -> int:
        with self._lock:
            return len(self._subscribers.get(event_type, []))
