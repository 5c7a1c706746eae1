"""
Salon Event Bus — Dispatcher
==============================
Routes emitted events to registered subscribers.

Dispatch behavior:
1. Look up subscribers by event_type
2. Execute handlers sequentially
3. Catch subscriber exceptions per handler, log, continue
4. NEVER undo the state write that produced the event

A failing subscriber (a live-feed consumer, a notifier) must not
turn an accepted booking transition into a failure.
"""

import logging
from datetime import datetime
from typing import Any, Mapping, Optional

from core.events.models import DomainEvent
from core.events.registry import SubscriberRegistry
from core.time.clock import Clock, SystemClock

logger = logging.getLogger("salon.events")


def dispatch(event: DomainEvent, registry: SubscriberRegistry) -> dict:
    """
    Dispatch an event to all registered subscribers.

    Returns:
        {
            'event_type': str,
            'event_id': str,
            'subscribers_notified': int,
            'subscribers_failed': int,
            'failures': list[dict]
        }

    This function NEVER raises exceptions.
    """
    event_type = event.event_type
    event_id = str(event.event_id)

    subscribers = registry.get_subscribers(event_type)

    result = {
        "event_type": event_type,
        "event_id": event_id,
        "subscribers_notified": 0,
        "subscribers_failed": 0,
        "failures": [],
    }

    if not subscribers:
        logger.debug("No subscribers for event type '%s' (event_id: %s)", event_type, event_id)
        return result

    for handler, subscriber_engine in subscribers:
        handler_name = getattr(handler, "__qualname__", str(handler))

        try:
            handler(event)
            result["subscribers_notified"] += 1
            logger.debug(
                "Dispatched %s → %s (engine: %s)",
                event_type, handler_name, subscriber_engine,
            )

        except Exception as exc:
            result["subscribers_failed"] += 1
            result["failures"].append({
                "handler": handler_name,
                "engine": subscriber_engine,
                "error": str(exc),
                "error_type": type(exc).__name__,
            })
            logger.error(
                "Subscriber failed: %s for %s (event_id: %s): %s",
                handler_name, event_type, event_id, exc,
                exc_info=True,
            )

    return result


class EventBus:
    """Registry + dispatch behind a single publish() call."""

    def __init__(
        self,
        registry: Optional[SubscriberRegistry] = None,
        clock: Optional[Clock] = None,
    ):
        self.registry = registry or SubscriberRegistry()
        self._clock = clock or SystemClock()

    def publish(
        self,
        event_type: str,
        payload: Mapping[str, Any],
        *,
        branch_id: Optional[str] = None,
        actor_id: Optional[str] = None,
        occurred_at: Optional[datetime] = None,
    ) -> dict:
        event = DomainEvent(
            event_type=event_type,
            payload=dict(payload),
            occurred_at=occurred_at or self._clock.now_utc(),
            branch_id=branch_id,
            actor_id=actor_id,
        )
        return dispatch(event, self.registry)
