"""
Salon Event Bus — Wiring Errors
=================================
Raised when the bus is wired incorrectly. Business outcomes never
travel as exceptions; they are Outcome values.
"""


class EventBusError(Exception):
    pass


class InvalidEventTypeFormat(EventBusError):
    """Event names read <engine>.<domain>.<action>.v<N>."""

    def __init__(self, event_type: str):
        self.event_type = event_type
        super().__init__(
            f"'{event_type}' is not a versioned salon event name "
            f"(expected e.g. 'booking.status.confirmed.v1')."
        )


class DuplicateSubscriberError(EventBusError):
    def __init__(self, event_type: str, handler_name: str):
        self.event_type = event_type
        self.handler_name = handler_name
        super().__init__(
            f"{handler_name} already listens to {event_type}; "
            f"unregister it before registering again."
        )


class QueueFeedClosedError(EventBusError):
    """subscribe() on a live queue feed that was closed."""

    def __init__(self, branch_id: str):
        self.branch_id = branch_id
        super().__init__(
            f"Queue feed is closed; cannot subscribe to branch {branch_id}."
        )
