"""
Salon Arrival Tracker — Event Types
"""

from __future__ import annotations

from engines.arrival.models import Arrival

ARRIVAL_CLIENT_ARRIVED_V1 = "arrival.client.arrived.v1"
ARRIVAL_SERVICE_STARTED_V1 = "arrival.service.started.v1"
ARRIVAL_SERVICE_FINISHED_V1 = "arrival.service.finished.v1"
ARRIVAL_CLIENT_CANCELLED_V1 = "arrival.client.cancelled.v1"

ARRIVAL_EVENT_TYPES = (
    ARRIVAL_CLIENT_ARRIVED_V1,
    ARRIVAL_SERVICE_STARTED_V1,
    ARRIVAL_SERVICE_FINISHED_V1,
    ARRIVAL_CLIENT_CANCELLED_V1,
)


def build_arrival_payload(arrival: Arrival) -> dict:
    return arrival.to_dict()
