"""
Salon Store Wiring
==================
Builds the booking, arrival and promotion services over the ORM
repositories, sharing one event bus and one live queue feed.

Commission rates come from settings.SALON_COMMISSION_RATES.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Optional

from django.conf import settings

from adapters.django_store.repositories import (
    DjangoArrivalRepository,
    DjangoBookingRepository,
    DjangoPromotionRepository,
)
from core.config.rules import rate_table_from_mapping
from core.events.dispatcher import EventBus
from core.time.clock import Clock, SystemClock
from engines.arrival.services import ArrivalTracker
from engines.arrival.subscriptions import QueueFeed
from engines.booking.services import BookingService
from engines.inventory.services import InventoryAdapter
from engines.promotion.services import PromotionService

_SERVICES_LOCK = threading.Lock()
_SERVICES: "SalonServices | None" = None


@dataclass(frozen=True)
class SalonServices:
    bookings: BookingService
    arrivals: ArrivalTracker
    promotions: PromotionService
    queue_feed: QueueFeed
    event_bus: EventBus


def create_services(
    *,
    inventory: Optional[InventoryAdapter] = None,
    clock: Optional[Clock] = None,
) -> SalonServices:
    clock = clock or SystemClock()
    event_bus = EventBus(clock=clock)
    promotions = PromotionService(DjangoPromotionRepository(), clock=clock, event_bus=event_bus)
    arrivals = ArrivalTracker(DjangoArrivalRepository(), clock=clock, event_bus=event_bus)
    bookings = BookingService(
        DjangoBookingRepository(),
        promotions=promotions,
        arrivals=arrivals,
        inventory=inventory,
        rate_table=rate_table_from_mapping(getattr(settings, "SALON_COMMISSION_RATES", {})),
        clock=clock,
        event_bus=event_bus,
    )
    return SalonServices(
        bookings=bookings,
        arrivals=arrivals,
        promotions=promotions,
        queue_feed=QueueFeed(arrivals, event_bus.registry, clock=clock),
        event_bus=event_bus,
    )


def build_services() -> SalonServices:
    """
    Lazy singleton wiring for the adapter runtime.
    """
    global _SERVICES
    with _SERVICES_LOCK:
        if _SERVICES is None:
            _SERVICES = create_services()
        return _SERVICES
