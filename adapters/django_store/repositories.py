"""
Salon Store - ORM Repositories
==============================
Django implementations of the booking, arrival and promotion
repository protocols.

Atomicity lives in the database:
- status compare-and-set:  UPDATE ... WHERE id = ? AND status = ?
- open-arrival uniqueness: partial unique index on booking_id
- one-time redemption:     unique (promotion, client_id) row naming its booking
- booking conflicts:       SELECT ... FOR UPDATE over the overlapping window
- bounded usage counter:   UPDATE ... SET usage_count = usage_count + 1
                           WHERE max_uses IS NULL OR usage_count < max_uses
"""

from __future__ import annotations

from datetime import timedelta
from decimal import Decimal
from typing import Iterable, List, Optional

from django.db import IntegrityError, transaction
from django.db.models import F, Q

from adapters.django_store.models import (
    ArrivalRecord,
    BookingRecord,
    PromotionRecord,
    PromotionRedemption,
)
from core.commands.rejection import RejectionReason
from engines.arrival.models import OPEN_ARRIVAL_STATUSES, Arrival, ArrivalStatus
from engines.booking.models import (
    ACTIVE_BOOKING_STATUSES,
    MAX_DURATION_MINUTES,
    Booking,
    BookingStatus,
    HistoryEntry,
)
from engines.booking.repository import ConflictCheck
from engines.promotion.models import Promotion
from engines.promotion.repository import RedemptionClaim
from engines.settlement.discount import DiscountTerms
from engines.settlement.lines import ProductLine, ServiceLine


# ══════════════════════════════════════════════════════════════
# BOOKINGS
# ══════════════════════════════════════════════════════════════

_ACTIVE_VALUES = [s.value for s in ACTIVE_BOOKING_STATUSES]


def _booking_fields(booking: Booking) -> dict:
    return {
        "branch_id": booking.branch_id,
        "client_id": booking.client_id,
        "client_name": booking.client_name,
        "status": booking.status.value,
        "scheduled_at": booking.scheduled_at,
        "duration_minutes": booking.duration_minutes,
        "service_lines": [line.to_dict() for line in booking.service_lines],
        "product_lines": [line.to_dict() for line in booking.product_lines],
        "discount": booking.discount.to_dict() if booking.discount is not None else None,
        "tax_rate": booking.tax_rate,
        "cancellation_reason": booking.cancellation_reason,
        "history": [entry.to_dict() for entry in booking.history],
        "created_at": booking.created_at,
        "updated_at": booking.updated_at,
    }


def _booking_from_record(record: BookingRecord) -> Booking:
    return Booking(
        booking_id=record.id,
        branch_id=record.branch_id,
        client_id=record.client_id,
        client_name=record.client_name,
        status=BookingStatus(record.status),
        scheduled_at=record.scheduled_at,
        duration_minutes=record.duration_minutes,
        service_lines=tuple(ServiceLine.from_dict(d) for d in record.service_lines),
        product_lines=tuple(ProductLine.from_dict(d) for d in record.product_lines),
        discount=DiscountTerms.from_dict(record.discount) if record.discount else None,
        tax_rate=Decimal(record.tax_rate),
        cancellation_reason=record.cancellation_reason,
        history=tuple(HistoryEntry.from_dict(h) for h in record.history),
        created_at=record.created_at,
        updated_at=record.updated_at,
    )


class DjangoBookingRepository:
    def add(self, booking: Booking) -> None:
        BookingRecord.objects.create(id=booking.booking_id, **_booking_fields(booking))

    def add_unless_conflicting(
        self, booking: Booking, check: ConflictCheck,
    ) -> Optional[RejectionReason]:
        """
        Lock the active bookings whose slot could overlap, run `check`
        against them, then insert. Rows inserted concurrently into an
        empty window are not locked; the database isolation level
        decides whether both inserts land.
        """
        window_start = booking.scheduled_at - timedelta(minutes=MAX_DURATION_MINUTES)
        with transaction.atomic():
            nearby = BookingRecord.objects.select_for_update().filter(
                status__in=_ACTIVE_VALUES,
                scheduled_at__gt=window_start,
                scheduled_at__lt=booking.ends_at,
            )
            rejection = check(booking, [_booking_from_record(r) for r in nearby])
            if rejection is not None:
                return rejection
            BookingRecord.objects.create(id=booking.booking_id, **_booking_fields(booking))
        return None

    def get(self, booking_id: str) -> Optional[Booking]:
        record = BookingRecord.objects.filter(pk=booking_id).first()
        return None if record is None else _booking_from_record(record)

    def compare_and_set(
        self, booking_id: str, expected: BookingStatus, updated: Booking,
    ) -> bool:
        rows = BookingRecord.objects.filter(
            pk=booking_id, status=BookingStatus(expected).value,
        ).update(**_booking_fields(updated))
        return rows == 1

    def list_for_branch(
        self, branch_id: str, status: Optional[BookingStatus] = None,
    ) -> List[Booking]:
        qs = BookingRecord.objects.filter(branch_id=branch_id)
        if status is not None:
            qs = qs.filter(status=BookingStatus(status).value)
        return [_booking_from_record(r) for r in qs]


# ══════════════════════════════════════════════════════════════
# ARRIVALS
# ══════════════════════════════════════════════════════════════

_OPEN_VALUES = [s.value for s in OPEN_ARRIVAL_STATUSES]


def _arrival_from_record(record: ArrivalRecord) -> Arrival:
    return Arrival(
        arrival_id=record.id,
        branch_id=record.branch_id,
        booking_id=record.booking_id,
        client_name=record.client_name,
        status=ArrivalStatus(record.status),
        arrived_at=record.arrived_at,
        started_at=record.started_at,
        finished_at=record.finished_at,
    )


class DjangoArrivalRepository:
    def add_unless_open(self, arrival: Arrival) -> Arrival:
        if arrival.booking_id is not None:
            existing = self.find_open_for_booking(arrival.booking_id)
            if existing is not None:
                return existing
        try:
            with transaction.atomic():
                ArrivalRecord.objects.create(
                    id=arrival.arrival_id,
                    branch_id=arrival.branch_id,
                    booking_id=arrival.booking_id,
                    client_name=arrival.client_name,
                    status=arrival.status.value,
                    arrived_at=arrival.arrived_at,
                    started_at=arrival.started_at,
                    finished_at=arrival.finished_at,
                )
        except IntegrityError:
            existing = (
                self.find_open_for_booking(arrival.booking_id)
                if arrival.booking_id is not None else None
            )
            if existing is None:
                raise
            return existing
        return arrival

    def get(self, arrival_id: str) -> Optional[Arrival]:
        record = ArrivalRecord.objects.filter(pk=arrival_id).first()
        return None if record is None else _arrival_from_record(record)

    def find_open_for_booking(self, booking_id: str) -> Optional[Arrival]:
        record = ArrivalRecord.objects.filter(
            booking_id=booking_id, status__in=_OPEN_VALUES,
        ).first()
        return None if record is None else _arrival_from_record(record)

    def compare_and_set(
        self, arrival_id: str, expected: ArrivalStatus, updated: Arrival,
    ) -> bool:
        rows = ArrivalRecord.objects.filter(
            pk=arrival_id, status=ArrivalStatus(expected).value,
        ).update(
            status=updated.status.value,
            started_at=updated.started_at,
            finished_at=updated.finished_at,
        )
        return rows == 1

    def list_for_branch(
        self, branch_id: str, statuses: Iterable[ArrivalStatus],
    ) -> List[Arrival]:
        values = [ArrivalStatus(s).value for s in statuses]
        qs = ArrivalRecord.objects.filter(branch_id=branch_id, status__in=values)
        return [_arrival_from_record(r) for r in qs]


# ══════════════════════════════════════════════════════════════
# PROMOTIONS
# ══════════════════════════════════════════════════════════════

def _promotion_from_record(record: PromotionRecord) -> Promotion:
    redeemed = PromotionRedemption.objects.filter(promotion_id=record.id).values_list(
        "client_id", flat=True,
    )
    return Promotion(
        promotion_id=record.id,
        code=record.code,
        name=record.name,
        description=record.description,
        branch_id=record.branch_id,
        discount_kind=record.discount_kind,
        discount_value=Decimal(record.discount_value),
        applicable_to=record.applicable_to,
        specific_item_ids=frozenset(record.specific_item_ids),
        usage_policy=record.usage_policy,
        max_uses=record.max_uses,
        usage_count=record.usage_count,
        redeemed_client_ids=frozenset(redeemed),
        active=record.active,
        start_date=record.start_date,
        end_date=record.end_date,
        created_at=record.created_at,
    )


class DjangoPromotionRepository:
    def add(self, promotion: Promotion) -> bool:
        try:
            with transaction.atomic():
                PromotionRecord.objects.create(
                    id=promotion.promotion_id,
                    code=promotion.code,
                    branch_id=promotion.branch_id,
                    name=promotion.name,
                    description=promotion.description,
                    discount_kind=promotion.discount_kind,
                    discount_value=promotion.discount_value,
                    applicable_to=promotion.applicable_to,
                    specific_item_ids=sorted(promotion.specific_item_ids),
                    usage_policy=promotion.usage_policy,
                    max_uses=promotion.max_uses,
                    usage_count=promotion.usage_count,
                    active=promotion.active,
                    start_date=promotion.start_date,
                    end_date=promotion.end_date,
                    created_at=promotion.created_at,
                )
                for client_id in promotion.redeemed_client_ids:
                    PromotionRedemption.objects.create(
                        promotion_id=promotion.promotion_id, client_id=client_id,
                    )
        except IntegrityError:
            return False
        return True

    def get(self, promotion_id: str) -> Optional[Promotion]:
        record = PromotionRecord.objects.filter(pk=promotion_id).first()
        return None if record is None else _promotion_from_record(record)

    def find_by_code(self, code: str, branch_id: Optional[str]) -> Optional[Promotion]:
        record = None
        if branch_id is not None:
            record = PromotionRecord.objects.filter(code=code, branch_id=branch_id).first()
        if record is None:
            record = PromotionRecord.objects.filter(code=code, branch_id__isnull=True).first()
        return None if record is None else _promotion_from_record(record)

    def code_taken(self, code: str, branch_id: Optional[str]) -> bool:
        if branch_id is None:
            return PromotionRecord.objects.filter(code=code, branch_id__isnull=True).exists()
        return PromotionRecord.objects.filter(code=code, branch_id=branch_id).exists()

    def add_redeemed_client(
        self, promotion_id: str, client_id: str, booking_id: Optional[str] = None,
    ) -> Optional[RedemptionClaim]:
        with transaction.atomic():
            if not PromotionRecord.objects.filter(pk=promotion_id).exists():
                return None
            redemption, created = PromotionRedemption.objects.get_or_create(
                promotion_id=promotion_id, client_id=client_id,
                defaults={"booking_id": booking_id},
            )
            if created:
                PromotionRecord.objects.filter(pk=promotion_id).update(
                    usage_count=F("usage_count") + 1,
                )
                return RedemptionClaim.NEW
            if booking_id is not None and redemption.booking_id == booking_id:
                return RedemptionClaim.HELD
            return RedemptionClaim.TAKEN

    def release_redeemed_client(self, promotion_id: str, client_id: str, booking_id: str) -> bool:
        with transaction.atomic():
            deleted, _ = PromotionRedemption.objects.filter(
                promotion_id=promotion_id, client_id=client_id, booking_id=booking_id,
            ).delete()
            if not deleted:
                return False
            PromotionRecord.objects.filter(pk=promotion_id, usage_count__gt=0).update(
                usage_count=F("usage_count") - 1,
            )
            return True

    def increment_usage(self, promotion_id: str) -> Optional[bool]:
        rows = PromotionRecord.objects.filter(pk=promotion_id).filter(
            Q(max_uses__isnull=True) | Q(usage_count__lt=F("max_uses")),
        ).update(usage_count=F("usage_count") + 1)
        if rows == 1:
            return True
        if not PromotionRecord.objects.filter(pk=promotion_id).exists():
            return None
        return False

    def set_active(self, promotion_id: str, active: bool) -> Optional[Promotion]:
        rows = PromotionRecord.objects.filter(pk=promotion_id).update(active=active)
        if rows == 0:
            return None
        return self.get(promotion_id)

    def list_for_branch(self, branch_id: Optional[str]) -> List[Promotion]:
        qs = PromotionRecord.objects.filter(
            Q(branch_id__isnull=True) | Q(branch_id=branch_id),
        )
        return [_promotion_from_record(r) for r in qs]
