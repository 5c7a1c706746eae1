"""
Salon Booking Engine — Application Service
============================================
Owns the booking lifecycle and orchestrates the settlement, promotion,
arrival and inventory collaborators on transition.

Every transition:
1. Re-reads the stored booking
2. Applies booking_transition_policy (optionally against the caller's
   expected_status)
3. Writes the new state with compare-and-set on the status read in 1
4. Appends a history entry in the same write, then emits an event

A lost compare-and-set is a CONFLICT with nothing written. The
service never retries.

Completion side effects (promotion usage, stock depletion) run once,
for the caller whose compare-and-set moved the booking to COMPLETED.
A one-time code is claimed for the booking just before that write; a
claim refused as ALREADY_USED drops the discount from the write, and
a claim whose write then loses the race is given back.
Completing an already COMPLETED booking is an accepted no-op.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, replace
from datetime import datetime
from typing import List, Optional, Sequence, Tuple

from core.commands.outcomes import Outcome
from core.commands.rejection import ReasonCode, RejectionReason
from core.config.rules import CommissionRateTable, InMemoryRateTable
from core.events.dispatcher import EventBus
from core.time.clock import Clock, SystemClock
from engines.arrival.models import Arrival
from engines.arrival.services import ArrivalTracker
from engines.booking.commands import BookingCreateRequest, SettlementDraft
from engines.booking.events import (
    BOOKING_CANCELLED_V1,
    BOOKING_COMPLETED_V1,
    BOOKING_CONFIRMED_V1,
    BOOKING_CREATED_V1,
    BOOKING_NO_SHOW_V1,
    BOOKING_SERVICE_STARTED_V1,
    build_completed_payload,
    build_status_payload,
)
from engines.booking.models import (
    DEFAULT_DURATION_MINUTES,
    Booking,
    BookingStatus,
    HistoryEntry,
)
from engines.booking.policies import (
    ACTION_CANCEL,
    ACTION_CHECK_IN,
    ACTION_COMPLETE,
    ACTION_CONFIRM,
    ACTION_NO_SHOW,
    ACTION_START_SERVICE,
    BOOKING_TRANSITIONS,
    booking_conflict_policy,
    booking_transition_policy,
)
from engines.booking.repository import BookingRepository, InMemoryBookingRepository
from engines.inventory.lot_engine import USAGE_OTC, USAGE_SALON, DepletionResult
from engines.inventory.services import InventoryAdapter
from engines.promotion.services import PromotionService, UsageReceipt
from engines.settlement.commission import (
    CommissionRecord,
    apply_commissions,
    calculate_commissions,
)
from engines.settlement.lines import ProductLine, ServiceLine
from engines.settlement.totals import SettlementTotals, calculate_totals

logger = logging.getLogger("salon.bookings")


@dataclass(frozen=True)
class CompletionReceipt:
    """
    Result of complete_booking.

    replayed is True when the booking was already COMPLETED; such a
    receipt reports the stored commissions and carries no usage or
    depletion results.

    promotion_rejection is set when a one-time code bound at
    start_service had meanwhile been redeemed by the same client on
    another booking. The booking then completes without the discount.
    """

    booking: Booking
    totals: SettlementTotals
    commissions: Tuple[CommissionRecord, ...]
    replayed: bool = False
    promotion_usage: Optional[UsageReceipt] = None
    promotion_rejection: Optional[RejectionReason] = None
    depletions: Tuple[DepletionResult, ...] = ()
    stock_shortfalls: Tuple[RejectionReason, ...] = ()


class BookingService:
    def __init__(
        self,
        repository: Optional[BookingRepository] = None,
        *,
        promotions: Optional[PromotionService] = None,
        arrivals: Optional[ArrivalTracker] = None,
        inventory: Optional[InventoryAdapter] = None,
        rate_table: Optional[CommissionRateTable] = None,
        clock: Optional[Clock] = None,
        event_bus: Optional[EventBus] = None,
    ):
        self._repository = repository or InMemoryBookingRepository()
        self._clock = clock or SystemClock()
        self._event_bus = event_bus
        self._promotions = promotions or PromotionService(clock=self._clock, event_bus=event_bus)
        self._arrivals = arrivals or ArrivalTracker(clock=self._clock, event_bus=event_bus)
        self._inventory = inventory
        self._rates = rate_table or InMemoryRateTable()

    @property
    def repository(self) -> BookingRepository:
        return self._repository

    def _publish(self, event_type: str, payload: dict, booking: Booking, actor_id) -> None:
        if self._event_bus is None:
            return
        self._event_bus.publish(
            event_type, payload, branch_id=booking.branch_id, actor_id=actor_id,
            occurred_at=self._clock.now_utc(),
        )

    # ══════════════════════════════════════════════════════════
    # CREATE
    # ══════════════════════════════════════════════════════════

    def create_booking(
        self,
        branch_id: str,
        client_id: Optional[str],
        scheduled_at: datetime,
        service_lines: Sequence[ServiceLine],
        *,
        client_name: str = "",
        product_lines: Sequence[ProductLine] = (),
        duration_minutes: int = DEFAULT_DURATION_MINUTES,
        actor_id: Optional[str] = None,
    ) -> Outcome[Booking]:
        """
        Create a PENDING booking. Rejected CONFLICT when the client already
        holds an overlapping booking for the same service and stylist, or
        when any assigned stylist is booked in an overlapping slot.
        """
        try:
            request = BookingCreateRequest(
                branch_id=branch_id,
                client_id=client_id or None,
                client_name=client_name,
                scheduled_at=scheduled_at,
                service_lines=tuple(service_lines or ()),
                product_lines=tuple(product_lines or ()),
                duration_minutes=duration_minutes,
            )
        except ValueError as exc:
            logger.info("Booking rejected for branch %s: %s", branch_id, exc)
            return Outcome.rejected(ReasonCode.VALIDATION, str(exc), "create_booking")

        now = self._clock.now_utc()
        booking = Booking(
            booking_id=str(uuid.uuid4()),
            branch_id=request.branch_id,
            client_id=request.client_id,
            client_name=request.client_name,
            scheduled_at=request.scheduled_at,
            service_lines=request.service_lines,
            product_lines=request.product_lines,
            duration_minutes=request.duration_minutes,
            history=(HistoryEntry(
                action="create", to_status=BookingStatus.PENDING, at=now, actor_id=actor_id,
            ),),
            created_at=now,
            updated_at=now,
        )
        conflict = self._repository.add_unless_conflicting(booking, booking_conflict_policy)
        if conflict is not None:
            logger.info(
                "Booking rejected for branch %s at %s: %s",
                branch_id, scheduled_at.isoformat(), conflict.message,
            )
            return Outcome.from_reason(conflict)
        logger.info(
            "Booking %s created at branch %s for %s by %s",
            booking.booking_id, booking.branch_id,
            booking.client_id or f"guest '{booking.client_name}'", actor_id,
        )
        self._publish(BOOKING_CREATED_V1, build_status_payload(booking), booking, actor_id)
        return Outcome.accepted(booking)

    # ══════════════════════════════════════════════════════════
    # TRANSITIONS
    # ══════════════════════════════════════════════════════════

    def _load(self, booking_id: str, action: str):
        booking = self._repository.get(booking_id)
        if booking is None:
            return None, Outcome.rejected(
                ReasonCode.NOT_FOUND, f"Booking '{booking_id}' not found.", action)
        return booking, None

    def _write(
        self,
        current: Booking,
        action: str,
        changes: dict,
        actor_id: Optional[str],
        reason: Optional[str] = None,
    ) -> Optional[Booking]:
        """Compare-and-set write of a transition. None when the race was lost."""
        to_status = BOOKING_TRANSITIONS[action].to_status
        now = self._clock.now_utc()
        entry = HistoryEntry(
            action=action, from_status=current.status, to_status=to_status,
            at=now, actor_id=actor_id, reason=reason,
        )
        updated = replace(
            current, status=to_status, history=current.history + (entry,),
            updated_at=now, **changes,
        )
        if not self._repository.compare_and_set(current.booking_id, current.status, updated):
            logger.info(
                "Booking %s %s lost a concurrent update (was %s)",
                current.booking_id, action, current.status.value,
            )
            return None
        logger.info(
            "Booking %s: %s -> %s by %s",
            current.booking_id, current.status.value, to_status.value, actor_id,
        )
        return updated

    def _conflict(self, booking_id: str, action: str) -> Outcome:
        return Outcome.rejected(
            ReasonCode.CONFLICT,
            f"Booking '{booking_id}' changed while {action} was in progress; refetch and retry.",
            action)

    def _simple_transition(
        self,
        booking_id: str,
        action: str,
        event_type: str,
        expected_status: Optional[BookingStatus],
        actor_id: Optional[str],
        changes: Optional[dict] = None,
        reason: Optional[str] = None,
    ) -> Outcome[Booking]:
        current, missing = self._load(booking_id, action)
        if missing is not None:
            return missing
        rejection = booking_transition_policy(current, action, expected_status)
        if rejection is not None:
            logger.info("Booking %s %s rejected: %s", booking_id, action, rejection.message)
            return Outcome.from_reason(rejection)
        updated = self._write(current, action, changes or {}, actor_id, reason)
        if updated is None:
            return self._conflict(booking_id, action)
        self._publish(event_type, build_status_payload(updated, reason), updated, actor_id)
        return Outcome.accepted(updated)

    def confirm_booking(
        self,
        booking_id: str,
        *,
        expected_status: Optional[BookingStatus] = None,
        actor_id: Optional[str] = None,
    ) -> Outcome[Booking]:
        return self._simple_transition(
            booking_id, ACTION_CONFIRM, BOOKING_CONFIRMED_V1, expected_status, actor_id,
        )

    def mark_no_show(
        self,
        booking_id: str,
        *,
        expected_status: Optional[BookingStatus] = None,
        actor_id: Optional[str] = None,
    ) -> Outcome[Booking]:
        return self._simple_transition(
            booking_id, ACTION_NO_SHOW, BOOKING_NO_SHOW_V1, expected_status, actor_id,
        )

    def cancel_booking(
        self,
        booking_id: str,
        reason: str,
        *,
        expected_status: Optional[BookingStatus] = None,
        actor_id: Optional[str] = None,
    ) -> Outcome[Booking]:
        reason = (reason or "").strip()
        if not reason:
            return Outcome.rejected(
                ReasonCode.VALIDATION, "A cancellation reason is required.", ACTION_CANCEL)
        return self._simple_transition(
            booking_id, ACTION_CANCEL, BOOKING_CANCELLED_V1, expected_status, actor_id,
            changes={"cancellation_reason": reason}, reason=reason,
        )

    def start_service(
        self,
        booking_id: str,
        draft: SettlementDraft,
        *,
        expected_status: Optional[BookingStatus] = None,
        actor_id: Optional[str] = None,
    ) -> Outcome[Booking]:
        """
        CONFIRMED → IN_SERVICE, binding the settlement draft. Discount
        terms are stored as rates and references; totals are derived
        on read. A promotion code is validated first and its
        rejection returned unchanged.
        """
        current, missing = self._load(booking_id, ACTION_START_SERVICE)
        if missing is not None:
            return missing
        rejection = booking_transition_policy(current, ACTION_START_SERVICE, expected_status)
        if rejection is not None:
            logger.info("Booking %s start_service rejected: %s", booking_id, rejection.message)
            return Outcome.from_reason(rejection)

        discount = draft.discount
        if draft.promotion_code:
            validation = self._promotions.validate_promotion_code(
                draft.promotion_code, current.branch_id, current.client_id,
            )
            if validation.is_rejected:
                return validation
            discount = validation.value.discount_terms()

        changes = {
            "service_lines": draft.service_lines or current.service_lines,
            "product_lines": draft.product_lines,
            "discount": discount,
            "tax_rate": draft.tax_rate,
        }
        updated = self._write(current, ACTION_START_SERVICE, changes, actor_id)
        if updated is None:
            return self._conflict(booking_id, ACTION_START_SERVICE)
        self._publish(
            BOOKING_SERVICE_STARTED_V1, build_status_payload(updated), updated, actor_id,
        )
        return Outcome.accepted(updated)

    # ══════════════════════════════════════════════════════════
    # COMPLETE
    # ══════════════════════════════════════════════════════════

    def _replayed_receipt(self, booking: Booking) -> Outcome[CompletionReceipt]:
        logger.info("Booking %s already completed; nothing to do", booking.booking_id)
        return Outcome.accepted(CompletionReceipt(
            booking=booking,
            totals=self._totals(booking),
            commissions=tuple(calculate_commissions(
                booking.service_lines, booking.product_lines, self._rates,
            )),
            replayed=True,
        ))

    def complete_booking(
        self,
        booking_id: str,
        *,
        expected_status: Optional[BookingStatus] = None,
        actor_id: Optional[str] = None,
    ) -> Outcome[CompletionReceipt]:
        current, missing = self._load(booking_id, ACTION_COMPLETE)
        if missing is not None:
            return missing
        if current.status == BookingStatus.COMPLETED:
            return self._replayed_receipt(current)
        rejection = booking_transition_policy(current, ACTION_COMPLETE, expected_status)
        if rejection is not None:
            logger.info("Booking %s complete rejected: %s", booking_id, rejection.message)
            return Outcome.from_reason(rejection)

        promotion = (
            self._promotions.get_promotion(current.promotion_id)
            if current.promotion_id is not None else None
        )
        one_time = promotion is not None and promotion.is_one_time
        claim: Optional[UsageReceipt] = None
        refused: Optional[RejectionReason] = None
        discount = current.discount
        if one_time:
            claim, refused = self._claim_one_time(current, actor_id)
            if refused is not None:
                discount = None

        service_lines, product_lines = apply_commissions(
            current.service_lines, current.product_lines, self._rates,
        )
        updated = self._write(
            current, ACTION_COMPLETE,
            {"service_lines": service_lines, "product_lines": product_lines,
             "discount": discount},
            actor_id,
        )
        if updated is None:
            latest = self._repository.get(booking_id)
            if latest is not None and latest.status == BookingStatus.COMPLETED:
                return self._replayed_receipt(latest)
            if claim is not None and claim.recorded:
                self._promotions.release_promotion_usage(
                    current.promotion_id, current.client_id, booking_id,
                )
            return self._conflict(booking_id, ACTION_COMPLETE)

        commissions = tuple(calculate_commissions(
            updated.service_lines, updated.product_lines, self._rates,
        ))
        usage = claim if one_time else self._track_usage(updated, actor_id)
        depletions, shortfalls = self._deplete_stock(updated)
        totals = self._totals(updated)

        self._publish(
            BOOKING_COMPLETED_V1,
            build_completed_payload(
                updated, totals.to_dict(), [c.to_dict() for c in commissions],
            ),
            updated, actor_id,
        )
        return Outcome.accepted(CompletionReceipt(
            booking=updated,
            totals=totals,
            commissions=commissions,
            promotion_usage=usage,
            promotion_rejection=refused,
            depletions=depletions,
            stock_shortfalls=shortfalls,
        ))

    def _claim_one_time(
        self, booking: Booking, actor_id: Optional[str],
    ) -> Tuple[Optional[UsageReceipt], Optional[RejectionReason]]:
        """
        Claim a one-time code for this booking before it is written as
        COMPLETED. A refused claim removes the discount from the
        completion write.
        """
        outcome = self._promotions.track_promotion_usage(
            booking.promotion_id, booking.client_id,
            booking_id=booking.booking_id, actor_id=actor_id,
        )
        if outcome.is_rejected:
            logger.warning(
                "Promotion %s dropped from booking %s: %s",
                booking.discount.code, booking.booking_id, outcome.reason.message,
            )
            return None, outcome.reason
        return outcome.value, None

    def _track_usage(self, booking: Booking, actor_id: Optional[str]) -> Optional[UsageReceipt]:
        if booking.promotion_id is None:
            return None
        outcome = self._promotions.track_promotion_usage(
            booking.promotion_id, booking.client_id,
            booking_id=booking.booking_id, actor_id=actor_id,
        )
        if outcome.is_rejected:
            logger.warning(
                "Promotion usage not recorded for booking %s: %s",
                booking.booking_id, outcome.reason.message,
            )
            return None
        return outcome.value

    def _deplete_stock(
        self, booking: Booking,
    ) -> Tuple[Tuple[DepletionResult, ...], Tuple[RejectionReason, ...]]:
        """
        One depletion per product line (otc) and per salon-use product
        consumed by a service. Shortfalls are logged and reported, and
        do not undo the completion.
        """
        requests: List[Tuple[str, int, str]] = [
            (line.product_id, line.quantity, USAGE_OTC) for line in booking.product_lines
        ]
        for line in booking.service_lines:
            requests.extend(
                (usage.product_id, usage.quantity, USAGE_SALON) for usage in line.product_usage
            )
        if not requests:
            return (), ()
        if self._inventory is None:
            logger.debug("No inventory adapter; %d depletion(s) skipped", len(requests))
            return (), ()

        depletions: List[DepletionResult] = []
        shortfalls: List[RejectionReason] = []
        for product_id, quantity, usage_type in requests:
            outcome = self._inventory.deplete_batch(
                booking.branch_id, product_id, quantity, usage_type,
                reference_id=booking.booking_id,
            )
            if outcome.is_accepted:
                depletions.append(outcome.value)
            else:
                logger.warning(
                    "Stock shortfall on booking %s: %s",
                    booking.booking_id, outcome.reason.message,
                )
                shortfalls.append(outcome.reason)
        return tuple(depletions), tuple(shortfalls)

    # ══════════════════════════════════════════════════════════
    # CHECK-IN
    # ══════════════════════════════════════════════════════════

    def check_in(
        self,
        booking_id: str,
        client_name: Optional[str] = None,
        *,
        actor_id: Optional[str] = None,
    ) -> Outcome[Arrival]:
        """
        Record the arrival of a CONFIRMED booking's client. Checking in
        twice returns the open arrival. The booking status does not move.
        """
        booking, missing = self._load(booking_id, ACTION_CHECK_IN)
        if missing is not None:
            return missing
        rejection = booking_transition_policy(booking, ACTION_CHECK_IN)
        if rejection is not None:
            logger.info("Booking %s check-in rejected: %s", booking_id, rejection.message)
            return Outcome.from_reason(rejection)
        return self._arrivals.record_arrival(
            booking.branch_id, booking.booking_id,
            client_name or booking.client_name or booking.client_id or "",
            actor_id=actor_id,
        )

    # ══════════════════════════════════════════════════════════
    # QUERIES
    # ══════════════════════════════════════════════════════════

    def _totals(self, booking: Booking) -> SettlementTotals:
        return calculate_totals(
            booking.service_lines, booking.product_lines, booking.discount, booking.tax_rate,
        )

    def settlement(self, booking_id: str) -> Outcome[SettlementTotals]:
        booking, missing = self._load(booking_id, "settlement")
        if missing is not None:
            return missing
        return Outcome.accepted(self._totals(booking))

    def get_booking(self, booking_id: str) -> Optional[Booking]:
        return self._repository.get(booking_id)

    def list_bookings(
        self, branch_id: str, status: Optional[BookingStatus] = None,
    ) -> List[Booking]:
        return sorted(
            self._repository.list_for_branch(branch_id, status),
            key=lambda b: (b.scheduled_at, b.booking_id),
        )
