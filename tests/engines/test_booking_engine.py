"""
Salon Booking Engine — Test Suite
===================================
Lifecycle transitions, compare-and-set conflicts, settlement binding,
completion side effects and check-in.
"""

import threading
from dataclasses import replace
from datetime import date, datetime, timedelta, timezone
from decimal import Decimal

import pytest

from core.commands.rejection import ReasonCode
from core.events.dispatcher import EventBus
from core.time.clock import FixedClock
from engines.arrival import ArrivalStatus, ArrivalTracker
from engines.booking.commands import SettlementDraft
from engines.booking.events import (
    BOOKING_CANCELLED_V1,
    BOOKING_COMPLETED_V1,
    BOOKING_CONFIRMED_V1,
)
from engines.booking.models import Booking, BookingStatus
from engines.booking.policies import slots_overlap
from engines.booking.repository import InMemoryBookingRepository
from engines.booking.services import BookingService
from engines.inventory.lot_engine import USAGE_SALON
from engines.inventory.services import InMemoryInventory
from engines.promotion.commands import PromotionCreateRequest
from engines.promotion.services import PromotionService
from engines.settlement import DiscountTerms, ProductLine, ProductUsage, ServiceLine

NOW = datetime(2026, 3, 1, 9, 0, tzinfo=timezone.utc)
SLOT = NOW + timedelta(hours=2)
BRANCH = "BR-MAKATI"


def cut(price="600.00", stylist="STY-1", **kw):
    return ServiceLine(
        service_id="SVC-CUT", service_name="Haircut", base_price=price,
        stylist_id=stylist, stylist_name="Rina", **kw,
    )


def color(price="400.00", **kw):
    return ServiceLine(
        service_id="SVC-COLOR", service_name="Color", base_price=price,
        stylist_id="STY-2", stylist_name="Mae", **kw,
    )


@pytest.fixture
def clock():
    return FixedClock(NOW)


@pytest.fixture
def bus(clock):
    return EventBus(clock=clock)


@pytest.fixture
def inventory():
    return InMemoryInventory()


@pytest.fixture
def promotions(clock, bus):
    return PromotionService(clock=clock, event_bus=bus)


@pytest.fixture
def arrivals(clock, bus):
    return ArrivalTracker(clock=clock, event_bus=bus)


@pytest.fixture
def service(clock, bus, inventory, promotions, arrivals):
    return BookingService(
        promotions=promotions, arrivals=arrivals, inventory=inventory,
        clock=clock, event_bus=bus,
    )


def book(service, lines=None, client_id="C1", at=SLOT, **kw):
    outcome = service.create_booking(
        BRANCH, client_id, at, lines or [cut(), color()], actor_id="desk-1", **kw,
    )
    assert outcome.is_accepted, outcome.reason
    return outcome.value


def confirmed(service, **kw):
    booking = book(service, **kw)
    return service.confirm_booking(booking.booking_id).value


def in_service(service, draft=None, **kw):
    booking = confirmed(service, **kw)
    outcome = service.start_service(booking.booking_id, draft or SettlementDraft())
    assert outcome.is_accepted, outcome.reason
    return outcome.value


# ══════════════════════════════════════════════════════════════
# CREATE
# ══════════════════════════════════════════════════════════════

class TestCreateBooking:
    def test_created_pending_with_history(self, service):
        booking = book(service)
        assert booking.status == BookingStatus.PENDING
        assert booking.history[0].action == "create"
        assert booking.history[0].actor_id == "desk-1"
        assert service.get_booking(booking.booking_id) == booking

    def test_requires_service_line(self, service):
        outcome = service.create_booking(BRANCH, "C1", SLOT, [])
        assert outcome.code == ReasonCode.VALIDATION

    def test_requires_a_stylist(self, service):
        outcome = service.create_booking(BRANCH, "C1", SLOT, [cut(stylist=None)])
        assert outcome.code == ReasonCode.VALIDATION
        assert "stylist" in outcome.reason.message

    def test_guest_needs_name(self, service):
        assert service.create_booking(BRANCH, None, SLOT, [cut()]).code == ReasonCode.VALIDATION
        guest = book(service, client_id=None, client_name="Walk-in Jo")
        assert guest.is_guest

    def test_naive_schedule_rejected(self, service):
        outcome = service.create_booking(BRANCH, "C1", datetime(2026, 3, 1, 11, 0), [cut()])
        assert outcome.code == ReasonCode.VALIDATION

    def test_list_bookings_sorted_by_schedule(self, service):
        later = service.create_booking(BRANCH, "C2", SLOT + timedelta(hours=1), [cut()]).value
        earlier = book(service)
        listed = service.list_bookings(BRANCH)
        assert [b.booking_id for b in listed] == [earlier.booking_id, later.booking_id]
        service.confirm_booking(earlier.booking_id)
        assert [b.booking_id for b in service.list_bookings(BRANCH, BookingStatus.PENDING)] == [later.booking_id]

    @pytest.mark.parametrize("minutes", [0, -30, 721])
    def test_duration_out_of_range(self, service, minutes):
        outcome = service.create_booking(BRANCH, "C1", SLOT, [cut()], duration_minutes=minutes)
        assert outcome.code == ReasonCode.VALIDATION

    def test_duration_sets_end(self, service):
        assert book(service, [cut()], duration_minutes=90).ends_at == SLOT + timedelta(minutes=90)


# ══════════════════════════════════════════════════════════════
# SLOT CONFLICTS
# ══════════════════════════════════════════════════════════════

class TestBookingConflicts:
    def test_same_stylist_same_slot_taken_once(self, service):
        first = book(service, [cut()], client_id="C1")
        other_client = service.create_booking(BRANCH, "C2", SLOT, [cut()])
        same_client = service.create_booking(BRANCH, "C1", SLOT, [cut()])

        assert other_client.code == ReasonCode.CONFLICT
        assert other_client.reason.policy_name == "stylist_availability_policy"
        assert same_client.code == ReasonCode.CONFLICT
        assert same_client.reason.policy_name == "duplicate_booking_policy"
        assert [b.booking_id for b in service.list_bookings(BRANCH)] == [first.booking_id]

    def test_overlap_uses_duration(self, service):
        book(service, [cut()], duration_minutes=90)
        outcome = service.create_booking(BRANCH, "C2", SLOT + timedelta(minutes=60), [cut()])
        assert outcome.code == ReasonCode.CONFLICT
        assert "STY-1" in outcome.reason.message

    def test_back_to_back_allowed(self, service):
        book(service, [cut()])
        assert book(service, [cut()], client_id="C2", at=SLOT + timedelta(minutes=60))
        assert book(service, [cut()], client_id="C3", at=SLOT - timedelta(minutes=60))

    def test_other_stylist_same_slot_allowed(self, service):
        book(service, [cut()])
        assert book(service, [cut(stylist="STY-3")], client_id="C2").status == BookingStatus.PENDING

    def test_any_shared_stylist_conflicts(self, service):
        book(service, [color()])
        outcome = service.create_booking(BRANCH, "C2", SLOT, [cut(stylist="STY-3"), color()])
        assert outcome.code == ReasonCode.CONFLICT

    def test_other_branch_stylist_still_busy(self, service):
        book(service, [cut()])
        outcome = service.create_booking("BR-QC", "C2", SLOT, [cut()])
        assert outcome.code == ReasonCode.CONFLICT

    def test_guest_checked_for_stylist_only(self, service):
        book(service, [cut()], client_id=None, client_name="Walk-in Jo")
        outcome = service.create_booking(BRANCH, None, SLOT, [cut()], client_name="Walk-in Jo")
        assert outcome.reason.policy_name == "stylist_availability_policy"

    def test_cancelled_booking_frees_slot(self, service):
        first = book(service, [cut()])
        service.cancel_booking(first.booking_id, "client request")
        assert book(service, [cut()], client_id="C2").status == BookingStatus.PENDING

    def test_no_show_frees_slot(self, service):
        first = confirmed(service, lines=[cut()])
        service.mark_no_show(first.booking_id)
        assert book(service, [cut()], client_id="C2")

    def test_concurrent_bookings_for_one_slot(self, service):
        results = []

        def attempt(client_id):
            results.append(service.create_booking(BRANCH, client_id, SLOT, [cut()]))

        threads = [threading.Thread(target=attempt, args=(f"C{i}",)) for i in range(10)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        assert sum(1 for r in results if r.is_accepted) == 1
        assert all(r.code == ReasonCode.CONFLICT for r in results if r.is_rejected)
        assert len(service.list_bookings(BRANCH)) == 1

    def test_slots_overlap(self):
        def at(start, minutes=60):
            return Booking(
                booking_id=f"B-{start}-{minutes}", branch_id=BRANCH,
                scheduled_at=SLOT + timedelta(minutes=start),
                service_lines=(cut(),), client_id="C1", duration_minutes=minutes,
            )

        assert slots_overlap(at(0), at(30))
        assert slots_overlap(at(0, 120), at(30, 15))
        assert not slots_overlap(at(0), at(60))
        assert not slots_overlap(at(60), at(0))


# ══════════════════════════════════════════════════════════════
# TRANSITIONS
# ══════════════════════════════════════════════════════════════

class TestTransitions:
    def test_cancel_pending_then_confirm_conflicts(self, service):
        booking = book(service)
        cancelled = service.cancel_booking(booking.booking_id, "client request").value
        assert cancelled.status == BookingStatus.CANCELLED
        assert cancelled.cancellation_reason == "client request"
        assert cancelled.history[-1].reason == "client request"

        outcome = service.confirm_booking(booking.booking_id)
        assert outcome.code == ReasonCode.CONFLICT
        assert service.get_booking(booking.booking_id).status == BookingStatus.CANCELLED

    def test_cancel_requires_reason(self, service):
        booking = book(service)
        assert service.cancel_booking(booking.booking_id, "  ").code == ReasonCode.VALIDATION
        assert service.get_booking(booking.booking_id).status == BookingStatus.PENDING

    def test_invalid_transition_leaves_status(self, service):
        booking = book(service)
        assert service.complete_booking(booking.booking_id).code == ReasonCode.INVALID_TRANSITION
        assert service.mark_no_show(booking.booking_id).code == ReasonCode.INVALID_TRANSITION
        stored = service.get_booking(booking.booking_id)
        assert stored.status == BookingStatus.PENDING
        assert len(stored.history) == 1

    def test_expected_status_mismatch_is_conflict(self, service):
        booking = book(service)
        service.confirm_booking(booking.booking_id)
        outcome = service.cancel_booking(
            booking.booking_id, "late", expected_status=BookingStatus.PENDING,
        )
        assert outcome.code == ReasonCode.CONFLICT
        assert service.get_booking(booking.booking_id).status == BookingStatus.CONFIRMED

    def test_no_show_from_confirmed(self, service):
        booking = confirmed(service)
        assert service.mark_no_show(booking.booking_id).value.status == BookingStatus.NO_SHOW

    def test_unknown_booking(self, service):
        assert service.confirm_booking("missing").code == ReasonCode.NOT_FOUND

    def test_history_records_each_step(self, service, clock):
        booking = confirmed(service)
        clock.advance(minutes=30)
        started = service.start_service(booking.booking_id, SettlementDraft(), actor_id="sty-1").value
        entry = started.history[-1]
        assert entry.from_status == BookingStatus.CONFIRMED
        assert entry.to_status == BookingStatus.IN_SERVICE
        assert entry.actor_id == "sty-1"
        assert entry.at == NOW + timedelta(minutes=30)
        assert [h.action for h in started.history] == ["create", "confirm", "start_service"]

    def test_only_one_concurrent_confirm_wins(self, service):
        booking = book(service)
        results = []
        threads = [
            threading.Thread(target=lambda: results.append(service.confirm_booking(booking.booking_id)))
            for _ in range(20)
        ]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        assert sum(1 for r in results if r.is_accepted) == 1
        assert all(
            r.code in (ReasonCode.CONFLICT, ReasonCode.INVALID_TRANSITION)
            for r in results if r.is_rejected
        )
        assert len(service.get_booking(booking.booking_id).history) == 2

    def test_events_published(self, service, bus):
        seen = []
        for event_type in (BOOKING_CONFIRMED_V1, BOOKING_CANCELLED_V1):
            bus.registry.register_subscriber(event_type, seen.append, "reporting")
        booking = confirmed(service)
        service.cancel_booking(booking.booking_id, "sick")
        assert [e.event_type for e in seen] == [BOOKING_CONFIRMED_V1, BOOKING_CANCELLED_V1]
        assert seen[1].payload["reason"] == "sick"

    def test_failing_subscriber_does_not_undo_transition(self, service, bus):
        def broken(event):
            raise RuntimeError("screen offline")

        bus.registry.register_subscriber(BOOKING_CONFIRMED_V1, broken, "notify")
        booking = book(service)
        assert service.confirm_booking(booking.booking_id).is_accepted
        assert service.get_booking(booking.booking_id).status == BookingStatus.CONFIRMED


# ══════════════════════════════════════════════════════════════
# SETTLEMENT
# ══════════════════════════════════════════════════════════════

class TestSettlement:
    def test_ten_percent_discount_twelve_percent_tax(self, service):
        booking = in_service(service, SettlementDraft(
            discount=DiscountTerms(kind="percentage", value="10", applicable_to="all"),
            tax_rate=Decimal("0.12"),
        ))
        totals = service.settlement(booking.booking_id).value
        assert totals.subtotal == Decimal("1000.00")
        assert totals.discount == Decimal("100.00")
        assert totals.taxable == Decimal("900.00")
        assert totals.tax == Decimal("108.00")
        assert totals.total == Decimal("1008.00")

    def test_draft_replaces_lines(self, service):
        booking = in_service(service, SettlementDraft(
            service_lines=(cut(price="500.00"),),
            product_lines=(ProductLine(product_id="PRD-1", product_name="Serum", unit_price="250.00"),),
        ))
        assert len(booking.service_lines) == 1
        assert service.settlement(booking.booking_id).value.subtotal == Decimal("750.00")

    def test_promotion_code_bound_at_start(self, service, promotions):
        promotions.create_promotion(PromotionCreateRequest(
            name="Spring", code="SPRING20", discount_kind="percentage",
            discount_value=Decimal("20"), start_date=NOW - timedelta(days=1),
            end_date=NOW + timedelta(days=1),
        ))
        booking = in_service(service, SettlementDraft(promotion_code="spring20"))
        assert booking.promotion_id is not None
        assert service.settlement(booking.booking_id).value.discount == Decimal("200.00")

    def test_rejected_promotion_code_blocks_start(self, service):
        booking = confirmed(service)
        outcome = service.start_service(booking.booking_id, SettlementDraft(promotion_code="NOPE"))
        assert outcome.code == ReasonCode.NOT_FOUND
        assert service.get_booking(booking.booking_id).status == BookingStatus.CONFIRMED

    def test_draft_refuses_discount_and_code(self):
        with pytest.raises(ValueError):
            SettlementDraft(
                discount=DiscountTerms(kind="fixed", value="10"), promotion_code="X",
            )

    def test_draft_refuses_percent_tax(self):
        with pytest.raises(ValueError):
            SettlementDraft(tax_rate=Decimal("12"))


# ══════════════════════════════════════════════════════════════
# COMPLETE
# ══════════════════════════════════════════════════════════════

class TestCompleteBooking:
    def test_commissions_stored_on_lines(self, service):
        booking = in_service(service)
        receipt = service.complete_booking(booking.booking_id).value
        assert not receipt.replayed
        assert receipt.booking.status == BookingStatus.COMPLETED
        stored = service.get_booking(booking.booking_id)
        assert stored.service_lines[0].commission == Decimal("360.00")
        assert stored.service_lines[1].commission == Decimal("240.00")
        assert sum(c.amount for c in receipt.commissions) == Decimal("600.00")

    def test_second_complete_is_replayed(self, service, inventory):
        inventory.receive_batch(BRANCH, "PRD-SHAMPOO", "B-1", 5, expires_on=date(2026, 9, 1))
        booking = in_service(service, SettlementDraft(product_lines=(
            ProductLine(product_id="PRD-SHAMPOO", product_name="Shampoo", unit_price="150.00"),
        )))
        first = service.complete_booking(booking.booking_id).value
        second = service.complete_booking(booking.booking_id).value
        assert len(first.depletions) == 1
        assert first.depletions[0].reference_id == booking.booking_id
        assert inventory.depletions[0].reference_id == booking.booking_id
        assert second.replayed
        assert second.depletions == ()
        assert second.commissions == first.commissions
        assert len(inventory.depletions) == 1
        assert inventory.stock_on_hand(BRANCH, "PRD-SHAMPOO") == 4

    def test_concurrent_complete_runs_side_effects_once(self, service, promotions, inventory):
        promo = promotions.create_promotion(PromotionCreateRequest(
            name="Once", code="ONCE", discount_kind="fixed", discount_value=Decimal("50"),
            start_date=NOW - timedelta(days=1), end_date=NOW + timedelta(days=1),
            usage_policy="repeating",
        )).value
        inventory.receive_batch(BRANCH, "PRD-DYE", "B-1", 10, usage_type=USAGE_SALON)
        booking = in_service(
            service, SettlementDraft(promotion_code="ONCE"),
            lines=[cut(product_usage=(ProductUsage("PRD-DYE", 2),))],
        )
        results = []
        threads = [
            threading.Thread(target=lambda: results.append(service.complete_booking(booking.booking_id)))
            for _ in range(10)
        ]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        assert all(r.is_accepted for r in results)
        assert sum(1 for r in results if not r.value.replayed) == 1
        assert promotions.get_promotion(promo.promotion_id).usage_count == 1
        assert inventory.stock_on_hand(BRANCH, "PRD-DYE", USAGE_SALON) == 8

    def test_one_time_promotion_redeemed_on_completion(self, service, promotions):
        promotions.create_promotion(PromotionCreateRequest(
            name="Welcome", code="WELCOME", discount_kind="percentage",
            discount_value=Decimal("10"), start_date=NOW - timedelta(days=1),
            end_date=NOW + timedelta(days=1), usage_policy="one-time",
        ))
        booking = in_service(service, SettlementDraft(promotion_code="WELCOME"))
        receipt = service.complete_booking(booking.booking_id).value
        assert receipt.promotion_usage.recorded
        again = confirmed(service)
        outcome = service.start_service(again.booking_id, SettlementDraft(promotion_code="WELCOME"))
        assert outcome.code == ReasonCode.ALREADY_USED

    def _welcome(self, promotions):
        return promotions.create_promotion(PromotionCreateRequest(
            name="Welcome", code="WELCOME", discount_kind="percentage",
            discount_value=Decimal("10"), start_date=NOW - timedelta(days=1),
            end_date=NOW + timedelta(days=1), usage_policy="one-time",
        )).value

    def test_one_time_code_bound_on_two_bookings_discounts_once(self, service, promotions, caplog):
        promo = self._welcome(promotions)
        draft = SettlementDraft(promotion_code="WELCOME")
        first = in_service(service, draft, lines=[cut()])
        second = in_service(service, draft, lines=[cut()], at=SLOT + timedelta(hours=3))
        assert first.promotion_id == second.promotion_id == promo.promotion_id

        kept = service.complete_booking(first.booking_id).value
        with caplog.at_level("WARNING", logger="salon.bookings"):
            dropped = service.complete_booking(second.booking_id).value

        assert kept.totals.discount == Decimal("60.00")
        assert kept.promotion_usage.recorded
        assert kept.promotion_rejection is None
        assert dropped.booking.status == BookingStatus.COMPLETED
        assert dropped.totals.discount == Decimal("0.00")
        assert dropped.promotion_usage is None
        assert dropped.promotion_rejection.code == ReasonCode.ALREADY_USED
        assert service.get_booking(second.booking_id).discount is None
        assert service.settlement(second.booking_id).value.discount == Decimal("0.00")
        assert promotions.get_promotion(promo.promotion_id).usage_count == 1
        assert "WELCOME dropped" in caplog.text

    def test_one_time_code_concurrent_completions_discount_once(self, service, promotions):
        promo = self._welcome(promotions)
        draft = SettlementDraft(promotion_code="WELCOME")
        bookings = [
            in_service(service, draft, lines=[cut()], at=SLOT + timedelta(hours=2 * i))
            for i in range(4)
        ]
        results = []
        threads = [
            threading.Thread(target=lambda b=b: results.append(service.complete_booking(b.booking_id)))
            for b in bookings
        ]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        receipts = [r.value for r in results]
        assert all(r.booking.status == BookingStatus.COMPLETED for r in receipts)
        assert sum(1 for r in receipts if r.totals.discount > 0) == 1
        assert sum(1 for r in receipts if r.promotion_rejection is not None) == 3
        assert promotions.get_promotion(promo.promotion_id).usage_count == 1

    def test_claim_given_back_when_completion_loses(self, clock, promotions):
        class CancelledMidway(InMemoryBookingRepository):
            def compare_and_set(self, booking_id, expected, updated):
                if updated.status == BookingStatus.COMPLETED:
                    current = self.get(booking_id)
                    super().compare_and_set(
                        booking_id, expected, replace(current, status=BookingStatus.CANCELLED),
                    )
                return super().compare_and_set(booking_id, expected, updated)

        promo = self._welcome(promotions)
        service = BookingService(CancelledMidway(), promotions=promotions, clock=clock)
        booking = in_service(service, SettlementDraft(promotion_code="WELCOME"))

        assert service.complete_booking(booking.booking_id).code == ReasonCode.CONFLICT
        stored = promotions.get_promotion(promo.promotion_id)
        assert stored.usage_count == 0
        assert not stored.has_redeemed("C1")
        assert promotions.validate_promotion_code("WELCOME", BRANCH, "C1").is_accepted

    def test_stock_shortfall_does_not_block(self, service, inventory, caplog):
        booking = in_service(service, SettlementDraft(product_lines=(
            ProductLine(product_id="PRD-GEL", product_name="Gel", unit_price="80.00", quantity=2),
        )))
        with caplog.at_level("WARNING", logger="salon.bookings"):
            receipt = service.complete_booking(booking.booking_id).value
        assert receipt.booking.status == BookingStatus.COMPLETED
        assert [s.code for s in receipt.stock_shortfalls] == [ReasonCode.INSUFFICIENT_STOCK]
        assert "Stock shortfall" in caplog.text

    def test_without_inventory_adapter(self, clock):
        service = BookingService(clock=clock)
        booking = in_service(service, SettlementDraft(product_lines=(
            ProductLine(product_id="PRD-GEL", product_name="Gel", unit_price="80.00"),
        )))
        receipt = service.complete_booking(booking.booking_id).value
        assert receipt.depletions == ()
        assert receipt.stock_shortfalls == ()

    def test_completed_event_carries_totals(self, service, bus):
        seen = []
        bus.registry.register_subscriber(BOOKING_COMPLETED_V1, seen.append, "reporting")
        booking = in_service(service, SettlementDraft(tax_rate=Decimal("0.12")))
        service.complete_booking(booking.booking_id)
        service.complete_booking(booking.booking_id)
        assert len(seen) == 1
        assert seen[0].payload["totals"]["total"] == "1120.00"
        assert seen[0].payload["commissions"][0] == {
            "line_type": "service", "item_id": "SVC-CUT", "earner_id": "STY-1",
            "amount": "360.00", "rate": None, "stored": True,
        }

    def test_cannot_cancel_completed(self, service):
        booking = in_service(service)
        service.complete_booking(booking.booking_id)
        assert service.cancel_booking(booking.booking_id, "oops").code == ReasonCode.CONFLICT


# ══════════════════════════════════════════════════════════════
# CHECK-IN
# ══════════════════════════════════════════════════════════════

class TestCheckIn:
    def test_check_in_records_arrival(self, service, arrivals):
        booking = confirmed(service, client_name="Ana Cruz")
        arrival = service.check_in(booking.booking_id).value
        assert arrival.status == ArrivalStatus.ARRIVED
        assert arrival.booking_id == booking.booking_id
        assert arrival.client_name == "Ana Cruz"
        assert service.get_booking(booking.booking_id).status == BookingStatus.CONFIRMED
        assert len(arrivals.waiting_queue(BRANCH)) == 1

    def test_check_in_twice_returns_same_arrival(self, service):
        booking = confirmed(service)
        first = service.check_in(booking.booking_id, "Ana").value
        second = service.check_in(booking.booking_id, "Ana").value
        assert first.arrival_id == second.arrival_id

    def test_check_in_pending_rejected(self, service):
        booking = book(service)
        assert service.check_in(booking.booking_id, "Ana").code == ReasonCode.INVALID_TRANSITION


class TestBookingRecord:
    def test_dict_round_trip(self, service):
        booking = in_service(service, SettlementDraft(
            discount=DiscountTerms(kind="fixed", value="100", applicable_to="services"),
            tax_rate=Decimal("0.12"),
        ))
        assert Booking.from_dict(booking.to_dict()) == booking
