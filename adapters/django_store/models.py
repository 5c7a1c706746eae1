"""
Salon Store - Persistent Records
================================
Row shapes for bookings, arrivals and promotions.

Line items, discount terms and booking history are JSON documents;
statuses and counters are plain columns so compare-and-set and
atomic increments run as single conditional UPDATEs.
"""

from __future__ import annotations

from django.db import models
from django.db.models import Q


class BookingStatusChoice(models.TextChoices):
    PENDING = "PENDING", "Pending"
    CONFIRMED = "CONFIRMED", "Confirmed"
    IN_SERVICE = "IN_SERVICE", "In service"
    COMPLETED = "COMPLETED", "Completed"
    CANCELLED = "CANCELLED", "Cancelled"
    NO_SHOW = "NO_SHOW", "No show"


class ArrivalStatusChoice(models.TextChoices):
    ARRIVED = "ARRIVED", "Arrived"
    IN_SERVICE = "IN_SERVICE", "In service"
    COMPLETED = "COMPLETED", "Completed"
    CANCELLED = "CANCELLED", "Cancelled"


class BookingRecord(models.Model):
    id = models.CharField(primary_key=True, max_length=64)
    branch_id = models.CharField(max_length=64)
    client_id = models.CharField(max_length=64, null=True, blank=True)
    client_name = models.CharField(max_length=255, blank=True, default="")
    status = models.CharField(
        max_length=20,
        choices=BookingStatusChoice.choices,
        default=BookingStatusChoice.PENDING,
    )
    scheduled_at = models.DateTimeField()
    duration_minutes = models.PositiveIntegerField(default=60)
    service_lines = models.JSONField(default=list)
    product_lines = models.JSONField(default=list)
    discount = models.JSONField(null=True, blank=True)
    tax_rate = models.DecimalField(max_digits=6, decimal_places=4, default=0)
    cancellation_reason = models.TextField(null=True, blank=True)
    history = models.JSONField(default=list)
    created_at = models.DateTimeField(null=True, blank=True)
    updated_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        db_table = "salon_bookings"
        ordering = ["scheduled_at", "id"]
        indexes = [
            models.Index(fields=["branch_id", "status"], name="idx_booking_branch_status"),
        ]

    def __str__(self) -> str:
        return f"{self.id} ({self.status})"


class ArrivalRecord(models.Model):
    id = models.CharField(primary_key=True, max_length=64)
    branch_id = models.CharField(max_length=64)
    booking_id = models.CharField(max_length=64, null=True, blank=True)
    client_name = models.CharField(max_length=255)
    status = models.CharField(
        max_length=20,
        choices=ArrivalStatusChoice.choices,
        default=ArrivalStatusChoice.ARRIVED,
    )
    arrived_at = models.DateTimeField()
    started_at = models.DateTimeField(null=True, blank=True)
    finished_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        db_table = "salon_arrivals"
        ordering = ["arrived_at", "id"]
        indexes = [
            models.Index(fields=["branch_id", "status"], name="idx_arrival_branch_status"),
        ]
        constraints = [
            models.UniqueConstraint(
                fields=["booking_id"],
                condition=Q(status__in=["ARRIVED", "IN_SERVICE"]),
                name="uq_arrival_open_per_booking",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.id} ({self.status})"


class PromotionRecord(models.Model):
    id = models.CharField(primary_key=True, max_length=64)
    code = models.CharField(max_length=32)
    branch_id = models.CharField(max_length=64, null=True, blank=True)
    name = models.CharField(max_length=255)
    description = models.TextField(blank=True, default="")
    discount_kind = models.CharField(max_length=20)
    discount_value = models.DecimalField(max_digits=12, decimal_places=2)
    applicable_to = models.CharField(max_length=20, default="all")
    specific_item_ids = models.JSONField(default=list)
    usage_policy = models.CharField(max_length=20)
    max_uses = models.PositiveIntegerField(null=True, blank=True)
    usage_count = models.PositiveIntegerField(default=0)
    active = models.BooleanField(default=True)
    start_date = models.DateTimeField()
    end_date = models.DateTimeField()
    created_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        db_table = "salon_promotions"
        ordering = ["code", "id"]
        constraints = [
            models.UniqueConstraint(
                fields=["code", "branch_id"],
                name="uq_promotion_branch_code",
            ),
            models.UniqueConstraint(
                fields=["code"],
                condition=Q(branch_id__isnull=True),
                name="uq_promotion_global_code",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.code} ({self.branch_id or 'global'})"


class PromotionRedemption(models.Model):
    """One row per client that redeemed a one-time promotion."""

    promotion = models.ForeignKey(
        PromotionRecord,
        on_delete=models.PROTECT,
        related_name="redemptions",
    )
    client_id = models.CharField(max_length=64)
    booking_id = models.CharField(max_length=64, null=True, blank=True)
    redeemed_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "salon_promotion_redemptions"
        constraints = [
            models.UniqueConstraint(
                fields=["promotion", "client_id"],
                name="uq_redemption_promotion_client",
            ),
        ]
