"""
Salon Inventory — FEFO Batch Ledger
=====================================
Stock for one (branch, product) pair is held in batches. Each batch
has a usage type (retail "otc" or "salon-use"), a remaining
quantity and an optional expiry date.

RULES:
- Quantities are integers
- Depletion order is first-expired-first-out: earliest expiry first,
  batches without an expiry date last, ties broken by receive order
- Only batches of the requested usage type are considered
- Depletion is all-or-nothing: a request the matching batches cannot
  cover changes nothing
- Exhausted batches are retained (audit trail) but skipped
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import List, Optional, Tuple

USAGE_OTC = "otc"
USAGE_SALON = "salon-use"
VALID_USAGE_TYPES = frozenset({USAGE_OTC, USAGE_SALON})


# ══════════════════════════════════════════════════════════════
# DATA STRUCTURES
# ══════════════════════════════════════════════════════════════

@dataclass
class _BatchEntry:
    """Internal mutable batch entry (not exposed externally)."""
    batch_id: str
    usage_type: str
    quantity_original: int
    quantity_remaining: int
    expires_on: Optional[date]
    sequence: int


@dataclass(frozen=True)
class StockBatch:
    """Immutable snapshot of a batch (for read queries)."""
    batch_id: str
    usage_type: str
    quantity_original: int
    quantity_remaining: int
    expires_on: Optional[date]

    @property
    def is_exhausted(self) -> bool:
        return self.quantity_remaining <= 0


@dataclass(frozen=True)
class BatchDeduction:
    """Stock taken from one batch."""
    batch_id: str
    quantity: int
    remaining: int


@dataclass(frozen=True)
class DepletionResult:
    branch_id: str
    product_id: str
    usage_type: str
    quantity: int
    deductions: Tuple[BatchDeduction, ...]
    reference_id: str = ""


# ══════════════════════════════════════════════════════════════
# BATCH LEDGER
# ══════════════════════════════════════════════════════════════

class BatchLedger:
    """Batches for a single (branch_id, product_id) pair."""

    def __init__(self):
        self._batches: List[_BatchEntry] = []
        self._sequence: int = 0

    def receive(
        self,
        batch_id: str,
        quantity: int,
        usage_type: str = USAGE_OTC,
        expires_on: Optional[date] = None,
    ) -> None:
        if quantity <= 0:
            raise ValueError(f"Batch quantity must be positive, got {quantity}.")
        if usage_type not in VALID_USAGE_TYPES:
            raise ValueError(f"usage_type '{usage_type}' not valid.")
        if any(b.batch_id == batch_id for b in self._batches):
            raise ValueError(f"Batch '{batch_id}' already received.")
        self._sequence += 1
        self._batches.append(_BatchEntry(
            batch_id=batch_id,
            usage_type=usage_type,
            quantity_original=quantity,
            quantity_remaining=quantity,
            expires_on=expires_on,
            sequence=self._sequence,
        ))

    def _fefo_order(self, usage_type: str) -> List[_BatchEntry]:
        candidates = [
            b for b in self._batches
            if b.usage_type == usage_type and b.quantity_remaining > 0
        ]
        return sorted(
            candidates,
            key=lambda b: (b.expires_on is None, b.expires_on or date.max, b.sequence),
        )

    def available(self, usage_type: str) -> int:
        return sum(b.quantity_remaining for b in self._fefo_order(usage_type))

    def deplete(self, quantity: int, usage_type: str) -> Optional[Tuple[BatchDeduction, ...]]:
        """
        Deduct `quantity` in FEFO order.

        Returns the deductions, or None (and no change) when the
        matching batches cannot cover the quantity.
        """
        if quantity <= 0:
            raise ValueError(f"Deplete quantity must be positive, got {quantity}.")

        ordered = self._fefo_order(usage_type)
        if sum(b.quantity_remaining for b in ordered) < quantity:
            return None

        remaining = quantity
        deductions: List[BatchDeduction] = []
        for batch in ordered:
            if remaining <= 0:
                break
            take = min(batch.quantity_remaining, remaining)
            batch.quantity_remaining -= take
            remaining -= take
            deductions.append(BatchDeduction(
                batch_id=batch.batch_id,
                quantity=take,
                remaining=batch.quantity_remaining,
            ))
        return tuple(deductions)

    def get_batches(self) -> List[StockBatch]:
        """Snapshots of all batches, including exhausted ones."""
        return [
            StockBatch(
                batch_id=b.batch_id,
                usage_type=b.usage_type,
                quantity_original=b.quantity_original,
                quantity_remaining=b.quantity_remaining,
                expires_on=b.expires_on,
            )
            for b in self._batches
        ]
