"""
Salon Inventory — Adapter
===========================
Stock depletion collaborator consumed by the booking engine at
completion time.

InMemoryInventory keeps one BatchLedger per (branch_id, product_id).
Each call is a single atomic unit guarded by the store lock.
"""

from __future__ import annotations

import logging
import threading
from datetime import date
from typing import Dict, List, Optional, Protocol, Tuple

from core.commands.outcomes import Outcome
from core.commands.rejection import ReasonCode
from engines.inventory.commands import DepletionRequest
from engines.inventory.lot_engine import (
    USAGE_OTC,
    BatchLedger,
    DepletionResult,
    StockBatch,
)
from engines.inventory.policies import sufficient_stock_policy

logger = logging.getLogger("salon.inventory")


# ══════════════════════════════════════════════════════════════
# PROTOCOL
# ══════════════════════════════════════════════════════════════

class InventoryAdapter(Protocol):
    def deplete_batch(
        self,
        branch_id: str,
        product_id: str,
        quantity: int,
        usage_type: str,
        reference_id: str = "",
    ) -> Outcome[DepletionResult]:
        ...


# ══════════════════════════════════════════════════════════════
# IN-MEMORY IMPLEMENTATION
# ══════════════════════════════════════════════════════════════

class InMemoryInventory:
    """FEFO batch stock, partitioned per branch and product."""

    def __init__(self):
        self._ledgers: Dict[Tuple[str, str], BatchLedger] = {}
        self._lock = threading.Lock()
        self._depletions: List[DepletionResult] = []

    def _ledger(self, branch_id: str, product_id: str) -> BatchLedger:
        key = (branch_id, product_id)
        if key not in self._ledgers:
            self._ledgers[key] = BatchLedger()
        return self._ledgers[key]

    def receive_batch(
        self,
        branch_id: str,
        product_id: str,
        batch_id: str,
        quantity: int,
        usage_type: str = USAGE_OTC,
        expires_on: Optional[date] = None,
    ) -> Outcome[StockBatch]:
        try:
            with self._lock:
                ledger = self._ledger(branch_id, product_id)
                ledger.receive(
                    batch_id=batch_id,
                    quantity=quantity,
                    usage_type=usage_type,
                    expires_on=expires_on,
                )
                batch = next(b for b in ledger.get_batches() if b.batch_id == batch_id)
        except ValueError as exc:
            return Outcome.rejected(ReasonCode.VALIDATION, str(exc), "receive_batch")

        logger.info(
            "Batch received: %s (%s x%d, %s) at branch %s",
            batch_id, product_id, quantity, usage_type, branch_id,
        )
        return Outcome.accepted(batch)

    def deplete_batch(
        self,
        branch_id: str,
        product_id: str,
        quantity: int,
        usage_type: str,
        reference_id: str = "",
    ) -> Outcome[DepletionResult]:
        """
        Deplete `quantity` units of the given usage type, soonest
        expiring batch first. Insufficient stock leaves every batch
        untouched. reference_id names what consumed the stock (a
        booking id) and is carried onto the result.
        """
        try:
            request = DepletionRequest(
                branch_id=branch_id,
                product_id=product_id,
                quantity=quantity,
                usage_type=usage_type,
                reference_id=reference_id,
            )
        except ValueError as exc:
            return Outcome.rejected(ReasonCode.VALIDATION, str(exc), "deplete_batch")

        with self._lock:
            ledger = self._ledger(request.branch_id, request.product_id)
            rejection = sufficient_stock_policy(
                product_id=request.product_id,
                usage_type=request.usage_type,
                available=ledger.available(request.usage_type),
                requested=request.quantity,
            )
            if rejection is not None:
                logger.info("Depletion rejected: %s", rejection.message)
                return Outcome.from_reason(rejection)
            deductions = ledger.deplete(request.quantity, request.usage_type)
            result = DepletionResult(
                branch_id=request.branch_id,
                product_id=request.product_id,
                usage_type=request.usage_type,
                quantity=request.quantity,
                deductions=deductions,
                reference_id=request.reference_id,
            )
            self._depletions.append(result)

        logger.info(
            "Stock depleted: %s x%d (%s) at branch %s from %s for %s",
            product_id, quantity, usage_type, branch_id,
            [d.batch_id for d in result.deductions], reference_id or "-",
        )
        return Outcome.accepted(result)

    def stock_on_hand(
        self,
        branch_id: str,
        product_id: str,
        usage_type: Optional[str] = None,
    ) -> int:
        with self._lock:
            batches = self._ledger(branch_id, product_id).get_batches()
        return sum(
            b.quantity_remaining for b in batches
            if usage_type is None or b.usage_type == usage_type
        )

    def get_batches(self, branch_id: str, product_id: str) -> List[StockBatch]:
        with self._lock:
            return self._ledger(branch_id, product_id).get_batches()

    @property
    def depletions(self) -> List[DepletionResult]:
        with self._lock:
            return list(self._depletions)
