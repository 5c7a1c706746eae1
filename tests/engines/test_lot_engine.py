"""
Salon Inventory — FEFO Batch Tests
====================================
Tests the batch ledger and the in-memory inventory adapter.
"""

from datetime import date

import pytest

from core.commands.rejection import ReasonCode
from engines.inventory.commands import DepletionRequest
from engines.inventory.lot_engine import USAGE_OTC, USAGE_SALON, BatchLedger
from engines.inventory.services import InMemoryInventory

BRANCH = "BR-MAKATI"


# ══════════════════════════════════════════════════════════════
# UNIT: BatchLedger
# ══════════════════════════════════════════════════════════════

class TestBatchLedger:
    def test_receive_adds_batch(self):
        ledger = BatchLedger()
        ledger.receive("B-1", 10, USAGE_OTC, date(2026, 6, 1))
        assert ledger.available(USAGE_OTC) == 10
        assert ledger.available(USAGE_SALON) == 0

    def test_receive_rejects_zero_quantity(self):
        with pytest.raises(ValueError, match="positive"):
            BatchLedger().receive("B-1", 0)

    def test_receive_rejects_duplicate_batch(self):
        ledger = BatchLedger()
        ledger.receive("B-1", 5)
        with pytest.raises(ValueError, match="already"):
            ledger.receive("B-1", 5)

    def test_earliest_expiry_first(self):
        ledger = BatchLedger()
        ledger.receive("LATE", 10, USAGE_OTC, date(2026, 9, 1))
        ledger.receive("SOON", 10, USAGE_OTC, date(2026, 4, 1))
        deductions = ledger.deplete(12, USAGE_OTC)
        assert [(d.batch_id, d.quantity) for d in deductions] == [("SOON", 10), ("LATE", 2)]

    def test_undated_batches_last(self):
        ledger = BatchLedger()
        ledger.receive("NO-DATE", 10, USAGE_OTC)
        ledger.receive("DATED", 10, USAGE_OTC, date(2027, 1, 1))
        deductions = ledger.deplete(3, USAGE_OTC)
        assert deductions[0].batch_id == "DATED"

    def test_same_expiry_uses_receive_order(self):
        ledger = BatchLedger()
        ledger.receive("FIRST", 2, USAGE_OTC, date(2026, 5, 1))
        ledger.receive("SECOND", 2, USAGE_OTC, date(2026, 5, 1))
        assert ledger.deplete(1, USAGE_OTC)[0].batch_id == "FIRST"

    def test_usage_types_are_separate(self):
        ledger = BatchLedger()
        ledger.receive("RETAIL", 5, USAGE_OTC, date(2026, 4, 1))
        ledger.receive("BACKBAR", 5, USAGE_SALON, date(2026, 5, 1))
        deductions = ledger.deplete(2, USAGE_SALON)
        assert deductions[0].batch_id == "BACKBAR"
        assert ledger.available(USAGE_OTC) == 5

    def test_insufficient_changes_nothing(self):
        ledger = BatchLedger()
        ledger.receive("B-1", 3, USAGE_OTC)
        ledger.receive("B-2", 2, USAGE_OTC)
        assert ledger.deplete(6, USAGE_OTC) is None
        assert ledger.available(USAGE_OTC) == 5

    def test_exhausted_batches_kept(self):
        ledger = BatchLedger()
        ledger.receive("B-1", 2, USAGE_OTC)
        ledger.deplete(2, USAGE_OTC)
        batches = ledger.get_batches()
        assert len(batches) == 1
        assert batches[0].is_exhausted


# ══════════════════════════════════════════════════════════════
# ADAPTER: InMemoryInventory
# ══════════════════════════════════════════════════════════════

class TestInMemoryInventory:
    def test_deplete_records_result(self):
        inventory = InMemoryInventory()
        inventory.receive_batch(BRANCH, "PRD-SHAMPOO", "B-1", 4, expires_on=date(2026, 8, 1))
        outcome = inventory.deplete_batch(BRANCH, "PRD-SHAMPOO", 3, USAGE_OTC)
        assert outcome.is_accepted
        assert outcome.value.deductions[0].remaining == 1
        assert inventory.stock_on_hand(BRANCH, "PRD-SHAMPOO") == 1
        assert len(inventory.depletions) == 1

    def test_deplete_carries_reference(self):
        inventory = InMemoryInventory()
        inventory.receive_batch(BRANCH, "PRD-SHAMPOO", "B-1", 4)
        outcome = inventory.deplete_batch(BRANCH, "PRD-SHAMPOO", 1, USAGE_OTC, reference_id="BK-7")
        assert outcome.value.reference_id == "BK-7"
        assert inventory.depletions[0].reference_id == "BK-7"

    def test_insufficient_stock(self):
        inventory = InMemoryInventory()
        inventory.receive_batch(BRANCH, "PRD-DYE", "B-1", 1, usage_type=USAGE_SALON)
        outcome = inventory.deplete_batch(BRANCH, "PRD-DYE", 2, USAGE_SALON)
        assert outcome.code == ReasonCode.INSUFFICIENT_STOCK
        assert inventory.stock_on_hand(BRANCH, "PRD-DYE", USAGE_SALON) == 1
        assert inventory.depletions == []

    def test_branches_are_separate(self):
        inventory = InMemoryInventory()
        inventory.receive_batch("BR-QC", "PRD-DYE", "B-1", 5)
        assert inventory.deplete_batch(BRANCH, "PRD-DYE", 1, USAGE_OTC).code == ReasonCode.INSUFFICIENT_STOCK

    def test_invalid_request(self):
        inventory = InMemoryInventory()
        assert inventory.deplete_batch(BRANCH, "PRD-DYE", 0, USAGE_OTC).code == ReasonCode.VALIDATION
        assert inventory.deplete_batch(BRANCH, "PRD-DYE", 1, "gift").code == ReasonCode.VALIDATION

    def test_receive_duplicate_batch_rejected(self):
        inventory = InMemoryInventory()
        inventory.receive_batch(BRANCH, "PRD-DYE", "B-1", 5)
        assert inventory.receive_batch(BRANCH, "PRD-DYE", "B-1", 5).code == ReasonCode.VALIDATION


class TestDepletionRequest:
    def test_quantity_must_be_int(self):
        with pytest.raises(ValueError):
            DepletionRequest(branch_id=BRANCH, product_id="P", quantity=1.5, usage_type=USAGE_OTC)
