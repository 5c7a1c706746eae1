"""
Salon Inventory — Depletion Requests
======================================
The booking engine emits one DepletionRequest per product line
(retail, "otc") and per product consumed by a service ("salon-use").
"""

from __future__ import annotations

from dataclasses import dataclass

from engines.inventory.lot_engine import VALID_USAGE_TYPES


@dataclass(frozen=True)
class DepletionRequest:
    branch_id: str
    product_id: str
    quantity: int
    usage_type: str
    reference_id: str = ""

    def __post_init__(self):
        if not self.branch_id:
            raise ValueError("branch_id must be non-empty.")
        if not self.product_id:
            raise ValueError("product_id must be non-empty.")
        if not isinstance(self.quantity, int) or self.quantity <= 0:
            raise ValueError("quantity must be positive integer.")
        if self.usage_type not in VALID_USAGE_TYPES:
            raise ValueError(f"usage_type '{self.usage_type}' not valid.")
