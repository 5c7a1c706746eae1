"""
Salon Inventory — Policies
============================
"""

from __future__ import annotations

from typing import Optional

from core.commands.rejection import ReasonCode, RejectionReason


def sufficient_stock_policy(
    product_id: str,
    usage_type: str,
    available: int,
    requested: int,
) -> Optional[RejectionReason]:
    """Reject a depletion the matching batches cannot cover."""
    if available >= requested:
        return None
    return RejectionReason(
        code=ReasonCode.INSUFFICIENT_STOCK,
        message=(
            f"Insufficient {usage_type} stock for product {product_id}: "
            f"{available} available, {requested} requested."
        ),
        policy_name="sufficient_stock_policy",
    )
