"""
Salon Core — Outcomes and Rejections
======================================
Every operation produces exactly one Outcome.
REJECTED outcomes are first-class results, never exceptions.
"""

from core.commands.outcomes import (
    Outcome,
    OutcomeStatus,
)
from core.commands.rejection import (
    PROMOTION_REJECTION_CODES,
    ReasonCode,
    RejectionReason,
)

__all__ = [
    # ── Outcomes ──────────────────────────────────────────────
    "Outcome",
    "OutcomeStatus",
    # ── Rejection ─────────────────────────────────────────────
    "RejectionReason",
    "ReasonCode",
    "PROMOTION_REJECTION_CODES",
]
