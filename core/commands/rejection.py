"""
Salon Core — Rejection Model
==============================
Structured reasons for rejected operations.

A rejection is an expected business result, not an exception.
Every rejection carries:
- code        (machine-readable, see ReasonCode)
- message     (human-readable, surfaced verbatim to staff)
- policy_name (which rule produced it)
"""

from __future__ import annotations

from dataclasses import dataclass


# ══════════════════════════════════════════════════════════════
# REJECTION REASON (frozen explanation structure)
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class RejectionReason:
    """
    Structured reason for a rejected operation.

    Fields:
        code:        Machine-readable rejection code (e.g. 'CONFLICT').
        message:     Human-readable explanation.
        policy_name: Name of the policy that caused rejection.
    """

    code: str
    message: str
    policy_name: str

    def __post_init__(self):
        if not self.code or not isinstance(self.code, str):
            raise ValueError("code must be a non-empty string.")

        if not self.message or not isinstance(self.message, str):
            raise ValueError("message must be a non-empty string.")

        if not self.policy_name or not isinstance(self.policy_name, str):
            raise ValueError("policy_name must be a non-empty string.")

    @property
    def is_retryable(self) -> bool:
        """Only a lost compare-and-set is worth a refetch-and-retry."""
        return self.code == ReasonCode.CONFLICT

    def to_dict(self) -> dict:
        return {
            "code": self.code,
            "message": self.message,
            "policy_name": self.policy_name,
        }


# ══════════════════════════════════════════════════════════════
# STANDARD REJECTION CODES
# ══════════════════════════════════════════════════════════════

class ReasonCode:
    """
    Known rejection codes.

    Convention: SCREAMING_SNAKE_CASE.
    """

    # ── Input / lookup ────────────────────────────────────────
    VALIDATION = "VALIDATION"
    NOT_FOUND = "NOT_FOUND"

    # ── State machine ─────────────────────────────────────────
    CONFLICT = "CONFLICT"
    INVALID_TRANSITION = "INVALID_TRANSITION"

    # ── Promotion ─────────────────────────────────────────────
    INACTIVE = "INACTIVE"
    EXPIRED = "EXPIRED"
    NOT_YET_VALID = "NOT_YET_VALID"
    ALREADY_USED = "ALREADY_USED"
    LIMIT_REACHED = "LIMIT_REACHED"

    # ── Inventory ─────────────────────────────────────────────
    INSUFFICIENT_STOCK = "INSUFFICIENT_STOCK"


PROMOTION_REJECTION_CODES = frozenset({
    ReasonCode.NOT_FOUND,
    ReasonCode.INACTIVE,
    ReasonCode.EXPIRED,
    ReasonCode.NOT_YET_VALID,
    ReasonCode.ALREADY_USED,
    ReasonCode.LIMIT_REACHED,
})
