"""
Salon Core — Operation Outcome Contract
=========================================
Every core operation produces exactly one Outcome. No exceptions
for expected business conditions.

ACCEPTED → operation applied, `value` carries the result.
REJECTED → nothing was written, `reason` is mandatory.

Rules:
- Outcome is immutable (frozen dataclass)
- REJECTED must contain reason (RejectionReason)
- ACCEPTED must NOT contain reason
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Generic, Optional, TypeVar

from core.commands.rejection import RejectionReason

T = TypeVar("T")


class OutcomeStatus(Enum):
    """Binary decision. No middle ground."""
    ACCEPTED = "ACCEPTED"
    REJECTED = "REJECTED"


@dataclass(frozen=True)
class Outcome(Generic[T]):
    """
    Result of a core operation.

    Invariants:
        - REJECTED + reason is None → ValueError
        - ACCEPTED + reason is not None → ValueError
    """

    status: OutcomeStatus
    value: Optional[T] = None
    reason: Optional[RejectionReason] = None

    def __post_init__(self):
        if not isinstance(self.status, OutcomeStatus):
            raise ValueError(
                f"status must be OutcomeStatus, got {type(self.status).__name__}."
            )

        if self.status == OutcomeStatus.REJECTED and self.reason is None:
            raise ValueError(
                "REJECTED outcome must include a RejectionReason. "
                "No silent rejections allowed."
            )

        if self.status == OutcomeStatus.ACCEPTED and self.reason is not None:
            raise ValueError(
                "ACCEPTED outcome must NOT include a RejectionReason."
            )

    # ── constructors ──────────────────────────────────────────

    @classmethod
    def accepted(cls, value: Any = None) -> "Outcome":
        return cls(status=OutcomeStatus.ACCEPTED, value=value)

    @classmethod
    def rejected(cls, code: str, message: str, policy_name: str) -> "Outcome":
        return cls(
            status=OutcomeStatus.REJECTED,
            reason=RejectionReason(code=code, message=message, policy_name=policy_name),
        )

    @classmethod
    def from_reason(cls, reason: RejectionReason) -> "Outcome":
        return cls(status=OutcomeStatus.REJECTED, reason=reason)

    # ── queries ───────────────────────────────────────────────

    @property
    def is_accepted(self) -> bool:
        return self.status == OutcomeStatus.ACCEPTED

    @property
    def is_rejected(self) -> bool:
        return self.status == OutcomeStatus.REJECTED

    @property
    def code(self) -> Optional[str]:
        """Rejection code, or None when accepted."""
        return self.reason.code if self.reason is not None else None
