"""
Salon Arrival Tracker — Policies
"""

from __future__ import annotations

from typing import Optional

from core.commands.rejection import ReasonCode, RejectionReason
from engines.arrival.models import TERMINAL_ARRIVAL_STATUSES, Arrival, ArrivalStatus


def arrival_must_be_status_policy(
    arrival: Arrival, allowed: frozenset, action: str,
) -> Optional[RejectionReason]:
    if arrival.status in allowed:
        return None
    if arrival.status in TERMINAL_ARRIVAL_STATUSES:
        return RejectionReason(
            code=ReasonCode.CONFLICT,
            message=(
                f"Arrival '{arrival.arrival_id}' is already "
                f"{arrival.status.value} (terminal state)."
            ),
            policy_name="arrival_must_be_status_policy")
    expected = ", ".join(sorted(s.value for s in allowed))
    return RejectionReason(
        code=ReasonCode.INVALID_TRANSITION,
        message=(
            f"Cannot {action} arrival '{arrival.arrival_id}': it is "
            f"{arrival.status.value}, expected {expected}."
        ),
        policy_name="arrival_must_be_status_policy")


BEGIN_FROM = frozenset({ArrivalStatus.ARRIVED})
FINISH_FROM = frozenset({ArrivalStatus.IN_SERVICE})
CANCEL_FROM = frozenset({ArrivalStatus.ARRIVED, ArrivalStatus.IN_SERVICE})
