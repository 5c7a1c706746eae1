"""
Salon Promotion Engine — Policies

Applied in order by PromotionService.validate_promotion_code.
The first rejection wins.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from core.commands.rejection import ReasonCode, RejectionReason
from engines.promotion.models import Promotion


def promotion_must_be_active_policy(promotion: Promotion) -> Optional[RejectionReason]:
    if promotion.active:
        return None
    return RejectionReason(
        code=ReasonCode.INACTIVE,
        message=f"Promotion '{promotion.code}' is not active.",
        policy_name="promotion_must_be_active_policy")


def promotion_must_be_in_window_policy(
    promotion: Promotion, now: datetime,
) -> Optional[RejectionReason]:
    window = promotion.window
    if window.is_before_start(now):
        return RejectionReason(
            code=ReasonCode.NOT_YET_VALID,
            message=(
                f"Promotion '{promotion.code}' is valid from "
                f"{promotion.start_date.isoformat()}."
            ),
            policy_name="promotion_must_be_in_window_policy")
    if window.is_after_end(now):
        return RejectionReason(
            code=ReasonCode.EXPIRED,
            message=(
                f"Promotion '{promotion.code}' expired on "
                f"{promotion.end_date.isoformat()}."
            ),
            policy_name="promotion_must_be_in_window_policy")
    return None


def one_time_must_not_be_redeemed_policy(
    promotion: Promotion, client_id: Optional[str],
) -> Optional[RejectionReason]:
    if not promotion.is_one_time:
        return None
    if not client_id:
        return RejectionReason(
            code=ReasonCode.VALIDATION,
            message=f"Promotion '{promotion.code}' is one-time; a client id is required.",
            policy_name="one_time_must_not_be_redeemed_policy")
    if promotion.has_redeemed(client_id):
        return RejectionReason(
            code=ReasonCode.ALREADY_USED,
            message=f"Client '{client_id}' already used promotion '{promotion.code}'.",
            policy_name="one_time_must_not_be_redeemed_policy")
    return None


def repeating_must_be_under_limit_policy(promotion: Promotion) -> Optional[RejectionReason]:
    if not promotion.is_bounded:
        return None
    if promotion.usage_count >= promotion.max_uses:
        return RejectionReason(
            code=ReasonCode.LIMIT_REACHED,
            message=(
                f"Promotion '{promotion.code}' reached its limit of "
                f"{promotion.max_uses} uses."
            ),
            policy_name="repeating_must_be_under_limit_policy")
    return None
