"""
Salon Promotion Engine — Event Types and Payload Builders
"""

from __future__ import annotations

from typing import Optional

from engines.promotion.models import Promotion

PROMOTION_CODE_CREATED_V1 = "promotion.code.created.v1"
PROMOTION_CODE_DEACTIVATED_V1 = "promotion.code.deactivated.v1"
PROMOTION_USAGE_RECORDED_V1 = "promotion.usage.recorded.v1"

PROMOTION_EVENT_TYPES = (
    PROMOTION_CODE_CREATED_V1,
    PROMOTION_CODE_DEACTIVATED_V1,
    PROMOTION_USAGE_RECORDED_V1,
)


def build_code_created_payload(promotion: Promotion) -> dict:
    return promotion.to_dict()


def build_code_deactivated_payload(promotion: Promotion) -> dict:
    return {
        "promotion_id": promotion.promotion_id,
        "code": promotion.code,
        "branch_id": promotion.branch_id,
    }


def build_usage_recorded_payload(
    promotion: Promotion, client_id: Optional[str],
) -> dict:
    return {
        "promotion_id": promotion.promotion_id,
        "code": promotion.code,
        "client_id": client_id,
        "usage_policy": promotion.usage_policy,
        "usage_count": promotion.usage_count,
    }
