"""
Salon Promotion Engine — Promotion Record
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, Optional

from core.time.temporal import TimeWindow
from engines.promotion.commands import USAGE_ONE_TIME, USAGE_REPEATING
from engines.settlement.discount import DiscountTerms


@dataclass(frozen=True)
class Promotion:
    promotion_id: str
    code: str
    name: str
    discount_kind: str
    discount_value: Decimal
    applicable_to: str
    usage_policy: str
    start_date: datetime
    end_date: datetime
    branch_id: Optional[str] = None
    specific_item_ids: frozenset = frozenset()
    max_uses: Optional[int] = None
    usage_count: int = 0
    redeemed_client_ids: frozenset = frozenset()
    active: bool = True
    description: str = ""
    created_at: Optional[datetime] = field(default=None, compare=False)

    @property
    def is_global(self) -> bool:
        return self.branch_id is None

    @property
    def is_one_time(self) -> bool:
        return self.usage_policy == USAGE_ONE_TIME

    @property
    def is_bounded(self) -> bool:
        return self.usage_policy == USAGE_REPEATING and self.max_uses is not None

    @property
    def window(self) -> TimeWindow:
        return TimeWindow(start=self.start_date, end=self.end_date)

    def has_redeemed(self, client_id: str) -> bool:
        return client_id in self.redeemed_client_ids

    def discount_terms(self) -> DiscountTerms:
        return DiscountTerms(
            kind=self.discount_kind,
            value=self.discount_value,
            applicable_to=self.applicable_to,
            item_ids=self.specific_item_ids,
            promotion_id=self.promotion_id,
            code=self.code,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "promotion_id": self.promotion_id,
            "code": self.code,
            "name": self.name,
            "branch_id": self.branch_id,
            "discount_kind": self.discount_kind,
            "discount_value": str(self.discount_value),
            "applicable_to": self.applicable_to,
            "specific_item_ids": sorted(self.specific_item_ids),
            "usage_policy": self.usage_policy,
            "max_uses": self.max_uses,
            "usage_count": self.usage_count,
            "redeemed_client_ids": sorted(self.redeemed_client_ids),
            "active": self.active,
            "start_date": self.start_date.isoformat(),
            "end_date": self.end_date.isoformat(),
        }
