"""
Salon Promotion Engine — Request Commands
"""

from __future__ import annotations

import secrets
import string
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Optional

from core.primitives.money import to_decimal
from engines.settlement.discount import (
    DISCOUNT_PERCENTAGE,
    SCOPE_ALL,
    SCOPE_SPECIFIC,
    VALID_DISCOUNT_KINDS,
    VALID_SCOPES,
)

USAGE_ONE_TIME = "one-time"
USAGE_REPEATING = "repeating"
VALID_USAGE_POLICIES = frozenset({USAGE_ONE_TIME, USAGE_REPEATING})

CODE_LENGTH = 8
CODE_ALPHABET = string.ascii_uppercase + string.digits


def normalize_code(code: str) -> str:
    """Codes compare case-insensitively and ignore surrounding blanks."""
    return (code or "").strip().upper()


def generate_code(length: int = CODE_LENGTH) -> str:
    return "".join(secrets.choice(CODE_ALPHABET) for _ in range(length))


@dataclass(frozen=True)
class PromotionCreateRequest:
    name: str
    discount_kind: str
    discount_value: Decimal
    start_date: datetime
    end_date: datetime
    code: Optional[str] = None
    branch_id: Optional[str] = None
    applicable_to: str = SCOPE_ALL
    specific_item_ids: frozenset = frozenset()
    usage_policy: str = USAGE_REPEATING
    max_uses: Optional[int] = None
    active: bool = True
    description: str = ""

    def __post_init__(self):
        if not self.name or not self.name.strip():
            raise ValueError("name must be non-empty.")
        if self.discount_kind not in VALID_DISCOUNT_KINDS:
            raise ValueError(f"discount_kind '{self.discount_kind}' not valid.")
        value = to_decimal(self.discount_value, field_name="discount_value")
        if value < 0:
            raise ValueError("discount_value must not be negative.")
        if self.discount_kind == DISCOUNT_PERCENTAGE and value > 100:
            raise ValueError("percentage discount_value must be within 0..100.")
        object.__setattr__(self, "discount_value", value)
        if self.applicable_to not in VALID_SCOPES:
            raise ValueError(f"applicable_to '{self.applicable_to}' not valid.")
        if self.applicable_to == SCOPE_SPECIFIC and not self.specific_item_ids:
            raise ValueError("specific scope requires at least one item id.")
        object.__setattr__(self, "specific_item_ids", frozenset(self.specific_item_ids))
        if self.usage_policy not in VALID_USAGE_POLICIES:
            raise ValueError(f"usage_policy '{self.usage_policy}' not valid.")
        if self.max_uses is not None and (
            not isinstance(self.max_uses, int) or self.max_uses <= 0
        ):
            raise ValueError("max_uses must be a positive integer.")
        if self.start_date.tzinfo is None or self.end_date.tzinfo is None:
            raise ValueError("start_date and end_date must be timezone-aware.")
        if self.start_date > self.end_date:
            raise ValueError("start_date must be on or before end_date.")
        if self.code is not None:
            code = normalize_code(self.code)
            if not code:
                raise ValueError("code must be non-empty when given.")
            object.__setattr__(self, "code", code)
