"""
Salon Promotion Engine — Promotion Registry
=============================================
The code registry and its usage counters are shared by every branch
(global codes) and by every terminal within a branch.

Usage updates are exposed as atomic primitives and nothing else:

- add_redeemed_client:     claim a one-time code for (client, booking)
- release_redeemed_client: undo a claim whose booking never completed
- increment_usage:         conditional increment, refuses past max_uses

A one-time claim remembers the booking that took it. The same booking
asking again is HELD (safe to retry); any other booking is TAKEN.

Counters are never written back from a previously read record.
"""

from __future__ import annotations

import threading
from dataclasses import replace
from enum import Enum
from typing import Dict, List, Optional, Protocol, Tuple

from engines.promotion.models import Promotion


class RedemptionClaim(str, Enum):
    NEW = "NEW"
    HELD = "HELD"
    TAKEN = "TAKEN"


class PromotionRepository(Protocol):
    def add(self, promotion: Promotion) -> bool: ...

    def get(self, promotion_id: str) -> Optional[Promotion]: ...

    def find_by_code(self, code: str, branch_id: Optional[str]) -> Optional[Promotion]: ...

    def code_taken(self, code: str, branch_id: Optional[str]) -> bool: ...

    def add_redeemed_client(
        self, promotion_id: str, client_id: str, booking_id: Optional[str] = None,
    ) -> Optional[RedemptionClaim]: ...

    def release_redeemed_client(
        self, promotion_id: str, client_id: str, booking_id: str,
    ) -> bool: ...

    def increment_usage(self, promotion_id: str) -> Optional[bool]: ...

    def set_active(self, promotion_id: str, active: bool) -> Optional[Promotion]: ...

    def list_for_branch(self, branch_id: Optional[str]) -> List[Promotion]: ...


class InMemoryPromotionRegistry:
    """Thread-safe in-memory registry. One lock, one entity per operation."""

    def __init__(self):
        self._promotions: Dict[str, Promotion] = {}
        self._holders: Dict[Tuple[str, str], Optional[str]] = {}
        self._lock = threading.Lock()

    def add(self, promotion: Promotion) -> bool:
        """False when the code is already used in the same branch scope."""
        with self._lock:
            if self._code_taken(promotion.code, promotion.branch_id):
                return False
            if promotion.promotion_id in self._promotions:
                return False
            self._promotions[promotion.promotion_id] = promotion
            return True

    def get(self, promotion_id: str) -> Optional[Promotion]:
        with self._lock:
            return self._promotions.get(promotion_id)

    def _code_taken(self, code: str, branch_id: Optional[str]) -> bool:
        return any(
            p.code == code and p.branch_id == branch_id
            for p in self._promotions.values()
        )

    def code_taken(self, code: str, branch_id: Optional[str]) -> bool:
        with self._lock:
            return self._code_taken(code, branch_id)

    def find_by_code(self, code: str, branch_id: Optional[str]) -> Optional[Promotion]:
        """Branch-specific match first, then the global (branch_id None) code."""
        with self._lock:
            global_match = None
            for promotion in self._promotions.values():
                if promotion.code != code:
                    continue
                if branch_id is not None and promotion.branch_id == branch_id:
                    return promotion
                if promotion.branch_id is None:
                    global_match = promotion
            return global_match

    def add_redeemed_client(
        self, promotion_id: str, client_id: str, booking_id: Optional[str] = None,
    ) -> Optional[RedemptionClaim]:
        """
        Insert client_id into the redeemed set on behalf of booking_id.

        Returns None if the promotion is unknown. NEW when the client
        was newly added (usage_count incremented in the same step),
        HELD when booking_id already holds the claim, TAKEN when any
        other booking (or a call without a booking) holds it.
        """
        with self._lock:
            promotion = self._promotions.get(promotion_id)
            if promotion is None:
                return None
            key = (promotion_id, client_id)
            if client_id in promotion.redeemed_client_ids:
                holder = self._holders.get(key)
                if booking_id is not None and holder == booking_id:
                    return RedemptionClaim.HELD
                return RedemptionClaim.TAKEN
            self._promotions[promotion_id] = replace(
                promotion,
                redeemed_client_ids=promotion.redeemed_client_ids | {client_id},
                usage_count=promotion.usage_count + 1,
            )
            self._holders[key] = booking_id
            return RedemptionClaim.NEW

    def release_redeemed_client(self, promotion_id: str, client_id: str, booking_id: str) -> bool:
        """Drop a claim held by booking_id. False if it holds none."""
        with self._lock:
            promotion = self._promotions.get(promotion_id)
            key = (promotion_id, client_id)
            if promotion is None or self._holders.get(key) != booking_id:
                return False
            if client_id not in promotion.redeemed_client_ids:
                return False
            del self._holders[key]
            self._promotions[promotion_id] = replace(
                promotion,
                redeemed_client_ids=promotion.redeemed_client_ids - {client_id},
                usage_count=max(promotion.usage_count - 1, 0),
            )
            return True

    def increment_usage(self, promotion_id: str) -> Optional[bool]:
        """
        Increment usage_count unless it already reached max_uses.

        Returns None if the promotion is unknown, False at the bound.
        """
        with self._lock:
            promotion = self._promotions.get(promotion_id)
            if promotion is None:
                return None
            if promotion.max_uses is not None and promotion.usage_count >= promotion.max_uses:
                return False
            self._promotions[promotion_id] = replace(
                promotion, usage_count=promotion.usage_count + 1,
            )
            return True

    def set_active(self, promotion_id: str, active: bool) -> Optional[Promotion]:
        with self._lock:
            promotion = self._promotions.get(promotion_id)
            if promotion is None:
                return None
            updated = replace(promotion, active=active)
            self._promotions[promotion_id] = updated
            return updated

    def list_for_branch(self, branch_id: Optional[str]) -> List[Promotion]:
        """Promotions usable at a branch: its own plus the global ones."""
        with self._lock:
            return [
                p for p in self._promotions.values()
                if p.branch_id is None or p.branch_id == branch_id
            ]
