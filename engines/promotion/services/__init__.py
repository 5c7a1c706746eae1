"""
Salon Promotion Engine — Application Service
==============================================
Validates discount codes and records their usage.

validate_promotion_code never writes. track_promotion_usage writes
only through the registry's atomic primitives.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from typing import List, Optional

from core.commands.outcomes import Outcome
from core.commands.rejection import ReasonCode
from core.events.dispatcher import EventBus
from core.time.clock import Clock, SystemClock
from engines.promotion.commands import (
    PromotionCreateRequest,
    generate_code,
    normalize_code,
)
from engines.promotion.events import (
    PROMOTION_CODE_CREATED_V1,
    PROMOTION_CODE_DEACTIVATED_V1,
    PROMOTION_USAGE_RECORDED_V1,
    build_code_created_payload,
    build_code_deactivated_payload,
    build_usage_recorded_payload,
)
from engines.promotion.models import Promotion
from engines.promotion.policies import (
    one_time_must_not_be_redeemed_policy,
    promotion_must_be_active_policy,
    promotion_must_be_in_window_policy,
    repeating_must_be_under_limit_policy,
)
from engines.promotion.repository import (
    InMemoryPromotionRegistry,
    PromotionRepository,
    RedemptionClaim,
)

logger = logging.getLogger("salon.promotions")

MAX_CODE_ATTEMPTS = 10


@dataclass(frozen=True)
class UsageReceipt:
    promotion_id: str
    client_id: Optional[str]
    recorded: bool
    usage_count: int


class PromotionService:
    def __init__(
        self,
        repository: Optional[PromotionRepository] = None,
        *,
        clock: Optional[Clock] = None,
        event_bus: Optional[EventBus] = None,
    ):
        self._repository = repository or InMemoryPromotionRegistry()
        self._clock = clock or SystemClock()
        self._event_bus = event_bus

    @property
    def repository(self) -> PromotionRepository:
        return self._repository

    def _publish(self, event_type: str, payload: dict, branch_id, actor_id) -> None:
        if self._event_bus is None:
            return
        self._event_bus.publish(
            event_type, payload, branch_id=branch_id, actor_id=actor_id,
            occurred_at=self._clock.now_utc(),
        )

    # ── validation ───────────────────────────────────────────

    def validate_promotion_code(
        self,
        code: str,
        branch_id: Optional[str],
        client_id: Optional[str] = None,
    ) -> Outcome[Promotion]:
        normalized = normalize_code(code)
        if not normalized:
            return Outcome.rejected(
                ReasonCode.VALIDATION, "Promotion code is required.",
                "validate_promotion_code")

        promotion = self._repository.find_by_code(normalized, branch_id)
        if promotion is None:
            logger.info("Promotion code %s not found for branch %s", normalized, branch_id)
            return Outcome.rejected(
                ReasonCode.NOT_FOUND,
                f"Promotion code '{normalized}' not found.",
                "validate_promotion_code")

        now = self._clock.now_utc()
        for rejection in (
            promotion_must_be_active_policy(promotion),
            promotion_must_be_in_window_policy(promotion, now),
            one_time_must_not_be_redeemed_policy(promotion, client_id),
            repeating_must_be_under_limit_policy(promotion),
        ):
            if rejection is not None:
                logger.info(
                    "Promotion %s rejected for client %s: %s",
                    normalized, client_id, rejection.code,
                )
                return Outcome.from_reason(rejection)

        logger.debug("Promotion %s valid for client %s", normalized, client_id)
        return Outcome.accepted(promotion)

    # ── usage tracking ───────────────────────────────────────

    def track_promotion_usage(
        self,
        promotion_id: str,
        client_id: Optional[str] = None,
        *,
        booking_id: Optional[str] = None,
        actor_id: Optional[str] = None,
    ) -> Outcome[UsageReceipt]:
        """
        One-time codes: claim the code for (client_id, booking_id). The
        counter moves only on a fresh claim. The booking that already
        holds the claim gets an accepted receipt with recorded False;
        any other booking is rejected ALREADY_USED. Repeating codes:
        atomic bounded increment.
        """
        promotion = self._repository.get(promotion_id)
        if promotion is None:
            return Outcome.rejected(
                ReasonCode.NOT_FOUND, f"Promotion '{promotion_id}' not found.",
                "track_promotion_usage")

        if promotion.is_one_time:
            if not client_id:
                return Outcome.rejected(
                    ReasonCode.VALIDATION,
                    f"Promotion '{promotion.code}' is one-time; a client id is required.",
                    "track_promotion_usage")
            claim = self._repository.add_redeemed_client(promotion_id, client_id, booking_id)
            if claim == RedemptionClaim.TAKEN:
                logger.warning(
                    "Promotion %s already redeemed by client %s; booking %s refused",
                    promotion.code, client_id, booking_id,
                )
                return Outcome.rejected(
                    ReasonCode.ALREADY_USED,
                    f"Client '{client_id}' already used promotion '{promotion.code}'.",
                    "track_promotion_usage")
            recorded = None if claim is None else claim == RedemptionClaim.NEW
        else:
            recorded = self._repository.increment_usage(promotion_id)
            if recorded is False:
                logger.warning(
                    "Promotion %s usage not recorded: limit of %s reached",
                    promotion.code, promotion.max_uses,
                )
                return Outcome.rejected(
                    ReasonCode.LIMIT_REACHED,
                    f"Promotion '{promotion.code}' reached its limit of {promotion.max_uses} uses.",
                    "track_promotion_usage")

        if recorded is None:
            return Outcome.rejected(
                ReasonCode.NOT_FOUND, f"Promotion '{promotion_id}' not found.",
                "track_promotion_usage")

        current = self._repository.get(promotion_id) or promotion
        receipt = UsageReceipt(
            promotion_id=promotion_id,
            client_id=client_id,
            recorded=recorded,
            usage_count=current.usage_count,
        )
        if recorded:
            logger.info(
                "Promotion %s used by client %s (count %d)",
                current.code, client_id, current.usage_count,
            )
            self._publish(
                PROMOTION_USAGE_RECORDED_V1,
                build_usage_recorded_payload(current, client_id),
                current.branch_id, actor_id,
            )
        else:
            logger.debug(
                "Promotion %s already held by booking %s", current.code, booking_id,
            )
        return Outcome.accepted(receipt)

    def release_promotion_usage(self, promotion_id: str, client_id: str, booking_id: str) -> bool:
        """Give back a one-time claim whose booking did not complete."""
        released = self._repository.release_redeemed_client(promotion_id, client_id, booking_id)
        if released:
            logger.info(
                "Promotion %s claim by client %s released (booking %s)",
                promotion_id, client_id, booking_id,
            )
        return released

    # ── management ───────────────────────────────────────────

    def create_promotion(
        self,
        request: PromotionCreateRequest,
        *,
        actor_id: Optional[str] = None,
    ) -> Outcome[Promotion]:
        code = request.code
        if code is None:
            for _ in range(MAX_CODE_ATTEMPTS):
                candidate = generate_code()
                if not self._repository.code_taken(candidate, request.branch_id):
                    code = candidate
                    break
            else:
                return Outcome.rejected(
                    ReasonCode.CONFLICT, "Could not generate a unique promotion code.",
                    "create_promotion")

        promotion = Promotion(
            promotion_id=str(uuid.uuid4()),
            code=code,
            name=request.name.strip(),
            description=request.description,
            branch_id=request.branch_id,
            discount_kind=request.discount_kind,
            discount_value=request.discount_value,
            applicable_to=request.applicable_to,
            specific_item_ids=request.specific_item_ids,
            usage_policy=request.usage_policy,
            max_uses=request.max_uses,
            start_date=request.start_date,
            end_date=request.end_date,
            active=request.active,
            created_at=self._clock.now_utc(),
        )
        if not self._repository.add(promotion):
            return Outcome.rejected(
                ReasonCode.CONFLICT,
                f"Promotion code '{code}' already exists for this branch scope.",
                "create_promotion")

        logger.info(
            "Promotion %s created (%s, branch %s) by %s",
            promotion.code, promotion.promotion_id, promotion.branch_id or "global", actor_id,
        )
        self._publish(
            PROMOTION_CODE_CREATED_V1, build_code_created_payload(promotion),
            promotion.branch_id, actor_id,
        )
        return Outcome.accepted(promotion)

    def deactivate_promotion(
        self,
        promotion_id: str,
        *,
        actor_id: Optional[str] = None,
    ) -> Outcome[Promotion]:
        promotion = self._repository.set_active(promotion_id, False)
        if promotion is None:
            return Outcome.rejected(
                ReasonCode.NOT_FOUND, f"Promotion '{promotion_id}' not found.",
                "deactivate_promotion")
        logger.info("Promotion %s deactivated by %s", promotion.code, actor_id)
        self._publish(
            PROMOTION_CODE_DEACTIVATED_V1, build_code_deactivated_payload(promotion),
            promotion.branch_id, actor_id,
        )
        return Outcome.accepted(promotion)

    def get_promotion(self, promotion_id: str) -> Optional[Promotion]:
        return self._repository.get(promotion_id)

    def active_promotions(self, branch_id: Optional[str]) -> List[Promotion]:
        """Active, currently valid promotions for a branch, global ones included."""
        now = self._clock.now_utc()
        return sorted(
            (
                p for p in self._repository.list_for_branch(branch_id)
                if p.active and p.window.contains(now)
            ),
            key=lambda p: p.code,
        )
