"""
Salon Event Bus — Domain Event
================================
An immutable notice that something already happened in an engine.
Events are emitted after the state write succeeded.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Mapping, Optional


@dataclass(frozen=True)
class DomainEvent:
    event_type: str
    payload: Mapping[str, Any]
    occurred_at: datetime
    branch_id: Optional[str] = None
    actor_id: Optional[str] = None
    event_id: uuid.UUID = field(default_factory=uuid.uuid4)

    @property
    def source_engine(self) -> str:
        return self.event_type.split(".")[0]
