"""Capped in-memory record of batches scored on neutral weather."""

from __future__ import annotations

from collections import deque
from datetime import datetime, timezone
from typing import Deque, Optional

from pydantic import BaseModel, ConfigDict, Field

from harvest_guard.core.config import settings


class DegradedEnvironmentEvent(BaseModel):
    """A batch was assessed with neutral defaults because its weather failed."""

    model_config = ConfigDict(frozen=True)

    batch_id: Optional[str] = None
    location: str
    reason: str
    occurred_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class DegradedEventLog:
    """Newest-first log of degraded assessments, capped at ``max_items``."""

    def __init__(self, max_items: int | None = None) -> None:
        self.max_items = max_items or settings.notification_log_size
        self._events: Deque[DegradedEnvironmentEvent] = deque(maxlen=self.max_items)

    def __len__(self) -> int:
        return len(self._events)

    def record(self, batch_id: str | None, location: str, reason: str) -> DegradedEnvironmentEvent:
        event = DegradedEnvironmentEvent(batch_id=batch_id, location=location, reason=reason)
        self._events.appendleft(event)
        return event

    def recent(
        self, limit: int | None = None, location: str | None = None
    ) -> list[DegradedEnvironmentEvent]:
        events = [e for e in self._events if location is None or e.location == location]
        return events if limit is None else events[:limit]

    def affected_locations(self) -> list[str]:
        return sorted({event.location for event in self._events})


DEGRADED_EVENTS = DegradedEventLog()

__all__ = ["DegradedEnvironmentEvent", "DegradedEventLog", "DEGRADED_EVENTS"]
