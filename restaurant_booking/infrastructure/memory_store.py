from __future__ import annotations

import uuid
from datetime import datetime

from ..domain.repositories import CalendarEvent


class InMemoryEventStore:
    """Process-local EventStore for development runs without calendar credentials."""

    def __init__(self) -> None:
        self.events: dict[str, CalendarEvent] = {}

    async def list_events(self, time_min: datetime, time_max: datetime) -> list[CalendarEvent]:
        selected = [e for e in self.events.values() if time_min <= e.start < time_max]
        return sorted(selected, key=lambda e: e.start)

    async def insert_event(
        self,
        *,
        summary: str,
        description: str,
        start: datetime,
        end: datetime,
    ) -> str:
        event_id = uuid.uuid4().hex
        self.events[event_id] = CalendarEvent(start=start, end=end, summary=summary, description=description)
        return event_id
