from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Protocol

from ..models import BookedEvent, BookingDetails, SlotTime


@dataclass(frozen=True)
class CalendarEvent:
    start: datetime
    end: datetime
    summary: str = ""
    description: str = ""


class EventStore(Protocol):
    """External calendar holding one event per booking. Datetimes are timezone-aware."""

    async def list_events(self, time_min: datetime, time_max: datetime) -> list[CalendarEvent]: ...

    async def insert_event(
        self,
        *,
        summary: str,
        description: str,
        start: datetime,
        end: datetime,
    ) -> str: ...


class HolidayCalendar(Protocol):
    def is_public_holiday(self, target: date) -> bool: ...


class CalendarGateway(Protocol):
    async def count_bookings_by_slot(self, target: date) -> dict[SlotTime, int]: ...

    async def commit_booking(self, target: date, slot: SlotTime, details: BookingDetails) -> BookedEvent: ...
