import datetime as dt
from typing import List, Optional

from pydantic import BaseModel

from .models import BookedEvent, DayAvailability, DayStatus, DaySummary


class DayAvailabilityRead(BaseModel):
    date: dt.date
    is_closed: bool
    slots: List[str]

    @classmethod
    def from_domain(cls, *, day: DayAvailability) -> "DayAvailabilityRead":
        return cls(date=day.date, is_closed=day.is_closed, slots=[str(s) for s in day.open_slots])


class DaySummaryRead(BaseModel):
    date: dt.date
    status: DayStatus

    @classmethod
    def from_domain(cls, *, summary: DaySummary) -> "DaySummaryRead":
        return cls(date=summary.date, status=summary.status)


class BookingCreate(BaseModel):
    # Presence is checked by the booking rules so every rejection has the same shape.
    date: Optional[dt.date] = None
    time: Optional[str] = None
    name: Optional[str] = None
    party_size: Optional[int] = None
    seat_type: Optional[str] = None


class BookedEventRead(BaseModel):
    event_id: str
    date: dt.date
    time: str
    starts_at: dt.datetime
    ends_at: dt.datetime
    party_size: int
    seat_type: str
    capacity_units: int

    @classmethod
    def from_domain(cls, *, event: BookedEvent) -> "BookedEventRead":
        return cls(
            event_id=event.event_id,
            date=event.date,
            time=str(event.slot),
            starts_at=event.starts_at,
            ends_at=event.ends_at,
            party_size=event.party_size,
            seat_type=event.seat_type,
            capacity_units=event.capacity_units,
        )
