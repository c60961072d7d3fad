from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time
from enum import StrEnum
from functools import total_ordering
from typing import Optional


class DayStatus(StrEnum):
    OPEN = "open"
    CLOSED = "closed"
    FULL = "full"


@total_ordering
@dataclass(frozen=True)
class SlotTime:
    """Time-of-day at slot granularity, stored as minutes since midnight."""

    minutes: int

    def __post_init__(self) -> None:
        if not 0 <= self.minutes < 24 * 60:
            raise ValueError(f"slot minutes out of range: {self.minutes}")

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, SlotTime):
            return NotImplemented
        return self.minutes < other.minutes

    def __str__(self) -> str:
        return f"{self.minutes // 60:02d}:{self.minutes % 60:02d}"

    @classmethod
    def from_time(cls, value: time) -> "SlotTime":
        return cls(value.hour * 60 + value.minute)

    @classmethod
    def parse(cls, value: str) -> "SlotTime":
        hour, sep, minute = value.strip().partition(":")
        if not sep or not hour.isdigit() or not minute.isdigit():
            raise ValueError(f"invalid slot time: {value!r}")
        return cls.from_time(time(int(hour), int(minute)))

    def to_time(self) -> time:
        return time(self.minutes // 60, self.minutes % 60)


@dataclass(frozen=True)
class DayAvailability:
    date: date
    is_closed: bool
    open_slots: tuple[SlotTime, ...] = ()


@dataclass(frozen=True)
class DaySummary:
    date: date
    status: DayStatus


@dataclass(frozen=True)
class BookingRequest:
    # Fields stay optional so a missing value is reported by validation.
    date: Optional[date] = None
    slot: Optional[SlotTime] = None
    customer_name: Optional[str] = None
    party_size: Optional[int] = None
    seat_type: Optional[str] = None


@dataclass(frozen=True)
class BookingDetails:
    customer_name: str
    party_size: int
    seat_type: str
    capacity_units: int = 1


@dataclass(frozen=True)
class BookedEvent:
    event_id: str
    date: date
    slot: SlotTime
    starts_at: datetime
    ends_at: datetime
    customer_name: str
    party_size: int
    seat_type: str
    capacity_units: int = 1
