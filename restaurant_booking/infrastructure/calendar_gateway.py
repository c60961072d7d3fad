from __future__ import annotations

import asyncio
import logging
from datetime import date, datetime, time, timedelta
from typing import Awaitable, TypeVar

from ..domain.errors import GatewayUnavailable
from ..domain.repositories import CalendarGateway, EventStore
from ..domain.services import slot_start
from ..models import BookedEvent, BookingDetails, SlotTime
from ..shop_config import ShopConfig

logger = logging.getLogger(__name__)

T = TypeVar("T")


def format_description(details: BookingDetails) -> str:
    return "\n".join(
        [
            f"name: {details.customer_name}",
            f"party_size: {details.party_size}",
            f"seat_type: {details.seat_type}",
            f"capacity_units: {details.capacity_units}",
        ]
    )


class EventStoreCalendarGateway(CalendarGateway):
    """Reads slot occupancy from, and writes bookings to, the external event store."""

    def __init__(self, store: EventStore, config: ShopConfig, *, timeout: float = 10.0) -> None:
        self.store = store
        self.config = config
        self.timeout = timeout

    async def _call(self, awaitable: Awaitable[T], operation: str) -> T:
        try:
            return await asyncio.wait_for(awaitable, timeout=self.timeout)
        except asyncio.TimeoutError as exc:
            logger.warning("Calendar %s timed out after %.1fs", operation, self.timeout)
            raise GatewayUnavailable(f"calendar {operation} timed out") from exc

    async def count_bookings_by_slot(self, target: date) -> dict[SlotTime, int]:
        zone = self.config.zone
        day_start = datetime.combine(target, time.min, tzinfo=zone)
        day_end = datetime.combine(target + timedelta(days=1), time.min, tzinfo=zone)
        events = await self._call(self.store.list_events(day_start, day_end), "list")

        counts: dict[SlotTime, int] = {}
        for event in events:
            local = event.start.astimezone(zone)
            if local.date() != target:
                continue
            slot = SlotTime(local.hour * 60 + local.minute)
            counts[slot] = counts.get(slot, 0) + 1
        logger.debug("Booked counts for %s: %s", target, {str(k): v for k, v in sorted(counts.items())})
        return counts

    async def commit_booking(self, target: date, slot: SlotTime, details: BookingDetails) -> BookedEvent:
        starts_at = slot_start(target, slot, self.config)
        ends_at = starts_at + timedelta(minutes=self.config.slot_interval_minutes)
        event_id = await self._call(
            self.store.insert_event(
                summary=f"{self.config.name} 予約",
                description=format_description(details),
                start=starts_at,
                end=ends_at,
            ),
            "insert",
        )
        logger.info("Booking committed: %s %s %s x%d", event_id, target, slot, details.party_size)
        return BookedEvent(
            event_id=event_id,
            date=target,
            slot=slot,
            starts_at=starts_at,
            ends_at=ends_at,
            customer_name=details.customer_name,
            party_size=details.party_size,
            seat_type=details.seat_type,
            capacity_units=details.capacity_units,
        )
