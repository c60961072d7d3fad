import asyncio
import calendar
import logging
from datetime import date, timedelta
from typing import List

from ..domain.repositories import CalendarGateway, HolidayCalendar
from ..domain.services import generate_slots, is_closed
from ..models import DayAvailability, DayStatus, DaySummary, SlotTime
from ..shop_config import ShopConfig

logger = logging.getLogger(__name__)


async def available_slots(
    gateway: CalendarGateway,
    holidays: HolidayCalendar,
    *,
    config: ShopConfig,
    target: date,
) -> List[SlotTime]:
    if is_closed(target, config, holidays):
        return []
    slots = generate_slots(target, config)
    counts = await gateway.count_bookings_by_slot(target)
    return [slot for slot in slots if counts.get(slot, 0) < config.max_reservations_per_slot]


async def day_availability(
    gateway: CalendarGateway,
    holidays: HolidayCalendar,
    *,
    config: ShopConfig,
    target: date,
) -> DayAvailability:
    if is_closed(target, config, holidays):
        return DayAvailability(date=target, is_closed=True)
    slots = await available_slots(gateway, holidays, config=config, target=target)
    return DayAvailability(date=target, is_closed=False, open_slots=tuple(slots))


async def summarize_days(
    gateway: CalendarGateway,
    holidays: HolidayCalendar,
    *,
    config: ShopConfig,
    days: List[date],
    concurrency: int = 5,
) -> List[DaySummary]:
    """
    Open/closed/full status per day. Open days are resolved concurrently, at most
    `concurrency` gateway calls in flight; the result keeps the order of `days`.
    A gateway failure on any day fails the whole summary and cancels the lookups
    still pending; the first error is raised as-is.
    """
    semaphore = asyncio.Semaphore(concurrency)

    async def _summarize(target: date) -> DaySummary:
        if is_closed(target, config, holidays):
            return DaySummary(date=target, status=DayStatus.CLOSED)
        async with semaphore:
            slots = await available_slots(gateway, holidays, config=config, target=target)
        return DaySummary(date=target, status=DayStatus.OPEN if slots else DayStatus.FULL)

    try:
        async with asyncio.TaskGroup() as tg:
            tasks = [tg.create_task(_summarize(d)) for d in days]
    except ExceptionGroup as group:
        raise group.exceptions[0] from None
    return [task.result() for task in tasks]


async def month_summary(
    gateway: CalendarGateway,
    holidays: HolidayCalendar,
    *,
    config: ShopConfig,
    year: int,
    month: int,
    concurrency: int = 5,
) -> List[DaySummary]:
    if not 1 <= month <= 12:
        raise ValueError("month must be 1..12")
    _, last_day = calendar.monthrange(year, month)
    days = [date(year, month, day) for day in range(1, last_day + 1)]
    logger.debug("Summarizing %04d-%02d (%d days)", year, month, len(days))
    return await summarize_days(gateway, holidays, config=config, days=days, concurrency=concurrency)


async def week_summary(
    gateway: CalendarGateway,
    holidays: HolidayCalendar,
    *,
    config: ShopConfig,
    start: date,
    days: int = 7,
    concurrency: int = 5,
) -> List[DaySummary]:
    if days < 1:
        raise ValueError("days must be >= 1")
    window = [start + timedelta(days=offset) for offset in range(days)]
    return await summarize_days(gateway, holidays, config=config, days=window, concurrency=concurrency)
