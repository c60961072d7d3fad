from __future__ import annotations

from datetime import date, datetime
from typing import Callable, Optional

from ..models import BookingRequest, SlotTime
from ..shop_config import ShopConfig
from .errors import Rejection, RejectionCode
from .repositories import HolidayCalendar


def is_closed(target: date, config: ShopConfig, holidays: HolidayCalendar) -> bool:
    """Weekly off-day, explicit closure date, or public holiday."""
    if target.weekday() in config.weekly_closed_days:
        return True
    if target in config.extra_closed_dates:
        return True
    return holidays.is_public_holiday(target)


def generate_slots(target: date, config: ShopConfig) -> list[SlotTime]:
    """
    Every `open_time + k * interval` strictly before `close_time`.
    A booking may not start at closing time.
    """
    start = SlotTime.from_time(config.open_time).minutes
    end = SlotTime.from_time(config.close_time).minutes
    return [SlotTime(m) for m in range(start, end, config.slot_interval_minutes)]


def slot_start(target: date, slot: SlotTime, config: ShopConfig) -> datetime:
    return datetime.combine(target, slot.to_time(), tzinfo=config.zone)


def _missing_fields(request: BookingRequest, config: ShopConfig) -> Optional[Rejection]:
    missing = [
        name
        for name, value in (
            ("date", request.date),
            ("slot", request.slot),
            ("customer_name", request.customer_name),
            ("party_size", request.party_size),
            ("seat_type", request.seat_type),
        )
        if value is None or (isinstance(value, str) and not value.strip())
    ]
    if missing:
        return Rejection(RejectionCode.MISSING_FIELD, f"missing required fields: {', '.join(missing)}")
    return None


def _party_size_range(request: BookingRequest, config: ShopConfig) -> Optional[Rejection]:
    size = request.party_size
    if size is not None and not config.party_size_min <= size <= config.party_size_max:
        return Rejection(
            RejectionCode.PARTY_SIZE_OUT_OF_RANGE,
            f"party size must be between {config.party_size_min} and {config.party_size_max}",
        )
    return None


def _seat_type_bounds(request: BookingRequest, config: ShopConfig) -> Optional[Rejection]:
    if request.seat_type is None or request.party_size is None:
        return None
    rule = config.seat_type(request.seat_type)
    if rule is None:
        return Rejection(RejectionCode.UNKNOWN_SEAT_TYPE, f"unknown seat type: {request.seat_type}")
    if request.party_size > rule.max_party:
        code = RejectionCode.COUNTER_MAX_EXCEEDED if rule.name == "counter" else RejectionCode.SEAT_MAX_EXCEEDED
        return Rejection(code, f"{rule.name} seat max exceeded")
    if request.party_size < rule.min_party:
        code = RejectionCode.TABLE_MIN_NOT_MET if rule.name == "table" else RejectionCode.SEAT_MIN_NOT_MET
        return Rejection(code, f"{rule.name} seat min not met")
    return None


_RULES: tuple[Callable[[BookingRequest, ShopConfig], Optional[Rejection]], ...] = (
    _missing_fields,
    _party_size_range,
    _seat_type_bounds,
)


def validate_booking(request: BookingRequest, config: ShopConfig) -> Optional[Rejection]:
    """
    Pure validation of the request fields, in fixed order; the first failing rule wins.
    Slot availability is checked separately against live counts.
    """
    for rule in _RULES:
        rejection = rule(request, config)
        if rejection is not None:
            return rejection
    return None
