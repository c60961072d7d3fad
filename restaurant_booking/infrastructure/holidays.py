from datetime import date

import jpholiday

from ..domain.errors import ConfigError
from ..domain.repositories import HolidayCalendar


class JapaneseHolidayCalendar:
    def is_public_holiday(self, target: date) -> bool:
        return jpholiday.is_holiday(target)


class NoHolidays:
    def is_public_holiday(self, target: date) -> bool:
        return False


def holiday_calendar_for(locale: str) -> HolidayCalendar:
    key = locale.strip().upper()
    if key == "JP":
        return JapaneseHolidayCalendar()
    if key in ("", "NONE"):
        return NoHolidays()
    raise ConfigError(f"unsupported holiday locale: {locale!r}")
