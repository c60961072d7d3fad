from functools import lru_cache

from fastapi import Depends

from .config import Settings, get_settings
from .domain.errors import ConfigError
from .domain.repositories import CalendarGateway, EventStore, HolidayCalendar
from .infrastructure.calendar_gateway import EventStoreCalendarGateway
from .infrastructure.google_calendar import GoogleCalendarEventStore
from .infrastructure.holidays import holiday_calendar_for
from .infrastructure.memory_store import InMemoryEventStore
from .shop_config import ShopConfig, load_shop_config


@lru_cache
def get_shop_config() -> ShopConfig:
    return load_shop_config(get_settings().shop_config_path)


@lru_cache
def get_event_store() -> EventStore:
    settings = get_settings()
    if settings.calendar_backend == "memory":
        return InMemoryEventStore()
    try:
        return GoogleCalendarEventStore.from_service_account_file(
            settings.google_credentials_file,
            settings.google_calendar_id,
            time_zone=get_shop_config().timezone,
        )
    except (OSError, ValueError) as exc:
        raise ConfigError(f"cannot load calendar credentials: {settings.google_credentials_file}") from exc


@lru_cache
def get_holidays() -> HolidayCalendar:
    return holiday_calendar_for(get_shop_config().holiday_locale)


async def get_gateway(
    config: ShopConfig = Depends(get_shop_config),
    store: EventStore = Depends(get_event_store),
    settings: Settings = Depends(get_settings),
) -> CalendarGateway:
    return EventStoreCalendarGateway(store, config, timeout=settings.gateway_timeout_seconds)
