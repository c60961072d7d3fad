"""Per-restaurant booking rules, loaded once from a JSON document at startup.

Field names in the file are camelCase (``openTime``, ``slotIntervalMinutes``,
``seatTypes[].minParty`` ...); snake_case names are accepted as well.
"""

from __future__ import annotations

import json
import logging
from datetime import date, time
from pathlib import Path
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator
from pydantic.alias_generators import to_camel

from .domain.errors import ConfigError

logger = logging.getLogger(__name__)


class _FrozenModel(BaseModel):
    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True, extra="forbid")


class SeatTypeRule(_FrozenModel):
    name: str = Field(min_length=1)
    min_party: int = Field(default=1, ge=1)
    max_party: int = Field(default=8, ge=1)
    total_capacity_units: Optional[int] = Field(default=None, ge=1)
    # Parties at or above the threshold take `overflow_units` capacity units.
    overflow_threshold: Optional[int] = Field(default=None, ge=1)
    overflow_units: int = Field(default=2, ge=1)

    @model_validator(mode="after")
    def _check_bounds(self) -> "SeatTypeRule":
        if self.min_party > self.max_party:
            raise ValueError(f"seat type {self.name!r}: minParty greater than maxParty")
        return self

    def capacity_units_for(self, party_size: int) -> int:
        if self.overflow_threshold is not None and party_size >= self.overflow_threshold:
            return self.overflow_units
        return 1


def _default_seat_types() -> tuple[SeatTypeRule, ...]:
    return (
        SeatTypeRule(name="counter", min_party=1, max_party=2),
        SeatTypeRule(name="table", min_party=3, max_party=8, overflow_threshold=5, overflow_units=2),
    )


class ShopConfig(_FrozenModel):
    name: str = Field(default="笑わ家")
    open_time: time = Field(default=time(17, 0))
    close_time: time = Field(default=time(22, 0))
    slot_interval_minutes: int = Field(default=30, gt=0)
    max_reservations_per_slot: int = Field(
        default=5,
        gt=0,
        validation_alias=AliasChoices(
            "maxReservationsPerSlot", "maxReservationPerSlot", "max_reservations_per_slot"
        ),
    )
    party_size_min: int = Field(default=1, ge=1)
    party_size_max: int = Field(default=8, ge=1)
    # Monday is 0, Sunday is 6.
    weekly_closed_days: frozenset[int] = Field(default=frozenset({6}))
    extra_closed_dates: frozenset[date] = Field(default=frozenset())
    timezone: str = Field(default="Asia/Tokyo")
    holiday_locale: str = Field(default="JP")
    seat_types: tuple[SeatTypeRule, ...] = Field(default_factory=_default_seat_types)

    @field_validator("weekly_closed_days")
    @classmethod
    def _check_weekdays(cls, value: frozenset[int]) -> frozenset[int]:
        bad = sorted(day for day in value if not 0 <= day <= 6)
        if bad:
            raise ValueError(f"weeklyClosedDays must be 0..6, got {bad}")
        return value

    @field_validator("timezone")
    @classmethod
    def _check_timezone(cls, value: str) -> str:
        try:
            ZoneInfo(value)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise ValueError(f"unknown timezone {value!r}") from exc
        return value

    @model_validator(mode="after")
    def _check_window(self) -> "ShopConfig":
        if self.open_time >= self.close_time:
            raise ValueError("openTime must be earlier than closeTime")
        if self.party_size_min > self.party_size_max:
            raise ValueError("partySizeMin greater than partySizeMax")
        names = [rule.name for rule in self.seat_types]
        if not names:
            raise ValueError("at least one seat type is required")
        if len(set(names)) != len(names):
            raise ValueError("seat type names must be unique")
        return self

    @property
    def zone(self) -> ZoneInfo:
        return ZoneInfo(self.timezone)

    def seat_type(self, name: str) -> Optional[SeatTypeRule]:
        for rule in self.seat_types:
            if rule.name == name:
                return rule
        return None


def load_shop_config(path: str | Path) -> ShopConfig:
    """Read and validate the shop configuration file. Raises ConfigError on any problem."""
    config_path = Path(path)
    try:
        raw = json.loads(config_path.read_text(encoding="utf-8"))
    except FileNotFoundError as exc:
        raise ConfigError(f"shop config not found: {config_path}") from exc
    except (OSError, json.JSONDecodeError) as exc:
        raise ConfigError(f"shop config unreadable: {config_path}: {exc}") from exc
    if not isinstance(raw, dict):
        raise ConfigError(f"shop config must be a JSON object: {config_path}")
    try:
        config = ShopConfig.model_validate(raw)
    except ValidationError as exc:
        raise ConfigError(f"shop config invalid: {config_path}: {exc}") from exc
    logger.info(
        "Loaded shop config %s: %s-%s every %d min, %d per slot",
        config_path,
        config.open_time.strftime("%H:%M"),
        config.close_time.strftime("%H:%M"),
        config.slot_interval_minutes,
        config.max_reservations_per_slot,
    )
    return config
