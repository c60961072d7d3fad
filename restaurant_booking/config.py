from functools import lru_cache
import os
from typing import Literal

from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError

from .domain.errors import ConfigError


load_dotenv()


class Settings(BaseModel):
    shop_config_path: str = Field(default="shop-config.json")
    calendar_backend: Literal["google", "memory"] = Field(default="google")
    google_calendar_id: str = Field(default="primary")
    google_credentials_file: str = Field(default="credentials.json")
    gateway_timeout_seconds: float = Field(default=10.0, gt=0)
    month_summary_concurrency: int = Field(default=5, ge=1)
    log_level: str = Field(default="INFO")


def _env_number(name: str, cast: type, default: object) -> object:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return cast(raw)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"invalid value for {name}: {raw!r}") from exc


@lru_cache
def get_settings() -> Settings:
    fields = Settings.model_fields
    try:
        return _build_settings(fields)
    except ValidationError as exc:
        raise ConfigError(f"invalid settings: {exc}") from exc


def _build_settings(fields: dict) -> Settings:
    return Settings(
        shop_config_path=os.getenv("SHOP_CONFIG_PATH", fields["shop_config_path"].default),
        calendar_backend=os.getenv("CALENDAR_BACKEND", fields["calendar_backend"].default),
        google_calendar_id=os.getenv("GOOGLE_CALENDAR_ID", fields["google_calendar_id"].default),
        google_credentials_file=os.getenv(
            "GOOGLE_CREDENTIALS_FILE", fields["google_credentials_file"].default
        ),
        gateway_timeout_seconds=_env_number(
            "GATEWAY_TIMEOUT_SECONDS", float, fields["gateway_timeout_seconds"].default
        ),
        month_summary_concurrency=_env_number(
            "MONTH_SUMMARY_CONCURRENCY", int, fields["month_summary_concurrency"].default
        ),
        log_level=os.getenv("LOG_LEVEL", fields["log_level"].default),
    )
