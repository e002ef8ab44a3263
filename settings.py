from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional


_SENSOR_URL_ENV = "SENSOR_URL"
_SENSOR_TIMEOUT_ENV = "SENSOR_TIMEOUT_SECONDS"
_DATA_ROOT_ENV = "WEATHER_DATA_ROOT"
_TIMEZONE_ENV = "WEATHER_TIMEZONE"
_SCHEDULE_TIMEZONE_ENV = "SCHEDULE_TIMEZONE"
_SCHEDULER_ENABLED_ENV = "SCHEDULER_ENABLED"
_LOG_LEVEL_ENV = "LOG_LEVEL"

_TRUTHY = {"1", "true", "yes", "on"}
_FALSY = {"0", "false", "no", "off"}


@dataclass(frozen=True)
class Settings:
    sensor_url: str
    sensor_timeout: float
    data_root_path: str
    timezone: Optional[str]
    schedule_timezone: str
    scheduler_enabled: bool
    log_level: str


def _read_str_env(name: str, default: str) -> str:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    return candidate or default


def _read_optional_env(name: str, default: Optional[str]) -> Optional[str]:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    return candidate or None


def _read_timeout(default: float) -> float:
    value = os.getenv(_SENSOR_TIMEOUT_ENV)
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    try:
        parsed = float(candidate)
    except ValueError:
        return default
    return parsed if parsed > 0 else default


def _read_bool_env(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip().lower()
    if candidate in _TRUTHY:
        return True
    if candidate in _FALSY:
        return False
    return default


def _read_log_level(default: str) -> str:
    value = os.getenv(_LOG_LEVEL_ENV)
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    return candidate.upper()


@lru_cache
def get_settings() -> Settings:
    return Settings(
        sensor_url=_read_str_env(_SENSOR_URL_ENV, "http://esp32-weather.local/info"),
        sensor_timeout=_read_timeout(10.0),
        data_root_path=_read_str_env(_DATA_ROOT_ENV, "./data"),
        timezone=_read_optional_env(_TIMEZONE_ENV, None),
        schedule_timezone=_read_str_env(_SCHEDULE_TIMEZONE_ENV, "Asia/Kolkata"),
        scheduler_enabled=_read_bool_env(_SCHEDULER_ENABLED_ENV, True),
        log_level=_read_log_level("INFO"),
    )
