"""Application settings loaded from environment variables."""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional


def _env_str(name: str, default: str) -> str:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    return value.strip()


def _env_optional_str(name: str) -> Optional[str]:
    value = os.getenv(name)
    if value is None or not value.strip():
        return None
    return value.strip()


def _env_float(name: str, default: float) -> float:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    try:
        return float(value)
    except ValueError as exc:
        raise ValueError(f"{name} must be a number, got {value!r}") from exc


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    try:
        return int(value)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer, got {value!r}") from exc


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _env_csv(name: str, default: tuple[str, ...]) -> tuple[str, ...]:
    value = os.getenv(name)
    if value is None:
        return default
    return tuple(item.strip().lower() for item in value.split(",") if item.strip())


@dataclass(frozen=True)
class Settings:
    app_name: str = "Study Space Aggregator"
    app_version: str = "0.1.0"
    log_level: str = "INFO"

    api_base_url: str = "https://uclapi.com"
    api_token: Optional[str] = None
    surveys_path: str = "/workspaces/sensors/summary"
    locations_path: str = "/libcal/space/locations"
    request_timeout_seconds: float = 10.0
    use_sample_feeds: bool = True

    sort_settle_delay_seconds: float = 0.2
    high_availability_max_occupancy: int = 33
    low_availability_min_occupancy: int = 66
    excluded_location_keywords: tuple[str, ...] = ("bidborough",)

    default_campus_latitude: float = 51.5248
    default_campus_longitude: float = -0.1336


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Build settings once per process; call ``cache_clear()`` to reload."""
    api_token = _env_optional_str("UCL_API_TOKEN")
    return Settings(
        app_name=_env_str("APP_NAME", Settings.app_name),
        app_version=_env_str("APP_VERSION", Settings.app_version),
        log_level=_env_str("LOG_LEVEL", Settings.log_level),
        api_base_url=_env_str("UCL_API_BASE_URL", Settings.api_base_url).rstrip("/"),
        api_token=api_token,
        surveys_path=_env_str("UCL_API_SURVEYS_PATH", Settings.surveys_path),
        locations_path=_env_str("UCL_API_LOCATIONS_PATH", Settings.locations_path),
        request_timeout_seconds=_env_float(
            "UCL_API_TIMEOUT_SECONDS",
            Settings.request_timeout_seconds,
        ),
        use_sample_feeds=_env_bool("USE_SAMPLE_FEEDS", api_token is None),
        sort_settle_delay_seconds=_env_float(
            "SORT_SETTLE_DELAY_SECONDS",
            Settings.sort_settle_delay_seconds,
        ),
        high_availability_max_occupancy=_env_int(
            "HIGH_AVAILABILITY_MAX_OCCUPANCY",
            Settings.high_availability_max_occupancy,
        ),
        low_availability_min_occupancy=_env_int(
            "LOW_AVAILABILITY_MIN_OCCUPANCY",
            Settings.low_availability_min_occupancy,
        ),
        excluded_location_keywords=_env_csv(
            "EXCLUDED_LOCATION_KEYWORDS",
            Settings.excluded_location_keywords,
        ),
        default_campus_latitude=_env_float(
            "DEFAULT_CAMPUS_LATITUDE",
            Settings.default_campus_latitude,
        ),
        default_campus_longitude=_env_float(
            "DEFAULT_CAMPUS_LONGITUDE",
            Settings.default_campus_longitude,
        ),
    )
