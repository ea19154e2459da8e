"""Domain-level validation rules for the aggregation engine."""

from __future__ import annotations

from dataclasses import dataclass

from studyspace.utils.config import Settings


@dataclass(frozen=True)
class EngineConfig:
    sort_settle_delay_seconds: float
    high_availability_max_occupancy: int
    low_availability_min_occupancy: int
    request_timeout_seconds: float
    excluded_location_keywords: tuple[str, ...] = ()

    @classmethod
    def from_settings(cls, settings: Settings) -> "EngineConfig":
        return cls(
            sort_settle_delay_seconds=settings.sort_settle_delay_seconds,
            high_availability_max_occupancy=settings.high_availability_max_occupancy,
            low_availability_min_occupancy=settings.low_availability_min_occupancy,
            request_timeout_seconds=settings.request_timeout_seconds,
            excluded_location_keywords=tuple(settings.excluded_location_keywords),
        )


def validate_engine_config(config: EngineConfig) -> None:
    if config.sort_settle_delay_seconds < 0.0:
        raise ValueError("sort_settle_delay_seconds must be >= 0")
    if not 0 <= config.high_availability_max_occupancy <= 100:
        raise ValueError("high_availability_max_occupancy must be between 0 and 100")
    if not 0 <= config.low_availability_min_occupancy <= 100:
        raise ValueError("low_availability_min_occupancy must be between 0 and 100")
    if config.high_availability_max_occupancy >= config.low_availability_min_occupancy:
        raise ValueError(
            "high_availability_max_occupancy must be below low_availability_min_occupancy"
        )
    if config.request_timeout_seconds <= 0.0:
        raise ValueError("request_timeout_seconds must be > 0")
    for keyword in config.excluded_location_keywords:
        if not keyword.strip():
            raise ValueError("excluded_location_keywords must not contain blank entries")
