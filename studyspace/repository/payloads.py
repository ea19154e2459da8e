"""Pydantic shapes of the two upstream feed payloads."""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from studyspace.domain.models import LibraryLocation, SensorSurvey, SurveyMap


class SurveyMapPayload(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: int
    name: str
    sensors_absent: int = Field(ge=0)
    sensors_occupied: int = Field(ge=0)

    def to_domain(self) -> SurveyMap:
        return SurveyMap(
            map_id=self.id,
            name=self.name,
            sensors_absent=self.sensors_absent,
            sensors_occupied=self.sensors_occupied,
        )


class SurveyPayload(BaseModel):
    """Survey row; ``maps`` is validated separately so one bad map is dropped alone."""

    model_config = ConfigDict(extra="ignore")

    id: int
    name: str = Field(min_length=1)
    sensors_absent: int = Field(ge=0)
    sensors_occupied: int = Field(ge=0)
    maps: Optional[list[Any]] = None


class LocationPayload(BaseModel):
    model_config = ConfigDict(extra="ignore")

    lid: int
    name: str = Field(min_length=1)
    description: Optional[str] = None
    terms: Optional[str] = None

    def to_domain(self) -> LibraryLocation:
        return LibraryLocation(
            location_id=self.lid,
            name=self.name,
            description=self.description if self.description is not None else "",
            terms=self.terms or "",
        )


def survey_to_domain(payload: SurveyPayload, maps: list[SurveyMap]) -> SensorSurvey:
    return SensorSurvey(
        survey_id=payload.id,
        name=payload.name,
        sensors_absent=payload.sensors_absent,
        sensors_occupied=payload.sensors_occupied,
        maps=tuple(maps),
        reported_map_count=len(payload.maps or []),
    )
