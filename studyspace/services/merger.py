"""Turn parsed feed rows into one deduplicated list of space entries."""

from __future__ import annotations

from typing import Iterable, Sequence

from studyspace.domain.models import (
    LibraryLocation,
    SensorSurvey,
    SpaceEntry,
    SpaceRecord,
)
from studyspace.services.canonicalizer import canonicalize_location
from studyspace.services.short_names import extract_short_name
from studyspace.services.statistics import classify_category
from studyspace.utils.logger import get_logger


logger = get_logger(__name__)

DEFAULT_SURVEY_DESCRIPTION = "UCL study space"
DEFAULT_LOCATION_DESCRIPTION = "UCL Library location"
DEFAULT_EXCLUDED_KEYWORDS: tuple[str, ...] = ("bidborough",)

_LIB_TAG = "[LIB]"
_ISD_TAG = "[ISD]"
_LIBRARY_PREFIX = "Library: "
_SURVEY_PART_SEPARATOR = " - "


def _strip_tags(name: str) -> str:
    return name.replace(f"{_LIB_TAG} ", "").replace(f"{_ISD_TAG} ", "")


def expand_survey(survey: SensorSurvey) -> list[SpaceRecord]:
    """Records contributed by one survey.

    Surveys split across several floor maps become one record per distinct
    map name, and the parent survey is dropped even when some of its maps
    were malformed. Single-map surveys are kept whole, with the map name as
    their description.
    """

    if survey.is_split_across_maps:
        records: list[SpaceRecord] = []
        seen_maps: set[str] = set()
        for survey_map in survey.maps:
            if survey_map.name in seen_maps:
                continue
            seen_maps.add(survey_map.name)
            records.append(
                SpaceRecord(
                    source_id=f"{survey.survey_id}_{survey_map.map_id}",
                    raw_name=f"{survey.name} - {survey_map.name}",
                    description=f"Part of {_strip_tags(survey.name)}",
                    free_seats=survey_map.sensors_absent,
                    total_seats=survey_map.sensors_absent + survey_map.sensors_occupied,
                )
            )
        return records

    map_names = ", ".join(survey_map.name for survey_map in survey.maps if survey_map.name)
    description = map_names or DEFAULT_SURVEY_DESCRIPTION
    if _ISD_TAG in survey.name:
        description += " - Computer cluster"
    elif _LIB_TAG in survey.name:
        description += " - Library study space"

    return [
        SpaceRecord(
            source_id=str(survey.survey_id),
            raw_name=survey.name,
            description=description,
            free_seats=survey.sensors_absent,
            total_seats=survey.sensors_absent + survey.sensors_occupied,
        )
    ]


def location_to_record(location: LibraryLocation) -> SpaceRecord:
    """Catalog locations carry no seat data; they only describe a place."""
    description = location.description
    if not description or description == DEFAULT_LOCATION_DESCRIPTION:
        description = f"UCL library and study space located at {location.name}. "
        if location.terms:
            description += f"Terms: {location.terms}"
    return SpaceRecord(
        source_id=f"lib_{location.location_id}",
        raw_name=location.name,
        description=description,
        free_seats=0,
        total_seats=0,
    )


def relevant_locations(
    locations: Iterable[LibraryLocation],
    surveys: Iterable[SensorSurvey],
) -> list[LibraryLocation]:
    """Keep catalog locations that name a place some survey reports on."""
    survey_prefixes = [
        survey.name.split(_SURVEY_PART_SEPARATOR, 1)[0] for survey in surveys
    ]
    kept: list[LibraryLocation] = []
    for location in locations:
        name = location.name.replace(_LIBRARY_PREFIX, "")
        if any(name in prefix for prefix in survey_prefixes):
            kept.append(location)
    return kept


def _is_excluded(raw_name: str, excluded_keywords: Sequence[str]) -> bool:
    lowered = raw_name.lower()
    return any(keyword.lower() in lowered for keyword in excluded_keywords)


def to_entry(record: SpaceRecord) -> SpaceEntry:
    location = canonicalize_location(record.raw_name)
    return SpaceEntry(
        record=record,
        location=location,
        short_name=extract_short_name(record.raw_name, location),
        category=classify_category(record.raw_name, record.description),
    )


def merge_records(
    surveys: Sequence[SensorSurvey],
    locations: Sequence[LibraryLocation],
    excluded_keywords: Sequence[str] = DEFAULT_EXCLUDED_KEYWORDS,
) -> list[SpaceEntry]:
    """Merge both feeds into entries unique per ``(location, short_name)``.

    Sensor records are visited before catalog records and the first record
    seen for a key is kept. Records without seat data stay in the result so
    the location directory still lists them.
    """

    records: list[SpaceRecord] = []
    for survey in surveys:
        records.extend(expand_survey(survey))
    records.extend(
        location_to_record(location)
        for location in relevant_locations(locations, surveys)
    )

    entries: list[SpaceEntry] = []
    seen: set[tuple[str, str]] = set()
    dropped = 0
    for record in records:
        if _is_excluded(record.raw_name, excluded_keywords):
            dropped += 1
            continue
        entry = to_entry(record)
        key = (entry.location, entry.short_name)
        if key in seen:
            dropped += 1
            continue
        seen.add(key)
        entries.append(entry)

    logger.debug(
        "Records merged | input=%s | kept=%s | dropped=%s",
        len(records),
        len(entries),
        dropped,
    )
    return entries
