"""Feed sources and the parse layer that turns payloads into domain rows."""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional, Protocol

import requests
from pydantic import ValidationError

from studyspace.domain.models import LibraryLocation, SensorSurvey, SurveyMap
from studyspace.repository.payloads import (
    LocationPayload,
    SurveyMapPayload,
    SurveyPayload,
    survey_to_domain,
)
from studyspace.repository.sample_data import SAMPLE_LOCATIONS_PAYLOAD, SAMPLE_SURVEYS_PAYLOAD
from studyspace.utils.config import Settings, get_settings
from studyspace.utils.logger import get_logger


logger = get_logger(__name__)


class FeedError(Exception):
    """Base exception for upstream feed failures."""


class FeedFetchError(FeedError):
    """Raised when a feed cannot be retrieved or decoded."""


@dataclass(frozen=True)
class RawFeeds:
    """Undecoded payloads as returned by the two upstream endpoints."""

    surveys: Mapping[str, Any] = field(default_factory=dict)
    locations: Mapping[str, Any] = field(default_factory=dict)


class FeedSource(Protocol):
    """Anything that can produce both raw payloads.

    Implementations report upstream problems as ``FeedError``; anything else
    is treated by the engine as an unexpected failure.
    """

    def fetch(self) -> RawFeeds:
        ...


def _rows(payload: Mapping[str, Any], key: str) -> list[Any]:
    if not isinstance(payload, Mapping):
        return []
    rows = payload.get(key)
    if not isinstance(rows, list):
        return []
    return rows


def _parse_maps(raw_maps: Optional[list[Any]], survey_id: int) -> list[SurveyMap]:
    maps: list[SurveyMap] = []
    for raw_map in raw_maps or []:
        try:
            maps.append(SurveyMapPayload.model_validate(raw_map).to_domain())
        except ValidationError as exc:
            logger.debug(
                "Skipping malformed survey map | survey_id=%s | errors=%s",
                survey_id,
                exc.error_count(),
            )
    return maps


def parse_surveys(payload: Mapping[str, Any]) -> list[SensorSurvey]:
    """Typed surveys from a ``{"surveys": [...]}`` payload; bad rows are skipped."""
    surveys: list[SensorSurvey] = []
    for row in _rows(payload, "surveys"):
        try:
            parsed = SurveyPayload.model_validate(row)
        except ValidationError as exc:
            logger.debug("Skipping malformed survey | errors=%s", exc.error_count())
            continue
        surveys.append(survey_to_domain(parsed, _parse_maps(parsed.maps, parsed.id)))
    return surveys


def parse_locations(payload: Mapping[str, Any]) -> list[LibraryLocation]:
    locations: list[LibraryLocation] = []
    for row in _rows(payload, "locations"):
        try:
            locations.append(LocationPayload.model_validate(row).to_domain())
        except ValidationError as exc:
            logger.debug("Skipping malformed location | errors=%s", exc.error_count())
    return locations


class UclApiFeedSource:
    """Blocking HTTP client for the sensor summary and library location endpoints."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        session: Optional[requests.Session] = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._session = session or requests.Session()

    def _get(self, path: str) -> Mapping[str, Any]:
        url = f"{self._settings.api_base_url}{path}"
        params = {}
        if self._settings.api_token:
            params["token"] = self._settings.api_token
        try:
            response = self._session.get(
                url,
                params=params,
                timeout=self._settings.request_timeout_seconds,
            )
            response.raise_for_status()
            payload = response.json()
        except requests.exceptions.RequestException as exc:
            raise FeedFetchError(f"Request to {path} failed: {exc}") from exc
        except ValueError as exc:
            raise FeedFetchError(f"Response from {path} is not valid JSON") from exc

        if not isinstance(payload, Mapping):
            raise FeedFetchError(f"Response from {path} is not a JSON object")
        if payload.get("ok") is False:
            error = payload.get("error", "unknown error")
            raise FeedFetchError(f"Upstream rejected {path}: {error}")
        return payload

    def fetch(self) -> RawFeeds:
        surveys = self._get(self._settings.surveys_path)
        locations = self._get(self._settings.locations_path)
        logger.info(
            "Feeds fetched | surveys=%s | locations=%s",
            len(_rows(surveys, "surveys")),
            len(_rows(locations, "locations")),
        )
        return RawFeeds(surveys=surveys, locations=locations)


class StaticFeedSource:
    """Serves caller-provided payloads; ``error`` makes every fetch fail."""

    def __init__(
        self,
        surveys: Optional[Mapping[str, Any]] = None,
        locations: Optional[Mapping[str, Any]] = None,
        error: Optional[Exception] = None,
    ) -> None:
        self.surveys = surveys if surveys is not None else {"surveys": []}
        self.locations = locations if locations is not None else {"locations": []}
        self.error = error
        self.fetch_count = 0

    def fetch(self) -> RawFeeds:
        self.fetch_count += 1
        if self.error is not None:
            raise self.error
        return RawFeeds(surveys=self.surveys, locations=self.locations)


class SampleFeedSource(StaticFeedSource):
    """Built-in campus sample used for offline runs and demos."""

    def __init__(self) -> None:
        super().__init__(
            surveys=copy.deepcopy(SAMPLE_SURVEYS_PAYLOAD),
            locations=copy.deepcopy(SAMPLE_LOCATIONS_PAYLOAD),
        )


def build_feed_source(settings: Optional[Settings] = None) -> FeedSource:
    resolved = settings or get_settings()
    if resolved.use_sample_feeds:
        logger.info("Using built-in sample feeds")
        return SampleFeedSource()
    return UclApiFeedSource(resolved)
