from __future__ import annotations

from dataclasses import replace

import pytest
import requests

from studyspace.repository.feed_repository import (
    FeedFetchError,
    SampleFeedSource,
    StaticFeedSource,
    UclApiFeedSource,
    build_feed_source,
    parse_locations,
    parse_surveys,
)
from studyspace.utils.config import Settings


class _FakeResponse:
    def __init__(self, payload=None, status_code: int = 200, invalid_json: bool = False):
        self._payload = payload
        self.status_code = status_code
        self._invalid_json = invalid_json

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Server Error")

    def json(self):
        if self._invalid_json:
            raise ValueError("Expecting value")
        return self._payload


class _FakeSession:
    def __init__(self, responses):
        self._responses = responses
        self.calls = []

    def get(self, url, params=None, timeout=None):
        self.calls.append({"url": url, "params": params, "timeout": timeout})
        response = self._responses[url]
        if isinstance(response, Exception):
            raise response
        return response


def _settings(**overrides) -> Settings:
    return replace(
        Settings(),
        api_base_url="https://api.test",
        api_token="token-123",
        request_timeout_seconds=3.0,
        use_sample_feeds=False,
        **overrides,
    )


SURVEYS_URL = "https://api.test/workspaces/sensors/summary"
LOCATIONS_URL = "https://api.test/libcal/space/locations"


def test_parse_surveys_skips_malformed_rows() -> None:
    payload = {
        "surveys": [
            {"id": 1, "name": "Main Library", "sensors_absent": 3, "sensors_occupied": 4},
            {"id": 2, "sensors_absent": 1, "sensors_occupied": 1},
            {"id": 3, "name": "Science Library", "sensors_absent": -1, "sensors_occupied": 1},
            "not a survey",
        ]
    }

    surveys = parse_surveys(payload)

    assert [survey.survey_id for survey in surveys] == [1]
    assert surveys[0].maps == ()


def test_malformed_map_is_skipped_alone() -> None:
    payload = {
        "surveys": [
            {
                "id": 5,
                "name": "[ISD] Christopher Ingold Building",
                "sensors_absent": 10,
                "sensors_occupied": 10,
                "maps": [
                    None,
                    {"id": 1, "name": "Ground Floor", "sensors_absent": 5, "sensors_occupied": 5},
                    {"id": 2, "name": "First Floor"},
                    "Second Floor",
                ],
            }
        ]
    }

    (survey,) = parse_surveys(payload)

    assert [survey_map.name for survey_map in survey.maps] == ["Ground Floor"]
    assert survey.reported_map_count == 4
    assert survey.is_split_across_maps


def test_parse_surveys_tolerates_missing_list() -> None:
    assert parse_surveys({}) == []
    assert parse_surveys({"surveys": None}) == []


def test_parse_locations_skips_rows_without_id() -> None:
    payload = {
        "locations": [
            {"lid": 1, "name": "Library: Science Library", "terms": "Students only"},
            {"name": "No id"},
        ]
    }

    locations = parse_locations(payload)

    assert len(locations) == 1
    assert locations[0].location_id == 1
    assert locations[0].description == ""
    assert locations[0].terms == "Students only"


def test_api_source_fetches_both_endpoints_with_token() -> None:
    session = _FakeSession(
        {
            SURVEYS_URL: _FakeResponse({"ok": True, "surveys": [{"id": 1}]}),
            LOCATIONS_URL: _FakeResponse({"ok": True, "locations": []}),
        }
    )
    source = UclApiFeedSource(_settings(), session=session)

    feeds = source.fetch()

    assert feeds.surveys["surveys"] == [{"id": 1}]
    assert [call["url"] for call in session.calls] == [SURVEYS_URL, LOCATIONS_URL]
    assert session.calls[0]["params"] == {"token": "token-123"}
    assert session.calls[0]["timeout"] == 3.0


@pytest.mark.parametrize(
    "surveys_response",
    [
        _FakeResponse({}, status_code=503),
        _FakeResponse(invalid_json=True),
        _FakeResponse({"ok": False, "error": "Token is invalid"}),
        _FakeResponse(["not", "an", "object"]),
        requests.ConnectionError("connection refused"),
    ],
)
def test_api_source_raises_feed_fetch_error(surveys_response) -> None:
    session = _FakeSession(
        {
            SURVEYS_URL: surveys_response,
            LOCATIONS_URL: _FakeResponse({"ok": True, "locations": []}),
        }
    )
    source = UclApiFeedSource(_settings(), session=session)

    with pytest.raises(FeedFetchError):
        source.fetch()


def test_static_source_raises_configured_error() -> None:
    source = StaticFeedSource(error=FeedFetchError("offline"))

    with pytest.raises(FeedFetchError):
        source.fetch()
    assert source.fetch_count == 1


def test_sample_source_parses_cleanly() -> None:
    feeds = SampleFeedSource().fetch()

    surveys = parse_surveys(feeds.surveys)
    locations = parse_locations(feeds.locations)

    assert len(surveys) == len(feeds.surveys["surveys"])
    assert len(locations) == len(feeds.locations["locations"])


def test_sample_source_payloads_are_independent_copies() -> None:
    first = SampleFeedSource()
    first.surveys["surveys"].clear()

    assert SampleFeedSource().fetch().surveys["surveys"]


def test_build_feed_source_follows_settings() -> None:
    assert isinstance(build_feed_source(replace(Settings(), use_sample_feeds=True)), SampleFeedSource)
    assert isinstance(build_feed_source(_settings()), UclApiFeedSource)
