from __future__ import annotations

from studyspace.domain.models import LibraryLocation, SensorSurvey, SpaceCategory, SurveyMap
from studyspace.repository.feed_repository import parse_surveys
from studyspace.services.merger import (
    expand_survey,
    location_to_record,
    merge_records,
    relevant_locations,
)


def _survey(survey_id: int, name: str, free: int, occupied: int, maps=()) -> SensorSurvey:
    return SensorSurvey(
        survey_id=survey_id,
        name=name,
        sensors_absent=free,
        sensors_occupied=occupied,
        maps=tuple(maps),
    )


def test_survey_with_several_maps_expands_per_map() -> None:
    survey = _survey(
        7,
        "[ISD] Christopher Ingold Building",
        35,
        25,
        maps=[
            SurveyMap(map_id=1, name="Ground Floor", sensors_absent=20, sensors_occupied=10),
            SurveyMap(map_id=2, name="First Floor", sensors_absent=15, sensors_occupied=15),
            SurveyMap(map_id=3, name="Ground Floor", sensors_absent=5, sensors_occupied=5),
        ],
    )

    records = expand_survey(survey)

    assert [record.source_id for record in records] == ["7_1", "7_2"]
    assert records[0].raw_name == "[ISD] Christopher Ingold Building - Ground Floor"
    assert records[0].description == "Part of Christopher Ingold Building"
    assert (records[0].free_seats, records[0].total_seats) == (20, 30)
    assert (records[1].free_seats, records[1].total_seats) == (15, 30)


def test_single_map_survey_uses_map_name_as_description() -> None:
    survey = _survey(
        3,
        "Student Centre - Ground Floor",
        120,
        80,
        maps=[SurveyMap(map_id=9, name="Ground Floor", sensors_absent=120, sensors_occupied=80)],
    )

    (record,) = expand_survey(survey)

    assert record.source_id == "3"
    assert record.description == "Ground Floor"
    assert (record.free_seats, record.total_seats) == (120, 200)


def test_survey_description_reflects_tag() -> None:
    (cluster,) = expand_survey(_survey(1, "[ISD] Torrington Place", 1, 1))
    (library,) = expand_survey(_survey(2, "[LIB] Bartlett Library", 1, 1))
    (plain,) = expand_survey(_survey(3, "Graduate Hub", 1, 1))

    assert cluster.description == "UCL study space - Computer cluster"
    assert library.description == "UCL study space - Library study space"
    assert plain.description == "UCL study space"


def test_location_record_has_no_seats_and_generated_description() -> None:
    record = location_to_record(
        LibraryLocation(location_id=12, name="Science Library", terms="Students only")
    )

    assert record.source_id == "lib_12"
    assert record.total_seats == 0
    assert not record.has_seat_data
    assert record.description == (
        "UCL library and study space located at Science Library. Terms: Students only"
    )


def test_location_record_keeps_custom_description() -> None:
    record = location_to_record(
        LibraryLocation(location_id=4, name="Main Library", description="Wilkins Building")
    )

    assert record.description == "Wilkins Building"


def test_default_catalog_description_is_replaced() -> None:
    record = location_to_record(
        LibraryLocation(location_id=5, name="Main Library", description="UCL Library location")
    )

    assert record.description == "UCL library and study space located at Main Library. "


def test_only_locations_with_matching_survey_are_relevant() -> None:
    surveys = [_survey(1, "[LIB] Science Library - Level 2", 1, 1)]
    locations = [
        LibraryLocation(location_id=1, name="Library: Science Library"),
        LibraryLocation(location_id=2, name="Library: Senate House"),
    ]

    kept = relevant_locations(locations, surveys)

    assert [location.location_id for location in kept] == [1]


def test_merge_drops_excluded_and_duplicate_records() -> None:
    surveys = [
        _survey(1, "[LIB] Science Library - Level 2", 45, 35),
        _survey(2, "Science Library - Level 2", 1, 1),
        _survey(3, "[ISD] Bidborough House Cluster", 10, 0),
    ]

    entries = merge_records(surveys, [])

    assert [entry.source_id for entry in entries] == ["1"]
    assert entries[0].location == "Science Library"
    assert entries[0].short_name == "Level 2"


def test_merge_accepts_custom_exclusions() -> None:
    surveys = [
        _survey(1, "[LIB] Science Library - Level 2", 45, 35),
        _survey(2, "[ISD] Bidborough House Cluster", 10, 0),
    ]

    entries = merge_records(surveys, [], excluded_keywords=("science",))

    assert [entry.source_id for entry in entries] == ["2"]


def test_merge_keeps_zero_seat_records_and_orders_surveys_first() -> None:
    surveys = [_survey(1, "[LIB] Science Library - Level 2", 45, 35)]
    locations = [LibraryLocation(location_id=8, name="Library: Science Library")]

    entries = merge_records(surveys, locations)

    assert [entry.source_id for entry in entries] == ["1", "lib_8"]
    assert entries[1].short_name == ""
    assert not entries[1].has_seat_data


def test_merge_classifies_categories() -> None:
    surveys = [
        _survey(1, "[ISD] Torrington Place - 1st Floor", 1, 1),
        _survey(2, "[LIB] Main Library - Reading Room", 1, 1),
    ]

    entries = merge_records(surveys, [])

    assert [entry.category for entry in entries] == [
        SpaceCategory.COMPUTER_CLUSTER,
        SpaceCategory.STUDY_SPACE,
    ]


def test_merge_is_idempotent() -> None:
    surveys = [
        _survey(1, "[LIB] Science Library - Level 2", 45, 35),
        _survey(2, "[LIB] Science Library - Level 3", 32, 28),
    ]
    locations = [LibraryLocation(location_id=1, name="Science Library")]

    assert merge_records(surveys, locations) == merge_records(surveys, locations)


def test_split_survey_drops_parent_when_a_map_is_malformed() -> None:
    payload = {
        "surveys": [
            {
                "id": 5,
                "name": "[ISD] Christopher Ingold Building",
                "sensors_absent": 10,
                "sensors_occupied": 10,
                "maps": [
                    {"id": 1, "name": "Ground Floor", "sensors_absent": 5, "sensors_occupied": 5},
                    {"id": 2, "name": "First Floor"},
                ],
            }
        ]
    }

    (entry,) = merge_records(parse_surveys(payload), [])

    assert entry.source_id == "5_1"
    assert entry.raw_name == "[ISD] Christopher Ingold Building - Ground Floor"
    assert entry.record.total_seats == 10


def test_split_survey_with_no_valid_maps_contributes_nothing() -> None:
    survey = SensorSurvey(
        survey_id=6,
        name="[ISD] Foster Court",
        sensors_absent=4,
        sensors_occupied=4,
        reported_map_count=2,
    )

    assert expand_survey(survey) == []
