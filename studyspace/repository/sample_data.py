"""Sample feed payloads shaped like the live sensor and library endpoints."""

from __future__ import annotations

from typing import Any


def _survey(
    survey_id: int,
    name: str,
    free: int,
    occupied: int,
    maps: list[dict[str, Any]] | None = None,
) -> dict[str, Any]:
    survey: dict[str, Any] = {
        "id": survey_id,
        "name": name,
        "sensors_absent": free,
        "sensors_occupied": occupied,
    }
    if maps is not None:
        survey["maps"] = maps
    return survey


def _map(map_id: int, name: str, free: int, occupied: int) -> dict[str, Any]:
    return {
        "id": map_id,
        "name": name,
        "sensors_absent": free,
        "sensors_occupied": occupied,
    }


SAMPLE_SURVEYS_PAYLOAD: dict[str, Any] = {
    "ok": True,
    "surveys": [
        _survey(101, "[LIB] Science Library - Level 2", 45, 35),
        _survey(102, "[LIB] Science Library - Level 3", 32, 28),
        _survey(103, "[LIB] Main Library - Reading Room", 28, 72),
        _survey(104, "[LIB] Main Library - Group Study Area", 15, 35),
        _survey(105, "Student Centre - Ground Floor", 120, 80, [_map(501, "Ground Floor", 120, 80)]),
        _survey(106, "Student Centre - Level 1", 85, 65),
        _survey(107, "[LIB] IOE Library - Newsam Library", 42, 38),
        _survey(108, "[LIB] Bartlett Library", 18, 22),
        _survey(109, "[LIB] Cruciform Hub", 35, 85),
        _survey(110, "[LIB] Graduate Hub", 25, 15),
        _survey(111, "[LIB] SSEES Library", 22, 28),
        _survey(112, "[LIB] UCL East Library", 80, 40),
        _survey(
            201,
            "[ISD] Christopher Ingold Building",
            35,
            25,
            [
                _map(601, "Ground Floor", 20, 10),
                _map(602, "First Floor", 15, 15),
            ],
        ),
        _survey(202, "[ISD] Torrington Place - 1st Floor Cluster", 40, 30),
        _survey(203, "[ISD] Bidborough House Cluster", 10, 0),
        _survey(204, "[ISD] Foster Court - Room 215", 0, 0),
    ],
}

SAMPLE_LOCATIONS_PAYLOAD: dict[str, Any] = {
    "ok": True,
    "locations": [
        {
            "lid": 1001,
            "name": "Library: Science Library",
            "description": "",
            "terms": "UCL staff and students only",
        },
        {
            "lid": 1002,
            "name": "Main Library",
            "description": "Bookable group study rooms in the Wilkins Building",
        },
        {
            "lid": 1003,
            "name": "Library: Senate House",
            "description": "UCL Library location",
        },
    ],
}
