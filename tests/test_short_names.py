from __future__ import annotations

import pytest

from studyspace.services.canonicalizer import canonicalize_location
from studyspace.services.short_names import extract_short_name


def short_name(raw_name: str) -> str:
    return extract_short_name(raw_name, canonicalize_location(raw_name))


def test_science_library_levels() -> None:
    assert short_name("[LIB] Science Library - Level 2") == "Level 2"
    assert short_name("[LIB] Science Library - Level 3") == "Level 3"


@pytest.mark.parametrize(
    ("raw_name", "expected"),
    [
        ("Student Centre - Level B1 Quiet Zone", "Level B1"),
        ("Student Centre 2nd Floor East", "2nd Floor"),
        ("Student Centre - Ground Floor", "Ground Floor"),
        ("Student Centre Mezzanine Study", "Mezzanine"),
        ("Student Centre - Level 1", "Level 1"),
    ],
)
def test_student_centre_keeps_floor_only(raw_name: str, expected: str) -> None:
    assert short_name(raw_name) == expected


@pytest.mark.parametrize(
    ("raw_name", "expected"),
    [
        ("Main Library - Reading Room", "Reading Room"),
        ("Main Library | South Wing", "South Wing"),
        ("[LIB] Graduate Hub: Quiet Room", "Quiet Room"),
    ],
)
def test_text_after_separator_is_used(raw_name: str, expected: str) -> None:
    assert short_name(raw_name) == expected


def test_remainder_with_floor_keyword_is_used_without_separator() -> None:
    assert short_name("Main Library Basement Stacks") == "Basement Stacks"


def test_floor_label_found_when_location_not_in_name() -> None:
    raw_name = "[ISD] Updated 01/02/2024 - Chadwick 2nd Floor Cluster"

    assert canonicalize_location(raw_name) == "Chadwick Building"
    assert short_name(raw_name) == "2nd Floor Cluster"


def test_purely_numeric_name_is_returned() -> None:
    assert short_name("101") == "101"


def test_name_equal_to_location_has_no_label() -> None:
    assert short_name("[LIB] Graduate Hub") == ""
    assert short_name("Library: Science Library") == ""


def test_location_prefix_is_stripped() -> None:
    assert short_name("[LIB] Cruciform Hub North") == "North"


def test_unmatched_name_is_returned_cleaned() -> None:
    assert short_name("[LIB] IOE Library - Newsam Library") == "IOE Library - Newsam Library"


def test_fallback_location_yields_room_label() -> None:
    assert short_name("XYZ Annex - Room 5") == "Room 5"


def test_explicit_location_is_matched_case_insensitively() -> None:
    assert extract_short_name("main library - reading room", "Main Library") == "reading room"
