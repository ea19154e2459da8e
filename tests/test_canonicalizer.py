from __future__ import annotations

import pytest

from studyspace.domain.location_rules import LOCATION_RULES, LocationRule
from studyspace.services.canonicalizer import (
    canonicalize_location,
    clean_name,
    match_rule,
    name_variants,
    resolve_location,
    strip_edition_suffixes,
)


@pytest.mark.parametrize(
    ("raw_name", "expected"),
    [
        ("[LIB] Science Library - Level 2", "Science Library"),
        ("Library: Main Library", "Main Library"),
        ("[LIB]   Main   Library -   Reading Room", "Main Library"),
        ("Main Library (Group Study) - Updated 01/02/2024", "Main Library"),
        ("Student Centre - Level B1", "Student Centre"),
        ("[LIB] IOE Library - Newsam Library", "Institute of Education Library"),
        ("Institute of Education - Level 4", "Institute of Education Library"),
        ("[LIB] GOSH Library", "Great Ormond Street Institute of Child Health Library"),
        ("Language and Speech Science Centre", "Language & Speech Science Library"),
        ("Queen Square Neurology Reading Room", "Queen Square Library - Neurology"),
        ("[ISD] Christopher Ingold Building - G20 Cluster", "Christopher Ingold Building"),
        ("[ISD] Taviton Street Cluster", "Gordon Square and Taviton Street"),
        ("[ISD] Wolfson Centre PC Room", "GOSICH - Wolfson Centre"),
        ("Pool Street Level 2", "East Campus - Pool St"),
        ("40 Bernard St Basement", "40 Bernard Street"),
        ("Geography NWW110A", "UCL Geography NWW110A"),
    ],
)
def test_known_names_map_to_canonical_location(raw_name: str, expected: str) -> None:
    assert canonicalize_location(raw_name) == expected


def test_marshgate_rules_depend_on_library_keyword() -> None:
    assert canonicalize_location("Marshgate Library Level 3") == "UCL East Library (Marshgate)"
    assert canonicalize_location("Marshgate - Hosts Desk") == "Marshgate - Hosts"
    assert canonicalize_location("Marshgate 5th Floor") == "East Campus - Marshgate"


def test_tags_and_prefix_do_not_change_location() -> None:
    plain = canonicalize_location("Science Library - Level 3")
    assert canonicalize_location("[LIB] Science Library - Level 3") == plain
    assert canonicalize_location("Library: Science Library - Level 3") == plain


def test_unknown_name_falls_back_to_text_before_dash() -> None:
    assert canonicalize_location("XYZ Annex - Room 5") == "XYZ Annex"


def test_unknown_name_without_dash_is_returned_whole() -> None:
    assert canonicalize_location("  Lonely   Hall ") == "Lonely Hall"


def test_leading_dash_does_not_produce_empty_location() -> None:
    assert canonicalize_location("- Annex") == "- Annex"


def test_trailing_dash_keeps_whole_name() -> None:
    assert canonicalize_location("XYZ Annex -") == "XYZ Annex -"
    assert canonicalize_location("XYZ Annex --") == "XYZ Annex --"


def test_canonicalization_never_returns_empty_for_non_empty_input() -> None:
    assert canonicalize_location("[LIB]") == "[LIB]"


def test_clean_name_strips_tags_prefix_and_extra_whitespace() -> None:
    assert clean_name("[ISD]  Library:   Foster   Court ") == "Foster Court"


def test_name_variants_remove_group_study_and_editions() -> None:
    variants = name_variants("Main Library (Group Study) v2.1 - 01/02/2024")

    assert variants[0] == "main library (group study) v2.1 - 01/02/2024"
    assert variants[1] == "main library v2.1 - 01/02/2024"
    assert variants[2] == "main library (group study)"


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("Study Hub Spring 2024", "Study Hub"),
        ("Annex Jan 2023", "Annex"),
        ("Hall - 01/02/23 - 05/06/23", "Hall"),
        ("Pavilion 2022", "Pavilion"),
        ("Cluster v3", "Cluster"),
    ],
)
def test_edition_suffixes_are_removed(text: str, expected: str) -> None:
    assert strip_edition_suffixes(text) == expected


def test_version_pattern_requires_word_boundary() -> None:
    assert strip_edition_suffixes("Gov1 Suite") == "Gov1 Suite"


def test_first_matching_rule_in_table_order_wins() -> None:
    rules = (
        LocationRule("Specific", all_of=("north", "wing")),
        LocationRule("Generic", any_of=("wing",)),
    )

    assert match_rule(("north wing",), rules) == "Specific"
    assert match_rule(("south wing",), rules) == "Generic"
    assert match_rule(("annex",), rules) is None


def test_rule_order_is_evaluated_before_variant_order() -> None:
    rules = (
        LocationRule("From Second Variant", any_of=("beta",)),
        LocationRule("From First Variant", any_of=("alpha",)),
    )

    assert match_rule(("alpha", "beta"), rules) == "From Second Variant"


def test_none_of_excludes_a_match() -> None:
    rule = LocationRule("East Campus", all_of=("marshgate",), none_of=("library",))

    assert rule.matches("marshgate level 1")
    assert not rule.matches("marshgate library")


def test_resolve_location_accepts_alternative_rule_table() -> None:
    rules = (LocationRule("Annex Building", any_of=("annex",)),)

    assert resolve_location("XYZ Annex - Room 5", rules) == "Annex Building"
    assert resolve_location("Main Library", rules) == "Main Library"


def test_every_rule_in_default_table_has_a_condition() -> None:
    for rule in LOCATION_RULES:
        assert rule.canonical
        assert rule.any_of or rule.all_of
