"""Ordered matching tables for campus location names.

The tables are configuration data. Order is significant: the first rule that
matches wins, so building-specific rules sit above the generic ones whose
keywords they contain.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class LocationRule:
    """Substring predicate over a lower-cased name, paired with its result."""

    canonical: str
    any_of: tuple[str, ...] = ()
    all_of: tuple[str, ...] = ()
    none_of: tuple[str, ...] = ()

    def matches(self, text: str) -> bool:
        if self.any_of and not any(keyword in text for keyword in self.any_of):
            return False
        if not all(keyword in text for keyword in self.all_of):
            return False
        return not any(keyword in text for keyword in self.none_of)


LIBRARY_RULES: tuple[LocationRule, ...] = (
    LocationRule("Main Library", any_of=("main library",)),
    LocationRule("Science Library", any_of=("science library",)),
    LocationRule("Student Centre", any_of=("student centre",)),
    LocationRule(
        "Institute of Education Library",
        any_of=("ioe", "institute of education"),
    ),
    LocationRule("Cruciform Hub", any_of=("cruciform",)),
    LocationRule("SSEES Library", any_of=("ssees",)),
    LocationRule(
        "Great Ormond Street Institute of Child Health Library",
        any_of=("gosh", "child health"),
    ),
    LocationRule("UCL Bartlett Library", any_of=("bartlett",)),
    LocationRule("Language & Speech Science Library", all_of=("language", "speech")),
    LocationRule("The Joint Library of Ophthalmology", any_of=("ophthalmology",)),
    LocationRule("School of Pharmacy Library", any_of=("pharmacy",)),
    LocationRule("Institute of Archaeology Library", any_of=("archaeology",)),
    LocationRule("Royal Free Hospital Medical Library", any_of=("royal free",)),
    LocationRule("Graduate Hub", any_of=("graduate hub",)),
    LocationRule("Queen Square Library - Neurology", any_of=("queen square", "neurology")),
    LocationRule("Institute of Orthopaedics Library", any_of=("orthopaedics",)),
    LocationRule("UCL East Library (Marshgate)", any_of=("ucl east library",)),
    LocationRule("UCL East Library (Marshgate)", all_of=("marshgate", "library")),
)

CLUSTER_RULES: tuple[LocationRule, ...] = (
    LocationRule("Anatomy Hub", any_of=("anatomy hub",)),
    LocationRule("Torrington Place", any_of=("torrington",)),
    LocationRule("Foster Court", any_of=("foster court",)),
    LocationRule("Christopher Ingold Building", any_of=("christopher ingold",)),
    LocationRule("Bedford Way Buildings", any_of=("bedford way",)),
    LocationRule("Chadwick Building", any_of=("chadwick",)),
    LocationRule("Gordon Square and Taviton Street", any_of=("gordon square", "taviton")),
    LocationRule("GOSICH - Wolfson Centre", any_of=("gosich", "wolfson")),
    LocationRule("Chandler House", any_of=("chandler",)),
    LocationRule("Roberts Building", any_of=("roberts",)),
    LocationRule("Pearson Building", any_of=("pearson",)),
    LocationRule("Gordon House", any_of=("gordon house",)),
    LocationRule("Bentham House", any_of=("bentham",)),
    LocationRule("SENIT Suite", any_of=("senit",)),
)

CAMPUS_RULES: tuple[LocationRule, ...] = (
    LocationRule("Marshgate - Hosts", all_of=("marshgate", "host")),
    LocationRule("East Campus - Marshgate", all_of=("marshgate",), none_of=("library",)),
    LocationRule("East Campus - Pool St", any_of=("pool st", "pool street")),
    LocationRule("40 Bernard Street", any_of=("bernard",)),
    LocationRule("30 Guildford Street", any_of=("guildford",)),
    LocationRule("UCL Geography NWW110A", all_of=("geography", "nww110a")),
)

LOCATION_RULES: tuple[LocationRule, ...] = LIBRARY_RULES + CLUSTER_RULES + CAMPUS_RULES


# Sub-space vocabulary used by short-name extraction and floor ordering.
ORDINAL_WORDS: tuple[str, ...] = (
    "first",
    "second",
    "third",
    "fourth",
    "fifth",
    "sixth",
    "seventh",
    "eighth",
    "ninth",
    "tenth",
)

FLOOR_KEYWORDS: tuple[str, ...] = (
    "floor",
    "level",
    "b1",
    "b2",
    "ground",
    "basement",
    *ORDINAL_WORDS[:6],
    "room",
)

AREA_KEYWORDS: tuple[str, ...] = FLOOR_KEYWORDS + ("area", "zone")

SUB_SPACE_SEPARATORS: tuple[str, ...] = ("-", "|", ":")


# Category classification keywords.
CLUSTER_NAME_KEYWORDS: tuple[str, ...] = ("computer", "cluster", "[isd]")
CLUSTER_DESCRIPTION_KEYWORDS: tuple[str, ...] = ("computer", "cluster")
