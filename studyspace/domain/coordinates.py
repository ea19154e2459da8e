"""Building coordinates used to place location pins on the campus map."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Mapping, Optional


@dataclass(frozen=True)
class Coordinate:
    latitude: float
    longitude: float


DEFAULT_CAMPUS_COORDINATE = Coordinate(51.5248, -0.1336)

BUILDING_COORDINATES: dict[str, Coordinate] = {
    # Libraries and study spaces
    "Main Library": Coordinate(51.524776, -0.133583),
    "Science Library": Coordinate(51.5235, -0.1329),
    "Student Centre": Coordinate(51.5252, -0.1328),
    "Institute of Education Library": Coordinate(51.5226, -0.1295),
    "Cruciform Hub": Coordinate(51.524776, -0.133583),
    "SSEES Library": Coordinate(51.525371, -0.131646),
    "Great Ormond Street Institute of Child Health Library": Coordinate(51.523166, -0.120194),
    "UCL Bartlett Library": Coordinate(51.5265, -0.1295),
    "Language & Speech Science Library": Coordinate(51.5257, -0.1244),
    "The Joint Library of Ophthalmology": Coordinate(51.5265, -0.0887),
    "School of Pharmacy Library": Coordinate(51.525196, -0.121928),
    "Institute of Archaeology Library": Coordinate(51.5254, -0.1313),
    "Royal Free Hospital Medical Library": Coordinate(51.5526, -0.1672),
    "Graduate Hub": Coordinate(51.5245, -0.1341),
    "Queen Square Library - Neurology": Coordinate(51.52184, -0.12282),
    "Institute of Orthopaedics Library": Coordinate(51.6177, -0.3027),
    "UCL East Library (Marshgate)": Coordinate(51.5386, -0.0209),
    # Computer clusters
    "Anatomy Hub": Coordinate(51.5241, -0.1339),
    "Torrington Place": Coordinate(51.521906, -0.134348),
    "Foster Court": Coordinate(51.5235, -0.1320),
    "Christopher Ingold Building": Coordinate(51.525193, -0.132246),
    "Bedford Way Buildings": Coordinate(51.5226, -0.1281),
    "Chadwick Building": Coordinate(51.5241, -0.1310),
    "Gordon Square and Taviton Street": Coordinate(51.5243, -0.1309),
    "GOSICH - Wolfson Centre": Coordinate(51.523166, -0.120194),
    "Chandler House": Coordinate(51.525952, -0.122779),
    "Roberts Building": Coordinate(51.522995, -0.132153),
    "Pearson Building": Coordinate(51.5248, -0.1336),
    "Gordon House": Coordinate(51.5245, -0.1307),
    "Bentham House": Coordinate(51.5254, -0.1313),
    "SENIT Suite": Coordinate(51.5219, -0.1340),
    # Other campus buildings
    "East Campus - Marshgate": Coordinate(51.5403, -0.0123),
    "Marshgate - Hosts": Coordinate(51.5403, -0.0123),
    "East Campus - Pool St": Coordinate(51.5403, -0.0123),
    "40 Bernard Street": Coordinate(51.5267, -0.1277),
    "30 Guildford Street": Coordinate(51.5225, -0.1202),
    "UCL Geography NWW110A": Coordinate(51.5248, -0.1336),
    "Medical School Building": Coordinate(51.523504, -0.134937),
    "Birkbeck Malet Street": Coordinate(51.5218725, -0.1305394),
    "Rockefeller Building": Coordinate(51.5235, -0.1349),
    "Cruciform Building": Coordinate(51.524776, -0.133583),
    "Wilkins Building": Coordinate(51.524776, -0.133583),
    "Darwin Building": Coordinate(51.5226, -0.1323),
    "Drayton House": Coordinate(51.5226, -0.1305),
    "Engineering Building": Coordinate(51.5229, -0.1317),
    "Engineering Front Building": Coordinate(51.5229, -0.1317),
    "Malet Place Engineering Building": Coordinate(51.5229, -0.1317),
    "Torrington Place (1-19)": Coordinate(51.521906, -0.134348),
    "UCL at Here East": Coordinate(51.5469, -0.0225),
    "UCL East - One Pool Street": Coordinate(51.5403, -0.0123),
    "UCL East - Marshgate": Coordinate(51.5403, -0.0123),
    "Bloomsbury": Coordinate(51.522121, -0.129420),
}

BUILDING_ALIASES: dict[str, str] = {
    "UCL Institute of Education Library": "Institute of Education Library",
    "IOE Library": "Institute of Education Library",
    "GOSICH Library": "Great Ormond Street Institute of Child Health Library",
    "Child Health Library": "Great Ormond Street Institute of Child Health Library",
    "Bartlett Library": "UCL Bartlett Library",
    "Royal Free Medical Library": "Royal Free Hospital Medical Library",
    "UCL East Library": "UCL East Library (Marshgate)",
    "UCL Student Centre": "Student Centre",
    "Joint Library of Ophthalmology": "The Joint Library of Ophthalmology",
    "Institute of Ophthalmology": "The Joint Library of Ophthalmology",
    "Queen Square Library": "Queen Square Library - Neurology",
    "Cruciform": "Cruciform Building",
    "Wilkins": "Wilkins Building",
    "Main Building": "Wilkins Building",
    "Darwin": "Darwin Building",
    "Drayton": "Drayton House",
    "Engineering": "Engineering Building",
    "Engineering Front": "Engineering Front Building",
    "MPEB": "Malet Place Engineering Building",
    "Malet Place": "Malet Place Engineering Building",
    "Torrington": "Torrington Place",
    "Here East": "UCL at Here East",
    "One Pool Street": "UCL East - One Pool Street",
    "Pool Street": "UCL East - One Pool Street",
    "Marshgate": "UCL East - Marshgate",
    "UCL East Marshgate": "UCL East - Marshgate",
    "Anatomy": "Anatomy Hub",
    "Foster": "Foster Court",
    "Christopher Ingold": "Christopher Ingold Building",
    "Bedford Way": "Bedford Way Buildings",
    "Chadwick": "Chadwick Building",
    "Gordon Square": "Gordon Square and Taviton Street",
    "Taviton Street": "Gordon Square and Taviton Street",
    "Wolfson Centre": "GOSICH - Wolfson Centre",
    "Chandler": "Chandler House",
    "Roberts": "Roberts Building",
    "Pearson": "Pearson Building",
    "Bentham": "Bentham House",
    "SENIT": "SENIT Suite",
}

_KEYWORD_SPLIT = re.compile(r"[ \-:,]+")


def _clean_building_name(name: str) -> str:
    for token in ("Library: ", "[LIB]", "[ISD]"):
        name = name.replace(token, "")
    return name.strip()


def _resolve_alias(name: str, aliases: Mapping[str, str]) -> Optional[str]:
    if name in aliases:
        return aliases[name]
    lowered = name.lower()
    for alias, standard_name in aliases.items():
        if alias.lower() in lowered:
            return standard_name
    return None


def coordinate_for(
    name: str,
    *,
    default: Coordinate = DEFAULT_CAMPUS_COORDINATE,
    coordinates: Mapping[str, Coordinate] = BUILDING_COORDINATES,
    aliases: Mapping[str, str] = BUILDING_ALIASES,
) -> Coordinate:
    """Resolve a location name to a map coordinate.

    Lookup order: alias table, exact name, name containing a known building,
    a known building containing the name, then individual keywords longer
    than three characters. Unknown names fall back to ``default``.
    """

    cleaned = _clean_building_name(name)
    if not cleaned:
        return default

    standard_name = _resolve_alias(cleaned, aliases)
    if standard_name is not None and standard_name in coordinates:
        return coordinates[standard_name]

    if cleaned in coordinates:
        return coordinates[cleaned]

    lowered = cleaned.lower()
    for key, coordinate in coordinates.items():
        if key.lower() in lowered:
            return coordinate
    for key, coordinate in coordinates.items():
        if lowered in key.lower():
            return coordinate

    keywords = [part for part in _KEYWORD_SPLIT.split(cleaned) if len(part) > 3]
    for keyword in keywords:
        for key, coordinate in coordinates.items():
            if keyword.lower() in key.lower():
                return coordinate

    return default
