"""Derive the sub-space label shown beneath a canonical location."""

from __future__ import annotations

import re
from functools import lru_cache
from typing import Optional

from studyspace.domain.location_rules import (
    AREA_KEYWORDS,
    FLOOR_KEYWORDS,
    SUB_SPACE_SEPARATORS,
)
from studyspace.services.canonicalizer import clean_name


STUDENT_CENTRE = "Student Centre"

_STUDENT_CENTRE_FLOORS: tuple[tuple[re.Pattern[str], str], ...] = (
    (re.compile(r".*Level\s+B(\d+).*", re.IGNORECASE), r"Level B\1"),
    (re.compile(r".*?(\d+)(st|nd|rd|th)\s+Floor.*", re.IGNORECASE), r"\1\2 Floor"),
    (re.compile(r".*?Ground\s+Floor.*", re.IGNORECASE), "Ground Floor"),
    (re.compile(r".*?Mezzanine.*", re.IGNORECASE), "Mezzanine"),
)

_DATE_PREFIX_PATTERN = re.compile(
    r"(Original|Updated)\s+\d{1,2}/\d{1,2}/\d{2,4}\s*-?\s*",
    re.IGNORECASE,
)
_FLOOR_PATTERN = re.compile(
    r"(\d+(st|nd|rd|th)\s+Floor|Room\s+\w+|Level\s+\w+|B\d+"
    r"|First|Second|Third|Fourth|Fifth|Sixth|Ground)\s*.*",
    re.IGNORECASE,
)
_PURE_NUMBER_PATTERN = re.compile(r"^\d+$")


def _student_centre_floor(cleaned: str) -> Optional[str]:
    for pattern, template in _STUDENT_CENTRE_FLOORS:
        match = pattern.match(cleaned)
        if match is not None:
            return match.expand(template)
    return None


def _after_location(cleaned: str, location: str) -> Optional[str]:
    index = cleaned.lower().find(location.lower())
    if index < 0:
        return None
    remainder = cleaned[index + len(location):].strip()
    if remainder[:1] in SUB_SPACE_SEPARATORS:
        label = remainder[1:].strip()
        if label:
            return label
    lowered = remainder.lower()
    if remainder and any(keyword in lowered for keyword in AREA_KEYWORDS):
        return remainder
    return None


@lru_cache(maxsize=4096)
def extract_short_name(raw_name: str, location: str) -> str:
    """Return the floor, room or area label of ``raw_name`` within ``location``.

    An empty string means the record describes the location as a whole.
    """

    cleaned = clean_name(raw_name)

    if location == STUDENT_CENTRE:
        floor = _student_centre_floor(cleaned)
        if floor is not None:
            return floor

    label = _after_location(cleaned, location)
    if label is not None:
        return label

    lowered = cleaned.lower()
    if any(keyword in lowered for keyword in FLOOR_KEYWORDS):
        cleaned = _DATE_PREFIX_PATTERN.sub("", cleaned)
        match = _FLOOR_PATTERN.search(cleaned)
        if match is not None:
            return match.group(0)

    if _PURE_NUMBER_PATTERN.match(cleaned):
        return cleaned

    if cleaned.lower() == location.lower():
        return ""

    if cleaned.lower().startswith(location.lower()):
        remainder = cleaned[len(location):].strip()
        if remainder:
            if remainder[0] in "-:":
                return remainder[1:].strip()
            return remainder

    return cleaned
