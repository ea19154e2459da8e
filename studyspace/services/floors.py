"""Floor ordering for sub-spaces within a location."""

from __future__ import annotations

import re
from functools import lru_cache
from typing import Iterable, Optional

from studyspace.domain.location_rules import ORDINAL_WORDS
from studyspace.domain.models import SpaceEntry


UNKNOWN_FLOOR_PRIORITY = 100

_BASEMENT_LEVELS: tuple[tuple[str, int], ...] = (("b1", -1), ("b2", -2), ("b3", -3))
_ORDINAL_NUMBER_PATTERN = re.compile(r"(\d+)(st|nd|rd|th)\b")
_LEADING_NUMBER_PATTERN = re.compile(r"^\d+")


def _numeric_floor(name: str) -> Optional[int]:
    match = _ORDINAL_NUMBER_PATTERN.search(name)
    if match is not None:
        return int(match.group(1))
    match = _LEADING_NUMBER_PATTERN.match(name)
    if match is not None:
        return int(match.group(0))
    return None


@lru_cache(maxsize=1024)
def floor_priority(short_name: str) -> int:
    """Integer sort key, basement levels first and unknown labels last."""
    name = short_name.lower()

    for token, level in _BASEMENT_LEVELS:
        if token in name:
            return level

    numeric = _numeric_floor(name)
    if numeric is not None:
        return numeric

    if "lower ground" in name or "basement" in name:
        return -1
    if "ground" in name:
        return 0
    for level, word in enumerate(ORDINAL_WORDS, start=1):
        if word in name:
            return level
    return UNKNOWN_FLOOR_PRIORITY


def sort_by_floor(entries: Iterable[SpaceEntry]) -> list[SpaceEntry]:
    return sorted(
        entries,
        key=lambda entry: (floor_priority(entry.short_name), entry.short_name.lower()),
    )
