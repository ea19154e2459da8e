"""Map free-text feed names onto canonical campus location names."""

from __future__ import annotations

import re
from functools import lru_cache
from typing import Optional, Sequence

from studyspace.domain.location_rules import LOCATION_RULES, LocationRule


_TAG_PATTERN = re.compile(r"\[(?:LIB|ISD)\]")
_LIBRARY_PREFIX = "Library: "
_WHITESPACE_PATTERN = re.compile(r"\s+")
_GROUP_STUDY_PATTERN = re.compile(r"\(?group study\)?", re.IGNORECASE)

# Suffixes that vary between survey editions of the same space.
_EDITION_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"\s*-?\s*\d{1,2}/\d{1,2}/\d{2,4}"),
    re.compile(r"(Jan|Feb|Mar|Apr|May|Jun|Jul|Aug|Sep|Oct|Nov|Dec)\s+\d{4}", re.IGNORECASE),
    re.compile(r"(Spring|Summer|Fall|Winter|Autumn)\s+\d{4}", re.IGNORECASE),
    re.compile(r"\b\d{4}\b"),
    re.compile(r"\bv\d+(\.\d+)*\b", re.IGNORECASE),
)


def clean_name(raw_name: str) -> str:
    """Drop feed tags and the catalog prefix, then normalize whitespace."""
    text = _TAG_PATTERN.sub("", raw_name).replace(_LIBRARY_PREFIX, "")
    return _WHITESPACE_PATTERN.sub(" ", text).strip()


def _collapse(text: str) -> str:
    return _WHITESPACE_PATTERN.sub(" ", text).strip()


def strip_edition_suffixes(text: str) -> str:
    for pattern in _EDITION_PATTERNS:
        text = pattern.sub("", text)
    return _collapse(text)


def name_variants(cleaned_name: str) -> tuple[str, ...]:
    """Lower-cased forms of a cleaned name tried against the rule table."""
    lowered = cleaned_name.lower()
    return (
        lowered,
        _collapse(_GROUP_STUDY_PATTERN.sub("", lowered)),
        strip_edition_suffixes(lowered),
    )


def match_rule(
    variants: Sequence[str],
    rules: Sequence[LocationRule] = LOCATION_RULES,
) -> Optional[str]:
    for rule in rules:
        if any(rule.matches(variant) for variant in variants):
            return rule.canonical
    return None


def _fallback_location(cleaned_name: str) -> str:
    # Empty pieces do not count, so a trailing dash keeps the whole name.
    pieces = [piece for piece in cleaned_name.split("-") if piece]
    if len(pieces) >= 2 and pieces[0].strip():
        return pieces[0].strip()
    return cleaned_name


def resolve_location(
    raw_name: str,
    rules: Sequence[LocationRule] = LOCATION_RULES,
) -> str:
    cleaned = clean_name(raw_name)
    matched = match_rule(name_variants(cleaned), rules)
    if matched is not None:
        return matched
    return _fallback_location(cleaned) or raw_name.strip() or raw_name


@lru_cache(maxsize=4096)
def canonicalize_location(raw_name: str) -> str:
    """Return the canonical location for ``raw_name`` using ``LOCATION_RULES``.

    Rules are evaluated in table order and each rule is tried against every
    name variant before moving on, so a specific rule always beats a generic
    one regardless of which variant it happens to match. Names that match no
    rule fall back to the text before the first dash, or the whole cleaned
    name when there is no usable dash prefix.
    """

    return resolve_location(raw_name)
