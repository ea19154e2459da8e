"""Grouping of space entries and seat statistics per location and category."""

from __future__ import annotations

from datetime import datetime
from typing import Callable, Hashable, Iterable, Optional, Sequence

import numpy as np
import pandas as pd

from studyspace.domain.location_rules import (
    CLUSTER_DESCRIPTION_KEYWORDS,
    CLUSTER_NAME_KEYWORDS,
)
from studyspace.domain.models import (
    CategoryGroup,
    LocationGroup,
    SeatSummary,
    SpaceCategory,
    SpaceEntry,
    SpaceStatistics,
    availability_band,
)


_SEAT_COLUMNS = ["group_key", "total_seats", "free_seats"]


def classify_category(raw_name: str, description: str) -> SpaceCategory:
    name = raw_name.lower()
    details = description.lower()
    if any(keyword in name for keyword in CLUSTER_NAME_KEYWORDS):
        return SpaceCategory.COMPUTER_CLUSTER
    if any(keyword in details for keyword in CLUSTER_DESCRIPTION_KEYWORDS):
        return SpaceCategory.COMPUTER_CLUSTER
    return SpaceCategory.STUDY_SPACE


def _occupancy_column(total: pd.Series, free: pd.Series) -> np.ndarray:
    """Vectorized round-half-up occupancy; zero-seat rows map to 0."""
    safe_total = total.clip(lower=1).to_numpy(dtype=float)
    occupied = (total - free).to_numpy(dtype=float)
    raw = np.floor(100.0 * occupied / safe_total + 0.5)
    return np.where(total.to_numpy() > 0, raw, 0).astype(int)


def aggregate_seats(
    entries: Iterable[SpaceEntry],
    key: Callable[[SpaceEntry], Hashable],
) -> dict[Hashable, SeatSummary]:
    """Sum seats per group over entries that carry occupancy data."""
    frame = pd.DataFrame(
        [
            {
                "group_key": key(entry),
                "total_seats": entry.total_seats,
                "free_seats": entry.free_seats,
            }
            for entry in entries
            if entry.has_seat_data
        ],
        columns=_SEAT_COLUMNS,
    )
    if frame.empty:
        return {}

    totals = (
        frame.groupby("group_key", sort=False)
        .agg(total_seats=("total_seats", "sum"), free_seats=("free_seats", "sum"))
        .reset_index()
    )
    totals["occupancy_percentage"] = _occupancy_column(
        totals["total_seats"], totals["free_seats"]
    )
    return {
        row.group_key: SeatSummary(
            total_seats=int(row.total_seats),
            free_seats=int(row.free_seats),
            occupancy_percentage=int(row.occupancy_percentage),
        )
        for row in totals.itertuples(index=False)
    }


EMPTY_SEATS = SeatSummary(total_seats=0, free_seats=0, occupancy_percentage=0)


def summarize_seats(entries: Iterable[SpaceEntry]) -> SeatSummary:
    return aggregate_seats(entries, lambda _entry: "all").get("all", EMPTY_SEATS)


def _by_occupancy(entries: Iterable[SpaceEntry]) -> tuple[SpaceEntry, ...]:
    return tuple(sorted(entries, key=lambda entry: entry.occupancy_percentage))


def build_location_group(
    location: str,
    entries: Sequence[SpaceEntry],
    *,
    seats: Optional[SeatSummary] = None,
    high_max_occupancy: int = 33,
    low_min_occupancy: int = 66,
) -> LocationGroup:
    summary = seats if seats is not None else summarize_seats(entries)
    return LocationGroup(
        location=location,
        entries=_by_occupancy(entries),
        seats=summary,
        availability_band=availability_band(
            summary.occupancy_percentage,
            high_max_occupancy=high_max_occupancy,
            low_min_occupancy=low_min_occupancy,
        ),
    )


def group_by_location(
    entries: Sequence[SpaceEntry],
    *,
    high_max_occupancy: int = 33,
    low_min_occupancy: int = 66,
) -> dict[str, LocationGroup]:
    """Group entries by canonical location, in first-seen order."""
    members: dict[str, list[SpaceEntry]] = {}
    for entry in entries:
        members.setdefault(entry.location, []).append(entry)

    seats = aggregate_seats(entries, lambda entry: entry.location)
    return {
        location: build_location_group(
            location,
            grouped,
            seats=seats.get(location, EMPTY_SEATS),
            high_max_occupancy=high_max_occupancy,
            low_min_occupancy=low_min_occupancy,
        )
        for location, grouped in members.items()
    }


def group_by_category(
    entries: Sequence[SpaceEntry],
    *,
    high_max_occupancy: int = 33,
    low_min_occupancy: int = 66,
) -> dict[SpaceCategory, CategoryGroup]:
    members: dict[SpaceCategory, list[SpaceEntry]] = {}
    for entry in entries:
        members.setdefault(entry.category, []).append(entry)

    seats = aggregate_seats(entries, lambda entry: entry.category)
    groups: dict[SpaceCategory, CategoryGroup] = {}
    for category in SpaceCategory:
        grouped = members.get(category)
        if not grouped:
            continue
        summary = seats.get(category, EMPTY_SEATS)
        groups[category] = CategoryGroup(
            category=category,
            entries=_by_occupancy(grouped),
            seats=summary,
            availability_band=availability_band(
                summary.occupancy_percentage,
                high_max_occupancy=high_max_occupancy,
                low_min_occupancy=low_min_occupancy,
            ),
        )
    return groups


def compute_statistics(
    entries: Sequence[SpaceEntry],
    last_updated: Optional[datetime] = None,
) -> SpaceStatistics:
    return SpaceStatistics(
        total_spaces=len(entries),
        seats=summarize_seats(entries),
        last_updated=last_updated,
    )
