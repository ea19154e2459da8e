"""Domain models for study space aggregation."""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional


class SpaceCategory(str, Enum):
    STUDY_SPACE = "study_space"
    COMPUTER_CLUSTER = "computer_cluster"


class AvailabilityBand(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class SortOption(str, Enum):
    BY_NAME = "name"
    BY_FREE_SEATS = "free_seats"
    BY_AVAILABILITY_RATIO = "availability_ratio"


class SortOrder(str, Enum):
    ASCENDING = "ascending"
    DESCENDING = "descending"


def occupancy_percentage(total_seats: int, free_seats: int) -> int:
    """Occupied share of seats, rounded half up; 0 when there is no seat data."""
    if total_seats <= 0:
        return 0
    occupied = total_seats - free_seats
    return int(math.floor(100 * occupied / total_seats + 0.5))


def availability_band(
    occupancy: int,
    *,
    high_max_occupancy: int = 33,
    low_min_occupancy: int = 66,
) -> AvailabilityBand:
    """Map an occupancy percentage to its indicator band."""
    if occupancy < high_max_occupancy:
        return AvailabilityBand.HIGH
    if occupancy > low_min_occupancy:
        return AvailabilityBand.LOW
    return AvailabilityBand.MEDIUM


@dataclass(frozen=True)
class SortKey:
    option: SortOption = SortOption.BY_NAME
    order: SortOrder = SortOrder.ASCENDING


@dataclass(frozen=True)
class FilterState:
    category: Optional[SpaceCategory] = None
    availability: Optional[AvailabilityBand] = None
    search_text: str = ""


@dataclass(frozen=True)
class SurveyMap:
    map_id: int
    name: str
    sensors_absent: int
    sensors_occupied: int


@dataclass(frozen=True)
class SensorSurvey:
    survey_id: int
    name: str
    sensors_absent: int
    sensors_occupied: int
    maps: tuple[SurveyMap, ...] = ()
    # Maps listed upstream, including ones dropped as malformed.
    reported_map_count: int = 0

    @property
    def is_split_across_maps(self) -> bool:
        return max(self.reported_map_count, len(self.maps)) > 1


@dataclass(frozen=True)
class LibraryLocation:
    location_id: int
    name: str
    description: str = ""
    terms: str = ""


@dataclass(frozen=True)
class SpaceRecord:
    source_id: str
    raw_name: str
    description: str
    free_seats: int
    total_seats: int

    @property
    def has_seat_data(self) -> bool:
        return self.total_seats > 0


@dataclass(frozen=True)
class SpaceEntry:
    record: SpaceRecord
    location: str
    short_name: str
    category: SpaceCategory

    @property
    def source_id(self) -> str:
        return self.record.source_id

    @property
    def raw_name(self) -> str:
        return self.record.raw_name

    @property
    def description(self) -> str:
        return self.record.description

    @property
    def free_seats(self) -> int:
        return self.record.free_seats

    @property
    def total_seats(self) -> int:
        return self.record.total_seats

    @property
    def has_seat_data(self) -> bool:
        return self.record.has_seat_data

    @property
    def occupancy_percentage(self) -> int:
        return occupancy_percentage(self.total_seats, self.free_seats)

    @property
    def availability_percentage(self) -> int:
        return 100 - self.occupancy_percentage


@dataclass(frozen=True)
class SeatSummary:
    """Seat totals shared by location, category and global views."""

    total_seats: int
    free_seats: int
    occupancy_percentage: int

    @property
    def occupied_seats(self) -> int:
        return self.total_seats - self.free_seats

    @property
    def availability_percentage(self) -> int:
        return 100 - self.occupancy_percentage


@dataclass(frozen=True)
class LocationGroup:
    location: str
    entries: tuple[SpaceEntry, ...]
    seats: SeatSummary
    availability_band: AvailabilityBand

    @property
    def total_seats(self) -> int:
        return self.seats.total_seats

    @property
    def free_seats(self) -> int:
        return self.seats.free_seats

    @property
    def occupied_seats(self) -> int:
        return self.seats.occupied_seats

    @property
    def occupancy_percentage(self) -> int:
        return self.seats.occupancy_percentage

    @property
    def availability_percentage(self) -> int:
        return self.seats.availability_percentage

    @property
    def has_seat_data(self) -> bool:
        return any(entry.has_seat_data for entry in self.entries)


@dataclass(frozen=True)
class CategoryGroup:
    category: SpaceCategory
    entries: tuple[SpaceEntry, ...]
    seats: SeatSummary
    availability_band: AvailabilityBand

    @property
    def total_seats(self) -> int:
        return self.seats.total_seats

    @property
    def free_seats(self) -> int:
        return self.seats.free_seats

    @property
    def occupancy_percentage(self) -> int:
        return self.seats.occupancy_percentage

    @property
    def availability_percentage(self) -> int:
        return self.seats.availability_percentage


@dataclass(frozen=True)
class SpaceStatistics:
    total_spaces: int
    seats: SeatSummary
    last_updated: Optional[datetime] = None

    @property
    def total_seats(self) -> int:
        return self.seats.total_seats

    @property
    def free_seats(self) -> int:
        return self.seats.free_seats

    @property
    def occupied_seats(self) -> int:
        return self.seats.occupied_seats

    @property
    def occupancy_percentage(self) -> int:
        return self.seats.occupancy_percentage

    @property
    def availability_percentage(self) -> int:
        return self.seats.availability_percentage


@dataclass(frozen=True)
class MapAnnotation:
    location: str
    latitude: float
    longitude: float
    total_seats: int
    free_seats: int
    occupancy_percentage: int


@dataclass(frozen=True)
class RecordSnapshot:
    """One published record set; ``version`` changes on every refresh."""

    version: int
    surveys: tuple[SensorSurvey, ...] = ()
    locations: tuple[LibraryLocation, ...] = ()
    fetched_at: Optional[datetime] = None

    @property
    def record_count(self) -> int:
        return len(self.surveys) + len(self.locations)
