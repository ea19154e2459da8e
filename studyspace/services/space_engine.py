"""Session-level facade over the aggregation pipeline."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from enum import Enum
from typing import Mapping, Optional

from studyspace.domain.constraints import EngineConfig, validate_engine_config
from studyspace.domain.coordinates import Coordinate, coordinate_for
from studyspace.domain.models import (
    AvailabilityBand,
    CategoryGroup,
    FilterState,
    LocationGroup,
    MapAnnotation,
    RecordSnapshot,
    SortKey,
    SortOption,
    SortOrder,
    SpaceCategory,
    SpaceEntry,
    SpaceStatistics,
)
from studyspace.repository.feed_repository import (
    FeedError,
    FeedSource,
    parse_locations,
    parse_surveys,
)
from studyspace.services.cache import memoize, record_set_fingerprint, sorted_keys_fingerprint
from studyspace.services.floors import sort_by_floor
from studyspace.services.merger import merge_records
from studyspace.services.sorting import SortController, filter_locations, sort_locations
from studyspace.services.statistics import (
    compute_statistics,
    group_by_category,
    group_by_location,
)
from studyspace.utils.config import Settings, get_settings
from studyspace.utils.logger import get_logger


logger = get_logger(__name__)


class RefreshStatus(str, Enum):
    REFRESHED = "refreshed"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass(frozen=True)
class RefreshOutcome:
    status: RefreshStatus
    version: int
    record_count: int = 0
    error: Optional[str] = None

    def to_dict(self) -> dict[str, object]:
        return {
            "status": self.status.value,
            "version": self.version,
            "record_count": self.record_count,
            "error": self.error,
        }


class SpaceAggregationEngine:
    """Owns the current record snapshot and every view derived from it.

    All mutation happens on one event loop. The only suspension points are
    the feed fetch, which runs in a worker thread, and the sort settle delay.
    """

    def __init__(self, source: FeedSource, settings: Optional[Settings] = None) -> None:
        self._settings = settings or get_settings()
        self._config = EngineConfig.from_settings(self._settings)
        validate_engine_config(self._config)

        self._source = source
        self._snapshot = RecordSnapshot(version=0)
        self._refreshing = False
        self._filters = FilterState()
        self._sort = SortController(self._config.sort_settle_delay_seconds)
        self._default_coordinate = Coordinate(
            self._settings.default_campus_latitude,
            self._settings.default_campus_longitude,
        )

        self._entries_cache = memoize(self._record_fingerprint, self._build_entries, "entries")
        self._location_cache = memoize(
            self._record_fingerprint, self._build_location_groups, "location_groups"
        )
        self._category_cache = memoize(
            self._record_fingerprint, self._build_category_groups, "category_groups"
        )
        self._sorted_keys_cache = memoize(
            self._sorted_keys_fingerprint, self._build_sorted_keys, "sorted_keys"
        )

    # Refresh

    @property
    def snapshot(self) -> RecordSnapshot:
        return self._snapshot

    @property
    def is_refreshing(self) -> bool:
        return self._refreshing

    @property
    def last_updated(self) -> Optional[datetime]:
        return self._snapshot.fetched_at

    async def refresh(self) -> RefreshOutcome:
        """Fetch both feeds and publish a new snapshot.

        A call made while another refresh is outstanding returns SKIPPED. On
        a feed failure, or any other error raised by the source, the previous
        snapshot stays published.
        """

        if self._refreshing:
            logger.warning("Refresh skipped | reason=refresh_in_progress")
            return RefreshOutcome(
                status=RefreshStatus.SKIPPED,
                version=self._snapshot.version,
                record_count=self._snapshot.record_count,
            )

        self._refreshing = True
        try:
            raw = await asyncio.to_thread(self._source.fetch)
        except FeedError as exc:
            logger.warning(
                "Refresh failed; keeping previous data | version=%s | error=%s",
                self._snapshot.version,
                exc,
            )
            return RefreshOutcome(
                status=RefreshStatus.FAILED,
                version=self._snapshot.version,
                record_count=self._snapshot.record_count,
                error=str(exc),
            )
        except Exception as exc:
            logger.exception(
                "Refresh failed unexpectedly; keeping previous data | version=%s",
                self._snapshot.version,
            )
            return RefreshOutcome(
                status=RefreshStatus.FAILED,
                version=self._snapshot.version,
                record_count=self._snapshot.record_count,
                error=f"Unexpected feed source error: {exc}",
            )
        finally:
            self._refreshing = False

        snapshot = RecordSnapshot(
            version=self._snapshot.version + 1,
            surveys=tuple(parse_surveys(raw.surveys)),
            locations=tuple(parse_locations(raw.locations)),
            fetched_at=datetime.now(timezone.utc),
        )
        self._snapshot = snapshot
        logger.info(
            "Refresh completed | version=%s | surveys=%s | locations=%s",
            snapshot.version,
            len(snapshot.surveys),
            len(snapshot.locations),
        )
        return RefreshOutcome(
            status=RefreshStatus.REFRESHED,
            version=snapshot.version,
            record_count=snapshot.record_count,
        )

    # Derived views

    def _record_fingerprint(self) -> tuple[int, int]:
        return record_set_fingerprint(self._snapshot)

    def _build_entries(self) -> list[SpaceEntry]:
        return merge_records(
            self._snapshot.surveys,
            self._snapshot.locations,
            self._config.excluded_location_keywords,
        )

    def _thresholds(self) -> dict[str, int]:
        return {
            "high_max_occupancy": self._config.high_availability_max_occupancy,
            "low_min_occupancy": self._config.low_availability_min_occupancy,
        }

    def _build_location_groups(self) -> dict[str, LocationGroup]:
        return group_by_location(self.entries(), **self._thresholds())

    def _build_category_groups(self) -> dict[SpaceCategory, CategoryGroup]:
        return group_by_category(self.entries(), **self._thresholds())

    def entries(self) -> list[SpaceEntry]:
        return self._entries_cache().value

    def location_groups(self) -> dict[str, LocationGroup]:
        return self._location_cache().value

    def location_group(self, location: str) -> Optional[LocationGroup]:
        return self.location_groups().get(location)

    def category_groups(self) -> dict[SpaceCategory, CategoryGroup]:
        return self._category_cache().value

    def global_statistics(self) -> SpaceStatistics:
        return compute_statistics(self.entries(), self.last_updated)

    def space_count(self, category: Optional[SpaceCategory] = None) -> int:
        if category is None:
            return len(self.entries())
        return sum(1 for entry in self.entries() if entry.category == category)

    # Sorting and filtering

    @property
    def sort_key(self) -> SortKey:
        return self._sort.applied

    @property
    def is_sorting(self) -> bool:
        return self._sort.is_sorting

    @property
    def filters(self) -> FilterState:
        return self._filters

    async def set_sort(self, option: SortOption, order: SortOrder) -> bool:
        return await self._sort.request(SortKey(option=option, order=order))

    def set_category_filter(self, category: Optional[SpaceCategory]) -> None:
        self._filters = replace(self._filters, category=category)

    def set_availability_filter(self, band: Optional[AvailabilityBand]) -> None:
        self._filters = replace(self._filters, availability=band)

    def set_search_text(self, text: str) -> None:
        self._filters = replace(self._filters, search_text=text)

    def filtered_location_groups(self) -> dict[str, LocationGroup]:
        return filter_locations(self.location_groups(), self._filters, **self._thresholds())

    def _sorted_keys_fingerprint(self, groups: Mapping[str, LocationGroup]) -> tuple:
        return sorted_keys_fingerprint(self._snapshot, self._sort.applied, self._filters, groups)

    def _build_sorted_keys(self, groups: Mapping[str, LocationGroup]) -> list[str]:
        return sort_locations(groups, self._sort.applied)

    def sorted_location_keys(self) -> list[str]:
        return self._sorted_keys_cache(self.filtered_location_groups()).value

    def filtered_sorted_locations(self) -> list[LocationGroup]:
        """Location groups ready for listing.

        Entries without seat data are hidden and the rest are in floor order;
        a group with nothing left to show is omitted.
        """

        groups = self.filtered_location_groups()
        listed: list[LocationGroup] = []
        for location in self._sorted_keys_cache(groups).value:
            group = groups[location]
            with_seats = [entry for entry in group.entries if entry.has_seat_data]
            if not with_seats:
                continue
            listed.append(replace(group, entries=tuple(sort_by_floor(with_seats))))
        return listed

    def map_annotations(self) -> list[MapAnnotation]:
        annotations: list[MapAnnotation] = []
        for group in self.filtered_sorted_locations():
            coordinate = coordinate_for(group.location, default=self._default_coordinate)
            annotations.append(
                MapAnnotation(
                    location=group.location,
                    latitude=coordinate.latitude,
                    longitude=coordinate.longitude,
                    total_seats=group.total_seats,
                    free_seats=group.free_seats,
                    occupancy_percentage=group.occupancy_percentage,
                )
            )
        return annotations
