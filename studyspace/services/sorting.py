"""Ordering and filtering of location groups, plus the debounced sort state."""

from __future__ import annotations

import asyncio
from enum import Enum
from typing import Mapping, Optional

from studyspace.domain.models import (
    FilterState,
    LocationGroup,
    SortKey,
    SortOption,
    SortOrder,
)
from studyspace.services.statistics import build_location_group
from studyspace.utils.logger import get_logger


logger = get_logger(__name__)

DEFAULT_SETTLE_DELAY_SECONDS = 0.2


def _ascending_key(option: SortOption, group: LocationGroup) -> tuple:
    folded = group.location.casefold()
    if option is SortOption.BY_FREE_SEATS:
        primary: object = group.free_seats
    elif option is SortOption.BY_AVAILABILITY_RATIO:
        primary = group.availability_percentage
    else:
        primary = folded
    return (primary, folded, group.location)


def sort_locations(groups: Mapping[str, LocationGroup], key: SortKey) -> list[str]:
    """Location names in ``key`` order.

    Ties fall back to the case-folded name and then the exact name, so the
    order is total and descending is always the mirror of ascending.
    """

    ordered = sorted(groups.values(), key=lambda group: _ascending_key(key.option, group))
    names = [group.location for group in ordered]
    if key.order is SortOrder.DESCENDING:
        names.reverse()
    return names


def filter_locations(
    groups: Mapping[str, LocationGroup],
    filters: FilterState,
    *,
    high_max_occupancy: int = 33,
    low_min_occupancy: int = 66,
) -> dict[str, LocationGroup]:
    """Apply category, availability and search filters.

    A category filter narrows each group to that category's entries and
    recomputes its statistics; groups left without entries are dropped.
    """

    needle = filters.search_text.strip().lower()
    kept: dict[str, LocationGroup] = {}
    for location, group in groups.items():
        if filters.category is not None:
            entries = [entry for entry in group.entries if entry.category == filters.category]
            if not entries:
                continue
            if len(entries) != len(group.entries):
                group = build_location_group(
                    location,
                    entries,
                    high_max_occupancy=high_max_occupancy,
                    low_min_occupancy=low_min_occupancy,
                )

        if filters.availability is not None and group.availability_band != filters.availability:
            continue

        if needle and needle not in location.lower():
            if not any(needle in entry.short_name.lower() for entry in group.entries):
                continue

        kept[location] = group
    return kept


class SortState(str, Enum):
    IDLE = "idle"
    SORTING = "sorting"


class CancellationToken:
    """Marks a pending sort request as superseded."""

    __slots__ = ("_cancelled",)

    def __init__(self) -> None:
        self._cancelled = False

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        self._cancelled = True


class SortController:
    """Debounces sort changes so only the last request in a burst commits."""

    def __init__(
        self,
        settle_delay_seconds: float = DEFAULT_SETTLE_DELAY_SECONDS,
        initial: Optional[SortKey] = None,
    ) -> None:
        self._settle_delay_seconds = settle_delay_seconds
        self._applied = initial or SortKey()
        self._pending: Optional[CancellationToken] = None
        self._state = SortState.IDLE

    @property
    def applied(self) -> SortKey:
        return self._applied

    @property
    def state(self) -> SortState:
        return self._state

    @property
    def is_sorting(self) -> bool:
        return self._state is SortState.SORTING

    def _cancel_pending(self) -> None:
        if self._pending is not None:
            self._pending.cancel()
            self._pending = None
        self._state = SortState.IDLE

    async def request(self, key: SortKey) -> bool:
        """Schedule ``key``; return True only if this request committed it."""
        if key == self._applied:
            self._cancel_pending()
            return False

        if self._pending is not None:
            self._pending.cancel()
        token = CancellationToken()
        self._pending = token
        self._state = SortState.SORTING

        try:
            await asyncio.sleep(self._settle_delay_seconds)
        except asyncio.CancelledError:
            if self._pending is token:
                self._cancel_pending()
            raise

        if token.cancelled:
            return False

        self._applied = key
        self._pending = None
        self._state = SortState.IDLE
        logger.info(
            "Sort committed | option=%s | order=%s",
            key.option.value,
            key.order.value,
        )
        return True
