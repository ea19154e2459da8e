"""Fingerprint-keyed memoization for values derived from the record set."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Generic, Hashable, Iterable, Optional, TypeVar

from studyspace.domain.models import FilterState, RecordSnapshot, SortKey
from studyspace.utils.logger import get_logger


logger = get_logger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class CacheResult(Generic[T]):
    value: T
    was_cached: bool


def _is_empty(value: object) -> bool:
    try:
        return len(value) == 0  # type: ignore[arg-type]
    except TypeError:
        return value is None


class Memoized(Generic[T]):
    """One cached value guarded by a fingerprint.

    A stored value is reused only while the fingerprint is unchanged and the
    value is non-empty, so an empty result is always recomputed.
    """

    def __init__(
        self,
        fingerprint_fn: Callable[..., Hashable],
        compute_fn: Callable[..., T],
        name: str = "value",
    ) -> None:
        self._fingerprint_fn = fingerprint_fn
        self._compute_fn = compute_fn
        self._name = name
        self._fingerprint: Optional[Hashable] = None
        self._value: Optional[T] = None
        self._stored = False

    def __call__(self, *args: Any) -> CacheResult[T]:
        fingerprint = self._fingerprint_fn(*args)
        if self._stored and fingerprint == self._fingerprint and not _is_empty(self._value):
            logger.debug("Cache hit | name=%s", self._name)
            return CacheResult(value=self._value, was_cached=True)  # type: ignore[arg-type]

        value = self._compute_fn(*args)
        self._fingerprint = fingerprint
        self._value = value
        self._stored = True
        return CacheResult(value=value, was_cached=False)

    def invalidate(self) -> None:
        self._fingerprint = None
        self._value = None
        self._stored = False


def memoize(
    fingerprint_fn: Callable[..., Hashable],
    compute_fn: Callable[..., T],
    name: str = "value",
) -> Memoized[T]:
    return Memoized(fingerprint_fn, compute_fn, name=name)


def record_set_fingerprint(snapshot: RecordSnapshot) -> tuple[int, int]:
    return (snapshot.version, snapshot.record_count)


def sorted_keys_fingerprint(
    snapshot: RecordSnapshot,
    sort_key: SortKey,
    filters: FilterState,
    location_keys: Iterable[str],
) -> tuple[int, SortKey, FilterState, frozenset[str]]:
    return (snapshot.version, sort_key, filters, frozenset(location_keys))
