"""HTTP controller layer for study space listings, statistics and sorting."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, Field

from studyspace.controllers.dependencies import get_space_engine
from studyspace.domain.models import (
    AvailabilityBand,
    CategoryGroup,
    FilterState,
    LocationGroup,
    SortKey,
    SortOption,
    SortOrder,
    SpaceCategory,
    SpaceEntry,
)
from studyspace.services.space_engine import RefreshStatus, SpaceAggregationEngine
from studyspace.utils.logger import get_logger


logger = get_logger(__name__)

router = APIRouter(prefix="/spaces", tags=["spaces"])


class SpaceEntryResponse(BaseModel):
    source_id: str
    name: str
    short_name: str
    description: str
    category: SpaceCategory
    free_seats: int = Field(ge=0)
    total_seats: int = Field(ge=0)
    occupancy_percentage: int = Field(ge=0, le=100)
    availability_percentage: int = Field(ge=0, le=100)


class LocationGroupResponse(BaseModel):
    location: str
    total_seats: int = Field(ge=0)
    free_seats: int = Field(ge=0)
    occupied_seats: int = Field(ge=0)
    occupancy_percentage: int = Field(ge=0, le=100)
    availability_percentage: int = Field(ge=0, le=100)
    availability_band: AvailabilityBand
    spaces: list[SpaceEntryResponse]


class CategoryGroupResponse(BaseModel):
    category: SpaceCategory
    space_count: int = Field(ge=0)
    total_seats: int = Field(ge=0)
    free_seats: int = Field(ge=0)
    occupancy_percentage: int = Field(ge=0, le=100)
    availability_percentage: int = Field(ge=0, le=100)
    availability_band: AvailabilityBand


class StatisticsResponse(BaseModel):
    total_spaces: int = Field(ge=0)
    total_seats: int = Field(ge=0)
    free_seats: int = Field(ge=0)
    occupied_seats: int = Field(ge=0)
    occupancy_percentage: int = Field(ge=0, le=100)
    availability_percentage: int = Field(ge=0, le=100)
    last_updated: Optional[datetime] = None


class MapAnnotationResponse(BaseModel):
    location: str
    latitude: float
    longitude: float
    total_seats: int = Field(ge=0)
    free_seats: int = Field(ge=0)
    occupancy_percentage: int = Field(ge=0, le=100)


class RefreshResponse(BaseModel):
    status: RefreshStatus
    version: int = Field(ge=0)
    record_count: int = Field(ge=0)


class SortKeyResponse(BaseModel):
    option: SortOption
    order: SortOrder


class SortRequest(BaseModel):
    option: SortOption
    order: SortOrder = SortOrder.ASCENDING


class SortResponse(BaseModel):
    committed: bool
    applied_sort: SortKeyResponse


class FilterStateResponse(BaseModel):
    category: Optional[SpaceCategory] = None
    availability: Optional[AvailabilityBand] = None
    search_text: str = ""


class FilterUpdateRequest(BaseModel):
    """Only fields present in the request body are changed."""

    category: Optional[SpaceCategory] = None
    availability: Optional[AvailabilityBand] = None
    search_text: Optional[str] = Field(default=None, max_length=200)


class LocationListResponse(BaseModel):
    sort: SortKeyResponse
    filters: FilterStateResponse
    locations: list[LocationGroupResponse]


def _entry_response(entry: SpaceEntry) -> SpaceEntryResponse:
    return SpaceEntryResponse(
        source_id=entry.source_id,
        name=entry.raw_name,
        short_name=entry.short_name,
        description=entry.description,
        category=entry.category,
        free_seats=entry.free_seats,
        total_seats=entry.total_seats,
        occupancy_percentage=entry.occupancy_percentage,
        availability_percentage=entry.availability_percentage,
    )


def _group_response(group: LocationGroup) -> LocationGroupResponse:
    return LocationGroupResponse(
        location=group.location,
        total_seats=group.total_seats,
        free_seats=group.free_seats,
        occupied_seats=group.occupied_seats,
        occupancy_percentage=group.occupancy_percentage,
        availability_percentage=group.availability_percentage,
        availability_band=group.availability_band,
        spaces=[_entry_response(entry) for entry in group.entries],
    )


def _category_response(group: CategoryGroup) -> CategoryGroupResponse:
    return CategoryGroupResponse(
        category=group.category,
        space_count=len(group.entries),
        total_seats=group.total_seats,
        free_seats=group.free_seats,
        occupancy_percentage=group.occupancy_percentage,
        availability_percentage=group.availability_percentage,
        availability_band=group.availability_band,
    )


def _sort_response(key: SortKey) -> SortKeyResponse:
    return SortKeyResponse(option=key.option, order=key.order)


def _filters_response(filters: FilterState) -> FilterStateResponse:
    return FilterStateResponse(
        category=filters.category,
        availability=filters.availability,
        search_text=filters.search_text,
    )


@router.get("/locations", response_model=LocationListResponse, status_code=status.HTTP_200_OK)
async def list_locations(
    engine: SpaceAggregationEngine = Depends(get_space_engine),
) -> LocationListResponse:
    """Filtered and sorted locations, each with its floor-ordered spaces."""
    try:
        groups = engine.filtered_sorted_locations()
        return LocationListResponse(
            sort=_sort_response(engine.sort_key),
            filters=_filters_response(engine.filters),
            locations=[_group_response(group) for group in groups],
        )
    except Exception as exc:  # pragma: no cover - defensive fallback
        logger.exception("Unexpected location listing failure")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to list locations",
        ) from exc


@router.get(
    "/locations/{location}",
    response_model=LocationGroupResponse,
    status_code=status.HTTP_200_OK,
)
async def get_location(
    location: str,
    engine: SpaceAggregationEngine = Depends(get_space_engine),
) -> LocationGroupResponse:
    group = engine.location_group(location)
    if group is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Unknown location: {location}",
        )
    return _group_response(group)


@router.get(
    "/categories",
    response_model=list[CategoryGroupResponse],
    status_code=status.HTTP_200_OK,
)
async def list_categories(
    engine: SpaceAggregationEngine = Depends(get_space_engine),
) -> list[CategoryGroupResponse]:
    return [_category_response(group) for group in engine.category_groups().values()]


@router.get("/statistics", response_model=StatisticsResponse, status_code=status.HTTP_200_OK)
async def get_statistics(
    engine: SpaceAggregationEngine = Depends(get_space_engine),
) -> StatisticsResponse:
    stats = engine.global_statistics()
    return StatisticsResponse(
        total_spaces=stats.total_spaces,
        total_seats=stats.total_seats,
        free_seats=stats.free_seats,
        occupied_seats=stats.occupied_seats,
        occupancy_percentage=stats.occupancy_percentage,
        availability_percentage=stats.availability_percentage,
        last_updated=stats.last_updated,
    )


@router.get("/map", response_model=list[MapAnnotationResponse], status_code=status.HTTP_200_OK)
async def list_map_annotations(
    engine: SpaceAggregationEngine = Depends(get_space_engine),
) -> list[MapAnnotationResponse]:
    return [
        MapAnnotationResponse(
            location=annotation.location,
            latitude=annotation.latitude,
            longitude=annotation.longitude,
            total_seats=annotation.total_seats,
            free_seats=annotation.free_seats,
            occupancy_percentage=annotation.occupancy_percentage,
        )
        for annotation in engine.map_annotations()
    ]


@router.post("/refresh", response_model=RefreshResponse, status_code=status.HTTP_200_OK)
async def refresh_spaces(
    engine: SpaceAggregationEngine = Depends(get_space_engine),
) -> RefreshResponse:
    """Refetch both feeds; a failed fetch keeps the last good data."""
    outcome = await engine.refresh()
    if outcome.status is RefreshStatus.FAILED:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=f"Refresh failed; previous data retained: {outcome.error}",
        )
    return RefreshResponse(
        status=outcome.status,
        version=outcome.version,
        record_count=outcome.record_count,
    )


@router.post("/sort", response_model=SortResponse, status_code=status.HTTP_200_OK)
async def update_sort(
    payload: SortRequest,
    engine: SpaceAggregationEngine = Depends(get_space_engine),
) -> SortResponse:
    committed = await engine.set_sort(payload.option, payload.order)
    return SortResponse(committed=committed, applied_sort=_sort_response(engine.sort_key))


@router.put("/filters", response_model=FilterStateResponse, status_code=status.HTTP_200_OK)
async def update_filters(
    payload: FilterUpdateRequest,
    engine: SpaceAggregationEngine = Depends(get_space_engine),
) -> FilterStateResponse:
    provided = payload.model_fields_set
    if "category" in provided:
        engine.set_category_filter(payload.category)
    if "availability" in provided:
        engine.set_availability_filter(payload.availability)
    if "search_text" in provided:
        engine.set_search_text(payload.search_text or "")
    return _filters_response(engine.filters)
