"""Tile inventory endpoints: filtered views, summary, storage map and mutations."""

import logging

from fastapi import APIRouter, Depends, HTTPException, status

from tile_dashboard.config import get_settings
from tile_dashboard.application.schemas.tile import (
    ChartPointResponse,
    FilterOptionsResponse,
    LocationBucketResponse,
    MetricsResponse,
    NotificationResponse,
    StorageMapResponse,
    TileCreate,
    TileMutationResponse,
    TilePageResponse,
    TileResponse,
    TileSummaryResponse,
)
from tile_dashboard.application.services import TileInventoryService, TileQuery, derive_view
from tile_dashboard.application.services.tile_query import (
    aggregate,
    apply_filters,
    grade_chart,
    group_by_location,
    status_chart,
)
from tile_dashboard.domain.entities import TileRecord
from tile_dashboard.domain.exceptions import (
    EntityNotFoundError,
    GatewayError,
    SubmissionInProgressError,
)
from tile_dashboard.infrastructure.dependencies import get_tile_service
from tile_dashboard.presentation.query_params import tile_query_params

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/tiles", tags=["Tiles"])


async def _records(service: TileInventoryService) -> tuple[TileRecord, ...]:
    """Return the loaded list, or 503 while the last load is failing."""
    try:
        records = await service.ensure_loaded()
    except GatewayError as e:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=e.message)
    if service.load_error is not None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=service.load_error
        )
    return records


@router.get("", response_model=TilePageResponse)
async def list_tiles(
    query: TileQuery = Depends(tile_query_params),
    service: TileInventoryService = Depends(get_tile_service),
) -> TilePageResponse:
    """Retrieve one page of the filtered, sorted tile list."""
    settings = get_settings()
    records = await _records(service)
    view = derive_view(
        records, query, page_size=settings.page_size, active_status=settings.active_status
    )
    return TilePageResponse(
        items=[TileResponse.model_validate(t, from_attributes=True) for t in view.page.items],
        page=view.page.page,
        total_pages=view.page.total_pages,
        total_filtered=view.page.total_items,
        page_size=view.page.page_size,
        sort_field=view.query.sort_field,
        sort_direction=view.query.sort_direction,
    )


@router.get("/summary", response_model=TileSummaryResponse)
async def tile_summary(
    query: TileQuery = Depends(tile_query_params),
    service: TileInventoryService = Depends(get_tile_service),
) -> TileSummaryResponse:
    """KPI metrics and filter options for the full list; chart series for the filtered list."""
    settings = get_settings()
    records = await _records(service)
    view = derive_view(
        records, query, page_size=settings.page_size, active_status=settings.active_status
    )
    return TileSummaryResponse(
        metrics=MetricsResponse.model_validate(view.metrics),
        options=FilterOptionsResponse.model_validate(view.options),
        grade_chart=[ChartPointResponse.model_validate(p) for p in grade_chart(view.filtered)],
        status_chart=[ChartPointResponse.model_validate(p) for p in status_chart(view.filtered)],
    )


@router.get("/storage-map", response_model=StorageMapResponse)
async def storage_map(
    query: TileQuery = Depends(tile_query_params),
    service: TileInventoryService = Depends(get_tile_service),
) -> StorageMapResponse:
    """Filtered tiles grouped by storage location."""
    records = await _records(service)
    groups = group_by_location(apply_filters(records, query))
    return StorageMapResponse(
        locations=[
            LocationBucketResponse(
                location=location,
                count=len(tiles),
                items=[TileResponse.model_validate(t, from_attributes=True) for t in tiles],
            )
            for location, tiles in groups.items()
        ]
    )


@router.post("", response_model=TileMutationResponse, status_code=status.HTTP_201_CREATED)
async def create_tile(
    data: TileCreate,
    service: TileInventoryService = Depends(get_tile_service),
) -> TileMutationResponse:
    """Submit a new tile to the sheet and prepend it to the list."""
    await _records(service)
    try:
        record, notification = await service.create_tile(data)
    except SubmissionInProgressError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    except GatewayError as e:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=e.message)
    return TileMutationResponse(
        tile=TileResponse.model_validate(record, from_attributes=True),
        notification=NotificationResponse.model_validate(notification),
        total=len(service.records),
    )


@router.delete("/{tile_id}", response_model=TileMutationResponse)
async def delete_tile(
    tile_id: str,
    service: TileInventoryService = Depends(get_tile_service),
) -> TileMutationResponse:
    """Delete a tile; on failure the list is resynchronised from the sheet."""
    await _records(service)
    try:
        notification = await service.delete_tile(tile_id)
    except EntityNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except GatewayError as e:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=e.message)
    return TileMutationResponse(
        notification=NotificationResponse.model_validate(notification),
        total=len(service.records),
    )


@router.post("/reload", response_model=MetricsResponse)
async def reload_tiles(
    service: TileInventoryService = Depends(get_tile_service),
) -> MetricsResponse:
    """Discard the in-memory list and fetch it again."""
    settings = get_settings()
    try:
        records = await service.load()
    except GatewayError as e:
        logger.error("Manual reload failed: %s", e.message)
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=e.message)
    return MetricsResponse.model_validate(aggregate(records, settings.active_status))
