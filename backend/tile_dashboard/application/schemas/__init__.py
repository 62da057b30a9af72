from .tile import (
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

__all__ = [
    "ChartPointResponse",
    "FilterOptionsResponse",
    "LocationBucketResponse",
    "MetricsResponse",
    "NotificationResponse",
    "StorageMapResponse",
    "TileCreate",
    "TileMutationResponse",
    "TilePageResponse",
    "TileResponse",
    "TileSummaryResponse",
]
