from .tile import (
    FINISH_OPTIONS,
    GRADE_OPTIONS,
    NO_LOCATION,
    STATUS_OPTIONS,
    TILE_FIELDS,
    TYPE_OPTIONS,
    WIRE_KEYS,
    TileDraft,
    TileRecord,
)

__all__ = [
    "FINISH_OPTIONS",
    "GRADE_OPTIONS",
    "NO_LOCATION",
    "STATUS_OPTIONS",
    "TILE_FIELDS",
    "TYPE_OPTIONS",
    "WIRE_KEYS",
    "TileDraft",
    "TileRecord",
]
