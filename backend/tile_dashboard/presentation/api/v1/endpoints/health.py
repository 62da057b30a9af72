"""Health check endpoint: reports app version and whether the tile list is loaded."""

from fastapi import APIRouter, Depends

from tile_dashboard.config import get_settings
from tile_dashboard.application.services import TileInventoryService
from tile_dashboard.infrastructure.dependencies import get_tile_service

router = APIRouter(tags=["Health"])


@router.get("/health")
async def health_check(
    service: TileInventoryService = Depends(get_tile_service),
) -> dict:
    """Never touches the sheet; only reports the state of the last load."""
    settings = get_settings()
    return {
        "status": "healthy",
        "version": settings.app_version,
        "environment": settings.app_env,
        "tiles_loaded": service.is_loaded,
        "tile_count": len(service.records),
        "load_error": service.load_error,
    }
