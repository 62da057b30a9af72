"""FastAPI dependency injection: wires infrastructure to application layer."""

from functools import lru_cache

from tile_dashboard.config import get_settings
from tile_dashboard.application.services import NotificationCenter, TileInventoryService
from tile_dashboard.infrastructure.sheets import SheetGateway


@lru_cache
def get_tile_service() -> TileInventoryService:
    """Process-wide TileInventoryService: the single owner of the tile list."""
    settings = get_settings()
    gateway = SheetGateway(
        sheet_csv_url=settings.sheet_csv_url,
        script_url=settings.script_url,
        timeout=settings.gateway_timeout,
    )
    return TileInventoryService(gateway, NotificationCenter())
