from .notifications import Notification, NotificationCenter
from .tile_inventory_service import TileInventoryService
from .tile_query import TileQuery, TileView, derive_view

__all__ = [
    "Notification",
    "NotificationCenter",
    "TileInventoryService",
    "TileQuery",
    "TileView",
    "derive_view",
]
