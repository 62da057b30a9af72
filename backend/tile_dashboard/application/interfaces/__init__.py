from .tile_gateway import TileGateway

__all__ = [
    "TileGateway",
]
