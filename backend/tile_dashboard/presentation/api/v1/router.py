"""V1 API router: aggregates all v1 endpoint routers."""

from fastapi import APIRouter

from tile_dashboard.presentation.api.v1.endpoints.health import router as health_router
from tile_dashboard.presentation.api.v1.endpoints.tiles import router as tiles_router

router = APIRouter(prefix="/v1")
router.include_router(health_router)
router.include_router(tiles_router)
