"""Top-level router - JSON API under /api/v1 plus the server-rendered dashboard."""

from fastapi import APIRouter

from tile_dashboard.presentation.api.v1.router import router as v1_router
from tile_dashboard.presentation.web.routes import router as web_router

api_router = APIRouter(prefix="/api")
api_router.include_router(v1_router)

router = APIRouter()
router.include_router(api_router)
router.include_router(web_router)
