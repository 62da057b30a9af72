"""FastAPI application factory."""

import asyncio
import logging
from contextlib import asynccontextmanager
from collections.abc import AsyncIterator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from tile_dashboard.config import get_settings
from tile_dashboard.application.services import TileInventoryService
from tile_dashboard.domain.exceptions import GatewayError
from tile_dashboard.infrastructure.dependencies import get_tile_service
from tile_dashboard.infrastructure.logging.log_config import setup_logging
from tile_dashboard.presentation.router import router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan: configure logging and warm the tile list in the background.

    Startup never waits on the sheet. Requests arriving before the warm load
    finishes join it through ``ensure_loaded()``.
    """
    setup_logging()

    service = app.dependency_overrides.get(get_tile_service, get_tile_service)()
    app.state.warm_load = asyncio.create_task(_warm_load(service))

    yield

    task = app.state.warm_load
    if not task.done():
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            logger.info("Initial load cancelled at shutdown")


async def _warm_load(service: TileInventoryService) -> None:
    # A failed first load is not fatal: the dashboard shows the error
    # screen with a "Try again" button until a reload succeeds.
    try:
        records = await service.ensure_loaded()
    except GatewayError as exc:
        logger.warning("Initial load failed: %s", exc.message)
        return
    logger.info("Initial load: %d tile record(s)", len(records))


def create_app() -> FastAPI:
    """Factory function that builds and configures the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title=settings.app_title,
        version=settings.app_version,
        lifespan=lifespan,
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # API routes + dashboard pages
    app.include_router(router)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "tile_dashboard.main:app",
        host="0.0.0.0",
        port=8030,
        reload=True,
    )
