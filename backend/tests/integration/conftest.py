"""Shared fixtures: the real app wired to an in-memory gateway."""

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from tests.fakes import FakeTileGateway, make_tile
from tile_dashboard.application.services import TileInventoryService
from tile_dashboard.infrastructure.dependencies import get_tile_service
from tile_dashboard.main import app


@pytest.fixture
def gateway() -> FakeTileGateway:
    return FakeTileGateway([make_tile(i) for i in range(23)])


@pytest.fixture
def service(gateway: FakeTileGateway) -> TileInventoryService:
    return TileInventoryService(gateway)


@pytest_asyncio.fixture
async def client(service: TileInventoryService):
    app.dependency_overrides[get_tile_service] = lambda: service
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c
    app.dependency_overrides.clear()
