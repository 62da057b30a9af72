"""Unit tests for TileInventoryService load and mutation flows."""

import asyncio

import pytest

from tests.fakes import FakeTileGateway, make_tile
from tile_dashboard.application.schemas.tile import TileCreate
from tile_dashboard.application.services.tile_inventory_service import (
    DELETE_SUCCESS_MESSAGE,
    SAVE_SUCCESS_MESSAGE,
    TileInventoryService,
)
from tile_dashboard.domain.exceptions import (
    EntityNotFoundError,
    FetchError,
    NetworkError,
    RemoteError,
    SubmissionInProgressError,
)


# ── Helpers ──


def _new_tile(**overrides) -> TileCreate:
    values = dict(
        entry_date="2024-06-01",
        brand="Brand New",
        manufacturer="PT. Baru",
        working_size="60x60 cm",
        lokasi_sampel="Rak D-04",
    )
    values.update(overrides)
    return TileCreate(**values)


async def _loaded_service(count: int = 3) -> tuple[TileInventoryService, FakeTileGateway]:
    gateway = FakeTileGateway([make_tile(i) for i in range(count)])
    service = TileInventoryService(gateway)
    await service.load()
    return service, gateway


# ── Loading ──


@pytest.mark.asyncio
async def test_load_replaces_records():
    service, gateway = await _loaded_service(3)

    assert service.is_loaded
    assert service.load_error is None
    assert [t.id for t in service.records] == ["tile-0", "tile-1", "tile-2"]

    gateway.remote = [make_tile(9)]
    await service.load()
    assert [t.id for t in service.records] == ["tile-9"]


@pytest.mark.asyncio
async def test_load_failure_clears_list_and_records_error():
    service, gateway = await _loaded_service(3)
    gateway.fail_fetch = FetchError("Sheet unavailable", status_code=500)

    with pytest.raises(FetchError):
        await service.load()

    assert service.records == ()
    assert not service.is_loaded
    assert service.load_error == "Sheet unavailable"


@pytest.mark.asyncio
async def test_ensure_loaded_fetches_once():
    gateway = FakeTileGateway([make_tile(0)])
    service = TileInventoryService(gateway)

    await service.ensure_loaded()
    await service.ensure_loaded()

    assert gateway.fetch_calls == 1


@pytest.mark.asyncio
async def test_concurrent_first_loads_share_one_fetch():
    gateway = FakeTileGateway([make_tile(0), make_tile(1)])
    release = asyncio.Event()
    original_fetch = gateway.fetch_all

    async def slow_fetch():
        await release.wait()
        return await original_fetch()

    gateway.fetch_all = slow_fetch
    service = TileInventoryService(gateway)

    first = asyncio.create_task(service.ensure_loaded())
    second = asyncio.create_task(service.ensure_loaded())
    await asyncio.sleep(0)
    release.set()

    assert await first == await second
    assert len(service.records) == 2
    assert gateway.fetch_calls == 1


@pytest.mark.asyncio
async def test_ensure_loaded_does_not_retry_after_failure():
    gateway = FakeTileGateway([make_tile(0)])
    gateway.fail_fetch = FetchError("down")
    service = TileInventoryService(gateway)

    with pytest.raises(FetchError):
        await service.ensure_loaded()
    assert await service.ensure_loaded() == ()
    assert gateway.fetch_calls == 1

    gateway.fail_fetch = None
    await service.load()
    assert service.load_error is None
    assert len(service.records) == 1


@pytest.mark.asyncio
async def test_get_tile_unknown_id_raises():
    service, _ = await _loaded_service(1)

    with pytest.raises(EntityNotFoundError):
        service.get_tile("tile-404")


# ── Create ──


@pytest.mark.asyncio
async def test_create_prepends_record_and_notifies_success():
    service, gateway = await _loaded_service(3)

    record, notification = await service.create_tile(_new_tile())

    assert len(service.records) == 4
    assert service.records[0] == record
    assert record.brand == "Brand New"
    assert notification.kind == "success"
    assert notification.message == SAVE_SUCCESS_MESSAGE
    assert gateway.created[0].lokasi_sampel == "Rak D-04"
    assert not service.create_pending


@pytest.mark.asyncio
async def test_create_failure_leaves_list_untouched():
    service, gateway = await _loaded_service(3)
    before = service.records
    gateway.fail_create = RemoteError("Sheet is locked")

    with pytest.raises(RemoteError):
        await service.create_tile(_new_tile())

    assert service.records == before
    assert not service.create_pending
    (note,) = service.notifications.drain()
    assert note.kind == "error"
    assert note.message == "Sheet is locked"


@pytest.mark.asyncio
async def test_second_create_while_pending_is_rejected():
    service, gateway = await _loaded_service(1)
    release = asyncio.Event()
    original_create = gateway.create

    async def slow_create(draft):
        await release.wait()
        return await original_create(draft)

    gateway.create = slow_create

    first = asyncio.create_task(service.create_tile(_new_tile()))
    await asyncio.sleep(0)
    assert service.create_pending

    with pytest.raises(SubmissionInProgressError):
        await service.create_tile(_new_tile(brand="Other"))

    release.set()
    await first
    assert len(service.records) == 2
    assert len(gateway.created) == 1


# ── Delete ──


@pytest.mark.asyncio
async def test_delete_removes_record_and_notifies_success():
    service, gateway = await _loaded_service(3)

    notification = await service.delete_tile("tile-1")

    assert [t.id for t in service.records] == ["tile-0", "tile-2"]
    assert notification.message == DELETE_SUCCESS_MESSAGE
    assert gateway.deleted[0].id == "tile-1"


@pytest.mark.asyncio
async def test_delete_failure_resyncs_and_record_reappears():
    service, gateway = await _loaded_service(3)
    gateway.fail_delete = NetworkError("Connection failed")

    with pytest.raises(NetworkError):
        await service.delete_tile("tile-1")

    assert [t.id for t in service.records] == ["tile-0", "tile-1", "tile-2"]
    assert gateway.fetch_calls == 2
    (note,) = service.notifications.drain()
    assert note.kind == "error"
    assert note.message == "Connection failed"


@pytest.mark.asyncio
async def test_failed_resync_keeps_optimistic_list():
    service, gateway = await _loaded_service(3)
    gateway.fail_delete = RemoteError("Row not found")
    gateway.fail_fetch = FetchError("Sheet unavailable")

    with pytest.raises(RemoteError):
        await service.delete_tile("tile-1")

    assert [t.id for t in service.records] == ["tile-0", "tile-2"]
    assert service.load_error is None


@pytest.mark.asyncio
async def test_delete_unknown_id_raises_and_leaves_list():
    service, gateway = await _loaded_service(2)

    with pytest.raises(EntityNotFoundError):
        await service.delete_tile("tile-99")

    assert len(service.records) == 2
    assert gateway.deleted == []
