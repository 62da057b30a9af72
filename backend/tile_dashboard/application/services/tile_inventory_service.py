"""Application service (use case) that owns the in-memory tile list.

Reads replace the list wholesale from the gateway. Creates are prepended
once the gateway confirms them. Deletes are applied optimistically and
rolled back by a full reload when the gateway reports a failure.
"""

import asyncio
import logging

from tile_dashboard.application.interfaces import TileGateway
from tile_dashboard.application.schemas.tile import TileCreate
from tile_dashboard.application.services.notifications import (
    Notification,
    NotificationCenter,
)
from tile_dashboard.domain.entities import TileRecord
from tile_dashboard.domain.exceptions import (
    EntityNotFoundError,
    GatewayError,
    SubmissionInProgressError,
)

logger = logging.getLogger(__name__)

SAVE_SUCCESS_MESSAGE = "Tile data saved successfully!"
DELETE_SUCCESS_MESSAGE = "Tile data deleted successfully."


class TileInventoryService:
    """Orchestrates loading and mutating tile records. Depends on the gateway port (DI).

    One instance lives for the whole process; it is the only writer of the
    record tuple, and every change swaps in a new tuple.
    """

    def __init__(
        self,
        gateway: TileGateway,
        notifications: NotificationCenter | None = None,
    ):
        self._gateway = gateway
        self._notifications = notifications or NotificationCenter()
        self._records: tuple[TileRecord, ...] = ()
        self._loaded = False
        self._load_error: str | None = None
        self._create_pending = False
        self._load_lock = asyncio.Lock()

    # ── State ────────────────────────────────────────────────────────

    @property
    def records(self) -> tuple[TileRecord, ...]:
        return self._records

    @property
    def is_loaded(self) -> bool:
        return self._loaded

    @property
    def load_error(self) -> str | None:
        return self._load_error

    @property
    def create_pending(self) -> bool:
        return self._create_pending

    @property
    def notifications(self) -> NotificationCenter:
        return self._notifications

    def get_tile(self, tile_id: str) -> TileRecord:
        for tile in self._records:
            if tile.id == tile_id:
                return tile
        raise EntityNotFoundError("Tile", tile_id)

    # ── Reads ────────────────────────────────────────────────────────

    async def load(self) -> tuple[TileRecord, ...]:
        """Discard the current list and repopulate it from the gateway."""
        try:
            fetched = await self._gateway.fetch_all()
        except GatewayError as exc:
            self._records = ()
            self._loaded = False
            self._load_error = exc.message
            raise

        self._records = tuple(fetched)
        self._loaded = True
        self._load_error = None
        return self._records

    async def ensure_loaded(self) -> tuple[TileRecord, ...]:
        """Load on first use. A failed load is only retried via an explicit ``load()``.

        Concurrent first callers share one fetch.
        """
        if self._loaded or self._load_error is not None:
            return self._records
        async with self._load_lock:
            if not self._loaded and self._load_error is None:
                await self.load()
        return self._records

    # ── Mutations ────────────────────────────────────────────────────

    async def create_tile(self, data: TileCreate) -> tuple[TileRecord, Notification]:
        """Submit a new tile; on success it is prepended to the list.

        Raises SubmissionInProgressError while another create is outstanding,
        and re-raises gateway errors after queueing an error notification.
        """
        if self._create_pending:
            raise SubmissionInProgressError()

        self._create_pending = True
        try:
            record = await self._gateway.create(data.to_draft())
        except GatewayError as exc:
            self._notifications.error(exc.message)
            raise
        finally:
            self._create_pending = False

        self._records = (record, *self._records)
        return record, self._notifications.success(SAVE_SUCCESS_MESSAGE)

    async def delete_tile(self, tile_id: str) -> Notification:
        """Remove a tile optimistically, then confirm with the gateway.

        If the gateway fails, the optimistic state is thrown away and the
        full list is fetched again; a failing resync is logged only.
        """
        record = self.get_tile(tile_id)
        self._records = tuple(t for t in self._records if t.id != tile_id)

        try:
            await self._gateway.delete(record)
        except GatewayError as exc:
            logger.warning(
                "Delete of '%s' failed (%s), resynchronising from the sheet",
                tile_id,
                exc.message,
            )
            await self._resync()
            self._notifications.error(exc.message)
            raise

        return self._notifications.success(DELETE_SUCCESS_MESSAGE)

    async def _resync(self) -> None:
        try:
            fetched = await self._gateway.fetch_all()
        except GatewayError:
            logger.exception("Resynchronisation after a failed delete also failed")
            return
        self._records = tuple(fetched)
