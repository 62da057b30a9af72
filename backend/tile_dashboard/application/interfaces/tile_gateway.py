"""Abstract gateway interface (port) for the spreadsheet-backed tile datastore."""

from abc import ABC, abstractmethod

from tile_dashboard.domain.entities import TileDraft, TileRecord


class TileGateway(ABC):
    """Port for reading and mutating tile records: implemented in the infrastructure layer.

    Implementations make no atomicity, idempotence or ordering promises;
    every call stands alone and reconciliation is the caller's job.
    """

    @abstractmethod
    async def fetch_all(self) -> list[TileRecord]:
        """Load every valid record from the datastore."""
        ...

    @abstractmethod
    async def create(self, draft: TileDraft) -> TileRecord:
        """Submit a new record and return it with a freshly generated id."""
        ...

    @abstractmethod
    async def delete(self, record: TileRecord) -> None:
        """Ask the datastore to remove the given record."""
        ...
