"""Domain entity: one ceramic-tile sample entry from the inventory sheet."""

from dataclasses import dataclass, fields
from typing import Any

GRADE_OPTIONS = ("BIa", "BIb", "BIIa", "BIIb", "BIII")
FINISH_OPTIONS = ("GL", "UGL")
TYPE_OPTIONS = ("Rectified", "Non-Rectified")
STATUS_OPTIONS = ("Sampel Aktif", "Sampel Nonaktif")

NO_LOCATION = "Tidak Ada Lokasi"

# Python field name → camelCase key used by the sheet script.
WIRE_KEYS: dict[str, str] = {
    "entry_date": "entryDate",
    "brand": "brand",
    "manufacturer": "manufacturer",
    "grade": "grade",
    "working_size": "workingSize",
    "finish": "finish",
    "type": "type",
    "lokasi_sampel": "lokasiSampel",
    "status": "status",
}


@dataclass(frozen=True)
class TileDraft:
    """Tile fields as entered by a user, before an id is assigned.

    Field order matches the column order of the spreadsheet export.
    """

    entry_date: str
    brand: str
    manufacturer: str
    grade: str
    working_size: str
    finish: str
    type: str
    lokasi_sampel: str
    status: str

    @property
    def is_valid(self) -> bool:
        return bool(self.brand) and bool(self.entry_date)

    def to_payload(self) -> dict[str, Any]:
        """Serialize the data fields using the sheet's camelCase keys."""
        return {WIRE_KEYS[name]: getattr(self, name) for name in WIRE_KEYS}

    def with_id(self, tile_id: str) -> "TileRecord":
        values = {f.name: getattr(self, f.name) for f in fields(TileDraft)}
        return TileRecord(id=tile_id, **values)


@dataclass(frozen=True)
class TileRecord(TileDraft):
    """A tile sample as held in the dashboard's in-memory list.

    The id is assigned client-side and is only stable within one load.
    """

    id: str

    def to_payload(self) -> dict[str, Any]:
        payload = super().to_payload()
        payload["id"] = self.id
        return payload


TILE_FIELDS: tuple[str, ...] = tuple(WIRE_KEYS)
