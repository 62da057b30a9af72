"""Parse the spreadsheet CSV export into TileRecord entities."""

import csv
import io
import logging

from tile_dashboard.domain.entities import TILE_FIELDS, TileRecord
from tile_dashboard.domain.exceptions import ParseError

logger = logging.getLogger(__name__)

GENERIC_PARSE_MESSAGE = "Could not load or process data from the spreadsheet."


def parse_tile_csv(text: str) -> list[TileRecord]:
    """Turn CSV export text into valid tile records.

    The first line is a header and is discarded. Each following row maps
    positionally onto TILE_FIELDS; short rows are padded with empty strings
    and extra columns are ignored. Rows without a brand or entry date are
    dropped. Ids are positional (``tile-<row index>``) and therefore only
    stable for a single load.
    """
    reader = csv.reader(io.StringIO(text.strip()), strict=True)
    records: list[TileRecord] = []
    dropped = 0

    try:
        next(reader, None)  # header
        for index, row in enumerate(reader):
            record = _row_to_record(index, row)
            if record.is_valid:
                records.append(record)
            else:
                dropped += 1
    except csv.Error as exc:
        logger.warning("Malformed CSV at line %d: %s", reader.line_num, exc)
        raise ParseError(GENERIC_PARSE_MESSAGE) from exc

    if dropped:
        logger.debug("Dropped %d row(s) without brand or entry date", dropped)
    return records


def _row_to_record(index: int, row: list[str]) -> TileRecord:
    cells = (row + [""] * len(TILE_FIELDS))[: len(TILE_FIELDS)]
    return TileRecord(id=f"tile-{index}", **dict(zip(TILE_FIELDS, cells)))
