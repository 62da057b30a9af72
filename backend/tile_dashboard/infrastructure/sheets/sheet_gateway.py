"""Google Sheets gateway: implements the TileGateway interface.

Reads the sheet through its gviz CSV export and submits mutations to an
Apps Script web app. The script accepts a JSON body sent as ``text/plain``
and answers with ``{"status": "success"}`` or
``{"status": "...", "message": "..."}``.
"""

import json
import logging
from typing import Any
from uuid import uuid4

import httpx

from tile_dashboard.application.interfaces.tile_gateway import TileGateway
from tile_dashboard.domain.entities import TileDraft, TileRecord
from tile_dashboard.domain.exceptions import (
    FetchError,
    NetworkError,
    ParseError,
    RemoteError,
)
from tile_dashboard.infrastructure.sheets.csv_parser import (
    GENERIC_PARSE_MESSAGE,
    parse_tile_csv,
)

logger = logging.getLogger(__name__)

CONNECTION_HINT = (
    "Could not connect to the script server. Make sure the Web App URL is "
    'correct and the script access is set to "Anyone".'
)
SHEET_HINT = (
    "Could not load data from the spreadsheet. Make sure SHEET_CSV_URL points "
    "to the sheet's CSV export and the sheet is shared as \"Anyone with the link\"."
)
REMOTE_FALLBACK_MESSAGE = "The server script reported an error."


class SheetGateway(TileGateway):
    """Infrastructure adapter: talks to the spreadsheet export and the Apps Script endpoint.

    Uses httpx; an AsyncClient may be injected (tests use MockTransport),
    otherwise a short-lived client is created per call.
    """

    def __init__(
        self,
        sheet_csv_url: str,
        script_url: str,
        timeout: float | None = None,
        http_client: httpx.AsyncClient | None = None,
    ):
        self._sheet_csv_url = sheet_csv_url
        self._script_url = script_url
        self._timeout = timeout
        self._http_client = http_client

    async def _get_client(self) -> httpx.AsyncClient:
        """Return the injected client or create a new one."""
        if self._http_client is not None:
            return self._http_client
        return httpx.AsyncClient(timeout=self._timeout, follow_redirects=True)

    async def fetch_all(self) -> list[TileRecord]:
        """GET the CSV export and parse it into records."""
        client = await self._get_client()
        should_close = self._http_client is None

        try:
            try:
                response = await client.get(self._sheet_csv_url, follow_redirects=True)
            except httpx.RequestError as exc:
                logger.error("Sheet export unreachable: %s", exc)
                raise FetchError(SHEET_HINT) from exc

            if not response.is_success:
                logger.error("Sheet export returned HTTP %d", response.status_code)
                raise FetchError(
                    f"{SHEET_HINT} (HTTP {response.status_code} {response.reason_phrase})",
                    status_code=response.status_code,
                )

            try:
                text = response.content.decode(response.encoding or "utf-8")
            except (UnicodeDecodeError, LookupError) as exc:
                raise ParseError(GENERIC_PARSE_MESSAGE) from exc

            records = parse_tile_csv(text)
            logger.info("Fetched %d tile record(s) from the sheet", len(records))
            return records

        finally:
            if should_close:
                await client.aclose()

    async def create(self, draft: TileDraft) -> TileRecord:
        """Submit an ``add`` action; returns the draft with a new client-side id."""
        await self._send({**draft.to_payload(), "action": "add"})
        record = draft.with_id(f"tile-{uuid4().hex}")
        logger.info("Saved tile '%s' at '%s'", record.brand, record.lokasi_sampel)
        return record

    async def delete(self, record: TileRecord) -> None:
        """Submit a ``delete`` action carrying the full record."""
        await self._send({**record.to_payload(), "action": "delete"})
        logger.info("Deleted tile '%s' (%s)", record.brand, record.id)

    async def _send(self, payload: dict[str, Any]) -> dict[str, Any]:
        """POST a JSON envelope as text/plain and interpret the script's reply."""
        client = await self._get_client()
        should_close = self._http_client is None

        try:
            try:
                response = await client.post(
                    self._script_url,
                    headers={"Content-Type": "text/plain;charset=utf-8"},
                    content=json.dumps(payload),
                    follow_redirects=True,
                )
            except httpx.RequestError as exc:
                logger.error("Script endpoint unreachable: %s", exc)
                raise NetworkError(CONNECTION_HINT) from exc

            if not response.is_success:
                logger.error(
                    "Script endpoint returned HTTP %d: %s",
                    response.status_code,
                    response.text[:200],
                )
                raise NetworkError(
                    f"Network response was not ok: {response.status_code} "
                    f"{response.reason_phrase} - {response.text}"
                )

            try:
                result = response.json()
            except ValueError as exc:
                raise ParseError(
                    "The script server returned a response that is not valid JSON."
                ) from exc

            return self._check_envelope(result)

        finally:
            if should_close:
                await client.aclose()

    @staticmethod
    def _check_envelope(result: Any) -> dict[str, Any]:
        """Raise RemoteError unless the reply is ``{"status": "success"}``."""
        if isinstance(result, dict) and result.get("status") == "success":
            return result

        message = None
        if isinstance(result, dict):
            message = result.get("message")
        if not isinstance(message, str) or not message.strip():
            message = REMOTE_FALLBACK_MESSAGE
        logger.warning("Script reported failure: %s", message)
        raise RemoteError(message)
