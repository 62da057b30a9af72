"""Dashboard HTML routes.

Serves the Jinja2 templates for the dashboard and the storage map, and
accepts the add/delete/reload form posts. Every post redirects (303) back
to the page it came from; the outcome is carried by the notification queue
and shown as a toast on the next render.

Routes:
    GET  /                        → dashboard.html (KPIs, charts, filters, table)
    GET  /storage-map             → storage_map.html (tiles grouped by location)
    POST /tiles                   → create a tile from the "Add tile" modal
    POST /tiles/{tile_id}/delete  → delete a tile (confirmed in the browser)
    POST /reload                  → manual "Try again" / resync
"""

import logging
from datetime import date
from pathlib import Path
from urllib.parse import urlencode

from fastapi import APIRouter, Depends, Form, Request, status
from fastapi.responses import HTMLResponse, RedirectResponse, Response
from fastapi.templating import Jinja2Templates
from pydantic import ValidationError

from tile_dashboard.config import get_settings
from tile_dashboard.application.schemas.tile import TileCreate
from tile_dashboard.application.services import TileInventoryService, TileQuery, derive_view
from tile_dashboard.application.services.tile_query import (
    apply_filters,
    filter_options,
    go_to_page,
    grade_chart,
    group_by_location,
    status_chart,
    toggle_sort,
)
from tile_dashboard.domain.entities import (
    FINISH_OPTIONS,
    GRADE_OPTIONS,
    STATUS_OPTIONS,
    TYPE_OPTIONS,
)
from tile_dashboard.domain.exceptions import (
    EntityNotFoundError,
    GatewayError,
    SubmissionInProgressError,
)
from tile_dashboard.infrastructure.dependencies import get_tile_service
from tile_dashboard.presentation.query_params import query_to_params, tile_query_params

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Dashboard"], include_in_schema=False)

templates = Jinja2Templates(directory=str(Path(__file__).parent / "templates"))

TABLE_COLUMNS: list[tuple[str, str]] = [
    ("entry_date", "Entry date"),
    ("brand", "Brand"),
    ("manufacturer", "Manufacturer"),
    ("grade", "Grade"),
    ("working_size", "Working size"),
    ("finish", "GL/UGL"),
    ("lokasi_sampel", "Location"),
    ("status", "Status"),
]

FORM_LABELS: dict[str, str] = {
    "entry_date": "Entry date",
    "brand": "Tile brand",
    "manufacturer": "Manufacturer",
    "grade": "Grade",
    "working_size": "Working size",
    "finish": "GL/UGL",
    "type": "Type",
    "lokasi_sampel": "Storage location",
    "status": "Status",
}


def _url(path: str, query: TileQuery) -> str:
    params = query_to_params(query)
    return f"{path}?{urlencode(params)}" if params else path


def _form_error_message(exc: ValidationError) -> str:
    """One line per invalid field, e.g. "Grade must be one of: BIa, BIb, ..."."""
    problems = []
    for error in exc.errors():
        field_name = str(error["loc"][0]) if error["loc"] else ""
        reason = error.get("ctx", {}).get("error") or error["msg"]
        problems.append(f"{FORM_LABELS.get(field_name, field_name)} {reason}")
    return "; ".join(problems) + "."


def _safe_next(next_url: str) -> str:
    """Only allow redirects back into this app."""
    if next_url.startswith("/") and not next_url.startswith("//"):
        return next_url
    return "/"


async def _load_or_error(
    request: Request, service: TileInventoryService
) -> Response | None:
    """Render the full-screen error state when the list cannot be loaded."""
    try:
        await service.ensure_loaded()
    except GatewayError as e:
        logger.warning("Loading tiles for the dashboard failed: %s", e.message)
    if service.load_error is None:
        return None
    return templates.TemplateResponse(
        request,
        "error.html",
        {"message": service.load_error},
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
    )


@router.get("/", response_class=HTMLResponse)
async def dashboard(
    request: Request,
    query: TileQuery = Depends(tile_query_params),
    service: TileInventoryService = Depends(get_tile_service),
) -> Response:
    """Render the dashboard: KPI cards, charts, filters and the tile table."""
    error_page = await _load_or_error(request, service)
    if error_page is not None:
        return error_page

    settings = get_settings()
    view = derive_view(
        service.records,
        query,
        page_size=settings.page_size,
        active_status=settings.active_status,
    )
    current = view.query

    columns = [
        {
            "field": field_name,
            "label": label,
            "direction": current.sort_direction if current.sort_field == field_name else None,
            "url": _url("/", toggle_sort(current, field_name)),
        }
        for field_name, label in TABLE_COLUMNS
    ]
    previous_url = next_url = None
    if view.page.has_previous:
        previous_url = _url("/", go_to_page(current, current.page - 1, view.page.total_pages))
    if view.page.has_next:
        next_url = _url("/", go_to_page(current, current.page + 1, view.page.total_pages))

    return templates.TemplateResponse(
        request,
        "dashboard.html",
        {
            "view": view,
            "query": current,
            "options": view.options,
            "columns": columns,
            "previous_url": previous_url,
            "next_url": next_url,
            "grade_chart": grade_chart(view.filtered),
            "status_chart": status_chart(view.filtered),
            "active_status": settings.active_status,
            "current_url": _url("/", current),
            "notifications": service.notifications.drain(),
            "create_pending": service.create_pending,
            "form_options": {
                "grade": GRADE_OPTIONS,
                "finish": FINISH_OPTIONS,
                "type": TYPE_OPTIONS,
                "status": STATUS_OPTIONS,
            },
            "today": date.today().isoformat(),
        },
    )


@router.get("/storage-map", response_class=HTMLResponse)
async def storage_map(
    request: Request,
    query: TileQuery = Depends(tile_query_params),
    service: TileInventoryService = Depends(get_tile_service),
) -> Response:
    """Render the location-grouped card view, honouring the dashboard filters."""
    error_page = await _load_or_error(request, service)
    if error_page is not None:
        return error_page

    settings = get_settings()
    return templates.TemplateResponse(
        request,
        "storage_map.html",
        {
            "query": query,
            "groups": group_by_location(apply_filters(service.records, query)),
            "options": filter_options(service.records),
            "active_status": settings.active_status,
            "notifications": service.notifications.drain(),
        },
    )


@router.post("/tiles")
async def create_tile(
    entry_date: str = Form(""),
    brand: str = Form(""),
    manufacturer: str = Form(""),
    grade: str = Form("BIa"),
    working_size: str = Form(""),
    finish: str = Form("GL"),
    tile_type: str = Form("Rectified", alias="type"),
    lokasi_sampel: str = Form(""),
    status_value: str = Form("Sampel Aktif", alias="status"),
    next_url: str = Form("/", alias="next"),
    service: TileInventoryService = Depends(get_tile_service),
) -> RedirectResponse:
    """Handle the "Add tile" modal submission."""
    redirect = RedirectResponse(_safe_next(next_url), status_code=status.HTTP_303_SEE_OTHER)
    try:
        data = TileCreate(
            entry_date=entry_date,
            brand=brand,
            manufacturer=manufacturer,
            grade=grade,
            working_size=working_size,
            finish=finish,
            type=tile_type,
            lokasi_sampel=lokasi_sampel,
            status=status_value,
        )
    except ValidationError as e:
        service.notifications.error(_form_error_message(e))
        return redirect

    try:
        await service.create_tile(data)
    except SubmissionInProgressError as e:
        service.notifications.error(str(e))
    except GatewayError as e:
        # already queued as an error notification by the service
        logger.warning("Create from dashboard failed: %s", e.message)
    return redirect


@router.post("/tiles/{tile_id}/delete")
async def delete_tile(
    tile_id: str,
    next_url: str = Form("/", alias="next"),
    service: TileInventoryService = Depends(get_tile_service),
) -> RedirectResponse:
    """Handle a row's delete button (the browser asks for confirmation first)."""
    try:
        await service.delete_tile(tile_id)
    except EntityNotFoundError as e:
        service.notifications.error(str(e))
    except GatewayError as e:
        logger.warning("Delete from dashboard failed: %s", e.message)
    return RedirectResponse(_safe_next(next_url), status_code=status.HTTP_303_SEE_OTHER)


@router.post("/reload")
async def reload(
    request: Request,
    service: TileInventoryService = Depends(get_tile_service),
) -> Response:
    """Manual retry after a failed load; also usable as a resync button."""
    try:
        await service.load()
    except GatewayError as e:
        return templates.TemplateResponse(
            request,
            "error.html",
            {"message": e.message},
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        )
    return RedirectResponse("/", status_code=status.HTTP_303_SEE_OTHER)
