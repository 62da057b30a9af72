"""Translate request query parameters into a TileQuery."""

from fastapi import Query

from tile_dashboard.application.services.tile_query import SORTABLE_FIELDS, TileQuery


def parse_tile_query(
    q: str = "",
    grade: str = "",
    status: str = "",
    sort: str | None = None,
    direction: str = "asc",
    page: int = 1,
) -> TileQuery:
    """Build a TileQuery; unknown sort fields fall back to source order."""
    return TileQuery(
        search=q or "",
        grade=grade or "",
        status=status or "",
        sort_field=sort if sort in SORTABLE_FIELDS else None,
        sort_direction="desc" if direction == "desc" else "asc",
        page=page,
    )


def query_to_params(query: TileQuery) -> dict[str, str | int]:
    """Inverse of parse_tile_query, omitting defaults."""
    params: dict[str, str | int] = {}
    if query.search:
        params["q"] = query.search
    if query.grade:
        params["grade"] = query.grade
    if query.status:
        params["status"] = query.status
    if query.sort_field:
        params["sort"] = query.sort_field
        params["dir"] = query.sort_direction
    if query.page != 1:
        params["page"] = query.page
    return params


def tile_query_params(
    q: str = Query("", description="Case-insensitive search over brand, manufacturer, location"),
    grade: str = Query("", description="Exact grade filter"),
    status: str = Query("", description="Exact status filter"),
    sort: str | None = Query(None, description="Field to sort by"),
    direction: str = Query("asc", alias="dir", pattern="^(asc|desc)$"),
    page: int = Query(1),
) -> TileQuery:
    """FastAPI dependency shared by the JSON API and the HTML pages."""
    return parse_tile_query(q, grade, status, sort, direction, page)
