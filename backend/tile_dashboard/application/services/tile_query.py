"""Query state for the dashboard: pure derivations over the record list.

Nothing here mutates its input: filters, sorting, pagination, grouping and
aggregates are recomputed from the source tuple on every request. State
transitions (``toggle_sort``, ``go_to_page``) return a new ``TileQuery``.
Filter changes land on page 1 because the filter form submits no page.
"""

import math
from collections import Counter
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field, replace
from typing import Literal

from tile_dashboard.domain.entities import NO_LOCATION, TILE_FIELDS, TileRecord

SortDirection = Literal["asc", "desc"]

DEFAULT_PAGE_SIZE = 10
SORTABLE_FIELDS: frozenset[str] = frozenset(TILE_FIELDS)


@dataclass(frozen=True)
class TileQuery:
    """Transient UI state: filter criteria, sort specification, current page."""

    search: str = ""
    grade: str = ""
    status: str = ""
    sort_field: str | None = None
    sort_direction: SortDirection = "asc"
    page: int = 1


@dataclass(frozen=True)
class Page:
    items: list[TileRecord]
    page: int
    total_pages: int
    total_items: int
    page_size: int

    @property
    def has_previous(self) -> bool:
        return self.page > 1

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages


@dataclass(frozen=True)
class TileMetrics:
    total: int
    brands: int
    active_samples: int


@dataclass(frozen=True)
class FilterOptions:
    grades: list[str] = field(default_factory=list)
    statuses: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class ChartPoint:
    name: str
    count: int
    percent: float = 0.0


# ── Filtering ────────────────────────────────────────────────────────


def apply_filters(records: Iterable[TileRecord], query: TileQuery) -> list[TileRecord]:
    """Keep records matching grade, status and the free-text search.

    The search is a case-insensitive substring match over brand,
    manufacturer and storage location.
    """
    needle = query.search.strip().lower()

    def matches(tile: TileRecord) -> bool:
        if query.grade and tile.grade != query.grade:
            return False
        if query.status and tile.status != query.status:
            return False
        if not needle:
            return True
        return (
            needle in tile.brand.lower()
            or needle in tile.manufacturer.lower()
            or needle in tile.lokasi_sampel.lower()
        )

    return [tile for tile in records if matches(tile)]


# ── Sorting ──────────────────────────────────────────────────────────


def sort_records(
    records: Sequence[TileRecord],
    sort_field: str | None,
    direction: SortDirection = "asc",
) -> list[TileRecord]:
    """Stable sort by a record field; ``None`` values always go last."""
    if sort_field is None:
        return list(records)
    if sort_field not in SORTABLE_FIELDS:
        raise ValueError(f"Cannot sort by unknown field '{sort_field}'")

    present = [r for r in records if getattr(r, sort_field) is not None]
    missing = [r for r in records if getattr(r, sort_field) is None]
    present.sort(key=lambda r: getattr(r, sort_field), reverse=direction == "desc")
    return present + missing


def toggle_sort(query: TileQuery, sort_field: str) -> TileQuery:
    """Clicking the active column flips direction; a new column starts ascending."""
    if sort_field not in SORTABLE_FIELDS:
        raise ValueError(f"Cannot sort by unknown field '{sort_field}'")
    if query.sort_field == sort_field:
        direction: SortDirection = "desc" if query.sort_direction == "asc" else "asc"
        return replace(query, sort_direction=direction)
    return replace(query, sort_field=sort_field, sort_direction="asc")


# ── Pagination ───────────────────────────────────────────────────────


def total_pages(count: int, page_size: int = DEFAULT_PAGE_SIZE) -> int:
    return math.ceil(count / page_size) if count > 0 else 0


def paginate(
    records: Sequence[TileRecord],
    page: int,
    page_size: int = DEFAULT_PAGE_SIZE,
) -> Page:
    """Slice one page, clamping the page number into ``[1, max(total_pages, 1)]``."""
    if page_size < 1:
        raise ValueError("page_size must be positive")
    pages = total_pages(len(records), page_size)
    current = min(max(page, 1), max(pages, 1))
    start = (current - 1) * page_size
    return Page(
        items=list(records[start : start + page_size]),
        page=current,
        total_pages=pages,
        total_items=len(records),
        page_size=page_size,
    )


def go_to_page(query: TileQuery, page: int, pages: int) -> TileQuery:
    """Move to ``page``; out-of-range requests leave the query unchanged."""
    if page < 1 or page > pages:
        return query
    return replace(query, page=page)


# ── Aggregates ───────────────────────────────────────────────────────


def aggregate(records: Sequence[TileRecord], active_status: str) -> TileMetrics:
    """KPI counts over the full list (not the filtered view)."""
    return TileMetrics(
        total=len(records),
        brands=len({r.brand for r in records}),
        active_samples=sum(1 for r in records if r.status == active_status),
    )


def filter_options(records: Sequence[TileRecord]) -> FilterOptions:
    """Distinct sorted grades and statuses, so dropdowns stay stable while filtering."""
    return FilterOptions(
        grades=sorted({r.grade for r in records}),
        statuses=sorted({r.status for r in records}),
    )


def grade_chart(records: Sequence[TileRecord]) -> list[ChartPoint]:
    """Count per grade, most frequent first."""
    counts = Counter(r.grade for r in records)
    return [ChartPoint(name=name, count=count) for name, count in counts.most_common()]


def status_chart(records: Sequence[TileRecord]) -> list[ChartPoint]:
    """Count per status with its share of the total, in first-seen order."""
    counts = Counter(r.status for r in records)
    total = len(records)
    return [
        ChartPoint(name=name, count=count, percent=round(count * 100 / total, 2))
        for name, count in counts.items()
    ]


# ── Storage map ──────────────────────────────────────────────────────


def group_by_location(records: Iterable[TileRecord]) -> dict[str, list[TileRecord]]:
    """Partition records by trimmed storage location, keys in ascending order.

    Blank locations collapse into the NO_LOCATION bucket.
    """
    groups: dict[str, list[TileRecord]] = {}
    for tile in records:
        location = tile.lokasi_sampel.strip() or NO_LOCATION
        groups.setdefault(location, []).append(tile)
    return {location: groups[location] for location in sorted(groups)}


# ── Composite view ───────────────────────────────────────────────────


@dataclass(frozen=True)
class TileView:
    """Everything the dashboard renders for one request."""

    query: TileQuery
    page: Page
    filtered: list[TileRecord]
    metrics: TileMetrics
    options: FilterOptions


def derive_view(
    records: Sequence[TileRecord],
    query: TileQuery,
    *,
    page_size: int = DEFAULT_PAGE_SIZE,
    active_status: str,
) -> TileView:
    """Filter, sort and paginate ``records`` for ``query``.

    The query's page is clamped into range, so the returned query always
    names the page actually shown.
    """
    filtered = apply_filters(records, query)
    ordered = sort_records(filtered, query.sort_field, query.sort_direction)
    page = paginate(ordered, query.page, page_size)
    return TileView(
        query=replace(query, page=page.page),
        page=page,
        filtered=filtered,
        metrics=aggregate(records, active_status),
        options=filter_options(records),
    )
