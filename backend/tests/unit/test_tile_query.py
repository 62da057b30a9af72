"""Unit tests for the dashboard query state derivations."""

from dataclasses import replace

import pytest

from tests.fakes import make_tile
from tile_dashboard.application.services.tile_query import (
    TileQuery,
    aggregate,
    apply_filters,
    derive_view,
    filter_options,
    go_to_page,
    grade_chart,
    group_by_location,
    paginate,
    sort_records,
    status_chart,
    toggle_sort,
)
from tile_dashboard.domain.entities import NO_LOCATION


@pytest.fixture
def tiles():
    return [
        make_tile(0, brand="Roman", manufacturer="PT. Roman Ceramic", grade="BIa", lokasi_sampel="Rak A-01"),
        make_tile(1, brand="Mulia", manufacturer="PT. Muliakeramik", grade="BIb", lokasi_sampel="Rak B-02",
                  status="Sampel Nonaktif"),
        make_tile(2, brand="Platinum", manufacturer="PT. Ubin Nusantara", grade="BIa", lokasi_sampel="  "),
        make_tile(3, brand="Asia Tile", manufacturer="PT. Asia", grade="BIII", lokasi_sampel="Rak A-01"),
        make_tile(4, brand="Roman", manufacturer="PT. Roman Ceramic", grade="BIb", lokasi_sampel=" Rak B-02 "),
    ]


# ── Filtering ──


def test_no_criteria_keeps_everything(tiles):
    assert apply_filters(tiles, TileQuery()) == tiles


def test_grade_and_status_are_exact_matches(tiles):
    result = apply_filters(tiles, TileQuery(grade="BIb", status="Sampel Aktif"))
    assert [t.id for t in result] == ["tile-4"]


def test_search_matches_manufacturer_without_brand_match(tiles):
    result = apply_filters(tiles, TileQuery(search="nusantara"))
    assert [t.brand for t in result] == ["Platinum"]


def test_search_is_case_insensitive_over_brand_and_location(tiles):
    assert [t.id for t in apply_filters(tiles, TileQuery(search="ROMAN"))] == ["tile-0", "tile-4"]
    assert [t.id for t in apply_filters(tiles, TileQuery(search="rak b"))] == ["tile-1", "tile-4"]


def test_filtering_is_idempotent(tiles):
    query = TileQuery(search="pt", grade="BIa")
    once = apply_filters(tiles, query)
    assert apply_filters(once, query) == once


def test_filtering_does_not_mutate_source(tiles):
    snapshot = list(tiles)
    apply_filters(tiles, TileQuery(grade="BIII"))
    assert tiles == snapshot


# ── Sorting ──


def test_sort_ascending_and_descending(tiles):
    asc = sort_records(tiles, "brand", "asc")
    desc = sort_records(tiles, "brand", "desc")
    assert [t.brand for t in asc] == ["Asia Tile", "Mulia", "Platinum", "Roman", "Roman"]
    assert [t.brand for t in desc] == ["Roman", "Roman", "Platinum", "Mulia", "Asia Tile"]


def test_sort_is_stable_for_equal_keys(tiles):
    asc = sort_records(tiles, "brand", "asc")
    desc = sort_records(tiles, "brand", "desc")
    assert [t.id for t in asc if t.brand == "Roman"] == ["tile-0", "tile-4"]
    assert [t.id for t in desc if t.brand == "Roman"] == ["tile-0", "tile-4"]


def test_none_values_sort_last_in_both_directions(tiles):
    missing = replace(tiles[0], id="tile-none", grade=None)
    records = [missing] + tiles
    assert sort_records(records, "grade", "asc")[-1].id == "tile-none"
    assert sort_records(records, "grade", "desc")[-1].id == "tile-none"


def test_no_sort_field_keeps_source_order(tiles):
    assert sort_records(tiles, None) == tiles


def test_unknown_sort_field_is_rejected(tiles):
    with pytest.raises(ValueError):
        sort_records(tiles, "price")
    with pytest.raises(ValueError):
        toggle_sort(TileQuery(), "price")


def test_toggle_same_field_flips_and_new_field_resets():
    query = toggle_sort(TileQuery(), "brand")
    assert (query.sort_field, query.sort_direction) == ("brand", "asc")

    query = toggle_sort(query, "brand")
    assert query.sort_direction == "desc"

    query = toggle_sort(query, "grade")
    assert (query.sort_field, query.sort_direction) == ("grade", "asc")


def test_toggling_twice_restores_ascending_order(tiles):
    query = toggle_sort(TileQuery(), "grade")
    first = sort_records(tiles, query.sort_field, query.sort_direction)

    query = toggle_sort(toggle_sort(query, "grade"), "grade")
    again = sort_records(tiles, query.sort_field, query.sort_direction)

    assert query.sort_direction == "asc"
    assert again == first


# ── Pagination ──


def test_twenty_three_records_make_three_pages():
    records = [make_tile(i) for i in range(23)]

    first = paginate(records, 1)
    last = paginate(records, 3)

    assert aggregate(records, "Sampel Aktif").total == 23
    assert first.total_pages == 3
    assert len(first.items) == 10
    assert len(last.items) == 3
    assert not last.has_next
    assert last.has_previous


def test_page_one_never_empty_when_records_exist():
    records = [make_tile(0)]
    assert paginate(records, 1).items == records


def test_paginate_clamps_out_of_range_pages():
    records = [make_tile(i) for i in range(23)]
    assert paginate(records, 0).page == 1
    assert paginate(records, 99).page == 3
    assert paginate([], 5).page == 1
    assert paginate([], 1).total_pages == 0


def test_go_to_page_ignores_out_of_range_requests():
    query = TileQuery(page=2)
    assert go_to_page(query, 0, 3) is query
    assert go_to_page(query, 4, 3) is query
    assert go_to_page(query, 3, 3).page == 3


# ── Aggregates ──


def test_aggregate_counts_full_list(tiles):
    metrics = aggregate(tiles, "Sampel Aktif")
    assert metrics.total == 5
    assert metrics.brands == 4
    assert metrics.active_samples == 4


def test_filter_options_are_distinct_and_sorted(tiles):
    options = filter_options(tiles)
    assert options.grades == ["BIII", "BIa", "BIb"]
    assert options.statuses == ["Sampel Aktif", "Sampel Nonaktif"]


def test_grade_chart_orders_by_count_descending(tiles):
    points = grade_chart(tiles)
    assert [(p.name, p.count) for p in points] == [("BIa", 2), ("BIb", 2), ("BIII", 1)]


def test_status_chart_reports_share(tiles):
    points = {p.name: p for p in status_chart(tiles)}
    assert points["Sampel Aktif"].count == 4
    assert points["Sampel Aktif"].percent == 80.0
    assert points["Sampel Nonaktif"].percent == 20.0
    assert status_chart([]) == []


# ── Storage map ──


def test_group_by_location_trims_and_sorts_keys(tiles):
    groups = group_by_location(tiles)
    assert list(groups) == sorted(groups)
    assert [t.id for t in groups["Rak B-02"]] == ["tile-1", "tile-4"]
    assert [t.id for t in groups[NO_LOCATION]] == ["tile-2"]


def test_group_by_location_partitions_exactly(tiles):
    groups = group_by_location(tiles)
    members = [t.id for bucket in groups.values() for t in bucket]
    assert sorted(members) == sorted(t.id for t in tiles)
    assert len(members) == len(set(members))


# ── Composite view ──


def test_derive_view_uses_full_list_for_metrics_and_options(tiles):
    view = derive_view(tiles, TileQuery(grade="BIII", page=7), page_size=10, active_status="Sampel Aktif")

    assert [t.id for t in view.page.items] == ["tile-3"]
    assert view.query.page == 1
    assert view.metrics.total == 5
    assert view.options.grades == ["BIII", "BIa", "BIb"]
