"""Page requests, page results and in-memory sorting."""

from __future__ import annotations

import pytest

from backend.buq.domain.common import (
    Page,
    PageSpec,
    SortDirection,
    SortOrder,
    ValidationError,
    parse_sort,
)
from backend.buq.domain.common.pagination import sort_in_memory


def test_first_page_of_twenty_five_records():
    page = Page.slice(list(range(25)), PageSpec(page=0, size=10))

    assert page.content == list(range(10))
    assert page.number_of_elements == 10
    assert page.total_elements == 25
    assert page.total_pages == 3
    assert page.first
    assert not page.last


def test_last_partial_page():
    page = Page.slice(list(range(25)), PageSpec(page=2, size=10))

    assert page.content == [20, 21, 22, 23, 24]
    assert page.last


def test_page_past_the_end_is_empty():
    page = Page.slice(list(range(5)), PageSpec(page=3, size=10))

    assert page.content == []
    assert page.total_elements == 5


def test_empty_result_has_no_pages():
    page = Page.slice([], PageSpec())

    assert page.total_pages == 0
    assert page.first and page.last


@pytest.mark.parametrize("page,size,field", [(-1, 10, "page"), (0, 0, "size")])
def test_invalid_page_spec(page, size, field):
    with pytest.raises(ValidationError) as excinfo:
        PageSpec(page=page, size=size)

    assert field in excinfo.value.fields


def test_of_clamps_size_and_parses_sort():
    spec = PageSpec.of(1, 1000, ["name,desc", "description"], max_size=500)

    assert spec.size == 500
    assert spec.offset == 500
    assert spec.sort == (
        SortOrder("name", SortDirection.DESC),
        SortOrder("description", SortDirection.ASC),
    )


def test_parse_sort_rejects_unknown_direction():
    with pytest.raises(ValidationError):
        parse_sort(["name,sideways"])


def test_ensure_sortable_names_unknown_properties():
    spec = PageSpec(sort=(SortOrder("colour"),))

    with pytest.raises(ValidationError) as excinfo:
        spec.ensure_sortable(["name"])

    assert excinfo.value.fields == {"sort": "colour"}


def test_map_keeps_paging_metadata():
    page = Page.slice(list(range(25)), PageSpec(page=1, size=10)).map(str)

    assert page.content[0] == "10"
    assert page.number == 1
    assert page.total_elements == 25


def test_sort_in_memory_multi_key_with_nones_last():
    rows = [("b", 2), ("a", None), ("a", 1), ("b", 1)]

    ordered = sort_in_memory(
        rows,
        [SortOrder("letter"), SortOrder("number", SortDirection.DESC)],
        {"letter": lambda row: row[0], "number": lambda row: row[1]},
    )

    assert ordered == [("a", 1), ("a", None), ("b", 2), ("b", 1)]
