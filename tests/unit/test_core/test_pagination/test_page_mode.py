"""Page (offset) pagination against both storage backends."""
from __future__ import annotations

import math

import pytest

from pagination_service.core.pagination.page import total_pages_for
from pagination_service.core.pagination.paginator import Paginator
from tests.factories import ids_of, make_invention_rows


@pytest.mark.unit
class TestTotalPages:
    """total_pages arithmetic."""

    @pytest.mark.parametrize(
        ("total", "per_page", "expected"),
        [(0, 8, 0), (1, 8, 1), (8, 8, 1), (9, 8, 2), (100, 8, 13), (100, 100, 1)],
    )
    def test_total_pages(self, total, per_page, expected):
        assert total_pages_for(total, per_page) == expected


@pytest.mark.unit
class TestPageMode:
    """Paginator in page mode."""

    def test_first_page(self, paginator: Paginator, collection):
        """100 records at 8 per page make 13 pages."""
        page = paginator.paginate(collection, {"per_page": "8"})

        assert ids_of(page.records) == list(range(1, 9))
        assert page.metadata.total == 100
        assert page.metadata.total_pages == 13
        assert page.metadata.page == 1
        assert page.metadata.has_next_page is True

    def test_last_page(self, paginator: Paginator, collection):
        page = paginator.paginate(collection, {"page": "13", "per_page": "8"})

        assert ids_of(page.records) == [97, 98, 99, 100]
        assert page.metadata.has_next_page is False

    def test_page_past_the_end(self, paginator: Paginator, collection):
        page = paginator.paginate(collection, {"page": "14", "per_page": "8"})

        assert list(page.records) == []
        assert page.metadata.total_pages == 13
        assert page.metadata.has_next_page is False

    def test_descending(self, paginator: Paginator, collection):
        page = paginator.paginate(collection, {"order": "desc", "per_page": "5"})

        assert ids_of(page.records) == [100, 99, 98, 97, 96]

    @pytest.mark.parametrize("order", ["asc", "desc"])
    def test_duplicate_sort_values_never_skip_or_repeat(
        self, paginator: Paginator, collection, order
    ):
        """Walking every page visits each record exactly once, ties broken by id."""
        per_page = 7
        seen: list[int] = []
        for number in range(1, math.ceil(100 / per_page) + 1):
            page = paginator.paginate(
                collection,
                {"order_column": "price", "order": order, "per_page": per_page, "page": number},
            )
            seen.extend(ids_of(page.records))

        rows = {row["id"]: row for row in make_invention_rows()}
        expected = sorted(rows, key=lambda i: (rows[i]["price"], i))
        if order == "desc":
            # price descending, id still ascending inside a price
            expected = sorted(rows, key=lambda i: (-rows[i]["price"], i))
        assert seen == expected

    def test_metadata_shape(self, paginator: Paginator, collection):
        page = paginator.paginate(collection, {"page": "2", "per_page": "10"})

        assert page.metadata.as_dict() == {
            "total": 100,
            "page": 2,
            "per_page": 10,
            "total_pages": 10,
            "has_next_page": True,
        }

    def test_page_len(self, paginator: Paginator, collection):
        assert len(paginator.paginate(collection, {"per_page": "3"})) == 3


@pytest.mark.unit
class TestPageModeFilters:
    """Filters applied in page mode."""

    def test_values_in(self, paginator: Paginator, collection):
        page = paginator.paginate(
            collection, {"values_in": {"category": ["tool"]}, "per_page": "8"}
        )

        assert page.metadata.total == 33
        assert page.metadata.total_pages == 5
        assert all(i % 3 == 0 for i in ids_of(page.records))

    def test_combined_filters(self, paginator: Paginator, collection, invention_rows):
        options = {
            "greater": {"price": "5"},
            "values_not_in": {"category": ["tool"]},
            "smaller_or_equal": {"launched_at": "2025-01-02T00:00:00Z"},
            "per_page": "100",
        }
        expected = [
            row["id"]
            for row in invention_rows
            if row["price"] > 5
            and row["category"] != "tool"
            and row["launched_at"].isoformat() <= "2025-01-02T00:00:00"
        ]

        page = paginator.paginate(collection, options)

        assert ids_of(page.records) == expected
        assert page.metadata.total == len(expected)

    def test_scalar_set_filter(self, paginator: Paginator, collection):
        page = paginator.paginate(collection, {"values_in": {"id": "42"}})

        assert ids_of(page.records) == [42]

    def test_empty_result(self, paginator: Paginator, collection):
        page = paginator.paginate(collection, {"values_in": {"id": ["1000"]}})

        assert list(page.records) == []
        assert page.metadata.total == 0
        assert page.metadata.total_pages == 0
        assert page.metadata.has_next_page is False

    def test_empty_values_in_matches_nothing(self, paginator: Paginator, collection):
        page = paginator.paginate(collection, {"values_in": {"id": []}})

        assert page.metadata.total == 0

    def test_empty_values_not_in_matches_everything(self, paginator: Paginator, collection):
        page = paginator.paginate(collection, {"values_not_in": {"id": []}})

        assert page.metadata.total == 100
