"""Cursor pagination over a nullable order column and over oversized tie groups."""
from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

import pytest
from sqlalchemy.orm import Session

from pagination_service.core.database.collection import SQLAlchemyCollection
from pagination_service.core.database.memory import InMemoryCollection, infer_oracle
from pagination_service.core.database.oracle import build_oracle
from pagination_service.core.pagination.paginator import Page, Paginator
from pagination_service.core.settings import PaginationSettings
from tests.factories import Gadget, ids_of, make_gadget_rows

GadgetFactory = Callable[[list[dict[str, Any]]], Any]


@pytest.fixture(params=["memory", "sql"])
def gadgets(request: pytest.FixtureRequest, session: Session) -> GadgetFactory:
    """Build a gadget collection on either backend from plain rows."""

    def build(rows: list[dict[str, Any]]):
        if request.param == "memory":
            return InMemoryCollection(rows, infer_oracle("gadgets", rows))
        session.add_all([Gadget(**row) for row in rows])
        session.commit()
        return SQLAlchemyCollection(session, Gadget, oracle=build_oracle(Gadget))

    return build


def weight_of(record: Any) -> float | None:
    return record["weight"] if isinstance(record, dict) else record.weight


def every_fourth_missing(i: int) -> float | None:
    """Weights 0.0, 1.0 and 2.0 with every fourth gadget unweighed."""
    return None if i % 4 == 0 else float(i % 3)


def walk(paginator: Paginator, collection, **options: Any) -> list[Page[Any]]:
    pages: list[Page[Any]] = []
    cursor = None
    while True:
        request = {"use_cursor": "true", **options}
        if cursor is not None:
            request["cursor"] = cursor
        page = paginator.paginate(collection, request)
        pages.append(page)
        cursor = page.metadata.next_cursor
        if cursor is None or len(pages) > 50:
            return pages


@pytest.mark.unit
class TestCursorNullOrderValues:
    """Records with a NULL order value are left out of cursor pages."""

    ROWS = make_gadget_rows(20, every_fourth_missing)
    WEIGHED = [row["id"] for row in ROWS if row["weight"] is not None]

    def test_first_page_skips_nulls(self, paginator: Paginator, gadgets: GadgetFactory):
        collection = gadgets(self.ROWS)

        page = paginator.paginate(
            collection, {"use_cursor": "true", "order_column": "weight", "per_page": "4"}
        )

        assert [weight_of(r) for r in page.records] == [0.0] * 5
        assert ids_of(page.records) == [3, 6, 9, 15, 18]
        assert page.metadata.next_cursor == 1.0

    def test_round_trip_visits_every_weighed_record(
        self, paginator: Paginator, gadgets: GadgetFactory
    ):
        pages = walk(paginator, gadgets(self.ROWS), order_column="weight", per_page="4")
        ids = [i for page in pages for i in ids_of(page.records)]

        assert len(pages) == 3
        assert sorted(ids) == self.WEIGHED

    def test_reverse_round_trip(self, paginator: Paginator, gadgets: GadgetFactory):
        pages = walk(
            paginator, gadgets(self.ROWS), order_column="weight", per_page="4", reverse="true"
        )
        weights = [weight_of(r) for page in pages for r in page.records]

        assert None not in weights
        assert weights == sorted(weights, reverse=True)
        assert len(weights) == len(self.WEIGHED)

    def test_cursor_and_prev_cursor(self, paginator: Paginator, gadgets: GadgetFactory):
        page = paginator.paginate(
            gadgets(self.ROWS),
            {"use_cursor": "true", "order_column": "weight", "per_page": "8", "cursor": "1.0"},
        )

        assert {weight_of(r) for r in page.records} == {1.0}
        assert page.metadata.next_cursor == 2.0
        assert page.metadata.prev_cursor == 0.0

    def test_total_counts_weighed_records(self, paginator: Paginator, gadgets: GadgetFactory):
        page = paginator.paginate(
            gadgets(self.ROWS),
            {"use_cursor": "true", "order_column": "weight", "include_total": "true"},
        )

        assert page.metadata.total == 15
        assert len(page.records) == 15

    def test_primary_column_keeps_every_record(
        self, paginator: Paginator, gadgets: GadgetFactory
    ):
        """Ordering by id does not filter on the weight column."""
        page = paginator.paginate(gadgets(self.ROWS), {"use_cursor": "true", "per_page": "50"})

        assert ids_of(page.records) == list(range(1, 21))

    def test_page_mode_unaffected(self, paginator: Paginator, gadgets: GadgetFactory):
        page = paginator.paginate(gadgets(self.ROWS), {"order_column": "weight", "per_page": "50"})

        assert page.metadata.total == 20
        assert len(page.records) == 20


@pytest.mark.unit
class TestCursorGroupLimit:
    """A run of equal values never yields more than max_per_page records."""

    @pytest.fixture
    def small_paginator(self) -> Paginator:
        return Paginator(PaginationSettings(default_per_page=5, max_per_page=5))

    def test_single_value_collection_is_capped(
        self, small_paginator: Paginator, gadgets: GadgetFactory
    ):
        collection = gadgets(make_gadget_rows(1000, lambda i: 1.0))

        page = small_paginator.paginate(
            collection, {"use_cursor": "true", "order_column": "weight", "per_page": "5"}
        )

        assert ids_of(page.records) == [1, 2, 3, 4, 5]
        assert page.metadata.next_cursor is None
        assert page.metadata.has_next_page is False

    def test_cursor_moves_past_truncated_group(
        self, small_paginator: Paginator, gadgets: GadgetFactory
    ):
        collection = gadgets(make_gadget_rows(15, lambda i: 1.0 if i <= 12 else 2.0))

        pages = walk(small_paginator, collection, order_column="weight")

        assert [ids_of(page.records) for page in pages] == [[1, 2, 3, 4, 5], [13, 14, 15]]
        assert pages[0].metadata.next_cursor == 2.0

    def test_truncation_is_logged(
        self,
        small_paginator: Paginator,
        gadgets: GadgetFactory,
        caplog: pytest.LogCaptureFixture,
    ):
        collection = gadgets(make_gadget_rows(8, lambda i: 1.0))

        with caplog.at_level(logging.WARNING, logger="pagination.CursorStrategy"):
            small_paginator.paginate(collection, {"use_cursor": "true", "order_column": "weight"})

        record = next(r for r in caplog.records if r.getMessage() == "Tie group truncated")
        assert record.collection == "gadgets"
        assert record.column == "weight"
        assert record.group_limit == 5

    def test_group_within_limit_is_whole(self, paginator: Paginator, gadgets: GadgetFactory):
        """With the default limit of 100 a group of 12 still comes back whole."""
        collection = gadgets(make_gadget_rows(15, lambda i: 1.0 if i <= 12 else 2.0))

        page = paginator.paginate(
            collection, {"use_cursor": "true", "order_column": "weight", "per_page": "5"}
        )

        assert ids_of(page.records) == list(range(1, 13))
        assert page.metadata.next_cursor == 2.0
