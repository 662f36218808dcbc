"""Cursor (keyset) pagination.

The cursor is the order-column value the page starts at, inclusive:

    ascending scan:   order_column >= cursor ORDER BY order_column ASC
    descending scan:  order_column <= cursor ORDER BY order_column DESC

The scan runs descending when exactly one of ``order=DESC`` and
``reverse=true`` is set, so reversing a descending order walks the
collection ascending.

For the primary column the next cursor is simply one past the last key
of the page (``max + 1`` ascending, ``min - 1`` descending), confirmed
by a ``LIMIT 1`` lookup so it is ``None`` on the last page. Other columns
can hold duplicate values; there a group of records sharing one value is
never split across two pages, unless the group alone is larger than the
plan's ``group_limit``. Such a page holds the first ``group_limit``
records of the group and the next cursor moves past the whole group.

Records whose order value is NULL have no position in the keyset and are
left out of cursor pages and of the cursor-mode total.
"""

from __future__ import annotations

from datetime import UTC, datetime
from decimal import Decimal
from typing import TYPE_CHECKING, Any

from pagination_service.core.pagination.collection import record_value
from pagination_service.core.pagination.predicates import AllOf, Query
from pagination_service.core.pagination.schemas import (
    CursorValue,
    OrderDirection,
    PageResult,
)
from pagination_service.core.pagination.strategy import PaginationStrategy

if TYPE_CHECKING:
    from collections.abc import Sequence

    from pagination_service.core.pagination.predicates import OrderTerm, Predicate
    from pagination_service.core.pagination.schemas import PaginationPlan


class CursorStrategy(PaginationStrategy):
    """Keyset pagination over one order column.

    Example:
        result = CursorStrategy(collection).execute(plan, predicate)
        result.records, result.next_cursor, result.prev_cursor
    """

    def execute(self, plan: PaginationPlan, predicate: Predicate) -> PageResult[Any]:
        column = plan.order_column
        ascending = plan.ascending
        scan = OrderDirection.ASC if ascending else OrderDirection.DESC
        order = self.order_terms(column, scan)
        if column != self.oracle.primary_column:
            predicate = AllOf.of(predicate, self.compiler.not_null(column))

        if not self._fetch(Query(predicate=predicate, limit=1)):
            self._lazy.debug(lambda: f"cursor: {self.oracle.collection_name} is empty")
            return PageResult(
                records=(),
                total_count=0 if plan.include_total else None,
                has_next_page=False,
            )

        page_predicate: Predicate = predicate
        if plan.cursor is not None:
            page_predicate = AllOf.of(
                predicate,
                self.compiler.boundary(column, plan.cursor.value, ascending=ascending),
            )

        if column == self.oracle.primary_column:
            records, next_value = self._unique_page(plan, predicate, page_predicate, order)
        else:
            records, next_value = self._grouped_page(plan, predicate, page_predicate, order)

        total = self._count(Query(predicate=predicate)) if plan.include_total else None
        direction = "backward" if plan.reverse else "forward"

        return PageResult(
            records=tuple(records),
            total_count=total,
            has_next_page=next_value is not None,
            next_cursor=_cursor(next_value, direction),
            prev_cursor=_cursor(self._prev_value(plan, predicate, scan), direction),
        )

    def _unique_page(
        self,
        plan: PaginationPlan,
        predicate: Predicate,
        page_predicate: Predicate,
        order: tuple[OrderTerm, ...],
    ) -> tuple[Sequence[Any], Any]:
        column = plan.order_column
        ascending = plan.ascending
        records = self._fetch(Query(predicate=page_predicate, order=order, limit=plan.per_page))
        if not records:
            return records, None

        last = _key(record_value(records[-1], column))
        if isinstance(last, int) and not isinstance(last, bool):
            candidate = last + 1 if ascending else last - 1
            past = self.compiler.boundary(column, candidate, ascending=ascending)
        else:
            candidate = None
            past = self.compiler.boundary(column, last, ascending=ascending, inclusive=False)

        following = self._fetch(Query(predicate=AllOf.of(predicate, past), order=order, limit=1))
        if not following:
            return records, None
        if candidate is None:
            candidate = _key(record_value(following[0], column))
        return records, candidate

    def _grouped_page(
        self,
        plan: PaginationPlan,
        predicate: Predicate,
        page_predicate: Predicate,
        order: tuple[OrderTerm, ...],
    ) -> tuple[Sequence[Any], Any]:
        column = plan.order_column
        per_page = plan.per_page
        fetched = self._fetch(Query(predicate=page_predicate, order=order, limit=per_page + 1))
        if len(fetched) <= per_page:
            return fetched, None

        deferred = _key(record_value(fetched[per_page], column))
        kept = [r for r in fetched[:per_page] if _key(record_value(r, column)) != deferred]
        if kept:
            self._lazy.debug(
                lambda: f"cursor: deferring {per_page - len(kept)} records tied at {deferred!r}"
            )
            return kept, deferred

        # One value fills the whole page: emit the group, up to group_limit records.
        limit = plan.group_limit
        group = self._fetch(
            Query(
                predicate=AllOf.of(predicate, self.compiler.equals(column, deferred)),
                order=order,
                limit=None if limit is None else limit + 1,
            )
        )
        if limit is not None and len(group) > limit:
            group = group[:limit]
            self._logger.warning(
                "Tie group truncated",
                extra={
                    "collection": self.oracle.collection_name,
                    "column": column,
                    "value": deferred,
                    "group_limit": limit,
                },
            )
        self._lazy.debug(lambda: f"cursor: extended page to {len(group)} records at {deferred!r}")
        following = self._fetch(
            Query(
                predicate=AllOf.of(
                    predicate,
                    self.compiler.boundary(
                        column, deferred, ascending=plan.ascending, inclusive=False
                    ),
                ),
                order=order,
                limit=1,
            )
        )
        if not following:
            return group, None
        return group, _key(record_value(following[0], column))

    def _prev_value(self, plan: PaginationPlan, predicate: Predicate, scan: OrderDirection) -> Any:
        if plan.cursor is None:
            return None
        column = plan.order_column
        before = self.compiler.before(column, plan.cursor.value, ascending=plan.ascending)
        preceding = self._fetch(
            Query(
                predicate=AllOf.of(predicate, before),
                order=self.order_terms(column, scan.reversed),
                limit=plan.per_page,
            )
        )
        if not preceding:
            return None
        return _key(record_value(preceding[-1], column))


def _key(value: Any) -> Any:
    """Normalize a stored order value into a cursor scalar."""
    if isinstance(value, Decimal):
        return float(value)
    if isinstance(value, datetime) and value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


def _cursor(value: Any, direction: str) -> CursorValue | None:
    if value is None:
        return None
    return CursorValue(value=value, direction=direction)


__all__ = ["CursorStrategy"]
