"""Offset (page number) pagination."""

from __future__ import annotations

import math
from typing import TYPE_CHECKING, Any

from pagination_service.core.pagination.predicates import Query
from pagination_service.core.pagination.schemas import OrderDirection, PageResult
from pagination_service.core.pagination.strategy import PaginationStrategy

if TYPE_CHECKING:
    from pagination_service.core.pagination.predicates import Predicate
    from pagination_service.core.pagination.schemas import PaginationPlan


def total_pages_for(total: int, per_page: int) -> int:
    """``ceil(total / per_page)``; 0 for an empty collection."""
    if total <= 0:
        return 0
    return math.ceil(total / per_page)


class PageStrategy(PaginationStrategy):
    """Count the filtered collection, then fetch one ``LIMIT/OFFSET`` slice.

    Records that share an order value are tie-broken by the primary
    column ascending, so consecutive pages never skip or repeat a record
    even when many records share a value.

    Example:
        result = PageStrategy(collection).execute(plan, predicate)
        result.total_pages, result.has_next_page
    """

    def execute(self, plan: PaginationPlan, predicate: Predicate) -> PageResult[Any]:
        total = self._count(Query(predicate=predicate))
        total_pages = total_pages_for(total, plan.per_page)
        page = plan.page or 1

        records: tuple[Any, ...] = ()
        if plan.offset < total:
            query = Query(
                predicate=predicate,
                order=self.order_terms(
                    plan.order_column, plan.order_direction, OrderDirection.ASC
                ),
                limit=plan.per_page,
                offset=plan.offset,
            )
            records = tuple(self._fetch(query))

        return PageResult(
            records=records,
            total_count=total,
            total_pages=total_pages,
            has_next_page=page < total_pages,
        )


__all__ = ["PageStrategy", "total_pages_for"]
