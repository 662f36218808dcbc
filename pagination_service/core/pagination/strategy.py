"""Base class for pagination strategies.

A strategy turns a plan plus a compiled filter predicate into a
:class:`PageResult` by issuing queries against a collection. All
storage access goes through :meth:`PaginationStrategy._count` and
:meth:`PaginationStrategy._fetch`, which turn any backend failure into a
single :class:`StorageError`; nothing is retried and no partial result
escapes.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import TYPE_CHECKING, Any, NoReturn

from pagination_service.core.exceptions import StorageError
from pagination_service.core.pagination.predicates import OrderTerm, PredicateCompiler
from pagination_service.core.pagination.schemas import OrderDirection
from pagination_service.infra.logging import get_lazy_logger

if TYPE_CHECKING:
    from pagination_service.core.pagination.collection import PaginatedCollection
    from pagination_service.core.pagination.predicates import Predicate, Query
    from pagination_service.core.pagination.schemas import PageResult, PaginationPlan


class PaginationStrategy(ABC):
    """Execute one pagination mode against a collection."""

    def __init__(self, collection: PaginatedCollection[Any]) -> None:
        self.collection = collection
        self.oracle = collection.oracle
        self.compiler = PredicateCompiler(self.oracle)
        self._logger = logging.getLogger(f"pagination.{type(self).__name__}")
        self._lazy = get_lazy_logger(f"pagination.{type(self).__name__}")

    @abstractmethod
    def execute(self, plan: PaginationPlan, predicate: Predicate) -> PageResult[Any]:
        """Run the plan.

        Args:
            plan: Validated plan.
            predicate: Compiled filters (without any keyset boundary).

        Returns:
            Page records plus derived cursors/counts.
        """
        ...

    def order_terms(
        self,
        column: str,
        direction: OrderDirection,
        tie_direction: OrderDirection | None = None,
    ) -> tuple[OrderTerm, ...]:
        """Sort on ``column`` with the primary column as a stable tie-break.

        Args:
            column: Order column.
            direction: Direction for ``column``.
            tie_direction: Direction of the primary-column tie-break;
                defaults to ``direction``.
        """
        primary = self.oracle.primary_column
        if column == primary:
            return (OrderTerm(column, direction),)
        return (OrderTerm(column, direction), OrderTerm(primary, tie_direction or direction))

    def _count(self, query: Query) -> int:
        try:
            total = self.collection.count(query)
        except StorageError:
            raise
        except Exception as exc:
            self._storage_failed("count", query, exc)
        self._lazy.debug(lambda: f"count: {query.describe()} -> {total}")
        return total

    def _fetch(self, query: Query) -> Sequence[Any]:
        try:
            records = self.collection.fetch(query)
        except StorageError:
            raise
        except Exception as exc:
            self._storage_failed("fetch", query, exc)
        self._lazy.debug(lambda: f"fetch: {query.describe()} -> {len(records)} records")
        return records

    def _storage_failed(self, operation: str, query: Query, exc: Exception) -> NoReturn:
        self._logger.error(
            "Storage query failed",
            exc_info=exc,
            extra={
                "collection": self.oracle.collection_name,
                "operation": f"storage.{operation}",
                "query": query.describe(),
            },
        )
        raise StorageError(str(exc) or type(exc).__name__, operation=operation) from exc


__all__ = ["PaginationStrategy"]
