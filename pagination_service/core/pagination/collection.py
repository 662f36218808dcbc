"""The narrow storage interface the paginator works against.

A collection is anything that can count and fetch records for a
:class:`~pagination_service.core.pagination.predicates.Query`. The
paginator receives one per call instead of patching pagination methods
onto a model or relation type.

Implementations shipped with the service:
    - ``SQLAlchemyCollection`` (pagination_service.core.database.collection)
    - ``InMemoryCollection`` (pagination_service.core.database.memory)
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from pagination_service.core.pagination.oracle import SchemaOracle
    from pagination_service.core.pagination.predicates import Query


@runtime_checkable
class PaginatedCollection[T](Protocol):
    """Sorted, filterable, countable collection of records."""

    @property
    def oracle(self) -> SchemaOracle:
        """Column metadata for this collection."""
        ...

    def count(self, query: Query) -> int:
        """Number of records matching ``query.predicate`` (order/limit ignored)."""
        ...

    def fetch(self, query: Query) -> Sequence[T]:
        """Records matching the predicate, ordered, offset and limited."""
        ...


def record_value(record: Any, column: str) -> Any:
    """Read a column from a mapping-like or attribute-style record."""
    if isinstance(record, Mapping):
        return record[column]
    return getattr(record, column)


__all__ = ["PaginatedCollection", "record_value"]
