"""In-memory paginated collection over a plain sequence of records.

Records can be mappings (``{"id": 1, ...}``) or objects with attributes.
Predicates are evaluated in Python with SQL-like semantics: a missing or
``None`` value never matches a comparison or ``IN`` test, and sorts
before every other value.

Example:
    rows = [{"id": 1, "price": 9.5}, {"id": 2, "price": 3.0}]
    collection = InMemoryCollection(rows, infer_oracle("rows", rows))
    paginator.paginate(collection, {"order_column": "price"})
"""

from __future__ import annotations

import operator
from collections.abc import Callable, Mapping, Sequence
from datetime import UTC, date, datetime
from decimal import Decimal
from typing import TYPE_CHECKING, Any

from pagination_service.core.pagination.collection import record_value
from pagination_service.core.pagination.oracle import ColumnType, StaticSchemaOracle
from pagination_service.core.pagination.predicates import (
    AllOf,
    Comparison,
    InSet,
    NotInSet,
    NotNull,
)
from pagination_service.core.pagination.schemas import CompareOp, OrderDirection
from pagination_service.infra.logging import get_lazy_logger

if TYPE_CHECKING:
    from pagination_service.core.pagination.oracle import SchemaOracle
    from pagination_service.core.pagination.predicates import Predicate, Query
    from pagination_service.core.settings.pagination import PaginationOverrides

_lazy = get_lazy_logger(__name__)

_OPERATORS: dict[CompareOp, Callable[[Any, Any], bool]] = {
    CompareOp.GT: operator.gt,
    CompareOp.GE: operator.ge,
    CompareOp.LT: operator.lt,
    CompareOp.LE: operator.le,
    CompareOp.EQ: operator.eq,
}


class InMemoryCollection[T]:
    """List-backed :class:`PaginatedCollection`.

    The sequence is snapshotted at construction; later changes to the
    caller's list are not seen.
    """

    __slots__ = ("_records", "_oracle")

    def __init__(self, records: Sequence[T], oracle: SchemaOracle) -> None:
        self._records = tuple(records)
        self._oracle = oracle

    @property
    def oracle(self) -> SchemaOracle:
        return self._oracle

    def __len__(self) -> int:
        return len(self._records)

    def count(self, query: Query) -> int:
        return sum(1 for record in self._records if matches(query.predicate, record))

    def fetch(self, query: Query) -> Sequence[T]:
        rows = [record for record in self._records if matches(query.predicate, record)]
        # Stable sorts applied least-significant term first
        for term in reversed(query.order):
            rows.sort(
                key=lambda r, c=term.column: _sort_key(_value(r, c)),
                reverse=term.direction is OrderDirection.DESC,
            )
        end = None if query.limit is None else query.offset + query.limit
        page = rows[query.offset : end]
        _lazy.debug(lambda: f"memory.fetch: {query.describe()} -> {len(page)} records")
        return page


def matches(predicate: Predicate, record: Any) -> bool:
    """Evaluate a predicate tree against one record."""
    if isinstance(predicate, AllOf):
        return all(matches(child, record) for child in predicate.children)
    if isinstance(predicate, InSet):
        value = _value(record, predicate.column)
        return value is not None and value in {_normalize(v) for v in predicate.values}
    if isinstance(predicate, NotInSet):
        value = _value(record, predicate.column)
        return value is not None and value not in {_normalize(v) for v in predicate.values}
    if isinstance(predicate, Comparison):
        value = _value(record, predicate.column)
        if value is None:
            return False
        return _OPERATORS[predicate.op](value, _normalize(predicate.value))
    if isinstance(predicate, NotNull):
        return _value(record, predicate.column) is not None
    msg = f"unsupported predicate node: {predicate!r}"
    raise TypeError(msg)


def infer_oracle(
    collection_name: str,
    records: Sequence[Any],
    *,
    columns: Sequence[str] | None = None,
    primary_column: str = "id",
    overrides: PaginationOverrides | Mapping[str, Any] | None = None,
) -> StaticSchemaOracle:
    """Build an oracle from the Python types found in ``records``.

    Each column takes the type of its first non-``None`` value; columns
    that are always ``None`` are UNKNOWN. ``columns`` is required when the
    records are not mappings.
    ``overrides`` are handed to the oracle unchanged.
    """
    if columns is None:
        names: list[str] = []
        for record in records:
            if not isinstance(record, Mapping):
                msg = "columns must be given for non-mapping records"
                raise TypeError(msg)
            names.extend(name for name in record if name not in names)
        columns = names

    types: dict[str, ColumnType] = {}
    for name in columns:
        types[name] = ColumnType.UNKNOWN
        for record in records:
            value = _value(record, name)
            if value is not None:
                types[name] = python_column_type(value)
                break
    if primary_column not in types:
        types[primary_column] = ColumnType.INTEGER
    return StaticSchemaOracle(
        collection_name, types, primary_column=primary_column, overrides=overrides
    )


def python_column_type(value: Any) -> ColumnType:
    """Column type for a Python value."""
    if isinstance(value, bool):
        return ColumnType.BOOLEAN
    if isinstance(value, int):
        return ColumnType.INTEGER
    if isinstance(value, (float, Decimal)):
        return ColumnType.FLOAT
    if isinstance(value, (datetime, date)):
        return ColumnType.DATETIME
    if isinstance(value, str):
        return ColumnType.STRING
    return ColumnType.UNKNOWN


def _value(record: Any, column: str) -> Any:
    try:
        value = record_value(record, column)
    except (KeyError, AttributeError):
        return None
    return _normalize(value)


def _normalize(value: Any) -> Any:
    """Make stored and compiled values comparable: dates and naive datetimes become aware UTC."""
    if isinstance(value, datetime):
        return value.replace(tzinfo=UTC) if value.tzinfo is None else value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day, tzinfo=UTC)
    return value


def _sort_key(value: Any) -> tuple[bool, Any]:
    return (value is not None, value if value is not None else 0)


__all__ = ["InMemoryCollection", "infer_oracle", "matches", "python_column_type"]
