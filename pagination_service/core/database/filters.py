"""Statement filters for SQLAlchemy.

These filters work directly with SQLAlchemy statements without hiding
the query. :func:`filters_for_query` translates a storage-agnostic
:class:`~pagination_service.core.pagination.predicates.Query` into a
list of them.

Usage:
    from sqlalchemy import select
    from pagination_service.core.database.filters import CollectionFilter, OrderBy, LimitOffset

    stmt = select(Invention)
    stmt = CollectionFilter(Invention.status, ["open"]).apply(stmt)
    stmt = OrderBy([Invention.price, Invention.id], ["desc", "asc"]).apply(stmt)
    stmt = LimitOffset(limit=20, offset=40).apply(stmt)

    invention_rows = session.execute(stmt).scalars().all()
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable, Sequence
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any, Literal

from sqlalchemy import DateTime, Select, false

from pagination_service.core.pagination.predicates import (
    AllOf,
    Comparison,
    InSet,
    NotInSet,
    NotNull,
    Predicate,
)
from pagination_service.core.pagination.schemas import CompareOp, OrderDirection

if TYPE_CHECKING:
    from sqlalchemy.orm import InstrumentedAttribute

    from pagination_service.core.pagination.predicates import Query

ColumnResolver = Callable[[str], "InstrumentedAttribute[Any]"]


class StatementFilter(ABC):
    """Base class for statement filters.

    All filters implement `apply()` which modifies a SQLAlchemy statement.
    """

    @abstractmethod
    def apply(self, statement: Select[Any]) -> Select[Any]:
        """Apply filter to statement.

        Args:
            statement: SQLAlchemy select statement

        Returns:
            Modified select statement
        """
        ...


class OrderBy(StatementFilter):
    """Column ordering/sorting.

    Example:
        # Order column first, primary key as tie-break
        stmt = OrderBy([Invention.price, Invention.id], ["desc", "asc"]).apply(stmt)
    """

    def __init__(
        self,
        fields: InstrumentedAttribute[Any] | Sequence[InstrumentedAttribute[Any]],
        sort_order: Literal["asc", "desc"] | Sequence[Literal["asc", "desc"]] = "asc",
    ):
        """Initialize ordering filter.

        Args:
            fields: Single field or list of fields to order by
            sort_order: Sort direction(s) - 'asc' or 'desc'
        """
        self.fields = [fields] if not isinstance(fields, Sequence) else list(fields)

        if isinstance(sort_order, str):
            self.sort_orders = [sort_order] * len(self.fields)
        else:
            self.sort_orders = list(sort_order)
            if len(self.sort_orders) != len(self.fields):
                msg = "sort_order length must match fields length"
                raise ValueError(msg)

    def apply(self, statement: Select[Any]) -> Select[Any]:
        """Apply ordering to statement."""
        for field, order in zip(self.fields, self.sort_orders, strict=True):
            if order == "desc":
                statement = statement.order_by(field.desc())
            else:
                statement = statement.order_by(field.asc())
        return statement


class LimitOffset(StatementFilter):
    """Pagination using LIMIT and OFFSET.

    ``limit=None`` leaves the statement unbounded.
    """

    def __init__(self, limit: int | None, offset: int = 0):
        self.limit = limit
        self.offset = offset

    def apply(self, statement: Select[Any]) -> Select[Any]:
        """Apply pagination to statement."""
        if self.limit is not None:
            statement = statement.limit(self.limit)
        if self.offset:
            statement = statement.offset(self.offset)
        return statement


class CollectionFilter(StatementFilter):
    """Filter by collection (WHERE ... IN).

    Example:
        stmt = CollectionFilter(Invention.id, [1, 2, 3]).apply(stmt)
        # WHERE inventions.id IN (1, 2, 3)

        stmt = CollectionFilter(Invention.status, ["archived"], invert=True).apply(stmt)
        # WHERE inventions.status NOT IN ('archived')
    """

    def __init__(
        self,
        field: InstrumentedAttribute[Any],
        values: Sequence[Any],
        *,
        invert: bool = False,
    ):
        """Initialize collection filter.

        Args:
            field: Field to filter
            values: Collection of values to match
            invert: If True, use NOT IN instead of IN
        """
        self.field = field
        self.values = list(values)
        self.invert = invert

    def apply(self, statement: Select[Any]) -> Select[Any]:
        """Apply collection filter to statement."""
        if not self.values:
            # IN () matches nothing, NOT IN () matches everything
            return statement.where(false()) if not self.invert else statement

        if self.invert:
            return statement.where(self.field.notin_(self.values))
        return statement.where(self.field.in_(self.values))


class ComparisonFilter(StatementFilter):
    """Single relational comparison (``>``, ``>=``, ``<``, ``<=``, ``=``).

    Example:
        stmt = ComparisonFilter(Invention.price, CompareOp.GE, 10).apply(stmt)
        # WHERE inventions.price >= 10
    """

    def __init__(self, field: InstrumentedAttribute[Any], op: CompareOp, value: Any):
        self.field = field
        self.op = op
        self.value = value

    def apply(self, statement: Select[Any]) -> Select[Any]:
        """Apply comparison to statement."""
        field, value = self.field, self.value
        match self.op:
            case CompareOp.GT:
                clause = field > value
            case CompareOp.GE:
                clause = field >= value
            case CompareOp.LT:
                clause = field < value
            case CompareOp.LE:
                clause = field <= value
            case CompareOp.EQ:
                clause = field == value
        return statement.where(clause)


class NotNullFilter(StatementFilter):
    """Exclude rows whose field is NULL.

    Example:
        stmt = NotNullFilter(Invention.price).apply(stmt)
        # WHERE inventions.price IS NOT NULL
    """

    def __init__(self, field: InstrumentedAttribute[Any]):
        self.field = field

    def apply(self, statement: Select[Any]) -> Select[Any]:
        """Apply NOT NULL test to statement."""
        return statement.where(self.field.is_not(None))


class FilterGroup(StatementFilter):
    """Apply several filters in sequence (AND).

    Example:
        filters = FilterGroup([
            CollectionFilter(Invention.status, ["open", "closed"]),
            ComparisonFilter(Invention.price, CompareOp.GT, 10),
        ])
        stmt = filters.apply(stmt)
    """

    def __init__(self, filters: Sequence[StatementFilter]):
        self.filters = list(filters)

    def apply(self, statement: Select[Any]) -> Select[Any]:
        """Apply all filters to statement."""
        for filter_obj in self.filters:
            statement = filter_obj.apply(statement)
        return statement


def predicate_filters(predicate: Predicate, resolve: ColumnResolver) -> list[StatementFilter]:
    """Translate a predicate tree into statement filters.

    Args:
        predicate: Tree built by the predicate compiler.
        resolve: Maps a column name to the mapped attribute.

    Returns:
        Filters whose sequential application ANDs every node.
    """
    if isinstance(predicate, AllOf):
        filters: list[StatementFilter] = []
        for child in predicate.children:
            filters.extend(predicate_filters(child, resolve))
        return filters

    if isinstance(predicate, InSet | NotInSet):
        field = resolve(predicate.column)
        values = [_bind_value(field, v) for v in predicate.values]
        return [CollectionFilter(field, values, invert=isinstance(predicate, NotInSet))]

    if isinstance(predicate, Comparison):
        field = resolve(predicate.column)
        return [ComparisonFilter(field, predicate.op, _bind_value(field, predicate.value))]

    if isinstance(predicate, NotNull):
        return [NotNullFilter(resolve(predicate.column))]

    msg = f"unsupported predicate node: {predicate!r}"
    raise TypeError(msg)


def filters_for_query(
    query: Query,
    resolve: ColumnResolver,
    *,
    with_order: bool = True,
    with_limit: bool = True,
) -> FilterGroup:
    """All filters needed to run ``query``: WHERE, then ORDER BY, then LIMIT/OFFSET."""
    filters = predicate_filters(query.predicate, resolve)
    if with_order and query.order:
        filters.append(
            OrderBy(
                [resolve(term.column) for term in query.order],
                [
                    "desc" if term.direction is OrderDirection.DESC else "asc"
                    for term in query.order
                ],
            )
        )
    if with_limit and (query.limit is not None or query.offset):
        filters.append(LimitOffset(query.limit, query.offset))
    return FilterGroup(filters)


def _bind_value(field: InstrumentedAttribute[Any], value: Any) -> Any:
    """Aware datetimes are stored as naive UTC in columns without a timezone."""
    if not isinstance(value, datetime) or value.tzinfo is None:
        return value
    column_type = getattr(field, "type", None)
    if isinstance(column_type, DateTime) and not column_type.timezone:
        return value.astimezone(UTC).replace(tzinfo=None)
    return value


__all__ = [
    "CollectionFilter",
    "ComparisonFilter",
    "FilterGroup",
    "LimitOffset",
    "NotNullFilter",
    "OrderBy",
    "StatementFilter",
    "filters_for_query",
    "predicate_filters",
]
