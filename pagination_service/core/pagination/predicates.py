"""Predicate compiler.

Turns validated filter clauses and keyset boundaries into a small,
storage-agnostic predicate tree. Backends walk the tree; the core never
builds SQL.

Tree nodes:
    InSet(column, values)          column IN (values...)
    NotInSet(column, values)       column NOT IN (values...)
    Comparison(column, op, value)  column <op> value
    NotNull(column)                column IS NOT NULL
    AllOf(children)                AND of all children (empty = match all)

No OR node.

Example:
    compiler = PredicateCompiler(oracle)
    predicate = compiler.compile_filters(plan.filters)
    boundary = compiler.boundary(plan.order_column, plan.cursor.value, ascending=True)
    query = Query(predicate=predicate & boundary, order=(...), limit=20)
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from pagination_service.core.exceptions import InvalidOptionError
from pagination_service.core.pagination.coercion import coerce_for_column
from pagination_service.core.pagination.schemas import (
    COMPARISON_FILTERS,
    Compare,
    CompareOp,
    FilterClause,
    OrderDirection,
    ValuesIn,
    ValuesNotIn,
)

if TYPE_CHECKING:
    from pagination_service.core.pagination.oracle import SchemaOracle

_FILTER_NAMES = {op: name for name, op in COMPARISON_FILTERS.items()} | {CompareOp.EQ: "equal"}


class Predicate:
    """Base class for predicate tree nodes."""

    __slots__ = ()

    def __and__(self, other: Predicate) -> AllOf:
        return AllOf.of(self, other)


@dataclass(slots=True, frozen=True)
class InSet(Predicate):
    column: str
    values: tuple[Any, ...]


@dataclass(slots=True, frozen=True)
class NotInSet(Predicate):
    column: str
    values: tuple[Any, ...]


@dataclass(slots=True, frozen=True)
class Comparison(Predicate):
    column: str
    op: CompareOp
    value: Any


@dataclass(slots=True, frozen=True)
class NotNull(Predicate):
    column: str


@dataclass(slots=True, frozen=True)
class AllOf(Predicate):
    children: tuple[Predicate, ...] = ()

    @classmethod
    def of(cls, *predicates: Predicate | None) -> AllOf:
        """AND predicates together, flattening nested AllOf nodes."""
        flat: list[Predicate] = []
        for predicate in predicates:
            if predicate is None:
                continue
            if isinstance(predicate, AllOf):
                flat.extend(predicate.children)
            else:
                flat.append(predicate)
        return cls(tuple(flat))


MATCH_ALL = AllOf()


@dataclass(slots=True, frozen=True)
class OrderTerm:
    column: str
    direction: OrderDirection


@dataclass(slots=True, frozen=True)
class Query:
    """What the core asks a storage collaborator to execute.

    Attributes:
        predicate: Filter tree; ``MATCH_ALL`` for an unfiltered collection.
        order: Sort terms, most significant first.
        limit: Maximum records to return (None = no limit).
        offset: Records to skip after ordering.
    """

    predicate: Predicate = MATCH_ALL
    order: tuple[OrderTerm, ...] = ()
    limit: int | None = None
    offset: int = 0

    def describe(self) -> str:
        """Readable one-liner for debug logs."""
        order = ", ".join(f"{t.column} {t.direction}" for t in self.order) or "-"
        return (
            f"where={_describe(self.predicate)} order=[{order}]"
            f" limit={self.limit} offset={self.offset}"
        )


class PredicateCompiler:
    """Compile filter clauses into predicate nodes, coercing values by column type."""

    __slots__ = ("_oracle",)

    def __init__(self, oracle: SchemaOracle) -> None:
        self._oracle = oracle

    def compile_filters(self, filters: Iterable[FilterClause]) -> AllOf:
        """AND all filter clauses together.

        Raises:
            InvalidOptionError: If a value can not be coerced to its column type.
        """
        return AllOf.of(*(self.compile_clause(clause) for clause in filters))

    def compile_clause(self, clause: FilterClause) -> Predicate:
        if isinstance(clause, ValuesIn):
            values = self._coerce_many("values_in", clause.column, clause.values)
            return InSet(clause.column, values)
        if isinstance(clause, ValuesNotIn):
            return NotInSet(
                clause.column, self._coerce_many("values_not_in", clause.column, clause.values)
            )
        if isinstance(clause, Compare):
            value = self._coerce(_FILTER_NAMES[clause.op], clause.column, clause.value)
            return Comparison(clause.column, clause.op, value)
        msg = f"unsupported filter clause: {clause!r}"
        raise TypeError(msg)

    def boundary(
        self,
        column: str,
        value: Any,
        *,
        ascending: bool,
        inclusive: bool = True,
    ) -> Comparison:
        """Keyset boundary: records at or after ``value`` in scan order."""
        if ascending:
            op = CompareOp.GE if inclusive else CompareOp.GT
        else:
            op = CompareOp.LE if inclusive else CompareOp.LT
        return Comparison(column, op, value)

    def before(self, column: str, value: Any, *, ascending: bool) -> Comparison:
        """Records strictly preceding ``value`` in scan order."""
        return Comparison(column, CompareOp.LT if ascending else CompareOp.GT, value)

    def equals(self, column: str, value: Any) -> Comparison:
        return Comparison(column, CompareOp.EQ, value)

    def not_null(self, column: str) -> NotNull:
        return NotNull(column)

    def _coerce_many(self, option: str, column: str, values: Sequence[Any]) -> tuple[Any, ...]:
        return tuple(self._coerce(option, column, value) for value in values)

    def _coerce(self, option: str, column: str, value: Any) -> Any:
        column_type = self._oracle.column_type(column)
        try:
            return coerce_for_column(value, column_type)
        except (TypeError, ValueError) as exc:
            expected = f"a {column_type} value"
            raise InvalidOptionError(f"{option}[{column}]", value, expected) from exc


def _describe(predicate: Predicate) -> str:
    if isinstance(predicate, AllOf):
        if not predicate.children:
            return "*"
        return " AND ".join(_describe(child) for child in predicate.children)
    if isinstance(predicate, InSet):
        return f"{predicate.column} IN {list(predicate.values)!r}"
    if isinstance(predicate, NotInSet):
        return f"{predicate.column} NOT IN {list(predicate.values)!r}"
    if isinstance(predicate, Comparison):
        return f"{predicate.column} {predicate.op.value} {predicate.value!r}"
    if isinstance(predicate, NotNull):
        return f"{predicate.column} IS NOT NULL"
    return repr(predicate)


__all__ = [
    "MATCH_ALL",
    "AllOf",
    "Comparison",
    "InSet",
    "NotInSet",
    "NotNull",
    "OrderTerm",
    "Predicate",
    "PredicateCompiler",
    "Query",
]
