"""Option parser and validator.

Turns a raw, untyped option map (usually straight from a query string)
into a :class:`PaginationPlan`. Checks run in a fixed order and the
first failure wins, so the same input always yields the same error:

    1. use_cursor is a boolean                  InvalidOption
    2. not both use_cursor and page             ConflictingModes
    3. page is an integer >= 1 (page mode)      InvalidOption / InvalidPage
    4. order is asc/desc                        InvalidOrder
    5. order_column exists and is orderable     UnknownColumn / UnorderableColumnType
    6. per_page parses                          InvalidOption
    7. filters are maps over known columns      FilterMustBeMap / UnknownFilterColumn /
                                                UnorderableFilterColumn
    8. cursor matches the order column type     InvalidOption

per_page is forgiving about its range: non-positive values fall back to
the configured default and values over the maximum are clamped. Text
that is not a number at all is rejected like any other numeric option.

Defaults come from the collection's :class:`PaginationOverrides` first
(page size, maximum page size, order column and direction) and from the
:class:`PaginationSettings` passed in for anything the collection leaves
unset.

Example:
    parser = OptionParser(oracle, PaginationSettings())
    plan = parser.parse({"use_cursor": "true", "per_page": "8"})
"""

from __future__ import annotations

from collections.abc import Mapping, Set
from typing import TYPE_CHECKING, Any

from pagination_service.core.exceptions import (
    ConflictingModesError,
    FilterMustBeMapError,
    InvalidOptionError,
    InvalidOrderError,
    InvalidPageError,
    UnknownColumnError,
    UnknownFilterColumnError,
    UnorderableColumnTypeError,
    UnorderableFilterColumnError,
)
from pagination_service.core.pagination.coercion import (
    coerce_for_column,
    is_blank,
    to_bool,
    to_int,
)
from pagination_service.core.pagination.schemas import (
    COMPARISON_FILTERS,
    Compare,
    CursorValue,
    FilterClause,
    OrderDirection,
    PaginationMode,
    PaginationPlan,
    ValuesIn,
    ValuesNotIn,
)
from pagination_service.infra.logging import get_lazy_logger

if TYPE_CHECKING:
    from pagination_service.core.pagination.oracle import SchemaOracle
    from pagination_service.core.settings.pagination import PaginationSettings

_lazy = get_lazy_logger(__name__)

_ORDER_TOKENS = frozenset({"asc", "ASC", "desc", "DESC"})


class OptionParser:
    """Validate raw options against one collection's schema.

    The parser is cheap and holds no request state; build one per
    collection (or per request) with an explicit settings object.
    """

    __slots__ = ("_oracle", "_settings")

    def __init__(self, oracle: SchemaOracle, settings: PaginationSettings) -> None:
        """Initialize parser.

        Args:
            oracle: Column metadata of the collection being paginated.
            settings: Immutable defaults (page size, order, limits); the
                oracle's pagination overrides take precedence.
        """
        self._oracle = oracle
        self._settings = oracle.pagination_overrides.apply(settings)

    def parse(self, options: Mapping[str, Any] | None) -> PaginationPlan:
        """Build a plan from raw options.

        Args:
            options: Flat option map; nested maps for filters.

        Returns:
            Validated, immutable plan.

        Raises:
            PaginationError: The first rule the options violate.
        """
        options = options or {}

        use_cursor = self._bool_option(options, "use_cursor")

        if use_cursor and not is_blank(options.get("page")):
            raise ConflictingModesError()

        page = None if use_cursor else self._page(options.get("page"))
        direction = self._order(options.get("order"))
        order_column = self._order_column(options.get("order_column"))
        per_page = self._per_page(options.get("per_page"))
        filters = self._filters(options)

        cursor: CursorValue | None = None
        reverse = False
        include_total = True
        if use_cursor:
            reverse = self._bool_option(options, "reverse")
            cursor = self._cursor(options.get("cursor"), order_column, reverse=reverse)
            include_total = (
                self._bool_option(options, "include_total") or self._settings.cursor_include_total
            )

        plan = PaginationPlan(
            mode=PaginationMode.CURSOR if use_cursor else PaginationMode.PAGE,
            order_column=order_column,
            order_direction=direction,
            per_page=per_page,
            page=page,
            cursor=cursor,
            reverse=reverse,
            include_total=include_total,
            filters=filters,
            group_limit=self._settings.max_per_page if use_cursor else None,
        )
        _lazy.debug(lambda: f"options.parse: {self._oracle.collection_name} -> {plan!r}")
        return plan

    def _bool_option(self, options: Mapping[str, Any], name: str) -> bool:
        value = options.get(name)
        if is_blank(value):
            return False
        try:
            return to_bool(value)
        except ValueError as exc:
            raise InvalidOptionError(name, value, "true or false") from exc

    def _page(self, value: Any) -> int:
        if is_blank(value):
            return 1
        try:
            page = to_int(value)
        except ValueError as exc:
            raise InvalidOptionError("page", value, "an integer") from exc
        if page < 1:
            raise InvalidPageError(page)
        return page

    def _order(self, value: Any) -> OrderDirection:
        if is_blank(value):
            return OrderDirection(self._settings.default_order)
        if not isinstance(value, str) or value.strip() not in _ORDER_TOKENS:
            raise InvalidOrderError(value)
        return OrderDirection(value.strip().upper())

    def _order_column(self, value: Any) -> str:
        if is_blank(value):
            default = self._oracle.pagination_overrides.default_order_column
            return default or self._oracle.primary_column
        if not isinstance(value, str):
            raise InvalidOptionError("order_column", value, "a column name")

        column = value.strip()
        if not self._oracle.has_column(column):
            raise UnknownColumnError(column)
        if not self._oracle.is_orderable(column):
            raise UnorderableColumnTypeError(column, self._oracle.column_type(column))
        return column

    def _per_page(self, value: Any) -> int:
        if is_blank(value):
            return self._settings.default_per_page
        try:
            per_page = to_int(value)
        except ValueError as exc:
            raise InvalidOptionError("per_page", value, "an integer") from exc
        if per_page <= 0:
            return self._settings.default_per_page
        return min(per_page, self._settings.max_per_page)

    def _filters(self, options: Mapping[str, Any]) -> tuple[FilterClause, ...]:
        clauses: list[FilterClause] = []

        for name, clause_type in (("values_in", ValuesIn), ("values_not_in", ValuesNotIn)):
            for column, values in self._filter_map(options, name):
                self._require_filter_column(name, column)
                clauses.append(clause_type(column, _as_sequence(values)))

        for name, op in COMPARISON_FILTERS.items():
            for column, value in self._filter_map(options, name):
                self._require_filter_column(name, column)
                if not self._oracle.is_orderable(column):
                    raise UnorderableFilterColumnError(
                        name, column, self._oracle.column_type(column)
                    )
                clauses.append(Compare(column, op, value))

        return tuple(clauses)

    def _filter_map(self, options: Mapping[str, Any], name: str) -> list[tuple[str, Any]]:
        value = options.get(name)
        if value is None:
            return []
        if not isinstance(value, Mapping):
            raise FilterMustBeMapError(name)
        return [(str(column), inner) for column, inner in value.items()]

    def _require_filter_column(self, name: str, column: str) -> None:
        if not self._oracle.has_column(column):
            raise UnknownFilterColumnError(name, column)

    def _cursor(self, value: Any, order_column: str, *, reverse: bool) -> CursorValue | None:
        if is_blank(value):
            return None
        column_type = self._oracle.column_type(order_column)
        try:
            typed = coerce_for_column(value, column_type)
        except ValueError as exc:
            raise InvalidOptionError("cursor", value, f"a {column_type} value") from exc
        return CursorValue(value=typed, direction="backward" if reverse else "forward")


def _as_sequence(values: Any) -> tuple[Any, ...]:
    """Normalize set-filter input to a tuple, keeping the order it was given in."""
    if isinstance(values, (list, tuple)):
        return tuple(values)
    if isinstance(values, Set):
        return tuple(sorted(values, key=repr))
    return (values,)


__all__ = ["OptionParser"]
