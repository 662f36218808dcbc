"""Schema oracle: what columns a collection has and which can be ordered.

The oracle is the only source of type information for the option parser
and the predicate compiler. Backends build one immutable snapshot per
collection; :class:`SchemaRegistry` caches snapshots process-wide and
replaces them wholesale, so concurrent readers never need a lock.

Example:
    oracle = StaticSchemaOracle(
        "inventions",
        {"id": ColumnType.INTEGER, "title": ColumnType.STRING},
    )
    oracle.column_type("title")   # ColumnType.STRING
    oracle.is_orderable("title")  # False
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from enum import StrEnum
from types import MappingProxyType
from typing import Any, Protocol, runtime_checkable

from pagination_service.core.settings.pagination import NO_OVERRIDES, PaginationOverrides

logger = logging.getLogger(__name__)


class ColumnType(StrEnum):
    """Column types the engine reasons about."""

    INTEGER = "integer"
    FLOAT = "float"
    DATETIME = "datetime"
    STRING = "string"
    BOOLEAN = "boolean"
    UNKNOWN = "unknown"


#: Types that support ordering, keyset boundaries and range filters.
ORDERABLE_TYPES = frozenset({ColumnType.INTEGER, ColumnType.FLOAT, ColumnType.DATETIME})


@runtime_checkable
class SchemaOracle(Protocol):
    """Read-only column metadata for one collection."""

    @property
    def collection_name(self) -> str: ...

    @property
    def primary_column(self) -> str: ...

    @property
    def pagination_overrides(self) -> PaginationOverrides: ...

    def has_column(self, name: str) -> bool: ...

    def column_type(self, name: str) -> ColumnType: ...

    def is_orderable(self, name: str) -> bool: ...


class StaticSchemaOracle:
    """Immutable, dict-backed :class:`SchemaOracle` snapshot."""

    __slots__ = ("_name", "_columns", "_primary", "_overrides")

    def __init__(
        self,
        collection_name: str,
        columns: Mapping[str, ColumnType | str],
        *,
        primary_column: str = "id",
        overrides: PaginationOverrides | Mapping[str, Any] | None = None,
    ) -> None:
        """Initialize the snapshot.

        Args:
            collection_name: Name used as the registry key and in logs.
            columns: Column name → type. Unrecognised type names map to UNKNOWN.
            primary_column: Unique, integer-like column used for tie-breaks.
            overrides: Per-collection page size and order defaults.

        Raises:
            ValueError: If the primary column is not among the columns, or the
                overrides name a default order column that can not be ordered.
        """
        normalized: dict[str, ColumnType] = {}
        for name, type_ in columns.items():
            try:
                normalized[name] = ColumnType(type_)
            except ValueError:
                normalized[name] = ColumnType.UNKNOWN
        if primary_column not in normalized:
            msg = f"primary column '{primary_column}' missing from {collection_name}"
            raise ValueError(msg)
        if overrides is None:
            overrides = NO_OVERRIDES
        elif not isinstance(overrides, PaginationOverrides):
            overrides = PaginationOverrides.model_validate(overrides)
        order_column = overrides.default_order_column
        if order_column is not None and normalized.get(order_column) not in ORDERABLE_TYPES:
            msg = f"default order column '{order_column}' of {collection_name} is not orderable"
            raise ValueError(msg)

        self._name = collection_name
        self._columns = MappingProxyType(normalized)
        self._primary = primary_column
        self._overrides = overrides

    @property
    def collection_name(self) -> str:
        return self._name

    @property
    def primary_column(self) -> str:
        return self._primary

    @property
    def pagination_overrides(self) -> PaginationOverrides:
        return self._overrides

    @property
    def columns(self) -> Mapping[str, ColumnType]:
        return self._columns

    def has_column(self, name: str) -> bool:
        return name in self._columns

    def column_type(self, name: str) -> ColumnType:
        return self._columns.get(name, ColumnType.UNKNOWN)

    def is_orderable(self, name: str) -> bool:
        return self.column_type(name) in ORDERABLE_TYPES

    def __repr__(self) -> str:
        return f"StaticSchemaOracle({self._name!r}, columns={dict(self._columns)!r})"


class SchemaRegistry:
    """Process-wide cache of oracle snapshots keyed by collection name.

    Writes build a new mapping and swap the reference; readers only ever
    see a complete mapping.

    Example:
        registry = SchemaRegistry()
        oracle = registry.get_or_load("inventions", lambda: oracle_for_model(Invention))
        registry.invalidate("inventions")  # after a schema migration
    """

    __slots__ = ("_snapshots",)

    def __init__(self) -> None:
        self._snapshots: Mapping[str, SchemaOracle] = MappingProxyType({})

    def get(self, collection_name: str) -> SchemaOracle | None:
        return self._snapshots.get(collection_name)

    def get_or_load(
        self,
        collection_name: str,
        loader: Callable[[], SchemaOracle],
    ) -> SchemaOracle:
        """Return the cached oracle, loading and publishing it on a miss.

        Two threads missing at once may both run ``loader``; the last
        snapshot published wins and both are equivalent.
        """
        oracle = self._snapshots.get(collection_name)
        if oracle is None:
            oracle = loader()
            self.publish(collection_name, oracle)
        return oracle

    def publish(self, collection_name: str, oracle: SchemaOracle) -> None:
        """Replace the snapshot for one collection."""
        self._snapshots = MappingProxyType({**self._snapshots, collection_name: oracle})
        logger.debug(
            "Schema snapshot published",
            extra={"collection": collection_name},
        )

    def invalidate(self, collection_name: str | None = None) -> None:
        """Drop one snapshot, or all of them when no name is given."""
        if collection_name is None:
            self._snapshots = MappingProxyType({})
        else:
            remaining = {k: v for k, v in self._snapshots.items() if k != collection_name}
            self._snapshots = MappingProxyType(remaining)


schema_registry = SchemaRegistry()


__all__ = [
    "ORDERABLE_TYPES",
    "ColumnType",
    "SchemaOracle",
    "SchemaRegistry",
    "StaticSchemaOracle",
    "schema_registry",
]
