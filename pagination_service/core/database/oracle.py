"""Schema oracle for SQLAlchemy mapped models.

Column types come from the mapper, the primary column from the mapped
table's primary key. A model can carry per-collection defaults in a
``__pagination__`` mapping (see :class:`PaginationOverrides`). Snapshots
are cached in the process-wide schema registry under the table name.

Example:
    oracle = oracle_for_model(Invention)
    oracle.column_type("created_at")  # ColumnType.DATETIME
"""

from __future__ import annotations

import logging
from typing import Any

from sqlalchemy import inspect as sa_inspect
from sqlalchemy import types as sqltypes

from pagination_service.core.pagination.oracle import (
    ColumnType,
    SchemaOracle,
    SchemaRegistry,
    StaticSchemaOracle,
    schema_registry,
)

logger = logging.getLogger(__name__)

# Checked in order: Boolean and Enum before the generic types they derive from.
# Float is listed on its own; it is not a Numeric subclass on every release.
_TYPE_MAP: tuple[tuple[type[sqltypes.TypeEngine[Any]], ColumnType], ...] = (
    (sqltypes.Boolean, ColumnType.BOOLEAN),
    (sqltypes.Enum, ColumnType.STRING),
    (sqltypes.Integer, ColumnType.INTEGER),
    (sqltypes.Float, ColumnType.FLOAT),
    (sqltypes.Numeric, ColumnType.FLOAT),
    (sqltypes.DateTime, ColumnType.DATETIME),
    (sqltypes.Date, ColumnType.DATETIME),
    (sqltypes.String, ColumnType.STRING),
)


def column_type_for(type_: sqltypes.TypeEngine[Any]) -> ColumnType:
    """Map a SQLAlchemy column type to a :class:`ColumnType`."""
    for sa_type, column_type in _TYPE_MAP:
        if isinstance(type_, sa_type):
            return column_type
    return ColumnType.UNKNOWN


def build_oracle(model: type[Any]) -> StaticSchemaOracle:
    """Snapshot the mapped columns of ``model``.

    Raises:
        ValueError: If the model has no single-column primary key.
    """
    mapper = sa_inspect(model)
    primary_key = mapper.primary_key
    if len(primary_key) != 1:
        msg = f"{model.__name__} needs exactly one primary key column to be paginated"
        raise ValueError(msg)

    columns: dict[str, ColumnType] = {}
    primary_column = None
    for attr in mapper.column_attrs:
        column = attr.columns[0]
        columns[attr.key] = column_type_for(column.type)
        if column is primary_key[0]:
            primary_column = attr.key

    if primary_column is None:
        msg = f"{model.__name__} primary key is not mapped to an attribute"
        raise ValueError(msg)

    oracle = StaticSchemaOracle(
        mapper.local_table.name,
        columns,
        primary_column=primary_column,
        overrides=getattr(model, "__pagination__", None),
    )
    logger.debug(
        "Built schema oracle",
        extra={"model": model.__name__, "columns": len(columns)},
    )
    return oracle


def oracle_for_model(model: type[Any], registry: SchemaRegistry | None = None) -> SchemaOracle:
    """Cached oracle for ``model`` (built on first use)."""
    registry = registry or schema_registry
    return registry.get_or_load(sa_inspect(model).local_table.name, lambda: build_oracle(model))


__all__ = ["build_oracle", "column_type_for", "oracle_for_model"]
