"""Storage backends for the pagination engine.

Base Classes and Mixins:
    - Base: Declarative base with auto table naming
    - IntegerPKMixin: Integer primary key
    - TimestampMixin: created_at, updated_at tracking

Collections:
    - SQLAlchemyCollection[T]: Paginate a mapped model through a Session
    - InMemoryCollection[T]: Paginate a plain sequence of records

Schema:
    - build_oracle / oracle_for_model: Column metadata from a mapped model
    - infer_oracle: Column metadata from Python values

Query Filters:
    - CollectionFilter: WHERE ... IN / NOT IN clauses
    - ComparisonFilter: Relational comparisons
    - OrderBy: Column sorting (asc/desc)
    - LimitOffset: Pagination helper
    - FilterGroup: Combine multiple filters
"""

from pagination_service.core.database.base import (
    NAMING_CONVENTION,
    Base,
    IntegerPKMixin,
    TimestampMixin,
)
from pagination_service.core.database.collection import SQLAlchemyCollection
from pagination_service.core.database.filters import (
    CollectionFilter,
    ComparisonFilter,
    FilterGroup,
    LimitOffset,
    OrderBy,
    StatementFilter,
    filters_for_query,
    predicate_filters,
)
from pagination_service.core.database.memory import InMemoryCollection, infer_oracle
from pagination_service.core.database.oracle import build_oracle, column_type_for, oracle_for_model

__all__ = [
    "NAMING_CONVENTION",
    "Base",
    "CollectionFilter",
    "ComparisonFilter",
    "FilterGroup",
    "InMemoryCollection",
    "IntegerPKMixin",
    "LimitOffset",
    "OrderBy",
    "SQLAlchemyCollection",
    "StatementFilter",
    "TimestampMixin",
    "build_oracle",
    "column_type_for",
    "filters_for_query",
    "infer_oracle",
    "oracle_for_model",
    "predicate_filters",
]
