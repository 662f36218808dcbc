"""Offset and cursor (keyset) pagination with declarative filters.

Page mode:
    page = Paginator(settings).paginate(collection, {"page": "2", "per_page": "8"})
    page.metadata.total_pages, page.metadata.has_next_page

Cursor mode:
    page = Paginator(settings).paginate(collection, {"use_cursor": "true", "cursor": "9"})
    page.metadata.next_cursor, page.metadata.prev_cursor

Filters (nested maps, usually decoded from bracket query syntax):
    {"values_in": {"status": ["open", "closed"]}, "greater": {"price": "10"}}

Cursors are plain order-column values, not opaque tokens. A cursor mode
page starts at its cursor inclusively.
"""

from pagination_service.core.pagination.collection import PaginatedCollection, record_value
from pagination_service.core.pagination.keyset import CursorStrategy
from pagination_service.core.pagination.links import LinkHeaderBuilder, total_header
from pagination_service.core.pagination.metadata import assemble_metadata, attach_metadata
from pagination_service.core.pagination.options import OptionParser
from pagination_service.core.pagination.oracle import (
    ColumnType,
    SchemaOracle,
    SchemaRegistry,
    StaticSchemaOracle,
    schema_registry,
)
from pagination_service.core.pagination.page import PageStrategy
from pagination_service.core.pagination.paginator import Page, Paginator
from pagination_service.core.pagination.predicates import (
    MATCH_ALL,
    AllOf,
    Comparison,
    InSet,
    NotInSet,
    OrderTerm,
    Predicate,
    PredicateCompiler,
    Query,
)
from pagination_service.core.pagination.schemas import (
    Compare,
    CompareOp,
    CursorValue,
    OrderDirection,
    PageResult,
    PaginationMetadata,
    PaginationMode,
    PaginationPlan,
    ValuesIn,
    ValuesNotIn,
)

__all__ = [
    "MATCH_ALL",
    "AllOf",
    "ColumnType",
    "Compare",
    "CompareOp",
    "Comparison",
    "CursorStrategy",
    "CursorValue",
    "InSet",
    "LinkHeaderBuilder",
    "NotInSet",
    "OptionParser",
    "OrderDirection",
    "OrderTerm",
    "Page",
    "PageResult",
    "PageStrategy",
    "PaginatedCollection",
    "PaginationMetadata",
    "PaginationMode",
    "PaginationPlan",
    "Paginator",
    "Predicate",
    "PredicateCompiler",
    "Query",
    "SchemaOracle",
    "SchemaRegistry",
    "StaticSchemaOracle",
    "ValuesIn",
    "ValuesNotIn",
    "assemble_metadata",
    "attach_metadata",
    "record_value",
    "schema_registry",
    "total_header",
]
