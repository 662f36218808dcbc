"""FastAPI dependencies for route handlers.

Usage:
    from pagination_service.core.dependencies import PaginationOptions, PaginatorDep
"""

from pagination_service.core.dependencies.pagination import (
    PaginationOptions,
    PaginatorDep,
    get_pagination_options,
    get_paginator,
    parse_bracket_query,
)

__all__ = [
    "PaginationOptions",
    "PaginatorDep",
    "get_pagination_options",
    "get_paginator",
    "parse_bracket_query",
]
