"""Pagination dependencies for FastAPI routes.

Query strings use bracket syntax for the nested filter maps:

    ?use_cursor=true&cursor=11&greater[price]=10
    ?values_in[status][]=open&values_in[status][]=closed

Usage:
    from pagination_service.core.dependencies.pagination import (
        PaginationOptions,
        PaginatorDep,
    )

    @router.get("/inventions")
    def list_inventions(
        options: PaginationOptions,
        paginator: PaginatorDep,
        request: Request,
        response: Response,
        session: SessionDep,
    ) -> dict[str, Any]:
        page = paginator.paginate(SQLAlchemyCollection(session, Invention), options)
        apply_pagination_headers(response, page, str(request.url))
        return attach_metadata({"inventions": [...]}, "inventions", page.metadata)
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from typing import Annotated, Any

from fastapi import Depends, Request

from pagination_service.core.pagination.paginator import Paginator
from pagination_service.core.settings import get_pagination_settings

_BRACKET_KEY = re.compile(r"^(?P<name>[^\[\]]+)(?P<path>(?:\[[^\[\]]*\])*)$")
_SEGMENT = re.compile(r"\[([^\[\]]*)\]")


def parse_bracket_query(items: Iterable[tuple[str, str]]) -> dict[str, Any]:
    """Decode ``key[sub][]=value`` pairs into nested dicts and lists.

    A plain key keeps its last value. ``[]`` collects every value into a
    list. A key that does not follow the bracket grammar is kept verbatim.

    Example:
        parse_bracket_query([("greater[price]", "10"), ("values_in[id][]", "1")])
        # {"greater": {"price": "10"}, "values_in": {"id": ["1"]}}
    """
    options: dict[str, Any] = {}
    for raw_key, value in items:
        match = _BRACKET_KEY.match(raw_key)
        if match is None or not match.group("path"):
            options[raw_key] = value
            continue

        path = [match.group("name"), *_SEGMENT.findall(match.group("path"))]
        target = options
        for position, segment in enumerate(path[:-1]):
            following = path[position + 1]
            if following == "":
                # name[] or name[sub][]: the last named segment holds a list
                break
            child = target.get(segment)
            if not isinstance(child, dict):
                child = {}
                target[segment] = child
            target = child

        if path[-1] == "":
            list_key = path[-2]
            current = target.get(list_key)
            if not isinstance(current, list):
                current = []
                target[list_key] = current
            current.append(value)
        else:
            target[path[-1]] = value
    return options


def get_pagination_options(request: Request) -> dict[str, Any]:
    """Raw pagination options from the request query string."""
    return parse_bracket_query(request.query_params.multi_items())


def get_paginator() -> Paginator:
    """Paginator configured from the cached pagination settings."""
    return Paginator(get_pagination_settings())


# Type aliases for cleaner route signatures
PaginationOptions = Annotated[dict[str, Any], Depends(get_pagination_options)]
PaginatorDep = Annotated[Paginator, Depends(get_paginator)]


__all__ = [
    "PaginationOptions",
    "PaginatorDep",
    "get_pagination_options",
    "get_paginator",
    "parse_bracket_query",
]
