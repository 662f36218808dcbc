"""RFC 5988 ``Link`` and ``Total`` response headers.

Example:
    builder = LinkHeaderBuilder("https://api.example.com/posts?order=name")
    builder.link_header(metadata)
    # '<https://api.example.com/posts?order=name&page=2>; rel="next", ...'
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

if TYPE_CHECKING:
    from pagination_service.core.pagination.schemas import PaginationMetadata

#: Relation order inside the header.
RELATIONS = ("first", "next", "prev", "last")

_NAVIGATION_PARAMS = frozenset({"page", "cursor"})


class LinkHeaderBuilder:
    """Build navigation links for one request URL.

    Query parameters of the URL are kept (except ``page`` and ``cursor``,
    which every link sets itself) and encoded sorted by key so links are
    stable regardless of the order the client sent them in.
    """

    __slots__ = ("_base", "_params")

    def __init__(self, url: str, params: Mapping[str, Any] | None = None) -> None:
        """Initialize builder.

        Args:
            url: Request URL, with or without a query string.
            params: Extra query parameters; override those in ``url``.
        """
        parts = urlsplit(url)
        self._base = urlunsplit((parts.scheme, parts.netloc, parts.path, "", ""))

        merged: dict[str, list[str]] = {}
        for key, value in parse_qsl(parts.query, keep_blank_values=True):
            merged.setdefault(key, []).append(value)
        for key, value in (params or {}).items():
            if value is None:
                merged.pop(key, None)
            elif isinstance(value, (list, tuple)):
                merged[key] = [str(v) for v in value]
            else:
                merged[key] = [str(value)]

        self._params = {k: v for k, v in merged.items() if k not in _NAVIGATION_PARAMS}

    def url_for(self, **navigation: Any) -> str:
        """URL with the preserved parameters plus ``navigation`` (e.g. ``page=2``)."""
        params = dict(self._params)
        for key, value in navigation.items():
            params[key] = [str(value)]
        pairs = [(key, value) for key in sorted(params) for value in params[key]]
        if not pairs:
            return self._base
        return f"{self._base}?{urlencode(pairs)}"

    def links(self, metadata: PaginationMetadata) -> dict[str, str]:
        """Relation name to URL, in header order."""
        links: dict[str, str] = {}

        if metadata.page is not None:
            page = metadata.page
            total_pages = metadata.total_pages or 0
            if page > 1:
                links["first"] = self.url_for(page=1)
            if metadata.has_next_page:
                links["next"] = self.url_for(page=page + 1)
            if page > 1:
                links["prev"] = self.url_for(page=page - 1)
            if total_pages > 0 and page != total_pages:
                links["last"] = self.url_for(page=total_pages)
        else:
            if metadata.next_cursor is not None:
                links["next"] = self.url_for(cursor=metadata.next_cursor)
            if metadata.prev_cursor is not None:
                links["prev"] = self.url_for(cursor=metadata.prev_cursor)

        return {rel: links[rel] for rel in RELATIONS if rel in links}

    def link_header(self, metadata: PaginationMetadata) -> str | None:
        """``Link`` header value, or None when there is nothing to link to."""
        links = self.links(metadata)
        if not links:
            return None
        return ", ".join(f'<{url}>; rel="{rel}"' for rel, url in links.items())


def total_header(metadata: PaginationMetadata) -> str | None:
    """``Total`` header value when the total is known."""
    if metadata.total is None:
        return None
    return str(metadata.total)


__all__ = ["RELATIONS", "LinkHeaderBuilder", "total_header"]
