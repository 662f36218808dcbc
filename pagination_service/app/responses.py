"""Response helpers for paginated endpoints."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from pagination_service.core.pagination.links import LinkHeaderBuilder, total_header

if TYPE_CHECKING:
    from fastapi import Response

    from pagination_service.core.pagination.paginator import Page


def apply_pagination_headers(response: Response, page: Page[Any], url: str) -> Response:
    """Set ``Link`` and ``Total`` headers for ``page``.

    Headers that do not apply (no neighbouring pages, total unknown) are
    left unset.

    Args:
        response: Response being built (FastAPI injects one per request).
        page: Result of :meth:`Paginator.paginate`.
        url: Request URL the links are derived from.

    Returns:
        The same response.
    """
    link = LinkHeaderBuilder(url).link_header(page.metadata)
    if link is not None:
        response.headers["Link"] = link
    total = total_header(page.metadata)
    if total is not None:
        response.headers["Total"] = total
    return response


__all__ = ["apply_pagination_headers"]
