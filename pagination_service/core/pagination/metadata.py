"""Metadata assembly."""

from __future__ import annotations

from collections.abc import MutableMapping
from typing import TYPE_CHECKING, Any

from pagination_service.core.pagination.schemas import PaginationMetadata

if TYPE_CHECKING:
    from pagination_service.core.pagination.schemas import PageResult, PaginationPlan

#: Envelope key metadata is merged under.
META_KEY = "paginated_meta"


def assemble_metadata(plan: PaginationPlan, result: PageResult[Any]) -> PaginationMetadata:
    """Uniform metadata view of one executed plan.

    Page mode reports ``total``, ``page`` and ``total_pages``; cursor mode
    reports the cursors, and ``total`` only when it was computed.
    """
    if plan.is_cursor:
        return PaginationMetadata(
            total=result.total_count,
            per_page=plan.per_page,
            has_next_page=bool(result.has_next_page),
            next_cursor=result.next_cursor.to_wire() if result.next_cursor is not None else None,
            prev_cursor=result.prev_cursor.to_wire() if result.prev_cursor is not None else None,
        )
    return PaginationMetadata(
        total=result.total_count or 0,
        page=plan.page,
        per_page=plan.per_page,
        total_pages=result.total_pages or 0,
        has_next_page=bool(result.has_next_page),
    )


def attach_metadata(envelope: Any, name: str, metadata: PaginationMetadata) -> Any:
    """Merge ``metadata`` into ``envelope["paginated_meta"][name]``.

    Several paginated collections can share one envelope, each under its
    own name. Envelopes that are not dicts are returned untouched.

    Args:
        envelope: Response body being built.
        name: Key for this collection, usually the collection name.
        metadata: Assembled metadata.

    Returns:
        The same envelope object.
    """
    if not isinstance(envelope, MutableMapping):
        return envelope
    section = envelope.get(META_KEY)
    if not isinstance(section, MutableMapping):
        section = {}
        envelope[META_KEY] = section
    section[name] = metadata.as_dict()
    return envelope


__all__ = ["META_KEY", "assemble_metadata", "attach_metadata"]
