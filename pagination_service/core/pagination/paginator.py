"""Pagination engine.

Composes the pipeline for one request:

    validate options ─▶ compile filters ─▶ run strategy ─▶ assemble metadata

The collection is passed in per call; nothing is patched onto model or
query classes.

Example:
    paginator = Paginator(get_pagination_settings())
    page = paginator.paginate(SQLAlchemyCollection(session, Invention), request_options)
    body = {"inventions": [serialize(r) for r in page.records]}
    attach_metadata(body, "inventions", page.metadata)
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from pagination_service.core.exceptions import PaginationError
from pagination_service.core.pagination.keyset import CursorStrategy
from pagination_service.core.pagination.metadata import assemble_metadata
from pagination_service.core.pagination.options import OptionParser
from pagination_service.core.pagination.page import PageStrategy
from pagination_service.core.pagination.predicates import PredicateCompiler
from pagination_service.infra.logging import get_lazy_logger

if TYPE_CHECKING:
    from pagination_service.core.pagination.collection import PaginatedCollection
    from pagination_service.core.pagination.schemas import (
        PageResult,
        PaginationMetadata,
        PaginationPlan,
    )
    from pagination_service.core.settings.pagination import PaginationSettings

logger = logging.getLogger(__name__)
_lazy = get_lazy_logger(__name__)


@dataclass(slots=True, frozen=True)
class Page[T]:
    """One paginated response: records plus everything needed to describe them."""

    plan: PaginationPlan
    result: PageResult[T]
    metadata: PaginationMetadata

    @property
    def records(self) -> Sequence[T]:
        return self.result.records

    def __len__(self) -> int:
        return len(self.result.records)


class Paginator:
    """Paginate any :class:`PaginatedCollection` with immutable settings."""

    __slots__ = ("settings",)

    def __init__(self, settings: PaginationSettings) -> None:
        self.settings = settings

    def plan(
        self,
        collection: PaginatedCollection[Any],
        options: Mapping[str, Any] | None,
    ) -> PaginationPlan:
        """Validate options for ``collection`` without touching storage."""
        return OptionParser(collection.oracle, self.settings).parse(options)

    def paginate[T](
        self,
        collection: PaginatedCollection[T],
        options: Mapping[str, Any] | None = None,
    ) -> Page[T]:
        """Fetch one page of ``collection``.

        Args:
            collection: Storage collaborator (SQL, in-memory, ...).
            options: Raw request options (see :class:`OptionParser`).

        Returns:
            Page with records, result and metadata.

        Raises:
            PaginationError: Options are invalid; raised before any query runs.
            StorageError: The collection failed to count or fetch.
        """
        name = collection.oracle.collection_name
        try:
            plan = self.plan(collection, options)
            predicate = PredicateCompiler(collection.oracle).compile_filters(plan.filters)
        except PaginationError as exc:
            logger.info(
                "Rejected pagination options",
                extra={"collection": name, "kind": exc.kind, "detail": exc.detail},
            )
            raise

        strategy = CursorStrategy(collection) if plan.is_cursor else PageStrategy(collection)
        result = strategy.execute(plan, predicate)
        metadata = assemble_metadata(plan, result)

        _lazy.debug(lambda: f"paginate: {name} {plan.mode} -> {metadata.as_dict()}")
        return Page(plan=plan, result=result, metadata=metadata)


__all__ = ["Page", "Paginator"]
