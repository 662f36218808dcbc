"""SQLAlchemy-backed paginated collection.

Example:
    with Session(engine) as session:
        inventions = SQLAlchemyCollection(session, Invention)
        page = paginator.paginate(inventions, {"order_column": "price", "per_page": "8"})

    # Pre-scoped statement: pagination filters are ANDed onto it
    public = SQLAlchemyCollection(
        session,
        Invention,
        select(Invention).where(Invention.is_public.is_(True)),
    )
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, NoReturn

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError

from pagination_service.core.database.filters import filters_for_query
from pagination_service.core.database.oracle import oracle_for_model
from pagination_service.core.exceptions import StorageError
from pagination_service.infra.logging import get_lazy_logger

if TYPE_CHECKING:
    from collections.abc import Sequence

    from sqlalchemy import Select
    from sqlalchemy.orm import InstrumentedAttribute, Session

    from pagination_service.core.pagination.oracle import SchemaOracle
    from pagination_service.core.pagination.predicates import Query


class SQLAlchemyCollection[T]:
    """Run pagination queries for one mapped model through a ``Session``.

    The session is borrowed; the collection never commits, closes or
    rolls it back.
    """

    __slots__ = ("session", "model", "statement", "_oracle", "_logger", "_lazy")

    def __init__(
        self,
        session: Session,
        model: type[T],
        statement: Select[Any] | None = None,
        *,
        oracle: SchemaOracle | None = None,
    ) -> None:
        """Initialize collection.

        Args:
            session: Open database session
            model: SQLAlchemy model class (e.g., Invention)
            statement: Base select to paginate; defaults to ``select(model)``
            oracle: Column metadata; defaults to the cached snapshot of ``model``
        """
        self.session = session
        self.model = model
        self.statement = statement if statement is not None else select(model)
        self._oracle = oracle or oracle_for_model(model)
        self._logger = logging.getLogger(f"collection.{model.__name__}")
        self._lazy = get_lazy_logger(f"collection.{model.__name__}")

    @property
    def oracle(self) -> SchemaOracle:
        return self._oracle

    def count(self, query: Query) -> int:
        """Count rows matching the query predicate."""
        stmt = filters_for_query(query, self._column, with_order=False, with_limit=False).apply(
            self.statement
        )
        count_stmt = select(func.count()).select_from(stmt.subquery())
        try:
            total = self.session.execute(count_stmt).scalar_one()
        except SQLAlchemyError as exc:
            self._failed("db.count", exc)
        self._lazy.debug(lambda: f"db.count: {self.model.__name__} -> {total}")
        return int(total)

    def fetch(self, query: Query) -> Sequence[T]:
        """Ordered, limited rows matching the query."""
        stmt = filters_for_query(query, self._column).apply(self.statement)
        try:
            rows = self.session.execute(stmt).scalars().all()
        except SQLAlchemyError as exc:
            self._failed("db.fetch", exc)
        self._lazy.debug(
            lambda: (
                f"db.fetch: {self.model.__name__}(limit={query.limit}, offset={query.offset})"
                f" -> {len(rows)} rows"
            )
        )
        return rows

    def _column(self, name: str) -> InstrumentedAttribute[Any]:
        return getattr(self.model, name)

    def _failed(self, operation: str, exc: SQLAlchemyError) -> NoReturn:
        self._logger.error(
            "Database query failed",
            exc_info=exc,
            extra={"entity": self.model.__name__, "operation": operation},
        )
        raise StorageError(str(exc), operation=operation) from exc


__all__ = ["SQLAlchemyCollection"]
