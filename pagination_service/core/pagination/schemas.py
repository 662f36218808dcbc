"""Pagination data model.

Internal, immutable request/result types are slotted dataclasses; the
metadata and cursor types that reach clients are Pydantic models, like
the rest of the response schemas.

Lifecycle:
    raw options ──OptionParser──▶ PaginationPlan ──strategy──▶ PageResult
                                                        │
                                    PaginationMetadata ◀┘ (assemble_metadata)
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field


class PaginationMode(StrEnum):
    PAGE = "page"
    CURSOR = "cursor"


class OrderDirection(StrEnum):
    ASC = "ASC"
    DESC = "DESC"

    @property
    def reversed(self) -> OrderDirection:
        return OrderDirection.DESC if self is OrderDirection.ASC else OrderDirection.ASC


class CompareOp(StrEnum):
    """Relational operators usable in range filters and keyset boundaries."""

    GT = ">"
    GE = ">="
    LT = "<"
    LE = "<="
    EQ = "="


#: Option key → operator for the four range filters.
COMPARISON_FILTERS: dict[str, CompareOp] = {
    "greater": CompareOp.GT,
    "greater_or_equal": CompareOp.GE,
    "smaller": CompareOp.LT,
    "smaller_or_equal": CompareOp.LE,
}

SET_FILTERS = ("values_in", "values_not_in")


# ──────────────────────────────────────────────────────────────
# Filter clauses (validated, values still in wire form)
# ──────────────────────────────────────────────────────────────


@dataclass(slots=True, frozen=True)
class ValuesIn:
    column: str
    values: tuple[Any, ...]


@dataclass(slots=True, frozen=True)
class ValuesNotIn:
    column: str
    values: tuple[Any, ...]


@dataclass(slots=True, frozen=True)
class Compare:
    column: str
    op: CompareOp
    value: Any


FilterClause = ValuesIn | ValuesNotIn | Compare


class CursorValue(BaseModel):
    """A keyset boundary handed to clients and read back on the next request.

    Cursors are plain values, not signed or encrypted; they are
    re-validated against the order column type on every use.

    Attributes:
        value: Boundary on the order column (typed: int, float or datetime).
        direction: Scan direction the cursor was issued for.
    """

    value: int | float | datetime = Field(description="Boundary value on the order column")
    direction: Literal["forward", "backward"] = Field(
        default="forward",
        description="Scan direction the cursor was issued for",
    )

    model_config = ConfigDict(frozen=True)

    def to_wire(self) -> int | float | str:
        """JSON-friendly scalar: numbers as-is, datetimes as ISO-8601."""
        if isinstance(self.value, datetime):
            return self.value.isoformat()
        return self.value

    def __str__(self) -> str:
        return str(self.to_wire())


@dataclass(slots=True, frozen=True)
class PaginationPlan:
    """Validated, immutable description of one pagination request.

    Invariants (enforced in ``__post_init__``):
        - Page mode never carries a cursor; cursor mode never carries a page.
        - ``per_page`` is positive.
        - ``group_limit``, when set, is at least ``per_page``. It caps how many
          records sharing one order value a cursor page may hold.
    """

    mode: PaginationMode
    order_column: str
    order_direction: OrderDirection
    per_page: int
    page: int | None = None
    cursor: CursorValue | None = None
    reverse: bool = False
    include_total: bool = False
    filters: tuple[FilterClause, ...] = ()
    group_limit: int | None = None

    def __post_init__(self) -> None:
        if self.per_page <= 0:
            msg = "per_page must be positive"
            raise ValueError(msg)
        if self.group_limit is not None and self.group_limit < self.per_page:
            msg = "group_limit must not be smaller than per_page"
            raise ValueError(msg)
        if self.mode is PaginationMode.PAGE and (self.cursor is not None or self.page is None):
            msg = "page mode requires a page and no cursor"
            raise ValueError(msg)
        if self.mode is PaginationMode.CURSOR and self.page is not None:
            msg = "cursor mode does not take a page"
            raise ValueError(msg)

    @property
    def is_cursor(self) -> bool:
        return self.mode is PaginationMode.CURSOR

    @property
    def offset(self) -> int:
        """Row offset for page mode (0 in cursor mode)."""
        if self.page is None:
            return 0
        return (self.page - 1) * self.per_page

    @property
    def ascending(self) -> bool:
        """Scan direction in cursor mode: order direction flipped by ``reverse``."""
        return (self.order_direction is OrderDirection.ASC) != self.reverse


@dataclass(slots=True, frozen=True)
class PageResult[T]:
    """Records of one page plus whatever the strategy derived about its neighbours.

    Attributes:
        records: Page records, in emission order.
        total_count: Size of the filtered collection (page mode, or when requested).
        total_pages: Page mode only.
        has_next_page: Whether records exist after this page.
        next_cursor: Cursor mode: boundary of the following page, None at the end.
        prev_cursor: Cursor mode: boundary of the preceding page, None at the start.
    """

    records: Sequence[T] = field(default_factory=tuple)
    total_count: int | None = None
    total_pages: int | None = None
    has_next_page: bool | None = None
    next_cursor: CursorValue | None = None
    prev_cursor: CursorValue | None = None


class PaginationMetadata(BaseModel):
    """Read-only metadata attached next to a page of records.

    Page mode fills ``total``, ``page``, ``total_pages``; cursor mode fills
    the cursors. ``per_page`` and ``has_next_page`` are always present.
    """

    total: int | None = Field(default=None, description="Total matching records")
    page: int | None = Field(default=None, description="Current page (page mode)")
    per_page: int = Field(description="Page size")
    total_pages: int | None = Field(default=None, description="Number of pages (page mode)")
    has_next_page: bool = Field(description="Whether more records exist")
    next_cursor: int | float | str | None = Field(
        default=None,
        description="Cursor to fetch the next page",
    )
    prev_cursor: int | float | str | None = Field(
        default=None,
        description="Cursor to fetch the previous page",
    )

    model_config = ConfigDict(frozen=True)

    def as_dict(self) -> dict[str, Any]:
        """Wire form without absent fields."""
        return self.model_dump(exclude_none=True)


__all__ = [
    "COMPARISON_FILTERS",
    "SET_FILTERS",
    "Compare",
    "CompareOp",
    "CursorValue",
    "FilterClause",
    "OrderDirection",
    "PageResult",
    "PaginationMetadata",
    "PaginationMode",
    "PaginationPlan",
    "ValuesIn",
    "ValuesNotIn",
]
