"""Custom exception classes for the pagination service."""

from __future__ import annotations

from typing import Any, ClassVar


class AppException(Exception):
    """Base application exception.

    Follows RFC 7807 Problem Details for HTTP APIs so that the FastAPI
    adapter can render any subclass without knowing about it.

    Attributes:
        status_code: HTTP status code for the error.
        detail: Human-readable error message.
        type: Error type identifier (used in RFC 7807 problem details).
        title: Short, human-readable summary of the problem type.
        instance: URI reference that identifies the specific occurrence of the problem.
        extra: Additional context-specific information about the error.
    """

    def __init__(
        self,
        status_code: int,
        detail: str,
        type: str = "about:blank",
        title: str | None = None,
        instance: str | None = None,
        extra: dict[str, Any] | None = None,
    ) -> None:
        """Initialize application exception.

        Args:
            status_code: HTTP status code.
            detail: Human-readable error message.
            type: Error type identifier.
            title: Short summary of the problem type.
            instance: URI reference identifying this specific occurrence.
            extra: Additional context about the error.
        """
        self.status_code = status_code
        self.detail = detail
        self.type = type
        self.title = title or self._default_title(status_code)
        self.instance = instance
        self.extra = extra or {}
        super().__init__(detail)

    @staticmethod
    def _default_title(status_code: int) -> str:
        """Get default title for HTTP status code."""
        titles = {
            400: "Bad Request",
            404: "Not Found",
            422: "Unprocessable Entity",
            500: "Internal Server Error",
            503: "Service Unavailable",
        }
        return titles.get(status_code, "Error")


class PaginationError(AppException):
    """Base class for errors raised while validating or compiling a request.

    Every subclass carries a stable ``kind`` string. Callers that do not
    want exceptions on the wire use :meth:`as_dict`.

    Example:
        try:
            plan = parser.parse(raw_options)
        except PaginationError as exc:
            return {"errors": {"paginated_options": exc.as_dict()}}
    """

    kind: ClassVar[str] = "PaginationError"
    status: ClassVar[int] = 400

    def __init__(self, detail: str, extra: dict[str, Any] | None = None) -> None:
        super().__init__(
            status_code=self.status,
            detail=detail,
            type=_kebab(self.kind),
            extra=extra,
        )

    def as_dict(self) -> dict[str, Any]:
        """Structured error: kind plus human message."""
        return {"kind": self.kind, "message": self.detail}


class InvalidOptionError(PaginationError):
    """An option could not be coerced to its expected type."""

    kind = "InvalidOption"

    def __init__(self, option: str, value: Any, expected: str) -> None:
        super().__init__(
            f"{option} must be {expected}, got {value!r}",
            extra={"option": option},
        )
        self.option = option
        self.value = value


class ConflictingModesError(PaginationError):
    """Both cursor and page pagination were requested."""

    kind = "ConflictingModes"

    def __init__(self) -> None:
        super().__init__("can not do both cursor pagination and page pagination")


class InvalidPageError(PaginationError):
    """Page number below 1."""

    kind = "InvalidPage"

    def __init__(self, page: int) -> None:
        super().__init__(f"page must be 1 or bigger, got {page}", extra={"page": page})
        self.page = page


class InvalidOrderError(PaginationError):
    """Order token outside asc/ASC/desc/DESC."""

    kind = "InvalidOrder"

    def __init__(self, order: Any) -> None:
        super().__init__(
            f"order can only be 'asc', 'ASC', 'desc', 'DESC', got {order!r}",
            extra={"order": str(order)},
        )


class UnknownColumnError(PaginationError):
    """order_column does not exist on the collection."""

    kind = "UnknownColumn"

    def __init__(self, column: str) -> None:
        super().__init__(
            f"can not sort by '{column}' as such attribute does not exist",
            extra={"column": column},
        )
        self.column = column


class UnknownFilterColumnError(PaginationError):
    """A filter references a column that does not exist."""

    kind = "UnknownFilterColumn"

    def __init__(self, filter_name: str, column: str) -> None:
        super().__init__(
            f"can not filter {filter_name} by '{column}' as such attribute does not exist",
            extra={"filter": filter_name, "column": column},
        )
        self.column = column


class UnorderableColumnTypeError(PaginationError):
    """order_column exists but its type can not be ordered."""

    kind = "UnorderableColumnType"

    def __init__(self, column: str, column_type: str) -> None:
        super().__init__(
            f"can not order by column '{column}' of type '{column_type}'",
            extra={"column": column, "column_type": column_type},
        )
        self.column = column


class UnorderableFilterColumnError(PaginationError):
    """A range filter targets a column that can not be compared."""

    kind = "UnorderableFilterColumn"

    def __init__(self, filter_name: str, column: str, column_type: str) -> None:
        super().__init__(
            f"can not apply {filter_name} to column '{column}' of type '{column_type}'",
            extra={"filter": filter_name, "column": column, "column_type": column_type},
        )
        self.column = column


class FilterMustBeMapError(PaginationError):
    """A filter value is not a column → value mapping."""

    kind = "FilterMustBeMap"

    def __init__(self, filter_name: str) -> None:
        super().__init__(
            f"{filter_name} must be a map of column names to values",
            extra={"filter": filter_name},
        )


class StorageError(AppException):
    """The storage collaborator failed to count or fetch records.

    Raised from the original exception so ``__cause__`` keeps the backend
    traceback. Never retried.
    """

    kind: ClassVar[str] = "StorageError"

    def __init__(self, detail: str, operation: str | None = None) -> None:
        extra = {"operation": operation} if operation else {}
        super().__init__(
            status_code=500,
            detail=detail,
            type="storage-error",
            title="Internal Server Error",
            extra=extra,
        )

    def as_dict(self) -> dict[str, Any]:
        """Structured error: kind plus human message."""
        return {"kind": self.kind, "message": self.detail}


def _kebab(kind: str) -> str:
    out: list[str] = []
    for i, ch in enumerate(kind):
        if ch.isupper() and i:
            out.append("-")
        out.append(ch.lower())
    return "".join(out)


__all__ = [
    "AppException",
    "ConflictingModesError",
    "FilterMustBeMapError",
    "InvalidOptionError",
    "InvalidOrderError",
    "InvalidPageError",
    "PaginationError",
    "StorageError",
    "UnknownColumnError",
    "UnknownFilterColumnError",
    "UnorderableColumnTypeError",
    "UnorderableFilterColumnError",
]
