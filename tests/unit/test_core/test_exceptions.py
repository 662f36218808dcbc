"""Unit tests for the exception hierarchy."""
from __future__ import annotations

import pytest

from pagination_service.core.exceptions import (
    AppException,
    ConflictingModesError,
    FilterMustBeMapError,
    InvalidOptionError,
    InvalidOrderError,
    InvalidPageError,
    PaginationError,
    StorageError,
    UnknownColumnError,
    UnknownFilterColumnError,
    UnorderableColumnTypeError,
    UnorderableFilterColumnError,
)


@pytest.mark.unit
class TestPaginationErrors:
    """Kinds, statuses and problem types."""

    @pytest.mark.parametrize(
        ("error", "kind", "type_"),
        [
            (InvalidOptionError("per_page", "x", "an integer"), "InvalidOption", "invalid-option"),
            (ConflictingModesError(), "ConflictingModes", "conflicting-modes"),
            (InvalidPageError(0), "InvalidPage", "invalid-page"),
            (InvalidOrderError("up"), "InvalidOrder", "invalid-order"),
            (UnknownColumnError("nope"), "UnknownColumn", "unknown-column"),
            (UnknownFilterColumnError("greater", "nope"), "UnknownFilterColumn", "unknown-filter-column"),
            (UnorderableColumnTypeError("name", "string"), "UnorderableColumnType", "unorderable-column-type"),
            (
                UnorderableFilterColumnError("smaller", "name", "string"),
                "UnorderableFilterColumn",
                "unorderable-filter-column",
            ),
            (FilterMustBeMapError("values_in"), "FilterMustBeMap", "filter-must-be-map"),
        ],
    )
    def test_kind_and_type(self, error: PaginationError, kind: str, type_: str):
        assert isinstance(error, AppException)
        assert error.kind == kind
        assert error.type == type_
        assert error.status_code == 400
        assert error.title == "Bad Request"

    def test_as_dict(self):
        error = InvalidPageError(0)

        assert error.as_dict() == {
            "kind": "InvalidPage",
            "message": "page must be 1 or bigger, got 0",
        }

    def test_conflicting_modes_message(self):
        assert str(ConflictingModesError()) == "can not do both cursor pagination and page pagination"

    def test_invalid_option_context(self):
        error = InvalidOptionError("per_page", "ten", "an integer")

        assert error.option == "per_page"
        assert error.value == "ten"
        assert error.extra == {"option": "per_page"}
        assert "per_page must be an integer" in error.detail

    def test_unknown_column_message(self):
        error = UnknownColumnError("nope")

        assert error.detail == "can not sort by 'nope' as such attribute does not exist"


@pytest.mark.unit
class TestStorageError:
    """StorageError."""

    def test_defaults(self):
        error = StorageError("connection reset", operation="db.fetch")

        assert error.status_code == 500
        assert error.type == "storage-error"
        assert error.extra == {"operation": "db.fetch"}
        assert not isinstance(error, PaginationError)

    def test_no_operation(self):
        assert StorageError("boom").extra == {}
