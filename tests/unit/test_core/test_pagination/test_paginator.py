"""Unit tests for the paginator pipeline: validation, logging and storage failures."""
from __future__ import annotations

import logging

import pytest

from pagination_service.core.exceptions import (
    InvalidOptionError,
    PaginationError,
    StorageError,
    UnorderableColumnTypeError,
)
from pagination_service.core.pagination.paginator import Paginator
from pagination_service.core.pagination.schemas import PaginationMode


class Cancelled(BaseException):
    """Stands in for task cancellation."""


class FailingCollection:
    """Collection whose storage calls raise ``error``."""

    def __init__(self, inner, error: BaseException, *, on: str = "fetch") -> None:
        self.inner = inner
        self.error = error
        self.on = on
        self.calls = 0

    @property
    def oracle(self):
        return self.inner.oracle

    def count(self, query):
        self.calls += 1
        if self.on == "count":
            raise self.error
        return self.inner.count(query)

    def fetch(self, query):
        self.calls += 1
        if self.on == "fetch":
            raise self.error
        return self.inner.fetch(query)


@pytest.mark.unit
class TestPaginatorValidation:
    """Invalid options are rejected before any storage call."""

    def test_error_raised_before_storage(self, paginator: Paginator, memory_collection):
        failing = FailingCollection(memory_collection, RuntimeError("should not run"))

        with pytest.raises(UnorderableColumnTypeError):
            paginator.paginate(failing, {"order_column": "name"})

        assert failing.calls == 0

    def test_filter_value_error_raised_before_storage(self, paginator: Paginator, memory_collection):
        failing = FailingCollection(memory_collection, RuntimeError("should not run"))

        with pytest.raises(InvalidOptionError) as exc_info:
            paginator.paginate(failing, {"greater": {"price": "cheap"}})

        assert exc_info.value.option == "greater[price]"
        assert failing.calls == 0

    def test_rejections_logged_at_info(self, paginator: Paginator, memory_collection, caplog):
        with caplog.at_level(logging.INFO, logger="pagination_service"):
            with pytest.raises(PaginationError):
                paginator.paginate(memory_collection, {"use_cursor": "true", "page": "2"})

        record = next(r for r in caplog.records if r.message == "Rejected pagination options")
        assert record.levelno == logging.INFO
        assert record.kind == "ConflictingModes"
        assert record.collection == "inventions"

    def test_plan_without_storage(self, paginator: Paginator, memory_collection):
        plan = paginator.plan(memory_collection, {"use_cursor": "true"})

        assert plan.mode is PaginationMode.CURSOR


@pytest.mark.unit
class TestPaginatorStorageFailures:
    """Collaborator failures surface as a single StorageError."""

    @pytest.mark.parametrize("mode", [{}, {"use_cursor": "true"}])
    def test_fetch_failure(self, paginator: Paginator, memory_collection, mode):
        original = RuntimeError("disk on fire")
        failing = FailingCollection(memory_collection, original, on="fetch")

        with pytest.raises(StorageError) as exc_info:
            paginator.paginate(failing, mode)

        assert exc_info.value.__cause__ is original
        assert exc_info.value.status_code == 500
        assert exc_info.value.as_dict() == {"kind": "StorageError", "message": "disk on fire"}

    def test_count_failure(self, paginator: Paginator, memory_collection):
        failing = FailingCollection(memory_collection, ValueError(), on="count")

        with pytest.raises(StorageError) as exc_info:
            paginator.paginate(failing, {})

        assert exc_info.value.detail == "ValueError"
        assert exc_info.value.extra == {"operation": "count"}

    def test_storage_error_passes_through(self, paginator: Paginator, memory_collection):
        original = StorageError("already wrapped", operation="db.fetch")
        failing = FailingCollection(memory_collection, original)

        with pytest.raises(StorageError) as exc_info:
            paginator.paginate(failing, {"use_cursor": "true"})

        assert exc_info.value is original

    def test_failures_logged_with_traceback(self, paginator: Paginator, memory_collection, caplog):
        failing = FailingCollection(memory_collection, RuntimeError("boom"))

        with caplog.at_level(logging.ERROR), pytest.raises(StorageError):
            paginator.paginate(failing, {"use_cursor": "true"})

        record = next(r for r in caplog.records if r.message == "Storage query failed")
        assert record.exc_info is not None
        assert record.operation == "storage.fetch"

    def test_cancellation_is_not_wrapped(self, paginator: Paginator, memory_collection):
        failing = FailingCollection(memory_collection, Cancelled())

        with pytest.raises(Cancelled):
            paginator.paginate(failing, {"use_cursor": "true"})
