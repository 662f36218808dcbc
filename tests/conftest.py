"""Pytest configuration and shared fixtures.

Organization:
    - Settings Fixtures: settings objects and the paginator
    - Data Fixtures: the ``inventions`` dataset as plain rows (see tests/factories.py)
    - Database Fixtures: SQLite in-memory engine and session
    - Collection Fixtures: in-memory and SQLAlchemy collections over the same rows
"""

from __future__ import annotations

import os
from collections.abc import Generator
from typing import Any

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import Session

from pagination_service.core.database.base import Base
from pagination_service.core.database.collection import SQLAlchemyCollection
from pagination_service.core.database.memory import InMemoryCollection, infer_oracle
from pagination_service.core.database.oracle import build_oracle
from pagination_service.core.pagination.paginator import Paginator
from pagination_service.core.settings import PaginationSettings, clear_all_caches
from tests.factories import Invention, make_invention_rows

# Keep tests independent of the developer's shell
for _var in list(os.environ):
    if _var.startswith(("PAGINATION_", "LOG_")):
        del os.environ[_var]


# ============================================================================
# Settings Fixtures
# ============================================================================


@pytest.fixture(autouse=True)
def _clear_settings_caches() -> Generator[None]:
    """Reset cached settings around every test."""
    clear_all_caches()
    yield
    clear_all_caches()


@pytest.fixture
def settings() -> PaginationSettings:
    """Default pagination settings (per_page 20, max 100, ASC)."""
    return PaginationSettings()


@pytest.fixture
def paginator(settings: PaginationSettings) -> Paginator:
    """Paginator with default settings."""
    return Paginator(settings)


# ============================================================================
# Data Fixtures
# ============================================================================


@pytest.fixture
def invention_rows() -> list[dict[str, Any]]:
    """The 100-record dataset as plain dicts."""
    return make_invention_rows()


# ============================================================================
# Database Fixtures
# ============================================================================


@pytest.fixture
def engine():
    """SQLite in-memory engine with the schema created."""
    engine = create_engine("sqlite://")
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session(engine) -> Generator[Session]:
    """Session bound to the in-memory engine."""
    with Session(engine) as session:
        yield session


@pytest.fixture
def seeded_session(session: Session, invention_rows: list[dict[str, Any]]) -> Session:
    """Session with the 100 inventions inserted."""
    session.add_all([Invention(**row) for row in invention_rows])
    session.commit()
    return session


# ============================================================================
# Collection Fixtures
# ============================================================================


@pytest.fixture
def memory_collection(invention_rows: list[dict[str, Any]]) -> InMemoryCollection[dict[str, Any]]:
    """In-memory collection over the dataset."""
    return InMemoryCollection(invention_rows, infer_oracle("inventions", invention_rows))


@pytest.fixture
def sql_collection(seeded_session: Session) -> SQLAlchemyCollection[Invention]:
    """SQLAlchemy collection over the seeded table."""
    return SQLAlchemyCollection(seeded_session, Invention, oracle=build_oracle(Invention))


@pytest.fixture(params=["memory", "sql"])
def collection(request: pytest.FixtureRequest):
    """Both backends; tests using this run once per backend."""
    return request.getfixturevalue(f"{request.param}_collection")
