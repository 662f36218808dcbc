"""Unit tests for schema oracles and the snapshot registry."""
from __future__ import annotations

import pytest
from sqlalchemy import JSON, Date, Double, Enum, Float, Integer, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from pagination_service.core.database.base import Base
from pagination_service.core.database.oracle import build_oracle, column_type_for, oracle_for_model
from pagination_service.core.pagination.oracle import (
    ColumnType,
    SchemaRegistry,
    StaticSchemaOracle,
)
from tests.factories import Gadget, Invention


class Membership(Base):
    """Composite primary key; can not be paginated."""

    __tablename__ = "memberships"

    user_id: Mapped[int] = mapped_column(Integer, primary_key=True)
    group_id: Mapped[int] = mapped_column(Integer, primary_key=True)


class Rating(Base):
    """Carries per-collection pagination defaults."""

    __tablename__ = "ratings"
    __pagination__ = {"max_per_page": 30, "order": "score desc"}

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    score: Mapped[float] = mapped_column(Float)


@pytest.mark.unit
class TestStaticSchemaOracle:
    """StaticSchemaOracle behaviour."""

    def test_types_and_orderability(self):
        oracle = StaticSchemaOracle("posts", {"id": "integer", "title": "string", "blob": "jsonb"})

        assert oracle.column_type("title") is ColumnType.STRING
        assert oracle.column_type("blob") is ColumnType.UNKNOWN
        assert oracle.is_orderable("id") is True
        assert oracle.is_orderable("title") is False

    def test_missing_column(self):
        oracle = StaticSchemaOracle("posts", {"id": ColumnType.INTEGER})

        assert oracle.has_column("title") is False
        assert oracle.column_type("title") is ColumnType.UNKNOWN

    def test_primary_column_must_exist(self):
        with pytest.raises(ValueError, match="primary column 'uuid'"):
            StaticSchemaOracle("posts", {"id": "integer"}, primary_column="uuid")

    def test_columns_are_read_only(self):
        oracle = StaticSchemaOracle("posts", {"id": "integer"})

        with pytest.raises(TypeError):
            oracle.columns["title"] = ColumnType.STRING  # type: ignore[index]


@pytest.mark.unit
class TestSchemaRegistry:
    """SchemaRegistry caching."""

    def test_get_or_load_calls_loader_once(self):
        registry = SchemaRegistry()
        calls: list[int] = []

        def loader() -> StaticSchemaOracle:
            calls.append(1)
            return StaticSchemaOracle("posts", {"id": "integer"})

        first = registry.get_or_load("posts", loader)
        second = registry.get_or_load("posts", loader)

        assert first is second
        assert len(calls) == 1

    def test_invalidate_one(self):
        registry = SchemaRegistry()
        registry.publish("posts", StaticSchemaOracle("posts", {"id": "integer"}))
        registry.publish("authors", StaticSchemaOracle("authors", {"id": "integer"}))

        registry.invalidate("posts")

        assert registry.get("posts") is None
        assert registry.get("authors") is not None

    def test_invalidate_all(self):
        registry = SchemaRegistry()
        registry.publish("posts", StaticSchemaOracle("posts", {"id": "integer"}))

        registry.invalidate()

        assert registry.get("posts") is None


@pytest.mark.unit
class TestModelOracle:
    """Oracles built from SQLAlchemy models."""

    def test_build_oracle(self):
        oracle = build_oracle(Invention)

        assert oracle.collection_name == "inventions"
        assert oracle.primary_column == "id"
        assert dict(oracle.columns) == {
            "id": ColumnType.INTEGER,
            "name": ColumnType.STRING,
            "category": ColumnType.STRING,
            "price": ColumnType.FLOAT,
            "votes": ColumnType.INTEGER,
            "launched_at": ColumnType.DATETIME,
            "is_public": ColumnType.BOOLEAN,
        }

    def test_composite_key_rejected(self):
        with pytest.raises(ValueError, match="exactly one primary key"):
            build_oracle(Membership)

    @pytest.mark.parametrize(
        ("sa_type", "expected"),
        [
            (Numeric(10, 2), ColumnType.FLOAT),
            (Float(), ColumnType.FLOAT),
            (Double(), ColumnType.FLOAT),
            (Date(), ColumnType.DATETIME),
            (Enum("a", "b", name="letters"), ColumnType.STRING),
            (String(), ColumnType.STRING),
            (JSON(), ColumnType.UNKNOWN),
        ],
    )
    def test_column_type_for(self, sa_type, expected):
        assert column_type_for(sa_type) is expected

    def test_oracle_for_model_is_cached(self):
        registry = SchemaRegistry()

        first = oracle_for_model(Invention, registry)

        assert registry.get("inventions") is first
        assert oracle_for_model(Invention, registry) is first

    def test_float_column_is_orderable(self):
        """A plain Float column maps to FLOAT and can be ordered."""
        oracle = build_oracle(Gadget)

        assert oracle.column_type("weight") is ColumnType.FLOAT
        assert oracle.is_orderable("weight") is True

    def test_model_pagination_overrides(self):
        overrides = build_oracle(Rating).pagination_overrides

        assert overrides.max_per_page == 30
        assert overrides.default_order_column == "score"
        assert overrides.default_order == "DESC"

    def test_no_overrides_by_default(self):
        overrides = build_oracle(Invention).pagination_overrides

        assert overrides.default_per_page is None
        assert overrides.default_order_column is None
