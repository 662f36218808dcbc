"""Pagination settings.

Defaults applied by the option parser when a request omits a value.
The engine never reads these from global state; an instance is passed
to :class:`~pagination_service.core.pagination.options.OptionParser`
at construction time.

Environment variables use PAGINATION_ prefix.
Example: PAGINATION_DEFAULT_PER_PAGE=50, PAGINATION_MAX_PER_PAGE=200
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class PaginationSettings(BaseSettings):
    """Pagination configuration settings.

    Attributes:
        default_per_page: Page size when per_page is absent or not positive.
        max_per_page: Hard upper bound; larger requests are clamped.
        default_order: Sort direction when order is absent.
        cursor_include_total: Count the filtered collection in cursor mode
            even when the request does not ask for it.

    Example:
        settings = PaginationSettings(default_per_page=10)
        parser = OptionParser(oracle, settings)
    """

    default_per_page: int = Field(
        default=20,
        ge=1,
        le=10000,
        description="Default page size when per_page not specified",
    )
    max_per_page: int = Field(
        default=100,
        ge=1,
        le=10000,
        description="Maximum allowed page size (hard limit)",
    )
    default_order: Literal["ASC", "DESC"] = Field(
        default="ASC",
        description="Default sort direction",
    )
    cursor_include_total: bool = Field(
        default=False,
        description="Always compute total_count in cursor mode (expensive)",
    )

    @field_validator("default_order", mode="before")
    @classmethod
    def normalize_order(cls, v: str) -> str:
        """Normalize order to uppercase."""
        if isinstance(v, str):
            return v.upper()
        return v

    @model_validator(mode="after")
    def check_limits(self) -> PaginationSettings:
        """Ensure the default page size fits under the maximum."""
        if self.default_per_page > self.max_per_page:
            msg = "default_per_page must not exceed max_per_page"
            raise ValueError(msg)
        return self

    model_config = SettingsConfigDict(
        env_prefix="PAGINATION_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        frozen=True,
        extra="ignore",
    )


class PaginationOverrides(BaseModel):
    """Per-collection defaults that take precedence over :class:`PaginationSettings`.

    Unset fields fall through to the settings object. ``order`` is a
    shorthand for ``"column [ASC|DESC]"`` and fills both order fields.

    Example:
        class Invention(Base):
            __pagination__ = {"default_per_page": 10, "max_per_page": 25, "order": "price DESC"}
    """

    default_per_page: int | None = Field(default=None, ge=1, le=10000)
    max_per_page: int | None = Field(default=None, ge=1, le=10000)
    default_order: Literal["ASC", "DESC"] | None = None
    default_order_column: str | None = None

    model_config = ConfigDict(frozen=True, extra="forbid")

    @model_validator(mode="before")
    @classmethod
    def split_order(cls, data: Any) -> Any:
        """Expand ``order="price DESC"`` into column and direction."""
        if not isinstance(data, Mapping) or "order" not in data:
            return data
        data = dict(data)
        column, _, direction = str(data.pop("order")).strip().partition(" ")
        data.setdefault("default_order_column", column or None)
        if direction.strip():
            data.setdefault("default_order", direction.strip())
        return data

    @field_validator("default_order", mode="before")
    @classmethod
    def normalize_order(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.upper()
        return v

    @model_validator(mode="after")
    def check_limits(self) -> PaginationOverrides:
        if (
            self.default_per_page is not None
            and self.max_per_page is not None
            and self.default_per_page > self.max_per_page
        ):
            msg = "default_per_page must not exceed max_per_page"
            raise ValueError(msg)
        return self

    def apply(self, settings: PaginationSettings) -> PaginationSettings:
        """Settings with these overrides layered on top.

        A lowered ``max_per_page`` also caps the inherited default page size.
        """
        updates = self.model_dump(
            include={"default_per_page", "max_per_page", "default_order"}, exclude_none=True
        )
        if not updates:
            return settings
        merged = {**settings.model_dump(), **updates}
        if "default_per_page" not in updates:
            merged["default_per_page"] = min(merged["default_per_page"], merged["max_per_page"])
        return type(settings)(**merged)


NO_OVERRIDES = PaginationOverrides()
