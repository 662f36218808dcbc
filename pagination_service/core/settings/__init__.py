"""Pydantic Settings v2 configuration.

Import settings via cached loaders:
    from pagination_service.core.settings import get_pagination_settings

Or construct explicitly (tests, per-collection overrides):
    PaginationSettings(default_per_page=10)
"""

from __future__ import annotations

from .loader import clear_all_caches, get_logging_settings, get_pagination_settings
from .logging_ import LoggingSettings
from .pagination import NO_OVERRIDES, PaginationOverrides, PaginationSettings

__all__ = [
    "NO_OVERRIDES",
    "LoggingSettings",
    "PaginationOverrides",
    "PaginationSettings",
    "clear_all_caches",
    "get_logging_settings",
    "get_pagination_settings",
]
