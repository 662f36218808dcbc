"""LRU-cached settings loaders.

Settings are loaded and validated once, then cached for the lifetime of
the process. Only the FastAPI adapter and logging setup use these; the
engine itself receives its settings object explicitly.

Testing:
    get_pagination_settings.cache_clear()
    # or
    clear_all_caches()
"""

from __future__ import annotations

from functools import lru_cache

from .logging_ import LoggingSettings
from .pagination import PaginationSettings


@lru_cache(maxsize=1)
def get_pagination_settings() -> PaginationSettings:
    """Get cached pagination settings.

    Returns:
        Validated and frozen PaginationSettings instance.
    """
    return PaginationSettings()


@lru_cache(maxsize=1)
def get_logging_settings() -> LoggingSettings:
    """Get cached logging settings.

    Returns:
        Validated and frozen LoggingSettings instance.
    """
    return LoggingSettings()


def clear_all_caches() -> None:
    """Clear all settings caches."""
    get_pagination_settings.cache_clear()
    get_logging_settings.cache_clear()
