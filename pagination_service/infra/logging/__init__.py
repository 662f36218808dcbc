"""Logging infrastructure.

Basic usage:
    import logging

    from pagination_service.infra.logging import get_lazy_logger, setup_logging

    setup_logging()  # once, at process start
    logger = logging.getLogger(__name__)
    lazy_logger = get_lazy_logger(__name__)
    lazy_logger.debug(lambda: f"Expensive: {describe(query)}")
"""

from pagination_service.infra.logging.config import configure_logging, setup_logging
from pagination_service.infra.logging.formatters import JSONFormatter
from pagination_service.infra.logging.lazy import LazyLoggerAdapter, get_lazy_logger

__all__ = [
    "JSONFormatter",
    "LazyLoggerAdapter",
    "configure_logging",
    "get_lazy_logger",
    "setup_logging",
]
