"""Logging configuration setup.

Uses ``logging.config.dictConfig`` with all handlers on the root logger;
package loggers propagate up.
"""

from __future__ import annotations

import logging
import logging.config
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from pagination_service.core.settings.logging_ import LoggingSettings

logger = logging.getLogger(__name__)
_LOGGING_INITIALIZED = False


def configure_logging(
    log_level: str = "INFO",
    json_logs: bool = True,
    console_enabled: bool = True,
    static: dict[str, Any] | None = None,
) -> None:
    """Configure root logging with dictConfig.

    Args:
        log_level: Root logger level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        json_logs: Emit JSON lines instead of plain text.
        console_enabled: Attach a stderr handler.
        static: Fields added to every JSON record (e.g. {"service": "api"}).
    """
    formatters: dict[str, Any] = {
        "plain": {
            "format": "%(asctime)s %(levelname)-8s %(name)s: %(message)s",
        },
        "json": {
            "()": "pagination_service.infra.logging.formatters.JSONFormatter",
            "static": static or {},
        },
    }
    handlers: dict[str, Any] = {}
    if console_enabled:
        handlers["console"] = {
            "class": "logging.StreamHandler",
            "formatter": "json" if json_logs else "plain",
            "stream": "ext://sys.stderr",
        }

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": formatters,
            "handlers": handlers,
            "root": {"level": log_level.upper(), "handlers": list(handlers)},
        }
    )
    logger.debug("Logging configured", extra={"level": log_level, "json": json_logs})


def setup_logging(
    log_settings: LoggingSettings | None = None,
    *,
    force: bool = False,
    **configure_kwargs: Any,
) -> None:
    """Ensure logging is configured once across entrypoints.

    Args:
        log_settings: Optional settings instance; loaded from the cached
            loader when omitted.
        force: Reconfigure logging even if it was already initialized.
        **configure_kwargs: Explicit overrides for configure_logging().
    """
    global _LOGGING_INITIALIZED

    if _LOGGING_INITIALIZED and not force:
        return

    settings_obj = log_settings
    if settings_obj is None:
        from pagination_service.core.settings import get_logging_settings

        settings_obj = get_logging_settings()

    log_config: dict[str, Any] = {**settings_obj.to_logging_kwargs(), **configure_kwargs}
    configure_logging(**log_config)
    _LOGGING_INITIALIZED = True
