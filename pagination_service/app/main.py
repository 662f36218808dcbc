"""FastAPI application factory."""

from __future__ import annotations

from typing import Any

from fastapi import FastAPI

from pagination_service.app.exception_handlers import register_exception_handlers
from pagination_service.infra.logging import setup_logging


def create_app(**fastapi_kwargs: Any) -> FastAPI:
    """Create an application with logging and pagination error handling configured.

    Routers are mounted by the caller:

        app = create_app(title="Inventions API")
        app.include_router(inventions_router)

    Returns:
        Configured FastAPI application instance.
    """
    setup_logging()
    app = FastAPI(**fastapi_kwargs)
    register_exception_handlers(app)
    return app


__all__ = ["create_app"]
