"""Exception handlers for FastAPI applications that paginate."""

from __future__ import annotations

import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from pagination_service.core.exceptions import AppException, PaginationError, StorageError
from pagination_service.core.schemas.problem_details import ProblemDetail

logger = logging.getLogger(__name__)


def _get_request_id(request: Request) -> str | None:
    return getattr(request.state, "request_id", None)


def _create_problem_detail(
    status_code: int,
    detail: str,
    type_: str = "about:blank",
    title: str | None = None,
    instance: str | None = None,
    kind: str | None = None,
    extra: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """Create RFC 7807 Problem Details response.

    Args:
        status_code: HTTP status code.
        detail: Human-readable error description.
        type_: Error type identifier.
        title: Short human-readable summary.
        instance: URI identifying this occurrence.
        kind: Stable error kind.
        extra: Additional context information.

    Returns:
        Dictionary representing the problem detail.
    """
    problem = ProblemDetail(
        type=type_,
        title=title or AppException._default_title(status_code),
        status=status_code,
        detail=detail[:2000],
        instance=instance[:500] if instance else None,
        kind=kind,
    )

    response_data = problem.model_dump(exclude_none=True)
    if extra:
        # Problem fields win over context keys of the same name
        response_data = {**extra, **response_data}
    return response_data


async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    """Render an :class:`AppException` as RFC 7807 Problem Details.

    Pagination errors are client errors and are logged at INFO; storage
    errors were already logged with their traceback where they were raised.
    """
    request_id = _get_request_id(request)
    kind = getattr(exc, "kind", None)

    log_extra = {
        "request_id": request_id,
        "path": request.url.path,
        "method": request.method,
        "exception_type": exc.type,
        "status_code": exc.status_code,
        "kind": kind,
    }
    if isinstance(exc, PaginationError):
        logger.info("Pagination request rejected", extra=log_extra)
    else:
        logger.warning("Application exception occurred", extra=log_extra)

    # Storage details stay in the logs
    detail = "The records could not be loaded." if isinstance(exc, StorageError) else exc.detail
    extra = {} if isinstance(exc, StorageError) else exc.extra

    problem_data = _create_problem_detail(
        status_code=exc.status_code,
        detail=detail,
        type_=exc.type,
        title=exc.title,
        instance=exc.instance or str(request.url),
        kind=kind,
        extra=extra,
    )
    if request_id:
        problem_data["request_id"] = request_id

    return JSONResponse(status_code=exc.status_code, content=problem_data)


def register_exception_handlers(app: FastAPI) -> None:
    """Register the Problem Details handler for pagination and storage errors.

    Example:
        app = FastAPI()
        register_exception_handlers(app)
    """
    app.add_exception_handler(AppException, app_exception_handler)
    logger.debug("Exception handlers configured")


__all__ = ["app_exception_handler", "register_exception_handlers"]
