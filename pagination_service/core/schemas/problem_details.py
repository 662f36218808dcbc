"""RFC 7807 Problem Details schema for error responses."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class ProblemDetail(BaseModel):
    """RFC 7807 Problem Details for HTTP APIs.

    ``kind`` carries the stable pagination error kind so clients can
    branch on it without parsing ``detail``.

    See: https://datatracker.ietf.org/doc/html/rfc7807

    Example:
        return JSONResponse(
            status_code=400,
            content=ProblemDetail(
                type="invalid-page",
                title="Bad Request",
                status=400,
                detail="page must be 1 or bigger, got 0",
                kind="InvalidPage",
            ).model_dump(exclude_none=True),
        )
    """

    type: str = Field(
        default="about:blank",
        min_length=1,
        max_length=200,
        description="URI reference identifying the problem type",
    )
    title: str = Field(
        min_length=1, max_length=200, description="Short, human-readable summary of the problem"
    )
    status: int = Field(ge=100, le=599, description="HTTP status code")
    detail: str | None = Field(
        default=None,
        max_length=2000,
        description="Human-readable explanation specific to this occurrence",
    )
    instance: str | None = Field(
        default=None,
        max_length=500,
        description="URI reference identifying the specific occurrence",
    )
    kind: str | None = Field(default=None, description="Stable error kind")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "type": "conflicting-modes",
                "title": "Bad Request",
                "status": 400,
                "detail": "can not do both cursor pagination and page pagination",
                "instance": "/api/v1/inventions?use_cursor=true&page=2",
                "kind": "ConflictingModes",
            }
        },
        str_strip_whitespace=True,
    )


__all__ = ["ProblemDetail"]
