# pizza_service/crosscutting/error_responses.py
"""
===============================================================================
MÓDULO: Cuerpo de error HTTP de la API (problem+json con `message`)
===============================================================================

Objetivo
--------
Todo error sale con la misma forma:

    {"type", "title", "status", "code", "detail", "message", "instance",
     "errors"?, ...campos extra top-level (ej: reportUrl)}

- `message` espeja `detail`: los clientes de la API de pizzas leen `message`.
- `code` es estable (ErrorCode); `errors[]` lleva error_id / request_id.

-------------------------------------------------------------------------------
CRC (Component Card)
-------------------------------------------------------------------------------
Componente:
  ProblemDetail + AppHTTPException + app_exception_handler

Responsabilidades:
  - Catálogo de códigos (ErrorCode)
  - Render único del payload (problem_payload)
  - Documentar las respuestas de error en OpenAPI

Colaboradores:
  - api/exception_handlers.py (traduce PizzaError -> AppHTTPException)
  - crosscutting/middleware.py (request.state.request_id)
===============================================================================
"""

from __future__ import annotations

from enum import Enum
from http import HTTPStatus
from typing import Any

from fastapi import HTTPException, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

PROBLEM_JSON_MEDIA_TYPE = "application/problem+json"


class ErrorCode(str, Enum):
    BAD_REQUEST = "BAD_REQUEST"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    UNAUTHORIZED = "UNAUTHORIZED"
    FORBIDDEN = "FORBIDDEN"
    NOT_FOUND = "NOT_FOUND"
    CONFLICT = "CONFLICT"
    UPSTREAM_FAILURE = "UPSTREAM_FAILURE"
    DATABASE_ERROR = "DATABASE_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"


class ProblemDetail(BaseModel):
    """Schema del cuerpo de error (también usado en OpenAPI)."""

    type: str
    title: str
    status: int
    code: ErrorCode
    detail: str
    message: str
    instance: str | None = None
    errors: list[dict[str, Any]] | None = None


OPENAPI_ERROR_RESPONSES: dict[int | str, dict[str, Any]] = {
    status: {
        "description": HTTPStatus(status).phrase,
        "model": ProblemDetail,
        "content": {PROBLEM_JSON_MEDIA_TYPE: {}},
    }
    for status in (400, 401, 403, 404, 409, 500)
}


class AppHTTPException(HTTPException):
    """HTTPException con ErrorCode, detalles (errors[]) y campos top-level (extra)."""

    def __init__(
        self,
        status_code: int,
        code: ErrorCode,
        detail: str,
        errors: list[dict[str, Any]] | None = None,
        extra: dict[str, Any] | None = None,
    ):
        super().__init__(status_code=status_code, detail=detail)
        self.code = code
        self.errors = errors
        self.extra = extra or {}


def validation_error(
    detail: str, errors: list[dict[str, Any]] | None = None
) -> AppHTTPException:
    return AppHTTPException(400, ErrorCode.VALIDATION_ERROR, detail, errors)


def not_found(detail: str = "unknown endpoint") -> AppHTTPException:
    return AppHTTPException(404, ErrorCode.NOT_FOUND, detail)


def problem_payload(
    exc: AppHTTPException, *, instance: str | None, request_id: str | None
) -> dict[str, Any]:
    """AppHTTPException -> dict listo para JSONResponse."""
    errors = list(exc.errors or [])
    if request_id:
        errors.append({"request_id": request_id})

    try:
        title = HTTPStatus(exc.status_code).phrase
    except ValueError:
        title = exc.code.value.replace("_", " ").title()

    problem = ProblemDetail(
        type=f"about:blank/{exc.code.value.lower()}",
        title=title,
        status=exc.status_code,
        code=exc.code,
        detail=str(exc.detail),
        message=str(exc.detail),
        instance=instance,
        errors=errors or None,
    )
    payload = problem.model_dump(mode="json", exclude_none=True)
    payload.update(exc.extra)
    return payload


async def app_exception_handler(
    request: Request, exc: AppHTTPException
) -> JSONResponse:
    request_id = getattr(request.state, "request_id", None)
    return JSONResponse(
        status_code=exc.status_code,
        content=problem_payload(
            exc, instance=request.url.path, request_id=request_id
        ),
        headers=exc.headers,
        media_type=PROBLEM_JSON_MEDIA_TYPE,
    )
