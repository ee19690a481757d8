"""
===============================================================================
TARJETA CRC — pizza_service/api/exception_handlers.py (Manejo Centralizado)
===============================================================================

Responsabilidades:
  - Traducir la taxonomía PizzaError a respuestas HTTP RFC7807:
      BadRequest 400, Unauthorized 401, Forbidden 403, NotFound 404,
      Conflict 409, UpstreamFailure 500, Internal/Database 500.
  - Ruta desconocida => 404 {"message": "unknown endpoint"}.
  - Validación de request (pydantic) => 400 VALIDATION_ERROR.
  - Centralizar logging de errores con request_id + error_id.

Patrones aplicados:
  - Exception Mapping (Presentation Layer).
  - Fail-safe: cualquier excepción no tipada -> INTERNAL_ERROR (con logging).

Colaboradores:
  - crosscutting.error_responses: AppHTTPException, ErrorCode, app_exception_handler
  - crosscutting.exceptions: PizzaError y derivadas
===============================================================================
"""

from __future__ import annotations

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from ..crosscutting.config import get_settings
from ..crosscutting.error_responses import (
    AppHTTPException,
    ErrorCode,
    app_exception_handler,
    not_found,
    validation_error,
)
from ..crosscutting.exceptions import (
    BadRequestError,
    ConflictError,
    ForbiddenError,
    NotFoundError,
    PizzaError,
    UnauthorizedError,
    UpstreamFailureError,
)
from ..crosscutting.logger import logger

# R: Orden importa: subclases antes que PizzaError (el fallback va al final).
_ERROR_MAPPING: tuple[tuple[type[PizzaError], ErrorCode, int], ...] = (
    (BadRequestError, ErrorCode.BAD_REQUEST, 400),
    (UnauthorizedError, ErrorCode.UNAUTHORIZED, 401),
    (ForbiddenError, ErrorCode.FORBIDDEN, 403),
    (NotFoundError, ErrorCode.NOT_FOUND, 404),
    (ConflictError, ErrorCode.CONFLICT, 409),
)

_STATUS_CODES: dict[int, ErrorCode] = {
    400: ErrorCode.BAD_REQUEST,
    401: ErrorCode.UNAUTHORIZED,
    403: ErrorCode.FORBIDDEN,
    404: ErrorCode.NOT_FOUND,
    409: ErrorCode.CONFLICT,
}


def _request_id_from(request: Request) -> str | None:
    return getattr(getattr(request, "state", None), "request_id", None)


def _classify(exc: PizzaError) -> tuple[ErrorCode, int]:
    for error_type, code, status_code in _ERROR_MAPPING:
        if isinstance(exc, error_type):
            return code, status_code
    if exc.error_code == ErrorCode.DATABASE_ERROR.value:
        return ErrorCode.DATABASE_ERROR, 500
    return ErrorCode.INTERNAL_ERROR, 500


async def pizza_error_handler(request: Request, exc: PizzaError) -> JSONResponse:
    """Handler único para la taxonomía de dominio."""
    code, status_code = _classify(exc)
    request_id = _request_id_from(request)

    log = logger.warning if status_code < 500 else logger.error
    log(
        "Error de aplicación",
        extra={
            "code": code.value,
            "status": status_code,
            "error_id": exc.error_id,
            "detail": exc.message,
            "request_id": request_id,
        },
    )

    # R: En producción los 5xx no exponen el mensaje interno.
    detail = exc.message
    if status_code >= 500 and get_settings().is_production():
        detail = "Error interno."

    app_exc = AppHTTPException(
        status_code=status_code,
        code=code,
        detail=detail,
        errors=[{"error_id": exc.error_id}],
    )
    return await app_exception_handler(request, app_exc)


async def upstream_failure_handler(
    request: Request, exc: UpstreamFailureError
) -> JSONResponse:
    """Fábrica caída/rechazo: 500 + reportUrl (si la fábrica lo devolvió)."""
    logger.error(
        "Falla de la fábrica",
        extra={
            "error_id": exc.error_id,
            "upstream_status": exc.status_code,
            "request_id": _request_id_from(request),
        },
    )
    extra = {}
    if exc.report_url:
        extra["reportUrl"] = exc.report_url
    app_exc = AppHTTPException(
        status_code=500,
        code=ErrorCode.UPSTREAM_FAILURE,
        detail=exc.message,
        errors=[{"error_id": exc.error_id}],
        extra=extra,
    )
    return await app_exception_handler(request, app_exc)


async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    errors = [
        {"loc": list(err.get("loc", ())), "msg": err.get("msg", "")}
        for err in exc.errors()
    ]
    return await app_exception_handler(
        request, validation_error("invalid request", errors)
    )


async def http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    """HTTPException de Starlette/FastAPI (404 de routing, 405, ...)."""
    if exc.status_code == 404:
        return await app_exception_handler(request, not_found())
    code = _STATUS_CODES.get(exc.status_code, ErrorCode.INTERNAL_ERROR)
    app_exc = AppHTTPException(
        status_code=exc.status_code, code=code, detail=str(exc.detail)
    )
    return await app_exception_handler(request, app_exc)


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Handler para excepciones no tipadas.

    - Log completo (stacktrace).
    - Respuesta genérica (evita filtrar internos).
    """
    request_id = _request_id_from(request)

    logger.error(
        "Excepción no controlada",
        exc_info=True,
        extra={"request_id": request_id, "error": str(exc)},
    )

    # R: En desarrollo ayudamos un poco más; en producción evitamos filtrar detalles.
    detail = str(exc) if not get_settings().is_production() else "Error interno."

    app_exc = AppHTTPException(
        status_code=500,
        code=ErrorCode.INTERNAL_ERROR,
        detail=detail,
    )
    return await app_exception_handler(request, app_exc)


def register_exception_handlers(app) -> None:
    """
    Registra handlers en la app FastAPI.

    Importante:
      - AppHTTPException se registra antes que el HTTPException genérico.
      - Exception genérica se registra al final como fallback.
    """
    app.add_exception_handler(UpstreamFailureError, upstream_failure_handler)
    app.add_exception_handler(PizzaError, pizza_error_handler)
    app.add_exception_handler(AppHTTPException, app_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)


__all__ = ["register_exception_handlers"]
