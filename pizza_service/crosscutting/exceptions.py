# pizza_service/crosscutting/exceptions.py
"""
===============================================================================
MÓDULO: Excepciones tipadas del backend (taxonomía de errores)
===============================================================================

Objetivo
--------
Una única jerarquía de errores que cruza todas las capas:
- error_code estable
- error_id para correlación con logs
- message “humana” (sin filtrar secretos)

Taxonomía:
  BadRequestError      input faltante o malformado
  UnauthorizedError    token faltante/inválido/expirado/revocado o credenciales malas
  ForbiddenError       autenticado pero sin permiso sobre el recurso
  NotFoundError        entidad referenciada inexistente
  ConflictError        violación de unicidad (email / nombre de franquicia)
  UpstreamFailureError la fábrica externa no completó el pedido
  InternalError        falla inesperada (DatabaseError para el store)

-------------------------------------------------------------------------------
CRC (Component Card)
-------------------------------------------------------------------------------
Componente:
  PizzaError + subclases

Responsabilidades:
  - Estandarizar errores internos que luego se mapean a HTTP
  - Generar error_id para rastreo

Colaboradores:
  - api/exception_handlers.py (mapea a AppHTTPException)
  - infrastructure/repositories (traducen errores de psycopg)
===============================================================================
"""

from __future__ import annotations

from typing import Any
from uuid import uuid4


class PizzaError(Exception):
    """
    ----------------------------------------------------------------------------
    CRC (Class Card)
    ----------------------------------------------------------------------------
    Clase:
      PizzaError

    Responsabilidades:
      - Base para errores internos del sistema
      - Proveer error_code + error_id + message

    Colaboradores:
      - api/exception_handlers.py
    ----------------------------------------------------------------------------
    """

    error_code: str = "PIZZA_ERROR"

    def __init__(
        self,
        message: str,
        error_id: str | None = None,
        original_error: Exception | None = None,
    ):
        self.message = message
        self.error_id = error_id or str(uuid4())
        self.original_error = original_error
        super().__init__(message)


class BadRequestError(PizzaError):
    """Input faltante o malformado (validación local)."""

    error_code: str = "BAD_REQUEST"


class UnauthorizedError(PizzaError):
    """Token faltante/inválido/expirado/revocado, o credenciales incorrectas."""

    error_code: str = "UNAUTHORIZED"


class ForbiddenError(PizzaError):
    """Autenticado pero sin permiso para el recurso."""

    error_code: str = "FORBIDDEN"


class NotFoundError(PizzaError):
    """Entidad referenciada (franquicia, email de admin, lookup) inexistente."""

    error_code: str = "NOT_FOUND"


class ConflictError(PizzaError):
    """Violación de unicidad (email duplicado, nombre de franquicia duplicado)."""

    error_code: str = "CONFLICT"


class UpstreamFailureError(PizzaError):
    """La fábrica externa respondió no-2xx o falló el transporte."""

    error_code: str = "UPSTREAM_FAILURE"

    def __init__(
        self,
        message: str,
        *,
        report_url: str | None = None,
        order: Any = None,
        status_code: int | None = None,
        original_error: Exception | None = None,
    ):
        super().__init__(message, original_error=original_error)
        self.report_url = report_url
        self.order = order
        self.status_code = status_code


class InternalError(PizzaError):
    """Falla inesperada del sistema."""

    error_code: str = "INTERNAL_ERROR"


class DatabaseError(InternalError):
    """Errores de DB (conexión, query, timeout, pool, schema faltante)."""

    error_code: str = "DATABASE_ERROR"
