"""
===============================================================================
TARJETA CRC — pizza_service/context.py (Contexto por request)
===============================================================================

Responsabilidades:
  - Guardar el contexto del request en curso (request_id, método, path)
    en un único ContextVar, visible para el logger sin pasar parámetros.

Colaboradores:
  - crosscutting.middleware: lo setea al entrar y lo limpia al salir.
  - crosscutting.logger: lo vuelca en cada línea de log.

Restricciones:
  - Inmutable por request: se reemplaza completo, nunca se muta.
===============================================================================
"""

from __future__ import annotations

from contextvars import ContextVar
from dataclasses import asdict, dataclass


@dataclass(frozen=True)
class RequestContext:
    request_id: str = ""
    method: str = ""
    path: str = ""


_EMPTY = RequestContext()
_current: ContextVar[RequestContext] = ContextVar("pizza_request", default=_EMPTY)


def set_request_context(
    *, request_id: str = "", method: str = "", path: str = ""
) -> None:
    _current.set(RequestContext(request_id or "", method or "", path or ""))


def get_context_dict() -> dict[str, str]:
    """Contexto actual sin claves vacías (listo para el log)."""
    return {k: v for k, v in asdict(_current.get()).items() if v}


def clear_context() -> None:
    _current.set(_EMPTY)
