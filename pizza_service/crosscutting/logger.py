# pizza_service/crosscutting/logger.py
"""
===============================================================================
MÓDULO: Logger de la API de pizzas (JSON por línea)
===============================================================================

Objetivo
--------
Un único logger de proceso ("pizza-api") que:
- Escribe una línea JSON por evento (o texto plano con LOG_JSON=false)
- Agrega request_id / method / path del request en curso
- Nunca escribe passwords, tokens de sesión, firmas ni la API key de la fábrica

-------------------------------------------------------------------------------
CRC (Component Card)
-------------------------------------------------------------------------------
Componente:
  PizzaLogFormatter + redact() + setup_logger()

Responsabilidades:
  - Serializar LogRecord + extra=... a JSON
  - Redactar por nombre de campo (recursivo, con límite de profundidad)
  - Configurar nivel y formato desde Settings

Colaboradores:
  - pizza_service/context.py (contexto del request)
  - crosscutting/config.py (log_level / log_json)
===============================================================================
"""

from __future__ import annotations

import json
import logging
import sys
import traceback
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any

REDACTED = "[redacted]"

# R: match por nombre de campo en minúsculas, a cualquier profundidad
SENSITIVE_FIELDS: frozenset[str] = frozenset(
    {
        "password",
        "password_hash",
        "token",
        "jwt",
        "token_signature",
        "signature",
        "authorization",
        "jwt_secret",
        "factory_api_key",
        "api_key",
    }
)

_MAX_DEPTH = 4
_MAX_TEXT = 4_000

# Atributos estándar de LogRecord: todo lo demás vino por extra=...
_RECORD_ATTRS: frozenset[str] = frozenset(
    logging.LogRecord("", 0, "", 0, "", None, None).__dict__
) | {"message", "asctime", "taskName"}


def redact(value: Any, *, field: str | None = None, depth: int = 0) -> Any:
    """Copia JSON-safe de `value` con los campos sensibles tapados."""
    if field is not None and field.lower() in SENSITIVE_FIELDS:
        return REDACTED
    if depth > _MAX_DEPTH:
        return "..."
    if isinstance(value, dict):
        return {str(k): redact(v, field=str(k), depth=depth + 1) for k, v in value.items()}
    if isinstance(value, (list, tuple, set, frozenset)):
        return [redact(v, depth=depth + 1) for v in value]
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, str) and len(value) > _MAX_TEXT:
        return value[:_MAX_TEXT] + "..."
    if value is None or isinstance(value, (bool, int, float, str)):
        return value
    return str(value)


class PizzaLogFormatter(logging.Formatter):
    """LogRecord -> línea JSON (timestamp UTC, nivel, mensaje, contexto, extras)."""

    def format(self, record: logging.LogRecord) -> str:
        from ..context import get_context_dict

        entry: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
            "where": f"{record.module}.{record.funcName}:{record.lineno}",
        }
        entry.update(get_context_dict())
        entry.update(
            {
                key: redact(value, field=key)
                for key, value in record.__dict__.items()
                if key not in _RECORD_ATTRS
            }
        )

        if record.exc_info and record.exc_info[1] is not None:
            exc = record.exc_info[1]
            entry["exc_type"] = type(exc).__name__
            entry["exc_message"] = str(exc)
            entry["traceback"] = "".join(traceback.format_exception(*record.exc_info))

        return json.dumps(entry, ensure_ascii=False, default=str)


def setup_logger(name: str = "pizza-api") -> logging.Logger:
    """
    Logger de proceso configurado desde Settings.

    Idempotente: reimportar el módulo no duplica handlers.
    """
    from .config import get_settings

    settings = get_settings()

    log = logging.getLogger(name)
    level = (settings.log_level or "INFO").upper()
    log.setLevel(getattr(logging, level, logging.INFO))

    if not log.handlers:
        handler = logging.StreamHandler(sys.stdout)
        if settings.log_json:
            handler.setFormatter(PizzaLogFormatter())
        else:
            handler.setFormatter(
                logging.Formatter("%(asctime)s %(levelname)s %(name)s %(message)s")
            )
        log.addHandler(handler)

    return log


logger = setup_logger()
