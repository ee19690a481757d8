"""
===============================================================================
TARJETA CRC — infrastructure/repositories/postgres/base.py
===============================================================================

Class: PostgresRepository

Responsibilities:
  - Resolver el pool (inyectado en tests, global en prod).
  - Centralizar ejecución SQL + traducción de errores:
      PizzaError         -> se propaga tal cual (NotFound/Unauthorized/...)
      UniqueViolation    -> ConflictError
      cualquier otro     -> DatabaseError (con logger.exception)
  - Garantizar que la conexión vuelve al pool en todo camino de salida.

Collaborators:
  - psycopg_pool.ConnectionPool
  - crosscutting.exceptions / crosscutting.logger
===============================================================================
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterable, Iterator, Optional

from psycopg import Connection
from psycopg.errors import UniqueViolation
from psycopg_pool import ConnectionPool

from ....crosscutting.exceptions import ConflictError, DatabaseError, PizzaError
from ....crosscutting.logger import logger


class PostgresRepository:
    """Base con helpers DRY para los repositorios PostgreSQL."""

    def __init__(self, pool: Optional[ConnectionPool] = None):
        # Pool inyectable para tests. En prod se obtiene del singleton.
        self._pool = pool

    def _get_pool(self) -> ConnectionPool:
        """Pool lazy-load."""
        if self._pool is not None:
            return self._pool
        from ...db.pool import get_pool

        return get_pool()

    @contextmanager
    def _transaction(
        self,
        *,
        context_msg: str,
        extra: dict,
        conflict_msg: str = "resource already exists",
    ) -> Iterator[Connection]:
        """
        Conexión scoped + transacción explícita.

        Cualquier excepción dentro del bloque hace rollback y se traduce.
        """
        try:
            pool = self._get_pool()
            with pool.connection() as conn:
                with conn.transaction():
                    yield conn
        except PizzaError:
            raise
        except UniqueViolation as exc:
            logger.warning(context_msg, extra={**extra, "error": str(exc)})
            raise ConflictError(conflict_msg, original_error=exc) from exc
        except Exception as exc:
            logger.exception(context_msg, extra={**extra, "error": str(exc)})
            raise DatabaseError(f"{context_msg}: {exc}", original_error=exc) from exc

    def _fetchone(
        self, *, query: str, params: Iterable[object], context_msg: str, extra: dict
    ) -> tuple | None:
        with self._transaction(context_msg=context_msg, extra=extra) as conn:
            return conn.execute(query, tuple(params)).fetchone()

    def _fetchall(
        self, *, query: str, params: Iterable[object], context_msg: str, extra: dict
    ) -> list[tuple]:
        with self._transaction(context_msg=context_msg, extra=extra) as conn:
            return conn.execute(query, tuple(params)).fetchall()

    def _execute(
        self, *, query: str, params: Iterable[object], context_msg: str, extra: dict
    ) -> None:
        with self._transaction(context_msg=context_msg, extra=extra) as conn:
            conn.execute(query, tuple(params))
