"""
===============================================================================
TARJETA CRC — infrastructure/repositories/postgres/lookups.py
===============================================================================

Módulo:
    Lookup tipado de ids (tabla/columna fijas)

Responsabilidades:
    - Resolver "valor natural -> id" dentro de la transacción del caller.
    - Restringir tabla/columna a pares conocidos (nunca input del usuario).
    - Lanzar NotFoundError cuando no hay fila.
===============================================================================
"""

from __future__ import annotations

from enum import Enum

from psycopg import Connection, sql

from ....crosscutting.exceptions import NotFoundError


class IdLookup(Enum):
    """Pares (tabla, columna, etiqueta) permitidos para get_id."""

    FRANCHISE_BY_NAME = ("franchise", "name", "franchise")
    FRANCHISE_BY_ID = ("franchise", "id", "franchise")
    USER_BY_EMAIL = ("users", "email", "user")
    STORE_BY_ID = ("store", "id", "store")

    @property
    def table(self) -> str:
        return self.value[0]

    @property
    def column(self) -> str:
        return self.value[1]

    @property
    def label(self) -> str:
        return self.value[2]


def get_id(conn: Connection, lookup: IdLookup, value: object) -> int:
    """
    Devuelve el id de la primera fila donde lookup.column == value.

    Errores:
        - NotFoundError si no hay fila.
    """
    query = sql.SQL("SELECT id FROM {table} WHERE {column} = %s ORDER BY id LIMIT 1").format(
        table=sql.Identifier(lookup.table),
        column=sql.Identifier(lookup.column),
    )
    row = conn.execute(query, (value,)).fetchone()
    if not row:
        raise NotFoundError(f"unknown {lookup.label}: {value}")
    return int(row[0])
