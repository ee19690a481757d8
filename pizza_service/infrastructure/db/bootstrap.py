"""
===============================================================================
CRC CARD — infrastructure/db/bootstrap.py
===============================================================================

Componente:
  Bootstrap de base de datos (create database + create tables)

Responsabilidades:
  - Crear la base de datos si no existe (vía DB de mantenimiento, autocommit).
    Sin DB_ADMIN_URL se usa la misma conexión con dbname=postgres.
  - Crear las tablas del sistema (idempotente: IF NOT EXISTS).

Colaboradores:
  - psycopg (conexión directa para CREATE DATABASE)
  - psycopg_pool.ConnectionPool (DDL del esquema)
  - api/main.py (lifespan: corre una vez por proceso)

Notas:
  - "Ya existe" se tolera siempre; cualquier otra falla se traduce a
    DatabaseBootstrapError y el caller decide (la API sigue degradada).
  - `user` es palabra reservada en PostgreSQL: la tabla se llama `users`.
  - diner_order.franchise_id / store_id NO son FK: borrar franquicias o
    tiendas conserva el historial de pedidos.
===============================================================================
"""

from __future__ import annotations

from typing import Final

import psycopg
from psycopg import sql
from psycopg.conninfo import conninfo_to_dict, make_conninfo
from psycopg_pool import ConnectionPool

from ...crosscutting.logger import logger
from .errors import DatabaseBootstrapError

SCHEMA_STATEMENTS: Final[tuple[str, ...]] = (
    """
    CREATE TABLE IF NOT EXISTS users (
        id SERIAL PRIMARY KEY,
        name VARCHAR(255) NOT NULL,
        email VARCHAR(255) NOT NULL UNIQUE,
        password VARCHAR(255) NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS user_role (
        id SERIAL PRIMARY KEY,
        user_id INTEGER NOT NULL REFERENCES users(id) ON DELETE CASCADE,
        role VARCHAR(32) NOT NULL
            CHECK (role IN ('diner', 'franchisee', 'admin')),
        object_id INTEGER
    )
    """,
    "CREATE INDEX IF NOT EXISTS user_role_user_id_idx ON user_role (user_id)",
    "CREATE INDEX IF NOT EXISTS user_role_object_id_idx ON user_role (object_id)",
    """
    CREATE TABLE IF NOT EXISTS franchise (
        id SERIAL PRIMARY KEY,
        name VARCHAR(255) NOT NULL UNIQUE
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS store (
        id SERIAL PRIMARY KEY,
        franchise_id INTEGER NOT NULL REFERENCES franchise(id),
        name VARCHAR(255) NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS menu (
        id SERIAL PRIMARY KEY,
        title VARCHAR(255) NOT NULL,
        description TEXT NOT NULL DEFAULT '',
        image VARCHAR(1024) NOT NULL DEFAULT '',
        price NUMERIC(12, 4) NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS diner_order (
        id SERIAL PRIMARY KEY,
        diner_id INTEGER NOT NULL REFERENCES users(id),
        franchise_id INTEGER NOT NULL,
        store_id INTEGER NOT NULL,
        date TIMESTAMPTZ NOT NULL DEFAULT now()
    )
    """,
    "CREATE INDEX IF NOT EXISTS diner_order_diner_id_idx ON diner_order (diner_id)",
    "CREATE INDEX IF NOT EXISTS diner_order_store_id_idx ON diner_order (store_id)",
    """
    CREATE TABLE IF NOT EXISTS order_item (
        id SERIAL PRIMARY KEY,
        order_id INTEGER NOT NULL REFERENCES diner_order(id),
        menu_id INTEGER NOT NULL,
        description VARCHAR(255) NOT NULL,
        price NUMERIC(12, 4) NOT NULL
    )
    """,
    "CREATE INDEX IF NOT EXISTS order_item_order_id_idx ON order_item (order_id)",
    """
    CREATE TABLE IF NOT EXISTS auth (
        token_signature VARCHAR(512) PRIMARY KEY,
        user_id INTEGER NOT NULL
    )
    """,
)


def database_name(database_url: str) -> str:
    """Extrae dbname de una URL/conninfo de PostgreSQL."""
    name = conninfo_to_dict(database_url).get("dbname")
    if not name:
        raise DatabaseBootstrapError("DATABASE_URL no especifica dbname")
    return str(name)


MAINTENANCE_DBNAME: Final = "postgres"


def maintenance_url(database_url: str) -> str:
    """Misma conexión que `database_url` pero sobre la DB de mantenimiento."""
    return make_conninfo(database_url, dbname=MAINTENANCE_DBNAME)


def ensure_database_exists(admin_url: str, database_url: str) -> bool:
    """
    Crea la base de `database_url` conectándose a `admin_url`.

    Returns:
        True si la creó, False si ya existía.
    """
    name = database_name(database_url)
    try:
        with psycopg.connect(admin_url, autocommit=True) as conn:
            exists = conn.execute(
                "SELECT 1 FROM pg_database WHERE datname = %s", (name,)
            ).fetchone()
            if exists:
                return False
            conn.execute(
                sql.SQL("CREATE DATABASE {}").format(sql.Identifier(name))
            )
    except psycopg.errors.DuplicateDatabase:
        # R: otro proceso la creó entre el SELECT y el CREATE
        return False
    except psycopg.Error as exc:
        logger.exception(
            "Bootstrap: create database falló",
            extra={"database": name, "error": str(exc)},
        )
        raise DatabaseBootstrapError(f"create database {name} falló: {exc}") from exc

    logger.info("Bootstrap: base de datos creada", extra={"database": name})
    return True


def create_schema(pool: ConnectionPool) -> None:
    """Crea todas las tablas en una única transacción (idempotente)."""
    try:
        with pool.connection() as conn:
            with conn.transaction():
                for statement in SCHEMA_STATEMENTS:
                    conn.execute(statement)
    except Exception as exc:
        logger.exception("Bootstrap: create schema falló", extra={"error": str(exc)})
        raise DatabaseBootstrapError(f"create schema falló: {exc}") from exc

    logger.info("Bootstrap: esquema verificado", extra={"tables": 8})
