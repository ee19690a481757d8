"""
Name: Integration Test DB Setup

Responsibilities:
  - Create the test database and tables once per session
  - Open the process pool for the PostgreSQL repositories
  - Truncate every table between tests

Notes:
  - Only runs when RUN_INTEGRATION=1
  - Uses DATABASE_URL / DB_ADMIN_URL from environment
"""

from __future__ import annotations

import os

import pytest

from pizza_service.crosscutting.config import get_settings
from pizza_service.infrastructure.db.bootstrap import create_schema, ensure_database_exists
from pizza_service.infrastructure.db.pool import close_pool, get_pool, init_pool

DB_USER = os.getenv("POSTGRES_USER", "postgres")
DB_PASSWORD = os.getenv("POSTGRES_PASSWORD", "postgres")
DB_HOST = os.getenv("POSTGRES_HOST", "localhost")
DB_PORT = os.getenv("POSTGRES_HOST_PORT", "5432")
DB_NAME = os.getenv("POSTGRES_DB", "pizza_test")
DEFAULT_DATABASE_URL = (
    f"postgresql://{DB_USER}:{DB_PASSWORD}@{DB_HOST}:{DB_PORT}/{DB_NAME}"
)
DEFAULT_ADMIN_URL = (
    f"postgresql://{DB_USER}:{DB_PASSWORD}@{DB_HOST}:{DB_PORT}/postgres"
)

_TABLES = "order_item, diner_order, auth, user_role, store, menu, franchise, users"


if os.getenv("RUN_INTEGRATION") == "1":
    os.environ["APP_ENV"] = "integration"
    os.environ["PERSISTENCE_BACKEND"] = "postgres"
    os.environ.setdefault("DATABASE_URL", DEFAULT_DATABASE_URL)
    os.environ.setdefault("DB_ADMIN_URL", DEFAULT_ADMIN_URL)
    get_settings.cache_clear()


@pytest.fixture(scope="session", autouse=True)
def init_db_pool():
    if os.getenv("RUN_INTEGRATION") != "1":
        yield
        return

    settings = get_settings()
    ensure_database_exists(settings.db_admin_url, settings.database_url)
    pool = init_pool(
        database_url=settings.database_url,
        min_size=settings.db_pool_min_size,
        max_size=settings.db_pool_max_size,
        statement_timeout_ms=settings.db_statement_timeout_ms,
    )
    create_schema(pool)
    yield
    close_pool()


@pytest.fixture(autouse=True)
def clean_tables(init_db_pool):
    if os.getenv("RUN_INTEGRATION") != "1":
        yield
        return

    with get_pool().connection() as conn:
        conn.execute(f"TRUNCATE {_TABLES} RESTART IDENTITY CASCADE")
    yield
