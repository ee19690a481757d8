"""
Name: FastAPI Application Entry Point

Responsibilities:
  - Initialize FastAPI application with metadata (title, version)
  - Run the database bootstrap once at startup (create db, tables, admin seed)
  - Configure request context middleware and exception handlers
  - Mount the auth, order and franchise routers
  - Expose welcome (/) and API docs (/api/docs) endpoints

Collaborators:
  - RequestContextMiddleware: Request ID and logging context
  - infrastructure.db: pool + schema bootstrap
  - application.seed_admin: default admin when the user table is empty
  - api.*_routes: HTTP endpoints

Constraints:
  - Bootstrap failures are logged; the API keeps serving (degraded) and
    database-backed endpoints answer 500 until the database is reachable
  - Unknown endpoints answer 404 {"message": "unknown endpoint"}

Notes:
  - In-memory persistence (test env or PERSISTENCE_BACKEND=memory) skips the
    PostgreSQL bootstrap but still seeds the default admin
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.routing import APIRoute
from psycopg.conninfo import conninfo_to_dict

from .. import __version__
from ..application.seed_admin import seed_default_admin
from ..container import get_user_repository, use_in_memory
from ..crosscutting.config import Settings, get_settings
from ..crosscutting.logger import logger
from ..crosscutting.middleware import RequestContextMiddleware
from ..infrastructure.db.bootstrap import (
    create_schema,
    ensure_database_exists,
    maintenance_url,
)
from ..infrastructure.db.pool import close_pool, init_pool
from .auth_routes import router as auth_router
from .exception_handlers import register_exception_handlers
from .franchise_routes import router as franchise_router
from .order_routes import router as order_router


def _bootstrap_postgres(settings: Settings) -> None:
    """Create database, open the pool and create tables."""
    admin_url = settings.db_admin_url or maintenance_url(settings.database_url)
    ensure_database_exists(admin_url, settings.database_url)

    pool = init_pool(
        database_url=settings.database_url,
        min_size=settings.db_pool_min_size,
        max_size=settings.db_pool_max_size,
        statement_timeout_ms=settings.db_statement_timeout_ms,
        connect_timeout_seconds=settings.db_connect_timeout_seconds,
    )
    create_schema(pool)


def bootstrap(settings: Settings) -> bool:
    """
    One-shot startup bootstrap.

    Returns:
        True if the store is ready, False if the API starts degraded.
    """
    try:
        if not use_in_memory():
            _bootstrap_postgres(settings)
        seed_default_admin(get_user_repository(), settings)
    except Exception as exc:
        logger.exception(
            "Bootstrap DB falló; la API sigue en modo degradado",
            extra={"error": str(exc)},
        )
        return False
    return True


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle. Bootstraps the store, closes the pool."""
    settings = get_settings()
    ready = bootstrap(settings)

    logger.info(
        "Pizza API starting up",
        extra={
            "version": __version__,
            "persistence": "memory" if use_in_memory() else "postgres",
            "store_ready": ready,
            "db_pool_min": settings.db_pool_min_size,
            "db_pool_max": settings.db_pool_max_size,
        },
    )

    try:
        yield
    finally:
        close_pool()
        logger.info("Pizza API shutting down")


app = FastAPI(
    title="JWT Pizza API",
    version=__version__,
    lifespan=lifespan,
    openapi_tags=[
        {"name": "auth", "description": "Register, login, logout and profile"},
        {"name": "order", "description": "Menu and diner orders"},
        {"name": "franchise", "description": "Franchises and stores"},
    ],
)

app.add_middleware(RequestContextMiddleware)
register_exception_handlers(app)

app.include_router(auth_router)
app.include_router(order_router)
app.include_router(franchise_router)


def _database_host(database_url: str) -> str:
    try:
        return str(conninfo_to_dict(database_url).get("host") or "")
    except Exception as exc:
        logger.warning("database_url ilegible", extra={"error": str(exc)})
        return ""


@app.get("/", tags=["meta"])
def welcome():
    return {"message": "welcome to JWT Pizza", "version": __version__}


@app.get("/api/docs", tags=["meta"])
def api_docs(request: Request):
    """Endpoint listing plus non-secret configuration."""
    settings = get_settings()
    endpoints = [
        {
            "method": method,
            "path": route.path,
            "description": route.summary or route.name.replace("_", " "),
        }
        for route in request.app.routes
        if isinstance(route, APIRoute) and route.path.startswith("/api/")
        for method in sorted(route.methods)
    ]
    return {
        "version": __version__,
        "endpoints": endpoints,
        "config": {
            "factory": settings.factory_url,
            "db": _database_host(settings.database_url),
        },
    }
