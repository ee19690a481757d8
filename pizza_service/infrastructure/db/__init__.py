"""Infra DB: pool, bootstrap de esquema y errores tipados."""

from .errors import (
    DatabaseBootstrapError,
    DatabasePoolError,
    PoolAlreadyInitializedError,
    PoolNotInitializedError,
)
from .pool import close_pool, get_pool, init_pool, reset_pool

__all__ = [
    "init_pool",
    "get_pool",
    "close_pool",
    "reset_pool",
    "DatabasePoolError",
    "DatabaseBootstrapError",
    "PoolAlreadyInitializedError",
    "PoolNotInitializedError",
]
