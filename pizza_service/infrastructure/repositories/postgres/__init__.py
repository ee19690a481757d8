"""PostgreSQL repositories (psycopg 3 + psycopg_pool)."""

from .franchise import PostgresFranchiseRepository
from .order import PostgresOrderRepository
from .session import PostgresSessionRepository
from .user import PostgresUserRepository

__all__ = [
    "PostgresUserRepository",
    "PostgresSessionRepository",
    "PostgresFranchiseRepository",
    "PostgresOrderRepository",
]
