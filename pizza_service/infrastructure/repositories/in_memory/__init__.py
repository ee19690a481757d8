"""In-memory repositories (tests / local dev) sharing one InMemoryDatabase."""

from .franchise import InMemoryFranchiseRepository
from .order import InMemoryOrderRepository
from .session import InMemorySessionRepository
from .state import InMemoryDatabase
from .user import InMemoryUserRepository

__all__ = [
    "InMemoryDatabase",
    "InMemoryUserRepository",
    "InMemorySessionRepository",
    "InMemoryFranchiseRepository",
    "InMemoryOrderRepository",
]
