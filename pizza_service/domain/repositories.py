"""
CRC — domain/repositories.py

Name
- Domain Repository Interfaces (Protocols)

Responsibilities
- Define persistence contracts for users, sessions, franchises and orders (ports).
- Keep managers independent from infrastructure (PostgreSQL, in-memory).
- Enable dependency inversion and straightforward unit testing.

Collaborators
- identity.users: User, NewUser
- domain.entities: Franchise, Store, MenuItem, Order, OrderPage
- infrastructure.repositories: postgres/*, in_memory/* implementations

Constraints
- Pure interfaces only: no side effects, no infrastructure imports, no SQL.
- Implementations raise the crosscutting taxonomy (NotFoundError, ConflictError,
  UnauthorizedError, DatabaseError); they never return error sentinels.

Notes
- We use typing.Protocol for structural subtyping ("duck typing").
- Outputs are concrete lists for predictable iteration/serialization.
"""

from typing import List, Optional, Protocol

from ..identity.users import NewUser, User
from .entities import (
    Franchise,
    MenuItem,
    NewFranchise,
    NewMenuItem,
    NewOrder,
    NewStore,
    Order,
    OrderPage,
    Store,
)


class UserRepository(Protocol):
    """R: Interface for user persistence (password hashing happens here)."""

    def add_user(self, user: NewUser) -> User:
        """R: Hash password, insert user + role bindings atomically."""
        ...

    def get_user(self, email: str, password: str) -> User:
        """R: Return the user if the credentials match, else UnauthorizedError."""
        ...

    def get_user_by_id(self, user_id: int) -> Optional[User]:
        """R: Lookup by id (None if absent)."""
        ...

    def count_users(self) -> int:
        """R: Number of registered users (bootstrap seed guard)."""
        ...

    def update_user(
        self,
        user_id: int,
        *,
        name: Optional[str] = None,
        email: Optional[str] = None,
        password: Optional[str] = None,
    ) -> User:
        """R: Update only the supplied fields; NotFoundError if no such id."""
        ...


class SessionRepository(Protocol):
    """R: Interface for the active-sessions store (keyed by token signature)."""

    def login_user(self, user_id: int, token: str) -> None:
        """R: Record the token as active."""
        ...

    def is_logged_in(self, token: str) -> bool:
        """R: True iff the signature is recorded. Never raises."""
        ...

    def logout_user(self, token: str) -> None:
        """R: Remove the record (no-op when absent)."""
        ...


class FranchiseRepository(Protocol):
    """R: Interface for franchises and stores."""

    def create_franchise(self, franchise: NewFranchise) -> Franchise:
        """R: Resolve admin emails, insert franchise + franchisee bindings."""
        ...

    def delete_franchise(self, franchise_id: int) -> None:
        """R: Delete bindings, stores and the franchise in one transaction."""
        ...

    def get_franchises(self, caller: Optional[User] = None) -> List[Franchise]:
        """R: All franchises; admins and revenue only for Admin callers."""
        ...

    def get_user_franchises(self, user_id: int) -> List[Franchise]:
        """R: Franchises the user administers (with admins and revenue)."""
        ...

    def create_store(self, franchise_id: int, store: NewStore) -> Store:
        """R: Insert a store under an existing franchise."""
        ...

    def delete_store(self, franchise_id: int, store_id: int) -> None:
        """R: Delete the store (its orders are kept)."""
        ...


class OrderRepository(Protocol):
    """R: Interface for the menu and diner orders."""

    def get_menu(self) -> List[MenuItem]:
        """R: Full menu, ordered by id."""
        ...

    def add_menu_item(self, item: NewMenuItem) -> MenuItem:
        """R: Append a menu item (not idempotent)."""
        ...

    def add_diner_order(self, user: User, order: NewOrder) -> Order:
        """R: Insert order + items atomically."""
        ...

    def get_orders(self, user: User, page: object = None) -> OrderPage:
        """R: One page of the diner's order history (page parsed, default 1)."""
        ...
