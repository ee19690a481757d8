"""
============================================================
TARJETA CRC — infrastructure/repositories/in_memory/user.py
============================================================
Class: InMemoryUserRepository

Responsibilities:
  - Mismo contrato que PostgresUserRepository sobre InMemoryDatabase.
  - Unicidad de email (ConflictError), franchisee por nombre (NotFoundError).

Constraints / Notes:
  - Thread-safe: toda la operación corre bajo el lock compartido.
  - Alta atómica: se valida todo antes de escribir.
============================================================
"""

from __future__ import annotations

from typing import Optional

from ....crosscutting.exceptions import ConflictError, NotFoundError, UnauthorizedError
from ....domain.repositories import UserRepository
from ....identity.passwords import CredentialHasher
from ....identity.users import NewUser, Role, RoleBinding, User
from .state import InMemoryDatabase, RoleRow, UserRow


class InMemoryUserRepository(UserRepository):
    """Repositorio in-memory de usuarios."""

    def __init__(
        self, db: InMemoryDatabase, *, hasher: Optional[CredentialHasher] = None
    ) -> None:
        self._db = db
        self._hasher = hasher or CredentialHasher()

    def _to_user(self, row: UserRow) -> User:
        roles = tuple(
            RoleBinding(Role(r.role), r.object_id)
            for r in self._db.user_roles
            if r.user_id == row.id
        )
        return User(id=row.id, name=row.name, email=row.email, roles=roles)

    def add_user(self, user: NewUser) -> User:
        password_hash = self._hasher.hash(user.password)
        with self._db.lock:
            if self._db.user_by_email(user.email) is not None:
                raise ConflictError("email already registered")

            bindings: list[RoleBinding] = []
            for request in user.roles:
                if request.role == Role.FRANCHISEE:
                    franchise_id = self._db.franchise_by_name(request.franchise_name)
                    if franchise_id is None:
                        raise NotFoundError(
                            f"unknown franchise: {request.franchise_name}"
                        )
                    bindings.append(RoleBinding.franchisee(franchise_id))
                else:
                    bindings.append(RoleBinding(request.role))

            row = UserRow(
                id=self._db.next_id("users"),
                name=user.name,
                email=user.email,
                password_hash=password_hash,
            )
            self._db.users[row.id] = row
            for binding in bindings:
                self._db.user_roles.append(
                    RoleRow(
                        id=self._db.next_id("user_role"),
                        user_id=row.id,
                        role=binding.role.value,
                        object_id=binding.object_id,
                    )
                )
            return self._to_user(row)

    def get_user(self, email: str, password: str) -> User:
        with self._db.lock:
            row = self._db.user_by_email(email)
            if row is None or not self._hasher.verify(password, row.password_hash):
                raise UnauthorizedError("unknown user")
            return self._to_user(row)

    def get_user_by_id(self, user_id: int) -> Optional[User]:
        with self._db.lock:
            row = self._db.users.get(user_id)
            return self._to_user(row) if row else None

    def count_users(self) -> int:
        with self._db.lock:
            return len(self._db.users)

    def update_user(
        self,
        user_id: int,
        *,
        name: Optional[str] = None,
        email: Optional[str] = None,
        password: Optional[str] = None,
    ) -> User:
        password_hash = self._hasher.hash(password) if password else None
        with self._db.lock:
            row = self._db.users.get(user_id)
            if row is None:
                raise NotFoundError("unknown user")
            if email and email != row.email:
                if self._db.user_by_email(email) is not None:
                    raise ConflictError("email already registered")
                row.email = email
            if name:
                row.name = name
            if password_hash:
                row.password_hash = password_hash
            return self._to_user(row)
