"""
============================================================
TARJETA CRC — infrastructure/repositories/postgres/user.py
============================================================
Class: PostgresUserRepository

Responsibilities:
  - Alta de usuarios con sus role bindings (atómica).
  - Verificar credenciales (email + password) para login.
  - Actualizar name/email/password (solo los campos provistos).
  - Mapear filas crudas -> `User` / `RoleBinding` validando el rol.

Collaborators:
  - PostgresRepository (pool + traducción de errores)
  - identity.passwords.CredentialHasher (hash one-way)
  - lookups.get_id (franchisee por nombre de franquicia)

Constraints / Notes:
  - El password NUNCA sale de este repo: User no lo transporta.
  - El hash se calcula fuera de la transacción (argon2 es caro).
  - Email duplicado -> ConflictError (UniqueViolation de la constraint).
  - Orden estable de bindings: user_role.id ASC (orden de inserción).
============================================================
"""

from __future__ import annotations

from typing import Optional

from psycopg_pool import ConnectionPool

from ....crosscutting.exceptions import DatabaseError, NotFoundError, UnauthorizedError
from ....identity.passwords import CredentialHasher
from ....identity.users import NewUser, Role, RoleBinding, User
from .base import PostgresRepository
from .lookups import IdLookup, get_id

_EMAIL_CONFLICT = "email already registered"

# R: Fragmentos fijos; el input del usuario solo viaja como parámetro.
_UPDATABLE_COLUMNS = {
    "name": "name = %s",
    "email": "email = %s",
    "password": "password = %s",
}


def _row_to_binding(row: tuple) -> RoleBinding:
    """(role, object_id) -> RoleBinding. Rol desconocido => DatabaseError."""
    try:
        role = Role(row[0])
    except ValueError as exc:
        raise DatabaseError(f"Invalid user role in database: {row[0]}") from exc
    if role == Role.FRANCHISEE:
        return RoleBinding.franchisee(int(row[1]))
    return RoleBinding(role)


class PostgresUserRepository(PostgresRepository):
    """Repositorio PostgreSQL para usuarios y role bindings."""

    _SQL_INSERT_USER = """
        INSERT INTO users (name, email, password)
        VALUES (%s, %s, %s)
        RETURNING id
    """

    _SQL_INSERT_ROLE = """
        INSERT INTO user_role (user_id, role, object_id)
        VALUES (%s, %s, %s)
    """

    _SQL_SELECT_BY_EMAIL = """
        SELECT id, name, email, password
        FROM users
        WHERE email = %s
    """

    _SQL_SELECT_BY_ID = """
        SELECT id, name, email
        FROM users
        WHERE id = %s
    """

    _SQL_SELECT_ROLES = """
        SELECT role, object_id
        FROM user_role
        WHERE user_id = %s
        ORDER BY id ASC
    """

    _SQL_COUNT_USERS = "SELECT COUNT(*) FROM users"

    def __init__(
        self,
        pool: Optional[ConnectionPool] = None,
        *,
        hasher: Optional[CredentialHasher] = None,
    ):
        super().__init__(pool)
        self._hasher = hasher or CredentialHasher()

    def _load_roles(self, conn, user_id: int) -> tuple[RoleBinding, ...]:
        rows = conn.execute(self._SQL_SELECT_ROLES, (user_id,)).fetchall()
        return tuple(_row_to_binding(row) for row in rows)

    # =========================================================
    # Public API
    # =========================================================
    def add_user(self, user: NewUser) -> User:
        """R: Inserta usuario + bindings; franchisee se resuelve por nombre."""
        password_hash = self._hasher.hash(user.password)

        with self._transaction(
            context_msg="PostgresUserRepository: add_user failed",
            extra={"email": user.email},
            conflict_msg=_EMAIL_CONFLICT,
        ) as conn:
            row = conn.execute(
                self._SQL_INSERT_USER, (user.name, user.email, password_hash)
            ).fetchone()
            user_id = int(row[0])

            bindings: list[RoleBinding] = []
            for request in user.roles:
                if request.role == Role.FRANCHISEE:
                    franchise_id = get_id(
                        conn, IdLookup.FRANCHISE_BY_NAME, request.franchise_name
                    )
                    binding = RoleBinding.franchisee(franchise_id)
                else:
                    binding = RoleBinding(request.role)
                conn.execute(
                    self._SQL_INSERT_ROLE,
                    (user_id, binding.role.value, binding.object_id),
                )
                bindings.append(binding)

        return User(id=user_id, name=user.name, email=user.email, roles=tuple(bindings))

    def get_user(self, email: str, password: str) -> User:
        """R: Credenciales válidas -> User; si no, UnauthorizedError."""
        with self._transaction(
            context_msg="PostgresUserRepository: get_user failed",
            extra={"email": email},
        ) as conn:
            row = conn.execute(self._SQL_SELECT_BY_EMAIL, (email,)).fetchone()
            if not row or not self._hasher.verify(password, row[3]):
                raise UnauthorizedError("unknown user")
            roles = self._load_roles(conn, row[0])

        return User(id=int(row[0]), name=row[1], email=row[2], roles=roles)

    def get_user_by_id(self, user_id: int) -> Optional[User]:
        with self._transaction(
            context_msg="PostgresUserRepository: get_user_by_id failed",
            extra={"user_id": user_id},
        ) as conn:
            row = conn.execute(self._SQL_SELECT_BY_ID, (user_id,)).fetchone()
            if not row:
                return None
            roles = self._load_roles(conn, user_id)

        return User(id=int(row[0]), name=row[1], email=row[2], roles=roles)

    def count_users(self) -> int:
        row = self._fetchone(
            query=self._SQL_COUNT_USERS,
            params=(),
            context_msg="PostgresUserRepository: count_users failed",
            extra={},
        )
        return int(row[0]) if row else 0

    def update_user(
        self,
        user_id: int,
        *,
        name: Optional[str] = None,
        email: Optional[str] = None,
        password: Optional[str] = None,
    ) -> User:
        """
        R: Actualiza solo los campos provistos.

        - password se re-hashea.
        - Sin campos => devuelve el usuario actual.
        """
        fields: dict[str, str] = {}
        if name:
            fields["name"] = name
        if email:
            fields["email"] = email
        if password:
            fields["password"] = self._hasher.hash(password)

        with self._transaction(
            context_msg="PostgresUserRepository: update_user failed",
            extra={"user_id": user_id, "fields": sorted(fields)},
            conflict_msg=_EMAIL_CONFLICT,
        ) as conn:
            if fields:
                assignments = ", ".join(_UPDATABLE_COLUMNS[key] for key in fields)
                conn.execute(
                    f"UPDATE users SET {assignments} WHERE id = %s",
                    (*fields.values(), user_id),
                )
            row = conn.execute(self._SQL_SELECT_BY_ID, (user_id,)).fetchone()
            if not row:
                raise NotFoundError("unknown user")
            roles = self._load_roles(conn, user_id)

        return User(id=int(row[0]), name=row[1], email=row[2], roles=roles)
