"""
Name: PostgresUserRepository Tests

Responsibilities:
  - Atomic add_user (user row + role rows, franchisee resolved by name)
  - Credential check (unknown user / bad password => Unauthorized)
  - Partial update_user and NotFound
  - psycopg error translation (UniqueViolation => Conflict, other => Database)

Notes:
  - Offline: ConnectionPool and connection are MagicMocks
"""

from unittest.mock import MagicMock

import pytest
from psycopg.errors import UniqueViolation

from pizza_service.crosscutting.exceptions import (
    ConflictError,
    DatabaseError,
    NotFoundError,
    UnauthorizedError,
)
from pizza_service.identity.users import NewUser, RoleBinding, RoleRequest
from pizza_service.infrastructure.repositories.postgres.user import (
    PostgresUserRepository,
)

pytestmark = pytest.mark.unit


def _cursor(one=None, rows=None):
    cursor = MagicMock()
    cursor.fetchone.return_value = one
    cursor.fetchall.return_value = rows or []
    return cursor


def _pool(*cursors):
    pool = MagicMock()
    conn = MagicMock()
    pool.connection.return_value.__enter__.return_value = conn
    conn.execute.side_effect = list(cursors)
    return pool, conn


class TestAddUser:
    def test_inserts_user_and_diner_role(self, hasher):
        pool, conn = _pool(_cursor(one=(1,)), _cursor())
        repo = PostgresUserRepository(pool=pool, hasher=hasher)

        user = repo.add_user(NewUser(name="n", email="e@jwt.com", password="secret"))

        assert user.id == 1
        assert user.roles == (RoleBinding.diner(),)
        insert_params = conn.execute.call_args_list[0].args[1]
        assert insert_params[0:2] == ("n", "e@jwt.com")
        assert insert_params[2] != "secret"
        assert hasher.verify("secret", insert_params[2])
        assert conn.execute.call_args_list[1].args[1] == (1, "diner", None)
        conn.transaction.assert_called_once()

    def test_franchisee_resolved_by_franchise_name(self, hasher):
        pool, conn = _pool(_cursor(one=(4,)), _cursor(one=(9,)), _cursor())
        repo = PostgresUserRepository(pool=pool, hasher=hasher)

        user = repo.add_user(
            NewUser(
                name="f",
                email="f@jwt.com",
                password="x",
                roles=(RoleRequest.franchisee("pizzaPocket"),),
            )
        )

        assert user.roles == (RoleBinding.franchisee(9),)
        assert conn.execute.call_args_list[1].args[1] == ("pizzaPocket",)
        assert conn.execute.call_args_list[2].args[1] == (4, "franchisee", 9)

    def test_unknown_franchise_is_not_found(self, hasher):
        pool, _ = _pool(_cursor(one=(4,)), _cursor(one=None))
        repo = PostgresUserRepository(pool=pool, hasher=hasher)

        with pytest.raises(NotFoundError):
            repo.add_user(
                NewUser(
                    name="f",
                    email="f@jwt.com",
                    password="x",
                    roles=(RoleRequest.franchisee("missing"),),
                )
            )

    def test_duplicate_email_is_conflict(self, hasher):
        pool, conn = _pool()
        conn.execute.side_effect = UniqueViolation("duplicate key")
        repo = PostgresUserRepository(pool=pool, hasher=hasher)

        with pytest.raises(ConflictError, match="email already registered"):
            repo.add_user(NewUser(name="n", email="e@jwt.com", password="x"))

    def test_other_errors_are_database_errors(self, hasher):
        pool, conn = _pool()
        conn.execute.side_effect = RuntimeError("connection lost")
        repo = PostgresUserRepository(pool=pool, hasher=hasher)

        with pytest.raises(DatabaseError, match="connection lost"):
            repo.add_user(NewUser(name="n", email="e@jwt.com", password="x"))


class TestGetUser:
    def test_valid_credentials_return_user_with_roles(self, hasher):
        stored = hasher.hash("admin")
        pool, _ = _pool(
            _cursor(one=(1, "常用名字", "a@jwt.com", stored)),
            _cursor(rows=[("admin", None)]),
        )
        repo = PostgresUserRepository(pool=pool, hasher=hasher)

        user = repo.get_user("a@jwt.com", "admin")

        assert user.id == 1
        assert user.roles == (RoleBinding.admin(),)

    def test_wrong_password_is_unauthorized(self, hasher):
        pool, _ = _pool(_cursor(one=(1, "n", "a@jwt.com", hasher.hash("admin"))))
        repo = PostgresUserRepository(pool=pool, hasher=hasher)

        with pytest.raises(UnauthorizedError):
            repo.get_user("a@jwt.com", "wrong")

    def test_unknown_email_is_unauthorized(self, hasher):
        pool, _ = _pool(_cursor(one=None))
        repo = PostgresUserRepository(pool=pool, hasher=hasher)

        with pytest.raises(UnauthorizedError):
            repo.get_user("nobody@jwt.com", "x")

    def test_invalid_role_in_database_is_database_error(self, hasher):
        pool, _ = _pool(
            _cursor(one=(1, "n", "a@jwt.com", hasher.hash("x"))),
            _cursor(rows=[("superuser", None)]),
        )
        repo = PostgresUserRepository(pool=pool, hasher=hasher)

        with pytest.raises(DatabaseError):
            repo.get_user("a@jwt.com", "x")


class TestUpdateUser:
    def test_updates_only_supplied_fields(self, hasher):
        pool, conn = _pool(
            _cursor(),
            _cursor(one=(2, "renamed", "d@jwt.com")),
            _cursor(rows=[("diner", None)]),
        )
        repo = PostgresUserRepository(pool=pool, hasher=hasher)

        user = repo.update_user(2, name="renamed")

        sql, params = conn.execute.call_args_list[0].args
        assert "name = %s" in sql
        assert "email" not in sql
        assert "password" not in sql
        assert params == ("renamed", 2)
        assert user.name == "renamed"

    def test_password_is_rehashed(self, hasher):
        pool, conn = _pool(
            _cursor(),
            _cursor(one=(2, "n", "d@jwt.com")),
            _cursor(rows=[]),
        )
        repo = PostgresUserRepository(pool=pool, hasher=hasher)

        repo.update_user(2, password="new")

        stored = conn.execute.call_args_list[0].args[1][0]
        assert stored != "new"
        assert hasher.verify("new", stored)

    def test_missing_user_is_not_found(self, hasher):
        pool, _ = _pool(_cursor(), _cursor(one=None))
        repo = PostgresUserRepository(pool=pool, hasher=hasher)

        with pytest.raises(NotFoundError):
            repo.update_user(99, name="ghost")


def test_count_users(hasher):
    pool, _ = _pool(_cursor(one=(3,)))
    assert PostgresUserRepository(pool=pool, hasher=hasher).count_users() == 3
