"""
============================================================
TARJETA CRC — infrastructure/repositories/postgres/franchise.py
============================================================
Class: PostgresFranchiseRepository

Responsibilities:
  - Alta de franquicias resolviendo admins por email (+ bindings franchisee).
  - Baja transaccional: bindings -> stores -> franchise.
  - Listados: todas (vista pública o detallada) / por usuario franchisee.
  - Alta y baja de tiendas.
  - Revenue derivado al leer: SUM(order_item.price) de pedidos de la tienda.

Collaborators:
  - PostgresRepository (pool + traducción de errores)
  - lookups.get_id (existencia de franquicia)

Notes:
  - Vista detallada (admins + revenue) solo para callers Admin o para
    get_user_franchises. La vista pública deja admins/revenue en None.
  - Lecturas batch con `= ANY(%s)`: 1 query de stores + 1 de admins,
    en vez de N+1 por franquicia.
  - Borrar tiendas/franquicias NO borra pedidos (historial intacto).
============================================================
"""

from __future__ import annotations

from decimal import Decimal
from typing import Optional

from ....crosscutting.exceptions import NotFoundError
from ....domain.entities import (
    Franchise,
    FranchiseAdmin,
    NewFranchise,
    NewStore,
    Store,
)
from ....identity.users import Role, User
from .base import PostgresRepository
from .lookups import IdLookup, get_id

_FRANCHISE_CONFLICT = "franchise name already exists"


class PostgresFranchiseRepository(PostgresRepository):
    """Repositorio PostgreSQL para franquicias y tiendas."""

    _SQL_SELECT_ADMIN_BY_EMAIL = """
        SELECT id, name, email
        FROM users
        WHERE email = %s
    """

    _SQL_INSERT_FRANCHISE = """
        INSERT INTO franchise (name)
        VALUES (%s)
        RETURNING id
    """

    _SQL_INSERT_FRANCHISEE = """
        INSERT INTO user_role (user_id, role, object_id)
        VALUES (%s, 'franchisee', %s)
    """

    _SQL_DELETE_FRANCHISEES = """
        DELETE FROM user_role
        WHERE role = 'franchisee' AND object_id = %s
    """

    _SQL_DELETE_STORES = "DELETE FROM store WHERE franchise_id = %s"

    _SQL_DELETE_FRANCHISE = "DELETE FROM franchise WHERE id = %s"

    _SQL_LIST_FRANCHISES = """
        SELECT id, name
        FROM franchise
        ORDER BY id ASC
    """

    _SQL_LIST_FRANCHISES_BY_ID = """
        SELECT id, name
        FROM franchise
        WHERE id = ANY(%s)
        ORDER BY id ASC
    """

    _SQL_USER_FRANCHISE_IDS = """
        SELECT object_id
        FROM user_role
        WHERE user_id = %s AND role = 'franchisee'
    """

    _SQL_STORES = """
        SELECT id, franchise_id, name
        FROM store
        WHERE franchise_id = ANY(%s)
        ORDER BY id ASC
    """

    _SQL_STORES_WITH_REVENUE = """
        SELECT s.id, s.franchise_id, s.name, COALESCE(SUM(oi.price), 0)
        FROM store s
        LEFT JOIN diner_order o ON o.store_id = s.id
        LEFT JOIN order_item oi ON oi.order_id = o.id
        WHERE s.franchise_id = ANY(%s)
        GROUP BY s.id, s.franchise_id, s.name
        ORDER BY s.id ASC
    """

    _SQL_ADMINS = """
        SELECT ur.object_id, u.id, u.name, u.email
        FROM user_role ur
        JOIN users u ON u.id = ur.user_id
        WHERE ur.role = 'franchisee' AND ur.object_id = ANY(%s)
        ORDER BY ur.id ASC
    """

    _SQL_INSERT_STORE = """
        INSERT INTO store (franchise_id, name)
        VALUES (%s, %s)
        RETURNING id
    """

    _SQL_DELETE_STORE = "DELETE FROM store WHERE franchise_id = %s AND id = %s"

    # =========================================================
    # Helpers
    # =========================================================
    def _assemble(self, conn, rows: list[tuple], *, detailed: bool) -> list[Franchise]:
        """Filas (id, name) -> Franchise con stores (y admins/revenue si detailed)."""
        if not rows:
            return []
        ids = [int(row[0]) for row in rows]

        stores: dict[int, list[Store]] = {fid: [] for fid in ids}
        if detailed:
            for sid, fid, name, revenue in conn.execute(
                self._SQL_STORES_WITH_REVENUE, (ids,)
            ).fetchall():
                stores[fid].append(Store(sid, fid, name, Decimal(revenue)))
        else:
            for sid, fid, name in conn.execute(self._SQL_STORES, (ids,)).fetchall():
                stores[fid].append(Store(sid, fid, name))

        admins: dict[int, list[FranchiseAdmin]] = {fid: [] for fid in ids}
        if detailed:
            for fid, uid, name, email in conn.execute(
                self._SQL_ADMINS, (ids,)
            ).fetchall():
                admins[fid].append(FranchiseAdmin(uid, name, email))

        return [
            Franchise(
                id=fid,
                name=name,
                stores=tuple(stores[fid]),
                admins=tuple(admins[fid]) if detailed else None,
            )
            for fid, name in rows
        ]

    # =========================================================
    # Public API
    # =========================================================
    def create_franchise(self, franchise: NewFranchise) -> Franchise:
        """R: Resuelve admins por email (NotFound si alguno no existe)."""
        emails = list(dict.fromkeys(franchise.admin_emails))

        with self._transaction(
            context_msg="PostgresFranchiseRepository: create_franchise failed",
            extra={"franchise_name": franchise.name},
            conflict_msg=_FRANCHISE_CONFLICT,
        ) as conn:
            admins: list[FranchiseAdmin] = []
            for email in emails:
                row = conn.execute(self._SQL_SELECT_ADMIN_BY_EMAIL, (email,)).fetchone()
                if not row:
                    raise NotFoundError(
                        f"unknown user for franchise admin {email} provided"
                    )
                admins.append(FranchiseAdmin(int(row[0]), row[1], row[2]))

            franchise_id = int(
                conn.execute(self._SQL_INSERT_FRANCHISE, (franchise.name,)).fetchone()[0]
            )
            for admin in admins:
                conn.execute(self._SQL_INSERT_FRANCHISEE, (admin.id, franchise_id))

        return Franchise(
            id=franchise_id, name=franchise.name, stores=(), admins=tuple(admins)
        )

    def delete_franchise(self, franchise_id: int) -> None:
        """R: Todo o nada; franquicia inexistente => no-op."""
        with self._transaction(
            context_msg="PostgresFranchiseRepository: delete_franchise failed",
            extra={"franchise_id": franchise_id},
        ) as conn:
            conn.execute(self._SQL_DELETE_FRANCHISEES, (franchise_id,))
            conn.execute(self._SQL_DELETE_STORES, (franchise_id,))
            conn.execute(self._SQL_DELETE_FRANCHISE, (franchise_id,))

    def get_franchises(self, caller: Optional[User] = None) -> list[Franchise]:
        detailed = caller is not None and caller.is_role(Role.ADMIN)
        with self._transaction(
            context_msg="PostgresFranchiseRepository: get_franchises failed",
            extra={"detailed": detailed},
        ) as conn:
            rows = conn.execute(self._SQL_LIST_FRANCHISES).fetchall()
            return self._assemble(conn, rows, detailed=detailed)

    def get_user_franchises(self, user_id: int) -> list[Franchise]:
        with self._transaction(
            context_msg="PostgresFranchiseRepository: get_user_franchises failed",
            extra={"user_id": user_id},
        ) as conn:
            id_rows = conn.execute(self._SQL_USER_FRANCHISE_IDS, (user_id,)).fetchall()
            ids = sorted({int(row[0]) for row in id_rows if row[0] is not None})
            if not ids:
                return []
            rows = conn.execute(self._SQL_LIST_FRANCHISES_BY_ID, (ids,)).fetchall()
            return self._assemble(conn, rows, detailed=True)

    def create_store(self, franchise_id: int, store: NewStore) -> Store:
        with self._transaction(
            context_msg="PostgresFranchiseRepository: create_store failed",
            extra={"franchise_id": franchise_id},
        ) as conn:
            get_id(conn, IdLookup.FRANCHISE_BY_ID, franchise_id)
            store_id = int(
                conn.execute(
                    self._SQL_INSERT_STORE, (franchise_id, store.name)
                ).fetchone()[0]
            )
        return Store(id=store_id, franchise_id=franchise_id, name=store.name)

    def delete_store(self, franchise_id: int, store_id: int) -> None:
        """R: Tienda inexistente => no-op. Los pedidos se conservan."""
        self._execute(
            query=self._SQL_DELETE_STORE,
            params=(franchise_id, store_id),
            context_msg="PostgresFranchiseRepository: delete_store failed",
            extra={"franchise_id": franchise_id, "store_id": store_id},
        )
