"""
============================================================
TARJETA CRC — infrastructure/repositories/in_memory/franchise.py
============================================================
Class: InMemoryFranchiseRepository

Responsibilities:
  - Mismo contrato que PostgresFranchiseRepository.
  - Cascada al borrar: bindings franchisee + stores (pedidos se conservan).
  - Revenue derivado: suma de items de pedidos con store_id de la tienda.

Constraints / Notes:
  - Ordering alineado con Postgres: franquicias y tiendas por id ASC,
    admins por orden de binding.
============================================================
"""

from __future__ import annotations

from decimal import Decimal
from typing import List, Optional

from ....crosscutting.exceptions import ConflictError, NotFoundError
from ....domain.entities import Franchise, FranchiseAdmin, NewFranchise, NewStore, Store
from ....domain.repositories import FranchiseRepository
from ....identity.users import Role, User
from .state import InMemoryDatabase, RoleRow, StoreRow


class InMemoryFranchiseRepository(FranchiseRepository):
    def __init__(self, db: InMemoryDatabase) -> None:
        self._db = db

    # =========================================================
    # Helpers (llamar con el lock tomado)
    # =========================================================
    def _revenue(self, store_id: int) -> Decimal:
        order_ids = {o.id for o in self._db.orders.values() if o.store_id == store_id}
        return sum(
            (i.price for i in self._db.order_items if i.order_id in order_ids),
            Decimal(0),
        )

    def _build(self, franchise_id: int, *, detailed: bool) -> Franchise:
        stores = tuple(
            Store(
                s.id,
                s.franchise_id,
                s.name,
                self._revenue(s.id) if detailed else None,
            )
            for s in sorted(self._db.stores.values(), key=lambda s: s.id)
            if s.franchise_id == franchise_id
        )
        admins: Optional[tuple[FranchiseAdmin, ...]] = None
        if detailed:
            admins = tuple(
                FranchiseAdmin(
                    r.user_id,
                    self._db.users[r.user_id].name,
                    self._db.users[r.user_id].email,
                )
                for r in self._db.user_roles
                if r.role == Role.FRANCHISEE.value
                and r.object_id == franchise_id
                and r.user_id in self._db.users
            )
        return Franchise(
            id=franchise_id,
            name=self._db.franchises[franchise_id],
            stores=stores,
            admins=admins,
        )

    # =========================================================
    # Public API
    # =========================================================
    def create_franchise(self, franchise: NewFranchise) -> Franchise:
        with self._db.lock:
            admins: list[FranchiseAdmin] = []
            for email in dict.fromkeys(franchise.admin_emails):
                row = self._db.user_by_email(email)
                if row is None:
                    raise NotFoundError(
                        f"unknown user for franchise admin {email} provided"
                    )
                admins.append(FranchiseAdmin(row.id, row.name, row.email))

            if self._db.franchise_by_name(franchise.name) is not None:
                raise ConflictError("franchise name already exists")

            franchise_id = self._db.next_id("franchise")
            self._db.franchises[franchise_id] = franchise.name
            for admin in admins:
                self._db.user_roles.append(
                    RoleRow(
                        id=self._db.next_id("user_role"),
                        user_id=admin.id,
                        role=Role.FRANCHISEE.value,
                        object_id=franchise_id,
                    )
                )
            return Franchise(
                id=franchise_id, name=franchise.name, stores=(), admins=tuple(admins)
            )

    def delete_franchise(self, franchise_id: int) -> None:
        with self._db.lock:
            self._db.user_roles[:] = [
                r
                for r in self._db.user_roles
                if not (r.role == Role.FRANCHISEE.value and r.object_id == franchise_id)
            ]
            for store_id in [
                s.id for s in self._db.stores.values() if s.franchise_id == franchise_id
            ]:
                del self._db.stores[store_id]
            self._db.franchises.pop(franchise_id, None)

    def get_franchises(self, caller: Optional[User] = None) -> List[Franchise]:
        detailed = caller is not None and caller.is_role(Role.ADMIN)
        with self._db.lock:
            return [
                self._build(fid, detailed=detailed)
                for fid in sorted(self._db.franchises)
            ]

    def get_user_franchises(self, user_id: int) -> List[Franchise]:
        with self._db.lock:
            ids = sorted(
                {
                    r.object_id
                    for r in self._db.user_roles
                    if r.user_id == user_id
                    and r.role == Role.FRANCHISEE.value
                    and r.object_id in self._db.franchises
                }
            )
            return [self._build(fid, detailed=True) for fid in ids]

    def create_store(self, franchise_id: int, store: NewStore) -> Store:
        with self._db.lock:
            if franchise_id not in self._db.franchises:
                raise NotFoundError(f"unknown franchise: {franchise_id}")
            row = StoreRow(
                id=self._db.next_id("store"), franchise_id=franchise_id, name=store.name
            )
            self._db.stores[row.id] = row
            return Store(id=row.id, franchise_id=franchise_id, name=row.name)

    def delete_store(self, franchise_id: int, store_id: int) -> None:
        with self._db.lock:
            row = self._db.stores.get(store_id)
            if row is not None and row.franchise_id == franchise_id:
                del self._db.stores[store_id]
