"""
============================================================
TARJETA CRC — infrastructure/repositories/in_memory/state.py
============================================================
Class: InMemoryDatabase

Responsibilities:
  - Ser las "tablas" compartidas por los repos in-memory (users, user_role,
    franchise, store, menu, diner_order, order_item, auth).
  - Generar ids autoincrementales por tabla (como SERIAL).
  - Proveer un único lock: las operaciones multi-tabla son atómicas.

Collaborators:
  - in_memory/user.py, session.py, franchise.py, order.py

Notes:
  - RLock: un repo puede llamar helpers que vuelven a tomar el lock.
  - Las filas son dataclasses mutables internas; hacia afuera solo salen
    entidades inmutables del dominio.
============================================================
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from threading import RLock
from typing import Dict, List, Optional


@dataclass
class UserRow:
    id: int
    name: str
    email: str
    password_hash: str


@dataclass
class RoleRow:
    id: int
    user_id: int
    role: str
    object_id: Optional[int] = None


@dataclass
class StoreRow:
    id: int
    franchise_id: int
    name: str


@dataclass
class OrderRow:
    id: int
    diner_id: int
    franchise_id: int
    store_id: int
    date: datetime


@dataclass
class OrderItemRow:
    id: int
    order_id: int
    menu_id: int
    description: str
    price: Decimal


@dataclass
class MenuRow:
    id: int
    title: str
    description: str
    image: str
    price: Decimal


@dataclass
class InMemoryDatabase:
    """Tablas + secuencias + lock."""

    lock: RLock = field(default_factory=RLock)
    users: Dict[int, UserRow] = field(default_factory=dict)
    user_roles: List[RoleRow] = field(default_factory=list)
    franchises: Dict[int, str] = field(default_factory=dict)
    stores: Dict[int, StoreRow] = field(default_factory=dict)
    menu: Dict[int, MenuRow] = field(default_factory=dict)
    orders: Dict[int, OrderRow] = field(default_factory=dict)
    order_items: List[OrderItemRow] = field(default_factory=list)
    auth: Dict[str, int] = field(default_factory=dict)
    _sequences: Dict[str, int] = field(default_factory=dict)

    def next_id(self, table: str) -> int:
        """R: Llamar con el lock tomado."""
        value = self._sequences.get(table, 0) + 1
        self._sequences[table] = value
        return value

    def user_by_email(self, email: str) -> Optional[UserRow]:
        return next((u for u in self.users.values() if u.email == email), None)

    def franchise_by_name(self, name: Optional[str]) -> Optional[int]:
        return next((fid for fid, n in self.franchises.items() if n == name), None)
