"""
============================================================
TARJETA CRC — infrastructure/repositories/in_memory/order.py
============================================================
Class: InMemoryOrderRepository

Responsibilities:
  - Menú append-only y pedidos con items (mismo contrato que Postgres).
  - Paginación por página fija (parse_page / get_offset).
  - Precios redondeados y acotados como NUMERIC(12, 4) en Postgres.
============================================================
"""

from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal
from typing import List

from ....crosscutting.exceptions import DatabaseError
from ....crosscutting.pagination import get_offset, parse_page
from ....domain.entities import (
    PRICE_LIMIT,
    MenuItem,
    NewMenuItem,
    NewOrder,
    Order,
    OrderItem,
    OrderPage,
    stored_price,
)
from ....domain.repositories import OrderRepository
from ....identity.users import User
from .state import InMemoryDatabase, MenuRow, OrderItemRow, OrderRow


class InMemoryOrderRepository(OrderRepository):
    def __init__(self, db: InMemoryDatabase, *, orders_per_page: int = 10) -> None:
        self._db = db
        self._orders_per_page = orders_per_page

    @staticmethod
    def _price(value: Decimal) -> Decimal:
        price = stored_price(value)
        if abs(price) >= PRICE_LIMIT:
            raise DatabaseError("InMemoryOrderRepository: numeric field overflow")
        return price

    def _items(self, order_id: int) -> tuple[OrderItem, ...]:
        return tuple(
            OrderItem(i.id, i.menu_id, i.description, i.price)
            for i in self._db.order_items
            if i.order_id == order_id
        )

    def get_menu(self) -> List[MenuItem]:
        with self._db.lock:
            return [
                MenuItem(m.id, m.title, m.description, m.image, m.price)
                for m in sorted(self._db.menu.values(), key=lambda m: m.id)
            ]

    def add_menu_item(self, item: NewMenuItem) -> MenuItem:
        price = self._price(item.price)
        with self._db.lock:
            row = MenuRow(
                id=self._db.next_id("menu"),
                title=item.title,
                description=item.description,
                image=item.image,
                price=price,
            )
            self._db.menu[row.id] = row
            return MenuItem(row.id, row.title, row.description, row.image, row.price)

    def add_diner_order(self, user: User, order: NewOrder) -> Order:
        # R: todo o nada, se validan los precios antes de escribir
        prices = [self._price(item.price) for item in order.items]
        with self._db.lock:
            row = OrderRow(
                id=self._db.next_id("diner_order"),
                diner_id=user.id,
                franchise_id=order.franchise_id,
                store_id=order.store_id,
                date=datetime.now(timezone.utc),
            )
            self._db.orders[row.id] = row
            for item, price in zip(order.items, prices):
                self._db.order_items.append(
                    OrderItemRow(
                        id=self._db.next_id("order_item"),
                        order_id=row.id,
                        menu_id=item.menu_id,
                        description=item.description,
                        price=price,
                    )
                )
            return Order(
                id=row.id,
                diner_id=row.diner_id,
                franchise_id=row.franchise_id,
                store_id=row.store_id,
                date=row.date,
                items=self._items(row.id),
            )

    def get_orders(self, user: User, page: object = None) -> OrderPage:
        current_page = parse_page(page)
        offset = get_offset(current_page, self._orders_per_page)
        with self._db.lock:
            rows = sorted(
                (o for o in self._db.orders.values() if o.diner_id == user.id),
                key=lambda o: o.id,
            )[offset : offset + self._orders_per_page]
            orders = tuple(
                Order(o.id, o.diner_id, o.franchise_id, o.store_id, o.date, self._items(o.id))
                for o in rows
            )
        return OrderPage(diner_id=user.id, orders=orders, page=current_page)
