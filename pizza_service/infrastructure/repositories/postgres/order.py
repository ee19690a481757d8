"""
============================================================
TARJETA CRC — infrastructure/repositories/postgres/order.py
============================================================
Class: PostgresOrderRepository

Responsibilities:
  - Menú: listar y agregar items (append-only).
  - Pedidos: alta atómica (diner_order + order_item).
  - Historial paginado de un diner; cada pedido con sus items.

Collaborators:
  - PostgresRepository
  - crosscutting.pagination (parse_page / get_offset)

Notes:
  - menu_id de los items NO se valida contra `menu`: description y price
    se guardan tal como llegan (snapshot al momento del pedido).
  - Orden estable: pedidos por id ASC, items por id ASC.
  - Los precios devueltos son los guardados (RETURNING price): NUMERIC(12, 4)
    redondea a 4 decimales.
============================================================
"""

from __future__ import annotations

from decimal import Decimal
from typing import Optional

from psycopg_pool import ConnectionPool

from ....crosscutting.pagination import get_offset, parse_page
from ....domain.entities import (
    MenuItem,
    NewMenuItem,
    NewOrder,
    Order,
    OrderItem,
    OrderPage,
)
from ....identity.users import User
from .base import PostgresRepository


class PostgresOrderRepository(PostgresRepository):
    """Repositorio PostgreSQL para menú y pedidos."""

    _SQL_MENU = """
        SELECT id, title, description, image, price
        FROM menu
        ORDER BY id ASC
    """

    _SQL_INSERT_MENU_ITEM = """
        INSERT INTO menu (title, description, image, price)
        VALUES (%s, %s, %s, %s)
        RETURNING id, price
    """

    _SQL_INSERT_ORDER = """
        INSERT INTO diner_order (diner_id, franchise_id, store_id, date)
        VALUES (%s, %s, %s, now())
        RETURNING id, date
    """

    _SQL_INSERT_ITEM = """
        INSERT INTO order_item (order_id, menu_id, description, price)
        VALUES (%s, %s, %s, %s)
        RETURNING id, price
    """

    _SQL_ORDERS_PAGE = """
        SELECT id, franchise_id, store_id, date
        FROM diner_order
        WHERE diner_id = %s
        ORDER BY id ASC
        LIMIT %s OFFSET %s
    """

    _SQL_ORDER_ITEMS = """
        SELECT id, menu_id, description, price
        FROM order_item
        WHERE order_id = %s
        ORDER BY id ASC
    """

    def __init__(self, pool: Optional[ConnectionPool] = None, *, orders_per_page: int = 10):
        super().__init__(pool)
        self._orders_per_page = orders_per_page

    def get_menu(self) -> list[MenuItem]:
        rows = self._fetchall(
            query=self._SQL_MENU,
            params=(),
            context_msg="PostgresOrderRepository: get_menu failed",
            extra={},
        )
        return [
            MenuItem(int(r[0]), r[1], r[2], r[3], Decimal(r[4])) for r in rows
        ]

    def add_menu_item(self, item: NewMenuItem) -> MenuItem:
        row = self._fetchone(
            query=self._SQL_INSERT_MENU_ITEM,
            params=(item.title, item.description, item.image, item.price),
            context_msg="PostgresOrderRepository: add_menu_item failed",
            extra={"title": item.title},
        )
        return MenuItem(
            id=int(row[0]),
            title=item.title,
            description=item.description,
            image=item.image,
            price=Decimal(row[1]),
        )

    def add_diner_order(self, user: User, order: NewOrder) -> Order:
        """R: diner_order + items en una transacción."""
        with self._transaction(
            context_msg="PostgresOrderRepository: add_diner_order failed",
            extra={"user_id": user.id, "store_id": order.store_id},
        ) as conn:
            order_id, created_at = conn.execute(
                self._SQL_INSERT_ORDER, (user.id, order.franchise_id, order.store_id)
            ).fetchone()
            items: list[OrderItem] = []
            for item in order.items:
                item_id, price = conn.execute(
                    self._SQL_INSERT_ITEM,
                    (order_id, item.menu_id, item.description, item.price),
                ).fetchone()
                items.append(
                    OrderItem(
                        int(item_id), item.menu_id, item.description, Decimal(price)
                    )
                )

        return Order(
            id=int(order_id),
            diner_id=user.id,
            franchise_id=order.franchise_id,
            store_id=order.store_id,
            date=created_at,
            items=tuple(items),
        )

    def get_orders(self, user: User, page: object = None) -> OrderPage:
        """R: Página fija de pedidos; items con un fetch por pedido."""
        current_page = parse_page(page)
        offset = get_offset(current_page, self._orders_per_page)

        with self._transaction(
            context_msg="PostgresOrderRepository: get_orders failed",
            extra={"user_id": user.id, "page": current_page},
        ) as conn:
            order_rows = conn.execute(
                self._SQL_ORDERS_PAGE, (user.id, self._orders_per_page, offset)
            ).fetchall()
            orders: list[Order] = []
            for order_id, franchise_id, store_id, created_at in order_rows:
                item_rows = conn.execute(self._SQL_ORDER_ITEMS, (order_id,)).fetchall()
                orders.append(
                    Order(
                        id=int(order_id),
                        diner_id=user.id,
                        franchise_id=int(franchise_id),
                        store_id=int(store_id),
                        date=created_at,
                        items=tuple(
                            OrderItem(int(i[0]), int(i[1]), i[2], Decimal(i[3]))
                            for i in item_rows
                        ),
                    )
                )

        return OrderPage(diner_id=user.id, orders=tuple(orders), page=current_page)
