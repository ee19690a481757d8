"""
===============================================================================
TARJETA CRC — application/order_manager.py
===============================================================================

Componente:
    OrderManager

Responsabilidades:
    - Menú: lectura pública, alta solo Admin.
    - Historial paginado del diner autenticado.
    - create_order: persistir pedido + items y LUEGO llamar a la fábrica.

Colaboradores:
    - domain.repositories.OrderRepository
    - infrastructure.services.FactoryClient (puerto duck-typed: submit_order)
    - identity.policy (ADD_MENU_ITEM)

Decisiones:
    - Única excepción al "todo o nada": si la fábrica falla el pedido queda
      persistido y la falla sube como UpstreamFailureError (con el pedido).
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Protocol

from ..crosscutting.exceptions import UpstreamFailureError
from ..crosscutting.logger import logger
from ..domain.entities import MenuItem, NewMenuItem, NewOrder, Order, OrderPage
from ..domain.repositories import OrderRepository
from ..identity.policy import Action, ensure_authorized
from ..identity.users import User


class FactoryReceiptLike(Protocol):
    report_url: Optional[str]
    jwt: Optional[str]


class FactoryPort(Protocol):
    """Puerto mínimo de la fábrica externa."""

    def submit_order(self, diner: User, order: Order) -> FactoryReceiptLike: ...


@dataclass(frozen=True, slots=True)
class OrderReceipt:
    """Pedido persistido + recibo de la fábrica."""

    order: Order
    report_url: Optional[str]
    jwt: Optional[str]


class OrderManager:
    def __init__(self, orders: OrderRepository, factory: FactoryPort) -> None:
        self._orders = orders
        self._factory = factory

    def get_menu(self) -> List[MenuItem]:
        return self._orders.get_menu()

    def add_menu_item(self, caller: User, item: NewMenuItem) -> MenuItem:
        ensure_authorized(
            caller, Action.ADD_MENU_ITEM, message="unable to add menu item"
        )
        return self._orders.add_menu_item(item)

    def get_orders(self, caller: User, page: object = None) -> OrderPage:
        return self._orders.get_orders(caller, page)

    def create_order(self, caller: User, order: NewOrder) -> OrderReceipt:
        """
        Persiste y envía a la fábrica.

        Errores:
            - UpstreamFailureError (pedido ya persistido, viaja en exc.order).
        """
        persisted = self._orders.add_diner_order(caller, order)
        try:
            receipt = self._factory.submit_order(caller, persisted)
        except UpstreamFailureError as exc:
            logger.warning(
                "Pedido persistido pero la fábrica falló",
                extra={"order_id": persisted.id, "error_id": exc.error_id},
            )
            if exc.order is None:
                exc.order = persisted
            raise

        return OrderReceipt(
            order=persisted, report_url=receipt.report_url, jwt=receipt.jwt
        )
