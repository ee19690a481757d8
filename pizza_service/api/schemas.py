"""
===============================================================================
TARJETA CRC — pizza_service/api/schemas.py (DTOs HTTP)
===============================================================================

Responsabilidades:
  - Definir los modelos HTTP de respuesta (camelCase en el wire).
  - Convertir entidades del dominio -> DTOs.
  - Serializar precios Decimal como números JSON.

Colaboradores:
  - domain.entities / identity.users
  - api/*_routes.py
===============================================================================
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Annotated, List, Optional

from pydantic import BaseModel, ConfigDict, PlainSerializer
from pydantic.alias_generators import to_camel

from ..domain.entities import Franchise, MenuItem, Order, OrderPage, Store
from ..identity.users import Role, User

# R: Decimal exacto adentro; float en el JSON.
Money = Annotated[
    Decimal, PlainSerializer(float, return_type=float, when_used="json")
]


class CamelModel(BaseModel):
    """Base: snake_case en Python, camelCase en el wire (entrada y salida)."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class MessageResponse(BaseModel):
    message: str


# -----------------------------------------------------------------------------
# Usuarios
# -----------------------------------------------------------------------------


class RoleResponse(CamelModel):
    role: Role
    object_id: Optional[int] = None


class UserResponse(CamelModel):
    id: int
    name: str
    email: str
    roles: List[RoleResponse] = []


class AuthResponse(CamelModel):
    user: UserResponse
    token: str


def to_user_response(user: User) -> UserResponse:
    return UserResponse(
        id=user.id,
        name=user.name,
        email=user.email,
        roles=[RoleResponse(role=b.role, object_id=b.object_id) for b in user.roles],
    )


# -----------------------------------------------------------------------------
# Menú / pedidos
# -----------------------------------------------------------------------------


class MenuItemResponse(CamelModel):
    id: int
    title: str
    description: str
    image: str
    price: Money


class OrderItemResponse(CamelModel):
    id: int
    menu_id: int
    description: str
    price: Money


class OrderResponse(CamelModel):
    id: int
    franchise_id: int
    store_id: int
    date: datetime
    items: List[OrderItemResponse]


class OrderPageResponse(CamelModel):
    diner_id: int
    orders: List[OrderResponse]
    page: int


class CreateOrderResponse(CamelModel):
    order: OrderResponse
    report_url: Optional[str] = None
    jwt: Optional[str] = None


def to_menu_response(items: List[MenuItem]) -> List[MenuItemResponse]:
    return [
        MenuItemResponse(
            id=m.id,
            title=m.title,
            description=m.description,
            image=m.image,
            price=m.price,
        )
        for m in items
    ]


def to_order_response(order: Order) -> OrderResponse:
    return OrderResponse(
        id=order.id,
        franchise_id=order.franchise_id,
        store_id=order.store_id,
        date=order.date,
        items=[
            OrderItemResponse(
                id=i.id, menu_id=i.menu_id, description=i.description, price=i.price
            )
            for i in order.items
        ],
    )


def to_order_page_response(page: OrderPage) -> OrderPageResponse:
    return OrderPageResponse(
        diner_id=page.diner_id,
        orders=[to_order_response(o) for o in page.orders],
        page=page.page,
    )


# -----------------------------------------------------------------------------
# Franquicias / tiendas
# -----------------------------------------------------------------------------


class StoreResponse(CamelModel):
    id: int
    franchise_id: int
    name: str
    total_revenue: Optional[Money] = None


class FranchiseAdminResponse(CamelModel):
    id: int
    name: str
    email: str


class FranchiseResponse(CamelModel):
    id: int
    name: str
    admins: Optional[List[FranchiseAdminResponse]] = None
    stores: List[StoreResponse] = []


def to_store_response(store: Store) -> StoreResponse:
    return StoreResponse(
        id=store.id,
        franchise_id=store.franchise_id,
        name=store.name,
        total_revenue=store.total_revenue,
    )


def to_franchise_response(franchise: Franchise) -> FranchiseResponse:
    admins = None
    if franchise.admins is not None:
        admins = [
            FranchiseAdminResponse(id=a.id, name=a.name, email=a.email)
            for a in franchise.admins
        ]
    return FranchiseResponse(
        id=franchise.id,
        name=franchise.name,
        admins=admins,
        stores=[to_store_response(s) for s in franchise.stores],
    )
