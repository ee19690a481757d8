"""
===============================================================================
TARJETA CRC — pizza_service/api/order_routes.py (Menú y Pedidos)
===============================================================================

Responsabilidades:
  - GET  /api/order/menu   menú completo (público)
  - PUT  /api/order/menu   alta de item (Admin) => menú completo
  - GET  /api/order        historial paginado (?page=, default 1)
  - POST /api/order        crear pedido => {order, reportUrl, jwt}

Colaboradores:
  - application.order_manager.OrderManager
  - api.dependencies.require_user
===============================================================================
"""

from __future__ import annotations

from decimal import Decimal
from typing import Annotated, List, Optional

from fastapi import APIRouter, Depends, Query
from pydantic import Field

from ..application.order_manager import OrderManager
from ..container import get_order_manager
from ..crosscutting.error_responses import OPENAPI_ERROR_RESPONSES
from ..domain.entities import (
    PRICE_DECIMAL_PLACES,
    PRICE_MAX_DIGITS,
    NewMenuItem,
    NewOrder,
    NewOrderItem,
)
from ..identity.users import User
from .dependencies import require_user
from .schemas import (
    CamelModel,
    CreateOrderResponse,
    MenuItemResponse,
    OrderPageResponse,
    to_menu_response,
    to_order_page_response,
    to_order_response,
)

router = APIRouter(prefix="/api/order", tags=["order"], responses=OPENAPI_ERROR_RESPONSES)


# -----------------------------------------------------------------------------
# Modelos HTTP (DTOs)
# -----------------------------------------------------------------------------

# R: fuera de NUMERIC(12, 4) es 400, no redondeo silencioso ni 500
PriceInput = Annotated[
    Decimal,
    Field(ge=0, max_digits=PRICE_MAX_DIGITS, decimal_places=PRICE_DECIMAL_PLACES),
]


class MenuItemRequest(CamelModel):
    title: str = Field(..., min_length=1, max_length=255)
    description: str = ""
    image: str = ""
    price: PriceInput


class OrderItemRequest(CamelModel):
    menu_id: int
    description: str = Field(..., max_length=255)
    price: PriceInput


class OrderRequest(CamelModel):
    franchise_id: int
    store_id: int
    items: List[OrderItemRequest] = []


# -----------------------------------------------------------------------------
# Endpoints
# -----------------------------------------------------------------------------


@router.get("/menu", response_model=List[MenuItemResponse])
def get_menu(orders: OrderManager = Depends(get_order_manager)):
    return to_menu_response(orders.get_menu())


@router.put("/menu", response_model=List[MenuItemResponse])
def add_menu_item(
    req: MenuItemRequest,
    caller: User = Depends(require_user),
    orders: OrderManager = Depends(get_order_manager),
):
    orders.add_menu_item(
        caller,
        NewMenuItem(
            title=req.title,
            description=req.description,
            image=req.image,
            price=req.price,
        ),
    )
    return to_menu_response(orders.get_menu())


@router.get("", response_model=OrderPageResponse)
def get_orders(
    page: Optional[str] = Query(default=None),
    caller: User = Depends(require_user),
    orders: OrderManager = Depends(get_order_manager),
):
    # R: page crudo; el repo aplica parse_page (no numérico => 1)
    return to_order_page_response(orders.get_orders(caller, page))


@router.post("", response_model=CreateOrderResponse)
def create_order(
    req: OrderRequest,
    caller: User = Depends(require_user),
    orders: OrderManager = Depends(get_order_manager),
):
    receipt = orders.create_order(
        caller,
        NewOrder(
            franchise_id=req.franchise_id,
            store_id=req.store_id,
            items=tuple(
                NewOrderItem(
                    menu_id=i.menu_id, description=i.description, price=i.price
                )
                for i in req.items
            ),
        ),
    )
    return CreateOrderResponse(
        order=to_order_response(receipt.order),
        report_url=receipt.report_url,
        jwt=receipt.jwt,
    )
