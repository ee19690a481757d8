"""
===============================================================================
TARJETA CRC — domain/entities.py
===============================================================================

Módulo:
    Entidades del Dominio (Franchise, Store, MenuItem, Order, OrderItem)

Responsabilidades:
    - Definir estructuras centrales del negocio (sin infraestructura).
    - Distinguir entidades persistidas de sus "shapes" de alta (New*).
    - Mantener tipos claros para managers y repositorios.

Colaboradores:
    - domain.repositories: persisten/recuperan estas entidades.
    - application/*_manager: construyen/consumen estas entidades.
    - api/schemas: serializan DTOs a partir de estas entidades.

Principios:
    - Sin dependencias a DB/HTTP.
    - Precios como Decimal (exactos); la conversión a float es de la capa HTTP.
    - Campos "None" en vistas parciales significan "no revelado al caller"
      (admins y revenue solo se exponen a quien corresponde).
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal

# R: precios como NUMERIC(12, 4) en el store
PRICE_MAX_DIGITS = 12
PRICE_DECIMAL_PLACES = 4
PRICE_LIMIT = Decimal(10) ** (PRICE_MAX_DIGITS - PRICE_DECIMAL_PLACES)
_PRICE_QUANTUM = Decimal(1).scaleb(-PRICE_DECIMAL_PLACES)


def stored_price(value: Decimal) -> Decimal:
    """Precio tal como lo guarda el store: 4 decimales, mitades lejos de cero."""
    return Decimal(value).quantize(_PRICE_QUANTUM, rounding=ROUND_HALF_UP)


# ---------------------------------------------------------------------------
# Franchise / Store
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Store:
    """Tienda de una franquicia. total_revenue se deriva al leer."""

    id: int
    franchise_id: int
    name: str
    total_revenue: Decimal | None = None


@dataclass(frozen=True, slots=True)
class FranchiseAdmin:
    """Usuario con binding franchisee sobre la franquicia."""

    id: int
    name: str
    email: str


@dataclass(frozen=True, slots=True)
class Franchise:
    """
    Franquicia con sus tiendas.

    admins == None => la vista no incluye admins (caller sin privilegio).
    """

    id: int
    name: str
    stores: tuple[Store, ...] = ()
    admins: tuple[FranchiseAdmin, ...] | None = None


@dataclass(frozen=True, slots=True)
class NewFranchise:
    """Alta de franquicia: admins referenciados por email."""

    name: str
    admin_emails: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class NewStore:
    name: str


# ---------------------------------------------------------------------------
# Menu
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class MenuItem:
    id: int
    title: str
    description: str
    image: str
    price: Decimal


@dataclass(frozen=True, slots=True)
class NewMenuItem:
    title: str
    description: str
    image: str
    price: Decimal


# ---------------------------------------------------------------------------
# Orders
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class OrderItem:
    """Item de pedido: description y price se capturan al momento de pedir."""

    id: int
    menu_id: int
    description: str
    price: Decimal


@dataclass(frozen=True, slots=True)
class NewOrderItem:
    menu_id: int
    description: str
    price: Decimal


@dataclass(frozen=True, slots=True)
class Order:
    """Pedido inmutable; siempre se lee junto a sus items."""

    id: int
    diner_id: int
    franchise_id: int
    store_id: int
    date: datetime
    items: tuple[OrderItem, ...] = ()


@dataclass(frozen=True, slots=True)
class NewOrder:
    franchise_id: int
    store_id: int
    items: tuple[NewOrderItem, ...] = ()


@dataclass(frozen=True, slots=True)
class OrderPage:
    """Página del historial de pedidos de un diner."""

    diner_id: int
    orders: tuple[Order, ...]
    page: int
