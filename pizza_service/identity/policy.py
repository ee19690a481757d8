"""
===============================================================================
TARJETA CRC — identity/policy.py
===============================================================================

Módulo:
    Authorization Policy (decisión pura)

Responsabilidades:
    - Decidir si un caller puede ejecutar una acción sobre un recurso.
    - Separar "policy" de "repos" (repos solo traen datos, policy decide).
    - Ser 100% testeable: funciones puras, inputs explícitos.

Colaboradores:
    - identity.users.User / Role (bindings del caller)
    - identity.auth_manager, application.*_manager: consultan antes de mutar.

Reglas:
    - Admin puede todo (gana sobre cualquier denegación más específica).
    - Self-service: caller.id == resource.user_id.
    - Franchise-scoped: binding franchisee con object_id == resource.franchise_id.
    - Crear/borrar franquicias y agregar items al menú: solo Admin.
    - Todo lo demás: denegado (no hay grant implícito).
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from ..crosscutting.exceptions import ForbiddenError
from .users import Role, User


class Action(str, Enum):
    """Acciones sujetas a autorización."""

    UPDATE_USER = "user:update"
    LIST_USER_FRANCHISES = "franchise:list_for_user"
    CREATE_FRANCHISE = "franchise:create"
    DELETE_FRANCHISE = "franchise:delete"
    CREATE_STORE = "store:create"
    DELETE_STORE = "store:delete"
    VIEW_FRANCHISE_ORDERS = "franchise:view_orders"
    ADD_MENU_ITEM = "menu:create"


@dataclass(frozen=True, slots=True)
class Resource:
    """Recurso objetivo: usuario y/o franquicia afectados."""

    user_id: int | None = None
    franchise_id: int | None = None


_SELF_SERVICE_ACTIONS = frozenset({Action.UPDATE_USER, Action.LIST_USER_FRANCHISES})
_FRANCHISE_SCOPED_ACTIONS = frozenset(
    {Action.CREATE_STORE, Action.DELETE_STORE, Action.VIEW_FRANCHISE_ORDERS}
)


def _is_self(caller: User, resource: Resource) -> bool:
    return resource.user_id is not None and caller.id == resource.user_id


def _is_franchisee_of(caller: User, resource: Resource) -> bool:
    if resource.franchise_id is None:
        return False
    return resource.franchise_id in caller.franchise_ids()


def is_authorized(
    caller: User | None, action: Action, resource: Resource | None = None
) -> bool:
    """Evalúa permiso. Sin caller => denegado."""
    if caller is None:
        return False

    if caller.is_role(Role.ADMIN):
        return True

    target = resource or Resource()

    if action in _SELF_SERVICE_ACTIONS:
        return _is_self(caller, target)

    if action in _FRANCHISE_SCOPED_ACTIONS:
        return _is_franchisee_of(caller, target)

    return False


def ensure_authorized(
    caller: User | None,
    action: Action,
    resource: Resource | None = None,
    *,
    message: str = "unauthorized",
) -> None:
    """Igual que is_authorized pero lanza ForbiddenError al denegar."""
    if not is_authorized(caller, action, resource):
        raise ForbiddenError(message)
