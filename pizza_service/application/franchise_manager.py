"""
===============================================================================
TARJETA CRC — application/franchise_manager.py
===============================================================================

Componente:
    FranchiseManager

Responsabilidades:
    - Listar franquicias (vista pública o detallada según caller).
    - Listar franquicias de un usuario (self o Admin; si no, lista vacía).
    - Crear/borrar franquicias (Admin) y tiendas (Admin o franchisee de esa
      franquicia), consultando la policy ANTES de tocar la persistencia.

Colaboradores:
    - domain.repositories.FranchiseRepository
    - identity.policy (Action + Resource)
===============================================================================
"""

from __future__ import annotations

from typing import List, Optional

from ..crosscutting.logger import logger
from ..domain.entities import Franchise, NewFranchise, NewStore, Store
from ..domain.repositories import FranchiseRepository
from ..identity.policy import Action, Resource, ensure_authorized, is_authorized
from ..identity.users import User


class FranchiseManager:
    def __init__(self, franchises: FranchiseRepository) -> None:
        self._franchises = franchises

    def list_franchises(self, caller: Optional[User] = None) -> List[Franchise]:
        return self._franchises.get_franchises(caller)

    def list_user_franchises(self, caller: User, user_id: int) -> List[Franchise]:
        """R: Caller ajeno (ni self ni Admin) => [] en vez de 403."""
        if not is_authorized(caller, Action.LIST_USER_FRANCHISES, Resource(user_id=user_id)):
            return []
        return self._franchises.get_user_franchises(user_id)

    def create_franchise(self, caller: User, franchise: NewFranchise) -> Franchise:
        ensure_authorized(
            caller, Action.CREATE_FRANCHISE, message="unable to create a franchise"
        )
        created = self._franchises.create_franchise(franchise)
        logger.info(
            "Franquicia creada",
            extra={"franchise_id": created.id, "actor_id": caller.id},
        )
        return created

    def delete_franchise(self, caller: User, franchise_id: int) -> None:
        ensure_authorized(
            caller,
            Action.DELETE_FRANCHISE,
            Resource(franchise_id=franchise_id),
            message="unable to delete a franchise",
        )
        self._franchises.delete_franchise(franchise_id)
        logger.info(
            "Franquicia eliminada",
            extra={"franchise_id": franchise_id, "actor_id": caller.id},
        )

    def create_store(self, caller: User, franchise_id: int, store: NewStore) -> Store:
        ensure_authorized(
            caller,
            Action.CREATE_STORE,
            Resource(franchise_id=franchise_id),
            message="unable to create a store",
        )
        return self._franchises.create_store(franchise_id, store)

    def delete_store(self, caller: User, franchise_id: int, store_id: int) -> None:
        ensure_authorized(
            caller,
            Action.DELETE_STORE,
            Resource(franchise_id=franchise_id),
            message="unable to delete a store",
        )
        self._franchises.delete_store(franchise_id, store_id)
