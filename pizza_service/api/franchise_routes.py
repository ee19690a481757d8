"""
===============================================================================
TARJETA CRC — pizza_service/api/franchise_routes.py (Franquicias y Tiendas)
===============================================================================

Responsabilidades:
  - GET    /api/franchise                               listado (auth opcional)
  - GET    /api/franchise/{userId}                      franquicias de un usuario
  - POST   /api/franchise                               alta (Admin)
  - DELETE /api/franchise/{franchiseId}                 baja (Admin)
  - POST   /api/franchise/{franchiseId}/store           alta de tienda
  - DELETE /api/franchise/{franchiseId}/store/{storeId} baja de tienda

Notas:
  - Vistas sin privilegio omiten `admins` y `totalRevenue` (exclude_none).

Colaboradores:
  - application.franchise_manager.FranchiseManager
  - api.dependencies (require_user / optional_user)
===============================================================================
"""

from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from ..application.franchise_manager import FranchiseManager
from ..container import get_franchise_manager
from ..crosscutting.error_responses import OPENAPI_ERROR_RESPONSES
from ..domain.entities import NewFranchise, NewStore
from ..identity.users import User
from .dependencies import optional_user, require_user
from .schemas import (
    FranchiseResponse,
    MessageResponse,
    StoreResponse,
    to_franchise_response,
    to_store_response,
)

router = APIRouter(
    prefix="/api/franchise", tags=["franchise"], responses=OPENAPI_ERROR_RESPONSES
)


# -----------------------------------------------------------------------------
# Modelos HTTP (DTOs)
# -----------------------------------------------------------------------------


class AdminRef(BaseModel):
    email: str


class FranchiseRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    admins: List[AdminRef] = []


class StoreRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)


# -----------------------------------------------------------------------------
# Endpoints
# -----------------------------------------------------------------------------


@router.get(
    "", response_model=List[FranchiseResponse], response_model_exclude_none=True
)
def list_franchises(
    caller: Optional[User] = Depends(optional_user),
    franchises: FranchiseManager = Depends(get_franchise_manager),
):
    return [to_franchise_response(f) for f in franchises.list_franchises(caller)]


@router.get(
    "/{user_id}",
    response_model=List[FranchiseResponse],
    response_model_exclude_none=True,
)
def list_user_franchises(
    user_id: int,
    caller: User = Depends(require_user),
    franchises: FranchiseManager = Depends(get_franchise_manager),
):
    return [
        to_franchise_response(f)
        for f in franchises.list_user_franchises(caller, user_id)
    ]


@router.post("", response_model=FranchiseResponse, response_model_exclude_none=True)
def create_franchise(
    req: FranchiseRequest,
    caller: User = Depends(require_user),
    franchises: FranchiseManager = Depends(get_franchise_manager),
):
    created = franchises.create_franchise(
        caller,
        NewFranchise(
            name=req.name, admin_emails=tuple(a.email for a in req.admins)
        ),
    )
    return to_franchise_response(created)


@router.delete("/{franchise_id}", response_model=MessageResponse)
def delete_franchise(
    franchise_id: int,
    caller: User = Depends(require_user),
    franchises: FranchiseManager = Depends(get_franchise_manager),
):
    franchises.delete_franchise(caller, franchise_id)
    return MessageResponse(message="franchise deleted")


@router.post(
    "/{franchise_id}/store",
    response_model=StoreResponse,
    response_model_exclude_none=True,
)
def create_store(
    franchise_id: int,
    req: StoreRequest,
    caller: User = Depends(require_user),
    franchises: FranchiseManager = Depends(get_franchise_manager),
):
    store = franchises.create_store(caller, franchise_id, NewStore(name=req.name))
    return to_store_response(store)


@router.delete("/{franchise_id}/store/{store_id}", response_model=MessageResponse)
def delete_store(
    franchise_id: int,
    store_id: int,
    caller: User = Depends(require_user),
    franchises: FranchiseManager = Depends(get_franchise_manager),
):
    franchises.delete_store(caller, franchise_id, store_id)
    return MessageResponse(message="store deleted")
