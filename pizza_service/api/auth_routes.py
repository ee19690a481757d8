"""
===============================================================================
TARJETA CRC — pizza_service/api/auth_routes.py (Registro, Login, Perfil)
===============================================================================

Responsabilidades:
  - POST   /api/auth          registro (Diner) => {user, token}
  - PUT    /api/auth          login => {user, token}
  - PUT    /api/auth/{userId} update de perfil (self o Admin)
  - DELETE /api/auth          logout => {"message": "logout successful"}

Patrones aplicados:
  - Adapter / Presentation Layer: traduce HTTP <-> AuthManager.
  - Errores: se propagan como PizzaError y los mapea exception_handlers.

Colaboradores:
  - identity.auth_manager.AuthManager
  - api.dependencies (bearer + require_user)
===============================================================================
"""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Request
from pydantic import BaseModel

from ..container import get_auth_manager
from ..crosscutting.error_responses import OPENAPI_ERROR_RESPONSES
from ..identity.auth_manager import AuthManager
from ..identity.users import User
from .dependencies import read_bearer_token, require_user
from .schemas import AuthResponse, MessageResponse, UserResponse, to_user_response

router = APIRouter(prefix="/api/auth", tags=["auth"], responses=OPENAPI_ERROR_RESPONSES)


# -----------------------------------------------------------------------------
# Modelos HTTP (DTOs)
# -----------------------------------------------------------------------------


class RegisterRequest(BaseModel):
    # R: opcionales a nivel schema; el faltante se reporta como BadRequest
    name: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None


class LoginRequest(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None


class UpdateUserRequest(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None


# -----------------------------------------------------------------------------
# Endpoints
# -----------------------------------------------------------------------------


@router.post("", response_model=AuthResponse, response_model_exclude_none=True)
def register(req: RegisterRequest, auth: AuthManager = Depends(get_auth_manager)):
    result = auth.register(req.name, req.email, req.password)
    return AuthResponse(user=to_user_response(result.user), token=result.token)


@router.put("", response_model=AuthResponse, response_model_exclude_none=True)
def login(req: LoginRequest, auth: AuthManager = Depends(get_auth_manager)):
    result = auth.login(req.email, req.password)
    return AuthResponse(user=to_user_response(result.user), token=result.token)


@router.put(
    "/{user_id}", response_model=UserResponse, response_model_exclude_none=True
)
def update_user(
    user_id: int,
    req: UpdateUserRequest,
    caller: User = Depends(require_user),
    auth: AuthManager = Depends(get_auth_manager),
):
    updated = auth.update_user(
        caller, user_id, name=req.name, email=req.email, password=req.password
    )
    return to_user_response(updated)


@router.delete("", response_model=MessageResponse)
def logout(request: Request, auth: AuthManager = Depends(get_auth_manager)):
    auth.logout(read_bearer_token(request))
    return MessageResponse(message="logout successful")
