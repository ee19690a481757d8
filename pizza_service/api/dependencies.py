"""
===============================================================================
TARJETA CRC — pizza_service/api/dependencies.py
===============================================================================

Responsabilidades:
  - Extraer el bearer token del header Authorization.
  - Resolver la identidad del caller (obligatoria u opcional) vía AuthManager.

Colaboradores:
  - container.get_auth_manager
  - identity.auth_manager.AuthManager.authenticate
===============================================================================
"""

from __future__ import annotations

from typing import Optional

from fastapi import Depends, Request

from ..container import get_auth_manager
from ..crosscutting.exceptions import UnauthorizedError
from ..identity.auth_manager import AuthManager
from ..identity.users import User

_BEARER = "bearer"


def read_bearer_token(request: Request) -> Optional[str]:
    """'Authorization: Bearer <token>' -> token; cualquier otra forma -> None."""
    header = request.headers.get("Authorization") or ""
    scheme, _, token = header.strip().partition(" ")
    token = token.strip()
    if scheme.lower() != _BEARER or not token:
        return None
    return token


def require_user(
    request: Request, auth: AuthManager = Depends(get_auth_manager)
) -> User:
    """Identidad obligatoria: UnauthorizedError (401) si no hay sesión válida."""
    return auth.authenticate(read_bearer_token(request))


def optional_user(
    request: Request, auth: AuthManager = Depends(get_auth_manager)
) -> Optional[User]:
    """Identidad opcional: sin token o token inválido => caller anónimo."""
    token = read_bearer_token(request)
    if token is None:
        return None
    try:
        return auth.authenticate(token)
    except UnauthorizedError:
        # R: vista pública; el token inválido no bloquea la lectura
        return None
