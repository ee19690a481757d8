"""
===============================================================================
TARJETA CRC — identity/tokens.py
===============================================================================

Módulo:
    Token Codec (JWT HS256)

Responsabilidades:
    - Emitir tokens de sesión firmados con la identidad (id, name, email, roles).
    - Decodificar y validar tokens (firma, exp, claims mínimos).
    - Extraer el segmento de firma SIN verificar (clave del store de sesiones).

Colaboradores:
    - PyJWT (jwt.encode / jwt.decode)
    - identity.users: User / RoleBinding
    - identity.auth_manager: único emisor/consumidor.

Decisiones de diseño:
    - Verificación stateless: la revocación vive en el store de sesiones, no acá.
    - `jti` aleatorio por token: dos logins en el mismo segundo producen firmas
      distintas, y cada sesión se revoca por separado.
    - exp es opcional (ttl_minutes == 0 => el token no expira por tiempo).
===============================================================================
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any
from uuid import uuid4

import jwt

from ..crosscutting.exceptions import UnauthorizedError
from .users import RoleBinding, User

JWT_ALGORITHM: str = "HS256"

CLAIM_ID: str = "id"
CLAIM_NAME: str = "name"
CLAIM_EMAIL: str = "email"
CLAIM_ROLES: str = "roles"
CLAIM_IAT: str = "iat"
CLAIM_EXP: str = "exp"
CLAIM_JTI: str = "jti"


def get_token_signature(token: str | None) -> str:
    """
    Devuelve el tercer segmento (firma) de un token header.payload.signature.

    No verifica nada: es una clave de almacenamiento, no una decisión de confianza.
    Tokens sin firma => "".
    """
    parts = (token or "").split(".")
    if len(parts) > 2:
        return parts[2]
    return ""


class TokenCodec:
    """Emite y valida tokens de sesión con un secreto de proceso."""

    def __init__(self, secret: str, *, ttl_minutes: int = 0) -> None:
        if not secret:
            raise ValueError("jwt secret is required")
        self._secret = secret
        self._ttl_minutes = ttl_minutes

    def issue(self, user: User) -> str:
        """Crea un token firmado para el usuario."""
        now = datetime.now(timezone.utc)
        payload: dict[str, Any] = {
            CLAIM_ID: user.id,
            CLAIM_NAME: user.name,
            CLAIM_EMAIL: user.email,
            CLAIM_ROLES: [binding.to_dict() for binding in user.roles],
            CLAIM_IAT: int(now.timestamp()),
            CLAIM_JTI: uuid4().hex,
        }
        if self._ttl_minutes > 0:
            payload[CLAIM_EXP] = int(
                (now + timedelta(minutes=self._ttl_minutes)).timestamp()
            )
        return jwt.encode(payload, self._secret, algorithm=JWT_ALGORITHM)

    def decode(self, token: str) -> User:
        """
        Decodifica y valida un token.

        Errores:
            - UnauthorizedError si expiró, la firma no valida o faltan claims.
        """
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[JWT_ALGORITHM],
                options={"require": [CLAIM_ID, CLAIM_IAT]},
            )
        except jwt.ExpiredSignatureError as exc:
            raise UnauthorizedError("Token expirado.") from exc
        except jwt.InvalidTokenError as exc:
            raise UnauthorizedError("Token inválido.") from exc

        try:
            return User(
                id=int(payload[CLAIM_ID]),
                name=str(payload.get(CLAIM_NAME) or ""),
                email=str(payload.get(CLAIM_EMAIL) or ""),
                roles=tuple(
                    RoleBinding.from_dict(r) for r in payload.get(CLAIM_ROLES) or []
                ),
            )
        except (KeyError, TypeError, ValueError) as exc:
            raise UnauthorizedError("Token inválido.") from exc
