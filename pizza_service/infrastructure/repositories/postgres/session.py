"""
============================================================
TARJETA CRC — infrastructure/repositories/postgres/session.py
============================================================
Class: PostgresSessionRepository

Responsibilities:
  - Registrar sesiones activas: auth(token_signature, user_id).
  - Responder "¿sigue logueado?" sin lanzar nunca.
  - Revocar sesiones (idempotente).

Collaborators:
  - identity.tokens.get_token_signature (clave del store)
  - PostgresRepository

Notes:
  - Se guarda SOLO la firma del token, no el token completo.
  - ON CONFLICT DO NOTHING: re-registrar la misma firma es no-op.
============================================================
"""

from __future__ import annotations

from ....crosscutting.exceptions import PizzaError
from ....crosscutting.logger import logger
from ....identity.tokens import get_token_signature
from .base import PostgresRepository


class PostgresSessionRepository(PostgresRepository):
    """Active-sessions store sobre la tabla `auth`."""

    _SQL_INSERT = """
        INSERT INTO auth (token_signature, user_id)
        VALUES (%s, %s)
        ON CONFLICT (token_signature) DO NOTHING
    """

    _SQL_EXISTS = "SELECT user_id FROM auth WHERE token_signature = %s"

    _SQL_DELETE = "DELETE FROM auth WHERE token_signature = %s"

    def login_user(self, user_id: int, token: str) -> None:
        signature = get_token_signature(token)
        if not signature:
            raise ValueError("token has no signature segment")
        self._execute(
            query=self._SQL_INSERT,
            params=(signature, user_id),
            context_msg="PostgresSessionRepository: login_user failed",
            extra={"user_id": user_id},
        )

    def is_logged_in(self, token: str) -> bool:
        """R: False ante token mal formado o falla del store."""
        signature = get_token_signature(token)
        if not signature:
            return False
        try:
            row = self._fetchone(
                query=self._SQL_EXISTS,
                params=(signature,),
                context_msg="PostgresSessionRepository: is_logged_in failed",
                extra={},
            )
        except PizzaError as exc:
            logger.warning(
                "is_logged_in: store no disponible, sesión tratada como inválida",
                extra={"error_id": exc.error_id},
            )
            return False
        return row is not None

    def logout_user(self, token: str) -> None:
        signature = get_token_signature(token)
        if not signature:
            return
        self._execute(
            query=self._SQL_DELETE,
            params=(signature,),
            context_msg="PostgresSessionRepository: logout_user failed",
            extra={},
        )
