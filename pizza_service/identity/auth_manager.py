"""
===============================================================================
TARJETA CRC — identity/auth_manager.py
===============================================================================

Módulo:
    Auth Manager (registro, login, logout, autenticación, update de perfil)

Responsabilidades:
    - Validar input mínimo del registro (name/email/password requeridos).
    - Emitir tokens y registrar la sesión activa (signature en el store).
    - Autenticar: token válido criptográficamente Y sesión presente.
    - Gatear updates de perfil con la policy antes de tocar la persistencia.

Colaboradores:
    - identity.tokens.TokenCodec
    - identity.policy (Action.UPDATE_USER)
    - domain.repositories.UserRepository / SessionRepository

Decisiones:
    - Múltiples tokens concurrentes por usuario: cada login agrega una sesión.
    - logout siempre reporta éxito (revocar lo inexistente es no-op).
    - update_user NO emite token nuevo: el anterior sigue llevando los datos viejos.
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass

from ..crosscutting.exceptions import BadRequestError, UnauthorizedError
from ..crosscutting.logger import logger
from ..domain.repositories import SessionRepository, UserRepository
from .policy import Action, Resource, ensure_authorized
from .tokens import TokenCodec
from .users import NewUser, RoleRequest, User

REGISTER_REQUIRED_MESSAGE = "name, email, and password are required"


@dataclass(frozen=True, slots=True)
class AuthResult:
    """Usuario autenticado + token emitido."""

    user: User
    token: str


class AuthManager:
    """Casos de uso de identidad sobre puertos de persistencia."""

    def __init__(
        self,
        users: UserRepository,
        sessions: SessionRepository,
        codec: TokenCodec,
    ) -> None:
        self._users = users
        self._sessions = sessions
        self._codec = codec

    def _start_session(self, user: User) -> str:
        token = self._codec.issue(user)
        self._sessions.login_user(user.id, token)
        return token

    def register(self, name: str | None, email: str | None, password: str | None) -> AuthResult:
        """Crea un Diner, emite token y registra la sesión."""
        if not name or not email or not password:
            raise BadRequestError(REGISTER_REQUIRED_MESSAGE)

        user = self._users.add_user(
            NewUser(
                name=name,
                email=email,
                password=password,
                roles=(RoleRequest.diner(),),
            )
        )
        token = self._start_session(user)
        logger.info("Usuario registrado", extra={"user_id": user.id})
        return AuthResult(user=user, token=token)

    def login(self, email: str | None, password: str | None) -> AuthResult:
        """Verifica credenciales y abre una sesión nueva."""
        if not email or not password:
            raise UnauthorizedError("unknown user")

        user = self._users.get_user(email, password)
        token = self._start_session(user)
        logger.info("Login exitoso", extra={"user_id": user.id})
        return AuthResult(user=user, token=token)

    def logout(self, token: str | None) -> None:
        """Revoca la sesión del token (idempotente)."""
        if not token:
            return
        self._sessions.logout_user(token)
        logger.info("Logout")

    def authenticate(self, token: str | None) -> User:
        """
        Devuelve la identidad del token.

        Errores:
            - UnauthorizedError si falta, no valida, expiró o fue revocado.
        """
        if not token:
            raise UnauthorizedError("unauthorized")

        user = self._codec.decode(token)
        if not self._sessions.is_logged_in(token):
            logger.warning("Token sin sesión activa", extra={"user_id": user.id})
            raise UnauthorizedError("unauthorized")
        return user

    def update_user(
        self,
        caller: User,
        target_id: int,
        *,
        name: str | None = None,
        email: str | None = None,
        password: str | None = None,
    ) -> User:
        """Actualiza el perfil si la policy lo permite (self o Admin)."""
        ensure_authorized(
            caller,
            Action.UPDATE_USER,
            Resource(user_id=target_id),
            message="unauthorized",
        )
        updated = self._users.update_user(
            target_id, name=name, email=email, password=password
        )
        logger.info(
            "Usuario actualizado",
            extra={"user_id": target_id, "actor_id": caller.id},
        )
        return updated
