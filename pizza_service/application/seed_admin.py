# =============================================================================
# FILE: application/seed_admin.py
# =============================================================================
"""
===============================================================================
TASK: Seed Default Admin (bootstrap)
===============================================================================

Qué es:
    Garantiza que exista al menos un Admin: si la tabla de usuarios está
    vacía al arrancar, crea el admin por defecto configurado en Settings.

Patrones:
    - Task orchestration (seed)
    - Dependency Injection (repo + settings)
    - Idempotencia (solo actúa con tabla vacía)

CRC:
    Component: seed_default_admin
    Responsibilities:
      - Consultar si hay usuarios
      - Crear admin por defecto con rol Admin
    Collaborators:
      - UserPort (count_users / add_user)
      - Settings (default_admin_*)
===============================================================================
"""

from __future__ import annotations

from typing import Optional, Protocol

from ..crosscutting.config import Settings
from ..crosscutting.logger import logger
from ..identity.users import NewUser, RoleRequest, User


class UserPort(Protocol):
    """User repository port needed by the seed task."""

    def count_users(self) -> int: ...

    def add_user(self, user: NewUser) -> User: ...


def seed_default_admin(users: UserPort, settings: Settings) -> Optional[User]:
    """
    Crea el admin por defecto si no hay usuarios.

    Returns:
        El admin creado, o None si ya existían usuarios.
    """
    if users.count_users() > 0:
        return None

    admin = users.add_user(
        NewUser(
            name=settings.default_admin_name,
            email=settings.default_admin_email,
            password=settings.default_admin_password,
            roles=(RoleRequest.admin(),),
        )
    )
    logger.info(
        "Seed admin: admin por defecto creado",
        extra={"user_id": admin.id, "email": admin.email},
    )
    return admin
