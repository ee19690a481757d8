"""
===============================================================================
TARJETA CRC — identity/users.py
===============================================================================

Módulo:
    Modelos de Usuario y Roles

Responsabilidades:
    - Definir el enum de roles (diner / franchisee / admin).
    - Modelar el role binding como variante etiquetada:
        Diner | Franchisee(franchise_id) | Admin
    - Definir el User público (nunca lleva password) y el NewUser de alta.

Colaboradores:
    - identity/tokens.py: serializa User en el payload del token.
    - identity/policy.py: decide permisos a partir de los bindings.
    - infrastructure/repositories: mapean filas <-> User / RoleBinding.

Notas:
    - Este módulo NO contiene lógica de negocio: solo “shapes” de datos.
    - Un Franchisee se pide por nombre de franquicia (RoleRequest) y se
      persiste siempre con el id resuelto (RoleBinding.object_id).
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class Role(str, Enum):
    """Roles soportados."""

    DINER = "diner"
    FRANCHISEE = "franchisee"
    ADMIN = "admin"


@dataclass(frozen=True, slots=True)
class RoleBinding:
    """Role binding persistido: franchisee siempre con object_id concreto."""

    role: Role
    object_id: int | None = None

    def __post_init__(self) -> None:
        if self.role == Role.FRANCHISEE and self.object_id is None:
            raise ValueError("franchisee binding requires a franchise id")
        if self.role != Role.FRANCHISEE and self.object_id is not None:
            raise ValueError(f"{self.role.value} binding does not take an object id")

    @classmethod
    def diner(cls) -> "RoleBinding":
        return cls(Role.DINER)

    @classmethod
    def admin(cls) -> "RoleBinding":
        return cls(Role.ADMIN)

    @classmethod
    def franchisee(cls, franchise_id: int) -> "RoleBinding":
        return cls(Role.FRANCHISEE, franchise_id)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"role": self.role.value}
        if self.object_id is not None:
            data["objectId"] = self.object_id
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RoleBinding":
        return cls(Role(str(data["role"])), data.get("objectId"))


@dataclass(frozen=True, slots=True)
class RoleRequest:
    """Rol pedido en un alta: el franchisee referencia la franquicia por nombre."""

    role: Role
    franchise_name: str | None = None

    @classmethod
    def diner(cls) -> "RoleRequest":
        return cls(Role.DINER)

    @classmethod
    def admin(cls) -> "RoleRequest":
        return cls(Role.ADMIN)

    @classmethod
    def franchisee(cls, franchise_name: str) -> "RoleRequest":
        return cls(Role.FRANCHISEE, franchise_name)


@dataclass(frozen=True, slots=True)
class User:
    """Usuario público (identidad autenticada). Nunca transporta password."""

    id: int
    name: str
    email: str
    roles: tuple[RoleBinding, ...] = ()

    def is_role(self, role: Role) -> bool:
        return any(binding.role == role for binding in self.roles)

    def franchise_ids(self) -> frozenset[int]:
        return frozenset(
            binding.object_id
            for binding in self.roles
            if binding.role == Role.FRANCHISEE and binding.object_id is not None
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "roles": [binding.to_dict() for binding in self.roles],
        }


@dataclass(frozen=True, slots=True)
class NewUser:
    """Datos de alta de usuario (password en claro, se hashea al persistir)."""

    name: str
    email: str
    password: str = field(repr=False)
    roles: tuple[RoleRequest, ...] = (RoleRequest(Role.DINER),)
