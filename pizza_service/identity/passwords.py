"""
===============================================================================
TARJETA CRC — identity/passwords.py
===============================================================================

Módulo:
    Credential Hasher (Argon2)

Responsabilidades:
    - Hashear passwords one-way con work factor configurable.
    - Verificar password vs hash almacenado sin lanzar en mismatch.

Colaboradores:
    - argon2.PasswordHasher
    - infrastructure/repositories: único consumidor (alta / login / update).
===============================================================================
"""

from __future__ import annotations

from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerificationError, VerifyMismatchError


class CredentialHasher:
    """Wrapper mínimo sobre argon2 con time_cost inyectado desde Settings."""

    def __init__(self, time_cost: int = 3) -> None:
        self._hasher = PasswordHasher(time_cost=time_cost)

    def hash(self, password: str) -> str:
        """Hashea un password usando Argon2."""
        return self._hasher.hash(password)

    def verify(self, password: str, password_hash: str) -> bool:
        """Verifica password vs hash almacenado."""
        if not password_hash:
            return False
        try:
            return self._hasher.verify(password_hash, password)
        except (VerifyMismatchError, VerificationError, InvalidHashError):
            return False
