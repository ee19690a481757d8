"""In-memory active-sessions store (signature -> user_id)."""

from __future__ import annotations

from ....domain.repositories import SessionRepository
from ....identity.tokens import get_token_signature
from .state import InMemoryDatabase


class InMemorySessionRepository(SessionRepository):
    def __init__(self, db: InMemoryDatabase) -> None:
        self._db = db

    def login_user(self, user_id: int, token: str) -> None:
        signature = get_token_signature(token)
        if not signature:
            raise ValueError("token has no signature segment")
        with self._db.lock:
            self._db.auth.setdefault(signature, user_id)

    def is_logged_in(self, token: str) -> bool:
        signature = get_token_signature(token)
        if not signature:
            return False
        with self._db.lock:
            return signature in self._db.auth

    def logout_user(self, token: str) -> None:
        signature = get_token_signature(token)
        with self._db.lock:
            self._db.auth.pop(signature, None)
