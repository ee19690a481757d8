"""
===============================================================================
TARJETA CRC — pizza_service/container.py (Composition Root / DI manual)
===============================================================================

Responsabilidades:
  - Componer dependencias (repositorios, codec, hasher, fábrica, managers).
  - Exponer factories para FastAPI (Depends) y para el bootstrap.
  - Mantener singletons con caching (lru_cache).
  - Elegir backend de persistencia: in-memory en test o si
    persistence_backend == "memory"; Postgres en runtime.

Colaboradores:
  - crosscutting.config.get_settings
  - domain.repositories.* (puertos)
  - infrastructure.* (implementaciones)
  - identity.auth_manager / application.*_manager

Notas:
  - Este archivo NO contiene lógica de negocio.
  - Este archivo NO depende de FastAPI.
===============================================================================
"""

from __future__ import annotations

from functools import lru_cache

from .application.franchise_manager import FranchiseManager
from .application.order_manager import OrderManager
from .crosscutting.config import get_settings
from .domain.repositories import (
    FranchiseRepository,
    OrderRepository,
    SessionRepository,
    UserRepository,
)
from .identity.auth_manager import AuthManager
from .identity.passwords import CredentialHasher
from .identity.tokens import TokenCodec
from .infrastructure.repositories.in_memory import (
    InMemoryDatabase,
    InMemoryFranchiseRepository,
    InMemoryOrderRepository,
    InMemorySessionRepository,
    InMemoryUserRepository,
)
from .infrastructure.repositories.postgres import (
    PostgresFranchiseRepository,
    PostgresOrderRepository,
    PostgresSessionRepository,
    PostgresUserRepository,
)
from .infrastructure.services.factory_client import FactoryClient

# =============================================================================
# Helpers internos
# =============================================================================


def use_in_memory() -> bool:
    """
    Regla:
      - app_env ∈ {"test", "testing", "ci"} o persistence_backend == "memory"
        => in-memory adapters.
    """
    settings = get_settings()
    return settings.is_test() or settings.persistence_backend == "memory"


@lru_cache(maxsize=1)
def get_in_memory_database() -> InMemoryDatabase:
    return InMemoryDatabase()


# =============================================================================
# Seguridad (singletons)
# =============================================================================


@lru_cache(maxsize=1)
def get_credential_hasher() -> CredentialHasher:
    return CredentialHasher(time_cost=get_settings().password_hash_time_cost)


@lru_cache(maxsize=1)
def get_token_codec() -> TokenCodec:
    settings = get_settings()
    return TokenCodec(settings.jwt_secret, ttl_minutes=settings.jwt_access_ttl_minutes)


# =============================================================================
# Repositorios (singletons)
# =============================================================================


@lru_cache(maxsize=1)
def get_user_repository() -> UserRepository:
    """Usuarios (in-memory en test; Postgres en runtime)."""
    if use_in_memory():
        return InMemoryUserRepository(
            get_in_memory_database(), hasher=get_credential_hasher()
        )
    return PostgresUserRepository(hasher=get_credential_hasher())


@lru_cache(maxsize=1)
def get_session_repository() -> SessionRepository:
    if use_in_memory():
        return InMemorySessionRepository(get_in_memory_database())
    return PostgresSessionRepository()


@lru_cache(maxsize=1)
def get_franchise_repository() -> FranchiseRepository:
    if use_in_memory():
        return InMemoryFranchiseRepository(get_in_memory_database())
    return PostgresFranchiseRepository()


@lru_cache(maxsize=1)
def get_order_repository() -> OrderRepository:
    page_size = get_settings().orders_per_page
    if use_in_memory():
        return InMemoryOrderRepository(
            get_in_memory_database(), orders_per_page=page_size
        )
    return PostgresOrderRepository(orders_per_page=page_size)


# =============================================================================
# Servicios externos (singletons)
# =============================================================================


@lru_cache(maxsize=1)
def get_factory_client() -> FactoryClient:
    settings = get_settings()
    return FactoryClient(
        settings.factory_url,
        settings.factory_api_key,
        timeout_s=settings.factory_timeout_seconds,
    )


# =============================================================================
# Managers (casos de uso)
# =============================================================================


def get_auth_manager() -> AuthManager:
    return AuthManager(
        users=get_user_repository(),
        sessions=get_session_repository(),
        codec=get_token_codec(),
    )


def get_franchise_manager() -> FranchiseManager:
    return FranchiseManager(get_franchise_repository())


def get_order_manager() -> OrderManager:
    return OrderManager(get_order_repository(), get_factory_client())


def reset_container() -> None:
    """Limpia singletons (tests que cambian Settings)."""
    for factory in (
        get_in_memory_database,
        get_credential_hasher,
        get_token_codec,
        get_user_repository,
        get_session_repository,
        get_franchise_repository,
        get_order_repository,
        get_factory_client,
    ):
        factory.cache_clear()
