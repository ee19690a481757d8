"""
Name: Pytest Configuration and Shared Fixtures

Responsibilities:
  - Configure the test environment (APP_ENV=test => in-memory persistence)
  - Provide in-memory repositories, codec, hasher and managers
  - Provide a fake factory client (no network)

Collaborators:
  - pytest: Test framework
  - unittest.mock: Mocking library
  - pizza_service.infrastructure.repositories.in_memory

Notes:
  - Settings are read from env vars only (no .env file in tests)
  - Argon2 runs with time_cost=1 to keep the suite fast
"""

import os
import sys
from pathlib import Path
from unittest.mock import Mock

import pytest

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

os.environ.setdefault("APP_ENV", "test")
os.environ.setdefault("PASSWORD_HASH_TIME_COST", "1")
os.environ.setdefault("LOG_JSON", "false")

from pizza_service.crosscutting import config as app_config  # noqa: E402

app_config.Settings.model_config["env_file"] = None

from pizza_service.application.franchise_manager import FranchiseManager  # noqa: E402
from pizza_service.application.order_manager import OrderManager  # noqa: E402
from pizza_service.container import reset_container  # noqa: E402
from pizza_service.identity.auth_manager import AuthManager  # noqa: E402
from pizza_service.identity.passwords import CredentialHasher  # noqa: E402
from pizza_service.identity.tokens import TokenCodec  # noqa: E402
from pizza_service.identity.users import NewUser, RoleRequest, User  # noqa: E402
from pizza_service.infrastructure.repositories.in_memory import (  # noqa: E402
    InMemoryDatabase,
    InMemoryFranchiseRepository,
    InMemoryOrderRepository,
    InMemorySessionRepository,
    InMemoryUserRepository,
)
from pizza_service.infrastructure.services.factory_client import (  # noqa: E402
    FactoryReceipt,
)

TEST_JWT_SECRET = "unit-test-secret-with-enough-length-123"


def pytest_configure(config) -> None:
    config.addinivalue_line(
        "markers", "unit: Unit tests (fast, no external dependencies)"
    )


@pytest.fixture(autouse=True)
def _fresh_singletons():
    """R: Each test starts with clean Settings and container caches."""
    app_config.get_settings.cache_clear()
    reset_container()
    yield
    reset_container()
    app_config.get_settings.cache_clear()


# ============================================================================
# Identity fixtures
# ============================================================================


@pytest.fixture
def hasher() -> CredentialHasher:
    return CredentialHasher(time_cost=1)


@pytest.fixture
def codec() -> TokenCodec:
    return TokenCodec(TEST_JWT_SECRET)


# ============================================================================
# In-memory persistence
# ============================================================================


@pytest.fixture
def memory_db() -> InMemoryDatabase:
    return InMemoryDatabase()


@pytest.fixture
def user_repo(memory_db, hasher) -> InMemoryUserRepository:
    return InMemoryUserRepository(memory_db, hasher=hasher)


@pytest.fixture
def session_repo(memory_db) -> InMemorySessionRepository:
    return InMemorySessionRepository(memory_db)


@pytest.fixture
def franchise_repo(memory_db) -> InMemoryFranchiseRepository:
    return InMemoryFranchiseRepository(memory_db)


@pytest.fixture
def order_repo(memory_db) -> InMemoryOrderRepository:
    return InMemoryOrderRepository(memory_db, orders_per_page=3)


# ============================================================================
# Managers
# ============================================================================


@pytest.fixture
def fake_factory() -> Mock:
    """R: Factory that always accepts the order."""
    factory = Mock()
    factory.submit_order.return_value = FactoryReceipt(
        report_url="https://factory.test/report/1", jwt="factory.jwt.value"
    )
    return factory


@pytest.fixture
def auth_manager(user_repo, session_repo, codec) -> AuthManager:
    return AuthManager(users=user_repo, sessions=session_repo, codec=codec)


@pytest.fixture
def franchise_manager(franchise_repo) -> FranchiseManager:
    return FranchiseManager(franchise_repo)


@pytest.fixture
def order_manager(order_repo, fake_factory) -> OrderManager:
    return OrderManager(order_repo, fake_factory)


# ============================================================================
# Users
# ============================================================================


@pytest.fixture
def admin_user(user_repo) -> User:
    return user_repo.add_user(
        NewUser(
            name="Admin",
            email="admin@jwt.com",
            password="admin",
            roles=(RoleRequest.admin(),),
        )
    )


@pytest.fixture
def diner_user(user_repo) -> User:
    return user_repo.add_user(
        NewUser(name="Diner", email="diner@jwt.com", password="diner")
    )
