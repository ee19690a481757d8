"""
Name: Settings Tests

Responsibilities:
  - Validate defaults and field validators
  - Validate production security guard
"""

import pytest
from pydantic import ValidationError

from pizza_service.crosscutting.config import Settings, get_settings

pytestmark = pytest.mark.unit


def test_defaults():
    settings = Settings(app_env="development")

    assert settings.orders_per_page == 10
    assert settings.jwt_access_ttl_minutes == 0
    assert settings.default_admin_email == "a@jwt.com"
    assert settings.persistence_backend == "postgres"


def test_settings_are_frozen():
    settings = Settings()
    with pytest.raises(ValidationError):
        settings.orders_per_page = 5


@pytest.mark.parametrize("value", [0, -1])
def test_orders_per_page_must_be_positive(value):
    with pytest.raises(ValidationError, match="orders_per_page"):
        Settings(orders_per_page=value)


def test_negative_ttl_rejected():
    with pytest.raises(ValidationError, match="jwt_access_ttl_minutes"):
        Settings(jwt_access_ttl_minutes=-1)


def test_persistence_backend_normalized():
    assert Settings(persistence_backend=" Memory ").persistence_backend == "memory"


def test_unknown_persistence_backend_rejected():
    with pytest.raises(ValidationError, match="persistence_backend"):
        Settings(persistence_backend="mysql")


def test_production_rejects_default_secret():
    with pytest.raises(ValidationError, match="JWT_SECRET"):
        Settings(app_env="production", factory_api_key="key")


def test_production_requires_factory_api_key():
    with pytest.raises(ValidationError, match="FACTORY_API_KEY"):
        Settings(app_env="production", jwt_secret="x" * 40, factory_api_key="")


def test_production_accepts_strong_config():
    settings = Settings(app_env="production", jwt_secret="x" * 40, factory_api_key="k")
    assert settings.is_production() is True
    assert settings.is_test() is False


def test_get_settings_is_cached_and_reads_env(monkeypatch):
    get_settings.cache_clear()
    monkeypatch.setenv("ORDERS_PER_PAGE", "4")

    first = get_settings()
    assert first.orders_per_page == 4
    assert get_settings() is first
