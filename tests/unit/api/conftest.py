"""
Name: API test fixtures

Responsibilities:
  - TestClient over the real app (no lifespan: no DB bootstrap)
  - Managers wired to the shared in-memory fixtures via dependency_overrides
  - Login fixtures returning session tokens
"""

import pytest
from fastapi.testclient import TestClient

from pizza_service.api.main import app
from pizza_service.container import (
    get_auth_manager,
    get_franchise_manager,
    get_order_manager,
)


@pytest.fixture
def client(auth_manager, franchise_manager, order_manager):
    app.dependency_overrides[get_auth_manager] = lambda: auth_manager
    app.dependency_overrides[get_franchise_manager] = lambda: franchise_manager
    app.dependency_overrides[get_order_manager] = lambda: order_manager
    try:
        yield TestClient(app, raise_server_exceptions=False)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def admin_token(client, admin_user) -> str:
    resp = client.put("/api/auth", json={"email": "admin@jwt.com", "password": "admin"})
    assert resp.status_code == 200
    return resp.json()["token"]


@pytest.fixture
def diner_token(client, diner_user) -> str:
    resp = client.put("/api/auth", json={"email": "diner@jwt.com", "password": "diner"})
    assert resp.status_code == 200
    return resp.json()["token"]
