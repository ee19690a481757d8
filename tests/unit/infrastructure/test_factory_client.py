"""
Name: FactoryClient Tests

Responsibilities:
  - Request shape (URL, Bearer header, diner + order body)
  - Success returns reportUrl + jwt
  - Non-2xx and transport errors raise UpstreamFailureError (no retry)
"""

from datetime import datetime, timezone
from decimal import Decimal
from unittest.mock import patch

import httpx
import pytest

from pizza_service.crosscutting.exceptions import UpstreamFailureError
from pizza_service.domain.entities import Order, OrderItem
from pizza_service.identity.users import User
from pizza_service.infrastructure.services.factory_client import (
    FACTORY_FAILURE_MESSAGE,
    FactoryClient,
    order_payload,
)

pytestmark = pytest.mark.unit

POST_PATH = "pizza_service.infrastructure.services.factory_client.httpx.post"
FACTORY_URL = "https://factory.test/"

DINER = User(id=2, name="Diner", email="d@jwt.com")
ORDER = Order(
    id=10,
    diner_id=2,
    franchise_id=1,
    store_id=4,
    date=datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc),
    items=(OrderItem(100, 1, "Veggie", Decimal("0.05")),),
)


def _response(status: int, payload=None, text=None) -> httpx.Response:
    request = httpx.Request("POST", "https://factory.test/api/order")
    if payload is not None:
        return httpx.Response(status, json=payload, request=request)
    return httpx.Response(status, text=text or "", request=request)


@pytest.fixture
def client() -> FactoryClient:
    return FactoryClient(FACTORY_URL, "factory-key", timeout_s=2.5)


def test_order_payload_uses_camel_case_and_exact_prices():
    payload = order_payload(ORDER)

    assert payload["franchiseId"] == 1
    assert payload["storeId"] == 4
    assert payload["items"] == [{"menuId": 1, "description": "Veggie", "price": "0.05"}]
    assert payload["date"].startswith("2024-06-01T12:00:00")


def test_success_returns_receipt(client):
    with patch(
        POST_PATH,
        return_value=_response(200, {"reportUrl": "https://r/1", "jwt": "abc.def.ghi"}),
    ) as post:
        receipt = client.submit_order(DINER, ORDER)

    assert receipt.report_url == "https://r/1"
    assert receipt.jwt == "abc.def.ghi"

    args, kwargs = post.call_args
    assert args[0] == "https://factory.test/api/order"
    assert kwargs["headers"]["Authorization"] == "Bearer factory-key"
    assert kwargs["timeout"] == 2.5
    assert kwargs["json"]["diner"] == {"id": 2, "name": "Diner", "email": "d@jwt.com"}
    assert kwargs["json"]["order"]["id"] == 10


def test_rejection_keeps_report_url(client):
    with patch(POST_PATH, return_value=_response(500, {"reportUrl": "https://r/err"})):
        with pytest.raises(UpstreamFailureError) as exc_info:
            client.submit_order(DINER, ORDER)

    err = exc_info.value
    assert err.message == FACTORY_FAILURE_MESSAGE
    assert err.report_url == "https://r/err"
    assert err.status_code == 500
    assert err.order is ORDER


def test_rejection_with_non_json_body(client):
    with patch(POST_PATH, return_value=_response(502, text="<html>bad gateway</html>")):
        with pytest.raises(UpstreamFailureError) as exc_info:
            client.submit_order(DINER, ORDER)

    assert exc_info.value.report_url is None


def test_timeout_is_upstream_failure_without_retry(client):
    with patch(POST_PATH, side_effect=httpx.ReadTimeout("slow")) as post:
        with pytest.raises(UpstreamFailureError) as exc_info:
            client.submit_order(DINER, ORDER)

    assert post.call_count == 1
    assert isinstance(exc_info.value.original_error, httpx.ReadTimeout)


def test_base_url_is_required():
    with pytest.raises(ValueError):
        FactoryClient("", "key")


def test_order_payload_keeps_stored_precision():
    order = Order(
        id=11,
        diner_id=2,
        franchise_id=1,
        store_id=4,
        date=ORDER.date,
        items=(OrderItem(101, 2, "Pepperoni", Decimal("0.0042")),),
    )

    assert order_payload(order)["items"][0]["price"] == "0.0042"
