"""
============================================================
TARJETA CRC — infrastructure/services/factory_client.py
============================================================
Class: FactoryClient

Responsibilities:
  - Enviar un pedido confirmado a la fábrica externa (POST /api/order).
  - Autenticar con Bearer {factory_api_key}.
  - Devolver el recibo (reportUrl + jwt firmado por la fábrica).
  - Traducir no-2xx / errores de transporte a UpstreamFailureError,
    conservando el reportUrl si la fábrica lo devolvió.

Collaborators:
  - httpx (HTTP client)
  - application.order_manager (único consumidor)

Notes:
  - Sin retry: la falla se reporta inmediatamente al diner.
  - Timeout explícito: la request nunca queda colgada.
============================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional

import httpx

from ...crosscutting.exceptions import UpstreamFailureError
from ...crosscutting.logger import logger
from ...domain.entities import Order
from ...identity.users import User

FACTORY_FAILURE_MESSAGE = "Failed to fulfill order at factory"
_ORDER_PATH = "/api/order"


@dataclass(frozen=True, slots=True)
class FactoryReceipt:
    """Respuesta exitosa de la fábrica."""

    report_url: Optional[str]
    jwt: Optional[str]


def order_payload(order: Order) -> Dict[str, Any]:
    """Order -> JSON de la fábrica (camelCase, precios como string decimal exacto)."""
    return {
        "id": order.id,
        "franchiseId": order.franchise_id,
        "storeId": order.store_id,
        "date": order.date.isoformat(),
        "items": [
            {
                "menuId": item.menu_id,
                "description": item.description,
                "price": str(item.price),
            }
            for item in order.items
        ],
    }


def _safe_json(resp: httpx.Response) -> Dict[str, Any]:
    """Body JSON como dict; {} si no es JSON o no es objeto."""
    try:
        data = resp.json()
    except ValueError:
        return {}
    return data if isinstance(data, dict) else {}


class FactoryClient:
    """Cliente HTTP síncrono de la pizza factory."""

    def __init__(self, base_url: str, api_key: str, *, timeout_s: float = 10.0) -> None:
        if not base_url:
            raise ValueError("base_url is required for FactoryClient")
        self._url = base_url.rstrip("/") + _ORDER_PATH
        self._headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {api_key}",
        }
        self._timeout = timeout_s

    def submit_order(self, diner: User, order: Order) -> FactoryReceipt:
        """
        Envía el pedido a la fábrica.

        Errores:
            - UpstreamFailureError ante no-2xx o error de red/timeout.
        """
        body = {
            "diner": {"id": diner.id, "name": diner.name, "email": diner.email},
            "order": order_payload(order),
        }
        try:
            resp = httpx.post(
                self._url,
                json=body,
                headers=self._headers,
                timeout=self._timeout,
            )
        except httpx.HTTPError as exc:
            reason = "timeout" if isinstance(exc, httpx.TimeoutException) else "transport"
            logger.warning(
                "factory: error de red",
                extra={"order_id": order.id, "reason": reason, "error": str(exc)},
            )
            raise UpstreamFailureError(
                FACTORY_FAILURE_MESSAGE, order=order, original_error=exc
            ) from exc

        data = _safe_json(resp)
        report_url = data.get("reportUrl")

        if not resp.is_success:
            logger.warning(
                "factory: pedido rechazado",
                extra={"order_id": order.id, "status": resp.status_code},
            )
            raise UpstreamFailureError(
                FACTORY_FAILURE_MESSAGE,
                report_url=report_url,
                order=order,
                status_code=resp.status_code,
            )

        logger.info(
            "factory: pedido aceptado",
            extra={"order_id": order.id, "status": resp.status_code},
        )
        return FactoryReceipt(report_url=report_url, jwt=data.get("jwt"))
