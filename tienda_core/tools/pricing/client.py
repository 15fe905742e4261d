# tienda_core/tools/pricing/client.py
from __future__ import annotations

from typing import Any, Dict, Optional, Protocol
import logging

import requests

from .config import AppConfig
from .dto import OrderRequest, PointsBalance, RedemptionRequest
from .exceptions import RedemptionRejected, TransportError

logger = logging.getLogger(__name__)

GENERIC_ERROR = "Error al procesar la solicitud. Inténtalo de nuevo."


class StoreApi(Protocol):
    """Lo que el núcleo necesita de la API externa."""
    def get_points_balance(self) -> PointsBalance: ...
    def redeem_rewards(self, req: RedemptionRequest) -> Dict[str, Any]: ...
    def create_order(self, req: OrderRequest) -> Dict[str, Any]: ...


def _error_message(resp: requests.Response) -> str:
    """Extrae `message` del cuerpo de error; NestJS puede devolver una lista."""
    try:
        body = resp.json()
    except ValueError:
        return resp.text or GENERIC_ERROR
    msg = body.get("message") if isinstance(body, dict) else None
    if isinstance(msg, list):
        return "; ".join(str(m) for m in msg)
    return str(msg) if msg else GENERIC_ERROR


def parse_points_balance(payload: Dict[str, Any]) -> PointsBalance:
    """Acepta `{"balance": {...}, "transactions": [...]}` o directamente `{"total_points": n}`."""
    bal = payload.get("balance", payload) if isinstance(payload, dict) else None
    if not bal:
        return PointsBalance(total_points=0)
    return PointsBalance(user_id=bal.get("user_id"), total_points=int(bal.get("total_points") or 0))


class HttpStoreApi:
    """Cliente síncrono de la API de la tienda (requests)."""

    def __init__(self, cfg: Optional[AppConfig] = None, token: Optional[str] = None, session: Optional[requests.Session] = None) -> None:
        self._cfg = cfg or AppConfig()
        self._session = session or requests.Session()
        self._headers = {"Authorization": f"Bearer {token}"} if token else {}

    def _url(self, path: str) -> str:
        return f"{self._cfg.api_base_url.rstrip('/')}/{path.lstrip('/')}"

    def _request(self, method: str, path: str, body: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        try:
            resp = self._session.request(
                method, self._url(path), json=body, headers=self._headers, timeout=self._cfg.api_timeout
            )
        except requests.RequestException as exc:
            raise TransportError(str(exc)) from exc

        if not resp.ok:
            message = _error_message(resp)
            logger.warning("%s %s rechazado (%s): %s", method, path, resp.status_code, message)
            raise RedemptionRejected(message, status_code=resp.status_code)
        if not resp.content:
            return {}
        try:
            return resp.json()
        except ValueError as exc:
            raise TransportError(f"Respuesta no JSON en {path}") from exc

    def get_points_balance(self) -> PointsBalance:
        return parse_points_balance(self._request("GET", "/points/me"))

    def redeem_rewards(self, req: RedemptionRequest) -> Dict[str, Any]:
        return self._request("POST", "/rewards/redeem", req.model_dump())

    def create_order(self, req: OrderRequest) -> Dict[str, Any]:
        return self._request("POST", "/orders", req.model_dump())
