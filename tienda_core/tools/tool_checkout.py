from __future__ import annotations

from typing import Optional, List, Dict, Any
import math

import numpy as np
from pydantic import BaseModel, ValidationError

# === Capa de dominio =========================================================
from .pricing.config import AppConfig
from .pricing.dto import CartLine, OrderSummaryQuery, RewardItem, RewardsSummaryQuery
from .pricing.exceptions import PricingError
from .pricing.payloads import build_redemption_request
from .pricing.rewards import RewardsCart
from .pricing.service import run_order_summary, run_rewards_summary

# Config por defecto
DEFAULT_CFG = AppConfig()


# ------------------------------- Helpers -------------------------------------
def _norm_account(x: Optional[str]) -> Optional[str]:
    if not x:
        return "retail"
    v = x.lower().strip()
    # Normalizamos sinónimos que llegan desde la UI / roles de usuario
    mapping = {
        # business
        "business": "business",
        "empresa": "business",
        "b2b": "business",
        "profesional": "business",
        "company": "business",
        # retail
        "retail": "retail",
        "particular": "retail",
        "cliente": "retail",
        "customer": "retail",
        "b2c": "retail",
    }
    return mapping.get(v, v)


def _scrub(obj: Any) -> Any:
    """Escalares numpy -> Python y NaN/inf -> None, en profundidad."""
    if isinstance(obj, dict):
        return {str(k): _scrub(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple)):
        return [_scrub(v) for v in obj]
    if isinstance(obj, np.generic):
        obj = obj.item()
    if isinstance(obj, float) and not math.isfinite(obj):
        return None
    return obj


def _to_payload(model: BaseModel) -> Dict[str, Any]:
    """Resultado del servicio o request -> dict listo para json.dumps."""
    return _scrub(model.model_dump())


def _error(exc: Exception) -> Dict[str, Any]:
    return {"ok": False, "error": f"{type(exc).__name__}: {exc}"}


# --------------------------- Tools públicas -----------------------------------
def order_summary(
    lines: List[Dict[str, Any]],
    account_class: Optional[str] = "retail",
    use_points: bool = False,
    available_points: float = 0,
    shipping: Optional[float] = None,
    locale: str = "es-ES",
    currency: str = "EUR",
) -> Dict[str, Any]:
    """
    Resumen de totales del carrito monetario.

    Parámetros:
      - lines: líneas {id, name, price, quantity, iva?, redeemable_with_points?, ...}.
      - account_class: "retail" | "business". Se aceptan sinónimos como "empresa" / "particular".
      - use_points/available_points: aplicar descuento con el saldo de puntos.
      - shipping: None => envío por defecto de la configuración.

    Retorna:
      dict JSON-serializable con llaves: ok, account_class, totals, display, warnings, meta, error.
    """
    try:
        q = OrderSummaryQuery(
            lines=[CartLine(**ln) for ln in lines or []],
            account_class=_norm_account(account_class),
            use_points=use_points,
            available_points=available_points,
            shipping=shipping,
            locale=locale,
            currency=currency,
        )
        return _to_payload(run_order_summary(q, app_cfg=DEFAULT_CFG))
    except (ValidationError, PricingError, TypeError) as exc:
        return _error(exc)


def rewards_summary(
    rewards: List[Dict[str, Any]],
    balance: int = 0,
    locale: str = "es-ES",
    currency: str = "EUR",
) -> Dict[str, Any]:
    """Totales del carrito de recompensas y si el saldo alcanza."""
    try:
        q = RewardsSummaryQuery(
            rewards=[RewardItem(**r) for r in rewards or []],
            balance=balance,
            locale=locale,
            currency=currency,
        )
        return _to_payload(run_rewards_summary(q, app_cfg=DEFAULT_CFG))
    except (ValidationError, PricingError, TypeError) as exc:
        return _error(exc)


def redemption_payload(rewards: List[Dict[str, Any]]) -> Dict[str, Any]:
    """Cuerpo listo para POST /rewards/redeem (respeta topes de stock)."""
    try:
        cart = RewardsCart([RewardItem(**r) for r in rewards or []])
        req = build_redemption_request(cart.items)
        return {"ok": True, "request": _to_payload(req)}
    except (ValidationError, PricingError, TypeError) as exc:
        return _error(exc)
