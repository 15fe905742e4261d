# tienda_core/tools/pricing/payloads.py
from __future__ import annotations

from typing import Any, Dict, Iterable, Optional, Sequence

from .dto import CartLine, OrderLinePayload, OrderRequest, OrderTotals, RedemptionLine, RedemptionRequest, RewardItem
from .exceptions import EmptyCart
from .rewards import get_total_points_cost


def build_redemption_request(items: Iterable[RewardItem]) -> RedemptionRequest:
    """Serializa el carrito de recompensas al cuerpo de POST /rewards/redeem.
    Transformación pura; el envío vive en client.py.
    """
    items = list(items)
    if not items:
        raise EmptyCart("El carrito de recompensas está vacío.")
    return RedemptionRequest(
        rewards=[
            RedemptionLine(reward_id=r.id, quantity=r.quantity, points_cost=r.points_cost)
            for r in items
        ],
        total_points=get_total_points_cost(items),
    )


def build_order_request(
    lines: Sequence[CartLine],
    totals: OrderTotals,
    currency: str,
    payment: Optional[Dict[str, Any]] = None,
) -> OrderRequest:
    """Cuerpo de POST /orders a partir del carrito y los totales ya resueltos."""
    if not lines:
        raise EmptyCart("El carrito está vacío.")
    return OrderRequest(
        total_amount=round(totals.final_total, 2),
        currency=currency,
        used_points=totals.used_points,
        order_lines=[
            OrderLinePayload(
                product_id=ln.id,
                product_name=ln.name,
                quantity=ln.quantity,
                unit_price=ln.price,
            )
            for ln in lines
        ],
        payment=dict(payment or {}),
    )
