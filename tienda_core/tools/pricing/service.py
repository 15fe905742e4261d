# tienda_core/tools/pricing/service.py
from __future__ import annotations

from typing import List, Optional
import logging

from .cache import CacheConfig, TotalsCache, build_cart_key, totals_for
from .config import AppConfig
from .dto import OrderSummaryQuery, OrderSummaryResult, OrderTotals, RewardsSummaryQuery, RewardsSummaryResult
from .exceptions import PricingError
from .formatters import build_meta, locale_for, reward_lines_display, totals_display
from .i18n import add_formatted_fields
from .rewards import RewardsCart, can_afford, remaining_points
from .totals import resolve_final_total
from .validators import validate_query

logger = logging.getLogger(__name__)
_CACHE = TotalsCache(CacheConfig(max_items=AppConfig().cache_max_items))

NO_REDEEMABLE_WARNING = "Ningún producto del carrito se puede pagar con puntos."
NO_BALANCE_WARNING = "No tienes saldo de puntos para aplicar el descuento."


def points_warnings(q: OrderSummaryQuery) -> List[str]:
    """Avisos cuando se pidió pagar con puntos y no se pudo aplicar descuento."""
    if not q.lines:
        return []
    if not any(ln.is_redeemable for ln in q.lines):
        return [NO_REDEEMABLE_WARNING]
    if q.available_points <= 0:
        return [NO_BALANCE_WARNING]
    return []


def run_order_summary(q: OrderSummaryQuery, app_cfg: Optional[AppConfig] = None) -> OrderSummaryResult:
    """
    Punto de entrada del core para el carrito monetario. Orquesta:
    validación -> totales (cacheados) -> campos formateados (OrderSummaryResult).
    """
    cfg = app_cfg or AppConfig()
    meta = build_meta(line_count=len(q.lines), locale=q.locale, currency=q.currency)
    try:
        validate_query(q)
        shipping = cfg.shipping_default if q.shipping is None else q.shipping
        key = build_cart_key(
            q.lines, q.account_class, q.use_points, q.available_points, shipping,
            extra={"point_value": cfg.point_value},
        )

        def _compute() -> OrderTotals:
            return resolve_final_total(
                q.lines, q.account_class, q.use_points, q.available_points,
                shipping=shipping, point_value=cfg.point_value,
            )

        totals: OrderTotals = totals_for(_CACHE, key, _compute)
        warnings = points_warnings(q) if q.use_points else []

        return OrderSummaryResult(
            ok=True,
            account_class=q.account_class,
            meta=meta,
            totals=totals,
            display=totals_display(totals, locale_for(q.locale, q.currency)),
            warnings=warnings,
        )

    except PricingError as pe:
        logger.exception("Error de dominio en el resumen de pedido.")
        return OrderSummaryResult(ok=False, account_class=q.account_class, meta=meta, error=str(pe))


def run_rewards_summary(q: RewardsSummaryQuery, app_cfg: Optional[AppConfig] = None) -> RewardsSummaryResult:
    """Resumen del carrito de recompensas frente al saldo conocido."""
    meta = build_meta(line_count=len(q.rewards), locale=q.locale, currency=q.currency)
    try:
        # se reconstruye por el carrito para aplicar los topes de stock
        cart = RewardsCart(q.rewards)
        total = cart.total_points_cost
        loc = locale_for(q.locale, q.currency)
        affordable = can_afford(total, q.balance)
        warnings = [] if affordable or not len(cart) else ["No tienes suficientes puntos para completar este canje."]
        summary = {
            "total_points": total,
            "total_items": cart.total_items,
            "balance": q.balance,
            "remaining_points": int(remaining_points(total, q.balance)),
        }
        return RewardsSummaryResult(
            ok=True,
            meta=meta,
            can_afford=affordable,
            lines=reward_lines_display(cart.items, loc),
            display=add_formatted_fields(summary, (), points_fields=tuple(summary), cfg=loc),
            warnings=warnings,
            **summary,
        )
    except PricingError as pe:
        logger.exception("Error de dominio en el resumen de recompensas.")
        return RewardsSummaryResult(ok=False, meta=meta, error=str(pe))
