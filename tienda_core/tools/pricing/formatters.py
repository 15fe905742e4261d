# tienda_core/tools/pricing/formatters.py
from __future__ import annotations

from dataclasses import replace
from datetime import datetime, timezone
from typing import Any, Dict, List

from .dto import MetaInfo, OrderTotals, RewardItem
from .i18n import DEFAULT_LOCALE, LocaleConfig, add_formatted_fields, format_iva

TOTALS_CURRENCY_FIELDS = ("subtotal", "iva_amount", "total", "shipping", "points_discount", "final_total")
GROUP_CURRENCY_FIELDS = ("subtotal", "iva_amount", "total")


def locale_for(locale: str, currency: str) -> LocaleConfig:
    cfg = replace(DEFAULT_LOCALE, locale=locale, currency=currency)
    if currency != DEFAULT_LOCALE.currency:
        cfg = replace(cfg, currency_symbol=f"{currency} ")
    return cfg


def build_meta(line_count: int, locale: str, currency: str) -> MetaInfo:
    ts = datetime.now(tz=timezone.utc).isoformat(timespec="seconds")
    return MetaInfo(line_count=line_count, generated_at=ts, currency=currency, locale=locale)


def totals_display(totals: OrderTotals, cfg: LocaleConfig = DEFAULT_LOCALE) -> Dict[str, Any]:
    """Totales con campos *_fmt listos para la UI; el desglose solo para cuentas empresa."""
    row = totals.model_dump(exclude={"breakdown"})
    out = add_formatted_fields(row, TOTALS_CURRENCY_FIELDS, points_fields=("used_points",), cfg=cfg)
    if totals.account_class == "business":
        groups: List[Dict[str, Any]] = []
        for b in totals.breakdown:
            g = add_formatted_fields(b.model_dump(), GROUP_CURRENCY_FIELDS, cfg=cfg)
            g["iva_label"] = "Sin IVA" if b.iva_value is None else format_iva(b.iva_value)
            groups.append(g)
        out["breakdown"] = groups
    return out


def reward_lines_display(items: List[RewardItem], cfg: LocaleConfig = DEFAULT_LOCALE) -> List[Dict[str, Any]]:
    out: List[Dict[str, Any]] = []
    for r in items:
        row = {
            "id": r.id,
            "name": r.name,
            "points_cost": r.points_cost,
            "quantity": r.quantity,
            "stock": r.stock,
            "subtotal_points": r.subtotal_points,
            "at_stock_limit": r.stock is not None and r.quantity >= r.stock,
        }
        out.append(add_formatted_fields(row, (), points_fields=("points_cost", "subtotal_points"), cfg=cfg))
    return out
