# tienda_core/tools/pricing/points.py
from __future__ import annotations

from typing import Sequence

from .agg.base import lines_frame
from .config import POINT_VALUE
from .dto import CartLine
from .schema import LINE_TOTAL, REDEEMABLE


def redeemable_subtotal(lines: Sequence[CartLine]) -> float:
    """Σ(price × quantity) solo sobre líneas marcadas redeemable_with_points."""
    df = lines_frame(lines)
    if df.empty:
        return 0.0
    return float(df.loc[df[REDEEMABLE].astype(bool), LINE_TOTAL].sum())


def calculate_points_discount(
    lines: Sequence[CartLine],
    use_points: bool,
    available_points: float,
    point_value: float = POINT_VALUE,
) -> float:
    """Descuento máximo aplicable con puntos.

    Nunca supera el valor del saldo ni el subtotal de las líneas canjeables,
    así no se descuenta mercancía no canjeable ni se deja el saldo en negativo.
    """
    if not use_points:
        return 0.0
    if not any(ln.is_redeemable for ln in lines):
        return 0.0
    balance_value = max(0.0, float(available_points)) * point_value
    return min(balance_value, redeemable_subtotal(lines))


def discount_to_points(discount: float, point_value: float = POINT_VALUE) -> float:
    """Puntos consumidos por un descuento (inverso de point_value)."""
    if discount <= 0 or point_value <= 0:
        return 0.0
    return round(discount / point_value, 2)
