# tienda_core/tools/pricing/totals.py
from __future__ import annotations

from typing import Sequence
import logging

from .aggregator import group_breakdowns, group_by_iva, simple_subtotal, totals_from_breakdowns
from .config import POINT_VALUE, SHIPPING_DEFAULT
from .dto import AccountClassLiteral, CartLine, OrderTotals
from .validators import validate_shipping
from .points import calculate_points_discount, discount_to_points

logger = logging.getLogger(__name__)


def resolve_final_total(
    lines: Sequence[CartLine],
    account_class: AccountClassLiteral,
    use_points: bool,
    available_points: float,
    shipping: float = SHIPPING_DEFAULT,
    point_value: float = POINT_VALUE,
) -> OrderTotals:
    """Combina agregación, envío y descuento por puntos en un único OrderTotals.

    - business: final = grand_total (con IVA) + shipping - descuento
    - retail:   final = subtotal simple + shipping - descuento
    El resultado nunca baja de 0.
    """
    validate_shipping(shipping)

    groups = group_by_iva(lines, account_class)
    breakdown = group_breakdowns(groups, account_class)
    discount = calculate_points_discount(lines, use_points, available_points, point_value)

    if account_class == "business":
        grand = totals_from_breakdowns(breakdown)
        subtotal, iva_amount, total = grand.grand_subtotal, grand.grand_iva_amount, grand.grand_total
    else:
        subtotal = simple_subtotal(lines)
        iva_amount, total = 0.0, subtotal

    final_total = total + shipping - discount
    if final_total < 0:
        logger.warning("Descuento (%.2f) supera el total a pagar (%.2f); se ajusta a 0.", discount, total + shipping)
        final_total = 0.0

    return OrderTotals(
        account_class=account_class,
        subtotal=subtotal,
        iva_amount=iva_amount,
        total=total,
        shipping=shipping,
        points_discount=discount,
        used_points=discount_to_points(discount, point_value),
        final_total=final_total,
        breakdown=breakdown,
    )
