# tienda_core/tools/pricing/aggregator.py
from __future__ import annotations

from typing import List, Sequence

from .agg.base import frame_total, get_handler, lines_frame
from .dto import AccountClassLiteral, CartLine, GrandTotals, GroupBreakdown, IvaGroup
from .iva import compute_tax_amount


def group_by_iva(lines: Sequence[CartLine], account_class: AccountClassLiteral) -> List[IvaGroup]:
    """Agrupa las líneas del carrito según la clase de cuenta (ver agg/)."""
    return get_handler(account_class).group(lines)


def simple_subtotal(lines: Sequence[CartLine]) -> float:
    """Σ(price × quantity) sobre todo el carrito, sin agrupar."""
    return frame_total(lines_frame(lines))


def group_breakdowns(groups: Sequence[IvaGroup], account_class: AccountClassLiteral) -> List[GroupBreakdown]:
    out: List[GroupBreakdown] = []
    for grp in groups:
        tax = compute_tax_amount(grp.subtotal, grp.iva_value, account_class)
        out.append(
            GroupBreakdown(
                iva_key=grp.iva_key,
                iva_value=grp.iva_value,
                subtotal=tax.subtotal,
                iva_amount=tax.iva_amount,
                total=tax.total,
            )
        )
    return out


def totals_from_breakdowns(breakdowns: Sequence[GroupBreakdown]) -> GrandTotals:
    return GrandTotals(
        grand_subtotal=sum(b.subtotal for b in breakdowns),
        grand_iva_amount=sum(b.iva_amount for b in breakdowns),
        grand_total=sum(b.total for b in breakdowns),
    )


def compute_grand_totals(lines: Sequence[CartLine], account_class: AccountClassLiteral) -> GrandTotals:
    """Suma los desgloses de IVA de cada grupo."""
    groups = group_by_iva(lines, account_class)
    return totals_from_breakdowns(group_breakdowns(groups, account_class))
