from __future__ import annotations

from typing import List, Sequence
import logging

import pandas as pd

from ..dto import AccountClassLiteral, CartLine, IvaGroup
from ..schema import IVA_KEY, IVA_VALUE, LINE_IDX, LINE_TOTAL
from .base import IPricingHandler, lines_frame

logger = logging.getLogger(__name__)


class BusinessHandler(IPricingHandler):
    """Cuentas empresa: líneas agrupadas por IVA normalizado.

    Reglas:
      - 0.21 y 21 caen en el mismo grupo ("21")
      - líneas sin IVA van al grupo 'sin-iva'
      - grupos ordenados por iva_value ascendente; el grupo sin valor, siempre al final
      - dentro de cada grupo se respeta el orden de inserción
    """
    account_class: AccountClassLiteral = "business"

    def group(self, lines: Sequence[CartLine]) -> List[IvaGroup]:
        df = lines_frame(lines)
        if df.empty:
            return []

        # sort=False conserva el orden de primera aparición; el orden final lo da sort_values
        g = df.groupby(IVA_KEY, sort=False)
        grouped = g.agg(
            iva_value=(IVA_VALUE, "first"),
            subtotal=(LINE_TOTAL, "sum"),
            line_idx=(LINE_IDX, list),
        ).reset_index()

        # mergesort = orden estable ante empates
        grouped = grouped.sort_values(by=IVA_VALUE, ascending=True, na_position="last", kind="mergesort")

        out: List[IvaGroup] = []
        for row in grouped.itertuples(index=False):
            raw_value = getattr(row, IVA_VALUE)
            out.append(
                IvaGroup(
                    iva_key=str(getattr(row, IVA_KEY)),
                    iva_value=None if pd.isna(raw_value) else int(raw_value),
                    items=[lines[int(i)] for i in getattr(row, LINE_IDX)],
                    subtotal=float(row.subtotal),
                )
            )
        logger.debug("Carrito agrupado en %d grupos de IVA", len(out))
        return out
