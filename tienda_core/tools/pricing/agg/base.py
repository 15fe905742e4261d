from __future__ import annotations

from typing import List, Protocol, Sequence
import logging

import numpy as np
import pandas as pd

from ..dto import AccountClassLiteral, CartLine, IvaGroup
from ..exceptions import InvalidParam
from ..iva import normalize_iva_percent
from ..schema import FRAME_COLS, IVA_KEY, IVA_VALUE, LINE_IDX, LINE_TOTAL, PRICE, QTY, REDEEMABLE, SIN_IVA_KEY

logger = logging.getLogger(__name__)


class IPricingHandler(Protocol):
    """Contrato de los agregadores por clase de cuenta."""
    account_class: AccountClassLiteral

    def group(self, lines: Sequence[CartLine]) -> List[IvaGroup]: ...


def iva_key_for(line: CartLine) -> str:
    """Clave de grupo: porcentaje normalizado o 'sin-iva' si la línea no trae IVA."""
    if line.iva is None:
        return SIN_IVA_KEY
    return normalize_iva_percent(line.iva)


def lines_frame(lines: Sequence[CartLine]) -> pd.DataFrame:
    """Frame de trabajo (una fila por línea, en orden de inserción)."""
    if not lines:
        return pd.DataFrame(columns=FRAME_COLS)

    prices = np.array([ln.price for ln in lines], dtype=float)
    qtys = np.array([ln.quantity for ln in lines], dtype=float)
    keys = [iva_key_for(ln) for ln in lines]
    values = [np.nan if k == SIN_IVA_KEY else float(k) for k in keys]

    return pd.DataFrame(
        {
            LINE_IDX: np.arange(len(lines)),
            PRICE: prices,
            QTY: qtys,
            LINE_TOTAL: np.multiply(prices, qtys),
            REDEEMABLE: [ln.is_redeemable for ln in lines],
            IVA_KEY: keys,
            IVA_VALUE: values,
        }
    )


def frame_total(frame: pd.DataFrame) -> float:
    if frame.empty:
        return 0.0
    return float(frame[LINE_TOTAL].sum())


def get_handler(account_class: str) -> IPricingHandler:
    """Devuelve el handler adecuado para la clase de cuenta."""
    if account_class == "retail":
        from .retail import RetailHandler
        return RetailHandler()
    if account_class == "business":
        from .business import BusinessHandler
        return BusinessHandler()
    raise InvalidParam(f"Clase de cuenta no soportada: {account_class}")
