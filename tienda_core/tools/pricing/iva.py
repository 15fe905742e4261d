# tienda_core/tools/pricing/iva.py
from __future__ import annotations

import math
from typing import Optional

from .dto import AccountClassLiteral, TaxBreakdown


def round_half_up(value: float) -> int:
    """Redondeo 'escolar' (0.5 sube), distinto del redondeo bancario de round()."""
    return int(math.floor(value + 0.5))


def normalize_iva_percent(raw: Optional[float]) -> str:
    """Normaliza un IVA a porcentaje entero en texto.

    Los orígenes de datos mezclan fracciones (0.21) y porcentajes (21):
      - None        => "0"
      - 0 < raw < 1 => fracción, se multiplica por 100
      - resto       => ya es porcentaje (incluye 0)
    """
    if raw is None:
        return "0"
    if 0 < raw < 1:
        return str(round_half_up(raw * 100))
    return str(round_half_up(raw))


def compute_tax_amount(subtotal: float, iva_value: Optional[float], account_class: AccountClassLiteral) -> TaxBreakdown:
    """Calcula el IVA de un subtotal. Solo las cuentas empresa ven IVA desglosado;
    los particulares trabajan con precios con impuestos incluidos.
    """
    if account_class != "business" or not iva_value:
        return TaxBreakdown(subtotal=subtotal, iva_amount=0.0, total=subtotal)
    iva_amount = subtotal * (iva_value / 100)
    return TaxBreakdown(subtotal=subtotal, iva_amount=iva_amount, total=subtotal + iva_amount)
