from __future__ import annotations

from typing import List, Sequence

from ..dto import AccountClassLiteral, CartLine, IvaGroup
from ..schema import NO_IVA_KEY
from .base import IPricingHandler, frame_total, lines_frame


class RetailHandler(IPricingHandler):
    """Cuentas particulares: precios con impuestos incluidos, nunca se desglosa IVA.

    Siempre un único grupo 'no-iva' con todas las líneas, aunque traigan campo iva.
    """
    account_class: AccountClassLiteral = "retail"

    def group(self, lines: Sequence[CartLine]) -> List[IvaGroup]:
        subtotal = frame_total(lines_frame(lines))
        return [IvaGroup(iva_key=NO_IVA_KEY, iva_value=None, items=list(lines), subtotal=subtotal)]
