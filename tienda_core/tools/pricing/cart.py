# tienda_core/tools/pricing/cart.py
from __future__ import annotations

from typing import Iterator, List, Optional
import logging

from .dto import CartLine, IdType

logger = logging.getLogger(__name__)


def _clamp_to_stock(quantity: int, stock: Optional[int]) -> int:
    if stock is not None and quantity > stock:
        return stock
    return quantity


class ShoppingCart:
    """Carrito monetario de una sesión. Se inyecta explícitamente a quien lo use.

    Una línea se identifica por (id, unit_type): el mismo producto en 'Cajas'
    y en 'Unidades' son líneas distintas. Las líneas a cantidad 0 se eliminan.
    """

    def __init__(self, lines: Optional[List[CartLine]] = None) -> None:
        self._lines: List[CartLine] = []
        for ln in lines or []:
            self.add(ln)

    @property
    def lines(self) -> List[CartLine]:
        return list(self._lines)

    def __len__(self) -> int:
        return len(self._lines)

    def __iter__(self) -> Iterator[CartLine]:
        return iter(list(self._lines))

    def _index(self, product_id: IdType, unit_type: Optional[str]) -> Optional[int]:
        for i, ln in enumerate(self._lines):
            if ln.id == product_id and ln.unit_type == unit_type:
                return i
        return None

    def add(self, line: CartLine) -> None:
        """Agrega una línea o suma su cantidad a la existente."""
        if line.stock is not None and line.stock <= 0:
            logger.debug("Producto %s sin stock; no se agrega.", line.id)
            return

        i = self._index(line.id, line.unit_type)
        if i is None:
            qty = _clamp_to_stock(line.quantity, line.stock)
            self._lines.append(line.model_copy(update={"quantity": qty}))
            return

        current = self._lines[i]
        qty = _clamp_to_stock(current.quantity + line.quantity, line.stock)
        if qty != current.quantity + line.quantity:
            logger.debug("Cantidad de %s ajustada al stock (%s).", line.id, line.stock)
        self._lines[i] = current.model_copy(update={"quantity": qty, "stock": line.stock})

    def update_quantity(self, product_id: IdType, quantity: int, unit_type: Optional[str] = None) -> None:
        """Fija la cantidad de una línea; <= 0 la elimina.

        Sin unit_type afecta a todas las líneas del producto, sea cual sea su unidad.
        """
        def matches(ln: CartLine) -> bool:
            return ln.id == product_id and (unit_type is None or ln.unit_type == unit_type)

        if quantity <= 0:
            self._lines = [ln for ln in self._lines if not matches(ln)]
            return
        self._lines = [
            ln.model_copy(update={"quantity": _clamp_to_stock(quantity, ln.stock)}) if matches(ln) else ln
            for ln in self._lines
        ]

    def remove(self, product_id: IdType) -> None:
        """Quita todas las líneas del producto, sea cual sea su unidad."""
        self._lines = [ln for ln in self._lines if ln.id != product_id]

    def clear(self) -> None:
        self._lines.clear()

    def total_units(self) -> int:
        """Unidades físicas (cantidad × unidades por caja cuando aplica)."""
        return sum(ln.quantity * (ln.units_per_box or 1) for ln in self._lines)
