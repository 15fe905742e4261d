# tienda_core/tools/pricing/cache.py
from __future__ import annotations

from collections import OrderedDict
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional, Sequence, Tuple

from .dto import CartLine, OrderTotals

CartKey = Tuple[Any, ...]


@dataclass(frozen=True)
class CacheConfig:
    max_items: int = 128


class TotalsCache:
    """Memo de OrderTotals por estado de carrito, con expulsión del menos usado.

    Guarda y entrega copias profundas: un llamador que modifique su resultado
    no altera lo que reciben los siguientes. No es thread-safe.
    """

    def __init__(self, cfg: Optional[CacheConfig] = None) -> None:
        self._max_items = (cfg or CacheConfig()).max_items
        self._entries: "OrderedDict[CartKey, OrderTotals]" = OrderedDict()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: CartKey) -> bool:
        return key in self._entries

    def lookup(self, key: CartKey) -> Optional[OrderTotals]:
        totals = self._entries.get(key)
        if totals is None:
            return None
        self._entries.move_to_end(key)
        return totals.model_copy(deep=True)

    def store(self, key: CartKey, totals: OrderTotals) -> None:
        self._entries[key] = totals.model_copy(deep=True)
        self._entries.move_to_end(key)
        while len(self._entries) > self._max_items:
            self._entries.popitem(last=False)

    def clear(self) -> None:
        self._entries.clear()


def _line_key(ln: CartLine) -> Tuple[Any, ...]:
    # solo campos que afectan al cálculo (nombre e imagen no); 1 y "1" son productos distintos
    return (ln.id, ln.unit_type, ln.price, ln.quantity, ln.iva, ln.is_redeemable)


def build_cart_key(
    lines: Sequence[CartLine],
    account_class: str,
    use_points: bool,
    available_points: float,
    shipping: float,
    extra: Optional[Dict[str, Any]] = None,
) -> CartKey:
    """Convierte el estado del carrito en una clave hashable para cachear totales.
    El orden de las líneas importa: define el orden dentro de cada grupo de IVA.
    """
    key = (
        account_class,
        bool(use_points),
        float(available_points),
        float(shipping),
        tuple(_line_key(ln) for ln in lines),
    )
    if extra:
        return key + tuple(sorted(extra.items()))
    return key


def totals_for(cache: TotalsCache, key: CartKey, compute_fn: Callable[[], OrderTotals]) -> OrderTotals:
    """Totales cacheados para `key`; si faltan, se calculan y se guardan."""
    totals = cache.lookup(key)
    if totals is not None:
        return totals
    totals = compute_fn()
    cache.store(key, totals)
    return totals
