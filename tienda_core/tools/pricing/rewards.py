# tienda_core/tools/pricing/rewards.py
from __future__ import annotations

from typing import Iterable, Iterator, List, Optional
import logging

from .dto import IdType, RewardItem

logger = logging.getLogger(__name__)


def get_total_points_cost(items: Iterable[RewardItem]) -> int:
    return sum(r.points_cost * r.quantity for r in items)


def get_total_items(items: Iterable[RewardItem]) -> int:
    return sum(r.quantity for r in items)


def can_afford(total_cost: float, balance: float) -> bool:
    """Chequeo orientativo; el servidor valida de nuevo al canjear."""
    return total_cost <= balance


def remaining_points(total_cost: float, balance: float) -> float:
    return balance - total_cost


class RewardsCart:
    """Carrito de recompensas canjeables con puntos.

    Estados por recompensa: Ausente -> EnCarrito(n) -> Ausente.
      - add: n = clamp(cantidad, 1, stock); stock 0 => no se agrega
      - increment: n+1, sin efecto al llegar al stock (la UI deshabilita el botón)
      - decrement: n-1; por debajo de 1 la línea se elimina
      - clear: vacía todo (también tras un canje exitoso)
    Invariante: 0 <= quantity <= stock cuando stock no es None.
    """

    def __init__(self, items: Optional[List[RewardItem]] = None) -> None:
        self._items: List[RewardItem] = []
        for it in items or []:
            self.merge(it)

    @property
    def items(self) -> List[RewardItem]:
        return list(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[RewardItem]:
        return iter(list(self._items))

    def _index(self, reward_id: IdType) -> Optional[int]:
        for i, r in enumerate(self._items):
            if r.id == reward_id:
                return i
        return None

    def get(self, reward_id: IdType) -> Optional[RewardItem]:
        i = self._index(reward_id)
        return None if i is None else self._items[i]

    def quantity_of(self, reward_id: IdType) -> int:
        item = self.get(reward_id)
        return 0 if item is None else item.quantity

    def add(self, reward: RewardItem, quantity: int = 1) -> int:
        """Agrega la recompensa; si ya está, equivale a increment. Devuelve la cantidad final."""
        if self._index(reward.id) is not None:
            return self.increment(reward.id)
        if reward.stock is not None and reward.stock <= 0:
            logger.debug("Recompensa %s sin stock; no se agrega.", reward.id)
            return 0
        qty = max(1, quantity)
        if reward.stock is not None:
            qty = min(qty, reward.stock)
        self._items.append(reward.model_copy(update={"quantity": qty}))
        return qty

    def merge(self, reward: RewardItem) -> int:
        """Suma reward.quantity a la línea existente (o la crea), con tope de stock.
        Es como se reconstruye un carrito desde filas que pueden repetir id.
        """
        current = self.quantity_of(reward.id)
        if current == 0:
            return self.add(reward, quantity=reward.quantity)
        return self.update_quantity(reward.id, current + reward.quantity)

    def can_increment(self, reward_id: IdType) -> bool:
        item = self.get(reward_id)
        if item is None:
            return False
        return item.stock is None or item.quantity < item.stock

    def increment(self, reward_id: IdType) -> int:
        item = self.get(reward_id)
        if item is None:
            return 0
        if not self.can_increment(reward_id):
            return item.quantity
        return self.update_quantity(reward_id, item.quantity + 1)

    def decrement(self, reward_id: IdType) -> int:
        item = self.get(reward_id)
        if item is None:
            return 0
        return self.update_quantity(reward_id, item.quantity - 1)

    def update_quantity(self, reward_id: IdType, quantity: int) -> int:
        """Fija la cantidad; <= 0 elimina y por encima del stock se ajusta al stock."""
        i = self._index(reward_id)
        if i is None:
            return 0
        if quantity <= 0:
            del self._items[i]
            return 0
        item = self._items[i]
        if item.stock is not None and quantity > item.stock:
            logger.debug("Cantidad de recompensa %s ajustada al stock (%s).", reward_id, item.stock)
            quantity = item.stock
        self._items[i] = item.model_copy(update={"quantity": quantity})
        return quantity

    def remove(self, reward_id: IdType) -> None:
        self._items = [r for r in self._items if r.id != reward_id]

    def clear(self) -> None:
        self._items.clear()

    @property
    def total_points_cost(self) -> int:
        return get_total_points_cost(self._items)

    @property
    def total_items(self) -> int:
        return get_total_items(self._items)
