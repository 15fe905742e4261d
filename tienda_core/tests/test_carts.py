from __future__ import annotations

import pytest

from tienda_core.tools.pricing.cart import ShoppingCart
from tienda_core.tools.pricing.dto import CartLine, RewardItem
from tienda_core.tools.pricing.rewards import (
    RewardsCart,
    can_afford,
    get_total_items,
    get_total_points_cost,
    remaining_points,
)


# ------------------------------ Carrito monetario -----------------------------


def test_add_merges_same_product_and_unit():
    cart = ShoppingCart()
    cart.add(CartLine(id=1, name="Agua", price=0.5, quantity=6, unit_type="Unidades"))
    cart.add(CartLine(id=1, name="Agua", price=0.5, quantity=4, unit_type="Unidades"))
    cart.add(CartLine(id=1, name="Agua", price=2.8, quantity=1, unit_type="Cajas", units_per_box=6))
    assert len(cart) == 2
    assert cart.lines[0].quantity == 10
    assert cart.total_units() == 16


def test_update_to_zero_deletes_line():
    cart = ShoppingCart([CartLine(id=1, price=1, quantity=2), CartLine(id=2, price=1, quantity=1)])
    cart.update_quantity(1, 0)
    assert [ln.id for ln in cart] == [2]


def test_cart_quantity_clamped_to_stock():
    cart = ShoppingCart()
    cart.add(CartLine(id=1, price=1, quantity=3, stock=4))
    cart.add(CartLine(id=1, price=1, quantity=3, stock=4))
    assert cart.lines[0].quantity == 4
    cart.update_quantity(1, 9)
    assert cart.lines[0].quantity == 4


def test_out_of_stock_product_not_added():
    cart = ShoppingCart()
    cart.add(CartLine(id=1, price=1, quantity=1, stock=0))
    assert len(cart) == 0


def test_remove_drops_all_units_of_product():
    cart = ShoppingCart()
    cart.add(CartLine(id=1, price=1, quantity=1, unit_type="Unidades"))
    cart.add(CartLine(id=1, price=5, quantity=1, unit_type="Cajas"))
    cart.add(CartLine(id=2, price=1, quantity=1))
    cart.remove(1)
    assert [ln.id for ln in cart] == [2]
    cart.clear()
    assert len(cart) == 0


# ------------------------------ Carrito de recompensas ------------------------


@pytest.fixture()
def mug() -> RewardItem:
    return RewardItem(id=10, name="Taza", points_cost=100, stock=2)


def test_increment_stops_at_stock(mug):
    cart = RewardsCart()
    assert cart.add(mug) == 1
    assert cart.increment(10) == 2
    assert cart.can_increment(10) is False
    assert cart.increment(10) == 2  # sin efecto en el tope
    assert cart.quantity_of(10) == 2


def test_add_existing_acts_as_increment(mug):
    cart = RewardsCart()
    cart.add(mug)
    cart.add(mug)
    cart.add(mug)
    assert cart.quantity_of(10) == 2
    assert len(cart) == 1


def test_add_clamps_requested_quantity(mug):
    cart = RewardsCart()
    assert cart.add(mug, quantity=5) == 2
    assert cart.add(RewardItem(id=11, points_cost=5), quantity=0) == 1


def test_out_of_stock_reward_not_added():
    cart = RewardsCart()
    assert cart.add(RewardItem(id=1, points_cost=10, stock=0)) == 0
    assert len(cart) == 0


def test_decrement_below_one_removes(mug):
    cart = RewardsCart()
    cart.add(mug)
    assert cart.decrement(10) == 0
    assert cart.get(10) is None
    assert cart.decrement(10) == 0


def test_update_quantity_clamps_and_removes(mug):
    cart = RewardsCart()
    cart.add(mug)
    assert cart.update_quantity(10, 7) == 2
    assert cart.update_quantity(10, -3) == 0
    assert len(cart) == 0


def test_unlimited_stock_keeps_growing():
    cart = RewardsCart()
    cart.add(RewardItem(id=1, points_cost=10))
    for _ in range(50):
        cart.increment(1)
    assert cart.quantity_of(1) == 51
    assert cart.can_increment(1) is True


def test_quantities_stay_within_bounds(mug):
    cart = RewardsCart()
    cart.add(mug)
    for op in ["inc", "inc", "dec", "inc", "inc", "inc", "dec", "dec", "add", "inc"]:
        if op == "inc":
            cart.increment(10)
        elif op == "dec":
            cart.decrement(10)
        else:
            cart.add(mug)
        q = cart.quantity_of(10)
        assert 0 <= q <= 2


def test_totals_and_affordability():
    items = [
        RewardItem(id=1, points_cost=100, quantity=3),
        RewardItem(id=2, points_cost=50, quantity=4),
    ]
    total = get_total_points_cost(items)
    assert total == 500
    assert get_total_items(items) == 7
    assert can_afford(total, 400) is False
    assert can_afford(total, 500) is True
    assert remaining_points(total, 400) == -100


def test_clear_empties_cart(mug):
    cart = RewardsCart([mug])
    cart.clear()
    assert cart.total_points_cost == 0
    assert cart.total_items == 0


# ------------------------------ Reconstrucción y unidades ---------------------


def test_update_without_unit_type_reaches_boxed_line():
    cart = ShoppingCart([CartLine(id="p1", price=5, quantity=2, unit_type="Cajas")])
    cart.update_quantity("p1", 3)
    assert cart.lines[0].quantity == 3
    cart.update_quantity("p1", 0)
    assert len(cart) == 0


def test_update_with_unit_type_targets_one_line():
    cart = ShoppingCart()
    cart.add(CartLine(id=1, price=1, quantity=4, unit_type="Unidades"))
    cart.add(CartLine(id=1, price=5, quantity=1, unit_type="Cajas"))
    cart.update_quantity(1, 0, unit_type="Unidades")
    assert [(ln.unit_type, ln.quantity) for ln in cart] == [("Cajas", 1)]


def test_rebuild_merges_repeated_reward_rows():
    cart = RewardsCart(
        [
            RewardItem(id=1, points_cost=10, quantity=3),
            RewardItem(id=1, points_cost=10, quantity=2),
        ]
    )
    assert len(cart) == 1
    assert cart.quantity_of(1) == 5
    assert cart.total_points_cost == 50


def test_rebuild_merge_respects_stock():
    cart = RewardsCart(
        [
            RewardItem(id=1, points_cost=10, quantity=2, stock=3),
            RewardItem(id=1, points_cost=10, quantity=2, stock=3),
        ]
    )
    assert cart.quantity_of(1) == 3
