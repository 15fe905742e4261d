from __future__ import annotations

import pytest

from tienda_core.tools.pricing.dto import CartLine
from tienda_core.tools.pricing.points import calculate_points_discount, discount_to_points, redeemable_subtotal


@pytest.fixture()
def cart():
    return [
        CartLine(id=1, name="Jamón", price=40.0, quantity=1, redeemable_with_points=True),
        CartLine(id=2, name="Caja regalo", price=5.0, quantity=2, redeemable_with_points=True),
        CartLine(id=3, name="Aceite", price=25.0, quantity=2, redeemable_with_points=False),
        CartLine(id=4, name="Pan", price=2.0, quantity=1),
    ]


def test_redeemable_subtotal_only_flagged_lines(cart):
    assert redeemable_subtotal(cart) == pytest.approx(50.0)


def test_no_discount_when_toggle_off(cart):
    assert calculate_points_discount(cart, False, 1000) == 0


def test_no_discount_without_redeemable_lines():
    lines = [CartLine(id=1, price=10, quantity=1), CartLine(id=2, price=5, quantity=1, redeemable_with_points=False)]
    assert calculate_points_discount(lines, True, 1000) == 0


def test_discount_capped_by_balance(cart):
    assert calculate_points_discount(cart, True, 30) == pytest.approx(30.0)


def test_discount_capped_by_redeemable_subtotal(cart):
    # el aceite (no canjeable) nunca se descuenta
    assert calculate_points_discount(cart, True, 10_000) == pytest.approx(50.0)


def test_discount_monotonic_until_saturation(cart):
    previous = -1.0
    for points in range(0, 120, 5):
        d = calculate_points_discount(cart, True, points)
        assert d >= previous
        assert d <= min(points, redeemable_subtotal(cart))
        previous = d
    assert previous == pytest.approx(50.0)


def test_negative_balance_counts_as_zero(cart):
    assert calculate_points_discount(cart, True, -20) == 0


def test_point_value_scales_balance(cart):
    # con 1 punto = 0.5 EUR, 40 puntos valen 20 EUR
    assert calculate_points_discount(cart, True, 40, point_value=0.5) == pytest.approx(20.0)
    assert discount_to_points(20.0, point_value=0.5) == pytest.approx(40.0)


def test_discount_to_points_default_rate():
    assert discount_to_points(12.5) == 12.5
    assert discount_to_points(0) == 0
