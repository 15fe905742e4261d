from __future__ import annotations

import pytest

from tienda_core.tools.pricing.dto import CartLine
from tienda_core.tools.pricing.exceptions import InvalidParam
from tienda_core.tools.pricing.totals import resolve_final_total


def test_business_single_iva_line():
    lines = [CartLine(id=1, name="Aceite", price=10, quantity=2, iva=0.21, redeemable_with_points=False)]
    t = resolve_final_total(lines, "business", use_points=False, available_points=0, shipping=0)
    assert t.subtotal == pytest.approx(20)
    assert t.iva_amount == pytest.approx(4.2)
    assert t.total == pytest.approx(24.2)
    assert t.final_total == pytest.approx(24.2)
    assert [b.iva_key for b in t.breakdown] == ["21"]


def test_retail_with_points():
    lines = [CartLine(id=1, name="Cesta", price=50, quantity=1, redeemable_with_points=True)]
    t = resolve_final_total(lines, "retail", use_points=True, available_points=30, shipping=0)
    assert t.points_discount == pytest.approx(30)
    assert t.used_points == pytest.approx(30)
    assert t.final_total == pytest.approx(20)
    assert t.iva_amount == 0


def test_retail_ignores_iva_field():
    lines = [CartLine(id=1, price=100, quantity=1, iva=21)]
    t = resolve_final_total(lines, "retail", use_points=False, available_points=0)
    assert t.total == pytest.approx(100)
    assert t.final_total == pytest.approx(100)
    assert [b.iva_key for b in t.breakdown] == ["no-iva"]


def test_business_discount_applies_after_iva():
    lines = [
        CartLine(id=1, price=10, quantity=1, iva=21, redeemable_with_points=True),
        CartLine(id=2, price=20, quantity=1, iva=10),
    ]
    t = resolve_final_total(lines, "business", use_points=True, available_points=100, shipping=4.5)
    # grand_total = 12.1 + 22 ; descuento = 10 (solo la línea canjeable)
    assert t.total == pytest.approx(34.1)
    assert t.points_discount == pytest.approx(10)
    assert t.final_total == pytest.approx(34.1 + 4.5 - 10)


def test_shipping_is_added():
    lines = [CartLine(id=1, price=10, quantity=3)]
    t = resolve_final_total(lines, "retail", False, 0, shipping=5)
    assert t.shipping == 5
    assert t.final_total == pytest.approx(35)


def test_final_total_never_negative():
    lines = [CartLine(id=1, price=0.5, quantity=1, redeemable_with_points=True)]
    t = resolve_final_total(lines, "retail", True, 1_000_000)
    assert t.final_total >= 0


def test_empty_cart_totals_are_zero():
    for account_class in ("retail", "business"):
        t = resolve_final_total([], account_class, True, 100)
        assert t.final_total == 0
        assert t.points_discount == 0


def test_negative_shipping_rejected():
    with pytest.raises(InvalidParam):
        resolve_final_total([], "retail", False, 0, shipping=-1)
