from __future__ import annotations

import pytest

from tienda_core.tools.pricing.cache import CacheConfig, TotalsCache, build_cart_key, totals_for
from tienda_core.tools.pricing.config import AppConfig
from tienda_core.tools.pricing.dto import CartLine, OrderSummaryQuery, OrderTotals
from tienda_core.tools.pricing.service import run_order_summary
from tienda_core.tools.pricing.totals import resolve_final_total


def _totals(final: float) -> OrderTotals:
    return OrderTotals(account_class="retail", subtotal=final, iva_amount=0.0, total=final, final_total=final)


def test_cached_totals_are_isolated_between_callers():
    q = OrderSummaryQuery(lines=[CartLine(id=1, price=10, quantity=1)])
    cfg = AppConfig(shipping_default=0.0)

    first = run_order_summary(q, app_cfg=cfg)
    first.totals.final_total = 999.0
    first.totals.breakdown.clear()

    second = run_order_summary(q, app_cfg=cfg)
    assert second.totals.final_total == pytest.approx(10.0)
    assert len(second.totals.breakdown) == 1


def test_lookup_returns_a_fresh_copy():
    cache = TotalsCache()
    cache.store(("k",), _totals(5.0))
    a = cache.lookup(("k",))
    a.final_total = 0.0
    assert cache.lookup(("k",)).final_total == 5.0


def test_totals_for_computes_once():
    cache = TotalsCache()
    calls = []

    def compute() -> OrderTotals:
        calls.append(1)
        return resolve_final_total([CartLine(id=1, price=3, quantity=2)], "retail", False, 0, shipping=0.0)

    assert totals_for(cache, ("k",), compute).final_total == 6.0
    assert totals_for(cache, ("k",), compute).final_total == 6.0
    assert len(calls) == 1


def test_least_recently_used_is_evicted():
    cache = TotalsCache(CacheConfig(max_items=2))
    cache.store(("a",), _totals(1.0))
    cache.store(("b",), _totals(2.0))
    cache.lookup(("a",))
    cache.store(("c",), _totals(3.0))
    assert ("a",) in cache
    assert ("b",) not in cache
    assert len(cache) == 2


def test_numeric_and_text_ids_get_different_keys():
    by_int = build_cart_key([CartLine(id=1, price=1, quantity=1)], "retail", False, 0, 0)
    by_str = build_cart_key([CartLine(id="1", price=1, quantity=1)], "retail", False, 0, 0)
    assert by_int != by_str
