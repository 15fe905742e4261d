from __future__ import annotations

import pytest

from tienda_core.tools.pricing.i18n import LocaleConfig, add_formatted_fields, format_currency, format_iva, format_points


@pytest.mark.parametrize(
    "value, expected",
    [
        (0, "€0,00"),
        (24.2, "€24,20"),
        (1234.5, "€1234,50"),  # es-ES no agrupa números de 4 cifras
        (12345.5, "€12.345,50"),
        (1234567.891, "€1.234.567,89"),
        (-12.5, "€-12,50"),
        (None, "-"),
    ],
)
def test_format_currency_es(value, expected):
    assert format_currency(value) == expected


def test_format_currency_us_like_locale():
    cfg = LocaleConfig(locale="en-US", currency="USD", currency_symbol="$", decimal_sep=".", thousand_sep=",", min_grouping_digits=1)
    assert format_currency(1234.5, cfg) == "$1,234.50"


def test_format_points():
    assert format_points(500) == "500"
    assert format_points(12000) == "12.000"
    assert format_points(None) == "-"


def test_format_iva():
    assert format_iva(0.21) == "21%"
    assert format_iva(None) == "0%"


def test_add_formatted_fields_skips_non_numeric():
    out = add_formatted_fields({"total": 10, "name": "x", "pts": 1500}, ["total", "name"], points_fields=["pts"])
    assert out["total_fmt"] == "€10,00"
    assert out["name_fmt"] == "-"
    assert out["pts_fmt"] == "1500"
