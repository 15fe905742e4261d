# tienda_core/tools/pricing/i18n.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, Mapping, Optional

from .iva import normalize_iva_percent


@dataclass(frozen=True)
class LocaleConfig:
    """Configuración mínima de formato (es-ES por defecto).
    No usamos Babel para evitar dependencia; ajusta aquí símbolos y separadores.
    """
    locale: str = "es-ES"
    currency: str = "EUR"
    currency_symbol: str = "€"
    decimal_sep: str = ","
    thousand_sep: str = "."
    # es-ES no agrupa miles en números de 4 cifras (1234,50 pero 12.345,50)
    min_grouping_digits: int = 2


DEFAULT_LOCALE = LocaleConfig()


def _format_number(value: float, cfg: LocaleConfig, ndigits: int) -> str:
    q = round(float(value), ndigits)
    sign = "-" if q < 0 else ""
    # "{:,.Nf}" usa separadores US; se sustituyen por los del locale
    s = f"{abs(q):,.{ndigits}f}"
    int_part, _, dec_part = s.partition(".")
    digits = int_part.replace(",", "")
    if len(digits) < 3 + cfg.min_grouping_digits:
        int_part = digits
    else:
        int_part = int_part.replace(",", cfg.thousand_sep)
    if dec_part:
        return f"{sign}{int_part}{cfg.decimal_sep}{dec_part}"
    return f"{sign}{int_part}"


def format_currency(value: Optional[float], cfg: LocaleConfig = DEFAULT_LOCALE, ndigits: int = 2) -> str:
    """Formatea un float como moneda ('€1234,50'). Si value es None, devuelve '-'."""
    if value is None:
        return "-"
    return f"{cfg.currency_symbol}{_format_number(value, cfg, ndigits)}"


def format_points(value: Optional[float], cfg: LocaleConfig = DEFAULT_LOCALE) -> str:
    """Puntos sin decimales y con separador de miles del locale."""
    if value is None:
        return "-"
    return _format_number(value, cfg, 0)


def format_iva(raw: Optional[float]) -> str:
    """IVA como '21%', aceptando fracción o porcentaje."""
    return f"{normalize_iva_percent(raw)}%"


def add_formatted_fields(
    row: Mapping[str, object],
    currency_fields: Iterable[str],
    points_fields: Iterable[str] = (),
    cfg: LocaleConfig = DEFAULT_LOCALE,
    suffix: str = "_fmt",
) -> Dict[str, object]:
    """Devuelve un nuevo dict con campos formateados añadidos para UI.
    Ej.: 'final_total' -> 'final_total_fmt'
    """
    out: Dict[str, object] = dict(row)
    for c in currency_fields:
        v = row.get(c)
        out[f"{c}{suffix}"] = format_currency(v if isinstance(v, (int, float)) else None, cfg=cfg)
    for p in points_fields:
        v = row.get(p)
        out[f"{p}{suffix}"] = format_points(v if isinstance(v, (int, float)) else None, cfg=cfg)
    return out
