# tienda_core/tools/pricing/config.py
from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Final

from dotenv import load_dotenv

load_dotenv()

# —— Localización ——
DEFAULT_LOCALE: Final[str] = os.getenv("TIENDA_LOCALE", "es-ES")
DEFAULT_CURRENCY: Final[str] = os.getenv("TIENDA_CURRENCY", "EUR")

# —— Reglas de precio ——
# Valor en moneda de cada punto (1 punto = 1 EUR por defecto)
POINT_VALUE: Final[float] = float(os.getenv("TIENDA_POINT_VALUE", "1.0"))
SHIPPING_DEFAULT: Final[float] = float(os.getenv("TIENDA_SHIPPING_DEFAULT", "0.0"))

# —— API externa ——
API_BASE_URL: Final[str] = os.getenv("TIENDA_API_BASE_URL", "http://localhost:3001/api")
API_TIMEOUT: Final[float] = float(os.getenv("TIENDA_API_TIMEOUT", "15"))

# —— Varios ——
CACHE_MAX_ITEMS: Final[int] = int(os.getenv("TIENDA_CACHE_MAX_ITEMS", "128"))


@dataclass(frozen=True)
class AppConfig:
    """Snapshot inmutable de configuración consumida por el servicio."""
    locale: str = DEFAULT_LOCALE
    currency: str = DEFAULT_CURRENCY
    point_value: float = POINT_VALUE
    shipping_default: float = SHIPPING_DEFAULT
    api_base_url: str = API_BASE_URL
    api_timeout: float = API_TIMEOUT
    cache_max_items: int = CACHE_MAX_ITEMS
