# tienda_core/tools/pricing/schema.py
from __future__ import annotations

from typing import Final, List, Tuple

# Columnas del frame de líneas (evita strings sueltos en el resto del código)
LINE_IDX: Final[str] = "line_idx"
PRICE: Final[str] = "price"
QTY: Final[str] = "quantity"
LINE_TOTAL: Final[str] = "line_total"
REDEEMABLE: Final[str] = "redeemable"
IVA_KEY: Final[str] = "iva_key"
IVA_VALUE: Final[str] = "iva_value"

FRAME_COLS: Final[List[str]] = [LINE_IDX, PRICE, QTY, LINE_TOTAL, REDEEMABLE, IVA_KEY, IVA_VALUE]

# Claves centinela de grupos de IVA
NO_IVA_KEY: Final[str] = "no-iva"    # cuentas particulares: un solo grupo
SIN_IVA_KEY: Final[str] = "sin-iva"  # cuentas empresa: líneas sin IVA informado

# Mensajes del servidor que indican saldo insuficiente (se comparan en minúsculas)
INSUFFICIENT_POINTS_MARKERS: Final[Tuple[str, ...]] = ("puntos insuficientes", "insufficient")

# Campos obligatorios del formulario de pago
PAYMENT_REQUIRED_FIELDS: Final[Tuple[str, ...]] = ("payment_method", "full_name", "address_line1", "city", "postal_code", "country")
