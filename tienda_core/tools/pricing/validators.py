# tienda_core/tools/pricing/validators.py
from __future__ import annotations

from typing import Any, Iterable, List, Mapping, Optional

from .dto import OrderSummaryQuery
from .exceptions import InvalidParam
from .schema import INSUFFICIENT_POINTS_MARKERS, PAYMENT_REQUIRED_FIELDS

SUPPORTED_ACCOUNT_CLASSES = {"retail", "business"}


def validate_shipping(shipping: Optional[float]) -> None:
    if shipping is not None and shipping < 0:
        raise InvalidParam("shipping no puede ser negativo.")


def validate_account_class(account_class: str) -> None:
    if account_class not in SUPPORTED_ACCOUNT_CLASSES:
        raise InvalidParam(f"account_class='{account_class}' no soportada.")


def missing_payment_fields(form: Mapping[str, Any], required: Iterable[str] = PAYMENT_REQUIRED_FIELDS) -> List[str]:
    """Campos obligatorios vacíos o ausentes, en el orden de `required`."""
    missing: List[str] = []
    for name in required:
        v = form.get(name)
        if v is None or (isinstance(v, str) and not v.strip()):
            missing.append(name)
    return missing


def validate_payment_form(form: Mapping[str, Any]) -> None:
    """Bloquea el envío si el formulario de pago está incompleto."""
    missing = missing_payment_fields(form)
    if missing:
        raise InvalidParam(f"Faltan campos obligatorios: {', '.join(missing)}")


def is_insufficient_points_message(message: Optional[str]) -> bool:
    """El servidor no devuelve un código propio; se reconoce por el texto."""
    if not message:
        return False
    low = message.lower()
    return any(marker in low for marker in INSUFFICIENT_POINTS_MARKERS)


def validate_query(q: OrderSummaryQuery) -> None:
    """Valida aspectos semánticos de la query."""
    validate_account_class(q.account_class)
    validate_shipping(q.shipping)
