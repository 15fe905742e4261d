# tienda_core/tools/pricing/exceptions.py
from __future__ import annotations

from typing import Optional


class PricingError(Exception):
    """Base para errores del dominio de precios y canjes."""

class InvalidParam(PricingError):
    """Parámetro inválido o faltante (errores de validación locales)."""

class EmptyCart(InvalidParam):
    """Se intentó construir un pedido o canje con el carrito vacío."""

class InsufficientPoints(PricingError):
    """El saldo de puntos conocido no cubre el costo del canje."""

class SubmissionInProgress(PricingError):
    """Ya hay un envío en curso; el segundo intento se rechaza."""

class TransportError(PricingError):
    """Fallo de red o de transporte al hablar con la API externa."""


class RedemptionRejected(PricingError):
    """La API externa rechazó la solicitud (mensaje del servidor incluido)."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
