# tienda_core/tools/pricing/checkout.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, Mapping, Optional
from contextlib import contextmanager
import logging

from .cart import ShoppingCart
from .client import GENERIC_ERROR, StoreApi
from .config import AppConfig
from .dto import AccountClassLiteral, OrderTotals, PointsBalance
from .exceptions import EmptyCart, InvalidParam, RedemptionRejected, SubmissionInProgress, TransportError
from .payloads import build_order_request, build_redemption_request
from .rewards import RewardsCart, can_afford
from .totals import resolve_final_total
from .validators import is_insufficient_points_message, validate_payment_form

logger = logging.getLogger(__name__)

INSUFFICIENT_MESSAGE = "No tienes suficientes puntos para completar este canje"


@dataclass(frozen=True)
class SubmitOutcome:
    ok: bool
    reason: str  # "ok" | "insufficient_points" | "rejected" | "transport" | "validation"
    message: Optional[str] = None
    response: Dict[str, Any] = field(default_factory=dict)


class SubmitLatch:
    """Bloqueo simple mientras hay un envío en curso (equivale a deshabilitar el botón)."""

    def __init__(self) -> None:
        self.busy = False

    @contextmanager
    def hold(self) -> Iterator[None]:
        if self.busy:
            raise SubmissionInProgress("Ya hay un envío en curso.")
        self.busy = True
        try:
            yield
        finally:
            self.busy = False


class RedemptionCheckout:
    """Canje del carrito de recompensas contra la API externa.

    El saldo local es una foto; el servidor tiene la última palabra. Si rechaza
    por puntos insuficientes se vuelve a pedir el saldo y el carrito se conserva.
    """

    def __init__(self, cart: RewardsCart, api: StoreApi, balance: Optional[PointsBalance] = None) -> None:
        self.cart = cart
        self.api = api
        self.balance = balance
        self.error: Optional[str] = None
        self._latch = SubmitLatch()

    @property
    def busy(self) -> bool:
        return self._latch.busy

    @property
    def available_points(self) -> int:
        return self.balance.total_points if self.balance else 0

    def refresh_balance(self) -> PointsBalance:
        self.balance = self.api.get_points_balance()
        return self.balance

    @property
    def can_afford(self) -> bool:
        return can_afford(self.cart.total_points_cost, self.available_points)

    @property
    def can_submit(self) -> bool:
        return not self.busy and len(self.cart) > 0 and self.can_afford

    def submit(self) -> SubmitOutcome:
        with self._latch.hold():
            self.error = None
            try:
                req = build_redemption_request(self.cart.items)
            except EmptyCart as exc:
                self.error = str(exc)
                return SubmitOutcome(ok=False, reason="validation", message=self.error)

            if not self.can_afford:
                self.error = INSUFFICIENT_MESSAGE
                return SubmitOutcome(ok=False, reason="insufficient_points", message=self.error)

            try:
                response = self.api.redeem_rewards(req)
            except RedemptionRejected as exc:
                self.error = exc.message
                if is_insufficient_points_message(exc.message):
                    self._refresh_quietly()
                    return SubmitOutcome(ok=False, reason="insufficient_points", message=self.error)
                return SubmitOutcome(ok=False, reason="rejected", message=self.error)
            except TransportError:
                logger.exception("Fallo de red al canjear recompensas.")
                self.error = GENERIC_ERROR
                return SubmitOutcome(ok=False, reason="transport", message=self.error)

            logger.info("Canje completado: %d puntos, %d recompensas.", req.total_points, len(req.rewards))
            self.cart.clear()
            self._refresh_quietly()
            return SubmitOutcome(ok=True, reason="ok", response=response or {})

    def _refresh_quietly(self) -> None:
        # el canje ya se resolvió; un fallo al refrescar no debe ocultar el resultado
        try:
            self.refresh_balance()
        except (TransportError, RedemptionRejected):
            logger.warning("No se pudo refrescar el saldo de puntos.")


class OrderCheckout:
    """Envío del pedido del carrito monetario."""

    def __init__(
        self,
        cart: ShoppingCart,
        api: StoreApi,
        account_class: AccountClassLiteral = "retail",
        cfg: Optional[AppConfig] = None,
    ) -> None:
        self.cart = cart
        self.api = api
        self.account_class = account_class
        self.cfg = cfg or AppConfig()
        self.error: Optional[str] = None
        self._latch = SubmitLatch()

    @property
    def busy(self) -> bool:
        return self._latch.busy

    def totals(self, use_points: bool = False, available_points: float = 0.0) -> OrderTotals:
        return resolve_final_total(
            self.cart.lines,
            self.account_class,
            use_points,
            available_points,
            shipping=self.cfg.shipping_default,
            point_value=self.cfg.point_value,
        )

    def submit(self, payment_form: Mapping[str, Any], use_points: bool = False, available_points: float = 0.0) -> SubmitOutcome:
        with self._latch.hold():
            self.error = None
            try:
                validate_payment_form(payment_form)
                totals = self.totals(use_points, available_points)
                req = build_order_request(self.cart.lines, totals, self.cfg.currency, payment=dict(payment_form))
            except InvalidParam as exc:
                self.error = str(exc)
                return SubmitOutcome(ok=False, reason="validation", message=self.error)

            try:
                response = self.api.create_order(req)
            except RedemptionRejected as exc:
                self.error = exc.message
                reason = "insufficient_points" if is_insufficient_points_message(exc.message) else "rejected"
                return SubmitOutcome(ok=False, reason=reason, message=self.error)
            except TransportError:
                logger.exception("Fallo de red al crear el pedido.")
                self.error = GENERIC_ERROR
                return SubmitOutcome(ok=False, reason="transport", message=self.error)

            logger.info("Pedido creado por %.2f %s.", req.total_amount, req.currency)
            self.cart.clear()
            return SubmitOutcome(ok=True, reason="ok", response=response or {})
