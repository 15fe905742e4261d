# tienda_core/tools/pricing/dto.py
from __future__ import annotations

from typing import Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, Field, field_validator

# —— Literales y tipos ——
AccountClassLiteral = Literal["retail", "business"]
IdType = Union[int, str]


class CartLine(BaseModel):
    """Línea del carrito monetario. `iva` puede venir como fracción (0.21) o porcentaje (21)."""
    id: IdType
    name: str = ""
    price: float = Field(..., ge=0)
    quantity: int = Field(..., ge=1)
    iva: Optional[float] = Field(default=None, ge=0)
    redeemable_with_points: Optional[bool] = None
    units_per_box: Optional[int] = Field(default=None, gt=0)
    stock: Optional[int] = Field(default=None, ge=0)
    unit_type: Optional[str] = None  # p. ej. 'Unidades', 'Cajas'
    image: Optional[str] = None

    @field_validator("name")
    @classmethod
    def _strip_name(cls, v: str) -> str:
        return v.strip()

    @property
    def line_total(self) -> float:
        return self.price * self.quantity

    @property
    def is_redeemable(self) -> bool:
        # None (dato ausente) cuenta como no canjeable
        return self.redeemable_with_points is True


class IvaGroup(BaseModel):
    """Grupo derivado de líneas que comparten IVA normalizado. No se persiste."""
    iva_key: str
    iva_value: Optional[int] = None
    items: List[CartLine] = Field(default_factory=list)
    subtotal: float = 0.0


class TaxBreakdown(BaseModel):
    subtotal: float
    iva_amount: float
    total: float


class GrandTotals(BaseModel):
    grand_subtotal: float = 0.0
    grand_iva_amount: float = 0.0
    grand_total: float = 0.0


class GroupBreakdown(BaseModel):
    iva_key: str
    iva_value: Optional[int] = None
    subtotal: float
    iva_amount: float
    total: float


class OrderTotals(BaseModel):
    """Totales del pedido. Precisión completa; el redondeo ocurre al formatear."""
    account_class: AccountClassLiteral
    subtotal: float
    iva_amount: float
    total: float
    shipping: float = 0.0
    points_discount: float = 0.0
    used_points: float = 0.0
    final_total: float
    breakdown: List[GroupBreakdown] = Field(default_factory=list)


class RewardItem(BaseModel):
    """Recompensa en el carrito de puntos. stock=None significa ilimitado."""
    id: IdType
    name: str = ""
    points_cost: int = Field(..., ge=0)
    stock: Optional[int] = Field(default=None, ge=0)
    quantity: int = Field(default=1, ge=1)
    description: Optional[str] = None
    image_url: Optional[str] = None

    @property
    def subtotal_points(self) -> int:
        return self.points_cost * self.quantity


class PointsBalance(BaseModel):
    user_id: Optional[str] = None
    total_points: int = Field(default=0, ge=0)


class RedemptionLine(BaseModel):
    reward_id: IdType
    quantity: int = Field(..., gt=0)
    points_cost: int = Field(..., ge=0)


class RedemptionRequest(BaseModel):
    """Cuerpo de POST /rewards/redeem. Se construye justo antes de enviar."""
    rewards: List[RedemptionLine] = Field(..., min_length=1)
    total_points: int = Field(..., ge=0)


class OrderLinePayload(BaseModel):
    product_id: IdType
    product_name: str
    quantity: int = Field(..., gt=0)
    unit_price: float = Field(..., ge=0)


class OrderRequest(BaseModel):
    """Cuerpo de POST /orders."""
    total_amount: float = Field(..., ge=0)
    currency: str = "EUR"
    used_points: float = Field(default=0.0, ge=0)
    order_lines: List[OrderLinePayload] = Field(..., min_length=1)
    payment: Dict[str, Any] = Field(default_factory=dict)


# —— Contratos del servicio ——

class OrderSummaryQuery(BaseModel):
    """Contrato de entrada para el resumen de pedido."""
    lines: List[CartLine] = Field(default_factory=list)
    account_class: AccountClassLiteral = "retail"
    use_points: bool = False
    available_points: float = 0.0
    shipping: Optional[float] = Field(
        default=None, description="None => usar el envío por defecto de la configuración."
    )

    # locales / meta
    locale: str = "es-ES"
    currency: str = "EUR"

    @field_validator("account_class", mode="before")
    @classmethod
    def _normalize_account_class(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.strip().lower()
        return v


class RewardsSummaryQuery(BaseModel):
    rewards: List[RewardItem] = Field(default_factory=list)
    balance: int = Field(default=0, ge=0)
    locale: str = "es-ES"
    currency: str = "EUR"


class MetaInfo(BaseModel):
    line_count: int
    generated_at: str
    currency: str
    locale: str


class OrderSummaryResult(BaseModel):
    """Contrato de salida: estable, serializable y amigable para UI."""
    ok: bool
    account_class: AccountClassLiteral
    meta: MetaInfo
    totals: Optional[OrderTotals] = None
    display: Dict[str, Any] = Field(default_factory=dict)
    warnings: List[str] = Field(default_factory=list)
    error: Optional[str] = None


class RewardsSummaryResult(BaseModel):
    ok: bool
    meta: MetaInfo
    total_points: int = 0
    total_items: int = 0
    balance: int = 0
    can_afford: bool = False
    remaining_points: int = 0
    lines: List[Dict[str, Any]] = Field(default_factory=list)
    display: Dict[str, Any] = Field(default_factory=dict)
    warnings: List[str] = Field(default_factory=list)
    error: Optional[str] = None
