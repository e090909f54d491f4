"""
Esquemas Pydantic para el módulo POS (Point of Sale)

- Cajas, sesiones y movimientos de caja
- Ventas con sus renglones
"""

from pydantic import BaseModel, Field, field_validator, model_validator
from decimal import Decimal
from typing import Optional, List
from uuid import UUID
from datetime import datetime

from app.modules.pos.models import SessionStatus, MovementType
from app.modules.pos.payments import parse_payment_methods


# ===== CASH REGISTER SCHEMAS =====

class CashRegisterOut(BaseModel):
    id: UUID
    name: str
    location: Optional[str] = None
    is_active: bool

    model_config = {"from_attributes": True}


class SessionOpen(BaseModel):
    """Esquema para abrir sesión de caja"""
    register_id: UUID = Field(..., description="ID de la caja")
    opening_balance: Decimal = Field(..., ge=0, description="Fondo de apertura")
    opened_by: Optional[str] = Field(None, max_length=100)
    opening_notes: Optional[str] = Field(None, max_length=500)


class SessionClose(BaseModel):
    """Esquema para cerrar sesión con arqueo"""
    actual_balance: Decimal = Field(..., ge=0, description="Efectivo contado en caja")
    closed_by: Optional[str] = Field(None, max_length=100)
    closing_notes: Optional[str] = Field(None, max_length=500)


class MovementCreate(BaseModel):
    session_id: UUID
    type: MovementType
    amount: Decimal = Field(..., ge=0)
    currency_code: str = Field("VES", min_length=3, max_length=10)
    description: Optional[str] = Field(None, max_length=255)
    notes: Optional[str] = None
    performed_by: Optional[str] = Field(None, max_length=100)
    sale_id: Optional[UUID] = None


class MovementOut(BaseModel):
    id: UUID
    session_id: UUID
    type: MovementType
    amount: Decimal
    currency_code: str
    description: Optional[str] = None
    notes: Optional[str] = None
    performed_by: str
    sale_id: Optional[UUID] = None
    created_at: datetime

    model_config = {"from_attributes": True}


class SessionOut(BaseModel):
    id: UUID
    register_id: UUID
    status: SessionStatus
    opening_balance: Decimal
    expected_balance: Optional[Decimal] = None
    actual_balance: Optional[Decimal] = None
    variance: Optional[Decimal] = None
    opened_by: str
    closed_by: Optional[str] = None
    opened_at: datetime
    closed_at: Optional[datetime] = None
    opening_notes: Optional[str] = None
    closing_notes: Optional[str] = None
    calculated_balance: Decimal = Field(..., description="Balance corriente según movimientos")
    register: Optional[CashRegisterOut] = None
    movements: List[MovementOut] = []

    model_config = {"from_attributes": True}


# ===== SALE SCHEMAS =====

# Diferencia admitida por redondeo entre montos enviados y calculados
AMOUNT_TOLERANCE = Decimal("0.01")


class SaleItemCreate(BaseModel):
    product_id: UUID
    quantity: Decimal = Field(..., ge=Decimal("0.01"))
    unit_price: Decimal = Field(..., ge=0)
    total: Decimal = Field(..., ge=0)

    @model_validator(mode='after')
    def check_line_total(self):
        if abs(self.total - self.quantity * self.unit_price) > AMOUNT_TOLERANCE:
            raise ValueError(
                f"El total del renglón ({self.total}) no coincide con cantidad x precio "
                f"({self.quantity * self.unit_price})"
            )
        return self


class SaleCreate(BaseModel):
    client_id: Optional[UUID] = None
    items: List[SaleItemCreate] = Field(..., min_length=1)
    subtotal: Decimal = Field(..., ge=0)
    discount: Decimal = Field(Decimal("0"), ge=0)
    tax: Decimal = Field(Decimal("0"), ge=0)
    total: Decimal = Field(..., ge=0)
    payment_method: str = Field("CASH", min_length=1, max_length=255, description='"CASH" o "CASH:600, DEBIT:300"')
    tendered: Optional[Decimal] = Field(None, ge=0)
    change: Optional[Decimal] = Field(None, ge=0)
    is_credit: bool = False
    due_date: Optional[datetime] = Field(None, description="Vencimiento de la factura a crédito")
    invoice_number: Optional[str] = Field(None, max_length=20)

    @field_validator('payment_method')
    @classmethod
    def validate_payment_method(cls, v: str) -> str:
        parse_payment_methods(v, Decimal("0"))
        return v.strip().upper()

    @model_validator(mode='after')
    def check_amounts(self):
        items_total = sum((item.total for item in self.items), Decimal("0"))
        if abs(self.subtotal - items_total) > AMOUNT_TOLERANCE:
            raise ValueError(f"El subtotal ({self.subtotal}) no coincide con la suma de los renglones ({items_total})")

        expected = self.subtotal - self.discount + self.tax
        if abs(self.total - expected) > AMOUNT_TOLERANCE:
            raise ValueError(f"El total ({self.total}) debe ser subtotal - descuento + impuesto ({expected})")
        return self


class SaleProduct(BaseModel):
    id: UUID
    sku: str
    name: str

    model_config = {"from_attributes": True}


class SaleItemOut(BaseModel):
    id: UUID
    product_id: UUID
    quantity: Decimal
    unit_price: Decimal
    total: Decimal
    product: Optional[SaleProduct] = None

    model_config = {"from_attributes": True}


class SaleClient(BaseModel):
    id: UUID
    rif: str
    comercial_name: str

    model_config = {"from_attributes": True}


class SaleOut(BaseModel):
    id: UUID
    invoice_number: str
    client_id: Optional[UUID] = None
    subtotal: Decimal
    discount: Decimal
    tax: Decimal
    total: Decimal
    payment_method: str
    tendered: Optional[Decimal] = None
    change: Optional[Decimal] = None
    is_credit: bool
    date: datetime
    is_active: bool
    is_cancelled: bool
    has_returns: bool
    client: Optional[SaleClient] = None
    items: List[SaleItemOut] = []

    model_config = {"from_attributes": True}
