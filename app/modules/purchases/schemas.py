"""
Esquemas Pydantic para el módulo de Compras
"""

from pydantic import BaseModel, Field, field_validator
from decimal import Decimal
from typing import Optional, List
from uuid import UUID
from datetime import datetime

from app.modules.purchases.models import PurchasePaymentStatus


# ===== PURCHASE SCHEMAS =====

class PurchaseItemCreate(BaseModel):
    product_id: UUID
    quantity: Decimal = Field(..., gt=0, description="Cantidad comprada")
    cost: Decimal = Field(..., ge=0, description="Costo unitario en la moneda de la compra")


class PurchaseCreate(BaseModel):
    supplier_id: UUID
    invoice_date: datetime
    invoice_number: Optional[str] = Field(None, max_length=100)
    due_date: Optional[datetime] = None
    currency_code: Optional[str] = Field(None, max_length=10, description="Por defecto VES")
    exchange_rate: Optional[Decimal] = Field(None, gt=0)
    paid_amount: Decimal = Field(Decimal("0"), ge=0, description="Pago inicial en efectivo")
    items: List[PurchaseItemCreate] = Field(..., min_length=1)

    @field_validator('currency_code')
    @classmethod
    def upper_currency(cls, v: Optional[str]) -> Optional[str]:
        return v.strip().upper() if v else v


class PurchaseSupplier(BaseModel):
    id: UUID
    rif: str
    comercial_name: str

    model_config = {"from_attributes": True}


class PurchaseProduct(BaseModel):
    id: UUID
    sku: str
    name: str

    model_config = {"from_attributes": True}


class PurchaseItemOut(BaseModel):
    id: UUID
    product_id: UUID
    quantity: Decimal
    cost: Decimal
    total: Decimal
    old_cost: Optional[Decimal] = None
    product: Optional[PurchaseProduct] = None

    model_config = {"from_attributes": True}


class PurchasePaymentOut(BaseModel):
    id: UUID
    purchase_id: UUID
    amount: Decimal
    payment_method: str
    reference: Optional[str] = None
    notes: Optional[str] = None
    payment_date: datetime

    model_config = {"from_attributes": True}


class PurchaseOut(BaseModel):
    id: UUID
    supplier_id: UUID
    invoice_number: Optional[str] = None
    invoice_date: datetime
    due_date: Optional[datetime] = None
    currency_code: str
    exchange_rate: Decimal
    subtotal: Decimal
    tax_amount: Decimal
    total: Decimal
    paid_amount: Decimal
    balance: Decimal
    payment_status: PurchasePaymentStatus
    created_at: datetime
    supplier: Optional[PurchaseSupplier] = None
    items: List[PurchaseItemOut] = []
    payments: List[PurchasePaymentOut] = []

    model_config = {"from_attributes": True}


# ===== PAYMENT SCHEMAS =====

class PurchasePaymentCreate(BaseModel):
    purchase_id: UUID
    amount: Decimal = Field(..., ge=Decimal("0.01"))
    payment_method: str = Field(..., min_length=1, max_length=50)
    reference: Optional[str] = Field(None, max_length=100)
    notes: Optional[str] = None

    @field_validator('payment_method')
    @classmethod
    def upper_method(cls, v: str) -> str:
        return v.strip().upper()
