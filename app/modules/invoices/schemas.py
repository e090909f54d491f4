from pydantic import BaseModel, Field, model_validator
from decimal import Decimal
from typing import Optional, List
from uuid import UUID
from datetime import datetime

from app.modules.invoices.models import InvoiceStatus


# ===== CONTADOR =====

class InvoiceNumberOut(BaseModel):
    invoice_number: str


class InvoiceCounterOut(BaseModel):
    id: UUID
    prefix: str
    current_number: int
    next_invoice_number: str
    updated_at: datetime


# ===== FACTURAS =====

class InvoiceCreate(BaseModel):
    client_id: UUID = Field(..., description="ID del cliente")
    sale_id: Optional[UUID] = Field(None, description="Venta relacionada (si viene del POS)")
    subtotal: Decimal = Field(..., gt=0)
    discount: Decimal = Field(Decimal("0"), ge=0)
    tax: Decimal = Field(Decimal("0"), ge=0)
    total: Decimal = Field(..., gt=0)
    due_date: Optional[datetime] = Field(None, description="Fecha de vencimiento del crédito")
    notes: Optional[str] = None


class InvoiceClient(BaseModel):
    id: UUID
    rif: str
    comercial_name: str

    model_config = {"from_attributes": True}


class PaymentOut(BaseModel):
    id: UUID
    invoice_id: UUID
    amount: Decimal
    payment_method: str
    reference: Optional[str] = None
    notes: Optional[str] = None
    payment_date: datetime

    model_config = {"from_attributes": True}


class InvoiceOut(BaseModel):
    id: UUID
    number: str
    client_id: UUID
    sale_id: Optional[UUID] = None
    subtotal: Decimal
    discount: Decimal
    tax: Decimal
    total: Decimal
    paid_amount: Decimal
    balance: Decimal
    status: InvoiceStatus
    due_date: Optional[datetime] = None
    notes: Optional[str] = None
    created_at: datetime
    client: Optional[InvoiceClient] = None

    model_config = {"from_attributes": True}


class InvoiceDetail(InvoiceOut):
    payments: List[PaymentOut] = []


# ===== PAGOS =====

class PaymentCreate(BaseModel):
    invoice_id: UUID = Field(..., description="ID de la factura a pagar")
    amount: Decimal = Field(..., gt=0, description="Monto del pago")
    payment_method: str = Field(..., min_length=1, max_length=50, description="Método de pago (CASH, TRANSFER...)")
    reference: Optional[str] = Field(None, max_length=100, description="Número de referencia bancaria")
    notes: Optional[str] = None

    @model_validator(mode="after")
    def normalize_method(self):
        self.payment_method = self.payment_method.strip().upper()
        return self


class PaymentWithInvoice(PaymentOut):
    invoice: Optional[InvoiceOut] = None


class PaymentResult(BaseModel):
    payment: PaymentOut
    invoice: InvoiceOut
