from pydantic import BaseModel, Field
from decimal import Decimal
from typing import Optional, List
from uuid import UUID
from datetime import datetime

from app.modules.returns.models import (
    ReturnType, ReturnReason, ProductCondition, RefundMethod, ReturnStatus
)


class ReturnItemCreate(BaseModel):
    product_id: UUID
    quantity: Decimal = Field(..., ge=1, description="Cantidad devuelta")
    unit_price: Decimal = Field(..., ge=0)
    total: Decimal = Field(..., ge=0)
    restock_quantity: Decimal = Field(Decimal("0"), ge=0, description="Cantidad que regresa al stock")


class ReturnCreate(BaseModel):
    original_sale_id: UUID
    return_type: ReturnType
    reason: ReturnReason
    product_condition: ProductCondition
    items: List[ReturnItemCreate] = Field(..., min_length=1)
    refund_amount: Decimal = Field(..., ge=0)
    refund_method: Optional[RefundMethod] = None
    notes: Optional[str] = None
    requested_by: Optional[str] = Field(None, max_length=100)


class ReturnUpdate(BaseModel):
    notes: Optional[str] = None
    approved_by: Optional[str] = Field(None, max_length=100)


class ReturnApprove(BaseModel):
    approved_by: str = Field(..., min_length=1, max_length=100)


class ReturnReject(BaseModel):
    reason: str = Field(..., min_length=1)


class EligibilityItem(BaseModel):
    product_id: UUID
    quantity: Decimal = Field(..., ge=1)


class EligibilityRequest(BaseModel):
    sale_id: UUID
    items: List[EligibilityItem] = Field(..., min_length=1)


class EligibilityResult(BaseModel):
    eligible: bool
    message: Optional[str] = None


class ReturnProduct(BaseModel):
    id: UUID
    sku: str
    name: str

    model_config = {"from_attributes": True}


class ReturnItemOut(BaseModel):
    id: UUID
    product_id: UUID
    quantity: Decimal
    unit_price: Decimal
    total: Decimal
    restock_quantity: Decimal
    product: Optional[ReturnProduct] = None

    model_config = {"from_attributes": True}


class ReturnSale(BaseModel):
    id: UUID
    invoice_number: str
    total: Decimal
    date: datetime
    client_id: Optional[UUID] = None

    model_config = {"from_attributes": True}


class ReturnOut(BaseModel):
    id: UUID
    credit_note_number: str
    original_sale_id: UUID
    return_type: ReturnType
    reason: ReturnReason
    product_condition: ProductCondition
    refund_amount: Decimal
    refund_method: Optional[RefundMethod] = None
    status: ReturnStatus
    requested_by: Optional[str] = None
    approved_by: Optional[str] = None
    approved_at: Optional[datetime] = None
    notes: Optional[str] = None
    created_at: datetime
    original_sale: Optional[ReturnSale] = None
    items: List[ReturnItemOut] = []

    model_config = {"from_attributes": True}
