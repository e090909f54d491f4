from pydantic import BaseModel, Field
from typing import Optional
from uuid import UUID
from decimal import Decimal
from datetime import datetime

from app.modules.inventory_adjustments.models import AdjustmentType, AdjustmentReason


class AdjustmentCreate(BaseModel):
    product_id: UUID
    type: AdjustmentType
    quantity: Decimal = Field(..., ge=1, description="Cantidad a ajustar")
    reason: AdjustmentReason
    notes: Optional[str] = None
    performed_by: Optional[str] = Field(None, max_length=100, description="Usuario que realiza el ajuste")


class AdjustmentProduct(BaseModel):
    id: UUID
    name: str
    sku: str
    stock: Decimal

    model_config = {"from_attributes": True}


class AdjustmentOut(BaseModel):
    id: UUID
    product_id: UUID
    type: AdjustmentType
    quantity: Decimal
    reason: AdjustmentReason
    previous_stock: Decimal
    new_stock: Decimal
    notes: Optional[str] = None
    performed_by: str
    created_at: datetime
    product: Optional[AdjustmentProduct] = None

    model_config = {"from_attributes": True}
