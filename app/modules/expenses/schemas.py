from pydantic import BaseModel, Field
from typing import Optional
from uuid import UUID
from decimal import Decimal
from datetime import datetime


class ExpenseCreate(BaseModel):
    description: str = Field(..., min_length=1, max_length=255)
    amount: Decimal = Field(..., ge=0)
    date: Optional[datetime] = Field(None, description="Por defecto, la fecha actual")
    category: str = Field(..., min_length=1, max_length=100)
    payment_method: str = Field(..., min_length=1, max_length=50)
    reference: Optional[str] = Field(None, max_length=100)
    notes: Optional[str] = None


class ExpenseUpdate(BaseModel):
    description: Optional[str] = Field(None, min_length=1, max_length=255)
    amount: Optional[Decimal] = Field(None, ge=0)
    date: Optional[datetime] = None
    category: Optional[str] = Field(None, min_length=1, max_length=100)
    payment_method: Optional[str] = Field(None, min_length=1, max_length=50)
    reference: Optional[str] = Field(None, max_length=100)
    notes: Optional[str] = None


class ExpenseOut(BaseModel):
    id: UUID
    description: str
    amount: Decimal
    date: datetime
    category: str
    payment_method: str
    reference: Optional[str] = None
    notes: Optional[str] = None
    created_at: datetime

    model_config = {"from_attributes": True}
