from pydantic import BaseModel, Field
from typing import Optional
from uuid import UUID
from decimal import Decimal
from datetime import datetime

from app.modules.banks.models import AccountType


class BankAccountCreate(BaseModel):
    bank_name: str = Field(..., min_length=1, max_length=100)
    account_number: str = Field(..., min_length=1, max_length=30)
    account_type: AccountType
    holder_name: str = Field(..., min_length=1, max_length=150)
    holder_id: str = Field(..., min_length=1, max_length=20)
    currency_id: UUID
    initial_balance: Decimal = Field(Decimal("0"), ge=0, description="Saldo inicial de la cuenta")


class BankAccountUpdate(BaseModel):
    bank_name: Optional[str] = Field(None, min_length=1, max_length=100)
    account_number: Optional[str] = Field(None, min_length=1, max_length=30)
    account_type: Optional[AccountType] = None
    holder_name: Optional[str] = Field(None, min_length=1, max_length=150)
    holder_id: Optional[str] = Field(None, min_length=1, max_length=20)
    currency_id: Optional[UUID] = None
    is_active: Optional[bool] = None


class BankCurrency(BaseModel):
    id: UUID
    code: str
    symbol: str

    model_config = {"from_attributes": True}


class BankAccountOut(BaseModel):
    id: UUID
    bank_name: str
    account_number: str
    account_type: AccountType
    holder_name: str
    holder_id: str
    currency_id: UUID
    balance: Decimal
    is_active: bool
    created_at: datetime
    currency: Optional[BankCurrency] = None

    model_config = {"from_attributes": True}
