from pydantic import BaseModel, Field, field_validator, model_validator
from decimal import Decimal
from typing import Optional, List
from uuid import UUID
from datetime import date, datetime

from app.modules.hr.models import PaymentFrequency, PayrollStatus, PayrollItemType
from app.modules.contacts.schemas import check_email


# ===== EMPLEADOS =====

class EmployeeBase(BaseModel):
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    identification: str = Field(..., min_length=1, max_length=20, description="Cédula")
    email: Optional[str] = None
    phone: Optional[str] = Field(None, max_length=20)
    address: Optional[str] = None
    position: str = Field(..., min_length=1, max_length=100)
    department: Optional[str] = Field(None, max_length=100)
    base_salary: Decimal = Field(..., ge=0, description="Salario mensual")
    currency: str = Field("USD", max_length=10)
    payment_frequency: PaymentFrequency = PaymentFrequency.BIWEEKLY
    user_id: Optional[UUID] = None

    @field_validator('email')
    @classmethod
    def validate_email_field(cls, v):
        return check_email(v)


class EmployeeCreate(EmployeeBase):
    is_active: bool = True


class EmployeeUpdate(BaseModel):
    first_name: Optional[str] = Field(None, min_length=1, max_length=100)
    last_name: Optional[str] = Field(None, min_length=1, max_length=100)
    identification: Optional[str] = Field(None, min_length=1, max_length=20)
    email: Optional[str] = None
    phone: Optional[str] = Field(None, max_length=20)
    address: Optional[str] = None
    position: Optional[str] = Field(None, min_length=1, max_length=100)
    department: Optional[str] = Field(None, max_length=100)
    base_salary: Optional[Decimal] = Field(None, ge=0)
    currency: Optional[str] = Field(None, max_length=10)
    payment_frequency: Optional[PaymentFrequency] = None
    user_id: Optional[UUID] = None
    is_active: Optional[bool] = None

    @field_validator('email')
    @classmethod
    def validate_email_field(cls, v):
        return check_email(v)


class EmployeeOut(EmployeeBase):
    id: UUID
    is_active: bool
    created_at: datetime

    model_config = {"from_attributes": True}


# ===== NÓMINA =====

class PayrollPeriodCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    start_date: date
    end_date: date

    @model_validator(mode='after')
    def check_dates(self):
        if self.end_date < self.start_date:
            raise ValueError("La fecha de fin no puede ser anterior a la fecha de inicio")
        return self


class PayrollItemOut(BaseModel):
    id: UUID
    type: PayrollItemType
    description: str
    amount: Decimal

    model_config = {"from_attributes": True}


class PayrollEmployee(BaseModel):
    id: UUID
    first_name: str
    last_name: str
    identification: str

    model_config = {"from_attributes": True}


class PayrollPaymentOut(BaseModel):
    id: UUID
    employee_id: UUID
    base_salary: Decimal
    currency: str
    exchange_rate: Decimal
    total_income: Decimal
    total_deductions: Decimal
    net_amount: Decimal
    employee: Optional[PayrollEmployee] = None
    items: List[PayrollItemOut] = []

    model_config = {"from_attributes": True}


class PayrollPeriodOut(BaseModel):
    id: UUID
    name: str
    start_date: date
    end_date: date
    status: PayrollStatus
    total_amount: Decimal
    created_at: datetime

    model_config = {"from_attributes": True}


class PayrollPeriodDetail(PayrollPeriodOut):
    payments: List[PayrollPaymentOut] = []


class GeneratePayroll(BaseModel):
    payroll_period_id: UUID
    employee_ids: Optional[List[UUID]] = None
    frequency: Optional[PaymentFrequency] = None


class GeneratePayrollResult(BaseModel):
    count: int
    total_amount: Decimal
