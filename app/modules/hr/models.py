"""
Modelos de Recursos Humanos

- Employee: Empleados con salario base y frecuencia de pago
- PayrollPeriod: Periodo de nómina (DRAFT -> PROCESSED -> PAID)
- PayrollPayment / PayrollItem: Recibo por empleado y sus conceptos
"""

from app.database.database import Base
from sqlalchemy import Column, String, Date, ForeignKey, Numeric, Enum, Text
from sqlalchemy.orm import relationship
from sqlalchemy.dialects.postgresql import UUID
from uuid import uuid4
from app.common.mixins import BaseMixin, TimestampMixin
import enum


class PaymentFrequency(str, enum.Enum):
    WEEKLY = "WEEKLY"
    BIWEEKLY = "BIWEEKLY"
    MONTHLY = "MONTHLY"


class PayrollStatus(str, enum.Enum):
    DRAFT = "DRAFT"
    PROCESSED = "PROCESSED"
    PAID = "PAID"


class PayrollItemType(str, enum.Enum):
    INCOME = "INCOME"
    DEDUCTION = "DEDUCTION"


class Employee(Base, BaseMixin):
    __tablename__ = "employees"

    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False, index=True)
    identification = Column(String(20), unique=True, nullable=False, index=True)  # Cédula
    email = Column(String(100), nullable=True)
    phone = Column(String(20), nullable=True)
    address = Column(Text, nullable=True)
    position = Column(String(100), nullable=False)
    department = Column(String(100), nullable=True)

    base_salary = Column(Numeric(15, 2), nullable=False, default=0)  # Mensual
    currency = Column(String(10), nullable=False, default="USD")
    payment_frequency = Column(Enum(PaymentFrequency), nullable=False, default=PaymentFrequency.BIWEEKLY)

    user_id = Column(UUID(as_uuid=True), ForeignKey("users.id"), nullable=True)

    # Relationships
    user = relationship("User")


class PayrollPeriod(Base, TimestampMixin):
    __tablename__ = "payroll_periods"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid4)
    name = Column(String(100), nullable=False)
    start_date = Column(Date, nullable=False, index=True)
    end_date = Column(Date, nullable=False)
    status = Column(Enum(PayrollStatus), nullable=False, default=PayrollStatus.DRAFT)
    total_amount = Column(Numeric(15, 2), nullable=False, default=0)

    payments = relationship("PayrollPayment", back_populates="period", cascade="all, delete-orphan")


class PayrollPayment(Base, TimestampMixin):
    """Recibo de pago de un empleado dentro de un periodo"""
    __tablename__ = "payroll_payments"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid4)
    payroll_period_id = Column(UUID(as_uuid=True), ForeignKey("payroll_periods.id"), nullable=False, index=True)
    employee_id = Column(UUID(as_uuid=True), ForeignKey("employees.id"), nullable=False, index=True)

    base_salary = Column(Numeric(15, 2), nullable=False)
    currency = Column(String(10), nullable=False)
    exchange_rate = Column(Numeric(18, 6), nullable=False, default=1)
    total_income = Column(Numeric(15, 2), nullable=False, default=0)
    total_deductions = Column(Numeric(15, 2), nullable=False, default=0)
    net_amount = Column(Numeric(15, 2), nullable=False, default=0)

    # Relationships
    period = relationship("PayrollPeriod", back_populates="payments")
    employee = relationship("Employee", lazy="joined")
    items = relationship("PayrollItem", back_populates="payment", cascade="all, delete-orphan")


class PayrollItem(Base, TimestampMixin):
    __tablename__ = "payroll_items"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid4)
    payroll_payment_id = Column(UUID(as_uuid=True), ForeignKey("payroll_payments.id"), nullable=False, index=True)
    type = Column(Enum(PayrollItemType), nullable=False)
    description = Column(String(255), nullable=False)
    amount = Column(Numeric(15, 2), nullable=False)

    payment = relationship("PayrollPayment", back_populates="items")
