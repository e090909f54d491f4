"""
Modelos SQLAlchemy para devoluciones

Cada devolución emite una nota de crédito (NC-00000001, NC-00000002...)
contra una venta original.
"""

from app.database.database import Base
from sqlalchemy import Column, String, DateTime, ForeignKey, Numeric, Enum, Text
from sqlalchemy.orm import relationship
from sqlalchemy.dialects.postgresql import UUID
from uuid import uuid4
from app.common.mixins import TimestampMixin
import enum


CREDIT_NOTE_PREFIX = "NC"


class ReturnType(str, enum.Enum):
    REFUND = "REFUND"                          # Reembolso
    EXCHANGE_SAME = "EXCHANGE_SAME"            # Cambio por el mismo producto
    EXCHANGE_DIFFERENT = "EXCHANGE_DIFFERENT"  # Cambio por otro producto


class ReturnReason(str, enum.Enum):
    DEFECTIVE = "DEFECTIVE"
    UNSATISFIED = "UNSATISFIED"
    ERROR = "ERROR"
    EXPIRED = "EXPIRED"
    OTHER = "OTHER"


class ProductCondition(str, enum.Enum):
    EXCELLENT = "EXCELLENT"
    GOOD = "GOOD"
    DEFECTIVE = "DEFECTIVE"
    DAMAGED = "DAMAGED"


class RefundMethod(str, enum.Enum):
    CASH = "CASH"
    TRANSFER = "TRANSFER"
    CREDIT_NOTE = "CREDIT_NOTE"


class ReturnStatus(str, enum.Enum):
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"
    COMPLETED = "COMPLETED"


RESTOCKABLE_CONDITIONS = (ProductCondition.EXCELLENT, ProductCondition.GOOD)


class Return(Base, TimestampMixin):
    __tablename__ = "returns"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid4)
    credit_note_number = Column(String(20), unique=True, nullable=False, index=True)
    original_sale_id = Column(UUID(as_uuid=True), ForeignKey("sales.id"), nullable=False, index=True)

    return_type = Column(Enum(ReturnType), nullable=False)
    reason = Column(Enum(ReturnReason), nullable=False)
    product_condition = Column(Enum(ProductCondition), nullable=False)

    refund_amount = Column(Numeric(15, 2), nullable=False, default=0)
    refund_method = Column(Enum(RefundMethod), nullable=True)

    status = Column(Enum(ReturnStatus), nullable=False, default=ReturnStatus.PENDING, index=True)
    requested_by = Column(String(100), nullable=True)
    approved_by = Column(String(100), nullable=True)
    approved_at = Column(DateTime, nullable=True)
    notes = Column(Text, nullable=True)

    # Relationships
    original_sale = relationship("Sale", lazy="joined")
    items = relationship("ReturnItem", back_populates="return_record", cascade="all, delete-orphan")


class ReturnItem(Base, TimestampMixin):
    __tablename__ = "return_items"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid4)
    return_id = Column(UUID(as_uuid=True), ForeignKey("returns.id"), nullable=False, index=True)
    product_id = Column(UUID(as_uuid=True), ForeignKey("products.id"), nullable=False, index=True)

    quantity = Column(Numeric(15, 2), nullable=False)
    unit_price = Column(Numeric(15, 2), nullable=False)
    total = Column(Numeric(15, 2), nullable=False)
    restock_quantity = Column(Numeric(15, 2), nullable=False, default=0)  # Unidades que vuelven al stock

    # Relationships
    return_record = relationship("Return", back_populates="items")
    product = relationship("Product", lazy="joined")
