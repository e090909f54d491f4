from app.database.database import Base
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Numeric, Enum, Text
from sqlalchemy.orm import relationship
from datetime import datetime
from sqlalchemy.dialects.postgresql import UUID
from uuid import uuid4
from app.common.mixins import BaseMixin, TimestampMixin
import enum


INVOICE_PREFIX = "FAC"


class InvoiceStatus(str, enum.Enum):
    PENDING = "PENDING"      # Sin abonos
    PARTIAL = "PARTIAL"      # Con abonos, saldo pendiente
    PAID = "PAID"            # Pagada completamente
    OVERDUE = "OVERDUE"      # Vencida con saldo pendiente
    CANCELLED = "CANCELLED"  # Anulada


class InvoiceCounter(Base, TimestampMixin):
    """Contador de numeración de facturas; current_number es el próximo a emitir"""
    __tablename__ = "invoice_counters"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid4)
    prefix = Column(String(10), unique=True, nullable=False, default=INVOICE_PREFIX)
    current_number = Column(Integer, nullable=False, default=1)

    def format_number(self, number: int = None) -> str:
        return f"{self.prefix}-{(number or self.current_number):08d}"


class Invoice(Base, BaseMixin):
    """Factura a crédito (cuenta por cobrar)"""
    __tablename__ = "invoices"

    number = Column(String(20), unique=True, nullable=False, index=True)
    client_id = Column(UUID(as_uuid=True), ForeignKey("clients.id"), nullable=False, index=True)
    sale_id = Column(UUID(as_uuid=True), ForeignKey("sales.id"), nullable=True, index=True)

    subtotal = Column(Numeric(15, 2), nullable=False, default=0)
    discount = Column(Numeric(15, 2), nullable=False, default=0)
    tax = Column(Numeric(15, 2), nullable=False, default=0)
    total = Column(Numeric(15, 2), nullable=False, default=0)
    paid_amount = Column(Numeric(15, 2), nullable=False, default=0)
    balance = Column(Numeric(15, 2), nullable=False, default=0)

    status = Column(Enum(InvoiceStatus), nullable=False, default=InvoiceStatus.PENDING, index=True)
    due_date = Column(DateTime, nullable=True)
    notes = Column(Text, nullable=True)

    # Relationships
    client = relationship("Client", lazy="joined")
    sale = relationship("Sale", back_populates="credit_invoice")
    payments = relationship(
        "Payment", back_populates="invoice",
        order_by="Payment.payment_date.desc()", cascade="all, delete-orphan"
    )


class Payment(Base, TimestampMixin):
    """Abono de un cliente contra una factura a crédito"""
    __tablename__ = "payments"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid4)
    invoice_id = Column(UUID(as_uuid=True), ForeignKey("invoices.id"), nullable=False, index=True)

    amount = Column(Numeric(15, 2), nullable=False)
    payment_method = Column(String(50), nullable=False)  # CASH, TRANSFER, PAGO_MOVIL...
    reference = Column(String(100), nullable=True)       # Referencia bancaria
    notes = Column(Text, nullable=True)
    payment_date = Column(DateTime, nullable=False, default=datetime.utcnow)

    # Relationships
    invoice = relationship("Invoice", back_populates="payments")
