"""
Modelos SQLAlchemy para el módulo de Compras (cuentas por pagar)

- Purchase: Factura de proveedor registrada como compra
- PurchaseItem: Renglones con el costo de compra
- PurchasePayment: Pagos contra la compra

Integración con inventario:
- Registrar una compra incrementa stock y actualiza el costo del producto
"""

from app.database.database import Base
from sqlalchemy import Column, String, DateTime, ForeignKey, Numeric, Enum, Text
from sqlalchemy.orm import relationship
from datetime import datetime
from sqlalchemy.dialects.postgresql import UUID
from uuid import uuid4
from app.common.mixins import TimestampMixin
import enum


class PurchasePaymentStatus(str, enum.Enum):
    """Estado de pago de una compra"""
    UNPAID = "UNPAID"
    PARTIAL = "PARTIAL"
    PAID = "PAID"


class Purchase(Base, TimestampMixin):
    __tablename__ = "purchases"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid4)
    supplier_id = Column(UUID(as_uuid=True), ForeignKey("suppliers.id"), nullable=False, index=True)

    # Factura del proveedor
    invoice_number = Column(String(100), nullable=True, index=True)
    invoice_date = Column(DateTime, nullable=False, default=datetime.utcnow)
    due_date = Column(DateTime, nullable=True)

    currency_code = Column(String(10), nullable=False, default="VES")
    exchange_rate = Column(Numeric(18, 6), nullable=False, default=1)

    # Totales
    subtotal = Column(Numeric(15, 2), nullable=False, default=0)
    tax_amount = Column(Numeric(15, 2), nullable=False, default=0)
    total = Column(Numeric(15, 2), nullable=False, default=0)
    paid_amount = Column(Numeric(15, 2), nullable=False, default=0)
    balance = Column(Numeric(15, 2), nullable=False, default=0)
    payment_status = Column(
        Enum(PurchasePaymentStatus), nullable=False,
        default=PurchasePaymentStatus.UNPAID, index=True
    )

    # Relationships
    supplier = relationship("Supplier", lazy="joined")
    items = relationship("PurchaseItem", back_populates="purchase", cascade="all, delete-orphan")
    payments = relationship(
        "PurchasePayment", back_populates="purchase",
        order_by="PurchasePayment.payment_date", cascade="all, delete-orphan"
    )


class PurchaseItem(Base, TimestampMixin):
    __tablename__ = "purchase_items"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid4)
    purchase_id = Column(UUID(as_uuid=True), ForeignKey("purchases.id"), nullable=False, index=True)
    product_id = Column(UUID(as_uuid=True), ForeignKey("products.id"), nullable=False, index=True)

    quantity = Column(Numeric(15, 2), nullable=False)
    cost = Column(Numeric(15, 2), nullable=False)
    total = Column(Numeric(15, 2), nullable=False)
    old_cost = Column(Numeric(15, 2), nullable=True)  # Costo del producto antes de la compra

    # Relationships
    purchase = relationship("Purchase", back_populates="items")
    product = relationship("Product", lazy="joined")


class PurchasePayment(Base, TimestampMixin):
    """Pago realizado a una compra; permite abonos parciales"""
    __tablename__ = "purchase_payments"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid4)
    purchase_id = Column(UUID(as_uuid=True), ForeignKey("purchases.id"), nullable=False, index=True)

    amount = Column(Numeric(15, 2), nullable=False)
    payment_method = Column(String(50), nullable=False)
    reference = Column(String(100), nullable=True)
    notes = Column(Text, nullable=True)
    payment_date = Column(DateTime, nullable=False, default=datetime.utcnow)

    # Relationships
    purchase = relationship("Purchase", back_populates="payments")
