"""
Modelos SQLAlchemy para el módulo POS (Point of Sale)

- CashRegister: Cajas registradoras físicas
- CashSession: Turnos de caja con apertura/cierre y arqueo
- CashMovement: Movimientos de caja (ventas, depósitos, retiros, gastos)
- Sale / SaleItem: Ventas y sus renglones

Integración con inventario:
- Ventas POS -> descuentan stock automáticamente
- La porción en efectivo de cada venta genera un movimiento SALE
"""

from app.database.database import Base
from sqlalchemy import Column, String, Boolean, DateTime, ForeignKey, Numeric, Enum, Text
from sqlalchemy.orm import relationship
from datetime import datetime
from sqlalchemy.dialects.postgresql import UUID
from uuid import uuid4
from app.common.mixins import BaseMixin, TimestampMixin
import enum


# ===== ENUMS =====

class SessionStatus(str, enum.Enum):
    """Estados de sesión de caja"""
    OPEN = "OPEN"
    CLOSED = "CLOSED"


class MovementType(str, enum.Enum):
    """Tipos de movimiento de caja"""
    SALE = "SALE"               # Venta en efectivo (ingreso automático)
    DEPOSIT = "DEPOSIT"         # Ingreso manual de efectivo
    WITHDRAWAL = "WITHDRAWAL"   # Retiro manual de efectivo
    EXPENSE = "EXPENSE"         # Gasto pagado desde caja
    OPENING = "OPENING"         # Fondo de apertura (informativo)
    CLOSING = "CLOSING"         # Conteo de cierre (informativo)


INFLOW_TYPES = (MovementType.SALE, MovementType.DEPOSIT)
OUTFLOW_TYPES = (MovementType.WITHDRAWAL, MovementType.EXPENSE)


# ===== MODELOS =====

class CashRegister(Base, BaseMixin):
    """Caja registradora física"""
    __tablename__ = "cash_registers"

    name = Column(String(100), nullable=False)
    location = Column(String(100), nullable=True)

    sessions = relationship("CashSession", back_populates="register")


class CashSession(Base, TimestampMixin):
    """
    Turno de caja.

    Solo puede existir una sesión OPEN por caja. Al cerrar se calcula el
    balance esperado a partir de los movimientos y la varianza contra el
    conteo físico.
    """
    __tablename__ = "cash_sessions"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid4)
    register_id = Column(UUID(as_uuid=True), ForeignKey("cash_registers.id"), nullable=False, index=True)
    status = Column(Enum(SessionStatus), nullable=False, default=SessionStatus.OPEN, index=True)

    # Balances
    opening_balance = Column(Numeric(15, 2), nullable=False, default=0)
    expected_balance = Column(Numeric(15, 2), nullable=True)  # Solo se llena al cerrar
    actual_balance = Column(Numeric(15, 2), nullable=True)
    variance = Column(Numeric(15, 2), nullable=True)

    # Control de apertura/cierre
    opened_by = Column(String(100), nullable=False, default="Sistema")
    closed_by = Column(String(100), nullable=True)
    opened_at = Column(DateTime, nullable=False, default=datetime.utcnow, index=True)
    closed_at = Column(DateTime, nullable=True)

    opening_notes = Column(Text, nullable=True)
    closing_notes = Column(Text, nullable=True)

    # Relationships
    register = relationship("CashRegister", back_populates="sessions", lazy="joined")
    movements = relationship(
        "CashMovement", back_populates="session",
        order_by="CashMovement.created_at", cascade="all, delete-orphan"
    )

    @property
    def calculated_balance(self):
        """Fondo de apertura + ingresos - egresos"""
        balance = self.opening_balance
        for movement in self.movements:
            balance += movement.signed_amount
        return balance


class CashMovement(Base, TimestampMixin):
    """Movimiento de efectivo dentro de una sesión; amount siempre positivo"""
    __tablename__ = "cash_movements"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid4)
    session_id = Column(UUID(as_uuid=True), ForeignKey("cash_sessions.id"), nullable=False, index=True)
    type = Column(Enum(MovementType), nullable=False, index=True)
    amount = Column(Numeric(15, 2), nullable=False)
    currency_code = Column(String(10), nullable=False, default="VES")
    description = Column(String(255), nullable=True)
    notes = Column(Text, nullable=True)
    performed_by = Column(String(100), nullable=False, default="Sistema")

    # Relación con venta (solo para type=SALE)
    sale_id = Column(UUID(as_uuid=True), ForeignKey("sales.id"), nullable=True, index=True)

    # Relationships
    session = relationship("CashSession", back_populates="movements")
    sale = relationship("Sale")

    @property
    def signed_amount(self):
        """Monto con signo según el tipo; apertura y cierre no afectan el balance"""
        if self.type in INFLOW_TYPES:
            return abs(self.amount)
        if self.type in OUTFLOW_TYPES:
            return -abs(self.amount)
        return 0


class Sale(Base, BaseMixin):
    """Venta del punto de venta"""
    __tablename__ = "sales"

    invoice_number = Column(String(20), unique=True, nullable=False, index=True)
    client_id = Column(UUID(as_uuid=True), ForeignKey("clients.id"), nullable=True, index=True)

    subtotal = Column(Numeric(15, 2), nullable=False, default=0)
    discount = Column(Numeric(15, 2), nullable=False, default=0)
    tax = Column(Numeric(15, 2), nullable=False, default=0)
    total = Column(Numeric(15, 2), nullable=False, default=0)

    # "CASH" o pagos mixtos "CASH:600, DEBIT:300"
    payment_method = Column(String(255), nullable=False, default="CASH")
    tendered = Column(Numeric(15, 2), nullable=True)
    change = Column(Numeric(15, 2), nullable=True)

    is_credit = Column(Boolean, nullable=False, default=False)
    date = Column(DateTime, nullable=False, default=datetime.utcnow, index=True)
    is_cancelled = Column(Boolean, nullable=False, default=False)
    has_returns = Column(Boolean, nullable=False, default=False)

    # Relationships
    client = relationship("Client", lazy="joined")
    items = relationship("SaleItem", back_populates="sale", cascade="all, delete-orphan")
    credit_invoice = relationship("Invoice", back_populates="sale", uselist=False)


class SaleItem(Base, TimestampMixin):
    __tablename__ = "sale_items"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid4)
    sale_id = Column(UUID(as_uuid=True), ForeignKey("sales.id"), nullable=False, index=True)
    product_id = Column(UUID(as_uuid=True), ForeignKey("products.id"), nullable=False, index=True)

    quantity = Column(Numeric(15, 2), nullable=False)
    unit_price = Column(Numeric(15, 2), nullable=False)
    total = Column(Numeric(15, 2), nullable=False)

    # Relationships
    sale = relationship("Sale", back_populates="items")
    product = relationship("Product", lazy="joined")
