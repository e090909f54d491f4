from sqlalchemy import Column, String, ForeignKey, Numeric, Enum, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from uuid import uuid4
import enum

from app.database.database import Base
from app.common.mixins import TimestampMixin


class AdjustmentType(str, enum.Enum):
    INCREASE = "INCREASE"
    DECREASE = "DECREASE"


class AdjustmentReason(str, enum.Enum):
    DAMAGE = "DAMAGE"        # Producto dañado
    LOSS = "LOSS"            # Pérdida o robo
    ERROR = "ERROR"          # Error de conteo
    INITIAL = "INITIAL"      # Inventario inicial
    RETURN = "RETURN"        # Devolución al stock
    TRANSFER = "TRANSFER"
    OTHER = "OTHER"


class InventoryAdjustment(Base, TimestampMixin):
    """Registro inmutable de cada ajuste manual de stock"""
    __tablename__ = "inventory_adjustments"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid4)
    product_id = Column(UUID(as_uuid=True), ForeignKey("products.id"), nullable=False, index=True)
    type = Column(Enum(AdjustmentType), nullable=False)
    quantity = Column(Numeric(15, 2), nullable=False)
    reason = Column(Enum(AdjustmentReason), nullable=False)
    previous_stock = Column(Numeric(15, 2), nullable=False)
    new_stock = Column(Numeric(15, 2), nullable=False)
    notes = Column(Text, nullable=True)
    performed_by = Column(String(100), nullable=False, default="Sistema")

    # Relationships
    product = relationship("Product", lazy="joined")
