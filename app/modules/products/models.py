from app.database.database import Base
from sqlalchemy import Column, Integer, String, Boolean, ForeignKey, Numeric
from sqlalchemy.orm import relationship
from sqlalchemy.dialects.postgresql import UUID
from app.common.mixins import BaseMixin


class Product(Base, BaseMixin):
    __tablename__ = "products"

    sku = Column(String(50), unique=True, nullable=False)
    name = Column(String(150), nullable=False)
    description = Column(String(255), nullable=True)

    category_id = Column(UUID(as_uuid=True), ForeignKey("departments.id"), nullable=False)
    subcategory_id = Column(UUID(as_uuid=True), ForeignKey("departments.id"), nullable=True)
    currency_id = Column(UUID(as_uuid=True), ForeignKey("currencies.id"), nullable=False)
    unit_id = Column(UUID(as_uuid=True), ForeignKey("units.id"), nullable=False)

    # Unidad secundaria (ej. Caja de 12 unidades)
    secondary_unit_id = Column(UUID(as_uuid=True), ForeignKey("units.id"), nullable=True)
    units_per_secondary_unit = Column(Integer, nullable=True)

    cost_price = Column(Numeric(15, 2), nullable=False, default=0)
    sale_price = Column(Numeric(15, 2), nullable=False, default=0)
    offer_price = Column(Numeric(15, 2), nullable=True)
    wholesale_price = Column(Numeric(15, 2), nullable=True)

    secondary_cost_price = Column(Numeric(15, 2), nullable=True)
    secondary_sale_price = Column(Numeric(15, 2), nullable=True)
    secondary_offer_price = Column(Numeric(15, 2), nullable=True)
    secondary_wholesale_price = Column(Numeric(15, 2), nullable=True)

    stock = Column(Numeric(15, 2), nullable=False, default=0)

    is_returnable = Column(Boolean, default=True, nullable=False)
    return_deadline_days = Column(Integer, nullable=True)

    # Relationships
    category = relationship("Department", foreign_keys=[category_id], lazy="joined")
    subcategory = relationship("Department", foreign_keys=[subcategory_id], lazy="joined")
    currency = relationship("Currency", lazy="joined")
    unit = relationship("Unit", foreign_keys=[unit_id], lazy="joined")
    secondary_unit = relationship("Unit", foreign_keys=[secondary_unit_id], lazy="joined")
