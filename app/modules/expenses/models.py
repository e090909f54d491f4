from app.database.database import Base
from sqlalchemy import Column, String, DateTime, Numeric, Text
from sqlalchemy.dialects.postgresql import UUID
from app.common.mixins import TimestampMixin
from datetime import datetime
from uuid import uuid4


class Expense(Base, TimestampMixin):
    """Gastos operativos de la tienda (servicios, alquiler, mantenimiento...)"""
    __tablename__ = "expenses"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid4)
    description = Column(String(255), nullable=False)
    amount = Column(Numeric(15, 2), nullable=False)
    date = Column(DateTime, nullable=False, default=datetime.utcnow, index=True)
    category = Column(String(100), nullable=False, index=True)
    payment_method = Column(String(50), nullable=False)
    reference = Column(String(100), nullable=True)
    notes = Column(Text, nullable=True)
