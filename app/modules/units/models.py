from app.database.database import Base
from sqlalchemy import Column, String
from app.common.mixins import BaseMixin


class Unit(Base, BaseMixin):
    """Unidades de medida (Unidad, Kilogramo, Caja...)"""
    __tablename__ = "units"

    name = Column(String(50), unique=True, nullable=False)
    abbreviation = Column(String(10), nullable=False)
