from sqlalchemy import Column, String, ForeignKey
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship

from app.database.database import Base
from app.common.mixins import BaseMixin


class Department(Base, BaseMixin):
    """
    Departamentos de la tienda. Jerarquía de dos niveles:
    departamento -> subdepartamento (parent_id).
    """
    __tablename__ = "departments"

    name = Column(String(100), unique=True, nullable=False)
    description = Column(String(255), nullable=True)
    parent_id = Column(UUID(as_uuid=True), ForeignKey("departments.id"), nullable=True)

    # Relationships
    parent = relationship("Department", remote_side="Department.id", back_populates="children")
    children = relationship("Department", back_populates="parent")
