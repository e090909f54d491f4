"""
Modelos SQLAlchemy para el módulo de Contactos

- Client: clientes de la tienda (ventas a crédito y facturas por cobrar)
- Supplier: proveedores (compras y cuentas por pagar)
"""

from app.database.database import Base
from sqlalchemy import Column, String, Text
from app.common.mixins import BaseMixin


class ContactColumnsMixin:
    """Columnas comunes a clientes y proveedores"""

    rif = Column(String(12), unique=True, nullable=False, index=True)  # J-12345678-9
    comercial_name = Column(String(200), nullable=False, index=True)
    legal_name = Column(String(200), nullable=True)
    address = Column(Text, nullable=True)
    phone = Column(String(30), nullable=True)
    email = Column(String(100), nullable=True)


class Client(Base, BaseMixin, ContactColumnsMixin):
    __tablename__ = "clients"

    def __repr__(self):
        return f"<Client(rif='{self.rif}', name='{self.comercial_name}')>"


class Supplier(Base, BaseMixin, ContactColumnsMixin):
    __tablename__ = "suppliers"

    contact_name = Column(String(150), nullable=True)  # Persona de contacto
    category = Column(String(100), nullable=True)      # Rubro del proveedor

    def __repr__(self):
        return f"<Supplier(rif='{self.rif}', name='{self.comercial_name}')>"
