"""
Esquemas Pydantic para el módulo de Contactos

Valida RIF venezolano (10 a 12 caracteres), teléfono y email.
"""

from pydantic import BaseModel, Field, field_validator
from typing import Optional
from uuid import UUID
from datetime import datetime
import re

from app.common.validators import normalize_rif, validate_rif, validate_phone


EMAIL_PATTERN = r'^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$'


def check_rif(v: Optional[str]) -> Optional[str]:
    if v is None:
        return v
    if not validate_rif(v):
        raise ValueError('El RIF debe tener entre 10 y 12 caracteres y formato J-12345678-9')
    return normalize_rif(v)


def check_phone(v: Optional[str]) -> Optional[str]:
    if v is None or v.strip() == "":
        return None
    if not validate_phone(v):
        raise ValueError('Teléfono inválido. Use formato venezolano: +58 412-1234567 o 0212-1234567')
    return v.strip()


def check_email(v: Optional[str]) -> Optional[str]:
    if v and v.strip():
        if not re.match(EMAIL_PATTERN, v.strip()):
            raise ValueError('Email inválido')
        return v.strip().lower()
    return None


# ===== CLIENT SCHEMAS =====

class ClientBase(BaseModel):
    rif: str = Field(..., description="RIF del cliente (único)")
    comercial_name: str = Field(..., min_length=1, max_length=200, description="Nombre comercial")
    legal_name: Optional[str] = Field(None, max_length=200, description="Razón social")
    address: Optional[str] = None
    phone: Optional[str] = Field(None, max_length=30)
    email: Optional[str] = Field(None, max_length=100)

    @field_validator('rif')
    @classmethod
    def validate_rif_field(cls, v):
        return check_rif(v)

    @field_validator('phone')
    @classmethod
    def validate_phone_field(cls, v):
        return check_phone(v)

    @field_validator('email')
    @classmethod
    def validate_email_field(cls, v):
        return check_email(v)


class ClientCreate(ClientBase):
    pass


class ClientUpdate(ClientBase):
    rif: Optional[str] = None
    comercial_name: Optional[str] = Field(None, min_length=1, max_length=200)
    is_active: Optional[bool] = None


class ClientOut(BaseModel):
    id: UUID
    rif: str
    comercial_name: str
    legal_name: Optional[str] = None
    address: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    is_active: bool
    created_at: datetime

    model_config = {"from_attributes": True}


# ===== SUPPLIER SCHEMAS =====

class SupplierCreate(ClientBase):
    rif: str = Field(..., description="RIF del proveedor (único)")
    contact_name: Optional[str] = Field(None, max_length=150, description="Nombre del contacto")
    category: Optional[str] = Field(None, max_length=100, description="Categoría del proveedor")


class SupplierUpdate(ClientUpdate):
    contact_name: Optional[str] = Field(None, max_length=150)
    category: Optional[str] = Field(None, max_length=100)


class SupplierOut(ClientOut):
    contact_name: Optional[str] = None
    category: Optional[str] = None
