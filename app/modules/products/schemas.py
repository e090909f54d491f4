from pydantic import BaseModel, Field
from uuid import UUID
from typing import Optional
from decimal import Decimal
from datetime import datetime


# Schemas básicos para relaciones
class DepartmentBrief(BaseModel):
    id: UUID
    name: str

    model_config = {"from_attributes": True}


class CurrencyBrief(BaseModel):
    id: UUID
    name: str
    code: str
    symbol: str

    model_config = {"from_attributes": True}


class UnitBrief(BaseModel):
    id: UUID
    name: str
    abbreviation: str

    model_config = {"from_attributes": True}


class ProductBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=150)
    description: Optional[str] = Field(None, max_length=255)
    category_id: UUID = Field(..., description="Departamento principal")
    subcategory_id: Optional[UUID] = Field(None, description="Subdepartamento")
    currency_id: UUID
    unit_id: UUID
    secondary_unit_id: Optional[UUID] = None
    units_per_secondary_unit: Optional[int] = Field(None, ge=1)
    cost_price: Decimal = Field(..., ge=0, description="Precio de costo")
    sale_price: Decimal = Field(..., ge=0, description="Precio de venta normal")
    offer_price: Optional[Decimal] = Field(None, ge=0)
    wholesale_price: Optional[Decimal] = Field(None, ge=0)
    secondary_cost_price: Optional[Decimal] = Field(None, ge=0)
    secondary_sale_price: Optional[Decimal] = Field(None, ge=0)
    secondary_offer_price: Optional[Decimal] = Field(None, ge=0)
    secondary_wholesale_price: Optional[Decimal] = Field(None, ge=0)
    is_returnable: bool = True
    return_deadline_days: Optional[int] = Field(None, ge=0)


class ProductCreate(ProductBase):
    sku: str = Field(..., min_length=1, max_length=50)
    stock: Decimal = Field(Decimal("0"), ge=0, description="Stock inicial")


class ProductUpdate(BaseModel):
    """Todos los campos son opcionales; el stock se modifica por ajustes de inventario"""
    sku: Optional[str] = Field(None, min_length=1, max_length=50)
    name: Optional[str] = Field(None, min_length=1, max_length=150)
    description: Optional[str] = Field(None, max_length=255)
    category_id: Optional[UUID] = None
    subcategory_id: Optional[UUID] = None
    currency_id: Optional[UUID] = None
    unit_id: Optional[UUID] = None
    secondary_unit_id: Optional[UUID] = None
    units_per_secondary_unit: Optional[int] = Field(None, ge=1)
    cost_price: Optional[Decimal] = Field(None, ge=0)
    sale_price: Optional[Decimal] = Field(None, ge=0)
    offer_price: Optional[Decimal] = Field(None, ge=0)
    wholesale_price: Optional[Decimal] = Field(None, ge=0)
    secondary_cost_price: Optional[Decimal] = Field(None, ge=0)
    secondary_sale_price: Optional[Decimal] = Field(None, ge=0)
    secondary_offer_price: Optional[Decimal] = Field(None, ge=0)
    secondary_wholesale_price: Optional[Decimal] = Field(None, ge=0)
    is_returnable: Optional[bool] = None
    return_deadline_days: Optional[int] = Field(None, ge=0)
    is_active: Optional[bool] = None


class ProductOut(BaseModel):
    id: UUID
    sku: str
    name: str
    description: Optional[str] = None
    category_id: UUID
    subcategory_id: Optional[UUID] = None
    currency_id: UUID
    unit_id: UUID
    secondary_unit_id: Optional[UUID] = None
    units_per_secondary_unit: Optional[int] = None
    cost_price: Decimal
    sale_price: Decimal
    offer_price: Optional[Decimal] = None
    wholesale_price: Optional[Decimal] = None
    secondary_cost_price: Optional[Decimal] = None
    secondary_sale_price: Optional[Decimal] = None
    secondary_offer_price: Optional[Decimal] = None
    secondary_wholesale_price: Optional[Decimal] = None
    stock: Decimal
    is_returnable: bool
    return_deadline_days: Optional[int] = None
    is_active: bool
    created_at: datetime
    category: Optional[DepartmentBrief] = None
    subcategory: Optional[DepartmentBrief] = None
    currency: Optional[CurrencyBrief] = None
    unit: Optional[UnitBrief] = None
    secondary_unit: Optional[UnitBrief] = None

    model_config = {"from_attributes": True}
