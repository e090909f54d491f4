"""
Esquemas Pydantic para monedas y tasas de cambio
"""
from pydantic import BaseModel, Field, field_validator
from decimal import Decimal
from typing import Optional, List
from uuid import UUID
from datetime import datetime

from app.modules.currencies.models import RateProvider


class CurrencyBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=50, description="Nombre de la moneda")
    code: str = Field(..., min_length=3, max_length=10, description="Código ISO (VES, USD, EUR)")
    symbol: str = Field(..., min_length=1, max_length=10, description="Símbolo (Bs, $, €)")

    @field_validator('code')
    @classmethod
    def validate_code(cls, v: str) -> str:
        return v.strip().upper()


class CurrencyCreate(CurrencyBase):
    is_primary: bool = Field(default=False, description="Moneda principal del sistema")
    exchange_rate: Optional[Decimal] = Field(
        None, gt=0, description="Tasa respecto a la moneda principal (solo secundarias)"
    )
    is_automatic: bool = Field(default=False, description="Actualizar la tasa automáticamente")
    api_symbol: Optional[RateProvider] = Field(None, description="Fuente de la tasa automática")


class CurrencyUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=50)
    code: Optional[str] = Field(None, min_length=3, max_length=10)
    symbol: Optional[str] = Field(None, min_length=1, max_length=10)
    is_primary: Optional[bool] = None
    exchange_rate: Optional[Decimal] = Field(None, gt=0)
    is_automatic: Optional[bool] = None
    api_symbol: Optional[RateProvider] = None
    is_active: Optional[bool] = None

    @field_validator('code')
    @classmethod
    def validate_code(cls, v: Optional[str]) -> Optional[str]:
        return v.strip().upper() if v else v


class CurrencyOut(CurrencyBase):
    id: UUID
    is_primary: bool
    exchange_rate: Optional[Decimal] = None
    is_automatic: bool
    api_symbol: Optional[str] = None
    last_rate_update: Optional[datetime] = None
    is_active: bool
    created_at: datetime

    model_config = {"from_attributes": True}


class RateUpdateResult(BaseModel):
    """Resultado de una corrida de actualización de tasas"""
    updated: List[str] = Field(default_factory=list, description="Códigos actualizados")
    skipped: List[str] = Field(default_factory=list, description="Códigos sin tasa válida")
