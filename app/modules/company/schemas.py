from pydantic import BaseModel, Field, field_validator
from typing import Optional
from uuid import UUID
from datetime import datetime
from app.common.validators import validate_rif, normalize_rif


class CompanySettingsUpdate(BaseModel):
    name: str = Field(..., min_length=1, max_length=150)
    rif: str = Field(..., description="RIF de la empresa (ej: J-12345678-9)")
    logo_url: Optional[str] = None
    preferred_secondary_currency_id: Optional[UUID] = None
    auto_update_rates: Optional[bool] = None
    update_frequency: Optional[int] = Field(None, ge=1, description="Frecuencia de actualización de tasas en minutos")

    @field_validator('rif')
    @classmethod
    def validate_company_rif(cls, v):
        if not validate_rif(v):
            raise ValueError('RIF inválido. Use el formato J-12345678-9 (10 a 12 caracteres)')
        return normalize_rif(v)


class CompanySettingsOut(BaseModel):
    id: UUID
    name: str
    rif: str
    logo_url: Optional[str] = None
    preferred_secondary_currency_id: Optional[UUID] = None
    auto_update_rates: bool
    update_frequency: int
    last_rates_update: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}
