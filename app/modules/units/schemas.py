from pydantic import BaseModel, Field
from typing import Optional
from uuid import UUID
from datetime import datetime


class UnitCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=50)
    abbreviation: str = Field(..., min_length=1, max_length=10)


class UnitUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=50)
    abbreviation: Optional[str] = Field(None, min_length=1, max_length=10)
    is_active: Optional[bool] = None


class UnitOut(BaseModel):
    id: UUID
    name: str
    abbreviation: str
    is_active: bool
    created_at: datetime

    model_config = {"from_attributes": True}
