from pydantic import BaseModel, Field, field_validator
from typing import Optional, List
from uuid import UUID
from datetime import datetime
from app.modules.auth.models import UserRole


# ===== LOGIN =====

class LoginRequest(BaseModel):
    username: str = Field(..., min_length=1, max_length=50)
    password: str = Field(..., min_length=1)


class TokenUser(BaseModel):
    id: UUID
    username: str
    name: str
    role: UserRole
    permissions: List[str] = []

    model_config = {"from_attributes": True}


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: TokenUser


# ===== USERS =====

class UserCreate(BaseModel):
    username: str = Field(..., min_length=3, max_length=50, description="Nombre de usuario único")
    name: str = Field(..., min_length=1, max_length=100)
    password: str = Field(..., min_length=6, max_length=72)
    role: UserRole = Field(default=UserRole.CASHIER)
    permissions: List[str] = Field(default_factory=list)
    is_active: bool = True

    @field_validator('username')
    @classmethod
    def validate_username(cls, v: str) -> str:
        cleaned = v.strip().lower()
        if ' ' in cleaned:
            raise ValueError('El nombre de usuario no puede contener espacios')
        return cleaned


class UserUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    password: Optional[str] = Field(None, min_length=6, max_length=72)
    role: Optional[UserRole] = None
    permissions: Optional[List[str]] = None
    is_active: Optional[bool] = None


class UserOut(BaseModel):
    id: UUID
    username: str
    name: str
    role: UserRole
    permissions: List[str] = []
    is_active: bool
    last_login: Optional[datetime] = None
    created_at: datetime

    model_config = {"from_attributes": True}
