from sqlalchemy import Column, String, Boolean, DateTime, Enum, JSON
from sqlalchemy.dialects.postgresql import UUID
from uuid import uuid4
from app.database.database import Base
from app.common.mixins import TimestampMixin
import enum


class UserRole(str, enum.Enum):
    """Roles del sistema"""
    ADMIN = "ADMIN"
    SUPERVISOR = "SUPERVISOR"
    CASHIER = "CASHIER"


class User(Base, TimestampMixin):
    __tablename__ = "users"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid4)
    username = Column(String(50), unique=True, nullable=False, index=True)
    name = Column(String(100), nullable=False)
    password = Column(String, nullable=False)
    role = Column(Enum(UserRole), nullable=False, default=UserRole.CASHIER)
    permissions = Column(JSON, nullable=False, default=list)  # ej. ["sales", "reports"]
    is_active = Column(Boolean, default=True, nullable=False)
    last_login = Column(DateTime(timezone=True), nullable=True)
