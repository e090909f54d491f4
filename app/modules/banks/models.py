from app.database.database import Base
from sqlalchemy import Column, String, ForeignKey, Numeric, Enum
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from app.common.mixins import BaseMixin
import enum


class AccountType(str, enum.Enum):
    CHECKING = "CHECKING"   # Corriente
    SAVINGS = "SAVINGS"     # Ahorro


class BankAccount(Base, BaseMixin):
    __tablename__ = "bank_accounts"

    bank_name = Column(String(100), nullable=False)
    account_number = Column(String(30), unique=True, nullable=False)
    account_type = Column(Enum(AccountType), nullable=False)
    holder_name = Column(String(150), nullable=False)
    holder_id = Column(String(20), nullable=False)  # Cédula o RIF del titular
    currency_id = Column(UUID(as_uuid=True), ForeignKey("currencies.id"), nullable=False)
    balance = Column(Numeric(15, 2), nullable=False, default=0)

    currency = relationship("Currency", lazy="joined")
