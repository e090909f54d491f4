from app.database.database import Base
from sqlalchemy import Column, Integer, String, Boolean, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.dialects.postgresql import UUID
from app.common.mixins import TimestampMixin
import uuid

DEFAULT_COMPANY_NAME = "Zenith"
DEFAULT_COMPANY_RIF = "J-00000000-0"


class CompanySettings(Base, TimestampMixin):
    """Configuración de la empresa (una sola fila)"""
    __tablename__ = "company_settings"

    id = Column(UUID(as_uuid=True), primary_key=True, index=True, default=uuid.uuid4)
    name = Column(String(150), nullable=False, default=DEFAULT_COMPANY_NAME)
    rif = Column(String(20), nullable=False, default=DEFAULT_COMPANY_RIF)
    logo_url = Column(String, nullable=True)
    preferred_secondary_currency_id = Column(UUID(as_uuid=True), ForeignKey("currencies.id"), nullable=True)

    # Tasas automáticas
    auto_update_rates = Column(Boolean, nullable=False, default=False)
    update_frequency = Column(Integer, nullable=False, default=60)  # minutos
    last_rates_update = Column(DateTime, nullable=True)

    preferred_secondary_currency = relationship("Currency")
