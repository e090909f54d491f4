from app.database.database import Base
from sqlalchemy import Column, String, Boolean, DateTime, Numeric
from app.common.mixins import BaseMixin
import enum


class RateProvider(str, enum.Enum):
    """Fuentes soportadas para la actualización automática de tasas"""
    BINANCE_P2P = "binance_p2p"
    BCV = "bcv"
    ENPARALELO = "enparalelo"


class Currency(Base, BaseMixin):
    """
    Monedas del sistema.

    Solo una moneda puede ser principal (is_primary). Las secundarias guardan
    su tasa de cambio respecto a la principal; la principal no tiene tasa.
    """
    __tablename__ = "currencies"

    name = Column(String(50), unique=True, nullable=False)
    code = Column(String(10), unique=True, nullable=False, index=True)  # VES, USD, EUR
    symbol = Column(String(10), nullable=False)
    is_primary = Column(Boolean, nullable=False, default=False)
    exchange_rate = Column(Numeric(18, 6), nullable=True)

    # Actualización automática
    is_automatic = Column(Boolean, nullable=False, default=False)
    api_symbol = Column(String(20), nullable=True)  # RateProvider
    last_rate_update = Column(DateTime, nullable=True)
