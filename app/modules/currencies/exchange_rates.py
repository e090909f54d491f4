"""
Actualización automática de tasas de cambio.

Fuentes (todas devuelven la tasa USD -> VES):
- binance_p2p: anuncios de compra USDT/VES en Binance P2P
- bcv: tasa oficial (dolarapi)
- enparalelo: tasa paralela (dolarapi)

Para monedas EUR la tasa en dólares se divide entre la tasa USD -> EUR
(open.er-api). Un proveedor que falla devuelve 0 y no se escribe nada.
"""
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Optional, List
import logging

import httpx
from sqlalchemy.orm import Session

from app.core.config import settings
from app.modules.currencies.models import Currency, RateProvider
from app.modules.currencies.schemas import RateUpdateResult

logger = logging.getLogger(__name__)

# Anuncios con límite menor a esto no representan el mercado real
MIN_P2P_TRANSACTION = Decimal("1000")
# Los primeros anuncios suelen ser "carnada"; se toma el cuarto si existe
P2P_AD_INDEX = 3

BINANCE_HEADERS = {
    "Content-Type": "application/json",
    "User-Agent": "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0 Safari/537.36",
}


def _to_decimal(value) -> Decimal:
    try:
        return Decimal(str(value))
    except (InvalidOperation, TypeError, ValueError):
        return Decimal("0")


class ExchangeRateService:
    """Consulta proveedores externos y actualiza las monedas automáticas"""

    def __init__(self, db: Session, client: Optional[httpx.Client] = None):
        self.db = db
        self.client = client or httpx.Client(timeout=settings.EXCHANGE_RATE_TIMEOUT)

    # ===== PROVEEDORES =====

    def fetch_binance_p2p(self) -> Decimal:
        payload = {
            "asset": "USDT",
            "fiat": "VES",
            "tradeType": "BUY",
            "page": 1,
            "rows": 20,
            "countries": [],
            "proMerchantAds": False,
            "shieldMerchantAds": False,
        }
        try:
            response = self.client.post(settings.BINANCE_P2P_URL, json=payload, headers=BINANCE_HEADERS)
            response.raise_for_status()
            ads = response.json().get("data") or []

            prices = sorted(
                _to_decimal(ad["adv"]["price"])
                for ad in ads
                if ad.get("adv") and ad["adv"].get("price")
                and _to_decimal(ad["adv"].get("maxSingleTransAmount")) >= MIN_P2P_TRANSACTION
            )
            if not prices:
                return Decimal("0")

            return prices[min(P2P_AD_INDEX, len(prices) - 1)]
        except (httpx.HTTPError, ValueError, KeyError, AttributeError, TypeError) as e:
            logger.error(f"Error fetching Binance P2P: {e}")
            return Decimal("0")

    def _fetch_dolarapi(self, kind: str) -> Decimal:
        try:
            response = self.client.get(f"{settings.DOLAR_API_URL}/{kind}")
            response.raise_for_status()
            return _to_decimal(response.json().get("promedio"))
        except (httpx.HTTPError, ValueError, AttributeError, TypeError) as e:
            logger.error(f"Error fetching dolarapi/{kind}: {e}")
            return Decimal("0")

    def fetch_bcv(self) -> Decimal:
        return self._fetch_dolarapi("oficial")

    def fetch_enparalelo(self) -> Decimal:
        return self._fetch_dolarapi("paralelo")

    def fetch_eur_usd_rate(self) -> Decimal:
        """Cuántos EUR vale 1 USD (ej. 0.92)"""
        try:
            response = self.client.get(settings.EUR_USD_URL)
            response.raise_for_status()
            return _to_decimal((response.json().get("rates") or {}).get("EUR"))
        except (httpx.HTTPError, ValueError, AttributeError, TypeError) as e:
            logger.error(f"Error fetching EUR/USD rate: {e}")
            return Decimal("0")

    def fetch_base_rate(self, provider: str) -> Decimal:
        fetchers = {
            RateProvider.BINANCE_P2P.value: self.fetch_binance_p2p,
            RateProvider.BCV.value: self.fetch_bcv,
            RateProvider.ENPARALELO.value: self.fetch_enparalelo,
        }
        fetcher = fetchers.get(provider)
        if not fetcher:
            logger.warning(f"Proveedor de tasas desconocido: {provider}")
            return Decimal("0")
        return fetcher()

    # ===== ACTUALIZACIÓN =====

    def update_rates(self) -> RateUpdateResult:
        result = RateUpdateResult()

        currencies: List[Currency] = self.db.query(Currency).filter(
            Currency.is_automatic == True,
            Currency.is_active == True
        ).all()

        if not currencies:
            return result

        eur_usd_rate = Decimal("0")
        if any(c.code == "EUR" for c in currencies):
            eur_usd_rate = self.fetch_eur_usd_rate()

        # Cada proveedor se consulta una sola vez por corrida
        base_rates = {}

        for currency in currencies:
            if not currency.api_symbol:
                result.skipped.append(currency.code)
                continue

            if currency.api_symbol not in base_rates:
                base_rates[currency.api_symbol] = self.fetch_base_rate(currency.api_symbol)
            base_usd_rate = base_rates[currency.api_symbol]

            final_rate = Decimal("0")
            if base_usd_rate > 0:
                if currency.code == "EUR":
                    if eur_usd_rate > 0:
                        final_rate = base_usd_rate / eur_usd_rate
                else:
                    final_rate = base_usd_rate

            if final_rate <= 0:
                result.skipped.append(currency.code)
                continue

            currency.exchange_rate = final_rate.quantize(Decimal("0.000001"))
            currency.last_rate_update = datetime.utcnow()
            result.updated.append(currency.code)
            logger.info(f"Updated {currency.code} rate to {currency.exchange_rate}")

        self.db.commit()
        return result
