"""
Background tasks for currencies module
"""
from datetime import datetime, timedelta
import logging

import httpx

from app.core.celery import celery_app
from app.core.config import settings
from app.database.database import SessionLocal
from app.modules.company.service import get_settings
from app.modules.currencies.exchange_rates import ExchangeRateService

logger = logging.getLogger(__name__)


def rates_update_due(company_settings, now: datetime) -> bool:
    """True si la actualización automática está activa y ya pasó la frecuencia configurada."""
    if not company_settings.auto_update_rates:
        return False
    if company_settings.last_rates_update is None:
        return True
    return now - company_settings.last_rates_update >= timedelta(minutes=company_settings.update_frequency)


@celery_app.task(bind=True)
def update_exchange_rates(self):
    """
    Periodic task: refresca las tasas de las monedas automáticas.

    Beat la ejecuta cada minuto; la frecuencia real la define
    company_settings.update_frequency.
    """
    db = SessionLocal()
    try:
        company_settings = get_settings(db)
        now = datetime.utcnow()

        if not rates_update_due(company_settings, now):
            return {"status": "skipped"}

        logger.info("Checking for automated rate updates...")
        with httpx.Client(timeout=settings.EXCHANGE_RATE_TIMEOUT) as client:
            result = ExchangeRateService(db, client).update_rates()

        company_settings.last_rates_update = now
        db.commit()

        logger.info(f"Exchange rates updated: {result.updated}")
        return {"status": "completed", "updated": result.updated, "skipped": result.skipped}

    except Exception as e:
        db.rollback()
        logger.error(f"Exchange rate update failed: {str(e)}")
        raise
    finally:
        db.close()
