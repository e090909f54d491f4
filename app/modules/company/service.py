from fastapi import HTTPException, status
from sqlalchemy.orm import Session
import logging

from app.modules.company.models import CompanySettings, DEFAULT_COMPANY_NAME, DEFAULT_COMPANY_RIF
from app.modules.company.schemas import CompanySettingsUpdate
from app.modules.currencies.models import Currency

logger = logging.getLogger(__name__)


def get_settings(db: Session) -> CompanySettings:
    """
    Obtener la configuración de la empresa.

    Si todavía no existe, crea la fila por defecto (Zenith / J-00000000-0).

    Args:
        db (Session): sesión de base de datos.

    Returns:
        CompanySettings: la única fila de configuración.
    """
    company_settings = db.query(CompanySettings).first()
    if company_settings:
        return company_settings

    company_settings = CompanySettings(
        name=DEFAULT_COMPANY_NAME,
        rif=DEFAULT_COMPANY_RIF,
        auto_update_rates=False,
        update_frequency=60
    )
    db.add(company_settings)
    db.commit()
    db.refresh(company_settings)
    logger.info("Configuración de empresa creada con valores por defecto")
    return company_settings


def update_settings(db: Session, settings_data: CompanySettingsUpdate) -> CompanySettings:
    """
    Actualizar la configuración de la empresa.

    Raises:
        HTTPException 404: si la moneda secundaria preferida no existe.
    """
    company_settings = get_settings(db)
    update_data = settings_data.model_dump(exclude_unset=True)

    currency_id = update_data.get("preferred_secondary_currency_id")
    if currency_id:
        currency = db.query(Currency).filter(
            Currency.id == currency_id,
            Currency.is_active == True
        ).first()
        if not currency:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"Moneda con ID {currency_id} no encontrada"
            )

    for field, value in update_data.items():
        if value is None and field in ("auto_update_rates", "update_frequency"):
            continue
        setattr(company_settings, field, value)

    db.commit()
    db.refresh(company_settings)
    return company_settings
