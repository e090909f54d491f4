from fastapi import APIRouter, Depends, Query, Path, status
from sqlalchemy.orm import Session
from typing import List
from uuid import UUID
import httpx

from app.core.config import settings
from app.database.database import get_db
from app.dependencies.userDependencies import supervisor_dependency
from app.modules.currencies.service import CurrencyService
from app.modules.currencies.exchange_rates import ExchangeRateService
from app.modules.currencies.schemas import CurrencyCreate, CurrencyUpdate, CurrencyOut, RateUpdateResult

currencies_router = APIRouter(prefix="/currencies", tags=["Currencies"])


@currencies_router.post("", response_model=CurrencyOut, status_code=status.HTTP_201_CREATED)
async def create_currency(currency_data: CurrencyCreate, db: Session = Depends(get_db)):
    """
    Crear moneda.

    - Si **is_primary** es true, las demás dejan de ser principales y la tasa queda en null
    - Una moneda secundaria manual (no automática) requiere **exchange_rate**
    """
    return CurrencyService(db).create_currency(currency_data)


@currencies_router.get("", response_model=List[CurrencyOut])
async def list_currencies(
    active: bool = Query(True, description="Filtrar por estado activo"),
    db: Session = Depends(get_db)
):
    """Listar monedas: la principal primero, luego por nombre."""
    return CurrencyService(db).get_currencies(active=active)


@currencies_router.post("/update-rates", response_model=RateUpdateResult)
def update_rates(_: supervisor_dependency, db: Session = Depends(get_db)):
    """
    Forzar la actualización de tasas de las monedas automáticas
    (la tarea periódica de Celery hace lo mismo según la frecuencia configurada).
    """
    with httpx.Client(timeout=settings.EXCHANGE_RATE_TIMEOUT) as client:
        return ExchangeRateService(db, client).update_rates()


@currencies_router.get("/{currency_id}", response_model=CurrencyOut)
async def get_currency(currency_id: UUID = Path(..., description="ID de la moneda"), db: Session = Depends(get_db)):
    return CurrencyService(db).get_currency(currency_id)


@currencies_router.patch("/{currency_id}", response_model=CurrencyOut)
async def update_currency(
    currency_data: CurrencyUpdate,
    currency_id: UUID = Path(..., description="ID de la moneda"),
    db: Session = Depends(get_db)
):
    return CurrencyService(db).update_currency(currency_id, currency_data)


@currencies_router.delete("/{currency_id}", response_model=CurrencyOut)
async def delete_currency(currency_id: UUID = Path(..., description="ID de la moneda"), db: Session = Depends(get_db)):
    """
    Desactivar moneda. La principal no se puede eliminar mientras existan
    otras monedas activas.
    """
    return CurrencyService(db).delete_currency(currency_id)
