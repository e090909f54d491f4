from fastapi import HTTPException, status
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
from typing import List, Optional
from uuid import UUID
import logging

from app.modules.currencies.models import Currency
from app.modules.currencies.schemas import CurrencyCreate, CurrencyUpdate

logger = logging.getLogger(__name__)


class CurrencyService:
    """Servicio para gestión de monedas"""

    def __init__(self, db: Session):
        self.db = db

    def _unset_primary(self, exclude_id: Optional[UUID] = None) -> None:
        """Desmarca cualquier otra moneda principal (una sola sentencia UPDATE)."""
        query = self.db.query(Currency).filter(Currency.is_primary == True)
        if exclude_id:
            query = query.filter(Currency.id != exclude_id)
        query.update({Currency.is_primary: False}, synchronize_session=False)

    def create_currency(self, currency_data: CurrencyCreate) -> Currency:
        """Crear moneda respetando la regla de moneda principal única"""
        try:
            if currency_data.is_primary:
                self._unset_primary()
            elif not currency_data.is_automatic and not currency_data.exchange_rate:
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail="Las monedas secundarias manuales requieren tasa de cambio"
                )

            currency = Currency(
                name=currency_data.name,
                code=currency_data.code,
                symbol=currency_data.symbol,
                is_primary=currency_data.is_primary,
                exchange_rate=None if currency_data.is_primary else currency_data.exchange_rate,
                is_automatic=currency_data.is_automatic,
                api_symbol=currency_data.api_symbol.value if currency_data.api_symbol else None
            )

            self.db.add(currency)
            self.db.commit()
            self.db.refresh(currency)

            logger.info(f"Moneda {currency.code} creada (principal={currency.is_primary})")
            return currency

        except HTTPException:
            raise
        except IntegrityError:
            self.db.rollback()
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="Ya existe una moneda con ese nombre o código"
            )
        except Exception as e:
            self.db.rollback()
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=f"Error interno del servidor: {str(e)}"
            )

    def get_currencies(self, active: bool = True) -> List[Currency]:
        """Principal primero, luego por nombre"""
        return self.db.query(Currency).filter(
            Currency.is_active == active
        ).order_by(Currency.is_primary.desc(), Currency.name.asc()).all()

    def get_currency(self, currency_id: UUID) -> Currency:
        currency = self.db.query(Currency).filter(Currency.id == currency_id).first()
        if not currency:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"Moneda con ID {currency_id} no encontrada"
            )
        return currency

    def get_currency_by_code(self, code: str) -> Optional[Currency]:
        return self.db.query(Currency).filter(
            Currency.code == code.upper(),
            Currency.is_active == True
        ).first()

    def get_primary_currency(self) -> Optional[Currency]:
        return self.db.query(Currency).filter(
            Currency.is_primary == True,
            Currency.is_active == True
        ).first()

    def update_currency(self, currency_id: UUID, currency_data: CurrencyUpdate) -> Currency:
        try:
            currency = self.get_currency(currency_id)
            update_data = currency_data.model_dump(exclude_unset=True)

            is_primary = update_data.get("is_primary", currency.is_primary)
            is_automatic = update_data.get("is_automatic", currency.is_automatic)

            if currency.is_primary and update_data.get("is_primary") is False:
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail="Debe existir una moneda principal: marque otra moneda como principal"
                )

            if update_data.get("is_primary") is True:
                self._unset_primary(exclude_id=currency_id)

            if not is_primary and not is_automatic:
                has_new_rate = update_data.get("exchange_rate") is not None
                if not has_new_rate and currency.exchange_rate is None:
                    raise HTTPException(
                        status_code=status.HTTP_400_BAD_REQUEST,
                        detail="Las monedas secundarias manuales requieren tasa de cambio"
                    )

            if "api_symbol" in update_data and update_data["api_symbol"] is not None:
                update_data["api_symbol"] = update_data["api_symbol"].value

            for field, value in update_data.items():
                setattr(currency, field, value)

            if is_primary:
                currency.exchange_rate = None

            self.db.commit()
            self.db.refresh(currency)
            return currency

        except HTTPException:
            raise
        except IntegrityError:
            self.db.rollback()
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="Ya existe una moneda con ese nombre o código"
            )
        except Exception as e:
            self.db.rollback()
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=f"Error interno del servidor: {str(e)}"
            )

    def delete_currency(self, currency_id: UUID) -> Currency:
        """Soft delete. La principal no se elimina mientras existan otras activas."""
        currency = self.get_currency(currency_id)

        if currency.is_primary:
            active_count = self.db.query(Currency).filter(Currency.is_active == True).count()
            if active_count > 1:
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail="No se puede eliminar la moneda principal. Primero marca otra moneda como principal."
                )

        currency.soft_delete()
        self.db.commit()
        self.db.refresh(currency)
        return currency
