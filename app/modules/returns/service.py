"""
Servicio de devoluciones

Flujo: PENDING -> APPROVED -> COMPLETED (procesada), o PENDING -> REJECTED.
Solo al procesar se ajusta el inventario.
"""

from fastapi import HTTPException, status
from sqlalchemy.orm import Session
from sqlalchemy import desc, func
from sqlalchemy.exc import IntegrityError
from decimal import Decimal
from typing import List, Optional, Iterable, Tuple
from uuid import UUID
from datetime import date, datetime
import logging

from app.core.config import settings
from app.common.filters import apply_date_range
from app.modules.returns.models import (
    Return, ReturnItem, ReturnStatus, ReturnType,
    CREDIT_NOTE_PREFIX, RESTOCKABLE_CONDITIONS
)
from app.modules.returns.schemas import ReturnCreate, ReturnUpdate
from app.modules.pos.models import Sale
from app.modules.products.models import Product

logger = logging.getLogger(__name__)

OPEN_STATUSES = (ReturnStatus.PENDING, ReturnStatus.APPROVED)
COUNTED_STATUSES = (ReturnStatus.APPROVED, ReturnStatus.COMPLETED)
STATUS_LABELS = {ReturnStatus.PENDING: "pendiente", ReturnStatus.APPROVED: "aprobada"}


class ReturnService:

    def __init__(self, db: Session):
        self.db = db

    def _next_credit_note_number(self) -> str:
        last_number = self.db.query(func.max(Return.credit_note_number)).scalar()
        next_number = int(last_number.split("-")[1]) + 1 if last_number else 1
        return f"{CREDIT_NOTE_PREFIX}-{next_number:08d}"

    def _returned_quantity(self, sale_id: UUID, product_id: UUID) -> Decimal:
        returned = self.db.query(func.sum(ReturnItem.quantity)).join(Return).filter(
            Return.original_sale_id == sale_id,
            Return.status.in_(COUNTED_STATUSES),
            ReturnItem.product_id == product_id
        ).scalar()
        return Decimal(returned or 0)

    def check_eligibility(self, sale_id: UUID, items: Iterable) -> Tuple[bool, Optional[str]]:
        """
        Verifica si una venta admite la devolución de `items`.

        Devuelve (elegible, mensaje). Los items necesitan product_id y quantity.
        """
        sale = self.db.query(Sale).filter(Sale.id == sale_id).first()
        if not sale:
            return False, "Venta no encontrada"

        if not sale.is_active or sale.is_cancelled:
            return False, "Venta no activa o cancelada"

        open_return = self.db.query(Return).filter(
            Return.original_sale_id == sale_id,
            Return.status.in_(OPEN_STATUSES)
        ).first()
        if open_return:
            return False, (
                f"Ya existe una devolución {STATUS_LABELS[open_return.status]} "
                f"para esta factura ({open_return.credit_note_number})"
            )

        sold = {item.product_id: item for item in sale.items}
        days_since_sale = (datetime.utcnow() - sale.date).days

        for item in items:
            sale_item = sold.get(item.product_id)
            if not sale_item:
                return False, f"Producto {item.product_id} no está en la venta"

            product = sale_item.product
            if not product.is_returnable:
                return False, f"Producto {product.name} no es retornable"

            deadline_days = product.return_deadline_days or settings.DEFAULT_RETURN_DEADLINE_DAYS
            if days_since_sale > deadline_days:
                return False, f"Plazo de devolución expirado ({deadline_days} días)"

            available = sale_item.quantity - self._returned_quantity(sale_id, item.product_id)
            if available <= 0:
                return False, f"El producto {product.name} ya fue devuelto completamente"
            if item.quantity > available:
                return False, f"Cantidad excede lo disponible para {product.name}. Disponible: {available}"

        return True, None

    def create_return(self, data: ReturnCreate) -> Return:
        eligible, message = self.check_eligibility(data.original_sale_id, data.items)
        if not eligible:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=message)

        credit_note_number = self._next_credit_note_number()
        try:
            return_record = Return(
                credit_note_number=credit_note_number,
                original_sale_id=data.original_sale_id,
                return_type=data.return_type,
                reason=data.reason,
                product_condition=data.product_condition,
                refund_amount=data.refund_amount,
                refund_method=data.refund_method,
                notes=data.notes,
                requested_by=data.requested_by,
                items=[ReturnItem(**item.model_dump()) for item in data.items]
            )
            self.db.add(return_record)

            sale = self.db.query(Sale).filter(Sale.id == data.original_sale_id).first()
            sale.has_returns = True

            self.db.commit()
            self.db.refresh(return_record)
            logger.info(f"Devolución {return_record.credit_note_number} creada para la venta {sale.invoice_number}")
            return return_record

        except IntegrityError:
            self.db.rollback()
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail=f"La nota de crédito {credit_note_number} ya fue registrada, intente de nuevo"
            )
        except Exception as e:
            self.db.rollback()
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=f"Error interno del servidor: {str(e)}"
            )

    def get_return(self, return_id: UUID) -> Return:
        return_record = self.db.query(Return).filter(Return.id == return_id).first()
        if not return_record:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Devolución no encontrada")
        return return_record

    def get_returns(
        self,
        return_status: Optional[ReturnStatus] = None,
        return_type: Optional[ReturnType] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> List[Return]:
        query = self.db.query(Return)
        if return_status:
            query = query.filter(Return.status == return_status)
        if return_type:
            query = query.filter(Return.return_type == return_type)
        query = apply_date_range(query, Return.created_at, start_date, end_date)
        return query.order_by(desc(Return.created_at)).all()

    def approve(self, return_id: UUID, approved_by: str) -> Return:
        return_record = self.get_return(return_id)
        if return_record.status != ReturnStatus.PENDING:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Solo se pueden aprobar devoluciones pendientes"
            )

        return_record.status = ReturnStatus.APPROVED
        return_record.approved_by = approved_by
        return_record.approved_at = datetime.utcnow()
        self.db.commit()
        self.db.refresh(return_record)
        logger.info(f"Devolución {return_record.credit_note_number} aprobada por {approved_by}")
        return return_record

    def reject(self, return_id: UUID, reason: str) -> Return:
        return_record = self.get_return(return_id)
        if return_record.status != ReturnStatus.PENDING:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Solo se pueden rechazar devoluciones pendientes"
            )

        return_record.status = ReturnStatus.REJECTED
        return_record.notes = f"{return_record.notes or ''}\n[RECHAZADO]: {reason}"
        self.db.commit()
        self.db.refresh(return_record)
        logger.info(f"Devolución {return_record.credit_note_number} rechazada")
        return return_record

    def process(self, return_id: UUID) -> Return:
        """
        Ejecuta los ajustes de inventario de una devolución aprobada.

        - restock_quantity vuelve al stock si el producto está en buen estado
        - EXCHANGE_SAME descuenta la unidad entregada como reemplazo
        """
        return_record = self.get_return(return_id)
        if return_record.status != ReturnStatus.APPROVED:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Solo se pueden procesar devoluciones aprobadas"
            )

        try:
            restock = return_record.product_condition in RESTOCKABLE_CONDITIONS
            for item in return_record.items:
                product = self.db.query(Product).filter(
                    Product.id == item.product_id
                ).with_for_update(of=Product).first()

                if restock and item.restock_quantity > 0:
                    product.stock = product.stock + item.restock_quantity

                if return_record.return_type == ReturnType.EXCHANGE_SAME:
                    if product.stock < item.quantity:
                        raise HTTPException(
                            status_code=status.HTTP_400_BAD_REQUEST,
                            detail=f"Stock insuficiente para el cambio de {product.name}. Disponible: {product.stock}"
                        )
                    product.stock = product.stock - item.quantity

            return_record.status = ReturnStatus.COMPLETED
            self.db.commit()
            self.db.refresh(return_record)
            logger.info(f"Devolución {return_record.credit_note_number} procesada")
            return return_record

        except HTTPException:
            self.db.rollback()
            raise
        except Exception as e:
            self.db.rollback()
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=f"Error interno del servidor: {str(e)}"
            )

    def update(self, return_id: UUID, data: ReturnUpdate) -> Return:
        return_record = self.get_return(return_id)
        for field, value in data.model_dump(exclude_unset=True).items():
            setattr(return_record, field, value)
        self.db.commit()
        self.db.refresh(return_record)
        return return_record
