from typing import List, Optional
from uuid import UUID
from datetime import date
from sqlalchemy.orm import Session
from fastapi import HTTPException, status
import logging

from app.common.filters import apply_date_range
from app.modules.products.models import Product
from app.modules.inventory_adjustments.models import (
    InventoryAdjustment, AdjustmentType, AdjustmentReason
)
from app.modules.inventory_adjustments.schemas import AdjustmentCreate

logger = logging.getLogger(__name__)


class InventoryAdjustmentService:
    """Ajustes manuales de inventario (mermas, conteos, inventario inicial)."""

    def __init__(self, db: Session):
        self.db = db

    def create_adjustment(self, data: AdjustmentCreate) -> InventoryAdjustment:
        """
        Aplica el ajuste sobre el stock del producto y deja el registro con
        el stock anterior y el nuevo. Ambos cambios van en la misma transacción.
        """
        product = self.db.query(Product).filter(
            Product.id == data.product_id
        ).with_for_update(of=Product).first()
        if not product:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Producto no encontrado")

        previous_stock = product.stock
        if data.type == AdjustmentType.INCREASE:
            new_stock = previous_stock + data.quantity
        else:
            new_stock = previous_stock - data.quantity
            if new_stock < 0:
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail=f"Stock insuficiente. Stock actual: {previous_stock}, intentando decrementar: {data.quantity}"
                )

        try:
            product.stock = new_stock
            adjustment = InventoryAdjustment(
                product_id=product.id,
                type=data.type,
                quantity=data.quantity,
                reason=data.reason,
                previous_stock=previous_stock,
                new_stock=new_stock,
                notes=data.notes,
                performed_by=data.performed_by or "Sistema",
            )
            self.db.add(adjustment)
            self.db.commit()
            self.db.refresh(adjustment)
            logger.info(
                f"Ajuste {data.type.value} de {data.quantity} sobre {product.sku}: {previous_stock} -> {new_stock}"
            )
            return adjustment
        except Exception as e:
            self.db.rollback()
            logger.error(f"Error registrando ajuste de inventario: {e}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=f"Error interno del servidor: {str(e)}"
            )

    def get_adjustments(
        self,
        product_id: Optional[UUID] = None,
        type: Optional[AdjustmentType] = None,
        reason: Optional[AdjustmentReason] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> List[InventoryAdjustment]:
        query = self.db.query(InventoryAdjustment)
        if product_id:
            query = query.filter(InventoryAdjustment.product_id == product_id)
        if type:
            query = query.filter(InventoryAdjustment.type == type)
        if reason:
            query = query.filter(InventoryAdjustment.reason == reason)
        query = apply_date_range(query, InventoryAdjustment.created_at, start_date, end_date)
        return query.order_by(InventoryAdjustment.created_at.desc()).all()

    def get_by_product(self, product_id: UUID) -> List[InventoryAdjustment]:
        return self.get_adjustments(product_id=product_id)

    def get_adjustment(self, adjustment_id: UUID) -> InventoryAdjustment:
        adjustment = self.db.query(InventoryAdjustment).filter(
            InventoryAdjustment.id == adjustment_id
        ).first()
        if not adjustment:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Ajuste no encontrado")
        return adjustment
