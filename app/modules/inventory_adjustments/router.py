from typing import List, Optional
from uuid import UUID
from datetime import date
from fastapi import APIRouter, Query, status

from app.dependencies.dbDependecies import db_dependency
from app.modules.inventory_adjustments.models import AdjustmentType, AdjustmentReason
from app.modules.inventory_adjustments.schemas import AdjustmentCreate, AdjustmentOut
from app.modules.inventory_adjustments.service import InventoryAdjustmentService

adjustments_router = APIRouter(prefix="/inventory-adjustments", tags=["Inventory Adjustments"])


@adjustments_router.post("", response_model=AdjustmentOut, status_code=status.HTTP_201_CREATED)
async def create_adjustment(data: AdjustmentCreate, db: db_dependency):
    """Registrar un ajuste de inventario (INCREASE / DECREASE)."""
    return InventoryAdjustmentService(db).create_adjustment(data)


@adjustments_router.get("", response_model=List[AdjustmentOut])
async def list_adjustments(
    db: db_dependency,
    product_id: Optional[UUID] = Query(None),
    type: Optional[AdjustmentType] = Query(None),
    reason: Optional[AdjustmentReason] = Query(None),
    start_date: Optional[date] = Query(None),
    end_date: Optional[date] = Query(None, description="Fecha final (inclusive)"),
):
    return InventoryAdjustmentService(db).get_adjustments(product_id, type, reason, start_date, end_date)


@adjustments_router.get("/product/{product_id}", response_model=List[AdjustmentOut])
async def product_history(product_id: UUID, db: db_dependency):
    """Historial de ajustes de un producto, más recientes primero."""
    return InventoryAdjustmentService(db).get_by_product(product_id)


@adjustments_router.get("/{adjustment_id}", response_model=AdjustmentOut)
async def get_adjustment(adjustment_id: UUID, db: db_dependency):
    return InventoryAdjustmentService(db).get_adjustment(adjustment_id)
