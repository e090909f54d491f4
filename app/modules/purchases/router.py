"""
Routers FastAPI para el módulo de Compras (cuentas por pagar)
"""

from fastapi import APIRouter, Depends, status, Query
from sqlalchemy.orm import Session
from typing import List, Optional
from uuid import UUID

from app.database.database import get_db
from app.modules.purchases.service import PurchaseService, PurchasePaymentService
from app.modules.purchases.models import PurchasePaymentStatus
from app.modules.purchases.schemas import (
    PurchaseCreate, PurchaseOut, PurchasePaymentCreate, PurchasePaymentOut
)

purchases_router = APIRouter(prefix="/purchases", tags=["Purchases"])


@purchases_router.post("", response_model=PurchaseOut, status_code=status.HTTP_201_CREATED)
async def create_purchase(purchase_data: PurchaseCreate, db: Session = Depends(get_db)):
    """
    Registrar una compra a proveedor.

    - Incrementa el stock de cada producto
    - Actualiza costo y moneda del producto al de la compra
    - `paid_amount` > 0 registra un pago inicial en efectivo
    """
    return PurchaseService(db).create_purchase(purchase_data)


@purchases_router.post("/payments", response_model=PurchasePaymentOut, status_code=status.HTTP_201_CREATED)
async def register_payment(payment_data: PurchasePaymentCreate, db: Session = Depends(get_db)):
    """Registrar un pago a una compra pendiente"""
    return PurchasePaymentService(db).create_payment(payment_data)


@purchases_router.get("", response_model=List[PurchaseOut])
async def list_purchases(
    supplier_id: Optional[UUID] = Query(None),
    payment_status: Optional[PurchasePaymentStatus] = Query(None),
    db: Session = Depends(get_db)
):
    return PurchaseService(db).get_purchases(supplier_id, payment_status)


@purchases_router.get("/{purchase_id}", response_model=PurchaseOut)
async def get_purchase(purchase_id: UUID, db: Session = Depends(get_db)):
    return PurchaseService(db).get_purchase(purchase_id)
