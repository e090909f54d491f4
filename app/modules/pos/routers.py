"""
Routers FastAPI para el módulo POS (Point of Sale)

- /cash-register: cajas, sesiones y movimientos de efectivo
- /sales: ventas del punto de venta
"""

from fastapi import APIRouter, Depends, status, Query
from sqlalchemy.orm import Session
from typing import Optional, List
from uuid import UUID
from datetime import date

from app.database.database import get_db
from app.modules.pos.services import CashRegisterService, SaleService
from app.modules.pos.models import SessionStatus
from app.modules.pos.schemas import (
    CashRegisterOut, SessionOpen, SessionClose, SessionOut,
    MovementCreate, MovementOut, SaleCreate, SaleOut
)


# ===== CASH REGISTER ROUTER =====

cash_register_router = APIRouter(prefix="/cash-register", tags=["POS - Caja"])


@cash_register_router.get("/registers/main", response_model=CashRegisterOut)
async def get_main_register(db: Session = Depends(get_db)):
    """Caja principal; se crea si aún no existe ninguna"""
    return CashRegisterService(db).get_or_create_main_register()


@cash_register_router.post("/sessions/open", response_model=SessionOut, status_code=status.HTTP_201_CREATED)
async def open_session(session_data: SessionOpen, db: Session = Depends(get_db)):
    """
    Abrir sesión de caja.

    - Solo una sesión abierta por caja
    - Registra un movimiento OPENING con el fondo inicial
    """
    return CashRegisterService(db).open_session(session_data)


@cash_register_router.post("/sessions/{session_id}/close", response_model=SessionOut)
async def close_session(session_id: UUID, close_data: SessionClose, db: Session = Depends(get_db)):
    """
    Cerrar sesión con arqueo.

    Calcula el balance esperado y la varianza contra el efectivo contado.
    """
    return CashRegisterService(db).close_session(session_id, close_data)


@cash_register_router.post("/movements", response_model=MovementOut, status_code=status.HTTP_201_CREATED)
async def create_movement(movement_data: MovementCreate, db: Session = Depends(get_db)):
    return CashRegisterService(db).create_movement(movement_data)


@cash_register_router.get("/sessions/active", response_model=Optional[SessionOut])
async def get_active_session(
    register_id: Optional[UUID] = Query(None, description="Filtrar por caja"),
    db: Session = Depends(get_db)
):
    """Sesión abierta actual, o null si no hay ninguna"""
    return CashRegisterService(db).get_active_session(register_id)


@cash_register_router.get("/sessions/{session_id}", response_model=SessionOut)
async def get_session(session_id: UUID, db: Session = Depends(get_db)):
    return CashRegisterService(db).get_session(session_id)


@cash_register_router.get("/sessions", response_model=List[SessionOut])
async def list_sessions(
    register_id: Optional[UUID] = Query(None),
    session_status: Optional[SessionStatus] = Query(None, alias="status"),
    start_date: Optional[date] = Query(None),
    end_date: Optional[date] = Query(None),
    db: Session = Depends(get_db)
):
    return CashRegisterService(db).list_sessions(register_id, session_status, start_date, end_date)


# ===== SALES ROUTER =====

sales_router = APIRouter(prefix="/sales", tags=["POS - Ventas"])


@sales_router.post("", response_model=SaleOut, status_code=status.HTTP_201_CREATED)
async def create_sale(sale_data: SaleCreate, db: Session = Depends(get_db)):
    """
    Registrar una venta.

    - Descuenta stock de cada producto
    - La porción en efectivo entra a la sesión de caja abierta
    - Las ventas a crédito generan una factura por cobrar
    """
    return SaleService(db).create_sale(sale_data)


@sales_router.get("", response_model=List[SaleOut])
async def list_sales(
    start_date: Optional[date] = Query(None),
    end_date: Optional[date] = Query(None),
    client_id: Optional[UUID] = Query(None),
    db: Session = Depends(get_db)
):
    return SaleService(db).get_sales(start_date, end_date, client_id)


@sales_router.get("/{sale_id}", response_model=SaleOut)
async def get_sale(sale_id: UUID, db: Session = Depends(get_db)):
    return SaleService(db).get_sale(sale_id)
