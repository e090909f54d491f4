from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.database.database import get_db
from app.modules.stats.service import StatsService
from app.modules.stats.schemas import DashboardStats, InventoryReport, FinanceReport

stats_router = APIRouter(prefix="/stats", tags=["Stats"])


@stats_router.get("/dashboard", response_model=DashboardStats)
async def get_dashboard(db: Session = Depends(get_db)):
    """
    Indicadores del dashboard:
    ventas de hoy/mes/mes anterior, top 5 productos, stock crítico,
    efectivo esperado de la sesión abierta y tendencia de 7 días.
    """
    return StatsService(db).get_dashboard()


@stats_router.get("/inventory", response_model=InventoryReport)
async def get_inventory_report(db: Session = Depends(get_db)):
    return StatsService(db).get_inventory_report()


@stats_router.get("/finance", response_model=FinanceReport)
async def get_finance_report(db: Session = Depends(get_db)):
    """Ventas y compras del mes con desglose por método de pago"""
    return StatsService(db).get_finance_report()
