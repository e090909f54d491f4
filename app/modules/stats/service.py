"""
Servicio de estadísticas

No crea tablas: agrega ventas, productos, compras y caja para el
dashboard y los reportes de inventario y finanzas.
"""

from datetime import date, datetime, timedelta
from decimal import Decimal
from typing import Dict, List, Optional

from sqlalchemy import desc, func
from sqlalchemy.orm import Session

from app.core.config import settings
from app.common.filters import day_start
from app.modules.pos.models import Sale, SaleItem, CashSession, SessionStatus
from app.modules.pos.payments import parse_payment_methods
from app.modules.products.models import Product
from app.modules.purchases.models import Purchase

UNCATEGORIZED = "Sin Categoría"
LOW_STOCK_LIMIT = 20
TOP_PRODUCTS_LIMIT = 5
TREND_DAYS = 7


def month_start(day: date) -> date:
    return day.replace(day=1)


def previous_month_start(day: date) -> date:
    return month_start(month_start(day) - timedelta(days=1))


class StatsService:

    def __init__(self, db: Session):
        self.db = db

    def _sales_query(self):
        return self.db.query(Sale).filter(Sale.is_cancelled == False)

    def _sales_total(self, start: datetime, end: Optional[datetime] = None) -> Decimal:
        query = self.db.query(func.coalesce(func.sum(Sale.total), 0)).filter(
            Sale.is_cancelled == False,
            Sale.date >= start
        )
        if end:
            query = query.filter(Sale.date < end)
        return Decimal(query.scalar() or 0)

    def _active_products(self):
        return self.db.query(Product).filter(Product.is_active == True)

    def get_dashboard(self, today: Optional[date] = None) -> Dict:
        today = today or datetime.utcnow().date()
        this_month = month_start(today)
        last_month = previous_month_start(today)

        quantity = func.sum(SaleItem.quantity)
        top_rows = self.db.query(Product.name, quantity.label("quantity")).join(
            SaleItem, SaleItem.product_id == Product.id
        ).join(
            Sale, Sale.id == SaleItem.sale_id
        ).filter(Sale.is_cancelled == False).group_by(Product.id, Product.name).order_by(desc(quantity)).limit(TOP_PRODUCTS_LIMIT).all()

        critical_stock = self._active_products().filter(
            Product.stock < settings.CRITICAL_STOCK_THRESHOLD
        ).count()

        open_session = self.db.query(CashSession).filter(
            CashSession.status == SessionStatus.OPEN
        ).order_by(desc(CashSession.opened_at)).first()

        trend = []
        for offset in range(TREND_DAYS - 1, -1, -1):
            day = today - timedelta(days=offset)
            trend.append({
                "date": day.strftime("%d/%m"),
                "amount": self._sales_total(day_start(day), day_start(day + timedelta(days=1)))
            })

        return {
            "today_sales": self._sales_total(day_start(today)),
            "this_month_sales": self._sales_total(day_start(this_month)),
            "last_month_sales": self._sales_total(day_start(last_month), day_start(this_month)),
            "top_products": [{"name": name, "quantity": qty} for name, qty in top_rows],
            "critical_stock": critical_stock,
            "total_products": self._active_products().count(),
            "cash_balance": open_session.calculated_balance if open_session else Decimal("0"),
            "sales_trend": trend,
        }

    def get_inventory_report(self) -> Dict:
        products = self._active_products().all()

        departments: Dict[str, Dict[str, Decimal]] = {}
        total_value = Decimal("0")
        for product in products:
            name = product.category.name if product.category else UNCATEGORIZED
            value = product.stock * product.cost_price
            entry = departments.setdefault(name, {"units": Decimal("0"), "value": Decimal("0")})
            entry["units"] += product.stock
            entry["value"] += value
            total_value += value

        low_stock = self._active_products().filter(
            Product.stock < settings.CRITICAL_STOCK_THRESHOLD
        ).order_by(Product.stock.asc()).limit(LOW_STOCK_LIMIT).all()

        return {
            "stock_by_department": [
                {"department": name, **totals} for name, totals in sorted(departments.items())
            ],
            "low_stock_products": [
                {
                    "name": p.name,
                    "stock": p.stock,
                    "department": p.category.name if p.category else UNCATEGORIZED
                }
                for p in low_stock
            ],
            "total_inventory_value": total_value,
        }

    def get_finance_report(self, today: Optional[date] = None) -> Dict:
        today = today or datetime.utcnow().date()
        start = day_start(month_start(today))

        sales: List[Sale] = self._sales_query().filter(Sale.date >= start).order_by(Sale.date.asc()).all()

        breakdown: Dict[str, Decimal] = {}
        daily: Dict[date, Decimal] = {}
        for sale in sales:
            for method, amount in parse_payment_methods(sale.payment_method, sale.total).items():
                breakdown[method] = breakdown.get(method, Decimal("0")) + amount
            day = sale.date.date()
            daily[day] = daily.get(day, Decimal("0")) + sale.total

        purchases_total = self.db.query(func.coalesce(func.sum(Purchase.total), 0)).filter(
            Purchase.created_at >= start
        ).scalar()

        return {
            "monthly_sales_total": sum((s.total for s in sales), Decimal("0")),
            "monthly_purchases_total": Decimal(purchases_total or 0),
            "payment_methods_breakdown": [
                {"method": method, "amount": amount} for method, amount in breakdown.items()
            ],
            "daily_sales_data": [
                {"date": day.strftime("%d/%m"), "amount": amount} for day, amount in sorted(daily.items())
            ],
        }
