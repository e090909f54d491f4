"""
Esquemas de respuesta para estadísticas y reportes
"""

from pydantic import BaseModel
from decimal import Decimal
from typing import List, Optional


# ===== DASHBOARD =====

class TopProduct(BaseModel):
    name: str
    quantity: Decimal


class DailyAmount(BaseModel):
    date: str  # DD/MM
    amount: Decimal


class DashboardStats(BaseModel):
    today_sales: Decimal
    this_month_sales: Decimal
    last_month_sales: Decimal
    top_products: List[TopProduct]
    critical_stock: int
    total_products: int
    cash_balance: Decimal
    sales_trend: List[DailyAmount]


# ===== INVENTARIO =====

class DepartmentStock(BaseModel):
    department: str
    units: Decimal
    value: Decimal


class LowStockProduct(BaseModel):
    name: str
    stock: Decimal
    department: Optional[str] = None


class InventoryReport(BaseModel):
    stock_by_department: List[DepartmentStock]
    low_stock_products: List[LowStockProduct]
    total_inventory_value: Decimal


# ===== FINANZAS =====

class PaymentMethodAmount(BaseModel):
    method: str
    amount: Decimal


class FinanceReport(BaseModel):
    monthly_sales_total: Decimal
    monthly_purchases_total: Decimal
    payment_methods_breakdown: List[PaymentMethodAmount]
    daily_sales_data: List[DailyAmount]
