"""
Tests para el módulo de Estadísticas

Las ventas anuladas no cuentan en ningún indicador.
"""

import pytest
from datetime import date, datetime
from decimal import Decimal
from fastapi.testclient import TestClient

from app.main import app
from app.modules.departments.models import Department
from app.modules.pos.models import Sale, SaleItem
from app.modules.stats.service import StatsService, month_start, previous_month_start


client = TestClient(app)

TODAY = date(2025, 6, 15)


# ===== FIXTURES =====

def record_sale(db, number, product, when, quantity, total, payment_method="CASH", cancelled=False):
    sale = Sale(
        invoice_number=number,
        subtotal=Decimal(total),
        total=Decimal(total),
        payment_method=payment_method,
        date=when,
        is_cancelled=cancelled,
        items=[SaleItem(
            product_id=product.id,
            quantity=Decimal(quantity),
            unit_price=Decimal(total) / Decimal(quantity),
            total=Decimal(total)
        )]
    )
    db.add(sale)
    db.commit()
    return sale


@pytest.fixture
def products(make_product):
    return make_product(name="Harina PAN 1kg"), make_product(name="Aceite 1L", stock=Decimal("5"), cost_price=Decimal("10"))


@pytest.fixture
def sales(db_session, products):
    harina, aceite = products
    record_sale(db_session, "FAC-00000001", harina, datetime(2025, 6, 15, 10, 0), "2", "200.00")
    record_sale(db_session, "FAC-00000002", aceite, datetime(2025, 6, 10, 16, 30), "3", "300.00",
                payment_method="CASH:100, DEBIT:200")
    record_sale(db_session, "FAC-00000003", harina, datetime(2025, 5, 20, 9, 0), "2", "150.00")
    record_sale(db_session, "FAC-00000004", aceite, datetime(2025, 6, 15, 11, 0), "10", "1000.00", cancelled=True)


class TestMonthHelpers:

    def test_month_start(self):
        assert month_start(date(2025, 6, 15)) == date(2025, 6, 1)

    def test_previous_month_start(self):
        assert previous_month_start(date(2025, 6, 15)) == date(2025, 5, 1)
        assert previous_month_start(date(2025, 1, 31)) == date(2024, 12, 1)


class TestDashboard:
    """Indicadores del dashboard"""

    def test_sales_totals(self, db_session, sales):
        stats = StatsService(db_session).get_dashboard(today=TODAY)
        assert stats["today_sales"] == Decimal("200.00")
        assert stats["this_month_sales"] == Decimal("500.00")
        assert stats["last_month_sales"] == Decimal("150.00")

    def test_top_products_skip_cancelled_sales(self, db_session, sales):
        top = StatsService(db_session).get_dashboard(today=TODAY)["top_products"]
        assert [(p["name"], p["quantity"]) for p in top] == [
            ("Harina PAN 1kg", Decimal("4")),
            ("Aceite 1L", Decimal("3")),
        ]

    def test_stock_counters(self, db_session, products, make_product):
        inactive = make_product(name="Descontinuado", stock=Decimal("0"))
        inactive.soft_delete()
        db_session.commit()

        stats = StatsService(db_session).get_dashboard(today=TODAY)
        assert stats["critical_stock"] == 1
        assert stats["total_products"] == 2
        assert stats["cash_balance"] == Decimal("0")

    def test_sales_trend(self, db_session, sales):
        trend = StatsService(db_session).get_dashboard(today=TODAY)["sales_trend"]
        assert len(trend) == 7
        assert trend[0]["date"] == "09/06"
        assert trend[-1] == {"date": "15/06", "amount": Decimal("200.00")}
        assert {"date": "10/06", "amount": Decimal("300.00")} in trend

    def test_endpoint_uses_open_session_balance(self, main_register, sample_product):
        client.post("/api/cash-register/sessions/open", json={
            "register_id": str(main_register.id), "opening_balance": "100.00", "opened_by": "cajero"
        })
        client.post("/api/sales", json={
            "items": [{"product_id": str(sample_product.id), "quantity": "2", "unit_price": "100.00", "total": "200.00"}],
            "subtotal": "200.00",
            "total": "200.00",
            "payment_method": "CASH"
        })

        response = client.get("/api/stats/dashboard")
        assert response.status_code == 200
        data = response.json()
        assert Decimal(data["cash_balance"]) == Decimal("300.00")
        assert Decimal(data["today_sales"]) == Decimal("200.00")


class TestInventoryReport:
    """Valorización del inventario por departamento"""

    def test_report(self, db_session, products, make_product):
        drinks = Department(name="Bebidas")
        db_session.add(drinks)
        db_session.commit()
        make_product(name="Malta 355ml", category_id=drinks.id, stock=Decimal("8"), cost_price=Decimal("25"))

        report = client.get("/api/stats/inventory").json()

        by_department = {d["department"]: d for d in report["stock_by_department"]}
        assert [d["department"] for d in report["stock_by_department"]] == ["Bebidas", "Víveres"]
        assert Decimal(by_department["Víveres"]["units"]) == Decimal("25")
        assert Decimal(by_department["Víveres"]["value"]) == Decimal("1050")
        assert Decimal(by_department["Bebidas"]["value"]) == Decimal("200")

        assert [p["name"] for p in report["low_stock_products"]] == ["Aceite 1L", "Malta 355ml"]
        assert report["low_stock_products"][1]["department"] == "Bebidas"
        assert Decimal(report["total_inventory_value"]) == Decimal("1250")

    def test_empty_inventory(self):
        report = client.get("/api/stats/inventory").json()
        assert report["stock_by_department"] == []
        assert Decimal(report["total_inventory_value"]) == Decimal("0")


class TestFinanceReport:
    """Ventas y compras del mes"""

    def test_monthly_sales(self, db_session, sales):
        report = StatsService(db_session).get_finance_report(today=TODAY)
        assert report["monthly_sales_total"] == Decimal("500.00")
        assert report["payment_methods_breakdown"] == [
            {"method": "CASH", "amount": Decimal("300.00")},
            {"method": "DEBIT", "amount": Decimal("200")},
        ]
        assert report["daily_sales_data"] == [
            {"date": "10/06", "amount": Decimal("300.00")},
            {"date": "15/06", "amount": Decimal("200.00")},
        ]

    def test_monthly_purchases(self, sample_supplier, sample_product, primary_currency):
        client.post("/api/purchases", json={
            "supplier_id": str(sample_supplier.id),
            "invoice_date": datetime.utcnow().isoformat(),
            "items": [{"product_id": str(sample_product.id), "quantity": "4", "cost": "60.00"}],
        })

        report = client.get("/api/stats/finance").json()
        assert Decimal(report["monthly_purchases_total"]) == Decimal("240.00")
        assert Decimal(report["monthly_sales_total"]) == Decimal("0")
