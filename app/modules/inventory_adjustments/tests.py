"""
Tests para el módulo de Ajustes de inventario
"""

from datetime import date, timedelta
from decimal import Decimal
from fastapi.testclient import TestClient

from app.main import app
from app.modules.products.models import Product


client = TestClient(app)


def adjust(product_id, type_, quantity, reason="ERROR", **extra):
    payload = {"product_id": str(product_id), "type": type_, "quantity": str(quantity), "reason": reason}
    payload.update(extra)
    return client.post("/api/inventory-adjustments", json=payload)


class TestCreateAdjustment:
    """Ajustes de entrada y salida"""

    def test_increase(self, sample_product, db_session):
        response = adjust(sample_product.id, "INCREASE", 5, reason="INITIAL", performed_by="admin")
        assert response.status_code == 201
        data = response.json()
        assert Decimal(data["previous_stock"]) == Decimal("20")
        assert Decimal(data["new_stock"]) == Decimal("25")
        assert data["performed_by"] == "admin"

        db_session.expire_all()
        assert db_session.get(Product, sample_product.id).stock == Decimal("25")

    def test_decrease_defaults_performer(self, sample_product):
        response = adjust(sample_product.id, "DECREASE", 3, reason="DAMAGE")
        assert response.status_code == 201
        assert Decimal(response.json()["new_stock"]) == Decimal("17")
        assert response.json()["performed_by"] == "Sistema"

    def test_decrease_below_zero(self, sample_product, db_session):
        response = adjust(sample_product.id, "DECREASE", 21, reason="LOSS")
        assert response.status_code == 400
        assert "Stock insuficiente" in response.json()["message"]

        db_session.expire_all()
        assert db_session.get(Product, sample_product.id).stock == Decimal("20")

    def test_quantity_must_be_positive(self, sample_product):
        response = adjust(sample_product.id, "INCREASE", 0)
        assert response.status_code == 400

    def test_unknown_product(self):
        response = adjust("00000000-0000-0000-0000-000000000000", "INCREASE", 1)
        assert response.status_code == 404


class TestAdjustmentHistory:
    """Consultas y filtros"""

    def test_filters(self, sample_product, make_product):
        other = make_product(name="Aceite")
        adjust(sample_product.id, "INCREASE", 2)
        adjust(sample_product.id, "DECREASE", 1, reason="DAMAGE")
        adjust(other.id, "INCREASE", 4)

        history = client.get(f"/api/inventory-adjustments/product/{sample_product.id}").json()
        assert len(history) == 2

        decreases = client.get("/api/inventory-adjustments", params={"type": "DECREASE"}).json()
        assert len(decreases) == 1
        assert decreases[0]["reason"] == "DAMAGE"
        assert decreases[0]["product"]["sku"] == sample_product.sku

    def test_date_range(self, sample_product):
        adjust(sample_product.id, "INCREASE", 2)

        around_today = client.get("/api/inventory-adjustments", params={
            "start_date": str(date.today() - timedelta(days=1)),
            "end_date": str(date.today() + timedelta(days=1)),
        }).json()
        assert len(around_today) == 1

        future = client.get("/api/inventory-adjustments", params={
            "start_date": str(date.today() + timedelta(days=2)),
        }).json()
        assert future == []

    def test_get_unknown_adjustment(self):
        response = client.get("/api/inventory-adjustments/00000000-0000-0000-0000-000000000000")
        assert response.status_code == 404
