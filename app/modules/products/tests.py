"""
Tests para el módulo de Productos

Cubren:
- Validación de precios contra el costo
- Subdepartamento perteneciente al departamento
- Búsqueda por nombre o SKU y soft delete
"""

import pytest
from decimal import Decimal
from fastapi.testclient import TestClient

from app.main import app
from app.modules.departments.models import Department


client = TestClient(app)


# ===== FIXTURES =====

@pytest.fixture
def product_payload(primary_currency, sample_unit, sample_department):
    return {
        "sku": "ARZ-001",
        "name": "Arroz Mary 1kg",
        "category_id": str(sample_department.id),
        "currency_id": str(primary_currency.id),
        "unit_id": str(sample_unit.id),
        "cost_price": "30.00",
        "sale_price": "45.00",
        "stock": "12",
    }


class TestCreateProduct:
    """POST /api/products"""

    def test_create(self, product_payload):
        response = client.post("/api/products", json=product_payload)
        assert response.status_code == 201
        data = response.json()
        assert Decimal(data["stock"]) == Decimal("12")
        assert data["category"]["name"] == "Víveres"
        assert data["unit"]["abbreviation"] == "und"
        assert data["is_returnable"] is True

    def test_sale_price_below_cost(self, product_payload):
        product_payload["sale_price"] = "20.00"
        response = client.post("/api/products", json=product_payload)
        assert response.status_code == 400
        assert response.json()["message"] == "El precio de venta no puede ser menor al precio de costo"

    def test_wholesale_price_below_cost(self, product_payload):
        product_payload["wholesale_price"] = "10.00"
        response = client.post("/api/products", json=product_payload)
        assert response.status_code == 400

    def test_subcategory_from_other_department(self, db_session, product_payload):
        other = Department(name="Limpieza")
        db_session.add(other)
        db_session.commit()
        child = Department(name="Detergentes", parent_id=other.id)
        db_session.add(child)
        db_session.commit()

        product_payload["subcategory_id"] = str(child.id)
        response = client.post("/api/products", json=product_payload)
        assert response.status_code == 400

    def test_duplicate_sku(self, product_payload, make_product):
        make_product(sku="ARZ-001")
        response = client.post("/api/products", json=product_payload)
        assert response.status_code == 409

    def test_negative_stock_rejected(self, product_payload):
        product_payload["stock"] = "-1"
        response = client.post("/api/products", json=product_payload)
        assert response.status_code == 400


class TestQueryAndUpdate:
    """Listado, actualización y baja"""

    def test_search_by_name_or_sku(self, make_product):
        make_product(sku="HAR-001", name="Harina PAN")
        make_product(sku="ACE-001", name="Aceite Vatel")

        by_name = client.get("/api/products", params={"search": "harina"}).json()
        assert [p["sku"] for p in by_name] == ["HAR-001"]

        by_sku = client.get("/api/products", params={"search": "ace-"}).json()
        assert [p["name"] for p in by_sku] == ["Aceite Vatel"]

    def test_update_cost_checks_existing_prices(self, sample_product):
        response = client.patch(f"/api/products/{sample_product.id}", json={"cost_price": "150.00"})
        assert response.status_code == 400

    def test_update_prices(self, sample_product):
        response = client.patch(f"/api/products/{sample_product.id}", json={"sale_price": "120.00", "offer_price": "110.00"})
        assert response.status_code == 200
        assert Decimal(response.json()["offer_price"]) == Decimal("110.00")

    def test_soft_delete_hides_product(self, sample_product):
        response = client.delete(f"/api/products/{sample_product.id}")
        assert response.status_code == 200
        assert response.json()["is_active"] is False
        assert client.get("/api/products").json() == []

    def test_unknown_product(self):
        response = client.get("/api/products/00000000-0000-0000-0000-000000000000")
        assert response.status_code == 404
