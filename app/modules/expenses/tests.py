"""
Tests para el módulo de Gastos
"""

from decimal import Decimal
from fastapi.testclient import TestClient

from app.main import app


client = TestClient(app)


def create_expense(**overrides):
    payload = {
        "description": "Pago de electricidad",
        "amount": "350.00",
        "category": "Servicios",
        "payment_method": "TRANSFER",
    }
    payload.update(overrides)
    return client.post("/api/expenses", json=payload)


class TestExpenses:
    """Registro y consulta de gastos"""

    def test_create_defaults_date(self):
        response = create_expense()
        assert response.status_code == 201
        assert response.json()["date"] is not None

    def test_negative_amount(self):
        response = create_expense(amount="-1")
        assert response.status_code == 400

    def test_filter_by_category_and_date(self):
        create_expense(date="2025-03-10T10:00:00")
        create_expense(description="Papelería", category="Oficina", date="2025-03-15T09:00:00")

        servicios = client.get("/api/expenses", params={"category": "Servicios"}).json()
        assert [e["description"] for e in servicios] == ["Pago de electricidad"]

        march_15 = client.get("/api/expenses", params={"start_date": "2025-03-15", "end_date": "2025-03-15"}).json()
        assert [e["category"] for e in march_15] == ["Oficina"]

    def test_list_newest_first(self):
        create_expense(description="Viejo", date="2025-01-01T08:00:00")
        create_expense(description="Nuevo", date="2025-02-01T08:00:00")
        assert [e["description"] for e in client.get("/api/expenses").json()] == ["Nuevo", "Viejo"]

    def test_update_ignores_nulls(self):
        expense_id = create_expense().json()["id"]
        response = client.patch(f"/api/expenses/{expense_id}", json={"amount": "400.00", "notes": None})
        assert response.status_code == 200
        assert Decimal(response.json()["amount"]) == Decimal("400.00")

    def test_delete(self):
        expense_id = create_expense().json()["id"]
        assert client.delete(f"/api/expenses/{expense_id}").status_code == 204
        assert client.get(f"/api/expenses/{expense_id}").status_code == 404
