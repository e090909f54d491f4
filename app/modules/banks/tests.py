"""
Tests para el módulo de Bancos
"""

import pytest
from decimal import Decimal
from fastapi.testclient import TestClient

from app.main import app


client = TestClient(app)


@pytest.fixture
def account_payload(primary_currency):
    return {
        "bank_name": "Banco de Venezuela",
        "account_number": "01020123450000012345",
        "account_type": "CHECKING",
        "holder_name": "Zenith C.A.",
        "holder_id": "J-00000000-0",
        "currency_id": str(primary_currency.id),
        "initial_balance": "1500.50",
    }


class TestBankAccounts:
    """Cuentas bancarias"""

    def test_create_with_initial_balance(self, account_payload):
        response = client.post("/api/banks", json=account_payload)
        assert response.status_code == 201
        data = response.json()
        assert Decimal(data["balance"]) == Decimal("1500.50")
        assert data["currency"]["code"] == "VES"

    def test_unknown_currency(self, account_payload):
        account_payload["currency_id"] = "00000000-0000-0000-0000-000000000000"
        response = client.post("/api/banks", json=account_payload)
        assert response.status_code == 404

    def test_duplicate_account_number(self, account_payload):
        client.post("/api/banks", json=account_payload)
        response = client.post("/api/banks", json=account_payload)
        assert response.status_code == 409
        assert response.json()["message"] == "Ya existe una cuenta bancaria con ese número"

    def test_search(self, account_payload):
        client.post("/api/banks", json=account_payload)
        assert len(client.get("/api/banks", params={"search": "venezuela"}).json()) == 1
        assert client.get("/api/banks", params={"search": "mercantil"}).json() == []

    def test_update_and_delete(self, account_payload, usd_currency):
        account_id = client.post("/api/banks", json=account_payload).json()["id"]

        response = client.patch(f"/api/banks/{account_id}", json={"currency_id": str(usd_currency.id)})
        assert response.status_code == 200
        assert response.json()["currency"]["code"] == "USD"

        response = client.delete(f"/api/banks/{account_id}")
        assert response.json()["is_active"] is False
        assert client.get("/api/banks").json() == []
