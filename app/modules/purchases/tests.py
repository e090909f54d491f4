"""
Tests para el módulo de Compras

- Registro de compras: stock, costo y moneda de los productos
- Pago inicial y abonos posteriores a proveedores
"""

import pytest
from decimal import Decimal
from fastapi.testclient import TestClient

from app.main import app
from app.modules.products.models import Product
from app.modules.purchases.models import PurchasePaymentStatus
from app.modules.purchases.service import resolve_payment_status


client = TestClient(app)


# ===== FIXTURES =====

@pytest.fixture
def purchase_payload(sample_supplier, sample_product, primary_currency):
    return {
        "supplier_id": str(sample_supplier.id),
        "invoice_date": "2025-05-02T10:00:00",
        "invoice_number": "A-000981",
        "items": [{"product_id": str(sample_product.id), "quantity": "10", "cost": "55.00"}],
    }


@pytest.fixture
def unpaid_purchase(purchase_payload):
    response = client.post("/api/purchases", json=purchase_payload)
    assert response.status_code == 201
    return response.json()


def pay(purchase_id, amount, method="transfer"):
    return client.post("/api/purchases/payments", json={
        "purchase_id": purchase_id, "amount": amount, "payment_method": method
    })


class TestResolvePaymentStatus:

    def test_states(self):
        assert resolve_payment_status(Decimal("0"), Decimal("100")) == PurchasePaymentStatus.UNPAID
        assert resolve_payment_status(Decimal("40"), Decimal("60")) == PurchasePaymentStatus.PARTIAL
        assert resolve_payment_status(Decimal("100"), Decimal("0")) == PurchasePaymentStatus.PAID

    def test_residual_cent_is_not_paid(self):
        # Al registrar la compra solo un saldo <= 0 la deja pagada
        assert resolve_payment_status(Decimal("99.99"), Decimal("0.01")) == PurchasePaymentStatus.PARTIAL
        assert resolve_payment_status(Decimal("100"), Decimal("-0.01")) == PurchasePaymentStatus.PAID


class TestCreatePurchase:
    """POST /api/purchases"""

    def test_updates_stock_and_cost(self, unpaid_purchase, sample_product, primary_currency, db_session):
        assert Decimal(unpaid_purchase["total"]) == Decimal("550.00")
        assert Decimal(unpaid_purchase["tax_amount"]) == Decimal("0")
        assert unpaid_purchase["payment_status"] == "UNPAID"
        assert unpaid_purchase["currency_code"] == "VES"
        assert Decimal(unpaid_purchase["items"][0]["old_cost"]) == Decimal("50.00")
        assert unpaid_purchase["payments"] == []

        db_session.expire_all()
        product = db_session.get(Product, sample_product.id)
        assert product.stock == Decimal("30")
        assert product.cost_price == Decimal("55.00")
        assert product.currency_id == primary_currency.id

    def test_foreign_currency_purchase(self, purchase_payload, usd_currency, sample_product, db_session):
        purchase_payload.update({"currency_code": "usd", "exchange_rate": "36.5"})
        response = client.post("/api/purchases", json=purchase_payload)
        assert response.status_code == 201
        assert response.json()["currency_code"] == "USD"

        db_session.expire_all()
        assert db_session.get(Product, sample_product.id).currency_id == usd_currency.id

    def test_initial_payment_partial(self, purchase_payload):
        purchase_payload["paid_amount"] = "200.00"
        data = client.post("/api/purchases", json=purchase_payload).json()
        assert data["payment_status"] == "PARTIAL"
        assert Decimal(data["balance"]) == Decimal("350.00")
        assert data["payments"][0]["payment_method"] == "CASH"
        assert data["payments"][0]["notes"] == "Pago inicial al registrar compra"

    def test_initial_payment_capped_at_total(self, purchase_payload):
        purchase_payload["paid_amount"] = "900.00"
        data = client.post("/api/purchases", json=purchase_payload).json()
        assert data["payment_status"] == "PAID"
        assert Decimal(data["paid_amount"]) == Decimal("550.00")
        assert Decimal(data["balance"]) == Decimal("0")

    def test_unknown_supplier(self, purchase_payload):
        purchase_payload["supplier_id"] = "00000000-0000-0000-0000-000000000000"
        assert client.post("/api/purchases", json=purchase_payload).status_code == 404

    def test_unknown_currency(self, purchase_payload):
        purchase_payload["currency_code"] = "COP"
        response = client.post("/api/purchases", json=purchase_payload)
        assert response.status_code == 404
        assert response.json()["message"] == "Moneda COP no encontrada"

    def test_unknown_product_rolls_back(self, purchase_payload, sample_product, db_session):
        purchase_payload["items"].append({
            "product_id": "00000000-0000-0000-0000-000000000000", "quantity": "1", "cost": "1.00"
        })
        assert client.post("/api/purchases", json=purchase_payload).status_code == 404

        db_session.expire_all()
        assert db_session.get(Product, sample_product.id).stock == Decimal("20")
        assert client.get("/api/purchases").json() == []

    def test_requires_items(self, purchase_payload):
        purchase_payload["items"] = []
        assert client.post("/api/purchases", json=purchase_payload).status_code == 400


class TestPurchasePayments:
    """POST /api/purchases/payments"""

    def test_partial_then_paid(self, unpaid_purchase):
        response = pay(unpaid_purchase["id"], "150.00")
        assert response.status_code == 201
        assert response.json()["payment_method"] == "TRANSFER"

        purchase = client.get(f"/api/purchases/{unpaid_purchase['id']}").json()
        assert purchase["payment_status"] == "PARTIAL"
        assert Decimal(purchase["balance"]) == Decimal("400.00")

        pay(unpaid_purchase["id"], "400.00")
        purchase = client.get(f"/api/purchases/{unpaid_purchase['id']}").json()
        assert purchase["payment_status"] == "PAID"
        assert len(purchase["payments"]) == 2

    def test_exceeds_balance(self, unpaid_purchase):
        response = pay(unpaid_purchase["id"], "550.01")
        assert response.status_code == 400
        assert "excede el saldo pendiente" in response.json()["message"]

    def test_paid_purchase(self, unpaid_purchase):
        pay(unpaid_purchase["id"], "550.00")
        response = pay(unpaid_purchase["id"], "1.00")
        assert response.status_code == 400
        assert response.json()["message"] == "Esta compra ya está pagada"

    def test_unknown_purchase(self):
        response = pay("00000000-0000-0000-0000-000000000000", "10.00")
        assert response.status_code == 404

    def test_filters(self, unpaid_purchase, sample_supplier):
        by_supplier = client.get("/api/purchases", params={"supplier_id": str(sample_supplier.id)}).json()
        assert len(by_supplier) == 1
        paid = client.get("/api/purchases", params={"payment_status": "PAID"}).json()
        assert paid == []
