"""
Tests para el módulo de Devoluciones

Flujo PENDING -> APPROVED -> COMPLETED o PENDING -> REJECTED,
elegibilidad por plazo, cantidades ya devueltas y ajuste de inventario.
"""

import pytest
from datetime import datetime, timedelta
from decimal import Decimal
from fastapi.testclient import TestClient

from app.main import app
from app.modules.pos.models import Sale
from app.modules.products.models import Product
from app.modules.returns.models import Return
from app.modules.returns.service import ReturnService


client = TestClient(app)


# ===== FIXTURES =====

@pytest.fixture
def sale(sample_product):
    response = client.post("/api/sales", json={
        "items": [{"product_id": str(sample_product.id), "quantity": "3", "unit_price": "100.00", "total": "300.00"}],
        "subtotal": "300.00",
        "total": "300.00",
        "payment_method": "CASH"
    })
    assert response.status_code == 201
    return response.json()


def return_payload(sale, product, quantity="2", restock="2", **overrides):
    payload = {
        "original_sale_id": sale["id"],
        "return_type": "REFUND",
        "reason": "UNSATISFIED",
        "product_condition": "GOOD",
        "items": [{
            "product_id": str(product.id),
            "quantity": quantity,
            "unit_price": "100.00",
            "total": str(Decimal("100.00") * Decimal(quantity)),
            "restock_quantity": restock
        }],
        "refund_amount": str(Decimal("100.00") * Decimal(quantity)),
        "refund_method": "CASH",
        "requested_by": "cajero"
    }
    payload.update(overrides)
    return payload


def create_return(sale, product, **kwargs):
    response = client.post("/api/returns", json=return_payload(sale, product, **kwargs))
    assert response.status_code == 201, response.text
    return response.json()


def check(sale, product, quantity):
    return client.post("/api/returns/validate", json={
        "sale_id": sale["id"], "items": [{"product_id": str(product.id), "quantity": quantity}]
    }).json()


def complete(return_id):
    client.patch(f"/api/returns/{return_id}/approve", json={"approved_by": "supervisor"})
    return client.post(f"/api/returns/{return_id}/process")


# ===== ELEGIBILIDAD =====

class TestEligibility:
    """POST /api/returns/validate"""

    def test_eligible(self, sale, sample_product):
        assert check(sale, sample_product, "2") == {"eligible": True, "message": None}

    def test_unknown_sale(self, sample_product):
        result = client.post("/api/returns/validate", json={
            "sale_id": "00000000-0000-0000-0000-000000000000",
            "items": [{"product_id": str(sample_product.id), "quantity": "1"}]
        }).json()
        assert result == {"eligible": False, "message": "Venta no encontrada"}

    def test_product_not_in_sale(self, sale, make_product):
        other = make_product(name="Azúcar")
        result = check(sale, other, "1")
        assert result["eligible"] is False
        assert "no está en la venta" in result["message"]

    def test_not_returnable(self, sale, sample_product, db_session):
        sample_product.is_returnable = False
        db_session.commit()
        result = check(sale, sample_product, "1")
        assert result["message"] == "Producto Harina PAN 1kg no es retornable"

    def test_deadline_expired(self, sale, sample_product, db_session):
        sale_row = db_session.query(Sale).filter(Sale.invoice_number == sale["invoice_number"]).one()
        sale_row.date = datetime.utcnow() - timedelta(days=31)
        db_session.commit()

        result = check(sale, sample_product, "1")
        assert result["message"] == "Plazo de devolución expirado (30 días)"

    def test_product_deadline_overrides_default(self, sale, sample_product, db_session):
        sample_product.return_deadline_days = 45
        sale_row = db_session.query(Sale).filter(Sale.invoice_number == sale["invoice_number"]).one()
        sale_row.date = datetime.utcnow() - timedelta(days=31)
        db_session.commit()

        assert check(sale, sample_product, "1")["eligible"] is True

    def test_cancelled_sale(self, sale, sample_product, db_session):
        sale_row = db_session.query(Sale).filter(Sale.invoice_number == sale["invoice_number"]).one()
        sale_row.is_cancelled = True
        db_session.commit()
        assert check(sale, sample_product, "1")["message"] == "Venta no activa o cancelada"

    def test_open_return_blocks_new_one(self, sale, sample_product):
        created = create_return(sale, sample_product, quantity="1", restock="1")
        result = check(sale, sample_product, "1")
        assert result["eligible"] is False
        assert result["message"] == (
            f"Ya existe una devolución pendiente para esta factura ({created['credit_note_number']})"
        )

    def test_quantity_limited_by_previous_returns(self, sale, sample_product):
        first = create_return(sale, sample_product, quantity="2", restock="2")
        complete(first["id"])

        exceeded = check(sale, sample_product, "2")
        assert exceeded["eligible"] is False
        assert "Cantidad excede lo disponible" in exceeded["message"]
        assert check(sale, sample_product, "1")["eligible"] is True

        second = create_return(sale, sample_product, quantity="1", restock="1")
        complete(second["id"])
        assert "ya fue devuelto completamente" in check(sale, sample_product, "1")["message"]


# ===== FLUJO =====

class TestReturnFlow:
    """Creación, aprobación, rechazo y procesamiento"""

    def test_create_marks_sale(self, sale, sample_product, db_session):
        created = create_return(sale, sample_product)
        assert created["credit_note_number"] == "NC-00000001"
        assert created["status"] == "PENDING"
        assert created["items"][0]["product"]["sku"] == "HAR-001"
        assert created["original_sale"]["invoice_number"] == sale["invoice_number"]

        sale_row = db_session.query(Sale).filter(Sale.invoice_number == sale["invoice_number"]).one()
        assert sale_row.has_returns is True

    def test_create_not_eligible(self, sale, sample_product):
        response = client.post("/api/returns", json=return_payload(sale, sample_product, quantity="4", restock="0"))
        assert response.status_code == 400

    def test_credit_notes_are_sequential(self, sale, sample_product):
        first = create_return(sale, sample_product, quantity="1", restock="1")
        client.patch(f"/api/returns/{first['id']}/reject", json={"reason": "Sin factura"})
        second = create_return(sale, sample_product, quantity="1", restock="1")
        assert second["credit_note_number"] == "NC-00000002"

    def test_credit_note_collision_is_conflict(self, sale, sample_product, db_session, monkeypatch):
        first = create_return(sale, sample_product, quantity="1", restock="1")
        client.patch(f"/api/returns/{first['id']}/reject", json={"reason": "Sin factura"})

        # Otra petición concurrente calculó el mismo número
        monkeypatch.setattr(ReturnService, "_next_credit_note_number", lambda self: first["credit_note_number"])
        response = client.post("/api/returns", json=return_payload(sale, sample_product, quantity="1", restock="1"))
        assert response.status_code == 409
        assert response.json()["message"] == "La nota de crédito NC-00000001 ya fue registrada, intente de nuevo"
        assert db_session.query(Return).count() == 1

    def test_approve(self, sale, sample_product):
        created = create_return(sale, sample_product)
        response = client.patch(f"/api/returns/{created['id']}/approve", json={"approved_by": "supervisor"})
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "APPROVED"
        assert data["approved_by"] == "supervisor"
        assert data["approved_at"] is not None

        again = client.patch(f"/api/returns/{created['id']}/approve", json={"approved_by": "supervisor"})
        assert again.status_code == 400

    def test_reject_appends_reason(self, sale, sample_product):
        created = create_return(sale, sample_product, notes="Cliente molesto")
        response = client.patch(f"/api/returns/{created['id']}/reject", json={"reason": "Empaque abierto"})
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "REJECTED"
        assert data["notes"] == "Cliente molesto\n[RECHAZADO]: Empaque abierto"

        process = client.post(f"/api/returns/{created['id']}/process")
        assert process.status_code == 400

    def test_process_requires_approval(self, sale, sample_product):
        created = create_return(sale, sample_product)
        response = client.post(f"/api/returns/{created['id']}/process")
        assert response.status_code == 400
        assert response.json()["message"] == "Solo se pueden procesar devoluciones aprobadas"

    def test_process_restocks_good_products(self, sale, sample_product, db_session):
        created = create_return(sale, sample_product, quantity="2", restock="2")
        response = complete(created["id"])
        assert response.status_code == 200
        assert response.json()["status"] == "COMPLETED"

        db_session.expire_all()
        assert db_session.get(Product, sample_product.id).stock == Decimal("19")

    def test_process_damaged_does_not_restock(self, sale, sample_product, db_session):
        created = create_return(sale, sample_product, product_condition="DAMAGED")
        complete(created["id"])

        db_session.expire_all()
        assert db_session.get(Product, sample_product.id).stock == Decimal("17")

    def test_exchange_same_swaps_units(self, sale, sample_product, db_session):
        created = create_return(sale, sample_product, quantity="1", restock="0",
                                return_type="EXCHANGE_SAME", reason="DEFECTIVE", product_condition="DEFECTIVE")
        complete(created["id"])

        db_session.expire_all()
        assert db_session.get(Product, sample_product.id).stock == Decimal("16")

    def test_exchange_same_without_stock(self, sale, sample_product, db_session):
        created = create_return(sale, sample_product, quantity="1", restock="0",
                                return_type="EXCHANGE_SAME", product_condition="DAMAGED")
        client.patch(f"/api/returns/{created['id']}/approve", json={"approved_by": "supervisor"})

        sample_product.stock = Decimal("0")
        db_session.commit()

        response = client.post(f"/api/returns/{created['id']}/process")
        assert response.status_code == 400
        assert response.json()["message"].startswith("Stock insuficiente para el cambio de Harina PAN 1kg")
        assert client.get(f"/api/returns/{created['id']}").json()["status"] == "APPROVED"

    def test_update_notes(self, sale, sample_product):
        created = create_return(sale, sample_product)
        response = client.patch(f"/api/returns/{created['id']}", json={"notes": "Revisar con el proveedor"})
        assert response.json()["notes"] == "Revisar con el proveedor"

    def test_list_filters(self, sale, sample_product):
        created = create_return(sale, sample_product)
        assert [r["id"] for r in client.get("/api/returns", params={"status": "PENDING"}).json()] == [created["id"]]
        assert client.get("/api/returns", params={"status": "COMPLETED"}).json() == []
        assert client.get("/api/returns", params={"return_type": "EXCHANGE_SAME"}).json() == []

    def test_unknown_return(self):
        response = client.get("/api/returns/00000000-0000-0000-0000-000000000000")
        assert response.status_code == 404
        assert response.json()["message"] == "Devolución no encontrada"
