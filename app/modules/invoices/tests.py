"""
Tests para el módulo de Facturas a crédito y Pagos

- Numeración correlativa FAC-XXXXXXXX
- Estados PENDING -> PARTIAL -> PAID
- Facturas vencidas (OVERDUE)
"""

import pytest
from datetime import datetime, timedelta
from decimal import Decimal
from fastapi.testclient import TestClient

from app.main import app
from app.modules.invoices.models import Invoice, InvoiceStatus
from app.modules.invoices.service import InvoiceCounterService


client = TestClient(app)


# ===== FIXTURES =====

@pytest.fixture
def credit_invoice(sample_client):
    response = client.post("/api/invoice", json={
        "client_id": str(sample_client.id),
        "subtotal": "500.00",
        "total": "500.00",
        "due_date": (datetime.utcnow() + timedelta(days=15)).isoformat(),
        "notes": "Crédito a 15 días"
    })
    assert response.status_code == 201
    return response.json()


def pay(invoice_id, amount, method="transfer"):
    return client.post("/api/payments", json={
        "invoice_id": invoice_id, "amount": amount, "payment_method": method, "reference": "000123"
    })


# ===== NUMERACIÓN =====

class TestInvoiceCounter:
    """Contador de facturas"""

    def test_peek_does_not_consume(self):
        assert client.get("/api/invoice/next").json()["invoice_number"] == "FAC-00000001"
        assert client.get("/api/invoice/next").json()["invoice_number"] == "FAC-00000001"

    def test_reserve_increments(self, db_session):
        service = InvoiceCounterService(db_session)
        assert service.reserve_invoice_number() == "FAC-00000001"
        assert service.reserve_invoice_number() == "FAC-00000002"
        db_session.commit()

        counter = client.get("/api/invoice/counter").json()
        assert counter["current_number"] == 3
        assert counter["next_invoice_number"] == "FAC-00000003"

    def test_reserve_without_commit_is_discarded(self, db_session):
        InvoiceCounterService(db_session).reserve_invoice_number()
        db_session.rollback()
        assert client.get("/api/invoice/next").json()["invoice_number"] == "FAC-00000001"

    def test_reset_requires_admin(self, cashier_headers):
        response = client.post("/api/invoice/counter/reset", headers=cashier_headers)
        assert response.status_code == 403

    def test_reset(self, auth_headers, credit_invoice):
        response = client.post("/api/invoice/counter/reset", headers=auth_headers)
        assert response.status_code == 200
        assert response.json()["current_number"] == 1
        # FAC-00000001 ya pertenece a la factura existente
        assert response.json()["next_invoice_number"] == "FAC-00000002"

    def test_reset_then_new_invoice_skips_used_numbers(self, auth_headers, credit_invoice, sample_client):
        client.post("/api/invoice/counter/reset", headers=auth_headers)
        response = client.post("/api/invoice", json={
            "client_id": str(sample_client.id), "subtotal": "80.00", "total": "80.00"
        })
        assert response.status_code == 201
        assert credit_invoice["number"] == "FAC-00000001"
        assert response.json()["number"] == "FAC-00000002"


# ===== FACTURAS =====

class TestCreditInvoices:
    """Facturas a crédito"""

    def test_create(self, credit_invoice):
        assert credit_invoice["number"] == "FAC-00000001"
        assert credit_invoice["status"] == "PENDING"
        assert Decimal(credit_invoice["balance"]) == Decimal("500.00")
        assert credit_invoice["client"]["rif"] == "V-12345678-9"

    def test_unknown_client(self):
        response = client.post("/api/invoice", json={
            "client_id": "00000000-0000-0000-0000-000000000000", "subtotal": "10", "total": "10"
        })
        assert response.status_code == 404

    def test_client_and_pending_lists(self, credit_invoice, sample_client):
        by_client = client.get(f"/api/invoice/client/{sample_client.id}").json()
        assert [i["id"] for i in by_client] == [credit_invoice["id"]]

        pending = client.get("/api/invoice/pending").json()
        assert [i["number"] for i in pending] == ["FAC-00000001"]

    def test_overdue_marks_status(self, credit_invoice, db_session):
        invoice = db_session.query(Invoice).filter(Invoice.number == credit_invoice["number"]).one()
        invoice.due_date = datetime.utcnow() - timedelta(days=1)
        db_session.commit()

        overdue = client.get("/api/invoice/overdue").json()
        assert [i["status"] for i in overdue] == ["OVERDUE"]

        db_session.expire_all()
        assert db_session.get(Invoice, invoice.id).status == InvoiceStatus.OVERDUE

    def test_get_invoice_not_found(self):
        response = client.get("/api/invoice/00000000-0000-0000-0000-000000000000")
        assert response.status_code == 404


# ===== PAGOS =====

class TestPayments:
    """Abonos a facturas"""

    def test_partial_then_full(self, credit_invoice):
        first = pay(credit_invoice["id"], "200.00")
        assert first.status_code == 201
        result = first.json()
        assert result["payment"]["payment_method"] == "TRANSFER"
        assert result["invoice"]["status"] == "PARTIAL"
        assert Decimal(result["invoice"]["balance"]) == Decimal("300.00")

        second = pay(credit_invoice["id"], "300.00", method="CASH").json()
        assert second["invoice"]["status"] == "PAID"
        assert Decimal(second["invoice"]["balance"]) == Decimal("0")

        detail = client.get(f"/api/invoice/{credit_invoice['id']}").json()
        assert len(detail["payments"]) == 2
        assert client.get("/api/invoice/pending").json() == []

    def test_overpayment_rejected(self, credit_invoice):
        response = pay(credit_invoice["id"], "500.01")
        assert response.status_code == 400
        assert "excede el balance pendiente" in response.json()["message"]

    def test_paid_invoice_rejects_payments(self, credit_invoice):
        pay(credit_invoice["id"], "500.00")
        response = pay(credit_invoice["id"], "1.00")
        assert response.status_code == 400
        assert response.json()["message"] == "La factura ya está completamente pagada"

    def test_cancelled_invoice_rejects_payments(self, credit_invoice, db_session):
        invoice = db_session.query(Invoice).filter(Invoice.number == credit_invoice["number"]).one()
        invoice.status = InvoiceStatus.CANCELLED
        db_session.commit()

        response = pay(credit_invoice["id"], "10.00")
        assert response.status_code == 400

    def test_zero_amount_rejected(self, credit_invoice):
        assert pay(credit_invoice["id"], "0").status_code == 400

    def test_payment_listings(self, credit_invoice):
        pay(credit_invoice["id"], "100.00")
        assert len(client.get(f"/api/payments/invoice/{credit_invoice['id']}").json()) == 1

        all_payments = client.get("/api/payments").json()
        assert all_payments[0]["invoice"]["number"] == "FAC-00000001"
