"""
Tests para el módulo POS

Tests que cubren:
- Apertura, movimientos y cierre de caja con arqueo
- Ventas de contado con descuento de inventario y registro en caja
- Ventas a crédito que generan la factura por cobrar
- Desglose de métodos de pago mixtos
"""

import pytest
from decimal import Decimal
from fastapi.testclient import TestClient

from app.main import app
from app.modules.pos.models import CashMovement, MovementType, Sale
from app.modules.pos.payments import parse_payment_methods, cash_portion
from app.modules.products.models import Product
from app.modules.invoices.models import Invoice, InvoiceStatus


client = TestClient(app)


# ===== FIXTURES =====

@pytest.fixture
def open_session(main_register):
    response = client.post("/api/cash-register/sessions/open", json={
        "register_id": str(main_register.id),
        "opening_balance": "100.00",
        "opened_by": "cajero"
    })
    assert response.status_code == 201
    return response.json()


def sale_payload(product, quantity=2, unit_price="100.00", **overrides):
    line_total = Decimal(unit_price) * quantity
    payload = {
        "items": [{
            "product_id": str(product.id),
            "quantity": str(quantity),
            "unit_price": unit_price,
            "total": str(line_total)
        }],
        "subtotal": str(line_total),
        "total": str(line_total),
        "payment_method": "CASH",
    }
    payload.update(overrides)
    return payload


def add_movement(session_id, type_, amount):
    return client.post("/api/cash-register/movements", json={
        "session_id": session_id, "type": type_, "amount": amount
    })


# ===== MÉTODOS DE PAGO =====

class TestPaymentMethods:
    """Parseo de la forma de pago"""

    def test_single_method_takes_total(self):
        assert parse_payment_methods("DEBIT", Decimal("250")) == {"DEBIT": Decimal("250")}

    def test_mixed_methods(self):
        breakdown = parse_payment_methods("CASH:600, debit:300, TRANSFER:300", Decimal("1200"))
        assert breakdown == {"CASH": Decimal("600"), "DEBIT": Decimal("300"), "TRANSFER": Decimal("300")}

    def test_repeated_method_is_added(self):
        assert parse_payment_methods("CASH:10,CASH:5", Decimal("15")) == {"CASH": Decimal("15")}

    def test_cash_portion(self):
        assert cash_portion("CASH:600, DEBIT:300", Decimal("900")) == Decimal("600")
        assert cash_portion("PAGO_MOVIL", Decimal("900")) == Decimal("0")
        assert cash_portion("CASH", Decimal("900")) == Decimal("900")

    def test_invalid_amount(self):
        with pytest.raises(ValueError):
            parse_payment_methods("CASH:abc", Decimal("10"))


# ===== CAJA =====

class TestCashRegister:
    """Sesiones y movimientos de caja"""

    def test_main_register_created_on_demand(self):
        response = client.get("/api/cash-register/registers/main")
        assert response.status_code == 200
        assert response.json()["name"] == "Caja Principal"

        again = client.get("/api/cash-register/registers/main")
        assert again.json()["id"] == response.json()["id"]

    def test_open_session(self, open_session):
        assert open_session["status"] == "OPEN"
        assert Decimal(open_session["calculated_balance"]) == Decimal("100.00")
        assert [m["type"] for m in open_session["movements"]] == ["OPENING"]
        assert open_session["opened_by"] == "cajero"

    def test_only_one_open_session_per_register(self, open_session, main_register):
        response = client.post("/api/cash-register/sessions/open", json={
            "register_id": str(main_register.id), "opening_balance": "50.00"
        })
        assert response.status_code == 400
        assert response.json()["message"] == "Ya existe una sesión abierta para esta caja"

    def test_open_unknown_register(self):
        response = client.post("/api/cash-register/sessions/open", json={
            "register_id": "00000000-0000-0000-0000-000000000000", "opening_balance": "0"
        })
        assert response.status_code == 404

    def test_movements_change_balance(self, open_session):
        session_id = open_session["id"]
        assert add_movement(session_id, "DEPOSIT", "50.00").status_code == 201
        assert add_movement(session_id, "WITHDRAWAL", "30.00").status_code == 201
        assert add_movement(session_id, "EXPENSE", "20.00").status_code == 201

        session = client.get(f"/api/cash-register/sessions/{session_id}").json()
        assert Decimal(session["calculated_balance"]) == Decimal("100.00")
        assert len(session["movements"]) == 4

    def test_close_with_variance(self, open_session):
        session_id = open_session["id"]
        add_movement(session_id, "DEPOSIT", "25.00")

        response = client.post(f"/api/cash-register/sessions/{session_id}/close", json={
            "actual_balance": "120.00", "closed_by": "supervisor"
        })
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "CLOSED"
        assert Decimal(data["expected_balance"]) == Decimal("125.00")
        assert Decimal(data["variance"]) == Decimal("-5.00")

        closing = [m for m in data["movements"] if m["type"] == "CLOSING"]
        assert closing[0]["description"] == "Cierre de caja - Varianza: -5.00"

    def test_close_with_surplus_description(self, open_session):
        response = client.post(f"/api/cash-register/sessions/{open_session['id']}/close", json={
            "actual_balance": "110.00"
        })
        closing = [m for m in response.json()["movements"] if m["type"] == "CLOSING"]
        assert closing[0]["description"] == "Cierre de caja - Varianza: +10.00"

    def test_closed_session_rejects_changes(self, open_session):
        session_id = open_session["id"]
        client.post(f"/api/cash-register/sessions/{session_id}/close", json={"actual_balance": "100.00"})

        again = client.post(f"/api/cash-register/sessions/{session_id}/close", json={"actual_balance": "100.00"})
        assert again.status_code == 400
        assert again.json()["message"] == "La sesión ya está cerrada"

        movement = add_movement(session_id, "DEPOSIT", "10.00")
        assert movement.status_code == 400

    def test_active_session(self, open_session, main_register):
        response = client.get("/api/cash-register/sessions/active", params={"register_id": str(main_register.id)})
        assert response.status_code == 200
        assert response.json()["id"] == open_session["id"]

    def test_no_active_session(self, main_register):
        response = client.get("/api/cash-register/sessions/active")
        assert response.status_code == 200
        assert response.json() is None

    def test_list_sessions_by_status(self, open_session):
        closed = client.get("/api/cash-register/sessions", params={"status": "CLOSED"}).json()
        assert closed == []
        opened = client.get("/api/cash-register/sessions", params={"status": "OPEN"}).json()
        assert [s["id"] for s in opened] == [open_session["id"]]


# ===== VENTAS =====

class TestSales:
    """Registro de ventas"""

    def test_cash_sale(self, sample_product, open_session, db_session):
        response = client.post("/api/sales", json=sale_payload(sample_product))
        assert response.status_code == 201
        sale = response.json()
        assert sale["invoice_number"] == "FAC-00000001"
        assert sale["items"][0]["product"]["sku"] == "HAR-001"

        db_session.expire_all()
        assert db_session.get(Product, sample_product.id).stock == Decimal("18")

        session = client.get(f"/api/cash-register/sessions/{open_session['id']}").json()
        assert Decimal(session["calculated_balance"]) == Decimal("300.00")
        sale_movements = [m for m in session["movements"] if m["type"] == "SALE"]
        assert sale_movements[0]["sale_id"] == sale["id"]

    def test_invoice_numbers_are_sequential(self, sample_product):
        first = client.post("/api/sales", json=sale_payload(sample_product, quantity=1)).json()
        second = client.post("/api/sales", json=sale_payload(sample_product, quantity=1)).json()
        assert first["invoice_number"] == "FAC-00000001"
        assert second["invoice_number"] == "FAC-00000002"
        assert client.get("/api/invoice/next").json()["invoice_number"] == "FAC-00000003"

    def test_mixed_payment_registers_only_cash(self, sample_product, open_session):
        payload = sale_payload(sample_product, payment_method="cash:150, debit:50")
        response = client.post("/api/sales", json=payload)
        assert response.status_code == 201
        assert response.json()["payment_method"] == "CASH:150, DEBIT:50"

        session = client.get(f"/api/cash-register/sessions/{open_session['id']}").json()
        assert Decimal(session["calculated_balance"]) == Decimal("250.00")

    def test_cash_sale_without_open_session(self, sample_product, db_session):
        response = client.post("/api/sales", json=sale_payload(sample_product))
        assert response.status_code == 201
        assert db_session.query(CashMovement).count() == 0

    def test_insufficient_stock_rolls_back(self, sample_product, db_session):
        response = client.post("/api/sales", json=sale_payload(sample_product, quantity=21))
        assert response.status_code == 400
        assert response.json()["message"].startswith("Stock insuficiente para Harina PAN 1kg")

        db_session.expire_all()
        assert db_session.get(Product, sample_product.id).stock == Decimal("20")
        assert db_session.query(Sale).count() == 0

    def test_repeated_lines_count_against_stock(self, make_product):
        product = make_product(stock=Decimal("3"))
        line = {"product_id": str(product.id), "quantity": "2", "unit_price": "100.00", "total": "200.00"}
        response = client.post("/api/sales", json={
            "items": [line, line], "subtotal": "400.00", "total": "400.00"
        })
        assert response.status_code == 400

    def test_price_below_cost(self, sample_product):
        response = client.post("/api/sales", json=sale_payload(sample_product, unit_price="40.00"))
        assert response.status_code == 400
        assert "no puede ser menor al costo" in response.json()["message"]

    def test_discount_below_cost(self, sample_product):
        payload = sale_payload(sample_product, discount="150.00", total="50.00")
        response = client.post("/api/sales", json=payload)
        assert response.status_code == 400
        assert response.json()["message"] == "El descuento no puede dejar la venta por debajo del costo"

    def test_inactive_product(self, sample_product, db_session):
        sample_product.is_active = False
        db_session.commit()
        response = client.post("/api/sales", json=sale_payload(sample_product))
        assert response.status_code == 400

    def test_invalid_payment_method(self, sample_product):
        response = client.post("/api/sales", json=sale_payload(sample_product, payment_method="CASH:abc"))
        assert response.status_code == 400

    def test_duplicate_invoice_number(self, sample_product):
        client.post("/api/sales", json=sale_payload(sample_product, quantity=1, invoice_number="MAN-1"))
        response = client.post("/api/sales", json=sale_payload(sample_product, quantity=1, invoice_number="MAN-1"))
        assert response.status_code == 409
        assert response.json()["message"] == "El número de factura MAN-1 ya fue utilizado"

    def test_manual_number_ahead_of_counter_is_skipped(self, sample_product):
        manual = client.post("/api/sales", json=sale_payload(
            sample_product, quantity=1, invoice_number="FAC-00000001"
        ))
        assert manual.status_code == 201

        numbers = []
        for _ in range(3):
            response = client.post("/api/sales", json=sale_payload(sample_product, quantity=1))
            assert response.status_code == 201
            numbers.append(response.json()["invoice_number"])
        assert numbers == ["FAC-00000002", "FAC-00000003", "FAC-00000004"]

    def test_sale_after_counter_reset_gets_free_number(self, sample_product, auth_headers):
        first = client.post("/api/sales", json=sale_payload(sample_product, quantity=1)).json()
        second = client.post("/api/sales", json=sale_payload(sample_product, quantity=1)).json()
        assert client.post("/api/invoice/counter/reset", headers=auth_headers).status_code == 200

        response = client.post("/api/sales", json=sale_payload(sample_product, quantity=1))
        assert response.status_code == 201
        assert [first["invoice_number"], second["invoice_number"]] == ["FAC-00000001", "FAC-00000002"]
        assert response.json()["invoice_number"] == "FAC-00000003"
        assert client.get("/api/invoice/next").json()["invoice_number"] == "FAC-00000004"

    def test_line_total_must_match_quantity_times_price(self, sample_product):
        payload = sale_payload(sample_product)
        payload["items"][0]["total"] = "150.00"
        payload["subtotal"] = payload["total"] = "150.00"
        response = client.post("/api/sales", json=payload)
        assert response.status_code == 400
        assert any("no coincide con cantidad x precio" in m for m in response.json()["message"])

    def test_subtotal_must_match_lines(self, sample_product):
        response = client.post("/api/sales", json=sale_payload(sample_product, subtotal="300.00", total="300.00"))
        assert response.status_code == 400
        assert any("no coincide con la suma de los renglones" in m for m in response.json()["message"])

    def test_total_must_match_subtotal_discount_and_tax(self, sample_product, db_session):
        response = client.post("/api/sales", json=sale_payload(sample_product, total="0"))
        assert response.status_code == 400
        assert any("debe ser subtotal - descuento + impuesto" in m for m in response.json()["message"])
        assert db_session.query(Sale).count() == 0

    def test_rounding_difference_within_tolerance(self, sample_product):
        payload = sale_payload(sample_product, quantity=3, unit_price="66.67", subtotal="200.00", total="200.00")
        payload["items"][0]["total"] = "200.00"
        response = client.post("/api/sales", json=payload)
        assert response.status_code == 201

    def test_credit_sale_requires_client(self, sample_product):
        response = client.post("/api/sales", json=sale_payload(sample_product, is_credit=True))
        assert response.status_code == 400
        assert response.json()["message"] == "Las ventas a crédito requieren un cliente"

    def test_credit_sale_unknown_client(self, sample_product):
        payload = sale_payload(sample_product, is_credit=True, client_id="00000000-0000-0000-0000-000000000000")
        response = client.post("/api/sales", json=payload)
        assert response.status_code == 404

    def test_credit_sale_creates_invoice(self, sample_product, sample_client, open_session, db_session):
        payload = sale_payload(sample_product, is_credit=True, client_id=str(sample_client.id),
                               due_date="2030-01-31T00:00:00")
        response = client.post("/api/sales", json=payload)
        assert response.status_code == 201
        sale = response.json()
        assert sale["client"]["comercial_name"] == "Bodega La Esquina"

        invoice = db_session.query(Invoice).filter(Invoice.sale_id == sale["id"]).one()
        assert invoice.number == sale["invoice_number"]
        assert invoice.balance == Decimal("200.00")
        assert invoice.status == InvoiceStatus.PENDING

        movements = db_session.query(CashMovement).filter(CashMovement.type == MovementType.SALE).count()
        assert movements == 0

    def test_list_and_get_sales(self, sample_product, sample_client):
        client.post("/api/sales", json=sale_payload(sample_product, quantity=1))
        client.post("/api/sales", json=sale_payload(sample_product, quantity=1, client_id=str(sample_client.id)))

        assert len(client.get("/api/sales").json()) == 2
        by_client = client.get("/api/sales", params={"client_id": str(sample_client.id)}).json()
        assert len(by_client) == 1

        detail = client.get(f"/api/sales/{by_client[0]['id']}")
        assert detail.status_code == 200
        assert client.get("/api/sales/00000000-0000-0000-0000-000000000000").status_code == 404
