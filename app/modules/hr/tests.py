"""
Tests para el módulo de Recursos Humanos

- Empleados: cédula única, vínculo opcional con usuario, soft delete
- Nómina: periodos, generación por frecuencia de pago y pago del periodo
"""

import pytest
from decimal import Decimal
from fastapi.testclient import TestClient

from app.main import app
from app.modules.hr.models import Employee, PaymentFrequency
from app.modules.hr.service import salary_for_period


client = TestClient(app)


# ===== FIXTURES =====

def employee_data(**overrides):
    data = {
        "first_name": "Luis",
        "last_name": "Martínez",
        "identification": "V-18765432",
        "email": "Luis.Martinez@zenith.com",
        "position": "Cajero",
        "department": "Ventas",
        "base_salary": "400.00",
    }
    data.update(overrides)
    return data


@pytest.fixture
def employees(db_session):
    staff = [
        Employee(first_name="Ana", last_name="Pérez", identification="V-1", position="Gerente",
                 base_salary=Decimal("1000.00"), payment_frequency=PaymentFrequency.MONTHLY),
        Employee(first_name="José", last_name="Díaz", identification="V-2", position="Cajero",
                 base_salary=Decimal("400.00"), payment_frequency=PaymentFrequency.BIWEEKLY),
        Employee(first_name="Rosa", last_name="Gil", identification="V-3", position="Almacén",
                 base_salary=Decimal("300.00"), payment_frequency=PaymentFrequency.WEEKLY),
    ]
    db_session.add_all(staff)
    db_session.commit()
    return staff


@pytest.fixture
def period(auth_headers):
    response = client.post("/api/hr/payroll/period", headers=auth_headers, json={
        "name": "Primera quincena de junio", "start_date": "2025-06-01", "end_date": "2025-06-15"
    })
    assert response.status_code == 201
    return response.json()


class TestSalaryForPeriod:

    def test_rules(self):
        assert salary_for_period(Decimal("1000"), PaymentFrequency.MONTHLY) == (Decimal("1000.00"), "Sueldo Base (Mensual)")
        assert salary_for_period(Decimal("1000"), PaymentFrequency.BIWEEKLY) == (Decimal("500.00"), "Sueldo Base (Quincenal)")
        assert salary_for_period(Decimal("1000"), PaymentFrequency.WEEKLY) == (Decimal("250.00"), "Sueldo Base (Semanal)")

    def test_rounds_to_cents(self):
        amount, _ = salary_for_period(Decimal("100"), PaymentFrequency.WEEKLY)
        assert amount == Decimal("25.00")
        amount, _ = salary_for_period(Decimal("333.33"), PaymentFrequency.BIWEEKLY)
        assert amount == Decimal("166.66")

    def test_default_is_biweekly(self):
        assert salary_for_period(Decimal("300"), None)[0] == Decimal("150.00")


# ===== EMPLEADOS =====

class TestEmployees:
    """CRUD de empleados"""

    def test_create(self):
        response = client.post("/api/hr/employees", json=employee_data())
        assert response.status_code == 201
        data = response.json()
        assert data["email"] == "luis.martinez@zenith.com"
        assert data["currency"] == "USD"
        assert data["payment_frequency"] == "BIWEEKLY"

    def test_duplicate_identification(self):
        client.post("/api/hr/employees", json=employee_data())
        response = client.post("/api/hr/employees", json=employee_data(first_name="Otro"))
        assert response.status_code == 409
        assert response.json()["message"] == "Ya existe un empleado con la cédula 'V-18765432'"

    def test_invalid_email(self):
        response = client.post("/api/hr/employees", json=employee_data(email="correo"))
        assert response.status_code == 400

    def test_link_to_user(self, cashier_user):
        response = client.post("/api/hr/employees", json=employee_data(user_id=str(cashier_user.id)))
        assert response.status_code == 201
        assert response.json()["user_id"] == str(cashier_user.id)

    def test_link_to_unknown_user(self):
        response = client.post("/api/hr/employees", json=employee_data(user_id="00000000-0000-0000-0000-000000000000"))
        assert response.status_code == 404

    def test_list_by_last_name(self, employees):
        names = [e["last_name"] for e in client.get("/api/hr/employees").json()]
        assert names == ["Díaz", "Gil", "Pérez"]

    def test_update(self, employees):
        response = client.patch(f"/api/hr/employees/{employees[1].id}", json={"base_salary": "450.00"})
        assert response.status_code == 200
        assert Decimal(response.json()["base_salary"]) == Decimal("450.00")

    def test_soft_delete(self, employees):
        response = client.delete(f"/api/hr/employees/{employees[0].id}")
        assert response.status_code == 200
        assert response.json()["is_active"] is False

        active = client.get("/api/hr/employees", params={"active": True}).json()
        assert len(active) == 2
        assert len(client.get("/api/hr/employees").json()) == 3

    def test_not_found(self):
        response = client.get("/api/hr/employees/00000000-0000-0000-0000-000000000000")
        assert response.status_code == 404


# ===== NÓMINA =====

class TestPayroll:
    """Periodos y generación de nómina"""

    def test_requires_token(self):
        response = client.get("/api/hr/payroll/period")
        assert response.status_code in (401, 403)

    def test_create_period(self, period):
        assert period["status"] == "DRAFT"
        assert Decimal(period["total_amount"]) == Decimal("0")

    def test_period_dates_validated(self, auth_headers):
        response = client.post("/api/hr/payroll/period", headers=auth_headers, json={
            "name": "Inválido", "start_date": "2025-06-15", "end_date": "2025-06-01"
        })
        assert response.status_code == 400
        assert any("La fecha de fin no puede ser anterior" in m for m in response.json()["message"])

    def test_generate_all(self, period, employees, auth_headers):
        response = client.post("/api/hr/payroll/generate", headers=auth_headers, json={
            "payroll_period_id": period["id"]
        })
        assert response.status_code == 200
        assert response.json()["count"] == 3
        assert Decimal(response.json()["total_amount"]) == Decimal("1275.00")

        detail = client.get(f"/api/hr/payroll/period/{period['id']}", headers=auth_headers).json()
        assert detail["status"] == "PROCESSED"
        by_employee = {p["employee"]["identification"]: p for p in detail["payments"]}
        assert Decimal(by_employee["V-1"]["net_amount"]) == Decimal("1000.00")
        assert by_employee["V-2"]["items"][0]["description"] == "Sueldo Base (Quincenal)"
        assert by_employee["V-3"]["items"][0]["type"] == "INCOME"

    def test_generate_by_frequency(self, period, employees, auth_headers):
        response = client.post("/api/hr/payroll/generate", headers=auth_headers, json={
            "payroll_period_id": period["id"], "frequency": "BIWEEKLY"
        })
        assert response.json()["count"] == 1
        assert Decimal(response.json()["total_amount"]) == Decimal("200.00")

    def test_regenerate_replaces_payments(self, period, employees, auth_headers):
        client.post("/api/hr/payroll/generate", headers=auth_headers, json={"payroll_period_id": period["id"]})
        client.post("/api/hr/payroll/generate", headers=auth_headers, json={
            "payroll_period_id": period["id"], "employee_ids": [str(employees[0].id)]
        })

        detail = client.get(f"/api/hr/payroll/period/{period['id']}", headers=auth_headers).json()
        assert len(detail["payments"]) == 1
        assert Decimal(detail["total_amount"]) == Decimal("1000.00")

    def test_generate_without_employees(self, period, auth_headers):
        response = client.post("/api/hr/payroll/generate", headers=auth_headers, json={"payroll_period_id": period["id"]})
        assert response.status_code == 400
        assert response.json()["message"] == "No se encontraron empleados elegibles"

    def test_inactive_employees_excluded(self, period, employees, auth_headers, db_session):
        employees[2].soft_delete()
        db_session.commit()
        response = client.post("/api/hr/payroll/generate", headers=auth_headers, json={"payroll_period_id": period["id"]})
        assert response.json()["count"] == 2

    def test_pay_period(self, period, employees, auth_headers):
        draft = client.post(f"/api/hr/payroll/period/{period['id']}/pay", headers=auth_headers)
        assert draft.status_code == 400

        client.post("/api/hr/payroll/generate", headers=auth_headers, json={"payroll_period_id": period["id"]})
        paid = client.post(f"/api/hr/payroll/period/{period['id']}/pay", headers=auth_headers)
        assert paid.status_code == 200
        assert paid.json()["status"] == "PAID"

        regenerate = client.post("/api/hr/payroll/generate", headers=auth_headers, json={"payroll_period_id": period["id"]})
        assert regenerate.status_code == 400
        assert regenerate.json()["message"] == "No se puede regenerar un periodo de nómina pagado"

    def test_list_periods_newest_first(self, period, auth_headers):
        client.post("/api/hr/payroll/period", headers=auth_headers, json={
            "name": "Segunda quincena de junio", "start_date": "2025-06-16", "end_date": "2025-06-30"
        })
        names = [p["name"] for p in client.get("/api/hr/payroll/period", headers=auth_headers).json()]
        assert names == ["Segunda quincena de junio", "Primera quincena de junio"]

    def test_unknown_period(self, auth_headers):
        response = client.get("/api/hr/payroll/period/00000000-0000-0000-0000-000000000000", headers=auth_headers)
        assert response.status_code == 404
