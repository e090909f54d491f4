"""
Tests para el módulo de Contactos

Tests que cubren:
- CRUD de clientes y proveedores
- Validaciones de RIF, teléfono y email venezolanos
- Búsquedas y soft delete
"""

import pytest
from fastapi.testclient import TestClient

from app.main import app
from app.common.validators import normalize_rif, validate_rif, validate_phone


client = TestClient(app)


# ===== FIXTURES =====

@pytest.fixture
def sample_client_data():
    """Datos de ejemplo para crear clientes"""
    return {
        "rif": " j-30123456-1 ",
        "comercial_name": "Abasto El Sol",
        "legal_name": "Inversiones El Sol C.A.",
        "phone": "0414-1234567",
        "email": "Ventas@ElSol.com",
        "address": "Av. Bolívar, Valencia"
    }


@pytest.fixture
def sample_supplier_data():
    return {
        "rif": "J-40999888-2",
        "comercial_name": "Alimentos Polar",
        "contact_name": "Ana Rodríguez",
        "category": "Alimentos",
        "phone": "+58 212-5551234"
    }


# ===== VALIDADORES =====

class TestVenezuelanValidators:
    """Tests para RIF y teléfono"""

    @pytest.mark.parametrize("rif", ["J-12345678-9", "V123456789", "G-20000001-0", "e-1234567-8"])
    def test_valid_rif(self, rif):
        assert validate_rif(rif)

    @pytest.mark.parametrize("rif", ["X-12345678-9", "J-123", "J-1234567890123", "J-ABCDEFGH-1"])
    def test_invalid_rif(self, rif):
        assert not validate_rif(rif)

    def test_normalize_rif(self):
        assert normalize_rif(" j-12345678-9 ") == "J-12345678-9"

    @pytest.mark.parametrize("phone", ["0414-1234567", "+58 412 1234567", "0212-5551234", None])
    def test_valid_phone(self, phone):
        assert validate_phone(phone)

    @pytest.mark.parametrize("phone", ["12345", "0312-1234567", "+57 310 1234567"])
    def test_invalid_phone(self, phone):
        assert not validate_phone(phone)


# ===== CLIENTES =====

class TestClients:
    """CRUD de clientes"""

    def test_create_normalizes_fields(self, sample_client_data):
        response = client.post("/api/clients", json=sample_client_data)
        assert response.status_code == 201
        data = response.json()
        assert data["rif"] == "J-30123456-1"
        assert data["email"] == "ventas@elsol.com"
        assert data["is_active"] is True

    def test_invalid_rif_rejected(self, sample_client_data):
        sample_client_data["rif"] = "123"
        response = client.post("/api/clients", json=sample_client_data)
        assert response.status_code == 400
        assert any("rif" in message for message in response.json()["message"])

    def test_invalid_email_rejected(self, sample_client_data):
        sample_client_data["email"] = "no-es-un-correo"
        response = client.post("/api/clients", json=sample_client_data)
        assert response.status_code == 400

    def test_duplicate_rif(self, sample_client):
        response = client.post("/api/clients", json={"rif": "V-12345678-9", "comercial_name": "Otro"})
        assert response.status_code == 409
        assert response.json()["message"] == "El RIF ya está registrado por otro cliente"

    def test_search(self, sample_client, sample_client_data):
        client.post("/api/clients", json=sample_client_data)

        by_name = client.get("/api/clients", params={"search": "esquina"}).json()
        assert [c["comercial_name"] for c in by_name] == ["Bodega La Esquina"]

        by_rif = client.get("/api/clients", params={"search": "J-3012"}).json()
        assert [c["comercial_name"] for c in by_rif] == ["Abasto El Sol"]

    def test_update(self, sample_client):
        response = client.patch(f"/api/clients/{sample_client.id}", json={"phone": "0424-7654321"})
        assert response.status_code == 200
        assert response.json()["phone"] == "0424-7654321"

    def test_soft_delete(self, sample_client):
        response = client.delete(f"/api/clients/{sample_client.id}")
        assert response.status_code == 200
        assert response.json()["is_active"] is False

        assert client.get("/api/clients").json() == []
        assert len(client.get("/api/clients", params={"active": False}).json()) == 1

    def test_not_found(self):
        response = client.get("/api/clients/00000000-0000-0000-0000-000000000000")
        assert response.status_code == 404


# ===== PROVEEDORES =====

class TestSuppliers:
    """CRUD de proveedores"""

    def test_create_supplier(self, sample_supplier_data):
        response = client.post("/api/suppliers", json=sample_supplier_data)
        assert response.status_code == 201
        data = response.json()
        assert data["contact_name"] == "Ana Rodríguez"
        assert data["category"] == "Alimentos"

    def test_duplicate_rif(self, sample_supplier):
        response = client.post("/api/suppliers", json={"rif": "J-40123456-7", "comercial_name": "Copia"})
        assert response.status_code == 409
        assert response.json()["message"] == "El RIF ya está registrado por otro proveedor"

    def test_same_rif_as_client_is_allowed(self, sample_client):
        response = client.post("/api/suppliers", json={"rif": "V-12345678-9", "comercial_name": "Bodega proveedora"})
        assert response.status_code == 201

    def test_invalid_phone(self, sample_supplier_data):
        sample_supplier_data["phone"] = "555"
        response = client.post("/api/suppliers", json=sample_supplier_data)
        assert response.status_code == 400

    def test_update_and_get(self, sample_supplier):
        client.patch(f"/api/suppliers/{sample_supplier.id}", json={"category": "Lácteos"})
        response = client.get(f"/api/suppliers/{sample_supplier.id}")
        assert response.status_code == 200
        assert response.json()["category"] == "Lácteos"
