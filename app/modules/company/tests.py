"""
Tests para la configuración de la empresa
"""

from fastapi.testclient import TestClient

from app.main import app


client = TestClient(app)


def settings_payload(**overrides):
    payload = {"name": "Abastos Zenith", "rif": "J-41234567-8"}
    payload.update(overrides)
    return payload


class TestCompanySettings:
    """GET / PUT /api/company-settings"""

    def test_defaults_created_on_first_read(self):
        response = client.get("/api/company-settings")
        assert response.status_code == 200
        data = response.json()
        assert data["name"] == "Zenith"
        assert data["rif"] == "J-00000000-0"
        assert data["auto_update_rates"] is False
        assert data["update_frequency"] == 60

        assert client.get("/api/company-settings").json()["id"] == data["id"]

    def test_update(self, auth_headers, usd_currency):
        response = client.put("/api/company-settings", headers=auth_headers, json=settings_payload(
            preferred_secondary_currency_id=str(usd_currency.id), auto_update_rates=True, update_frequency=30
        ))
        assert response.status_code == 200
        data = response.json()
        assert data["name"] == "Abastos Zenith"
        assert data["preferred_secondary_currency_id"] == str(usd_currency.id)
        assert data["update_frequency"] == 30

    def test_null_flags_keep_previous_values(self, auth_headers):
        client.put("/api/company-settings", headers=auth_headers, json=settings_payload(update_frequency=15))
        data = client.put("/api/company-settings", headers=auth_headers,
                          json=settings_payload(update_frequency=None)).json()
        assert data["update_frequency"] == 15

    def test_requires_admin(self, cashier_headers):
        response = client.put("/api/company-settings", headers=cashier_headers, json=settings_payload())
        assert response.status_code == 403

    def test_invalid_rif(self, auth_headers):
        response = client.put("/api/company-settings", headers=auth_headers, json=settings_payload(rif="123"))
        assert response.status_code == 400

    def test_unknown_currency(self, auth_headers):
        response = client.put("/api/company-settings", headers=auth_headers, json=settings_payload(
            preferred_secondary_currency_id="00000000-0000-0000-0000-000000000000"
        ))
        assert response.status_code == 404
