"""
Tests para el módulo de Unidades de medida
"""

from fastapi.testclient import TestClient

from app.main import app


client = TestClient(app)


class TestUnits:
    """CRUD de unidades"""

    def test_create_unit(self):
        response = client.post("/api/units", json={"name": " Kilogramo ", "abbreviation": "kg"})
        assert response.status_code == 201
        assert response.json()["name"] == "Kilogramo"

    def test_duplicate_name(self, sample_unit):
        response = client.post("/api/units", json={"name": "Unidad", "abbreviation": "u"})
        assert response.status_code == 409

    def test_list_sorted_by_name(self, sample_unit):
        client.post("/api/units", json={"name": "Bulto", "abbreviation": "bto"})
        names = [u["name"] for u in client.get("/api/units").json()]
        assert names == ["Bulto", "Unidad"]

    def test_update_unit(self, sample_unit):
        response = client.patch(f"/api/units/{sample_unit.id}", json={"abbreviation": "un"})
        assert response.status_code == 200
        assert response.json()["abbreviation"] == "un"

    def test_soft_delete(self, sample_unit):
        response = client.delete(f"/api/units/{sample_unit.id}")
        assert response.status_code == 200
        assert response.json()["is_active"] is False

        assert client.get("/api/units").json() == []
        inactive = client.get("/api/units", params={"active": False}).json()
        assert [u["name"] for u in inactive] == ["Unidad"]

    def test_unknown_unit(self):
        response = client.get("/api/units/00000000-0000-0000-0000-000000000000")
        assert response.status_code == 404
