"""
Tests para el módulo de Departamentos

Los departamentos admiten un solo nivel de subdepartamentos.
"""

import pytest
from fastapi.testclient import TestClient

from app.main import app
from app.modules.departments.models import Department


client = TestClient(app)


# ===== FIXTURES =====

@pytest.fixture
def sub_department(db_session, sample_department):
    child = Department(name="Granos", parent_id=sample_department.id)
    db_session.add(child)
    db_session.commit()
    db_session.refresh(child)
    return child


class TestDepartments:
    """Jerarquía y CRUD de departamentos"""

    def test_create_root_department(self):
        response = client.post("/api/departments", json={"name": "Limpieza"})
        assert response.status_code == 201
        assert response.json()["parent_id"] is None

    def test_create_sub_department(self, sample_department):
        response = client.post("/api/departments", json={"name": "Enlatados", "parent_id": str(sample_department.id)})
        assert response.status_code == 201
        assert response.json()["parent_id"] == str(sample_department.id)

    def test_no_third_level(self, sub_department):
        response = client.post("/api/departments", json={"name": "Arroz", "parent_id": str(sub_department.id)})
        assert response.status_code == 400
        assert response.json()["message"] == "Un subdepartamento no puede tener subdepartamentos"

    def test_unknown_parent(self):
        response = client.post("/api/departments", json={
            "name": "Huérfano", "parent_id": "00000000-0000-0000-0000-000000000000"
        })
        assert response.status_code == 404

    def test_duplicate_name(self, sample_department):
        response = client.post("/api/departments", json={"name": "Víveres"})
        assert response.status_code == 409

    def test_list_roots_first(self, sub_department):
        names = [d["name"] for d in client.get("/api/departments").json()]
        assert names == ["Víveres", "Granos"]

    def test_tree(self, sub_department):
        response = client.get("/api/departments/tree")
        assert response.status_code == 200
        tree = response.json()
        assert len(tree) == 1
        assert tree[0]["name"] == "Víveres"
        assert [c["name"] for c in tree[0]["children"]] == ["Granos"]

    def test_cannot_be_own_parent(self, sample_department):
        response = client.patch(f"/api/departments/{sample_department.id}", json={"parent_id": str(sample_department.id)})
        assert response.status_code == 400

    def test_parent_with_children_cannot_move(self, db_session, sub_department, sample_department):
        other = Department(name="Bebidas")
        db_session.add(other)
        db_session.commit()

        response = client.patch(f"/api/departments/{sample_department.id}", json={"parent_id": str(other.id)})
        assert response.status_code == 400

    def test_delete_detaches_children(self, db_session, sub_department, sample_department):
        response = client.delete(f"/api/departments/{sample_department.id}")
        assert response.status_code == 200
        assert response.json()["is_active"] is False

        db_session.expire_all()
        assert db_session.get(Department, sub_department.id).parent_id is None
