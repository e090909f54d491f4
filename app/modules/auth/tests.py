"""
Tests para el módulo de Autenticación y Usuarios

- Login con JWT y datos del usuario en el token
- Gestión de usuarios restringida a ADMIN
- Protección del usuario administrador principal
"""

import jwt
import pytest
from datetime import timedelta
from fastapi.testclient import TestClient

from app.main import app
from app.modules.auth.models import User
from app.modules.auth.utils import create_access_token, decode_token, hash_password, verify_password


client = TestClient(app)


class TestPasswordAndTokens:
    """Utilidades de contraseñas y JWT"""

    def test_hash_and_verify(self):
        hashed = hash_password("secreto123")
        assert hashed != "secreto123"
        assert verify_password("secreto123", hashed)
        assert not verify_password("otra", hashed)

    def test_token_roundtrip(self):
        token = create_access_token({"sub": "abc", "role": "ADMIN"})
        payload = decode_token(token)
        assert payload["sub"] == "abc"
        assert payload["type"] == "access"

    def test_expired_token_rejected(self):
        token = create_access_token({"sub": "abc"}, expires_delta=timedelta(seconds=-1))
        with pytest.raises(jwt.ExpiredSignatureError):
            decode_token(token)


class TestLogin:
    """POST /api/auth/login"""

    def test_login_success(self, admin_user):
        response = client.post("/api/auth/login", json={"username": "admin", "password": "admin123"})
        assert response.status_code == 200
        data = response.json()
        assert data["token_type"] == "bearer"
        assert data["user"]["role"] == "ADMIN"

        payload = decode_token(data["access_token"])
        assert payload["sub"] == str(admin_user.id)
        assert payload["username"] == "admin"

    def test_login_is_case_insensitive_on_username(self, admin_user):
        response = client.post("/api/auth/login", json={"username": " ADMIN ", "password": "admin123"})
        assert response.status_code == 200

    def test_wrong_password(self, admin_user):
        response = client.post("/api/auth/login", json={"username": "admin", "password": "incorrecta"})
        assert response.status_code == 401
        assert response.json()["message"] == "Credenciales inválidas"

    def test_inactive_user_cannot_login(self, db_session, cashier_user):
        cashier_user.is_active = False
        db_session.commit()
        response = client.post("/api/auth/login", json={"username": "cajero", "password": "cajero123"})
        assert response.status_code == 401

    def test_me(self, auth_headers):
        response = client.get("/api/auth/me", headers=auth_headers)
        assert response.status_code == 200
        assert response.json()["username"] == "admin"

    def test_me_without_token(self):
        response = client.get("/api/auth/me")
        assert response.status_code in (401, 403)

    def test_me_with_garbage_token(self):
        response = client.get("/api/auth/me", headers={"Authorization": "Bearer basura"})
        assert response.status_code == 401


class TestUsers:
    """CRUD de usuarios"""

    def test_create_user(self, auth_headers):
        response = client.post("/api/users", headers=auth_headers, json={
            "username": "Supervisora", "name": "María Gómez", "password": "clave123", "role": "SUPERVISOR"
        })
        assert response.status_code == 201
        data = response.json()
        assert data["username"] == "supervisora"
        assert "password" not in data

    def test_duplicate_username(self, auth_headers, cashier_user):
        response = client.post("/api/users", headers=auth_headers, json={
            "username": "cajero", "name": "Otro", "password": "clave123"
        })
        assert response.status_code == 409

    def test_username_with_spaces(self, auth_headers):
        response = client.post("/api/users", headers=auth_headers, json={
            "username": "juan perez", "name": "Juan", "password": "clave123"
        })
        assert response.status_code == 400

    def test_cashier_cannot_manage_users(self, cashier_headers):
        response = client.get("/api/users", headers=cashier_headers)
        assert response.status_code == 403

    def test_update_password_rehashes(self, auth_headers, cashier_user, db_session):
        response = client.patch(f"/api/users/{cashier_user.id}", headers=auth_headers, json={"password": "nueva123"})
        assert response.status_code == 200

        db_session.expire_all()
        user = db_session.get(User, cashier_user.id)
        assert verify_password("nueva123", user.password)

    def test_admin_cannot_be_deleted(self, auth_headers, admin_user):
        response = client.delete(f"/api/users/{admin_user.id}", headers=auth_headers)
        assert response.status_code == 400

    def test_delete_user(self, auth_headers, cashier_user):
        response = client.delete(f"/api/users/{cashier_user.id}", headers=auth_headers)
        assert response.status_code == 204

        response = client.get(f"/api/users/{cashier_user.id}", headers=auth_headers)
        assert response.status_code == 404
