"""
Tests para la información del sistema
"""

import socket
from fastapi.testclient import TestClient

from app.main import app
from app.core.config import settings
from app.modules.system import router as system_module


client = TestClient(app)


def fake_addrinfo(*addresses):
    def _getaddrinfo(host, port, family=0, *args, **kwargs):
        return [(socket.AF_INET, socket.SOCK_STREAM, 6, "", (address, 0)) for address in addresses]
    return _getaddrinfo


class TestNetwork:
    """GET /api/system/network"""

    def test_skips_loopback_and_duplicates(self, monkeypatch):
        monkeypatch.setattr(system_module.socket, "getaddrinfo",
                            fake_addrinfo("127.0.1.1", "192.168.1.20", "192.168.1.20", "10.0.0.5"))
        assert system_module.local_ipv4_addresses() == ["192.168.1.20", "10.0.0.5"]

    def test_endpoint(self, monkeypatch):
        monkeypatch.setattr(system_module.socket, "getaddrinfo", fake_addrinfo("192.168.1.20"))
        response = client.get("/api/system/network")
        assert response.status_code == 200
        assert response.json() == {"local_ip": "192.168.1.20", "all_ips": ["192.168.1.20"], "port": settings.PORT}

    def test_unresolvable_host_falls_back_to_localhost(self, monkeypatch):
        def _fail(*args, **kwargs):
            raise socket.gaierror("sin red")

        monkeypatch.setattr(system_module.socket, "getaddrinfo", _fail)
        data = client.get("/api/system/network").json()
        assert data["local_ip"] == "localhost"
        assert data["all_ips"] == []


class TestHealth:

    def test_health(self):
        response = client.get("/api/health")
        assert response.status_code == 200
        assert response.json() == {"status": "healthy", "environment": settings.ENVIRONMENT}
