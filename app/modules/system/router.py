"""
Información del sistema: red local y estado del servicio
"""

import socket
from typing import List

from fastapi import APIRouter
from pydantic import BaseModel

from app.core.config import settings

system_router = APIRouter(prefix="/system", tags=["System"])
health_router = APIRouter(tags=["System"])


class NetworkInfo(BaseModel):
    local_ip: str
    all_ips: List[str]
    port: int


def local_ipv4_addresses() -> List[str]:
    """Direcciones IPv4 del equipo, sin las de loopback"""
    try:
        infos = socket.getaddrinfo(socket.gethostname(), None, socket.AF_INET)
    except socket.gaierror:
        return []

    addresses = []
    for info in infos:
        address = info[4][0]
        if not address.startswith("127.") and address not in addresses:
            addresses.append(address)
    return addresses


@system_router.get("/network", response_model=NetworkInfo)
async def get_network_info():
    """IP para conectar otras estaciones de la red local al servidor"""
    addresses = local_ipv4_addresses()
    return {
        "local_ip": addresses[0] if addresses else "localhost",
        "all_ips": addresses,
        "port": settings.PORT,
    }


@health_router.get("/health")
async def health_check():
    return {"status": "healthy", "environment": settings.ENVIRONMENT}
