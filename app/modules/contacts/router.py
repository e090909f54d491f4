"""
Router para el módulo de Contactos

Endpoints REST de clientes (/clients) y proveedores (/suppliers).
"""

from fastapi import APIRouter, Depends, status, Query, Path
from sqlalchemy.orm import Session
from typing import List, Optional
from uuid import UUID

from app.database.database import get_db
from app.modules.contacts.service import ClientService, SupplierService
from app.modules.contacts.schemas import (
    ClientCreate, ClientUpdate, ClientOut,
    SupplierCreate, SupplierUpdate, SupplierOut
)

clients_router = APIRouter(
    prefix="/clients",
    tags=["Clients"],
    responses={404: {"description": "Not found"}}
)

suppliers_router = APIRouter(
    prefix="/suppliers",
    tags=["Suppliers"],
    responses={404: {"description": "Not found"}}
)


# ===== CLIENTES =====

@clients_router.post("", response_model=ClientOut, status_code=status.HTTP_201_CREATED)
async def create_client(client_data: ClientCreate, db: Session = Depends(get_db)):
    """
    Crear un nuevo cliente

    - **rif**: RIF venezolano, entre 10 y 12 caracteres (único)
    - **comercial_name**: Nombre comercial (requerido)
    """
    return ClientService(db).create(client_data)


@clients_router.get("", response_model=List[ClientOut])
async def get_clients(
    search: Optional[str] = Query(None, description="Buscar por RIF, nombre o email"),
    active: bool = Query(True, description="Filtrar por estado activo"),
    db: Session = Depends(get_db)
):
    return ClientService(db).get_all(search, active)


@clients_router.get("/{client_id}", response_model=ClientOut)
async def get_client(client_id: UUID = Path(..., description="ID del cliente"), db: Session = Depends(get_db)):
    return ClientService(db).get_by_id(client_id)


@clients_router.patch("/{client_id}", response_model=ClientOut)
async def update_client(
    client_data: ClientUpdate,
    client_id: UUID = Path(..., description="ID del cliente"),
    db: Session = Depends(get_db)
):
    return ClientService(db).update(client_id, client_data)


@clients_router.delete("/{client_id}", response_model=ClientOut)
async def delete_client(client_id: UUID = Path(..., description="ID del cliente"), db: Session = Depends(get_db)):
    """Desactivar cliente (soft delete)"""
    return ClientService(db).delete(client_id)


# ===== PROVEEDORES =====

@suppliers_router.post("", response_model=SupplierOut, status_code=status.HTTP_201_CREATED)
async def create_supplier(supplier_data: SupplierCreate, db: Session = Depends(get_db)):
    """
    Crear un nuevo proveedor

    - **rif**: RIF venezolano, entre 10 y 12 caracteres (único)
    - **contact_name** y **category** son opcionales
    """
    return SupplierService(db).create(supplier_data)


@suppliers_router.get("", response_model=List[SupplierOut])
async def get_suppliers(
    search: Optional[str] = Query(None, description="Buscar por RIF, nombre o email"),
    active: bool = Query(True, description="Filtrar por estado activo"),
    db: Session = Depends(get_db)
):
    return SupplierService(db).get_all(search, active)


@suppliers_router.get("/{supplier_id}", response_model=SupplierOut)
async def get_supplier(supplier_id: UUID = Path(..., description="ID del proveedor"), db: Session = Depends(get_db)):
    return SupplierService(db).get_by_id(supplier_id)


@suppliers_router.patch("/{supplier_id}", response_model=SupplierOut)
async def update_supplier(
    supplier_data: SupplierUpdate,
    supplier_id: UUID = Path(..., description="ID del proveedor"),
    db: Session = Depends(get_db)
):
    return SupplierService(db).update(supplier_id, supplier_data)


@suppliers_router.delete("/{supplier_id}", response_model=SupplierOut)
async def delete_supplier(supplier_id: UUID = Path(..., description="ID del proveedor"), db: Session = Depends(get_db)):
    """Desactivar proveedor (soft delete)"""
    return SupplierService(db).delete(supplier_id)
