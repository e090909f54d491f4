from fastapi import APIRouter, status, Depends, Query
from uuid import UUID
from typing import List, Optional
from sqlalchemy.orm import Session
from app.dependencies.dbDependecies import get_db
from app.modules.products import service
from app.modules.products.schemas import ProductCreate, ProductUpdate, ProductOut

product_router = APIRouter(prefix="/products", tags=["Products"])


@product_router.post("", response_model=ProductOut, status_code=status.HTTP_201_CREATED)
def create_product(data: ProductCreate, db: Session = Depends(get_db)):
    """
    Crear producto.

    - La subcategoría debe pertenecer a la categoría
    - Precio de venta, oferta y mayor deben ser >= precio de costo
    """
    return service.create_product(db, data)


@product_router.get("", response_model=List[ProductOut])
def list_products(
    db: Session = Depends(get_db),
    search: Optional[str] = Query(None, description="Buscar por nombre o SKU"),
    active: bool = Query(True, description="Filtrar por estado activo"),
    category_id: Optional[UUID] = Query(None, description="Filtrar por departamento"),
    subcategory_id: Optional[UUID] = Query(None, description="Filtrar por subdepartamento"),
):
    return service.get_all_products(db, search, active, category_id, subcategory_id)


@product_router.get("/{product_id}", response_model=ProductOut)
def get_product(product_id: UUID, db: Session = Depends(get_db)):
    return service.get_product_by_id(db, product_id)


@product_router.patch("/{product_id}", response_model=ProductOut)
def update_product(product_id: UUID, data: ProductUpdate, db: Session = Depends(get_db)):
    return service.update_product(db, product_id, data)


@product_router.delete("/{product_id}", response_model=ProductOut)
def delete_product(product_id: UUID, db: Session = Depends(get_db)):
    return service.delete_product(db, product_id)
