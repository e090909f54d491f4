from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
from sqlalchemy import or_
from fastapi import HTTPException, status
from uuid import UUID
from typing import Optional, List
from decimal import Decimal
import logging

from app.modules.products.models import Product
from app.modules.products.schemas import ProductCreate, ProductUpdate
from app.modules.departments.models import Department

logger = logging.getLogger(__name__)

PRICE_LABELS = {
    "sale_price": "El precio de venta no puede ser menor al precio de costo",
    "offer_price": "El precio en oferta no puede ser menor al precio de costo",
    "wholesale_price": "El precio al mayor no puede ser menor al precio de costo",
}


def validate_subcategory(db: Session, category_id: UUID, subcategory_id: Optional[UUID]) -> None:
    """La subcategoría debe ser hija directa de la categoría"""
    if not subcategory_id:
        return
    subcategory = db.query(Department).filter(Department.id == subcategory_id).first()
    if not subcategory or subcategory.parent_id != category_id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="La subcategoría seleccionada no pertenece a la categoría especificada"
        )


def validate_prices(cost_price: Decimal, prices: dict) -> None:
    """Los precios de venta (normal, oferta, mayor) no pueden quedar bajo el costo"""
    for field, message in PRICE_LABELS.items():
        value = prices.get(field)
        if value is not None and value < cost_price:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=message)


def get_product_by_id(db: Session, product_id: UUID) -> Product:
    product = db.query(Product).filter(Product.id == product_id).first()
    if not product:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Producto con ID {product_id} no encontrado"
        )
    return product


def create_product(db: Session, data: ProductCreate) -> Product:
    validate_subcategory(db, data.category_id, data.subcategory_id)
    validate_prices(data.cost_price, data.model_dump())

    try:
        product = Product(**data.model_dump())
        db.add(product)
        db.commit()
        db.refresh(product)
        logger.info(f"Producto creado: {product.sku} - {product.name}")
        return product
    except IntegrityError:
        db.rollback()
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Ya existe un producto con el SKU '{data.sku}'"
        )


def get_all_products(
    db: Session,
    search: Optional[str] = None,
    active: bool = True,
    category_id: Optional[UUID] = None,
    subcategory_id: Optional[UUID] = None,
) -> List[Product]:
    query = db.query(Product).filter(Product.is_active == active)

    if category_id:
        query = query.filter(Product.category_id == category_id)
    if subcategory_id:
        query = query.filter(Product.subcategory_id == subcategory_id)
    if search:
        query = query.filter(or_(
            Product.name.ilike(f"%{search}%"),
            Product.sku.ilike(f"%{search}%"),
        ))

    return query.order_by(Product.name.asc()).all()


def update_product(db: Session, product_id: UUID, data: ProductUpdate) -> Product:
    """Actualiza un producto validando subcategoría y precios contra los valores resultantes"""
    product = get_product_by_id(db, product_id)
    update_data = data.model_dump(exclude_unset=True)

    if "subcategory_id" in update_data or "category_id" in update_data:
        validate_subcategory(
            db,
            update_data.get("category_id", product.category_id),
            update_data.get("subcategory_id", product.subcategory_id),
        )

    if any(field in update_data for field in ("cost_price", *PRICE_LABELS)):
        merged = {field: update_data.get(field, getattr(product, field)) for field in PRICE_LABELS}
        validate_prices(update_data.get("cost_price", product.cost_price), merged)

    try:
        for key, value in update_data.items():
            setattr(product, key, value)
        db.commit()
        db.refresh(product)
        return product
    except IntegrityError:
        db.rollback()
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Ya existe un producto con el SKU '{data.sku}'"
        )


def delete_product(db: Session, product_id: UUID) -> Product:
    """Desactiva un producto (las ventas históricas lo siguen referenciando)"""
    product = get_product_by_id(db, product_id)
    product.soft_delete()
    db.commit()
    db.refresh(product)
    return product
