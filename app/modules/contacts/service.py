"""
Servicios del módulo de Contactos

ContactService implementa el CRUD común; ClientService y SupplierService
solo fijan el modelo y los mensajes.
"""

from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
from sqlalchemy import or_
from fastapi import HTTPException, status
from typing import List, Optional
from uuid import UUID
from pydantic import BaseModel
import logging

from app.modules.contacts.models import Client, Supplier

logger = logging.getLogger(__name__)


class ContactService:
    """Servicio base para gestión de contactos"""

    model = None
    label = "Contacto"

    def __init__(self, db: Session):
        self.db = db

    def _conflict(self) -> HTTPException:
        return HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"El RIF ya está registrado por otro {self.label.lower()}"
        )

    def create(self, data: BaseModel):
        """Crear contacto; el RIF es único"""
        try:
            contact = self.model(**data.model_dump())
            self.db.add(contact)
            self.db.commit()
            self.db.refresh(contact)
            logger.info(f"{self.label} creado: {contact.rif}")
            return contact
        except IntegrityError:
            self.db.rollback()
            raise self._conflict()
        except Exception as e:
            self.db.rollback()
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=f"Error interno del servidor: {str(e)}"
            )

    def get_all(self, search: Optional[str] = None, active: bool = True) -> List:
        """Listar contactos, más recientes primero, con búsqueda por RIF, nombre o email"""
        query = self.db.query(self.model).filter(self.model.is_active == active)

        if search:
            search_term = f"%{search}%"
            query = query.filter(
                or_(
                    self.model.comercial_name.ilike(search_term),
                    self.model.legal_name.ilike(search_term),
                    self.model.rif.ilike(search_term),
                    self.model.email.ilike(search_term),
                )
            )

        return query.order_by(self.model.created_at.desc()).all()

    def get_by_id(self, contact_id: UUID):
        contact = self.db.query(self.model).filter(self.model.id == contact_id).first()
        if not contact:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"{self.label} con ID {contact_id} no encontrado"
            )
        return contact

    def update(self, contact_id: UUID, data: BaseModel):
        contact = self.get_by_id(contact_id)
        try:
            for field, value in data.model_dump(exclude_unset=True).items():
                setattr(contact, field, value)
            self.db.commit()
            self.db.refresh(contact)
            return contact
        except IntegrityError:
            self.db.rollback()
            raise self._conflict()

    def delete(self, contact_id: UUID):
        """Soft delete: marcar como inactivo"""
        contact = self.get_by_id(contact_id)
        contact.soft_delete()
        self.db.commit()
        self.db.refresh(contact)
        return contact


class ClientService(ContactService):
    model = Client
    label = "Cliente"


class SupplierService(ContactService):
    model = Supplier
    label = "Proveedor"
