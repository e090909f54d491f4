from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
from fastapi import HTTPException, status
from uuid import UUID
from typing import List, Optional
import logging

from app.modules.departments.models import Department
from app.modules.departments.schemas import DepartmentCreate, DepartmentUpdate

logger = logging.getLogger(__name__)


class DepartmentService:
    """Servicio para gestión de departamentos y subdepartamentos"""

    def __init__(self, db: Session):
        self.db = db

    def _validate_parent(self, parent_id: UUID) -> Department:
        parent = self.db.query(Department).filter(Department.id == parent_id).first()
        if not parent:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Departamento padre no encontrado"
            )
        if parent.parent_id is not None:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Un subdepartamento no puede tener subdepartamentos"
            )
        return parent

    def create_department(self, data: DepartmentCreate) -> Department:
        """
        Crear departamento. Si trae parent_id se crea como subdepartamento
        de un departamento de primer nivel.
        """
        try:
            if data.parent_id:
                self._validate_parent(data.parent_id)

            department = Department(
                name=data.name.strip(),
                description=data.description,
                parent_id=data.parent_id
            )
            self.db.add(department)
            self.db.commit()
            self.db.refresh(department)
            return department

        except HTTPException:
            raise
        except IntegrityError:
            self.db.rollback()
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail=f"Ya existe un departamento con el nombre '{data.name}'"
            )
        except Exception as e:
            self.db.rollback()
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=f"Error interno del servidor: {str(e)}"
            )

    def get_departments(self, active: bool = True) -> List[Department]:
        """Listar departamentos: primero los de primer nivel, luego por nombre"""
        return self.db.query(Department).filter(
            Department.is_active == active
        ).order_by(
            Department.parent_id.isnot(None), Department.name.asc()
        ).all()

    def get_tree(self) -> List[dict]:
        """Departamentos de primer nivel con sus subdepartamentos activos"""
        parents = self.db.query(Department).filter(
            Department.parent_id.is_(None),
            Department.is_active == True
        ).order_by(Department.name.asc()).all()

        return [
            {
                "id": parent.id,
                "name": parent.name,
                "description": parent.description,
                "parent_id": None,
                "is_active": parent.is_active,
                "created_at": parent.created_at,
                "children": sorted(
                    [child for child in parent.children if child.is_active],
                    key=lambda child: child.name
                ),
            }
            for parent in parents
        ]

    def get_department(self, department_id: UUID) -> Department:
        department = self.db.query(Department).filter(Department.id == department_id).first()
        if not department:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"Departamento con ID {department_id} no encontrado"
            )
        return department

    def update_department(self, department_id: UUID, data: DepartmentUpdate) -> Department:
        department = self.get_department(department_id)
        update_data = data.model_dump(exclude_unset=True)
        parent_id: Optional[UUID] = update_data.get("parent_id")

        try:
            if parent_id:
                if parent_id == department.id:
                    raise HTTPException(
                        status_code=status.HTTP_400_BAD_REQUEST,
                        detail="Un departamento no puede ser su propio padre"
                    )
                has_children = self.db.query(Department).filter(
                    Department.parent_id == department.id
                ).count() > 0
                if has_children:
                    raise HTTPException(
                        status_code=status.HTTP_400_BAD_REQUEST,
                        detail="Un departamento con subdepartamentos no puede convertirse en subdepartamento"
                    )
                self._validate_parent(parent_id)

            for field, value in update_data.items():
                setattr(department, field, value)

            self.db.commit()
            self.db.refresh(department)
            return department

        except HTTPException:
            raise
        except IntegrityError:
            self.db.rollback()
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail=f"Ya existe un departamento con el nombre '{data.name}'"
            )

    def delete_department(self, department_id: UUID) -> Department:
        """Desactivar departamento; sus subdepartamentos quedan sin padre"""
        department = self.get_department(department_id)

        detached = self.db.query(Department).filter(
            Department.parent_id == department.id
        ).update({Department.parent_id: None}, synchronize_session="fetch")

        department.soft_delete()
        self.db.commit()
        self.db.refresh(department)
        logger.info(f"Departamento {department.name} desactivado ({detached} subdepartamentos liberados)")
        return department
