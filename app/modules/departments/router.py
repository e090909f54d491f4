from fastapi import APIRouter, status, Depends, Query
from sqlalchemy.orm import Session
from typing import List
from uuid import UUID

from app.database.database import get_db
from app.modules.departments.service import DepartmentService
from app.modules.departments.schemas import (
    DepartmentCreate, DepartmentUpdate, DepartmentOut, DepartmentTree
)

departments_router = APIRouter(prefix="/departments", tags=["Departments"])

@departments_router.post("", response_model=DepartmentOut, status_code=status.HTTP_201_CREATED)
def create_department(data: DepartmentCreate, db: Session = Depends(get_db)):
    """Crear departamento o subdepartamento (con parent_id)"""
    return DepartmentService(db).create_department(data)

@departments_router.get("", response_model=List[DepartmentOut])
def list_departments(active: bool = Query(True), db: Session = Depends(get_db)):
    return DepartmentService(db).get_departments(active)

@departments_router.get("/tree", response_model=List[DepartmentTree])
def department_tree(db: Session = Depends(get_db)):
    """Árbol de departamentos con sus subdepartamentos activos"""
    return DepartmentService(db).get_tree()

@departments_router.get("/{department_id}", response_model=DepartmentOut)
def get_department(department_id: UUID, db: Session = Depends(get_db)):
    return DepartmentService(db).get_department(department_id)

@departments_router.patch("/{department_id}", response_model=DepartmentOut)
def update_department(department_id: UUID, data: DepartmentUpdate, db: Session = Depends(get_db)):
    return DepartmentService(db).update_department(department_id, data)

@departments_router.delete("/{department_id}", response_model=DepartmentOut)
def delete_department(department_id: UUID, db: Session = Depends(get_db)):
    return DepartmentService(db).delete_department(department_id)
