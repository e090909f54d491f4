from fastapi import APIRouter, status, Depends, Query
from sqlalchemy.orm import Session
from typing import List
from uuid import UUID

from app.database.database import get_db
from app.modules.units.service import UnitService
from app.modules.units.schemas import UnitCreate, UnitUpdate, UnitOut

units_router = APIRouter(prefix="/units", tags=["Units"])

@units_router.post("", response_model=UnitOut, status_code=status.HTTP_201_CREATED)
def create_unit(data: UnitCreate, db: Session = Depends(get_db)):
    return UnitService(db).create_unit(data)

@units_router.get("", response_model=List[UnitOut])
def list_units(active: bool = Query(True), db: Session = Depends(get_db)):
    return UnitService(db).get_units(active)

@units_router.get("/{unit_id}", response_model=UnitOut)
def get_unit(unit_id: UUID, db: Session = Depends(get_db)):
    return UnitService(db).get_unit(unit_id)

@units_router.patch("/{unit_id}", response_model=UnitOut)
def update_unit(unit_id: UUID, data: UnitUpdate, db: Session = Depends(get_db)):
    return UnitService(db).update_unit(unit_id, data)

@units_router.delete("/{unit_id}", response_model=UnitOut)
def delete_unit(unit_id: UUID, db: Session = Depends(get_db)):
    return UnitService(db).delete_unit(unit_id)
