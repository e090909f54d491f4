from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
from fastapi import HTTPException, status
from uuid import UUID
from typing import List

from app.modules.units.models import Unit
from app.modules.units.schemas import UnitCreate, UnitUpdate


class UnitService:
    """Servicio para gestión de unidades de medida"""

    def __init__(self, db: Session):
        self.db = db

    def create_unit(self, data: UnitCreate) -> Unit:
        try:
            unit = Unit(name=data.name.strip(), abbreviation=data.abbreviation.strip())
            self.db.add(unit)
            self.db.commit()
            self.db.refresh(unit)
            return unit
        except IntegrityError:
            self.db.rollback()
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail=f"Ya existe una unidad con el nombre '{data.name}'"
            )

    def get_units(self, active: bool = True) -> List[Unit]:
        return self.db.query(Unit).filter(Unit.is_active == active).order_by(Unit.name.asc()).all()

    def get_unit(self, unit_id: UUID) -> Unit:
        unit = self.db.query(Unit).filter(Unit.id == unit_id).first()
        if not unit:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"Unidad con ID {unit_id} no encontrada"
            )
        return unit

    def update_unit(self, unit_id: UUID, data: UnitUpdate) -> Unit:
        unit = self.get_unit(unit_id)
        try:
            for field, value in data.model_dump(exclude_unset=True).items():
                setattr(unit, field, value)
            self.db.commit()
            self.db.refresh(unit)
            return unit
        except IntegrityError:
            self.db.rollback()
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail=f"Ya existe una unidad con el nombre '{data.name}'"
            )

    def delete_unit(self, unit_id: UUID) -> Unit:
        unit = self.get_unit(unit_id)
        unit.soft_delete()
        self.db.commit()
        self.db.refresh(unit)
        return unit
