from fastapi import APIRouter, Depends, status, Query
from sqlalchemy.orm import Session
from typing import List, Optional
from uuid import UUID
from datetime import date

from app.database.database import get_db
from app.modules.returns.service import ReturnService
from app.modules.returns.models import ReturnStatus, ReturnType
from app.modules.returns.schemas import (
    ReturnCreate, ReturnUpdate, ReturnApprove, ReturnReject, ReturnOut,
    EligibilityRequest, EligibilityResult
)

returns_router = APIRouter(prefix="/returns", tags=["Returns"])


@returns_router.post("", response_model=ReturnOut, status_code=status.HTTP_201_CREATED)
def create_return(return_data: ReturnCreate, db: Session = Depends(get_db)):
    """
    Crear una devolución (queda PENDING).

    Aplica las mismas reglas de elegibilidad que `/returns/validate`.
    """
    return ReturnService(db).create_return(return_data)


@returns_router.post("/validate", response_model=EligibilityResult)
def validate_return(request: EligibilityRequest, db: Session = Depends(get_db)):
    eligible, message = ReturnService(db).check_eligibility(request.sale_id, request.items)
    return {"eligible": eligible, "message": message}


@returns_router.get("", response_model=List[ReturnOut])
def list_returns(
    return_status: Optional[ReturnStatus] = Query(None, alias="status"),
    return_type: Optional[ReturnType] = Query(None),
    start_date: Optional[date] = Query(None),
    end_date: Optional[date] = Query(None),
    db: Session = Depends(get_db)
):
    return ReturnService(db).get_returns(return_status, return_type, start_date, end_date)


@returns_router.get("/{return_id}", response_model=ReturnOut)
def get_return(return_id: UUID, db: Session = Depends(get_db)):
    return ReturnService(db).get_return(return_id)


@returns_router.patch("/{return_id}/approve", response_model=ReturnOut)
def approve_return(return_id: UUID, body: ReturnApprove, db: Session = Depends(get_db)):
    return ReturnService(db).approve(return_id, body.approved_by)


@returns_router.patch("/{return_id}/reject", response_model=ReturnOut)
def reject_return(return_id: UUID, body: ReturnReject, db: Session = Depends(get_db)):
    return ReturnService(db).reject(return_id, body.reason)


@returns_router.post("/{return_id}/process", response_model=ReturnOut)
def process_return(return_id: UUID, db: Session = Depends(get_db)):
    """Ajusta el inventario y marca la devolución como COMPLETED"""
    return ReturnService(db).process(return_id)


@returns_router.patch("/{return_id}", response_model=ReturnOut)
def update_return(return_id: UUID, return_data: ReturnUpdate, db: Session = Depends(get_db)):
    return ReturnService(db).update(return_id, return_data)
