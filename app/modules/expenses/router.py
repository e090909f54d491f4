from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import List, Optional
from uuid import UUID
from datetime import date

from app.database.database import get_db
from app.modules.expenses.service import ExpenseService
from app.modules.expenses.schemas import ExpenseCreate, ExpenseUpdate, ExpenseOut

expenses_router = APIRouter(prefix="/expenses", tags=["Expenses"])


@expenses_router.post("", response_model=ExpenseOut, status_code=status.HTTP_201_CREATED)
def create_expense(data: ExpenseCreate, db: Session = Depends(get_db)):
    return ExpenseService(db).create_expense(data)


@expenses_router.get("", response_model=List[ExpenseOut])
def list_expenses(
    category: Optional[str] = Query(None),
    start_date: Optional[date] = Query(None),
    end_date: Optional[date] = Query(None),
    db: Session = Depends(get_db)
):
    return ExpenseService(db).get_expenses(category, start_date, end_date)


@expenses_router.get("/{expense_id}", response_model=ExpenseOut)
def get_expense(expense_id: UUID, db: Session = Depends(get_db)):
    return ExpenseService(db).get_expense(expense_id)


@expenses_router.patch("/{expense_id}", response_model=ExpenseOut)
def update_expense(expense_id: UUID, data: ExpenseUpdate, db: Session = Depends(get_db)):
    return ExpenseService(db).update_expense(expense_id, data)


@expenses_router.delete("/{expense_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_expense(expense_id: UUID, db: Session = Depends(get_db)):
    ExpenseService(db).delete_expense(expense_id)
