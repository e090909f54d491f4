from sqlalchemy.orm import Session
from fastapi import HTTPException, status
from uuid import UUID
from datetime import date, datetime
from typing import List, Optional

from app.common.filters import apply_date_range
from app.modules.expenses.models import Expense
from app.modules.expenses.schemas import ExpenseCreate, ExpenseUpdate


class ExpenseService:
    """Servicio para gestión de gastos"""

    def __init__(self, db: Session):
        self.db = db

    def create_expense(self, data: ExpenseCreate) -> Expense:
        values = data.model_dump()
        values["date"] = values["date"] or datetime.utcnow()
        expense = Expense(**values)
        self.db.add(expense)
        self.db.commit()
        self.db.refresh(expense)
        return expense

    def get_expenses(
        self,
        category: Optional[str] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> List[Expense]:
        query = self.db.query(Expense)
        if category:
            query = query.filter(Expense.category == category)
        query = apply_date_range(query, Expense.date, start_date, end_date)
        return query.order_by(Expense.date.desc()).all()

    def get_expense(self, expense_id: UUID) -> Expense:
        expense = self.db.query(Expense).filter(Expense.id == expense_id).first()
        if not expense:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"Gasto con ID {expense_id} no encontrado"
            )
        return expense

    def update_expense(self, expense_id: UUID, data: ExpenseUpdate) -> Expense:
        expense = self.get_expense(expense_id)
        for field, value in data.model_dump(exclude_unset=True).items():
            if value is not None:
                setattr(expense, field, value)
        self.db.commit()
        self.db.refresh(expense)
        return expense

    def delete_expense(self, expense_id: UUID) -> None:
        expense = self.get_expense(expense_id)
        self.db.delete(expense)
        self.db.commit()
