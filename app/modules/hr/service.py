"""
Servicios de Recursos Humanos: empleados y nómina
"""

from fastapi import HTTPException, status
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
from sqlalchemy import desc
from decimal import Decimal
from typing import List, Optional
from uuid import UUID
import logging

from app.modules.hr.models import (
    Employee, PayrollPeriod, PayrollPayment, PayrollItem,
    PaymentFrequency, PayrollStatus, PayrollItemType
)
from app.modules.hr.schemas import EmployeeCreate, EmployeeUpdate, PayrollPeriodCreate, GeneratePayroll
from app.modules.auth.models import User

logger = logging.getLogger(__name__)

# Fracción del salario mensual que corresponde a cada pago
FREQUENCY_RULES = {
    PaymentFrequency.WEEKLY: (Decimal("4"), "Sueldo Base (Semanal)"),
    PaymentFrequency.BIWEEKLY: (Decimal("2"), "Sueldo Base (Quincenal)"),
    PaymentFrequency.MONTHLY: (Decimal("1"), "Sueldo Base (Mensual)"),
}


def salary_for_period(base_salary: Decimal, frequency: Optional[PaymentFrequency]):
    """Monto y descripción del sueldo base según la frecuencia de pago"""
    divisor, description = FREQUENCY_RULES[frequency or PaymentFrequency.BIWEEKLY]
    return (Decimal(base_salary) / divisor).quantize(Decimal("0.01")), description


class EmployeeService:

    def __init__(self, db: Session):
        self.db = db

    def _validate_user(self, user_id: Optional[UUID]):
        if user_id and not self.db.query(User).filter(User.id == user_id).first():
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Usuario no encontrado")

    def create_employee(self, data: EmployeeCreate) -> Employee:
        self._validate_user(data.user_id)
        try:
            employee = Employee(**data.model_dump())
            self.db.add(employee)
            self.db.commit()
            self.db.refresh(employee)
            logger.info(f"Empleado {employee.first_name} {employee.last_name} creado")
            return employee
        except IntegrityError:
            self.db.rollback()
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail=f"Ya existe un empleado con la cédula '{data.identification}'"
            )

    def get_employees(self, active: Optional[bool] = None) -> List[Employee]:
        query = self.db.query(Employee)
        if active is not None:
            query = query.filter(Employee.is_active == active)
        return query.order_by(Employee.last_name.asc()).all()

    def get_employee(self, employee_id: UUID) -> Employee:
        employee = self.db.query(Employee).filter(Employee.id == employee_id).first()
        if not employee:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"Empleado con ID {employee_id} no encontrado"
            )
        return employee

    def update_employee(self, employee_id: UUID, data: EmployeeUpdate) -> Employee:
        employee = self.get_employee(employee_id)
        update_data = data.model_dump(exclude_unset=True)
        self._validate_user(update_data.get("user_id"))

        try:
            for field, value in update_data.items():
                setattr(employee, field, value)
            self.db.commit()
            self.db.refresh(employee)
            return employee
        except IntegrityError:
            self.db.rollback()
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail=f"Ya existe un empleado con la cédula '{data.identification}'"
            )

    def delete_employee(self, employee_id: UUID) -> Employee:
        employee = self.get_employee(employee_id)
        employee.soft_delete()
        self.db.commit()
        self.db.refresh(employee)
        logger.info(f"Empleado {employee.identification} desactivado")
        return employee


class PayrollService:

    def __init__(self, db: Session):
        self.db = db

    def create_period(self, data: PayrollPeriodCreate) -> PayrollPeriod:
        period = PayrollPeriod(
            name=data.name,
            start_date=data.start_date,
            end_date=data.end_date,
            status=PayrollStatus.DRAFT
        )
        self.db.add(period)
        self.db.commit()
        self.db.refresh(period)
        return period

    def get_periods(self) -> List[PayrollPeriod]:
        return self.db.query(PayrollPeriod).order_by(desc(PayrollPeriod.start_date)).all()

    def get_period(self, period_id: UUID) -> PayrollPeriod:
        period = self.db.query(PayrollPeriod).filter(PayrollPeriod.id == period_id).first()
        if not period:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"Periodo de nómina {period_id} no encontrado"
            )
        return period

    def generate_payroll(self, data: GeneratePayroll) -> dict:
        """
        Genera los recibos del periodo para los empleados activos elegibles.

        Regenerar reemplaza los recibos anteriores; un periodo pagado no se toca.
        """
        period = self.get_period(data.payroll_period_id)

        if period.status == PayrollStatus.PAID:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="No se puede regenerar un periodo de nómina pagado"
            )

        query = self.db.query(Employee).filter(Employee.is_active == True)
        if data.employee_ids:
            query = query.filter(Employee.id.in_(data.employee_ids))
        if data.frequency:
            query = query.filter(Employee.payment_frequency == data.frequency)
        employees = query.all()

        if not employees:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="No se encontraron empleados elegibles"
            )

        try:
            period.payments.clear()
            self.db.flush()

            grand_total = Decimal("0")
            for employee in employees:
                amount, description = salary_for_period(employee.base_salary, employee.payment_frequency)
                period.payments.append(PayrollPayment(
                    employee_id=employee.id,
                    base_salary=employee.base_salary,
                    currency=employee.currency,
                    exchange_rate=Decimal("1"),
                    total_income=amount,
                    total_deductions=Decimal("0"),
                    net_amount=amount,
                    items=[PayrollItem(type=PayrollItemType.INCOME, description=description, amount=amount)]
                ))
                grand_total += amount

            period.status = PayrollStatus.PROCESSED
            period.total_amount = grand_total
            self.db.commit()
            logger.info(f"Nómina '{period.name}' generada: {len(employees)} empleados, total {grand_total}")
            return {"count": len(employees), "total_amount": grand_total}

        except Exception as e:
            self.db.rollback()
            logger.error(f"Error generando nómina: {e}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=f"Error interno del servidor: {str(e)}"
            )

    def pay_period(self, period_id: UUID) -> PayrollPeriod:
        period = self.get_period(period_id)
        if period.status != PayrollStatus.PROCESSED:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Solo se pueden pagar periodos procesados"
            )
        period.status = PayrollStatus.PAID
        self.db.commit()
        self.db.refresh(period)
        logger.info(f"Nómina '{period.name}' marcada como pagada")
        return period
