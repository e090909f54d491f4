from fastapi import APIRouter, Depends, status, Query
from sqlalchemy.orm import Session
from typing import List, Optional
from uuid import UUID

from app.database.database import get_db
from app.dependencies.userDependencies import user_dependency
from app.modules.hr.service import EmployeeService, PayrollService
from app.modules.hr.schemas import (
    EmployeeCreate, EmployeeUpdate, EmployeeOut,
    PayrollPeriodCreate, PayrollPeriodOut, PayrollPeriodDetail,
    GeneratePayroll, GeneratePayrollResult
)

employees_router = APIRouter(prefix="/hr/employees", tags=["HR - Empleados"])
payroll_router = APIRouter(prefix="/hr/payroll", tags=["HR - Nómina"])


# ===== EMPLEADOS =====

@employees_router.post("", response_model=EmployeeOut, status_code=status.HTTP_201_CREATED)
def create_employee(employee_data: EmployeeCreate, db: Session = Depends(get_db)):
    return EmployeeService(db).create_employee(employee_data)


@employees_router.get("", response_model=List[EmployeeOut])
def list_employees(active: Optional[bool] = Query(None), db: Session = Depends(get_db)):
    return EmployeeService(db).get_employees(active)


@employees_router.get("/{employee_id}", response_model=EmployeeOut)
def get_employee(employee_id: UUID, db: Session = Depends(get_db)):
    return EmployeeService(db).get_employee(employee_id)


@employees_router.patch("/{employee_id}", response_model=EmployeeOut)
def update_employee(employee_id: UUID, employee_data: EmployeeUpdate, db: Session = Depends(get_db)):
    return EmployeeService(db).update_employee(employee_id, employee_data)


@employees_router.delete("/{employee_id}", response_model=EmployeeOut)
def delete_employee(employee_id: UUID, db: Session = Depends(get_db)):
    """Desactiva al empleado"""
    return EmployeeService(db).delete_employee(employee_id)


# ===== NÓMINA (requiere token) =====

@payroll_router.post("/period", response_model=PayrollPeriodOut, status_code=status.HTTP_201_CREATED)
def create_period(period_data: PayrollPeriodCreate, _: user_dependency, db: Session = Depends(get_db)):
    return PayrollService(db).create_period(period_data)


@payroll_router.get("/period", response_model=List[PayrollPeriodOut])
def list_periods(_: user_dependency, db: Session = Depends(get_db)):
    return PayrollService(db).get_periods()


@payroll_router.get("/period/{period_id}", response_model=PayrollPeriodDetail)
def get_period(period_id: UUID, _: user_dependency, db: Session = Depends(get_db)):
    return PayrollService(db).get_period(period_id)


@payroll_router.post("/generate", response_model=GeneratePayrollResult)
def generate_payroll(data: GeneratePayroll, _: user_dependency, db: Session = Depends(get_db)):
    """
    Generar recibos del periodo.

    Salario semanal = base / 4, quincenal = base / 2, mensual = base.
    """
    return PayrollService(db).generate_payroll(data)


@payroll_router.post("/period/{period_id}/pay", response_model=PayrollPeriodOut)
def pay_period(period_id: UUID, _: user_dependency, db: Session = Depends(get_db)):
    return PayrollService(db).pay_period(period_id)
