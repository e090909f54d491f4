from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List
from uuid import UUID

from app.database.database import get_db
from app.dependencies.userDependencies import admin_dependency
from app.modules.invoices.service import InvoiceCounterService, InvoiceService, PaymentService
from app.modules.invoices.schemas import (
    InvoiceNumberOut, InvoiceCounterOut, InvoiceCreate, InvoiceOut, InvoiceDetail,
    PaymentCreate, PaymentResult, PaymentOut, PaymentWithInvoice
)

invoices_router = APIRouter(prefix="/invoice", tags=["Invoices"])
payments_router = APIRouter(prefix="/payments", tags=["Payments"])


# ===== NUMERACIÓN =====

@invoices_router.get("/next", response_model=InvoiceNumberOut)
def next_invoice_number(db: Session = Depends(get_db)):
    """Próximo número de factura, sin consumirlo"""
    return {"invoice_number": InvoiceCounterService(db).peek_next_number()}


@invoices_router.get("/counter", response_model=InvoiceCounterOut)
def get_counter(db: Session = Depends(get_db)):
    return InvoiceCounterService(db).get_counter()


@invoices_router.post("/counter/reset", response_model=InvoiceCounterOut)
def reset_counter(_: admin_dependency, db: Session = Depends(get_db)):
    """Reiniciar el contador en 1 (solo administradores)"""
    return InvoiceCounterService(db).reset_counter()


# ===== FACTURAS A CRÉDITO =====

@invoices_router.post("", response_model=InvoiceOut, status_code=status.HTTP_201_CREATED)
def create_invoice(invoice_data: InvoiceCreate, db: Session = Depends(get_db)):
    """
    Crear una factura a crédito.

    El número se toma del contador y el saldo inicial es el total.
    """
    return InvoiceService(db).create_credit_invoice(invoice_data)


@invoices_router.get("/client/{client_id}", response_model=List[InvoiceDetail])
def client_invoices(client_id: UUID, db: Session = Depends(get_db)):
    return InvoiceService(db).get_client_invoices(client_id)


@invoices_router.get("/pending", response_model=List[InvoiceDetail])
def pending_invoices(db: Session = Depends(get_db)):
    """Facturas con saldo pendiente, por fecha de vencimiento"""
    return InvoiceService(db).get_pending_invoices()


@invoices_router.get("/overdue", response_model=List[InvoiceOut])
def overdue_invoices(db: Session = Depends(get_db)):
    """Facturas vencidas; las marca como OVERDUE"""
    return InvoiceService(db).get_overdue_invoices()


@invoices_router.get("/{invoice_id}", response_model=InvoiceDetail)
def get_invoice(invoice_id: UUID, db: Session = Depends(get_db)):
    return InvoiceService(db).get_invoice(invoice_id)


# ===== PAGOS =====

@payments_router.post("", response_model=PaymentResult, status_code=status.HTTP_201_CREATED)
def create_payment(payment_data: PaymentCreate, db: Session = Depends(get_db)):
    """
    Registrar un abono contra una factura a crédito.

    - No se aceptan pagos sobre facturas pagadas
    - El monto no puede exceder el saldo pendiente
    """
    return PaymentService(db).create_payment(payment_data)


@payments_router.get("/invoice/{invoice_id}", response_model=List[PaymentOut])
def invoice_payments(invoice_id: UUID, db: Session = Depends(get_db)):
    return PaymentService(db).get_invoice_payments(invoice_id)


@payments_router.get("", response_model=List[PaymentWithInvoice])
def list_payments(db: Session = Depends(get_db)):
    return PaymentService(db).get_all_payments()
