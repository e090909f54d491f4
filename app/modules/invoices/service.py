from fastapi import HTTPException, status
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
from decimal import Decimal
from typing import List
from uuid import UUID
from datetime import datetime
import logging

from app.modules.invoices.models import (
    InvoiceCounter, Invoice, Payment, InvoiceStatus, INVOICE_PREFIX
)
from app.modules.invoices.schemas import InvoiceCreate, PaymentCreate
from app.modules.contacts.models import Client
from app.modules.pos.models import Sale

logger = logging.getLogger(__name__)

OPEN_STATUSES = (InvoiceStatus.PENDING, InvoiceStatus.PARTIAL, InvoiceStatus.OVERDUE)


class InvoiceCounterService:
    """
    Numeración de facturas.

    El contador se lee con SELECT ... FOR UPDATE y se incrementa dentro de la
    transacción del llamador; dos transacciones concurrentes quedan
    serializadas por el bloqueo de fila y nunca obtienen el mismo número.
    """

    def __init__(self, db: Session):
        self.db = db

    def _get_or_create_counter(self, lock: bool = False) -> InvoiceCounter:
        query = self.db.query(InvoiceCounter).filter(InvoiceCounter.prefix == INVOICE_PREFIX)
        if lock:
            query = query.with_for_update(of=InvoiceCounter)
        counter = query.first()

        if not counter:
            counter = InvoiceCounter(prefix=INVOICE_PREFIX, current_number=1)
            self.db.add(counter)
            self.db.flush()

        return counter

    def _is_taken(self, number: str) -> bool:
        """Números cargados a mano o previos a un reinicio ya no se pueden emitir"""
        return (
            self.db.query(Sale.id).filter(Sale.invoice_number == number).first() is not None
            or self.db.query(Invoice.id).filter(Invoice.number == number).first() is not None
        )

    def _next_free_number(self, counter: InvoiceCounter) -> int:
        number = counter.current_number
        while self._is_taken(counter.format_number(number)):
            number += 1
        return number

    def reserve_invoice_number(self) -> str:
        """
        Reserva el próximo número libre y deja el contador en el siguiente.
        No hace commit: el número queda confirmado con la transacción que lo usa.
        """
        counter = self._get_or_create_counter(lock=True)
        number = self._next_free_number(counter)
        counter.current_number = number + 1
        self.db.flush()
        return counter.format_number(number)

    def peek_next_number(self) -> str:
        """Próximo número a emitir, sin incrementar (para mostrar en el POS)"""
        counter = self._get_or_create_counter()
        self.db.commit()
        return counter.format_number(self._next_free_number(counter))

    def get_counter(self) -> dict:
        counter = self._get_or_create_counter()
        self.db.commit()
        return {
            "id": counter.id,
            "prefix": counter.prefix,
            "current_number": counter.current_number,
            "next_invoice_number": counter.format_number(self._next_free_number(counter)),
            "updated_at": counter.updated_at,
        }

    def reset_counter(self) -> dict:
        """Reinicia la numeración en 1 (nuevo ejercicio fiscal)"""
        counter = self._get_or_create_counter(lock=True)
        counter.current_number = 1
        self.db.commit()
        logger.warning("Contador de facturas reiniciado a 1")
        return self.get_counter()


class InvoiceService:
    """Facturas a crédito (cuentas por cobrar)"""

    def __init__(self, db: Session):
        self.db = db

    def build_credit_invoice(self, number: str, client_id: UUID, total: Decimal, **values) -> Invoice:
        """Arma la factura con saldo = total; el llamador controla la transacción"""
        invoice = Invoice(
            number=number,
            client_id=client_id,
            total=total,
            paid_amount=Decimal("0"),
            balance=total,
            status=InvoiceStatus.PENDING,
            **values
        )
        self.db.add(invoice)
        return invoice

    def create_credit_invoice(self, data: InvoiceCreate) -> Invoice:
        client = self.db.query(Client).filter(Client.id == data.client_id).first()
        if not client:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"Cliente con ID {data.client_id} no encontrado"
            )

        try:
            number = InvoiceCounterService(self.db).reserve_invoice_number()
            invoice = self.build_credit_invoice(
                number,
                data.client_id,
                data.total,
                sale_id=data.sale_id,
                subtotal=data.subtotal,
                discount=data.discount,
                tax=data.tax,
                due_date=data.due_date,
                notes=data.notes,
            )
            self.db.commit()
            self.db.refresh(invoice)
            logger.info(f"Factura a crédito {invoice.number} creada para {client.comercial_name}")
            return invoice
        except IntegrityError:
            self.db.rollback()
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="Número de factura duplicado"
            )
        except Exception as e:
            self.db.rollback()
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=f"Error interno del servidor: {str(e)}"
            )

    def get_client_invoices(self, client_id: UUID) -> List[Invoice]:
        return self.db.query(Invoice).filter(
            Invoice.client_id == client_id,
            Invoice.is_active == True
        ).order_by(Invoice.created_at.desc()).all()

    def get_pending_invoices(self) -> List[Invoice]:
        return self.db.query(Invoice).filter(
            Invoice.status.in_(OPEN_STATUSES),
            Invoice.is_active == True
        ).order_by(Invoice.due_date.asc()).all()

    def get_overdue_invoices(self) -> List[Invoice]:
        """Marca como OVERDUE las facturas vencidas con saldo y las devuelve"""
        invoices = self.db.query(Invoice).filter(
            Invoice.status.in_(OPEN_STATUSES),
            Invoice.due_date.isnot(None),
            Invoice.due_date < datetime.utcnow(),
            Invoice.is_active == True
        ).order_by(Invoice.due_date.asc()).all()

        changed = 0
        for invoice in invoices:
            if invoice.status != InvoiceStatus.OVERDUE:
                invoice.status = InvoiceStatus.OVERDUE
                changed += 1

        if changed:
            self.db.commit()
            logger.info(f"{changed} facturas marcadas como vencidas")
        return invoices

    def get_invoice(self, invoice_id: UUID) -> Invoice:
        invoice = self.db.query(Invoice).filter(Invoice.id == invoice_id).first()
        if not invoice:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Factura no encontrada")
        return invoice


class PaymentService:
    """Abonos de clientes"""

    def __init__(self, db: Session):
        self.db = db

    def create_payment(self, data: PaymentCreate) -> dict:
        invoice = self.db.query(Invoice).filter(
            Invoice.id == data.invoice_id
        ).with_for_update(of=Invoice).first()

        if not invoice:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Factura no encontrada")

        if invoice.status == InvoiceStatus.PAID:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="La factura ya está completamente pagada"
            )
        if invoice.status == InvoiceStatus.CANCELLED:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="No se pueden registrar pagos en una factura anulada"
            )

        if data.amount > invoice.balance:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"El monto del pago ({data.amount}) excede el balance pendiente ({invoice.balance})"
            )

        try:
            payment = Payment(
                invoice_id=invoice.id,
                amount=data.amount,
                payment_method=data.payment_method,
                reference=data.reference,
                notes=data.notes,
                payment_date=datetime.utcnow(),
            )
            self.db.add(payment)

            invoice.paid_amount = invoice.paid_amount + data.amount
            invoice.balance = invoice.total - invoice.paid_amount
            invoice.status = InvoiceStatus.PAID if invoice.balance == 0 else InvoiceStatus.PARTIAL

            self.db.commit()
            self.db.refresh(payment)
            self.db.refresh(invoice)
            logger.info(f"Pago de {data.amount} registrado en factura {invoice.number} ({invoice.status.value})")
            return {"payment": payment, "invoice": invoice}
        except Exception as e:
            self.db.rollback()
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=f"Error agregando pago: {str(e)}"
            )

    def get_invoice_payments(self, invoice_id: UUID) -> List[Payment]:
        return self.db.query(Payment).filter(
            Payment.invoice_id == invoice_id
        ).order_by(Payment.payment_date.desc()).all()

    def get_all_payments(self) -> List[Payment]:
        return self.db.query(Payment).order_by(Payment.payment_date.desc()).all()
