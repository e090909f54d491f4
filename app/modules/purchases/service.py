"""
Servicios de negocio para el módulo de Compras

- PurchaseService: registro de compras con actualización de stock y costos
- PurchasePaymentService: pagos a proveedores con control de estado
"""

from fastapi import HTTPException, status
from sqlalchemy.orm import Session
from sqlalchemy import desc
from decimal import Decimal
from typing import List, Optional
from uuid import UUID
import logging

from app.core.config import settings
from app.modules.purchases.models import (
    Purchase, PurchaseItem, PurchasePayment, PurchasePaymentStatus
)
from app.modules.purchases.schemas import PurchaseCreate, PurchasePaymentCreate
from app.modules.contacts.models import Supplier
from app.modules.currencies.models import Currency
from app.modules.products.models import Product

logger = logging.getLogger(__name__)

INITIAL_PAYMENT_NOTE = "Pago inicial al registrar compra"
BALANCE_TOLERANCE = Decimal("0.01")


def resolve_payment_status(paid_amount: Decimal, balance: Decimal) -> PurchasePaymentStatus:
    if balance <= 0:
        return PurchasePaymentStatus.PAID
    if paid_amount > 0:
        return PurchasePaymentStatus.PARTIAL
    return PurchasePaymentStatus.UNPAID


class PurchaseService:
    """Servicio para registro de compras"""

    def __init__(self, db: Session):
        self.db = db

    def create_purchase(self, data: PurchaseCreate) -> Purchase:
        """
        Registrar compra:
        - valida proveedor, moneda y productos
        - subtotal = suma(cantidad * costo); impuesto 0
        - pago inicial opcional en efectivo
        - incrementa stock y fija el costo y la moneda de cada producto
        """
        supplier = self.db.query(Supplier).filter(Supplier.id == data.supplier_id).first()
        if not supplier:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"Proveedor con ID {data.supplier_id} no encontrado"
            )

        currency_code = data.currency_code or settings.DEFAULT_CURRENCY_CODE
        currency = self.db.query(Currency).filter(Currency.code == currency_code).first()
        if not currency:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"Moneda {currency_code} no encontrada"
            )

        try:
            purchase = Purchase(
                supplier_id=supplier.id,
                invoice_number=data.invoice_number,
                invoice_date=data.invoice_date,
                due_date=data.due_date,
                currency_code=currency_code,
                exchange_rate=data.exchange_rate or Decimal("1"),
            )
            self.db.add(purchase)

            subtotal = Decimal("0")
            for item_data in data.items:
                product = self.db.query(Product).filter(
                    Product.id == item_data.product_id
                ).with_for_update(of=Product).first()

                if not product:
                    raise HTTPException(
                        status_code=status.HTTP_404_NOT_FOUND,
                        detail=f"Producto con ID {item_data.product_id} no encontrado"
                    )

                item_total = item_data.quantity * item_data.cost
                subtotal += item_total

                purchase.items.append(PurchaseItem(
                    product_id=product.id,
                    quantity=item_data.quantity,
                    cost=item_data.cost,
                    total=item_total,
                    old_cost=product.cost_price
                ))

                product.stock = product.stock + item_data.quantity
                product.cost_price = item_data.cost
                product.currency_id = currency.id

            tax_amount = Decimal("0")
            total = subtotal + tax_amount
            paid_amount = min(data.paid_amount, total)
            balance = total - paid_amount

            purchase.subtotal = subtotal
            purchase.tax_amount = tax_amount
            purchase.total = total
            purchase.paid_amount = paid_amount
            purchase.balance = balance
            purchase.payment_status = resolve_payment_status(paid_amount, balance)

            if paid_amount > 0:
                purchase.payments.append(PurchasePayment(
                    amount=paid_amount,
                    payment_method="CASH",
                    notes=INITIAL_PAYMENT_NOTE
                ))

            self.db.commit()
            self.db.refresh(purchase)
            logger.info(
                f"Compra registrada a {supplier.comercial_name}: total {total} {currency_code}, "
                f"estado {purchase.payment_status.value}"
            )
            return purchase

        except HTTPException:
            self.db.rollback()
            raise
        except Exception as e:
            self.db.rollback()
            logger.error(f"Error registrando compra: {e}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=f"Error interno del servidor: {str(e)}"
            )

    def get_purchases(
        self,
        supplier_id: Optional[UUID] = None,
        payment_status: Optional[PurchasePaymentStatus] = None,
    ) -> List[Purchase]:
        query = self.db.query(Purchase)
        if supplier_id:
            query = query.filter(Purchase.supplier_id == supplier_id)
        if payment_status:
            query = query.filter(Purchase.payment_status == payment_status)
        return query.order_by(desc(Purchase.created_at)).all()

    def get_purchase(self, purchase_id: UUID) -> Purchase:
        purchase = self.db.query(Purchase).filter(Purchase.id == purchase_id).first()
        if not purchase:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"Compra con ID {purchase_id} no encontrada"
            )
        return purchase


class PurchasePaymentService:
    """Pagos a proveedores"""

    def __init__(self, db: Session):
        self.db = db

    def create_payment(self, data: PurchasePaymentCreate) -> PurchasePayment:
        try:
            purchase = self.db.query(Purchase).filter(
                Purchase.id == data.purchase_id
            ).with_for_update(of=Purchase).first()

            if not purchase:
                raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Compra no encontrada")

            if purchase.payment_status == PurchasePaymentStatus.PAID:
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail="Esta compra ya está pagada"
                )

            if data.amount > purchase.balance:
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail=f"El monto excede el saldo pendiente ({purchase.balance})"
                )

            payment = PurchasePayment(
                purchase_id=purchase.id,
                amount=data.amount,
                payment_method=data.payment_method,
                reference=data.reference,
                notes=data.notes
            )
            self.db.add(payment)

            purchase.paid_amount = purchase.paid_amount + data.amount
            purchase.balance = purchase.total - purchase.paid_amount
            purchase.payment_status = (
                PurchasePaymentStatus.PAID
                if purchase.balance <= BALANCE_TOLERANCE
                else PurchasePaymentStatus.PARTIAL
            )

            self.db.commit()
            self.db.refresh(payment)
            logger.info(f"Pago de {data.amount} registrado a compra {purchase.id}; saldo {purchase.balance}")
            return payment

        except HTTPException:
            raise
        except Exception as e:
            self.db.rollback()
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=f"Error interno del servidor: {str(e)}"
            )
