"""
Servicios de negocio para el módulo POS (Point of Sale)

- CashRegisterService: Cajas, apertura/cierre de sesiones y arqueo
- SaleService: Ventas integradas con inventario, caja y cuentas por cobrar
"""

from fastapi import HTTPException, status
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
from sqlalchemy import desc
from decimal import Decimal
from typing import List, Optional, Dict
from uuid import UUID
from datetime import date, datetime
import logging

from app.common.filters import apply_date_range
from app.modules.pos.models import (
    CashRegister, CashSession, CashMovement, Sale, SaleItem,
    SessionStatus, MovementType
)
from app.modules.pos.schemas import SessionOpen, SessionClose, MovementCreate, SaleCreate
from app.modules.pos.payments import cash_portion
from app.modules.products.models import Product
from app.modules.contacts.models import Client
from app.modules.invoices.service import InvoiceCounterService, InvoiceService

logger = logging.getLogger(__name__)

MAIN_REGISTER_NAME = "Caja Principal"
MAIN_REGISTER_LOCATION = "Tienda"


class CashRegisterService:
    """Servicio para gestión de cajas y sesiones de caja"""

    def __init__(self, db: Session):
        self.db = db

    def get_or_create_main_register(self) -> CashRegister:
        """Primera caja activa; si no hay ninguna se crea la caja principal"""
        register = self.db.query(CashRegister).filter(
            CashRegister.is_active == True
        ).order_by(CashRegister.created_at.asc()).first()

        if not register:
            register = CashRegister(name=MAIN_REGISTER_NAME, location=MAIN_REGISTER_LOCATION)
            self.db.add(register)
            self.db.commit()
            self.db.refresh(register)
            logger.info("Caja principal creada")

        return register

    def open_session(self, data: SessionOpen) -> CashSession:
        """Abrir sesión de caja con su movimiento de apertura"""
        try:
            register = self.db.query(CashRegister).filter(
                CashRegister.id == data.register_id
            ).with_for_update(of=CashRegister).first()

            if not register:
                raise HTTPException(
                    status_code=status.HTTP_404_NOT_FOUND,
                    detail="Caja registradora no encontrada"
                )

            existing_open = self.db.query(CashSession).filter(
                CashSession.register_id == register.id,
                CashSession.status == SessionStatus.OPEN
            ).first()

            if existing_open:
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail="Ya existe una sesión abierta para esta caja"
                )

            opened_by = data.opened_by or "Sistema"
            session = CashSession(
                register_id=register.id,
                status=SessionStatus.OPEN,
                opening_balance=data.opening_balance,
                opened_by=opened_by,
                opened_at=datetime.utcnow(),
                opening_notes=data.opening_notes
            )
            self.db.add(session)
            self.db.flush()

            self.db.add(CashMovement(
                session_id=session.id,
                type=MovementType.OPENING,
                amount=data.opening_balance,
                currency_code="VES",
                description="Apertura de caja",
                performed_by=opened_by
            ))

            self.db.commit()
            self.db.refresh(session)
            logger.info(f"Sesión de caja abierta en '{register.name}' con fondo {data.opening_balance}")
            return session

        except HTTPException:
            raise
        except Exception as e:
            self.db.rollback()
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=f"Error interno del servidor: {str(e)}"
            )

    def close_session(self, session_id: UUID, data: SessionClose) -> CashSession:
        """
        Cerrar sesión con arqueo.

        expected = apertura + ventas + depósitos - retiros - gastos
        variance = contado - expected
        """
        try:
            session = self.db.query(CashSession).filter(
                CashSession.id == session_id
            ).with_for_update(of=CashSession).first()

            if not session:
                raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Sesión no encontrada")

            if session.status == SessionStatus.CLOSED:
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail="La sesión ya está cerrada"
                )

            expected_balance = session.calculated_balance
            variance = data.actual_balance - expected_balance
            closed_by = data.closed_by or "Sistema"

            self.db.add(CashMovement(
                session_id=session.id,
                type=MovementType.CLOSING,
                amount=data.actual_balance,
                currency_code="VES",
                description=f"Cierre de caja - Varianza: {'+' if variance >= 0 else ''}{variance:.2f}",
                performed_by=closed_by
            ))

            session.status = SessionStatus.CLOSED
            session.expected_balance = expected_balance
            session.actual_balance = data.actual_balance
            session.variance = variance
            session.closed_by = closed_by
            session.closed_at = datetime.utcnow()
            session.closing_notes = data.closing_notes

            self.db.commit()
            self.db.refresh(session)
            logger.info(
                f"Sesión {session.id} cerrada: esperado {expected_balance}, contado {data.actual_balance}, varianza {variance}"
            )
            return session

        except HTTPException:
            raise
        except Exception as e:
            self.db.rollback()
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=f"Error interno del servidor: {str(e)}"
            )

    def create_movement(self, data: MovementCreate) -> CashMovement:
        session = self.db.query(CashSession).filter(CashSession.id == data.session_id).first()

        if not session:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Sesión no encontrada")

        if session.status == SessionStatus.CLOSED:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="No se pueden agregar movimientos a una sesión cerrada"
            )

        movement = CashMovement(
            session_id=session.id,
            type=data.type,
            amount=data.amount,
            currency_code=data.currency_code or "VES",
            description=data.description,
            notes=data.notes,
            performed_by=data.performed_by or "Sistema",
            sale_id=data.sale_id
        )
        self.db.add(movement)
        self.db.commit()
        self.db.refresh(movement)
        return movement

    def get_active_session(self, register_id: Optional[UUID] = None) -> Optional[CashSession]:
        """Sesión abierta (de una caja concreta o de cualquiera); None si no hay"""
        query = self.db.query(CashSession).filter(CashSession.status == SessionStatus.OPEN)
        if register_id:
            query = query.filter(CashSession.register_id == register_id)
        return query.order_by(desc(CashSession.opened_at)).first()

    def get_session(self, session_id: UUID) -> CashSession:
        session = self.db.query(CashSession).filter(CashSession.id == session_id).first()
        if not session:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Sesión no encontrada")
        return session

    def list_sessions(
        self,
        register_id: Optional[UUID] = None,
        session_status: Optional[SessionStatus] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> List[CashSession]:
        query = self.db.query(CashSession)

        if register_id:
            query = query.filter(CashSession.register_id == register_id)
        if session_status:
            query = query.filter(CashSession.status == session_status)
        query = apply_date_range(query, CashSession.opened_at, start_date, end_date)

        return query.order_by(desc(CashSession.opened_at)).all()


class SaleService:
    """Ventas del punto de venta"""

    def __init__(self, db: Session):
        self.db = db

    def _validate_items(self, data: SaleCreate) -> Dict[UUID, Product]:
        """
        Verifica existencia, stock y precios contra costo.
        Devuelve los productos bloqueados para la transacción de la venta.
        """
        products: Dict[UUID, Product] = {}
        requested: Dict[UUID, Decimal] = {}
        total_cost = Decimal("0")

        for item in data.items:
            product = products.get(item.product_id)
            if product is None:
                product = self.db.query(Product).filter(
                    Product.id == item.product_id
                ).with_for_update(of=Product).first()
                if not product or not product.is_active:
                    raise HTTPException(
                        status_code=status.HTTP_400_BAD_REQUEST,
                        detail=f"Producto con ID {item.product_id} no encontrado"
                    )
                products[item.product_id] = product

            requested[product.id] = requested.get(product.id, Decimal("0")) + item.quantity
            if product.stock < requested[product.id]:
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail=f"Stock insuficiente para {product.name}. Disponible: {product.stock}"
                )

            if item.unit_price < product.cost_price:
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail=f"El precio de {product.name} no puede ser menor al costo ({product.cost_price})"
                )

            total_cost += product.cost_price * item.quantity

        if data.subtotal - data.discount < total_cost:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="El descuento no puede dejar la venta por debajo del costo"
            )

        return products

    def create_sale(self, data: SaleCreate) -> Sale:
        """
        Registrar una venta:
        1. valida stock, precios y descuento
        2. reserva el número de factura
        3. crea venta y renglones, descuenta stock
        4. registra la porción en efectivo en la sesión abierta
        5. si es a crédito, crea la factura por cobrar
        Todo en una sola transacción.
        """
        invoice_number = data.invoice_number
        try:
            products = self._validate_items(data)

            if data.is_credit and not data.client_id:
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail="Las ventas a crédito requieren un cliente"
                )

            if data.client_id:
                client = self.db.query(Client).filter(Client.id == data.client_id).first()
                if not client:
                    raise HTTPException(
                        status_code=status.HTTP_404_NOT_FOUND,
                        detail=f"Cliente con ID {data.client_id} no encontrado"
                    )

            invoice_number = invoice_number or InvoiceCounterService(self.db).reserve_invoice_number()

            sale = Sale(
                invoice_number=invoice_number,
                client_id=data.client_id,
                subtotal=data.subtotal,
                discount=data.discount,
                tax=data.tax,
                total=data.total,
                payment_method=data.payment_method,
                tendered=data.tendered,
                change=data.change,
                is_credit=data.is_credit,
                date=datetime.utcnow()
            )
            self.db.add(sale)

            for item in data.items:
                sale.items.append(SaleItem(
                    product_id=item.product_id,
                    quantity=item.quantity,
                    unit_price=item.unit_price,
                    total=item.total
                ))
                product = products[item.product_id]
                product.stock = product.stock - item.quantity

            self.db.flush()

            if not data.is_credit:
                self._register_cash(sale)
            else:
                InvoiceService(self.db).build_credit_invoice(
                    invoice_number,
                    data.client_id,
                    data.total,
                    sale_id=sale.id,
                    subtotal=data.subtotal,
                    discount=data.discount,
                    tax=data.tax,
                    due_date=data.due_date,
                    notes=f"Venta a crédito {invoice_number}"
                )

            self.db.commit()
            self.db.refresh(sale)
            logger.info(f"Venta {sale.invoice_number} registrada por {sale.total} ({sale.payment_method})")
            return sale

        except HTTPException:
            self.db.rollback()
            raise
        except IntegrityError:
            self.db.rollback()
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail=f"El número de factura {invoice_number} ya fue utilizado"
            )
        except Exception as e:
            self.db.rollback()
            logger.error(f"Error registrando venta: {e}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=f"Error interno del servidor: {str(e)}"
            )

    def _register_cash(self, sale: Sale) -> Optional[CashMovement]:
        """Movimiento SALE por la porción en efectivo, si hay una sesión abierta"""
        amount = cash_portion(sale.payment_method, sale.total)
        if amount <= 0:
            return None

        session = CashRegisterService(self.db).get_active_session()
        if not session:
            logger.warning(f"Venta {sale.invoice_number} en efectivo sin sesión de caja abierta")
            return None

        movement = CashMovement(
            session_id=session.id,
            type=MovementType.SALE,
            amount=amount,
            currency_code="VES",
            description=f"Venta {sale.invoice_number}",
            performed_by="Sistema",
            sale_id=sale.id
        )
        self.db.add(movement)
        return movement

    def get_sales(
        self,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        client_id: Optional[UUID] = None,
    ) -> List[Sale]:
        query = self.db.query(Sale)
        if client_id:
            query = query.filter(Sale.client_id == client_id)
        query = apply_date_range(query, Sale.date, start_date, end_date)
        return query.order_by(desc(Sale.date)).all()

    def get_sale(self, sale_id: UUID) -> Sale:
        sale = self.db.query(Sale).filter(Sale.id == sale_id).first()
        if not sale:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"Venta con ID {sale_id} no encontrada"
            )
        return sale
