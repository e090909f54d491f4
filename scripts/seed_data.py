"""
Seed script: carga datos de demostración para un abasto/supermercado.

Qué crea:
- Usuario administrador y un cajero con credenciales conocidas.
- Monedas: VES (principal), USD y EUR con tasas iniciales.
- Unidades, departamentos y subdepartamentos típicos.
- Caja Principal y configuración de la empresa.
- Productos con SKU únicos, precios y stock inicial.
- Clientes y proveedores con RIF válidos.
- Compras (suben stock y costo) y ventas de contado con sesión de caja abierta.

Ejecutar dentro del contenedor de la API:
    docker compose exec api python scripts/seed_data.py \
        --admin-password Admin!2025 --products 300 --sales 150 --purchases 40

Solo para entornos de desarrollo.
"""

# Agregar la raíz del proyecto al path para que funcionen los imports `app.*`
import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

import argparse
import random
from datetime import datetime, timedelta
from decimal import Decimal

from fastapi import HTTPException

from app.database.database import SessionLocal, Base, sync_engine
from app.modules.auth.models import User, UserRole
from app.modules.auth.utils import hash_password
from app.modules.company.service import get_settings
from app.modules.currencies.models import Currency, RateProvider
from app.modules.units.models import Unit
from app.modules.departments.models import Department
from app.modules.products.models import Product
from app.modules.contacts.models import Client, Supplier
from app.modules.pos.services import CashRegisterService, SaleService
from app.modules.pos.schemas import SessionOpen, SaleCreate, SaleItemCreate
from app.modules.pos.models import CashSession, SessionStatus
from app.modules.purchases.service import PurchaseService
from app.modules.purchases.schemas import PurchaseCreate, PurchaseItemCreate

import app.modules.banks.models  # noqa: F401
import app.modules.expenses.models  # noqa: F401
import app.modules.inventory_adjustments.models  # noqa: F401
import app.modules.invoices.models  # noqa: F401
import app.modules.returns.models  # noqa: F401
import app.modules.hr.models  # noqa: F401

DEPARTMENTS = {
    "Víveres": ["Granos", "Harinas", "Enlatados"],
    "Bebidas": ["Refrescos", "Jugos"],
    "Charcutería": ["Quesos", "Embutidos"],
    "Limpieza": ["Detergentes"],
    "Cuidado Personal": ["Higiene"],
}

PRODUCT_NAMES = {
    "Granos": ["Arroz", "Caraotas Negras", "Lentejas", "Arvejas"],
    "Harinas": ["Harina de Maíz", "Harina de Trigo", "Avena"],
    "Enlatados": ["Atún", "Sardinas", "Maíz Dulce"],
    "Refrescos": ["Refresco Cola", "Malta", "Agua Mineral"],
    "Jugos": ["Jugo de Naranja", "Néctar de Durazno"],
    "Quesos": ["Queso Blanco", "Queso Amarillo"],
    "Embutidos": ["Jamón de Pierna", "Mortadela", "Salchichas"],
    "Detergentes": ["Detergente en Polvo", "Lavaplatos", "Cloro"],
    "Higiene": ["Jabón de Baño", "Crema Dental", "Champú"],
}

PRESENTATIONS = ["500g", "1kg", "2kg", "1L", "2L", "355ml", "Paquete"]

UNITS = [("Unidad", "und"), ("Kilogramo", "kg"), ("Litro", "lt"), ("Bulto", "blt")]

TRADE_NAMES = ["Bodega", "Abasto", "Inversiones", "Comercial", "Distribuidora", "Panadería"]
PLACES = ["La Esquina", "El Centro", "Los Andes", "La Candelaria", "San Martín", "El Valle", "Catia"]


def pick(seq):
    return random.choice(seq)


def random_rif(prefix: str) -> str:
    return f"{prefix}-{random.randint(10000000, 49999999)}-{random.randint(0, 9)}"


def get_or_create_user(db, username: str, name: str, password: str, role: UserRole) -> User:
    user = db.query(User).filter(User.username == username).first()
    if user:
        return user
    user = User(username=username, name=name, password=hash_password(password), role=role, permissions=[])
    db.add(user)
    db.commit()
    print(f"  Usuario {username} ({role.value})")
    return user


def create_currencies(db):
    currencies = {}
    for name, code, symbol, primary, rate, provider in [
        ("Bolívar", "VES", "Bs", True, None, None),
        ("Dólar", "USD", "$", False, Decimal("36.50"), RateProvider.BCV),
        ("Euro", "EUR", "€", False, Decimal("39.80"), RateProvider.BCV),
    ]:
        currency = db.query(Currency).filter(Currency.code == code).first()
        if not currency:
            currency = Currency(
                name=name, code=code, symbol=symbol, is_primary=primary, exchange_rate=rate,
                is_automatic=provider is not None,
                api_symbol=provider.value if provider else None,
                last_rate_update=datetime.utcnow() if rate else None
            )
            db.add(currency)
        currencies[code] = currency
    db.commit()
    return currencies


def create_units(db):
    units = []
    for name, abbreviation in UNITS:
        unit = db.query(Unit).filter(Unit.name == name).first()
        if not unit:
            unit = Unit(name=name, abbreviation=abbreviation)
            db.add(unit)
        units.append(unit)
    db.commit()
    return units


def create_departments(db):
    """Devuelve [(departamento, subdepartamento)]"""
    pairs = []
    for root_name, children in DEPARTMENTS.items():
        root = db.query(Department).filter(Department.name == root_name).first()
        if not root:
            root = Department(name=root_name)
            db.add(root)
            db.flush()
        for child_name in children:
            child = db.query(Department).filter(Department.name == child_name).first()
            if not child:
                child = Department(name=child_name, parent_id=root.id)
                db.add(child)
            pairs.append((root, child))
    db.commit()
    return pairs


def create_products(db, count: int, departments, units, currencies):
    products = []
    for i in range(1, count + 1):
        sku = f"ZEN-{i:05d}"
        product = db.query(Product).filter(Product.sku == sku).first()
        if product:
            products.append(product)
            continue

        department, subdepartment = pick(departments)
        cost = Decimal(random.randint(20, 900))
        margin = Decimal(random.choice(["1.15", "1.20", "1.25", "1.35"]))
        sale_price = (cost * margin).quantize(Decimal("0.01"))
        product = Product(
            sku=sku,
            name=f"{pick(PRODUCT_NAMES[subdepartment.name])} {pick(PRESENTATIONS)}",
            category_id=department.id,
            subcategory_id=subdepartment.id,
            currency_id=currencies["VES"].id,
            unit_id=pick(units).id,
            cost_price=cost,
            sale_price=sale_price,
            wholesale_price=(cost * Decimal("1.10")).quantize(Decimal("0.01")),
            stock=Decimal(random.randint(30, 200)),
            is_returnable=subdepartment.name not in ("Quesos", "Embutidos"),
        )
        db.add(product)
        products.append(product)
    db.commit()
    print(f"  Productos: {len(products)}")
    return products


def create_contacts(db, model, count: int, prefix: str):
    contacts = []
    used = {rif for (rif,) in db.query(model.rif).all()}
    while len(contacts) < count:
        rif = random_rif(prefix)
        if rif in used:
            continue
        used.add(rif)
        name = f"{pick(TRADE_NAMES)} {pick(PLACES)} {len(contacts) + 1}"
        contact = model(rif=rif, comercial_name=name, legal_name=f"{name} C.A.",
                        phone=f"0414-{random.randint(1000000, 9999999)}")
        db.add(contact)
        contacts.append(contact)
    db.commit()
    print(f"  {model.__tablename__}: {len(contacts)}")
    return contacts


def create_purchases(db, count: int, suppliers, products):
    service = PurchaseService(db)
    created = 0
    for _ in range(count):
        lines = random.sample(products, k=min(len(products), random.randint(2, 6)))
        data = PurchaseCreate(
            supplier_id=pick(suppliers).id,
            invoice_date=datetime.utcnow() - timedelta(days=random.randint(0, 45)),
            invoice_number=f"A-{random.randint(100000, 999999)}",
            paid_amount=Decimal(random.choice([0, 0, 500, 100000])),
            items=[
                PurchaseItemCreate(product_id=p.id, quantity=Decimal(random.randint(5, 40)), cost=p.cost_price)
                for p in lines
            ],
        )
        try:
            service.create_purchase(data)
            created += 1
        except HTTPException as e:
            print(f"  Compra omitida: {e.detail}")
    print(f"  Compras: {created}")


def create_sales(db, count: int, products, clients):
    register_service = CashRegisterService(db)
    register = register_service.get_or_create_main_register()
    session = db.query(CashSession).filter(
        CashSession.register_id == register.id,
        CashSession.status == SessionStatus.OPEN
    ).first()
    if not session:
        register_service.open_session(SessionOpen(
            register_id=register.id, opening_balance=Decimal("500.00"), opened_by="cajero"
        ))

    service = SaleService(db)
    created = 0
    for _ in range(count):
        items = []
        for product in random.sample(products, k=min(len(products), random.randint(1, 4))):
            quantity = Decimal(random.randint(1, 3))
            items.append(SaleItemCreate(
                product_id=product.id, quantity=quantity,
                unit_price=product.sale_price, total=product.sale_price * quantity
            ))
        total = sum((item.total for item in items), Decimal("0"))
        cash = (total / 2).quantize(Decimal("0.01"))
        payment_method = pick(["CASH", "DEBIT", "PAGO_MOVIL", f"CASH:{cash}, DEBIT:{total - cash}"])

        is_credit = random.random() < 0.1
        data = SaleCreate(
            client_id=pick(clients).id if is_credit or random.random() < 0.3 else None,
            items=items,
            subtotal=total,
            total=total,
            payment_method=payment_method,
            is_credit=is_credit,
            due_date=datetime.utcnow() + timedelta(days=15) if is_credit else None,
        )
        try:
            service.create_sale(data)
            created += 1
        except HTTPException as e:
            print(f"  Venta omitida: {e.detail}")
    print(f"  Ventas: {created}")


def main():
    parser = argparse.ArgumentParser(description="Datos de demostración de Zenith ERP")
    parser.add_argument("--admin-password", default="admin123")
    parser.add_argument("--cashier-password", default="cajero123")
    parser.add_argument("--products", type=int, default=300)
    parser.add_argument("--clients", type=int, default=60)
    parser.add_argument("--suppliers", type=int, default=15)
    parser.add_argument("--purchases", type=int, default=40)
    parser.add_argument("--sales", type=int, default=150)
    parser.add_argument("--seed", type=int, default=2025, help="Semilla aleatoria")
    args = parser.parse_args()

    random.seed(args.seed)
    Base.metadata.create_all(bind=sync_engine)

    db = SessionLocal()
    try:
        print("Creando datos base...")
        get_or_create_user(db, "admin", "Administrador", args.admin_password, UserRole.ADMIN)
        get_or_create_user(db, "cajero", "Cajero Principal", args.cashier_password, UserRole.CASHIER)
        currencies = create_currencies(db)
        get_settings(db)
        units = create_units(db)
        departments = create_departments(db)

        print("Creando catálogo y contactos...")
        products = create_products(db, args.products, departments, units, currencies)
        clients = create_contacts(db, Client, args.clients, "V")
        suppliers = create_contacts(db, Supplier, args.suppliers, "J")

        print("Registrando movimientos...")
        create_purchases(db, args.purchases, suppliers, products)
        create_sales(db, args.sales, products, clients)
        print("Listo.")
    finally:
        db.close()


if __name__ == "__main__":
    main()
