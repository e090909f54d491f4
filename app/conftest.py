"""
Fixtures compartidas para los tests de todos los módulos

La app se levanta contra SQLite en memoria; las tablas se crean y se
eliminan alrededor de cada test.
"""

import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["ENVIRONMENT"] = "test"
os.environ["DEBUG"] = "false"

import pytest
from decimal import Decimal
from fastapi.testclient import TestClient

from app.main import app
from app.database.database import Base, SessionLocal, sync_engine
from app.modules.auth.models import User, UserRole
from app.modules.auth.utils import hash_password
from app.modules.currencies.models import Currency
from app.modules.units.models import Unit
from app.modules.departments.models import Department
from app.modules.products.models import Product
from app.modules.contacts.models import Client, Supplier
from app.modules.pos.models import CashRegister


@pytest.fixture(autouse=True)
def setup_database():
    Base.metadata.create_all(bind=sync_engine)
    yield
    Base.metadata.drop_all(bind=sync_engine)


@pytest.fixture
def db_session():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def api_client():
    return TestClient(app)


# ===== USUARIOS =====

@pytest.fixture
def admin_user(db_session):
    user = User(
        username="admin",
        name="Administrador",
        password=hash_password("admin123"),
        role=UserRole.ADMIN,
        permissions=[]
    )
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


@pytest.fixture
def cashier_user(db_session):
    user = User(
        username="cajero",
        name="Cajero de Turno",
        password=hash_password("cajero123"),
        role=UserRole.CASHIER,
        permissions=["sales"]
    )
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


def login_headers(username: str, password: str) -> dict:
    response = TestClient(app).post("/api/auth/login", json={"username": username, "password": password})
    assert response.status_code == 200, response.text
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


@pytest.fixture
def auth_headers(admin_user):
    return login_headers("admin", "admin123")


@pytest.fixture
def cashier_headers(cashier_user):
    return login_headers("cajero", "cajero123")


# ===== CATÁLOGOS =====

@pytest.fixture
def primary_currency(db_session):
    currency = Currency(name="Bolívar", code="VES", symbol="Bs", is_primary=True, exchange_rate=Decimal("1"))
    db_session.add(currency)
    db_session.commit()
    db_session.refresh(currency)
    return currency


@pytest.fixture
def usd_currency(db_session):
    currency = Currency(name="Dólar", code="USD", symbol="$", is_primary=False, exchange_rate=Decimal("36.5"))
    db_session.add(currency)
    db_session.commit()
    db_session.refresh(currency)
    return currency


@pytest.fixture
def sample_unit(db_session):
    unit = Unit(name="Unidad", abbreviation="und")
    db_session.add(unit)
    db_session.commit()
    db_session.refresh(unit)
    return unit


@pytest.fixture
def sample_department(db_session):
    department = Department(name="Víveres", description="Alimentos no perecederos")
    db_session.add(department)
    db_session.commit()
    db_session.refresh(department)
    return department


@pytest.fixture
def make_product(db_session, primary_currency, sample_unit, sample_department):
    """Crea productos con valores por defecto razonables"""
    counter = {"n": 0}

    def _make(**overrides):
        counter["n"] += 1
        values = {
            "sku": f"SKU-{counter['n']:04d}",
            "name": f"Producto {counter['n']}",
            "category_id": sample_department.id,
            "currency_id": primary_currency.id,
            "unit_id": sample_unit.id,
            "cost_price": Decimal("50.00"),
            "sale_price": Decimal("100.00"),
            "stock": Decimal("20"),
        }
        values.update(overrides)
        product = Product(**values)
        db_session.add(product)
        db_session.commit()
        db_session.refresh(product)
        return product

    return _make


@pytest.fixture
def sample_product(make_product):
    return make_product(sku="HAR-001", name="Harina PAN 1kg")


@pytest.fixture
def sample_client(db_session):
    client = Client(rif="V-12345678-9", comercial_name="Bodega La Esquina", legal_name="Bodega La Esquina C.A.")
    db_session.add(client)
    db_session.commit()
    db_session.refresh(client)
    return client


@pytest.fixture
def sample_supplier(db_session):
    supplier = Supplier(rif="J-40123456-7", comercial_name="Distribuidora Andina", contact_name="Carlos Pérez")
    db_session.add(supplier)
    db_session.commit()
    db_session.refresh(supplier)
    return supplier


@pytest.fixture
def main_register(db_session):
    register = CashRegister(name="Caja Principal", location="Tienda")
    db_session.add(register)
    db_session.commit()
    db_session.refresh(register)
    return register
