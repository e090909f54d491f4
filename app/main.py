from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
import logging

# Import database components
from app.database.database import sync_engine, Base

# Import middleware and error handlers
from app.common.middleware import RequestLoggingMiddleware, SecurityHeadersMiddleware
from app.common.exceptions import register_exception_handlers

# Import routers
from app.modules.auth.router import auth_router, users_router
from app.modules.company.router import company_router
from app.modules.currencies.router import currencies_router
from app.modules.units.router import units_router
from app.modules.departments.router import departments_router
from app.modules.products.router import product_router
from app.modules.inventory_adjustments.router import adjustments_router
from app.modules.contacts.router import clients_router, suppliers_router
from app.modules.banks.router import banks_router
from app.modules.expenses.router import expenses_router
from app.modules.pos.routers import cash_register_router, sales_router
from app.modules.invoices.invoices_router import invoices_router, payments_router
from app.modules.purchases.router import purchases_router
from app.modules.returns.router import returns_router
from app.modules.hr.router import employees_router, payroll_router
from app.modules.stats.router import stats_router
from app.modules.system.router import system_router, health_router

# Import models for table creation
import app.modules.auth.models
import app.modules.company.models
import app.modules.currencies.models
import app.modules.units.models
import app.modules.departments.models
import app.modules.products.models
import app.modules.inventory_adjustments.models
import app.modules.contacts.models
import app.modules.banks.models
import app.modules.expenses.models
import app.modules.pos.models
import app.modules.invoices.models
import app.modules.purchases.models
import app.modules.returns.models
import app.modules.hr.models

from app.core.config import settings

# Configure logging
logging.basicConfig(
    level=logging.INFO if settings.ENVIRONMENT == "production" else logging.DEBUG,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

API_VERSION = "1.0.0"

# FastAPI app
app = FastAPI(
    title="Zenith ERP API",
    description="ERP para comercio minorista: punto de venta, inventario, compras, cuentas por cobrar y pagar, caja, nómina y reportes",
    version=API_VERSION,
    docs_url=f"{settings.API_PREFIX}/docs" if settings.ENVIRONMENT != "production" else None,
    redoc_url=f"{settings.API_PREFIX}/redoc" if settings.ENVIRONMENT != "production" else None,
    openapi_url=f"{settings.API_PREFIX}/openapi.json" if settings.ENVIRONMENT != "production" else None
)

register_exception_handlers(app)

# Add middleware (order matters!)
app.add_middleware(GZipMiddleware, minimum_size=1000)
app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(RequestLoggingMiddleware)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
for router in (
    health_router,
    auth_router,
    users_router,
    company_router,
    currencies_router,
    units_router,
    departments_router,
    product_router,
    adjustments_router,
    clients_router,
    suppliers_router,
    banks_router,
    expenses_router,
    cash_register_router,
    sales_router,
    invoices_router,
    payments_router,
    purchases_router,
    returns_router,
    employees_router,
    payroll_router,
    stats_router,
    system_router,
):
    app.include_router(router, prefix=settings.API_PREFIX)

# Create database tables (only for development - use migrations in production)
if settings.ENVIRONMENT == "development":
    Base.metadata.create_all(bind=sync_engine)


@app.get("/")
async def read_root():
    return {
        "message": "Zenith ERP API is running",
        "version": API_VERSION,
        "environment": settings.ENVIRONMENT,
        "docs": f"{settings.API_PREFIX}/docs"
    }


@app.on_event("startup")
async def startup_event():
    logger.info("Zenith ERP API starting up...")
    logger.info(f"Environment: {settings.ENVIRONMENT}")
    logger.info(f"Debug mode: {settings.DEBUG}")


@app.on_event("shutdown")
async def shutdown_event():
    logger.info("Zenith ERP API shutting down...")
