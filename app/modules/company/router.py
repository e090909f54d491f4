from fastapi import APIRouter, status
from app.modules.company import service
from app.modules.company.schemas import CompanySettingsUpdate, CompanySettingsOut
from app.dependencies.dbDependecies import db_dependency
from app.dependencies.userDependencies import admin_dependency


company_router = APIRouter(prefix="/company-settings", tags=["Company Settings"])


@company_router.get("", response_model=CompanySettingsOut, status_code=status.HTTP_200_OK)
async def get_company_settings(db: db_dependency):
    """
    Obtener la configuración de la empresa (se crea con valores por defecto si no existe).
    """
    return service.get_settings(db)


@company_router.put("", response_model=CompanySettingsOut, status_code=status.HTTP_200_OK)
async def update_company_settings(settings_data: CompanySettingsUpdate, db: db_dependency, _: admin_dependency):
    """
    Actualizar nombre, RIF, logo, moneda secundaria preferida y la
    configuración de actualización automática de tasas (solo ADMIN).
    """
    return service.update_settings(db, settings_data)
