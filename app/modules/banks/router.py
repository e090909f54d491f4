from fastapi import APIRouter, Query, status
from typing import List, Optional
from uuid import UUID

from app.dependencies.dbDependecies import db_dependency
from app.modules.banks import service
from app.modules.banks.schemas import BankAccountCreate, BankAccountUpdate, BankAccountOut

banks_router = APIRouter(prefix="/banks", tags=["Banks"])


@banks_router.post("", response_model=BankAccountOut, status_code=status.HTTP_201_CREATED)
async def create_bank_account(data: BankAccountCreate, db: db_dependency):
    return service.create_account(db, data)


@banks_router.get("", response_model=List[BankAccountOut])
async def list_bank_accounts(
    db: db_dependency,
    search: Optional[str] = Query(None, description="Banco, titular o número de cuenta")
):
    return service.get_accounts(db, search)


@banks_router.get("/{account_id}", response_model=BankAccountOut)
async def get_bank_account(account_id: UUID, db: db_dependency):
    return service.get_account(db, account_id)


@banks_router.patch("/{account_id}", response_model=BankAccountOut)
async def update_bank_account(account_id: UUID, data: BankAccountUpdate, db: db_dependency):
    return service.update_account(db, account_id, data)


@banks_router.delete("/{account_id}", response_model=BankAccountOut)
async def delete_bank_account(account_id: UUID, db: db_dependency):
    return service.delete_account(db, account_id)
