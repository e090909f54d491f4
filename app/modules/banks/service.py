from fastapi import HTTPException, status
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
from sqlalchemy import or_
from typing import List, Optional
from uuid import UUID

from app.modules.banks.models import BankAccount
from app.modules.banks.schemas import BankAccountCreate, BankAccountUpdate
from app.modules.currencies.models import Currency


def _check_currency(db: Session, currency_id: UUID) -> None:
    if not db.query(Currency).filter(Currency.id == currency_id).first():
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Moneda con ID {currency_id} no encontrada"
        )


def _duplicate_account() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_409_CONFLICT,
        detail="Ya existe una cuenta bancaria con ese número"
    )


def create_account(db: Session, data: BankAccountCreate) -> BankAccount:
    """
    Registrar una cuenta bancaria. El saldo arranca en initial_balance.
    """
    _check_currency(db, data.currency_id)
    values = data.model_dump(exclude={"initial_balance"})
    try:
        account = BankAccount(**values, balance=data.initial_balance)
        db.add(account)
        db.commit()
        db.refresh(account)
        return account
    except IntegrityError:
        db.rollback()
        raise _duplicate_account()


def get_accounts(db: Session, search: Optional[str] = None) -> List[BankAccount]:
    query = db.query(BankAccount).filter(BankAccount.is_active == True)
    if search:
        term = f"%{search}%"
        query = query.filter(or_(
            BankAccount.bank_name.ilike(term),
            BankAccount.holder_name.ilike(term),
            BankAccount.account_number.ilike(term),
        ))
    return query.order_by(BankAccount.created_at.desc()).all()


def get_account(db: Session, account_id: UUID) -> BankAccount:
    account = db.query(BankAccount).filter(BankAccount.id == account_id).first()
    if not account:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Cuenta bancaria con ID {account_id} no encontrada"
        )
    return account


def update_account(db: Session, account_id: UUID, data: BankAccountUpdate) -> BankAccount:
    account = get_account(db, account_id)
    update_data = data.model_dump(exclude_unset=True)
    if update_data.get("currency_id"):
        _check_currency(db, update_data["currency_id"])
    try:
        for field, value in update_data.items():
            setattr(account, field, value)
        db.commit()
        db.refresh(account)
        return account
    except IntegrityError:
        db.rollback()
        raise _duplicate_account()


def delete_account(db: Session, account_id: UUID) -> BankAccount:
    account = get_account(db, account_id)
    account.soft_delete()
    db.commit()
    db.refresh(account)
    return account
