from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
from typing import Optional, List
from datetime import datetime

from bajeti.db.core import FinancialAccountDB, AccountType
from bajeti.errors import NotFoundError
from bajeti.models.account import AccountCreate, AccountUpdate
from bajeti.services.money import quantize


def create_db_account(db: Session, user_id: int, account_data: AccountCreate) -> FinancialAccountDB:
    """Create a new wallet"""

    existing_account = db.query(FinancialAccountDB).filter(
        FinancialAccountDB.user_id == user_id,
        FinancialAccountDB.name.ilike(account_data.name)
    ).first()
    if existing_account:
        raise ValueError(f"Account with name '{account_data.name}' already exists")

    if account_data.credit_limit is not None and account_data.account_type != AccountType.LOAN:
        raise ValueError("Only loan accounts can have a credit limit")

    db_account = FinancialAccountDB(
        user_id=user_id,
        name=account_data.name,
        account_type=account_data.account_type,
        institution=account_data.institution,
        account_mask=account_data.account_mask,
        balance=account_data.balance,
        currency=account_data.currency,
        credit_limit=account_data.credit_limit,
        created_at=datetime.utcnow(),
        updated_at=datetime.utcnow()
    )

    try:
        db.add(db_account)
        db.commit()
        db.refresh(db_account)
        return db_account
    except IntegrityError:
        db.rollback()
        raise ValueError("Account creation failed due to database constraint")


def read_db_account(db: Session, account_id: int, user_id: int) -> Optional[FinancialAccountDB]:
    return db.query(FinancialAccountDB).filter(
        FinancialAccountDB.id == account_id,
        FinancialAccountDB.user_id == user_id
    ).first()


def read_db_accounts(db: Session, user_id: int, account_type: Optional[AccountType] = None,
                     active_only: bool = False) -> List[FinancialAccountDB]:
    """All wallets of a user, optionally of one type"""

    query = db.query(FinancialAccountDB).filter(FinancialAccountDB.user_id == user_id)

    if account_type:
        query = query.filter(FinancialAccountDB.account_type == account_type)
    if active_only:
        query = query.filter(FinancialAccountDB.is_active.is_(True))

    return query.order_by(FinancialAccountDB.name).all()


def update_db_account(db: Session, account_id: int, user_id: int, account_updates: AccountUpdate) -> FinancialAccountDB:
    """Update a wallet, including its balance snapshot"""

    db_account = read_db_account(db, account_id, user_id)
    if not db_account:
        raise NotFoundError(f"Account with id {account_id} not found")

    update_data = account_updates.model_dump(exclude_unset=True)

    if 'name' in update_data and update_data['name']:
        new_name = update_data['name'].strip()
        existing = db.query(FinancialAccountDB).filter(
            FinancialAccountDB.user_id == user_id,
            FinancialAccountDB.name.ilike(new_name),
            FinancialAccountDB.id != account_id
        ).first()
        if existing:
            raise ValueError(f"Account with name '{new_name}' already exists")
        update_data['name'] = new_name

    if update_data.get('credit_limit') is not None and db_account.account_type != AccountType.LOAN:
        raise ValueError("Only loan accounts can have a credit limit")

    for field in ('balance', 'credit_limit'):
        if update_data.get(field) is not None:
            update_data[field] = quantize(update_data[field], db_account.currency)

    for field, value in update_data.items():
        setattr(db_account, field, value)

    db_account.updated_at = datetime.utcnow()

    try:
        db.commit()
        db.refresh(db_account)
        return db_account
    except IntegrityError:
        db.rollback()
        raise ValueError("Account update failed due to database constraint")
