from sqlalchemy.orm import Session, joinedload
from sqlalchemy.exc import IntegrityError
from sqlalchemy import desc
from typing import Optional, List
from datetime import datetime, date

from bajeti.db.core import TransactionDB, TransactionKind, UserDB
from bajeti.errors import NotFoundError, ValidationError
from bajeti.models.transaction import TransactionCreate
from bajeti.crud.crud_category import require_category
from bajeti.crud.crud_account import read_db_account
from bajeti.services.money import quantize
from bajeti.logging_config import get_logger

logger = get_logger(__name__)


# ===== UTILITY FUNCTIONS =====

def clean_description(description: Optional[str]) -> Optional[str]:
    """Collapse runs of whitespace in a description"""
    if not description:
        return None
    return " ".join(description.split())


# ===== DATABASE OPERATIONS =====

def create_db_transaction(db: Session, user_id: int, transaction_data: TransactionCreate) -> TransactionDB:
    """Record an income or expense"""

    if transaction_data.category_id is not None:
        require_category(db, transaction_data.category_id, user_id)

    user = db.query(UserDB).filter(UserDB.id == user_id).first()
    if not user:
        raise NotFoundError(f"User with id {user_id} not found")
    currency = user.currency

    if transaction_data.account_id is not None:
        account = read_db_account(db, transaction_data.account_id, user_id)
        if not account:
            raise NotFoundError(f"Account with id {transaction_data.account_id} not found")
        currency = account.currency

    amount = quantize(transaction_data.amount, currency)
    if amount <= 0:
        raise ValidationError(f"amount rounds to {amount} {currency}; it must be positive",
                              field="amount", constraint="positive")

    db_transaction = TransactionDB(
        user_id=user_id,
        category_id=transaction_data.category_id,
        account_id=transaction_data.account_id,
        kind=transaction_data.kind,
        amount=amount,
        transaction_date=transaction_data.transaction_date,
        description=clean_description(transaction_data.description),
        notes=transaction_data.notes,
        frequency=transaction_data.frequency,
        created_at=datetime.utcnow()
    )

    try:
        db.add(db_transaction)
        db.commit()
        db.refresh(db_transaction)
    except IntegrityError as e:
        db.rollback()
        logger.error(f"Transaction insert failed for user {user_id}: {e}")
        raise ValueError("Transaction creation failed due to database constraint")

    logger.debug(f"Recorded {db_transaction.kind.value} {db_transaction.amount} for user {user_id}")
    return db_transaction


def read_db_transaction(db: Session, transaction_id: int, user_id: int) -> Optional[TransactionDB]:
    return db.query(TransactionDB).options(joinedload(TransactionDB.category)).filter(
        TransactionDB.id == transaction_id,
        TransactionDB.user_id == user_id
    ).first()


def read_db_transactions(db: Session, user_id: int,
                         start_date: Optional[date] = None,
                         end_date: Optional[date] = None,
                         kind: Optional[TransactionKind] = None,
                         category_id: Optional[int] = None,
                         skip: int = 0, limit: Optional[int] = None) -> List[TransactionDB]:
    """Transactions of a user, newest first, with optional filters"""

    query = db.query(TransactionDB).options(joinedload(TransactionDB.category)).filter(
        TransactionDB.user_id == user_id
    )

    if start_date:
        query = query.filter(TransactionDB.transaction_date >= start_date)
    if end_date:
        query = query.filter(TransactionDB.transaction_date <= end_date)
    if kind:
        query = query.filter(TransactionDB.kind == kind)
    if category_id is not None:
        query = query.filter(TransactionDB.category_id == category_id)

    query = query.order_by(desc(TransactionDB.transaction_date), desc(TransactionDB.id)).offset(skip)
    if limit is not None:
        query = query.limit(limit)
    return query.all()
