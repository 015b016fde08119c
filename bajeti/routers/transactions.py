from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from typing import List, Optional
from datetime import date

from bajeti.crud import crud_transaction
from bajeti.models import transaction as transaction_models
from bajeti.db.core import get_db, TransactionKind
from bajeti.errors import NotFoundError
from bajeti.routers.deps import get_current_user_id

router = APIRouter(
    prefix="/transactions",
    tags=["transactions"],
)

@router.post("/", response_model=transaction_models.TransactionResponse, status_code=status.HTTP_201_CREATED)
def create_transaction(
    transaction: transaction_models.TransactionCreate,
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id)
):
    """
    Record an income or an expense.
    """
    try:
        return crud_transaction.create_db_transaction(db=db, user_id=user_id, transaction_data=transaction)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

@router.get("/", response_model=List[transaction_models.TransactionResponse])
def read_transactions(
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    kind: Optional[TransactionKind] = None,
    category_id: Optional[int] = None,
    skip: int = 0,
    limit: int = 100,
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id)
):
    return crud_transaction.read_db_transactions(
        db=db, user_id=user_id, start_date=start_date, end_date=end_date,
        kind=kind, category_id=category_id, skip=skip, limit=limit
    )

@router.get("/{transaction_id}", response_model=transaction_models.TransactionResponse)
def read_transaction(
    transaction_id: int,
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id)
):
    db_transaction = crud_transaction.read_db_transaction(db=db, transaction_id=transaction_id, user_id=user_id)
    if db_transaction is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Transaction not found")
    return db_transaction
