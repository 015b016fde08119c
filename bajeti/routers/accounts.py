from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from typing import List, Optional

from bajeti.crud import crud_account
from bajeti.models import account as account_models
from bajeti.db.core import get_db, AccountType
from bajeti.errors import NotFoundError
from bajeti.routers.deps import get_current_user_id
from bajeti.services.wallets import summarize_accounts

router = APIRouter(
    prefix="/accounts",
    tags=["accounts"],
)

@router.post("/", response_model=account_models.AccountResponse, status_code=status.HTTP_201_CREATED)
def create_account(
    account: account_models.AccountCreate,
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id)
):
    """
    Create a new wallet (bank, mobile money, loan or cash).
    """
    try:
        return crud_account.create_db_account(db=db, user_id=user_id, account_data=account)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

@router.get("/", response_model=List[account_models.AccountResponse])
def read_accounts(
    account_type: Optional[AccountType] = None,
    active_only: bool = False,
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id)
):
    return crud_account.read_db_accounts(db=db, user_id=user_id, account_type=account_type, active_only=active_only)

@router.get("/summary", response_model=List[account_models.CurrencyWalletSummary])
def read_account_summary(db: Session = Depends(get_db), user_id: int = Depends(get_current_user_id)):
    """
    Assets, liabilities and net worth per currency.
    """
    accounts = crud_account.read_db_accounts(db=db, user_id=user_id, active_only=True)
    return summarize_accounts(account_models.AccountResponse.model_validate(a) for a in accounts)

@router.get("/{account_id}", response_model=account_models.AccountResponse)
def read_account(
    account_id: int,
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id)
):
    db_account = crud_account.read_db_account(db=db, account_id=account_id, user_id=user_id)
    if db_account is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Account not found")
    return db_account

@router.put("/{account_id}", response_model=account_models.AccountResponse)
def update_account(
    account_id: int,
    account: account_models.AccountUpdate,
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id)
):
    """
    Update a wallet's details or balance snapshot; set is_active to false to deactivate it.
    """
    try:
        return crud_account.update_db_account(db=db, account_id=account_id, user_id=user_id, account_updates=account)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
