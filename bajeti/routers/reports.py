from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from typing import List

from bajeti.crud import crud_category, crud_transaction
from bajeti.models.budget import CategorySpend
from bajeti.models.category import CategoryResponse
from bajeti.models.report import FinancialSummary, MonthlyTrendPoint
from bajeti.models.transaction import TransactionResponse
from bajeti.db.core import get_db
from bajeti.routers.deps import get_current_user_id
from bajeti.services import reports, spending
from bajeti.services.spending import Period

router = APIRouter(
    prefix="/reports",
    tags=["reports"],
)


def _transactions(db: Session, user_id: int, first: Period, last: Period) -> List[TransactionResponse]:
    rows = crud_transaction.read_db_transactions(db, user_id, start_date=first.start, end_date=last.end)
    return [TransactionResponse.model_validate(row) for row in rows]


@router.get("/spending", response_model=List[CategorySpend])
def read_spending(
    month: int,
    year: int,
    currency: str,
    include_income: bool = False,
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id)
):
    """
    Totals per category for one month, largest first.
    """
    try:
        period = Period(month=month, year=year)
        categories = [CategoryResponse.model_validate(c) for c in crud_category.read_db_categories(db, user_id)]
        return spending.aggregate(
            _transactions(db, user_id, period, period), categories, period, currency,
            include_income=include_income,
        )
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

@router.get("/summary", response_model=FinancialSummary)
def read_summary(
    month: int,
    year: int,
    currency: str,
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id)
):
    """
    Income, expenses and balance for one month.
    """
    try:
        period = Period(month=month, year=year)
        transactions = _transactions(db, user_id, period.previous(), period)
        return reports.summarize_month(transactions, period, currency)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

@router.get("/trends", response_model=List[MonthlyTrendPoint])
def read_trends(
    month: int,
    year: int,
    currency: str,
    months: int = 6,
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id)
):
    """
    Income and expenses for the months up to and including month/year.
    """
    try:
        end_period = Period(month=month, year=year)
        first = end_period
        for _ in range(max(months, 1) - 1):
            first = first.previous()
        transactions = _transactions(db, user_id, first, end_period)
        return reports.monthly_trends(transactions, end_period, months, currency)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
