from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from typing import List, Optional

from bajeti.crud import crud_budget
from bajeti.models import budget as budget_models
from bajeti.db.core import get_db
from bajeti.errors import NotFoundError, DuplicateBudgetError, BudgetAllocationWriteError
from bajeti.routers.deps import get_current_user_id
from bajeti.services import allocation, rollup

router = APIRouter(
    prefix="/budgets",
    tags=["budgets"],
)

@router.post("/", response_model=budget_models.BudgetResponse, status_code=status.HTTP_201_CREATED)
def create_budget(
    budget: budget_models.BudgetCreate,
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id)
):
    """
    Create a monthly budget with a needs/wants/savings split and/or category allocations.
    """
    try:
        return crud_budget.create_db_budget(db=db, user_id=user_id, budget_data=budget)
    except DuplicateBudgetError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    except BudgetAllocationWriteError as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"message": str(e), "budget_id": e.budget_id},
        )
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

@router.get("/", response_model=List[budget_models.BudgetResponse])
def read_budgets(
    year: Optional[int] = None,
    skip: int = 0,
    limit: int = 100,
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id)
):
    return crud_budget.read_db_budgets(db=db, user_id=user_id, year=year, skip=skip, limit=limit)

@router.post("/allocation/preview", response_model=budget_models.AllocationAmounts)
def preview_allocation(request: budget_models.AllocationPreviewRequest):
    """
    Split an income into needs/wants/savings amounts without saving anything.
    """
    try:
        return allocation.allocate(request.income_amount, request.split, request.currency)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

@router.post("/allocation/rebalance", response_model=budget_models.AllocationSplit)
def rebalance_allocation(request: budget_models.RebalanceRequest):
    """
    Move one slider and spread the rest equally over the other two.
    """
    try:
        return allocation.rebalance_split(request.split, request.changed, request.value)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

@router.get("/rollup", response_model=budget_models.MonthlyRollup)
def read_rollup(
    month: int,
    year: int,
    currency: str,
    strict: bool = False,
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id)
):
    """
    Budget vs actual spending for one month.
    """
    try:
        return rollup.rollup(crud_budget.SqlBudgetStore(db), user_id, month, year, currency, strict=strict)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

@router.get("/{budget_id}", response_model=budget_models.BudgetResponse)
def read_budget(
    budget_id: int,
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id)
):
    """
    Retrieve a budget with its allocation and category rows.
    """
    db_budget = crud_budget.read_db_budget(db=db, budget_id=budget_id, user_id=user_id)
    if db_budget is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Budget not found")
    return db_budget
