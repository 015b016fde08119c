from sqlalchemy.orm import Session, joinedload
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy import desc
from typing import Optional, List
from datetime import datetime, date

from bajeti.db.core import (
    BudgetDB, BudgetCategoryDB, BudgetAllocationDB, UserDB
)
from bajeti.errors import NotFoundError, DuplicateBudgetError, BudgetAllocationWriteError
from bajeti.models.budget import AllocationAmounts, BudgetCreate, BudgetCategoryResponse, BudgetSummary
from bajeti.models.category import CategoryResponse
from bajeti.models.transaction import TransactionResponse
from bajeti.crud.crud_category import require_category, read_db_categories
from bajeti.crud.crud_transaction import read_db_transactions
from bajeti.services.allocation import allocate, validate_split
from bajeti.services.money import format_money
from bajeti.services.spending import Period
from bajeti.logging_config import get_logger

logger = get_logger(__name__)


# ===== DATABASE OPERATIONS =====

def create_db_budget(db: Session, user_id: int, budget_data: BudgetCreate) -> BudgetDB:
    """
    Create a monthly budget, then its allocations.

    The budget row is committed first so its id exists before the allocation
    rows reference it. If the second write fails the budget stays in place and
    ``BudgetAllocationWriteError`` reports its id.
    """

    period = Period(month=budget_data.month, year=budget_data.year)

    user = db.query(UserDB).filter(UserDB.id == user_id).first()
    if not user:
        raise NotFoundError(f"User with id {user_id} not found")

    amounts = None
    if budget_data.split is not None:
        amounts = allocate(budget_data.income_amount, budget_data.split, budget_data.currency)

    for category_data in budget_data.categories:
        if category_data.category_id is not None:
            require_category(db, category_data.category_id, user_id)

    if read_db_budget_for_period(db, user_id, period.month, period.year):
        raise DuplicateBudgetError(f"A budget for {period.month}/{period.year} already exists")

    db_budget = BudgetDB(
        user_id=user_id,
        month=period.month,
        year=period.year,
        currency=budget_data.currency,
        created_at=datetime.utcnow()
    )

    try:
        db.add(db_budget)
        db.commit()
        db.refresh(db_budget)
    except IntegrityError:
        db.rollback()
        raise DuplicateBudgetError(f"A budget for {period.month}/{period.year} already exists")

    budget_id = db_budget.id
    income = format_money(budget_data.income_amount, budget_data.currency) if amounts else "no split"
    logger.info(f"Created budget {budget_id} for user {user_id} ({period.month}/{period.year}, {income})")

    try:
        add_budget_allocations(db, budget_id, budget_data, amounts)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Allocations for budget {budget_id} failed: {e}")
        raise BudgetAllocationWriteError(budget_id, str(e)) from e

    db.refresh(db_budget)
    return db_budget


def add_budget_allocations(db: Session, budget_id: int, budget_data: BudgetCreate,
                           amounts: Optional[AllocationAmounts]) -> None:
    """
    Stage the split and the category rows of a stored budget.

    The split lives only in ``budget_allocations``; ``budget_categories`` holds
    the per-category amounts, which are what the rollup adds up.
    """

    if amounts is not None:
        percentages = validate_split(budget_data.split)
        db.add(BudgetAllocationDB(
            budget_id=budget_id,
            income_amount=budget_data.income_amount,
            needs_percentage=round(percentages["needs"], 2),
            wants_percentage=round(percentages["wants"], 2),
            savings_percentage=round(percentages["savings"], 2),
            needs_amount=amounts.needs_amount,
            wants_amount=amounts.wants_amount,
            savings_amount=amounts.savings_amount,
            created_at=datetime.utcnow()
        ))

    for category_data in budget_data.categories:
        db.add(BudgetCategoryDB(
            budget_id=budget_id,
            category_id=category_data.category_id,
            amount=category_data.amount,
            allocation_type=category_data.allocation_type,
            created_at=datetime.utcnow()
        ))
    db.flush()


def read_db_budget(db: Session, budget_id: int, user_id: Optional[int] = None) -> Optional[BudgetDB]:
    """Read a budget by ID with its allocations"""

    query = db.query(BudgetDB).filter(BudgetDB.id == budget_id)

    if user_id:
        query = query.filter(BudgetDB.user_id == user_id)

    query = query.options(
        joinedload(BudgetDB.budget_categories).joinedload(BudgetCategoryDB.category),
        joinedload(BudgetDB.allocation)
    )
    return query.first()


def read_db_budget_for_period(db: Session, user_id: int, month: int, year: int) -> Optional[BudgetDB]:
    return db.query(BudgetDB).filter(
        BudgetDB.user_id == user_id,
        BudgetDB.month == month,
        BudgetDB.year == year
    ).first()


def read_db_budgets(db: Session, user_id: int, year: Optional[int] = None,
                    skip: int = 0, limit: int = 100) -> List[BudgetDB]:
    """Budgets of a user, most recent month first"""

    query = db.query(BudgetDB).filter(BudgetDB.user_id == user_id)

    if year:
        query = query.filter(BudgetDB.year == year)

    return query.order_by(desc(BudgetDB.year), desc(BudgetDB.month)).offset(skip).limit(limit).all()


# ===== ROLLUP STORE =====

class SqlBudgetStore:
    """Budget data for the monthly rollup, read through a Session"""

    def __init__(self, db: Session):
        self.db = db

    def get_budget(self, user_id: int, month: int, year: int) -> Optional[BudgetSummary]:
        budget = read_db_budget_for_period(self.db, user_id, month, year)
        return BudgetSummary.model_validate(budget) if budget else None

    def list_budget_categories(self, budget_id: int) -> List[BudgetCategoryResponse]:
        rows = self.db.query(BudgetCategoryDB).filter(
            BudgetCategoryDB.budget_id == budget_id
        ).order_by(BudgetCategoryDB.id).all()
        return [BudgetCategoryResponse.model_validate(row) for row in rows]

    def list_transactions(self, user_id: int, start: date, end: date) -> List[TransactionResponse]:
        rows = read_db_transactions(self.db, user_id, start_date=start, end_date=end)
        return [TransactionResponse.model_validate(row) for row in rows]

    def list_categories(self, user_id: int) -> List[CategoryResponse]:
        return [CategoryResponse.model_validate(row) for row in read_db_categories(self.db, user_id)]
