"""
Monthly budget-vs-actual rollup.

Pairs a month's budget allocations with the month's aggregated spending. Data
comes from a ``BudgetStore`` handed in by the caller; nothing here opens a
session or keeps state between calls.
"""
from datetime import date
from decimal import Decimal
from typing import Iterable, List, Optional, Protocol

from bajeti.errors import NotFoundError, ValidationError
from bajeti.logging_config import get_logger
from bajeti.models.budget import BudgetCategoryResponse, BudgetSummary, CategorySpend, MonthlyRollup, RollupLine
from bajeti.models.category import CategoryResponse
from bajeti.models.transaction import TransactionResponse
from bajeti.services.money import normalize_currency, quantize
from bajeti.services.spending import Period, aggregate, percentage, total_spent

logger = get_logger(__name__)

ZERO = Decimal("0")


class BudgetStore(Protocol):
    """What the rollup needs from persistence."""

    def get_budget(self, user_id: int, month: int, year: int) -> Optional[BudgetSummary]: ...

    def list_budget_categories(self, budget_id: int) -> List[BudgetCategoryResponse]: ...

    def list_transactions(self, user_id: int, start: date, end: date) -> List[TransactionResponse]: ...

    def list_categories(self, user_id: int) -> List[CategoryResponse]: ...


def days_left_in(period: Period, today: date) -> int:
    """
    Days remaining in the period after today: 0 on the last day and for past
    months, the whole month for months that have not started.
    """
    if today > period.end:
        return 0
    if today < period.start:
        return period.days
    return (period.end - today).days


def _line_name(row: BudgetCategoryResponse, names: dict) -> str:
    if row.category_id is not None and row.category_id in names:
        return names[row.category_id]
    if row.allocation_type is not None:
        return row.allocation_type.value.capitalize()
    return "Unassigned"


def build_rollup(budget: BudgetSummary,
                 budget_categories: Iterable[BudgetCategoryResponse],
                 transactions: Iterable[TransactionResponse],
                 categories: Iterable[CategoryResponse],
                 currency: str,
                 today: Optional[date] = None) -> MonthlyRollup:
    code = normalize_currency(currency)
    if budget.currency != code:
        raise ValidationError(f"Budget {budget.id} is kept in {budget.currency}, not {code}",
                              field="currency", constraint="match")

    period = Period(month=budget.month, year=budget.year)
    categories = list(categories)
    names = {c.id: c.name for c in categories}

    spend = aggregate(transactions, categories, period, code)
    spend_by_category = {s.category_id: s for s in spend if s.category_id is not None}

    allocations = []
    allocated_ids = set()
    for row in budget_categories:
        # Rows without a category (plain needs/wants/savings amounts) never match spend
        matched: Optional[CategorySpend] = spend_by_category.get(row.category_id) if row.category_id is not None else None
        spent = matched.total_spent if matched else quantize(ZERO, code)
        allocated = quantize(row.amount, code)
        if row.category_id is not None:
            allocated_ids.add(row.category_id)
        allocations.append(RollupLine(
            budget_category_id=row.id,
            category_id=row.category_id,
            category_name=_line_name(row, names),
            allocation_type=row.allocation_type,
            allocated=allocated,
            spent=spent,
            remaining=allocated - spent,
            percentage_used=percentage(spent, allocated),
        ))

    unbudgeted = [
        RollupLine(
            category_id=s.category_id,
            category_name=s.category_name,
            allocated=quantize(ZERO, code),
            spent=s.total_spent,
            remaining=-s.total_spent,
            percentage_used=Decimal("0.00"),
        )
        for s in spend
        if s.category_id is None or s.category_id not in allocated_ids
    ]

    total_allocated = quantize(sum((line.allocated for line in allocations), ZERO), code)
    spent_total = quantize(total_spent(spend), code)
    remaining = total_allocated - spent_total

    days_left = days_left_in(period, today or date.today())
    daily_budget = quantize(remaining / days_left, code) if days_left else quantize(ZERO, code)

    return MonthlyRollup(
        month=budget.month,
        year=budget.year,
        currency=code,
        budget=budget,
        allocations=allocations,
        unbudgeted=unbudgeted,
        spend_by_category=spend,
        total_allocated=total_allocated,
        total_spent=spent_total,
        remaining=remaining,
        percentage_used=percentage(spent_total, total_allocated),
        days_left=days_left,
        daily_budget=daily_budget,
    )


def empty_rollup(period: Period, currency: str) -> MonthlyRollup:
    """The result for a month the user has not budgeted yet."""
    zero = quantize(ZERO, currency)
    return MonthlyRollup(
        month=period.month,
        year=period.year,
        currency=currency,
        budget=None,
        total_allocated=zero,
        total_spent=zero,
        remaining=zero,
        percentage_used=Decimal("0.00"),
        days_left=0,
        daily_budget=zero,
    )


def rollup(store: BudgetStore,
           user_id: int,
           month: int,
           year: int,
           currency: str,
           strict: bool = False,
           today: Optional[date] = None) -> MonthlyRollup:
    """
    Budget-vs-actual summary for one user and month.

    A month without a budget is a normal state: the result has ``budget=None``
    and zero totals. With ``strict=True`` it raises ``NotFoundError`` instead.
    A malformed month/year or currency raises ``ValidationError`` either way.
    """
    period = Period(month=month, year=year)
    code = normalize_currency(currency)

    budget = store.get_budget(user_id, period.month, period.year)
    if budget is None:
        if strict:
            raise NotFoundError(f"No budget for user {user_id} in {period.month}/{period.year}")
        logger.info(f"No budget for user {user_id} in {period.month}/{period.year}; returning empty rollup")
        return empty_rollup(period, code)

    return build_rollup(
        budget,
        store.list_budget_categories(budget.id),
        store.list_transactions(user_id, period.start, period.end),
        store.list_categories(user_id),
        code,
        today=today,
    )
