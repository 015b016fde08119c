from datetime import date
from decimal import Decimal

import pytest

from bajeti.db.core import AllocationType, TransactionKind
from bajeti.errors import NotFoundError, ValidationError
from bajeti.models.budget import BudgetCategoryResponse, BudgetSummary
from bajeti.models.category import CategoryResponse
from bajeti.models.transaction import TransactionResponse
from bajeti.services.rollup import days_left_in, rollup
from bajeti.services.spending import Period


class FakeStore:
    """In-memory stand-in for the database"""

    def __init__(self, budget=None, rows=(), transactions=(), categories=()):
        self.budget = budget
        self.rows = list(rows)
        self.transactions = list(transactions)
        self.categories = list(categories)

    def get_budget(self, user_id, month, year):
        b = self.budget
        if b and (b.user_id, b.month, b.year) == (user_id, month, year):
            return b
        return None

    def list_budget_categories(self, budget_id):
        return [r for r in self.rows if r.budget_id == budget_id]

    def list_transactions(self, user_id, start, end):
        return [t for t in self.transactions if t.user_id == user_id and start <= t.transaction_date <= end]

    def list_categories(self, user_id):
        return self.categories


BUDGET = BudgetSummary(id=10, user_id=1, month=3, year=2024, currency="TZS")
CATEGORIES = [CategoryResponse(id=1, name="Groceries"), CategoryResponse(id=2, name="Transport")]


def row(id, amount, category_id=None, allocation_type=None):
    return BudgetCategoryResponse(id=id, budget_id=10, category_id=category_id,
                                  amount=Decimal(str(amount)), allocation_type=allocation_type)


def expense(id, amount, category_id=None, day=date(2024, 3, 12)):
    return TransactionResponse(id=id, user_id=1, category_id=category_id, kind=TransactionKind.EXPENSE,
                               amount=Decimal(str(amount)), transaction_date=day)


def test_month_without_budget_is_all_zero():
    result = rollup(FakeStore(), user_id=1, month=3, year=2024, currency="TZS")

    assert result.budget is None
    assert result.total_allocated == Decimal("0")
    assert result.total_spent == Decimal("0")
    assert result.remaining == Decimal("0")
    assert result.allocations == []


def test_strict_mode_raises_when_no_budget():
    with pytest.raises(NotFoundError):
        rollup(FakeStore(), user_id=1, month=3, year=2024, currency="TZS", strict=True)


def test_overspend_is_negative_not_clamped():
    store = FakeStore(BUDGET, [row(1, 500, category_id=1)], [expense(1, 400, 1), expense(2, 250, 1)], CATEGORIES)

    result = rollup(store, user_id=1, month=3, year=2024, currency="TZS", today=date(2024, 3, 12))

    line = result.allocations[0]
    assert line.category_name == "Groceries"
    assert line.spent == Decimal("650.00")
    assert line.remaining == Decimal("-150.00")
    assert line.percentage_used == Decimal("130.00")
    assert result.remaining == Decimal("-150.00")


def test_unmatched_spend_shows_as_unbudgeted():
    store = FakeStore(
        BUDGET,
        [row(1, 300, category_id=1), row(2, 100, allocation_type=AllocationType.WANTS)],
        [expense(1, 120, 1), expense(2, 80, 2), expense(3, 20)],
        CATEGORIES,
    )

    result = rollup(store, user_id=1, month=3, year=2024, currency="TZS", today=date(2024, 3, 1))

    assert [(l.category_name, l.spent) for l in result.allocations] == [
        ("Groceries", Decimal("120.00")),
        ("Wants", Decimal("0.00")),
    ]
    assert [(l.category_id, l.category_name, l.remaining) for l in result.unbudgeted] == [
        (2, "Transport", Decimal("-80.00")),
        (None, "Uncategorized", Decimal("-20.00")),
    ]
    assert result.total_allocated == Decimal("400.00")
    assert result.total_spent == Decimal("220.00")
    assert result.remaining == Decimal("180.00")


def test_daily_budget_spreads_remaining_over_days_left():
    store = FakeStore(BUDGET, [row(1, 1000, category_id=1)], [expense(1, 340, 1)], CATEGORIES)

    result = rollup(store, user_id=1, month=3, year=2024, currency="TZS", today=date(2024, 3, 10))

    assert result.days_left == 21
    assert result.daily_budget == Decimal("31.43")


def test_spend_outside_the_month_is_ignored():
    store = FakeStore(BUDGET, [row(1, 500, category_id=1)], [expense(1, 900, 1, day=date(2024, 4, 2))], CATEGORIES)

    result = rollup(store, user_id=1, month=3, year=2024, currency="TZS")

    assert result.total_spent == Decimal("0")


def test_malformed_period_fails_even_without_budget():
    with pytest.raises(ValidationError):
        rollup(FakeStore(), user_id=1, month=13, year=2024, currency="TZS")


def test_currency_must_match_budget():
    store = FakeStore(BUDGET, [row(1, 500, category_id=1)], [], CATEGORIES)

    with pytest.raises(ValidationError) as exc:
        rollup(store, user_id=1, month=3, year=2024, currency="KES")
    assert exc.value.field == "currency"


def test_days_left_in():
    march = Period(month=3, year=2024)

    assert days_left_in(march, date(2024, 3, 30)) == 1
    assert days_left_in(march, date(2024, 3, 31)) == 0
    assert days_left_in(march, date(2024, 4, 1)) == 0
    assert days_left_in(march, date(2024, 2, 1)) == 31
