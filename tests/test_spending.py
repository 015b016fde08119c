from datetime import date
from decimal import Decimal

import pytest

from bajeti.db.core import TransactionKind
from bajeti.errors import ValidationError
from bajeti.models.category import CategoryResponse
from bajeti.models.transaction import TransactionResponse
from bajeti.services.spending import UNCATEGORIZED, Period, aggregate

MARCH = Period(month=3, year=2024)
CATEGORIES = [
    CategoryResponse(id=1, name="Groceries", is_system=True),
    CategoryResponse(id=2, name="Transport", is_system=True),
    CategoryResponse(id=3, name="Airtime", user_id=7),
]


def txn(id, amount, category_id=None, day=date(2024, 3, 5), kind=TransactionKind.EXPENSE):
    return TransactionResponse(
        id=id, user_id=7, category_id=category_id, kind=kind,
        amount=Decimal(str(amount)), transaction_date=day,
    )


def test_groups_by_category_and_keeps_uncategorized():
    spend = aggregate([txn(1, 100, 1), txn(2, 50, 1), txn(3, 25)], CATEGORIES, MARCH, "TZS")

    assert [(s.category_id, s.category_name, s.total_spent, s.transaction_count) for s in spend] == [
        (1, "Groceries", Decimal("150.00"), 2),
        (None, UNCATEGORIZED, Decimal("25.00"), 1),
    ]
    assert spend[0].percentage_of_total == Decimal("85.71")
    assert spend[1].percentage_of_total == Decimal("14.29")
    assert spend[0].currency == "TZS"


def test_no_transactions_gives_empty_list():
    assert aggregate([], CATEGORIES, MARCH, "TZS") == []


def test_percentages_are_zero_when_nothing_was_spent():
    spend = aggregate([txn(1, 0, 1), txn(2, 0, 2)], CATEGORIES, MARCH, "TZS")

    assert [s.percentage_of_total for s in spend] == [Decimal("0.00"), Decimal("0.00")]


def test_ties_are_ordered_by_name():
    spend = aggregate([txn(1, 40, 2), txn(2, 40, 3), txn(3, 40, 1)], CATEGORIES, MARCH, "TZS")

    assert [s.category_name for s in spend] == ["Airtime", "Groceries", "Transport"]


def test_unknown_category_joins_uncategorized():
    spend = aggregate([txn(1, 10, 99), txn(2, 5)], CATEGORIES, MARCH, "TZS")

    assert len(spend) == 1
    assert spend[0].category_id is None
    assert spend[0].total_spent == Decimal("15.00")
    assert spend[0].transaction_count == 2


def test_only_expenses_inside_the_period_count():
    transactions = [
        txn(1, 100, 1),
        txn(2, 999, 1, day=date(2024, 2, 29)),
        txn(3, 999, 1, day=date(2024, 4, 1)),
        txn(4, 5000, None, kind=TransactionKind.INCOME),
    ]

    spend = aggregate(transactions, CATEGORIES, MARCH, "TZS")

    assert [(s.category_id, s.total_spent) for s in spend] == [(1, Decimal("100.00"))]


def test_income_included_on_request():
    spend = aggregate([txn(1, 100, 1), txn(2, 5000, kind=TransactionKind.INCOME)], CATEGORIES, MARCH, "TZS",
                      include_income=True)

    assert spend[0].category_name == UNCATEGORIZED
    assert spend[0].total_spent == Decimal("5000.00")


def test_first_and_last_dates_are_tracked():
    spend = aggregate([txn(1, 10, 1, day=date(2024, 3, 20)), txn(2, 10, 1, day=date(2024, 3, 2))],
                      CATEGORIES, MARCH, "TZS")

    assert spend[0].first_transaction_date == date(2024, 3, 2)
    assert spend[0].last_transaction_date == date(2024, 3, 20)


@pytest.mark.parametrize("month,year,field", [(0, 2024, "month"), (13, 2024, "month"), (True, 2024, "month"),
                                              (3, 1969, "year"), (3, 2101, "year")])
def test_period_rejects_bad_month_or_year(month, year, field):
    with pytest.raises(ValidationError) as exc:
        Period(month=month, year=year)
    assert exc.value.field == field


def test_period_bounds():
    feb = Period(month=2, year=2024)

    assert feb.start == date(2024, 2, 1)
    assert feb.end == date(2024, 2, 29)
    assert feb.days == 29
    assert Period(month=1, year=2024).previous() == Period(month=12, year=2023)
