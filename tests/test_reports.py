from datetime import date
from decimal import Decimal

import pytest

from bajeti.db.core import TransactionKind
from bajeti.errors import ValidationError
from bajeti.models.transaction import TransactionResponse
from bajeti.services.reports import monthly_trends, summarize_month
from bajeti.services.spending import Period


def txn(id, kind, amount, day):
    return TransactionResponse(id=id, user_id=1, kind=kind, amount=Decimal(str(amount)), transaction_date=day)


TRANSACTIONS = [
    txn(1, TransactionKind.INCOME, 1000, date(2024, 3, 1)),
    txn(2, TransactionKind.EXPENSE, 300, date(2024, 3, 4)),
    txn(3, TransactionKind.EXPENSE, 100, date(2024, 3, 28)),
    txn(4, TransactionKind.EXPENSE, 200, date(2024, 2, 15)),
    txn(5, TransactionKind.INCOME, 800, date(2024, 1, 1)),
]


def test_summarize_month():
    summary = summarize_month(TRANSACTIONS, Period(month=3, year=2024), "TZS")

    assert summary.total_income == Decimal("1000.00")
    assert summary.total_expenses == Decimal("400.00")
    assert summary.balance == Decimal("600.00")
    assert summary.savings_rate == Decimal("60.00")
    assert summary.monthly_change == Decimal("100.00")
    assert summary.transaction_count == 3


def test_summary_of_empty_month_is_zero():
    summary = summarize_month([], Period(month=3, year=2024), "TZS")

    assert summary.balance == Decimal("0")
    assert summary.savings_rate == Decimal("0")
    assert summary.monthly_change == Decimal("0")


def test_monthly_trends_run_oldest_first():
    points = monthly_trends(TRANSACTIONS, Period(month=3, year=2024), 4, "TZS")

    assert [(p.month, p.year) for p in points] == [(12, 2023), (1, 2024), (2, 2024), (3, 2024)]
    assert [p.net for p in points] == [Decimal("0"), Decimal("800"), Decimal("-200"), Decimal("600")]


@pytest.mark.parametrize("months", [0, 61])
def test_monthly_trends_window_is_bounded(months):
    with pytest.raises(ValidationError):
        monthly_trends(TRANSACTIONS, Period(month=3, year=2024), months, "TZS")
